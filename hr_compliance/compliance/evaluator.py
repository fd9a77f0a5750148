"""Compliance status evaluation.

Pure functions mapping a record's relevant date and a company threshold
(in days) to a status tag. Nothing here reads the database or caches a
result; callers evaluate again every time they display a row.

Rules, for a relevant date ``d``, threshold ``t`` and reference day ``r``:

    d is None               → missing        (not-scheduled)
    r > d                   → expired        (overdue)
    t > 0 and (d - r) <= t  → expiring-soon  (due-soon)
    otherwise               → active         (scheduled)

A threshold of 0 switches the warning window off completely, including on
the relevant day itself.

All comparisons are at day granularity. Aware datetimes are converted to
UTC before the time of day is dropped; naive values are taken as UTC.
"""

from __future__ import annotations

from datetime import date, datetime, timezone
from typing import Optional, Union

from hr_compliance.common.constants import (
    BadgeColour,
    ComplianceStatus,
    ScheduleStatus,
    StatusFlavour,
)

DateLike = Union[date, datetime, str, None]
Status = Union[ComplianceStatus, ScheduleStatus]

_SCHEDULE_EQUIVALENT: dict[ComplianceStatus, ScheduleStatus] = {
    ComplianceStatus.missing: ScheduleStatus.not_scheduled,
    ComplianceStatus.expired: ScheduleStatus.overdue,
    ComplianceStatus.expiring_soon: ScheduleStatus.due_soon,
    ComplianceStatus.active: ScheduleStatus.scheduled,
}

_BADGE_COLOURS: dict[Status, BadgeColour] = {
    ComplianceStatus.missing: BadgeColour.gray,
    ComplianceStatus.expired: BadgeColour.red,
    ComplianceStatus.expiring_soon: BadgeColour.amber,
    ComplianceStatus.active: BadgeColour.green,
    ScheduleStatus.not_scheduled: BadgeColour.gray,
    ScheduleStatus.overdue: BadgeColour.red,
    ScheduleStatus.due_soon: BadgeColour.amber,
    ScheduleStatus.scheduled: BadgeColour.green,
}

_LABELS: dict[Status, str] = {
    ComplianceStatus.missing: "Missing",
    ComplianceStatus.expired: "Expired",
    ComplianceStatus.expiring_soon: "Expiring Soon",
    ComplianceStatus.active: "Active",
    ScheduleStatus.not_scheduled: "Not Scheduled",
    ScheduleStatus.overdue: "Overdue",
    ScheduleStatus.due_soon: "Due Soon",
    ScheduleStatus.scheduled: "Scheduled",
}

# Most urgent first; used for "status" sorting in list views.
SEVERITY: dict[Status, int] = {
    ComplianceStatus.missing: 0,
    ComplianceStatus.expired: 1,
    ComplianceStatus.expiring_soon: 2,
    ComplianceStatus.active: 3,
    ScheduleStatus.not_scheduled: 0,
    ScheduleStatus.overdue: 1,
    ScheduleStatus.due_soon: 2,
    ScheduleStatus.scheduled: 3,
}


# ── Day normalisation ───────────────────────────────────────────────

def today() -> date:
    """Current calendar day in UTC."""
    return datetime.now(timezone.utc).date()


def to_day(value: DateLike) -> Optional[date]:
    """Reduce a date, datetime or ISO-8601 string to a calendar day.

    ``None`` and ``""`` give ``None``. A string that is not ISO-8601
    raises ``ValueError``; any other type raises ``TypeError``.
    """
    if value is None:
        return None
    if isinstance(value, str):
        text = value.strip()
        if not text:
            return None
        if text.endswith("Z"):
            text = text[:-1] + "+00:00"
        if len(text) == 10:
            return date.fromisoformat(text)
        value = datetime.fromisoformat(text)
    if isinstance(value, datetime):
        if value.tzinfo is not None:
            value = value.astimezone(timezone.utc)
        return value.date()
    if not isinstance(value, date):
        raise TypeError(f"Expected a date, got {type(value).__name__}")
    return value


def days_between(reference: date, relevant: date) -> int:
    """Signed whole days from *reference* to *relevant* (negative = past)."""
    return (relevant - reference).days


# ── Evaluation ──────────────────────────────────────────────────────

def evaluate(
    relevant_date: DateLike,
    threshold_days: int,
    reference_date: DateLike = None,
) -> ComplianceStatus:
    """Classify one expiry-style record.

    ``reference_date`` defaults to :func:`today`.
    """
    relevant = to_day(relevant_date)
    if relevant is None:
        return ComplianceStatus.missing

    reference = to_day(reference_date) or today()
    diff_days = days_between(reference, relevant)

    if reference > relevant:
        return ComplianceStatus.expired
    if threshold_days > 0 and diff_days <= threshold_days:
        return ComplianceStatus.expiring_soon
    return ComplianceStatus.active


def evaluate_schedule(
    relevant_date: DateLike,
    threshold_days: int,
    reference_date: DateLike = None,
) -> ScheduleStatus:
    """Same rules as :func:`evaluate`, reported as a scheduling status."""
    return _SCHEDULE_EQUIVALENT[evaluate(relevant_date, threshold_days, reference_date)]


def evaluate_flavour(
    flavour: StatusFlavour,
    relevant_date: DateLike,
    threshold_days: int,
    reference_date: DateLike = None,
) -> Status:
    if flavour == StatusFlavour.schedule:
        return evaluate_schedule(relevant_date, threshold_days, reference_date)
    return evaluate(relevant_date, threshold_days, reference_date)


# ── Presentation helpers ────────────────────────────────────────────

def needs_attention(status: Status) -> bool:
    """Everything except active/scheduled needs someone to act."""
    return status not in (ComplianceStatus.active, ScheduleStatus.scheduled)


def badge_colour(status: Status) -> BadgeColour:
    return _BADGE_COLOURS[status]


def status_label(status: Status) -> str:
    return _LABELS[status]
