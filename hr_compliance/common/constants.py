"""Enums and constants for HR Compliance."""

from __future__ import annotations

import enum


# ── Compliance categories ───────────────────────────────────────────

class ComplianceCategory(str, enum.Enum):
    passport = "passport"
    dbs = "dbs"
    immigration = "immigration"
    right_to_work = "right_to_work"
    spot_check = "spot_check"


class StatusFlavour(str, enum.Enum):
    """Whether a category tracks document expiry or a scheduled check."""

    expiry = "expiry"
    schedule = "schedule"


# ── Evaluated statuses ──────────────────────────────────────────────

class ComplianceStatus(str, enum.Enum):
    missing = "missing"
    expired = "expired"
    expiring_soon = "expiring-soon"
    active = "active"


class ScheduleStatus(str, enum.Enum):
    not_scheduled = "not-scheduled"
    overdue = "overdue"
    due_soon = "due-soon"
    scheduled = "scheduled"


class BadgeColour(str, enum.Enum):
    gray = "gray"
    red = "red"
    amber = "amber"
    green = "green"


# ── Row actions (list screens) ──────────────────────────────────────

class RowAction(str, enum.Enum):
    create = "create"
    update = "update"


# ── Misc constants ──────────────────────────────────────────────────

DATE_FORMAT = "%d/%m/%Y"          # UK format: 15/06/2025
TIMEZONE = "UTC"
MAX_PAGE_SIZE = 100
DEFAULT_PAGE_SIZE = 50
