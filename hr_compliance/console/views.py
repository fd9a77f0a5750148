"""Console list views, one per compliance category.

A view holds the raw records and the threshold it fetched. It evaluates
status only when rows are requested, so records and settings can arrive in
either order and a settings change shows up on the next call. The
``status`` field in server payloads is ignored.
"""

from __future__ import annotations

import asyncio
import logging
import uuid
from dataclasses import dataclass, field
from datetime import date
from typing import Any, Optional, Sequence

from hr_compliance.common.constants import BadgeColour, ComplianceCategory, RowAction
from hr_compliance.compliance.categories import CategorySpec, get_category
from hr_compliance.compliance.evaluator import (
    DateLike,
    Status,
    badge_colour,
    needs_attention,
    status_label,
    to_day,
)
from hr_compliance.compliance.ordering import filter_rows, sort_rows
from hr_compliance.console.client import CategoryRef, ComplianceApiClient

logger = logging.getLogger(__name__)


@dataclass
class ComplianceRecord:
    """One employee's entry for a category, as the console sees it."""

    subject_id: uuid.UUID
    record_id: Optional[uuid.UUID]
    relevant_date: Optional[date]
    first_name: str = "Unknown"
    last_name: str = ""
    email: str = ""
    document_fields: dict[str, Any] = field(default_factory=dict)

    @classmethod
    def from_payload(cls, raw: dict[str, Any]) -> "ComplianceRecord":
        record_id = raw.get("record_id")
        return cls(
            subject_id=uuid.UUID(str(raw["employee_id"])),
            record_id=uuid.UUID(str(record_id)) if record_id else None,
            relevant_date=to_day(raw.get("relevant_date")),
            first_name=raw.get("first_name") or "Unknown",
            last_name=raw.get("last_name") or "",
            email=raw.get("email") or "",
            document_fields=dict(raw.get("details") or {}),
        )


@dataclass(frozen=True)
class ListRow:
    record: ComplianceRecord
    category: ComplianceCategory
    status: Status
    action: RowAction
    profile_tab: str

    @property
    def first_name(self) -> str:
        return self.record.first_name

    @property
    def last_name(self) -> str:
        return self.record.last_name

    @property
    def email(self) -> str:
        return self.record.email

    @property
    def relevant_date(self) -> Optional[date]:
        return self.record.relevant_date

    @property
    def label(self) -> str:
        return status_label(self.status)

    @property
    def badge(self) -> BadgeColour:
        return badge_colour(self.status)

    @property
    def needs_attention(self) -> bool:
        return needs_attention(self.status)


class ComplianceListView:
    """List screen state for one category."""

    def __init__(self, client: ComplianceApiClient, category: CategoryRef) -> None:
        self.client = client
        self.spec: CategorySpec = get_category(category)
        self.threshold_days: int = self.spec.default_threshold
        self.records: list[ComplianceRecord] = []

    async def load(self, company_id: uuid.UUID) -> None:
        """Fetch settings and records concurrently. Failures leave defaults / an empty list."""
        threshold, raw_records = await asyncio.gather(
            self.client.fetch_threshold(company_id, self.spec.category),
            self.client.fetch_records(company_id, self.spec.category),
        )
        self.threshold_days = threshold
        try:
            self.records = [ComplianceRecord.from_payload(raw) for raw in raw_records]
        except (KeyError, ValueError, TypeError, AttributeError) as exc:
            logger.warning(
                "Malformed %s list for %s: %s", self.spec.slug, company_id, exc,
            )
            self.records = []

    def evaluate(self, record: ComplianceRecord, reference_date: DateLike = None) -> Status:
        return self.spec.evaluate(record.relevant_date, self.threshold_days, reference_date)

    def rows(
        self,
        reference_date: DateLike = None,
        *,
        statuses: Optional[Sequence[str]] = None,
        search: Optional[str] = None,
        sort: Optional[str] = None,
    ) -> list[ListRow]:
        """Evaluate every record now and return the filtered, sorted rows."""
        rows = [
            ListRow(
                record=record,
                category=self.spec.category,
                status=self.evaluate(record, reference_date),
                action=row_action(record),
                profile_tab=self.spec.profile_tab,
            )
            for record in self.records
        ]
        return sort_rows(filter_rows(rows, statuses=statuses, search=search), sort)


def row_action(record: ComplianceRecord) -> RowAction:
    """Missing records open the employee profile; existing ones the update dialog."""
    return RowAction.create if record.record_id is None else RowAction.update
