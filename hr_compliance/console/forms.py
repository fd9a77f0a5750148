"""Renewal / reschedule dialog state for the console."""

from __future__ import annotations

import logging
import uuid
from datetime import date
from typing import Any, Optional

from hr_compliance.compliance.categories import CategorySpec, get_category
from hr_compliance.console.client import CategoryRef, ComplianceApiClient
from hr_compliance.console.views import ListRow

logger = logging.getLogger(__name__)


class FormIncompleteError(Exception):
    def __init__(self, missing: list[str]):
        self.missing = missing
        super().__init__(f"Missing required fields: {', '.join(missing)}")


class SubmitInProgressError(Exception):
    """A submit was attempted while the previous one had not finished."""


class RenewalForm:
    """Collects a new relevant date, category fields and a document.

    Submit stays disabled until the relevant date, the category's required
    fields and a document are all set. The document is never prefilled, so
    every renewal attaches a fresh upload.
    """

    def __init__(
        self,
        category: CategoryRef,
        record_id: uuid.UUID,
        values: Optional[dict[str, Any]] = None,
    ) -> None:
        self.spec: CategorySpec = get_category(category)
        self.record_id = record_id
        self.values: dict[str, Any] = dict(values or {})
        self.document_url: Optional[str] = None
        self.is_submitting = False

    @classmethod
    def from_row(cls, row: ListRow) -> "RenewalForm":
        if row.record.record_id is None:
            raise ValueError("Row has no record to renew; create one from the profile instead")
        values = dict(row.record.document_fields)
        values[get_category(row.category).relevant_field] = row.relevant_date
        return cls(row.category, row.record.record_id, values)

    def set(self, field: str, value: Any) -> None:
        self.values[field] = value

    def attach_document(self, url: str) -> None:
        self.document_url = url

    @property
    def missing_fields(self) -> list[str]:
        required = (self.spec.relevant_field, *self.spec.required_fields)
        missing = [field for field in required if self.values.get(field) in (None, "")]
        if not self.document_url:
            missing.append("document_url")
        return missing

    @property
    def can_submit(self) -> bool:
        return not self.is_submitting and not self.missing_fields

    def payload(self, updated_by: Optional[uuid.UUID] = None) -> dict[str, Any]:
        body: dict[str, Any] = {}
        for field, value in self.values.items():
            body[field] = value.isoformat() if isinstance(value, date) else value
        # Completion is cleared server side on reschedule.
        body.pop("completion_date", None)
        body["document_url"] = self.document_url
        if updated_by is not None:
            body["updated_by"] = str(updated_by)
        return body

    async def submit(
        self,
        client: ComplianceApiClient,
        updated_by: Optional[uuid.UUID] = None,
    ) -> dict[str, Any]:
        """Send the update. Errors from the API propagate as ``ConsoleRequestError``."""
        if self.is_submitting:
            raise SubmitInProgressError("Update already in progress")
        missing = self.missing_fields
        if missing:
            raise FormIncompleteError(missing)

        self.is_submitting = True
        try:
            result = await client.update_record(
                self.spec.category, self.record_id, self.payload(updated_by),
            )
        finally:
            self.is_submitting = False
        logger.info("%s submitted for record %s", self.spec.audit_title, self.record_id)
        return result
