"""Compliance Pydantic v2 schemas — request / response validation.

Naming conventions:
  - *In      → fields shared by create and renew bodies
  - *Create  → create body (adds ``employee_id``)
  - *Update  → renew / reschedule body
  - *Out / *Row / *Response → response bodies
"""

from __future__ import annotations

import uuid
from datetime import date, datetime
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field, model_validator

from hr_compliance.common.constants import RowAction
from hr_compliance.common.pagination import PaginationMeta


# ═════════════════════════════════════════════════════════════════════
# Request bodies
# ═════════════════════════════════════════════════════════════════════


class RecordWriteBase(BaseModel):
    """Every write must attach the supporting document that was uploaded."""

    document_url: str = Field(..., min_length=1, max_length=500)
    updated_by: Optional[uuid.UUID] = None


class PassportIn(RecordWriteBase):
    passport_number: str = Field(..., min_length=1, max_length=50)
    nationality: Optional[str] = Field(None, max_length=100)
    issue_date: Optional[date] = None
    expiry_date: date


class DbsIn(RecordWriteBase):
    disclosure_number: str = Field(..., min_length=1, max_length=50)
    date_of_issue: date
    expiry_date: date

    @model_validator(mode="after")
    def _expiry_after_issue(self) -> "DbsIn":
        if self.expiry_date <= self.date_of_issue:
            raise ValueError("expiry_date must be after date_of_issue")
        return self


class ImmigrationIn(RecordWriteBase):
    next_check_date: date
    visa_type: Optional[str] = Field(None, max_length=100)
    reference_number: Optional[str] = Field(None, max_length=100)
    notes: Optional[str] = None


class RightToWorkIn(RecordWriteBase):
    expiry_date: date
    share_code: Optional[str] = Field(None, max_length=20)
    next_check_date: Optional[date] = None


class SpotCheckIn(RecordWriteBase):
    scheduled_date: date
    note: Optional[str] = None


class PassportCreate(PassportIn):
    employee_id: uuid.UUID


class DbsCreate(DbsIn):
    employee_id: uuid.UUID


class ImmigrationCreate(ImmigrationIn):
    employee_id: uuid.UUID


class RightToWorkCreate(RightToWorkIn):
    employee_id: uuid.UUID


class SpotCheckCreate(SpotCheckIn):
    employee_id: uuid.UUID


PassportUpdate = PassportIn
DbsUpdate = DbsIn
ImmigrationUpdate = ImmigrationIn
RightToWorkUpdate = RightToWorkIn
SpotCheckUpdate = SpotCheckIn


# ═════════════════════════════════════════════════════════════════════
# Responses
# ═════════════════════════════════════════════════════════════════════


class ComplianceRecordOut(BaseModel):
    """A stored record with its status evaluated at response time."""

    id: uuid.UUID
    category: str
    employee_id: uuid.UUID
    company_id: uuid.UUID
    relevant_date: Optional[date] = None
    details: dict[str, Any] = Field(default_factory=dict)
    document_url: Optional[str] = None
    status: str
    threshold_days: int
    updated_by: Optional[uuid.UUID] = None
    updated_at: Optional[datetime] = None


class ComplianceRow(BaseModel):
    """One line of a compliance list screen (one per active employee)."""

    employee_id: uuid.UUID
    record_id: Optional[uuid.UUID] = None
    first_name: str
    last_name: str = ""
    email: str = ""
    relevant_date: Optional[date] = None
    details: dict[str, Any] = Field(default_factory=dict)
    status: str
    status_label: str
    badge: str
    needs_attention: bool
    action: RowAction
    profile_tab: str


class ComplianceListResponse(BaseModel):
    """``{"data": [...], "meta": {...}}`` plus the inputs the rows were evaluated with."""

    category: str
    threshold_days: int
    reference_date: date
    data: list[ComplianceRow]
    meta: PaginationMeta


class ScheduleStatusSummary(BaseModel):
    """Rows needing attention per category (missing, expired or expiring soon)."""

    company_id: uuid.UUID
    reference_date: date
    passport: int = 0
    dbs: int = 0
    immigration: int = 0
    right_to_work: int = 0
    spot_check: int = 0


class AuditEntryOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: uuid.UUID
    action: str
    title: Optional[str] = None
    actor_id: Optional[uuid.UUID] = None
    old_values: Optional[dict[str, Any]] = None
    new_values: Optional[dict[str, Any]] = None
    created_at: datetime
