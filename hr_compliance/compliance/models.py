"""Compliance record ORM models: one table per document category.

Every record carries a ``status`` column because upstream imports and older
clients write one. It is informational only; list screens always evaluate
status from the relevant date and the company's current threshold.
"""

from __future__ import annotations

import uuid
from datetime import date, datetime, timezone
from typing import Optional

import sqlalchemy as sa
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import Mapped, declared_attr, mapped_column, relationship

from hr_compliance.core_hr.models import Employee
from hr_compliance.database import Base


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class ComplianceRecordMixin:
    """Columns shared by every compliance record table."""

    id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True),
        primary_key=True,
        default=uuid.uuid4,
    )
    document_url: Mapped[Optional[str]] = mapped_column(sa.String(500))
    status: Mapped[Optional[str]] = mapped_column(sa.String(30))
    updated_by: Mapped[Optional[uuid.UUID]] = mapped_column(UUID(as_uuid=True))
    created_at: Mapped[datetime] = mapped_column(
        sa.DateTime(timezone=True), default=_utcnow,
    )
    updated_at: Mapped[datetime] = mapped_column(
        sa.DateTime(timezone=True), default=_utcnow, onupdate=_utcnow,
    )

    @declared_attr
    def employee_id(cls) -> Mapped[uuid.UUID]:
        return mapped_column(
            UUID(as_uuid=True),
            sa.ForeignKey("employees.id"),
            nullable=False,
            unique=True,
            index=True,
        )

    @declared_attr
    def company_id(cls) -> Mapped[uuid.UUID]:
        return mapped_column(
            UUID(as_uuid=True), sa.ForeignKey("companies.id"), nullable=False, index=True,
        )

    @declared_attr
    def employee(cls) -> Mapped[Employee]:
        return relationship(Employee)


class PassportRecord(ComplianceRecordMixin, Base):
    __tablename__ = "passport_records"

    passport_number: Mapped[Optional[str]] = mapped_column(sa.String(50))
    nationality: Mapped[Optional[str]] = mapped_column(sa.String(100))
    issue_date: Mapped[Optional[date]] = mapped_column(sa.Date)
    expiry_date: Mapped[Optional[date]] = mapped_column(sa.Date)


class DbsRecord(ComplianceRecordMixin, Base):
    __tablename__ = "dbs_records"

    disclosure_number: Mapped[Optional[str]] = mapped_column(sa.String(50))
    date_of_issue: Mapped[Optional[date]] = mapped_column(sa.Date)
    expiry_date: Mapped[Optional[date]] = mapped_column(sa.Date)


class ImmigrationRecord(ComplianceRecordMixin, Base):
    __tablename__ = "immigration_records"

    visa_type: Mapped[Optional[str]] = mapped_column(sa.String(100))
    reference_number: Mapped[Optional[str]] = mapped_column(sa.String(100))
    next_check_date: Mapped[Optional[date]] = mapped_column(sa.Date)
    notes: Mapped[Optional[str]] = mapped_column(sa.Text)


class RightToWorkRecord(ComplianceRecordMixin, Base):
    __tablename__ = "right_to_work_records"

    share_code: Mapped[Optional[str]] = mapped_column(sa.String(20))
    expiry_date: Mapped[Optional[date]] = mapped_column(sa.Date)
    next_check_date: Mapped[Optional[date]] = mapped_column(sa.Date)


class SpotCheckRecord(ComplianceRecordMixin, Base):
    __tablename__ = "spot_check_records"

    scheduled_date: Mapped[Optional[date]] = mapped_column(sa.Date)
    completion_date: Mapped[Optional[date]] = mapped_column(sa.Date)
    note: Mapped[Optional[str]] = mapped_column(sa.Text)
