"""Schedule-check ORM model: per-company warning windows, in days."""

from __future__ import annotations

import uuid
from datetime import datetime
from typing import Optional

import sqlalchemy as sa
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import Mapped, mapped_column

from hr_compliance.database import Base

# NULL means "not configured": the category default applies.
THRESHOLD_FIELDS: tuple[str, ...] = (
    "passport_check_days",
    "visa_check_days",
    "dbs_check_days",
    "immigration_check_days",
    "rtw_check_days",
    "spot_check_days",
    "appraisal_check_days",
    "supervision_check_days",
    "disciplinary_check_days",
    "qa_check_days",
)

DURATION_FIELDS: tuple[str, ...] = (
    "spot_check_duration",
    "supervision_duration",
    "qa_check_duration",
)


class ScheduleCheck(Base):
    __tablename__ = "schedule_checks"

    id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True),
        primary_key=True,
        default=uuid.uuid4,
    )
    company_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), sa.ForeignKey("companies.id"), unique=True, nullable=False,
    )

    passport_check_days: Mapped[Optional[int]] = mapped_column(sa.Integer)
    visa_check_days: Mapped[Optional[int]] = mapped_column(sa.Integer)
    dbs_check_days: Mapped[Optional[int]] = mapped_column(sa.Integer)
    immigration_check_days: Mapped[Optional[int]] = mapped_column(sa.Integer)
    rtw_check_days: Mapped[Optional[int]] = mapped_column(sa.Integer)
    spot_check_days: Mapped[Optional[int]] = mapped_column(sa.Integer)
    appraisal_check_days: Mapped[Optional[int]] = mapped_column(sa.Integer)
    supervision_check_days: Mapped[Optional[int]] = mapped_column(sa.Integer)
    disciplinary_check_days: Mapped[Optional[int]] = mapped_column(sa.Integer)
    qa_check_days: Mapped[Optional[int]] = mapped_column(sa.Integer)

    spot_check_duration: Mapped[Optional[int]] = mapped_column(sa.Integer)
    supervision_duration: Mapped[Optional[int]] = mapped_column(sa.Integer)
    qa_check_duration: Mapped[Optional[int]] = mapped_column(sa.Integer)

    created_at: Mapped[datetime] = mapped_column(
        sa.DateTime(timezone=True), server_default=sa.func.now(),
    )
    updated_at: Mapped[datetime] = mapped_column(
        sa.DateTime(timezone=True), server_default=sa.func.now(), onupdate=sa.func.now(),
    )

    __table_args__ = tuple(
        sa.CheckConstraint(f"{name} >= 0", name=f"ck_schedule_checks_{name}_non_negative")
        for name in THRESHOLD_FIELDS + DURATION_FIELDS
    )

    def __repr__(self) -> str:
        return f"<ScheduleCheck company={self.company_id}>"
