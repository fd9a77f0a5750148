"""Schedule-check service — per-company thresholds with category defaults."""

from __future__ import annotations

import logging
import uuid
from typing import Union

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from hr_compliance.common.audit import create_audit_entry
from hr_compliance.common.constants import ComplianceCategory
from hr_compliance.common.exceptions import ConflictError, NotFoundException
from hr_compliance.compliance.categories import CATEGORIES, get_category
from hr_compliance.core_hr.service import CompanyService
from hr_compliance.schedule_check.models import ScheduleCheck
from hr_compliance.schedule_check.schemas import (
    ScheduleCheckCreate,
    ScheduleCheckOut,
    ScheduleCheckUpdate,
)

logger = logging.getLogger(__name__)


class ScheduleCheckService:
    """Async access to company schedule settings."""

    @staticmethod
    async def find(db: AsyncSession, company_id: uuid.UUID) -> ScheduleCheck | None:
        result = await db.execute(
            select(ScheduleCheck).where(ScheduleCheck.company_id == company_id)
        )
        return result.scalars().first()

    @staticmethod
    async def get_settings(db: AsyncSession, company_id: uuid.UUID) -> ScheduleCheckOut:
        """Stored settings, or an unsaved all-unset row when none exist."""
        row = await ScheduleCheckService.find(db, company_id)
        if row is None:
            return ScheduleCheckOut(id=None, company_id=company_id)
        return ScheduleCheckOut.model_validate(row)

    @staticmethod
    async def create_settings(
        db: AsyncSession,
        data: ScheduleCheckCreate,
    ) -> ScheduleCheck:
        await CompanyService.get_company(db, data.company_id)
        if await ScheduleCheckService.find(db, data.company_id) is not None:
            raise ConflictError("company_id", data.company_id)

        row = ScheduleCheck(**data.model_dump())
        db.add(row)
        await db.flush()
        await create_audit_entry(
            db,
            action="create",
            title="Schedule Check Settings Created",
            entity_type="schedule_check",
            entity_id=row.id,
            new_values=data.model_dump(),
        )
        return row

    @staticmethod
    async def update_settings(
        db: AsyncSession,
        settings_id: uuid.UUID,
        data: ScheduleCheckUpdate,
    ) -> ScheduleCheck:
        row = await db.get(ScheduleCheck, settings_id)
        if row is None:
            raise NotFoundException("Schedule check", settings_id)

        changes = data.model_dump(exclude_unset=True)
        old_values = {field: getattr(row, field) for field in changes}
        for field, value in changes.items():
            setattr(row, field, value)
        await db.flush()

        await create_audit_entry(
            db,
            action="settings_update",
            title="Schedule Check Settings Updated",
            entity_type="schedule_check",
            entity_id=row.id,
            old_values=old_values,
            new_values=changes,
        )
        logger.info("Schedule settings %s updated: %s", row.id, sorted(changes))
        return row

    # ── Threshold resolution ────────────────────────────────────────

    @staticmethod
    def threshold_from(
        row: ScheduleCheck | ScheduleCheckOut | None,
        category: Union[ComplianceCategory, str],
    ) -> int:
        """Configured threshold for *category*, or the category default."""
        spec = get_category(category)
        value = getattr(row, spec.settings_field, None) if row is not None else None
        if value is None:
            return spec.default_threshold
        return value

    @staticmethod
    async def get_threshold(
        db: AsyncSession,
        company_id: uuid.UUID,
        category: Union[ComplianceCategory, str],
    ) -> int:
        row = await ScheduleCheckService.find(db, company_id)
        if row is None:
            logger.debug(
                "No schedule settings for company %s; using %s default",
                company_id, get_category(category).category.value,
            )
        return ScheduleCheckService.threshold_from(row, category)

    @staticmethod
    async def get_thresholds(
        db: AsyncSession,
        company_id: uuid.UUID,
    ) -> dict[ComplianceCategory, int]:
        row = await ScheduleCheckService.find(db, company_id)
        return {
            category: ScheduleCheckService.threshold_from(row, category)
            for category in CATEGORIES
        }
