"""Schedule-check router — company warning windows.

Routes:
    GET   /schedule-check?company_id=…        — Settings (defaults when unsaved)
    GET   /schedule-check/effective?company_id=… — Thresholds after defaults
    POST  /schedule-check                     — Create settings for a company
    PATCH /schedule-check/{id}                — Partial update
"""

import uuid

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from hr_compliance.database import get_db
from hr_compliance.schedule_check.schemas import (
    EffectiveThresholds,
    ScheduleCheckCreate,
    ScheduleCheckOut,
    ScheduleCheckUpdate,
)
from hr_compliance.schedule_check.service import ScheduleCheckService

router = APIRouter(prefix="", tags=["schedule-check"])


@router.get("", response_model=ScheduleCheckOut)
async def get_schedule_check(
    company_id: uuid.UUID = Query(...),
    db: AsyncSession = Depends(get_db),
):
    return await ScheduleCheckService.get_settings(db, company_id)


@router.get("/effective", response_model=EffectiveThresholds)
async def get_effective_thresholds(
    company_id: uuid.UUID = Query(...),
    db: AsyncSession = Depends(get_db),
):
    thresholds = await ScheduleCheckService.get_thresholds(db, company_id)
    return EffectiveThresholds(
        company_id=company_id,
        thresholds={category.value: days for category, days in thresholds.items()},
    )


@router.post("", response_model=ScheduleCheckOut, status_code=201)
async def create_schedule_check(
    body: ScheduleCheckCreate,
    db: AsyncSession = Depends(get_db),
):
    return await ScheduleCheckService.create_settings(db, body)


@router.patch("/{settings_id}", response_model=ScheduleCheckOut)
async def update_schedule_check(
    settings_id: uuid.UUID,
    body: ScheduleCheckUpdate,
    db: AsyncSession = Depends(get_db),
):
    return await ScheduleCheckService.update_settings(db, settings_id, body)
