"""Compliance routers — list screens, summary counts and record writes.

Routes (schedule-status, read only, evaluated per request):
    /schedule-status/{company_id}              — Needs-attention count per category
    /schedule-status/{company_id}/{category}   — One evaluated row per active employee

Routes (compliance records):
    POST  /compliance/{slug}                     — Create first record for an employee
    PATCH /compliance/{slug}/{record_id}         — Renew / reschedule
    GET   /compliance/{slug}/{record_id}         — Record with evaluated status
    GET   /compliance/{slug}/{record_id}/history — Audit entries, newest first
"""

import uuid
from datetime import date
from typing import Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from hr_compliance.common.constants import ComplianceCategory
from hr_compliance.common.pagination import PaginationParams
from hr_compliance.compliance.schemas import (
    AuditEntryOut,
    ComplianceListResponse,
    ComplianceRecordOut,
    DbsCreate,
    DbsUpdate,
    ImmigrationCreate,
    ImmigrationUpdate,
    PassportCreate,
    PassportUpdate,
    RightToWorkCreate,
    RightToWorkUpdate,
    ScheduleStatusSummary,
    SpotCheckCreate,
    SpotCheckUpdate,
)
from hr_compliance.compliance.service import ComplianceService
from hr_compliance.database import get_db

status_router = APIRouter(prefix="", tags=["schedule-status"])
records_router = APIRouter(prefix="", tags=["compliance"])


# ═════════════════════════════════════════════════════════════════════
# Schedule status (list screens)
# ═════════════════════════════════════════════════════════════════════


@status_router.get("/{company_id}", response_model=ScheduleStatusSummary)
async def schedule_status_summary(
    company_id: uuid.UUID,
    as_of: Optional[date] = Query(None, description="Reference day (defaults to today, UTC)"),
    db: AsyncSession = Depends(get_db),
):
    return await ComplianceService.summary(db, company_id, as_of)


@status_router.get("/{company_id}/{category}", response_model=ComplianceListResponse)
async def schedule_status_list(
    company_id: uuid.UUID,
    category: str,
    status: Optional[list[str]] = Query(None, description="Keep only these statuses"),
    search: Optional[str] = Query(None, description="Name or email contains"),
    as_of: Optional[date] = Query(None, description="Reference day (defaults to today, UTC)"),
    pagination: PaginationParams = Depends(),
    db: AsyncSession = Depends(get_db),
):
    """Evaluated rows for one category. Category accepts the slug or enum value."""
    return await ComplianceService.list_rows(
        db,
        company_id,
        category,
        reference_date=as_of,
        statuses=status,
        search=search,
        sort=pagination.sort,
        page=pagination.page,
        page_size=pagination.page_size,
    )


# ═════════════════════════════════════════════════════════════════════
# Record writes (one POST/PATCH pair per category)
# ═════════════════════════════════════════════════════════════════════


# ── Passport ────────────────────────────────────────────────────────

@records_router.post("/passport", response_model=ComplianceRecordOut, status_code=201)
async def create_passport(body: PassportCreate, db: AsyncSession = Depends(get_db)):
    return await ComplianceService.create_record(db, ComplianceCategory.passport, body)


@records_router.patch("/passport/{record_id}", response_model=ComplianceRecordOut)
async def update_passport(
    record_id: uuid.UUID, body: PassportUpdate, db: AsyncSession = Depends(get_db),
):
    return await ComplianceService.update_record(db, ComplianceCategory.passport, record_id, body)


# ── DBS ─────────────────────────────────────────────────────────────

@records_router.post("/dbs", response_model=ComplianceRecordOut, status_code=201)
async def create_dbs(body: DbsCreate, db: AsyncSession = Depends(get_db)):
    return await ComplianceService.create_record(db, ComplianceCategory.dbs, body)


@records_router.patch("/dbs/{record_id}", response_model=ComplianceRecordOut)
async def update_dbs(
    record_id: uuid.UUID, body: DbsUpdate, db: AsyncSession = Depends(get_db),
):
    return await ComplianceService.update_record(db, ComplianceCategory.dbs, record_id, body)


# ── Immigration ─────────────────────────────────────────────────────

@records_router.post("/immigration", response_model=ComplianceRecordOut, status_code=201)
async def create_immigration(body: ImmigrationCreate, db: AsyncSession = Depends(get_db)):
    return await ComplianceService.create_record(db, ComplianceCategory.immigration, body)


@records_router.patch("/immigration/{record_id}", response_model=ComplianceRecordOut)
async def update_immigration(
    record_id: uuid.UUID, body: ImmigrationUpdate, db: AsyncSession = Depends(get_db),
):
    return await ComplianceService.update_record(
        db, ComplianceCategory.immigration, record_id, body,
    )


# ── Right to work ───────────────────────────────────────────────────

@records_router.post("/right-to-work", response_model=ComplianceRecordOut, status_code=201)
async def create_right_to_work(body: RightToWorkCreate, db: AsyncSession = Depends(get_db)):
    return await ComplianceService.create_record(db, ComplianceCategory.right_to_work, body)


@records_router.patch("/right-to-work/{record_id}", response_model=ComplianceRecordOut)
async def update_right_to_work(
    record_id: uuid.UUID, body: RightToWorkUpdate, db: AsyncSession = Depends(get_db),
):
    return await ComplianceService.update_record(
        db, ComplianceCategory.right_to_work, record_id, body,
    )


# ── Spot check ──────────────────────────────────────────────────────

@records_router.post("/spot-check", response_model=ComplianceRecordOut, status_code=201)
async def create_spot_check(body: SpotCheckCreate, db: AsyncSession = Depends(get_db)):
    return await ComplianceService.create_record(db, ComplianceCategory.spot_check, body)


@records_router.patch("/spot-check/{record_id}", response_model=ComplianceRecordOut)
async def reschedule_spot_check(
    record_id: uuid.UUID, body: SpotCheckUpdate, db: AsyncSession = Depends(get_db),
):
    return await ComplianceService.update_record(
        db, ComplianceCategory.spot_check, record_id, body,
    )


# ═════════════════════════════════════════════════════════════════════
# Record reads (any category)
# ═════════════════════════════════════════════════════════════════════


@records_router.get("/{category}/{record_id}", response_model=ComplianceRecordOut)
async def get_record(
    category: str,
    record_id: uuid.UUID,
    as_of: Optional[date] = Query(None),
    db: AsyncSession = Depends(get_db),
):
    return await ComplianceService.get_record(db, category, record_id, as_of)


@records_router.get("/{category}/{record_id}/history", response_model=list[AuditEntryOut])
async def record_history(
    category: str,
    record_id: uuid.UUID,
    db: AsyncSession = Depends(get_db),
):
    return await ComplianceService.history(db, category, record_id)
