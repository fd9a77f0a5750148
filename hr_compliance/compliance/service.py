"""Compliance service layer — list screens, summaries, record writes.

Business logic:
  - One row per active employee, joined to their record in a category
  - Status evaluated on every call from the relevant date and the company's
    current threshold; any stored ``status`` column is ignored
  - Renewals require a supporting document and write an audit entry
"""

from __future__ import annotations

import logging
import uuid
from datetime import date
from typing import Any, Optional, Sequence, Union

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from hr_compliance.common.audit import create_audit_entry, list_audit_entries
from hr_compliance.common.constants import (
    ComplianceCategory,
    ComplianceStatus,
    RowAction,
    ScheduleStatus,
    StatusFlavour,
)
from hr_compliance.common.exceptions import (
    ConflictError,
    NotFoundException,
    ValidationException,
)
from hr_compliance.common.pagination import paginate_items
from hr_compliance.compliance.categories import CATEGORIES, CategorySpec, get_category
from hr_compliance.compliance.evaluator import (
    badge_colour,
    needs_attention,
    status_label,
    today,
)
from hr_compliance.compliance.ordering import filter_rows, sort_rows
from hr_compliance.compliance.schemas import (
    AuditEntryOut,
    ComplianceListResponse,
    ComplianceRecordOut,
    ComplianceRow,
    RecordWriteBase,
    ScheduleStatusSummary,
)
from hr_compliance.core_hr.models import Employee
from hr_compliance.core_hr.service import CompanyService, EmployeeService
from hr_compliance.schedule_check.service import ScheduleCheckService

logger = logging.getLogger(__name__)

CategoryRef = Union[ComplianceCategory, str]


def _details(spec: CategorySpec, record: Any) -> dict[str, Any]:
    if record is None:
        return {}
    return {field: getattr(record, field) for field in spec.detail_fields}


def _allowed_statuses(spec: CategorySpec) -> set[str]:
    enum_cls = ScheduleStatus if spec.flavour == StatusFlavour.schedule else ComplianceStatus
    return {status.value for status in enum_cls}


# ═════════════════════════════════════════════════════════════════════
# ComplianceService
# ═════════════════════════════════════════════════════════════════════


class ComplianceService:
    """Async compliance operations: list rows, summary counts, renewals."""

    # ─────────────────────────────────────────────────────────────────
    # Row building
    # ─────────────────────────────────────────────────────────────────

    @staticmethod
    async def _records_by_employee(
        db: AsyncSession,
        spec: CategorySpec,
        company_id: uuid.UUID,
    ) -> dict[uuid.UUID, Any]:
        """Map employee_id → that employee's record in this category."""
        model = spec.model
        result = await db.execute(select(model).where(model.company_id == company_id))
        return {record.employee_id: record for record in result.scalars().all()}

    @staticmethod
    def build_rows(
        spec: CategorySpec,
        employees: Sequence[Employee],
        records: dict[uuid.UUID, Any],
        threshold_days: int,
        reference_date: date,
    ) -> list[ComplianceRow]:
        rows: list[ComplianceRow] = []
        for employee in employees:
            record = records.get(employee.id)
            relevant = getattr(record, spec.relevant_field) if record is not None else None
            status = spec.evaluate(relevant, threshold_days, reference_date)
            rows.append(
                ComplianceRow(
                    employee_id=employee.id,
                    record_id=record.id if record is not None else None,
                    first_name=employee.first_name,
                    last_name=employee.last_name or "",
                    email=employee.email,
                    relevant_date=relevant,
                    details=_details(spec, record),
                    status=status.value,
                    status_label=status_label(status),
                    badge=badge_colour(status).value,
                    needs_attention=needs_attention(status),
                    action=RowAction.create if record is None else RowAction.update,
                    profile_tab=spec.profile_tab,
                )
            )
        return rows

    @staticmethod
    async def evaluate_company(
        db: AsyncSession,
        company_id: uuid.UUID,
        category: CategoryRef,
        reference_date: Optional[date] = None,
    ) -> tuple[list[ComplianceRow], int, date]:
        """Evaluate every active employee of a company for one category."""
        spec = get_category(category)
        reference = reference_date or today()
        employees = await EmployeeService.list_employees(db, company_id)
        records = await ComplianceService._records_by_employee(db, spec, company_id)
        threshold = await ScheduleCheckService.get_threshold(db, company_id, spec.category)
        rows = ComplianceService.build_rows(spec, employees, records, threshold, reference)
        return rows, threshold, reference

    # ─────────────────────────────────────────────────────────────────
    # List screen
    # ─────────────────────────────────────────────────────────────────

    @staticmethod
    async def list_rows(
        db: AsyncSession,
        company_id: uuid.UUID,
        category: CategoryRef,
        *,
        reference_date: Optional[date] = None,
        statuses: Optional[Sequence[str]] = None,
        search: Optional[str] = None,
        sort: Optional[str] = None,
        page: int = 1,
        page_size: int = 50,
    ) -> ComplianceListResponse:
        spec = get_category(category)
        await CompanyService.get_company(db, company_id)

        if statuses:
            unknown = sorted(set(statuses) - _allowed_statuses(spec))
            if unknown:
                raise ValidationException(
                    {"status": [f"'{value}' is not a {spec.slug} status." for value in unknown]},
                )

        rows, threshold, reference = await ComplianceService.evaluate_company(
            db, company_id, spec.category, reference_date,
        )
        rows = sort_rows(filter_rows(rows, statuses=statuses, search=search), sort)
        page_rows, meta = paginate_items(rows, page, page_size)

        return ComplianceListResponse(
            category=spec.category.value,
            threshold_days=threshold,
            reference_date=reference,
            data=page_rows,
            meta=meta,
        )

    @staticmethod
    async def summary(
        db: AsyncSession,
        company_id: uuid.UUID,
        reference_date: Optional[date] = None,
    ) -> ScheduleStatusSummary:
        """Count rows needing attention in every category."""
        await CompanyService.get_company(db, company_id)
        reference = reference_date or today()
        counts: dict[str, int] = {}
        for category in CATEGORIES:
            rows, _, _ = await ComplianceService.evaluate_company(
                db, company_id, category, reference,
            )
            counts[category.value] = sum(1 for row in rows if row.needs_attention)
        return ScheduleStatusSummary(
            company_id=company_id, reference_date=reference, **counts,
        )

    # ─────────────────────────────────────────────────────────────────
    # Single records
    # ─────────────────────────────────────────────────────────────────

    @staticmethod
    async def _get_record(db: AsyncSession, spec: CategorySpec, record_id: uuid.UUID) -> Any:
        record = await db.get(spec.model, record_id)
        if record is None:
            raise NotFoundException(f"{spec.title} record", record_id)
        return record

    @staticmethod
    async def record_out(
        db: AsyncSession,
        spec: CategorySpec,
        record: Any,
        reference_date: Optional[date] = None,
    ) -> ComplianceRecordOut:
        threshold = await ScheduleCheckService.get_threshold(db, record.company_id, spec.category)
        relevant = getattr(record, spec.relevant_field)
        status = spec.evaluate(relevant, threshold, reference_date or today())
        return ComplianceRecordOut(
            id=record.id,
            category=spec.category.value,
            employee_id=record.employee_id,
            company_id=record.company_id,
            relevant_date=relevant,
            details=_details(spec, record),
            document_url=record.document_url,
            status=status.value,
            threshold_days=threshold,
            updated_by=record.updated_by,
            updated_at=record.updated_at,
        )

    @staticmethod
    async def get_record(
        db: AsyncSession,
        category: CategoryRef,
        record_id: uuid.UUID,
        reference_date: Optional[date] = None,
    ) -> ComplianceRecordOut:
        spec = get_category(category)
        record = await ComplianceService._get_record(db, spec, record_id)
        return await ComplianceService.record_out(db, spec, record, reference_date)

    @staticmethod
    def _check_dates(spec: CategorySpec, values: dict[str, Any]) -> None:
        """Immigration checks and spot checks cannot be booked in the past."""
        if not spec.future_only:
            return
        new_date = values.get(spec.relevant_field)
        if new_date is not None and new_date < today():
            raise ValidationException(
                {spec.relevant_field: ["Date cannot be in the past."]},
            )

    @staticmethod
    async def _check_actor(db: AsyncSession, data: RecordWriteBase) -> None:
        if data.updated_by is not None:
            await EmployeeService.get_employee(db, data.updated_by)

    @staticmethod
    def _write_values(spec: CategorySpec, data: RecordWriteBase) -> dict[str, Any]:
        values = data.model_dump(exclude={"employee_id", "updated_by"})
        if spec.category == ComplianceCategory.spot_check:
            # A reschedule reopens the check.
            values["completion_date"] = None
        return values

    @staticmethod
    async def _existing_record_id(
        db: AsyncSession, spec: CategorySpec, employee_id: uuid.UUID,
    ) -> Optional[uuid.UUID]:
        result = await db.execute(
            select(spec.model.id).where(spec.model.employee_id == employee_id)
        )
        return result.scalar()

    @staticmethod
    async def create_record(
        db: AsyncSession,
        category: CategoryRef,
        data: RecordWriteBase,
    ) -> ComplianceRecordOut:
        """Create the first record for an employee (the 'missing' row action)."""
        spec = get_category(category)
        employee_id: uuid.UUID = getattr(data, "employee_id")
        employee = await EmployeeService.get_employee(db, employee_id)

        if await ComplianceService._existing_record_id(db, spec, employee_id) is not None:
            raise ConflictError("employee_id", employee_id)

        values = ComplianceService._write_values(spec, data)
        ComplianceService._check_dates(spec, values)
        await ComplianceService._check_actor(db, data)

        record = spec.model(
            employee_id=employee.id,
            company_id=employee.company_id,
            updated_by=data.updated_by,
            **values,
        )
        db.add(record)
        try:
            await db.flush()
        except IntegrityError:
            await db.rollback()
            raise ConflictError("employee_id", employee_id)

        await create_audit_entry(
            db,
            action="create",
            title=f"{spec.title} Record Created",
            entity_type=spec.category.value,
            entity_id=record.id,
            actor_id=data.updated_by,
            new_values=values,
        )
        logger.info("Created %s record %s for employee %s", spec.slug, record.id, employee.id)
        return await ComplianceService.record_out(db, spec, record)

    @staticmethod
    async def update_record(
        db: AsyncSession,
        category: CategoryRef,
        record_id: uuid.UUID,
        data: RecordWriteBase,
    ) -> ComplianceRecordOut:
        """Renew (or reschedule) a record with a new relevant date and document."""
        spec = get_category(category)
        record = await ComplianceService._get_record(db, spec, record_id)

        values = ComplianceService._write_values(spec, data)
        ComplianceService._check_dates(spec, values)
        await ComplianceService._check_actor(db, data)

        old_values = {field: getattr(record, field) for field in values}
        for field, value in values.items():
            setattr(record, field, value)
        record.updated_by = data.updated_by
        await db.flush()

        await create_audit_entry(
            db,
            action="reschedule" if spec.flavour == StatusFlavour.schedule else "update",
            title=spec.audit_title,
            entity_type=spec.category.value,
            entity_id=record.id,
            actor_id=data.updated_by,
            old_values=old_values,
            new_values=values,
        )
        logger.info(
            "%s: record %s now %s=%s",
            spec.audit_title, record.id, spec.relevant_field, values.get(spec.relevant_field),
        )
        return await ComplianceService.record_out(db, spec, record)

    @staticmethod
    async def history(
        db: AsyncSession,
        category: CategoryRef,
        record_id: uuid.UUID,
    ) -> list[AuditEntryOut]:
        spec = get_category(category)
        await ComplianceService._get_record(db, spec, record_id)
        entries = await list_audit_entries(
            db, entity_type=spec.category.value, entity_id=record_id,
        )
        return [AuditEntryOut.model_validate(entry) for entry in entries]
