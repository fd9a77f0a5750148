"""Core HR router — Company and Employee endpoints.

Routes:
    /companies              — Create company
    /companies/{id}         — Company detail
    /employees              — List (by company), create employees
    /employees/{id}         — Get, update employee
"""

import uuid
from typing import Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from hr_compliance.core_hr.schemas import (
    CompanyCreate,
    CompanyOut,
    EmployeeCreate,
    EmployeeOut,
    EmployeeUpdate,
)
from hr_compliance.core_hr.service import CompanyService, EmployeeService
from hr_compliance.database import get_db

companies_router = APIRouter(prefix="", tags=["companies"])
employees_router = APIRouter(prefix="", tags=["employees"])


# ── Companies ───────────────────────────────────────────────────────

@companies_router.post("", response_model=CompanyOut, status_code=201)
async def create_company(
    body: CompanyCreate,
    db: AsyncSession = Depends(get_db),
):
    return await CompanyService.create_company(db, body)


@companies_router.get("/{company_id}", response_model=CompanyOut)
async def get_company(
    company_id: uuid.UUID,
    db: AsyncSession = Depends(get_db),
):
    return await CompanyService.get_company(db, company_id)


# ── Employees ───────────────────────────────────────────────────────

@employees_router.get("", response_model=list[EmployeeOut])
async def list_employees(
    company_id: uuid.UUID = Query(...),
    is_active: Optional[bool] = Query(True),
    db: AsyncSession = Depends(get_db),
):
    """List a company's employees (active only by default)."""
    return await EmployeeService.list_employees(db, company_id, is_active=is_active)


@employees_router.post("", response_model=EmployeeOut, status_code=201)
async def create_employee(
    body: EmployeeCreate,
    db: AsyncSession = Depends(get_db),
):
    return await EmployeeService.create_employee(db, body)


@employees_router.get("/{employee_id}", response_model=EmployeeOut)
async def get_employee(
    employee_id: uuid.UUID,
    db: AsyncSession = Depends(get_db),
):
    return await EmployeeService.get_employee(db, employee_id)


@employees_router.patch("/{employee_id}", response_model=EmployeeOut)
async def update_employee(
    employee_id: uuid.UUID,
    body: EmployeeUpdate,
    db: AsyncSession = Depends(get_db),
):
    return await EmployeeService.update_employee(db, employee_id, body)
