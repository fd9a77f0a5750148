"""Core HR service layer — companies and employees."""

from __future__ import annotations

import uuid
from typing import Optional

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from hr_compliance.common.exceptions import ConflictError, NotFoundException
from hr_compliance.core_hr.models import Company, Employee
from hr_compliance.core_hr.schemas import CompanyCreate, EmployeeCreate, EmployeeUpdate


class CompanyService:
    """Async operations for companies."""

    @staticmethod
    async def create_company(db: AsyncSession, data: CompanyCreate) -> Company:
        company = Company(name=data.name, is_active=True)
        db.add(company)
        await db.flush()
        return company

    @staticmethod
    async def get_company(db: AsyncSession, company_id: uuid.UUID) -> Company:
        company = await db.get(Company, company_id)
        if company is None:
            raise NotFoundException("Company", company_id)
        return company


class EmployeeService:
    """Async CRUD operations for employees."""

    @staticmethod
    async def create_employee(db: AsyncSession, data: EmployeeCreate) -> Employee:
        """Create an employee. Email is unique within a company."""
        await CompanyService.get_company(db, data.company_id)

        existing = await db.execute(
            select(Employee.id).where(
                Employee.company_id == data.company_id,
                Employee.email == data.email,
            )
        )
        if existing.scalar() is not None:
            raise ConflictError("email", data.email)

        employee = Employee(
            company_id=data.company_id,
            first_name=data.first_name,
            last_name=data.last_name,
            email=data.email,
            employee_code=data.employee_code,
            is_active=True,
        )
        db.add(employee)
        await db.flush()
        return employee

    @staticmethod
    async def get_employee(db: AsyncSession, employee_id: uuid.UUID) -> Employee:
        employee = await db.get(Employee, employee_id)
        if employee is None:
            raise NotFoundException("Employee", employee_id)
        return employee

    @staticmethod
    async def list_employees(
        db: AsyncSession,
        company_id: uuid.UUID,
        *,
        is_active: Optional[bool] = True,
    ) -> list[Employee]:
        """Employees of a company ordered by name. ``is_active=None`` returns all."""
        query = select(Employee).where(Employee.company_id == company_id)
        if is_active is not None:
            query = query.where(Employee.is_active.is_(is_active))
        query = query.order_by(Employee.first_name, Employee.last_name)
        result = await db.execute(query)
        return list(result.scalars().all())

    @staticmethod
    async def update_employee(
        db: AsyncSession,
        employee_id: uuid.UUID,
        data: EmployeeUpdate,
    ) -> Employee:
        employee = await EmployeeService.get_employee(db, employee_id)
        for field, value in data.model_dump(exclude_unset=True).items():
            setattr(employee, field, value)
        await db.flush()
        return employee
