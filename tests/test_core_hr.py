"""Core HR tests — company and employee endpoints the list screens rely on."""

from __future__ import annotations

import uuid

import pytest
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from hr_compliance.core_hr.models import Employee
from tests.conftest import _make_employee


class TestCompanyAPI:

    async def test_create_and_get(self, client):
        resp = await client.post("/api/v1/companies", json={"name": "Bright Homes"})
        assert resp.status_code == 201
        company_id = resp.json()["id"]

        resp = await client.get(f"/api/v1/companies/{company_id}")
        assert resp.status_code == 200
        assert resp.json()["name"] == "Bright Homes"


class TestEmployeeAPI:

    async def test_create_list_and_deactivate(self, client, db: AsyncSession, test_company):
        await db.commit()
        cid = str(test_company["id"])
        resp = await client.post("/api/v1/employees", json={
            "company_id": cid,
            "first_name": "Zoe",
            "last_name": "Khan",
            "email": "zoe.khan@acme-care.co.uk",
        })
        assert resp.status_code == 201
        employee_id = resp.json()["id"]

        resp = await client.get("/api/v1/employees", params={"company_id": cid})
        assert [e["first_name"] for e in resp.json()] == ["Zoe"]

        resp = await client.patch(f"/api/v1/employees/{employee_id}", json={"is_active": False})
        assert resp.status_code == 200
        assert resp.json()["is_active"] is False

        resp = await client.get(f"/api/v1/schedule-status/{cid}/passport")
        assert resp.json()["data"] == []

    async def test_duplicate_email_conflicts(self, client, db: AsyncSession, test_employee):
        await db.commit()
        resp = await client.post("/api/v1/employees", json={
            "company_id": str(test_employee["company_id"]),
            "first_name": "Other",
            "email": test_employee["email"],
        })
        assert resp.status_code == 409

    async def test_unknown_company(self, client):
        resp = await client.post("/api/v1/employees", json={
            "company_id": str(uuid.uuid4()),
            "first_name": "Nobody",
            "email": "nobody@acme-care.co.uk",
        })
        assert resp.status_code == 404

    async def test_email_unique_within_company(self, db: AsyncSession, test_employee):
        db.add(Employee(**_make_employee(
            company_id=test_employee["company_id"],
            email=test_employee["email"],
            first_name="Other",
        )))
        with pytest.raises(IntegrityError):
            await db.flush()
        await db.rollback()
