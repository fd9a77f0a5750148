"""Console test suite — API client fallbacks, list views, renewal form, report.

Failure paths use ``httpx.MockTransport``; the integration tests drive the
real app through ``ASGITransport`` against the SQLite test database.
"""

from __future__ import annotations

import asyncio
import logging
import uuid
from datetime import date

import httpx
import pytest
from httpx import ASGITransport
from sqlalchemy.ext.asyncio import AsyncSession

from hr_compliance.common.constants import (
    BadgeColour,
    ComplianceCategory,
    ComplianceStatus,
    RowAction,
    ScheduleStatus,
)
from hr_compliance.compliance.models import PassportRecord, SpotCheckRecord
from hr_compliance.console import report
from hr_compliance.console.client import ComplianceApiClient, ConsoleRequestError
from hr_compliance.console.forms import (
    FormIncompleteError,
    RenewalForm,
    SubmitInProgressError,
)
from hr_compliance.console.views import ComplianceListView, ComplianceRecord, row_action
from hr_compliance.core_hr.models import Employee
from hr_compliance.schedule_check.models import ScheduleCheck
from tests.conftest import REFERENCE_DAY, _make_employee, _make_record, far_future

BASE_URL = "http://test/api/v1"
COMPANY_ID = uuid.UUID("00000000-0000-0000-0000-0000000000c1")
DOC = "https://files.example.com/renewal.pdf"


# ═════════════════════════════════════════════════════════════════════
# Helpers — canned API
# ═════════════════════════════════════════════════════════════════════


def _raw_row(first_name: str, relevant_date, *, record: bool = True, status: str = "active") -> dict:
    return {
        "employee_id": str(uuid.uuid4()),
        "record_id": str(uuid.uuid4()) if record else None,
        "first_name": first_name,
        "last_name": "Test",
        "email": f"{first_name.lower()}@acme-care.co.uk",
        "relevant_date": relevant_date,
        "details": {"passport_number": "123"} if record else {},
        "status": status,
    }


def _mock_client(settings_body=None, rows=None, *, settings_status=200, rows_status=200):
    """Client whose transport answers the settings and list endpoints."""

    def handler(request: httpx.Request) -> httpx.Response:
        if request.url.path.endswith("/schedule-check"):
            return httpx.Response(settings_status, json=settings_body or {})
        if "/schedule-status/" in request.url.path:
            return httpx.Response(
                rows_status,
                json={"data": rows or [], "meta": {"has_next": False}},
            )
        return httpx.Response(404, json={"detail": "no route"})

    return ComplianceApiClient(BASE_URL, transport=httpx.MockTransport(handler))


# ═════════════════════════════════════════════════════════════════════
# Client: reads never raise
# ═════════════════════════════════════════════════════════════════════


class TestFetchThreshold:

    async def test_configured_value(self):
        async with _mock_client({"passport_check_days": 45}) as client:
            assert await client.fetch_threshold(COMPANY_ID, "passport") == 45

    async def test_explicit_zero_kept(self):
        async with _mock_client({"spot_check_days": 0}) as client:
            assert await client.fetch_threshold(COMPANY_ID, "spot-check") == 0

    async def test_null_value_uses_category_default(self):
        async with _mock_client({"spot_check_days": None}) as client:
            assert await client.fetch_threshold(COMPANY_ID, ComplianceCategory.spot_check) == 30
            assert await client.fetch_threshold(COMPANY_ID, ComplianceCategory.dbs) == 0

    async def test_server_error_falls_back_and_logs(self, caplog):
        caplog.set_level(logging.WARNING, logger="hr_compliance.console.client")
        async with _mock_client({}, settings_status=500) as client:
            assert await client.fetch_threshold(COMPANY_ID, "spot-check") == 30
        assert "using default 30" in caplog.text

    async def test_unparseable_value_falls_back(self, caplog):
        caplog.set_level(logging.WARNING, logger="hr_compliance.console.client")
        async with _mock_client({"spot_check_days": "thirty"}) as client:
            assert await client.fetch_threshold(COMPANY_ID, "spot-check") == 30
        async with _mock_client({"passport_check_days": [45]}) as client:
            assert await client.fetch_threshold(COMPANY_ID, "passport") == 0
        assert "using default 30" in caplog.text

    async def test_connection_error_falls_back(self):
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("connection refused", request=request)

        client = ComplianceApiClient(BASE_URL, transport=httpx.MockTransport(handler))
        async with client:
            assert await client.fetch_threshold(COMPANY_ID, "passport") == 0


class TestFetchSummary:

    async def test_counts_per_category(self):
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(200, json={"passport": 2, "spot_check": 1, "dbs": None})

        client = ComplianceApiClient(BASE_URL, transport=httpx.MockTransport(handler))
        async with client:
            counts = await client.fetch_summary(COMPANY_ID)
        assert counts["passport"] == 2
        assert counts["spot_check"] == 1
        assert counts["dbs"] == 0

    async def test_non_object_body_gives_zeros(self, caplog):
        caplog.set_level(logging.WARNING, logger="hr_compliance.console.client")

        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(200, json=[{"passport": 3}])

        client = ComplianceApiClient(BASE_URL, transport=httpx.MockTransport(handler))
        async with client:
            counts = await client.fetch_summary(COMPANY_ID)
        assert set(counts) == {category.value for category in ComplianceCategory}
        assert set(counts.values()) == {0}
        assert "Failed to fetch schedule status" in caplog.text


class TestFetchRecords:

    async def test_failure_gives_empty_list(self, caplog):
        caplog.set_level(logging.WARNING, logger="hr_compliance.console.client")
        async with _mock_client(rows_status=503) as client:
            assert await client.fetch_records(COMPANY_ID, "dbs") == []
        assert "Failed to fetch dbs list" in caplog.text

    async def test_follows_pages(self):
        pages = {
            "1": {"data": [_raw_row("Amy", None, record=False)], "meta": {"has_next": True}},
            "2": {"data": [_raw_row("Ben", "2030-01-01")], "meta": {"has_next": False}},
        }

        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(200, json=pages[request.url.params["page"]])

        client = ComplianceApiClient(BASE_URL, transport=httpx.MockTransport(handler))
        async with client:
            rows = await client.fetch_records(COMPANY_ID, "passport")
        assert [row["first_name"] for row in rows] == ["Amy", "Ben"]

    async def test_write_error_raises(self):
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(
                422,
                json={"detail": "One or more fields failed validation.",
                      "errors": {"scheduled_date": ["Date cannot be in the past."]}},
            )

        client = ComplianceApiClient(BASE_URL, transport=httpx.MockTransport(handler))
        async with client:
            with pytest.raises(ConsoleRequestError) as exc_info:
                await client.update_record("spot-check", uuid.uuid4(), {"document_url": DOC})
        assert exc_info.value.status_code == 422
        assert "scheduled_date" in exc_info.value.errors


# ═════════════════════════════════════════════════════════════════════
# List view
# ═════════════════════════════════════════════════════════════════════


class TestListView:

    async def test_rows_ignore_payload_status(self):
        rows = [
            _raw_row("Amy", "2025-06-01", status="active"),
            _raw_row("Ben", "2025-07-01", status="expired"),
            _raw_row("Cat", None, record=False, status="active"),
        ]
        async with _mock_client({"passport_check_days": 30}, rows) as client:
            view = ComplianceListView(client, "passport")
            await view.load(COMPANY_ID)

        result = view.rows(REFERENCE_DAY)
        assert view.threshold_days == 30
        assert [row.status for row in result] == [
            ComplianceStatus.expired,
            ComplianceStatus.expiring_soon,
            ComplianceStatus.missing,
        ]
        assert [row.badge for row in result] == [
            BadgeColour.red, BadgeColour.amber, BadgeColour.gray,
        ]
        assert result[2].action == RowAction.create

    async def test_failed_load_leaves_default_and_empty(self):
        async with _mock_client(settings_status=500, rows_status=500) as client:
            view = ComplianceListView(client, "spot-check")
            await view.load(COMPANY_ID)
        assert view.threshold_days == 30
        assert view.rows(REFERENCE_DAY) == []

    async def test_malformed_rows_leave_empty_list(self, caplog):
        caplog.set_level(logging.WARNING, logger="hr_compliance.console.views")
        no_employee = _raw_row("Amy", "2025-06-01")
        del no_employee["employee_id"]
        for bad in (no_employee, _raw_row("Ben", "15/06/2025"), _raw_row("Cat", 20250615)):
            async with _mock_client({"passport_check_days": 30}, [bad]) as client:
                view = ComplianceListView(client, "passport")
                await view.load(COMPANY_ID)
            assert view.threshold_days == 30
            assert view.records == []
            assert view.rows(REFERENCE_DAY) == []
        assert "Malformed passport list" in caplog.text

    async def test_evaluated_fresh_on_every_call(self):
        rows = [_raw_row("Amy", "2025-07-01")]
        async with _mock_client({}, rows) as client:
            view = ComplianceListView(client, "passport")
            await view.load(COMPANY_ID)

        assert view.rows(REFERENCE_DAY)[0].status == ComplianceStatus.active
        view.threshold_days = 30
        assert view.rows(REFERENCE_DAY)[0].status == ComplianceStatus.expiring_soon
        assert view.rows("2025-07-02")[0].status == ComplianceStatus.expired

    async def test_spot_check_view_uses_schedule_statuses(self):
        rows = [_raw_row("Amy", "2025-07-01"), _raw_row("Ben", None, record=False)]
        async with _mock_client({}, rows) as client:
            view = ComplianceListView(client, ComplianceCategory.spot_check)
            await view.load(COMPANY_ID)
        assert [row.status for row in view.rows(REFERENCE_DAY)] == [
            ScheduleStatus.due_soon, ScheduleStatus.not_scheduled,
        ]

    async def test_filter_and_sort(self):
        rows = [
            _raw_row("Cat", "2030-01-01"),
            _raw_row("Amy", "2025-06-01"),
            _raw_row("Ben", None, record=False),
        ]
        async with _mock_client({}, rows) as client:
            view = ComplianceListView(client, "passport")
            await view.load(COMPANY_ID)

        urgent = view.rows(REFERENCE_DAY, sort="status")
        assert [row.first_name for row in urgent] == ["Ben", "Amy", "Cat"]
        attention = view.rows(REFERENCE_DAY, statuses=["missing", "expired"], sort="name")
        assert [row.first_name for row in attention] == ["Amy", "Ben"]
        assert [row.first_name for row in view.rows(REFERENCE_DAY, search="CAT")] == ["Cat"]

    def test_row_action(self):
        missing = ComplianceRecord(subject_id=uuid.uuid4(), record_id=None, relevant_date=None)
        present = ComplianceRecord(
            subject_id=uuid.uuid4(), record_id=uuid.uuid4(), relevant_date=date(2030, 1, 1),
        )
        assert row_action(missing) == RowAction.create
        assert row_action(present) == RowAction.update


# ═════════════════════════════════════════════════════════════════════
# Renewal form
# ═════════════════════════════════════════════════════════════════════


class TestRenewalForm:

    def test_document_required_before_submit(self):
        form = RenewalForm("passport", uuid.uuid4(), {
            "passport_number": "123", "expiry_date": date(2035, 1, 1),
        })
        assert form.can_submit is False
        assert form.missing_fields == ["document_url"]
        form.attach_document(DOC)
        assert form.can_submit is True

    def test_category_fields_required(self):
        form = RenewalForm("dbs", uuid.uuid4(), {"expiry_date": date(2030, 1, 1)})
        form.attach_document(DOC)
        assert form.missing_fields == ["disclosure_number", "date_of_issue"]
        form.set("disclosure_number", "0012")
        form.set("date_of_issue", date(2025, 1, 1))
        assert form.can_submit is True

    def test_payload_serialises_dates(self):
        form = RenewalForm("spot-check", uuid.uuid4(), {
            "scheduled_date": date(2030, 2, 1), "completion_date": date(2025, 1, 1), "note": "Q1",
        })
        form.attach_document(DOC)
        actor = uuid.uuid4()
        assert form.payload(actor) == {
            "scheduled_date": "2030-02-01",
            "note": "Q1",
            "document_url": DOC,
            "updated_by": str(actor),
        }

    async def test_incomplete_submit_rejected(self):
        form = RenewalForm("immigration", uuid.uuid4(), {"next_check_date": date(2030, 1, 1)})
        async with _mock_client() as client:
            with pytest.raises(FormIncompleteError) as exc_info:
                await form.submit(client)
        assert exc_info.value.missing == ["document_url"]

    async def test_second_submit_while_in_flight_rejected(self):
        release = asyncio.Event()
        calls = []

        async def handler(request: httpx.Request) -> httpx.Response:
            calls.append(request)
            await release.wait()
            return httpx.Response(200, json={"status": "active"})

        form = RenewalForm("immigration", uuid.uuid4(), {"next_check_date": date(2030, 1, 1)})
        form.attach_document(DOC)
        client = ComplianceApiClient(BASE_URL, transport=httpx.MockTransport(handler))
        async with client:
            first = asyncio.create_task(form.submit(client))
            await asyncio.sleep(0)
            assert form.is_submitting is True
            assert form.can_submit is False
            with pytest.raises(SubmitInProgressError):
                await form.submit(client)
            release.set()
            assert await first == {"status": "active"}

        assert len(calls) == 1
        assert form.is_submitting is False

    async def test_failed_submit_reenables_form(self):
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(500, json={"detail": "boom"})

        form = RenewalForm("immigration", uuid.uuid4(), {"next_check_date": date(2030, 1, 1)})
        form.attach_document(DOC)
        client = ComplianceApiClient(BASE_URL, transport=httpx.MockTransport(handler))
        async with client:
            with pytest.raises(ConsoleRequestError):
                await form.submit(client)
        assert form.is_submitting is False
        assert form.can_submit is True


# ═════════════════════════════════════════════════════════════════════
# Integration — console against the running app
# ═════════════════════════════════════════════════════════════════════


async def _seed(db: AsyncSession, company_id: uuid.UUID, first_name: str) -> Employee:
    emp = Employee(**_make_employee(
        company_id=company_id, first_name=first_name, email=f"{first_name.lower()}@acme-care.co.uk",
    ))
    db.add(emp)
    await db.flush()
    return emp


class TestConsoleAgainstApp:

    async def test_load_and_renew(self, app, db: AsyncSession, test_company):
        cid = test_company["id"]
        amy = await _seed(db, cid, "Amy")
        await _seed(db, cid, "Ben")
        db.add(PassportRecord(**_make_record(
            employee_id=amy.id, company_id=cid,
            passport_number="111", expiry_date=date(2025, 7, 1), status="expired",
        )))
        db.add(ScheduleCheck(id=uuid.uuid4(), company_id=cid, passport_check_days=30))
        await db.commit()

        client = ComplianceApiClient(BASE_URL, transport=ASGITransport(app=app))
        async with client:
            view = ComplianceListView(client, "passport")
            await view.load(cid)
            rows = view.rows(REFERENCE_DAY)
            assert view.threshold_days == 30
            assert [(r.first_name, r.status) for r in rows] == [
                ("Amy", ComplianceStatus.expiring_soon),
                ("Ben", ComplianceStatus.missing),
            ]

            form = RenewalForm.from_row(rows[0])
            assert form.values["passport_number"] == "111"
            assert form.can_submit is False
            form.set("expiry_date", date(2035, 7, 1))
            form.attach_document(DOC)
            result = await form.submit(client)
            assert result["relevant_date"] == "2035-07-01"

            await view.load(cid)
            assert view.rows(REFERENCE_DAY)[0].status == ComplianceStatus.active

    async def test_server_rejection_surfaces(self, app, db: AsyncSession, test_company):
        emp = await _seed(db, test_company["id"], "Amy")
        record = SpotCheckRecord(**_make_record(
            employee_id=emp.id, company_id=test_company["id"], scheduled_date=date(2025, 1, 1),
        ))
        db.add(record)
        await db.commit()

        client = ComplianceApiClient(BASE_URL, transport=ASGITransport(app=app))
        async with client:
            form = RenewalForm("spot-check", record.id, {"scheduled_date": date(2001, 1, 1)})
            form.attach_document(DOC)
            with pytest.raises(ConsoleRequestError) as exc_info:
                await form.submit(client)
            assert exc_info.value.status_code == 422

            form.set("scheduled_date", far_future())
            result = await form.submit(client)
            assert result["status"] == "scheduled"

    async def test_report_rows(self, app, db: AsyncSession, test_company):
        await _seed(db, test_company["id"], "Amy")
        await db.commit()

        client = ComplianceApiClient(BASE_URL, transport=ASGITransport(app=app))
        async with client:
            view, rows = await report.run_report(
                test_company["id"], "dbs", as_of="2025-06-15", client=client,
            )
        table = report.format_table(view, rows)
        assert "DBS STATUS" in table
        assert "1 rows, 1 need attention" in table
        assert report._row_dict(rows[0])["status"] == "missing"


class TestReportParser:

    def test_parses_arguments(self):
        args = report.build_parser().parse_args([
            str(COMPANY_ID), "spot-check", "--status", "overdue", "--status", "due-soon", "--json",
        ])
        assert args.company_id == COMPANY_ID
        assert args.status == ["overdue", "due-soon"]
        assert args.output_json is True
        assert args.sort == "status"

    def test_rejects_unknown_category(self):
        with pytest.raises(SystemExit):
            report.build_parser().parse_args([str(COMPANY_ID), "payslips"])
