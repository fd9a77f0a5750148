"""Async HTTP client used by the console list screens.

Fetch failures on the read side never propagate. A failed settings fetch
falls back to the category default threshold, and a failed record fetch
yields an empty list. Both are logged. Writes raise ``ConsoleRequestError``
so the caller can tell the user.
"""

from __future__ import annotations

import logging
import uuid
from typing import Any, Optional, Union

import httpx

from hr_compliance.common.constants import ComplianceCategory
from hr_compliance.compliance.categories import get_category
from hr_compliance.config import settings

logger = logging.getLogger(__name__)

CategoryRef = Union[ComplianceCategory, str]
_PAGE_SIZE = 100


class ConsoleRequestError(Exception):
    """A write request was rejected or could not be sent."""

    def __init__(self, detail: str, status_code: Optional[int] = None,
                 errors: Optional[dict[str, Any]] = None):
        self.detail = detail
        self.status_code = status_code
        self.errors = errors or {}
        super().__init__(detail)


def _problem_detail(response: httpx.Response) -> tuple[str, dict[str, Any]]:
    try:
        body = response.json()
    except ValueError:
        return response.text or response.reason_phrase, {}
    if isinstance(body, dict):
        return body.get("detail") or response.reason_phrase, body.get("errors") or {}
    return response.reason_phrase, {}


class ComplianceApiClient:
    """Thin wrapper over ``httpx.AsyncClient`` for the compliance API."""

    def __init__(
        self,
        base_url: Optional[str] = None,
        *,
        timeout: Optional[float] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        self._http = httpx.AsyncClient(
            base_url=base_url or settings.API_BASE_URL,
            timeout=timeout if timeout is not None else settings.API_TIMEOUT_SECONDS,
            transport=transport,
        )

    async def __aenter__(self) -> "ComplianceApiClient":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        await self._http.aclose()

    # ── Reads (never raise) ─────────────────────────────────────────

    async def fetch_threshold(self, company_id: uuid.UUID, category: CategoryRef) -> int:
        """Company threshold for *category*, or the category default."""
        spec = get_category(category)
        try:
            response = await self._http.get(
                "/schedule-check", params={"company_id": str(company_id)},
            )
            response.raise_for_status()
            data = response.json()
            value = data.get(spec.settings_field) if isinstance(data, dict) else None
            return spec.default_threshold if value is None else int(value)
        except (httpx.HTTPError, ValueError, TypeError) as exc:
            logger.warning(
                "Error fetching schedule settings for %s (%s): %s; using default %d",
                company_id, spec.slug, exc, spec.default_threshold,
            )
            return spec.default_threshold

    async def fetch_records(self, company_id: uuid.UUID, category: CategoryRef) -> list[dict]:
        """Every raw row of a category list, across pages. Empty on failure."""
        spec = get_category(category)
        rows: list[dict] = []
        page = 1
        try:
            while True:
                response = await self._http.get(
                    f"/schedule-status/{company_id}/{spec.slug}",
                    params={"page": page, "page_size": _PAGE_SIZE},
                )
                response.raise_for_status()
                body = response.json()
                rows.extend(body.get("data") or [])
                if not (body.get("meta") or {}).get("has_next"):
                    return rows
                page += 1
        except (httpx.HTTPError, ValueError, AttributeError) as exc:
            logger.warning("Failed to fetch %s list for %s: %s", spec.slug, company_id, exc)
            return []

    async def fetch_summary(self, company_id: uuid.UUID) -> dict[str, int]:
        """Needs-attention counts per category; zeros on failure."""
        try:
            response = await self._http.get(f"/schedule-status/{company_id}")
            response.raise_for_status()
            body = response.json()
            return {
                category.value: int(body.get(category.value) or 0)
                for category in ComplianceCategory
            }
        except (httpx.HTTPError, ValueError, TypeError, AttributeError) as exc:
            logger.warning("Failed to fetch schedule status for %s: %s", company_id, exc)
            return {category.value: 0 for category in ComplianceCategory}

    # ── Writes (raise ConsoleRequestError) ──────────────────────────

    async def _send(self, method: str, url: str, payload: dict[str, Any]) -> dict[str, Any]:
        try:
            response = await self._http.request(method, url, json=payload)
        except httpx.HTTPError as exc:
            raise ConsoleRequestError(f"Request failed: {exc}") from exc
        if response.is_error:
            detail, errors = _problem_detail(response)
            raise ConsoleRequestError(detail, response.status_code, errors)
        return response.json()

    async def create_record(self, category: CategoryRef, payload: dict[str, Any]) -> dict[str, Any]:
        spec = get_category(category)
        return await self._send("POST", f"/compliance/{spec.slug}", payload)

    async def update_record(
        self,
        category: CategoryRef,
        record_id: uuid.UUID,
        payload: dict[str, Any],
    ) -> dict[str, Any]:
        spec = get_category(category)
        return await self._send("PATCH", f"/compliance/{spec.slug}/{record_id}", payload)
