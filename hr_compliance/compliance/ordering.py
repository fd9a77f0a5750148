"""Filtering and sorting for evaluated compliance rows.

Shared by the API list endpoint and the console list view. Works on any
object exposing ``first_name``, ``last_name``, ``email``, ``relevant_date``
and ``status``.
"""

from __future__ import annotations

from datetime import date
from typing import Any, Iterable, Optional, Sequence, TypeVar

from hr_compliance.common.exceptions import ValidationException
from hr_compliance.compliance.evaluator import SEVERITY

R = TypeVar("R")

SORT_KEYS = ("name", "relevant_date", "status")

_SEVERITY_BY_VALUE = {status.value: rank for status, rank in SEVERITY.items()}


def _status_value(row: Any) -> str:
    status = row.status
    return status.value if hasattr(status, "value") else str(status)


def filter_rows(
    rows: Iterable[R],
    *,
    statuses: Optional[Sequence[str]] = None,
    search: Optional[str] = None,
) -> list[R]:
    """Keep rows whose status is in *statuses* and whose name/email matches *search*."""
    wanted = {str(getattr(s, "value", s)) for s in statuses} if statuses else None
    needle = search.strip().lower() if search and search.strip() else None

    kept: list[R] = []
    for row in rows:
        if wanted is not None and _status_value(row) not in wanted:
            continue
        if needle is not None:
            haystack = (row.first_name, row.last_name, row.email)
            if not any(needle in (field or "").lower() for field in haystack):
                continue
        kept.append(row)
    return kept


def sort_rows(rows: Iterable[R], sort: Optional[str]) -> list[R]:
    """Sort by ``name``, ``relevant_date`` or ``status``; ``-`` prefix for DESC.

    Rows without a relevant date sort after dated rows when ascending.
    Status sorts by urgency: missing, expired, expiring soon, active.
    """
    rows = list(rows)
    if not sort:
        return rows

    descending = sort.startswith("-")
    key_name = sort.lstrip("-")
    if key_name not in SORT_KEYS:
        raise ValidationException(
            {"sort": [f"Unknown sort key '{key_name}'. Use one of: {', '.join(SORT_KEYS)}."]},
        )

    if key_name == "name":
        def key(row: Any) -> tuple:
            return ((row.first_name or "").lower(), (row.last_name or "").lower())
    elif key_name == "relevant_date":
        def key(row: Any) -> tuple:
            return (row.relevant_date is None, row.relevant_date or date.min)
    else:
        def key(row: Any) -> tuple:
            return (_SEVERITY_BY_VALUE[_status_value(row)], (row.first_name or "").lower())

    return sorted(rows, key=key, reverse=descending)
