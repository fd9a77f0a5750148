"""Print a compliance list for one company and category.

Status is evaluated locally from each row's relevant date and the company's
threshold, exactly as the list screens do.

Usage:
    hr-compliance-report <company-id> passport
    hr-compliance-report <company-id> spot-check --status overdue --status due-soon
    hr-compliance-report <company-id> dbs --as-of 2025-06-15 --json

Exit codes:
    0 = nothing needs attention
    1 = at least one row is missing, expired or expiring soon
    2 = bad arguments
"""

from __future__ import annotations

import argparse
import asyncio
import json
import sys
import uuid
from typing import Optional, Sequence

from hr_compliance.common.constants import DATE_FORMAT
from hr_compliance.common.exceptions import ValidationException
from hr_compliance.compliance.categories import CATEGORIES
from hr_compliance.compliance.evaluator import to_day
from hr_compliance.config import settings
from hr_compliance.console.client import ComplianceApiClient
from hr_compliance.console.views import ComplianceListView, ListRow
from hr_compliance.logging_config import configure_logging


def _row_dict(row: ListRow) -> dict:
    return {
        "employee_id": str(row.record.subject_id),
        "record_id": str(row.record.record_id) if row.record.record_id else None,
        "name": f"{row.first_name} {row.last_name}".strip(),
        "email": row.email,
        "relevant_date": row.relevant_date.isoformat() if row.relevant_date else None,
        "status": row.status.value,
        "label": row.label,
        "action": row.action.value,
    }


def format_table(view: ComplianceListView, rows: Sequence[ListRow]) -> str:
    lines = [
        f"{'=' * 72}",
        f"  {view.spec.title.upper()}  (threshold: {view.threshold_days} days)",
        f"{'=' * 72}",
    ]
    for row in rows:
        name = f"{row.first_name} {row.last_name}".strip()
        when = row.relevant_date.strftime(DATE_FORMAT) if row.relevant_date else "-"
        marker = "!" if row.needs_attention else " "
        lines.append(f"{marker} {name:<28} {row.email:<28} {when:<10}  {row.label}")
    if not rows:
        lines.append("  (no rows)")
    attention = sum(1 for row in rows if row.needs_attention)
    lines.append(f"{'-' * 72}")
    lines.append(f"  {len(rows)} rows, {attention} need attention")
    return "\n".join(lines)


async def run_report(
    company_id: uuid.UUID,
    category: str,
    *,
    base_url: Optional[str] = None,
    as_of: Optional[str] = None,
    statuses: Optional[Sequence[str]] = None,
    search: Optional[str] = None,
    sort: Optional[str] = None,
    client: Optional[ComplianceApiClient] = None,
) -> tuple[ComplianceListView, list[ListRow]]:
    owns_client = client is None
    client = client or ComplianceApiClient(base_url)
    try:
        view = ComplianceListView(client, category)
        await view.load(company_id)
        rows = view.rows(to_day(as_of), statuses=statuses, search=search, sort=sort)
    finally:
        if owns_client:
            await client.aclose()
    return view, rows


def build_parser() -> argparse.ArgumentParser:
    slugs = [spec.slug for spec in CATEGORIES.values()]
    parser = argparse.ArgumentParser(
        description="HR Compliance list report",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  hr-compliance-report 3f0c... passport
  hr-compliance-report 3f0c... spot-check --sort relevant_date --json
""",
    )
    parser.add_argument("company_id", type=uuid.UUID, help="Company UUID")
    parser.add_argument("category", choices=slugs, help="Compliance category")
    parser.add_argument("--url", type=str, default=settings.API_BASE_URL,
                        help=f"API base URL (default: {settings.API_BASE_URL})")
    parser.add_argument("--as-of", type=str, default=None,
                        help="Reference day, YYYY-MM-DD (default: today, UTC)")
    parser.add_argument("--status", action="append", default=None,
                        help="Only rows with this status (repeatable)")
    parser.add_argument("--search", type=str, default=None,
                        help="Name or email contains")
    parser.add_argument("--sort", type=str, default="status",
                        help='name, relevant_date or status; "-" prefix for DESC')
    parser.add_argument("--json", dest="output_json", action="store_true",
                        help="Output rows as JSON")
    return parser


def main(argv: Optional[Sequence[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    configure_logging()

    try:
        view, rows = asyncio.run(run_report(
            args.company_id,
            args.category,
            base_url=args.url,
            as_of=args.as_of,
            statuses=args.status,
            search=args.search,
            sort=args.sort,
        ))
    except ValidationException as exc:
        for field, messages in (exc.errors or {}).items():
            print(f"error: {field}: {'; '.join(messages)}", file=sys.stderr)
        return 2
    except ValueError as exc:
        print(f"error: {exc}", file=sys.stderr)
        return 2

    if args.output_json:
        print(json.dumps({
            "category": view.spec.category.value,
            "threshold_days": view.threshold_days,
            "rows": [_row_dict(row) for row in rows],
        }, indent=2))
    else:
        print(format_table(view, rows))

    return 1 if any(row.needs_attention for row in rows) else 0


def main_cli() -> None:
    sys.exit(main())


if __name__ == "__main__":
    main_cli()
