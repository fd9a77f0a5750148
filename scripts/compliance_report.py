#!/usr/bin/env python3
"""HR Compliance list report — see hr_compliance/console/report.py.

Usage:
    python scripts/compliance_report.py <company-id> passport
    python scripts/compliance_report.py <company-id> spot-check --json
    python scripts/compliance_report.py <company-id> dbs --url http://localhost:8000/api/v1
"""

from hr_compliance.console.report import main_cli

if __name__ == "__main__":
    main_cli()
