"""001 – Initial schema: companies, employees, schedule settings, compliance records, audit.

Revision ID: 001_initial_schema
Revises:
Create Date: 2025-06-02 09:30:00.000000+00:00
"""

from alembic import op

# Revision identifiers
revision = "001_initial_schema"
down_revision = None
branch_labels = None
depends_on = None


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

# NULL = not configured; the category default applies at read time.
SCHEDULE_DAY_COLUMNS: list[str] = [
    "passport_check_days",
    "visa_check_days",
    "dbs_check_days",
    "immigration_check_days",
    "rtw_check_days",
    "spot_check_days",
    "appraisal_check_days",
    "supervision_check_days",
    "disciplinary_check_days",
    "qa_check_days",
    "spot_check_duration",
    "supervision_duration",
    "qa_check_duration",
]

# (table, category-specific column DDL)
RECORD_TABLES: list[tuple[str, str]] = [
    (
        "passport_records",
        """
            passport_number VARCHAR(50),
            nationality     VARCHAR(100),
            issue_date      DATE,
            expiry_date     DATE,
        """,
    ),
    (
        "dbs_records",
        """
            disclosure_number VARCHAR(50),
            date_of_issue     DATE,
            expiry_date       DATE,
        """,
    ),
    (
        "immigration_records",
        """
            visa_type        VARCHAR(100),
            reference_number VARCHAR(100),
            next_check_date  DATE,
            notes            TEXT,
        """,
    ),
    (
        "right_to_work_records",
        """
            share_code      VARCHAR(20),
            expiry_date     DATE,
            next_check_date DATE,
        """,
    ),
    (
        "spot_check_records",
        """
            scheduled_date  DATE,
            completion_date DATE,
            note            TEXT,
        """,
    ),
]


def _create_record_table(name: str, columns: str) -> None:
    op.execute(f"""
        CREATE TABLE {name} (
            id           UUID PRIMARY KEY DEFAULT uuid_generate_v4(),
            employee_id  UUID NOT NULL REFERENCES employees(id),
            company_id   UUID NOT NULL REFERENCES companies(id),
            {columns.strip()}
            document_url VARCHAR(500),
            status       VARCHAR(30),
            updated_by   UUID,
            created_at   TIMESTAMPTZ DEFAULT NOW(),
            updated_at   TIMESTAMPTZ DEFAULT NOW()
        )
    """)
    op.execute(f"CREATE UNIQUE INDEX ix_{name}_employee_id ON {name}(employee_id)")
    op.execute(f"CREATE INDEX ix_{name}_company_id ON {name}(company_id)")


# ---------------------------------------------------------------------------
# UPGRADE
# ---------------------------------------------------------------------------


def upgrade() -> None:
    # ── Extensions ────────────────────────────────────────────────────────
    op.execute('CREATE EXTENSION IF NOT EXISTS "uuid-ossp"')

    # ── 1. companies ──────────────────────────────────────────────────────
    op.execute("""
        CREATE TABLE companies (
            id          UUID PRIMARY KEY DEFAULT uuid_generate_v4(),
            name        VARCHAR(200) NOT NULL,
            is_active   BOOLEAN DEFAULT TRUE,
            created_at  TIMESTAMPTZ DEFAULT NOW()
        )
    """)

    # ── 2. employees ──────────────────────────────────────────────────────
    op.execute("""
        CREATE TABLE employees (
            id            UUID PRIMARY KEY DEFAULT uuid_generate_v4(),
            company_id    UUID NOT NULL REFERENCES companies(id),
            employee_code VARCHAR(20),
            first_name    VARCHAR(100) NOT NULL,
            last_name     VARCHAR(100) DEFAULT '',
            email         VARCHAR(255) NOT NULL,
            is_active     BOOLEAN DEFAULT TRUE,
            created_at    TIMESTAMPTZ DEFAULT NOW(),
            updated_at    TIMESTAMPTZ DEFAULT NOW(),
            CONSTRAINT uq_employee_company_email UNIQUE (company_id, email)
        )
    """)
    op.execute("CREATE INDEX ix_employees_company_id ON employees(company_id)")

    # ── 3. schedule_checks ────────────────────────────────────────────────
    day_columns = ",\n            ".join(
        f"{name} INTEGER CONSTRAINT ck_schedule_checks_{name}_non_negative "
        f"CHECK ({name} >= 0)"
        for name in SCHEDULE_DAY_COLUMNS
    )
    op.execute(f"""
        CREATE TABLE schedule_checks (
            id          UUID PRIMARY KEY DEFAULT uuid_generate_v4(),
            company_id  UUID NOT NULL UNIQUE REFERENCES companies(id),
            {day_columns},
            created_at  TIMESTAMPTZ DEFAULT NOW(),
            updated_at  TIMESTAMPTZ DEFAULT NOW()
        )
    """)

    # ── 4. compliance record tables ───────────────────────────────────────
    for name, columns in RECORD_TABLES:
        _create_record_table(name, columns)

    # ── 5. audit_trail ────────────────────────────────────────────────────
    op.execute("""
        CREATE TABLE audit_trail (
            id          UUID PRIMARY KEY DEFAULT uuid_generate_v4(),
            actor_id    UUID REFERENCES employees(id),
            action      VARCHAR(50) NOT NULL,
            title       VARCHAR(150),
            entity_type VARCHAR(50) NOT NULL,
            entity_id   UUID NOT NULL,
            old_values  JSONB,
            new_values  JSONB,
            created_at  TIMESTAMPTZ NOT NULL DEFAULT NOW()
        )
    """)
    op.execute("CREATE INDEX ix_audit_trail_actor_id ON audit_trail(actor_id)")
    op.execute(
        "CREATE INDEX ix_audit_trail_entity ON audit_trail(entity_type, entity_id)"
    )
    op.execute("CREATE INDEX ix_audit_trail_created_at ON audit_trail(created_at)")


# ---------------------------------------------------------------------------
# DOWNGRADE
# ---------------------------------------------------------------------------


def downgrade() -> None:
    # Drop tables in reverse dependency order
    tables = [
        "audit_trail",
        *[name for name, _ in reversed(RECORD_TABLES)],
        "schedule_checks",
        "employees",
        "companies",
    ]
    for t in tables:
        op.execute(f"DROP TABLE IF EXISTS {t} CASCADE")
