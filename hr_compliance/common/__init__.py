"""Common module — shared utilities for HR Compliance."""

from hr_compliance.common.audit import AuditTrail, create_audit_entry, list_audit_entries
from hr_compliance.common.constants import (
    DATE_FORMAT,
    DEFAULT_PAGE_SIZE,
    MAX_PAGE_SIZE,
    TIMEZONE,
    BadgeColour,
    ComplianceCategory,
    ComplianceStatus,
    RowAction,
    ScheduleStatus,
    StatusFlavour,
)
from hr_compliance.common.exceptions import (
    AppException,
    ConflictError,
    NotFoundException,
    ValidationException,
    register_exception_handlers,
)
from hr_compliance.common.pagination import (
    PaginatedResponse,
    PaginationMeta,
    PaginationParams,
    paginate_items,
)

__all__ = [
    # Audit
    "AuditTrail",
    "create_audit_entry",
    "list_audit_entries",
    # Constants / Enums
    "BadgeColour",
    "ComplianceCategory",
    "ComplianceStatus",
    "RowAction",
    "ScheduleStatus",
    "StatusFlavour",
    "DATE_FORMAT",
    "TIMEZONE",
    "DEFAULT_PAGE_SIZE",
    "MAX_PAGE_SIZE",
    # Exceptions
    "AppException",
    "ConflictError",
    "NotFoundException",
    "ValidationException",
    "register_exception_handlers",
    # Pagination
    "PaginatedResponse",
    "PaginationMeta",
    "PaginationParams",
    "paginate_items",
]
