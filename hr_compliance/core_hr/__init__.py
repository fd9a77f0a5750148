"""Core HR module — companies and the employees compliance records belong to."""

from hr_compliance.core_hr.models import Company, Employee  # noqa: F401
