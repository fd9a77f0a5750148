"""Registry of compliance categories.

One ``CategorySpec`` per category holds everything that used to be
repeated by hand per screen: the record model, which column drives the
status, which schedule-settings field holds the threshold and the default
that applies when a company has not configured one.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Union

from hr_compliance.common.constants import ComplianceCategory, StatusFlavour
from hr_compliance.common.exceptions import NotFoundException
from hr_compliance.compliance.evaluator import DateLike, Status, evaluate_flavour
from hr_compliance.compliance.models import (
    DbsRecord,
    ImmigrationRecord,
    PassportRecord,
    RightToWorkRecord,
    SpotCheckRecord,
)


@dataclass(frozen=True)
class CategorySpec:
    category: ComplianceCategory
    slug: str
    title: str
    audit_title: str
    model: type
    relevant_field: str
    settings_field: str
    default_threshold: int
    flavour: StatusFlavour
    profile_tab: str
    detail_fields: tuple[str, ...]
    required_fields: tuple[str, ...] = ()
    future_only: bool = False

    def evaluate(
        self,
        relevant_date: DateLike,
        threshold_days: int,
        reference_date: DateLike = None,
    ) -> Status:
        return evaluate_flavour(self.flavour, relevant_date, threshold_days, reference_date)


CATEGORIES: dict[ComplianceCategory, CategorySpec] = {
    ComplianceCategory.passport: CategorySpec(
        category=ComplianceCategory.passport,
        slug="passport",
        title="Passport Expiry",
        audit_title="Passport Renewed/Updated",
        model=PassportRecord,
        relevant_field="expiry_date",
        settings_field="passport_check_days",
        default_threshold=0,
        flavour=StatusFlavour.expiry,
        profile_tab="passport",
        detail_fields=("passport_number", "nationality", "issue_date"),
        required_fields=("passport_number",),
    ),
    ComplianceCategory.dbs: CategorySpec(
        category=ComplianceCategory.dbs,
        slug="dbs",
        title="DBS Status",
        audit_title="DBS Renewed/Updated",
        model=DbsRecord,
        relevant_field="expiry_date",
        settings_field="dbs_check_days",
        default_threshold=0,
        flavour=StatusFlavour.expiry,
        profile_tab="dbs",
        detail_fields=("disclosure_number", "date_of_issue"),
        required_fields=("disclosure_number", "date_of_issue"),
    ),
    ComplianceCategory.immigration: CategorySpec(
        category=ComplianceCategory.immigration,
        slug="immigration",
        title="Immigration Status",
        audit_title="Immigration Status Check Updated",
        model=ImmigrationRecord,
        relevant_field="next_check_date",
        settings_field="immigration_check_days",
        default_threshold=0,
        flavour=StatusFlavour.expiry,
        profile_tab="immigration",
        detail_fields=("visa_type", "reference_number", "notes"),
        future_only=True,
    ),
    ComplianceCategory.right_to_work: CategorySpec(
        category=ComplianceCategory.right_to_work,
        slug="right-to-work",
        title="Right to Work",
        audit_title="Right to Work Updated",
        model=RightToWorkRecord,
        relevant_field="expiry_date",
        settings_field="rtw_check_days",
        default_threshold=0,
        flavour=StatusFlavour.expiry,
        profile_tab="rtw",
        detail_fields=("share_code", "next_check_date"),
    ),
    ComplianceCategory.spot_check: CategorySpec(
        category=ComplianceCategory.spot_check,
        slug="spot-check",
        title="Spot Check",
        audit_title="Spot Check Rescheduled",
        model=SpotCheckRecord,
        relevant_field="scheduled_date",
        settings_field="spot_check_days",
        default_threshold=30,
        flavour=StatusFlavour.schedule,
        profile_tab="spotcheck",
        detail_fields=("completion_date", "note"),
        future_only=True,
    ),
}

_BY_SLUG: dict[str, CategorySpec] = {spec.slug: spec for spec in CATEGORIES.values()}


def get_category(value: Union[ComplianceCategory, str]) -> CategorySpec:
    """Resolve a category enum, enum value (``right_to_work``) or slug (``right-to-work``)."""
    if isinstance(value, ComplianceCategory):
        return CATEGORIES[value]
    spec = _BY_SLUG.get(value)
    if spec is not None:
        return spec
    try:
        return CATEGORIES[ComplianceCategory(value)]
    except ValueError:
        raise NotFoundException("Compliance category", value) from None


def evaluate_for(
    category: Union[ComplianceCategory, str],
    relevant_date: DateLike,
    threshold_days: int,
    reference_date: DateLike = None,
) -> Status:
    """Evaluate with the status flavour of *category*."""
    return get_category(category).evaluate(relevant_date, threshold_days, reference_date)
