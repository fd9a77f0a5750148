"""Compliance module — status evaluation and the category registry."""

from hr_compliance.compliance.categories import CATEGORIES, CategorySpec, evaluate_for, get_category
from hr_compliance.compliance.evaluator import (
    badge_colour,
    days_between,
    evaluate,
    evaluate_schedule,
    needs_attention,
    status_label,
    to_day,
    today,
)

__all__ = [
    "CATEGORIES",
    "CategorySpec",
    "badge_colour",
    "days_between",
    "evaluate",
    "evaluate_for",
    "evaluate_schedule",
    "get_category",
    "needs_attention",
    "status_label",
    "to_day",
    "today",
]
