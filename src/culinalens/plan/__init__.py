"""Meal planning and recipe review state transitions."""

from culinalens.plan.meal_plan import (
    add_entry,
    find_planned_recipe,
    remove_entry,
    replace_recipe,
)
from culinalens.plan.reviews import add_review, average_rating, build_review

__all__ = [
    "add_entry",
    "add_review",
    "average_rating",
    "build_review",
    "find_planned_recipe",
    "remove_entry",
    "replace_recipe",
]
