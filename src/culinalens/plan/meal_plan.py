"""Weekly meal plan transitions.

All functions are pure: they return a new plan, or the same plan object when
nothing changes, and never modify their input.
"""

from culinalens.logging_config import get_logger
from culinalens.schemas import DayOfWeek, MealPlan, MealPlanItem, MealType, Recipe

logger = get_logger(__name__)


def _with_day(plan: MealPlan, day: DayOfWeek, items: list[MealPlanItem]) -> MealPlan:
    days = dict(plan.days)
    if items:
        days[day] = items
    else:
        days.pop(day, None)
    return plan.model_copy(update={"days": days})


def add_entry(plan: MealPlan, day: DayOfWeek, meal_type: MealType, recipe: Recipe) -> MealPlan:
    """Place a recipe in a slot unless it is already there."""
    if plan.contains(day, meal_type, recipe.id):
        logger.debug(f"{recipe.id} already planned for {day.value} {meal_type.value}")
        return plan

    items = [*plan.meals_for_day(day), MealPlanItem(recipe=recipe, meal_type=meal_type)]
    logger.info(f"Planned '{recipe.title}' for {day.value} {meal_type.value}")
    return _with_day(plan, day, items)


def remove_entry(
    plan: MealPlan, day: DayOfWeek, meal_type: MealType, recipe_id: str
) -> MealPlan:
    """Remove every placement of a recipe from a slot."""
    current = plan.meals_for_day(day)
    kept = [
        item
        for item in current
        if not (item.meal_type == meal_type and item.recipe.id == recipe_id)
    ]
    if len(kept) == len(current):
        return plan

    logger.info(f"Removed {recipe_id} from {day.value} {meal_type.value}")
    return _with_day(plan, day, kept)


def replace_recipe(plan: MealPlan, recipe: Recipe) -> MealPlan:
    """Swap in a newer value of a recipe wherever it is planned."""
    changed = False
    days: dict[DayOfWeek, list[MealPlanItem]] = {}
    for day, items in plan.days.items():
        updated = []
        for item in items:
            if item.recipe.id == recipe.id and item.recipe is not recipe:
                item = item.model_copy(update={"recipe": recipe})
                changed = True
            updated.append(item)
        days[day] = updated

    if not changed:
        return plan
    return plan.model_copy(update={"days": days})


def find_planned_recipe(plan: MealPlan, recipe_id: str) -> Recipe | None:
    """Return the planned value of a recipe, if it is planned anywhere."""
    for items in plan.days.values():
        for item in items:
            if item.recipe.id == recipe_id:
                return item.recipe
    return None
