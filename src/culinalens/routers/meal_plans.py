"""API routes for the weekly meal plan."""

from fastapi import APIRouter, Depends, HTTPException, status

from culinalens.errors import RecipeNotFound
from culinalens.logging_config import get_logger
from culinalens.routers.deps import get_controller
from culinalens.schemas import CamelModel, DayOfWeek, MealPlan, MealType, Recipe
from culinalens.session import RecipeSessionController

logger = get_logger(__name__)

router = APIRouter(prefix="/api/v1/meal-plan", tags=["meal-plan"])


# =============================================================================
# Request/Response Schemas
# =============================================================================


class PlanEntryRequest(CamelModel):
    """Place a known recipe into a day and meal slot."""

    recipe_id: str
    day: DayOfWeek
    meal_type: MealType


class PlannedMeal(CamelModel):
    """One planned recipe as shown in the weekly view."""

    meal_type: MealType
    recipe: Recipe


class PlanDay(CamelModel):
    """A day of the plan with its meals in slot order."""

    day: DayOfWeek
    meals: list[PlannedMeal]


class MealPlanResponse(CamelModel):
    """Weekly plan in calendar order, empty days omitted."""

    is_empty: bool
    days: list[PlanDay]


def _to_response(plan: MealPlan) -> MealPlanResponse:
    days = [
        PlanDay(
            day=day,
            meals=[
                PlannedMeal(meal_type=meal_type, recipe=item.recipe)
                for meal_type, items in slots.items()
                for item in items
            ],
        )
        for day, slots in plan.iter_days()
    ]
    return MealPlanResponse(is_empty=plan.is_empty, days=days)


# =============================================================================
# Endpoints
# =============================================================================


@router.get("", response_model=MealPlanResponse)
async def get_meal_plan(
    controller: RecipeSessionController = Depends(get_controller),
) -> MealPlanResponse:
    """Return the weekly plan grouped by day and meal type."""
    return _to_response(controller.state.meal_plan)


@router.post("/entries", response_model=MealPlanResponse, status_code=status.HTTP_201_CREATED)
async def add_plan_entry(
    request: PlanEntryRequest,
    controller: RecipeSessionController = Depends(get_controller),
) -> MealPlanResponse:
    """Add a recipe to the plan; adding it to the same slot twice has no effect."""
    try:
        recipe = controller.find_recipe(request.recipe_id)
    except RecipeNotFound as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e)) from e

    plan = controller.add_to_plan(recipe, request.day, request.meal_type)
    return _to_response(plan)


@router.delete("/{day}/{meal_type}/{recipe_id}", response_model=MealPlanResponse)
async def remove_plan_entry(
    day: DayOfWeek,
    meal_type: MealType,
    recipe_id: str,
    controller: RecipeSessionController = Depends(get_controller),
) -> MealPlanResponse:
    """Remove a recipe from a slot; missing entries are not an error."""
    plan = controller.remove_from_plan(day, meal_type, recipe_id)
    return _to_response(plan)
