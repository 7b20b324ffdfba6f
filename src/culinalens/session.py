"""Session state controller: routes user actions to state transitions."""

import asyncio
from collections.abc import Awaitable, Callable
from dataclasses import dataclass, field

from culinalens.acquire.gateway import RecipeGateway
from culinalens.config import get_settings
from culinalens.errors import (
    AcquisitionFailed,
    EmptyResponse,
    InvalidRequest,
    MalformedResponse,
    RecipeError,
    RecipeNotFound,
)
from culinalens.logging_config import LoggingContext, get_logger
from culinalens.normalize import MALFORMED_MESSAGE
from culinalens.plan import add_entry, add_review, find_planned_recipe, remove_entry, replace_recipe
from culinalens.schemas import (
    DayOfWeek,
    LoadingState,
    MealPlan,
    MealType,
    Recipe,
    SearchMode,
    SessionState,
)

logger = get_logger(__name__)

IMAGE_LOADING_MESSAGE = "Analyzing your food..."
NAME_LOADING_MESSAGE = "Creating your recipe..."
PANTRY_LOADING_MESSAGE = "Dreaming up dishes..."
EMPTY_PANTRY_MESSAGE = "Please add at least one ingredient."
TIMEOUT_MESSAGE = "The recipe request timed out. Please try again."
UNEXPECTED_MESSAGE = "An unexpected error occurred"


def error_message(error: BaseException) -> str:
    """Turn an acquisition failure into the message shown to the user."""
    if isinstance(error, MalformedResponse):
        return MALFORMED_MESSAGE
    if isinstance(error, EmptyResponse):
        return str(error) or "No response from AI"
    if isinstance(error, AcquisitionFailed):
        return f"Recipe service is unavailable: {error.cause}"
    if isinstance(error, asyncio.TimeoutError):
        return TIMEOUT_MESSAGE
    if isinstance(error, RecipeError):
        return str(error)
    return UNEXPECTED_MESSAGE


@dataclass(frozen=True)
class AcquisitionOutcome:
    """What one acquisition produced, independent of later session changes."""

    recipes: list[Recipe] = field(default_factory=list)
    error: str | None = None
    exception: BaseException | None = None
    superseded: bool = False

    @property
    def ok(self) -> bool:
        """True when the acquisition was applied without an error."""
        return self.error is None and not self.superseded


class RecipeSessionController:
    """
    Owns the single in-memory session and its transitions.

    Every acquisition takes a new generation number. When it completes, its
    result is applied only if no newer acquisition started in the meantime;
    otherwise it is dropped and its outcome is marked superseded. Callers
    read the outcome rather than the shared state, which a newer acquisition
    may already have changed.
    """

    def __init__(
        self,
        gateway: RecipeGateway,
        acquisition_timeout: float | None = None,
        state: SessionState | None = None,
    ):
        if acquisition_timeout is None:
            acquisition_timeout = get_settings().acquisition_timeout
        self.gateway = gateway
        self.acquisition_timeout = acquisition_timeout or None
        self.state = state or SessionState()
        self._generation = 0

    @property
    def generation(self) -> int:
        """Number of the most recently started acquisition."""
        return self._generation

    def _update(self, **changes) -> SessionState:
        self.state = self.state.model_copy(update=changes)
        return self.state

    def reset(self) -> SessionState:
        """Drop everything and start a fresh session."""
        self._generation += 1
        self.state = SessionState()
        logger.info("Session reset")
        return self.state

    # Navigation and pantry

    def set_mode(self, mode: SearchMode) -> SessionState:
        """Switch search mode; recipes are kept so the user can go back."""
        return self._update(mode=mode, error=None)

    def add_pantry_ingredient(self, ingredient: str) -> SessionState:
        """Add an ingredient to the pantry list, ignoring blank input."""
        cleaned = (ingredient or "").strip()
        if not cleaned:
            return self.state
        return self._update(pantry=[*self.state.pantry, cleaned])

    def remove_pantry_ingredient(self, index: int) -> SessionState:
        """Remove the pantry ingredient at a position, if it exists."""
        if not 0 <= index < len(self.state.pantry):
            return self.state
        pantry = [item for i, item in enumerate(self.state.pantry) if i != index]
        return self._update(pantry=pantry)

    # Acquisition

    async def _acquire(
        self,
        loading_message: str,
        request: Callable[[], Awaitable[list[Recipe]]],
    ) -> AcquisitionOutcome:
        self._generation += 1
        generation = self._generation

        with LoggingContext(acquisition=generation):
            self._update(
                loading=LoadingState(is_loading=True, message=loading_message),
                error=None,
                recipes=[],
            )
            try:
                if self.acquisition_timeout:
                    recipes = await asyncio.wait_for(request(), timeout=self.acquisition_timeout)
                else:
                    recipes = await request()
            except Exception as e:
                if generation != self._generation:
                    logger.info(f"Discarding failure of superseded acquisition: {e!r}")
                    return AcquisitionOutcome(exception=e, superseded=True)
                if isinstance(e, (RecipeError, asyncio.TimeoutError)):
                    logger.warning(f"Acquisition failed: {type(e).__name__}: {e}")
                else:
                    logger.exception(f"Unexpected acquisition failure: {e!r}")
                return self._fail(e)

            if generation != self._generation:
                logger.info(f"Discarding {len(recipes)} recipe(s) from superseded acquisition")
                return AcquisitionOutcome(recipes=recipes, superseded=True)

            logger.info(f"Acquired {len(recipes)} recipe(s)")
            self._update(loading=LoadingState(), recipes=recipes)
            return AcquisitionOutcome(recipes=recipes)

    def _fail(self, error: BaseException) -> AcquisitionOutcome:
        message = error_message(error)
        self._update(loading=LoadingState(), error=message)
        return AcquisitionOutcome(error=message, exception=error)

    async def submit_image(self, image: bytes, mime_type: str) -> AcquisitionOutcome:
        """Identify a dish from a photo and show its recipe."""

        async def request() -> list[Recipe]:
            return [await self.gateway.identify_and_recipe(image, mime_type)]

        return await self._acquire(IMAGE_LOADING_MESSAGE, request)

    async def submit_dish_name(self, name: str) -> AcquisitionOutcome:
        """Generate a recipe for a dish name; blank names are ignored."""
        if not (name or "").strip():
            return AcquisitionOutcome()

        async def request() -> list[Recipe]:
            return [await self.gateway.recipe_by_name(name)]

        return await self._acquire(NAME_LOADING_MESSAGE, request)

    async def submit_ingredients(self, ingredients: list[str] | None = None) -> AcquisitionOutcome:
        """Suggest recipes for the given ingredients, or the pantry list."""
        if ingredients is None:
            ingredients = list(self.state.pantry)
        if not ingredients:
            self._update(error=EMPTY_PANTRY_MESSAGE)
            return AcquisitionOutcome(
                error=EMPTY_PANTRY_MESSAGE,
                exception=InvalidRequest(EMPTY_PANTRY_MESSAGE),
            )

        async def request() -> list[Recipe]:
            return await self.gateway.recipes_by_ingredients(ingredients)

        return await self._acquire(PANTRY_LOADING_MESSAGE, request)

    # Reviews and planning

    def find_recipe(self, recipe_id: str) -> Recipe:
        """Look up a recipe among the results, then in the plan."""
        for recipe in self.state.recipes:
            if recipe.id == recipe_id:
                return recipe
        planned = find_planned_recipe(self.state.meal_plan, recipe_id)
        if planned is None:
            raise RecipeNotFound(recipe_id)
        return planned

    def add_review(self, recipe_id: str, rating: int, comment: str, user_name: str) -> Recipe:
        """Review a recipe and refresh every place it is shown."""
        updated = add_review(self.find_recipe(recipe_id), rating, comment, user_name)
        recipes = [updated if r.id == recipe_id else r for r in self.state.recipes]
        self._update(recipes=recipes, meal_plan=replace_recipe(self.state.meal_plan, updated))
        return updated

    def add_to_plan(self, recipe: Recipe, day: DayOfWeek, meal_type: MealType) -> MealPlan:
        """Place a recipe in the weekly plan."""
        plan = add_entry(self.state.meal_plan, day, meal_type, recipe)
        self._update(meal_plan=plan)
        return plan

    def remove_from_plan(self, day: DayOfWeek, meal_type: MealType, recipe_id: str) -> MealPlan:
        """Take a recipe out of a plan slot."""
        plan = remove_entry(self.state.meal_plan, day, meal_type, recipe_id)
        self._update(meal_plan=plan)
        return plan
