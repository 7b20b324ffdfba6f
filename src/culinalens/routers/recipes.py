"""API routes for recipe acquisition and reviews."""

from fastapi import APIRouter, Depends, File, HTTPException, UploadFile, status
from pydantic import BaseModel, Field

from culinalens.errors import InvalidRequest, InvalidReview, RecipeNotFound
from culinalens.logging_config import get_logger
from culinalens.routers.deps import get_controller
from culinalens.schemas import CamelModel, Recipe
from culinalens.session import AcquisitionOutcome, RecipeSessionController

logger = get_logger(__name__)

router = APIRouter(prefix="/api/v1/recipes", tags=["recipes"])

MAX_IMAGE_BYTES = 20 * 1024 * 1024
SUPERSEDED_MESSAGE = "A newer recipe request replaced this one"


# Request/Response schemas
class RecipeListResponse(BaseModel):
    """Recipes currently shown to the user."""

    recipes: list[Recipe]
    total: int


class DishNameRequest(BaseModel):
    """Request a recipe for a named dish."""

    name: str = Field(min_length=1, max_length=200)


class IngredientsRequest(BaseModel):
    """Request recipes for ingredients; the pantry list is used when omitted."""

    ingredients: list[str] | None = None


class ReviewRequest(CamelModel):
    """A user's rating and comment for a recipe."""

    rating: int
    comment: str
    user_name: str


def _acquisition_response(outcome: AcquisitionOutcome) -> RecipeListResponse:
    """Translate one acquisition's outcome into a response or an HTTP error."""
    if outcome.superseded:
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail=SUPERSEDED_MESSAGE,
        )
    if outcome.error:
        if isinstance(outcome.exception, InvalidRequest):
            raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=outcome.error)
        raise HTTPException(status_code=status.HTTP_502_BAD_GATEWAY, detail=outcome.error)
    return RecipeListResponse(recipes=outcome.recipes, total=len(outcome.recipes))


@router.get("", response_model=RecipeListResponse)
async def list_recipes(
    controller: RecipeSessionController = Depends(get_controller),
) -> RecipeListResponse:
    """Return the current result list."""
    recipes = controller.state.recipes
    return RecipeListResponse(recipes=recipes, total=len(recipes))


@router.post("/identify", response_model=RecipeListResponse)
async def identify_dish(
    image: UploadFile = File(...),
    controller: RecipeSessionController = Depends(get_controller),
) -> RecipeListResponse:
    """Identify the dish in an uploaded photo and return its recipe."""
    data = await image.read()
    if len(data) > MAX_IMAGE_BYTES:
        raise HTTPException(
            status_code=status.HTTP_413_REQUEST_ENTITY_TOO_LARGE,
            detail="Image is too large",
        )
    logger.info(f"Image upload received: {image.filename} ({image.content_type})")
    outcome = await controller.submit_image(data, image.content_type or "")
    return _acquisition_response(outcome)


@router.post("/by-name", response_model=RecipeListResponse)
async def recipe_by_name(
    request: DishNameRequest,
    controller: RecipeSessionController = Depends(get_controller),
) -> RecipeListResponse:
    """Generate a recipe for a dish name."""
    if not request.name.strip():
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Dish name must not be blank",
        )
    outcome = await controller.submit_dish_name(request.name)
    return _acquisition_response(outcome)


@router.post("/by-ingredients", response_model=RecipeListResponse)
async def recipes_by_ingredients(
    request: IngredientsRequest,
    controller: RecipeSessionController = Depends(get_controller),
) -> RecipeListResponse:
    """Suggest recipes for a list of ingredients."""
    outcome = await controller.submit_ingredients(request.ingredients)
    return _acquisition_response(outcome)


@router.get("/{recipe_id}", response_model=Recipe)
async def get_recipe(
    recipe_id: str,
    controller: RecipeSessionController = Depends(get_controller),
) -> Recipe:
    """Get a recipe from the results or the meal plan."""
    try:
        return controller.find_recipe(recipe_id)
    except RecipeNotFound as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e)) from e


@router.post("/{recipe_id}/reviews", response_model=Recipe, status_code=status.HTTP_201_CREATED)
async def add_review(
    recipe_id: str,
    request: ReviewRequest,
    controller: RecipeSessionController = Depends(get_controller),
) -> Recipe:
    """Rate a recipe and return it with the updated average."""
    try:
        return controller.add_review(recipe_id, request.rating, request.comment, request.user_name)
    except RecipeNotFound as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e)) from e
    except InvalidReview as e:
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY, detail=str(e)
        ) from e
