"""API routes for session state, search mode and the pantry list."""

from fastapi import APIRouter, Depends
from pydantic import BaseModel, Field

from culinalens.logging_config import get_logger
from culinalens.routers.deps import get_controller
from culinalens.schemas import SearchMode, SessionState
from culinalens.session import RecipeSessionController

logger = get_logger(__name__)

router = APIRouter(prefix="/api/v1", tags=["session"])


class ModeUpdateRequest(BaseModel):
    """Request to switch search mode."""

    mode: SearchMode


class PantryAddRequest(BaseModel):
    """Request to add an ingredient to the pantry list."""

    ingredient: str = Field(max_length=200)


class PantryResponse(BaseModel):
    """Current pantry list."""

    ingredients: list[str]


@router.get("/session", response_model=SessionState)
async def get_session(
    controller: RecipeSessionController = Depends(get_controller),
) -> SessionState:
    """Return the full session state."""
    return controller.state


@router.put("/session/mode", response_model=SessionState)
async def set_mode(
    request: ModeUpdateRequest,
    controller: RecipeSessionController = Depends(get_controller),
) -> SessionState:
    """Switch search mode and clear any error."""
    return controller.set_mode(request.mode)


@router.post("/session/reset", response_model=SessionState)
async def reset_session(
    controller: RecipeSessionController = Depends(get_controller),
) -> SessionState:
    """Start over with an empty session."""
    return controller.reset()


@router.post("/pantry", response_model=PantryResponse)
async def add_pantry_ingredient(
    request: PantryAddRequest,
    controller: RecipeSessionController = Depends(get_controller),
) -> PantryResponse:
    """Add an ingredient; blank input is ignored."""
    state = controller.add_pantry_ingredient(request.ingredient)
    return PantryResponse(ingredients=state.pantry)


@router.delete("/pantry/{index}", response_model=PantryResponse)
async def remove_pantry_ingredient(
    index: int,
    controller: RecipeSessionController = Depends(get_controller),
) -> PantryResponse:
    """Remove the ingredient at a position."""
    state = controller.remove_pantry_ingredient(index)
    return PantryResponse(ingredients=state.pantry)
