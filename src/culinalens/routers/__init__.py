"""API routers for the culinalens application."""

from culinalens.routers.meal_plans import router as meal_plans_router
from culinalens.routers.recipes import router as recipes_router
from culinalens.routers.session import router as session_router

__all__ = [
    "meal_plans_router",
    "recipes_router",
    "session_router",
]
