"""Shared dependencies for API routers."""

from fastapi import HTTPException, Request, status

from culinalens.session import RecipeSessionController


def get_controller(request: Request) -> RecipeSessionController:
    """Get the session controller created at application startup."""
    controller = getattr(request.app.state, "controller", None)
    if controller is None:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Session is not initialized",
        )
    return controller
