"""FastAPI application entry point."""

import uuid
from collections.abc import AsyncIterator, Awaitable, Callable
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request, Response
from fastapi.middleware.cors import CORSMiddleware

from culinalens import __version__
from culinalens.acquire import RecipeGateway
from culinalens.config import get_settings
from culinalens.generate import GeminiClient
from culinalens.logging_config import LoggingContext, configure_logging, get_logger
from culinalens.routers import meal_plans_router, recipes_router, session_router
from culinalens.session import RecipeSessionController

settings = get_settings()

# Configure logging on module load
configure_logging(settings.log_level)
logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Application lifespan handler for startup and shutdown events."""
    logger.info("Starting CulinaLens API")

    if getattr(app.state, "controller", None) is None:
        client = GeminiClient()
        if not client.api_key:
            logger.warning("GEMINI_API_KEY is not set; recipe generation will fail")
        app.state.generative_client = client
        app.state.controller = RecipeSessionController(RecipeGateway(client))
        logger.info(
            f"Session ready (text model={settings.gemini_text_model}, "
            f"image model={settings.gemini_image_model})"
        )

    yield

    logger.info("Shutting down CulinaLens API")

    client = getattr(app.state, "generative_client", None)
    if client is not None:
        try:
            await client.close()
            logger.info("Generative client closed")
        except Exception as e:
            logger.warning(f"Error closing generative client: {e}")


app = FastAPI(
    title="CulinaLens API",
    description="Recipes from food photos, dish names and pantry ingredients",
    version=__version__,
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

REQUEST_ID_HEADER = "X-Request-ID"


@app.middleware("http")
async def request_context(
    request: Request, call_next: Callable[[Request], Awaitable[Response]]
) -> Response:
    """Tag every log line of a request with its id and echo the id back."""
    request_id = request.headers.get(REQUEST_ID_HEADER) or uuid.uuid4().hex
    with LoggingContext(request_id=request_id):
        response = await call_next(request)
    response.headers[REQUEST_ID_HEADER] = request_id
    return response


app.include_router(session_router)
app.include_router(recipes_router)
app.include_router(meal_plans_router)


@app.get("/health")
async def health_check() -> dict:
    """Basic health check endpoint."""
    return {"status": "ok", "service": "culinalens-api"}


@app.get("/")
async def root() -> dict:
    """Root endpoint with API information."""
    return {
        "name": "CulinaLens API",
        "version": __version__,
        "docs": "/docs",
        "health": "/health",
    }


def run() -> None:
    """Serve the API with uvicorn."""
    import uvicorn

    uvicorn.run(
        "culinalens.main:app",
        host="0.0.0.0",
        port=8000,
        reload=settings.is_development,
        log_config=None,
    )


if __name__ == "__main__":
    run()
