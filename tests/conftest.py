"""Pytest configuration and shared fixtures."""

import json
from typing import Any

import pytest

from culinalens.acquire import RecipeGateway
from culinalens.generate.base import (
    GenerationConfig,
    GenerationResult,
    GenerativeClient,
    Part,
)
from culinalens.normalize import hydrate_recipe

# =============================================================================
# Pytest Configuration
# =============================================================================


def pytest_configure(config):
    """Register custom markers."""
    config.addinivalue_line(
        "markers", "integration: marks tests as integration tests (require external services)"
    )


# =============================================================================
# Stub Generative Client
# =============================================================================


class StubGenerativeClient(GenerativeClient):
    """Generative client that replays canned responses and records calls."""

    def __init__(self, responses: list[Any] | None = None):
        self.responses = list(responses or [])
        self.calls: list[tuple[str | list[Part], GenerationConfig | None]] = []

    @property
    def name(self) -> str:
        return "stub"

    async def generate(
        self,
        prompt: str | list[Part],
        config: GenerationConfig | None = None,
    ) -> GenerationResult:
        self.calls.append((prompt, config))
        response = self.responses.pop(0)
        if isinstance(response, BaseException):
            raise response
        return GenerationResult(text=response, model=config.model if config else None)


# =============================================================================
# Recipe Payload Fixtures
# =============================================================================


@pytest.fixture
def recipe_payload() -> dict[str, Any]:
    """A recipe object as the model writes it."""
    return {
        "title": "Spinach and Feta Omelette",
        "description": "A fluffy omelette folded around wilted spinach and salty feta.",
        "ingredients": ["3 eggs", "1 cup baby spinach", "30g feta", "1 tsp butter"],
        "instructions": [
            "Whisk the eggs with a pinch of salt.",
            "Wilt the spinach in butter.",
            "Pour in the eggs and cook until just set.",
            "Add feta, fold and serve.",
        ],
        "prepTime": "15 mins",
        "difficulty": "Easy",
        "tags": ["Breakfast", "Vegetarian"],
        "nutrition": {
            "calories": "350 kcal",
            "protein": "24g",
            "carbs": "4g",
            "fat": "26g",
        },
    }


@pytest.fixture
def second_recipe_payload(recipe_payload) -> dict[str, Any]:
    """Another valid recipe object."""
    return {
        **recipe_payload,
        "title": "Egg and Spinach Fried Rice",
        "difficulty": "Medium",
        "prepTime": "25 mins",
        "tags": ["Dinner", "Quick"],
    }


@pytest.fixture
def recipe_json(recipe_payload) -> str:
    """The recipe payload serialized as the model would return it."""
    return json.dumps(recipe_payload)


@pytest.fixture
def make_recipe(recipe_payload):
    """Factory for hydrated recipes with optional field overrides."""

    def _make(**overrides: Any):
        return hydrate_recipe({**recipe_payload, **overrides})

    return _make


@pytest.fixture
def stub_client() -> StubGenerativeClient:
    """Stub client with no queued responses."""
    return StubGenerativeClient()


@pytest.fixture
def gateway(stub_client) -> RecipeGateway:
    """Gateway over the stub client with fixed models."""
    return RecipeGateway(
        stub_client,
        text_model="text-model",
        image_model="image-model",
        image_types=frozenset({"image/jpeg", "image/png"}),
        recipes_per_search=3,
    )
