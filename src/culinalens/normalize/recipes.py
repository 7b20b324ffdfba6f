"""Turn generative model output into validated, hydrated recipes."""

import json
import re
from typing import Any

from pydantic import ValidationError

from culinalens.errors import MalformedResponse
from culinalens.logging_config import get_logger
from culinalens.schemas import Recipe, RecipePayload, new_id

logger = get_logger(__name__)

MALFORMED_MESSAGE = "The AI response could not be processed. Please try again."

# ```json ... ``` or ``` ... ```, trailing fence optional
_LEADING_FENCE = re.compile(r"^```(?:json)?[ \t]*\r?\n?", re.IGNORECASE)
_TRAILING_FENCE = re.compile(r"\r?\n?[ \t]*```$")


def strip_code_fences(text: str) -> str:
    """
    Remove markdown code-fence delimiters wrapped around a JSON document.

    Args:
        text: Raw model text, possibly fenced.

    Returns:
        The inner text, trimmed. Unfenced text is returned trimmed.
    """
    cleaned = text.strip()
    if not cleaned.startswith("```"):
        return cleaned
    cleaned = _LEADING_FENCE.sub("", cleaned, count=1)
    cleaned = _TRAILING_FENCE.sub("", cleaned, count=1)
    return cleaned.strip()


def parse_json_document(raw: str) -> Any:
    """Strip fences and parse JSON, raising MalformedResponse on failure."""
    if not isinstance(raw, str):
        raise MalformedResponse(MALFORMED_MESSAGE, raw=repr(raw))
    # JSONDecodeError is a ValueError; oversized integer literals raise a bare
    # ValueError and deep nesting exhausts the parser's recursion limit.
    try:
        return json.loads(strip_code_fences(raw))
    except (ValueError, RecursionError) as e:
        logger.error(f"Failed to parse JSON from model response: {e}")
        logger.debug(f"Unparseable model response: {raw[:500]}")
        raise MalformedResponse(MALFORMED_MESSAGE, raw=raw) from e


def hydrate_recipe(payload: Any, raw: str | None = None) -> Recipe:
    """
    Validate a model-authored recipe object and attach local state.

    The payload is validated against the recipe wire shape, then given a
    fresh id, no reviews and a zero rating. The input is not modified.

    Args:
        payload: Decoded JSON object for one recipe.
        raw: Original response text, kept on errors for diagnostics.

    Returns:
        A new Recipe.
    """
    if not isinstance(payload, dict):
        logger.error(f"Expected a recipe object, got {type(payload).__name__}")
        raise MalformedResponse(MALFORMED_MESSAGE, raw=raw)

    try:
        validated = RecipePayload.model_validate(payload)
    except ValidationError as e:
        logger.error(f"Recipe payload failed validation: {e.error_count()} error(s)")
        raise MalformedResponse(MALFORMED_MESSAGE, raw=raw) from e

    return Recipe(**validated.model_dump(), id=new_id(), reviews=[])


def normalize_recipe(raw: str) -> Recipe:
    """
    Normalize a single-recipe model response.

    Args:
        raw: Model text expected to hold one JSON recipe object.

    Returns:
        Hydrated Recipe.

    Raises:
        MalformedResponse: If the text is not a valid recipe object.
    """
    recipe = hydrate_recipe(parse_json_document(raw), raw=raw)
    logger.debug(f"Normalized recipe '{recipe.title}' as {recipe.id}")
    return recipe


def normalize_recipe_list(raw: str) -> list[Recipe]:
    """
    Normalize a model response holding a JSON array of recipes.

    Every element is validated and hydrated independently; one bad element
    fails the whole response.

    Raises:
        MalformedResponse: If the text is not an array of valid recipe objects.
    """
    document = parse_json_document(raw)
    if not isinstance(document, list):
        logger.error(f"Expected a recipe array, got {type(document).__name__}")
        raise MalformedResponse(MALFORMED_MESSAGE, raw=raw)

    recipes = [hydrate_recipe(item, raw=raw) for item in document]
    logger.debug(f"Normalized {len(recipes)} recipes")
    return recipes
