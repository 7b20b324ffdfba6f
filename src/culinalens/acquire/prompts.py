"""Prompts and response schemas for recipe generation."""

import textwrap
from typing import Any

from culinalens.schemas import Difficulty

RECIPE_SCHEMA: dict[str, Any] = {
    "type": "OBJECT",
    "properties": {
        "title": {"type": "STRING"},
        "description": {"type": "STRING"},
        "ingredients": {"type": "ARRAY", "items": {"type": "STRING"}},
        "instructions": {"type": "ARRAY", "items": {"type": "STRING"}},
        "prepTime": {"type": "STRING"},
        "difficulty": {"type": "STRING", "enum": [d.value for d in Difficulty]},
        "tags": {"type": "ARRAY", "items": {"type": "STRING"}},
        "nutrition": {
            "type": "OBJECT",
            "properties": {
                "calories": {"type": "STRING", "description": "e.g. 450 kcal"},
                "protein": {"type": "STRING", "description": "e.g. 20g"},
                "carbs": {"type": "STRING", "description": "e.g. 45g"},
                "fat": {"type": "STRING", "description": "e.g. 15g"},
            },
            "required": ["calories", "protein", "carbs", "fat"],
        },
    },
    "required": [
        "title",
        "description",
        "ingredients",
        "instructions",
        "prepTime",
        "difficulty",
        "tags",
        "nutrition",
    ],
}

RECIPE_LIST_SCHEMA: dict[str, Any] = {
    "type": "ARRAY",
    "items": RECIPE_SCHEMA,
}

IMAGE_PROMPT = textwrap.dedent(
    """
    Analyze this image of food. Identify the dish.
    Then, create a detailed recipe for it.

    You MUST return the result as a raw JSON object (no markdown formatting) with the following structure:
    {
      "title": "Name of the dish",
      "description": "A short appetizing description",
      "ingredients": ["List of ingredients with quantities"],
      "instructions": ["Step-by-step cooking instructions"],
      "prepTime": "e.g., 30 mins",
      "difficulty": "Easy" or "Medium" or "Hard" or "Expert",
      "tags": ["Tag1", "Tag2"],
      "nutrition": {
         "calories": "e.g. 500 kcal",
         "protein": "e.g. 20g",
         "carbs": "e.g. 60g",
         "fat": "e.g. 15g"
      }
    }
    """
).strip()


def dish_prompt(name: str) -> str:
    """Prompt for a single recipe of a named dish."""
    return f"Create a detailed, authentic recipe for: {name}. Include nutritional breakdown."


def pantry_prompt(ingredients: list[str], count: int = 3) -> str:
    """Prompt for several recipes built mainly from the given ingredients."""
    ingredient_list = ", ".join(ingredients)
    return textwrap.dedent(
        f"""
        I have the following ingredients: {ingredient_list}.
        Suggest {count} distinct, delicious recipes I can make primarily using these ingredients (you can assume I have basic pantry staples like oil, salt, pepper, flour).
        Include nutritional breakdown for each.
        """
    ).strip()
