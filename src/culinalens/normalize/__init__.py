"""Normalization of generative model output into domain recipes."""

from culinalens.normalize.recipes import (
    MALFORMED_MESSAGE,
    hydrate_recipe,
    normalize_recipe,
    normalize_recipe_list,
    parse_json_document,
    strip_code_fences,
)

__all__ = [
    "MALFORMED_MESSAGE",
    "hydrate_recipe",
    "normalize_recipe",
    "normalize_recipe_list",
    "parse_json_document",
    "strip_code_fences",
]
