"""Recipe acquisition from a generative model."""

from culinalens.acquire.prompts import (
    IMAGE_PROMPT,
    RECIPE_LIST_SCHEMA,
    RECIPE_SCHEMA,
    dish_prompt,
    pantry_prompt,
)
from culinalens.config import get_settings
from culinalens.errors import AcquisitionFailed, EmptyResponse, InvalidRequest
from culinalens.generate.base import (
    GenerationConfig,
    GenerationError,
    GenerativeClient,
    InlineImagePart,
    Part,
    TextPart,
)
from culinalens.logging_config import get_logger
from culinalens.normalize import normalize_recipe, normalize_recipe_list
from culinalens.schemas import Recipe

logger = get_logger(__name__)

JSON_MIME_TYPE = "application/json"


class RecipeGateway:
    """
    Builds mode-specific generation calls and normalizes their output.

    Transport failures surface as AcquisitionFailed, missing text as
    EmptyResponse, and unparseable text as MalformedResponse. Nothing is
    retried here.
    """

    def __init__(
        self,
        client: GenerativeClient,
        text_model: str | None = None,
        image_model: str | None = None,
        image_types: frozenset[str] | None = None,
        recipes_per_search: int | None = None,
    ):
        settings = get_settings()
        self.client = client
        self.text_model = text_model or settings.gemini_text_model
        self.image_model = image_model or settings.gemini_image_model
        self.image_types = image_types if image_types is not None else settings.image_types
        self.recipes_per_search = recipes_per_search or settings.recipes_per_ingredient_search

    async def _generate_text(
        self, prompt: str | list[Part], config: GenerationConfig
    ) -> str:
        """Call the model and return its text, mapping failures to the error taxonomy."""
        try:
            result = await self.client.generate(prompt, config)
        except GenerationError as e:
            raise AcquisitionFailed(e) from e
        except Exception as e:
            logger.exception(f"Unexpected failure from {self.client.name} client")
            raise AcquisitionFailed(e) from e

        if not result.has_text:
            raise EmptyResponse()
        return result.text

    async def identify_and_recipe(self, image: bytes, mime_type: str) -> Recipe:
        """
        Identify the dish in a photo and write a recipe for it.

        The image model cannot be schema-constrained, so the prompt spells out
        the JSON shape and the normalizer strips any fences it adds.
        """
        if not image:
            raise InvalidRequest("Image must not be empty")
        mime = (mime_type or "").strip().lower()
        if mime not in self.image_types:
            raise InvalidRequest(f"Unsupported image type: {mime_type or 'unknown'}")

        logger.info(f"Identifying dish from {len(image)} byte {mime} image")
        parts: list[Part] = [InlineImagePart(data=image, mime_type=mime), TextPart(IMAGE_PROMPT)]
        text = await self._generate_text(parts, GenerationConfig(model=self.image_model))
        recipe = normalize_recipe(text)
        logger.info(f"Identified '{recipe.title}'")
        return recipe

    async def recipe_by_name(self, name: str) -> Recipe:
        """Generate a recipe for a named dish."""
        dish = (name or "").strip()
        if not dish:
            raise InvalidRequest("Dish name must not be blank")

        logger.info(f"Requesting recipe for dish: {dish}")
        config = GenerationConfig(
            model=self.text_model,
            response_mime_type=JSON_MIME_TYPE,
            response_schema=RECIPE_SCHEMA,
        )
        text = await self._generate_text(dish_prompt(dish), config)
        return normalize_recipe(text)

    async def recipes_by_ingredients(self, ingredients: list[str]) -> list[Recipe]:
        """
        Suggest recipes that mainly use the given ingredients.

        The prompt asks for a fixed number of recipes but whatever the model
        returns is passed through.
        """
        if not ingredients:
            raise InvalidRequest("At least one ingredient is required")
        cleaned = [i.strip() for i in ingredients if isinstance(i, str)]
        if len(cleaned) != len(ingredients) or not all(cleaned):
            raise InvalidRequest("Ingredients must not be blank")

        logger.info(f"Requesting recipes for {len(cleaned)} ingredients")
        config = GenerationConfig(
            model=self.text_model,
            response_mime_type=JSON_MIME_TYPE,
            response_schema=RECIPE_LIST_SCHEMA,
        )
        text = await self._generate_text(pantry_prompt(cleaned, self.recipes_per_search), config)
        recipes = normalize_recipe_list(text)
        if len(recipes) != self.recipes_per_search:
            logger.warning(
                f"Asked for {self.recipes_per_search} recipes, model returned {len(recipes)}"
            )
        return recipes
