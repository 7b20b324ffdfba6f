"""Domain schemas shared across acquisition, planning and the API."""

import secrets
import string
from collections.abc import Iterator
from datetime import datetime, timezone
from enum import Enum
from typing import Annotated, Any

from pydantic import BaseModel, ConfigDict, Field, computed_field, field_validator
from pydantic.alias_generators import to_camel

ID_ALPHABET = string.ascii_lowercase + string.digits
ID_LENGTH = 9

MIN_RATING = 1
MAX_RATING = 5


def new_id(length: int = ID_LENGTH) -> str:
    """Generate a short random alphanumeric identifier for session-local use."""
    return "".join(secrets.choice(ID_ALPHABET) for _ in range(length))


class Difficulty(str, Enum):
    """How demanding a recipe is to cook."""

    EASY = "Easy"
    MEDIUM = "Medium"
    HARD = "Hard"
    EXPERT = "Expert"


class DayOfWeek(str, Enum):
    """Days of the planning week, in calendar order."""

    MONDAY = "Monday"
    TUESDAY = "Tuesday"
    WEDNESDAY = "Wednesday"
    THURSDAY = "Thursday"
    FRIDAY = "Friday"
    SATURDAY = "Saturday"
    SUNDAY = "Sunday"


class MealType(str, Enum):
    """Meal slots within a day, in serving order."""

    BREAKFAST = "Breakfast"
    LUNCH = "Lunch"
    DINNER = "Dinner"


class SearchMode(str, Enum):
    """Which way the user is currently looking for recipes."""

    CAMERA = "camera"
    SEARCH = "search"
    PANTRY = "pantry"
    PLANNER = "planner"


class CamelModel(BaseModel):
    """Immutable model serialized with camelCase field names."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        frozen=True,
        extra="ignore",
    )


class Nutrition(CamelModel):
    """Per-serving nutrition as free-text magnitudes (e.g. "450 kcal")."""

    calories: str
    protein: str
    carbs: str
    fat: str

    @field_validator("calories", "protein", "carbs", "fat", mode="before")
    @classmethod
    def coerce_text(cls, v: Any) -> Any:
        """Accept bare numbers from the model as text."""
        if isinstance(v, (int, float)) and not isinstance(v, bool):
            return str(v)
        return v


class RecipePayload(CamelModel):
    """Recipe fields as authored by the generative model."""

    title: str
    description: str
    ingredients: list[str]
    instructions: list[str]
    prep_time: str
    difficulty: Difficulty
    tags: list[str]
    nutrition: Nutrition

    @field_validator("ingredients", "instructions", "tags", mode="before")
    @classmethod
    def coerce_text_list(cls, v: Any) -> Any:
        """Wrap a lone string and stringify numeric entries."""
        if isinstance(v, str):
            return [v]
        if isinstance(v, list):
            return [
                str(item) if isinstance(item, (int, float)) and not isinstance(item, bool) else item
                for item in v
            ]
        return v

    @field_validator("difficulty", mode="before")
    @classmethod
    def normalize_difficulty(cls, v: Any) -> Any:
        """Match difficulty labels case-insensitively."""
        if isinstance(v, str):
            label = v.strip().lower()
            for member in Difficulty:
                if member.value.lower() == label:
                    return member
        return v


class Review(CamelModel):
    """A single user rating with a comment."""

    id: str = Field(default_factory=new_id)
    rating: Annotated[int, Field(ge=MIN_RATING, le=MAX_RATING, strict=True)]
    comment: str = Field(min_length=1)
    user_name: str = Field(min_length=1)
    date: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))

    @field_validator("comment", "user_name", mode="before")
    @classmethod
    def strip_text(cls, v: Any) -> Any:
        """Trim surrounding whitespace so blank text fails min_length."""
        if isinstance(v, str):
            return v.strip()
        return v


def average_rating(reviews: list[Review]) -> float:
    """Arithmetic mean of review ratings, 0.0 when there are none."""
    if not reviews:
        return 0.0
    return sum(r.rating for r in reviews) / len(reviews)


class Recipe(RecipePayload):
    """Recipe hydrated with its session identity and review state."""

    id: str
    reviews: list[Review] = Field(default_factory=list)

    @computed_field  # type: ignore[prop-decorator]
    @property
    def rating(self) -> float:
        """Mean rating over all reviews."""
        return average_rating(self.reviews)


class MealPlanItem(CamelModel):
    """A recipe placed into one meal slot."""

    recipe: Recipe
    meal_type: MealType


class MealPlan(CamelModel):
    """Weekly plan of recipes keyed by day; absent days are empty."""

    days: dict[DayOfWeek, list[MealPlanItem]] = Field(default_factory=dict)

    def meals_for_day(self, day: DayOfWeek) -> list[MealPlanItem]:
        return list(self.days.get(day, []))

    def meals_for(self, day: DayOfWeek, meal_type: MealType) -> list[MealPlanItem]:
        return [item for item in self.days.get(day, []) if item.meal_type == meal_type]

    def contains(self, day: DayOfWeek, meal_type: MealType, recipe_id: str) -> bool:
        return any(item.recipe.id == recipe_id for item in self.meals_for(day, meal_type))

    @property
    def is_empty(self) -> bool:
        return not any(self.days.values())

    def iter_days(self) -> Iterator[tuple[DayOfWeek, dict[MealType, list[MealPlanItem]]]]:
        """Yield non-empty days in calendar order with meals grouped by slot."""
        for day in DayOfWeek:
            items = self.days.get(day)
            if not items:
                continue
            grouped = {
                meal_type: [item for item in items if item.meal_type == meal_type]
                for meal_type in MealType
            }
            yield day, {k: v for k, v in grouped.items() if v}


class LoadingState(CamelModel):
    """Whether an acquisition is in flight and what to tell the user."""

    is_loading: bool = False
    message: str = ""


class SessionState(CamelModel):
    """Everything the user is currently looking at."""

    mode: SearchMode = SearchMode.CAMERA
    pantry: list[str] = Field(default_factory=list)
    recipes: list[Recipe] = Field(default_factory=list)
    meal_plan: MealPlan = Field(default_factory=MealPlan)
    loading: LoadingState = Field(default_factory=LoadingState)
    error: str | None = None
