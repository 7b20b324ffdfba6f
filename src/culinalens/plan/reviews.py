"""Review aggregation for recipes."""

from datetime import datetime

from pydantic import ValidationError

from culinalens.errors import InvalidReview
from culinalens.logging_config import get_logger
from culinalens.schemas import MAX_RATING, MIN_RATING, Recipe, Review, average_rating, new_id

logger = get_logger(__name__)


def build_review(
    rating: int,
    comment: str,
    user_name: str,
    review_id: str | None = None,
    date: datetime | None = None,
) -> Review:
    """
    Create a validated review.

    Raises:
        InvalidReview: If rating is not an integer in [MIN_RATING, MAX_RATING]
            or text is blank.
    """
    data = {
        "id": review_id or new_id(),
        "rating": rating,
        "comment": comment,
        "user_name": user_name,
    }
    if date is not None:
        data["date"] = date

    try:
        return Review.model_validate(data)
    except ValidationError as e:
        fields = ", ".join(str(err["loc"][0]) for err in e.errors() if err.get("loc"))
        raise InvalidReview(f"Invalid review ({fields})") from e


def add_review(
    recipe: Recipe,
    rating: int,
    comment: str,
    user_name: str,
    *,
    review_id: str | None = None,
    date: datetime | None = None,
) -> Recipe:
    """
    Append a review to a recipe.

    Args:
        recipe: Recipe to review; left unchanged.
        rating: Star rating, 1 to 5.
        comment: Review text.
        user_name: Display name of the reviewer.
        review_id: Explicit id, generated when omitted.
        date: Creation time, now (UTC) when omitted.

    Returns:
        New Recipe with the review last and the mean rating recomputed.
    """
    review = build_review(rating, comment, user_name, review_id=review_id, date=date)
    updated = recipe.model_copy(update={"reviews": [*recipe.reviews, review]})
    logger.info(
        f"Review {review.id} added to {recipe.id}: {review.rating}/{MAX_RATING}, "
        f"now {updated.rating:.2f} over {len(updated.reviews)}"
    )
    return updated


__all__ = ["MAX_RATING", "MIN_RATING", "add_review", "average_rating", "build_review"]
