"""Error taxonomy for recipe acquisition and session actions."""


class RecipeError(Exception):
    """Base exception for all recipe-level failures."""


class InvalidRequest(RecipeError, ValueError):
    """Raised when caller input violates an operation's constraints."""


class InvalidReview(InvalidRequest):
    """Raised when a review has an out-of-range rating or blank text."""


class RecipeNotFound(RecipeError, LookupError):
    """Raised when no recipe with the given id exists in the session."""

    def __init__(self, recipe_id: str):
        super().__init__(f"Recipe not found: {recipe_id}")
        self.recipe_id = recipe_id


class EmptyResponse(RecipeError):
    """Raised when the generative model returned no text."""

    def __init__(self, message: str = "No response from AI"):
        super().__init__(message)


class MalformedResponse(RecipeError):
    """Raised when model text cannot be parsed into a recipe."""

    def __init__(self, message: str, raw: str | None = None):
        super().__init__(message)
        self.raw = raw


class AcquisitionFailed(RecipeError):
    """Raised when the generative model call itself failed."""

    def __init__(self, cause: BaseException, message: str | None = None):
        super().__init__(message or f"Recipe acquisition failed: {cause}")
        self.cause = cause
