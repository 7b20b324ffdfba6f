"""Recipe acquisition from generative models."""

from culinalens.acquire.gateway import RecipeGateway

__all__ = ["RecipeGateway"]
