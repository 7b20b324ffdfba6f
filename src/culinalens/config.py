"""Application configuration using pydantic-settings."""

from functools import lru_cache

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Gemini
    gemini_api_key: str = ""
    gemini_base_url: str = "https://generativelanguage.googleapis.com/v1beta"
    gemini_text_model: str = "gemini-3-flash-preview"
    gemini_image_model: str = "gemini-2.5-flash-image"

    # Generation transport
    generation_timeout: float = 60.0  # HTTP timeout in seconds
    generation_max_attempts: int = 1  # 1 = single attempt, no transport retry

    # Acquisition
    acquisition_timeout: float | None = 90.0  # None or 0 disables the deadline
    recipes_per_ingredient_search: int = 3
    supported_image_types: str = "image/jpeg,image/png,image/webp,image/heic,image/heif"

    # Application
    environment: str = "development"
    log_level: str = "INFO"
    allowed_origins: str = "http://localhost:3000,http://localhost:8000"

    @property
    def image_types(self) -> frozenset[str]:
        """Get the supported image mime types as a set."""
        return frozenset(
            t.strip().lower() for t in self.supported_image_types.split(",") if t.strip()
        )

    @property
    def origins(self) -> list[str]:
        """Get the CORS origins as a list."""
        return [o.strip() for o in self.allowed_origins.split(",") if o.strip()]

    @property
    def is_development(self) -> bool:
        """Check if running in development mode."""
        return self.environment.lower() == "development"


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
