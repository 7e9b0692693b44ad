"""Configuration using pydantic-settings."""

from pydantic import field_validator
from pydantic_settings import BaseSettings

DEFAULT_SIZE = 128
DEFAULT_BG_COLOR = "cccccc"
DEFAULT_AVATAR_BG = "f0e9e9"
DEFAULT_AVATAR_NAME = "John Doe"
FALLBACK_GRAY = (200, 200, 200)


class Settings(BaseSettings):
    """Application settings with validation and constants."""

    host: str = "0.0.0.0"  # nosec B104 - Required for container deployment
    port: int = 8080
    log_level: str = "INFO"
    log_file: str | None = None

    # Cache settings
    cache_size: int = 2000

    # Rate limiting
    rate_limit_enabled: bool = True
    rate_limit_rpm: int = 100
    rate_limit_burst: int = 10
    rate_limit_cleanup_interval: float = 600.0
    rate_limit_idle_timeout: float = 600.0

    # Text layout
    min_width_for_quote: int = 300
    min_font_size: int = 16
    max_font_size: int = 48
    min_chars_per_line: int = 10

    # Resources
    font_regular_path: str | None = None
    font_bold_path: str | None = None
    quotes_file: str | None = None
    jokes_file: str | None = None

    @field_validator(
        "cache_size",
        "rate_limit_rpm",
        "rate_limit_burst",
        "rate_limit_cleanup_interval",
        "rate_limit_idle_timeout",
        "min_width_for_quote",
        "min_font_size",
        "max_font_size",
        "min_chars_per_line",
    )
    @classmethod
    def validate_positive(cls, value: float) -> float:
        if value <= 0:
            raise ValueError("must be greater than zero")
        return value

    class Config:
        """Pydantic config."""

        env_prefix = "GROUT_"
        env_file = ".env"
        extra = "ignore"


settings = Settings()


def get_settings() -> Settings:
    """Get settings instance (for dependency injection)."""
    return settings
