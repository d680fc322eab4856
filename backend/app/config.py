"""Application configuration and settings."""

from pathlib import Path

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

_BASE_DIR = Path(__file__).resolve().parents[2]
_ENV_FILE = _BASE_DIR / ".env"


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=_ENV_FILE, env_file_encoding="utf-8", extra="ignore"
    )

    app_name: str = Field(default="Travel Planner", description="Display name")
    log_level: str = Field(default="INFO", description="Root log level")

    # Database
    database_url: str = Field(
        default="sqlite:///travel_planner.db",
        description="SQLAlchemy database URL",
    )
    redis_url: str = Field(
        default="redis://localhost:6379/0",
        description="Redis connection URL (persisted rate cache)",
    )

    # CORS
    ui_origin: str = Field(
        default="http://localhost:3000",
        description="Allowed CORS origin for UI",
    )

    # Trips
    default_currency: str = Field(
        default="EUR", description="Currency used when a trip does not set one"
    )
    reassign_on_update: bool = Field(
        default=True,
        description="Re-run day assignment when an activity's start time is updated",
    )

    # Exchange rates
    fx_api_base_url: str = Field(
        default="https://api.exchangerate-api.com/v4/latest",
        description="Exchange rate endpoint, base currency is appended to the path",
    )
    fx_ttl_seconds: int = Field(default=3600, description="Rate table cache TTL")
    fx_timeout_s: float = Field(default=5.0, description="Rate lookup timeout")

    # Place suggestions
    places_api_url: str = Field(
        default="https://nominatim.openstreetmap.org/search",
        description="Place search endpoint",
    )
    places_user_agent: str = Field(
        default="TravelPlannerApp/1.0", description="User-Agent sent to place search"
    )
    places_limit: int = Field(default=5, description="Max suggestions per query")
    places_min_query_length: int = Field(
        default=2, description="Queries shorter than this are not sent upstream"
    )
    places_debounce_ms: int = Field(
        default=300, description="Client-side debounce advertised to the UI"
    )
    places_timeout_s: float = Field(default=5.0, description="Place search timeout")

    # Exports
    pdf_brand: str = Field(
        default="Travel Planner", description="Footer label for exported documents"
    )

    @field_validator("database_url", mode="after")
    @classmethod
    def _normalize_sqlite_url(cls, value: str) -> str:
        """Ensure sqlite URLs always point to the repo root."""
        sqlite_prefixes = ("sqlite:///", "sqlite+pysqlite:///")
        for prefix in sqlite_prefixes:
            if value.startswith(prefix):
                path = value[len(prefix) :]
                if path and not path.startswith("/") and path != ":memory:":
                    abs_path = (_BASE_DIR / path).resolve()
                    return f"{prefix}{abs_path.as_posix()}"
        return value

    @field_validator("default_currency", mode="after")
    @classmethod
    def _upper_currency(cls, value: str) -> str:
        return value.strip().upper()


_settings: Settings | None = None


def get_settings() -> Settings:
    """Get application settings singleton."""
    global _settings
    if _settings is None:
        _settings = Settings()
    return _settings
