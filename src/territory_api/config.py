"""Runtime settings for the territory assignment service."""

import json
from typing import Any, Literal, Optional

from pydantic import Field, field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


def _parse_origins(value: Any) -> tuple[str, ...]:
    """Accept a JSON array or a comma-separated string from the environment."""
    if isinstance(value, (list, tuple)):
        return tuple(str(item).strip() for item in value if str(item).strip())
    if not isinstance(value, str):
        return ()
    text = value.strip()
    if text.startswith("["):
        try:
            return _parse_origins(json.loads(text))
        except json.JSONDecodeError:
            pass
    return tuple(item.strip() for item in text.split(",") if item.strip())


class Settings(BaseSettings):
    """Environment driven configuration (``TERRITORY_*`` variables or ``.env``)."""

    model_config = SettingsConfigDict(
        env_prefix="TERRITORY_",
        case_sensitive=False,
        env_file=".env",
        env_file_encoding="utf-8",
    )

    app_name: str = "Territory Assignment API"
    api_prefix: str = "/api"
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = "INFO"
    frontend_allowed_origins: tuple[str, ...] = Field(
        default=("http://localhost:3000", "http://127.0.0.1:3000"),
        description="Browser origins allowed by CORS (the map and quotes web app).",
    )

    supabase_url: Optional[str] = Field(default=None, description="Supabase project URL.")
    supabase_key: Optional[str] = Field(
        default=None,
        description="Service key; row-level security still applies to anon keys.",
    )
    supabase_timeout_seconds: float = Field(default=10.0, gt=0.0)
    auth_enabled: bool = Field(
        default=True,
        description="Resolve caller roles from Supabase Auth. When disabled every caller is an admin.",
    )

    geocoder_base_url: str = "https://nominatim.openstreetmap.org"
    geocoder_user_agent: str = "territory-mapping-system/1.0"
    geocoder_timeout_seconds: float = Field(default=10.0, gt=0.0)

    overlap_display_limit: int = Field(default=30, ge=1, description="Rows shown by the overlap audit by default.")
    quotes_page_size: int = Field(default=20, ge=1)
    quotes_max_page_size: int = Field(default=200, ge=1)

    @field_validator("frontend_allowed_origins", mode="before")
    @classmethod
    def _split_origins(cls, value: Any) -> tuple[str, ...]:
        return _parse_origins(value)

    @field_validator("api_prefix")
    @classmethod
    def _normalise_prefix(cls, value: str) -> str:
        value = value.strip().rstrip("/")
        if value and not value.startswith("/"):
            value = f"/{value}"
        return value

    @model_validator(mode="after")
    def _check_page_sizes(self) -> "Settings":
        if self.quotes_page_size > self.quotes_max_page_size:
            raise ValueError("quotes_page_size cannot exceed quotes_max_page_size")
        return self


settings = Settings()
