from __future__ import annotations

import json
from pathlib import Path
from typing import Annotated, Any

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, NoDecode, SettingsConfigDict

# services/api/app/core/config.py -> BASE_DIR == services/api
BASE_DIR = Path(__file__).resolve().parents[2]
DEFAULT_CATALOG_SNAPSHOT_PATH = BASE_DIR / "data" / "movies.json"

DEFAULT_PRELOAD_KEYWORDS = [
    "zombie",
    "green",
    "thor",
    "mission",
    "x-men",
    "red",
    "batman",
    "ocean",
    "victory",
    "king",
    "night",
    "ultimate",
    "captain",
    "young",
    "iron",
    "earth",
    "spider",
    "power",
    "love",
    "war",
    "dark",
    "queen",
    "john",
    "fast",
    "action",
    "harry",
]


def _parse_list(v: Any, *, field: str) -> list[str]:
    """
    Supported env formats:
      - JSON list: '["http://localhost:5173"]'
      - Bracket list (no quotes): '[http://localhost:5173, http://localhost:3000]'
      - Comma-separated: 'http://localhost:5173, http://localhost:3000'
    """
    if v is None:
        return []
    if isinstance(v, list):
        return [str(x).strip() for x in v if str(x).strip()]
    if not isinstance(v, str):
        raise TypeError(f"{field} must be a string or list of strings")

    s = v.strip()
    if not s:
        return []

    # Try JSON first for strings that look like JSON arrays
    if s.startswith("[") and s.endswith("]"):
        try:
            parsed = json.loads(s)
            if isinstance(parsed, list):
                return [str(x).strip() for x in parsed if str(x).strip()]
        except json.JSONDecodeError:
            # Not JSON, treat as a simple bracket list without quotes
            inner = s[1:-1].strip()
            if not inner:
                return []
            parts = [p.strip().strip('"').strip("'") for p in inner.split(",")]
            return [p for p in parts if p]

    parts = [p.strip() for p in s.split(",")]
    return [p for p in parts if p]


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=str(BASE_DIR / ".env"),
        extra="ignore",
        env_prefix="",
        case_sensitive=False,
    )

    # Environment
    env: str = Field(default="dev", validation_alias="ENV")

    # Application
    api_name: str = Field(default="moovy-api", validation_alias="API_NAME")
    log_level: str = Field(default="INFO", validation_alias="LOG_LEVEL")
    user_agent: str = Field(default="Moovy/0.1", validation_alias="USER_AGENT")

    # Database & cache
    database_url: str = Field(
        default="sqlite+pysqlite:///./moovy.db",
        validation_alias="DATABASE_URL",
    )
    redis_url: str = Field(
        default="redis://localhost:6379/0", validation_alias="REDIS_URL"
    )

    # Audio reviews. Stored paths are relative to media_root.
    media_root: str = Field(default=str(BASE_DIR), validation_alias="MEDIA_ROOT")
    audio_upload_dir: str = Field(
        default="uploads/audio_reviews", validation_alias="AUDIO_UPLOAD_DIR"
    )

    @field_validator("audio_upload_dir")
    @classmethod
    def relative_upload_dir(cls, v: str) -> str:
        s = v.strip().replace("\\", "/").strip("/")
        if not s or ".." in s.split("/"):
            raise ValueError("AUDIO_UPLOAD_DIR must be a relative path inside MEDIA_ROOT")
        return s

    # CORS
    cors_origins: Annotated[list[str], NoDecode] = Field(
        default_factory=lambda: ["http://localhost:5173"],
        validation_alias="CORS_ORIGINS",
    )

    @field_validator("cors_origins", mode="before")
    @classmethod
    def parse_cors_origins(cls, v: Any) -> list[str]:
        if isinstance(v, str) and v.strip() == "*":
            return ["*"]
        return _parse_list(v, field="cors_origins")

    # Catalog provider
    catalog_provider: str = Field(
        default="imdbapi", validation_alias="CATALOG_PROVIDER"
    )
    catalog_base_url: str = Field(
        default="https://api.imdbapi.dev", validation_alias="CATALOG_BASE_URL"
    )
    catalog_timeout_secs: float = Field(
        default=15.0, validation_alias="CATALOG_TIMEOUT_SECS"
    )
    catalog_snapshot_path: str = Field(
        default=str(DEFAULT_CATALOG_SNAPSHOT_PATH),
        validation_alias="CATALOG_SNAPSHOT_PATH",
    )

    # Catalog preload
    preload_keywords: Annotated[list[str], NoDecode] = Field(
        default_factory=lambda: list(DEFAULT_PRELOAD_KEYWORDS),
        validation_alias="PRELOAD_KEYWORDS",
    )

    @field_validator("preload_keywords", mode="before")
    @classmethod
    def parse_preload_keywords(cls, v: Any) -> list[str]:
        return _parse_list(v, field="preload_keywords")

    preload_max_pages: int = Field(default=3, ge=1, validation_alias="PRELOAD_MAX_PAGES")
    preload_page_size: int = Field(
        default=50, ge=1, validation_alias="PRELOAD_PAGE_SIZE"
    )

    # Rate limiting
    rate_limit_window_seconds: int = Field(
        default=60, validation_alias="RATE_LIMIT_WINDOW_SECONDS"
    )
    rate_limit_search_per_window: int = Field(
        default=30, validation_alias="RATE_LIMIT_SEARCH_PER_WINDOW"
    )

    # Workers
    worker_job_timeout_secs: int = Field(
        default=600, validation_alias="WORKER_JOB_TIMEOUT_SECS"
    )

    # OpenTelemetry
    otel_enabled: bool = Field(default=False, validation_alias="OTEL_ENABLED")
    otel_otlp_endpoint: str = Field(
        default="http://localhost:4317",
        validation_alias="OTEL_OTLP_ENDPOINT",
    )


settings = Settings()
