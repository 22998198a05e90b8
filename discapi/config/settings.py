"""Unified settings for the discography API.

Values are read from the environment or a ``.env`` file next to the package.
Everything has a development default so the API starts against a local
SQLite file with the in-process cache.
"""

from functools import lru_cache
from pathlib import Path
from typing import Dict, List, Literal

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


# Package directory (for .env file location)
_PACKAGE_DIR = Path(__file__).resolve().parent.parent


def _split_csv(value: str) -> List[str]:
    """Split comma-separated string into list."""
    return [item.strip() for item in value.split(",") if item.strip()]


class Settings(BaseSettings):
    """Settings loaded from environment variables and the .env file."""

    model_config = SettingsConfigDict(
        env_file=_PACKAGE_DIR / ".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # === Database ===
    database_url: str = Field(
        default="sqlite+aiosqlite:///./discography.db",
        description="Async SQLAlchemy URL (sqlite+aiosqlite://... or postgresql+asyncpg://...)",
    )
    database_pool_size: int = Field(
        default=5,
        description="Connection pool size (ignored for SQLite)",
        ge=1,
    )
    database_max_overflow: int = Field(
        default=10,
        description="Max pool overflow connections (ignored for SQLite)",
        ge=0,
    )

    # === Collection cache ===
    cache_backend: Literal["memory", "redis"] = Field(
        default="memory",
        description="Where paginated list payloads are stored",
    )
    redis_url: str = Field(
        default="redis://localhost:6379/0",
        description="Redis URL, used when cache_backend is 'redis'",
    )
    cache_ttl_seconds: int = Field(
        default=60,
        description="Lifetime of a cached list page",
        ge=1,
    )
    redis_socket_timeout: float = Field(
        default=2.0,
        description="Seconds before a Redis cache command fails",
        gt=0,
    )

    # === Pagination ===
    default_page: int = Field(default=1, ge=1)
    default_page_size: int = Field(default=3, ge=1)
    max_page_size: int = Field(
        default=100,
        description="Largest page size a list request may ask for; larger values are clamped",
        ge=1,
    )

    # === Auth ===
    api_tokens: str = Field(
        default="",
        description="Comma-separated token:ROLE pairs (e.g. 's3cret:ROLE_ADMIN')",
    )

    # === Versioning ===
    default_api_version: str = Field(
        default="1.0",
        description="Serialization version used when the Accept header has none",
    )

    # === Server ===
    allowed_origins: str = Field(default="*", description="Comma-separated CORS origins")
    uvicorn_host: str = Field(default="0.0.0.0")
    uvicorn_port: int = Field(default=8000)
    log_level: str = Field(default="INFO")

    @field_validator("default_api_version")
    @classmethod
    def check_version_format(cls, v: str) -> str:
        parts = v.split(".")
        if not all(part.isdigit() for part in parts):
            raise ValueError(f"API version must be dotted digits, got {v!r}")
        return v

    # === Computed Properties (derived, not from .env) ===
    @property
    def allowed_origins_list(self) -> List[str]:
        return _split_csv(self.allowed_origins)

    @property
    def token_roles(self) -> Dict[str, str]:
        """Map each configured bearer token to its role."""
        roles: Dict[str, str] = {}
        for pair in _split_csv(self.api_tokens):
            token, sep, role = pair.rpartition(":")
            if not sep or not token or not role:
                raise ValueError(f"Malformed API_TOKENS entry: {pair!r}")
            roles[token] = role
        return roles


@lru_cache()
def get_settings() -> Settings:
    """Get cached settings singleton."""
    return Settings()
