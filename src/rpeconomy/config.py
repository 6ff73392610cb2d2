"""Lightweight configuration for the economy ledger."""

from __future__ import annotations

from functools import lru_cache

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings, read from the environment or a local ``.env``."""

    model_config = SettingsConfigDict(
        env_file=".env", env_file_encoding="utf-8", env_prefix="RPECONOMY_"
    )

    database_url: str = Field(
        default="sqlite:///rpeconomy.db", description="SQLAlchemy URL of the ledger database"
    )
    database_echo: bool = Field(default=False, description="Log every SQL statement")
    database_pool_size: int = Field(default=5, ge=1)
    database_max_overflow: int = Field(default=5, ge=0)
    database_pool_recycle: int = Field(
        default=1800, description="Seconds before a pooled connection is recycled"
    )
    database_pool_timeout: int = Field(default=30, ge=1)

    government_name: str = Field(default="Los Santos Government")
    government_player_id: str = Field(
        default="00000000-0000-0000-0000-000000000001",
        description="Identifier given to the synthetic government player on first bootstrap",
    )
    treasury_opening_balance: int = Field(
        default=1_000_000, ge=0, description="Treasury balance seeded when the government is created"
    )
    default_player_cash: int = Field(default=500, ge=0)
    transaction_page_size: int = Field(default=50, ge=1, le=500)
    bootstrap_on_startup: bool = Field(
        default=True, description="Create tables and the government singleton when the API starts"
    )

    log_level: str = Field(default="INFO")
    cors_origins: list[str] = Field(
        default_factory=lambda: ["http://localhost:3000", "http://127.0.0.1:3000"],
        description="Origins allowed to call the HTTP API",
    )


@lru_cache
def get_settings() -> Settings:
    """Return a cached Settings instance."""

    return Settings()
