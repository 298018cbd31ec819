"""
Configuration module for dgraph-orm.

Uses pydantic-settings for environment-based configuration of the Dgraph
endpoint used to push schemas, and of the reserved type-tag field.
"""

from functools import lru_cache

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """
    Settings loaded from environment variables or a .env file.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # ===========================================
    # DGRAPH CONFIGURATION
    # ===========================================
    dgraph_url: str = Field(
        default="http://localhost:8080",
        description="Dgraph Alpha HTTP URL",
    )
    dgraph_auth_token: str | None = Field(
        default=None,
        description="Value for the X-Dgraph-AuthToken header on /alter",
    )
    dgraph_timeout: float = Field(
        default=30.0,
        description="HTTP timeout in seconds",
    )

    # ===========================================
    # MAPPING CONFIGURATION
    # ===========================================
    dgraph_type_field: str = Field(
        default="dgraph.type",
        description="Reserved type-tag field in query results and mutations",
    )


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
