"""
Configuration settings for the pool export pipeline.

Uses Pydantic Settings to load environment variables for the remote endpoints,
listing query parameters, Parquet output options, and logging.
"""
from __future__ import annotations

from functools import lru_cache

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_LISTING_URL = "https://api-v3.raydium.io/pools/info/list"
DEFAULT_TOKEN_LIST_URL = (
    "https://raw.githubusercontent.com/solana-labs/token-list/main/src/tokens/solana.tokenlist.json"
)


class Settings(BaseSettings):
    # Remote endpoints
    listing_url: str = Field(DEFAULT_LISTING_URL, alias="POOLS_LISTING_URL")
    token_list_url: str = Field(DEFAULT_TOKEN_LIST_URL, alias="TOKEN_LIST_URL")

    # Listing query
    pool_type: str = Field("all", alias="POOLS_POOL_TYPE")
    pool_sort_field: str = Field("default", alias="POOLS_SORT_FIELD")
    sort_type: str = Field("desc", alias="POOLS_SORT_TYPE")
    page_size: int = Field(1000, gt=0, alias="POOLS_PAGE_SIZE")

    # HTTP
    request_timeout_seconds: float = Field(30.0, gt=0, alias="HTTP_TIMEOUT_SECONDS")
    user_agent: str = Field("pool-export/0.1.0", alias="HTTP_USER_AGENT")

    # Output
    output_path: str = Field("pools.parquet", alias="OUTPUT_PATH")
    parquet_compression: str = Field("snappy", alias="PARQUET_COMPRESSION")
    parquet_data_page_size: int = Field(1024 * 1024, gt=0, alias="PARQUET_DATA_PAGE_SIZE")

    # Application
    app_env: str = Field("development", alias="APP_ENV")
    log_level: str = Field("INFO", alias="LOG_LEVEL")
    json_logs: bool = Field(False, alias="LOG_JSON")

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        populate_by_name=True,
    )


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """
    Retrieve a cached instance of Settings to avoid repeated env parsing.
    """
    return Settings()


__all__ = ["Settings", "get_settings", "DEFAULT_LISTING_URL", "DEFAULT_TOKEN_LIST_URL"]
