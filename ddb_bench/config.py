"""
Configuration settings for the DynamoDB adapter bench.

Uses Pydantic Settings to load environment variables for the backend endpoint,
logging, and benchmark defaults. The only required piece of process
configuration is `MOCK_DYNAMODB_ENDPOINT`; everything else has a default
suited to a local DynamoDB-compatible backend.
"""
from __future__ import annotations

from functools import lru_cache
from typing import Dict, Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    # Backend
    mock_dynamodb_endpoint: Optional[str] = Field(None, alias="MOCK_DYNAMODB_ENDPOINT")
    aws_region: str = Field("local", alias="AWS_REGION")
    aws_access_key_id: str = Field("local", alias="AWS_ACCESS_KEY_ID")
    aws_secret_access_key: str = Field("local", alias="AWS_SECRET_ACCESS_KEY")
    table_name: str = Field("LargeItem", alias="DYNAMODB_TABLE_NAME")
    capacity_units: int = Field(1_000_000, alias="DYNAMODB_CAPACITY_UNITS")
    # The workload is many thousands of sequential round trips.
    request_timeout_seconds: float = Field(1_000.0, alias="REQUEST_TIMEOUT_SECONDS")

    # Application
    app_env: str = Field("development", alias="APP_ENV")
    log_level: str = Field("INFO", alias="LOG_LEVEL")
    log_json: bool = Field(False, alias="LOG_JSON")

    # Benchmark defaults
    dataset_size: int = Field(1_000, alias="BENCHMARK_DATASET_SIZE")
    get_rounds: int = Field(10_000, alias="BENCHMARK_GET_ROUNDS")
    scan_rounds: int = Field(50, alias="BENCHMARK_SCAN_ROUNDS")
    query_rounds: int = Field(1_000, alias="BENCHMARK_QUERY_ROUNDS")

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        populate_by_name=True,
    )

    def rounds_by_kind(self) -> Dict[str, int]:
        """Repetition count per logical operation kind."""
        return {
            "get": self.get_rounds,
            "scan": self.scan_rounds,
            "query": self.query_rounds,
        }


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """
    Retrieve a cached instance of Settings to avoid repeated env parsing.
    """
    return Settings()


__all__ = ["Settings", "get_settings"]
