from functools import lru_cache

from typing import Literal

from pydantic import Field, computed_field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Strongly typed configuration sourced from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    app_name: str = Field(default="RAG Resilience Analyzer")
    environment: Literal["dev", "test", "staging", "prod"] = Field(default="dev")
    debug: bool = Field(default=False)

    display_decimals: int = Field(default=2, ge=0, le=6, description="Rounding applied to displayed averages and statistics")
    instrumentation_enabled: bool = Field(default=True, description="Record timings and counters for analysis runs")
    max_survey_rows: int = Field(default=50_000, ge=2, description="Upper bound on rows accepted by the HTTP surface")

    @field_validator("app_name", mode="before")
    @classmethod
    def _strip_app_name(cls, value: object) -> object:
        if isinstance(value, str):
            stripped = value.strip()
            return stripped or "RAG Resilience Analyzer"
        return value

    @computed_field(return_type=bool)
    def is_production(self) -> bool:
        return self.environment == "prod"


@lru_cache
def get_settings() -> Settings:
    return Settings()


settings = get_settings()
