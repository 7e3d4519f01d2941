"""
Application Configuration

Uses Pydantic Settings for type-safe configuration.
"""

from typing import Optional
from pydantic_settings import BaseSettings
from pydantic import Field, field_validator, ConfigDict


class Settings(BaseSettings):
    """Application settings with validation."""

    # === Core ===
    log_level: str = Field(default="INFO", description="Logging level")

    # === Database ===
    database_url: str = Field(
        default="sqlite:///./courses.db",
        description="Database connection URL"
    )

    # === Course feed ===
    feed_base_url: str = Field(
        default="https://apis.data.go.kr/B551011/Durunubi",
        description="Course feed API base URL"
    )
    feed_service_key: Optional[str] = Field(default=None)
    feed_mobile_app: str = Field(default="coursepipeline")
    feed_page_size: int = Field(default=50, ge=1)
    feed_target_region: str = Field(
        default="부산",
        description="Locale prefix a feed item must start with to be kept"
    )
    feed_timeout_seconds: float = Field(default=30.0)

    # === Sync ===
    sync_concurrency: int = Field(
        default=4, ge=1,
        description="Max feed items processed at once (GPX download + geocoding)"
    )
    sync_interval_seconds: int = Field(default=24 * 3600)

    # === Course derivation ===
    running_speed_kmh: float = Field(default=9.0, gt=0)
    display_simplification_tolerance: float = Field(
        default=0.0001,
        description="Douglas-Peucker tolerance (degrees) for client display"
    )
    budget_initial_tolerance: float = Field(
        default=0.00005, gt=0,
        description="First tolerance (degrees) tried when a prompt is over budget"
    )
    budget_max_iterations: int = Field(default=32, ge=1)

    # === Reverse geocoding ===
    kakao_rest_api_key: Optional[str] = Field(default=None)
    kakao_address_url: str = Field(
        default="https://dapi.kakao.com/v2/local/geo/coord2address.json"
    )

    # === LLM ===
    openai_api_key: Optional[str] = Field(default=None)
    openai_model: str = Field(default="gpt-4o-mini")
    llm_input_max_tokens: int = Field(default=8000, ge=1)
    llm_tokenizer_encoding: str = Field(default="cl100k_base")

    @field_validator('database_url')
    @classmethod
    def fix_postgres_url(cls, v: str) -> str:
        """Fix Render/Railway postgres:// URL to postgresql://"""
        if v.startswith("postgres://"):
            return v.replace("postgres://", "postgresql://", 1)
        return v

    model_config = ConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore"
    )


# Global settings instance
settings = Settings()
