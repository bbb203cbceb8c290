"""Configuration: thresholds, fallback parameters, model settings."""

from __future__ import annotations

from pydantic import BaseModel, Field
from pydantic_settings import BaseSettings


class FallbackSettings(BaseModel):
    base_min: float = 3.0
    base_max: float = 5.0
    high_adjustment: float = 0.5
    medium_adjustment: float = 0.2
    low_adjustment: float = 0.0
    jitter: float = Field(default=0.5, ge=0.0)
    score_floor: float = 1.0
    score_ceiling: float = 5.0
    yes_threshold: float = 4.0
    partial_threshold: float = 2.5
    min_features: int = 3
    max_features: int = 5


class InsightThresholds(BaseModel):
    mature_rating: float = 4.2
    established_rating: float = 3.8
    top_performer_score: float = 4.0
    highly_competitive_count: int = 3
    competitive_count: int = 2
    excellent_score: float = 4.0
    good_score: float = 3.5


class Settings(BaseSettings):
    anthropic_api_key: str = ""
    anthropic_model: str = "claude-sonnet-4-20250514"
    anthropic_fast_model: str = "claude-3-haiku-20240307"

    fallback: FallbackSettings = FallbackSettings()
    insights: InsightThresholds = InsightThresholds()

    storage_dir: str = ".vendorscope"

    model_config = {"env_file": ".env", "env_file_encoding": "utf-8"}


settings = Settings()
