"""
Application configuration with environment variable support.
"""
from __future__ import annotations

from typing import Dict, List

from pydantic_settings import BaseSettings


def _split_list(value: str, separator: str = ",") -> List[str]:
    """Split a separated settings string into trimmed, non-empty items."""
    return [item.strip() for item in (value or "").split(separator) if item.strip()]


class Settings(BaseSettings):
    # Scoring model
    OPENAI_API_KEY: str = ""
    OPENAI_MODEL: str = "gpt-4o-mini"
    OPENAI_BASE_URL: str = ""
    OPENAI_TIMEOUT_SECONDS: float = 90.0

    # Storage
    DATA_DIR: str = "data"

    # Batch analysis
    BATCH_CONCURRENCY: int = 5

    # HTTP
    CORS_ORIGINS: str = "*"
    PORT: int = 8787

    # Logging
    LOG_LEVEL: str = "INFO"
    LOG_FORMAT: str = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

    @property
    def cors_origin_list(self) -> List[str]:
        return _split_list(self.CORS_ORIGINS) or ["*"]


settings = Settings(_env_file=".env", _env_file_encoding="utf-8")


# Model request settings
MODEL_TEMPERATURE: float = 0.2

# Insights table sizes
BUCKET_LIMITS: Dict[str, int] = {
    "top_categories": 10,
    "sentiment_distribution": 10,
    "tone_distribution": 10,
    "top_colors": 12,
    "audience_age_ranges": 10,
    "best_platforms": 10,
}
DIMENSION_TOP_K: int = 3
COMPOSITE_TOP_N: int = 10
TITLE_MAX_CHARS: int = 80

# CSV export columns, in output order
EXPORT_COLUMNS: List[str] = [
    "id",
    "url",
    "asset_type",
    "catchiness_level",
    "aesthetics_score",
    "readability_score",
    "brand_fit_score",
    "memorability_score",
    "sentiment",
    "tone",
    "product_category",
    "best_platforms",
]
