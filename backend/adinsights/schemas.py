# adinsights/schemas.py
from __future__ import annotations

import math
from typing import Any, List, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator

AssetType = Literal["image", "video", "unknown"]
AssetStatus = Literal["pending", "processing", "done", "error"]
Sentiment = Literal["very_negative", "negative", "neutral", "positive", "very_positive"]

# Ordered from most negative to most positive
SENTIMENT_LEVELS = ("very_negative", "negative", "neutral", "positive", "very_positive")
ASSET_TYPES = ("image", "video", "unknown")

# Scores are 0..100; fractional values are kept as reported
Score = Union[int, float]


def _coerce_score(value: Any) -> Optional[Score]:
    """Read a 0-100 score; anything that is not a finite number counts as absent."""
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return None
    if isinstance(value, float) and not math.isfinite(value):
        return None
    return value


def _coerce_text(value: Any) -> Optional[str]:
    return value if isinstance(value, str) else None


def _coerce_text_list(value: Any) -> Optional[List[str]]:
    if not isinstance(value, (list, tuple)):
        return None
    return [item for item in value if isinstance(item, str)]


def _coerce_block(value: Any) -> Any:
    return value if isinstance(value, (dict, BaseModel)) else None


class _Tolerant(BaseModel):
    """Base for model output blocks: unknown keys are kept, mistyped fields read as absent."""

    model_config = ConfigDict(extra="allow", populate_by_name=True)


class AudioVisualSignals(_Tolerant):
    color_palette: Optional[List[str]] = None          # hex strings, any case
    composition_notes: Optional[str] = None
    style_keywords: Optional[List[str]] = None

    @field_validator("color_palette", "style_keywords", mode="before")
    @classmethod
    def read_text_lists(cls, value: Any) -> Optional[List[str]]:
        return _coerce_text_list(value)

    @field_validator("composition_notes", mode="before")
    @classmethod
    def read_texts(cls, value: Any) -> Optional[str]:
        return _coerce_text(value)


class TargetAudience(_Tolerant):
    age_ranges: Optional[List[str]] = None
    interests: Optional[List[str]] = None
    regions: Optional[List[str]] = None

    @field_validator("age_ranges", "interests", "regions", mode="before")
    @classmethod
    def read_text_lists(cls, value: Any) -> Optional[List[str]]:
        return _coerce_text_list(value)


class DimensionProfile(_Tolerant):
    creative_attention: Optional[Score] = None
    aesthetics: Optional[Score] = None
    readability: Optional[Score] = None
    brand_fit: Optional[Score] = Field(default=None, alias="brandFit")
    memorability: Optional[Score] = None

    @field_validator(
        "creative_attention", "aesthetics", "readability", "brand_fit", "memorability", mode="before"
    )
    @classmethod
    def read_scores(cls, value: Any) -> Optional[Score]:
        return _coerce_score(value)


class AnalysisResult(_Tolerant):
    """Structured creative-quality scoring for one asset, as returned by the model.

    Every field is optional: stored records may predate a schema change or hold
    partial model output, so readers must presence-check each one.
    """

    asset_type: Optional[AssetType] = None
    summary: Optional[str] = None

    # Key scores, 0..100
    catchiness_level: Optional[Score] = None
    aesthetics_score: Optional[Score] = None
    readability_score: Optional[Score] = None
    brand_fit_score: Optional[Score] = None
    memorability_score: Optional[Score] = None

    sentiment: Optional[Sentiment] = None
    tone: Optional[str] = None
    product_category: Optional[str] = None

    detected_text: Optional[List[str]] = None
    detected_logos: Optional[List[str]] = None
    objects: Optional[List[str]] = None

    audio_visual_signals: Optional[AudioVisualSignals] = None
    target_audience: Optional[TargetAudience] = None

    best_platforms: Optional[List[str]] = None
    improvement_suggestions: Optional[List[str]] = None
    reasons_for_scores: Optional[List[str]] = None

    dimension_profile: Optional[DimensionProfile] = None

    @field_validator(
        "catchiness_level",
        "aesthetics_score",
        "readability_score",
        "brand_fit_score",
        "memorability_score",
        mode="before",
    )
    @classmethod
    def read_scores(cls, value: Any) -> Optional[Score]:
        return _coerce_score(value)

    @field_validator("summary", "tone", "product_category", mode="before")
    @classmethod
    def read_texts(cls, value: Any) -> Optional[str]:
        return _coerce_text(value)

    @field_validator(
        "detected_text",
        "detected_logos",
        "objects",
        "best_platforms",
        "improvement_suggestions",
        "reasons_for_scores",
        mode="before",
    )
    @classmethod
    def read_text_lists(cls, value: Any) -> Optional[List[str]]:
        return _coerce_text_list(value)

    @field_validator("audio_visual_signals", "target_audience", "dimension_profile", mode="before")
    @classmethod
    def read_blocks(cls, value: Any) -> Any:
        return _coerce_block(value)

    @field_validator("sentiment", mode="before")
    @classmethod
    def read_sentiment(cls, value: Any) -> Optional[str]:
        return value if value in SENTIMENT_LEVELS else None

    @field_validator("asset_type", mode="before")
    @classmethod
    def read_asset_type(cls, value: Any) -> Optional[str]:
        return value if value in ASSET_TYPES else None

    def is_empty(self) -> bool:
        """True when no field (declared or extra) carries a value."""
        return all(value is None for value in self.model_dump().values())


class Asset(BaseModel):
    id: str
    url: str
    type: AssetType = "unknown"
    status: AssetStatus = "pending"
    error: Optional[str] = None
    result: Optional[AnalysisResult] = None

    @field_validator("type", mode="before")
    @classmethod
    def read_type(cls, value: Any) -> str:
        return value if value in ASSET_TYPES else "unknown"

    @field_validator("result", mode="before")
    @classmethod
    def read_result(cls, value: Any) -> Any:
        return _coerce_block(value)

    @property
    def is_analyzed(self) -> bool:
        return self.status == "done" and self.result is not None and not self.result.is_empty()


class AssetSummary(BaseModel):
    id: str
    url: str
    type: AssetType
    status: AssetStatus


# --- Insights report ---------------------------------------------------------

class BucketEntry(BaseModel):
    key: str
    count: int


class ScoreEntry(BaseModel):
    id: str
    score: Score


class CompositeEntry(BaseModel):
    id: str
    score: float
    title: str


class Totals(BaseModel):
    analyzed: int


class Averages(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    aesthetics: int = 0
    catchiness: int = 0
    readability: int = 0
    brand_fit: int = Field(default=0, alias="brandFit")
    memorability: int = 0


class DimensionLeaders(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    creative_attention: List[ScoreEntry] = Field(default_factory=list)
    aesthetics: List[ScoreEntry] = Field(default_factory=list)
    readability: List[ScoreEntry] = Field(default_factory=list)
    brand_fit: List[ScoreEntry] = Field(default_factory=list, alias="brandFit")
    memorability: List[ScoreEntry] = Field(default_factory=list)


class InsightsReport(BaseModel):
    totals: Totals
    averages: Averages
    top_categories: List[BucketEntry]
    sentiment_distribution: List[BucketEntry]
    tone_distribution: List[BucketEntry]
    top_colors: List[BucketEntry]
    audience_age_ranges: List[BucketEntry]
    best_platforms: List[BucketEntry]
    dimension_profile: DimensionLeaders
    asset_summary_top10: List[CompositeEntry]


# --- API payloads ------------------------------------------------------------

class IngestRequest(BaseModel):
    urls: List[str] = Field(default_factory=list)


class IngestResponse(BaseModel):
    ingested: int
    assets: List[AssetSummary]


class AssetListResponse(BaseModel):
    count: int
    assets: List[Asset]


class AnalyseAllResponse(BaseModel):
    analysed_now: int
    total_done: int


class StoreDocument(BaseModel):
    assets: List[Asset] = Field(default_factory=list)
    created_at: str
    updated_at: str
