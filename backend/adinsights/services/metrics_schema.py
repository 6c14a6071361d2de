"""
JSON schema the scoring model must answer with.

Sent as a strict ``json_schema`` response format, so every property is listed
as required and nested objects are closed.
"""
from __future__ import annotations

from typing import Any, Dict

from adinsights.schemas import SENTIMENT_LEVELS


def _score() -> Dict[str, Any]:
    return {"type": "integer", "minimum": 0, "maximum": 100}


def _strings() -> Dict[str, Any]:
    return {"type": "array", "items": {"type": "string"}}


def _closed_object(properties: Dict[str, Any]) -> Dict[str, Any]:
    return {
        "type": "object",
        "additionalProperties": False,
        "properties": properties,
        "required": list(properties),
    }


_RESULT_PROPERTIES: Dict[str, Any] = {
    "asset_type": {"type": "string", "enum": ["image", "video", "unknown"]},
    "summary": {"type": "string"},

    # Key scores
    "catchiness_level": _score(),
    "aesthetics_score": _score(),
    "readability_score": _score(),
    "brand_fit_score": _score(),
    "memorability_score": _score(),

    "sentiment": {"type": "string", "enum": list(SENTIMENT_LEVELS)},
    "tone": {"type": "string"},
    "product_category": {"type": "string"},

    "detected_text": _strings(),
    "detected_logos": _strings(),
    "objects": _strings(),

    "audio_visual_signals": _closed_object({
        "color_palette": _strings(),
        "composition_notes": {"type": "string"},
        "style_keywords": _strings(),
    }),
    "target_audience": _closed_object({
        "age_ranges": _strings(),
        "interests": _strings(),
        "regions": _strings(),
    }),

    "best_platforms": _strings(),
    "improvement_suggestions": _strings(),
    "reasons_for_scores": _strings(),

    "dimension_profile": _closed_object({
        "creative_attention": _score(),
        "aesthetics": _score(),
        "readability": _score(),
        "brandFit": _score(),
        "memorability": _score(),
    }),
}

AD_METRICS_SCHEMA: Dict[str, Any] = {
    "name": "ad_creative_metrics",
    "schema": _closed_object(_RESULT_PROPERTIES),
    "strict": True,
}
