"""Shared fixtures for the ad insights tests."""

import pytest

from adinsights.schemas import AnalysisResult, Asset
from adinsights.storage import AssetStore


@pytest.fixture
def make_asset():
    """Factory for assets; keyword arguments become AnalysisResult fields."""

    def _make(asset_id="a1", status="done", url=None, result=None, **result_fields):
        if result is None and result_fields:
            result = AnalysisResult(**result_fields)
        return Asset(
            id=asset_id,
            url=url or f"https://cdn.example.com/{asset_id}.png",
            type="image",
            status=status,
            result=result,
        )

    return _make


@pytest.fixture
def store(tmp_path):
    """Asset store backed by a temporary directory."""
    return AssetStore(tmp_path / "data")


@pytest.fixture
def full_result():
    """A complete model reply, as the scoring model would return it."""
    return {
        "asset_type": "image",
        "summary": "Bright summer soda ad with bold type",
        "catchiness_level": 90,
        "aesthetics_score": 80,
        "readability_score": 70,
        "brand_fit_score": 60,
        "memorability_score": 50,
        "sentiment": "positive",
        "tone": "playful",
        "product_category": "beverage",
        "detected_text": ["Summer Fizz"],
        "detected_logos": ["Fizz"],
        "objects": ["can", "beach"],
        "audio_visual_signals": {
            "color_palette": ["#FFAA00", "#0033CC"],
            "composition_notes": "centered product",
            "style_keywords": ["bold"],
        },
        "target_audience": {
            "age_ranges": ["18-24", "25-34"],
            "interests": ["travel"],
            "regions": ["US"],
        },
        "best_platforms": ["tiktok", "instagram"],
        "improvement_suggestions": ["larger logo"],
        "reasons_for_scores": ["high contrast"],
        "dimension_profile": {
            "creative_attention": 88,
            "aesthetics": 81,
            "readability": 72,
            "brandFit": 64,
            "memorability": 55,
        },
    }
