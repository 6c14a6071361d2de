"""
Shared utility functions for the ad insights application.
"""
from __future__ import annotations

import re
import uuid
from datetime import datetime, timezone

from adinsights.schemas import AssetType

_IMAGE_URL = re.compile(r"\.(png|jpe?g|webp|gif|bmp|svg)(\?|$)")
_VIDEO_URL = re.compile(r"\.(mp4|mov|webm|mkv|avi)(\?|$)")


def now_utc() -> datetime:
    """
    Get current UTC datetime with timezone information.

    Returns:
        Current UTC datetime
    """
    return datetime.now(timezone.utc)


def normalize_url(url: str | None) -> str:
    """
    Trim surrounding whitespace from a submitted URL.

    Args:
        url: Raw URL string (can be None)

    Returns:
        Trimmed URL, empty string if input is None
    """
    if not url:
        return ""
    return url.strip()


def generate_asset_id() -> str:
    """Random identifier for a newly ingested asset."""
    return str(uuid.uuid4())


def guess_asset_type(url: str) -> AssetType:
    """
    Guess whether a URL points at an image or a video from its file extension.

    Args:
        url: Asset URL

    Returns:
        "image", "video" or "unknown"
    """
    lowered = url.lower()
    if _IMAGE_URL.search(lowered):
        return "image"
    if _VIDEO_URL.search(lowered):
        return "video"
    return "unknown"
