"""
CSV export of analysed assets.
"""
from __future__ import annotations

import csv
import io
from typing import Any, Dict, Iterable

from adinsights.config import EXPORT_COLUMNS
from adinsights.schemas import Asset


def export_row(asset: Asset) -> Dict[str, Any]:
    """
    Flatten one analysed asset into an export row.

    Args:
        asset: Asset with a result

    Returns:
        Mapping of EXPORT_COLUMNS to cell values; missing values are None
    """
    result = asset.result
    return {
        "id": asset.id,
        "url": asset.url,
        "asset_type": result.asset_type,
        "catchiness_level": result.catchiness_level,
        "aesthetics_score": result.aesthetics_score,
        "readability_score": result.readability_score,
        "brand_fit_score": result.brand_fit_score,
        "memorability_score": result.memorability_score,
        "sentiment": result.sentiment,
        "tone": result.tone,
        "product_category": result.product_category,
        "best_platforms": "|".join(result.best_platforms or []),
    }


def render_csv(assets: Iterable[Asset]) -> str:
    """
    Render analysed assets as CSV text with a header row.

    Assets that are not done or have no result are left out.

    Args:
        assets: Asset snapshot

    Returns:
        CSV document
    """
    buffer = io.StringIO()
    writer = csv.DictWriter(buffer, fieldnames=EXPORT_COLUMNS)
    writer.writeheader()
    for asset in assets:
        if asset.is_analyzed:
            writer.writerow(export_row(asset))
    return buffer.getvalue()
