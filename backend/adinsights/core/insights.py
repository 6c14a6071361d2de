"""
Portfolio-level insights over analysed ad creatives.

Turns a snapshot of assets into frequency tables, rounded score averages,
per-dimension leaders and a composite-score leaderboard. Everything is
computed in one pass over the analysed assets with local accumulators; the
input is never modified.
"""
from __future__ import annotations

import math
from collections import Counter
from dataclasses import dataclass
from typing import Any, Callable, Dict, Iterable, List, Mapping, Optional, Sequence, Union

from adinsights.config import BUCKET_LIMITS, COMPOSITE_TOP_N, DIMENSION_TOP_K, TITLE_MAX_CHARS
from adinsights.schemas import (
    AnalysisResult,
    Asset,
    Averages,
    BucketEntry,
    CompositeEntry,
    DimensionLeaders,
    InsightsReport,
    Score,
    ScoreEntry,
    Totals,
)

AssetRecord = Union[Asset, Mapping[str, Any]]

# Average name -> AnalysisResult attribute
SCORE_FIELDS: Dict[str, str] = {
    "aesthetics": "aesthetics_score",
    "catchiness": "catchiness_level",
    "readability": "readability_score",
    "brand_fit": "brand_fit_score",
    "memorability": "memorability_score",
}

DIMENSIONS = ("creative_attention", "aesthetics", "readability", "brand_fit", "memorability")


@dataclass(frozen=True)
class BucketSpec:
    """A frequency table: the values each result contributes and how many rows to keep."""

    name: str
    extract: Callable[[AnalysisResult], Iterable[Optional[str]]]
    limit: int


def _colors(result: AnalysisResult) -> List[str]:
    signals = result.audio_visual_signals
    palette = signals.color_palette if signals is not None else None
    return [hex_value.lower() for hex_value in palette or []]


def _age_ranges(result: AnalysisResult) -> List[str]:
    audience = result.target_audience
    return list(audience.age_ranges or []) if audience is not None else []


BUCKETS = (
    BucketSpec("top_categories", lambda r: [r.product_category], BUCKET_LIMITS["top_categories"]),
    BucketSpec("sentiment_distribution", lambda r: [r.sentiment], BUCKET_LIMITS["sentiment_distribution"]),
    BucketSpec("tone_distribution", lambda r: [r.tone], BUCKET_LIMITS["tone_distribution"]),
    BucketSpec("top_colors", _colors, BUCKET_LIMITS["top_colors"]),
    BucketSpec("audience_age_ranges", _age_ranges, BUCKET_LIMITS["audience_age_ranges"]),
    BucketSpec("best_platforms", lambda r: r.best_platforms or [], BUCKET_LIMITS["best_platforms"]),
)


def round_half_up(value: float) -> int:
    """Round to the nearest integer, halves going up (83.5 -> 84, 82.5 -> 83)."""
    return int(math.floor(value + 0.5))


def count_values(counter: Counter, values: Iterable[Optional[str]]) -> None:
    """
    Add one occurrence per value to a frequency counter.

    Empty or missing values are skipped; repeated values count every time.

    Args:
        counter: Counter being accumulated
        values: Values contributed by one analysis result
    """
    for value in values:
        if value:
            counter[value] += 1


def render_bucket(counter: Counter, limit: int) -> List[BucketEntry]:
    """
    Render a frequency counter as rows sorted by count, highest first.

    Equal counts keep the order in which their keys were first seen.

    Args:
        counter: Accumulated value counts
        limit: Maximum number of rows to return

    Returns:
        List of BucketEntry rows, at most ``limit`` long
    """
    return [BucketEntry(key=key, count=count) for key, count in counter.most_common(limit)]


def top_k(entries: Sequence[Any], k: int) -> List[Any]:
    """Highest ``score`` first, ties in input order, truncated to ``k`` entries."""
    return sorted(entries, key=lambda entry: entry.score, reverse=True)[:k]


def primary_scores(result: AnalysisResult) -> Dict[str, Score]:
    """The five top-level scores of a result, with missing scores read as 0."""
    return {name: getattr(result, field) or 0 for name, field in SCORE_FIELDS.items()}


def composite_score(scores: Dict[str, Score]) -> float:
    """
    Unweighted mean of the five top-level scores.

    Missing scores count as 0 and the divisor is always five, so incomplete
    results rank below complete ones with the same known scores.
    """
    return sum(scores.values()) / len(scores)


def display_title(asset: Asset) -> str:
    """Leading characters of the analysis summary, or the asset URL when there is none."""
    summary = asset.result.summary if asset.result is not None else None
    return summary[:TITLE_MAX_CHARS] if summary else asset.url


def _as_asset(record: AssetRecord) -> Asset:
    return record if isinstance(record, Asset) else Asset.model_validate(record)


def select_analyzed(records: Iterable[AssetRecord]) -> List[Asset]:
    """Assets whose analysis finished and produced a non-empty result, in input order."""
    assets = (_as_asset(record) for record in records)
    return [asset for asset in assets if asset.is_analyzed]


def build_all_insights(records: Iterable[AssetRecord]) -> InsightsReport:
    """
    Build the portfolio insights report for a snapshot of assets.

    Only assets with status ``done`` and a non-empty result contribute. An empty
    snapshot yields zero averages and empty tables.

    Args:
        records: Asset models or plain mappings in the stored asset shape

    Returns:
        InsightsReport computed from scratch for this snapshot
    """
    analyzed = select_analyzed(records)

    counters: Dict[str, Counter] = {spec.name: Counter() for spec in BUCKETS}
    score_sums: Dict[str, Score] = dict.fromkeys(SCORE_FIELDS, 0)
    dimension_entries: Dict[str, List[ScoreEntry]] = {name: [] for name in DIMENSIONS}
    composite: List[CompositeEntry] = []

    for asset in analyzed:
        result = asset.result

        for spec in BUCKETS:
            count_values(counters[spec.name], spec.extract(result))

        scores = primary_scores(result)
        for name, score in scores.items():
            score_sums[name] += score

        profile = result.dimension_profile
        if profile is not None:
            for name in DIMENSIONS:
                score = getattr(profile, name)
                if isinstance(score, (int, float)) and not isinstance(score, bool):
                    dimension_entries[name].append(ScoreEntry(id=asset.id, score=score))

        composite.append(
            CompositeEntry(
                id=asset.id,
                score=composite_score(scores),
                title=display_title(asset),
            )
        )

    denominator = len(analyzed) or 1
    tables = {spec.name: render_bucket(counters[spec.name], spec.limit) for spec in BUCKETS}

    return InsightsReport(
        totals=Totals(analyzed=len(analyzed)),
        averages=Averages(
            **{name: round_half_up(total / denominator) for name, total in score_sums.items()}
        ),
        dimension_profile=DimensionLeaders(
            **{name: top_k(entries, DIMENSION_TOP_K) for name, entries in dimension_entries.items()}
        ),
        asset_summary_top10=top_k(composite, COMPOSITE_TOP_N),
        **tables,
    )
