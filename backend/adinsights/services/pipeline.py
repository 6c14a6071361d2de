"""
Asset ingestion and analysis coordinator.
"""
from __future__ import annotations

import asyncio
import logging
from typing import Awaitable, Callable, Iterable, List, Optional, Sequence

from adinsights.config import settings
from adinsights.schemas import AnalyseAllResponse, AnalysisResult, Asset, AssetType
from adinsights.services.analyzer import analyze_with_openai
from adinsights.storage import AssetStore
from adinsights.utils import generate_asset_id, guess_asset_type, normalize_url

logger = logging.getLogger(__name__)

Analyzer = Callable[[Sequence[str], AssetType], Awaitable[AnalysisResult]]

RETRYABLE_STATUSES = ("pending", "error")


def ingest_urls(store: AssetStore, urls: Iterable[str]) -> List[Asset]:
    """
    Register new pending assets for a batch of URLs.

    Args:
        store: Asset store to write to
        urls: Submitted URLs; blank entries are dropped

    Returns:
        Newly created assets, in submission order
    """
    cleaned = [url for url in (normalize_url(raw) for raw in urls) if url]
    assets = [
        Asset(id=generate_asset_id(), url=url, type=guess_asset_type(url), status="pending")
        for url in cleaned
    ]
    if assets:
        store.upsert_many(assets)
    logger.info("Ingested %d assets", len(assets))
    return assets


async def analyse_one(
    store: AssetStore,
    asset: Asset,
    analyzer: Analyzer = analyze_with_openai,
) -> Asset:
    """
    Run the scoring model on one asset and persist the outcome.

    The asset is stored as ``processing`` while the model runs, then as
    ``done`` with its result, or as ``error`` with the failure message.

    Args:
        store: Asset store to write to
        asset: Asset to analyse
        analyzer: Scoring model call

    Returns:
        The stored ``done`` asset

    Raises:
        Exception: Whatever the analyzer raised, after the error is recorded
    """
    processing = asset.model_copy(update={"status": "processing"})
    store.upsert(processing)
    logger.info("Analysing asset %s (%s)", asset.id, asset.url)

    try:
        result = await analyzer([asset.url], asset.type)
    except Exception as e:
        message = str(e) or "analysis failed"
        store.upsert(processing.model_copy(update={"status": "error", "error": message}))
        logger.warning("Analysis failed for asset %s: %s", asset.id, message)
        raise

    done = processing.model_copy(update={"status": "done", "result": result, "error": None})
    store.upsert(done)
    logger.info("Analysis finished for asset %s", asset.id)
    return done


async def analyse_all(
    store: AssetStore,
    analyzer: Analyzer = analyze_with_openai,
    concurrency: Optional[int] = None,
) -> AnalyseAllResponse:
    """
    Analyse every pending or previously failed asset with bounded concurrency.

    Failures are recorded on the individual assets and never abort the batch.

    Args:
        store: Asset store to read from and write to
        analyzer: Scoring model call
        concurrency: Maximum simultaneous model calls (defaults to BATCH_CONCURRENCY)

    Returns:
        How many assets were attempted and how many are now done in total
    """
    queued = [asset for asset in store.list() if asset.status in RETRYABLE_STATUSES]
    semaphore = asyncio.Semaphore(max(1, concurrency or settings.BATCH_CONCURRENCY))

    async def run(asset: Asset) -> Asset:
        async with semaphore:
            return await analyse_one(store, asset, analyzer)

    outcomes = await asyncio.gather(*(run(asset) for asset in queued), return_exceptions=True)
    failed = sum(1 for outcome in outcomes if isinstance(outcome, Exception))

    total_done = sum(1 for asset in store.list() if asset.status == "done")
    logger.info(
        "Batch analysis: %d attempted, %d failed, %d done in total",
        len(queued), failed, total_done,
    )
    return AnalyseAllResponse(analysed_now=len(queued), total_done=total_done)
