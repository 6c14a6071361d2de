"""
Main FastAPI application and routing layer.
"""
from __future__ import annotations

import logging
import sys
from functools import lru_cache

from fastapi import Depends, FastAPI, HTTPException, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse, PlainTextResponse, Response

from adinsights.config import settings
from adinsights.core.insights import build_all_insights
from adinsights.schemas import (
    AnalyseAllResponse,
    Asset,
    AssetListResponse,
    AssetSummary,
    IngestRequest,
    IngestResponse,
    InsightsReport,
)
from adinsights.services.analyzer import analyze_with_openai
from adinsights.services.export import render_csv
from adinsights.services.pipeline import Analyzer, analyse_all, analyse_one, ingest_urls
from adinsights.storage import AssetStore
from adinsights.utils import now_utc


def configure_logging() -> None:
    """Configure root logging once from LOG_LEVEL / LOG_FORMAT."""
    root_logger = logging.getLogger()
    if root_logger.handlers:
        return
    logging.basicConfig(
        level=settings.LOG_LEVEL.upper(),
        format=settings.LOG_FORMAT,
        handlers=[logging.StreamHandler(sys.stdout)],
    )
    logging.getLogger("httpx").setLevel(logging.WARNING)


configure_logging()
logger = logging.getLogger(__name__)


@lru_cache(maxsize=1)
def get_store() -> AssetStore:
    """Process-wide asset store rooted at DATA_DIR."""
    return AssetStore(settings.DATA_DIR)


def get_analyzer() -> Analyzer:
    """Scoring model call used by the analysis routes."""
    return analyze_with_openai


# Initialize FastAPI app
app = FastAPI(
    title="Ad Creative Insights API",
    version="0.1.0",
    description="API for scoring ad creatives with a vision model and summarising the portfolio",
)

# Configure CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origin_list,
    allow_methods=["GET", "POST", "OPTIONS"],
    allow_headers=["Content-Type", "Authorization", "X-Requested-With", "Accept"],
    max_age=86400,
)


@app.exception_handler(HTTPException)
async def http_error_handler(_request: Request, exc: HTTPException) -> JSONResponse:
    """Render HTTP errors as {"error": message}."""
    return JSONResponse(status_code=exc.status_code, content={"error": exc.detail})


@app.on_event("startup")
async def open_store():
    """Create the asset database up front so the first request does not pay for it."""
    store = get_store()
    logger.info("Asset store ready at %s", store.db_path)


@app.get("/", response_class=PlainTextResponse)
async def root():
    return "Ad Analytics API is running."


@app.get("/health")
async def health_check():
    """Health check endpoint."""
    return {
        "status": "ok",
        "as_of": now_utc().isoformat(),
        "service": "ad-insights-api",
    }


@app.post("/ingest/json", response_model=IngestResponse)
async def ingest_json(payload: IngestRequest, store: AssetStore = Depends(get_store)):
    """
    Register asset URLs for analysis.

    Body: {"urls": ["https://...", ...]}
    """
    assets = ingest_urls(store, payload.urls)
    if not assets:
        raise HTTPException(status_code=400, detail="Provide { urls: string[] }")

    return IngestResponse(
        ingested=len(assets),
        assets=[AssetSummary(id=a.id, url=a.url, type=a.type, status=a.status) for a in assets],
    )


@app.get("/assets", response_model=AssetListResponse, response_model_exclude_none=True)
async def list_assets(store: AssetStore = Depends(get_store)):
    assets = store.list()
    return AssetListResponse(count=len(assets), assets=assets)


@app.post("/analyseAd/{ad_id}", response_model=Asset, response_model_exclude_none=True)
async def analyse_ad(
    ad_id: str,
    store: AssetStore = Depends(get_store),
    analyzer: Analyzer = Depends(get_analyzer),
):
    """
    Analyse a single asset and return it with its result.

    Args:
        ad_id: Asset identifier

    Returns:
        The analysed asset
    """
    asset = store.get(ad_id)
    if asset is None:
        raise HTTPException(status_code=404, detail="Ad not found")

    try:
        return await analyse_one(store, asset, analyzer)
    except Exception as e:
        logger.error("Error analysing asset %s: %s", ad_id, e)
        raise HTTPException(status_code=500, detail=str(e) or "analysis failed")


@app.post("/analyseAll", response_model=AnalyseAllResponse)
async def analyse_all_assets(
    store: AssetStore = Depends(get_store),
    analyzer: Analyzer = Depends(get_analyzer),
):
    """Analyse every pending or failed asset."""
    return await analyse_all(store, analyzer, settings.BATCH_CONCURRENCY)


@app.get("/ad/{ad_id}", response_model=Asset, response_model_exclude_none=True)
async def get_ad(ad_id: str, store: AssetStore = Depends(get_store)):
    asset = store.get(ad_id)
    if asset is None:
        raise HTTPException(status_code=404, detail="Ad not found")
    return asset


@app.get("/AllAdInsights", response_model=InsightsReport)
async def all_ad_insights(store: AssetStore = Depends(get_store)):
    """Portfolio insights computed from the current asset snapshot."""
    return build_all_insights(store.list())


@app.get("/export.csv")
async def export_csv(store: AssetStore = Depends(get_store)):
    """Download analysed assets as CSV."""
    return Response(
        content=render_csv(store.list()),
        media_type="text/csv",
        headers={"Content-Disposition": "attachment; filename=ad_metrics.csv"},
    )


if __name__ == "__main__":
    # For development
    import uvicorn
    uvicorn.run("adinsights.main:app", host="0.0.0.0", port=settings.PORT, reload=True)
