"""
Creative-quality scoring of ad assets with a vision-capable OpenAI model.
"""
from __future__ import annotations

import json
import logging
from typing import Any, Dict, List, Optional, Sequence

import httpx
from openai import APIError, APIStatusError, AsyncOpenAI

from adinsights.config import MODEL_TEMPERATURE, settings
from adinsights.schemas import AnalysisResult, AssetType
from adinsights.services.metrics_schema import AD_METRICS_SCHEMA

logger = logging.getLogger(__name__)

SYSTEM_PROMPT = (
    "You are an ad-creative analyst. Return ONLY JSON that matches the provided schema. "
    "Be precise; avoid guesses."
)
USER_PROMPT = "Analyze this advertisement and output metrics per the schema."


class AnalysisError(RuntimeError):
    """The scoring model could not produce a usable result for an asset."""


def _get_openai_client() -> AsyncOpenAI:
    """Build a client for one request; fails fast when no API key is configured."""
    if not settings.OPENAI_API_KEY:
        raise AnalysisError("OPENAI_API_KEY is not configured")
    return AsyncOpenAI(
        api_key=settings.OPENAI_API_KEY,
        base_url=settings.OPENAI_BASE_URL or None,
        http_client=httpx.AsyncClient(timeout=settings.OPENAI_TIMEOUT_SECONDS),
        max_retries=0,
    )


def build_messages(urls: Sequence[str]) -> List[Dict[str, Any]]:
    """
    Build the chat messages for one asset.

    Args:
        urls: Publicly fetchable image URLs, one content part each

    Returns:
        System and user messages for the chat completions API
    """
    content: List[Dict[str, Any]] = [{"type": "text", "text": USER_PROMPT}]
    content.extend({"type": "image_url", "image_url": {"url": url}} for url in urls)
    return [
        {"role": "system", "content": [{"type": "text", "text": SYSTEM_PROMPT}]},
        {"role": "user", "content": content},
    ]


def parse_model_content(content: Optional[str], kind: AssetType) -> AnalysisResult:
    """
    Turn the model's JSON reply into an AnalysisResult.

    Args:
        content: Raw message content returned by the model
        kind: Asset type guessed from the URL, used when the model reports none

    Returns:
        Parsed AnalysisResult

    Raises:
        AnalysisError: If the reply is empty or not a JSON object
    """
    if not content:
        raise AnalysisError("OpenAI returned no content")

    try:
        data = json.loads(content)
    except json.JSONDecodeError as e:
        raise AnalysisError(f"OpenAI returned invalid JSON: {e}") from e

    if not isinstance(data, dict):
        raise AnalysisError("OpenAI did not return a JSON object")

    result = AnalysisResult.model_validate(data)
    if result.asset_type in (None, "unknown"):
        result = result.model_copy(update={"asset_type": kind})
    return result


async def analyze_with_openai(
    urls: Sequence[str],
    kind: AssetType,
    model: Optional[str] = None,
) -> AnalysisResult:
    """
    Score an ad creative with the configured OpenAI model.

    Args:
        urls: Asset URLs to show the model
        kind: Asset type guessed from the URL
        model: Model name, defaults to the configured one

    Returns:
        AnalysisResult for the asset

    Raises:
        AnalysisError: If the API call fails or the reply is unusable
    """
    client = _get_openai_client()

    async with client:
        try:
            response = await client.chat.completions.create(
                model=model or settings.OPENAI_MODEL,
                temperature=MODEL_TEMPERATURE,
                response_format={"type": "json_schema", "json_schema": AD_METRICS_SCHEMA},
                messages=build_messages(urls),
            )
        except APIStatusError as e:
            logger.error("OpenAI call failed: status=%s body=%s", e.status_code, e.body)
            raise AnalysisError(f"OpenAI {e.status_code}: {e.message}") from e
        except APIError as e:
            logger.error("OpenAI call failed: %s", e)
            raise AnalysisError(f"OpenAI request failed: {e.message}") from e

    content = response.choices[0].message.content if response.choices else None
    return parse_model_content(content, kind)
