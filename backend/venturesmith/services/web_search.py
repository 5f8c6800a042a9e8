"""Tavily integration — live web research for search-grounded journey tasks.

Fetches result passages for a list of queries using Tavily's advanced
search. Returns clean passages with their source title and URL.

Search is optional: without TAVILY_API_KEY every call returns an empty list
and the caller continues with LLM-only output.
"""

from __future__ import annotations

import asyncio
import logging
import os
import re
from typing import Any, Dict, List

import httpx

logger = logging.getLogger(__name__)

# ---------------------------------------------------------------------------
# Tavily API configuration
# ---------------------------------------------------------------------------
_TAVILY_API_URL = "https://api.tavily.com/search"
_REQUEST_TIMEOUT = 15.0  # seconds
_MAX_RESULTS_PER_QUERY = 5
_MIN_PASSAGE_CHARS = 50
_MAX_PASSAGE_CHARS = 1200


def _get_tavily_key() -> str:
    """Read the Tavily API key from the environment."""
    key = os.getenv("TAVILY_API_KEY", "").strip()
    if not key:
        print("⚠️  [TAVILY] API key missing (TAVILY_API_KEY)")
        raise EnvironmentError("TAVILY_API_KEY environment variable not set")
    return key


def is_search_configured() -> bool:
    return bool(os.getenv("TAVILY_API_KEY", "").strip())


def _build_client(timeout: float) -> httpx.AsyncClient:
    return httpx.AsyncClient(timeout=timeout)


def _clean_passage(text: str) -> str:
    """Remove ads, navigation fragments, and collapse whitespace."""
    text = re.sub(r"(Subscribe|Sign up|Log in|Cookie|Advertisement)[\s\S]{0,80}", "", text, flags=re.IGNORECASE)
    text = re.sub(r"\s+", " ", text).strip()
    if len(text) > _MAX_PASSAGE_CHARS:
        text = text[:_MAX_PASSAGE_CHARS].rsplit(" ", 1)[0] + " ..."
    return text


async def _search_tavily(api_key: str, query: str) -> List[Dict[str, Any]]:
    """Execute a single Tavily search (async) and return result dicts."""
    payload = {
        "api_key": api_key,
        "query": query,
        "search_depth": "advanced",
        "max_results": _MAX_RESULTS_PER_QUERY,
        "include_answer": False,
    }
    try:
        async with _build_client(_REQUEST_TIMEOUT) as client:
            response = await client.post(_TAVILY_API_URL, json=payload)
    except httpx.TimeoutException:
        print(f"⚠️  [TAVILY] Timeout for {query!r}")
        return []
    except httpx.HTTPError as exc:
        print(f"❌ [TAVILY] Error for {query!r}: {exc}")
        return []

    if response.status_code != 200:
        print(f"⚠️  [TAVILY] HTTP {response.status_code} for {query!r}")
        return []
    try:
        results = response.json().get("results", [])
    except ValueError:
        logger.warning("[TAVILY] Non-JSON response for %r", query)
        return []
    print(f"📦 [TAVILY] {len(results)} results for {query!r}")
    return results


async def search_web(queries: List[str]) -> List[Dict[str, str]]:
    """Run all queries in parallel and return de-duplicated passages.

    Returns
    -------
    list[dict]
        ``{"title", "url", "content"}`` per passage, in query order.
        Empty list if the key is missing or every query fails.
    """
    try:
        api_key = _get_tavily_key()
    except EnvironmentError:
        print("⚠️  [TAVILY] Skipping — no API key. Continuing with LLM-only output.")
        return []

    print(f"🔍 [TAVILY] Running {len(queries)} queries")
    query_results = await asyncio.gather(
        *(_search_tavily(api_key, q) for q in queries),
        return_exceptions=True,
    )

    passages: List[Dict[str, str]] = []
    seen_urls = set()
    for query_result in query_results:
        if isinstance(query_result, Exception):
            logger.warning("[TAVILY] Query failed: %s", query_result)
            continue
        for result in query_result:
            url = result.get("url", "")
            if not url or url in seen_urls:
                continue
            seen_urls.add(url)

            content = result.get("content") or ""
            if len(content) < _MIN_PASSAGE_CHARS:
                continue
            cleaned = _clean_passage(content)
            if len(cleaned) >= _MIN_PASSAGE_CHARS:
                passages.append(
                    {"title": (result.get("title") or url).strip(), "url": url, "content": cleaned}
                )

    print(f"✅ [TAVILY] Retrieved {len(passages)} passages")
    return passages
