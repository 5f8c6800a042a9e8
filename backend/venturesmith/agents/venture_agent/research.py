"""Web research step for search-grounded journey tasks.

Market research and investor matching are grounded on live search results
before the LLM summarizes them. Every other task is LLM-only.

Flow:
  1. Build search queries from the idea and earlier artifacts
  2. Run them through the Tavily client (empty when no key is configured)
  3. Hand the passages to the prompt as numbered sources
"""

from __future__ import annotations

from typing import Any, Dict, List, Mapping

from ...journey import TaskID, task_key
from ...services.web_search import search_web

_MAX_QUERY_CHARS = 180


def _short(text: Any) -> str:
    text = " ".join(str(text or "").split())
    if len(text) > _MAX_QUERY_CHARS:
        text = text[:_MAX_QUERY_CHARS].rsplit(" ", 1)[0]
    return text


def _subject(idea: str, context: Mapping[str, Any]) -> str:
    """Best one-line description of the venture for a search query."""
    brainstorm = context.get(TaskID.BRAINSTORM_IDEA.value) or {}
    if isinstance(brainstorm, dict) and brainstorm.get("refinedIdea"):
        return _short(brainstorm["refinedIdea"])
    return _short(idea)


def _audience(context: Mapping[str, Any]) -> str:
    brainstorm = context.get(TaskID.BRAINSTORM_IDEA.value) or {}
    if isinstance(brainstorm, dict):
        return _short(brainstorm.get("targetAudience", ""))
    return ""


def _market_research_queries(venture_name: str, idea: str, context: Mapping[str, Any]) -> List[str]:
    subject = _subject(idea, context)
    return [
        f"{subject} market size growth landscape",
        f"{subject} competitors startups companies",
        f"{subject} industry trends 2025",
    ]


def _investor_queries(venture_name: str, idea: str, context: Mapping[str, Any]) -> List[str]:
    subject = _subject(idea, context)
    audience = _audience(context)
    queries = [
        f"venture capital firms investing in {subject}",
        f"seed stage investors {subject} startups portfolio",
    ]
    if audience:
        queries.append(f"angel investors focused on {audience}")
    return queries


_QUERY_BUILDERS = {
    TaskID.MARKET_RESEARCH.value: _market_research_queries,
    TaskID.INVESTOR_MATCHING.value: _investor_queries,
}


def uses_web_research(task_id: Any) -> bool:
    return task_key(task_id) in _QUERY_BUILDERS


def build_research_queries(
    task_id: Any,
    *,
    venture_name: str,
    idea: str,
    context: Mapping[str, Any],
) -> List[str]:
    """Search queries for a research task (empty for LLM-only tasks)."""
    builder = _QUERY_BUILDERS.get(task_key(task_id))
    if builder is None:
        return []
    return builder(venture_name, idea, context)


async def gather_web_research(
    task_id: Any,
    *,
    venture_name: str,
    idea: str,
    context: Mapping[str, Any],
) -> List[Dict[str, str]]:
    """Live passages for the task, or an empty list (LLM-only fallback)."""
    queries = build_research_queries(task_id, venture_name=venture_name, idea=idea, context=context)
    if not queries:
        return []
    return await search_web(queries)
