"""Venture Co-Founder Chat — answers questions from the venture's own artifacts.

Flow:
  1. Collect every completed artifact on the venture (decoded envelopes)
  2. Build a context block, most recent journey steps last
  3. Call the central OpenAI client with context-only guardrails
  4. Return answer + the task names the context came from
"""

from __future__ import annotations

import json
import logging
from typing import Any, Dict, List

from ..journey import default_graph, task_key
from ..models.venture import Venture
from .artifact_codec import ArtifactDecodeError, decode_artifact
from .openai_client import LLMError, call_openai_chat_async

logger = logging.getLogger(__name__)

_CHAT_MAX_TOKENS = 900
_PER_ARTIFACT_CHAR_LIMIT = 3000

_SYSTEM_PROMPT = (
    "You are the AI Co-Founder inside VentureSmith, a platform that walks founders "
    "through building a startup step by step. You have access to the artifacts the "
    "founder has generated so far (business plan, personas, pricing, and so on). "
    "Answer the question strictly using the provided context. Be specific and "
    "actionable. If the context does not contain enough information, say which "
    "journey step the founder should complete to get it. Do not make up data. "
    'Respond with a JSON object: {"answer": "<your answer>"}'
)


def collect_venture_context(venture: Venture) -> List[Dict[str, Any]]:
    """Return [{task_id, name, data}] for every completed artifact, in journey order."""
    items = []
    for task in default_graph().tasks:
        raw = getattr(venture, task.field, None)
        try:
            envelope = decode_artifact(task.id, raw)
        except ArtifactDecodeError as exc:
            logger.warning("[CHAT] Skipping unreadable artifact %s: %s", task.field, exc)
            continue
        if envelope is None:
            continue
        items.append({"task_id": task_key(task.id), "name": task.name, "data": envelope.data})
    return items


async def ask_venture(venture: Venture, question: str) -> Dict[str, Any]:
    """Answer a founder question about `venture`.

    Returns:
        {
            "answer": str,
            "sources": list[str],
        }

    Raises EnvironmentError if the OpenAI key is not configured.
    """
    items = collect_venture_context(venture)
    if not items:
        return {
            "answer": (
                "I don't have any artifacts for this venture yet. "
                "Start with the 'Brainstorm & Refine Idea' step, then ask me again."
            ),
            "sources": [],
        }

    context_parts = []
    for item in items:
        body = json.dumps(item["data"], ensure_ascii=False, default=str)
        if len(body) > _PER_ARTIFACT_CHAR_LIMIT:
            body = body[:_PER_ARTIFACT_CHAR_LIMIT] + " ..."
        context_parts.append(f"### {item['name']}\n{body}")

    user_message = (
        f"## Venture\n\n{venture.name}: {venture.idea}\n\n"
        f"## Context (generated artifacts)\n\n"
        + "\n\n".join(context_parts)
        + f"\n\n---\n\n## Founder Question\n\n{question}"
    )

    messages = [
        {"role": "system", "content": _SYSTEM_PROMPT},
        {"role": "user", "content": user_message},
    ]
    sources = [item["name"] for item in items]

    print(f"💬 [CHAT] Asking about venture {str(venture.id)[:8]} with {len(items)} artifacts")
    try:
        result = await call_openai_chat_async(
            messages=messages,
            max_completion_tokens=_CHAT_MAX_TOKENS,
        )
    except LLMError as exc:
        logger.error("[CHAT] LLM failure: %s", exc)
        return {
            "answer": "Sorry, I encountered an error generating a response. Please try again.",
            "sources": [],
        }

    answer = str(result.get("answer", "")).strip()
    if not answer:
        logger.warning("[CHAT] LLM returned no 'answer' field")
        answer = "Sorry, I couldn't produce an answer to that. Please rephrase the question."
    return {"answer": answer, "sources": sources}
