"""Venture Artifact Generator — one OpenAI call per journey task.

Uses the centralized OpenAI client (`call_openai_chat_async`) for single-stage
generation. JSON response format is enforced at the client level. Validates
the required top-level keys and returns the parsed object.

Market research and investor matching first gather live web passages
(services/web_search.py); without a search key they fall back to LLM-only
output. The generator does not retry beyond the client's single retry and does not
touch the venture record; the caller stores the result.
"""

from __future__ import annotations

from typing import Any, Dict, Mapping

from ...journey import default_graph, task_key
from ...services.openai_client import call_openai_chat_async, validate_required_keys
from .prompts import SYSTEM_PROMPT, TASK_PROMPTS, build_task_prompt
from .research import gather_web_research, uses_web_research


class ArtifactValidationError(RuntimeError):
    """The LLM answered with JSON that lacks the task's required keys."""

    def __init__(self, task_id: str, missing: list):
        self.task_id = task_id
        self.missing = list(missing)
        super().__init__(
            f"Generated {task_id} artifact is missing required fields: {', '.join(self.missing)}"
        )


async def generate_task_artifact(
    task_id: Any,
    *,
    venture_name: str,
    idea: str,
    context: Mapping[str, Any],
) -> Dict[str, Any]:
    """Generate the artifact for one journey task.

    Parameters
    ----------
    task_id : TaskID or str
        Journey task to generate.
    venture_name : str
        Display name of the venture.
    idea : str
        The founder's original idea text.
    context : mapping
        Decoded artifacts of the task's prerequisites, keyed by task id.

    Returns
    -------
    dict
        The parsed JSON artifact.

    Raises
    ------
    UnknownTaskError
        If task_id is not part of the journey.
    EnvironmentError
        If OPENAI_API_KEY is not configured.
    LLMProviderError, LLMResponseParseError
        If OpenAI fails after retries.
    ArtifactValidationError
        If the response lacks required keys.
    """
    task = default_graph().task(task_id)
    key = task_key(task.id)
    task_prompt = TASK_PROMPTS[key]

    print(f"🛠️ [TASK] Generating {key} for venture={venture_name}")
    print(f"📦 [TASK] Context artifacts: {sorted(context)}")

    research = None
    if uses_web_research(key):
        research = await gather_web_research(
            key, venture_name=venture_name, idea=idea, context=context
        )
        print(f"🔍 [TASK] {key} grounded on {len(research)} web passages")

    messages = [
        {"role": "system", "content": SYSTEM_PROMPT},
        {
            "role": "user",
            "content": build_task_prompt(
                key,
                task_name=task.name,
                venture_name=venture_name,
                idea=idea,
                context=context,
                research=research,
            ),
        },
    ]

    result = await call_openai_chat_async(
        messages=messages,
        max_completion_tokens=task_prompt.max_tokens,
    )

    missing = validate_required_keys(result, list(task_prompt.required_keys), context=key)
    if missing:
        raise ArtifactValidationError(key, missing)

    if research:
        result["sources"] = [{"title": r["title"], "url": r["url"]} for r in research]

    print(f"✅ [TASK] {key} generated — {len(result)} top-level fields")
    return result
