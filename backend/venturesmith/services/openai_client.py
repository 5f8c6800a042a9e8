"""Centralized OpenAI client for every venture artifact and chat answer.

All generators MUST use `call_openai_chat_async()` from this module.
This ensures:
  - Model, temperature, timeout, and token limits are read from env.
  - JSON response format is enforced via response_format.
  - 1 retry on failure (HTTP error, timeout or invalid JSON).
  - Failures surface as LLMProviderError / LLMResponseParseError so callers
    can tell a provider outage from a malformed answer.
"""

from __future__ import annotations

import json
import logging
import os
import re
import time
from typing import Any, Dict, List, Optional

import httpx

logger = logging.getLogger(__name__)

# ---------------------------------------------------------------------------
# Constants: all read from environment with safe defaults
# ---------------------------------------------------------------------------
_OPENAI_API_URL = "https://api.openai.com/v1/chat/completions"


class LLMError(Exception):
    """Base class for artifact-generation failures coming from the LLM."""


class LLMProviderError(LLMError):
    """The provider could not be reached or answered with an error."""


class LLMResponseParseError(LLMError):
    """The provider answered, but not with a usable JSON object."""


def _env_float(key: str, default: float) -> float:
    try:
        return float(os.getenv(key, str(default)))
    except ValueError:
        return default


def _env_int(key: str, default: int) -> int:
    try:
        return int(os.getenv(key, str(default)))
    except ValueError:
        return default


def get_openai_key() -> str:
    """Read OPENAI_API_KEY from the environment. Raises EnvironmentError if missing."""
    key = os.getenv("OPENAI_API_KEY", "").strip()
    if not key:
        print("⚠️  [OPENAI] API key missing (OPENAI_API_KEY)")
        raise EnvironmentError("OPENAI_API_KEY environment variable not set")
    return key


def is_openai_configured() -> bool:
    return bool(os.getenv("OPENAI_API_KEY", "").strip())


def get_openai_model() -> str:
    """Read OPENAI_MODEL from the environment (default: gpt-4.1)."""
    return os.getenv("OPENAI_MODEL", "gpt-4.1").strip()


def _get_temperature() -> float:
    return _env_float("OPENAI_TEMPERATURE", 0.7)


def _get_timeout() -> float:
    return _env_float("OPENAI_REQUEST_TIMEOUT", 40.0)


def _get_default_max_tokens() -> int:
    return _env_int("OPENAI_MAX_COMPLETION_TOKENS", 4000)


def _build_client(timeout: float) -> httpx.AsyncClient:
    return httpx.AsyncClient(timeout=timeout)


# ---------------------------------------------------------------------------
# JSON sanitizer: extracts valid JSON from LLM output
# ---------------------------------------------------------------------------
def sanitize_json(raw: str) -> str:
    """Extract a JSON object from raw LLM output.

    Handles:
      - Markdown fences (```json ... ```)
      - Leading/trailing whitespace and BOM
      - Prose before/after JSON
      - Trailing commas before } or ]

    Raises ValueError if no JSON object is found.
    """
    text = raw.strip().lstrip("\ufeff")

    if text.startswith("```"):
        parts = text.split("```")
        # parts: ["", "json\n{...}", ""] or ["", "{...}", ""]
        if len(parts) >= 3:
            text = parts[1]
        else:
            text = text[3:]

    text = text.strip()
    if text.lower().startswith("json"):
        text = text[4:].strip()

    brace_idx = text.find("{")
    if brace_idx == -1:
        raise ValueError("LLM did not return a JSON object — no '{' found")
    text = text[brace_idx:]

    rbrace_idx = text.rfind("}")
    if rbrace_idx == -1:
        raise ValueError("LLM did not return a JSON object — no '}' found")
    text = text[: rbrace_idx + 1]

    text = re.sub(r",\s*([}\]])", r"\1", text)

    return text


def validate_required_keys(
    parsed: dict,
    required_keys: List[str],
    context: str = "OpenAI",
) -> List[str]:
    """Return the required keys missing from `parsed` (empty list when complete)."""
    missing = [k for k in required_keys if k not in parsed]
    if missing:
        logger.warning("[%s] Missing required keys: %s", context, missing)
    return missing


def build_payload(
    *,
    model: str,
    messages: List[Dict[str, str]],
    max_completion_tokens: int,
    temperature: float,
) -> Dict[str, Any]:
    """Build an OpenAI chat completions payload with JSON output enforced."""
    return {
        "model": model,
        "messages": messages,
        "max_tokens": max_completion_tokens,
        "temperature": temperature,
        "response_format": {"type": "json_object"},
    }


async def call_openai_chat_async(
    *,
    messages: List[Dict[str, str]],
    max_completion_tokens: int = 0,
    api_key: Optional[str] = None,
    model: Optional[str] = None,
) -> Dict[str, Any]:
    """Call OpenAI chat completions and return the parsed JSON object.

    Parameters
    ----------
    messages : list[dict]
        The messages array (system + user).
    max_completion_tokens : int
        Token limit for the response. 0 = use env default.
    api_key : str, optional
        Override API key (default: from env).
    model : str, optional
        Override model name (default: from env).

    Raises
    ------
    EnvironmentError
        If no API key is configured.
    LLMProviderError
        If the last attempt failed at the HTTP level (status, timeout, transport).
    LLMResponseParseError
        If the last attempt returned content that is not a JSON object.
    """
    if api_key is None:
        api_key = get_openai_key()
    if model is None:
        model = get_openai_model()
    if max_completion_tokens <= 0:
        max_completion_tokens = _get_default_max_tokens()

    timeout = _get_timeout()
    max_retries = 1  # 1 retry only (2 attempts total)

    headers = {
        "Authorization": f"Bearer {api_key}",
        "Content-Type": "application/json",
    }
    payload = build_payload(
        model=model,
        messages=messages,
        max_completion_tokens=max_completion_tokens,
        temperature=_get_temperature(),
    )

    last_error: LLMError = LLMProviderError("OpenAI call was not attempted")

    for attempt in range(max_retries + 1):
        t0 = time.time()
        print(f"🧠 [OPENAI] Calling {model} (attempt {attempt + 1}/{max_retries + 1})")
        try:
            async with _build_client(timeout) as client:
                response = await client.post(_OPENAI_API_URL, headers=headers, json=payload)
        except httpx.TimeoutException:
            duration = time.time() - t0
            logger.warning("[OPENAI] Timeout after %.1fs", duration)
            last_error = LLMProviderError(f"OpenAI request timed out after {duration:.1f}s")
            continue
        except httpx.HTTPError as exc:
            logger.warning("[OPENAI] Transport error: %s", exc)
            last_error = LLMProviderError(f"OpenAI request failed: {exc}")
            continue

        duration = time.time() - t0
        print(f"📦 [OPENAI] HTTP {response.status_code} ({duration:.1f}s)")

        if response.status_code != 200:
            error_body = response.text[:400]
            logger.warning("[OPENAI] Error response: %s", error_body)
            last_error = LLMProviderError(
                f"OpenAI returned HTTP {response.status_code}: {error_body}"
            )
            continue

        try:
            data = response.json()
            raw_content = (data["choices"][0]["message"]["content"] or "").strip()
        except (ValueError, KeyError, IndexError, TypeError) as exc:
            last_error = LLMProviderError(f"Unexpected OpenAI response shape: {exc}")
            continue

        usage = data.get("usage")
        if usage:
            logger.info(
                "[OPENAI] Tokens used: prompt=%s, completion=%s, total=%s",
                usage.get("prompt_tokens", "?"),
                usage.get("completion_tokens", "?"),
                usage.get("total_tokens", "?"),
            )

        if not raw_content:
            logger.warning("[OPENAI] Empty response (attempt %d)", attempt + 1)
            last_error = LLMResponseParseError("OpenAI returned an empty response")
            continue

        try:
            parsed = json.loads(sanitize_json(raw_content))
        except ValueError as exc:
            # json.JSONDecodeError is a ValueError subclass
            logger.warning("[OPENAI] JSON parse failed: %s — raw: %s", exc, raw_content[:300])
            last_error = LLMResponseParseError(f"OpenAI returned malformed JSON: {exc}")
            continue

        if not isinstance(parsed, dict):
            last_error = LLMResponseParseError("OpenAI returned JSON that is not an object")
            continue

        print("🧠 [OPENAI] Success")
        return parsed

    raise last_error
