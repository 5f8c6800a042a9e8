"""Venture artifact generator tests — prompt assembly and key validation.

The OpenAI call is mocked; every test runs offline.
"""

import os
import sys

# Ensure the backend package is importable
sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

import asyncio
from unittest.mock import AsyncMock, patch

import pytest

from venturesmith.agents.venture_agent.generator import (
    ArtifactValidationError,
    generate_task_artifact,
)
from venturesmith.agents.venture_agent.prompts import TASK_PROMPTS, build_task_prompt
from venturesmith.journey import TaskID, UnknownTaskError
from venturesmith.services.openai_client import LLMProviderError

_CALL = "venturesmith.agents.venture_agent.generator.call_openai_chat_async"


def _generate(task_id, context=None):
    return asyncio.run(
        generate_task_artifact(
            task_id,
            venture_name="FarmLink",
            idea="A marketplace connecting small farms with local restaurants",
            context=context or {},
        )
    )


class TestPrompts:
    def test_every_task_has_a_prompt(self):
        assert set(TASK_PROMPTS) == {t.value for t in TaskID}

    def test_prompt_lists_required_keys_and_context(self):
        prompt = build_task_prompt(
            "competitorMatrix",
            task_name="Competitor Matrix",
            venture_name="FarmLink",
            idea="farm to table",
            context={"marketResearch": {"summary": "Growing market"}},
        )
        assert "TASK: Competitor Matrix" in prompt
        assert "- matrix" in prompt
        assert "Growing market" in prompt

    def test_long_context_truncated(self):
        prompt = build_task_prompt(
            "aiMentor",
            task_name="Get Feedback from AI Mentor",
            venture_name="V",
            idea="i",
            context={"businessPlan": {"executiveSummary": "x" * 50000}},
        )
        assert "(truncated)" in prompt
        assert len(prompt) < 20000


class TestGenerator:
    def test_returns_parsed_artifact(self):
        answer = {"mission": "Feed cities", "vision": "Local first", "coreValues": ["trust"]}
        with patch(_CALL, new=AsyncMock(return_value=answer)) as mock_call:
            result = _generate(TaskID.DEFINE_MISSION_VISION, {"brainstormIdea": {"refinedIdea": "x"}})

        assert result == answer
        kwargs = mock_call.await_args.kwargs
        assert kwargs["max_completion_tokens"] == TASK_PROMPTS["defineMissionVision"].max_tokens
        system, user = kwargs["messages"]
        assert system["role"] == "system"
        assert "Define Mission & Vision" in user["content"]
        assert "refinedIdea" in user["content"]

    def test_accepts_plain_string_id(self):
        answer = {"matrix": []}
        with patch(_CALL, new=AsyncMock(return_value=answer)):
            assert _generate("competitorMatrix") == answer

    def test_missing_keys_raise_validation_error(self):
        with patch(_CALL, new=AsyncMock(return_value={"mission": "only this"})):
            with pytest.raises(ArtifactValidationError) as exc_info:
                _generate(TaskID.DEFINE_MISSION_VISION)
        assert exc_info.value.missing == ["vision", "coreValues"]
        assert exc_info.value.task_id == "defineMissionVision"

    def test_provider_error_propagates(self):
        with patch(_CALL, new=AsyncMock(side_effect=LLMProviderError("down"))):
            with pytest.raises(LLMProviderError):
                _generate(TaskID.AI_MENTOR)

    def test_unknown_task(self):
        with pytest.raises(UnknownTaskError):
            _generate("notATask")


_RESEARCH = "venturesmith.agents.venture_agent.generator.gather_web_research"

PASSAGES = [
    {
        "title": "Farm sourcing report",
        "url": "https://example.com/report",
        "content": "Farm-to-table sourcing platforms grew 18% last year.",
    },
]


class TestWebGrounding:
    def test_market_research_prompt_carries_passages(self):
        answer = {"summary": "Growing", "competitors": [], "trends": []}
        with patch(_RESEARCH, new=AsyncMock(return_value=PASSAGES)) as mock_research, patch(
            _CALL, new=AsyncMock(return_value=answer)
        ) as mock_call:
            result = _generate(TaskID.MARKET_RESEARCH)

        assert mock_research.await_args.args[0] == "marketResearch"
        user = mock_call.await_args.kwargs["messages"][1]["content"]
        assert "WEB RESEARCH" in user
        assert "[1] Farm sourcing report (https://example.com/report)" in user
        assert "grew 18% last year" in user
        assert result["sources"] == [{"title": "Farm sourcing report", "url": "https://example.com/report"}]

    def test_no_results_falls_back_to_llm_only(self):
        answer = {"investors": [{"name": "Seed Fund"}]}
        with patch(_RESEARCH, new=AsyncMock(return_value=[])), patch(
            _CALL, new=AsyncMock(return_value=answer)
        ) as mock_call:
            result = _generate(TaskID.INVESTOR_MATCHING)

        user = mock_call.await_args.kwargs["messages"][1]["content"]
        assert "live search unavailable" in user
        assert "sources" not in result

    def test_llm_only_task_skips_research(self):
        with patch(_RESEARCH, new=AsyncMock()) as mock_research, patch(
            _CALL, new=AsyncMock(return_value={"matrix": []})
        ) as mock_call:
            _generate(TaskID.COMPETITOR_MATRIX)

        mock_research.assert_not_awaited()
        assert "WEB RESEARCH" not in mock_call.await_args.kwargs["messages"][1]["content"]
