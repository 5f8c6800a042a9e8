"""AI Co-Founder chat routes — questions answered from a venture's artifacts.

Endpoints:
  POST /chat/{venture_id}/ask     — Ask a question about a venture
  GET  /chat/{venture_id}/status  — Which artifacts the chat can draw on
"""

from __future__ import annotations

import logging
from typing import List

from fastapi import APIRouter, Depends, HTTPException, status
from pydantic import BaseModel, Field

from ..models.venture import Venture
from ..services.chat_service import ask_venture, collect_venture_context
from .deps import get_owned_venture

logger = logging.getLogger(__name__)

router = APIRouter(
    prefix="/chat",
    tags=["AI Chat Co-Founder"],
)


# ── Request / Response schemas ────────────────────────────────────────────

class ChatRequest(BaseModel):
    question: str = Field(
        ...,
        min_length=3,
        max_length=1000,
        description="Founder question about the venture",
    )


class ChatResponse(BaseModel):
    answer: str = Field(..., description="AI Co-Founder response")
    sources: List[str] = Field(
        default_factory=list,
        description="Journey tasks whose artifacts were given as context",
    )


class ChatStatusResponse(BaseModel):
    venture_id: str
    available_tasks: List[str]
    ready: bool = Field(
        ..., description="True if at least one artifact has been generated"
    )


# ── Routes ────────────────────────────────────────────────────────────────

@router.post(
    "/{venture_id}/ask",
    response_model=ChatResponse,
    summary="Ask AI Co-Founder",
    response_description="Answer grounded in the venture's generated artifacts",
)
async def ask_chat(
    body: ChatRequest,
    venture: Venture = Depends(get_owned_venture),
) -> ChatResponse:
    """Ask the AI Co-Founder a question about a venture.

    The answer only draws on artifacts already generated for the venture.
    With none, the response points the founder at the first journey step.
    """
    print(f"💬 [CHAT] Question for venture {venture.id}: {body.question[:80]}...")

    try:
        result = await ask_venture(venture, body.question)
    except EnvironmentError as exc:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE, detail=str(exc)
        ) from exc

    return ChatResponse(answer=result["answer"], sources=result["sources"])


@router.get(
    "/{venture_id}/status",
    response_model=ChatStatusResponse,
    summary="Chat Data Status",
    response_description="Which journey tasks have artifacts for this venture",
)
def chat_status(venture: Venture = Depends(get_owned_venture)) -> ChatStatusResponse:
    available = [item["task_id"] for item in collect_venture_context(venture)]
    return ChatStatusResponse(
        venture_id=str(venture.id),
        available_tasks=available,
        ready=len(available) > 0,
    )
