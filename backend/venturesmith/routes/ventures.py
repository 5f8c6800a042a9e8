"""Venture routes — create, list, rename and delete ventures.

Endpoints:
  POST   /ventures/              — Submit an idea, creating a venture
  GET    /ventures/              — List all ventures for current user
  GET    /ventures/{venture_id}  — Get a single venture summary
  PATCH  /ventures/{venture_id}  — Rename a venture
  DELETE /ventures/{venture_id}  — Delete a venture and its artifacts
"""

from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, Response, status
from sqlalchemy.orm import Session

from ..database import get_db
from ..models.user import User
from ..models.venture import Venture
from ..schemas.venture_schema import (
    VentureCreate,
    VentureListResponse,
    VentureRecord,
    VentureRename,
)
from ..services.auth_dependency import get_current_user
from ..services.venture_service import (
    create_venture,
    delete_venture,
    list_ventures,
    patch_venture_field,
)
from .deps import get_owned_venture, venture_to_response

logger = logging.getLogger(__name__)

router = APIRouter(
    prefix="/ventures",
    tags=["Ventures"],
)


@router.post(
    "/",
    response_model=VentureRecord,
    status_code=status.HTTP_201_CREATED,
    summary="Submit a business idea",
    response_description="The newly created venture",
)
def submit_idea(
    payload: VentureCreate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
) -> VentureRecord:
    """Create a venture from an idea. The journey starts at the first task."""
    venture = create_venture(db, payload, current_user.id)
    print(f"🚀 [VENTURE] Created venture {venture.id} ('{venture.name}') for user {current_user.id}")
    return venture_to_response(venture)


@router.get(
    "/",
    response_model=VentureListResponse,
    summary="List all ventures for current user",
    response_description="All ventures owned by the authenticated user",
)
def list_my_ventures(
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
) -> VentureListResponse:
    ventures = list_ventures(db, current_user.id)
    return VentureListResponse(ventures=[venture_to_response(v) for v in ventures])


@router.get(
    "/{venture_id}",
    response_model=VentureRecord,
    summary="Get venture by ID",
    response_description="Venture summary with journey progress",
)
def get_my_venture(venture: Venture = Depends(get_owned_venture)) -> VentureRecord:
    return venture_to_response(venture)


@router.patch(
    "/{venture_id}",
    response_model=VentureRecord,
    summary="Rename a venture",
)
def rename_venture(
    body: VentureRename,
    venture: Venture = Depends(get_owned_venture),
    db: Session = Depends(get_db),
) -> VentureRecord:
    venture = patch_venture_field(db, venture, "name", body.name)
    print(f"✏️  [VENTURE] Renamed {venture.id} to '{venture.name}'")
    return venture_to_response(venture)


@router.delete(
    "/{venture_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Delete a venture",
)
def remove_venture(
    venture: Venture = Depends(get_owned_venture),
    db: Session = Depends(get_db),
) -> Response:
    venture_id = venture.id
    delete_venture(db, venture)
    logger.info("[VENTURE] Deleted venture %s", venture_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
