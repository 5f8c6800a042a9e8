# Schemas package
from .artifact_schema import ArtifactEnvelope
from .journey_schema import (
    JourneyResponse,
    PhaseTableResponse,
    SelectTaskRequest,
    SelectTaskResponse,
    TaskArtifactResponse,
)
from .venture_schema import VentureCreate, VentureListResponse, VentureRecord, VentureRename

__all__ = [
    "ArtifactEnvelope",
    "JourneyResponse",
    "PhaseTableResponse",
    "SelectTaskRequest",
    "SelectTaskResponse",
    "TaskArtifactResponse",
    "VentureCreate",
    "VentureListResponse",
    "VentureRecord",
    "VentureRename",
]
