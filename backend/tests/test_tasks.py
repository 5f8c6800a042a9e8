"""Task artifact route tests — gating, generation, storage, error mapping.

The generator is mocked at the route boundary; no OpenAI calls are made.
"""

import os
import sys

# Ensure the backend package is importable
sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

import json
import uuid
from unittest.mock import AsyncMock, patch

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker

from venturesmith.agents.venture_agent.generator import ArtifactValidationError
from venturesmith.database import Base, get_db
from venturesmith.main import app
from venturesmith.services.artifact_codec import encode_artifact
from venturesmith.services.auth_utils import create_dev_access_token
from venturesmith.services.generation_guard import generation_registry
from venturesmith.services.openai_client import LLMProviderError, LLMResponseParseError

# ---------------------------------------------------------------------------
# Test database setup
# ---------------------------------------------------------------------------
TEST_DATABASE_URL = "sqlite:///./test_tasks.db"
engine = create_engine(TEST_DATABASE_URL, connect_args={"check_same_thread": False})
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

_user_counter = 0

_GENERATE = "venturesmith.routes.tasks.generate_task_artifact"

BRAINSTORM = {
    "refinedIdea": "Farm-to-restaurant marketplace with next-day delivery",
    "keyFeatures": ["ordering", "logistics"],
    "targetAudience": "independent restaurants",
    "uniqueValueProposition": "fresher produce, fewer middlemen",
}


def _next_username(prefix="builder"):
    global _user_counter
    _user_counter += 1
    return f"{prefix}_{_user_counter}"


def override_get_db():
    db = TestingSessionLocal()
    try:
        yield db
    finally:
        db.close()


client = TestClient(app)


@pytest.fixture(autouse=True)
def setup_db(monkeypatch):
    """Create tables before each test, drop after. OpenAI is 'configured'."""
    monkeypatch.setenv("OPENAI_API_KEY", "sk-test")
    app.dependency_overrides[get_db] = override_get_db
    Base.metadata.create_all(bind=engine)
    yield
    Base.metadata.drop_all(bind=engine)
    app.dependency_overrides.pop(get_db, None)


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

def _create_user():
    from venturesmith.models.user import User

    db = TestingSessionLocal()
    uid = str(uuid.uuid4())
    uname = _next_username()
    db.add(User(id=uid, email=f"{uname}@test.com", username=uname))
    db.commit()
    db.close()

    token = create_dev_access_token(uid, f"{uname}@test.com", uname)
    return uid, {"Authorization": f"Bearer {token}"}


def _create_venture(headers):
    resp = client.post(
        "/ventures/",
        json={"idea": "A marketplace connecting small farms with local restaurants", "name": "FarmLink"},
        headers=headers,
    )
    assert resp.status_code == 201, resp.text
    return resp.json()["id"]


def _set_field(venture_id, field, value):
    from venturesmith.models.venture import Venture

    db = TestingSessionLocal()
    venture = db.query(Venture).filter(Venture.id == str(venture_id)).first()
    setattr(venture, field, value)
    db.commit()
    db.close()


def _get_field(venture_id, field):
    from venturesmith.models.venture import Venture

    db = TestingSessionLocal()
    venture = db.query(Venture).filter(Venture.id == str(venture_id)).first()
    value = getattr(venture, field)
    db.close()
    return value


# ---------------------------------------------------------------------------
# GET task
# ---------------------------------------------------------------------------

class TestGetTask:
    def test_not_generated_placeholder(self):
        _, headers = _create_user()
        vid = _create_venture(headers)
        resp = client.get(f"/ventures/{vid}/tasks/brainstormIdea", headers=headers)
        assert resp.status_code == 200
        data = resp.json()
        assert data["state"] == "unlocked"
        assert data["can_generate"] is True
        assert data["completed"] is False
        assert data["data"] is None
        assert data["schema_version"] is None

    def test_locked_task(self):
        _, headers = _create_user()
        vid = _create_venture(headers)
        data = client.get(f"/ventures/{vid}/tasks/marketPulseCheck", headers=headers).json()
        assert data["state"] == "locked"
        assert data["can_generate"] is False
        assert data["missing_prerequisites"] == ["brainstormIdea"]

    def test_legacy_row_decoded(self):
        _, headers = _create_user()
        vid = _create_venture(headers)
        _set_field(vid, "brainstorm_result", json.dumps(BRAINSTORM))
        data = client.get(f"/ventures/{vid}/tasks/brainstormIdea", headers=headers).json()
        assert data["completed"] is True
        assert data["legacy"] is True
        assert data["schema_version"] == 1
        assert data["data"] == BRAINSTORM

    def test_unknown_task_is_422(self):
        _, headers = _create_user()
        vid = _create_venture(headers)
        assert client.get(f"/ventures/{vid}/tasks/launchRocket", headers=headers).status_code == 422

    def test_other_users_venture_is_404(self):
        _, alice = _create_user()
        _, bob = _create_user()
        vid = _create_venture(alice)
        assert client.get(f"/ventures/{vid}/tasks/brainstormIdea", headers=bob).status_code == 404


# ---------------------------------------------------------------------------
# POST generate
# ---------------------------------------------------------------------------

class TestGenerate:
    def test_generate_first_task(self):
        _, headers = _create_user()
        vid = _create_venture(headers)
        with patch(_GENERATE, new=AsyncMock(return_value=BRAINSTORM)) as mock_gen:
            resp = client.post(f"/ventures/{vid}/tasks/brainstormIdea/generate", headers=headers)

        assert resp.status_code == 201, resp.text
        data = resp.json()
        assert data["completed"] is True
        assert data["legacy"] is False
        assert data["data"] == BRAINSTORM
        assert mock_gen.await_args.kwargs["venture_name"] == "FarmLink"
        assert mock_gen.await_args.kwargs["context"] == {}

        stored = json.loads(_get_field(vid, "brainstorm_result"))
        assert stored["task_id"] == "brainstormIdea"
        assert stored["schema_version"] == 1
        assert stored["data"] == BRAINSTORM

        venture = client.get(f"/ventures/{vid}", headers=headers).json()
        assert venture["completion_ratio"] == pytest.approx(1 / 34)

    def test_prerequisite_artifacts_passed_as_context(self):
        _, headers = _create_user()
        vid = _create_venture(headers)
        _set_field(vid, "brainstorm_result", encode_artifact("brainstormIdea", BRAINSTORM))
        answer = {"overallSentiment": "positive", "demandScore": 72, "keyTrends": [], "risks": []}
        with patch(_GENERATE, new=AsyncMock(return_value=answer)) as mock_gen:
            resp = client.post(f"/ventures/{vid}/tasks/marketPulseCheck/generate", headers=headers)

        assert resp.status_code == 201
        assert mock_gen.await_args.kwargs["context"] == {"brainstormIdea": BRAINSTORM}

    def test_regenerate_overwrites(self):
        _, headers = _create_user()
        vid = _create_venture(headers)
        _set_field(vid, "brainstorm_result", encode_artifact("brainstormIdea", {"refinedIdea": "old"}))
        with patch(_GENERATE, new=AsyncMock(return_value=BRAINSTORM)):
            resp = client.post(f"/ventures/{vid}/tasks/brainstormIdea/generate", headers=headers)
        assert resp.json()["data"] == BRAINSTORM

    def test_locked_task_is_409(self):
        _, headers = _create_user()
        vid = _create_venture(headers)
        with patch(_GENERATE, new=AsyncMock()) as mock_gen:
            resp = client.post(f"/ventures/{vid}/tasks/marketPulseCheck/generate", headers=headers)
        assert resp.status_code == 409
        assert resp.json()["detail"]["missing_prerequisites"] == ["brainstormIdea"]
        mock_gen.assert_not_awaited()

    def test_declared_prerequisites_block_generation(self):
        _, headers = _create_user()
        vid = _create_venture(headers)
        # Linear predecessor done, earlier declared prerequisites not.
        _set_field(vid, "mission_vision", encode_artifact("defineMissionVision", {"mission": "m"}))

        task = client.get(f"/ventures/{vid}/tasks/generateNameIdentity", headers=headers).json()
        assert task["state"] == "unlocked"
        assert task["can_generate"] is False

        with patch(_GENERATE, new=AsyncMock()):
            resp = client.post(f"/ventures/{vid}/tasks/generateNameIdentity/generate", headers=headers)
        assert resp.status_code == 409
        assert resp.json()["detail"]["missing_prerequisites"] == ["brainstormIdea", "marketPulseCheck"]

    def test_in_flight_generation_is_409(self):
        _, headers = _create_user()
        vid = _create_venture(headers)
        with generation_registry.claim(vid, "brainstormIdea"):
            with patch(_GENERATE, new=AsyncMock(return_value=BRAINSTORM)) as mock_gen:
                resp = client.post(f"/ventures/{vid}/tasks/brainstormIdea/generate", headers=headers)
        assert resp.status_code == 409
        assert "already in progress" in resp.json()["detail"]
        mock_gen.assert_not_awaited()
        assert not generation_registry.is_active(vid, "brainstormIdea")

    def test_slot_released_after_failure(self):
        _, headers = _create_user()
        vid = _create_venture(headers)
        with patch(_GENERATE, new=AsyncMock(side_effect=LLMProviderError("down"))):
            client.post(f"/ventures/{vid}/tasks/brainstormIdea/generate", headers=headers)
        assert not generation_registry.is_active(vid, "brainstormIdea")


class TestGenerateErrors:
    def test_missing_api_key_is_503(self, monkeypatch):
        monkeypatch.delenv("OPENAI_API_KEY", raising=False)
        _, headers = _create_user()
        vid = _create_venture(headers)
        resp = client.post(f"/ventures/{vid}/tasks/brainstormIdea/generate", headers=headers)
        assert resp.status_code == 503

    @pytest.mark.parametrize(
        "error",
        [
            LLMProviderError("OpenAI returned HTTP 500"),
            LLMResponseParseError("OpenAI returned malformed JSON"),
            ArtifactValidationError("brainstormIdea", ["keyFeatures"]),
        ],
    )
    def test_generation_failures_are_502(self, error):
        _, headers = _create_user()
        vid = _create_venture(headers)
        with patch(_GENERATE, new=AsyncMock(side_effect=error)):
            resp = client.post(f"/ventures/{vid}/tasks/brainstormIdea/generate", headers=headers)
        assert resp.status_code == 502
        assert _get_field(vid, "brainstorm_result") is None

    def test_unknown_task_is_422(self):
        _, headers = _create_user()
        vid = _create_venture(headers)
        resp = client.post(f"/ventures/{vid}/tasks/launchRocket/generate", headers=headers)
        assert resp.status_code == 422

    def test_venture_deleted_during_generation_is_404(self):
        from venturesmith.models.venture import Venture

        _, headers = _create_user()
        vid = _create_venture(headers)

        def _delete_then_answer(*args, **kwargs):
            db = TestingSessionLocal()
            db.query(Venture).filter(Venture.id == vid).delete()
            db.commit()
            db.close()
            return BRAINSTORM

        with patch(_GENERATE, new=AsyncMock(side_effect=_delete_then_answer)):
            resp = client.post(f"/ventures/{vid}/tasks/brainstormIdea/generate", headers=headers)

        assert resp.status_code == 404
        assert "deleted" in resp.json()["detail"]
        assert not generation_registry.is_active(vid, "brainstormIdea")
        assert client.get(f"/ventures/{vid}", headers=headers).status_code == 404
