"""Journey graph tests — gating, traversal, progress and table validation.

Pure functions over a record snapshot; no database, no network.
"""

import os
import sys

# Ensure the backend package is importable
sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

import pytest

from venturesmith.journey import (
    ARTIFACT_FIELDS,
    PENDING,
    PHASES,
    Phase,
    Task,
    TaskGraph,
    TaskID,
    UnknownTaskError,
    UnlockState,
    default_graph,
)
from venturesmith.models.venture import Venture


def _small_graph():
    return TaskGraph(
        [
            Phase("p1", "Phase 1", (Task("A", "Task A", "a"), Task("B", "Task B", "b"))),
            Phase("p2", "Phase 2", (Task("C", "Task C", "c", requires=("A",)),)),
        ]
    )


def _full_record(graph):
    return {t.field: '{"data": {}}' for t in graph.tasks}


# ---------------------------------------------------------------------------
# Static table
# ---------------------------------------------------------------------------

class TestJourneyTable:
    def test_default_table_shape(self):
        graph = default_graph()
        assert len(graph.phases) == 11
        assert len(graph.tasks) == 34
        assert graph.first.id == TaskID.BRAINSTORM_IDEA
        assert graph.tasks[-1].id == TaskID.AI_PITCH_COACH

    def test_every_task_id_in_table_once(self):
        ids = [t.id for p in PHASES for t in p.tasks]
        assert sorted(ids) == sorted(TaskID)

    def test_artifact_fields_match_venture_columns(self):
        columns = set(Venture.__table__.columns.keys())
        missing = [f for f in ARTIFACT_FIELDS if f not in columns]
        assert missing == []

    def test_legacy_field_names(self):
        graph = default_graph()
        assert graph.task(TaskID.SCORECARD).field == "dashboard"
        assert graph.task(TaskID.VALIDATE_PROBLEM).field == "customer_validation"
        assert graph.task(TaskID.GENERATE_NAME_IDENTITY).field == "brand_identity"

    def test_lookup_accepts_plain_strings(self):
        graph = default_graph()
        assert graph.task("businessPlan") is graph.task(TaskID.BUSINESS_PLAN)
        assert graph.locate("competitorMatrix") == (2, 1)


class TestTableValidation:
    def test_empty_table_rejected(self):
        with pytest.raises(ValueError):
            TaskGraph([])

    def test_duplicate_id_rejected(self):
        with pytest.raises(ValueError, match="Duplicate task id"):
            TaskGraph([Phase("p", "P", (Task("A", "A", "a"), Task("A", "A2", "b")))])

    def test_duplicate_field_rejected(self):
        with pytest.raises(ValueError, match="Duplicate record field"):
            TaskGraph([Phase("p", "P", (Task("A", "A", "a"), Task("B", "B", "a")))])

    def test_unknown_prerequisite_rejected(self):
        with pytest.raises(ValueError, match="unknown task"):
            TaskGraph([Phase("p", "P", (Task("A", "A", "a", requires=("Z",)),))])

    def test_forward_prerequisite_rejected(self):
        with pytest.raises(ValueError, match="does not come before"):
            TaskGraph([Phase("p", "P", (Task("A", "A", "a", requires=("B",)), Task("B", "B", "b")))])


# ---------------------------------------------------------------------------
# Gating
# ---------------------------------------------------------------------------

class TestGating:
    def test_first_task_always_unlocked(self):
        graph = default_graph()
        for record in ({}, PENDING, _full_record(graph), {"brainstorm_result": ""}):
            assert graph.unlock_state(graph.first.id, record) is UnlockState.UNLOCKED

    def test_unlocked_iff_predecessor_complete(self):
        graph = default_graph()
        tasks = graph.tasks
        for i in range(1, len(tasks)):
            record = {tasks[i - 1].field: "done"}
            assert graph.is_unlocked(tasks[i].id, record) is True
            assert graph.is_unlocked(tasks[i].id, {}) is False

    def test_predecessor_only_not_transitive(self):
        graph = default_graph()
        record = {"business_plan": "done"}
        assert graph.is_unlocked(TaskID.PITCH_DECK, record) is True
        assert graph.is_unlocked(TaskID.BUSINESS_PLAN, record) is False

    def test_blank_value_counts_as_incomplete(self):
        graph = default_graph()
        assert graph.is_unlocked(TaskID.MARKET_PULSE_CHECK, {"brainstorm_result": "   "}) is False

    def test_small_graph_only_first_done(self):
        graph = _small_graph()
        record = {"a": "x"}
        unlocked = {t.id for t in graph.tasks if graph.is_unlocked(t.id, record)}
        locked = {t.id for t in graph.tasks if graph.is_unlocked(t.id, record) is False}
        assert unlocked == {"A", "B"}
        assert locked == {"C"}

    def test_small_graph_second_done(self):
        graph = _small_graph()
        record = {"a": "x", "b": "y"}
        assert all(graph.is_unlocked(t.id, record) for t in graph.tasks)

    def test_pending_record_is_unknown_not_locked(self):
        graph = default_graph()
        for task in graph.tasks[1:]:
            assert graph.unlock_state(task.id, PENDING) is UnlockState.LOADING
            assert graph.is_unlocked(task.id, PENDING) is None
            assert graph.is_complete(task.id, PENDING) is None

    def test_unknown_task_raises(self):
        graph = default_graph()
        with pytest.raises(UnknownTaskError):
            graph.unlock_state("noSuchTask", {})
        with pytest.raises(UnknownTaskError):
            graph.next(42)


class TestGenerationGate:
    def test_effective_prerequisites_include_predecessor(self):
        graph = _small_graph()
        assert [t.id for t in graph.prerequisites("C")] == ["A", "B"]
        assert graph.prerequisites("A") == ()

    def test_declared_prerequisite_blocks_generation(self):
        graph = _small_graph()
        record = {"b": "y"}
        assert graph.unlock_state("C", record) is UnlockState.UNLOCKED
        assert graph.generation_state("C", record) is UnlockState.LOCKED
        assert [t.id for t in graph.missing_prerequisites("C", record)] == ["A"]

    def test_generation_unlocked_when_all_done(self):
        graph = _small_graph()
        assert graph.generation_state("C", {"a": "x", "b": "y"}) is UnlockState.UNLOCKED

    def test_generation_pending(self):
        graph = _small_graph()
        assert graph.generation_state("B", PENDING) is UnlockState.LOADING
        assert graph.missing_prerequisites("B", PENDING) is None

    def test_customer_personas_needs_brand_identity(self):
        graph = default_graph()
        record = {t.field: "x" for t in graph.tasks[: graph.index_of(TaskID.GENERATE_CUSTOMER_PERSONAS)]}
        record.pop("brand_identity")
        state = graph.generation_state(TaskID.GENERATE_CUSTOMER_PERSONAS, record)
        assert state is UnlockState.LOCKED


# ---------------------------------------------------------------------------
# Traversal and progress
# ---------------------------------------------------------------------------

class TestTraversal:
    def test_next_previous_inverse(self):
        graph = default_graph()
        for task in graph.tasks[:-1]:
            assert graph.previous(graph.next(task.id).id) == task
        for task in graph.tasks[1:]:
            assert graph.next(graph.previous(task.id).id) == task

    def test_boundaries(self):
        graph = default_graph()
        assert graph.previous(graph.first.id) is None
        assert graph.next(graph.tasks[-1].id) is None

    def test_next_crosses_phase_boundary(self):
        graph = default_graph()
        assert graph.next(TaskID.DEFINE_MISSION_VISION).id == TaskID.GENERATE_NAME_IDENTITY


class TestProgress:
    def test_empty_and_full(self):
        graph = default_graph()
        assert graph.completion_ratio({}) == 0.0
        assert graph.completion_ratio(_full_record(graph)) == 1.0

    def test_monotonic_in_order(self):
        graph = default_graph()
        record = {}
        last = graph.completion_ratio(record)
        for task in graph.tasks:
            record[task.field] = "done"
            ratio = graph.completion_ratio(record)
            assert ratio > last
            last = ratio

    def test_pending_ratio_unknown(self):
        assert default_graph().completion_ratio(PENDING) is None

    def test_statuses_cover_every_task(self):
        graph = _small_graph()
        statuses = graph.statuses({"a": "x"})
        assert [(s.phase_index, s.task_index) for s in statuses] == [(0, 0), (0, 1), (1, 0)]
        assert [s.completed for s in statuses] == [True, False, False]
        assert statuses[2].state is UnlockState.LOCKED
