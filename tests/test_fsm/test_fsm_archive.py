"""
Testes para o módulo FSM de arquivamento.

Cobre fases, mapa de transições, guards e ArchiveStateMachine
(avaliação por ociosidade, reativação e histórico).
"""

from datetime import UTC, datetime, timedelta

import pytest

from fsm import (
    DEFAULT_INITIAL_PHASE,
    TRIGGER_ACTIVITY,
    TRIGGER_ARCHIVE,
    TRIGGER_IDLE,
    VALID_TRANSITIONS,
    ArchivePhase,
    ArchiveStateMachine,
    StateTransition,
    TransitionResult,
    create_fsm,
    evaluate_guards,
    get_valid_targets,
    is_idle,
    is_transition_valid,
    validate_transition_map,
)
from fsm.rules.guards import guard_same_phase

T0 = datetime(2024, 1, 1, 12, 0, tzinfo=UTC)
WAIT = timedelta(seconds=10)
ARCHIVE_AFTER = timedelta(days=45)


class TestPhasesAndTransitions:
    """Fases, mapa de transições e guards."""

    def test_phases_and_initial_phase(self) -> None:
        assert [p.value for p in ArchivePhase] == ["ACTIVE", "PENDING", "ARCHIVED"]
        assert DEFAULT_INITIAL_PHASE is ArchivePhase.ACTIVE
        assert not is_idle(ArchivePhase.ACTIVE)
        assert is_idle(ArchivePhase.PENDING)
        assert is_idle(ArchivePhase.ARCHIVED)

    def test_transition_map_is_consistent(self) -> None:
        assert validate_transition_map() == []
        assert set(VALID_TRANSITIONS) == set(ArchivePhase)

    def test_archived_only_reachable_from_pending(self) -> None:
        assert is_transition_valid(ArchivePhase.PENDING, ArchivePhase.ARCHIVED)
        assert not is_transition_valid(ArchivePhase.ACTIVE, ArchivePhase.ARCHIVED)
        assert get_valid_targets(ArchivePhase.ARCHIVED) == frozenset({ArchivePhase.ACTIVE})

    def test_reflexive_transition_denied_by_guard(self) -> None:
        result = guard_same_phase(ArchivePhase.ACTIVE, ArchivePhase.ACTIVE)
        assert result.allowed is False
        assert "reflexiva" in (result.reason or "")
        assert evaluate_guards(ArchivePhase.ACTIVE, ArchivePhase.PENDING).allowed

    def test_state_transition_requires_trigger(self) -> None:
        with pytest.raises(ValueError, match="trigger"):
            StateTransition(ArchivePhase.ACTIVE, ArchivePhase.PENDING, trigger=" ")

    def test_transition_result_consistency(self) -> None:
        with pytest.raises(ValueError):
            TransitionResult(success=True)
        with pytest.raises(ValueError):
            TransitionResult(success=False)


class TestArchiveStateMachine:
    """Comportamento da máquina de uma conversa."""

    def test_new_conversation_is_active(self) -> None:
        machine = create_fsm("s1:5511@c.us", T0)
        assert machine.current_state is ArchivePhase.ACTIVE
        assert machine.history == []
        assert machine.evaluate(T0 + timedelta(seconds=9), WAIT, ARCHIVE_AFTER) == []

    def test_idle_after_wait_time_becomes_pending(self) -> None:
        machine = create_fsm("s1:chat", T0)

        taken = machine.evaluate(T0 + timedelta(seconds=30), WAIT, ARCHIVE_AFTER)

        assert [t.to_state for t in taken] == [ArchivePhase.PENDING]
        assert taken[0].trigger == TRIGGER_IDLE
        assert taken[0].timestamp == T0 + WAIT
        assert machine.pending_since == T0 + WAIT

    def test_pending_for_archive_window_becomes_archived(self) -> None:
        machine = create_fsm("s1:chat", T0)
        machine.evaluate(T0 + WAIT, WAIT, ARCHIVE_AFTER)

        assert machine.evaluate(T0 + WAIT + timedelta(days=44), WAIT, ARCHIVE_AFTER) == []
        taken = machine.evaluate(T0 + WAIT + ARCHIVE_AFTER, WAIT, ARCHIVE_AFTER)

        assert [t.trigger for t in taken] == [TRIGGER_ARCHIVE]
        assert machine.current_state is ArchivePhase.ARCHIVED

    def test_single_evaluation_can_archive_directly(self) -> None:
        """Tick tardio passa por PENDING e ARCHIVED na mesma avaliação."""
        machine = create_fsm("s1:chat", T0)

        taken = machine.evaluate(T0 + timedelta(days=60), WAIT, ARCHIVE_AFTER)

        assert [t.to_state for t in taken] == [ArchivePhase.PENDING, ArchivePhase.ARCHIVED]
        assert taken[1].timestamp == T0 + WAIT + ARCHIVE_AFTER

    def test_activity_reactivates_and_resets_clock(self) -> None:
        machine = create_fsm("s1:chat", T0)
        machine.evaluate(T0 + timedelta(minutes=1), WAIT, ARCHIVE_AFTER)
        later = T0 + timedelta(minutes=2)

        result = machine.record_activity(later)

        assert result is not None and result.success
        assert result.transition is not None
        assert result.transition.trigger == TRIGGER_ACTIVITY
        assert machine.current_state is ArchivePhase.ACTIVE
        assert machine.pending_since is None
        assert machine.evaluate(later + timedelta(seconds=5), WAIT, ARCHIVE_AFTER) == []

    def test_activity_while_active_is_noop(self) -> None:
        machine = create_fsm("s1:chat", T0)
        assert machine.record_activity(T0 + timedelta(seconds=1)) is None
        assert machine.history == []

    def test_out_of_order_activity_does_not_rewind_clock(self) -> None:
        machine = create_fsm("s1:chat", T0)
        machine.record_activity(T0 - timedelta(hours=1))
        assert machine.last_activity_at == T0

    def test_invalid_transition_reports_reason(self) -> None:
        machine = create_fsm("s1:chat", T0)
        result = machine.transition(ArchivePhase.ARCHIVED, "manual", T0)
        assert result.success is False
        assert "ACTIVE → ARCHIVED" in (result.error_reason or "")
        assert machine.current_state is ArchivePhase.ACTIVE

    def test_history_is_bounded_and_summarized(self) -> None:
        machine = ArchiveStateMachine("s1:chat", T0, max_history=2)
        at = T0
        for _ in range(3):
            at += timedelta(minutes=1)
            machine.evaluate(at, WAIT, ARCHIVE_AFTER)
            machine.record_activity(at)

        assert len(machine.history) == 2
        summary = machine.get_state_summary()
        assert summary["current_state"] == "ACTIVE"
        assert summary["valid_targets"] == ["PENDING"]
        assert machine.get_history_summary()[-1]["trigger"] == TRIGGER_ACTIVITY

    def test_snapshot_reflects_state(self) -> None:
        machine = create_fsm("s1:chat", T0)
        machine.evaluate(T0 + WAIT, WAIT, ARCHIVE_AFTER)
        snapshot = machine.snapshot()
        assert snapshot.phase is ArchivePhase.PENDING
        assert snapshot.pending_since == T0 + WAIT
        assert snapshot.conversation_key == "s1:chat"
