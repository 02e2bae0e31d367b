"""
Máquina de estados (ArchiveStateMachine) de uma conversa.

Controla as fases de arquivamento e mantém histórico rastreável
das transições.
"""

from collections import deque
from datetime import datetime, timedelta
from typing import Any

from fsm.rules.guards import GuardResult, evaluate_guards
from fsm.states.archive import DEFAULT_INITIAL_PHASE, ArchivePhase
from fsm.transitions.rules import get_valid_targets, is_transition_valid
from fsm.types.transition import ArchiveState, StateTransition, TransitionResult

DEFAULT_MAX_HISTORY = 50

TRIGGER_ACTIVITY = "activity"
TRIGGER_IDLE = "idle_timeout"
TRIGGER_ARCHIVE = "archive_timeout"


class ArchiveStateMachine:
    """
    Máquina de fases de arquivamento de uma conversa.

    Attributes:
        conversation_key: Chave da conversa
        current_state: Fase atual
        last_activity_at: Última atividade registrada
        pending_since: Momento de entrada em PENDING
        history: Transições realizadas (limitadas a max_history)
    """

    __slots__ = (
        "_conversation_key",
        "_current_state",
        "_history",
        "_last_activity_at",
        "_pending_since",
    )

    def __init__(
        self,
        conversation_key: str,
        last_activity_at: datetime,
        initial_state: ArchivePhase | None = None,
        max_history: int = DEFAULT_MAX_HISTORY,
    ) -> None:
        self._conversation_key = conversation_key
        self._current_state = initial_state or DEFAULT_INITIAL_PHASE
        self._last_activity_at = last_activity_at
        self._pending_since: datetime | None = None
        self._history: deque[StateTransition] = deque(maxlen=max_history)

    @property
    def conversation_key(self) -> str:
        return self._conversation_key

    @property
    def current_state(self) -> ArchivePhase:
        return self._current_state

    @property
    def last_activity_at(self) -> datetime:
        return self._last_activity_at

    @property
    def pending_since(self) -> datetime | None:
        return self._pending_since

    @property
    def history(self) -> list[StateTransition]:
        """Histórico de transições (cópia para evitar mutação externa)."""
        return list(self._history)

    def get_valid_targets(self) -> frozenset[ArchivePhase]:
        return get_valid_targets(self._current_state)

    def transition(
        self,
        target: ArchivePhase,
        trigger: str,
        at: datetime,
        metadata: dict[str, Any] | None = None,
    ) -> TransitionResult:
        """
        Tenta realizar uma transição de fase.

        Args:
            target: Fase de destino
            trigger: Identificador do gatilho
            at: Momento lógico da transição
            metadata: Dados adicionais para auditoria (nunca PII)

        Returns:
            TransitionResult com sucesso/falha e dados da transição
        """
        if not is_transition_valid(self._current_state, target):
            return TransitionResult(
                success=False,
                error_reason=(
                    f"Transição inválida: {self._current_state.name} → {target.name}"
                ),
            )

        guard_result: GuardResult = evaluate_guards(self._current_state, target)
        if not guard_result.allowed:
            return TransitionResult(success=False, error_reason=guard_result.reason)

        transition = StateTransition(
            from_state=self._current_state,
            to_state=target,
            trigger=trigger,
            metadata=metadata or {},
            timestamp=at,
        )
        self._current_state = target
        self._history.append(transition)
        return TransitionResult(success=True, transition=transition)

    def record_activity(self, at: datetime) -> TransitionResult | None:
        """
        Registra atividade na conversa.

        Atividade fora de ordem (anterior à última registrada) não
        move o relógio para trás. Fases ociosas voltam para ACTIVE.

        Returns:
            Resultado da reativação, ou None se já estava ACTIVE
        """
        if at > self._last_activity_at:
            self._last_activity_at = at
        if self._current_state is ArchivePhase.ACTIVE:
            return None
        result = self.transition(ArchivePhase.ACTIVE, TRIGGER_ACTIVITY, at)
        self._pending_since = None
        return result

    def evaluate(
        self,
        now: datetime,
        wait_time: timedelta,
        archive_after: timedelta,
    ) -> list[StateTransition]:
        """
        Avança as fases de acordo com a ociosidade em `now`.

        Um único chamado pode passar por PENDING e ARCHIVED; a entrada em
        PENDING é datada no limiar de espera, não em `now`.

        Returns:
            Transições realizadas nesta avaliação (em ordem)
        """
        taken: list[StateTransition] = []
        if self._current_state is ArchivePhase.ACTIVE:
            pending_at = self._last_activity_at + wait_time
            if now >= pending_at:
                result = self.transition(ArchivePhase.PENDING, TRIGGER_IDLE, pending_at)
                if result.transition is not None:
                    self._pending_since = pending_at
                    taken.append(result.transition)
        if self._current_state is ArchivePhase.PENDING and self._pending_since is not None:
            archive_at = self._pending_since + archive_after
            if now >= archive_at:
                result = self.transition(ArchivePhase.ARCHIVED, TRIGGER_ARCHIVE, archive_at)
                if result.transition is not None:
                    taken.append(result.transition)
        return taken

    def snapshot(self) -> ArchiveState:
        """Retorna fotografia imutável do estado atual."""
        return ArchiveState(
            conversation_key=self._conversation_key,
            last_activity_at=self._last_activity_at,
            phase=self._current_state,
            pending_since=self._pending_since,
        )

    def get_state_summary(self) -> dict[str, Any]:
        """Resumo seguro para logs."""
        return {
            "conversation_key": self._conversation_key,
            "current_state": self._current_state.name,
            "transition_count": len(self._history),
            "valid_targets": sorted(s.name for s in self.get_valid_targets()),
        }

    def get_history_summary(self) -> list[dict[str, Any]]:
        return [t.to_log_dict() for t in self._history]


def create_fsm(conversation_key: str, last_activity_at: datetime) -> ArchiveStateMachine:
    """Factory de máquina para uma conversa recém-vista."""
    return ArchiveStateMachine(
        conversation_key=conversation_key,
        last_activity_at=last_activity_at,
    )
