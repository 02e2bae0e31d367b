"""
Tipos e estruturas de dados para transições de fase.

Registros imutáveis usados para rastrear o ciclo de arquivamento
de cada conversa.
"""

from dataclasses import dataclass, field
from datetime import UTC, datetime
from typing import Any

from fsm.states.archive import ArchivePhase


@dataclass(frozen=True, slots=True)
class StateTransition:
    """
    Representa uma transição de fase na FSM.

    Attributes:
        from_state: Fase de origem da transição
        to_state: Fase de destino da transição
        trigger: Identificador do gatilho (ex: 'idle_timeout', 'activity')
        metadata: Dados adicionais para auditoria (nunca conter PII)
        timestamp: Momento lógico da transição (UTC)
    """

    from_state: ArchivePhase
    to_state: ArchivePhase
    trigger: str
    metadata: dict[str, Any] = field(default_factory=dict)
    timestamp: datetime = field(
        default_factory=lambda: datetime.now(UTC)
    )

    def __post_init__(self) -> None:
        if not self.trigger or not self.trigger.strip():
            raise ValueError("trigger não pode ser vazio")

    def to_log_dict(self) -> dict[str, Any]:
        """Retorna representação segura para logs."""
        return {
            "from_state": self.from_state.name,
            "to_state": self.to_state.name,
            "trigger": self.trigger,
            "timestamp": self.timestamp.isoformat(),
            "metadata": self.metadata,
        }


@dataclass(frozen=True, slots=True)
class TransitionResult:
    """
    Resultado de uma tentativa de transição.

    Attributes:
        success: Se a transição foi bem-sucedida
        transition: Dados da transição (se success=True)
        error_reason: Motivo da falha (se success=False)
    """

    success: bool
    transition: StateTransition | None = None
    error_reason: str | None = None

    def __post_init__(self) -> None:
        """Valida consistência do resultado."""
        if self.success and self.transition is None:
            raise ValueError("Transição bem-sucedida deve incluir transition")
        if not self.success and self.error_reason is None:
            raise ValueError("Transição falha deve incluir error_reason")


@dataclass(frozen=True, slots=True)
class ArchiveState:
    """
    Fotografia do estado de arquivamento de uma conversa.

    Attributes:
        conversation_key: Chave "sessão:chat" da conversa
        last_activity_at: Última atividade observada
        phase: Fase atual
        pending_since: Entrada em PENDING (None fora dessa fase e de ARCHIVED)
    """

    conversation_key: str
    last_activity_at: datetime
    phase: ArchivePhase
    pending_since: datetime | None = None
