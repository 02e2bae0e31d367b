"""
Fases de arquivamento de uma conversa.

Uma conversa começa ACTIVE, passa a PENDING após `wait_time` segundos
sem atividade e a ARCHIVED após `days_to_archive` dias em PENDING.
Qualquer atividade nova devolve a conversa para ACTIVE.
"""

from enum import StrEnum


class ArchivePhase(StrEnum):
    """
    Fases canônicas do ciclo de arquivamento.

        - ACTIVE: Conversa com atividade recente
        - PENDING: Ociosa além do tempo de espera, aguardando arquivamento
        - ARCHIVED: Arquivada (reabre em nova atividade)
    """

    ACTIVE = "ACTIVE"
    PENDING = "PENDING"
    ARCHIVED = "ARCHIVED"

    def __str__(self) -> str:
        return self.value


# Fase inicial para conversas recém-vistas
DEFAULT_INITIAL_PHASE: ArchivePhase = ArchivePhase.ACTIVE

# Fases alcançadas apenas por ociosidade
IDLE_PHASES: frozenset[ArchivePhase] = frozenset({
    ArchivePhase.PENDING,
    ArchivePhase.ARCHIVED,
})


def is_idle(phase: ArchivePhase) -> bool:
    """Verifica se a fase decorre de ociosidade."""
    return phase in IDLE_PHASES
