"""
Exports públicos do módulo fsm/states.

Fases do ciclo de arquivamento de conversas.
"""

from fsm.states.archive import (
    DEFAULT_INITIAL_PHASE,
    IDLE_PHASES,
    ArchivePhase,
    is_idle,
)

__all__ = [
    "DEFAULT_INITIAL_PHASE",
    "IDLE_PHASES",
    "ArchivePhase",
    "is_idle",
]
