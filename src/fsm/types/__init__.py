"""
Exports públicos do módulo fsm/types.

Tipos e estruturas de dados para transições de fase.
"""

from fsm.types.transition import ArchiveState, StateTransition, TransitionResult

__all__ = [
    "ArchiveState",
    "StateTransition",
    "TransitionResult",
]
