"""
Módulo FSM — fases de arquivamento de conversas.

Estrutura:
    - states/: Fases (ArchivePhase enum)
    - transitions/: Regras de transição (VALID_TRANSITIONS)
    - rules/: Guards
    - manager/: Máquina de fases (ArchiveStateMachine)
    - types/: Tipos de dados (StateTransition, TransitionResult, ArchiveState)
"""

from fsm.manager import (
    TRIGGER_ACTIVITY,
    TRIGGER_ARCHIVE,
    TRIGGER_IDLE,
    ArchiveStateMachine,
    create_fsm,
)
from fsm.rules import GuardResult, evaluate_guards
from fsm.states import (
    DEFAULT_INITIAL_PHASE,
    IDLE_PHASES,
    ArchivePhase,
    is_idle,
)
from fsm.transitions import (
    VALID_TRANSITIONS,
    get_valid_targets,
    is_transition_valid,
    validate_transition_map,
)
from fsm.types import ArchiveState, StateTransition, TransitionResult

__all__ = [
    "DEFAULT_INITIAL_PHASE",
    "IDLE_PHASES",
    "TRIGGER_ACTIVITY",
    "TRIGGER_ARCHIVE",
    "TRIGGER_IDLE",
    "VALID_TRANSITIONS",
    "ArchivePhase",
    "ArchiveState",
    "ArchiveStateMachine",
    "GuardResult",
    "StateTransition",
    "TransitionResult",
    "create_fsm",
    "evaluate_guards",
    "get_valid_targets",
    "is_idle",
    "is_transition_valid",
    "validate_transition_map",
]
