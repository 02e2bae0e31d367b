"""
Exports públicos do módulo fsm/manager.

Máquina de fases de arquivamento (ArchiveStateMachine).
"""

from fsm.manager.machine import (
    TRIGGER_ACTIVITY,
    TRIGGER_ARCHIVE,
    TRIGGER_IDLE,
    ArchiveStateMachine,
    create_fsm,
)

__all__ = [
    "TRIGGER_ACTIVITY",
    "TRIGGER_ARCHIVE",
    "TRIGGER_IDLE",
    "ArchiveStateMachine",
    "create_fsm",
]
