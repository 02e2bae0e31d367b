"""
Guards para transições de fase.

Regras adicionais avaliadas depois do mapa de transições. Um guard
pode bloquear a transição com motivo legível.
"""

from collections.abc import Callable

from fsm.states.archive import ArchivePhase


class GuardResult:
    """
    Resultado da avaliação de um guard.

    Attributes:
        allowed: Se a transição é permitida
        reason: Motivo do bloqueio (se allowed=False)
    """

    __slots__ = ("allowed", "reason")

    def __init__(self, allowed: bool, reason: str | None = None) -> None:
        self.allowed = allowed
        self.reason = reason

    @classmethod
    def allow(cls) -> "GuardResult":
        return cls(allowed=True)

    @classmethod
    def deny(cls, reason: str) -> "GuardResult":
        return cls(allowed=False, reason=reason)


Guard = Callable[[ArchivePhase, ArchivePhase], GuardResult]


def guard_same_phase(from_phase: ArchivePhase, to_phase: ArchivePhase) -> GuardResult:
    """Guard: transição reflexiva nunca é registrada."""
    if from_phase == to_phase:
        return GuardResult.deny(
            f"Transição reflexiva não permitida: {from_phase.name} → {to_phase.name}"
        )
    return GuardResult.allow()


# Aplicados em ordem; todos devem permitir
DEFAULT_GUARDS: list[Guard] = [
    guard_same_phase,
]


def evaluate_guards(
    from_phase: ArchivePhase,
    to_phase: ArchivePhase,
    guards: list[Guard] | None = None,
) -> GuardResult:
    """
    Avalia todos os guards para uma transição.

    Returns:
        GuardResult do primeiro guard que negar, ou allow() se todos passarem
    """
    for guard in guards if guards is not None else DEFAULT_GUARDS:
        result = guard(from_phase, to_phase)
        if not result.allowed:
            return result
    return GuardResult.allow()
