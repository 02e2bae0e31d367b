"""
Regras de transição válidas entre fases de arquivamento.

A fase só avança ACTIVE → PENDING → ARCHIVED e só regride para ACTIVE
por atividade nova.
"""

from fsm.states.archive import ArchivePhase

# Tipagem explícita do mapa de transições
TransitionMap = dict[ArchivePhase, frozenset[ArchivePhase]]

# Chave: fase de origem
# Valor: conjunto de fases de destino permitidas
VALID_TRANSITIONS: TransitionMap = {
    ArchivePhase.ACTIVE: frozenset({
        ArchivePhase.PENDING,
    }),
    # PENDING: arquiva por ociosidade ou reativa por atividade
    ArchivePhase.PENDING: frozenset({
        ArchivePhase.ARCHIVED,
        ArchivePhase.ACTIVE,
    }),
    ArchivePhase.ARCHIVED: frozenset({
        ArchivePhase.ACTIVE,
    }),
}


def get_valid_targets(phase: ArchivePhase) -> frozenset[ArchivePhase]:
    """Retorna as fases de destino válidas para uma fase de origem."""
    return VALID_TRANSITIONS.get(phase, frozenset())


def is_transition_valid(from_phase: ArchivePhase, to_phase: ArchivePhase) -> bool:
    """
    Verifica se uma transição é válida segundo as regras definidas.

    Args:
        from_phase: Fase de origem
        to_phase: Fase de destino

    Returns:
        True se a transição é permitida, False caso contrário
    """
    return to_phase in get_valid_targets(from_phase)


def validate_transition_map() -> list[str]:
    """
    Valida a integridade do mapa de transições.

    Verifica:
    - Todas as fases do enum estão no mapa
    - Nenhuma transição é reflexiva
    - ARCHIVED só é alcançada a partir de PENDING

    Returns:
        Lista de erros encontrados (vazia se válido)
    """
    errors: list[str] = []

    for phase in ArchivePhase:
        if phase not in VALID_TRANSITIONS:
            errors.append(f"Fase {phase.name} ausente em VALID_TRANSITIONS")

    for from_phase, targets in VALID_TRANSITIONS.items():
        if from_phase in targets:
            errors.append(f"Transição reflexiva em {from_phase.name}")
        if ArchivePhase.ARCHIVED in targets and from_phase is not ArchivePhase.PENDING:
            errors.append(f"{from_phase.name} → ARCHIVED pula a fase PENDING")

    return errors
