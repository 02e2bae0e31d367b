"""Scheduler da política de arquivamento de conversas.

Cada conversa tem uma ArchiveStateMachine (pacote fsm). Toda atividade
inbound é registrada, independente do resultado do filtro. Um `tick`
avalia a ociosidade de todas as conversas e entrega as recém-arquivadas
ao colaborador de arquivamento; a máquina é então descartada e uma nova
atividade recria a conversa em ACTIVE. Com a política desabilitada o scheduler
é inerte.
"""

from __future__ import annotations

import asyncio
import contextlib
import logging
from datetime import UTC, datetime, timedelta
from typing import TYPE_CHECKING

from app.domain.events import as_utc
from app.observability import record_archive_transition
from fsm import ArchivePhase, ArchiveStateMachine, create_fsm

if TYPE_CHECKING:
    from app.domain.events import RuntimeEvent
    from app.protocols.outbound import ChatArchiverProtocol
    from config.settings import ArchiveSettings
    from fsm import ArchiveState, StateTransition

logger = logging.getLogger(__name__)


def split_conversation_key(key: str) -> tuple[str, str]:
    """Separa "sessão:chat" em (sessão, chat). O chat pode conter ':'."""
    session, _, chat_id = key.partition(":")
    return session, chat_id


class ArchivePolicyScheduler:
    """Aplica a política global de arquivamento.

    Args:
        settings: Limiares da política (enable, wait_time, days_to_archive)
        archiver: Colaborador que arquiva a conversa na sessão (opcional)
    """

    def __init__(
        self,
        settings: ArchiveSettings,
        archiver: ChatArchiverProtocol | None = None,
    ) -> None:
        self._settings = settings
        self._archiver = archiver
        self._wait_time = timedelta(seconds=settings.wait_time)
        self._archive_after = timedelta(seconds=settings.archive_after_seconds)
        self._machines: dict[str, ArchiveStateMachine] = {}

    @property
    def enabled(self) -> bool:
        return self._settings.enable

    def __len__(self) -> int:
        return len(self._machines)

    def record_activity(self, key: str, at: datetime | None = None) -> None:
        """Registra atividade na conversa; fases ociosas voltam para ACTIVE."""
        if not self.enabled:
            return
        at = as_utc(at) if at is not None else datetime.now(UTC)
        machine = self._machines.get(key)
        if machine is None:
            self._machines[key] = create_fsm(key, at)
            return
        result = machine.record_activity(at)
        if result is not None and result.transition is not None:
            _log_transition(key, result.transition)

    def record_event(self, event: RuntimeEvent) -> None:
        self.record_activity(event.conversation_key, event.timestamp)

    def phase(self, key: str) -> ArchivePhase | None:
        machine = self._machines.get(key)
        return machine.current_state if machine is not None else None

    def state(self, key: str) -> ArchiveState | None:
        machine = self._machines.get(key)
        return machine.snapshot() if machine is not None else None

    def history(self, key: str) -> list[StateTransition]:
        machine = self._machines.get(key)
        return machine.history if machine is not None else []

    async def tick(self, now: datetime | None = None) -> list[str]:
        """Avalia transições de todas as conversas.

        Um único tick pode levar uma conversa de ACTIVE a ARCHIVED.

        Returns:
            Chaves das conversas arquivadas (e descartadas) neste tick
        """
        if not self.enabled:
            return []
        now = as_utc(now) if now is not None else datetime.now(UTC)
        archived: list[str] = []
        for key, machine in list(self._machines.items()):
            for transition in machine.evaluate(now, self._wait_time, self._archive_after):
                _log_transition(key, transition)
                if transition.to_state is ArchivePhase.ARCHIVED:
                    archived.append(key)
        for key in archived:
            await self._hand_off(key)
            # a conversa pode ter sido reativada durante o hand-off
            machine = self._machines.get(key)
            if machine is not None and machine.current_state is ArchivePhase.ARCHIVED:
                del self._machines[key]
        return archived

    async def _hand_off(self, key: str) -> None:
        if self._archiver is None:
            return
        session, chat_id = split_conversation_key(key)
        try:
            await self._archiver.archive(session, chat_id)
        except Exception as exc:
            logger.error(
                "archive_handoff_failed",
                extra={"conversation_key": key, "error_type": type(exc).__name__},
            )

    async def run(self, shutdown: asyncio.Event, interval: float | None = None) -> None:
        """Loop periódico de avaliação até o evento de shutdown."""
        if not self.enabled:
            logger.info("archive_scheduler_disabled")
            return
        period = interval if interval is not None else self._settings.check_interval_seconds
        logger.info("archive_scheduler_started", extra={"interval_seconds": period})
        while not shutdown.is_set():
            try:
                await self.tick()
            except Exception:
                logger.exception("archive_tick_failed")
            with contextlib.suppress(TimeoutError):
                await asyncio.wait_for(shutdown.wait(), timeout=period)
        logger.info("archive_scheduler_stopped", extra={"conversations": len(self._machines)})


def _log_transition(key: str, transition: StateTransition) -> None:
    logger.info(
        "archive_phase_changed",
        extra={"conversation_key": key, **transition.to_log_dict()},
    )
    record_archive_transition(
        transition.from_state.name,
        transition.to_state.name,
        transition.trigger,
    )
