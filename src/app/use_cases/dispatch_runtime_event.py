"""Use case: processar um evento de runtime até o dispatcher.

Fluxo:
    evento → atividade de arquivamento (sempre) → filtro → mídia →
    etiquetas → envelope → dispatcher (0..2 canais)
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any

from pydantic import ValidationError

from app.domain.delivery import Channel, DeliveryDecision
from app.domain.envelope import DeliveryEnvelope
from app.domain.events import EventKind, RuntimeEvent
from app.domain.raw_event import parse_runtime_event
from app.observability import correlation_scope, record_filter_decision
from app.services.event_filter import decide
from app.services.label_mapper import LabelMapper
from app.services.media_resolver import MediaResolution

if TYPE_CHECKING:
    from collections.abc import Iterable

    from app.domain.filter_config import FilterConfig
    from app.services.archive_scheduler import ArchivePolicyScheduler
    from app.services.dispatcher import NotificationDispatcher
    from app.services.media_resolver import MediaResolver
    from app.sessions.registry import SessionTokenRegistry

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class PipelineResult:
    """Resultado do processamento de um evento."""

    event_id: str
    decision: DeliveryDecision
    envelopes: dict[Channel, DeliveryEnvelope] = field(default_factory=dict)
    media_error: bool = False

    @property
    def dispatched(self) -> bool:
        return bool(self.envelopes)


class EventPipeline:
    """Orquestra filtro, mídia, etiquetas e dispatch de um evento."""

    def __init__(
        self,
        *,
        filter_config: FilterConfig,
        registry: SessionTokenRegistry,
        dispatcher: NotificationDispatcher,
        archive: ArchivePolicyScheduler,
        media_resolver: MediaResolver | None = None,
        label_mapper: LabelMapper | None = None,
        replay_unread_on_start: bool = False,
    ) -> None:
        self._config = filter_config
        self._registry = registry
        self._dispatcher = dispatcher
        self._archive = archive
        self._media = media_resolver
        self._labels = label_mapper or LabelMapper()
        self._replay_unread_on_start = replay_unread_on_start

    async def handle(self, event: RuntimeEvent) -> PipelineResult:
        """Processa um evento. Erros de entrega nunca chegam aqui."""
        with correlation_scope(event.event_id):
            self._archive.record_event(event)

            self_identity = None
            if self._config.self_echo_suppression:
                self_identity = await self._registry.self_identity(event.session)

            decision = decide(event, self._config, self_identity)
            record_filter_decision(
                event.kind.value,
                tuple(c.value for c in decision.channels),
                reason=decision.reason,
                correlation_id=event.event_id,
            )
            if decision.is_empty:
                return PipelineResult(event_id=event.event_id, decision=decision)

            resolution = MediaResolution()
            if decision.needs_media_fetch and self._media is not None:
                resolution = await self._media.resolve(event, decision)
            elif decision.needs_media_fetch:
                resolution = MediaResolution(error=True)
                logger.warning("media_resolver_not_configured")

            labels = self._labels.map(event.labels)
            envelopes = self._build_envelopes(event, decision, resolution, labels)
            for channel, envelope in envelopes.items():
                self._dispatcher.submit(envelope, (channel,))

            logger.info(
                "runtime_event_dispatched",
                extra={
                    "kind": event.kind.value,
                    "session": event.session,
                    "channels": [c.value for c in envelopes],
                    "media_error": resolution.error,
                },
            )
            return PipelineResult(
                event_id=event.event_id,
                decision=decision,
                envelopes=envelopes,
                media_error=resolution.error,
            )

    async def handle_raw(self, data: Any) -> PipelineResult | None:
        """Valida o payload do produtor e processa. Payloads inválidos são logados e descartados."""
        try:
            event = parse_runtime_event(data)
        except ValidationError as exc:
            fields = sorted({str(err["loc"][0]) for err in exc.errors() if err["loc"]})
            logger.warning(
                "runtime_event_invalid",
                extra={"error_count": exc.error_count(), "fields": fields},
            )
            return None
        return await self.handle(event)

    async def replay_unread(self, events: Iterable[RuntimeEvent]) -> int:
        """Reentrega mensagens não lidas no startup (allUnreadOnStart).

        Returns:
            Número de eventos despachados (0 quando a flag está desligada)
        """
        if not self._replay_unread_on_start:
            return 0
        dispatched = 0
        for event in events:
            if event.kind is not EventKind.MESSAGE:
                continue
            result = await self.handle(event)
            dispatched += int(result.dispatched)
        logger.info("unread_replay_completed", extra={"dispatched": dispatched})
        return dispatched

    @staticmethod
    def _build_envelopes(
        event: RuntimeEvent,
        decision: DeliveryDecision,
        resolution: MediaResolution,
        labels: list[str],
    ) -> dict[Channel, DeliveryEnvelope]:
        wants_media = {
            Channel.WEBHOOK: decision.webhook_media,
            Channel.WEBSOCKET: decision.websocket_media,
        }
        envelopes: dict[Channel, DeliveryEnvelope] = {}
        for channel in decision.channels:
            with_media = wants_media[channel]
            envelopes[channel] = DeliveryEnvelope.from_event(
                event,
                labels=labels,
                media=resolution.media if with_media else None,
                media_error=resolution.error and with_media,
            )
        return envelopes
