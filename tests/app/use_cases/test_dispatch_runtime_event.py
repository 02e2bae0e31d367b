"""Testes do EventPipeline (filtro → mídia → etiquetas → dispatcher)."""

from __future__ import annotations

import json
from datetime import UTC, datetime
from unittest.mock import AsyncMock

import httpx
import pytest

from app.domain.delivery import Channel
from app.domain.events import EventKind, MediaReference, RuntimeEvent
from app.domain.filter_config import FilterConfig
from app.infra.http import HttpWebhookSender
from app.infra.stores import MemoryDeliveryAuditStore, MemoryTokenStore
from app.infra.websocket import SubscriberHub
from app.services import (
    ArchivePolicyScheduler,
    LabelMapper,
    MediaResolver,
    NotificationDispatcher,
)
from app.sessions import SessionTokenRegistry
from app.use_cases.dispatch_runtime_event import EventPipeline
from config.settings import ArchiveSettings, WebhookSettings, WebsocketSettings
from utils.errors import MediaFetchFailedError

URL = "https://hooks.example/in"
SELF = "5511000@c.us"
PEER = "5511999@c.us"


class _Harness:
    """Monta pipeline real sobre MockTransport e hub em memória."""

    def __init__(
        self,
        *,
        webhook: WebhookSettings | None = None,
        websocket: WebsocketSettings | None = None,
        media_resolver: MediaResolver | None = None,
        replay_unread: bool = False,
    ) -> None:
        self.bodies: list[dict] = []
        webhook = webhook or WebhookSettings(url=URL, backoff_base_seconds=0.0)
        websocket = websocket or WebsocketSettings()
        client = httpx.AsyncClient(transport=httpx.MockTransport(self._handle))
        self.hub = SubscriberHub()
        self.audit = MemoryDeliveryAuditStore()
        self.registry = SessionTokenRegistry(MemoryTokenStore(), "secret")
        self.archive = ArchivePolicyScheduler(ArchiveSettings(enable=True))
        self.dispatcher = NotificationDispatcher(
            webhook,
            websocket,
            self.audit,
            webhook_sender=HttpWebhookSender(client=client),
            hub=self.hub,
        )
        self.pipeline = EventPipeline(
            filter_config=FilterConfig.from_settings(webhook, websocket),
            registry=self.registry,
            dispatcher=self.dispatcher,
            archive=self.archive,
            media_resolver=media_resolver,
            label_mapper=LabelMapper(enabled=True, prefix="tagone-"),
            replay_unread_on_start=replay_unread,
        )

    def _handle(self, request: httpx.Request) -> httpx.Response:
        self.bodies.append(json.loads(request.content))
        return httpx.Response(200)

    async def drain(self) -> None:
        await self.dispatcher.join()
        await self.dispatcher.stop(timeout_seconds=1.0)


def _event(kind: EventKind = EventKind.MESSAGE, sender: str = PEER, **kwargs) -> RuntimeEvent:
    return RuntimeEvent(kind=kind, session="vendas", sender=sender, **kwargs)


class TestEventPipeline:
    """Fluxo ponta a ponta de um evento."""

    @pytest.mark.asyncio
    async def test_reaction_reaches_webhook_exactly_once(self) -> None:
        harness = _Harness()
        harness.dispatcher.start()
        subscription = harness.hub.subscribe("vendas")
        event = _event(
            EventKind.REACTION,
            data={"reaction": "👍", "msg_id": "ABC"},
            labels=("vip",),
            event_id="evt-r1",
        )

        result = await harness.pipeline.handle(event)
        await harness.drain()

        assert result.dispatched
        assert set(result.envelopes) == {Channel.WEBHOOK, Channel.WEBSOCKET}
        assert len(harness.bodies) == 1
        body = harness.bodies[0]
        assert body["event"] == "onreactionmessage"
        assert body["data"] == {"reaction": "👍", "msg_id": "ABC"}
        assert body["labels"] == ["tagone-vip"]
        assert subscription.queue.get_nowait()["event_id"] == "evt-r1"
        assert harness.audit.get_records() == []

    @pytest.mark.asyncio
    async def test_disabled_kind_skips_webhook(self) -> None:
        harness = _Harness(webhook=WebhookSettings(url=URL, on_reaction_message=False))
        harness.dispatcher.start()

        result = await harness.pipeline.handle(_event(EventKind.REACTION))
        await harness.drain()

        assert set(result.envelopes) == {Channel.WEBSOCKET}
        assert harness.bodies == []

    @pytest.mark.asyncio
    async def test_self_echo_suppressed_with_bound_identity(self) -> None:
        harness = _Harness(webhook=WebhookSettings(url=URL, on_self_message=True))
        await harness.registry.create_session("vendas")
        await harness.registry.bind_identity("vendas", SELF)
        harness.dispatcher.start()

        result = await harness.pipeline.handle(_event(sender=SELF))
        await harness.drain()

        assert result.dispatched is False
        assert result.decision.reason == "self_echo"
        assert harness.bodies == []

    @pytest.mark.asyncio
    async def test_filtered_event_still_counts_as_activity(self) -> None:
        harness = _Harness()
        at = datetime(2024, 5, 1, tzinfo=UTC)
        event = _event(sender="status@broadcast", timestamp=at)

        result = await harness.pipeline.handle(event)

        assert result.decision.reason == "sender_ignored"
        state = harness.archive.state(event.conversation_key)
        assert state is not None
        assert state.last_activity_at == at

    @pytest.mark.asyncio
    async def test_media_failure_delivers_with_error_flag(self) -> None:
        downloader = AsyncMock()
        downloader.download.side_effect = MediaFetchFailedError("timeout")
        harness = _Harness(
            webhook=WebhookSettings(url=URL, auto_download=True),
            websocket=WebsocketSettings(auto_download=False),
            media_resolver=MediaResolver(downloader),
        )
        harness.dispatcher.start()
        event = _event(media=MediaReference(url="https://cdn.example/a.jpg"))

        result = await harness.pipeline.handle(event)
        await harness.drain()

        assert result.media_error is True
        assert harness.bodies[0]["media"] is None
        assert harness.bodies[0]["media_error"] is True
        assert result.envelopes[Channel.WEBSOCKET].media_error is False
        downloader.download.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_handle_raw_invalid_event_is_dropped(self) -> None:
        harness = _Harness()
        assert await harness.pipeline.handle_raw({"kind": "unknown", "session": "s"}) is None

    @pytest.mark.asyncio
    async def test_handle_raw_normalizes_dict(self) -> None:
        harness = _Harness()
        harness.dispatcher.start()

        result = await harness.pipeline.handle_raw(
            {"kind": "ack", "session": "vendas", "sender": PEER, "data": {"ack": 3}, "timestamp": 1700000000}
        )
        await harness.drain()

        assert result is not None
        assert harness.bodies[0]["event"] == "onack"
        assert harness.bodies[0]["data"] == {"ack": 3}

    @pytest.mark.asyncio
    async def test_replay_unread_only_when_enabled(self) -> None:
        events = [_event(), _event(EventKind.ACK), _event()]

        disabled = _Harness()
        assert await disabled.pipeline.replay_unread(events) == 0

        enabled = _Harness(replay_unread=True)
        enabled.dispatcher.start()
        assert await enabled.pipeline.replay_unread(events) == 2
        await enabled.drain()
        assert [b["event"] for b in enabled.bodies] == ["onmessage", "onmessage"]

    @pytest.mark.asyncio
    async def test_handle_raw_malformed_media_is_dropped(self) -> None:
        harness = _Harness()
        payload = {"kind": "message", "session": "vendas", "sender": PEER, "media": "http://x/y.jpg"}

        assert await harness.pipeline.handle_raw(payload) is None
        assert len(harness.archive) == 0

    @pytest.mark.asyncio
    async def test_handle_raw_naive_timestamp_then_tick(self) -> None:
        harness = _Harness()
        harness.dispatcher.start()
        payload = {"kind": "message", "session": "vendas", "sender": PEER, "timestamp": "2026-01-01T10:00:00"}

        result = await harness.pipeline.handle_raw(payload)
        await harness.archive.tick()
        await harness.drain()

        assert result is not None
        assert harness.bodies[0]["event"] == "onmessage"
