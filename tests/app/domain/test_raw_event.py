"""Testes do contrato RawRuntimeEvent (payload do produtor)."""

from __future__ import annotations

from datetime import UTC, datetime, timedelta, timezone

import pytest
from pydantic import ValidationError

from app.domain.events import EventKind, RuntimeEvent, as_utc
from app.domain.raw_event import RawRuntimeEvent, parse_runtime_event

BASE = {"kind": "message", "session": "vendas", "sender": "5511999@c.us"}


class TestParseRuntimeEvent:
    def test_minimal_payload(self) -> None:
        event = parse_runtime_event(BASE)

        assert event.kind is EventKind.MESSAGE
        assert event.media is None
        assert event.labels == ()
        assert event.data == {}
        assert event.timestamp.tzinfo is UTC
        assert event.event_id

    def test_naive_iso_timestamp_is_utc(self) -> None:
        event = parse_runtime_event({**BASE, "timestamp": "2026-01-01T10:00:00"})
        assert event.timestamp == datetime(2026, 1, 1, 10, 0, tzinfo=UTC)

    def test_offset_timestamp_converted_to_utc(self) -> None:
        event = parse_runtime_event({**BASE, "timestamp": "2026-01-01T07:00:00-03:00"})
        assert event.timestamp == datetime(2026, 1, 1, 10, 0, tzinfo=UTC)
        assert event.timestamp.utcoffset() == timedelta(0)

    def test_epoch_timestamp(self) -> None:
        event = parse_runtime_event({**BASE, "timestamp": 1700000000})
        assert event.timestamp == datetime.fromtimestamp(1700000000, tz=UTC)

    def test_media_alias_and_nulls(self) -> None:
        event = parse_runtime_event(
            {**BASE, "media": {"id": "m1", "mimetype": "image/png"}, "labels": None, "data": None}
        )
        assert event.media is not None
        assert event.media.media_id == "m1"
        assert event.labels == ()
        assert event.data == {}

    def test_empty_media_means_none(self) -> None:
        assert parse_runtime_event({**BASE, "media": {}}).media is None

    @pytest.mark.parametrize(
        "payload",
        [
            {**BASE, "kind": "unknown"},
            {"kind": "message", "session": "vendas"},
            {**BASE, "session": ""},
            {**BASE, "media": "http://x/y.jpg"},
            {**BASE, "media": {"mimetype": "image/png"}},
            {**BASE, "data": "ack"},
            {**BASE, "data": [1, 2]},
            {**BASE, "labels": "vip"},
            {**BASE, "timestamp": "ontem"},
            ["message"],
            None,
        ],
    )
    def test_invalid_payloads_raise_validation_error(self, payload: object) -> None:
        with pytest.raises(ValidationError):
            parse_runtime_event(payload)

    def test_extra_fields_ignored(self) -> None:
        model = RawRuntimeEvent.model_validate({**BASE, "browser": "chromium"})
        assert not hasattr(model, "browser")


class TestRuntimeEventTimestamp:
    def test_direct_construction_normalizes_to_utc(self) -> None:
        naive = RuntimeEvent(
            kind=EventKind.ACK,
            session="vendas",
            sender="a",
            timestamp=datetime(2026, 1, 1, 10, 0),
        )
        shifted = RuntimeEvent(
            kind=EventKind.ACK,
            session="vendas",
            sender="a",
            timestamp=datetime(2026, 1, 1, 12, 0, tzinfo=timezone(timedelta(hours=2))),
        )

        assert naive.timestamp == shifted.timestamp
        assert naive.timestamp.tzinfo is UTC

    def test_as_utc_keeps_aware_instant(self) -> None:
        at = datetime(2026, 1, 1, 10, 0, tzinfo=UTC)
        assert as_utc(at) == at
