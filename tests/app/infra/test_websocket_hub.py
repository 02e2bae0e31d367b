"""Testes do SubscriberHub."""

from __future__ import annotations

import pytest

from app.infra.websocket import SubscriberHub
from utils.errors import SubscriberLimitError


class TestSubscriberHub:
    def test_invalid_limits_rejected(self) -> None:
        with pytest.raises(ValueError):
            SubscriberHub(max_subscribers=0)

    def test_limit_enforced_and_released(self) -> None:
        hub = SubscriberHub(max_subscribers=2)
        first = hub.subscribe("s1")
        hub.subscribe("s2")

        with pytest.raises(SubscriberLimitError):
            hub.subscribe("s1")

        hub.unsubscribe(first)
        assert hub.subscriber_count == 1
        hub.subscribe("s1")

    def test_slow_consumer_drops_oldest(self) -> None:
        hub = SubscriberHub(queue_size=2)
        subscription = hub.subscribe("s1")

        for n in range(4):
            assert hub.broadcast("s1", {"n": n}) == 1

        assert subscription.dropped == 2
        assert [subscription.queue.get_nowait()["n"] for _ in range(2)] == [2, 3]

    def test_broadcast_without_subscribers(self) -> None:
        assert SubscriberHub().broadcast("nobody", {}) == 0

    def test_unsubscribe_twice_is_noop(self) -> None:
        hub = SubscriberHub()
        subscription = hub.subscribe("s1")
        hub.unsubscribe(subscription)
        hub.unsubscribe(subscription)
        assert hub.subscriber_count == 0

    @pytest.mark.asyncio
    async def test_get_returns_in_order(self) -> None:
        hub = SubscriberHub()
        subscription = hub.subscribe("s1")
        hub.broadcast("s1", {"n": 1})
        hub.broadcast("s1", {"n": 2})
        assert (await subscription.get())["n"] == 1
        assert (await subscription.get())["n"] == 2
