"""Hub de assinantes websocket por sessão.

Cada assinante tem uma fila limitada; quando cheia, a mensagem mais
antiga é descartada para abrir espaço (um consumidor lento nunca
bloqueia o broadcast). O número total de assinantes é limitado por
`max_listeners`.
"""

from __future__ import annotations

import asyncio
import itertools
import logging
from typing import Any

from utils.errors import SubscriberLimitError

logger = logging.getLogger(__name__)

_subscription_ids = itertools.count(1)


class Subscription:
    """Assinatura de um consumidor websocket em uma sessão."""

    __slots__ = ("dropped", "id", "queue", "session")

    def __init__(self, session: str, queue_size: int) -> None:
        self.id = next(_subscription_ids)
        self.session = session
        self.queue: asyncio.Queue[dict[str, Any]] = asyncio.Queue(maxsize=queue_size)
        self.dropped = 0

    def offer(self, payload: dict[str, Any]) -> None:
        """Enfileira sem bloquear, descartando a mais antiga se cheia."""
        while True:
            try:
                self.queue.put_nowait(payload)
                return
            except asyncio.QueueFull:
                self.queue.get_nowait()
                self.dropped += 1

    async def get(self) -> dict[str, Any]:
        return await self.queue.get()


class SubscriberHub:
    """Registro de assinantes e broadcast por sessão.

    Args:
        max_subscribers: Teto global de assinantes (maxListeners)
        queue_size: Capacidade da fila de cada assinante
    """

    def __init__(self, max_subscribers: int = 15, queue_size: int = 100) -> None:
        if max_subscribers < 1 or queue_size < 1:
            raise ValueError("max_subscribers e queue_size devem ser >= 1")
        self._max_subscribers = max_subscribers
        self._queue_size = queue_size
        self._by_session: dict[str, dict[int, Subscription]] = {}

    @property
    def subscriber_count(self) -> int:
        return sum(len(subs) for subs in self._by_session.values())

    def subscribe(self, session: str) -> Subscription:
        """Registra assinante.

        Raises:
            SubscriberLimitError: teto de assinantes atingido.
        """
        if self.subscriber_count >= self._max_subscribers:
            logger.warning(
                "websocket_subscriber_rejected",
                extra={"session": session, "max_listeners": self._max_subscribers},
            )
            raise SubscriberLimitError(
                f"Limite de {self._max_subscribers} assinantes atingido"
            )
        subscription = Subscription(session, self._queue_size)
        self._by_session.setdefault(session, {})[subscription.id] = subscription
        logger.info(
            "websocket_subscribed",
            extra={"session": session, "subscribers": self.subscriber_count},
        )
        return subscription

    def unsubscribe(self, subscription: Subscription) -> None:
        subs = self._by_session.get(subscription.session)
        if not subs or subs.pop(subscription.id, None) is None:
            return
        if not subs:
            del self._by_session[subscription.session]
        if subscription.dropped:
            logger.warning(
                "websocket_subscriber_dropped_messages",
                extra={"session": subscription.session, "dropped": subscription.dropped},
            )
        logger.info(
            "websocket_unsubscribed",
            extra={"session": subscription.session, "subscribers": self.subscriber_count},
        )

    def broadcast(self, session: str, payload: dict[str, Any]) -> int:
        """Entrega o payload a todos os assinantes da sessão.

        Returns:
            Número de assinantes alcançados
        """
        subs = list(self._by_session.get(session, {}).values())
        for subscription in subs:
            subscription.offer(payload)
        return len(subs)
