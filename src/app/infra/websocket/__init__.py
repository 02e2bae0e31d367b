"""Hub de assinantes websocket."""

from app.infra.websocket.hub import SubscriberHub, Subscription

__all__ = [
    "SubscriberHub",
    "Subscription",
]
