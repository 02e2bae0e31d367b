"""Clientes HTTP de saída."""

from app.infra.http.webhook_sender import HttpWebhookSender, WebhookClientConfig

__all__ = [
    "HttpWebhookSender",
    "WebhookClientConfig",
]
