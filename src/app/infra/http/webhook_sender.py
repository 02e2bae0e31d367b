"""Envio de envelopes para o webhook configurado.

Cada chamada a `send` é UMA tentativa; retry e backoff ficam no
dispatcher, que conhece o evento de shutdown.
"""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass, field
from typing import Any

import httpx

from app.observability import get_correlation_id, record_latency
from utils.errors import DeliveryFailedError

logger = logging.getLogger(__name__)


@dataclass
class WebhookClientConfig:
    """Configuração do cliente HTTP do webhook."""

    timeout_seconds: float = 15.0
    default_headers: dict[str, str] = field(default_factory=dict)
    verify_ssl: bool = True


class HttpWebhookSender:
    """POST do envelope JSON via httpx.

    Args:
        config: Timeout, headers e TLS
        client: AsyncClient pré-construído (testes injetam MockTransport)
    """

    def __init__(
        self,
        config: WebhookClientConfig | None = None,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        self._config = config or WebhookClientConfig()
        self._client = client
        self._owns_client = client is None

    def _get_client(self) -> httpx.AsyncClient:
        if self._client is None:
            self._client = httpx.AsyncClient(
                verify=self._config.verify_ssl,
                timeout=self._config.timeout_seconds,
                headers=self._config.default_headers,
            )
        return self._client

    async def send(self, url: str, payload: dict[str, Any]) -> int:
        """Executa uma tentativa de entrega.

        Returns:
            Status HTTP (2xx)

        Raises:
            DeliveryFailedError: status não-2xx ou erro de rede/timeout.
        """
        started = time.perf_counter()
        try:
            response = await self._get_client().post(url, json=payload)
        except httpx.TimeoutException as exc:
            raise DeliveryFailedError("webhook_timeout") from exc
        except httpx.HTTPError as exc:
            raise DeliveryFailedError(f"webhook_network_error:{type(exc).__name__}") from exc
        finally:
            record_latency(
                "webhook_sender",
                "post",
                (time.perf_counter() - started) * 1000,
                correlation_id=get_correlation_id() or None,
            )

        if not response.is_success:
            raise DeliveryFailedError(
                f"status_{response.status_code}",
                status_code=response.status_code,
            )
        return response.status_code

    async def aclose(self) -> None:
        if self._client is not None and self._owns_client:
            await self._client.aclose()
            self._client = None
