"""Dispatcher de notificações para webhook e websocket.

Uma fila FIFO e um pool de workers por canal. `submit` nunca bloqueia e
nunca descarta; a ordem de atendimento de cada canal segue a ordem de
submissão. Canais são independentes: falha no webhook não atrasa o
websocket.

Webhook: retry com backoff exponencial até `max_attempts`; esgotado,
grava DeliveryFailureRecord no audit store. Websocket: broadcast
best-effort, sem retry.
"""

from __future__ import annotations

import asyncio
import contextlib
import logging
import time
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from app.domain.delivery import Channel, DeliveryFailureRecord
from app.observability import correlation_scope, record_delivery, record_latency
from utils.errors import DeliveryFailedError

if TYPE_CHECKING:
    from collections.abc import Iterable

    from app.domain.envelope import DeliveryEnvelope
    from app.infra.websocket.hub import SubscriberHub
    from app.protocols.delivery_audit_store import DeliveryAuditStoreProtocol
    from app.protocols.outbound import WebhookSenderProtocol
    from config.settings import WebhookSettings, WebsocketSettings

logger = logging.getLogger(__name__)

REASON_SHUTDOWN = "shutdown"
REASON_DISPATCHER_STOPPED = "dispatcher_stopped"


def backoff_delay(attempt: int, base: float, max_seconds: float) -> float:
    """Espera antes da próxima tentativa (attempt começa em 0)."""
    return min((2**attempt) * base, max_seconds)


@dataclass(frozen=True, slots=True)
class DeliveryJob:
    """Item de fila: um envelope para um canal."""

    channel: Channel
    envelope: DeliveryEnvelope
    enqueued_at: float = field(default_factory=time.perf_counter)


class NotificationDispatcher:
    """Entrega envelopes aos canais elegíveis.

    Args:
        webhook_settings: URL, tentativas, backoff e concorrência do webhook
        websocket_settings: Concorrência do websocket
        audit_store: Destino dos registros de falha definitiva
        webhook_sender: Executor de uma tentativa de POST
        hub: Hub de assinantes websocket
    """

    def __init__(
        self,
        webhook_settings: WebhookSettings,
        websocket_settings: WebsocketSettings,
        audit_store: DeliveryAuditStoreProtocol,
        webhook_sender: WebhookSenderProtocol | None = None,
        hub: SubscriberHub | None = None,
    ) -> None:
        self._webhook = webhook_settings
        self._websocket = websocket_settings
        self._audit = audit_store
        self._sender = webhook_sender
        self._hub = hub
        self._queues: dict[Channel, asyncio.Queue[DeliveryJob]] = {
            Channel.WEBHOOK: asyncio.Queue(),
            Channel.WEBSOCKET: asyncio.Queue(),
        }
        self._workers: list[asyncio.Task[None]] = []
        self._shutdown = asyncio.Event()
        self._closed = False

    @property
    def running(self) -> bool:
        return bool(self._workers) and not self._closed

    def pending(self, channel: Channel) -> int:
        return self._queues[channel].qsize()

    def _concurrency(self, channel: Channel) -> int:
        if channel is Channel.WEBHOOK:
            return max(1, self._webhook.concurrency)
        return max(1, self._websocket.concurrency)

    # ──────────────────────────────────────────────────────────────
    # Ciclo de vida
    # ──────────────────────────────────────────────────────────────

    def start(self) -> None:
        """Inicia os workers de cada canal (idempotente)."""
        if self._workers:
            return
        for channel, queue in self._queues.items():
            for index in range(self._concurrency(channel)):
                task = asyncio.create_task(
                    self._worker(channel, queue),
                    name=f"dispatcher-{channel}-{index}",
                )
                self._workers.append(task)
        logger.info(
            "dispatcher_started",
            extra={
                "webhook_workers": self._concurrency(Channel.WEBHOOK),
                "websocket_workers": self._concurrency(Channel.WEBSOCKET),
            },
        )

    async def stop(self, timeout_seconds: float = 30.0) -> None:
        """Encerra o dispatcher.

        Sinaliza shutdown (backoffs em andamento acordam e a entrega é
        registrada como abortada), aguarda as filas drenarem até o
        timeout e cancela os workers. Itens ainda enfileirados são
        registrados como abortados.
        """
        self._closed = True
        self._shutdown.set()
        pending_now = sum(q.qsize() for q in self._queues.values())
        logger.info(
            "dispatcher_shutdown_wait",
            extra={"pending_jobs": pending_now, "timeout_seconds": timeout_seconds},
        )
        if self._workers:
            drain = asyncio.gather(*(q.join() for q in self._queues.values()))
            try:
                await asyncio.wait_for(drain, timeout=timeout_seconds)
            except TimeoutError:
                logger.warning("dispatcher_shutdown_timeout")
        for task in self._workers:
            task.cancel()
        await asyncio.gather(*self._workers, return_exceptions=True)
        self._workers = []
        for queue in self._queues.values():
            while not queue.empty():
                job = queue.get_nowait()
                self._record_failure(job, attempts=0, reason=REASON_SHUTDOWN)
                queue.task_done()
        logger.info("dispatcher_stopped")

    # ──────────────────────────────────────────────────────────────
    # Entrada
    # ──────────────────────────────────────────────────────────────

    def submit(self, envelope: DeliveryEnvelope, channels: Iterable[Channel]) -> None:
        """Enfileira o envelope para cada canal informado.

        Não bloqueia nem descarta. Após `stop`, a entrega é registrada
        como falha no audit store.
        """
        for channel in channels:
            job = DeliveryJob(channel=channel, envelope=envelope)
            if self._closed:
                self._record_failure(job, attempts=0, reason=REASON_DISPATCHER_STOPPED)
                continue
            self._queues[channel].put_nowait(job)
            logger.debug(
                "delivery_enqueued",
                extra={"channel": channel.value, "queue_size": self._queues[channel].qsize()},
            )

    async def join(self) -> None:
        """Aguarda todas as filas esvaziarem (útil em testes e replay)."""
        await asyncio.gather(*(q.join() for q in self._queues.values()))

    # ──────────────────────────────────────────────────────────────
    # Workers
    # ──────────────────────────────────────────────────────────────

    async def _worker(self, channel: Channel, queue: asyncio.Queue[DeliveryJob]) -> None:
        while True:
            job = await queue.get()
            try:
                with correlation_scope(job.envelope.event_id):
                    if channel is Channel.WEBHOOK:
                        await self._deliver_webhook(job)
                    else:
                        self._deliver_websocket(job)
            except asyncio.CancelledError:
                self._record_failure(job, attempts=0, reason=REASON_SHUTDOWN)
                raise
            except Exception as exc:
                logger.error(
                    "delivery_worker_error",
                    extra={"channel": channel.value, "error_type": type(exc).__name__},
                )
            finally:
                queue.task_done()

    async def _deliver_webhook(self, job: DeliveryJob) -> None:
        url = self._webhook.url
        if self._sender is None or not url:
            self._record_failure(job, attempts=0, reason="webhook_not_configured")
            return

        payload = job.envelope.to_json_dict()
        max_attempts = max(1, self._webhook.max_attempts)
        reason = "unknown"
        status_code: int | None = None
        attempt = 0
        while attempt < max_attempts:
            attempt += 1
            try:
                status_code = await self._sender.send(url, payload)
            except DeliveryFailedError as exc:
                reason = str(exc)
                status_code = exc.status_code
                logger.warning(
                    "webhook_attempt_failed",
                    extra={"attempt": attempt, "status_code": status_code, "reason": reason},
                )
                if not exc.is_retryable or attempt >= max_attempts:
                    break
                if await self._backoff(attempt - 1):
                    reason = REASON_SHUTDOWN
                    break
                continue

            record_delivery("webhook", "delivered", attempt, job.envelope.event_id, status_code)
            record_latency(
                "dispatcher",
                "webhook_delivery",
                (time.perf_counter() - job.enqueued_at) * 1000,
                correlation_id=job.envelope.event_id,
            )
            return

        self._record_failure(job, attempts=attempt, reason=reason, status_code=status_code)

    async def _backoff(self, attempt: int) -> bool:
        """Aguarda o backoff; retorna True se o shutdown interrompeu a espera."""
        if self._shutdown.is_set():
            return True
        delay = backoff_delay(
            attempt,
            self._webhook.backoff_base_seconds,
            self._webhook.backoff_max_seconds,
        )
        logger.info("webhook_backoff", extra={"backoff_seconds": delay})
        with contextlib.suppress(TimeoutError):
            await asyncio.wait_for(self._shutdown.wait(), timeout=delay)
        return self._shutdown.is_set()

    def _deliver_websocket(self, job: DeliveryJob) -> None:
        if self._hub is None:
            return
        reached = self._hub.broadcast(job.envelope.session, job.envelope.to_json_dict())
        record_delivery("websocket", "delivered" if reached else "no_subscribers", 1, job.envelope.event_id)

    def _record_failure(
        self,
        job: DeliveryJob,
        *,
        attempts: int,
        reason: str,
        status_code: int | None = None,
    ) -> None:
        record = DeliveryFailureRecord(
            channel=job.channel,
            event_id=job.envelope.event_id,
            session=job.envelope.session,
            attempts=attempts,
            reason=reason,
            status_code=status_code,
        )
        self._audit.append(record)
        outcome = "aborted" if reason in (REASON_SHUTDOWN, REASON_DISPATCHER_STOPPED) else "failed"
        record_delivery(job.channel.value, outcome, attempts, job.envelope.event_id, status_code)
        logger.error(
            "delivery_failed",
            extra={
                "channel": job.channel.value,
                "event_id": job.envelope.event_id,
                "session": job.envelope.session,
                "attempts": attempts,
                "reason": reason,
                "status_code": status_code,
            },
        )
