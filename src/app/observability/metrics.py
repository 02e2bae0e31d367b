"""Registro de métricas via structured logging.

As métricas são linhas de log estruturadas, agregáveis depois pela
plataforma de logs.

Métricas suportadas:
- Latência: tempo de execução por componente/operação
- Entrega: resultado final de cada entrega por canal
- Filtro: decisão do filtro por evento
- Arquivamento: transições de fase de conversas
"""

from __future__ import annotations

import logging

logger = logging.getLogger(__name__)


def record_latency(
    component: str,
    operation: str,
    latency_ms: float,
    correlation_id: str | None = None,
) -> None:
    """Registra latência de operação.

    Args:
        component: Nome do componente (ex: "dispatcher", "media_resolver")
        operation: Nome da operação (ex: "webhook_post", "resolve")
        latency_ms: Latência em milissegundos
        correlation_id: ID de correlação para rastreamento
    """
    logger.info(
        "metric_latency",
        extra={
            "metric_type": "latency",
            "component": component,
            "operation": operation,
            "latency_ms": round(latency_ms, 2),
            "correlation_id": correlation_id,
        },
    )


def record_delivery(
    channel: str,
    outcome: str,
    attempts: int,
    correlation_id: str | None = None,
    status_code: int | None = None,
) -> None:
    """Registra resultado final de uma entrega.

    Args:
        channel: "webhook" ou "websocket"
        outcome: "delivered", "failed" ou "aborted"
        attempts: Tentativas realizadas
        correlation_id: event_id da entrega
        status_code: Último status HTTP (webhook)
    """
    logger.info(
        "metric_delivery",
        extra={
            "metric_type": "delivery",
            "component": "dispatcher",
            "channel": channel,
            "outcome": outcome,
            "attempts": attempts,
            "status_code": status_code,
            "correlation_id": correlation_id,
        },
    )


def record_filter_decision(
    kind: str,
    channels: tuple[str, ...],
    reason: str | None = None,
    correlation_id: str | None = None,
) -> None:
    """Registra a decisão do filtro para um evento."""
    logger.info(
        "metric_filter_decision",
        extra={
            "metric_type": "filter",
            "component": "event_filter",
            "kind": kind,
            "channels": list(channels),
            "reason": reason,
            "correlation_id": correlation_id,
        },
    )


def record_archive_transition(from_phase: str, to_phase: str, trigger: str) -> None:
    logger.info(
        "metric_archive_transition",
        extra={
            "metric_type": "archive",
            "component": "archive_scheduler",
            "from_phase": from_phase,
            "to_phase": to_phase,
            "trigger": trigger,
        },
    )
