"""Observabilidade — correlation_id por evento e métricas em logs.

Uso:
    from app.observability import correlation_scope, get_correlation_id
    from app.observability import record_delivery, record_latency
"""

from app.observability.correlation import (
    correlation_scope,
    generate_correlation_id,
    get_correlation_id,
    reset_correlation_id,
    set_correlation_id,
)
from app.observability.metrics import (
    record_archive_transition,
    record_delivery,
    record_filter_decision,
    record_latency,
)

__all__ = [
    "correlation_scope",
    "generate_correlation_id",
    "get_correlation_id",
    "record_archive_transition",
    "record_delivery",
    "record_filter_decision",
    "record_latency",
    "reset_correlation_id",
    "set_correlation_id",
]
