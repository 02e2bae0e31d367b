"""Configuração centralizada de logging.

Logging estruturado JSON com campos obrigatórios (correlation_id, service,
level, logger, message) e destinos configuráveis (console e/ou arquivo).

Uso:
    from config.logging import configure_logging, get_logger

    # Na inicialização do serviço (app/bootstrap/)
    configure_logging(level="info", destinations=("console", "file"))

    # Em qualquer módulo
    logger = get_logger(__name__)
    logger.info("webhook_delivered", extra={"attempts": 1})
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import TYPE_CHECKING

from config.logging.filters import CorrelationIdFilter
from config.logging.formatters import create_json_formatter
from config.settings.base.log import LOG_LEVEL_ALIASES

if TYPE_CHECKING:
    from collections.abc import Callable, Iterable

# Níveis de log válidos
VALID_LOG_LEVELS = frozenset({"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"})

# Nome padrão do serviço
DEFAULT_SERVICE_NAME = "wpp_relay"


def _resolve_level(level: str) -> str:
    """Aceita níveis Python ou os aliases herdados (warn, verbose, silly)."""
    resolved = LOG_LEVEL_ALIASES.get(level.lower(), level.upper())
    if resolved not in VALID_LOG_LEVELS:
        raise ValueError(
            f"Nível de log inválido: {level}. "
            f"Válidos: {', '.join(sorted(VALID_LOG_LEVELS | set(LOG_LEVEL_ALIASES)))}"
        )
    return resolved


def configure_logging(
    level: str = "INFO",
    service_name: str = DEFAULT_SERVICE_NAME,
    correlation_id_getter: Callable[[], str] | None = None,
    destinations: Iterable[str] = ("console",),
    file_path: str | None = None,
) -> None:
    """Configura logging JSON estruturado para o serviço.

    Deve ser chamada uma vez na inicialização do serviço (app/bootstrap/).

    Args:
        level: Nível de log (Python ou alias: warn, verbose, silly).
        service_name: Nome do serviço para identificação nos logs.
        correlation_id_getter: Função que retorna o correlation_id atual.
        destinations: "console" e/ou "file".
        file_path: Arquivo de log quando "file" está em destinations.

    Raises:
        ValueError: Se o nível ou o destino forem inválidos.
    """
    level_upper = _resolve_level(level)
    targets = set(destinations)
    unknown = targets - {"console", "file"}
    if unknown or not targets:
        raise ValueError(f"Destino de log inválido: {sorted(unknown) or 'vazio'}")

    formatter = create_json_formatter()
    log_filter = CorrelationIdFilter(service_name, correlation_id_getter)

    handlers: list[logging.Handler] = []
    if "console" in targets:
        handlers.append(logging.StreamHandler())
    if "file" in targets:
        path = Path(file_path or "./log/app.log")
        path.parent.mkdir(parents=True, exist_ok=True)
        handlers.append(logging.FileHandler(path, encoding="utf-8"))

    for handler in handlers:
        handler.setLevel(level_upper)
        handler.setFormatter(formatter)
        handler.addFilter(log_filter)

    root = logging.getLogger()
    root.setLevel(level_upper)
    # Substituir handlers existentes para evitar duplicação
    root.handlers = handlers


def get_logger(name: str) -> logging.Logger:
    """Retorna logger para o módulo especificado.

    O filter injeta automaticamente service e correlation_id.
    """
    return logging.getLogger(name)


def log_fallback(
    logger: logging.Logger,
    component: str,
    reason: str | None = None,
    elapsed_ms: float | None = None,
) -> None:
    """Log observável de degradação (ex.: entrega sem mídia).

    Args:
        logger: Logger instance.
        component: Nome do componente (ex: "media_resolver").
        reason: Razão da degradação (ex: "timeout"), sem PII.
        elapsed_ms: Tempo decorrido em ms (quando aplicável).
    """
    extra: dict[str, object] = {
        "fallback_used": True,
        "component": component,
    }
    if reason:
        extra["reason"] = reason
    if elapsed_ms is not None:
        extra["elapsed_ms"] = elapsed_ms

    logger.warning(
        "Fallback applied for %s",
        component,
        extra=extra,
    )
