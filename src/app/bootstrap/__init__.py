"""Bootstrap da aplicação — inicialização e wiring.

Este módulo é o composition root: configura logging, valida a
configuração e constrói o container de dependências.

Uso:
    from app.bootstrap import initialize_app, build_container

    options = initialize_app()
    container = build_container(options)
"""

from __future__ import annotations

import logging

from app.bootstrap.dependencies import Container, build_container
from app.observability import get_correlation_id
from config.logging import configure_logging
from config.settings import ServerOptions, get_server_options

STRICT_VALIDATION_ENVS = {"staging", "production"}

logger = logging.getLogger(__name__)

__all__ = [
    "Container",
    "build_container",
    "initialize_app",
    "initialize_test_app",
    "validate_runtime_settings",
]


def initialize_app(options: ServerOptions | None = None) -> ServerOptions:
    """Configura logging e valida settings. Deve ser chamada uma vez.

    Returns:
        ServerOptions efetivo do processo
    """
    options = options or get_server_options()
    configure_logging(
        level=options.log.level,
        service_name=options.base.service_name,
        correlation_id_getter=get_correlation_id,
        destinations=options.log.destinations,
        file_path=options.log.file_path,
    )
    validate_runtime_settings(options)
    return options


def initialize_test_app() -> None:
    """Inicializa logging para testes (DEBUG, só console)."""
    configure_logging(
        level="DEBUG",
        service_name="wpp_relay_test",
        correlation_id_getter=get_correlation_id,
    )


def validate_runtime_settings(options: ServerOptions) -> None:
    """Valida settings no startup.

    Em `staging`/`production` falha rápido para impedir boot inválido.
    Em `development` mantém alerta sem bloquear execução local.

    Raises:
        RuntimeError: configuração inválida em ambiente estrito.
    """
    environment = options.base.environment
    errors = options.validate()
    if not errors:
        logger.info(
            "settings_validated",
            extra={"component": "bootstrap", "result": "ok", "environment": environment},
        )
        return

    logger.warning(
        "settings_validation_failed",
        extra={
            "component": "bootstrap",
            "result": "failed",
            "environment": environment,
            "error_count": len(errors),
            "errors": errors,
        },
    )
    if environment in STRICT_VALIDATION_ENVS:
        details = "\n".join(f"- {error}" for error in errors)
        raise RuntimeError(f"Configuração inválida para {environment}:\n{details}")
