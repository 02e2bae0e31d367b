"""Entrypoint da aplicação wpp-relay.

Inicializa o bootstrap e expõe a aplicação ASGI (FastAPI).

Uso (produção):
    uvicorn app.app:create_app --factory --host 0.0.0.0 --port 21465

Uso (desenvolvimento):
    uvicorn app.app:create_app --factory --reload --port 21465
"""

from __future__ import annotations

import asyncio
from contextlib import asynccontextmanager
from typing import TYPE_CHECKING, Any

from fastapi import FastAPI, Request

from api.routes import create_api_router
from app.bootstrap import build_container, initialize_app
from config.logging import get_logger
from utils.errors import BackendUnavailableError

if TYPE_CHECKING:
    from collections.abc import AsyncGenerator, Awaitable, Callable

    from fastapi import Response

    from config.settings import ServerOptions

logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Gerencia ciclo de vida da aplicação.

    Startup:
    - Constrói o container a partir do ServerOptions
    - Inicia workers do dispatcher
    - Restaura sessões persistidas (START_ALL_SESSION)
    - Inicia o loop do scheduler de arquivamento

    Shutdown:
    - Sinaliza shutdown (restore e retries abortam)
    - Drena o dispatcher e fecha conexões
    """
    options: ServerOptions = app.state.options
    container = build_container(options, **app.state.container_overrides)
    app.state.container = container
    shutdown = asyncio.Event()
    logger.info(
        "app_starting",
        extra={"service": options.base.service_name, "backend": container.token_store.backend_name},
    )

    container.dispatcher.start()
    try:
        await container.registry.restore_on_startup(options.base.start_all_session, shutdown)
    except BackendUnavailableError as exc:
        logger.error("session_restore_failed", extra={"backend": exc.backend})
    archive_task = asyncio.create_task(container.archive.run(shutdown), name="archive-scheduler")

    yield

    logger.info("app_shutting_down", extra={"service": options.base.service_name})
    shutdown.set()
    try:
        await archive_task
    finally:
        await container.dispatcher.stop(timeout_seconds=30.0)
        await container.aclose()


def create_app(
    options: ServerOptions | None = None,
    **container_overrides: Any,
) -> FastAPI:
    """Cria e configura a aplicação FastAPI.

    Args:
        options: Configuração imutável (default: carregada do ambiente)
        **container_overrides: Repassados a build_container (ex.: token_store)
    """
    options = initialize_app(options)
    fastapi_app = FastAPI(
        title="wpp-relay",
        description="Dispatch de notificações e persistência de sessões WhatsApp",
        version="1.0.0",
        lifespan=lifespan,
    )
    fastapi_app.state.options = options
    fastapi_app.state.container_overrides = container_overrides

    powered_by = options.base.powered_by

    @fastapi_app.middleware("http")
    async def add_powered_by(
        request: Request,
        call_next: Callable[[Request], Awaitable[Response]],
    ) -> Response:
        response = await call_next(request)
        response.headers["X-Powered-By"] = powered_by
        return response

    fastapi_app.include_router(create_api_router())

    logger.info("app_configured", extra={"service": options.base.service_name})
    return fastapi_app


def main() -> None:
    """Entrypoint para execução direta (desenvolvimento)."""
    import uvicorn

    from config.settings import get_server_options

    options = get_server_options()
    logger.info("Starting wpp-relay in development mode")
    uvicorn.run(
        "app.app:create_app",
        factory=True,
        host="0.0.0.0",
        port=options.base.port,
    )


if __name__ == "__main__":
    main()
