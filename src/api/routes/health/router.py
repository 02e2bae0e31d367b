"""Endpoints de health check."""

from __future__ import annotations

import asyncio
import logging
import time
from dataclasses import dataclass
from datetime import UTC, datetime
from typing import TYPE_CHECKING, Any, Literal

from fastapi import APIRouter, Request
from fastapi.responses import JSONResponse
from pydantic import BaseModel

from app.domain.delivery import Channel
from utils.errors import BackendUnavailableError

if TYPE_CHECKING:
    from app.bootstrap import Container
    from app.protocols.token_store import TokenStoreProtocol

logger = logging.getLogger(__name__)

router = APIRouter()

HEALTH_PROBE_KEY = "__health__"


class HealthResponse(BaseModel):
    """Resposta do health check."""

    status: str
    service: str
    timestamp: str
    version: str = "1.0.0"


@dataclass(frozen=True, slots=True)
class DependencyCheck:
    """Resultado de checagem de dependência."""

    status: Literal["ok", "degraded", "failed"]
    latency_ms: float | None = None
    error: str | None = None

    def as_dict(self) -> dict[str, Any]:
        return {
            "status": self.status,
            "latency_ms": self.latency_ms,
            "error": self.error,
        }


@router.get("/health", response_model=HealthResponse)
async def health_check(request: Request) -> HealthResponse:
    """Liveness probe — verifica se o serviço está rodando."""
    container: Container | None = getattr(request.app.state, "container", None)
    service = container.options.base.service_name if container is not None else "wpp-relay"
    return HealthResponse(
        status="healthy",
        service=service,
        timestamp=datetime.now(UTC).isoformat(),
    )


@router.get("/ready")
async def readiness_check(request: Request) -> JSONResponse:
    """Readiness probe: store de tokens acessível e dispatcher rodando."""
    container: Container | None = getattr(request.app.state, "container", None)
    if container is None:
        store_check = DependencyCheck(status="failed", error="not_configured")
        dispatcher_check = DependencyCheck(status="failed", error="not_configured")
        queues: dict[str, int] = {}
    else:
        store_check = await _check_token_store(container.token_store)
        dispatcher_check = DependencyCheck(
            status="ok" if container.dispatcher.running else "failed",
            error=None if container.dispatcher.running else "not_running",
        )
        queues = {channel.value: container.dispatcher.pending(channel) for channel in Channel}

    ready = store_check.status == "ok" and dispatcher_check.status == "ok"
    payload = {
        "status": "ready" if ready else "not_ready",
        "checks": {
            "token_store": store_check.as_dict(),
            "dispatcher": dispatcher_check.as_dict(),
        },
        "queues": queues,
        "timestamp": datetime.now(UTC).isoformat(),
    }
    return JSONResponse(content=payload, status_code=200 if ready else 503)


async def _check_token_store(store: TokenStoreProtocol) -> DependencyCheck:
    started_at = time.perf_counter()
    try:
        await asyncio.wait_for(store.exists(HEALTH_PROBE_KEY), timeout=3.0)
    except TimeoutError:
        return DependencyCheck(status="failed", error="timeout")
    except BackendUnavailableError as exc:
        logger.warning("readiness_token_store_failed", extra={"backend": exc.backend})
        return DependencyCheck(status="failed", error=type(exc).__name__)
    latency_ms = (time.perf_counter() - started_at) * 1000
    return DependencyCheck(status="ok", latency_ms=round(latency_ms, 2))
