"""Endpoint websocket `/ws/{session}`.

O consumidor autentica com o bearer da sessão (query `token` ou header
Authorization) e recebe os envelopes da sessão na ordem de entrega.
"""

from __future__ import annotations

import asyncio
import contextlib
import logging
from typing import TYPE_CHECKING

from fastapi import APIRouter, WebSocket, WebSocketDisconnect, status

from utils.errors import SubscriberLimitError

if TYPE_CHECKING:
    from app.bootstrap import Container
    from app.infra.websocket import Subscription

logger = logging.getLogger(__name__)

router = APIRouter()


def _extract_bearer(websocket: WebSocket) -> str:
    token = websocket.query_params.get("token")
    if token:
        return token
    header = websocket.headers.get("authorization", "")
    scheme, _, value = header.partition(" ")
    return value if scheme.lower() == "bearer" else ""


@router.websocket("/ws/{session}")
async def session_events(websocket: WebSocket, session: str) -> None:
    """Encaminha ao consumidor os envelopes da sessão."""
    container: Container = websocket.app.state.container

    if not container.registry.verify_bearer(session, _extract_bearer(websocket)):
        logger.warning("websocket_auth_failed", extra={"session": session})
        await websocket.close(code=status.WS_1008_POLICY_VIOLATION)
        return

    try:
        subscription = container.hub.subscribe(session)
    except SubscriberLimitError:
        await websocket.close(code=status.WS_1013_TRY_AGAIN_LATER)
        return

    await websocket.accept()
    sender = asyncio.create_task(_pump(websocket, subscription))
    receiver = asyncio.create_task(_wait_disconnect(websocket))
    try:
        await asyncio.wait({sender, receiver}, return_when=asyncio.FIRST_COMPLETED)
    finally:
        for task in (sender, receiver):
            task.cancel()
        await asyncio.gather(sender, receiver, return_exceptions=True)
        container.hub.unsubscribe(subscription)


async def _pump(websocket: WebSocket, subscription: Subscription) -> None:
    with contextlib.suppress(WebSocketDisconnect):
        while True:
            payload = await subscription.get()
            await websocket.send_json(payload)


async def _wait_disconnect(websocket: WebSocket) -> None:
    # Mensagens do cliente são ignoradas; só interessa o fechamento.
    with contextlib.suppress(WebSocketDisconnect):
        while True:
            await websocket.receive_text()
