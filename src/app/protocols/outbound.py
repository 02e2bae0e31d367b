"""Protocolos de saída: envio de webhook e arquivamento de conversa."""

from __future__ import annotations

from typing import Any, Protocol


class WebhookSenderProtocol(Protocol):
    """Executa UMA tentativa de POST do envelope.

    Raises:
        DeliveryFailedError: status não-2xx ou erro de rede.
    """

    async def send(self, url: str, payload: dict[str, Any]) -> int: ...


class ChatArchiverProtocol(Protocol):
    """Colaborador que arquiva a conversa na sessão do WhatsApp."""

    async def archive(self, session: str, chat_id: str) -> None: ...
