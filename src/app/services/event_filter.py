"""Filtro de eventos: decide quais canais recebem cada evento.

Função pura e determinística. Ordem de avaliação:
    1. remetente na lista de ignorados → nada
    2. eco da própria sessão com supressão ligada → nada
    3. por canal: canal habilitado e flag do tipo ligada
    4. mídia: busca necessária se algum canal elegível pede auto_download
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from app.domain.delivery import DeliveryDecision

if TYPE_CHECKING:
    from app.domain.events import RuntimeEvent
    from app.domain.filter_config import FilterConfig

REASON_IGNORED = "sender_ignored"
REASON_SELF_ECHO = "self_echo"
REASON_NO_CHANNEL = "no_channel_enabled"


def decide(
    event: RuntimeEvent,
    config: FilterConfig,
    self_identity: str | None = None,
) -> DeliveryDecision:
    """Avalia o evento contra a configuração de filtro.

    Args:
        event: Evento de runtime
        config: Configuração imutável de filtro
        self_identity: JID da própria sessão (None se desconhecido)

    Returns:
        DeliveryDecision com canais elegíveis e necessidades de mídia
    """
    if event.sender in config.ignore:
        return DeliveryDecision.nothing(REASON_IGNORED)

    if config.self_echo_suppression and self_identity and event.sender == self_identity:
        return DeliveryDecision.nothing(REASON_SELF_ECHO)

    webhook_ok = config.webhook.allows(event.kind)
    websocket_ok = config.websocket.allows(event.kind)
    if not (webhook_ok or websocket_ok):
        return DeliveryDecision.nothing(REASON_NO_CHANNEL)

    has_media = event.media is not None
    webhook_media = has_media and webhook_ok and config.webhook.auto_download
    websocket_media = has_media and websocket_ok and config.websocket.auto_download
    upload = (webhook_media and config.webhook.upload_s3) or (
        websocket_media and config.websocket.upload_s3
    )
    return DeliveryDecision(
        webhook_eligible=webhook_ok,
        websocket_eligible=websocket_ok,
        needs_media_fetch=webhook_media or websocket_media,
        webhook_media=webhook_media,
        websocket_media=websocket_media,
        upload_media=upload,
    )
