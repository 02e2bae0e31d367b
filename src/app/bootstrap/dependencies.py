"""Container de dependências — composition root do pipeline.

Constrói, a partir de um ServerOptions imutável, todos os componentes
do pipeline de notificação e os conecta entre si.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING

from app.bootstrap.dependencies_stores import create_audit_store, create_token_store
from app.domain.filter_config import FilterConfig
from app.infra.http import HttpWebhookSender, WebhookClientConfig
from app.infra.websocket import SubscriberHub
from app.infra.whatsapp import HttpMediaDownloader
from app.services import (
    ArchivePolicyScheduler,
    LabelMapper,
    MediaResolver,
    NotificationDispatcher,
)
from app.sessions import SessionTokenRegistry
from app.use_cases.dispatch_runtime_event import EventPipeline

if TYPE_CHECKING:
    import httpx

    from app.protocols.delivery_audit_store import DeliveryAuditStoreProtocol
    from app.protocols.media import MediaDownloaderProtocol, ObjectStorageUploaderProtocol
    from app.protocols.outbound import ChatArchiverProtocol
    from app.protocols.token_store import TokenStoreProtocol
    from config.settings import ServerOptions

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class Container:
    """Componentes construídos para um processo."""

    options: ServerOptions
    token_store: TokenStoreProtocol
    audit_store: DeliveryAuditStoreProtocol
    registry: SessionTokenRegistry
    hub: SubscriberHub
    webhook_sender: HttpWebhookSender
    dispatcher: NotificationDispatcher
    archive: ArchivePolicyScheduler
    pipeline: EventPipeline

    async def aclose(self) -> None:
        """Libera conexões de saída e do store."""
        await self.webhook_sender.aclose()
        await self.token_store.close()


def build_container(
    options: ServerOptions,
    *,
    token_store: TokenStoreProtocol | None = None,
    webhook_client: httpx.AsyncClient | None = None,
    media_downloader: MediaDownloaderProtocol | None = None,
    uploader: ObjectStorageUploaderProtocol | None = None,
    archiver: ChatArchiverProtocol | None = None,
) -> Container:
    """Monta o container.

    Args:
        options: Configuração imutável do servidor
        token_store: Backend pré-construído (default: selecionado por options)
        webhook_client: AsyncClient para o webhook (testes injetam MockTransport)
        media_downloader: Downloader de mídia (default: HTTP)
        uploader: Colaborador de object storage (opcional)
        archiver: Colaborador de arquivamento de conversas (opcional)
    """
    store = token_store or create_token_store(options)
    audit_store = create_audit_store()
    registry = SessionTokenRegistry(store, options.base.secret_key)
    hub = SubscriberHub(
        max_subscribers=options.base.max_listeners,
        queue_size=options.websocket.queue_size,
    )
    sender = HttpWebhookSender(
        WebhookClientConfig(
            timeout_seconds=options.webhook.timeout_seconds,
            default_headers={"X-Powered-By": options.base.powered_by},
        ),
        client=webhook_client,
    )
    dispatcher = NotificationDispatcher(
        options.webhook,
        options.websocket,
        audit_store,
        webhook_sender=sender,
        hub=hub,
    )
    archive = ArchivePolicyScheduler(options.archive, archiver=archiver)
    pipeline = EventPipeline(
        filter_config=FilterConfig.from_settings(options.webhook, options.websocket),
        registry=registry,
        dispatcher=dispatcher,
        archive=archive,
        media_resolver=MediaResolver(
            media_downloader or HttpMediaDownloader(),
            uploader=uploader,
            s3_settings=options.s3,
        ),
        label_mapper=LabelMapper.from_settings(options.mapper),
        replay_unread_on_start=options.webhook.all_unread_on_start,
    )
    logger.info(
        "container_built",
        extra={
            "backend": store.backend_name,
            "webhook_enabled": options.webhook.enabled,
            "archive_enabled": options.archive.enable,
            "mapper_enabled": options.mapper.enable,
        },
    )
    return Container(
        options=options,
        token_store=store,
        audit_store=audit_store,
        registry=registry,
        hub=hub,
        webhook_sender=sender,
        dispatcher=dispatcher,
        archive=archive,
        pipeline=pipeline,
    )
