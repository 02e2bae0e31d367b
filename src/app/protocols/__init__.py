"""Protocolos e contratos do core da aplicação."""

from .delivery_audit_store import DeliveryAuditStoreProtocol
from .media import (
    DownloadedMedia,
    MediaDownloaderProtocol,
    ObjectStorageUploaderProtocol,
)
from .outbound import ChatArchiverProtocol, WebhookSenderProtocol
from .token_store import TokenStoreProtocol

__all__ = [
    "ChatArchiverProtocol",
    "DeliveryAuditStoreProtocol",
    "DownloadedMedia",
    "MediaDownloaderProtocol",
    "ObjectStorageUploaderProtocol",
    "TokenStoreProtocol",
    "WebhookSenderProtocol",
]
