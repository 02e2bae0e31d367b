"""Protocolos de mídia: download e upload para object storage.

Implementações concretas vivem em app/infra; o upload é colaborador externo.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Protocol

if TYPE_CHECKING:
    from app.domain.events import MediaReference


@dataclass(frozen=True, slots=True)
class DownloadedMedia:
    """Bytes baixados e metadados."""

    content: bytes
    mimetype: str | None = None
    filename: str | None = None


class MediaDownloaderProtocol(Protocol):
    """Baixa a mídia referenciada por um evento.

    Raises:
        MediaFetchFailedError: falha de download.
    """

    async def download(self, session: str, media: MediaReference) -> DownloadedMedia: ...


class ObjectStorageUploaderProtocol(Protocol):
    """Publica bytes num bucket S3-compatível e retorna a URL pública.

    Raises:
        MediaFetchFailedError: falha de upload.
    """

    async def upload(
        self,
        content: bytes,
        *,
        key: str,
        mimetype: str | None,
        bucket: str,
        region: str,
        endpoint: str | None = None,
        force_path_style: bool = False,
    ) -> str: ...
