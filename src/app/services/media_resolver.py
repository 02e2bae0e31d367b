"""Resolução de mídia antes da entrega.

A mídia é baixada uma única vez por evento e, se algum canal elegível
pede upload, publicada uma única vez no object storage. Sem upload, o
link entregue é um data URI base64. Falha em qualquer etapa degrada a
entrega para `media=None, media_error=True`; o evento nunca é perdido.
"""

from __future__ import annotations

import base64
import logging
import mimetypes
import time
from dataclasses import dataclass
from typing import TYPE_CHECKING

from app.domain.envelope import MediaPayload
from app.observability import record_latency
from config.logging import log_fallback
from utils.errors import MediaFetchFailedError

if TYPE_CHECKING:
    from app.domain.delivery import DeliveryDecision
    from app.domain.events import RuntimeEvent
    from app.protocols.media import (
        DownloadedMedia,
        MediaDownloaderProtocol,
        ObjectStorageUploaderProtocol,
    )
    from config.settings import S3Settings

logger = logging.getLogger(__name__)

DEFAULT_MIMETYPE = "application/octet-stream"


@dataclass(frozen=True, slots=True)
class MediaResolution:
    """Resultado da resolução.

    Attributes:
        media: Mídia pronta para o envelope (None se ausente ou falhou)
        error: True quando a busca foi tentada e falhou
    """

    media: MediaPayload | None = None
    error: bool = False


class MediaResolver:
    """Baixa e publica a mídia de um evento."""

    def __init__(
        self,
        downloader: MediaDownloaderProtocol,
        uploader: ObjectStorageUploaderProtocol | None = None,
        s3_settings: S3Settings | None = None,
    ) -> None:
        self._downloader = downloader
        self._uploader = uploader
        self._s3 = s3_settings

    async def resolve(self, event: RuntimeEvent, decision: DeliveryDecision) -> MediaResolution:
        if not decision.needs_media_fetch or event.media is None:
            return MediaResolution()

        started = time.perf_counter()
        try:
            downloaded = await self._downloader.download(event.session, event.media)
            mimetype = downloaded.mimetype or event.media.mimetype or DEFAULT_MIMETYPE
            filename = downloaded.filename or event.media.filename
            if decision.upload_media and self._uploader is not None and self._s3 is not None:
                link = await _upload(self._uploader, self._s3, event, downloaded, mimetype)
            else:
                if decision.upload_media:
                    log_fallback(logger, "media_resolver", reason="uploader_not_configured")
                link = _data_uri(downloaded.content, mimetype)
        except MediaFetchFailedError as exc:
            elapsed_ms = (time.perf_counter() - started) * 1000
            log_fallback(logger, "media_resolver", reason=exc.reason, elapsed_ms=round(elapsed_ms, 2))
            return MediaResolution(error=True)

        record_latency(
            "media_resolver",
            "resolve",
            (time.perf_counter() - started) * 1000,
            correlation_id=event.event_id,
        )
        return MediaResolution(media=MediaPayload(link=link, mimetype=mimetype, filename=filename))


async def _upload(
    uploader: ObjectStorageUploaderProtocol,
    s3: S3Settings,
    event: RuntimeEvent,
    downloaded: DownloadedMedia,
    mimetype: str,
) -> str:
    extension = mimetypes.guess_extension(mimetype) or ""
    key = f"{event.session}/{event.event_id}{extension}"
    bucket = s3.default_bucket_name or event.session
    return await uploader.upload(
        downloaded.content,
        key=key,
        mimetype=mimetype,
        bucket=bucket,
        region=s3.region,
        endpoint=s3.endpoint,
        force_path_style=s3.force_path_style,
    )


def _data_uri(content: bytes, mimetype: str) -> str:
    encoded = base64.b64encode(content).decode("ascii")
    return f"data:{mimetype};base64,{encoded}"
