"""Downloader de mídia dos eventos de runtime."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

import httpx

from app.protocols.media import DownloadedMedia
from utils.errors import MediaFetchFailedError

if TYPE_CHECKING:
    from app.domain.events import MediaReference

logger = logging.getLogger(__name__)

DEFAULT_MAX_SIZE_BYTES = 64 * 1024 * 1024


class HttpMediaDownloader:
    """Baixa a mídia pela URL informada no evento.

    Referências só com media_id precisam ser resolvidas pela camada de
    automação antes; sem URL o download falha com `media_url_unresolved`.
    """

    def __init__(
        self,
        timeout_seconds: float = 30.0,
        max_retries: int = 2,
        max_size_bytes: int = DEFAULT_MAX_SIZE_BYTES,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        self._timeout = timeout_seconds
        self._max_retries = max(0, max_retries)
        self._max_size = max_size_bytes
        self._client = client

    async def download(self, session: str, media: MediaReference) -> DownloadedMedia:
        """Baixa bytes da mídia.

        Raises:
            MediaFetchFailedError: URL ausente, timeout, erro HTTP ou mídia grande demais.
        """
        if not media.url:
            raise MediaFetchFailedError("media_url_unresolved")

        for attempt in range(self._max_retries + 1):
            try:
                return await self._attempt_download(media)
            except httpx.TimeoutException as exc:
                logger.warning(
                    "media_download_timeout",
                    extra={"session": session, "attempt": attempt + 1},
                )
                if attempt >= self._max_retries:
                    raise MediaFetchFailedError("timeout") from exc
            except httpx.HTTPError as exc:
                logger.warning(
                    "media_download_failed",
                    extra={"session": session, "error_type": type(exc).__name__, "attempt": attempt + 1},
                )
                if attempt >= self._max_retries:
                    raise MediaFetchFailedError("download_failed") from exc
        raise MediaFetchFailedError("download_failed")

    async def _attempt_download(self, media: MediaReference) -> DownloadedMedia:
        if self._client is not None:
            return await self._fetch(self._client, media)
        async with httpx.AsyncClient(timeout=self._timeout) as client:
            return await self._fetch(client, media)

    async def _fetch(self, client: httpx.AsyncClient, media: MediaReference) -> DownloadedMedia:
        response = await client.get(media.url or "")
        response.raise_for_status()
        if self._is_too_large(response):
            raise MediaFetchFailedError("media_too_large")
        content_type = response.headers.get("content-type", "").split(";")[0].strip()
        return DownloadedMedia(
            content=response.content,
            mimetype=media.mimetype or content_type or None,
            filename=media.filename,
        )

    def _is_too_large(self, response: httpx.Response) -> bool:
        content_length = response.headers.get("content-length")
        if content_length and content_length.isdigit() and int(content_length) > self._max_size:
            return True
        return len(response.content) > self._max_size
