"""Testes do MediaResolver com downloader e uploader falsos."""

from __future__ import annotations

import base64
from unittest.mock import AsyncMock

import pytest

from app.domain.delivery import DeliveryDecision
from app.domain.events import EventKind, MediaReference, RuntimeEvent
from app.protocols.media import DownloadedMedia
from app.services.media_resolver import MediaResolver
from config.settings import S3Settings
from utils.errors import MediaFetchFailedError


def _event() -> RuntimeEvent:
    return RuntimeEvent(
        kind=EventKind.MESSAGE,
        session="vendas",
        sender="5511@c.us",
        media=MediaReference(media_id="m1", mimetype="image/png"),
        event_id="evt-1",
    )


def _downloader(content: bytes = b"png-bytes") -> AsyncMock:
    downloader = AsyncMock()
    downloader.download.return_value = DownloadedMedia(content=content, mimetype="image/png")
    return downloader


FETCH = DeliveryDecision(webhook_eligible=True, needs_media_fetch=True, webhook_media=True)
UPLOAD = DeliveryDecision(
    webhook_eligible=True,
    needs_media_fetch=True,
    webhook_media=True,
    upload_media=True,
)


class TestMediaResolver:
    @pytest.mark.asyncio
    async def test_no_fetch_needed(self) -> None:
        downloader = _downloader()
        resolution = await MediaResolver(downloader).resolve(_event(), DeliveryDecision())
        assert resolution.media is None
        assert resolution.error is False
        downloader.download.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_inline_data_uri_without_upload(self) -> None:
        resolution = await MediaResolver(_downloader()).resolve(_event(), FETCH)

        assert resolution.error is False
        assert resolution.media is not None
        expected = base64.b64encode(b"png-bytes").decode()
        assert resolution.media.link == f"data:image/png;base64,{expected}"
        assert resolution.media.mimetype == "image/png"

    @pytest.mark.asyncio
    async def test_upload_returns_public_link(self) -> None:
        uploader = AsyncMock()
        uploader.upload.return_value = "https://bucket.s3/vendas/evt-1.png"
        resolver = MediaResolver(
            _downloader(),
            uploader=uploader,
            s3_settings=S3Settings(default_bucket_name="media"),
        )

        resolution = await resolver.resolve(_event(), UPLOAD)

        assert resolution.media is not None
        assert resolution.media.link == "https://bucket.s3/vendas/evt-1.png"
        kwargs = uploader.upload.call_args.kwargs
        assert kwargs["key"] == "vendas/evt-1.png"
        assert kwargs["bucket"] == "media"

    @pytest.mark.asyncio
    async def test_upload_requested_without_uploader_falls_back_inline(self) -> None:
        resolution = await MediaResolver(_downloader()).resolve(_event(), UPLOAD)
        assert resolution.media is not None
        assert resolution.media.link.startswith("data:image/png;base64,")

    @pytest.mark.asyncio
    async def test_download_failure_flags_error(self) -> None:
        downloader = AsyncMock()
        downloader.download.side_effect = MediaFetchFailedError("timeout")

        resolution = await MediaResolver(downloader).resolve(_event(), FETCH)

        assert resolution.media is None
        assert resolution.error is True

    @pytest.mark.asyncio
    async def test_upload_failure_flags_error(self) -> None:
        uploader = AsyncMock()
        uploader.upload.side_effect = MediaFetchFailedError("upload_failed")
        resolver = MediaResolver(_downloader(), uploader=uploader, s3_settings=S3Settings())

        resolution = await resolver.resolve(_event(), UPLOAD)

        assert resolution.error is True
        assert uploader.upload.call_args.kwargs["bucket"] == "vendas"
