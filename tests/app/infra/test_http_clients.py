"""Testes dos clientes HTTP (webhook e download de mídia) com MockTransport."""

from __future__ import annotations

import httpx
import pytest

from app.domain.events import MediaReference
from app.infra.http import HttpWebhookSender
from app.infra.whatsapp import HttpMediaDownloader
from utils.errors import DeliveryFailedError, MediaFetchFailedError


def _client(handler) -> httpx.AsyncClient:
    return httpx.AsyncClient(transport=httpx.MockTransport(handler))


class TestHttpWebhookSender:
    @pytest.mark.asyncio
    async def test_posts_json_payload(self) -> None:
        seen: list[httpx.Request] = []

        def handler(request: httpx.Request) -> httpx.Response:
            seen.append(request)
            return httpx.Response(204)

        sender = HttpWebhookSender(client=_client(handler))

        assert await sender.send("https://hooks.example/in", {"event": "onack"}) == 204
        assert seen[0].method == "POST"
        assert seen[0].headers["content-type"] == "application/json"

    @pytest.mark.asyncio
    async def test_non_2xx_raises_with_status(self) -> None:
        sender = HttpWebhookSender(client=_client(lambda r: httpx.Response(502)))

        with pytest.raises(DeliveryFailedError) as exc_info:
            await sender.send("https://hooks.example/in", {})

        assert str(exc_info.value) == "status_502"
        assert exc_info.value.status_code == 502
        assert exc_info.value.is_retryable is True

    @pytest.mark.asyncio
    async def test_network_error_raises(self) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("refused", request=request)

        sender = HttpWebhookSender(client=_client(handler))

        with pytest.raises(DeliveryFailedError, match="webhook_network_error:ConnectError"):
            await sender.send("https://hooks.example/in", {})

    @pytest.mark.asyncio
    async def test_timeout_raises(self) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ReadTimeout("slow", request=request)

        sender = HttpWebhookSender(client=_client(handler))

        with pytest.raises(DeliveryFailedError, match="webhook_timeout"):
            await sender.send("https://hooks.example/in", {})

    @pytest.mark.asyncio
    async def test_aclose_keeps_injected_client_open(self) -> None:
        client = _client(lambda r: httpx.Response(200))
        await HttpWebhookSender(client=client).aclose()
        assert client.is_closed is False
        await client.aclose()


class TestHttpMediaDownloader:
    @pytest.mark.asyncio
    async def test_download_returns_bytes_and_mimetype(self) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(200, content=b"abc", headers={"content-type": "image/jpeg; q=1"})

        downloader = HttpMediaDownloader(client=_client(handler))
        media = await downloader.download("s1", MediaReference(url="https://cdn.example/a"))

        assert media.content == b"abc"
        assert media.mimetype == "image/jpeg"

    @pytest.mark.asyncio
    async def test_media_id_only_is_unresolved(self) -> None:
        with pytest.raises(MediaFetchFailedError, match="media_url_unresolved"):
            await HttpMediaDownloader().download("s1", MediaReference(media_id="m1"))

    @pytest.mark.asyncio
    async def test_http_error_retried_then_fails(self) -> None:
        calls: list[int] = []

        def handler(request: httpx.Request) -> httpx.Response:
            calls.append(1)
            return httpx.Response(404)

        downloader = HttpMediaDownloader(max_retries=1, client=_client(handler))

        with pytest.raises(MediaFetchFailedError, match="download_failed"):
            await downloader.download("s1", MediaReference(url="https://cdn.example/a"))
        assert len(calls) == 2

    @pytest.mark.asyncio
    async def test_too_large_rejected(self) -> None:
        downloader = HttpMediaDownloader(
            max_size_bytes=2,
            client=_client(lambda r: httpx.Response(200, content=b"abcdef")),
        )
        with pytest.raises(MediaFetchFailedError, match="media_too_large"):
            await downloader.download("s1", MediaReference(url="https://cdn.example/a"))
