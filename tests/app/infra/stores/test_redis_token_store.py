"""Testes do RedisTokenStore com mock."""

from __future__ import annotations

import json
from unittest.mock import AsyncMock, MagicMock

import pytest
from redis.exceptions import ConnectionError as RedisConnectionError

from app.infra.stores.redis_token_store import RedisTokenStore
from utils.errors import BackendUnavailableError, CorruptEntryError, NotFoundError


def _mock_redis() -> MagicMock:
    client = MagicMock()
    client.get = AsyncMock()
    client.set = AsyncMock(return_value=True)
    client.delete = AsyncMock(return_value=1)
    client.exists = AsyncMock(return_value=1)
    client.aclose = AsyncMock()
    return client


class TestRedisTokenStore:
    """Testes do RedisTokenStore (API assíncrona)."""

    @pytest.mark.asyncio
    async def test_set_uses_prefixed_key(self) -> None:
        client = _mock_redis()
        store = RedisTokenStore(client, prefix="docker")

        await store.set("vendas", {"bearer": "x"})

        key, payload = client.set.call_args[0]
        assert key == "docker:vendas"
        assert json.loads(payload) == {"bearer": "x"}

    @pytest.mark.asyncio
    async def test_get_without_prefix(self) -> None:
        client = _mock_redis()
        client.get.return_value = json.dumps({"a": 1}).encode()
        store = RedisTokenStore(client)

        assert await store.get("s1") == {"a": 1}
        client.get.assert_awaited_once_with("s1")

    @pytest.mark.asyncio
    async def test_get_missing_raises_not_found(self) -> None:
        client = _mock_redis()
        client.get.return_value = None
        with pytest.raises(NotFoundError):
            await RedisTokenStore(client).get("ghost")

    @pytest.mark.asyncio
    async def test_get_corrupt_raises(self) -> None:
        client = _mock_redis()
        client.get.return_value = b"\xff\xfe"
        with pytest.raises(CorruptEntryError):
            await RedisTokenStore(client).get("s1")

    @pytest.mark.asyncio
    async def test_delete_missing_raises_not_found(self) -> None:
        client = _mock_redis()
        client.delete.return_value = 0
        with pytest.raises(NotFoundError):
            await RedisTokenStore(client, prefix="p").delete("s1")
        client.delete.assert_awaited_once_with("p:s1")

    @pytest.mark.asyncio
    async def test_list_keys_strips_prefix_and_sorts(self) -> None:
        client = _mock_redis()
        seen: dict[str, str] = {}

        async def _scan_iter(match: str):
            seen["match"] = match
            for key in (b"docker:zeta", b"docker:alpha"):
                yield key

        client.scan_iter = _scan_iter
        store = RedisTokenStore(client, prefix="docker")

        assert await store.list_keys() == ["alpha", "zeta"]
        assert seen["match"] == "docker:*"

    @pytest.mark.asyncio
    async def test_connection_error_maps_to_backend_unavailable(self) -> None:
        client = _mock_redis()
        client.set.side_effect = RedisConnectionError("refused")

        with pytest.raises(BackendUnavailableError) as exc_info:
            await RedisTokenStore(client).set("s1", {})
        assert exc_info.value.backend == "redis"

    @pytest.mark.asyncio
    async def test_exists_and_close(self) -> None:
        client = _mock_redis()
        store = RedisTokenStore(client)

        assert await store.exists("s1") is True
        await store.close()
        client.aclose.assert_awaited_once()
