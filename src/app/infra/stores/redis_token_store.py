"""Redis Token Store — tokens de sessão em cache distribuído.

Operações atômicas nativas do Redis por chave (SET/DEL), sem lock local.
Durável apenas quando o Redis confirma a escrita.
"""

from __future__ import annotations

import json
import logging
from typing import TYPE_CHECKING, Any

from redis.exceptions import AuthenticationError
from redis.exceptions import ConnectionError as RedisConnectionError
from redis.exceptions import TimeoutError as RedisTimeoutError

from app.protocols.token_store import TokenStoreProtocol
from utils.errors import BackendUnavailableError, CorruptEntryError, NotFoundError

if TYPE_CHECKING:
    from redis.asyncio import Redis as AsyncRedis

logger = logging.getLogger(__name__)

_UNAVAILABLE_ERRORS = (RedisConnectionError, RedisTimeoutError, AuthenticationError, OSError)


class RedisTokenStore(TokenStoreProtocol):
    """Store de tokens usando Redis.

    Chaves no formato `{prefix}:{sessão}`; sem prefixo, a própria sessão.

    Args:
        redis_client: Cliente Redis assíncrono
        prefix: Namespace das chaves (ex.: "docker")
    """

    backend_name = "redis"

    def __init__(self, redis_client: AsyncRedis[bytes], prefix: str = "") -> None:
        self._redis = redis_client
        self._prefix = prefix

    def _key(self, key: str) -> str:
        """Gera chave Redis com namespace."""
        return f"{self._prefix}:{key}" if self._prefix else key

    def _strip(self, redis_key: bytes | str) -> str:
        text = redis_key.decode() if isinstance(redis_key, bytes) else redis_key
        if self._prefix:
            return text[len(self._prefix) + 1 :]
        return text

    def _unavailable(self, exc: Exception) -> BackendUnavailableError:
        logger.warning(
            "redis_token_store_unavailable",
            extra={"error_type": type(exc).__name__},
        )
        return BackendUnavailableError(self.backend_name, type(exc).__name__)

    async def get(self, key: str) -> dict[str, Any]:
        try:
            data = await self._redis.get(self._key(key))
        except _UNAVAILABLE_ERRORS as exc:
            raise self._unavailable(exc) from exc
        if data is None:
            raise NotFoundError(key)
        try:
            value = json.loads(data)
        except (json.JSONDecodeError, UnicodeDecodeError) as exc:
            raise CorruptEntryError(key, "json_invalido") from exc
        if not isinstance(value, dict):
            raise CorruptEntryError(key, "payload_nao_objeto")
        return value

    async def set(self, key: str, value: dict[str, Any]) -> bool:
        try:
            await self._redis.set(self._key(key), json.dumps(value, ensure_ascii=False))
        except _UNAVAILABLE_ERRORS as exc:
            raise self._unavailable(exc) from exc
        logger.debug("token_saved", extra={"session": key, "backend": "redis"})
        return True

    async def delete(self, key: str) -> bool:
        try:
            removed = await self._redis.delete(self._key(key))
        except _UNAVAILABLE_ERRORS as exc:
            raise self._unavailable(exc) from exc
        if not removed:
            raise NotFoundError(key)
        return True

    async def list_keys(self) -> list[str]:
        pattern = f"{self._prefix}:*" if self._prefix else "*"
        keys: list[str] = []
        try:
            async for redis_key in self._redis.scan_iter(match=pattern):
                keys.append(self._strip(redis_key))
        except _UNAVAILABLE_ERRORS as exc:
            raise self._unavailable(exc) from exc
        return sorted(keys)

    async def exists(self, key: str) -> bool:
        try:
            return bool(await self._redis.exists(self._key(key)))
        except _UNAVAILABLE_ERRORS as exc:
            raise self._unavailable(exc) from exc

    async def close(self) -> None:
        await self._redis.aclose()
