"""Factories de clientes externos — Redis e MongoDB."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from pymongo import MongoClient
    from redis.asyncio import Redis as AsyncRedis

    from config.settings import MongoSettings, RedisSettings

logger = logging.getLogger(__name__)


# ──────────────────────────────────────────────────────────────────────────────
# Redis Client Factory
# ──────────────────────────────────────────────────────────────────────────────


def create_async_redis_client(settings: RedisSettings) -> AsyncRedis:
    """Cria cliente Redis assíncrono a partir do descritor.

    A conexão é lazy: falhas de rede aparecem na primeira operação.
    """
    from redis.asyncio import Redis as AsyncRedis

    client: AsyncRedis = AsyncRedis.from_url(
        settings.connection_url,
        decode_responses=False,
        socket_timeout=5.0,
        socket_connect_timeout=5.0,
        retry_on_timeout=True,
    )
    logger.info("async_redis_client_created", extra={"host": settings.host, "db": settings.db})
    return client


# ──────────────────────────────────────────────────────────────────────────────
# MongoDB Client Factory
# ──────────────────────────────────────────────────────────────────────────────


def create_mongo_client(settings: MongoSettings) -> MongoClient:
    """Cria cliente MongoDB (conexão lazy, timeout curto de seleção)."""
    from pymongo import MongoClient

    client: MongoClient = MongoClient(
        settings.connection_url,
        serverSelectionTimeoutMS=5000,
        connect=False,
    )
    logger.info(
        "mongo_client_created",
        extra={"remote": bool(settings.is_remote and settings.url_remote), "database": settings.database},
    )
    return client
