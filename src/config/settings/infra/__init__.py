"""Agregador de settings de infraestrutura.

Re-exporta os descritores de conexão dos backends externos.
"""

from __future__ import annotations

from config.settings.infra.mongodb import (
    MongoSettings,
    get_mongo_settings,
)
from config.settings.infra.redis import (
    RedisSettings,
    get_redis_settings,
)
from config.settings.infra.s3 import (
    S3Settings,
    get_s3_settings,
)

__all__ = [
    # MongoDB
    "MongoSettings",
    # Redis
    "RedisSettings",
    # Object storage
    "S3Settings",
    "get_mongo_settings",
    "get_redis_settings",
    "get_s3_settings",
]
