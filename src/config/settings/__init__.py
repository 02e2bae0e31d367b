"""Agregador de settings do wpp-relay.

Re-exporta todas as settings e funções de cada módulo.
Organização por domínio para isolamento de mudanças.
"""

from __future__ import annotations

# Archive
from config.settings.archive import (
    ArchiveSettings,
    get_archive_settings,
)

# Base settings
from config.settings.base import (
    LOG_LEVEL_ALIASES,
    BaseSettings,
    Environment,
    LogSettings,
    TokenStoreBackend,
    TokenStoreSettings,
    get_base_settings,
    get_log_settings,
    get_token_store_settings,
)

# Infrastructure settings
from config.settings.infra import (
    MongoSettings,
    RedisSettings,
    S3Settings,
    get_mongo_settings,
    get_redis_settings,
    get_s3_settings,
)
from config.settings.mapper import (
    MapperSettings,
    get_mapper_settings,
)

# Composite
from config.settings.server import (
    ServerOptions,
    get_server_options,
)

# Channel settings
from config.settings.webhook import (
    WebhookSettings,
    get_webhook_settings,
)
from config.settings.websocket import (
    WebsocketSettings,
    get_websocket_settings,
)

__all__ = [
    "LOG_LEVEL_ALIASES",
    # Archive
    "ArchiveSettings",
    # Base
    "BaseSettings",
    "Environment",
    "LogSettings",
    # Mapper
    "MapperSettings",
    # Infrastructure
    "MongoSettings",
    "RedisSettings",
    "S3Settings",
    # Composite
    "ServerOptions",
    "TokenStoreBackend",
    "TokenStoreSettings",
    # Channels
    "WebhookSettings",
    "WebsocketSettings",
    "get_archive_settings",
    "get_base_settings",
    "get_log_settings",
    "get_mapper_settings",
    "get_mongo_settings",
    "get_redis_settings",
    "get_s3_settings",
    "get_server_options",
    "get_token_store_settings",
    "get_webhook_settings",
    "get_websocket_settings",
]
