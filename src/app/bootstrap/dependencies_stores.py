"""Factories de stores baseadas na configuração do servidor."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from app.bootstrap.clients import create_async_redis_client, create_mongo_client
from app.infra.stores import (
    FileTokenStore,
    MemoryDeliveryAuditStore,
    MemoryTokenStore,
    MongoTokenStore,
    RedisTokenStore,
)

if TYPE_CHECKING:
    from app.protocols.delivery_audit_store import DeliveryAuditStoreProtocol
    from app.protocols.token_store import TokenStoreProtocol
    from config.settings import ServerOptions

logger = logging.getLogger(__name__)


def create_token_store(options: ServerOptions) -> TokenStoreProtocol:
    """Cria o backend de tokens selecionado por TOKEN_STORE_TYPE.

    Escolhido uma única vez no startup; um backend por registro.

    Raises:
        ValueError: backend desconhecido.
    """
    backend = options.token_store.backend

    if backend == "file":
        store: TokenStoreProtocol = FileTokenStore(options.token_store.file_dir)
    elif backend == "redis":
        store = RedisTokenStore(
            create_async_redis_client(options.redis),
            prefix=options.redis.prefix,
        )
    elif backend == "mongodb":
        store = MongoTokenStore(
            create_mongo_client(options.mongodb),
            database=options.mongodb.database,
            collection=options.mongodb.collection_name,
        )
    elif backend == "memory":
        if not options.base.is_development:
            logger.warning(
                "memory_store_in_non_dev",
                extra={"backend": "memory", "environment": options.base.environment},
            )
        store = MemoryTokenStore()
    else:
        msg = f"TOKEN_STORE_TYPE inválido: {backend}"
        raise ValueError(msg)

    logger.info("token_store_created", extra={"backend": store.backend_name})
    return store


def create_audit_store() -> DeliveryAuditStoreProtocol:
    """Cria store de auditoria de entregas descartadas."""
    store = MemoryDeliveryAuditStore()
    logger.info("delivery_audit_store_created", extra={"backend": "memory"})
    return store
