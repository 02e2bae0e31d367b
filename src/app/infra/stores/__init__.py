"""Stores — implementações concretas de persistência.

Módulos disponíveis:
    - file_token_store: Tokens em arquivos locais (filelock + escrita atômica)
    - redis_token_store: Tokens em Redis
    - mongo_token_store: Tokens em MongoDB
    - memory_stores: Stores em memória para desenvolvimento/testes
"""

from __future__ import annotations

from app.infra.stores.file_token_store import FileTokenStore
from app.infra.stores.memory_stores import MemoryDeliveryAuditStore, MemoryTokenStore
from app.infra.stores.mongo_token_store import MongoTokenStore
from app.infra.stores.redis_token_store import RedisTokenStore

__all__ = [
    # File
    "FileTokenStore",
    # Memory (dev/test)
    "MemoryDeliveryAuditStore",
    "MemoryTokenStore",
    # MongoDB
    "MongoTokenStore",
    # Redis
    "RedisTokenStore",
]
