"""MongoDB Token Store — tokens em banco de documentos.

Um documento por sessão, `_id` = nome da sessão. O driver pymongo é
síncrono; as chamadas rodam via asyncio.to_thread para não bloquear o
event loop. Escritas por documento são atômicas no próprio MongoDB.
"""

from __future__ import annotations

import asyncio
import logging
from datetime import UTC, datetime
from typing import TYPE_CHECKING, Any

from pymongo.errors import ConnectionFailure, OperationFailure, ServerSelectionTimeoutError

from app.protocols.token_store import TokenStoreProtocol
from utils.errors import BackendUnavailableError, CorruptEntryError, NotFoundError

if TYPE_CHECKING:
    from pymongo import MongoClient
    from pymongo.collection import Collection

logger = logging.getLogger(__name__)

_UNAVAILABLE_ERRORS = (ConnectionFailure, ServerSelectionTimeoutError, OperationFailure)


class MongoTokenStore(TokenStoreProtocol):
    """Store de tokens usando MongoDB.

    Args:
        mongo_client: Cliente pymongo
        database: Nome do database
        collection: Nome da collection
    """

    backend_name = "mongodb"

    def __init__(
        self,
        mongo_client: MongoClient[dict[str, Any]],
        database: str,
        collection: str = "tokens",
    ) -> None:
        self._client = mongo_client
        self._collection: Collection[dict[str, Any]] = mongo_client[database][collection]

    def _unavailable(self, exc: Exception) -> BackendUnavailableError:
        logger.warning(
            "mongo_token_store_unavailable",
            extra={"error_type": type(exc).__name__},
        )
        return BackendUnavailableError(self.backend_name, type(exc).__name__)

    def _get_sync(self, key: str) -> dict[str, Any]:
        try:
            doc = self._collection.find_one({"_id": key})
        except _UNAVAILABLE_ERRORS as exc:
            raise self._unavailable(exc) from exc
        if doc is None:
            raise NotFoundError(key)
        data = doc.get("data")
        if not isinstance(data, dict):
            raise CorruptEntryError(key, "campo_data_ausente")
        return data

    def _set_sync(self, key: str, value: dict[str, Any]) -> bool:
        document = {
            "_id": key,
            "session_name": key,
            "data": value,
            "updated_at": datetime.now(UTC),
        }
        try:
            self._collection.replace_one({"_id": key}, document, upsert=True)
        except _UNAVAILABLE_ERRORS as exc:
            raise self._unavailable(exc) from exc
        logger.debug("token_saved", extra={"session": key, "backend": "mongodb"})
        return True

    def _delete_sync(self, key: str) -> bool:
        try:
            result = self._collection.delete_one({"_id": key})
        except _UNAVAILABLE_ERRORS as exc:
            raise self._unavailable(exc) from exc
        if result.deleted_count == 0:
            raise NotFoundError(key)
        return True

    def _list_keys_sync(self) -> list[str]:
        try:
            return sorted(str(doc["_id"]) for doc in self._collection.find({}, {"_id": 1}))
        except _UNAVAILABLE_ERRORS as exc:
            raise self._unavailable(exc) from exc

    def _exists_sync(self, key: str) -> bool:
        try:
            return self._collection.count_documents({"_id": key}, limit=1) > 0
        except _UNAVAILABLE_ERRORS as exc:
            raise self._unavailable(exc) from exc

    async def get(self, key: str) -> dict[str, Any]:
        return await asyncio.to_thread(self._get_sync, key)

    async def set(self, key: str, value: dict[str, Any]) -> bool:
        return await asyncio.to_thread(self._set_sync, key, value)

    async def delete(self, key: str) -> bool:
        return await asyncio.to_thread(self._delete_sync, key)

    async def list_keys(self) -> list[str]:
        return await asyncio.to_thread(self._list_keys_sync)

    async def exists(self, key: str) -> bool:
        return await asyncio.to_thread(self._exists_sync, key)

    async def close(self) -> None:
        await asyncio.to_thread(self._client.close)
