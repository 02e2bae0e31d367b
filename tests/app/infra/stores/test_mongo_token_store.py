"""Testes do MongoTokenStore com mock do pymongo."""

from __future__ import annotations

from types import SimpleNamespace
from unittest.mock import MagicMock

import pytest
from pymongo.errors import ServerSelectionTimeoutError

from app.infra.stores.mongo_token_store import MongoTokenStore
from utils.errors import BackendUnavailableError, CorruptEntryError, NotFoundError


def _store() -> tuple[MongoTokenStore, MagicMock, MagicMock]:
    client = MagicMock()
    collection = MagicMock()
    client.__getitem__.return_value.__getitem__.return_value = collection
    return MongoTokenStore(client, "tokens", "sessions"), client, collection


class TestMongoTokenStore:
    """Testes do MongoTokenStore."""

    def test_uses_configured_database_and_collection(self) -> None:
        _, client, _ = _store()
        client.__getitem__.assert_called_once_with("tokens")
        client.__getitem__.return_value.__getitem__.assert_called_once_with("sessions")

    @pytest.mark.asyncio
    async def test_set_upserts_document_by_session(self) -> None:
        store, _, collection = _store()

        await store.set("vendas", {"bearer": "x"})

        filter_, document = collection.replace_one.call_args[0]
        assert filter_ == {"_id": "vendas"}
        assert document["data"] == {"bearer": "x"}
        assert collection.replace_one.call_args[1] == {"upsert": True}

    @pytest.mark.asyncio
    async def test_get_returns_data_field(self) -> None:
        store, _, collection = _store()
        collection.find_one.return_value = {"_id": "s1", "data": {"a": 1}}
        assert await store.get("s1") == {"a": 1}

    @pytest.mark.asyncio
    async def test_get_missing_and_corrupt(self) -> None:
        store, _, collection = _store()
        collection.find_one.return_value = None
        with pytest.raises(NotFoundError):
            await store.get("ghost")

        collection.find_one.return_value = {"_id": "s1", "data": "oops"}
        with pytest.raises(CorruptEntryError):
            await store.get("s1")

    @pytest.mark.asyncio
    async def test_delete_missing_raises(self) -> None:
        store, _, collection = _store()
        collection.delete_one.return_value = SimpleNamespace(deleted_count=0)
        with pytest.raises(NotFoundError):
            await store.delete("s1")

    @pytest.mark.asyncio
    async def test_list_keys_sorted(self) -> None:
        store, _, collection = _store()
        collection.find.return_value = [{"_id": "b"}, {"_id": "a"}]
        assert await store.list_keys() == ["a", "b"]

    @pytest.mark.asyncio
    async def test_server_selection_timeout_maps_to_unavailable(self) -> None:
        store, _, collection = _store()
        collection.count_documents.side_effect = ServerSelectionTimeoutError("no servers")

        with pytest.raises(BackendUnavailableError) as exc_info:
            await store.exists("s1")
        assert exc_info.value.backend == "mongodb"
