"""Stores em memória — apenas para desenvolvimento e testes.

ATENÇÃO: Não usar em staging/production. Sem persistência entre reinícios.
"""

from __future__ import annotations

import copy
import json
from typing import TYPE_CHECKING, Any

from app.protocols.delivery_audit_store import DeliveryAuditStoreProtocol
from app.protocols.token_store import TokenStoreProtocol
from utils.errors import CorruptEntryError, NotFoundError

if TYPE_CHECKING:
    from app.domain.delivery import DeliveryFailureRecord


class MemoryTokenStore(TokenStoreProtocol):
    """Store de tokens em memória — apenas para dev/test.

    Guarda o JSON serializado para reproduzir o comportamento dos backends
    reais (cópias independentes, entradas corrompidas).
    """

    backend_name = "memory"

    def __init__(self) -> None:
        self._store: dict[str, str] = {}

    async def get(self, key: str) -> dict[str, Any]:
        raw = self._store.get(key)
        if raw is None:
            raise NotFoundError(key)
        try:
            value = json.loads(raw)
        except json.JSONDecodeError as exc:
            raise CorruptEntryError(key, "json_invalido") from exc
        if not isinstance(value, dict):
            raise CorruptEntryError(key, "payload_nao_objeto")
        return value

    async def set(self, key: str, value: dict[str, Any]) -> bool:
        self._store[key] = json.dumps(copy.deepcopy(value))
        return True

    async def delete(self, key: str) -> bool:
        if key not in self._store:
            raise NotFoundError(key)
        del self._store[key]
        return True

    async def list_keys(self) -> list[str]:
        return sorted(self._store)

    async def exists(self, key: str) -> bool:
        return key in self._store

    def put_raw(self, key: str, raw: str) -> None:
        """Grava payload bruto (apenas para testes de entradas corrompidas)."""
        self._store[key] = raw


class MemoryDeliveryAuditStore(DeliveryAuditStoreProtocol):
    """Registro de falhas de entrega em memória."""

    def __init__(self, max_records: int = 10000) -> None:
        self._records: list[DeliveryFailureRecord] = []
        self._max_records = max_records

    def append(self, record: DeliveryFailureRecord) -> None:
        self._records.append(record)
        # Limita tamanho para evitar crescimento sem limite
        if len(self._records) > self._max_records:
            self._records = self._records[-self._max_records:]

    def get_records(self) -> list[DeliveryFailureRecord]:
        return list(self._records)
