"""Protocolo para registro auditável de entregas descartadas."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from app.domain.delivery import DeliveryFailureRecord


class DeliveryAuditStoreProtocol(ABC):
    """Append-only de falhas definitivas de entrega (auditoria/alerta)."""

    @abstractmethod
    def append(self, record: DeliveryFailureRecord) -> None: ...

    @abstractmethod
    def get_records(self) -> list[DeliveryFailureRecord]: ...
