"""Protocolo de domínio para persistência de tokens de sessão.

Abstração chave-valor uniforme sobre os backends (arquivo, Redis, MongoDB).
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any


class TokenStoreProtocol(ABC):
    """Contrato assíncrono de armazenamento de tokens.

    Falhas de conectividade ou autenticação levantam
    BackendUnavailableError; nunca são engolidas.
    """

    #: Nome do backend para logs e erros
    backend_name: str = "unknown"

    @abstractmethod
    async def get(self, key: str) -> dict[str, Any]:
        """Retorna o valor da chave.

        Raises:
            NotFoundError: chave inexistente.
            CorruptEntryError: payload persistido ilegível.
        """

    @abstractmethod
    async def set(self, key: str, value: dict[str, Any]) -> bool:
        """Grava (sobrescreve) o valor da chave."""

    @abstractmethod
    async def delete(self, key: str) -> bool:
        """Remove a chave.

        Raises:
            NotFoundError: chave inexistente.
        """

    @abstractmethod
    async def list_keys(self) -> list[str]:
        """Lista todas as chaves (usado na restauração do startup)."""

    @abstractmethod
    async def exists(self, key: str) -> bool: ...

    async def close(self) -> None:
        """Libera conexões; no-op por padrão."""
        return None
