"""Settings do store de tokens de sessão.

Seleciona, uma única vez no startup, onde os tokens vivem.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from functools import lru_cache
from typing import TYPE_CHECKING, Literal

if TYPE_CHECKING:
    from config.settings.base.core import BaseSettings

TokenStoreBackend = Literal["file", "redis", "mongodb", "memory"]

_VALID_BACKENDS = ("file", "redis", "mongodb", "memory")


@dataclass(frozen=True)
class TokenStoreSettings:
    """Configurações do store de tokens.

    Attributes:
        backend: file (disco local) | redis | mongodb | memory (dev/test)
        file_dir: Diretório dos arquivos quando backend=file
    """

    backend: TokenStoreBackend = "file"
    file_dir: str = "./tokens"

    def validate(self, base: BaseSettings) -> list[str]:
        """Valida configurações do store de tokens.

        Args:
            base: BaseSettings para verificar ambiente.

        Returns:
            Lista de erros de validação.
        """
        errors: list[str] = []

        if self.backend not in _VALID_BACKENDS:
            errors.append(f"TOKEN_STORE_TYPE inválido: {self.backend}")

        if self.backend == "memory" and not base.is_development:
            errors.append("TOKEN_STORE_TYPE=memory proibido em staging/production")

        if self.backend == "file" and not self.file_dir:
            errors.append("TOKEN_STORE_FILE_DIR não pode ser vazio com backend file")

        return errors


def _load_token_store_from_env() -> TokenStoreSettings:
    """Carrega TokenStoreSettings de variáveis de ambiente."""
    backend_str = os.getenv("TOKEN_STORE_TYPE", "file").lower()
    backend: TokenStoreBackend = backend_str if backend_str in _VALID_BACKENDS else "file"  # type: ignore[assignment]
    return TokenStoreSettings(
        backend=backend,
        file_dir=os.getenv("TOKEN_STORE_FILE_DIR", "./tokens"),
    )


@lru_cache(maxsize=1)
def get_token_store_settings() -> TokenStoreSettings:
    """Retorna instância cacheada de TokenStoreSettings."""
    return _load_token_store_from_env()
