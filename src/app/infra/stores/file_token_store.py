"""File Token Store — tokens em disco local.

Um arquivo JSON por sessão (`<dir>/<sessão>.data.json`). Escrita atômica
(arquivo temporário + fsync + os.replace) e lock entre processos por chave
via filelock. Durável assim que `set` retorna.
"""

from __future__ import annotations

import asyncio
import json
import logging
import os
import tempfile
from pathlib import Path
from typing import Any

from filelock import FileLock, Timeout

from app.protocols.token_store import TokenStoreProtocol
from utils.errors import BackendUnavailableError, CorruptEntryError, NotFoundError

logger = logging.getLogger(__name__)

FILE_SUFFIX = ".data.json"
LOCK_SUFFIX = ".lock"
DEFAULT_LOCK_TIMEOUT_SECONDS = 10.0


class FileTokenStore(TokenStoreProtocol):
    """Store de tokens em arquivos locais.

    Args:
        directory: Diretório onde os arquivos são gravados
        lock_timeout_seconds: Espera máxima pelo lock de uma chave
    """

    backend_name = "file"

    def __init__(
        self,
        directory: str | Path,
        lock_timeout_seconds: float = DEFAULT_LOCK_TIMEOUT_SECONDS,
    ) -> None:
        self._dir = Path(directory)
        self._lock_timeout = lock_timeout_seconds

    @property
    def directory(self) -> Path:
        return self._dir

    def _path(self, key: str) -> Path:
        if not key or "/" in key or "\\" in key or key in (".", ".."):
            raise ValueError(f"Nome de sessão inválido para arquivo: {key!r}")
        return self._dir / f"{key}{FILE_SUFFIX}"

    def _lock(self, key: str) -> FileLock:
        return FileLock(str(self._path(key)) + LOCK_SUFFIX, timeout=self._lock_timeout)

    def _ensure_dir(self) -> None:
        try:
            self._dir.mkdir(parents=True, exist_ok=True)
        except OSError as exc:
            raise BackendUnavailableError(self.backend_name, f"diretório inacessível: {exc}") from exc

    # ──────────────────────────────────────────────────────────────
    # Implementação síncrona (executada fora do event loop)
    # ──────────────────────────────────────────────────────────────

    def _get_sync(self, key: str) -> dict[str, Any]:
        path = self._path(key)
        try:
            raw = path.read_text(encoding="utf-8")
        except FileNotFoundError as exc:
            raise NotFoundError(key) from exc
        except UnicodeDecodeError as exc:
            raise CorruptEntryError(key, "utf8_invalido") from exc
        except OSError as exc:
            raise BackendUnavailableError(self.backend_name, str(exc)) from exc
        try:
            value = json.loads(raw)
        except json.JSONDecodeError as exc:
            raise CorruptEntryError(key, "json_invalido") from exc
        if not isinstance(value, dict):
            raise CorruptEntryError(key, "payload_nao_objeto")
        return value

    def _set_sync(self, key: str, value: dict[str, Any]) -> bool:
        self._ensure_dir()
        path = self._path(key)
        data = json.dumps(value, ensure_ascii=False)
        try:
            with self._lock(key):
                fd, tmp_name = tempfile.mkstemp(dir=self._dir, prefix=f".{key}.", suffix=".tmp")
                try:
                    with os.fdopen(fd, "w", encoding="utf-8") as tmp:
                        tmp.write(data)
                        tmp.flush()
                        os.fsync(tmp.fileno())
                    os.replace(tmp_name, path)
                except BaseException:
                    Path(tmp_name).unlink(missing_ok=True)
                    raise
        except Timeout as exc:
            raise BackendUnavailableError(self.backend_name, f"lock ocupado: {key}") from exc
        except OSError as exc:
            raise BackendUnavailableError(self.backend_name, str(exc)) from exc
        logger.debug("token_file_written", extra={"session": key})
        return True

    def _delete_sync(self, key: str) -> bool:
        path = self._path(key)
        try:
            with self._lock(key):
                path.unlink()
        except FileNotFoundError as exc:
            raise NotFoundError(key) from exc
        except Timeout as exc:
            raise BackendUnavailableError(self.backend_name, f"lock ocupado: {key}") from exc
        except OSError as exc:
            raise BackendUnavailableError(self.backend_name, str(exc)) from exc
        return True

    def _list_keys_sync(self) -> list[str]:
        if not self._dir.exists():
            return []
        try:
            names = sorted(p.name for p in self._dir.iterdir() if p.name.endswith(FILE_SUFFIX))
        except OSError as exc:
            raise BackendUnavailableError(self.backend_name, str(exc)) from exc
        return [name[: -len(FILE_SUFFIX)] for name in names]

    def _exists_sync(self, key: str) -> bool:
        return self._path(key).is_file()

    # ──────────────────────────────────────────────────────────────
    # Async API
    # ──────────────────────────────────────────────────────────────

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
