"""Registro de tokens de sessão.

Único escritor do estado de sessão. Construído sobre um TokenStoreProtocol
escolhido no startup. Escritas na mesma chave são serializadas por lock
local por chave; chaves distintas nunca compartilham lock.
"""

from __future__ import annotations

import asyncio
import hashlib
import hmac
import logging
import secrets
from collections import defaultdict
from typing import TYPE_CHECKING, Any

from app.sessions.models import SessionToken
from utils.errors import (
    AlreadyExistsError,
    BackendUnavailableError,
    CorruptEntryError,
    NotFoundError,
)

if TYPE_CHECKING:
    from app.protocols.token_store import TokenStoreProtocol

logger = logging.getLogger(__name__)


def derive_bearer(secret_key: str, session_name: str) -> str:
    """Deriva o bearer de uma sessão a partir do segredo do servidor."""
    digest = hmac.new(secret_key.encode(), session_name.encode(), hashlib.sha256)
    return digest.hexdigest()


class SessionTokenRegistry:
    """Gerencia o ciclo de vida dos tokens de sessão.

    Operações:
        - create_session: cria e persiste um token novo
        - restore_all: carrega todos os tokens persistidos (startup)
        - touch: atualiza last_seen_at
        - revoke: remove o token
    """

    __slots__ = ("_cache", "_key_locks", "_secret_key", "_store")

    def __init__(self, store: TokenStoreProtocol, secret_key: str) -> None:
        """Inicializa registro.

        Args:
            store: Backend de tokens (um único por registro)
            secret_key: Segredo usado para derivar o bearer das sessões
        """
        self._store = store
        self._secret_key = secret_key
        self._key_locks: defaultdict[str, asyncio.Lock] = defaultdict(asyncio.Lock)
        self._cache: dict[str, SessionToken] = {}

    @property
    def store(self) -> TokenStoreProtocol:
        return self._store

    @property
    def sessions(self) -> dict[str, SessionToken]:
        """Tokens conhecidos neste processo (cópia)."""
        return dict(self._cache)

    async def create_session(
        self,
        name: str,
        credentials: dict[str, Any] | None = None,
    ) -> SessionToken:
        """Cria sessão nova.

        Raises:
            AlreadyExistsError: chave já ocupada no store.
            BackendUnavailableError: store inacessível.
        """
        async with self._key_locks[name]:
            if await self._store.exists(name):
                raise AlreadyExistsError(name)
            token = SessionToken(
                session_name=name,
                credentials=credentials if credentials is not None else {"seed": secrets.token_hex(16)},
                bearer=derive_bearer(self._secret_key, name),
            )
            await self._store.set(name, token.to_dict())
            self._cache[name] = token
        logger.info("session_created", extra={"session": name, "backend": self._store.backend_name})
        return token

    async def get(self, name: str) -> SessionToken:
        """Carrega token do store.

        Raises:
            NotFoundError: sessão inexistente.
            CorruptEntryError: entrada ilegível.
        """
        data = await self._store.get(name)
        token = SessionToken.from_dict(data, key=name)
        self._cache[name] = token
        return token

    async def restore_all(self, shutdown: asyncio.Event | None = None) -> list[SessionToken]:
        """Restaura todas as sessões persistidas (melhor esforço).

        Entradas corrompidas ou ilegíveis são logadas e ignoradas sem abortar
        as demais. Interrompe entre entradas se `shutdown` for sinalizado.

        Raises:
            BackendUnavailableError: falha ao listar as chaves.
        """
        keys = await self._store.list_keys()
        restored: list[SessionToken] = []
        skipped = 0
        for key in keys:
            if shutdown is not None and shutdown.is_set():
                logger.warning(
                    "session_restore_interrupted",
                    extra={"restored": len(restored), "remaining": len(keys) - len(restored) - skipped},
                )
                break
            try:
                restored.append(await self.get(key))
            except (CorruptEntryError, BackendUnavailableError, NotFoundError) as exc:
                skipped += 1
                logger.warning(
                    "session_restore_skipped",
                    extra={"session": key, "error_type": type(exc).__name__},
                )
        logger.info(
            "session_restore_completed",
            extra={"restored": len(restored), "skipped": skipped, "backend": self._store.backend_name},
        )
        return restored

    async def restore_on_startup(
        self,
        start_all_session: bool,
        shutdown: asyncio.Event | None = None,
    ) -> list[SessionToken]:
        """Restaura sessões somente se a flag de startup estiver ativa."""
        if not start_all_session:
            logger.info("session_restore_disabled")
            return []
        return await self.restore_all(shutdown)

    async def _update(self, name: str, **changes: Any) -> SessionToken:
        async with self._key_locks[name]:
            current = await self.get(name)
            fields = current.to_dict()
            fields.update(changes)
            token = SessionToken.from_dict(fields, key=name)
            await self._store.set(name, token.to_dict())
            self._cache[name] = token
            return token

    async def touch(self, name: str) -> SessionToken:
        """Atualiza last_seen_at.

        Raises:
            NotFoundError: sessão inexistente.
        """
        async with self._key_locks[name]:
            token = (await self.get(name)).touched()
            await self._store.set(name, token.to_dict())
            self._cache[name] = token
            return token

    async def update_credentials(self, name: str, credentials: dict[str, Any]) -> SessionToken:
        """Persiste novo blob de credenciais entregue pela camada de automação."""
        return await self._update(name, credentials=credentials)

    async def bind_identity(self, name: str, wid: str) -> SessionToken:
        """Registra o JID da própria sessão (usado na supressão de eco)."""
        token = await self._update(name, wid=wid)
        logger.info("session_identity_bound", extra={"session": name})
        return token

    async def self_identity(self, name: str) -> str | None:
        """JID da própria sessão; None se desconhecida ou inexistente."""
        cached = self._cache.get(name)
        if cached is not None:
            return cached.wid
        try:
            return (await self.get(name)).wid
        except (NotFoundError, CorruptEntryError):
            return None

    def verify_bearer(self, name: str, bearer: str) -> bool:
        """Compara o bearer informado com o derivado do segredo."""
        return hmac.compare_digest(derive_bearer(self._secret_key, name), bearer)

    async def revoke(self, name: str) -> None:
        """Remove o token da sessão.

        Raises:
            NotFoundError: sessão inexistente (ex.: segunda revogação).
        """
        async with self._key_locks[name]:
            try:
                await self._store.delete(name)
            finally:
                self._cache.pop(name, None)
        logger.info("session_revoked", extra={"session": name})
