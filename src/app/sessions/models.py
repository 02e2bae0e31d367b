"""Modelo de token de sessão do WhatsApp.

Um SessionToken identifica uma sessão autenticada e carrega o blob opaco
de credenciais que permite retomá-la sem novo QR code.
"""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from datetime import UTC, datetime
from typing import Any

from utils.errors import CorruptEntryError


def _utcnow() -> datetime:
    return datetime.now(UTC)


@dataclass(frozen=True, slots=True)
class SessionToken:
    """Token persistido de uma sessão.

    Atributos:
        session_name: Nome único da sessão (chave no store)
        credentials: Blob opaco de credenciais da sessão
        bearer: Token bearer derivado do segredo do servidor
        wid: JID da própria sessão, quando já conectada
        created_at: Criação do token
        last_seen_at: Última atividade registrada
    """

    session_name: str
    credentials: dict[str, Any] = field(default_factory=dict)
    bearer: str = ""
    wid: str | None = None
    created_at: datetime = field(default_factory=_utcnow)
    last_seen_at: datetime = field(default_factory=_utcnow)

    def touched(self, at: datetime | None = None) -> SessionToken:
        """Retorna cópia com last_seen_at atualizado."""
        return replace(self, last_seen_at=at or _utcnow())

    def to_dict(self) -> dict[str, Any]:
        """Serializa token para persistência."""
        return {
            "session_name": self.session_name,
            "credentials": self.credentials,
            "bearer": self.bearer,
            "wid": self.wid,
            "created_at": self.created_at.isoformat(),
            "last_seen_at": self.last_seen_at.isoformat(),
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any], key: str | None = None) -> SessionToken:
        """Deserializa token de persistência.

        Raises:
            CorruptEntryError: campos obrigatórios ausentes ou inválidos.
        """
        entry_key = key or str(data.get("session_name", "?"))
        try:
            credentials = data["credentials"]
            if not isinstance(credentials, dict):
                raise TypeError("credentials")
            return cls(
                session_name=data["session_name"],
                credentials=credentials,
                bearer=data.get("bearer", ""),
                wid=data.get("wid"),
                created_at=datetime.fromisoformat(data["created_at"]),
                last_seen_at=datetime.fromisoformat(
                    data.get("last_seen_at") or data["created_at"]
                ),
            )
        except (KeyError, TypeError, ValueError) as exc:
            raise CorruptEntryError(entry_key, f"campo_invalido:{exc}") from exc
