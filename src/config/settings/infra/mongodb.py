"""Settings do MongoDB.

Descritor de conexão do backend de tokens em banco de documentos.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from functools import lru_cache
from urllib.parse import quote

from config.settings._env import env_bool, env_int

DEFAULT_COLLECTION = "tokens"


@dataclass(frozen=True)
class MongoSettings:
    """Configurações do MongoDB.

    Attributes:
        database: Database dos tokens
        collection: Collection dos tokens (vazia = "tokens")
        user: Usuário (opcional)
        password: Senha (opcional)
        host: Host do Mongo
        port: Porta do Mongo
        is_remote: Usa url_remote quando definida
        url_remote: String de conexão completa (ex.: Atlas)
    """

    database: str = "tokens"
    collection: str = ""
    user: str = ""
    password: str = ""
    host: str = ""
    port: int = 27017
    is_remote: bool = True
    url_remote: str = ""

    @property
    def collection_name(self) -> str:
        return self.collection or DEFAULT_COLLECTION

    @property
    def connection_url(self) -> str:
        """URL efetiva de conexão."""
        if self.is_remote and self.url_remote:
            return self.url_remote
        auth = ""
        if self.user:
            auth = f"{quote(self.user, safe='')}:{quote(self.password, safe='')}@"
        host = self.host or "localhost"
        return f"mongodb://{auth}{host}:{self.port}"

    def validate(self) -> list[str]:
        errors: list[str] = []
        if not self.database:
            errors.append("MONGODB_DATABASE não pode ser vazio")
        if not (self.is_remote and self.url_remote) and not self.host:
            errors.append("MONGODB_HOST ou MONGO_URL_REMOTE deve estar configurado")
        if self.password and not self.user:
            errors.append("MONGODB_PASSWORD requer MONGODB_USER")
        return errors


def _load_mongo_from_env() -> MongoSettings:
    """Carrega MongoSettings de variáveis de ambiente."""
    return MongoSettings(
        database=os.getenv("MONGODB_DATABASE", "tokens"),
        collection=os.getenv("MONGODB_COLLECTION", ""),
        user=os.getenv("MONGODB_USER", ""),
        password=os.getenv("MONGODB_PASSWORD", ""),
        host=os.getenv("MONGODB_HOST", ""),
        port=env_int("MONGODB_PORT", 27017),
        is_remote=env_bool("MONGO_IS_REMOTE", True),
        url_remote=os.getenv("MONGO_URL_REMOTE", ""),
    )


@lru_cache(maxsize=1)
def get_mongo_settings() -> MongoSettings:
    """Retorna instância cacheada de MongoSettings."""
    return _load_mongo_from_env()
