"""Settings do Redis.

Descritor de conexão do backend de tokens distribuído.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from functools import lru_cache
from urllib.parse import quote

from config.settings._env import env_int


@dataclass(frozen=True)
class RedisSettings:
    """Configurações do Redis.

    Attributes:
        host: Host do Redis
        port: Porta do Redis
        password: Senha (vazia = sem autenticação)
        db: Índice numérico do database
        prefix: Prefixo das chaves (útil para multi-ambiente)
        url: URL completa; quando definida, sobrepõe host/port/password/db
    """

    host: str = "localhost"
    port: int = 6379
    password: str = ""
    db: int = 0
    prefix: str = "docker"
    url: str = ""

    @property
    def connection_url(self) -> str:
        """URL efetiva de conexão."""
        if self.url:
            return self.url
        auth = f":{quote(self.password, safe='')}@" if self.password else ""
        return f"redis://{auth}{self.host}:{self.port}/{self.db}"

    def validate(self) -> list[str]:
        errors: list[str] = []
        if not self.url and not self.host:
            errors.append("REDIS_HOST ou REDIS_URL deve estar configurado")
        if self.db < 0:
            errors.append("REDIS_DB deve ser >= 0")
        return errors


def _load_redis_from_env() -> RedisSettings:
    """Carrega RedisSettings de variáveis de ambiente."""
    return RedisSettings(
        host=os.getenv("REDIS_HOST", "localhost"),
        port=env_int("REDIS_PORT", 6379),
        password=os.getenv("REDIS_PASSWORD", ""),
        db=env_int("REDIS_DB", 0),
        prefix=os.getenv("REDIS_PREFIX", "docker"),
        url=os.getenv("REDIS_URL", ""),
    )


@lru_cache(maxsize=1)
def get_redis_settings() -> RedisSettings:
    """Retorna instância cacheada de RedisSettings."""
    return _load_redis_from_env()
