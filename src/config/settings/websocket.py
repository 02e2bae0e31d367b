"""Settings do canal websocket."""

from __future__ import annotations

from dataclasses import dataclass
from functools import lru_cache

from config.settings._env import env_bool, env_int


@dataclass(frozen=True)
class WebsocketSettings:
    """Configurações do websocket.

    Attributes:
        auto_download: Baixa mídias para eventos transmitidos
        upload_s3: Publica mídias no object storage
        queue_size: Fila máxima por assinante (descarta o mais antigo)
        concurrency: Broadcasts simultâneos
    """

    auto_download: bool = False
    upload_s3: bool = False
    queue_size: int = 100
    concurrency: int = 4

    def validate(self) -> list[str]:
        errors: list[str] = []
        if self.queue_size < 1:
            errors.append("WEBSOCKET_QUEUE_SIZE deve ser >= 1")
        if self.concurrency < 1:
            errors.append("WEBSOCKET_CONCURRENCY deve ser >= 1")
        return errors


def _load_websocket_from_env() -> WebsocketSettings:
    return WebsocketSettings(
        auto_download=env_bool("WEBSOCKET_AUTO_DOWNLOAD", False),
        upload_s3=env_bool("WEBSOCKET_UPLOAD_S3", False),
        queue_size=env_int("WEBSOCKET_QUEUE_SIZE", 100),
        concurrency=env_int("WEBSOCKET_CONCURRENCY", 4),
    )


@lru_cache(maxsize=1)
def get_websocket_settings() -> WebsocketSettings:
    """Retorna instância cacheada de WebsocketSettings."""
    return _load_websocket_from_env()
