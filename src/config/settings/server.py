"""Configuração imutável completa do servidor.

Agrupa todas as settings num único valor, construído uma vez no startup
e repassado aos componentes no construtor. Nenhum componente lê env
diretamente depois disso.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from functools import lru_cache

from config.settings.archive import ArchiveSettings, get_archive_settings
from config.settings.base import (
    BaseSettings,
    LogSettings,
    TokenStoreSettings,
    get_base_settings,
    get_log_settings,
    get_token_store_settings,
)
from config.settings.infra import (
    MongoSettings,
    RedisSettings,
    S3Settings,
    get_mongo_settings,
    get_redis_settings,
    get_s3_settings,
)
from config.settings.mapper import MapperSettings, get_mapper_settings
from config.settings.webhook import WebhookSettings, get_webhook_settings
from config.settings.websocket import WebsocketSettings, get_websocket_settings


@dataclass(frozen=True)
class ServerOptions:
    """Snapshot imutável da configuração do servidor."""

    base: BaseSettings = field(default_factory=BaseSettings)
    log: LogSettings = field(default_factory=LogSettings)
    token_store: TokenStoreSettings = field(default_factory=TokenStoreSettings)
    webhook: WebhookSettings = field(default_factory=WebhookSettings)
    websocket: WebsocketSettings = field(default_factory=WebsocketSettings)
    archive: ArchiveSettings = field(default_factory=ArchiveSettings)
    mapper: MapperSettings = field(default_factory=MapperSettings)
    redis: RedisSettings = field(default_factory=RedisSettings)
    mongodb: MongoSettings = field(default_factory=MongoSettings)
    s3: S3Settings = field(default_factory=S3Settings)

    def validate(self) -> list[str]:
        """Valida todas as seções relevantes.

        Descritores de backend só são validados para o backend selecionado.

        Returns:
            Lista de erros agregada (vazia = OK).
        """
        errors: list[str] = []
        errors.extend(self.base.validate())
        errors.extend(self.log.validate())
        errors.extend(self.token_store.validate(self.base))
        errors.extend(self.webhook.validate())
        errors.extend(self.websocket.validate())
        errors.extend(self.archive.validate())
        errors.extend(self.mapper.validate())
        if self.token_store.backend == "redis":
            errors.extend(self.redis.validate())
        if self.token_store.backend == "mongodb":
            errors.extend(self.mongodb.validate())
        errors.extend(self.s3.validate(self.webhook.upload_s3 or self.websocket.upload_s3))
        return errors


@lru_cache(maxsize=1)
def get_server_options() -> ServerOptions:
    """Retorna snapshot cacheado carregado do ambiente."""
    return ServerOptions(
        base=get_base_settings(),
        log=get_log_settings(),
        token_store=get_token_store_settings(),
        webhook=get_webhook_settings(),
        websocket=get_websocket_settings(),
        archive=get_archive_settings(),
        mapper=get_mapper_settings(),
        redis=get_redis_settings(),
        mongodb=get_mongo_settings(),
        s3=get_s3_settings(),
    )
