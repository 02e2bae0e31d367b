"""Settings do canal webhook.

Flags por tipo de evento, filtros de remetente e parâmetros de entrega
(tentativas, backoff, concorrência).
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from functools import lru_cache

from config.settings._env import env_bool, env_float, env_int, env_list

DEFAULT_IGNORE: tuple[str, ...] = ("status@broadcast",)


@dataclass(frozen=True)
class WebhookSettings:
    """Configurações do webhook.

    Attributes:
        url: Endpoint que recebe os eventos (None = webhook desligado)
        auto_download: Baixa mídias recebidas antes de enviar
        upload_s3: Publica mídias no object storage e envia o link
        read_message: Marca mensagens como lidas após recebidas
        all_unread_on_start: Dispara webhooks de mensagens não lidas no startup
        listen_acks: Envia confirmações (ack)
        on_presence_changed: Envia mudanças de presença
        on_participants_changed: Envia mudanças de participantes de grupo
        on_reaction_message: Envia reações
        on_poll_response: Envia respostas de enquete
        on_revoked_message: Envia mensagens revogadas
        on_label_updated: Envia atualização de etiquetas
        on_self_message: Se True, NÃO envia eventos de autoria própria
        ignore: JIDs ignorados (não disparam notificação)
        max_attempts: Teto de tentativas por entrega
        backoff_base_seconds: Base do backoff exponencial
        backoff_max_seconds: Teto do backoff
        timeout_seconds: Timeout de cada POST
        concurrency: Entregas simultâneas em voo
    """

    url: str | None = None
    auto_download: bool = True
    upload_s3: bool = False
    read_message: bool = True
    all_unread_on_start: bool = False
    listen_acks: bool = True
    on_presence_changed: bool = True
    on_participants_changed: bool = True
    on_reaction_message: bool = True
    on_poll_response: bool = True
    on_revoked_message: bool = True
    on_label_updated: bool = True
    on_self_message: bool = False
    ignore: tuple[str, ...] = DEFAULT_IGNORE

    max_attempts: int = 5
    backoff_base_seconds: float = 1.0
    backoff_max_seconds: float = 30.0
    timeout_seconds: float = 15.0
    concurrency: int = 10

    @property
    def enabled(self) -> bool:
        return bool(self.url)

    def validate(self) -> list[str]:
        """Valida configurações do webhook.

        Returns:
            Lista de erros de validação (vazia = tudo OK).
        """
        errors: list[str] = []

        if self.url and not self.url.startswith(("http://", "https://")):
            errors.append(f"WEBHOOK_URL deve ser http(s): {self.url}")

        if self.max_attempts < 1:
            errors.append("WEBHOOK_MAX_ATTEMPTS deve ser >= 1")

        if self.backoff_base_seconds < 0 or self.backoff_max_seconds < 0:
            errors.append("WEBHOOK_BACKOFF_* deve ser >= 0")

        if self.timeout_seconds <= 0:
            errors.append("WEBHOOK_TIMEOUT_SECONDS deve ser > 0")

        if self.concurrency < 1:
            errors.append("WEBHOOK_CONCURRENCY deve ser >= 1")

        return errors


def _load_webhook_from_env() -> WebhookSettings:
    """Carrega WebhookSettings de variáveis de ambiente."""
    return WebhookSettings(
        url=os.getenv("WEBHOOK_URL") or None,
        auto_download=env_bool("WEBHOOK_AUTO_DOWNLOAD", True),
        upload_s3=env_bool("WEBHOOK_UPLOAD_S3", False),
        read_message=env_bool("WEBHOOK_READ_MESSAGE", True),
        all_unread_on_start=env_bool("WEBHOOK_ALL_UNREAD_ON_START", False),
        listen_acks=env_bool("WEBHOOK_LISTEN_ACKS", True),
        on_presence_changed=env_bool("WEBHOOK_ON_PRESENCE_CHANGED", True),
        on_participants_changed=env_bool("WEBHOOK_ON_PARTICIPANTS_CHANGED", True),
        on_reaction_message=env_bool("WEBHOOK_ON_REACTION_MESSAGE", True),
        on_poll_response=env_bool("WEBHOOK_ON_POLL_RESPONSE", True),
        on_revoked_message=env_bool("WEBHOOK_ON_REVOKED_MESSAGE", True),
        on_label_updated=env_bool("WEBHOOK_ON_LABEL_UPDATED", True),
        on_self_message=env_bool("WEBHOOK_ON_SELF_MESSAGE", False),
        ignore=env_list("WEBHOOK_IGNORE", DEFAULT_IGNORE),
        max_attempts=env_int("WEBHOOK_MAX_ATTEMPTS", 5),
        backoff_base_seconds=env_float("WEBHOOK_BACKOFF_BASE_SECONDS", 1.0),
        backoff_max_seconds=env_float("WEBHOOK_BACKOFF_MAX_SECONDS", 30.0),
        timeout_seconds=env_float("WEBHOOK_TIMEOUT_SECONDS", 15.0),
        concurrency=env_int("WEBHOOK_CONCURRENCY", 10),
    )


@lru_cache(maxsize=1)
def get_webhook_settings() -> WebhookSettings:
    """Retorna instância cacheada de WebhookSettings."""
    return _load_webhook_from_env()
