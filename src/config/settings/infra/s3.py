"""Settings de upload para object storage compatível com S3.

Usadas quando webhook.upload_s3 ou websocket.upload_s3 estão ativos.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from functools import lru_cache

from config.settings._env import env_bool, env_optional


@dataclass(frozen=True)
class S3Settings:
    """Configurações de object storage.

    Attributes:
        region: Região do bucket (ex.: sa-east-1)
        access_key_id: Credencial de acesso
        secret_key: Credencial secreta
        default_bucket_name: Bucket padrão para upload
        endpoint: Endpoint custom (MinIO, Wasabi, etc.)
        force_path_style: Força path-style no endpoint
    """

    region: str = "sa-east-1"
    access_key_id: str | None = None
    secret_key: str | None = None
    default_bucket_name: str | None = None
    endpoint: str | None = None
    force_path_style: bool = False

    @property
    def is_configured(self) -> bool:
        return bool(self.default_bucket_name)

    def validate(self, upload_requested: bool) -> list[str]:
        """Valida settings quando algum canal pede upload.

        Args:
            upload_requested: True se webhook ou websocket têm upload_s3 ativo.
        """
        if not upload_requested:
            return []
        errors: list[str] = []
        if not self.default_bucket_name:
            errors.append("AWS_S3_DEFAULT_BUCKET_NAME obrigatório com upload_s3 ativo")
        if not self.region:
            errors.append("AWS_S3_REGION não pode ser vazio")
        return errors


def _load_s3_from_env() -> S3Settings:
    """Carrega S3Settings de variáveis de ambiente."""
    return S3Settings(
        region=os.getenv("AWS_S3_REGION", "sa-east-1"),
        access_key_id=env_optional("AWS_S3_ACCESS_KEY_ID"),
        secret_key=env_optional("AWS_S3_SECRET_KEY"),
        default_bucket_name=env_optional("AWS_S3_DEFAULT_BUCKET_NAME"),
        endpoint=env_optional("AWS_S3_ENDPOINT"),
        force_path_style=env_bool("AWS_S3_FORCE_PATH_STYLE", False),
    )


@lru_cache(maxsize=1)
def get_s3_settings() -> S3Settings:
    """Retorna instância cacheada de S3Settings."""
    return _load_s3_from_env()
