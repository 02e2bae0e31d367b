"""Settings base do servidor.

Configurações comuns a todo o processo: identificação, segredo usado para
derivar tokens bearer, restauração de sessões no startup e limite de
listeners websocket.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from functools import lru_cache
from typing import Literal

from config.settings._env import env_bool, env_int

Environment = Literal["development", "staging", "production"]

DEFAULT_SECRET_KEY = "THISISMYSECURETOKEN"


@dataclass(frozen=True)
class BaseSettings:
    """Configurações base do sistema.

    Attributes:
        environment: Ambiente de execução (development|staging|production)
        service_name: Nome do serviço para logs
        secret_key: Chave usada para derivar o bearer de cada sessão
        host: Host onde o servidor HTTP escuta
        port: Porta do servidor HTTP
        device_name: Nome do dispositivo apresentado ao WhatsApp
        powered_by: Valor do header X-Powered-By
        start_all_session: Restaura todas as sessões persistidas no startup
        max_listeners: Limite de assinantes websocket simultâneos
        custom_user_data_dir: Diretório de perfil do navegador
    """

    environment: Environment = "development"
    service_name: str = "wpp-relay"
    secret_key: str = DEFAULT_SECRET_KEY
    host: str = "http://localhost"
    port: int = 21465
    device_name: str = "WppConnect"
    powered_by: str = "WPPConnect-Server"
    start_all_session: bool = True
    max_listeners: int = 15
    custom_user_data_dir: str = "./userDataDir/"

    @property
    def is_production(self) -> bool:
        """Retorna True se ambiente é produção."""
        return self.environment == "production"

    @property
    def is_development(self) -> bool:
        """Retorna True se ambiente é desenvolvimento."""
        return self.environment == "development"

    def validate(self) -> list[str]:
        """Valida configurações base.

        Returns:
            Lista de erros (vazia = OK).
        """
        errors: list[str] = []

        if not self.service_name:
            errors.append("SERVICE_NAME não pode ser vazio")

        if not self.secret_key:
            errors.append("SECRET_KEY não pode ser vazio")
        elif self.secret_key == DEFAULT_SECRET_KEY and self.is_production:
            errors.append("SECRET_KEY padrão proibida em production")

        if not 0 < self.port < 65536:
            errors.append(f"PORT inválida: {self.port}")

        if self.max_listeners < 1:
            errors.append("MAX_LISTENERS deve ser >= 1")

        return errors


def _parse_environment(env_str: str) -> Environment:
    """Converte string de ambiente para tipo Environment."""
    env_lower = env_str.lower()
    if env_lower in ("production", "prod"):
        return "production"
    if env_lower in ("staging", "stage"):
        return "staging"
    return "development"


def _load_base_from_env() -> BaseSettings:
    """Carrega BaseSettings de variáveis de ambiente."""
    return BaseSettings(
        environment=_parse_environment(os.getenv("ENVIRONMENT", "development")),
        service_name=os.getenv("SERVICE_NAME", "wpp-relay"),
        secret_key=os.getenv("SECRET_KEY", DEFAULT_SECRET_KEY),
        host=os.getenv("HOST", "http://localhost"),
        port=env_int("PORT", 21465),
        device_name=os.getenv("DEVICE_NAME", "WppConnect"),
        powered_by=os.getenv("POWERED_BY", "WPPConnect-Server"),
        start_all_session=env_bool("START_ALL_SESSION", True),
        max_listeners=env_int("MAX_LISTENERS", 15),
        custom_user_data_dir=os.getenv("CUSTOM_USER_DATA_DIR", "./userDataDir/"),
    )


@lru_cache(maxsize=1)
def get_base_settings() -> BaseSettings:
    """Retorna instância cacheada de BaseSettings."""
    return _load_base_from_env()
