"""Settings de logging.

Aceita os níveis herdados do servidor original (error, warn, info,
verbose, debug, silly) e os traduz para os níveis do módulo logging.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from functools import lru_cache

from config.settings._env import env_list

LOG_LEVEL_ALIASES: dict[str, str] = {
    "error": "ERROR",
    "warn": "WARNING",
    "warning": "WARNING",
    "info": "INFO",
    "verbose": "DEBUG",
    "debug": "DEBUG",
    "silly": "DEBUG",
    "critical": "CRITICAL",
}

VALID_DESTINATIONS = frozenset({"console", "file"})


@dataclass(frozen=True)
class LogSettings:
    """Configurações de logging.

    Attributes:
        level: Nível informado (original ou padrão Python)
        destinations: Destinos do log (console e/ou file)
        file_path: Arquivo usado quando "file" está em destinations
    """

    level: str = "info"
    destinations: tuple[str, ...] = ("console",)
    file_path: str = "./log/app.log"

    @property
    def python_level(self) -> str:
        """Nível traduzido para o módulo logging."""
        return LOG_LEVEL_ALIASES.get(self.level.lower(), self.level.upper())

    def validate(self) -> list[str]:
        errors: list[str] = []
        if self.level.lower() not in LOG_LEVEL_ALIASES:
            errors.append(f"LOG_LEVEL inválido: {self.level}")
        unknown = set(self.destinations) - VALID_DESTINATIONS
        if unknown:
            errors.append(f"LOG_DESTINATIONS inválido: {', '.join(sorted(unknown))}")
        if not self.destinations:
            errors.append("LOG_DESTINATIONS não pode ser vazio")
        return errors


def _load_log_from_env() -> LogSettings:
    """Carrega LogSettings de variáveis de ambiente."""
    return LogSettings(
        level=os.getenv("LOG_LEVEL", "info"),
        destinations=env_list("LOG_DESTINATIONS", ("console",)),
        file_path=os.getenv("LOG_FILE_PATH", "./log/app.log"),
    )


@lru_cache(maxsize=1)
def get_log_settings() -> LogSettings:
    """Retorna instância cacheada de LogSettings."""
    return _load_log_from_env()
