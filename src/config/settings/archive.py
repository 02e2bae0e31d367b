"""Settings de arquivamento automático de conversas."""

from __future__ import annotations

from dataclasses import dataclass
from functools import lru_cache

from config.settings._env import env_bool, env_float, env_int

SECONDS_PER_DAY = 86400


@dataclass(frozen=True)
class ArchiveSettings:
    """Regras de arquivamento automático.

    Attributes:
        enable: Ativa/desativa o arquivamento (política global)
        wait_time: Segundos sem atividade até a conversa ficar pendente
        days_to_archive: Dias pendente, sem atividade, até arquivar
        check_interval_seconds: Intervalo entre avaliações do scheduler
    """

    enable: bool = False
    wait_time: int = 10
    days_to_archive: int = 45
    check_interval_seconds: float = 60.0

    @property
    def archive_after_seconds(self) -> int:
        return self.days_to_archive * SECONDS_PER_DAY

    def validate(self) -> list[str]:
        errors: list[str] = []
        if self.wait_time < 0:
            errors.append("ARCHIVE_WAIT_TIME deve ser >= 0")
        if self.days_to_archive < 0:
            errors.append("ARCHIVE_DAYS_TO_ARCHIVE deve ser >= 0")
        if self.check_interval_seconds <= 0:
            errors.append("ARCHIVE_CHECK_INTERVAL_SECONDS deve ser > 0")
        return errors


def _load_archive_from_env() -> ArchiveSettings:
    return ArchiveSettings(
        enable=env_bool("ARCHIVE_ENABLE", False),
        wait_time=env_int("ARCHIVE_WAIT_TIME", 10),
        days_to_archive=env_int("ARCHIVE_DAYS_TO_ARCHIVE", 45),
        check_interval_seconds=env_float("ARCHIVE_CHECK_INTERVAL_SECONDS", 60.0),
    )


@lru_cache(maxsize=1)
def get_archive_settings() -> ArchiveSettings:
    """Retorna instância cacheada de ArchiveSettings."""
    return _load_archive_from_env()
