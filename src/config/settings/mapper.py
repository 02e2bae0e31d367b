"""Settings do mapper de etiquetas."""

from __future__ import annotations

import os
from dataclasses import dataclass
from functools import lru_cache

from config.settings._env import env_bool


@dataclass(frozen=True)
class MapperSettings:
    """Prefixo aplicado às etiquetas dos eventos entregues.

    Attributes:
        enable: Ativa o mapper
        prefix: Prefixo aplicado em cada etiqueta
    """

    enable: bool = False
    prefix: str = "tagone-"

    def validate(self) -> list[str]:
        if self.enable and not self.prefix:
            return ["MAPPER_PREFIX não pode ser vazio com MAPPER_ENABLE"]
        return []


@lru_cache(maxsize=1)
def get_mapper_settings() -> MapperSettings:
    """Retorna instância cacheada de MapperSettings."""
    return MapperSettings(
        enable=env_bool("MAPPER_ENABLE", False),
        prefix=os.getenv("MAPPER_PREFIX", "tagone-"),
    )
