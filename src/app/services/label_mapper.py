"""Mapeamento de etiquetas antes da construção do envelope."""

from __future__ import annotations

from collections.abc import Iterable
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from config.settings import MapperSettings


class LabelMapper:
    """Aplica o prefixo configurado às etiquetas do evento.

    Desabilitado, devolve as etiquetas inalteradas. Etiquetas que já
    começam com o prefixo não são prefixadas de novo.
    """

    __slots__ = ("_enabled", "_prefix")

    def __init__(self, enabled: bool = False, prefix: str = "") -> None:
        self._enabled = enabled and bool(prefix)
        self._prefix = prefix

    @classmethod
    def from_settings(cls, settings: MapperSettings) -> LabelMapper:
        return cls(enabled=settings.enable, prefix=settings.prefix)

    @property
    def enabled(self) -> bool:
        return self._enabled

    def map(self, labels: Iterable[str]) -> list[str]:
        if not self._enabled:
            return list(labels)
        return [
            label if label.startswith(self._prefix) else f"{self._prefix}{label}"
            for label in labels
        ]
