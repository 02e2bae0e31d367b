"""Helpers de leitura de variáveis de ambiente."""

from __future__ import annotations

import os

_TRUTHY = ("true", "1", "yes", "on")


def env_bool(name: str, default: bool) -> bool:
    """Lê booleano de env; ausente ou vazio retorna o default."""
    raw = os.getenv(name, "").strip().lower()
    if not raw:
        return default
    return raw in _TRUTHY


def env_int(name: str, default: int) -> int:
    raw = os.getenv(name, "").strip()
    return int(raw) if raw else default


def env_float(name: str, default: float) -> float:
    raw = os.getenv(name, "").strip()
    return float(raw) if raw else default


def env_list(name: str, default: tuple[str, ...] = ()) -> tuple[str, ...]:
    """Lê lista separada por vírgula, descartando itens vazios."""
    raw = os.getenv(name)
    if raw is None:
        return default
    return tuple(item.strip() for item in raw.split(",") if item.strip())


def env_optional(name: str) -> str | None:
    raw = os.getenv(name, "").strip()
    return raw or None
