"""Agregador de settings base.

Re-exporta todas as settings base para uso externo.
"""

from __future__ import annotations

from config.settings.base.core import (
    BaseSettings,
    Environment,
    get_base_settings,
)
from config.settings.base.log import (
    LOG_LEVEL_ALIASES,
    LogSettings,
    get_log_settings,
)
from config.settings.base.token_store import (
    TokenStoreBackend,
    TokenStoreSettings,
    get_token_store_settings,
)

__all__ = [
    "LOG_LEVEL_ALIASES",
    # Core
    "BaseSettings",
    # Types
    "Environment",
    # Log
    "LogSettings",
    "TokenStoreBackend",
    # Token store
    "TokenStoreSettings",
    "get_base_settings",
    "get_log_settings",
    "get_token_store_settings",
]
