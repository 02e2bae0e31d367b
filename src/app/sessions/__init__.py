"""Módulo de sessões do WhatsApp.

Exporta o modelo de token e o registro de sessões.
"""

from app.sessions.models import SessionToken
from app.sessions.registry import SessionTokenRegistry, derive_bearer

__all__ = [
    "SessionToken",
    "SessionTokenRegistry",
    "derive_bearer",
]
