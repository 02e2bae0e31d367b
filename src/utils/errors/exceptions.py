"""Exceções de domínio do núcleo de notificação e persistência de tokens."""

from __future__ import annotations


class WppRelayError(Exception):
    """Base para todos os erros do serviço."""


class InfrastructureError(WppRelayError, RuntimeError):
    """Base para falhas de infraestrutura transitórias."""


class BackendUnavailableError(InfrastructureError):
    """Backend de tokens inacessível (rede, timeout ou autenticação recusada).

    Transitório: o chamador decide a política de retry.
    """

    def __init__(self, backend: str, message: str = "backend_unavailable") -> None:
        super().__init__(f"{backend}: {message}")
        self.backend = backend


class NotFoundError(WppRelayError, LookupError):
    """Chave inexistente no store (esperado em checagens de existência)."""

    def __init__(self, key: str) -> None:
        super().__init__(f"Chave não encontrada: {key}")
        self.key = key


class AlreadyExistsError(WppRelayError):
    """Sessão já existe — erro de lógica do chamador, não retentável."""

    def __init__(self, key: str) -> None:
        super().__init__(f"Sessão já existe: {key}")
        self.key = key


class CorruptEntryError(WppRelayError):
    """Entrada persistida ilegível; ignorada durante restauração em lote."""

    def __init__(self, key: str, reason: str) -> None:
        super().__init__(f"Entrada corrompida {key}: {reason}")
        self.key = key
        self.reason = reason


class DeliveryFailedError(WppRelayError):
    """Falha de entrega de webhook (status não-2xx ou erro de rede)."""

    def __init__(
        self,
        message: str,
        status_code: int | None = None,
        is_retryable: bool = True,
    ) -> None:
        super().__init__(message)
        self.status_code = status_code
        self.is_retryable = is_retryable


class MediaFetchFailedError(WppRelayError):
    """Falha ao baixar ou publicar mídia; degrada a entrega, nunca a bloqueia."""

    def __init__(self, reason: str) -> None:
        super().__init__(reason)
        self.reason = reason


class SubscriberLimitError(WppRelayError):
    """Limite de assinantes websocket atingido."""
