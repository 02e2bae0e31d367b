"""Exceções utilitárias compartilhadas."""

from .exceptions import (
    AlreadyExistsError,
    BackendUnavailableError,
    CorruptEntryError,
    DeliveryFailedError,
    InfrastructureError,
    MediaFetchFailedError,
    NotFoundError,
    SubscriberLimitError,
    WppRelayError,
)

__all__ = [
    "AlreadyExistsError",
    "BackendUnavailableError",
    "CorruptEntryError",
    "DeliveryFailedError",
    "InfrastructureError",
    "MediaFetchFailedError",
    "NotFoundError",
    "SubscriberLimitError",
    "WppRelayError",
]
