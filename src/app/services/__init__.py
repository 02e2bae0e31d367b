"""Serviços de aplicação.

Unidades de orquestração do pipeline de notificação. Implementações
concretas de IO ficam em app/infra/.
"""

from app.services.archive_scheduler import ArchivePolicyScheduler
from app.services.dispatcher import NotificationDispatcher
from app.services.event_filter import decide
from app.services.label_mapper import LabelMapper
from app.services.media_resolver import MediaResolution, MediaResolver

__all__ = [
    "ArchivePolicyScheduler",
    "LabelMapper",
    "MediaResolution",
    "MediaResolver",
    "NotificationDispatcher",
    "decide",
]
