"""Adaptadores da camada de automação do WhatsApp."""

from app.infra.whatsapp.media_downloader import HttpMediaDownloader

__all__ = [
    "HttpMediaDownloader",
]
