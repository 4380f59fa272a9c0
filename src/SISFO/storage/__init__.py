from __future__ import annotations

from SISFO.core.config import Settings

from .base import FileStorage, report_card_pdf_path
from .http_store import HttpObjectStorage
from .local import LocalFileStorage


def build_storage(settings: Settings) -> FileStorage:
    if settings.STORAGE_BACKEND == "http":
        return HttpObjectStorage(settings.STORAGE_BASE_URL)
    return LocalFileStorage(settings.STORAGE_BASE_PATH, settings.STORAGE_BASE_URL)


__all__ = ["FileStorage", "LocalFileStorage", "HttpObjectStorage", "build_storage", "report_card_pdf_path"]
