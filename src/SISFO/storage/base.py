from __future__ import annotations

from typing import Protocol, runtime_checkable


@runtime_checkable
class FileStorage(Protocol):
    """Object storage used for rendered report card PDFs."""

    async def upload(self, path: str, content: bytes) -> str:
        """Store ``content`` under ``path`` and return its public URL."""
        ...

    async def get_url(self, path: str) -> str:
        ...


def report_card_pdf_path(tenant_id: str, report_card_id: object) -> str:
    return f"report_cards/{tenant_id}/{report_card_id}.pdf"
