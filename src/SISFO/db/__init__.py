# src/SISFO/db/__init__.py
from .base import Base, GUID, UUIDMixin, AuditMixin

__all__ = ["Base", "GUID", "UUIDMixin", "AuditMixin"]
