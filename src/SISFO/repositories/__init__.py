"""
Tenant-scoped repositories over the SISFO models.
"""

from .base import BaseRepository
from .factory import RepositoryFactory
from .schedule_repository import slots_overlap

__all__ = ["BaseRepository", "RepositoryFactory", "slots_overlap"]
