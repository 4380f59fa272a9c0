from __future__ import annotations

import asyncio
from pathlib import Path

from SISFO.app_logger import get_logger
from SISFO.errors import StorageError

logger = get_logger(__name__)


class LocalFileStorage:
    """Writes objects below ``base_path`` and serves them from ``base_url``."""

    def __init__(self, base_path: str, base_url: str) -> None:
        self.base_path = Path(base_path)
        self.base_url = base_url.rstrip("/")

    def _target(self, path: str) -> Path:
        target = (self.base_path / path).resolve()
        root = self.base_path.resolve()
        if root != target and root not in target.parents:
            raise StorageError(f"invalid object path: {path}")
        return target

    def _write(self, target: Path, content: bytes) -> None:
        target.parent.mkdir(parents=True, exist_ok=True)
        tmp = target.with_suffix(target.suffix + ".tmp")
        tmp.write_bytes(content)
        tmp.replace(target)

    async def upload(self, path: str, content: bytes) -> str:
        target = self._target(path)
        try:
            await asyncio.to_thread(self._write, target, content)
        except OSError as e:
            raise StorageError(f"failed to write {path}: {e}", cause=e) from e
        logger.info("stored object", extra={"path": path, "bytes": len(content)})
        return await self.get_url(path)

    async def get_url(self, path: str) -> str:
        return f"{self.base_url}/{path.lstrip('/')}"
