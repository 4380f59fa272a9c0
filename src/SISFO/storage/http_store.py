from __future__ import annotations

from typing import Optional

import httpx

from SISFO.app_logger import get_logger
from SISFO.errors import StorageError

logger = get_logger(__name__)


class HttpObjectStorage:
    """
    Object store reachable over plain HTTP ``PUT`` (MinIO/S3 presigned style
    gateways, nginx WebDAV, ...).
    """

    def __init__(self, base_url: str, client: Optional[httpx.AsyncClient] = None, timeout: float = 10.0) -> None:
        self.base_url = base_url.rstrip("/")
        self._client = client
        self._timeout = timeout

    async def upload(self, path: str, content: bytes) -> str:
        url = await self.get_url(path)
        headers = {"Content-Type": "application/pdf" if path.endswith(".pdf") else "application/octet-stream"}
        try:
            if self._client is not None:
                resp = await self._client.put(url, content=content, headers=headers)
            else:
                async with httpx.AsyncClient(timeout=self._timeout) as client:
                    resp = await client.put(url, content=content, headers=headers)
            resp.raise_for_status()
        except httpx.HTTPError as e:
            raise StorageError(f"upload of {path} failed: {e}", cause=e) from e
        logger.info("uploaded object", extra={"path": path, "status": resp.status_code})
        return url

    async def get_url(self, path: str) -> str:
        return f"{self.base_url}/{path.lstrip('/')}"
