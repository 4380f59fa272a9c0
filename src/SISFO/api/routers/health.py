# src/SISFO/api/routers/health.py
from fastapi import APIRouter, Depends, status
from fastapi.responses import JSONResponse
from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from SISFO.app_logger import get_logger
from SISFO.db.session import get_sessionmaker

router = APIRouter(tags=["health"])
log = get_logger("health")


@router.get("/healthz")
async def healthz():
    return {"status": "ok"}


@router.get("/readyz")
async def readyz(maker: async_sessionmaker[AsyncSession] = Depends(get_sessionmaker)):
    try:
        async with maker() as session:
            await session.execute(text("SELECT 1"))
    except Exception as e:
        log.warning("readiness check failed: %s", e)
        return JSONResponse(status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
                            content={"status": "unavailable", "database": "down"})
    return {"status": "ok", "database": "up"}
