# src/SISFO/tests/conftest.py
from __future__ import annotations

import logging
import os
import sys
import uuid

import pytest

# Settings are read at import time; pin them before anything from SISFO loads.
os.environ.setdefault("TESTING", "1")
os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite://")
os.environ["EVENTS_ENABLED"] = "false"
os.environ.setdefault("CALL_TIMEOUT_SECONDS", "10")

from httpx import ASGITransport, AsyncClient  # noqa: E402
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine  # noqa: E402
from sqlalchemy.pool import StaticPool  # noqa: E402

from SISFO.api.deps import get_storage  # noqa: E402
from SISFO.db.models import Base  # noqa: E402
from SISFO.db.session import get_sessionmaker  # noqa: E402
from SISFO.main import create_app  # noqa: E402

TENANT = "tenant-a"
OTHER_TENANT = "tenant-b"
API = "/api/v1"


# =========================
# Logging -> stdout
# =========================
@pytest.fixture(scope="session", autouse=True)
def _tests_log_to_stdout():
    root = logging.getLogger()
    if not any(isinstance(h, logging.StreamHandler) and getattr(h, "stream", None) is sys.stdout
               for h in root.handlers):
        handler = logging.StreamHandler(sys.stdout)
        handler.setFormatter(logging.Formatter("%(levelname)s %(name)s: %(message)s"))
        root.addHandler(handler)
    root.setLevel(os.getenv("TEST_LOG_LEVEL", "INFO").upper())


# Make anyio run on asyncio (so our async fixtures work everywhere)
@pytest.fixture(scope="session")
def anyio_backend():
    return "asyncio"


# ==============================================================
# Storage doubles
# ==============================================================

class MemoryStorage:
    def __init__(self) -> None:
        self.objects: dict[str, bytes] = {}

    async def upload(self, path: str, content: bytes) -> str:
        self.objects[path] = content
        return await self.get_url(path)

    async def get_url(self, path: str) -> str:
        return f"memory://{path}"


class BrokenStorage(MemoryStorage):
    async def upload(self, path: str, content: bytes) -> str:
        raise OSError("object store unreachable")


# ==============================================================
# Database / app
# ==============================================================

@pytest.fixture
async def engine():
    eng = create_async_engine(
        "sqlite+aiosqlite://",
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )
    async with eng.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield eng
    await eng.dispose()


@pytest.fixture
def sessionmaker(engine) -> async_sessionmaker[AsyncSession]:
    return async_sessionmaker(engine, expire_on_commit=False, class_=AsyncSession)


@pytest.fixture
def storage() -> MemoryStorage:
    return MemoryStorage()


@pytest.fixture
def app(sessionmaker, storage):
    application = create_app()
    application.dependency_overrides[get_sessionmaker] = lambda: sessionmaker
    application.dependency_overrides[get_storage] = lambda: storage
    return application


@pytest.fixture
async def client(app):
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test", headers={"X-Tenant-ID": TENANT}) as c:
        yield c


# ==============================================================
# API helpers
# ==============================================================

class Api:
    """Small builders for the records most tests need."""

    def __init__(self, client: AsyncClient) -> None:
        self.client = client

    async def _create(self, path: str, payload: dict, expected: int = 201) -> dict:
        r = await self.client.post(f"{API}{path}", json=payload)
        assert r.status_code == expected, r.text
        return r.json()["data"]

    async def academic_year(self, name: str = "2025/2026") -> dict:
        return await self._create("/academic-years", {
            "name": name, "start_date": "2025-07-01", "end_date": "2026-06-30",
        })

    async def semester(self, academic_year_id: str, name: str = "Ganjil", **extra) -> dict:
        payload = {
            "academic_year_id": academic_year_id, "name": name,
            "start_date": "2025-07-01", "end_date": "2025-12-31",
        }
        payload.update(extra)
        return await self._create("/semesters", payload)

    async def subject(self, code: str, name: str, credit_units: int = 0) -> dict:
        return await self._create("/subjects", {"code": code, "name": name, "credit_units": credit_units})

    async def teacher(self, name: str = "Bu Sari") -> dict:
        return await self._create("/teachers", {"name": name})

    async def student(self, name: str = "Andi", nis: str = "") -> dict:
        return await self._create("/students", {"name": name, "nis": nis or uuid.uuid4().hex[:10]})

    async def school_class(self, name: str = "X IPA 1", capacity: int = 30) -> dict:
        return await self._create("/classes", {"name": name, "level": 10, "capacity": capacity})

    async def category(self, name: str, weight: float) -> dict:
        return await self._create("/grade-categories", {"name": name, "weight": weight})

    async def assessment(self, *, teacher_id, subject_id, class_id, category_id, max_score=100.0,
                         semester_id=None, name="Ulangan", date="2025-09-01") -> dict:
        return await self._create("/assessments", {
            "teacher_id": teacher_id, "subject_id": subject_id, "class_id": class_id,
            "grade_category_id": category_id, "semester_id": semester_id,
            "name": name, "max_score": max_score, "date": date,
        }, expected=200)

    async def grade(self, assessment_id: str, student_id: str, score: float, **extra) -> dict:
        r = await self.client.post(f"{API}/grades", json={
            "assessment_id": assessment_id, "student_id": student_id, "score": score, **extra,
        })
        assert r.status_code == 200, r.text
        return r.json()["data"]


@pytest.fixture
def api(client) -> Api:
    return Api(client)


def new_id() -> str:
    return str(uuid.uuid4())
