# src/SISFO/tests/test_events.py
import json
from datetime import datetime, timezone

import pytest
from sqlalchemy import func, select
from sqlalchemy.exc import OperationalError

from SISFO.core.config import settings
from SISFO.db.models import Student
from SISFO.events import Outcome, StudentRegistrationConsumer, handle_student_registered

pytestmark = pytest.mark.anyio


def event(**overrides):
    body = {
        "tenant_id": "tenant-a",
        "application_id": "app-1",
        "registration_number": "REG-2025-001",
        "first_name": "Siti",
        "last_name": "Aminah",
        "email": "siti@example.com",
        "phone_number": "0812",
        "timestamp": "2025-06-15T08:00:00Z",
    }
    body.update(overrides)
    return json.dumps(body).encode()


async def students(sessionmaker, tenant="tenant-a"):
    async with sessionmaker() as session:
        result = await session.execute(select(Student).where(Student.tenant_id == tenant))
        return list(result.scalars().all())


class DownSessionFactory:
    """Behaves like a sessionmaker whose database is unreachable."""

    def __call__(self):
        return self

    async def __aenter__(self):
        raise OperationalError("SELECT 1", {}, ConnectionRefusedError("database is down"))

    async def __aexit__(self, *exc):
        return False


class BrokenSessionFactory(DownSessionFactory):
    async def __aenter__(self):
        raise RuntimeError("bug")


class FakeMessage:
    def __init__(self, body: bytes) -> None:
        self.body = body
        self.message_id = "m-1"
        self.acked = False
        self.nacked_with = None

    async def ack(self):
        self.acked = True

    async def nack(self, requeue=True):
        self.nacked_with = requeue


async def test_student_is_materialised(sessionmaker):
    before = datetime.now(timezone.utc).date()
    assert await handle_student_registered(event(), sessionmaker, 5) is Outcome.ACK
    after = datetime.now(timezone.utc).date()
    [student] = await students(sessionmaker)
    assert student.name == "Siti Aminah"
    assert student.nis == "REG-2025-001"
    assert student.status == "active"
    # admitted on the day the event is consumed, not the day it was published
    assert student.admission_date in (before, after)
    assert student.admission_date.isoformat() != "2025-06-15"


async def test_redelivery_is_idempotent(sessionmaker):
    assert await handle_student_registered(event(), sessionmaker, 5) is Outcome.ACK
    assert await handle_student_registered(event(), sessionmaker, 5) is Outcome.ACK
    assert len(await students(sessionmaker)) == 1


async def test_same_number_in_another_tenant_is_distinct(sessionmaker):
    await handle_student_registered(event(), sessionmaker, 5)
    await handle_student_registered(event(tenant_id="tenant-b"), sessionmaker, 5)
    assert len(await students(sessionmaker)) == 1
    assert len(await students(sessionmaker, "tenant-b")) == 1


@pytest.mark.parametrize("body", [b"{not json", b"", json.dumps(["a"]).encode()])
async def test_malformed_messages_are_dropped(sessionmaker, body):
    assert await handle_student_registered(body, sessionmaker, 5) is Outcome.ACK
    assert await students(sessionmaker) == []


@pytest.mark.parametrize("overrides", [{"first_name": ""}, {"registration_number": None}, {"tenant_id": " "}])
async def test_invalid_messages_are_dropped(sessionmaker, overrides):
    assert await handle_student_registered(event(**overrides), sessionmaker, 5) is Outcome.ACK
    async with sessionmaker() as session:
        assert (await session.execute(select(func.count()).select_from(Student))).scalar() == 0


async def test_storage_outage_is_requeued():
    assert await handle_student_registered(event(), DownSessionFactory(), 5) is Outcome.REQUEUE


async def test_unexpected_errors_propagate():
    with pytest.raises(RuntimeError):
        await handle_student_registered(event(), BrokenSessionFactory(), 5)


async def test_consumer_acks_handled_messages(sessionmaker):
    consumer = StudentRegistrationConsumer(settings, sessionmaker)
    msg = FakeMessage(event())
    await consumer.on_message(msg)
    assert msg.acked
    assert msg.nacked_with is None


async def test_consumer_requeues_after_backoff():
    fast = settings.model_copy(update={"EVENTS_RETRY_BASE_SECONDS": 0.0})
    consumer = StudentRegistrationConsumer(fast, DownSessionFactory())
    msg = FakeMessage(event())
    await consumer.on_message(msg)
    assert not msg.acked
    assert msg.nacked_with is True


async def test_consumer_drops_poison_messages():
    consumer = StudentRegistrationConsumer(settings, BrokenSessionFactory())
    msg = FakeMessage(event())
    await consumer.on_message(msg)
    assert msg.acked


def test_backoff_grows_and_is_capped():
    cfg = settings.model_copy(update={"EVENTS_RETRY_BASE_SECONDS": 0.5, "EVENTS_RETRY_MAX_SECONDS": 3.0})
    consumer = StudentRegistrationConsumer(cfg, None)
    delays = []
    for n in (1, 2, 3, 4, 5):
        consumer._failures = n
        delays.append(consumer.backoff())
    assert delays == [0.5, 1.0, 2.0, 3.0, 3.0]
