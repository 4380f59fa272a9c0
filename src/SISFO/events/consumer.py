"""
Admission event ingress.

Consumes ``admission.student.registered`` from the ``sisfo.events`` topic
exchange and materialises each admitted applicant as a student of the
tenant named in the message.

Delivery is at-least-once, so processing is idempotent on
(tenant_id, registration_number). Messages that can never succeed
(malformed JSON, invalid payload, duplicates) are acknowledged and dropped;
transient storage failures are negatively acknowledged with requeue after
an exponential backoff.
"""

from __future__ import annotations

import asyncio
import enum
import json
from datetime import datetime, timezone
from typing import Any, Optional

import aio_pika
from aio_pika.abc import AbstractChannel, AbstractIncomingMessage, AbstractRobustConnection
from pydantic import BaseModel, ConfigDict, Field
from pydantic import ValidationError as PydanticValidationError
from sqlalchemy.exc import DBAPIError, InterfaceError, OperationalError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from SISFO.app_logger import get_logger
from SISFO.core.config import Settings
from SISFO.db.session import get_session
from SISFO.errors import DeadlineExceededError, ValidationError
from SISFO.services import ServiceContext, StudentService

log = get_logger(__name__)


class Outcome(str, enum.Enum):
    ACK = "ack"
    REQUEUE = "requeue"


class StudentRegisteredEvent(BaseModel):
    model_config = ConfigDict(extra="ignore", str_strip_whitespace=True)

    tenant_id: str = Field(min_length=1)
    application_id: Optional[str] = None
    registration_number: str = Field(min_length=1)
    first_name: str = Field(min_length=1)
    last_name: str = ""
    email: str = ""
    phone_number: str = ""
    timestamp: Optional[datetime] = None


def is_transient(exc: BaseException) -> bool:
    """Storage failures worth retrying: lost connections, timeouts, socket errors."""
    if isinstance(exc, (OperationalError, InterfaceError)):
        return True
    if isinstance(exc, DBAPIError) and exc.connection_invalidated:
        return True
    return isinstance(exc, (asyncio.TimeoutError, TimeoutError, DeadlineExceededError, OSError))


async def handle_student_registered(
    body: bytes | str,
    session_factory: async_sessionmaker[AsyncSession],
    timeout: float,
) -> Outcome:
    try:
        payload: Any = json.loads(body)
    except (ValueError, TypeError) as e:
        log.warning("dropping malformed student.registered message: %s", e)
        return Outcome.ACK

    try:
        event = StudentRegisteredEvent.model_validate(payload)
    except PydanticValidationError as e:
        log.warning("dropping invalid student.registered message: %s", e.errors(include_url=False))
        return Outcome.ACK

    admitted_on = datetime.now(timezone.utc).date()
    try:
        async with get_session(session_factory) as session:
            ctx = ServiceContext(session=session, tenant_id=event.tenant_id, timeout=timeout)
            student, created = await StudentService(ctx).register_admission(
                registration_number=event.registration_number,
                first_name=event.first_name,
                last_name=event.last_name,
                email=event.email,
                phone=event.phone_number,
                admission_date=admitted_on,
            )
    except ValidationError as e:
        log.warning("dropping student.registered message that failed validation: %s", e.errors,
                    extra={"tenant_id": event.tenant_id, "registration_number": event.registration_number})
        return Outcome.ACK
    except Exception as e:
        if is_transient(e):
            log.warning("transient failure storing student, requeueing: %s", e,
                        extra={"tenant_id": event.tenant_id, "registration_number": event.registration_number})
            return Outcome.REQUEUE
        raise

    if created:
        log.info("student materialised from admission",
                 extra={"tenant_id": event.tenant_id, "student_id": str(student.id),
                        "registration_number": event.registration_number})
    else:
        log.info("duplicate student.registered message acknowledged",
                 extra={"tenant_id": event.tenant_id, "registration_number": event.registration_number})
    return Outcome.ACK


class StudentRegistrationConsumer:
    """One aio-pika consumer bound to the admission routing key."""

    def __init__(self, settings: Settings, session_factory: async_sessionmaker[AsyncSession]) -> None:
        self.settings = settings
        self.session_factory = session_factory
        self._connection: Optional[AbstractRobustConnection] = None
        self._channel: Optional[AbstractChannel] = None
        self._failures = 0

    def backoff(self) -> float:
        base = self.settings.EVENTS_RETRY_BASE_SECONDS
        return min(self.settings.EVENTS_RETRY_MAX_SECONDS, base * (2 ** max(self._failures - 1, 0)))

    async def start(self) -> None:
        self._connection = await aio_pika.connect_robust(self.settings.RABBIT_URL)
        self._channel = await self._connection.channel()
        await self._channel.set_qos(prefetch_count=self.settings.EVENTS_PREFETCH)
        exchange = await self._channel.declare_exchange(
            self.settings.EVENTS_EXCHANGE, aio_pika.ExchangeType.TOPIC, durable=True
        )
        queue = await self._channel.declare_queue(self.settings.EVENTS_QUEUE, durable=True)
        await queue.bind(exchange, routing_key=self.settings.EVENTS_ROUTING_KEY)
        await queue.consume(self.on_message)
        log.info("event consumer started", extra={
            "exchange": self.settings.EVENTS_EXCHANGE,
            "queue": self.settings.EVENTS_QUEUE,
            "routing_key": self.settings.EVENTS_ROUTING_KEY,
        })

    async def on_message(self, message: AbstractIncomingMessage) -> None:
        try:
            outcome = await handle_student_registered(
                message.body, self.session_factory, self.settings.CALL_TIMEOUT_SECONDS
            )
        except Exception:
            # unknown failures are logged and dropped
            log.exception("unexpected error handling student.registered; dropping message")
            outcome = Outcome.ACK

        if outcome is Outcome.ACK:
            self._failures = 0
            await message.ack()
            return

        self._failures += 1
        delay = self.backoff()
        log.info("requeueing student.registered after %.2fs", delay,
                 extra={"message_id": message.message_id, "attempt": self._failures})
        await asyncio.sleep(delay)
        await message.nack(requeue=True)

    async def stop(self) -> None:
        if self._connection is not None:
            await self._connection.close()
            self._connection = None
            self._channel = None
            log.info("event consumer stopped")
