# src/SISFO/main.py
from __future__ import annotations

import uuid
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.routing import APIRoute

from SISFO.api.envelope import REQUEST_ID_HEADER, register_exception_handlers
from SISFO.api.routers import (
    classes,
    curricula,
    grading,
    health,
    master_data,
    report_cards,
    schedules,
    semesters,
)
from SISFO.app_logger import get_logger, setup_logging
from SISFO.core.config import settings
from SISFO.db.session import get_engine, get_sessionmaker
from SISFO.events import StudentRegistrationConsumer
from SISFO.storage import build_storage

log = get_logger("startup")

API_PREFIX = "/api/v1"


def create_app() -> FastAPI:
    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """
        Startup/shutdown: logging, report card storage and the admission
        event consumer (only when a broker URL is configured).
        """
        # ---------------- STARTUP ----------------
        setup_logging(settings.LOG_LEVEL)
        if getattr(app.state, "storage", None) is None:
            app.state.storage = build_storage(settings)

        app.state.consumer = None
        if settings.events_active:
            maker = app.dependency_overrides.get(get_sessionmaker, get_sessionmaker)()
            consumer = StudentRegistrationConsumer(settings, maker)
            try:
                await consumer.start()
                app.state.consumer = consumer
            except Exception as e:
                log.warning("[events] consumer not started: %s", e)

        log.info(
            "[startup] mounted routes: %s",
            sorted(r.path for r in app.routes if isinstance(r, APIRoute)),
        )

        yield

        # ---------------- SHUTDOWN ----------------
        if app.state.consumer is not None:
            await app.state.consumer.stop()
        # Close DB engine before the loop closes
        await get_engine().dispose()

    app = FastAPI(
        title=settings.APP_NAME,
        version=settings.APP_VERSION,
        lifespan=lifespan,
    )

    register_exception_handlers(app)

    @app.middleware("http")
    async def request_id_middleware(request: Request, call_next):
        rid = request.headers.get(REQUEST_ID_HEADER) or str(uuid.uuid4())
        request.state.request_id = rid
        response = await call_next(request)
        response.headers[REQUEST_ID_HEADER] = rid
        return response

    app.include_router(health.router)

    for router in (
        master_data.router,
        semesters.router,
        curricula.router,
        classes.class_subject_router,
        classes.enrollment_router,
        schedules.router,
        schedules.template_router,
        grading.assessment_router,
        grading.grade_router,
        report_cards.router,
    ):
        app.include_router(router, prefix=API_PREFIX)

    return app


app = create_app()
