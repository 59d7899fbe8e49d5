import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from taskflow.application.use_cases.notifications import (
    NotificationDispatcher,
    build_notification_jobs,
)
from taskflow.config import get_settings
from taskflow.infrastructure.database import SessionLocal, engine, initialize_database
from taskflow.infrastructure.notifications import (
    ConnectionRegistry,
    EmailOutbox,
    resolve_accepted_members,
)
from taskflow.infrastructure.scheduler import JobScheduler
from taskflow.interfaces.api.routes import register_routes

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Prepare the database and delivery services, and release them on shutdown."""

    settings = get_settings()
    initialize_database()

    registry = ConnectionRegistry(
        resolve_accepted_members, keepalive_seconds=settings.sse_keepalive_seconds
    )
    outbox = EmailOutbox(max_workers=settings.email_workers)
    dispatcher = NotificationDispatcher(
        registry, outbox, frontend_base_url=settings.frontend_base_url
    )
    scheduler = JobScheduler(
        build_notification_jobs(
            settings, session_factory=SessionLocal, dispatcher=dispatcher
        )
    )

    app.state.connection_registry = registry
    app.state.email_outbox = outbox
    app.state.notification_dispatcher = dispatcher
    app.state.job_scheduler = scheduler

    if settings.scheduler_enabled:
        scheduler.start()
    else:
        logger.info("Notification scheduler disabled by configuration")

    try:
        yield
    finally:
        await scheduler.stop()
        registry.close_all()
        outbox.shutdown(wait=False)
        engine.dispose()


def create_app() -> FastAPI:
    """Create and configure the FastAPI application."""

    app = FastAPI(title="TaskFlow Notifications", lifespan=lifespan)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=[get_settings().frontend_base_url],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    register_routes(app)
    return app


app = create_app()
