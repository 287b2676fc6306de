"""Main FastAPI application entry point."""

from contextlib import asynccontextmanager

from fastapi import FastAPI

from iam.presentation import router as iam_router
from infrastructure.database.dependencies import close_database_connections
from infrastructure.dependencies import start_change_feed, stop_change_feed
from infrastructure.error_handlers import register_error_handlers
from infrastructure.logging import configure_logging
from infrastructure.observability import DefaultApplicationProbe
from infrastructure.settings import get_settings
from infrastructure.version import __version__
from reservations.presentation import equipment_router
from reservations.presentation import router as reservations_router

_settings = get_settings()
_probe = DefaultApplicationProbe()


@asynccontextmanager
async def reservations_lifespan(app: FastAPI):
    """Application lifespan context.

    Manages:
    - Logging configuration
    - Change feed relay (started for the Postgres backend only)
    - Database engines (created lazily, disposed on shutdown)
    """
    configure_logging(debug=_settings.debug)
    _probe.application_starting(app_name=_settings.app_name, version=__version__)

    await start_change_feed()
    try:
        yield
    finally:
        await stop_change_feed()
        await close_database_connections()
        _probe.application_stopped()


app = FastAPI(
    title=_settings.app_name,
    description=(
        "Campus equipment reservations: submission, review and role administration"
    ),
    version=__version__,
    lifespan=reservations_lifespan,
)

register_error_handlers(app)

app.include_router(equipment_router)
app.include_router(reservations_router)
app.include_router(iam_router)


@app.get("/health")
def health():
    """Basic health check endpoint."""
    return {"status": "ok"}
