"""
FastAPI application for Transaction Statistics.

The app factory builds the one Aggregator this process owns and stores
it on app.state; routes receive it through a dependency. No global
account state exists.
"""

from contextlib import asynccontextmanager
from typing import Optional

import structlog
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from txstats import __version__
from txstats.api.routes import SERVICE_NAME, router
from txstats.audit import AuditLogger
from txstats.config import Settings, get_settings, validate_all_settings
from txstats.core import Aggregator
from txstats.storage import InMemoryAuditStorage

logger = structlog.get_logger("txstats.api")


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Lifespan context manager for startup/shutdown events."""
    logger.info("service_starting", service=SERVICE_NAME, version=__version__)

    status = validate_all_settings()
    failed = {k: v for k, v in status.items() if k.endswith("_error")}
    if failed:
        logger.warning("configuration_issues", **failed)
        audit_logger = app.state.aggregator.audit_logger
        if audit_logger:
            for key, message in failed.items():
                audit_logger.log_error(
                    error_type="configuration_error",
                    error_message=message,
                    details={"section": key.removesuffix("_error")},
                )

    yield

    logger.info("service_stopping", service=SERVICE_NAME)


def create_app(
    aggregator: Optional[Aggregator] = None,
    settings: Optional[Settings] = None,
) -> FastAPI:
    """
    Build the HTTP application.

    Args:
        aggregator: Account state to serve. Built from settings when None,
                    with an in-memory audit trail.
        settings: Settings to build from. Defaults to get_settings().
    """
    if aggregator is None:
        settings = settings or get_settings()
        audit_storage = InMemoryAuditStorage(capacity=settings.server.audit_capacity)
        aggregator = Aggregator.from_settings(
            settings.aggregator,
            audit_logger=AuditLogger(audit_storage),
        )

    app = FastAPI(
        title="Transaction Statistics",
        version=__version__,
        description="Running statistics over one account's recent transactions",
        lifespan=lifespan,
    )
    app.state.aggregator = aggregator

    @app.exception_handler(RequestValidationError)
    async def undecodable_body(request: Request, exc: RequestValidationError):
        logger.info(
            "request_rejected",
            path=request.url.path,
            errors=len(exc.errors()),
        )
        return JSONResponse(status_code=400, content={"detail": "invalid input"})

    app.include_router(router)

    return app
