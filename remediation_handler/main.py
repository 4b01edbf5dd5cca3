# remediation_handler/main.py
import logging
from contextlib import asynccontextmanager
from typing import Optional
from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse
from remediation_handler import __version__
from remediation_handler.core.config import Settings, load_settings
from remediation_handler.core.exceptions import (
    AuthenticationError,
    ConfigurationError,
    DispatchError,
    HTTPRequestError,
    NetworkError,
    PolicyDecodeError,
    RemediationError,
    TLSError,
)
from remediation_handler.core.logging_config import setup_logging
from remediation_handler.api.v1.api import api_router as api_v1_router

logger = logging.getLogger(__name__)

ERROR_STATUS = [
    (PolicyDecodeError, status.HTTP_422_UNPROCESSABLE_ENTITY),
    (AuthenticationError, status.HTTP_502_BAD_GATEWAY),
    (DispatchError, status.HTTP_502_BAD_GATEWAY),
    (NetworkError, status.HTTP_504_GATEWAY_TIMEOUT),
    (TLSError, status.HTTP_504_GATEWAY_TIMEOUT),
    (ConfigurationError, status.HTTP_500_INTERNAL_SERVER_ERROR),
]


def error_status(exc: RemediationError) -> int:
    for exc_type, code in ERROR_STATUS:
        if isinstance(exc, exc_type):
            return code
    return status.HTTP_500_INTERNAL_SERVER_ERROR


async def remediation_exception_handler(request: Request, exc: RemediationError):
    logger.error(f"Remediation failed for request to {request.url}: {exc}")
    content = {"detail": str(exc), "error": type(exc).__name__}
    if isinstance(exc, HTTPRequestError) and exc.status_code is not None:
        content["upstream_status"] = exc.status_code
    return JSONResponse(status_code=error_status(exc), content=content)


def create_app(settings: Optional[Settings] = None) -> FastAPI:
    settings = settings or load_settings()
    setup_logging(settings.LOG_LEVEL)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        logger.info(f"Application '{settings.APP_NAME}' started.")
        logger.info(f"Sensu API: {settings.api_url or '(not configured)'}")
        logger.info(f"Remediation annotation: {settings.SENSU_REMEDIATION_ANNOTATION}")
        try:
            settings.validate_api_access()
        except ConfigurationError as e:
            logger.warning(f"Events that match a remediation action will fail: {e}")
        yield
        logger.info("Application shutdown complete.")

    app = FastAPI(
        title=settings.APP_NAME,
        openapi_url=f"{settings.API_V1_STR}/openapi.json",
        version=__version__,
        lifespan=lifespan,
    )
    app.state.settings = settings
    app.include_router(api_v1_router, prefix=settings.API_V1_STR)
    app.add_exception_handler(RemediationError, remediation_exception_handler)

    @app.get("/", tags=["Root"], summary="Root endpoint for service status")
    async def read_root():
        """Returns a welcome message indicating the service is running."""
        return {"message": f"Welcome to the {settings.APP_NAME}"}

    return app


def __getattr__(name):
    # uvicorn remediation_handler.main:app - built on first access so importing
    # create_app (e.g. from the CLI) never reads settings from the environment
    if name == "app":
        return create_app()
    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")
