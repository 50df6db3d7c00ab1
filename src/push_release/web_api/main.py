"""
FastAPI Application
==================
Main entry point for the push-release relay.

Run with:
    uvicorn push_release.web_api.main:app
"""
import logging

from fastapi import FastAPI, Request
from fastapi.responses import PlainTextResponse

from push_release import __version__
from push_release.errors import PipelineError, as_pipeline_error
from push_release.web_api.config import settings
from push_release.web_api.routers import health, push

logger = logging.getLogger(__name__)

# Create application
app = FastAPI(
    title="Push Release",
    description="Registers CI builds and releases in on-chain release registries",
    version=__version__,
    docs_url="/docs" if settings.DEBUG else None,
    redoc_url="/redoc" if settings.DEBUG else None,
)


def error_response(exc: PipelineError) -> PlainTextResponse:
    """Render a pipeline error as a plain-text response."""
    return PlainTextResponse(exc.message, status_code=exc.status_code)


@app.exception_handler(PipelineError)
async def pipeline_error_handler(request: Request, exc: PipelineError):
    if exc.status_code >= 500:
        logger.error("%s %s failed: %s", request.method, request.url.path, exc.message)
    elif exc.status_code >= 400:
        logger.warning("%s %s rejected: %s", request.method, request.url.path, exc.message)
    else:
        logger.info("%s %s declined: %s", request.method, request.url.path, exc.message)
    return error_response(exc)


@app.exception_handler(Exception)
async def unexpected_error_handler(request: Request, exc: Exception):
    logger.exception("Unexpected error handling %s %s", request.method, request.url.path)
    return error_response(as_pipeline_error(exc))


# Include routers
app.include_router(health.router, tags=["Health"])
app.include_router(push.router, tags=["Push"])


# For running directly: python -m push_release.web_api.main
if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host=settings.HOST, port=settings.PORT)
