import logging
from pathlib import Path
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.responses import PlainTextResponse
from fastapi.staticfiles import StaticFiles
from slowapi import _rate_limit_exceeded_handler
from slowapi.errors import RateLimitExceeded
from starlette.exceptions import HTTPException as StarletteHTTPException

from snippetbox.core.application import Application, build_application
from snippetbox.core.config import settings
from snippetbox.core.limiter import limiter
from snippetbox.core.logging_config import init_application_logging
from snippetbox.web.routes import routes, standard_pipeline

# Get the package directory path
PACKAGE_DIR = Path(__file__).parent

logger = logging.getLogger("snippetbox.main")


async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    """Plain-text error pages, matching the rest of the application's error responses."""
    return PlainTextResponse(str(exc.detail), status_code=exc.status_code, headers=exc.headers)


def create_app(application: Optional[Application] = None, configure_logging: bool = True) -> FastAPI:
    """
    Build the FastAPI application.

    Args:
        application: Pre-built collaborators; built from the global settings when omitted
        configure_logging: Install the structured logging handlers on the root logger
    """
    config = application.settings if application is not None else settings

    # Initialize structured logging
    if configure_logging:
        init_application_logging(config)

    if application is None:
        application = build_application(config)

    app = FastAPI(
        title=config.APP_NAME,
        description="Share and review snippets of text",
        version=config.VERSION,
        docs_url=None,
        redoc_url=None,
        openapi_url=None,
    )
    app.state.application = application

    # Attach limiter to app.state for the @limiter.limit() decorated handlers
    app.state.limiter = limiter
    app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)

    logger.info(
        "Rate limiting initialized: enabled=%s, auth=%s",
        config.RATE_LIMIT_ENABLED,
        config.rate_limit_auth_endpoints,
    )

    # Recovery -> request logging -> security headers -> router
    standard_pipeline().install(app)

    # Mount static files
    app.mount("/static", StaticFiles(directory=str(PACKAGE_DIR / "static")), name="static")

    app.include_router(routes(application))

    logger.info("Application ready", extra={"app_name": config.APP_NAME, "environment": config.ENVIRONMENT})
    return app
