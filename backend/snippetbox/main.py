"""
Snippetbox Backend - FastAPI Application Factory
=================================================

What:  Creates and configures the FastAPI application instance.
Why:   One place for logging setup, middleware, exception handlers, routes,
       and the startup/shutdown lifecycle of the snippet repository.
How:   Factory pattern: create_app() returns a configured FastAPI instance.
Who:   uvicorn (`uvicorn snippetbox.main:app`), `python -m snippetbox`, tests.

Lifecycle:
    Startup:
    1. Configure logging
    2. Create the engine and open the repository (compiles and checks its statements)
       → StorageInitError is logged and re-raised; the server does not start
    Shutdown:
    1. Close the repository (disposes the connection pool)
"""

import logging
import sys
from contextlib import asynccontextmanager
from typing import AsyncGenerator, Optional

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.templating import Jinja2Templates
from starlette.exceptions import HTTPException as StarletteHTTPException

from snippetbox import __version__
from snippetbox.config import Settings, settings as default_settings
from snippetbox.database import create_engine
from snippetbox.error_responses import client_error, server_error
from snippetbox.exceptions import ClientInputError, SnippetboxError, StorageInitError
from snippetbox.middleware.logging import RequestLoggingMiddleware
from snippetbox.middleware.request_id import RequestIDMiddleware
from snippetbox.routes import home, snippets
from snippetbox.services.snippet_repository import SnippetRepository

logger = logging.getLogger(__name__)


# ══════════════════════════════════════════════════════════════════════════
# Logging Configuration
# ══════════════════════════════════════════════════════════════════════════

def setup_logging(settings: Settings) -> None:
    """
    Configure the root logger once, before anything else logs.

    file:line is part of the format so server-fault records point at the
    code that raised the error.
    """
    logging.basicConfig(
        level=getattr(logging, settings.log_level, logging.INFO),
        format="%(asctime)s [%(levelname)s] %(name)s %(filename)s:%(lineno)d: %(message)s",
        datefmt="%Y-%m-%dT%H:%M:%S",
        handlers=[logging.StreamHandler(sys.stdout)],
        force=True,
    )

    # Our access middleware replaces uvicorn's access log
    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)
    logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)


# ══════════════════════════════════════════════════════════════════════════
# Application Lifespan (Startup & Shutdown)
# ══════════════════════════════════════════════════════════════════════════

@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    settings: Settings = app.state.settings
    setup_logging(settings)
    logger.info("Snippetbox %s starting up...", __version__)

    engine = create_engine(settings=settings)
    try:
        repository = await SnippetRepository.open(engine)
    except StorageInitError as exc:
        logger.critical("Cannot check snippet statements: %s", exc, exc_info=True)
        await engine.dispose()
        raise
    app.state.snippets = repository

    logger.info("Starting server on %s", settings.addr)

    yield  # Application runs here

    logger.info("Snippetbox shutting down...")
    await repository.close()
    logger.info("Shutdown complete.")


# ══════════════════════════════════════════════════════════════════════════
# Exception Handlers
# ══════════════════════════════════════════════════════════════════════════

def register_exception_handlers(app: FastAPI) -> None:
    """
    Map exception types to responses via `snippetbox.error_responses`.

    Handler hierarchy (most specific class wins):
        ClientInputError / NotFoundError → its status code, no traceback
        HTTPException (router 404/405)   → its status code and headers
        RequestValidationError           → 400
        SnippetboxError (StorageError…)  → 500, logged with traceback
        Exception (fallback)             → 500, logged with traceback

    Unclaimed exceptions from routes are answered by RequestLoggingMiddleware
    while the request id is still set; the Exception handler here only sees
    failures raised outside that middleware.
    """

    @app.exception_handler(ClientInputError)
    async def handle_client_input_error(request: Request, exc: ClientInputError):
        logger.debug("Client error %d on %s: %s", exc.status_code, request.url.path, exc.message)
        return client_error(exc.status_code, exc.headers)

    @app.exception_handler(StarletteHTTPException)
    async def handle_http_exception(request: Request, exc: StarletteHTTPException):
        return client_error(exc.status_code, exc.headers)

    @app.exception_handler(RequestValidationError)
    async def handle_request_validation_error(request: Request, exc: RequestValidationError):
        return client_error(400)

    @app.exception_handler(SnippetboxError)
    async def handle_app_error(request: Request, exc: SnippetboxError):
        return server_error(exc)

    @app.exception_handler(Exception)
    async def handle_unexpected_error(request: Request, exc: Exception):
        return server_error(exc)


# ══════════════════════════════════════════════════════════════════════════
# Application Factory
# ══════════════════════════════════════════════════════════════════════════

def create_app(settings: Optional[Settings] = None) -> FastAPI:
    """
    Assemble the application.

    The repository is attached to `app.state.snippets` during startup;
    tests skip the lifespan and override `get_snippet_repository` instead.
    """
    settings = settings or default_settings

    app = FastAPI(
        title="Snippetbox",
        version=__version__,
        # Only the routes below exist; everything else is a 404
        docs_url=None,
        redoc_url=None,
        openapi_url=None,
        redirect_slashes=False,
        lifespan=lifespan,
    )
    app.state.settings = settings
    app.state.templates = Jinja2Templates(directory=str(settings.templates_dir))

    # Last added = first to execute: RequestID → Logging → routes
    app.add_middleware(RequestLoggingMiddleware)
    app.add_middleware(RequestIDMiddleware)

    register_exception_handlers(app)

    app.include_router(home.router)
    app.include_router(snippets.router)

    return app


# uvicorn expects `snippetbox.main:app` to be importable
app = create_app()
