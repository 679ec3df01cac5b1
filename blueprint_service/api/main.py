"""
FastAPI app assembly: logging, error envelopes and router wiring.
"""
import logging
import os
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI
from fastapi.exceptions import RequestValidationError
from starlette.exceptions import HTTPException as StarletteHTTPException
from starlette.requests import Request
from starlette.responses import JSONResponse

from blueprint_service.api.blueprints import router as blueprints_router
from blueprint_service.db.database import create_engine_from_env, get_append_attempts
from blueprint_service.db.repositories import BlueprintStore

# Configure logging
LOG_LEVEL_NAME = os.getenv("LOG_LEVEL", "INFO").upper()
LOG_LEVEL = getattr(logging, LOG_LEVEL_NAME, logging.INFO)
logging.basicConfig(level=LOG_LEVEL)
logger = logging.getLogger(__name__)
logger.setLevel(LOG_LEVEL)


def _envelope(code: int, message: str) -> JSONResponse:
    return JSONResponse(status_code=code, content={"code": code, "message": message, "data": None})


@asynccontextmanager
async def _lifespan(app: FastAPI):
    owned_engine = None
    if getattr(app.state, "blueprint_store", None) is None:
        owned_engine = create_engine_from_env()
        app.state.blueprint_store = BlueprintStore(owned_engine, append_attempts=get_append_attempts())
        logger.info("app_startup: dialect=%s log_level=%s", owned_engine.dialect.name, LOG_LEVEL_NAME)
    try:
        yield
    finally:
        if owned_engine is not None:
            app.state.blueprint_store = None
            owned_engine.dispose()


def create_app(store: Optional[BlueprintStore] = None) -> FastAPI:
    """Build the application around ``store``.

    Without a store, one is created from environment configuration when the
    application starts and disposed of when it shuts down.
    """
    app = FastAPI(
        title="Blueprints API",
        description="Create, read and extend blueprints: named, ordered point sequences owned by an author.",
        version="1.0.0",
        lifespan=_lifespan,
    )
    app.state.blueprint_store = store

    @app.exception_handler(StarletteHTTPException)
    async def _http_error(request: Request, exc: StarletteHTTPException):
        return _envelope(exc.status_code, str(exc.detail))

    @app.exception_handler(RequestValidationError)
    async def _validation_error(request: Request, exc: RequestValidationError):
        errors = exc.errors()
        first = errors[0] if errors else {}
        location = ".".join(str(part) for part in first.get("loc", ()) if part != "body")
        message = f"{location}: {first.get('msg', 'invalid request')}" if location else "invalid request"
        return _envelope(400, message)

    @app.exception_handler(Exception)
    async def _unexpected_error(request: Request, exc: Exception):
        logger.error("unhandled_error: path=%s error=%s", request.url.path, exc, exc_info=exc)
        return _envelope(500, "internal error")

    app.include_router(blueprints_router)
    return app
