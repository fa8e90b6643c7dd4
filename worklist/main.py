"""FastAPI application for the worklist todo API."""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from . import db
from .api.routes import router as api_router
from .errors import SERVER_ERROR_MESSAGE, TodoValidationError
from .logging_utils import REQUEST_ID_HEADER, bound_request_id, configure_logging, request_id_for
from .models.todo import format_validation_message
from .repositories.todo_repository import (
    InMemoryTodoRepository,
    MongoTodoRepository,
    TodoRepository,
)
from .settings import STORAGE_MEMORY, Settings, get_settings

logger = logging.getLogger(__name__)


def create_app(
    repository: Optional[TodoRepository] = None,
    settings: Optional[Settings] = None,
) -> FastAPI:
    """Build the API.

    With ``repository`` given the app uses it as is and never opens a MongoDB
    connection; otherwise the store is chosen from ``settings.storage``.
    """
    settings = settings or get_settings()

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        logger.info("Starting worklist API")
        owns_connection = False
        if repository is not None:
            logger.info("Using injected %s", type(repository).__name__)
        elif settings.storage == STORAGE_MEMORY:
            logger.info("WORKLIST_STORAGE=memory, using in-memory todo storage")
            app.state.todo_repository = InMemoryTodoRepository()
        else:
            await db.init_db(settings)
            owns_connection = True
            app.state.todo_repository = MongoTodoRepository(
                db.get_collection(settings.mongo_collection)
            )

        yield

        logger.info("Shutting down worklist API")
        if owns_connection:
            await db.close_db()

    app = FastAPI(
        title="Worklist API",
        description="Ordered todo list management",
        version="1.0.0",
        lifespan=lifespan,
    )
    if repository is not None:
        app.state.todo_repository = repository

    @app.exception_handler(TodoValidationError)
    async def todo_validation_exception_handler(request: Request, exc: TodoValidationError):
        logger.warning("Validation failed for %s %s: %s", request.method, request.url.path, exc.message)
        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST,
            content={"errorMessage": exc.message},
        )

    @app.exception_handler(RequestValidationError)
    async def request_validation_exception_handler(request: Request, exc: RequestValidationError):
        message = format_validation_message(exc.errors())
        logger.warning("Validation failed for %s %s: %s", request.method, request.url.path, message)
        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST,
            content={"errorMessage": message},
        )

    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(request: Request, exc: StarletteHTTPException):
        logger.warning("%s %s -> %s: %s", request.method, request.url.path, exc.status_code, exc.detail)
        message = exc.detail if isinstance(exc.detail, str) else "Request failed"
        return JSONResponse(
            status_code=exc.status_code,
            content={"errorMessage": message},
            headers=getattr(exc, "headers", None),
        )

    @app.exception_handler(Exception)
    async def unhandled_exception_handler(request: Request, exc: Exception):
        request_id = request_id_for(request)
        with bound_request_id(request_id):
            logger.exception("Unhandled error for %s %s", request.method, request.url.path)
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={"errorMessage": SERVER_ERROR_MESSAGE},
            headers={REQUEST_ID_HEADER: request_id},
        )

    @app.middleware("http")
    async def request_id_middleware(request: Request, call_next):
        request_id = request_id_for(request)
        with bound_request_id(request_id):
            response = await call_next(request)
        response.headers[REQUEST_ID_HEADER] = request_id
        return response

    app.include_router(api_router, prefix="/api")
    app.include_router(api_router)
    return app


def main() -> None:
    import uvicorn

    settings = get_settings()
    configure_logging(settings.log_level)
    logger.info("Starting on %s:%s", settings.host, settings.port)
    uvicorn.run(create_app(settings=settings), host=settings.host, port=settings.port)


if __name__ == "__main__":
    main()
