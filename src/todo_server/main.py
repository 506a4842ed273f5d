import logging
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import PlainTextResponse

from .db import open_database
from .errors import TodoError
from .repositories import Repository
from .routers import todos as todos_router
from .schemas import HealthOut
from .settings import Settings, get_settings

logger = logging.getLogger(__name__)

openapi_tags = [
    {"name": "health", "description": "Service liveness endpoint."},
    {"name": "todos", "description": "Create, list, toggle and delete Todo items."},
]

ALLOWED_METHODS = ["GET", "POST", "PUT", "DELETE", "OPTIONS"]


# PUBLIC_INTERFACE
def create_app(repository: Optional[Repository] = None, settings: Optional[Settings] = None) -> FastAPI:
    """
    Build the FastAPI application around a repository.

    When no repository is given, the SQLite database named by DB_FILE is opened;
    a DatabaseConnectionError propagates so the caller never serves requests
    without a store. This also makes the function usable as a uvicorn factory:

        uvicorn --factory todo_server.main:create_app
    """
    settings = settings or get_settings()
    if repository is None:
        repository = open_database(settings.db_file, echo=settings.db_echo)

    app = FastAPI(
        title="Todo Server",
        description="Minimal todo list backend over a SQLite store.",
        version="0.1.0",
        openapi_tags=openapi_tags,
    )
    app.state.repository = repository

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_allow_origins,
        allow_methods=ALLOWED_METHODS,
        allow_headers=["*"],
    )

    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(request: Request, exc: RequestValidationError) -> PlainTextResponse:
        """Malformed bodies and path parameters are client errors: 400 with the decoder's message."""
        message = "; ".join(
            f"{'.'.join(str(part) for part in err.get('loc', ()))}: {err.get('msg', 'invalid')}"
            for err in exc.errors()
        )
        return PlainTextResponse(message or "invalid request", status_code=400)

    @app.exception_handler(TodoError)
    async def todo_error_handler(request: Request, exc: TodoError) -> PlainTextResponse:
        """Store failures not handled by a route end up here as 500s."""
        logger.error("%s %s failed: %s", request.method, request.url.path, exc)
        return PlainTextResponse(str(exc), status_code=500)

    # PUBLIC_INTERFACE
    @app.get("/health", response_model=HealthOut, summary="Health Check", tags=["health"])
    def check_health() -> HealthOut:
        """
        Liveness endpoint. Does not touch the database.

        Returns:
            {"alive": true}
        """
        logger.info("Health is OK")
        return HealthOut()

    app.include_router(todos_router.router)
    return app
