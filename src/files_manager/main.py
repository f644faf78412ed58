import logging
from contextlib import asynccontextmanager
from textwrap import dedent

import pydantic
from fastapi import FastAPI
from fastapi.exceptions import RequestValidationError
from fastapi.routing import APIRoute
from starlette.exceptions import HTTPException as StarletteHTTPException

from database.local import get_nosql_adapter
from files_manager.adapters.queue import BaseQueue, QueueFactory
from files_manager.adapters.session_store import RedisSessionStore
from files_manager.adapters.storage import LocalStorage
from files_manager.config.settings import Settings
from files_manager.db_layer import AuthService, FileService, UserService
from files_manager.errors import (
    FilesManagerError,
    handle_broad_exceptions,
    handle_files_manager_errors,
    handle_http_exceptions,
    handle_request_validation_errors,
)
from files_manager.routers.auth import router as auth_router
from files_manager.routers.files import router as files_router
from files_manager.routers.health import router as health_router
from files_manager.routers.users import router as users_router

# Set up logging
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Connect the stores on startup and release them on shutdown."""
    app.state.metadata_store.connect()
    app.state.session_store.connect()
    logger.info("Stores connected")
    try:
        yield
    finally:
        app.state.session_store.close()
        app.state.metadata_store.close()
        logger.info("Stores closed")


def create_app(
    settings: Settings | None = None,
    *,
    metadata_store=None,
    session_store: RedisSessionStore | None = None,
    queue: BaseQueue | None = None,
) -> FastAPI:
    """Create a FastAPI application.

    The document store, session store and job queue are picked from the
    settings unless they are passed in.
    """
    settings = settings or Settings()

    app = FastAPI(
        title="Files Manager",
        summary="Upload, organise and share files",
        version="v1",
        description=dedent(
            """\
        Users sign in with `GET /connect` and pass the returned token in the
        `X-Token` header. Files and folders form a tree per user; images get
        500, 250 and 100 pixel wide thumbnails in the background.
        """
        ),
        docs_url="/docs",
        generate_unique_id_function=custom_generate_unique_id,
        lifespan=lifespan,
    )

    metadata_store = metadata_store or get_nosql_adapter(settings)
    session_store = session_store or RedisSessionStore(host=settings.redis_host, port=settings.redis_port)
    queue = queue or QueueFactory.get_queue_handler(settings)
    storage = LocalStorage(settings.folder_path)

    user_service = UserService(metadata_store)

    app.state.settings = settings
    app.state.metadata_store = metadata_store
    app.state.session_store = session_store
    app.state.queue = queue
    app.state.storage = storage
    app.state.user_service = user_service
    app.state.auth_service = AuthService(user_service, session_store, ttl_seconds=settings.session_ttl_seconds)
    app.state.file_service = FileService(metadata_store, storage)

    app.include_router(users_router, tags=["users"])
    app.include_router(auth_router, tags=["auth"])
    app.include_router(files_router, tags=["files"])
    app.include_router(health_router, tags=["health"])

    app.add_exception_handler(FilesManagerError, handle_files_manager_errors)
    app.add_exception_handler(RequestValidationError, handle_request_validation_errors)
    app.add_exception_handler(
        exc_class_or_status_code=pydantic.ValidationError,
        handler=handle_request_validation_errors,
    )
    app.add_exception_handler(StarletteHTTPException, handle_http_exceptions)
    app.middleware("http")(handle_broad_exceptions)

    return app


def custom_generate_unique_id(route: APIRoute):
    """
    Generate prettier `operationId`s in the OpenAPI schema.

    These become the function names in generated client SDKs.
    """
    return f"{route.tags[0]}-{route.name}"


if __name__ == "__main__":
    import uvicorn

    app_settings = Settings()
    uvicorn.run(create_app(app_settings), host="0.0.0.0", port=app_settings.port)
