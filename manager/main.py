"""Entry point for the files-manager API server."""

import time
import uuid
from typing import Optional

import uvicorn
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from common.exceptions import (
    FilesManagerError,
    NotFoundError,
    TransientBackendError,
    UnauthenticatedError,
    ValidationError,
)
from common.logging_config import setup_logging
from manager.config import SERVER_HOST, SERVER_PORT
from manager.container import ServiceContainer
from manager.routes import auth_router, file_router, status_router, user_router
from manager.schemas.common import ErrorResponse

logger = setup_logging('manager')


def _error_response(exc: FilesManagerError) -> JSONResponse:
    return JSONResponse(
        status_code=exc.status_code,
        content=ErrorResponse(error=exc.message, code=exc.code).model_dump()
    )


def create_app(container: Optional[ServiceContainer] = None) -> FastAPI:
    """
    Build the FastAPI application.

    Args:
        container: Pre-built services; when omitted they are built from
            manager.config at startup

    Returns:
        FastAPI application
    """
    app = FastAPI(
        title="Files Manager",
        description="Multi-tenant file storage with asynchronous thumbnails",
        version="1.0.0"
    )
    app.state.container = container

    @app.middleware("http")
    async def log_requests(request: Request, call_next):
        """
        Middleware to log all HTTP requests and responses.
        """
        request_id = str(uuid.uuid4())
        request.state.request_id = request_id

        start_time = time.time()

        logger.info(
            f"Request started: {request.method} {request.url.path} [request_id={request_id}]"
        )

        response = await call_next(request)

        duration = time.time() - start_time
        user_id = getattr(request.state, 'user_id', None)

        logger.info(
            f"Request completed: {request.method} {request.url.path} "
            f"status={response.status_code} duration={duration:.3f}s "
            f"[request_id={request_id}] [user_id={user_id or 'anonymous'}]"
        )

        response.headers["X-Request-ID"] = request_id

        return response

    @app.on_event("startup")
    async def startup_event():
        """
        Build backend handles and initialize storage on application startup.
        """
        logger.info("Files manager starting up...")
        if app.state.container is None:
            app.state.container = ServiceContainer.from_config()
        app.state.container.start()

    @app.on_event("shutdown")
    async def shutdown_event():
        """
        Release backend handles on application shutdown.
        """
        logger.info("Files manager shutting down...")
        if app.state.container is not None:
            await app.state.container.close()

    @app.exception_handler(UnauthenticatedError)
    async def unauthenticated_handler(request: Request, exc: UnauthenticatedError):
        request_id = getattr(request.state, 'request_id', 'unknown')
        logger.warning(
            f"Unauthenticated: {exc} [request_id={request_id}] path={request.url.path}"
        )
        return _error_response(exc)

    @app.exception_handler(NotFoundError)
    async def not_found_handler(request: Request, exc: NotFoundError):
        request_id = getattr(request.state, 'request_id', 'unknown')
        user_id = getattr(request.state, 'user_id', None)
        logger.warning(
            f"Not found: {exc} [request_id={request_id}] [user_id={user_id or 'anonymous'}] "
            f"path={request.url.path}"
        )
        return _error_response(exc)

    @app.exception_handler(ValidationError)
    async def validation_error_handler(request: Request, exc: ValidationError):
        request_id = getattr(request.state, 'request_id', 'unknown')
        logger.warning(
            f"Validation error: {exc} [request_id={request_id}] path={request.url.path}"
        )
        return _error_response(exc)

    @app.exception_handler(RequestValidationError)
    async def request_validation_handler(request: Request, exc: RequestValidationError):
        request_id = getattr(request.state, 'request_id', 'unknown')
        logger.warning(
            f"Malformed request body [request_id={request_id}] path={request.url.path} "
            f"errors={len(exc.errors())}"
        )
        return _error_response(ValidationError("Invalid request body"))

    @app.exception_handler(TransientBackendError)
    async def backend_unavailable_handler(request: Request, exc: TransientBackendError):
        request_id = getattr(request.state, 'request_id', 'unknown')
        logger.error(
            f"Backend unavailable [request_id={request_id}] path={request.url.path}",
            exc_info=exc.__cause__ or exc
        )
        return _error_response(exc)

    @app.exception_handler(FilesManagerError)
    async def files_manager_error_handler(request: Request, exc: FilesManagerError):
        request_id = getattr(request.state, 'request_id', 'unknown')
        logger.error(
            f"Unhandled files manager error: {exc} [request_id={request_id}] path={request.url.path}"
        )
        return _error_response(exc)

    app.include_router(status_router)
    app.include_router(user_router)
    app.include_router(auth_router)
    app.include_router(file_router)

    return app


app = create_app()


def main() -> None:
    logger.info(f"Starting files manager on {SERVER_HOST}:{SERVER_PORT}")
    uvicorn.run(app, host=SERVER_HOST, port=SERVER_PORT, log_level="info")


if __name__ == "__main__":
    main()
