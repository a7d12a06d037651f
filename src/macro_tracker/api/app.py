"""FastAPI application factory."""

import logging

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from macro_tracker.api.auth import router as auth_router
from macro_tracker.api.foods import router as foods_router
from macro_tracker.api.meals import router as meals_router
from macro_tracker.api.payloads import failure
from macro_tracker.api.summary import router as summary_router
from macro_tracker.api.users import router as users_router
from macro_tracker.app_logging import configure_logging
from macro_tracker.containers import AppContainer
from macro_tracker.errors import AppError, ValidationFailed

HTTP_ERROR_CODES = {
    status.HTTP_401_UNAUTHORIZED: "UNAUTHORIZED",
    status.HTTP_403_FORBIDDEN: "FORBIDDEN",
    status.HTTP_404_NOT_FOUND: "NOT_FOUND",
}
VALUE_ERROR_PREFIX = "Value error, "


def create_app(container: AppContainer) -> FastAPI:
    """Create a FastAPI app configured with dependencies."""
    configure_logging()
    logger = logging.getLogger(__name__)

    app = FastAPI(title="Macro Tracker")
    app.state.container = container

    @app.exception_handler(AppError)
    async def handle_app_error(request: Request, exc: AppError) -> JSONResponse:
        return JSONResponse(
            status_code=exc.status_code, content=failure(exc.code, exc.message)
        )

    @app.exception_handler(RequestValidationError)
    async def handle_validation_error(
        request: Request, exc: RequestValidationError
    ) -> JSONResponse:
        return JSONResponse(
            status_code=ValidationFailed.status_code,
            content=failure(ValidationFailed.code, _first_issue(exc)),
        )

    @app.exception_handler(StarletteHTTPException)
    async def handle_http_error(
        request: Request, exc: StarletteHTTPException
    ) -> JSONResponse:
        code = HTTP_ERROR_CODES.get(exc.status_code, ValidationFailed.code)
        return JSONResponse(
            status_code=exc.status_code,
            content=failure(code, str(exc.detail)),
            headers=exc.headers,
        )

    @app.exception_handler(Exception)
    async def handle_unexpected_error(
        request: Request, exc: Exception
    ) -> JSONResponse:
        if container.settings.is_local:
            logger.exception(
                "Unhandled error on %s %s: %r", request.method, request.url.path, exc
            )
        else:
            logger.exception(
                "Unhandled error on %s %s", request.method, request.url.path
            )
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content=failure(AppError.code, AppError.default_message),
        )

    @app.get("/health")
    async def health() -> dict[str, str]:
        """Simple health check endpoint."""
        return {"status": "ok"}

    app.include_router(auth_router)
    app.include_router(foods_router)
    app.include_router(meals_router)
    app.include_router(summary_router)
    app.include_router(users_router)
    return app


def _first_issue(exc: RequestValidationError) -> str:
    errors = exc.errors()
    if not errors:
        return ValidationFailed.default_message
    message = str(errors[0].get("msg", ValidationFailed.default_message))
    return message.removeprefix(VALUE_ERROR_PREFIX)
