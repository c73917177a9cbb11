from contextlib import asynccontextmanager
import logging
from typing import Optional

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from .api.v1.api import router as api_router
from .core.config import Settings, settings as default_settings
from .core.errors import ForbiddenError, NotFoundError, TaskboardError, ValidationError
from .core.logging_setup import setup_logging
from .core.security import PasswordHasher
from .db.session import create_db_engine, create_db_and_tables

logger = logging.getLogger(__name__)


def _error_response(status_code: int, message: str, details=None) -> JSONResponse:
    content = {"error": message}
    if details is not None:
        content["details"] = details
    return JSONResponse(status_code=status_code, content=content)


async def taskboard_error_handler(request: Request, exc: TaskboardError) -> JSONResponse:
    if isinstance(exc, ForbiddenError):
        # Someone else's task looks exactly like a missing one
        exc = NotFoundError()
    if isinstance(exc, ValidationError):
        return _error_response(exc.status_code, exc.message, [v.as_dict() for v in exc.violations])
    if exc.status_code >= 500:
        logger.error(
            "%s %s failed: %s",
            request.method,
            request.url.path,
            exc.message,
            exc_info=exc,
        )
        return _error_response(exc.status_code, "Internal server error")

    response = _error_response(exc.status_code, exc.message)
    if exc.status_code == status.HTTP_401_UNAUTHORIZED:
        response.headers["WWW-Authenticate"] = "Bearer"
    return response


async def request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    details = [
        {"field": ".".join(str(part) for part in err["loc"][1:]) or "body", "message": err["msg"]}
        for err in exc.errors()
    ]
    return _error_response(status.HTTP_400_BAD_REQUEST, "Invalid data", details)


async def unhandled_error_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception("Unhandled error on %s %s", request.method, request.url.path)
    return _error_response(status.HTTP_500_INTERNAL_SERVER_ERROR, "Internal server error")


def create_app(settings: Optional[Settings] = None, engine=None) -> FastAPI:
    settings = settings or default_settings

    if engine is None:
        engine = create_db_engine(settings)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        # Create tables on startup
        if settings.CREATE_TABLES_ON_STARTUP:
            create_db_and_tables(engine)
        yield
        engine.dispose()

    app = FastAPI(
        title=settings.PROJECT_NAME,
        description="Multi-user task tracking API",
        version="1.0.0",
        lifespan=lifespan,
    )
    app.state.settings = settings
    app.state.engine = engine
    app.state.hasher = PasswordHasher(rounds=settings.BCRYPT_ROUNDS)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.CORS_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.add_exception_handler(TaskboardError, taskboard_error_handler)
    app.add_exception_handler(RequestValidationError, request_validation_handler)
    app.add_exception_handler(Exception, unhandled_error_handler)

    app.include_router(api_router)

    @app.get("/")
    def read_root():
        return {"message": f"{settings.PROJECT_NAME} API"}

    @app.get("/health")
    def health_check():
        return {"status": "healthy"}

    return app


app = create_app()

if __name__ == "__main__":
    import uvicorn

    setup_logging(default_settings.LOG_LEVEL)
    uvicorn.run(app, host="0.0.0.0", port=8000)
