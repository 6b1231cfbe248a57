import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlmodel import SQLModel

from src.app.errors import RATE_LIMITED
from .error import ClientError, ServerError

logger = logging.getLogger(__name__)


async def handle_client_error(request: Request, exc: ClientError):
    error_dict = {"code": exc.base_error.code, "message": exc.base_error.message}
    logger.warning(f"Client error: {error_dict}")
    headers = None
    if exc.base_error.code == RATE_LIMITED:
        headers = {"Retry-After": str(exc.base_error.details.get("retry_after", 0))}
    return JSONResponse(
        status_code=exc.status_code,
        content={"success": False, "message": exc.base_error.message, "error": error_dict},
        headers=headers,
    )


async def handle_server_error(request: Request, exc: ServerError):
    error_dict = {"code": exc.base_error.code, "message": "Internal server error"}
    if exc.status_code != status.HTTP_500_INTERNAL_SERVER_ERROR:
        error_dict["message"] = exc.base_error.message
    logger.error(f"Server error: {exc.base_error.code} ({exc.status_code})")
    return JSONResponse(
        status_code=exc.status_code,
        content={"success": False, "message": error_dict["message"], "error": error_dict},
    )


def _init_sentry(ApplicationConfig):
    import sentry_sdk

    sentry_sdk.init(
        dsn=ApplicationConfig.DSN_SENTRY,
        environment=ApplicationConfig.SENTRY_ENVIRONMENT,
    )


def create_app(ApplicationConfig) -> FastAPI:
    logging.basicConfig(
        level=ApplicationConfig.LOG_LEVEL,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    if ApplicationConfig.ENABLE_SENTRY and ApplicationConfig.DSN_SENTRY:
        _init_sentry(ApplicationConfig)

    from src.app.tasks.expired_session_task import ExpiredSessionTask
    from src.depends import engine, session_service_scope

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        async with engine.begin() as conn:
            await conn.run_sync(SQLModel.metadata.create_all)

        sweeper = ExpiredSessionTask(
            session_service_scope,
            interval_seconds=ApplicationConfig.SESSION_SWEEP_INTERVAL_SECONDS,
        )
        if ApplicationConfig.ENABLE_SESSION_SWEEP:
            sweeper.start()
        yield
        await sweeper.stop()
        await engine.dispose()

    app = FastAPI(title="Auth Service", version="0.1.0", lifespan=lifespan)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=ApplicationConfig.CORS_ORIGINS,
        allow_credentials=ApplicationConfig.CORS_ALLOW_CREDENTIALS,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    from src.api.routes import auth, health_check

    app.include_router(health_check.router)
    app.include_router(auth.router)

    app.add_exception_handler(ClientError, handle_client_error)
    app.add_exception_handler(ServerError, handle_server_error)

    return app
