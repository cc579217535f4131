"""FastAPI application factory and setup."""

import time
import uuid
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from loguru import logger
from starlette.exceptions import HTTPException
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.responses import JSONResponse

from src.leadsite.api.http.app_data import ApplicationDependencies
from src.leadsite.api.http.routers import admin_database, contact, debug, health, register
from src.leadsite.api.utils.app_startup import configure_logging
from src.leadsite.core.services import (
    DbSessionService,
    check_database_health,
)
from src.leadsite.core.storage.log_buffer import LogBuffer
from src.leadsite.entities.core.user import UserRepository
from src.leadsite.runtime.config.config_data import ConfigData
from src.leadsite.runtime.context import get_config


# --- Security middleware ---
class SecurityHeadersMiddleware(BaseHTTPMiddleware):
    async def dispatch(self, request: Request, call_next):
        response = await call_next(request)
        response.headers.setdefault("X-Content-Type-Options", "nosniff")
        response.headers.setdefault("X-Frame-Options", "DENY")
        response.headers.setdefault(
            "Referrer-Policy", "strict-origin-when-cross-origin"
        )
        # HSTS only in prod
        if get_config().app.environment == "production":
            response.headers.setdefault(
                "Strict-Transport-Security",
                "max-age=31536000; includeSubDomains; preload",
            )
        return response


# --- Request logging middleware ---
async def log_requests(request: Request, call_next):
    # Correlation / tracing
    request_id = request.headers.get("X-Request-ID") or str(uuid.uuid4())

    xff = request.headers.get("x-forwarded-for")
    client_ip = (
        xff.split(",")[0].strip()
        if xff
        else request.client.host
        if request.client
        else "unknown"
    )

    start = time.perf_counter()

    # Everything that logs within this block inherits the request context
    with logger.contextualize(
        request_id=request_id,
        endpoint=request.url.path,
        method=request.method,
    ):
        try:
            logger.bind(
                client_ip=client_ip,
                user_agent=request.headers.get("user-agent", "unknown"),
            ).info("request.start")
            response = await call_next(request)
        except Exception as exc:
            duration_ms = (time.perf_counter() - start) * 1000
            logger.bind(
                status_code=500,
                duration_ms=round(duration_ms, 1),
                error_type=type(exc).__name__,
            ).exception("request.error")
            return JSONResponse(
                status_code=500,
                content={"error": "Internal server error. Please try again later."},
                headers={"X-Request-ID": request_id},
            )

        duration_ms = (time.perf_counter() - start) * 1000
        logger.bind(
            status_code=response.status_code,
            duration_ms=round(duration_ms, 1),
        ).info("request.end")

        response.headers.setdefault("X-Request-ID", request_id)
        return response


# --- Error envelopes ---
async def http_exception_handler(request: Request, exc: HTTPException) -> JSONResponse:
    return JSONResponse(
        status_code=exc.status_code,
        content={"error": exc.detail},
        headers=getattr(exc, "headers", None),
    )


async def validation_exception_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    errors = exc.errors()
    logger.bind(errors=errors).warning("request.validation_error")
    in_body = any((error.get("loc") or ("",))[0] == "body" for error in errors)
    message = "Invalid request body" if in_body else "Invalid request parameters"
    return JSONResponse(status_code=400, content={"error": message})


# --- Lifecycle hooks ---
def startup(
    app: FastAPI, config: ConfigData, database_service: DbSessionService | None
) -> None:
    log_buffer = LogBuffer(max_logs=config.debug.max_logs)
    configure_logging(log_buffer, config)

    logger.info("Starting up application in {} environment", config.app.environment)

    if database_service is None:
        database_service = DbSessionService(config)
    database_service.initialize_schema()

    app.state.app_dependencies = ApplicationDependencies(
        database_service=database_service,
        log_buffer=log_buffer,
    )

    with database_service.get_session() as session:
        health_report = check_database_health(UserRepository(session))
    logger.info(
        "Database health check: {} ({} users)",
        health_report.status,
        health_report.user_count,
    )


def shutdown(app: FastAPI) -> None:
    logger.info("Shutting down application")
    app_dependencies: ApplicationDependencies = app.state.app_dependencies
    app_dependencies.database_service.close()


def create_app(database_service: DbSessionService | None = None) -> FastAPI:
    """Build the application.

    ``database_service`` lets callers supply an already configured service; by
    default one is created from the current configuration at startup. Either way
    the application closes it on shutdown.
    """

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        startup(app, config, database_service)
        try:
            yield
        finally:
            shutdown(app)

    config = get_config()
    app = FastAPI(
        title="Lead Site API",
        lifespan=lifespan,
        docs_url=None if config.app.environment == "production" else "/docs",
        redoc_url=None if config.app.environment == "production" else "/redoc",
    )

    app.add_middleware(SecurityHeadersMiddleware)

    # --- CORS configuration ---
    if config.app.environment == "production" and "*" in config.app.cors.origins:
        raise RuntimeError(
            "CORS misconfigured: cannot use '*' with allow_credentials=True in production"
        )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=config.app.cors.origins,
        allow_credentials=config.app.cors.allow_credentials,
        allow_methods=config.app.cors.allow_methods,
        allow_headers=config.app.cors.allow_headers,
    )
    app.middleware("http")(log_requests)

    app.add_exception_handler(HTTPException, http_exception_handler)
    app.add_exception_handler(RequestValidationError, validation_exception_handler)

    # --- Router registration ---
    app.include_router(health.router)
    app.include_router(register.router)
    app.include_router(contact.router)
    app.include_router(admin_database.router)
    app.include_router(debug.router)

    return app


app = create_app()

# expose startup for tests
__all__ = ["app", "create_app", "startup", "shutdown"]


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        app,
        host=get_config().app.host,
        port=get_config().app.port,
        access_log=False,  # We handle access logging in middleware
    )
