import logging
import traceback
from contextlib import asynccontextmanager
from datetime import datetime, timezone

from fastapi import FastAPI, Request, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from pydantic import BaseModel
from starlette.middleware.base import BaseHTTPMiddleware
from prometheus_fastapi_instrumentator import Instrumentator

from app.core.config import settings
from app.api.v1 import api_router
from app.core.error_handlers import ERROR_INFO_HEADER, error_response, register_exception_handlers
from app.core.logging_config import get_request_id, setup_logging, RequestLoggingMiddleware
from app.db.session import check_db_connection, engine, init_models

setup_logging()
logger = logging.getLogger("payroll")

VERSION = "1.0.0"
SERVICE_NAME = "payroll-backend"

SECURITY_HEADERS = {
    "X-Content-Type-Options": "nosniff",
    "X-Frame-Options": "DENY",
    "Referrer-Policy": "strict-origin-when-cross-origin",
}


class SecurityHeadersMiddleware(BaseHTTPMiddleware):
    """Adds SECURITY_HEADERS to every response."""

    async def dispatch(self, request: Request, call_next):
        response = await call_next(request)
        for name, value in SECURITY_HEADERS.items():
            response.headers[name] = value
        return response


class HealthResponse(BaseModel):
    status: str
    service: str
    version: str
    environment: str
    checks: dict[str, bool]


@asynccontextmanager
async def lifespan(app: FastAPI):
    if settings.DB_CREATE_TABLES:
        await init_models()
        logger.info("Employee tables ready")
    logger.info(f"{settings.PROJECT_NAME} {VERSION} up (environment={settings.ENVIRONMENT})")
    yield
    await engine.dispose()
    logger.info(f"{settings.PROJECT_NAME} shut down")


app = FastAPI(
    title=settings.PROJECT_NAME,
    description="Employee records with salary deductions (bonus, provident fund, tax)",
    version=VERSION,
    # Interactive docs only outside production
    docs_url="/docs" if settings.DEBUG else None,
    redoc_url="/redoc" if settings.DEBUG else None,
    lifespan=lifespan,
)

register_exception_handlers(app)


@app.exception_handler(Exception)
async def global_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """
    Last-resort handler: 500 with the shared error body. Outside production the
    exception type and text are included; in production only a reference id.
    """
    # Same value as the X-Request-ID header of the failing request
    error_id = get_request_id() or datetime.now(timezone.utc).strftime("%Y%m%d%H%M%S%f")

    logger.error(
        f"Unhandled {exc.__class__.__name__} [{error_id}] on {request.method} {request.url.path}: {exc}\n"
        f"{traceback.format_exc()}"
    )

    if settings.is_production:
        message = f"An unexpected error occurred. Reference ID: {error_id}"
    else:
        message = f"{exc.__class__.__name__}: {exc} (Reference ID: {error_id})"

    return error_response(status.HTTP_500_INTERNAL_SERVER_ERROR, message)


app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.ALLOWED_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
    # Browsers may read these on cross-origin responses
    expose_headers=["Location", ERROR_INFO_HEADER, "X-Request-ID"],
)
app.add_middleware(SecurityHeadersMiddleware)
app.add_middleware(RequestLoggingMiddleware)

app.include_router(api_router, prefix=settings.API_PREFIX)

# /metrics is only served when ENABLE_METRICS=true
Instrumentator(
    should_group_status_codes=False,
    should_ignore_untemplated=True,
    should_respect_env_var=True,
    excluded_handlers=["/health", "/metrics"],
).instrument(app).expose(app, include_in_schema=False)


@app.get("/health", response_model=HealthResponse)
async def health_check():
    """
    Liveness plus database reachability. 503 when the database is down.
    """
    checks = {"database": await check_db_connection()}
    healthy = all(checks.values())

    response = HealthResponse(
        status="healthy" if healthy else "unhealthy",
        service=SERVICE_NAME,
        version=VERSION,
        environment=settings.ENVIRONMENT,
        checks=checks,
    )
    if healthy:
        return response

    logger.warning(f"Health check failed: {checks}")
    return JSONResponse(status_code=status.HTTP_503_SERVICE_UNAVAILABLE, content=response.model_dump())


@app.get("/")
async def root():
    return {"message": f"Welcome to the {settings.PROJECT_NAME}"}
