import logging
from contextlib import asynccontextmanager

from asgi_correlation_id import CorrelationIdMiddleware, correlation_id
from fastapi import FastAPI, HTTPException, Request, status
from fastapi.exception_handlers import http_exception_handler
from fastapi.exceptions import RequestValidationError
from fastapi.openapi.utils import get_openapi
from prometheus_fastapi_instrumentator import Instrumentator
from starlette.middleware.cors import CORSMiddleware

from app.db.database import database
from app.exceptions import ConflictException, NotFoundException, ServiceException
from app.logging_conf import configure_logging
from app.middleware.auth_middleware import CORS_CONFIG, auth_middleware
from app.routers.dashboard_router import router as dashboard_router
from app.routers.risk_assessment_category_router import router as risk_assessment_category_router
from app.routers.risk_assessment_router import router as risk_assessment_router
from app.utils.messages import messages
from app.utils.responses import api_response

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    configure_logging()
    await database.connect()
    yield
    await database.disconnect()

app = FastAPI(lifespan=lifespan, root_path="/api", title="Church Register Risk Assessments")

app.add_middleware(
    CORSMiddleware,
    allow_origins=CORS_CONFIG["allow_origins"],
    allow_credentials=CORS_CONFIG["allow_credentials"],
    allow_methods=CORS_CONFIG["allow_methods"],
    allow_headers=CORS_CONFIG["allow_headers"],
)

app.middleware("http")(auth_middleware)

# Added last so it wraps everything and every log line carries the request id
app.add_middleware(CorrelationIdMiddleware)

app.include_router(risk_assessment_router)
app.include_router(risk_assessment_category_router)
app.include_router(dashboard_router)

# Instrumentation
Instrumentator().instrument(app).expose(app)


@app.exception_handler(ServiceException)
async def service_exception_handler(request: Request, exc: ServiceException):
    log_message = (
        f"{type(exc).__name__} on {request.method} {request.url.path} "
        f"(correlation id {correlation_id.get()}): {exc.message}"
    )
    if isinstance(exc, (NotFoundException, ConflictException)):
        logger.info(log_message)
    else:
        logger.warning(log_message)
    return api_response(exc.status_code, exc.message, None, errors=exc.errors)


@app.exception_handler(RequestValidationError)
async def request_validation_handler(request: Request, exc: RequestValidationError):
    errors = [
        f"{'.'.join(str(part) for part in error['loc'] if part != 'body')}: {error['msg']}"
        for error in exc.errors()
    ]
    logger.warning(f"Request validation failed on {request.url.path}: {errors}")
    return api_response(status.HTTP_400_BAD_REQUEST, "One or more validation errors occurred.", None, errors=errors)


@app.exception_handler(HTTPException)
async def http_exception_handle_logging(request, exc):
    logger.error(f"HTTPException: {exc.status_code} {exc.detail}")
    return await http_exception_handler(request, exc)


@app.exception_handler(Exception)
async def unhandled_exception_handler(request: Request, exc: Exception):
    # Details stay in the log; the caller only gets the generic message
    logger.exception(f"Unhandled exception on {request.method} {request.url.path} (correlation id {correlation_id.get()})")
    return api_response(status.HTTP_500_INTERNAL_SERVER_ERROR, messages["internal_error"], None, errors=[])


def custom_openapi():
    if app.openapi_schema:
        return app.openapi_schema

    openapi_schema = get_openapi(
        title=app.title,
        version="1.0.0",
        description="Risk assessment review and approval API (JWT Bearer Authentication)",
        routes=app.routes,
    )

    openapi_schema["servers"] = [
        {"url": "/api"}
    ]

    openapi_schema.setdefault("components", {})["securitySchemes"] = {
        "BearerAuth": {
            "type": "http",
            "scheme": "bearer",
            "bearerFormat": "JWT",
            "description": "Enter your JWT token here (e.g. Bearer eyJhbGciOi...)",
        }
    }

    # Apply security globally
    openapi_schema["security"] = [{"BearerAuth": []}]

    app.openapi_schema = openapi_schema
    return app.openapi_schema

app.openapi = custom_openapi
