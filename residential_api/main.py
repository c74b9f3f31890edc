"""
FastAPI Application

HTTP API for residential community management: residents, service
providers, employees, gate entries, billing, complaints, guests and
deliveries.
"""

import time

from fastapi import FastAPI, HTTPException, Request, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse, Response
from prometheus_client import CONTENT_TYPE_LATEST, Counter, Histogram, generate_latest
from pymongo.errors import DuplicateKeyError
from slowapi import _rate_limit_exceeded_handler
from slowapi.errors import RateLimitExceeded
from slowapi.middleware import SlowAPIMiddleware

from residential_api import __version__
from residential_api.config import get_config
from residential_api.db.mongo import ensure_indexes, get_database
from residential_api.utils.datetime_utils import get_now_utc
from residential_api.utils.exceptions import AppError
from residential_api.utils.limiter import limiter
from residential_api.utils.logger import get_logger, setup_logging

config = get_config()
setup_logging(config)
logger = get_logger(__name__)

from residential_api.api import announcements as announcements_api  # noqa: E402
from residential_api.api import auth as auth_api  # noqa: E402
from residential_api.api import bills as bills_api  # noqa: E402
from residential_api.api import bookings as bookings_api  # noqa: E402
from residential_api.api import complaints as complaints_api  # noqa: E402
from residential_api.api import dashboard as dashboard_api  # noqa: E402
from residential_api.api import deliveries as deliveries_api  # noqa: E402
from residential_api.api import employees as employees_api  # noqa: E402
from residential_api.api import gate_entries as gate_entries_api  # noqa: E402
from residential_api.api import guests as guests_api  # noqa: E402
from residential_api.api import residents as residents_api  # noqa: E402
from residential_api.api import service_providers as service_providers_api  # noqa: E402
from residential_api.api import vehicles as vehicles_api  # noqa: E402

REQUEST_COUNT = Counter(
    "http_requests_total",
    "HTTP requests by method, route and status",
    ["method", "route", "status"],
)
REQUEST_LATENCY = Histogram(
    "http_request_duration_seconds",
    "HTTP request latency by method and route",
    ["method", "route"],
)

# Create FastAPI app
app = FastAPI(
    title="Residential Community Management API",
    description="Residents, service providers, employees, gate entries, billing and complaints",
    version=__version__,
)
app.state.limiter = limiter
app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)
app.add_middleware(SlowAPIMiddleware)

# With allow_credentials=True, origins cannot be "*"
_allow_all = config.server.cors_origins == ["*"]
app.add_middleware(
    CORSMiddleware,
    allow_origins=config.server.cors_origins,
    allow_credentials=not _allow_all,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.middleware("http")
async def record_metrics(request: Request, call_next):
    started = time.perf_counter()
    response = await call_next(request)
    route = request.scope.get("route")
    path = getattr(route, "path", "unmatched")
    REQUEST_COUNT.labels(request.method, path, str(response.status_code)).inc()
    REQUEST_LATENCY.labels(request.method, path).observe(time.perf_counter() - started)
    return response


@app.exception_handler(AppError)
async def app_error_handler(request: Request, exc: AppError):
    if exc.status_code >= 500:
        logger.error(f"[API] {exc.component}: {exc.message}")
    else:
        logger.info(f"[API] {exc.component} -> {exc.status_code}: {exc.message}")
    return JSONResponse(status_code=exc.status_code, content={"detail": exc.message})


@app.exception_handler(DuplicateKeyError)
async def duplicate_key_handler(request: Request, exc: DuplicateKeyError):
    logger.warning(f"[API] Duplicate key on {request.method} {request.url.path}: {exc.details}")
    return JSONResponse(status_code=status.HTTP_400_BAD_REQUEST, content={"detail": "Duplicate entry"})


@app.exception_handler(Exception)
async def unhandled_error_handler(request: Request, exc: Exception):
    logger.error(f"[API] Unhandled error on {request.method} {request.url.path}: {exc}", exc_info=True)
    detail = "Internal server error" if config.is_production else f"Internal server error: {exc}"
    return JSONResponse(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, content={"detail": detail})


@app.on_event("startup")
async def startup_log_db():
    """Log MongoDB database name and ensure indexes exist."""
    db = get_database(config)
    logger.info(f"[API] MongoDB database in use: {db.name}")
    try:
        ensure_indexes(db)
    except Exception as e:
        logger.warning(f"[API] Index creation skipped or partial: {e}")


@app.get("/health")
async def health():
    """Liveness probe: returns 200 if the process is running."""
    return {
        "status": "ok",
        "message": "Residential API is running",
        "timestamp": get_now_utc().isoformat(),
        "environment": config.server.environment,
    }


@app.get("/ready")
async def ready():
    """Readiness probe: returns 200 if MongoDB answers a ping."""
    try:
        db = get_database(config)
        db.client.admin.command("ping")
        return {"status": "ready"}
    except Exception as e:
        logger.warning(f"[API] Readiness check failed: {e}")
        raise HTTPException(status_code=503, detail="Service not ready")


@app.get("/metrics", include_in_schema=False)
async def metrics():
    """Prometheus metrics for monitoring."""
    return Response(content=generate_latest(), media_type=CONTENT_TYPE_LATEST)


app.include_router(auth_api.router)
app.include_router(residents_api.router)
app.include_router(service_providers_api.router)
app.include_router(employees_api.router)
app.include_router(vehicles_api.router)
app.include_router(complaints_api.router)
app.include_router(bookings_api.router)
app.include_router(bills_api.router)
app.include_router(guests_api.router)
app.include_router(deliveries_api.router)
app.include_router(gate_entries_api.router)
app.include_router(announcements_api.router)
app.include_router(dashboard_api.router)
