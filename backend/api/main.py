"""Main FastAPI application"""
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from contextlib import asynccontextmanager
import logging
import time

from api.config import settings
from api.ratelimit import limiter
from api.routers import checkin, daily, settings as settings_router, user
from api.schemas.errors import ok
from api.utils.exceptions import register_exception_handlers
from tradingmind.db.session import check_db_health, init_db
from tradingmind.log_config import get_logger
from tradingmind.services.sms import get_sms_service

logger = logging.getLogger(__name__)
access_logger = get_logger("api")


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Lifespan context manager for startup and shutdown events"""
    logger.info("Starting Trading Mind API...")
    init_db()
    logger.info("Database tables created/verified")

    sms_status = get_sms_service().status()
    if sms_status["mock_mode"]:
        logger.warning("SMS service running in mock mode, verification code is fixed")
    elif not sms_status["sms_ready"]:
        logger.error("SMS credentials incomplete, verification codes cannot be sent")

    yield

    logger.info("Shutting down Trading Mind API...")


app = FastAPI(
    title=settings.API_TITLE,
    description="Trading discipline journal: daily check-ins, streaks, trading plans, homework and reflections.",
    version=settings.API_VERSION,
    docs_url="/docs",
    redoc_url="/redoc",
    openapi_url="/api/openapi.json",
    lifespan=lifespan,
    openapi_tags=[
        {"name": "user", "description": "Registration, login and profile"},
        {"name": "checkin", "description": "Daily check-ins and streak statistics"},
        {"name": "settings", "description": "Trading principles, homework checklist and plan template"},
        {"name": "daily", "description": "Per-date trading plans and reflection"},
    ]
)

app.state.limiter = limiter

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS"],
    allow_headers=["content-type", "authorization"],
)


@app.middleware("http")
async def access_log_middleware(request: Request, call_next):
    """Log all API requests with status and timing"""
    t0 = time.time()
    response = await call_next(request)
    ms = int((time.time() - t0) * 1000)

    access_logger.info(
        "request",
        method=request.method,
        path=request.url.path,
        status=response.status_code,
        duration_ms=ms,
        user_id=getattr(request.state, "user_id", None),
    )
    return response


register_exception_handlers(app)

app.include_router(user.router)
app.include_router(checkin.router)
app.include_router(settings_router.router)
app.include_router(daily.router)


@app.get("/")
async def root():
    """Root endpoint"""
    return ok({
        "name": "Trading Mind API",
        "version": settings.API_VERSION,
        "status": "running"
    })


@app.get("/healthz")
async def health_check():
    """Health check endpoint"""
    database = check_db_health()
    healthy = database.get("status") == "healthy"
    return ok({
        "status": "healthy" if healthy else "degraded",
        "database": database,
        "sms": get_sms_service().status(),
    })
