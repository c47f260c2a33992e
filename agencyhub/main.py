import logging
import time
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from . import models  # noqa: F401 - registers tables with Base
from .cache import IdentityCache
from .config import (
    ALLOWED_ORIGINS,
    IDENTITY_CACHE_MAX_ENTRIES,
    IDENTITY_CACHE_TTL_SECONDS,
    LOG_LEVEL,
)
from .database import Base, engine
from .domain.accounts.router import profile_router
from .domain.accounts.router import router as auth_router
from .domain.calendar.router import router as calendar_router
from .domain.invitations.router import router as invites_router
from .domain.representations.router import connections_router
from .domain.representations.router import router as roster_router
from .domain.todos.router import router as todos_router
from .errors import AgencyHubError

# Configure logging
logging.basicConfig(
    level=getattr(logging, LOG_LEVEL, logging.INFO),
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)

# Reduce verbosity of third-party libraries
logging.getLogger("httpx").setLevel(logging.WARNING)
logging.getLogger("httpcore").setLevel(logging.WARNING)


@asynccontextmanager
async def lifespan(app: FastAPI):
    logger.info("Application starting up...")
    try:
        Base.metadata.create_all(bind=engine, checkfirst=True)
        logger.info("Database tables created successfully")
    except Exception as e:
        # Ignore "already exists" errors from race conditions between workers
        error_msg = str(e)
        if "already exists" in error_msg or "duplicate key" in error_msg:
            logger.info("Database tables already exist (created by another worker)")
        else:
            logger.error(f"Failed to create database tables: {e}")
            raise

    try:
        from .rate_limiter import get_redis_client

        get_redis_client()  # Connection test
        logger.info("Redis connection established")
    except Exception as e:
        logger.warning(
            f"Redis connection failed - Rate limiting will operate in memory only: {e}"
        )

    yield
    logger.info("Application shutting down...")


app = FastAPI(title="AgencyHub API", version="1.0.0", lifespan=lifespan)

# Short-lived identity snapshots for the auth dependency; owned by this app instance
app.state.identity_cache = IdentityCache(
    ttl_seconds=IDENTITY_CACHE_TTL_SECONDS,
    max_entries=IDENTITY_CACHE_MAX_ENTRIES,
)


@app.exception_handler(AgencyHubError)
async def agencyhub_exception_handler(request: Request, exc: AgencyHubError):
    """Translate typed domain failures into distinguishable JSON errors"""
    if exc.status_code >= 500:
        logger.error(f"❌ {request.method} {request.url.path} - {exc.kind}: {exc.message}")
    else:
        logger.info(f"{request.method} {request.url.path} - {exc.kind}: {exc.message}")
    return JSONResponse(
        status_code=exc.status_code,
        content={"error": exc.kind, "detail": exc.message},
    )


def jsonable_errors(exc: RequestValidationError) -> list[dict]:
    """Validation errors without the raw exception objects pydantic attaches in ``ctx``"""
    return [
        {"loc": list(error.get("loc", ())), "msg": error.get("msg"), "type": error.get("type")}
        for error in exc.errors()
    ]


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    logger.warning(f"Validation error for {request.url.path}: {jsonable_errors(exc)}")
    return JSONResponse(
        status_code=422,
        content={"error": "validation_error", "detail": jsonable_errors(exc)},
    )


@app.middleware("http")
async def log_requests(request: Request, call_next):
    started = time.perf_counter()
    try:
        response = await call_next(request)
        elapsed_ms = (time.perf_counter() - started) * 1000
        logger.debug(f"{request.method} {request.url.path} -> {response.status_code} ({elapsed_ms:.0f}ms)")
        return response
    except Exception as e:
        logger.error(f"{request.method} {request.url.path} - Error: {str(e)}")
        raise


# Log CORS configuration for debugging
logger.info(f"CORS allowed origins: {ALLOWED_ORIGINS}")

app.add_middleware(
    CORSMiddleware,
    allow_origins=ALLOWED_ORIGINS,
    allow_credentials=True,  # Session cookie
    allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS", "PATCH"],
    allow_headers=["*"],
)

# Routes
app.include_router(auth_router)
app.include_router(profile_router)
app.include_router(roster_router)
app.include_router(connections_router)
app.include_router(invites_router)
app.include_router(calendar_router)
app.include_router(todos_router)


@app.get("/health")
def health():
    return {"status": "ok"}


@app.get("/api/health")
def api_health():
    return {"status": "ok"}
