"""
FastAPI application entry point.
"""

import asyncio
import logging
import uuid
from contextlib import asynccontextmanager, suppress

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from chatbridge.db import close_db, get_db_context, init_db
from chatbridge.services.threads import archive_expired_threads
from chatbridge.settings import settings

# Configure logging
logging.basicConfig(
    level=getattr(logging, settings.log_level.upper()),
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s" if settings.log_format == "text" else None,
)
logger = logging.getLogger(__name__)


async def archive_threads_periodically(interval_seconds: int) -> None:
    """Archive idle threads until cancelled."""
    while True:
        await asyncio.sleep(interval_seconds)
        try:
            async with get_db_context() as db:
                await archive_expired_threads(db)
        except Exception:
            logger.exception("Thread auto-archive sweep failed")


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan events."""
    logger.info(f"Starting {settings.app_name}...")
    await init_db()
    archiver = asyncio.create_task(archive_threads_periodically(settings.thread_archive_interval_seconds))
    yield
    logger.info(f"Shutting down {settings.app_name}...")
    archiver.cancel()
    with suppress(asyncio.CancelledError):
        await archiver
    await close_db()


# Create FastAPI app
app = FastAPI(
    title=settings.app_name,
    version=settings.app_version,
    debug=settings.debug,
    lifespan=lifespan,
)

# CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# Request ID middleware
@app.middleware("http")
async def add_request_id(request: Request, call_next):
    """Add request ID to all requests for logging."""
    request_id = request.headers.get("X-Request-ID", str(uuid.uuid4()))
    request.state.request_id = request_id
    response = await call_next(request)
    response.headers["X-Request-ID"] = request_id
    return response


# Health check endpoint
@app.get("/healthz", tags=["health"])
@app.get("/health", tags=["health"])
async def healthz():
    """Health check endpoint for load balancers."""
    return {"status": "healthy"}


@app.get("/version", tags=["meta"])
async def version():
    return {"name": settings.app_name, "version": settings.app_version}


# Import and include routers
from chatbridge.routers import messages, reactions, slack  # noqa: E402

app.include_router(slack.router)
app.include_router(messages.router)
app.include_router(reactions.router)


# Generic exception handler for unhandled errors
@app.exception_handler(Exception)
async def generic_exception_handler(request: Request, exc: Exception):
    """Log unhandled exceptions and return a JSON 500."""
    logger.error(f"Unhandled exception on {request.method} {request.url.path}: {exc}", exc_info=True)
    return JSONResponse({"detail": "Internal server error"}, status_code=500)


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(
        "chatbridge.main:app",
        host=settings.host,
        port=settings.port,
        reload=settings.debug,
    )
