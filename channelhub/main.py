"""
Channel Hub - FastAPI Backend

Serves a cached catalog of scraped acestream channels and per-user favorites.
"""
import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.concurrency import run_in_threadpool
from fastapi.responses import JSONResponse
from slowapi import _rate_limit_exceeded_handler
from slowapi.errors import RateLimitExceeded

from channelhub.config import get_settings
from channelhub.rate_limit import limiter
from channelhub.routers import channels, refresh, user
from channelhub.services.cache import get_cache

settings = get_settings()

# Configure logging
logging.basicConfig(
    level=settings.log_level,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application startup and shutdown events."""
    logger.info("Starting Channel Hub backend...")

    # The catalog is built lazily on the first request after it expires
    cached = await run_in_threadpool(get_cache().load)
    if cached:
        logger.info(f"Catalog cache is fresh ({len(cached.groups)} groups)")
    else:
        logger.info("Catalog cache missing or expired; it will be rebuilt on first request")

    yield

    logger.info("Shutting down Channel Hub backend...")


# Create FastAPI app
app = FastAPI(
    title=settings.app_name,
    version=settings.app_version,
    description="Acestream channel catalog and favorites API",
    lifespan=lifespan
)

# Add rate limiter
app.state.limiter = limiter
app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)

# Include routers
app.include_router(channels.router)
app.include_router(refresh.router)
app.include_router(user.router)


@app.get("/api/health")
async def health_check():
    """Health check endpoint."""
    return {"status": "healthy", "version": settings.app_version}


# Error handlers
@app.exception_handler(Exception)
async def global_exception_handler(request: Request, exc: Exception):
    """Global exception handler."""
    logger.error(f"Unhandled exception: {exc}", exc_info=True)
    return JSONResponse(
        status_code=500,
        content={"detail": "Internal server error"}
    )


def run():
    """Console entry point."""
    import uvicorn
    uvicorn.run(
        "channelhub.main:app",
        host=settings.host,
        port=settings.port,
        reload=settings.debug
    )


if __name__ == "__main__":
    run()
