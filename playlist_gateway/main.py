"""
IPTV Playlist Gateway - FastAPI Backend

Converts i.mjh.nz channel-lineup feeds into M3U8 playlists.
"""
import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import PlainTextResponse
from slowapi import _rate_limit_exceeded_handler
from slowapi.errors import RateLimitExceeded
from starlette.exceptions import HTTPException as StarletteHTTPException

from playlist_gateway.config import get_settings
from playlist_gateway.errors import PlaylistError
from playlist_gateway.rate_limit import limiter
from playlist_gateway.routers import playlist

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
)
logger = logging.getLogger(__name__)

settings = get_settings()


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application startup and shutdown events."""
    logger.info("Starting IPTV Playlist Gateway...")
    logger.info(f"Feeds from {settings.feed_base_url}, fetch timeout {settings.fetch_timeout_seconds}s")

    yield

    logger.info("Shutting down IPTV Playlist Gateway...")


# Create FastAPI app
app = FastAPI(
    title=settings.app_name,
    version=settings.app_version,
    description="Renders IPTV playlists from channel-lineup feeds",
    lifespan=lifespan
)

# Add rate limiter
app.state.limiter = limiter
app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)

# CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Include routers
app.include_router(playlist.router)


@app.get("/health")
async def health_check():
    """Health check endpoint."""
    return {"status": "healthy", "version": settings.app_version}


# Error handlers
@app.exception_handler(PlaylistError)
async def playlist_error_handler(request: Request, exc: PlaylistError):
    """Turn playlist errors into plain-text responses."""
    if exc.status_code >= 500:
        logger.error(f"{request.url.path}: {exc.message} ({exc.__cause__})")
    else:
        logger.warning(f"{request.url.path}: {exc.message}")
    return PlainTextResponse(exc.message, status_code=exc.status_code)


@app.exception_handler(StarletteHTTPException)
async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    """Plain-text bodies for routing errors such as 404 and 405."""
    return PlainTextResponse(
        str(exc.detail),
        status_code=exc.status_code,
        headers=getattr(exc, "headers", None),
    )


@app.exception_handler(Exception)
async def global_exception_handler(request: Request, exc: Exception):
    """Global exception handler."""
    logger.error(f"Unhandled exception: {exc}", exc_info=True)
    return PlainTextResponse("Error: Internal server error", status_code=500)


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(
        "playlist_gateway.main:app",
        host=settings.host,
        port=settings.port,
        reload=settings.debug
    )
