# =============================================================================
# app/main.py - FastAPI Application Entry Point
# =============================================================================
# This is the main entry point for the CineThread API.
# It configures the FastAPI application with middleware, routers, and handlers.
#
# Usage:
#   uvicorn app.main:app --reload
# =============================================================================

import asyncio
import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.concurrency import run_in_threadpool

from app.config import settings
from app.exceptions import (
    CineThreadException,
    cinethread_exception_handler,
    validation_exception_handler,
)
from app.routers import health, comments, contact
from app.websocket import (
    WEBSOCKET_CHANNEL,
    handle_relay_message,
    publish_room_event,
    room_manager,
)
from app.websocket import routes as websocket_routes
from app.websocket.broadcast import close_redis_client
from lib.supabase_client import SupabaseClient

# Configure logging
logging.basicConfig(
    level=logging.DEBUG if settings.DEBUG else logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
)
logger = logging.getLogger(__name__)

# Reported at startup as loaded/missing (values are never logged)
CHECKED_ENV_VARS = (
    "SUPABASE_URL",
    "SUPABASE_SERVICE_KEY",
    "SUPABASE_LOCAL_URL",
    "REDIS_URL",
    "EMAIL_USER",
    "EMAIL_PASS",
)


# Global handles for the Redis listener task
_redis_listener_task = None
_shutdown_event = None


def log_environment_check() -> None:
    """Log which settings are present without revealing their values."""
    logger.info("Environment check:")
    for name in CHECKED_ENV_VARS:
        status = "loaded" if getattr(settings, name) else "missing"
        logger.info(f"  {name}: {status}")


async def redis_pubsub_listener():
    """
    Background task that listens to Redis pub/sub and delivers room events
    published by other API processes to this process's WebSocket clients.
    """
    import redis.asyncio as aioredis

    logger.info("Starting Redis pub/sub listener for room events")

    redis_client = None
    pubsub = None
    try:
        redis_client = aioredis.from_url(settings.REDIS_URL)
        pubsub = redis_client.pubsub()
        await pubsub.subscribe(WEBSOCKET_CHANNEL)

        async for message in pubsub.listen():
            if _shutdown_event and _shutdown_event.is_set():
                break

            if message["type"] == "message":
                try:
                    await handle_relay_message(message["data"], room_manager)
                except Exception as e:
                    logger.error(f"Error processing Redis message: {e}")

    except asyncio.CancelledError:
        logger.info("Redis pub/sub listener cancelled")
    except Exception as e:
        logger.error(f"Redis pub/sub listener error: {e}")
    finally:
        try:
            if pubsub is not None:
                await pubsub.unsubscribe(WEBSOCKET_CHANNEL)
            if redis_client is not None:
                await redis_client.aclose()
        except Exception as e:
            logger.debug(f"Error closing Redis listener: {e}")


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Application lifespan handler.

    Runs on startup and shutdown:
    - Startup: Check environment, pick and connect the datastore,
      start the cross-process room relay when Redis is configured
    - Shutdown: Stop the relay and close Redis connections
    """
    global _redis_listener_task, _shutdown_event

    # Startup
    logger.info(f"Starting CineThread API in {settings.ENVIRONMENT} mode")
    logger.info(f"CORS origins: {settings.cors_origins_list}")
    log_environment_check()

    # Fails startup if no Supabase project is reachable
    await run_in_threadpool(SupabaseClient.connect)

    if settings.REDIS_URL:
        room_manager.relay = publish_room_event
        _shutdown_event = asyncio.Event()
        _redis_listener_task = asyncio.create_task(redis_pubsub_listener())
    else:
        logger.info("REDIS_URL not set: rooms are local to this process")

    yield

    # Shutdown
    logger.info("Shutting down CineThread API")

    if _shutdown_event:
        _shutdown_event.set()
    if _redis_listener_task:
        _redis_listener_task.cancel()
        try:
            await _redis_listener_task
        except asyncio.CancelledError:
            pass
        room_manager.relay = None
        await close_redis_client()


# Create FastAPI application
app = FastAPI(
    title="CineThread API",
    description="""
## Movie & TV Discussion API

Per-title comment threads with live updates, plus a contact form.

### How It Works

1. **Open the realtime channel** - connect to `/ws` and send `join_room`
   with the title's `contentType` and `contentId`
2. **Read comments** - `GET /api/comments/{contentType}/{contentId}`
3. **Post or like** - `POST /api/comments`, `POST /api/comments/like/{id}`
4. **Tell the room** - relay the returned comment with `send_comment` or
   `like_comment`; everyone else in the room gets `new_comment` /
   `comment_liked`

### Quick Start

```bash
# Post a comment
curl -X POST http://localhost:8000/api/comments \\
  -H "Content-Type: application/json" \\
  -d '{"contentId": "603", "contentType": "movie", "username": "neo", "comment": "Still holds up."}'

# List comments
curl http://localhost:8000/api/comments/movie/603
```
""",
    version="1.0.0",
    docs_url="/docs",
    redoc_url="/redoc",
    lifespan=lifespan,
    openapi_tags=[
        {
            "name": "Comments",
            "description": "List, create and like comments per movie or TV show",
        },
        {
            "name": "Contact",
            "description": "Contact form delivered by email",
        },
        {
            "name": "WebSocket",
            "description": "Realtime comment rooms",
        },
        {
            "name": "Health",
            "description": "API health and readiness checks",
        },
    ],
)


# =============================================================================
# Middleware
# =============================================================================

# CORS middleware - only the configured frontends, in every environment
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins_list,
    allow_credentials=True,
    allow_methods=["GET", "POST"],
    allow_headers=["*"],
)


@app.middleware("http")
async def log_requests(request: Request, call_next):
    """Log every API call with the datastore it is served from."""
    logger.info(f"[API] {request.method} {request.url.path} -> DB: {SupabaseClient.target_name()}")
    return await call_next(request)


# =============================================================================
# Exception Handlers
# =============================================================================

@app.exception_handler(CineThreadException)
async def handle_cinethread_exception(request: Request, exc: CineThreadException):
    """Handle custom CineThread exceptions."""
    return await cinethread_exception_handler(request, exc)


@app.exception_handler(RequestValidationError)
async def handle_validation_error(request: Request, exc: RequestValidationError):
    """Handle malformed request bodies."""
    return await validation_exception_handler(request, exc)


@app.exception_handler(Exception)
async def handle_general_exception(request: Request, exc: Exception):
    """Handle unexpected exceptions."""
    logger.exception(f"Unexpected error: {exc}")
    return JSONResponse(
        status_code=500,
        content={
            "detail": "An unexpected error occurred",
            "code": "INTERNAL_ERROR",
        }
    )


# =============================================================================
# Routers
# =============================================================================

# Health check endpoints
app.include_router(
    health.router,
    prefix="/api",
    tags=["Health"]
)

# Comment endpoints
app.include_router(
    comments.router,
    prefix="/api/comments",
    tags=["Comments"]
)

# Contact form endpoint
app.include_router(
    contact.router,
    prefix="/api/contact",
    tags=["Contact"]
)

# WebSocket endpoints (Realtime rooms)
app.include_router(
    websocket_routes.router,
    tags=["WebSocket"]
)


# =============================================================================
# Root Endpoint
# =============================================================================

@app.get("/", tags=["Root"])
async def root():
    """
    Root endpoint - returns API info.
    """
    return {
        "name": "CineThread API",
        "version": "1.0.0",
        "docs": "/docs",
        "health": "/api/health",
        "websocket": "/ws",
    }
