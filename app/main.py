# =============================================================================
# app/main.py - FastAPI Application Entry Point
# =============================================================================
# This is the main entry point for the LinkBio API.
# It configures the FastAPI application with middleware, routers, and handlers.
#
# Usage:
#   uvicorn app.main:app --reload
#   python -m app.main
# =============================================================================

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from pydantic import ValidationError

from app.config import settings
from app.exceptions import (
    LinkBioException,
    linkbio_exception_handler,
    validation_exception_handler,
)
from app.routers import health, profiles, sections, links, photos, testimonials, public
from app.auth import routes as auth_routes
from lib.supabase_client import SupabaseClientError

# Configure logging
logging.basicConfig(
    level=logging.DEBUG if settings.DEBUG else logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Application lifespan handler.

    Logs startup configuration and shutdown. There are no background tasks:
    every write happens inside a request.
    """
    logger.info(f"Starting LinkBio API in {settings.ENVIRONMENT} mode")
    logger.info(f"CORS origins: {settings.cors_origins_list}")

    yield

    logger.info("Shutting down LinkBio API")


# Create FastAPI application
app = FastAPI(
    title="LinkBio API",
    description="""
## Link-in-bio Page Builder API

Build a public profile page out of ordered, toggleable sections.

### How It Works

1. **Sign in** with Supabase Auth and send the access token as `Authorization: Bearer <token>`
2. **Fill in your profile** and claim a username
3. **Add sections** (links, photo slider / grid, testimonials, video, map, info card)
4. **Fill sections** with links and photos, drag them into order and save
5. **Share** `/api/v1/public/{username}`

### Saving an order

Order saves reconcile your list with the database in up to three steps
(remove, add, renumber). If one fails the response is `502 COMMIT_FAILED`
and `details.journal` lists which steps were applied; saving again
finishes the job.
""",
    version="1.0.0",
    docs_url="/docs",
    redoc_url="/redoc",
    lifespan=lifespan,
    openapi_tags=[
        {
            "name": "Auth",
            "description": "Authentication endpoints for verifying JWT tokens",
        },
        {
            "name": "Profile",
            "description": "Your profile, username and avatar",
        },
        {
            "name": "Sections",
            "description": "Sections of your page, their order and their members",
        },
        {
            "name": "Links",
            "description": "Link buttons",
        },
        {
            "name": "Photos",
            "description": "Photo library and uploads",
        },
        {
            "name": "Testimonials",
            "description": "Testimonials shown by testimonial sections",
        },
        {
            "name": "Public",
            "description": "Public pages and the directory (no authentication)",
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

# CORS middleware - allows cross-origin requests
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins_list if settings.is_production else ["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# =============================================================================
# Exception Handlers
# =============================================================================

@app.exception_handler(LinkBioException)
async def handle_linkbio_exception(request: Request, exc: LinkBioException):
    """Handle custom LinkBio exceptions."""
    return await linkbio_exception_handler(request, exc)


@app.exception_handler(SupabaseClientError)
async def handle_supabase_error(request: Request, exc: SupabaseClientError):
    """Reads that failed at Supabase (writes are wrapped by the services)."""
    logger.error(f"Supabase error on {request.url.path}: {exc}")
    return JSONResponse(
        status_code=502,
        content={
            "detail": exc.message,
            "code": exc.code,
        }
    )


@app.exception_handler(ValidationError)
async def handle_validation_error(request: Request, exc: ValidationError):
    """Stored rows that don't fit a response model."""
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

# Authentication endpoints
app.include_router(
    auth_routes.router,
    prefix="/api/v1/auth",
    tags=["Auth"]
)

# Health check endpoints
app.include_router(
    health.router,
    prefix="/api/v1",
    tags=["Health"]
)

# Own profile endpoints
app.include_router(
    profiles.router,
    prefix="/api/v1/profile",
    tags=["Profile"]
)

# Section and section member endpoints
app.include_router(
    sections.router,
    prefix="/api/v1/sections",
    tags=["Sections"]
)

# Link endpoints
app.include_router(
    links.router,
    prefix="/api/v1/links",
    tags=["Links"]
)

# Photo endpoints
app.include_router(
    photos.router,
    prefix="/api/v1/photos",
    tags=["Photos"]
)

# Testimonial endpoints
app.include_router(
    testimonials.router,
    prefix="/api/v1/testimonials",
    tags=["Testimonials"]
)

# Public page and directory endpoints
app.include_router(
    public.router,
    prefix="/api/v1",
    tags=["Public"]
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
        "name": "LinkBio API",
        "version": "1.0.0",
        "docs": "/docs",
        "health": "/api/v1/health",
    }


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "app.main:app",
        host=settings.API_HOST,
        port=settings.API_PORT,
        reload=settings.is_development,
    )
