"""CORS configuration for the web frontend."""
from fastapi.middleware.cors import CORSMiddleware

from campusfin.config import ENVIRONMENT, FRONTEND_URL
from campusfin.utils.logger import get_logger

logger = get_logger("campusfin.cors")

# Base allowed origins for development
ALLOWED_ORIGINS = [
    "http://localhost:3000",
    "http://127.0.0.1:3000",
]

# Add production frontend URL if provided
if FRONTEND_URL and FRONTEND_URL not in ALLOWED_ORIGINS:
    ALLOWED_ORIGINS.append(FRONTEND_URL)

# Preview deployments of the frontend
PREVIEW_ORIGIN_REGEX = r"https://.*\.vercel\.app"


def add_cors_middleware(app):
    """Add CORS middleware to the FastAPI application."""
    if ENVIRONMENT == "production":
        logger.info("Using production CORS", frontend_url=FRONTEND_URL, origin_regex=PREVIEW_ORIGIN_REGEX)
        app.add_middleware(
            CORSMiddleware,
            allow_origins=[FRONTEND_URL] if FRONTEND_URL else [],
            allow_origin_regex=PREVIEW_ORIGIN_REGEX,
            allow_credentials=True,
            allow_methods=["*"],
            allow_headers=["*"],
            expose_headers=["Retry-After", "X-RateLimit-Limit", "X-RateLimit-Remaining", "X-RateLimit-Reset"],
        )
    else:
        logger.info("Using development CORS", allowed_origins=ALLOWED_ORIGINS)
        app.add_middleware(
            CORSMiddleware,
            allow_origins=ALLOWED_ORIGINS,
            allow_credentials=True,
            allow_methods=["*"],
            allow_headers=["*"],
            expose_headers=["Retry-After", "X-RateLimit-Limit", "X-RateLimit-Remaining", "X-RateLimit-Reset"],
        )
