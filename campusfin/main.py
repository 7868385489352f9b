"""Main FastAPI application for the CampusFin API."""
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse

from campusfin.config import DEBUG, ENVIRONMENT
from campusfin.db.init import init_db
from campusfin.middleware.cors import add_cors_middleware
from campusfin.routers import (
    accounts_router,
    auth_router,
    budget_router,
    categories_router,
    courses_router,
    credit_cards_router,
    deadlines_router,
    exams_router,
    notifications_router,
    recurring_patterns_router,
    savings_categories_router,
    settings_router,
    tasks_router,
    transactions_router,
)
from campusfin.services.errors import ServiceError
from campusfin.utils.logger import get_logger
from campusfin.utils.metrics import metrics_collector

logger = get_logger("campusfin.main")

API_VERSION = "1.0.0"


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Create tables on startup."""
    init_db()
    logger.info("Application startup complete", environment=ENVIRONMENT)
    yield


# Create FastAPI application
app = FastAPI(
    title="CampusFin API",
    description="Student budgeting and planner backend: accounts, budgets with rollover, recurring tasks, deadlines and exams",
    version=API_VERSION,
    lifespan=lifespan,
)

# Add CORS middleware
add_cors_middleware(app)


@app.exception_handler(ServiceError)
async def service_error_handler(request: Request, exc: ServiceError):
    body = {"detail": exc.message, "code": exc.code}
    if exc.details:
        body["details"] = exc.details
    return JSONResponse(status_code=exc.status_code, content=body)


@app.exception_handler(Exception)
async def unhandled_error_handler(request: Request, exc: Exception):
    metrics_collector.error()
    logger.exception("Unhandled error", path=request.url.path, method=request.method, error=str(exc))
    body = {"detail": "Internal server error"}
    if DEBUG:
        body["error"] = str(exc)
    return JSONResponse(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, content=body)


@app.get("/health")
async def health_check():
    """Health check endpoint."""
    return {"status": "healthy", "version": API_VERSION}


@app.get("/metrics")
async def metrics():
    """In-process counters and timers."""
    return metrics_collector.get_metrics()


@app.get("/")
async def root():
    """Root endpoint - API welcome message."""
    return {
        "title": "CampusFin API",
        "version": API_VERSION,
        "docs": "/docs",
        "health": "/health",
    }


app.include_router(auth_router, prefix="/auth")  # /auth/sign-up, /auth/sign-in
for api_router in (
    accounts_router,
    categories_router,
    savings_categories_router,
    credit_cards_router,
    transactions_router,
    budget_router,
    courses_router,
    tasks_router,
    deadlines_router,
    exams_router,
    recurring_patterns_router,
    notifications_router,
    settings_router,
):
    app.include_router(api_router, prefix="/api")
