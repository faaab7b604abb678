"""
Consultant Placement Tracker - Main Application

FastAPI backend with:
- PostgreSQL (SQLAlchemy ORM) for consultants, vendors, submissions, interviews
- Analytics endpoints for dashboards
- Scheduled HTML email reports (production only)
- JWT bearer authentication

Run: uvicorn consultant_tracker.main:app --reload
"""

import os

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.staticfiles import StaticFiles

from consultant_tracker import __version__
from consultant_tracker.api.routes import api_router
from consultant_tracker.core.config import get_settings
from consultant_tracker.core.errors import register_exception_handlers
from consultant_tracker.core.logging_config import app_logger as logger
from consultant_tracker.services.scheduler import build_report_scheduler
from consultant_tracker.utils.file_upload import UPLOAD_URL_PREFIX

settings = get_settings()

# Create FastAPI app
app = FastAPI(
    title="Consultant Placement Tracker",
    description="""
    Track consultants submitted to vendors through interviews to placement.

    ## Features
    - **Consultants & Vendors**: Profiles, skills, resume uploads
    - **Submissions**: Status pipeline with vendor follow-up tracking
    - **Interviews**: Rounds, feedback and outcomes
    - **Analytics**: Status breakdowns, conversion rates, time-bucketed trends
    - **Reports**: Daily, weekly and monthly HTML email reports
    """,
    version=__version__,
    docs_url="/docs",
    redoc_url="/redoc"
)

# CORS middleware (allow all for development)
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

register_exception_handlers(app)

# Include API routes
app.include_router(api_router, prefix="/api")

# Serve uploaded resumes
os.makedirs(settings.upload_dir, exist_ok=True)
app.mount(UPLOAD_URL_PREFIX, StaticFiles(directory=settings.upload_dir), name="uploads")


@app.on_event("startup")
async def startup_event():
    """Start the report scheduler (inert outside production)."""
    app.state.report_scheduler = build_report_scheduler(settings)
    app.state.report_scheduler.start()
    logger.info(f"[App] Started in {settings.environment} mode")


@app.on_event("shutdown")
async def shutdown_event():
    scheduler = getattr(app.state, "report_scheduler", None)
    if scheduler:
        await scheduler.stop()


@app.get("/health", tags=["Health"])
async def health_check():
    """Detailed health check."""
    from consultant_tracker.db.postgres import test_postgres_connection

    return {
        "status": "healthy",
        "database": "connected" if test_postgres_connection() else "disconnected",
        "scheduler": "running" if getattr(app.state, "report_scheduler", None) and app.state.report_scheduler.running else "stopped",
    }
