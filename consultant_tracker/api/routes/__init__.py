"""
API Routes - Combines all route modules into single router.
"""

from fastapi import APIRouter

from consultant_tracker.api.routes.auth_routes import router as auth_router
from consultant_tracker.api.routes.dashboard_routes import router as dashboard_router
from consultant_tracker.api.routes.analytics_routes import router as analytics_router
from consultant_tracker.api.routes.consultant_routes import router as consultant_router
from consultant_tracker.api.routes.vendor_routes import router as vendor_router
from consultant_tracker.api.routes.submission_routes import router as submission_router
from consultant_tracker.api.routes.interview_routes import router as interview_router
from consultant_tracker.api.routes.report_routes import router as report_router
from consultant_tracker.api.routes.admin_routes import router as admin_router

# Main API router
api_router = APIRouter()

# Include all sub-routers
api_router.include_router(auth_router)
api_router.include_router(dashboard_router)
api_router.include_router(analytics_router)
api_router.include_router(consultant_router)
api_router.include_router(vendor_router)
api_router.include_router(submission_router)
api_router.include_router(interview_router)
api_router.include_router(report_router)
api_router.include_router(admin_router)
