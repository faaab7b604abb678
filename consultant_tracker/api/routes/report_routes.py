"""
Report Routes (admin only)

POST /reports/send - Email a daily/weekly/monthly report to the configured recipients
GET /reports/preview/{period} - Render a report as HTML without sending
"""

from fastapi import APIRouter, Depends, Request
from fastapi.responses import HTMLResponse
from sqlalchemy.orm import Session

from consultant_tracker.core.auth import Actor, require_admin
from consultant_tracker.db.postgres import get_db
from consultant_tracker.schemas.schemas import ReportPeriod, ReportSendRequest, ReportSendResponse
from consultant_tracker.services.report_service import ReportService
from consultant_tracker.services.scheduler import ReportScheduler, build_report_scheduler

router = APIRouter(prefix="/reports", tags=["Reports"])


def get_report_scheduler(request: Request) -> ReportScheduler:
    """The scheduler started with the app, or one built from config."""
    scheduler = getattr(request.app.state, "report_scheduler", None)
    return scheduler or build_report_scheduler()


def get_report_service(scheduler: ReportScheduler = Depends(get_report_scheduler)) -> ReportService:
    return scheduler.report_service


@router.post("/send", response_model=ReportSendResponse)
async def send_report(
    data: ReportSendRequest,
    actor: Actor = Depends(require_admin),
    scheduler: ReportScheduler = Depends(get_report_scheduler)
):
    """
    Same generation and delivery path as the scheduled reports.
    Sender and recipients come from configuration, never from the request.
    """
    success = await scheduler.trigger_report(data.report_type.value)
    return ReportSendResponse(
        success=success,
        message="Report sent successfully" if success else "Failed to send report",
    )


@router.get("/preview/{period}", response_class=HTMLResponse)
async def preview_report(
    period: ReportPeriod,
    actor: Actor = Depends(require_admin),
    report_service: ReportService = Depends(get_report_service),
    db: Session = Depends(get_db)
):
    _, html = report_service.render(db, period.value)
    return HTMLResponse(content=html)
