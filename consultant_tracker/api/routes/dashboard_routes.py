"""
Dashboard Routes

GET /dashboard/stats - Submission counts per status for a week/month/year
GET /dashboard/activity - Submissions per day this week
GET /dashboard/recent-submissions - Latest 4 submissions
GET /dashboard/follow-up-reminders - Pending vendor follow-ups
GET /dashboard/upcoming-interviews - Interviews in the next 7 days
"""

from datetime import timedelta
from typing import List, Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from consultant_tracker.core.auth import Actor, get_current_actor, scope_user_id
from consultant_tracker.db.models import utc_now
from consultant_tracker.db.postgres import get_db
from consultant_tracker.schemas.schemas import (
    DashboardStats, FollowUpReminder, InterviewDetailResponse, PeriodCount, SubmissionDetailResponse
)
from consultant_tracker.services import analytics_service, submission_service

router = APIRouter(prefix="/dashboard", tags=["Dashboard"])


@router.get("/stats", response_model=DashboardStats)
async def get_stats(
    timeframe: Optional[str] = Query(None, pattern="^(weekly|monthly|yearly)$"),
    week: Optional[int] = Query(None, ge=1, le=6),
    month: Optional[int] = Query(None, ge=1, le=12),
    year: Optional[int] = Query(None, ge=1970, le=9999),
    actor: Actor = Depends(get_current_actor),
    db: Session = Depends(get_db)
):
    """Status counts for the requested window (defaults to the current week)."""
    date_from, date_to = analytics_service.dashboard_date_range(timeframe, week, month, year)
    return analytics_service.get_dashboard_stats(db, scope_user_id(actor), date_from, date_to)


@router.get("/activity", response_model=List[PeriodCount])
async def get_activity(actor: Actor = Depends(get_current_actor), db: Session = Depends(get_db)):
    """Daily submission counts for the current Sunday-Saturday week."""
    date_from, date_to = analytics_service.week_bounds(utc_now())
    return analytics_service.get_weekly_activity(db, date_from, date_to)


@router.get("/recent-submissions", response_model=List[SubmissionDetailResponse])
async def get_recent_submissions(actor: Actor = Depends(get_current_actor), db: Session = Depends(get_db)):
    return submission_service.list_submissions(db, user_id=scope_user_id(actor), limit=4)


@router.get("/follow-up-reminders", response_model=List[FollowUpReminder])
async def get_follow_up_reminders(
    overdue: bool = Query(False),
    actor: Actor = Depends(get_current_actor),
    db: Session = Depends(get_db)
):
    """Submissions awaiting a vendor follow-up, soonest first. overdue=true keeps only those due."""
    return analytics_service.get_follow_up_reminders(db, scope_user_id(actor), overdue=overdue)


@router.get("/upcoming-interviews", response_model=List[InterviewDetailResponse])
async def get_upcoming_interviews(actor: Actor = Depends(get_current_actor), db: Session = Depends(get_db)):
    now = utc_now()
    return submission_service.list_interviews(db, date_from=now, date_to=now + timedelta(days=7), limit=5)
