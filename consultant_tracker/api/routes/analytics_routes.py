"""
Analytics Routes

GET /analytics/consultants - Per-consultant submission breakdown
GET /analytics/recruiters - Per-recruiter performance and success rate
GET /analytics/submissions - Pipeline totals and conversion rates
GET /analytics/vendors - Vendor performance, monthly trend, summary
GET /analytics/vendor-skills - Submissions and placements per vendor and skill
GET /analytics/consultant-summary - Headline consultant numbers
GET /notifications/consultant-activity - Recent consultant activity
"""

from datetime import datetime
from typing import List, Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from consultant_tracker.core.auth import Actor, get_current_actor, scope_user_id
from consultant_tracker.db.postgres import get_db
from consultant_tracker.schemas.schemas import (
    ConsultantActivityReport, ConsultantAnalytics, ConsultantSummary, RecruiterAnalytics,
    SubmissionAnalytics, Timeframe, VendorAnalytics, VendorSkillMetricsResponse
)
from consultant_tracker.services import analytics_service

router = APIRouter(tags=["Analytics"])


def _value(timeframe: Optional[Timeframe]) -> Optional[str]:
    return timeframe.value if timeframe else None


@router.get("/analytics/consultants", response_model=List[ConsultantAnalytics])
async def consultant_analytics(
    consultant_id: Optional[str] = Query(None),
    timeframe: Optional[Timeframe] = Query(None),
    date_from: Optional[datetime] = Query(None),
    date_to: Optional[datetime] = Query(None),
    actor: Actor = Depends(get_current_actor),
    db: Session = Depends(get_db)
):
    return analytics_service.get_consultant_analytics(
        db, scope_user_id(actor), consultant_id, _value(timeframe), date_from, date_to
    )


@router.get("/analytics/recruiters", response_model=List[RecruiterAnalytics])
async def recruiter_analytics(
    timeframe: Optional[Timeframe] = Query(None),
    date_from: Optional[datetime] = Query(None),
    date_to: Optional[datetime] = Query(None),
    actor: Actor = Depends(get_current_actor),
    db: Session = Depends(get_db)
):
    return analytics_service.get_recruiter_analytics(
        db, scope_user_id(actor), _value(timeframe), date_from, date_to
    )


@router.get("/analytics/submissions", response_model=SubmissionAnalytics)
async def submission_analytics(
    timeframe: Optional[Timeframe] = Query(None),
    date_from: Optional[datetime] = Query(None),
    date_to: Optional[datetime] = Query(None),
    actor: Actor = Depends(get_current_actor),
    db: Session = Depends(get_db)
):
    return analytics_service.get_submission_analytics(
        db, scope_user_id(actor), _value(timeframe), date_from, date_to
    )


@router.get("/analytics/vendors", response_model=VendorAnalytics)
async def vendor_analytics(
    skill: Optional[str] = Query(None, description="Only count consultants with this skill ('all' for every skill)"),
    actor: Actor = Depends(get_current_actor),
    db: Session = Depends(get_db)
):
    skill = None if not skill or skill.lower() == "all" else skill
    return analytics_service.get_vendor_analytics(db, scope_user_id(actor), skill=skill)


@router.get("/analytics/vendor-skills", response_model=VendorSkillMetricsResponse)
async def vendor_skill_metrics(actor: Actor = Depends(get_current_actor), db: Session = Depends(get_db)):
    return VendorSkillMetricsResponse(
        vendor_skills=analytics_service.get_vendor_skill_metrics(db, scope_user_id(actor))
    )


@router.get("/analytics/consultant-summary", response_model=ConsultantSummary)
async def consultant_summary(actor: Actor = Depends(get_current_actor), db: Session = Depends(get_db)):
    return analytics_service.get_consultant_summary(db, scope_user_id(actor))


@router.get("/notifications/consultant-activity", response_model=ConsultantActivityReport)
async def consultant_activity(
    timeframe: Timeframe = Query(Timeframe.weekly),
    actor: Actor = Depends(get_current_actor),
    db: Session = Depends(get_db)
):
    return analytics_service.get_consultant_activity(db, scope_user_id(actor), timeframe.value)
