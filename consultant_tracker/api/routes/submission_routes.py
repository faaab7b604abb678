"""
Submission Routes

GET /submissions - List submissions (status, consultant, vendor, week/month/year window)
GET /submissions/export - CSV export of the caller's submissions
GET /submissions/{id} - Submission with consultant, vendor, recruiter, interviews
POST /submissions - Create submission
PUT /submissions/{id} - Partial update (hired/rejected clears the next follow-up)
DELETE /submissions/{id} - Delete submission
"""

from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query, Response
from sqlalchemy.orm import Session

from consultant_tracker.core.auth import Actor, get_current_actor, scope_user_id
from consultant_tracker.db.postgres import get_db
from consultant_tracker.schemas.schemas import (
    SubmissionCreate, SubmissionDetailResponse, SubmissionResponse, SubmissionStatus,
    SubmissionUpdate
)
from consultant_tracker.services import analytics_service, submission_service

router = APIRouter(prefix="/submissions", tags=["Submissions"])


@router.get("", response_model=List[SubmissionDetailResponse])
async def list_submissions(
    status: Optional[SubmissionStatus] = Query(None),
    consultant_id: Optional[str] = Query(None),
    vendor_id: Optional[str] = Query(None),
    timeframe: Optional[str] = Query(None, pattern="^(weekly|monthly|yearly)$"),
    week: Optional[int] = Query(None, ge=1, le=6),
    month: Optional[int] = Query(None, ge=1, le=12),
    year: Optional[int] = Query(None, ge=1970, le=9999),
    actor: Actor = Depends(get_current_actor),
    db: Session = Depends(get_db)
):
    """Recruiters only see submissions they created."""
    date_from = date_to = None
    if timeframe and year:
        date_from, date_to = analytics_service.dashboard_date_range(timeframe, week, month, year)

    return submission_service.list_submissions(
        db,
        user_id=scope_user_id(actor),
        status=status.value if status else None,
        consultant_id=consultant_id,
        vendor_id=vendor_id,
        date_from=date_from,
        date_to=date_to,
    )


# Declared before /{submission_id} so "export" is not taken as an id
@router.get("/export")
async def export_submissions(actor: Actor = Depends(get_current_actor), db: Session = Depends(get_db)):
    content = submission_service.export_submissions_csv(db, user_id=scope_user_id(actor))
    return Response(
        content=content,
        media_type="text/csv",
        headers={"Content-Disposition": 'attachment; filename="submissions.csv"'},
    )


@router.get("/{submission_id}", response_model=SubmissionDetailResponse)
async def get_submission(submission_id: str, actor: Actor = Depends(get_current_actor), db: Session = Depends(get_db)):
    submission = submission_service.get_submission(db, submission_id)
    if not submission:
        raise HTTPException(status_code=404, detail="Submission not found")
    return submission


@router.post("", response_model=SubmissionResponse, status_code=201)
async def create_submission(
    data: SubmissionCreate,
    actor: Actor = Depends(get_current_actor),
    db: Session = Depends(get_db)
):
    if not submission_service.get_consultant(db, data.consultant_id):
        raise HTTPException(status_code=404, detail="Consultant not found")
    if not submission_service.get_vendor(db, data.vendor_id):
        raise HTTPException(status_code=404, detail="Vendor not found")
    return submission_service.create_submission(db, data, created_by=actor.user_id)


@router.put("/{submission_id}", response_model=SubmissionResponse)
async def update_submission(
    submission_id: str,
    data: SubmissionUpdate,
    actor: Actor = Depends(get_current_actor),
    db: Session = Depends(get_db)
):
    submission = submission_service.update_submission(db, submission_id, data)
    if not submission:
        raise HTTPException(status_code=404, detail="Submission not found")
    return submission


@router.delete("/{submission_id}", status_code=204)
async def delete_submission(submission_id: str, actor: Actor = Depends(get_current_actor), db: Session = Depends(get_db)):
    if not submission_service.delete_submission(db, submission_id):
        raise HTTPException(status_code=404, detail="Submission not found")
    return Response(status_code=204)
