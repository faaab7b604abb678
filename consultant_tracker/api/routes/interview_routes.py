"""
Interview Routes

GET /interviews - List interviews (upcoming, date window, submission)
GET /interviews/{id} - Interview with its submission
POST /interviews - Schedule interview (moves the submission to interview_scheduled)
PUT /interviews/{id} - Update interview, feedback and follow-up
DELETE /interviews/{id} - Delete interview
"""

from datetime import datetime
from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query, Response
from sqlalchemy.orm import Session

from consultant_tracker.core.auth import Actor, get_current_actor
from consultant_tracker.db.postgres import get_db
from consultant_tracker.schemas.schemas import (
    InterviewCreate, InterviewDetailResponse, InterviewResponse, InterviewUpdate
)
from consultant_tracker.services import submission_service

router = APIRouter(prefix="/interviews", tags=["Interviews"])


@router.get("", response_model=List[InterviewDetailResponse])
async def list_interviews(
    upcoming: bool = Query(False),
    date_from: Optional[datetime] = Query(None),
    date_to: Optional[datetime] = Query(None),
    submission_id: Optional[str] = Query(None),
    actor: Actor = Depends(get_current_actor),
    db: Session = Depends(get_db)
):
    return submission_service.list_interviews(
        db, upcoming=upcoming, date_from=date_from, date_to=date_to, submission_id=submission_id
    )


@router.get("/{interview_id}", response_model=InterviewDetailResponse)
async def get_interview(interview_id: str, actor: Actor = Depends(get_current_actor), db: Session = Depends(get_db)):
    interview = submission_service.get_interview(db, interview_id)
    if not interview:
        raise HTTPException(status_code=404, detail="Interview not found")
    return interview


@router.post("", response_model=InterviewResponse, status_code=201)
async def create_interview(
    data: InterviewCreate,
    actor: Actor = Depends(get_current_actor),
    db: Session = Depends(get_db)
):
    interview = submission_service.create_interview(db, data, created_by=actor.user_id)
    if not interview:
        raise HTTPException(status_code=404, detail="Submission not found")
    return interview


@router.put("/{interview_id}", response_model=InterviewResponse)
async def update_interview(
    interview_id: str,
    data: InterviewUpdate,
    actor: Actor = Depends(get_current_actor),
    db: Session = Depends(get_db)
):
    interview = submission_service.update_interview(db, interview_id, data)
    if not interview:
        raise HTTPException(status_code=404, detail="Interview not found")
    return interview


@router.delete("/{interview_id}", status_code=204)
async def delete_interview(interview_id: str, actor: Actor = Depends(get_current_actor), db: Session = Depends(get_db)):
    if not submission_service.delete_interview(db, interview_id):
        raise HTTPException(status_code=404, detail="Interview not found")
    return Response(status_code=204)
