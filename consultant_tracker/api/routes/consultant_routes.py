"""
Consultant Routes

GET /consultants - List consultants (search, status)
GET /consultants/{id} - Consultant with submissions
POST /consultants - Create consultant (admin)
PUT /consultants/{id} - Update consultant
POST /consultants/{id}/resume - Upload resume (PDF/DOC/DOCX, max 5MB)
DELETE /consultants/{id} - Delete consultant (admin)
"""

from typing import List, Optional

from fastapi import APIRouter, Depends, File, HTTPException, Query, Response, UploadFile
from sqlalchemy.orm import Session

from consultant_tracker.core.auth import Actor, get_current_actor, require_admin, scope_user_id
from consultant_tracker.db.postgres import get_db
from consultant_tracker.schemas.schemas import (
    ConsultantCreate, ConsultantDetailResponse, ConsultantResponse, ConsultantStatus,
    ConsultantUpdate
)
from consultant_tracker.services import submission_service
from consultant_tracker.utils.file_upload import save_resume

router = APIRouter(prefix="/consultants", tags=["Consultants"])


@router.get("", response_model=List[ConsultantResponse])
async def list_consultants(
    search: Optional[str] = Query(None),
    status: Optional[ConsultantStatus] = Query(None),
    actor: Actor = Depends(get_current_actor),
    db: Session = Depends(get_db)
):
    return submission_service.list_consultants(
        db, user_id=scope_user_id(actor), search=search, status=status.value if status else None
    )


@router.get("/{consultant_id}", response_model=ConsultantDetailResponse)
async def get_consultant(
    consultant_id: str,
    actor: Actor = Depends(get_current_actor),
    db: Session = Depends(get_db)
):
    consultant = submission_service.get_consultant(db, consultant_id)
    if not consultant:
        raise HTTPException(status_code=404, detail="Consultant not found")
    return consultant


@router.post("", response_model=ConsultantResponse, status_code=201)
async def create_consultant(
    data: ConsultantCreate,
    actor: Actor = Depends(require_admin),
    db: Session = Depends(get_db)
):
    """Only admins can create consultants."""
    return submission_service.create_consultant(db, data, created_by=actor.user_id)


@router.put("/{consultant_id}", response_model=ConsultantResponse)
async def update_consultant(
    consultant_id: str,
    data: ConsultantUpdate,
    actor: Actor = Depends(get_current_actor),
    db: Session = Depends(get_db)
):
    consultant = submission_service.update_consultant(db, consultant_id, data)
    if not consultant:
        raise HTTPException(status_code=404, detail="Consultant not found")
    return consultant


@router.post("/{consultant_id}/resume", response_model=ConsultantResponse)
async def upload_resume(
    consultant_id: str,
    resume: UploadFile = File(...),
    actor: Actor = Depends(get_current_actor),
    db: Session = Depends(get_db)
):
    if not submission_service.get_consultant(db, consultant_id):
        raise HTTPException(status_code=404, detail="Consultant not found")
    stored = await save_resume(resume)
    return submission_service.update_consultant(db, consultant_id, ConsultantUpdate(), resume=stored)


@router.delete("/{consultant_id}", status_code=204)
async def delete_consultant(
    consultant_id: str,
    actor: Actor = Depends(require_admin),
    db: Session = Depends(get_db)
):
    """Only admins can delete consultants."""
    if not submission_service.delete_consultant(db, consultant_id):
        raise HTTPException(status_code=404, detail="Consultant not found")
    return Response(status_code=204)
