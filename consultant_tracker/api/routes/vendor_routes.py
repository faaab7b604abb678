"""
Vendor Routes

GET /vendors - List vendors (search, status)
GET /vendors/{id} - Vendor with submissions
POST /vendors - Create vendor
PUT /vendors/{id} - Update vendor
DELETE /vendors/{id} - Delete vendor
"""

from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query, Response
from sqlalchemy.orm import Session

from consultant_tracker.core.auth import Actor, get_current_actor, scope_user_id
from consultant_tracker.db.postgres import get_db
from consultant_tracker.schemas.schemas import (
    VendorCreate, VendorDetailResponse, VendorResponse, VendorStatus, VendorUpdate
)
from consultant_tracker.services import submission_service

router = APIRouter(prefix="/vendors", tags=["Vendors"])


@router.get("", response_model=List[VendorResponse])
async def list_vendors(
    search: Optional[str] = Query(None),
    status: Optional[VendorStatus] = Query(None),
    actor: Actor = Depends(get_current_actor),
    db: Session = Depends(get_db)
):
    """Recruiters only see the vendors assigned to them."""
    return submission_service.list_vendors(
        db, user_id=scope_user_id(actor), search=search, status=status.value if status else None
    )


@router.get("/{vendor_id}", response_model=VendorDetailResponse)
async def get_vendor(vendor_id: str, actor: Actor = Depends(get_current_actor), db: Session = Depends(get_db)):
    vendor = submission_service.get_vendor(db, vendor_id)
    if not vendor:
        raise HTTPException(status_code=404, detail="Vendor not found")
    return vendor


@router.post("", response_model=VendorResponse, status_code=201)
async def create_vendor(data: VendorCreate, actor: Actor = Depends(get_current_actor), db: Session = Depends(get_db)):
    """Point-of-contact recruiter defaults to the caller."""
    return submission_service.create_vendor(db, data, created_by=actor.user_id)


@router.put("/{vendor_id}", response_model=VendorResponse)
async def update_vendor(
    vendor_id: str,
    data: VendorUpdate,
    actor: Actor = Depends(get_current_actor),
    db: Session = Depends(get_db)
):
    vendor = submission_service.update_vendor(db, vendor_id, data)
    if not vendor:
        raise HTTPException(status_code=404, detail="Vendor not found")
    return vendor


@router.delete("/{vendor_id}", status_code=204)
async def delete_vendor(vendor_id: str, actor: Actor = Depends(get_current_actor), db: Session = Depends(get_db)):
    if not submission_service.delete_vendor(db, vendor_id):
        raise HTTPException(status_code=404, detail="Vendor not found")
    return Response(status_code=204)
