"""
Admin Routes (admin only)

GET /admin/users - List users
POST /admin/users - Create user with a temporary password
PUT /admin/users/{id} - Update user
DELETE /admin/users/{id} - Delete user
"""

from typing import List

from fastapi import APIRouter, Depends, HTTPException, Response
from sqlalchemy.orm import Session

from consultant_tracker.core.auth import Actor, require_admin
from consultant_tracker.db.postgres import get_db
from consultant_tracker.schemas.schemas import UserCreate, UserResponse, UserUpdate
from consultant_tracker.services import user_service

router = APIRouter(prefix="/admin/users", tags=["Admin"])


@router.get("", response_model=List[UserResponse])
async def list_users(actor: Actor = Depends(require_admin), db: Session = Depends(get_db)):
    return user_service.list_users(db)


@router.post("", response_model=UserResponse, status_code=201)
async def create_user(data: UserCreate, actor: Actor = Depends(require_admin), db: Session = Depends(get_db)):
    return user_service.create_user(db, data)


@router.put("/{user_id}", response_model=UserResponse)
async def update_user(
    user_id: str,
    data: UserUpdate,
    actor: Actor = Depends(require_admin),
    db: Session = Depends(get_db)
):
    user = user_service.update_user(db, user_id, data)
    if not user:
        raise HTTPException(status_code=404, detail="User not found")
    return user


@router.delete("/{user_id}", status_code=204)
async def delete_user(user_id: str, actor: Actor = Depends(require_admin), db: Session = Depends(get_db)):
    if not user_service.delete_user(db, user_id):
        raise HTTPException(status_code=404, detail="User not found")
    return Response(status_code=204)
