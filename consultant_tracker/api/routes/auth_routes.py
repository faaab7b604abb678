"""
Auth Routes

GET /auth/user - Current authenticated user

Tokens are issued by the identity provider; there is no login here.
"""

from fastapi import APIRouter, Depends

from consultant_tracker.core.auth import get_current_user
from consultant_tracker.db.models import User
from consultant_tracker.schemas.schemas import UserResponse

router = APIRouter(prefix="/auth", tags=["Authentication"])


@router.get("/user", response_model=UserResponse)
async def get_me(user: User = Depends(get_current_user)):
    """Get current user info."""
    return user
