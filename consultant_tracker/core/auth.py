"""
Authentication Utility - JWT verification and actor resolution.

Provides:
- Password hashing with bcrypt (admin-created users)
- JWT token creation/verification
- FastAPI dependencies resolving the calling Actor and enforcing the admin role

Tokens are issued by the identity provider; this service only verifies them.
"""

from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Optional

from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from jose import JWTError, jwt
from passlib.context import CryptContext
from sqlalchemy.orm import Session

from consultant_tracker.core.config import get_settings
from consultant_tracker.db.models import User
from consultant_tracker.db.postgres import get_db

settings = get_settings()

# Password hashing
pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto")

# Bearer token extractor
bearer_scheme = HTTPBearer()

ADMIN_ROLE = "admin"
RECRUITER_ROLE = "recruiter"


@dataclass(frozen=True)
class Actor:
    """The authenticated caller. Recruiters only see their own records."""
    user_id: str
    role: str

    @property
    def is_admin(self) -> bool:
        return self.role == ADMIN_ROLE


def hash_password(password: str) -> str:
    """Hash password with bcrypt."""
    return pwd_context.hash(password)


def verify_password(plain_password: str, hashed_password: str) -> bool:
    """Verify password against hash."""
    return pwd_context.verify(plain_password, hashed_password)


def create_access_token(data: dict, expires_delta: Optional[timedelta] = None) -> str:
    """Create JWT access token."""
    to_encode = data.copy()
    expire = datetime.now(timezone.utc) + (expires_delta or timedelta(minutes=settings.jwt_expire_minutes))
    to_encode.update({"exp": expire})
    return jwt.encode(to_encode, settings.jwt_secret_key, algorithm=settings.jwt_algorithm)


def decode_token(token: str) -> Optional[dict]:
    """Decode and verify JWT token."""
    try:
        return jwt.decode(token, settings.jwt_secret_key, algorithms=[settings.jwt_algorithm])
    except JWTError:
        return None


def get_current_user(
    credentials: HTTPAuthorizationCredentials = Depends(bearer_scheme),
    db: Session = Depends(get_db),
) -> User:
    """
    FastAPI dependency - Get current authenticated user row.

    Usage:
        @router.get("/protected")
        def route(user: User = Depends(get_current_user)):
            return user
    """
    credentials_exception = HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail="Unauthorized",
        headers={"WWW-Authenticate": "Bearer"},
    )

    payload = decode_token(credentials.credentials)
    if not payload:
        raise credentials_exception

    user_id = payload.get("sub")
    if not user_id:
        raise credentials_exception

    user = db.get(User, str(user_id))
    if not user:
        raise credentials_exception

    return user


def get_current_actor(user: User = Depends(get_current_user)) -> Actor:
    """Dependency - the caller as an Actor(user_id, role)."""
    return Actor(user_id=user.id, role=user.role or RECRUITER_ROLE)


def require_admin(actor: Actor = Depends(get_current_actor)) -> Actor:
    """Dependency - Require admin role."""
    if not actor.is_admin:
        raise HTTPException(status_code=403, detail="Admin access required")
    return actor


def scope_user_id(actor: Actor) -> Optional[str]:
    """Owner filter for store queries: the recruiter's id, or None (everything) for admins."""
    return None if actor.is_admin else actor.user_id
