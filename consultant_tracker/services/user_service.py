"""
User Service - admin user management.

New users get a temporary bcrypt-hashed password that expires after 7 days.
"""

from datetime import timedelta
from typing import List, Optional

from sqlalchemy.orm import Session

from consultant_tracker.core.auth import hash_password
from consultant_tracker.core.logging_config import app_logger as logger
from consultant_tracker.db.models import User, utc_now
from consultant_tracker.schemas.schemas import UserCreate, UserUpdate

TEMPORARY_PASSWORD_DAYS = 7


def list_users(db: Session) -> List[User]:
    return db.query(User).order_by(User.created_at.desc()).all()


def get_user(db: Session, user_id: str) -> Optional[User]:
    return db.get(User, user_id)


def create_user(db: Session, data: UserCreate) -> User:
    values = data.model_dump(exclude={"password"})
    values["role"] = data.role.value
    user = User(
        **values,
        password_hash=hash_password(data.password),
        is_password_temporary=True,
        password_expires_at=utc_now() + timedelta(days=TEMPORARY_PASSWORD_DAYS),
    )
    db.add(user)
    db.commit()
    db.refresh(user)
    logger.info(f"[Users] Created {user.id} ({user.email}, role={user.role})")
    return user


def update_user(db: Session, user_id: str, data: UserUpdate) -> Optional[User]:
    user = db.get(User, user_id)
    if not user:
        return None
    for key, value in data.model_dump(exclude_unset=True).items():
        setattr(user, key, value.value if key == "role" and value is not None else value)
    user.updated_at = utc_now()
    db.commit()
    db.refresh(user)
    return user


def delete_user(db: Session, user_id: str) -> bool:
    user = db.get(User, user_id)
    if not user:
        return False
    db.delete(user)
    db.commit()
    logger.info(f"[Users] Deleted {user_id}")
    return True
