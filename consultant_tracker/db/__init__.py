"""
Database module - SQLAlchemy engine, sessions and ORM models.
"""
from consultant_tracker.db.postgres import get_db, get_db_session, init_db, test_postgres_connection
from consultant_tracker.db.models import Base, User, Consultant, Vendor, Submission, Interview

__all__ = [
    "get_db",
    "get_db_session",
    "init_db",
    "test_postgres_connection",
    "Base",
    "User",
    "Consultant",
    "Vendor",
    "Submission",
    "Interview",
]
