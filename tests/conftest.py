import os
import tempfile
from contextlib import contextmanager
from datetime import datetime

# Settings are cached on first use, so the environment is fixed before the app is imported
os.environ.setdefault("UPLOAD_DIR", tempfile.mkdtemp(prefix="tracker-uploads-"))
os.environ.setdefault("ENVIRONMENT", "test")

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from consultant_tracker.core.auth import create_access_token
from consultant_tracker.db.models import Base, Consultant, Interview, Submission, User, Vendor
from consultant_tracker.db.postgres import get_db
from consultant_tracker.main import app

engine = create_engine(
    "sqlite://",
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


@pytest.fixture
def db():
    Base.metadata.create_all(bind=engine)
    session = TestingSessionLocal()
    try:
        yield session
    finally:
        session.close()
        Base.metadata.drop_all(bind=engine)


@pytest.fixture
def session_factory(db):
    """Stand-in for get_db_session that hands out the test session."""
    @contextmanager
    def factory():
        yield db
    return factory


@pytest.fixture
def client(db):
    def override_get_db():
        yield db

    app.dependency_overrides[get_db] = override_get_db
    yield TestClient(app)
    app.dependency_overrides.clear()


def auth_headers(user: User) -> dict:
    return {"Authorization": f"Bearer {create_access_token({'sub': user.id})}"}


# ============================================================
# FACTORIES
# ============================================================

def make_user(db, role="recruiter", first_name="Rita", last_name="Recruiter", email=None) -> User:
    count = db.query(User).count()
    user = User(
        email=email or f"user{count}@example.com",
        first_name=first_name,
        last_name=last_name,
        role=role,
    )
    db.add(user)
    db.commit()
    return user


def make_consultant(db, first_name="John", last_name="Smith", skills=None, status="active", created_by=None) -> Consultant:
    count = db.query(Consultant).count()
    consultant = Consultant(
        first_name=first_name,
        last_name=last_name,
        email=f"consultant{count}@example.com",
        skills=skills if skills is not None else ["Java"],
        status=status,
        created_by=created_by.id if created_by else None,
    )
    db.add(consultant)
    db.commit()
    return consultant


def make_vendor(db, recruiter, name="TechCorp Solutions", status="active") -> Vendor:
    vendor = Vendor(name=name, status=status, recruiter_id=recruiter.id, created_by=recruiter.id)
    db.add(vendor)
    db.commit()
    return vendor


def make_submission(
    db, consultant, vendor, recruiter,
    status="submitted",
    submission_date=datetime(2024, 3, 1, 10, 0),
    position_title="Senior Java Developer",
    **fields,
) -> Submission:
    submission = Submission(
        consultant_id=consultant.id,
        vendor_id=vendor.id,
        created_by=recruiter.id,
        status=status,
        submission_date=submission_date,
        position_title=position_title,
        **fields,
    )
    db.add(submission)
    db.commit()
    return submission


def make_interview(db, submission, recruiter, interview_date=datetime(2024, 3, 5, 14, 0), status="scheduled") -> Interview:
    interview = Interview(
        submission_id=submission.id,
        interview_date=interview_date,
        interview_type="video",
        round_type="technical",
        status=status,
        created_by=recruiter.id,
    )
    db.add(interview)
    db.commit()
    return interview


@pytest.fixture
def recruiter(db):
    return make_user(db, role="recruiter", first_name="Rita", last_name="Recruiter")


@pytest.fixture
def admin(db):
    return make_user(db, role="admin", first_name="Ada", last_name="Admin")
