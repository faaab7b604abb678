"""
ORM models for the five tracker entities.

users 1-* consultants (created_by)
users 1-* vendors (created_by, recruiter_id)
consultants 1-* submissions, vendors 1-* submissions, users 1-* submissions (created_by)
submissions 1-* interviews
"""

import uuid
from datetime import datetime, timezone

from sqlalchemy import Column, String, Integer, Boolean, DateTime, Text, JSON, ForeignKey
from sqlalchemy.orm import declarative_base, relationship

Base = declarative_base()


def utc_now() -> datetime:
    """Naive UTC timestamp, the convention for every stored datetime."""
    return datetime.now(timezone.utc).replace(tzinfo=None)


def new_id() -> str:
    return str(uuid.uuid4())


class User(Base):
    __tablename__ = "users"

    id = Column(String(36), primary_key=True, default=new_id)
    email = Column(String, unique=True, nullable=True)
    username = Column(String, unique=True, nullable=True)
    password_hash = Column(String, nullable=True)
    first_name = Column(String, nullable=True)
    last_name = Column(String, nullable=True)
    profile_image_url = Column(String, nullable=True)
    role = Column(String(20), nullable=False, default="recruiter")  # admin or recruiter
    is_password_temporary = Column(Boolean, default=True)
    password_expires_at = Column(DateTime, nullable=True)
    created_at = Column(DateTime, default=utc_now)
    updated_at = Column(DateTime, default=utc_now)

    @property
    def full_name(self) -> str:
        name = f"{self.first_name or ''} {self.last_name or ''}".strip()
        return name or (self.email or "Unknown Recruiter")


class Consultant(Base):
    __tablename__ = "consultants"

    id = Column(String(36), primary_key=True, default=new_id)
    first_name = Column(String, nullable=False)
    last_name = Column(String, nullable=False)
    email = Column(String, nullable=False, unique=True)
    phone = Column(String, nullable=True)
    location = Column(String, nullable=True)
    position = Column(String, nullable=True)
    experience = Column(String, nullable=True)  # e.g. "3-4 years"
    skills = Column(JSON, default=list)
    resume_url = Column(String, nullable=True)
    resume_file_name = Column(String, nullable=True)
    status = Column(String(20), nullable=False, default="active")  # active, placed, inactive
    created_at = Column(DateTime, default=utc_now)
    updated_at = Column(DateTime, default=utc_now)
    created_by = Column(String(36), ForeignKey("users.id"), nullable=True)

    submissions = relationship("Submission", back_populates="consultant")

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}"


class Vendor(Base):
    __tablename__ = "vendors"

    id = Column(String(36), primary_key=True, default=new_id)
    name = Column(String, nullable=False)
    contact_person = Column(String, nullable=True)
    email = Column(String, nullable=True)
    phone = Column(String, nullable=True)
    location = Column(String, nullable=True)
    specialties = Column(JSON, default=list)
    status = Column(String(20), nullable=False, default="active")  # active, pending, inactive
    notes = Column(Text, nullable=True)
    partnership_date = Column(DateTime, default=utc_now)
    recruiter_id = Column(String(36), ForeignKey("users.id"), nullable=False)  # point of contact
    created_at = Column(DateTime, default=utc_now)
    updated_at = Column(DateTime, default=utc_now)
    created_by = Column(String(36), ForeignKey("users.id"), nullable=True)

    recruiter = relationship("User", foreign_keys=[recruiter_id])
    submissions = relationship("Submission", back_populates="vendor")


class Submission(Base):
    __tablename__ = "submissions"

    id = Column(String(36), primary_key=True, default=new_id)
    consultant_id = Column(String(36), ForeignKey("consultants.id"), nullable=False, index=True)
    vendor_id = Column(String(36), ForeignKey("vendors.id"), nullable=False, index=True)
    position_title = Column(String, nullable=False)
    client_name = Column(String, nullable=True)
    end_client_name = Column(String, nullable=True)
    status = Column(String(30), nullable=False, default="submitted")
    submission_date = Column(DateTime, nullable=False, index=True)
    last_vendor_contact = Column(DateTime, nullable=True)
    next_follow_up_date = Column(DateTime, nullable=True)
    vendor_feedback = Column(Text, nullable=True)
    vendor_feedback_updated_at = Column(DateTime, nullable=True)
    notes = Column(Text, nullable=True)
    notes_updated_at = Column(DateTime, nullable=True)
    created_at = Column(DateTime, default=utc_now)
    updated_at = Column(DateTime, default=utc_now)
    created_by = Column(String(36), ForeignKey("users.id"), nullable=False, index=True)

    consultant = relationship("Consultant", back_populates="submissions")
    vendor = relationship("Vendor", back_populates="submissions")
    recruiter = relationship("User", foreign_keys=[created_by])
    interviews = relationship(
        "Interview", back_populates="submission",
        order_by="Interview.interview_date", cascade="all, delete-orphan"
    )


class Interview(Base):
    __tablename__ = "interviews"

    id = Column(String(36), primary_key=True, default=new_id)
    submission_id = Column(String(36), ForeignKey("submissions.id"), nullable=False, index=True)
    interview_date = Column(DateTime, nullable=False)
    interview_type = Column(String(20), nullable=False)  # phone, video, onsite
    round_type = Column(String(30), nullable=False)  # screening, technical, manager, final, hr
    meeting_link = Column(String, nullable=True)
    location = Column(String, nullable=True)
    notes = Column(Text, nullable=True)
    status = Column(String(20), nullable=False, default="scheduled")
    feedback = Column(Text, nullable=True)
    rating = Column(Integer, nullable=True)  # 1-5
    outcome = Column(String(20), nullable=True)
    next_steps = Column(Text, nullable=True)
    follow_up_date = Column(DateTime, nullable=True)
    created_at = Column(DateTime, default=utc_now)
    updated_at = Column(DateTime, default=utc_now)
    created_by = Column(String(36), ForeignKey("users.id"), nullable=False)

    submission = relationship("Submission", back_populates="interviews")
