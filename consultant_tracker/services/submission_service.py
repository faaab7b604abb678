"""
Submission Service - store operations for consultants, vendors, submissions
and interviews.

Status transitions are trusted as given. Two side effects are enforced:
- a submission whose status ends up hired or rejected has no next follow-up date
- creating an interview moves its submission to interview_scheduled
"""

import csv
import io
from datetime import datetime
from enum import Enum
from typing import List, Optional, Tuple

from sqlalchemy import String, cast, or_
from sqlalchemy.orm import Session, selectinload

from consultant_tracker.core.logging_config import app_logger as logger
from consultant_tracker.db.models import Consultant, Interview, Submission, Vendor, utc_now
from consultant_tracker.schemas.schemas import (
    TERMINAL_STATUSES,
    ConsultantCreate, ConsultantUpdate, InterviewCreate, InterviewUpdate,
    SubmissionCreate, SubmissionStatus, SubmissionUpdate, VendorCreate, VendorUpdate,
)


def _plain(values: dict) -> dict:
    """Enum members to their stored string values."""
    return {key: (value.value if isinstance(value, Enum) else value) for key, value in values.items()}


def _apply(instance, values: dict) -> None:
    for key, value in values.items():
        setattr(instance, key, value)
    instance.updated_at = utc_now()


def _submission_relations():
    return (
        selectinload(Submission.consultant),
        selectinload(Submission.vendor),
        selectinload(Submission.recruiter),
        selectinload(Submission.interviews),
    )


# ============================================================
# CONSULTANTS
# ============================================================

def list_consultants(
    db: Session,
    user_id: Optional[str] = None,
    search: Optional[str] = None,
    status: Optional[str] = None,
) -> List[Consultant]:
    query = db.query(Consultant)
    if user_id:
        query = query.filter(Consultant.created_by == user_id)
    if status:
        query = query.filter(Consultant.status == status)
    if search:
        pattern = f"%{search}%"
        query = query.filter(or_(
            Consultant.first_name.ilike(pattern),
            Consultant.last_name.ilike(pattern),
            Consultant.email.ilike(pattern),
            cast(Consultant.skills, String).ilike(pattern),
        ))
    return query.order_by(Consultant.created_at.desc()).all()


def get_consultant(db: Session, consultant_id: str) -> Optional[Consultant]:
    return (
        db.query(Consultant)
        .options(
            selectinload(Consultant.submissions).selectinload(Submission.vendor),
            selectinload(Consultant.submissions).selectinload(Submission.recruiter),
            selectinload(Consultant.submissions).selectinload(Submission.interviews),
        )
        .filter(Consultant.id == consultant_id)
        .first()
    )


def create_consultant(
    db: Session,
    data: ConsultantCreate,
    created_by: str,
    resume: Optional[Tuple[str, str]] = None,
) -> Consultant:
    consultant = Consultant(**_plain(data.model_dump()), created_by=created_by)
    if resume:
        consultant.resume_url, consultant.resume_file_name = resume
    db.add(consultant)
    db.commit()
    db.refresh(consultant)
    logger.info(f"[Consultants] Created {consultant.id} ({consultant.full_name})")
    return consultant


def update_consultant(
    db: Session,
    consultant_id: str,
    data: ConsultantUpdate,
    resume: Optional[Tuple[str, str]] = None,
) -> Optional[Consultant]:
    consultant = db.get(Consultant, consultant_id)
    if not consultant:
        return None
    values = _plain(data.model_dump(exclude_unset=True))
    if resume:
        values["resume_url"], values["resume_file_name"] = resume
    _apply(consultant, values)
    db.commit()
    db.refresh(consultant)
    return consultant


def delete_consultant(db: Session, consultant_id: str) -> bool:
    consultant = db.get(Consultant, consultant_id)
    if not consultant:
        return False
    db.delete(consultant)
    db.commit()
    logger.info(f"[Consultants] Deleted {consultant_id}")
    return True


# ============================================================
# VENDORS
# ============================================================

def list_vendors(
    db: Session,
    user_id: Optional[str] = None,
    search: Optional[str] = None,
    status: Optional[str] = None,
) -> List[Vendor]:
    """Recruiters see the vendors they are the point of contact for."""
    query = db.query(Vendor)
    if user_id:
        query = query.filter(Vendor.recruiter_id == user_id)
    if status:
        query = query.filter(Vendor.status == status)
    if search:
        pattern = f"%{search}%"
        query = query.filter(or_(
            Vendor.name.ilike(pattern),
            Vendor.contact_person.ilike(pattern),
            cast(Vendor.specialties, String).ilike(pattern),
        ))
    return query.order_by(Vendor.created_at.desc()).all()


def get_vendor(db: Session, vendor_id: str) -> Optional[Vendor]:
    return (
        db.query(Vendor)
        .options(
            selectinload(Vendor.submissions).selectinload(Submission.consultant),
            selectinload(Vendor.submissions).selectinload(Submission.recruiter),
            selectinload(Vendor.submissions).selectinload(Submission.interviews),
        )
        .filter(Vendor.id == vendor_id)
        .first()
    )


def create_vendor(db: Session, data: VendorCreate, created_by: str) -> Vendor:
    values = _plain(data.model_dump())
    values["recruiter_id"] = values.get("recruiter_id") or created_by
    vendor = Vendor(**values, created_by=created_by)
    db.add(vendor)
    db.commit()
    db.refresh(vendor)
    logger.info(f"[Vendors] Created {vendor.id} ({vendor.name})")
    return vendor


def update_vendor(db: Session, vendor_id: str, data: VendorUpdate) -> Optional[Vendor]:
    vendor = db.get(Vendor, vendor_id)
    if not vendor:
        return None
    _apply(vendor, _plain(data.model_dump(exclude_unset=True)))
    db.commit()
    db.refresh(vendor)
    return vendor


def delete_vendor(db: Session, vendor_id: str) -> bool:
    vendor = db.get(Vendor, vendor_id)
    if not vendor:
        return False
    db.delete(vendor)
    db.commit()
    logger.info(f"[Vendors] Deleted {vendor_id}")
    return True


# ============================================================
# SUBMISSIONS
# ============================================================

def list_submissions(
    db: Session,
    user_id: Optional[str] = None,
    status: Optional[str] = None,
    date_from: Optional[datetime] = None,
    date_to: Optional[datetime] = None,
    consultant_id: Optional[str] = None,
    vendor_id: Optional[str] = None,
    limit: Optional[int] = None,
) -> List[Submission]:
    """Submissions with their consultant, vendor, recruiter and interviews, newest first."""
    query = db.query(Submission).options(*_submission_relations())
    if user_id:
        query = query.filter(Submission.created_by == user_id)
    if status:
        query = query.filter(Submission.status == status)
    if consultant_id:
        query = query.filter(Submission.consultant_id == consultant_id)
    if vendor_id:
        query = query.filter(Submission.vendor_id == vendor_id)
    if date_from:
        query = query.filter(Submission.submission_date >= date_from)
    if date_to:
        query = query.filter(Submission.submission_date <= date_to)
    query = query.order_by(Submission.submission_date.desc(), Submission.created_at.desc())
    if limit:
        query = query.limit(limit)
    return query.all()


def get_submission(db: Session, submission_id: str) -> Optional[Submission]:
    return (
        db.query(Submission)
        .options(*_submission_relations())
        .filter(Submission.id == submission_id)
        .first()
    )


def _clear_follow_up_if_terminal(submission: Submission) -> None:
    if submission.status in TERMINAL_STATUSES:
        submission.next_follow_up_date = None


def create_submission(db: Session, data: SubmissionCreate, created_by: str) -> Submission:
    now = utc_now()
    submission = Submission(**_plain(data.model_dump()), created_by=created_by)
    submission.notes_updated_at = now if data.notes else None
    submission.vendor_feedback_updated_at = now if data.vendor_feedback else None
    _clear_follow_up_if_terminal(submission)

    db.add(submission)
    db.commit()
    db.refresh(submission)
    logger.info(f"[Submissions] Created {submission.id} for consultant {submission.consultant_id}")
    return submission


def update_submission(db: Session, submission_id: str, data: SubmissionUpdate) -> Optional[Submission]:
    """
    Partial update. Only fields present in the payload are written.

    If the resulting status is hired or rejected the next follow-up date is
    cleared, whatever the payload says.
    """
    submission = db.get(Submission, submission_id)
    if not submission:
        return None

    now = utc_now()
    values = _plain(data.model_dump(exclude_unset=True))

    if "notes" in values and values["notes"] != submission.notes:
        values["notes_updated_at"] = now
    if "vendor_feedback" in values and values["vendor_feedback"] != submission.vendor_feedback:
        values["vendor_feedback_updated_at"] = now

    _apply(submission, values)
    _clear_follow_up_if_terminal(submission)

    db.commit()
    db.refresh(submission)
    return submission


def delete_submission(db: Session, submission_id: str) -> bool:
    submission = db.get(Submission, submission_id)
    if not submission:
        return False
    db.delete(submission)
    db.commit()
    logger.info(f"[Submissions] Deleted {submission_id}")
    return True


CSV_HEADERS = ["Consultant Name", "Vendor", "Position", "Client", "Status", "Submission Date", "Notes"]


def export_submissions_csv(db: Session, user_id: Optional[str] = None) -> str:
    """CSV of the caller's submissions, one row per submission."""
    buffer = io.StringIO()
    writer = csv.writer(buffer, quoting=csv.QUOTE_MINIMAL, lineterminator="\n")
    writer.writerow(CSV_HEADERS)

    for submission in list_submissions(db, user_id=user_id):
        writer.writerow([
            submission.consultant.full_name if submission.consultant else "",
            submission.vendor.name if submission.vendor else "",
            submission.position_title,
            submission.client_name or "",
            submission.status,
            submission.submission_date.strftime("%Y-%m-%d"),
            submission.notes or "",
        ])

    return buffer.getvalue()


# ============================================================
# INTERVIEWS
# ============================================================

def list_interviews(
    db: Session,
    upcoming: bool = False,
    date_from: Optional[datetime] = None,
    date_to: Optional[datetime] = None,
    submission_id: Optional[str] = None,
    limit: Optional[int] = None,
    now: Optional[datetime] = None,
) -> List[Interview]:
    """Interviews with their submission, consultant and vendor, earliest first."""
    query = db.query(Interview).options(
        selectinload(Interview.submission).selectinload(Submission.consultant),
        selectinload(Interview.submission).selectinload(Submission.vendor),
    )
    if submission_id:
        query = query.filter(Interview.submission_id == submission_id)
    if upcoming:
        query = query.filter(Interview.interview_date >= (now or utc_now()))
    if date_from:
        query = query.filter(Interview.interview_date >= date_from)
    if date_to:
        query = query.filter(Interview.interview_date <= date_to)
    query = query.order_by(Interview.interview_date.asc())
    if limit:
        query = query.limit(limit)
    return query.all()


def get_interview(db: Session, interview_id: str) -> Optional[Interview]:
    return (
        db.query(Interview)
        .options(selectinload(Interview.submission))
        .filter(Interview.id == interview_id)
        .first()
    )


def create_interview(db: Session, data: InterviewCreate, created_by: str) -> Optional[Interview]:
    """
    Record an interview and move its submission to interview_scheduled,
    whatever its previous status. Returns None if the submission does not exist.
    """
    submission = db.get(Submission, data.submission_id)
    if not submission:
        return None

    interview = Interview(**_plain(data.model_dump()), created_by=created_by)
    db.add(interview)

    submission.status = SubmissionStatus.interview_scheduled.value
    submission.updated_at = utc_now()

    db.commit()
    db.refresh(interview)
    logger.info(f"[Interviews] Created {interview.id} for submission {submission.id}")
    return interview


def update_interview(db: Session, interview_id: str, data: InterviewUpdate) -> Optional[Interview]:
    interview = db.get(Interview, interview_id)
    if not interview:
        return None
    _apply(interview, _plain(data.model_dump(exclude_unset=True)))
    db.commit()
    db.refresh(interview)
    return interview


def delete_interview(db: Session, interview_id: str) -> bool:
    interview = db.get(Interview, interview_id)
    if not interview:
        return False
    db.delete(interview)
    db.commit()
    return True
