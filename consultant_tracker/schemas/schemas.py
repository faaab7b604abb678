"""
Pydantic Schemas - Request/Response Validation

All API request and response schemas in one file for simplicity.
Every analytics operation returns its own typed record rather than a loose dict.
"""

from pydantic import BaseModel, ConfigDict, EmailStr, Field
from typing import Optional, List
from datetime import datetime
from enum import Enum


# ============================================================
# ENUMS
# ============================================================

class UserRole(str, Enum):
    admin = "admin"
    recruiter = "recruiter"


class ConsultantStatus(str, Enum):
    active = "active"
    placed = "placed"
    inactive = "inactive"


class VendorStatus(str, Enum):
    active = "active"
    pending = "pending"
    inactive = "inactive"


class SubmissionStatus(str, Enum):
    submitted = "submitted"
    under_review = "under_review"
    interview_scheduled = "interview_scheduled"
    hired = "hired"
    rejected = "rejected"
    withdrawn = "withdrawn"


class InterviewType(str, Enum):
    phone = "phone"
    video = "video"
    onsite = "onsite"


class RoundType(str, Enum):
    screening = "screening"
    technical = "technical"
    manager = "manager"
    final = "final"
    hr = "hr"


class InterviewStatus(str, Enum):
    scheduled = "scheduled"
    completed = "completed"
    cancelled = "cancelled"
    rescheduled = "rescheduled"


class InterviewOutcome(str, Enum):
    passed = "pass"
    fail = "fail"
    pending = "pending"
    hired = "hired"
    rejected = "rejected"


class Timeframe(str, Enum):
    daily = "daily"
    weekly = "weekly"
    monthly = "monthly"


class ReportPeriod(str, Enum):
    daily = "daily"
    weekly = "weekly"
    monthly = "monthly"


# Statuses after which follow-up tracking is cleared
TERMINAL_STATUSES = (SubmissionStatus.hired.value, SubmissionStatus.rejected.value)

# The five statuses every breakdown reports on
BREAKDOWN_STATUSES = (
    SubmissionStatus.submitted.value,
    SubmissionStatus.under_review.value,
    SubmissionStatus.interview_scheduled.value,
    SubmissionStatus.hired.value,
    SubmissionStatus.rejected.value,
)


class ORMModel(BaseModel):
    model_config = ConfigDict(from_attributes=True)


# ============================================================
# USER SCHEMAS
# ============================================================

class UserCreate(BaseModel):
    email: EmailStr
    username: Optional[str] = None
    password: str = Field(..., min_length=8)
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    role: UserRole = UserRole.recruiter

class UserUpdate(BaseModel):
    email: Optional[EmailStr] = None
    username: Optional[str] = None
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    role: Optional[UserRole] = None

class UserResponse(ORMModel):
    id: str
    email: Optional[str] = None
    username: Optional[str] = None
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    role: str
    is_password_temporary: Optional[bool] = None
    password_expires_at: Optional[datetime] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


# ============================================================
# CONSULTANT SCHEMAS
# ============================================================

class ConsultantCreate(BaseModel):
    first_name: str = Field(..., min_length=1, max_length=100)
    last_name: str = Field(..., min_length=1, max_length=100)
    email: EmailStr
    phone: Optional[str] = None
    location: Optional[str] = None
    position: Optional[str] = None
    experience: Optional[str] = None
    skills: List[str] = []
    status: ConsultantStatus = ConsultantStatus.active

class ConsultantUpdate(BaseModel):
    first_name: Optional[str] = Field(None, min_length=1, max_length=100)
    last_name: Optional[str] = Field(None, min_length=1, max_length=100)
    email: Optional[EmailStr] = None
    phone: Optional[str] = None
    location: Optional[str] = None
    position: Optional[str] = None
    experience: Optional[str] = None
    skills: Optional[List[str]] = None
    status: Optional[ConsultantStatus] = None

class ConsultantResponse(ORMModel):
    id: str
    first_name: str
    last_name: str
    email: str
    phone: Optional[str] = None
    location: Optional[str] = None
    position: Optional[str] = None
    experience: Optional[str] = None
    skills: List[str] = []
    resume_url: Optional[str] = None
    resume_file_name: Optional[str] = None
    status: str
    created_by: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


# ============================================================
# VENDOR SCHEMAS
# ============================================================

class VendorCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=200)
    contact_person: Optional[str] = None
    email: Optional[EmailStr] = None
    phone: Optional[str] = None
    location: Optional[str] = None
    specialties: List[str] = []
    status: VendorStatus = VendorStatus.active
    notes: Optional[str] = None
    recruiter_id: Optional[str] = None  # defaults to the creating user

class VendorUpdate(BaseModel):
    name: Optional[str] = Field(None, min_length=1, max_length=200)
    contact_person: Optional[str] = None
    email: Optional[EmailStr] = None
    phone: Optional[str] = None
    location: Optional[str] = None
    specialties: Optional[List[str]] = None
    status: Optional[VendorStatus] = None
    notes: Optional[str] = None
    recruiter_id: Optional[str] = None

class VendorResponse(ORMModel):
    id: str
    name: str
    contact_person: Optional[str] = None
    email: Optional[str] = None
    phone: Optional[str] = None
    location: Optional[str] = None
    specialties: List[str] = []
    status: str
    notes: Optional[str] = None
    partnership_date: Optional[datetime] = None
    recruiter_id: str
    created_by: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


# ============================================================
# SUBMISSION SCHEMAS
# ============================================================

class SubmissionCreate(BaseModel):
    consultant_id: str
    vendor_id: str
    position_title: str = Field(..., min_length=1, max_length=200)
    client_name: Optional[str] = None
    end_client_name: Optional[str] = None
    status: SubmissionStatus = SubmissionStatus.submitted
    submission_date: datetime
    last_vendor_contact: Optional[datetime] = None
    next_follow_up_date: Optional[datetime] = None
    vendor_feedback: Optional[str] = None
    notes: Optional[str] = None

class SubmissionUpdate(BaseModel):
    """Partial update. Only fields present in the request body are written."""
    consultant_id: Optional[str] = None
    vendor_id: Optional[str] = None
    position_title: Optional[str] = Field(None, min_length=1, max_length=200)
    client_name: Optional[str] = None
    end_client_name: Optional[str] = None
    status: Optional[SubmissionStatus] = None
    submission_date: Optional[datetime] = None
    last_vendor_contact: Optional[datetime] = None
    next_follow_up_date: Optional[datetime] = None
    vendor_feedback: Optional[str] = None
    notes: Optional[str] = None

class SubmissionResponse(ORMModel):
    id: str
    consultant_id: str
    vendor_id: str
    position_title: str
    client_name: Optional[str] = None
    end_client_name: Optional[str] = None
    status: str
    submission_date: datetime
    last_vendor_contact: Optional[datetime] = None
    next_follow_up_date: Optional[datetime] = None
    vendor_feedback: Optional[str] = None
    vendor_feedback_updated_at: Optional[datetime] = None
    notes: Optional[str] = None
    notes_updated_at: Optional[datetime] = None
    created_by: str
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


# ============================================================
# INTERVIEW SCHEMAS
# ============================================================

class InterviewCreate(BaseModel):
    submission_id: str
    interview_date: datetime
    interview_type: InterviewType
    round_type: RoundType
    meeting_link: Optional[str] = None
    location: Optional[str] = None
    notes: Optional[str] = None
    status: InterviewStatus = InterviewStatus.scheduled

class InterviewUpdate(BaseModel):
    interview_date: Optional[datetime] = None
    interview_type: Optional[InterviewType] = None
    round_type: Optional[RoundType] = None
    meeting_link: Optional[str] = None
    location: Optional[str] = None
    notes: Optional[str] = None
    status: Optional[InterviewStatus] = None
    feedback: Optional[str] = None
    rating: Optional[int] = Field(None, ge=1, le=5)
    outcome: Optional[InterviewOutcome] = None
    next_steps: Optional[str] = None
    follow_up_date: Optional[datetime] = None

class InterviewResponse(ORMModel):
    id: str
    submission_id: str
    interview_date: datetime
    interview_type: str
    round_type: str
    meeting_link: Optional[str] = None
    location: Optional[str] = None
    notes: Optional[str] = None
    status: str
    feedback: Optional[str] = None
    rating: Optional[int] = None
    outcome: Optional[str] = None
    next_steps: Optional[str] = None
    follow_up_date: Optional[datetime] = None
    created_by: str
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


# ============================================================
# COMPOSITE SCHEMAS (entity + relations)
# ============================================================

class SubmissionDetailResponse(SubmissionResponse):
    consultant: Optional[ConsultantResponse] = None
    vendor: Optional[VendorResponse] = None
    recruiter: Optional[UserResponse] = None
    interviews: List[InterviewResponse] = []

class ConsultantDetailResponse(ConsultantResponse):
    submissions: List[SubmissionDetailResponse] = []

class VendorDetailResponse(VendorResponse):
    submissions: List[SubmissionDetailResponse] = []

class InterviewDetailResponse(InterviewResponse):
    submission: Optional[SubmissionDetailResponse] = None


# ============================================================
# ANALYTICS SCHEMAS
# ============================================================

class StatusBreakdown(BaseModel):
    submitted: int = 0
    under_review: int = 0
    interview_scheduled: int = 0
    hired: int = 0
    rejected: int = 0

class DashboardStats(BaseModel):
    submitted: int
    pending: int  # under_review
    interviews: int  # interview_scheduled
    hired: int
    rejected: int

class PeriodCount(BaseModel):
    period: str
    count: int

class ConsultantAnalytics(BaseModel):
    consultant_id: str
    consultant_name: str
    total_submissions: int
    status_breakdown: StatusBreakdown
    time_based_submissions: Optional[List[PeriodCount]] = None

class RecruiterAnalytics(BaseModel):
    recruiter_id: str
    recruiter_name: str
    recruiter_email: str
    total_submissions: int
    consultants_worked_with: int
    status_breakdown: StatusBreakdown
    success_rate: int
    time_based_data: Optional[List[PeriodCount]] = None

class SubmissionProgression(StatusBreakdown):
    waiting_for_vendor_update: int = 0

class ConversionRates(BaseModel):
    submitted_to_interview: int
    interview_to_hired: int
    overall_success: int

class SubmissionAnalytics(BaseModel):
    total_submissions: int
    submissions_progression: SubmissionProgression
    time_based_submissions: List[PeriodCount] = []
    average_time_to_interview: float
    conversion_rates: ConversionRates

class VendorPerformance(BaseModel):
    vendor_id: str
    vendor_name: str
    total_submissions: int
    interviews_count: int
    placements_count: int
    placement_rate: int

class VendorTrend(BaseModel):
    month: str
    total_submissions: int
    total_interviews: int
    total_placements: int

class VendorSummary(BaseModel):
    total_active_vendors: int
    overall_placement_rate: int
    most_requested_skill: Optional[str] = None
    monthly_growth_rate: int

class VendorAnalytics(BaseModel):
    vendors: List[VendorPerformance]
    monthly_trends: List[VendorTrend]
    summary: VendorSummary

class VendorSkillMetric(BaseModel):
    vendor_id: str
    vendor_name: str
    skill: str
    submission_count: int
    placement_count: int

class VendorSkillMetricsResponse(BaseModel):
    vendor_skills: List[VendorSkillMetric]

class FollowUpReminder(BaseModel):
    id: str
    consultant_name: str
    vendor_name: str
    position_title: str
    status: str
    next_follow_up_date: datetime
    last_vendor_contact: Optional[datetime] = None
    vendor_feedback: Optional[str] = None
    days_since_contact: int
    days_past_due: int

class ConsultantActivity(BaseModel):
    consultant_id: str
    consultant_name: str
    new_submissions: int
    interviews_scheduled: int
    interviews_completed: int
    recent_placements: int
    last_activity_date: Optional[datetime] = None

class ActivityTrend(BaseModel):
    date: str
    submission_count: int
    interview_count: int
    placement_count: int

class ConsultantActivityReport(BaseModel):
    consultant_activity: List[ConsultantActivity]
    activity_trends: List[ActivityTrend]

class ConsultantSummary(BaseModel):
    total_active_consultants: int
    today_submissions: int
    week_interviews: int
    month_placements: int
    avg_response_time: float  # days from submission to first vendor contact


# ============================================================
# REPORT SCHEMAS
# ============================================================

class ReportSendRequest(BaseModel):
    report_type: ReportPeriod

class ReportSendResponse(BaseModel):
    success: bool
    message: str


# ============================================================
# GENERIC SCHEMAS
# ============================================================

class MessageResponse(BaseModel):
    message: str
    success: bool = True

class ErrorResponse(BaseModel):
    message: str
    error_type: str
