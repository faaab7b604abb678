"""
Analytics Service - status breakdowns, time buckets, conversion rates and
follow-up due-date math over submissions.

Every operation takes an owner filter `user_id` (None = admin, sees all) and
reads "now" once, so all relative-day math comes from a single clock read.
Counts are grouped in SQL; bucket keys are derived in Python so they are
identical on every database backend.
"""

from collections import Counter, defaultdict
from datetime import datetime, timedelta
from decimal import Decimal, ROUND_HALF_UP
from typing import Iterable, List, Optional, Tuple

from sqlalchemy import case, desc, distinct, exists, func
from sqlalchemy.orm import Session, selectinload

from consultant_tracker.db.models import Consultant, Interview, Submission, User, Vendor, utc_now
from consultant_tracker.schemas.schemas import (
    BREAKDOWN_STATUSES, TERMINAL_STATUSES,
    ActivityTrend, ConsultantActivity, ConsultantActivityReport, ConsultantAnalytics,
    ConsultantSummary, ConversionRates, DashboardStats, FollowUpReminder, PeriodCount,
    RecruiterAnalytics, StatusBreakdown, SubmissionAnalytics, SubmissionProgression,
    VendorAnalytics, VendorPerformance, VendorSkillMetric, VendorSummary, VendorTrend,
)

ACTIVITY_WINDOWS = {"daily": 1, "weekly": 7, "monthly": 30}


# ============================================================
# HELPERS
# ============================================================

def bucket_key(moment: datetime, timeframe: str) -> str:
    """
    Bucket label for a timestamp.

    daily   -> 2024-01-15
    weekly  -> 2024-W03 (ISO week, ISO year)
    monthly -> 2024-01
    """
    if timeframe == "daily":
        return moment.strftime("%Y-%m-%d")
    if timeframe == "weekly":
        iso_year, iso_week, _ = moment.isocalendar()
        return f"{iso_year}-W{iso_week:02d}"
    if timeframe == "monthly":
        return moment.strftime("%Y-%m")
    raise ValueError(f"Unknown timeframe: {timeframe}")


def percentage(numerator, denominator) -> int:
    """numerator / denominator * 100, rounded half-up. 0 when the denominator is 0."""
    if not denominator:
        return 0
    value = Decimal(numerator) * 100 / Decimal(denominator)
    return int(value.quantize(Decimal("1"), rounding=ROUND_HALF_UP))


def round_one(value: float) -> float:
    return float(Decimal(str(value)).quantize(Decimal("0.1"), rounding=ROUND_HALF_UP))


def bucket_counts(dates: Iterable[datetime], timeframe: str) -> List[PeriodCount]:
    """Count timestamps per bucket, ordered by bucket key."""
    counts = Counter(bucket_key(moment, timeframe) for moment in dates if moment is not None)
    return [PeriodCount(period=key, count=counts[key]) for key in sorted(counts)]


def week_bounds(now: datetime) -> Tuple[datetime, datetime]:
    """Sunday 00:00 through Saturday 23:59:59.999999 of the week containing now."""
    start = now.replace(hour=0, minute=0, second=0, microsecond=0)
    start -= timedelta(days=(start.weekday() + 1) % 7)
    return start, start + timedelta(days=7) - timedelta(microseconds=1)


def dashboard_date_range(
    timeframe: Optional[str] = None,
    week: Optional[int] = None,
    month: Optional[int] = None,
    year: Optional[int] = None,
    now: Optional[datetime] = None,
) -> Tuple[datetime, datetime]:
    """
    Date window for dashboard filters.

    weekly + week/month/year -> 7 days starting (week - 1) * 7 days after the 1st of the month,
                                cut off at the end of that month (empty past it)
    monthly + month/year     -> that calendar month
    yearly + year            -> that calendar year
    otherwise                -> the current Sunday-Saturday week
    """
    end_of_day = timedelta(days=1) - timedelta(microseconds=1)
    if month and year:
        next_month = datetime(year + 1, 1, 1) if month == 12 else datetime(year, month + 1, 1)
        month_end = next_month - timedelta(microseconds=1)
    if timeframe == "weekly" and week and month and year:
        start = datetime(year, month, 1) + timedelta(days=(week - 1) * 7)
        return start, min(start + timedelta(days=6) + end_of_day, month_end)
    if timeframe == "monthly" and month and year:
        return datetime(year, month, 1), month_end
    if timeframe == "yearly" and year:
        return datetime(year, 1, 1), datetime(year + 1, 1, 1) - timedelta(microseconds=1)
    return week_bounds(now or utc_now())


def _status_columns():
    return [
        func.sum(case((Submission.status == status, 1), else_=0)).label(status)
        for status in BREAKDOWN_STATUSES
    ]


def _breakdown(row) -> StatusBreakdown:
    return StatusBreakdown(**{status: int(getattr(row, status) or 0) for status in BREAKDOWN_STATUSES})


def _submission_conditions(
    user_id: Optional[str] = None,
    date_from: Optional[datetime] = None,
    date_to: Optional[datetime] = None,
    consultant_id: Optional[str] = None,
) -> list:
    conditions = []
    if user_id:
        conditions.append(Submission.created_by == user_id)
    if consultant_id:
        conditions.append(Submission.consultant_id == consultant_id)
    if date_from:
        conditions.append(Submission.submission_date >= date_from)
    if date_to:
        conditions.append(Submission.submission_date <= date_to)
    return conditions


def _dates_by(db: Session, group_column, conditions) -> dict:
    """submission_date lists keyed by a grouping column, for time-bucketed series."""
    grouped = defaultdict(list)
    for key, submitted_at in db.query(group_column, Submission.submission_date).filter(*conditions):
        grouped[key].append(submitted_at)
    return grouped


# ============================================================
# DASHBOARD
# ============================================================

def get_dashboard_stats(
    db: Session,
    user_id: Optional[str] = None,
    date_from: Optional[datetime] = None,
    date_to: Optional[datetime] = None,
) -> DashboardStats:
    """Submission counts per status bucket."""
    conditions = _submission_conditions(user_id, date_from, date_to)
    row = db.query(*_status_columns()).filter(*conditions).one()
    breakdown = _breakdown(row)

    return DashboardStats(
        submitted=breakdown.submitted,
        pending=breakdown.under_review,
        interviews=breakdown.interview_scheduled,
        hired=breakdown.hired,
        rejected=breakdown.rejected,
    )


def get_weekly_activity(db: Session, date_from: datetime, date_to: datetime) -> List[PeriodCount]:
    """Submissions per day in the range."""
    conditions = _submission_conditions(date_from=date_from, date_to=date_to)
    dates = [row.submission_date for row in db.query(Submission.submission_date).filter(*conditions)]
    return bucket_counts(dates, "daily")


# ============================================================
# CONSULTANT / RECRUITER / PIPELINE
# ============================================================

def get_consultant_analytics(
    db: Session,
    user_id: Optional[str] = None,
    consultant_id: Optional[str] = None,
    timeframe: Optional[str] = None,
    date_from: Optional[datetime] = None,
    date_to: Optional[datetime] = None,
) -> List[ConsultantAnalytics]:
    """Per-consultant totals and status breakdown, busiest consultant first."""
    conditions = _submission_conditions(user_id, date_from, date_to, consultant_id)
    total = func.count(Submission.id).label("total")

    rows = (
        db.query(Consultant.id, Consultant.first_name, Consultant.last_name, total, *_status_columns())
        .select_from(Submission)
        .join(Consultant, Submission.consultant_id == Consultant.id)
        .filter(*conditions)
        .group_by(Consultant.id, Consultant.first_name, Consultant.last_name)
        .order_by(desc(total), Consultant.first_name, Consultant.last_name)
        .all()
    )

    dates = _dates_by(db, Submission.consultant_id, conditions) if timeframe else {}

    return [
        ConsultantAnalytics(
            consultant_id=row.id,
            consultant_name=f"{row.first_name} {row.last_name}",
            total_submissions=int(row.total),
            status_breakdown=_breakdown(row),
            time_based_submissions=bucket_counts(dates.get(row.id, []), timeframe) if timeframe else None,
        )
        for row in rows
    ]


def get_recruiter_analytics(
    db: Session,
    user_id: Optional[str] = None,
    timeframe: Optional[str] = None,
    date_from: Optional[datetime] = None,
    date_to: Optional[datetime] = None,
) -> List[RecruiterAnalytics]:
    """Per-recruiter totals, distinct consultants and success rate (hired / total)."""
    conditions = _submission_conditions(user_id, date_from, date_to)
    total = func.count(Submission.id).label("total")

    rows = (
        db.query(
            User.id, User.first_name, User.last_name, User.email, total,
            func.count(distinct(Submission.consultant_id)).label("consultants"),
            *_status_columns(),
        )
        .select_from(Submission)
        .join(User, Submission.created_by == User.id)
        .filter(*conditions)
        .group_by(User.id, User.first_name, User.last_name, User.email)
        .order_by(desc(total), User.email)
        .all()
    )

    dates = _dates_by(db, Submission.created_by, conditions) if timeframe else {}

    results = []
    for row in rows:
        breakdown = _breakdown(row)
        name = f"{row.first_name or ''} {row.last_name or ''}".strip() or (row.email or "Unknown Recruiter")
        results.append(RecruiterAnalytics(
            recruiter_id=row.id,
            recruiter_name=name,
            recruiter_email=row.email or "",
            total_submissions=int(row.total),
            consultants_worked_with=int(row.consultants),
            status_breakdown=breakdown,
            success_rate=percentage(breakdown.hired, row.total),
            time_based_data=bucket_counts(dates.get(row.id, []), timeframe) if timeframe else None,
        ))
    return results


def get_submission_analytics(
    db: Session,
    user_id: Optional[str] = None,
    timeframe: Optional[str] = None,
    date_from: Optional[datetime] = None,
    date_to: Optional[datetime] = None,
) -> SubmissionAnalytics:
    """Pipeline totals, conversion rates and mean days from submission to first interview."""
    conditions = _submission_conditions(user_id, date_from, date_to)

    row = db.query(func.count(Submission.id).label("total"), *_status_columns()).filter(*conditions).one()
    total = int(row.total or 0)
    breakdown = _breakdown(row)

    series = []
    if timeframe:
        dates = [r.submission_date for r in db.query(Submission.submission_date).filter(*conditions)]
        series = bucket_counts(dates, timeframe)

    first_interviews = (
        db.query(Submission.submission_date, func.min(Interview.interview_date).label("first_interview"))
        .join(Interview, Interview.submission_id == Submission.id)
        .filter(*conditions)
        .group_by(Submission.id, Submission.submission_date)
        .all()
    )
    gaps = [
        (r.first_interview - r.submission_date) / timedelta(days=1)
        for r in first_interviews
    ]
    average_time_to_interview = round_one(sum(gaps) / len(gaps)) if gaps else 0.0

    return SubmissionAnalytics(
        total_submissions=total,
        submissions_progression=SubmissionProgression(
            **breakdown.model_dump(),
            waiting_for_vendor_update=breakdown.submitted + breakdown.under_review,
        ),
        time_based_submissions=series,
        average_time_to_interview=average_time_to_interview,
        conversion_rates=ConversionRates(
            submitted_to_interview=percentage(breakdown.interview_scheduled, total),
            interview_to_hired=percentage(breakdown.hired, breakdown.interview_scheduled),
            overall_success=percentage(breakdown.hired, total),
        ),
    )


# ============================================================
# VENDORS
# ============================================================

def _vendor_rows(db: Session, user_id: Optional[str]):
    """One row per submission with its vendor, consultant skills and whether any interview exists."""
    has_interview = exists().where(Interview.submission_id == Submission.id).label("has_interview")
    query = (
        db.query(
            Submission.id, Submission.status, Submission.submission_date,
            Vendor.id.label("vendor_id"), Vendor.name.label("vendor_name"),
            Consultant.skills, has_interview,
        )
        .join(Vendor, Submission.vendor_id == Vendor.id)
        .join(Consultant, Submission.consultant_id == Consultant.id)
    )
    if user_id:
        query = query.filter(Vendor.recruiter_id == user_id)
    return query.all()


def _has_skill(skills, skill: str) -> bool:
    wanted = skill.strip().lower()
    return any(str(s).strip().lower() == wanted for s in (skills or []))


def get_vendor_analytics(
    db: Session,
    user_id: Optional[str] = None,
    skill: Optional[str] = None,
    now: Optional[datetime] = None,
) -> VendorAnalytics:
    """
    Per-vendor submissions, interviews and placements, a monthly trend and summary KPIs.
    Recruiters see the vendors they are the point of contact for.
    """
    now = now or utc_now()
    rows = _vendor_rows(db, user_id)
    if skill:
        rows = [r for r in rows if _has_skill(r.skills, skill)]

    per_vendor = {}
    for r in rows:
        stats = per_vendor.setdefault(r.vendor_id, {"name": r.vendor_name, "total": 0, "interviews": 0, "hired": 0})
        stats["total"] += 1
        if r.status == "interview_scheduled" or r.has_interview:
            stats["interviews"] += 1
        if r.status == "hired":
            stats["hired"] += 1

    vendors = [
        VendorPerformance(
            vendor_id=vendor_id,
            vendor_name=stats["name"],
            total_submissions=stats["total"],
            interviews_count=stats["interviews"],
            placements_count=stats["hired"],
            placement_rate=percentage(stats["hired"], stats["total"]),
        )
        for vendor_id, stats in per_vendor.items()
    ]
    vendors.sort(key=lambda v: (-v.total_submissions, v.vendor_name))

    months = defaultdict(lambda: {"total": 0, "interviews": 0, "hired": 0})
    for r in rows:
        month = months[bucket_key(r.submission_date, "monthly")]
        month["total"] += 1
        if r.status == "interview_scheduled":
            month["interviews"] += 1
        if r.status == "hired":
            month["hired"] += 1

    trends = [
        VendorTrend(month=key, total_submissions=m["total"], total_interviews=m["interviews"], total_placements=m["hired"])
        for key, m in sorted(months.items())
    ]

    active_query = db.query(func.count(Vendor.id)).filter(Vendor.status == "active")
    if user_id:
        active_query = active_query.filter(Vendor.recruiter_id == user_id)

    skill_counts = Counter(s for r in rows for s in (r.skills or []))
    most_requested = min(skill_counts.items(), key=lambda item: (-item[1], item[0]))[0] if skill_counts else None

    this_month = bucket_key(now, "monthly")
    last_month = bucket_key(now.replace(day=1) - timedelta(days=1), "monthly")
    current = months[this_month]["total"] if this_month in months else 0
    previous = months[last_month]["total"] if last_month in months else 0

    return VendorAnalytics(
        vendors=vendors,
        monthly_trends=trends,
        summary=VendorSummary(
            total_active_vendors=int(active_query.scalar() or 0),
            overall_placement_rate=percentage(sum(1 for r in rows if r.status == "hired"), len(rows)),
            most_requested_skill=most_requested,
            monthly_growth_rate=percentage(current - previous, previous),
        ),
    )


def get_vendor_skill_metrics(db: Session, user_id: Optional[str] = None) -> List[VendorSkillMetric]:
    """Submissions and placements per (vendor, consultant skill)."""
    counts = {}
    for r in _vendor_rows(db, user_id):
        for skill in set(r.skills or []):
            entry = counts.setdefault((r.vendor_id, skill), {"name": r.vendor_name, "total": 0, "hired": 0})
            entry["total"] += 1
            if r.status == "hired":
                entry["hired"] += 1

    metrics = [
        VendorSkillMetric(
            vendor_id=vendor_id, vendor_name=entry["name"], skill=skill,
            submission_count=entry["total"], placement_count=entry["hired"],
        )
        for (vendor_id, skill), entry in counts.items()
    ]
    metrics.sort(key=lambda m: (m.vendor_name, m.skill))
    return metrics


# ============================================================
# FOLLOW-UPS
# ============================================================

def get_follow_up_reminders(
    db: Session,
    user_id: Optional[str] = None,
    overdue: bool = False,
    now: Optional[datetime] = None,
) -> List[FollowUpReminder]:
    """
    Non-terminal submissions with a pending follow-up date, soonest first.

    days_past_due is whole elapsed days since the follow-up date: positive is
    overdue, 0 is due within the last day, negative is days remaining.
    """
    now = now or utc_now()

    query = (
        db.query(Submission)
        .options(selectinload(Submission.consultant), selectinload(Submission.vendor))
        .filter(Submission.next_follow_up_date.isnot(None))
        .filter(Submission.status.notin_(TERMINAL_STATUSES))
    )
    if user_id:
        query = query.filter(Submission.created_by == user_id)
    if overdue:
        query = query.filter(Submission.next_follow_up_date <= now)

    reminders = []
    for submission in query.order_by(Submission.next_follow_up_date.asc()).all():
        last_contact = submission.last_vendor_contact
        reminders.append(FollowUpReminder(
            id=submission.id,
            consultant_name=submission.consultant.full_name if submission.consultant else "Unknown",
            vendor_name=submission.vendor.name if submission.vendor else "Unknown",
            position_title=submission.position_title,
            status=submission.status,
            next_follow_up_date=submission.next_follow_up_date,
            last_vendor_contact=last_contact,
            vendor_feedback=submission.vendor_feedback,
            days_since_contact=(now - last_contact) // timedelta(days=1) if last_contact else 0,
            days_past_due=(now - submission.next_follow_up_date) // timedelta(days=1),
        ))
    return reminders


# ============================================================
# CONSULTANT ACTIVITY
# ============================================================

def _scoped_consultants(db: Session, user_id: Optional[str]):
    query = db.query(Consultant).options(
        selectinload(Consultant.submissions).selectinload(Submission.interviews)
    )
    if user_id:
        query = query.filter(Consultant.created_by == user_id)
    return query.order_by(Consultant.first_name, Consultant.last_name).all()


def get_consultant_activity(
    db: Session,
    user_id: Optional[str] = None,
    timeframe: str = "weekly",
    now: Optional[datetime] = None,
) -> ConsultantActivityReport:
    """Per-consultant activity over the last 1, 7 or 30 days plus a daily trend."""
    now = now or utc_now()
    since = now - timedelta(days=ACTIVITY_WINDOWS.get(timeframe, 7))

    activity = []
    trends = defaultdict(lambda: {"submissions": 0, "interviews": 0, "hired": 0})

    for consultant in _scoped_consultants(db, user_id):
        submissions = consultant.submissions
        activity.append(ConsultantActivity(
            consultant_id=consultant.id,
            consultant_name=consultant.full_name,
            new_submissions=sum(
                1 for s in submissions if s.status == "submitted" and s.submission_date >= since
            ),
            interviews_scheduled=sum(1 for s in submissions if s.status == "interview_scheduled"),
            interviews_completed=sum(
                1 for s in submissions for i in s.interviews if i.status == "completed"
            ),
            recent_placements=sum(
                1 for s in submissions if s.status == "hired" and s.updated_at and s.updated_at >= since
            ),
            last_activity_date=max((s.updated_at for s in submissions if s.updated_at), default=None),
        ))

        for s in submissions:
            if s.submission_date < since:
                continue
            day = trends[bucket_key(s.submission_date, "daily")]
            day["submissions"] += 1
            day["interviews"] += len(s.interviews)
            if s.status == "hired":
                day["hired"] += 1

    return ConsultantActivityReport(
        consultant_activity=activity,
        activity_trends=[
            ActivityTrend(
                date=key,
                submission_count=day["submissions"],
                interview_count=day["interviews"],
                placement_count=day["hired"],
            )
            for key, day in sorted(trends.items())
        ],
    )


def get_consultant_summary(
    db: Session,
    user_id: Optional[str] = None,
    now: Optional[datetime] = None,
) -> ConsultantSummary:
    """Headline consultant numbers: today, this week (from Sunday), this month."""
    now = now or utc_now()
    today = now.replace(hour=0, minute=0, second=0, microsecond=0)
    week_start, _ = week_bounds(now)
    month_start = today.replace(day=1)

    consultants = _scoped_consultants(db, user_id)
    submissions = [s for c in consultants for s in c.submissions]

    response_days = [
        (s.last_vendor_contact - s.submission_date) / timedelta(days=1)
        for s in submissions
        if s.last_vendor_contact and s.last_vendor_contact >= s.submission_date
    ]

    return ConsultantSummary(
        total_active_consultants=sum(1 for c in consultants if c.status == "active"),
        today_submissions=sum(1 for s in submissions if s.submission_date.date() == today.date()),
        week_interviews=sum(1 for s in submissions for i in s.interviews if i.interview_date >= week_start),
        month_placements=sum(
            1 for s in submissions if s.status == "hired" and s.updated_at and s.updated_at >= month_start
        ),
        avg_response_time=round_one(sum(response_days) / len(response_days)) if response_days else 0.0,
    )
