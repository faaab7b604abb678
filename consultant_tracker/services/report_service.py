"""
Report Service - submission reports for a period, rendered to HTML and
handed to the email channel.

Periods are calendar periods in the report timezone; their bounds are
converted to UTC before querying, since timestamps are stored as naive UTC:
- daily   = yesterday
- weekly  = the previous Sunday-Saturday week
- monthly = the previous calendar month

render_report_html() is a pure function of (rows, period, date), so
previews, scheduled sends and manual sends all produce the same document.
"""

from dataclasses import dataclass
from datetime import date, datetime, timedelta, timezone
from html import escape
from typing import Callable, List, Optional, Tuple
from zoneinfo import ZoneInfo

from sqlalchemy.orm import Session

from consultant_tracker.core.config import get_settings
from consultant_tracker.core.logging_config import report_logger as logger
from consultant_tracker.db.postgres import get_db_session
from consultant_tracker.services.analytics_service import week_bounds
from consultant_tracker.services.email_client import EmailClient, get_email_client
from consultant_tracker.services.submission_service import list_submissions

STATUS_COLORS = {
    "submitted": "#3b82f6",
    "under_review": "#f59e0b",
    "interview_scheduled": "#8b5cf6",
    "hired": "#10b981",
    "rejected": "#ef4444",
}
DEFAULT_STATUS_COLOR = "#6b7280"

NOT_AVAILABLE = "N/A"


@dataclass(frozen=True)
class ReportRow:
    submission_date: datetime
    consultant_name: str
    position_title: str
    client_name: str
    end_client_name: str
    vendor_name: str
    status: str
    submitted_by: str


@dataclass
class RecruiterSummary:
    name: str
    submissions: int
    consultants: int
    vendors: int


def local_clock(timezone_name: str) -> Callable[[], datetime]:
    """Wall-clock "now" in the given timezone, as a naive datetime."""
    zone = ZoneInfo(timezone_name)
    return lambda: datetime.now(zone).replace(tzinfo=None)


def to_utc(moment: datetime, zone: ZoneInfo) -> datetime:
    """Naive local wall-clock time in `zone` to naive UTC."""
    return moment.replace(tzinfo=zone).astimezone(timezone.utc).replace(tzinfo=None)


def to_local(moment: datetime, zone: ZoneInfo) -> datetime:
    """Naive UTC to naive local wall-clock time in `zone`."""
    return moment.replace(tzinfo=timezone.utc).astimezone(zone).replace(tzinfo=None)


def report_period_range(period: str, now: datetime) -> Tuple[datetime, datetime]:
    """Inclusive [start, end] of the calendar period before `now`, in now's wall-clock time."""
    today = now.replace(hour=0, minute=0, second=0, microsecond=0)
    last_moment = timedelta(microseconds=1)

    if period == "daily":
        start = today - timedelta(days=1)
        return start, today - last_moment
    if period == "weekly":
        this_week_start, _ = week_bounds(today)
        return this_week_start - timedelta(days=7), this_week_start - last_moment
    if period == "monthly":
        this_month_start = today.replace(day=1)
        previous_month_start = (this_month_start - timedelta(days=1)).replace(day=1)
        return previous_month_start, this_month_start - last_moment
    raise ValueError(f"Unknown report period: {period}")


def fetch_report_rows(
    db: Session, start: datetime, end: datetime, zone: Optional[ZoneInfo] = None
) -> List[ReportRow]:
    """
    All submissions between UTC bounds, regardless of who created them.
    With a zone, submission dates are shown in that zone's wall-clock time.
    """
    rows = []
    for submission in list_submissions(db, date_from=start, date_to=end):
        recruiter = submission.recruiter
        rows.append(ReportRow(
            submission_date=to_local(submission.submission_date, zone) if zone else submission.submission_date,
            consultant_name=submission.consultant.full_name if submission.consultant else NOT_AVAILABLE,
            position_title=submission.position_title,
            client_name=submission.client_name or NOT_AVAILABLE,
            end_client_name=submission.end_client_name or NOT_AVAILABLE,
            vendor_name=submission.vendor.name if submission.vendor else NOT_AVAILABLE,
            status=submission.status,
            submitted_by=recruiter.full_name if recruiter else "Unknown Recruiter",
        ))
    return rows


def summarize_by_recruiter(rows: List[ReportRow]) -> List[RecruiterSummary]:
    """Per-recruiter counts in order of first appearance."""
    grouped = {}
    for row in rows:
        entry = grouped.setdefault(row.submitted_by, {"count": 0, "consultants": set(), "vendors": set()})
        entry["count"] += 1
        entry["consultants"].add(row.consultant_name)
        entry["vendors"].add(row.vendor_name)

    return [
        RecruiterSummary(
            name=name,
            submissions=entry["count"],
            consultants=len(entry["consultants"]),
            vendors=len(entry["vendors"]),
        )
        for name, entry in grouped.items()
    ]


def report_title(period: str) -> str:
    return f"{period.capitalize()} Submission Report"


def report_subject(period: str, generated_on: date) -> str:
    return f"{report_title(period)} - {generated_on.strftime('%B %d, %Y')}"


def status_color(status: str) -> str:
    return STATUS_COLORS.get(status, DEFAULT_STATUS_COLOR)


# ============================================================
# HTML
# ============================================================

CELL = 'style="padding: 12px; text-align: left;"'
HEAD = 'style="padding: 15px; text-align: left; font-weight: 600;"'
HEAD_CENTER = 'style="padding: 15px; text-align: center; font-weight: 600;"'
SECTION = 'style="background: white; border-radius: 8px; overflow: hidden; box-shadow: 0 2px 10px rgba(0,0,0,0.1); margin-bottom: 30px;"'
SECTION_TITLE = 'style="color: #1e293b; margin: 0; padding: 20px; background: #f1f5f9; border-bottom: 1px solid #e2e8f0;"'
EMPTY = 'style="padding: 40px; text-align: center; color: #64748b;"'


def _summary_card(value: int, label: str, color: str) -> str:
    return f"""
        <div style="background: white; padding: 15px; border-radius: 6px; text-align: center;">
          <div style="font-size: 24px; font-weight: bold; color: {color};">{value}</div>
          <div style="color: #64748b; font-size: 14px;">{label}</div>
        </div>"""


def _recruiter_section(summaries: List[RecruiterSummary]) -> str:
    if not summaries:
        body = f'<div {EMPTY}><p>No recruiter activity found for this period.</p></div>'
    else:
        table_rows = "".join(
            f"""
          <tr style="border-bottom: 1px solid #e5e7eb;">
            <td {CELL}><div style="font-weight: 600;">{escape(s.name)}</div></td>
            <td style="padding: 12px; text-align: center; font-weight: 600; color: #3b82f6;">{s.submissions}</td>
            <td style="padding: 12px; text-align: center;">{s.consultants}</td>
            <td style="padding: 12px; text-align: center;">{s.vendors}</td>
          </tr>"""
            for s in summaries
        )
        body = f"""
      <div style="overflow-x: auto;">
        <table style="width: 100%; border-collapse: collapse;">
          <thead>
            <tr style="background: #f8fafc; color: #475569;">
              <th {HEAD}>Recruiter</th>
              <th {HEAD_CENTER}>Submissions</th>
              <th {HEAD_CENTER}>Consultants</th>
              <th {HEAD_CENTER}>Vendors</th>
            </tr>
          </thead>
          <tbody>{table_rows}
          </tbody>
        </table>
      </div>"""

    return f"""
    <div {SECTION}>
      <h2 {SECTION_TITLE}>Recruiter Performance</h2>{body}
    </div>"""


def _submission_row(row: ReportRow) -> str:
    label = row.status.replace("_", " ").upper()
    return f"""
          <tr style="border-bottom: 1px solid #e5e7eb;">
            <td {CELL}>{row.submission_date.strftime('%b %d, %Y')}</td>
            <td {CELL}>{escape(row.consultant_name)}</td>
            <td {CELL}>{escape(row.position_title)}</td>
            <td {CELL}>{escape(row.client_name)}</td>
            <td {CELL}>{escape(row.end_client_name)}</td>
            <td {CELL}>{escape(row.vendor_name)}</td>
            <td {CELL}>
              <span style="background-color: {status_color(row.status)}; color: white; padding: 4px 8px; border-radius: 4px; font-size: 12px;">{escape(label)}</span>
            </td>
            <td {CELL}>{escape(row.submitted_by)}</td>
          </tr>"""


def _detail_section(rows: List[ReportRow], period: str) -> str:
    if not rows:
        body = f'<div {EMPTY}><p style="font-size: 16px;">No submissions found for this {escape(period)} period.</p></div>'
    else:
        headers = "".join(
            f"<th {HEAD}>{name}</th>"
            for name in ("Date", "Consultant Name", "Position", "Client", "End Client", "Vendor", "Status", "Submitted By")
        )
        body = f"""
      <div style="overflow-x: auto;">
        <table style="width: 100%; border-collapse: collapse;">
          <thead>
            <tr style="background: #f8fafc; color: #475569;">{headers}</tr>
          </thead>
          <tbody>{"".join(_submission_row(row) for row in rows)}
          </tbody>
        </table>
      </div>"""

    return f"""
    <div {SECTION}>
      <h2 {SECTION_TITLE}>Detailed Submissions</h2>{body}
    </div>"""


def render_report_html(rows: List[ReportRow], period: str, generated_on: date) -> str:
    """Self-contained HTML report: summary, recruiter breakdown, submission details."""
    title = report_title(period)
    cards = "".join([
        _summary_card(len(rows), "Total Submissions", "#3b82f6"),
        _summary_card(len({r.consultant_name for r in rows}), "Unique Consultants", "#10b981"),
        _summary_card(len({r.vendor_name for r in rows}), "Vendors Engaged", "#f59e0b"),
        _summary_card(len({r.submitted_by for r in rows}), "Active Recruiters", "#8b5cf6"),
    ])

    return f"""<!DOCTYPE html>
<html>
<head>
  <meta charset="utf-8">
  <meta name="viewport" content="width=device-width, initial-scale=1.0">
  <title>{title}</title>
</head>
<body style="font-family: 'Segoe UI', Tahoma, Geneva, Verdana, sans-serif; line-height: 1.6; color: #333; max-width: 1200px; margin: 0 auto; padding: 20px;">
  <div style="background: linear-gradient(135deg, #667eea 0%, #764ba2 100%); color: white; padding: 30px; border-radius: 10px; margin-bottom: 30px;">
    <h1 style="margin: 0; font-size: 28px; font-weight: 300;">{title}</h1>
    <p style="margin: 10px 0 0 0; font-size: 16px; opacity: 0.9;">Generated on {generated_on.strftime('%B %d, %Y')}</p>
  </div>

  <div style="background: #f8fafc; padding: 20px; border-radius: 8px; margin-bottom: 30px;">
    <h2 style="color: #1e293b; margin-top: 0;">Summary</h2>
    <div style="display: grid; grid-template-columns: repeat(auto-fit, minmax(200px, 1fr)); gap: 15px;">{cards}
    </div>
  </div>
{_recruiter_section(summarize_by_recruiter(rows))}
{_detail_section(rows, period)}
  <div style="margin-top: 30px; padding: 20px; background: #f1f5f9; border-radius: 8px; text-align: center; color: #64748b; font-size: 14px;">
    <p>This report was automatically generated by Consultant Tracker.</p>
    <p>For questions or support, please contact your system administrator.</p>
  </div>
</body>
</html>
"""


# ============================================================
# SERVICE
# ============================================================

class ReportService:
    """
    Builds and delivers period reports.

    The session factory, email channel and clock are injected so scheduled
    and manual sends share one code path and tests can swap each piece.
    The clock returns naive wall-clock time in the report timezone.
    """

    def __init__(
        self,
        session_factory=get_db_session,
        email_client: Optional[EmailClient] = None,
        clock: Optional[Callable[[], datetime]] = None,
        timezone_name: Optional[str] = None,
    ):
        self.session_factory = session_factory
        self.email_client = email_client or get_email_client()
        self.zone = ZoneInfo(timezone_name or get_settings().report_timezone)
        self.clock = clock or local_clock(self.zone.key)

    def render(self, db: Session, period: str) -> Tuple[str, str]:
        """(subject, html) for the period ending before now."""
        now = self.clock()
        start, end = report_period_range(period, now)
        rows = fetch_report_rows(db, to_utc(start, self.zone), to_utc(end, self.zone), self.zone)
        logger.info(f"[Reports] {period} report: {len(rows)} submissions between {start:%Y-%m-%d} and {end:%Y-%m-%d}")
        return report_subject(period, now.date()), render_report_html(rows, period, now.date())

    def preview(self, period: str) -> str:
        with self.session_factory() as db:
            return self.render(db, period)[1]

    def send(self, period: str, sender: str, recipients: List[str]) -> bool:
        """Render and email the report. EmailDeliveryError propagates to the caller."""
        with self.session_factory() as db:
            subject, html = self.render(db, period)
        return self.email_client.send_html(sender, recipients, subject, html)
