from datetime import date, datetime
from zoneinfo import ZoneInfo

import pytest

from consultant_tracker.services.email_client import EmailDeliveryError
from consultant_tracker.services.report_service import (
    DEFAULT_STATUS_COLOR, ReportRow, ReportService, render_report_html,
    report_period_range, report_subject, status_color, summarize_by_recruiter, to_local, to_utc,
)
from tests.conftest import make_consultant, make_submission, make_user, make_vendor

WEDNESDAY = datetime(2024, 3, 13, 19, 0)


class FakeEmailClient:
    def __init__(self, result=True, error=None):
        self.result = result
        self.error = error
        self.sent = []

    def send_html(self, sender, recipients, subject, html):
        if self.error:
            raise self.error
        self.sent.append((sender, list(recipients), subject, html))
        return self.result


def _row(**overrides):
    values = dict(
        submission_date=datetime(2024, 3, 12, 10, 0),
        consultant_name="John Smith",
        position_title="Senior Java Developer",
        client_name="Acme",
        end_client_name="N/A",
        vendor_name="TechCorp Solutions",
        status="submitted",
        submitted_by="Rita Recruiter",
    )
    values.update(overrides)
    return ReportRow(**values)


# ============================================================
# PERIODS
# ============================================================

def test_daily_period_is_yesterday():
    start, end = report_period_range("daily", WEDNESDAY)
    assert start == datetime(2024, 3, 12)
    assert end == datetime(2024, 3, 12, 23, 59, 59, 999999)


def test_weekly_period_is_previous_sunday_to_saturday():
    start, end = report_period_range("weekly", WEDNESDAY)
    assert start == datetime(2024, 3, 3)
    assert end == datetime(2024, 3, 9, 23, 59, 59, 999999)


def test_monthly_period_is_previous_calendar_month():
    start, end = report_period_range("monthly", WEDNESDAY)
    assert start == datetime(2024, 2, 1)
    assert end == datetime(2024, 2, 29, 23, 59, 59, 999999)


def test_monthly_period_crosses_year_boundary():
    start, end = report_period_range("monthly", datetime(2024, 1, 10, 8, 0))
    assert start == datetime(2023, 12, 1)
    assert end.date() == date(2023, 12, 31)


def test_unknown_period():
    with pytest.raises(ValueError):
        report_period_range("hourly", WEDNESDAY)


# ============================================================
# RENDERING
# ============================================================

def test_empty_report_says_so_and_counts_zero():
    html = render_report_html([], "weekly", date(2024, 3, 8))

    assert "No submissions found for this weekly period." in html
    assert "No recruiter activity found for this period." in html
    assert 'color: #3b82f6;">0</div>' in html
    assert "<tbody>" not in html


def test_report_lists_submissions_and_recruiters():
    rows = [
        _row(),
        _row(consultant_name="Sarah Johnson", status="hired"),
        _row(consultant_name="Mike Chen", vendor_name="CloudFirst Systems", submitted_by="Otto Other", status="on_hold"),
    ]

    html = render_report_html(rows, "daily", date(2024, 3, 13))

    assert "Daily Submission Report" in html
    assert "Generated on March 13, 2024" in html
    assert 'color: #3b82f6;">3</div>' in html
    assert "Sarah Johnson" in html
    assert "Otto Other" in html
    assert "INTERVIEW SCHEDULED" not in html
    assert "ON HOLD" in html
    assert status_color("hired") in html
    assert DEFAULT_STATUS_COLOR in html
    assert "No submissions found" not in html


def test_report_escapes_user_text():
    html = render_report_html([_row(consultant_name="<script>alert(1)</script>")], "daily", date(2024, 3, 13))

    assert "<script>" not in html
    assert "&lt;script&gt;" in html


def test_status_colors():
    assert status_color("submitted") == "#3b82f6"
    assert status_color("hired") == "#10b981"
    assert status_color("withdrawn") == DEFAULT_STATUS_COLOR


def test_subject():
    assert report_subject("weekly", date(2024, 3, 8)) == "Weekly Submission Report - March 08, 2024"


def test_summarize_by_recruiter():
    rows = [
        _row(),
        _row(consultant_name="Sarah Johnson"),
        _row(vendor_name="CloudFirst Systems"),
        _row(submitted_by="Otto Other"),
    ]

    summaries = summarize_by_recruiter(rows)

    assert [(s.name, s.submissions, s.consultants, s.vendors) for s in summaries] == [
        ("Rita Recruiter", 3, 2, 2),
        ("Otto Other", 1, 1, 1),
    ]


# ============================================================
# SERVICE
# ============================================================

@pytest.fixture
def seeded(db, recruiter):
    consultant = make_consultant(db, first_name="Jane", last_name="Doe")
    vendor = make_vendor(db, recruiter)
    make_submission(db, consultant, vendor, recruiter, submission_date=datetime(2024, 3, 12, 11, 0))
    make_submission(db, consultant, vendor, recruiter, submission_date=datetime(2024, 3, 1, 11, 0))

    other = make_user(db, first_name="Otto", last_name="Other")
    make_submission(db, make_consultant(db, first_name="Mike", last_name="Chen"), vendor, other,
                    submission_date=datetime(2024, 3, 12, 15, 0))
    return db


def test_send_renders_period_and_delivers(seeded, session_factory):
    email = FakeEmailClient()
    service = ReportService(session_factory=session_factory, email_client=email, clock=lambda: WEDNESDAY,
                            timezone_name="America/New_York")

    assert service.send("daily", "reports@example.com", ["boss@example.com"]) is True

    [(sender, recipients, subject, html)] = email.sent
    assert sender == "reports@example.com"
    assert recipients == ["boss@example.com"]
    assert subject == "Daily Submission Report - March 13, 2024"
    assert 'color: #3b82f6;">2</div>' in html
    assert "Jane Doe" in html
    assert "Mike Chen" in html
    assert "Otto Other" in html


def test_preview_matches_sent_document(seeded, session_factory):
    email = FakeEmailClient()
    service = ReportService(session_factory=session_factory, email_client=email, clock=lambda: WEDNESDAY,
                            timezone_name="America/New_York")

    service.send("monthly", "reports@example.com", ["boss@example.com"])

    assert service.preview("monthly") == email.sent[0][3]
    assert "No submissions found for this monthly period." in email.sent[0][3]


def test_delivery_errors_propagate(seeded, session_factory):
    email = FakeEmailClient(error=EmailDeliveryError("SMTP down"))
    service = ReportService(session_factory=session_factory, email_client=email, clock=lambda: WEDNESDAY,
                            timezone_name="America/New_York")

    with pytest.raises(EmailDeliveryError):
        service.send("daily", "reports@example.com", ["boss@example.com"])


def test_local_bounds_convert_to_utc_across_daylight_saving():
    new_york = ZoneInfo("America/New_York")

    assert to_utc(datetime(2024, 3, 8), new_york) == datetime(2024, 3, 8, 5, 0)
    assert to_utc(datetime(2024, 3, 12), new_york) == datetime(2024, 3, 12, 4, 0)
    assert to_local(datetime(2024, 3, 9, 2, 0), new_york) == datetime(2024, 3, 8, 21, 0)


def test_daily_report_follows_the_report_timezone(db, recruiter, session_factory):
    vendor = make_vendor(db, recruiter)
    # Mar 8 21:00 in New York, stored as UTC
    make_submission(db, make_consultant(db, first_name="Evening", last_name="Local"), vendor, recruiter,
                    submission_date=datetime(2024, 3, 9, 2, 0))
    # Mar 7 22:00 in New York
    make_submission(db, make_consultant(db, first_name="Day", last_name="Before"), vendor, recruiter,
                    submission_date=datetime(2024, 3, 8, 3, 0))
    email = FakeEmailClient()
    service = ReportService(session_factory=session_factory, email_client=email,
                            clock=lambda: datetime(2024, 3, 9, 19, 0), timezone_name="America/New_York")

    service.send("daily", "reports@example.com", ["boss@example.com"])

    html = email.sent[0][3]
    assert 'color: #3b82f6;">1</div>' in html
    assert "Evening Local" in html
    assert "Day Before" not in html
    assert "Mar 08, 2024" in html
