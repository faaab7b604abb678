import re
from datetime import datetime, timedelta

import pytest

from consultant_tracker.services import analytics_service
from consultant_tracker.services.analytics_service import bucket_key, percentage
from tests.conftest import make_consultant, make_interview, make_submission, make_user, make_vendor


# ============================================================
# HELPERS
# ============================================================

@pytest.mark.parametrize("numerator", [0, 1, 7])
def test_percentage_is_zero_when_denominator_is_zero(numerator):
    assert percentage(numerator, 0) == 0


@pytest.mark.parametrize("numerator,denominator,expected", [
    (1, 3, 33),
    (2, 3, 67),
    (1, 8, 13),   # 12.5 rounds up
    (5, 200, 3),  # 2.5 rounds up
    (4, 10, 40),
    (10, 10, 100),
])
def test_percentage_rounds_half_up(numerator, denominator, expected):
    assert percentage(numerator, denominator) == expected


def test_bucket_keys_match_formats_for_every_day_of_a_leap_year():
    start = datetime(2024, 1, 1, 23, 59)
    for offset in range(366):
        moment = start + timedelta(days=offset)
        assert re.fullmatch(r"\d{4}-\d{2}-\d{2}", bucket_key(moment, "daily"))
        assert re.fullmatch(r"\d{4}-W\d{2}", bucket_key(moment, "weekly"))
        assert re.fullmatch(r"\d{4}-\d{2}", bucket_key(moment, "monthly"))


def test_bucket_key_examples():
    moment = datetime(2024, 1, 17, 8, 30)
    assert bucket_key(moment, "daily") == "2024-01-17"
    assert bucket_key(moment, "weekly") == "2024-W03"
    assert bucket_key(moment, "monthly") == "2024-01"


def test_weekly_bucket_uses_iso_year_at_year_boundary():
    assert bucket_key(datetime(2021, 1, 1), "weekly") == "2020-W53"
    assert bucket_key(datetime(2024, 12, 30), "weekly") == "2025-W01"


def test_dashboard_date_range_for_a_leap_february():
    start, end = analytics_service.dashboard_date_range("monthly", month=2, year=2024)
    assert start == datetime(2024, 2, 1)
    assert end.date() == datetime(2024, 2, 29).date()
    assert end.hour == 23


def test_weekly_dashboard_range_stops_at_month_end():
    start, end = analytics_service.dashboard_date_range("weekly", week=5, month=3, year=2024)
    assert start == datetime(2024, 3, 29)
    assert end == datetime(2024, 3, 31, 23, 59, 59, 999999)

    start, end = analytics_service.dashboard_date_range("weekly", week=2, month=3, year=2024)
    assert (start, end.date()) == (datetime(2024, 3, 8), datetime(2024, 3, 14).date())


def test_weekly_dashboard_range_past_month_end_counts_nothing(db, recruiter):
    consultant = make_consultant(db)
    vendor = make_vendor(db, recruiter)
    make_submission(db, consultant, vendor, recruiter, submission_date=datetime(2024, 3, 1, 10, 0))
    make_submission(db, consultant, vendor, recruiter, submission_date=datetime(2024, 3, 8, 10, 0))

    date_from, date_to = analytics_service.dashboard_date_range("weekly", week=6, month=2, year=2024)
    stats = analytics_service.get_dashboard_stats(db, date_from=date_from, date_to=date_to)

    assert date_from > date_to
    assert stats.submitted == 0


def test_dashboard_date_range_defaults_to_current_sunday_week():
    wednesday = datetime(2024, 3, 13, 11, 0)
    start, end = analytics_service.dashboard_date_range(now=wednesday)
    assert start == datetime(2024, 3, 10)
    assert end.date() == datetime(2024, 3, 16).date()


# ============================================================
# DASHBOARD / PIPELINE
# ============================================================

def _pipeline(db, recruiter, statuses, submission_date=datetime(2024, 3, 1, 10, 0)):
    consultant = make_consultant(db)
    vendor = make_vendor(db, recruiter)
    return [
        make_submission(db, consultant, vendor, recruiter, status=status, submission_date=submission_date)
        for status in statuses
    ]


def test_overall_success_rate_with_four_of_ten_hired(db, recruiter):
    _pipeline(db, recruiter, ["hired"] * 4 + ["submitted"] * 3 + ["interview_scheduled"] * 2 + ["rejected"])

    analytics = analytics_service.get_submission_analytics(db)

    assert analytics.total_submissions == 10
    assert analytics.conversion_rates.overall_success == 40
    assert analytics.conversion_rates.submitted_to_interview == 20
    assert analytics.conversion_rates.interview_to_hired == 200


def test_submission_analytics_with_no_data_is_all_zero(db):
    analytics = analytics_service.get_submission_analytics(db, timeframe="monthly")

    assert analytics.total_submissions == 0
    assert analytics.time_based_submissions == []
    assert analytics.average_time_to_interview == 0.0
    assert analytics.conversion_rates.submitted_to_interview == 0
    assert analytics.conversion_rates.interview_to_hired == 0
    assert analytics.conversion_rates.overall_success == 0


def test_waiting_for_vendor_update_is_submitted_plus_under_review(db, recruiter):
    _pipeline(db, recruiter, ["submitted", "submitted", "under_review", "hired", "withdrawn"])

    progression = analytics_service.get_submission_analytics(db).submissions_progression

    assert progression.submitted == 2
    assert progression.under_review == 1
    assert progression.waiting_for_vendor_update == 3


def test_average_time_to_interview_uses_first_interview(db, recruiter):
    first, second = _pipeline(db, recruiter, ["interview_scheduled", "interview_scheduled"],
                              submission_date=datetime(2024, 1, 1, 9, 0))
    make_interview(db, first, recruiter, interview_date=datetime(2024, 1, 4, 9, 0))
    make_interview(db, second, recruiter, interview_date=datetime(2024, 1, 10, 9, 0))
    make_interview(db, second, recruiter, interview_date=datetime(2024, 1, 2, 9, 0))

    analytics = analytics_service.get_submission_analytics(db)

    assert analytics.average_time_to_interview == 2.0


def test_dashboard_stats_are_scoped_to_the_recruiter(db, recruiter):
    other = make_user(db, first_name="Otto", last_name="Other")
    _pipeline(db, recruiter, ["submitted", "under_review", "interview_scheduled", "hired", "rejected"])
    _pipeline(db, other, ["submitted", "submitted"])

    own = analytics_service.get_dashboard_stats(db, user_id=recruiter.id)
    everyone = analytics_service.get_dashboard_stats(db)

    assert (own.submitted, own.pending, own.interviews, own.hired, own.rejected) == (1, 1, 1, 1, 1)
    assert everyone.submitted == 3


def test_dashboard_stats_respect_date_range(db, recruiter):
    consultant = make_consultant(db)
    vendor = make_vendor(db, recruiter)
    make_submission(db, consultant, vendor, recruiter, submission_date=datetime(2024, 2, 28))
    make_submission(db, consultant, vendor, recruiter, submission_date=datetime(2024, 3, 2))

    stats = analytics_service.get_dashboard_stats(
        db, date_from=datetime(2024, 3, 1), date_to=datetime(2024, 3, 31, 23, 59)
    )

    assert stats.submitted == 1


# ============================================================
# CONSULTANTS / RECRUITERS
# ============================================================

def test_consultant_analytics_ordered_by_total_descending(db, recruiter):
    vendor = make_vendor(db, recruiter)
    quiet = make_consultant(db, first_name="Quiet", last_name="One")
    busy = make_consultant(db, first_name="Busy", last_name="Bee")
    make_submission(db, quiet, vendor, recruiter)
    for day in (1, 2, 20):
        make_submission(db, busy, vendor, recruiter, submission_date=datetime(2024, 1, day))

    results = analytics_service.get_consultant_analytics(db, timeframe="monthly")

    assert [r.consultant_name for r in results] == ["Busy Bee", "Quiet One"]
    assert results[0].total_submissions == 3
    assert [(p.period, p.count) for p in results[0].time_based_submissions] == [("2024-01", 3)]


def test_consultant_analytics_without_timeframe_has_no_series(db, recruiter):
    _pipeline(db, recruiter, ["submitted"])

    results = analytics_service.get_consultant_analytics(db)

    assert results[0].time_based_submissions is None


def test_recruiter_success_rate_one_of_five(db, recruiter):
    vendor = make_vendor(db, recruiter)
    consultants = [make_consultant(db, first_name=f"C{i}") for i in range(3)]
    statuses = ["hired", "submitted", "submitted", "rejected", "under_review"]
    for i, status in enumerate(statuses):
        make_submission(db, consultants[i % 3], vendor, recruiter, status=status)

    [result] = analytics_service.get_recruiter_analytics(db, timeframe="daily")

    assert result.recruiter_name == "Rita Recruiter"
    assert result.total_submissions == 5
    assert result.success_rate == 20
    assert result.consultants_worked_with == 3
    assert result.status_breakdown.hired == 1
    assert result.time_based_data[0].period == "2024-03-01"


def test_recruiter_name_falls_back_to_email(db):
    nameless = make_user(db, first_name=None, last_name=None, email="nameless@example.com")
    _pipeline(db, nameless, ["submitted"])

    [result] = analytics_service.get_recruiter_analytics(db)

    assert result.recruiter_name == "nameless@example.com"


# ============================================================
# VENDORS
# ============================================================

def test_vendor_analytics_scoped_by_point_of_contact(db, recruiter):
    other = make_user(db, first_name="Otto", last_name="Other")
    java = make_consultant(db, skills=["Java", "AWS"])
    react = make_consultant(db, first_name="Sarah", skills=["React", "AWS"])
    own_vendor = make_vendor(db, recruiter, name="TechCorp Solutions")
    other_vendor = make_vendor(db, other, name="CloudFirst Systems")

    make_submission(db, java, own_vendor, recruiter, status="hired", submission_date=datetime(2024, 2, 10))
    make_submission(db, react, own_vendor, recruiter, status="submitted", submission_date=datetime(2024, 3, 5))
    with_interview = make_submission(db, react, own_vendor, recruiter, status="rejected",
                                     submission_date=datetime(2024, 3, 6))
    make_interview(db, with_interview, recruiter)
    make_submission(db, java, other_vendor, other, submission_date=datetime(2024, 3, 7))

    analytics = analytics_service.get_vendor_analytics(db, user_id=recruiter.id, now=datetime(2024, 3, 15))

    assert [v.vendor_name for v in analytics.vendors] == ["TechCorp Solutions"]
    vendor = analytics.vendors[0]
    assert (vendor.total_submissions, vendor.interviews_count, vendor.placements_count) == (3, 1, 1)
    assert vendor.placement_rate == 33
    assert [t.month for t in analytics.monthly_trends] == ["2024-02", "2024-03"]
    assert analytics.summary.total_active_vendors == 1
    assert analytics.summary.overall_placement_rate == 33
    assert analytics.summary.most_requested_skill == "AWS"
    assert analytics.summary.monthly_growth_rate == 100


def test_vendor_analytics_skill_filter(db, recruiter):
    vendor = make_vendor(db, recruiter)
    make_submission(db, make_consultant(db, skills=["Python"]), vendor, recruiter, status="hired")
    make_submission(db, make_consultant(db, skills=["React"]), vendor, recruiter)

    analytics = analytics_service.get_vendor_analytics(db, skill="python", now=datetime(2024, 3, 15))

    assert analytics.vendors[0].total_submissions == 1
    assert analytics.summary.overall_placement_rate == 100


def test_vendor_analytics_empty(db):
    analytics = analytics_service.get_vendor_analytics(db, now=datetime(2024, 3, 15))

    assert analytics.vendors == []
    assert analytics.summary.overall_placement_rate == 0
    assert analytics.summary.most_requested_skill is None
    assert analytics.summary.monthly_growth_rate == 0


def test_vendor_skill_metrics(db, recruiter):
    vendor = make_vendor(db, recruiter)
    consultant = make_consultant(db, skills=["Java", "Spring Boot"])
    make_submission(db, consultant, vendor, recruiter, status="hired")
    make_submission(db, consultant, vendor, recruiter)

    metrics = analytics_service.get_vendor_skill_metrics(db)

    assert [(m.skill, m.submission_count, m.placement_count) for m in metrics] == [
        ("Java", 2, 1),
        ("Spring Boot", 2, 1),
    ]


# ============================================================
# CONSULTANT ACTIVITY
# ============================================================

def test_consultant_summary(db, recruiter):
    now = datetime(2024, 3, 13, 12, 0)  # Wednesday
    vendor = make_vendor(db, recruiter)
    active = make_consultant(db, created_by=recruiter)
    make_consultant(db, first_name="Placed", status="placed", created_by=recruiter)

    today = make_submission(db, active, vendor, recruiter, submission_date=datetime(2024, 3, 13, 9, 0),
                            last_vendor_contact=datetime(2024, 3, 13, 21, 0))
    make_interview(db, today, recruiter, interview_date=datetime(2024, 3, 11, 10, 0))
    make_submission(db, active, vendor, recruiter, status="hired", submission_date=datetime(2024, 3, 1),
                    last_vendor_contact=datetime(2024, 3, 3), updated_at=datetime(2024, 3, 12))

    summary = analytics_service.get_consultant_summary(db, user_id=recruiter.id, now=now)

    assert summary.total_active_consultants == 1
    assert summary.today_submissions == 1
    assert summary.week_interviews == 1
    assert summary.month_placements == 1
    assert summary.avg_response_time == 1.3


def test_consultant_activity_window(db, recruiter):
    now = datetime(2024, 3, 13, 12, 0)
    vendor = make_vendor(db, recruiter)
    consultant = make_consultant(db, created_by=recruiter)
    recent = make_submission(db, consultant, vendor, recruiter, submission_date=datetime(2024, 3, 12))
    make_interview(db, recent, recruiter, status="completed")
    make_submission(db, consultant, vendor, recruiter, submission_date=datetime(2024, 2, 1))

    report = analytics_service.get_consultant_activity(db, user_id=recruiter.id, timeframe="weekly", now=now)

    [activity] = report.consultant_activity
    assert activity.new_submissions == 1
    assert activity.interviews_completed == 1
    assert [(t.date, t.submission_count, t.interview_count) for t in report.activity_trends] == [
        ("2024-03-12", 1, 1)
    ]
