import csv
import io
from datetime import datetime

import pytest

from consultant_tracker.schemas.schemas import InterviewCreate, SubmissionCreate, SubmissionUpdate
from consultant_tracker.services import submission_service
from tests.conftest import make_consultant, make_submission, make_vendor

FOLLOW_UP = datetime(2024, 3, 20, 9, 0)


@pytest.fixture
def submission(db, recruiter):
    consultant = make_consultant(db)
    vendor = make_vendor(db, recruiter)
    return make_submission(db, consultant, vendor, recruiter, next_follow_up_date=FOLLOW_UP)


@pytest.mark.parametrize("status", ["hired", "rejected"])
def test_terminal_status_clears_follow_up(db, submission, status):
    updated = submission_service.update_submission(
        db, submission.id, SubmissionUpdate(status=status, next_follow_up_date=FOLLOW_UP)
    )

    assert updated.status == status
    assert updated.next_follow_up_date is None


def test_follow_up_cannot_be_set_on_a_hired_submission(db, submission):
    submission_service.update_submission(db, submission.id, SubmissionUpdate(status="hired"))

    updated = submission_service.update_submission(
        db, submission.id, SubmissionUpdate(next_follow_up_date=FOLLOW_UP)
    )

    assert updated.next_follow_up_date is None


def test_create_with_terminal_status_has_no_follow_up(db, recruiter):
    consultant = make_consultant(db)
    vendor = make_vendor(db, recruiter)

    created = submission_service.create_submission(db, SubmissionCreate(
        consultant_id=consultant.id,
        vendor_id=vendor.id,
        position_title="Data Engineer",
        status="rejected",
        submission_date=datetime(2024, 3, 1),
        next_follow_up_date=FOLLOW_UP,
    ), created_by=recruiter.id)

    assert created.next_follow_up_date is None


def test_non_terminal_update_keeps_follow_up(db, submission):
    updated = submission_service.update_submission(db, submission.id, SubmissionUpdate(status="under_review"))

    assert updated.next_follow_up_date == FOLLOW_UP


def test_backward_transitions_are_allowed(db, submission):
    submission_service.update_submission(db, submission.id, SubmissionUpdate(status="hired"))

    updated = submission_service.update_submission(db, submission.id, SubmissionUpdate(status="submitted"))

    assert updated.status == "submitted"


@pytest.mark.parametrize("prior", ["submitted", "under_review", "hired", "rejected"])
def test_creating_an_interview_schedules_the_submission(db, recruiter, prior):
    consultant = make_consultant(db)
    vendor = make_vendor(db, recruiter)
    submission = make_submission(db, consultant, vendor, recruiter, status=prior)

    interview = submission_service.create_interview(db, InterviewCreate(
        submission_id=submission.id,
        interview_date=datetime(2024, 3, 12, 10, 0),
        interview_type="video",
        round_type="technical",
    ), created_by=recruiter.id)

    db.refresh(submission)
    assert interview.submission_id == submission.id
    assert submission.status == "interview_scheduled"


def test_interview_for_missing_submission(db, recruiter):
    interview = submission_service.create_interview(db, InterviewCreate(
        submission_id="missing",
        interview_date=datetime(2024, 3, 12, 10, 0),
        interview_type="phone",
        round_type="screening",
    ), created_by=recruiter.id)

    assert interview is None


def test_partial_update_leaves_other_fields(db, submission):
    updated = submission_service.update_submission(db, submission.id, SubmissionUpdate(client_name="Acme"))

    assert updated.client_name == "Acme"
    assert updated.position_title == "Senior Java Developer"
    assert updated.status == "submitted"


def test_notes_timestamp_changes_only_when_notes_change(db, submission):
    first = submission_service.update_submission(db, submission.id, SubmissionUpdate(notes="Called vendor"))
    stamped = first.notes_updated_at
    assert stamped is not None
    assert first.vendor_feedback_updated_at is None

    again = submission_service.update_submission(db, submission.id, SubmissionUpdate(notes="Called vendor"))
    assert again.notes_updated_at == stamped

    feedback = submission_service.update_submission(db, submission.id, SubmissionUpdate(vendor_feedback="Strong"))
    assert feedback.vendor_feedback_updated_at is not None


def test_list_submissions_newest_first_with_filters(db, recruiter):
    consultant = make_consultant(db)
    vendor = make_vendor(db, recruiter)
    older = make_submission(db, consultant, vendor, recruiter, submission_date=datetime(2024, 1, 5))
    newer = make_submission(db, consultant, vendor, recruiter, status="hired", submission_date=datetime(2024, 2, 5))

    assert [s.id for s in submission_service.list_submissions(db)] == [newer.id, older.id]
    assert [s.id for s in submission_service.list_submissions(db, status="hired")] == [newer.id]
    assert [s.id for s in submission_service.list_submissions(db, date_to=datetime(2024, 1, 31))] == [older.id]


def test_delete_submission(db, submission):
    assert submission_service.delete_submission(db, submission.id) is True
    assert submission_service.get_submission(db, submission.id) is None
    assert submission_service.delete_submission(db, submission.id) is False


def test_csv_export(db, recruiter):
    consultant = make_consultant(db, first_name="Jane", last_name="Doe")
    vendor = make_vendor(db, recruiter, name="CloudFirst Systems")
    make_submission(
        db, consultant, vendor, recruiter,
        client_name="Acme, Inc.", notes="Strong match", submission_date=datetime(2024, 3, 4, 16, 0),
    )

    rows = list(csv.reader(io.StringIO(submission_service.export_submissions_csv(db, user_id=recruiter.id))))

    assert rows[0] == submission_service.CSV_HEADERS
    assert rows[1] == [
        "Jane Doe", "CloudFirst Systems", "Senior Java Developer", "Acme, Inc.",
        "submitted", "2024-03-04", "Strong match",
    ]


def test_consultant_search(db, recruiter):
    make_consultant(db, first_name="Jane", last_name="Doe", skills=["Kubernetes"])
    make_consultant(db, first_name="Bob", last_name="Jones", skills=["React"])

    assert [c.first_name for c in submission_service.list_consultants(db, search="kube")] == ["Jane"]
    assert [c.first_name for c in submission_service.list_consultants(db, search="jon")] == ["Bob"]
