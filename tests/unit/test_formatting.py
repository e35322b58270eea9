"""Unit tests for UI display helpers."""

from datetime import datetime, timezone

import pytest

from jobsphere.formatting import (
    APPLICANT_COLUMNS,
    SEEKER_COLUMNS,
    active_badge,
    applicants_csv,
    applicants_frame,
    company_label,
    format_date,
    job_subtitle,
    seeker_applications_frame,
    status_badge,
    truncate,
)
from jobsphere.models import Application, Job, Profile


@pytest.fixture
def application():
    company = Profile(id="c1", user_type="company", full_name="Ada", email="", company_name="Acme")
    job = Job(
        id="j1", company_id="c1", title="Frontend Developer", description="",
        location="Berlin", job_type="Full-time", required_skills=["React", "TypeScript"],
        company=company,
    )
    applicant = Profile(
        id="s1", user_type="jobseeker", full_name="Sam Seeker",
        email="sam@example.test", skills=["react.js"],
    )
    return Application(
        id="a1", job_id="j1", applicant_id="s1", status="In Review",
        applied_at=datetime(2024, 2, 1, tzinfo=timezone.utc), job=job, applicant=applicant,
    )


@pytest.mark.unit
def test_truncate_marks_only_cut_text():
    assert truncate("abcdef", 3) == "abc..."
    assert truncate("abc", 3) == "abc"
    assert truncate(None, 5) == ""


@pytest.mark.unit
def test_company_label_fallbacks():
    assert company_label(Profile(id="c", user_type="company", full_name="Ada", email="", company_name="Acme")) == "Acme"
    assert company_label(Profile(id="c", user_type="company", full_name="Ada", email="")) == "Ada"
    assert company_label(None) == "Company"


@pytest.mark.unit
def test_badges():
    assert status_badge("Accepted") == ":green[Accepted]"
    assert status_badge("Rejected") == ":red[Rejected]"
    assert status_badge("Unknown") == ":gray[Unknown]"
    assert active_badge(True) == ":green[Active]"
    assert active_badge(False) == ":red[Inactive]"


@pytest.mark.unit
def test_job_subtitle_and_dates(application):
    assert job_subtitle(application.job) == "Berlin • Full-time"
    assert format_date(application.applied_at) == "2024-02-01"
    assert format_date(None) == "—"


@pytest.mark.unit
def test_applicants_frame_splits_skills(application):
    frame = applicants_frame([application])
    assert list(frame.columns) == APPLICANT_COLUMNS
    row = frame.iloc[0]
    assert row["Applicant"] == "Sam Seeker"
    assert row["Matching skills"] == "React"
    assert row["Missing skills"] == "TypeScript"


@pytest.mark.unit
def test_empty_frames_keep_their_columns():
    assert list(applicants_frame([]).columns) == APPLICANT_COLUMNS
    assert list(seeker_applications_frame([]).columns) == SEEKER_COLUMNS


@pytest.mark.unit
def test_seeker_frame_shows_company(application):
    frame = seeker_applications_frame([application])
    assert frame.iloc[0]["Company"] == "Acme"
    assert frame.iloc[0]["Status"] == "In Review"


@pytest.mark.unit
def test_applicants_csv_has_header_and_row(application):
    lines = applicants_csv([application]).decode("utf-8").splitlines()
    assert lines[0] == ",".join(APPLICANT_COLUMNS)
    assert lines[1].startswith("Sam Seeker,sam@example.test,Frontend Developer,In Review,2024-02-01")
