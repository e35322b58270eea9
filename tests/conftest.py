"""
Shared fixtures.

Service tests run against a small in-memory backend seeded with two
companies, two job seekers, five jobs (one inactive) and three applications:

    Acme   (c1): j1 Frontend Developer [React, TypeScript]   Berlin  Full-time
                 j2 Java Engineer      [Java]                Remote  Contract
                 j4 Office Manager     []  (inactive)        Berlin  Full-time
    Globex (c2): j3 Data Analyst       [SQL]                 Berlin  Part-time
                 j5 Generalist Intern  []                    Remote  Internship

    Sam (s1) [JavaScript, react]: a1 → j1 In Review, a3 → j3 Shortlisted
    Lee (s2) [Cobol]:             a2 → j2 Applied
"""
import copy
import os

import pytest

# Keep test runs from writing log files into the repo
os.environ.setdefault("JOBSPHERE_LOG_FILE", "0")

from jobsphere.backends import MemoryBackend
from jobsphere.company import CompanyDashboard
from jobsphere.models import Profile
from jobsphere.seeker import JobSeekerDashboard

PASSWORD = "secret123"

SEED = {
    "accounts": [
        {"email": "hr@acme.test", "password": PASSWORD},
        {"email": "hr@globex.test", "password": PASSWORD},
        {"email": "sam@example.test", "password": PASSWORD},
        {"email": "lee@example.test", "password": PASSWORD},
    ],
    "profiles": [
        {"id": "c1", "user_type": "company", "full_name": "Ada Admin",
         "email": "hr@acme.test", "company_name": "Acme"},
        {"id": "c2", "user_type": "company", "full_name": "Gus Grant",
         "email": "hr@globex.test", "company_name": "Globex"},
        {"id": "s1", "user_type": "jobseeker", "full_name": "Sam Seeker",
         "email": "sam@example.test", "skills": ["JavaScript", "react"],
         "experience": "Five years of frontend work."},
        {"id": "s2", "user_type": "jobseeker", "full_name": "Lee Learner",
         "email": "lee@example.test", "skills": ["Cobol"]},
    ],
    "jobs": [
        {"id": "j1", "company_id": "c1", "title": "Frontend Developer",
         "description": "Build user interfaces.", "location": "Berlin",
         "job_type": "Full-time", "required_skills": ["React", "TypeScript"],
         "created_at": "2024-01-01T00:00:00+00:00"},
        {"id": "j2", "company_id": "c1", "title": "Java Engineer",
         "description": "JVM services.", "location": "Remote",
         "job_type": "Contract", "required_skills": ["Java"],
         "created_at": "2024-01-02T00:00:00+00:00"},
        {"id": "j3", "company_id": "c2", "title": "Data Analyst",
         "description": "Dashboards and reports.", "location": "Berlin",
         "job_type": "Part-time", "required_skills": ["SQL"],
         "created_at": "2024-01-03T00:00:00+00:00"},
        {"id": "j4", "company_id": "c1", "title": "Office Manager",
         "description": "Keep the office running.", "location": "Berlin",
         "job_type": "Full-time", "required_skills": [], "is_active": False,
         "created_at": "2024-01-04T00:00:00+00:00"},
        {"id": "j5", "company_id": "c2", "title": "Generalist Intern",
         "description": "A bit of everything.", "location": "Remote",
         "job_type": "Internship", "required_skills": [],
         "created_at": "2024-01-05T00:00:00+00:00"},
    ],
    "applications": [
        {"id": "a1", "job_id": "j1", "applicant_id": "s1", "status": "In Review",
         "applied_at": "2024-02-01T00:00:00+00:00"},
        {"id": "a2", "job_id": "j2", "applicant_id": "s2", "status": "Applied",
         "applied_at": "2024-02-02T00:00:00+00:00"},
        {"id": "a3", "job_id": "j3", "applicant_id": "s1", "status": "Shortlisted",
         "applied_at": "2024-02-03T00:00:00+00:00"},
    ],
}


@pytest.fixture
def seed():
    return copy.deepcopy(SEED)


@pytest.fixture
def backend(seed):
    return MemoryBackend.from_seed(seed)


def _profile(backend, profile_id):
    return Profile.from_row(backend.select_one("profiles", eq={"id": profile_id}))


@pytest.fixture
def acme(backend):
    return _profile(backend, "c1")


@pytest.fixture
def sam(backend):
    return _profile(backend, "s1")


@pytest.fixture
def seeker(backend, sam):
    return JobSeekerDashboard(backend, sam)


@pytest.fixture
def company(backend, acme):
    return CompanyDashboard(backend, acme)


@pytest.fixture
def clean_env(monkeypatch):
    """Clear backend-related environment variables for config tests."""
    for key in ("SUPABASE_URL", "SUPABASE_ANON_KEY", "JOBSPHERE_BACKEND"):
        monkeypatch.delenv(key, raising=False)
    return monkeypatch
