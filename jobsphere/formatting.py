"""Display helpers shared by the Streamlit pages: labels, previews, tables."""
from __future__ import annotations

from datetime import datetime

import pandas as pd

from jobsphere.matching import split_skills
from jobsphere.models import Application, ApplicationStatus, Job, Profile

_STATUS_COLORS: dict[str, str] = {
    ApplicationStatus.APPLIED.value: "blue",
    ApplicationStatus.IN_REVIEW.value: "orange",
    ApplicationStatus.SHORTLISTED.value: "violet",
    ApplicationStatus.REJECTED.value: "red",
    ApplicationStatus.ACCEPTED.value: "green",
}

APPLICANT_COLUMNS: list[str] = [
    "Applicant", "Email", "Job", "Status", "Applied on", "Matching skills", "Missing skills",
]
SEEKER_COLUMNS: list[str] = ["Job", "Company", "Location", "Type", "Status", "Applied on"]


def truncate(text: str | None, limit: int) -> str:
    text = text or ""
    return text[:limit] + ("..." if len(text) > limit else "")


def company_label(profile: Profile | None) -> str:
    if profile is None:
        return "Company"
    return profile.company_name or profile.full_name or "Company"


def status_badge(status: str) -> str:
    """Streamlit colored-text markup, e.g. ``:green[Accepted]``."""
    return f":{_STATUS_COLORS.get(status, 'gray')}[{status}]"


def active_badge(active: bool) -> str:
    return ":green[Active]" if active else ":red[Inactive]"


def job_subtitle(job: Job) -> str:
    return f"{job.location} • {job.job_type}"


def format_date(value: datetime | None) -> str:
    return value.strftime("%Y-%m-%d") if value else "—"


def applicants_frame(applications: list[Application]) -> pd.DataFrame:
    rows = []
    for app in applications:
        applicant, job = app.applicant, app.job
        matching, missing = split_skills(
            job.required_skills if job else [], applicant.skills if applicant else [],
        )
        rows.append({
            "Applicant": applicant.full_name if applicant else "",
            "Email": applicant.email if applicant else "",
            "Job": job.title if job else "",
            "Status": app.status,
            "Applied on": format_date(app.applied_at),
            "Matching skills": ", ".join(matching),
            "Missing skills": ", ".join(missing),
        })
    return pd.DataFrame(rows, columns=APPLICANT_COLUMNS)


def seeker_applications_frame(applications: list[Application]) -> pd.DataFrame:
    rows = []
    for app in applications:
        job = app.job
        rows.append({
            "Job": job.title if job else "",
            "Company": company_label(job.company) if job else "Company",
            "Location": job.location if job else "",
            "Type": job.job_type if job else "",
            "Status": app.status,
            "Applied on": format_date(app.applied_at),
        })
    return pd.DataFrame(rows, columns=SEEKER_COLUMNS)


def applicants_csv(applications: list[Application]) -> bytes:
    return applicants_frame(applications).to_csv(index=False).encode("utf-8")
