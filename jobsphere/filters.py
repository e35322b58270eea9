"""Client-side filtering, recommendation and dashboard counts.

Everything here works on records already fetched from the backend and
returns new lists; inputs are never mutated.
"""
from __future__ import annotations

from dataclasses import dataclass, field

from jobsphere.log import get_logger
from jobsphere.matching import has_overlap, skills_match
from jobsphere.models import Application, ApplicationStatus, Job, PENDING_STATUSES

log = get_logger(__name__)


@dataclass
class SeekerStats:
    applied: int = 0
    in_review: int = 0
    shortlisted: int = 0


@dataclass
class CompanyStats:
    active_jobs: int = 0
    total_applicants: int = 0
    pending_review: int = 0


@dataclass
class AutoFilterResult:
    kept: list[Application] = field(default_factory=list)
    eliminated: int = 0

    @property
    def summary(self) -> str:
        if self.eliminated > 0:
            return (
                f"Auto-filtered: {self.eliminated} applicant(s) eliminated due to missing "
                f"required skills. Showing {len(self.kept)} matching applicant(s)."
            )
        return "All applicants have at least one matching skill!"


def _contains(haystack: str, needle: str) -> bool:
    return needle in (haystack or "").lower()


# ── Job seeker views ─────────────────────────────────────────────────────


def filter_jobs(
    jobs: list[Job],
    search: str = "",
    job_type: str = "",
    location: str = "",
) -> list[Job]:
    term = (search or "").lower()
    out: list[Job] = []
    for job in jobs:
        matches_search = _contains(job.title, term) or _contains(job.company_name, term)
        matches_type = not job_type or job.job_type == job_type
        matches_location = not location or job.location == location
        if matches_search and matches_type and matches_location:
            out.append(job)
    return out


def filter_by_status(applications: list[Application], status: str = "") -> list[Application]:
    if not status:
        return list(applications)
    return [a for a in applications if a.status == status]


def recommend_jobs(jobs: list[Job], skills: list[str], limit: int = 4) -> list[Job]:
    """Jobs sharing at least one skill with the seeker, in the given order."""
    picked = [j for j in jobs if has_overlap(j.required_skills, skills)]
    return picked[:limit]


def location_options(jobs: list[Job]) -> list[str]:
    return sorted({j.location for j in jobs if j.location})


def seeker_stats(applications: list[Application]) -> SeekerStats:
    return SeekerStats(
        applied=len(applications),
        in_review=sum(1 for a in applications if a.status == ApplicationStatus.IN_REVIEW.value),
        shortlisted=sum(1 for a in applications if a.status == ApplicationStatus.SHORTLISTED.value),
    )


# ── Company views ────────────────────────────────────────────────────────


def filter_applicants(
    applications: list[Application],
    search: str = "",
    job_id: str = "",
    status: str = "",
) -> list[Application]:
    term = (search or "").lower()
    out: list[Application] = []
    for app in applications:
        applicant = app.applicant
        name = applicant.full_name if applicant else ""
        skills = applicant.skills if applicant else []
        matches_search = _contains(name, term) or any(_contains(s, term) for s in skills)
        matches_job = not job_id or app.job_id == job_id
        matches_status = not status or app.status == status
        if matches_search and matches_job and matches_status:
            out.append(app)
    return out


def auto_filter_applicants(applications: list[Application]) -> AutoFilterResult:
    """Drop applicants with no skill in common with the job they applied to."""
    kept: list[Application] = []
    for app in applications:
        required = app.job.required_skills if app.job else []
        candidate = app.applicant.skills if app.applicant else []
        if skills_match(required, candidate):
            kept.append(app)
    result = AutoFilterResult(kept=kept, eliminated=len(applications) - len(kept))
    log.info("Auto-filter kept %d of %d applicant(s)", len(kept), len(applications))
    return result


def company_stats(active_jobs: list[Job], applications: list[Application]) -> CompanyStats:
    return CompanyStats(
        active_jobs=len(active_jobs),
        total_applicants=len(applications),
        pending_review=sum(1 for a in applications if a.status in PENDING_STATUSES),
    )
