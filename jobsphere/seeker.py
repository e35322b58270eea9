"""Job seeker side: browse, apply, track applications, edit profile."""
from __future__ import annotations

from datetime import datetime, timezone

from jobsphere.backends import Backend
from jobsphere.errors import AlreadyAppliedError, BackendError, JobNotFoundError, ValidationError
from jobsphere.filters import (
    SeekerStats,
    filter_by_status,
    filter_jobs,
    recommend_jobs,
    seeker_stats,
)
from jobsphere.log import get_logger
from jobsphere.models import Application, ApplicationStatus, Job, Profile, parse_skills

log = get_logger(__name__)

COMPANY_COLUMNS = "id,full_name,company_name"


def attach_companies(backend: Backend, jobs: list[Job]) -> list[Job]:
    """Fill ``Job.company`` with the owning profiles (one extra query)."""
    company_ids = sorted({j.company_id for j in jobs if j.company_id})
    if not company_ids:
        return jobs
    rows = backend.select("profiles", COMPANY_COLUMNS, in_={"id": company_ids})
    companies = {str(r["id"]): Profile.from_row({**r, "user_type": "company"}) for r in rows}
    for job in jobs:
        job.company = companies.get(job.company_id)
    return jobs


class JobSeekerDashboard:
    """Per-session cache of what the seeker has fetched."""

    def __init__(self, backend: Backend, user: Profile) -> None:
        self.backend = backend
        self.user = user
        self.jobs: list[Job] = []
        self.applications: list[Application] = []

    # ── Dashboard ────────────────────────────────────────────────────────

    def load_stats(self) -> SeekerStats:
        rows = self.backend.select("applications", eq={"applicant_id": self.user.id})
        self.applications = [Application.from_row(r) for r in rows]
        return seeker_stats(self.applications)

    def load_jobs(self) -> list[Job]:
        rows = self.backend.select(
            "jobs", eq={"is_active": True}, order="created_at", ascending=False,
        )
        self.jobs = attach_companies(self.backend, [Job.from_row(r) for r in rows])
        log.debug("Loaded %d active job(s)", len(self.jobs))
        return self.jobs

    def recommended_jobs(self, limit: int = 4) -> list[Job]:
        return recommend_jobs(self.jobs, self.user.skills, limit=limit)

    # ── Browse ───────────────────────────────────────────────────────────

    def browse(self, search: str = "", job_type: str = "", location: str = "") -> list[Job]:
        if not self.jobs:
            self.load_jobs()
        return filter_jobs(self.jobs, search, job_type, location)

    def has_applied(self, job_id: str) -> bool:
        return any(a.job_id == job_id for a in self.applications)

    def find_job(self, job_id: str) -> Job | None:
        return next((j for j in self.jobs if j.id == job_id), None)

    # ── Applications ─────────────────────────────────────────────────────

    def load_applications(self) -> list[Application]:
        rows = self.backend.select(
            "applications",
            eq={"applicant_id": self.user.id},
            order="applied_at",
            ascending=False,
        )
        apps = [Application.from_row(r) for r in rows]

        job_ids = sorted({a.job_id for a in apps})
        jobs: dict[str, Job] = {}
        if job_ids:
            job_rows = self.backend.select("jobs", in_={"id": job_ids})
            attached = attach_companies(self.backend, [Job.from_row(r) for r in job_rows])
            jobs = {j.id: j for j in attached}
        for app in apps:
            app.job = jobs.get(app.job_id)

        self.applications = apps
        return apps

    def applications_by_status(self, status: str = "") -> list[Application]:
        return filter_by_status(self.applications, status)

    def apply(self, job_id: str) -> Application:
        job = self.find_job(job_id)
        if job is None:
            raise JobNotFoundError(job_id)

        draft = Application(
            id="", job_id=job.id, applicant_id=self.user.id, status=ApplicationStatus.APPLIED.value,
        )
        try:
            stored = self.backend.insert("applications", draft.to_row(new=True))
        except BackendError as exc:
            if exc.is_duplicate:
                log.info("%s already applied to %s", self.user.email, job.id)
                raise AlreadyAppliedError(code=exc.code, status=exc.status) from exc
            log.error("Error submitting application to %s: %s", job.id, exc)
            raise BackendError(
                f"Error submitting application: {exc.message}", code=exc.code, status=exc.status,
            ) from exc

        app = Application.from_row(stored)
        app.job = job
        self.applications.append(app)
        log.info("Applied: %s → %s", self.user.email, job.title)
        return app

    # ── Profile ──────────────────────────────────────────────────────────

    def update_profile(self, full_name: str, skills: str, experience: str) -> Profile:
        full_name = (full_name or "").strip()
        if not full_name:
            raise ValidationError("Full name cannot be empty.")

        values = {
            "full_name": full_name,
            "skills": parse_skills(skills),
            "experience": experience or "",
            "updated_at": datetime.now(timezone.utc).isoformat(),
        }
        try:
            rows = self.backend.update("profiles", values, eq={"id": self.user.id})
        except BackendError as exc:
            log.error("Error updating profile %s: %s", self.user.id, exc)
            raise BackendError(
                f"Error updating profile: {exc.message}", code=exc.code, status=exc.status,
            ) from exc
        if not rows:
            raise BackendError("Error updating profile: no matching profile")

        self.user = Profile.from_row(rows[0])
        log.info("Profile updated for %s", self.user.email)
        return self.user
