"""Company side: post jobs, review applicants, move applications through triage."""
from __future__ import annotations

from datetime import datetime, timezone

from jobsphere.backends import Backend
from jobsphere.errors import BackendError, NotOwnerError, ValidationError
from jobsphere.filters import (
    AutoFilterResult,
    CompanyStats,
    auto_filter_applicants,
    company_stats,
    filter_applicants,
)
from jobsphere.log import get_logger
from jobsphere.matching import split_skills
from jobsphere.models import (
    APPLICATION_STATUSES,
    Application,
    Job,
    JobType,
    Profile,
    parse_skills,
)

log = get_logger(__name__)


def _now() -> str:
    return datetime.now(timezone.utc).isoformat()


class CompanyDashboard:
    """Per-session cache of the company's jobs and received applications.

    ``jobs`` holds the jobs offered in the applicant job filter (active jobs
    after :meth:`load_stats`, every job after :meth:`load_my_jobs`).
    ``applications`` is everything fetched; ``visible`` is the current
    filtered view of it.
    """

    def __init__(self, backend: Backend, user: Profile) -> None:
        self.backend = backend
        self.user = user
        self.jobs: list[Job] = []
        self.applications: list[Application] = []
        self.visible: list[Application] = []

    # ── Dashboard ────────────────────────────────────────────────────────

    def load_stats(self) -> CompanyStats:
        rows = self.backend.select(
            "jobs", eq={"company_id": self.user.id, "is_active": True},
        )
        self.jobs = [Job.from_row(r) for r in rows]

        apps: list[Application] = []
        if self.jobs:
            app_rows = self.backend.select(
                "applications", in_={"job_id": [j.id for j in self.jobs]},
            )
            apps = [Application.from_row(r) for r in app_rows]
        return company_stats(self.jobs, apps)

    # ── Applicants ───────────────────────────────────────────────────────

    def load_applications(self) -> list[Application]:
        job_rows = self.backend.select("jobs", eq={"company_id": self.user.id})
        jobs = {str(r["id"]): Job.from_row(r) for r in job_rows}

        if not jobs:
            self.applications = []
            self.visible = []
            return []

        rows = self.backend.select(
            "applications",
            in_={"job_id": list(jobs)},
            order="applied_at",
            ascending=False,
        )
        apps = [Application.from_row(r) for r in rows]

        applicant_ids = sorted({a.applicant_id for a in apps})
        applicants: dict[str, Profile] = {}
        if applicant_ids:
            profile_rows = self.backend.select("profiles", in_={"id": applicant_ids})
            applicants = {str(r["id"]): Profile.from_row(r) for r in profile_rows}

        for app in apps:
            app.job = jobs.get(app.job_id)
            app.applicant = applicants.get(app.applicant_id)

        self.applications = apps
        self.visible = list(apps)
        log.debug("Loaded %d application(s) across %d job(s)", len(apps), len(jobs))
        return apps

    def job_filter_options(self) -> list[tuple[str, str]]:
        return [(j.id, j.title) for j in self.jobs]

    def filter_applicants(self, search: str = "", job_id: str = "", status: str = "") -> list[Application]:
        self.visible = filter_applicants(self.applications, search, job_id, status)
        return self.visible

    def auto_filter(self, search: str = "", job_id: str = "", status: str = "") -> AutoFilterResult:
        """Skill auto-filter over everything loaded; the view also honours the filters.

        The summary counts refer to the whole list, not the filtered view.
        """
        result = auto_filter_applicants(self.applications)
        self.visible = filter_applicants(result.kept, search, job_id, status)
        return result

    @staticmethod
    def skill_breakdown(application: Application) -> tuple[list[str], list[str]]:
        required = application.job.required_skills if application.job else []
        candidate = application.applicant.skills if application.applicant else []
        return split_skills(required, candidate)

    def applicant_details(self, application_id: str) -> Application | None:
        return next((a for a in self.applications if a.id == application_id), None)

    def update_status(self, application_id: str, status: str) -> Application:
        if status not in APPLICATION_STATUSES:
            raise ValidationError(f"Unknown status: {status!r}")

        app = self.applicant_details(application_id)
        if app is None or app.job is None or app.job.company_id != self.user.id:
            raise NotOwnerError("You can only update applications to your own jobs.")

        now = _now()
        try:
            rows = self.backend.update(
                "applications",
                {"status": status, "updated_at": now},
                eq={"id": application_id},
            )
        except BackendError as exc:
            log.error("Error updating status of %s: %s", application_id, exc)
            raise BackendError(
                f"Error updating status: {exc.message}", code=exc.code, status=exc.status,
            ) from exc
        # Row-level security denials come back as an empty result, not an error
        if not rows:
            log.error("Status update of %s matched no row", application_id)
            raise BackendError("Error updating status: application not found or not permitted")

        # ``visible`` shares objects with ``applications``
        app.status = status
        app.updated_at = datetime.fromisoformat(now)
        log.info("Application %s → %s", application_id, status)
        return app

    # ── Jobs ─────────────────────────────────────────────────────────────

    def post_job(
        self,
        title: str,
        description: str,
        skills: str,
        location: str,
        job_type: str,
    ) -> Job:
        title, description, location = (title or "").strip(), (description or "").strip(), (location or "").strip()
        if not title or not description or not location:
            raise ValidationError("Title, description and location are required.")
        try:
            job_type = JobType(job_type).value
        except ValueError:
            raise ValidationError(f"Unknown job type: {job_type!r}") from None

        draft = Job(
            id="",
            company_id=self.user.id,
            title=title,
            description=description,
            location=location,
            job_type=job_type,
            required_skills=parse_skills(skills),
            is_active=True,
        )
        try:
            stored = self.backend.insert("jobs", draft.to_row(new=True))
        except BackendError as exc:
            log.error("Error posting job %r: %s", title, exc)
            raise BackendError(
                f"Error posting job: {exc.message}", code=exc.code, status=exc.status,
            ) from exc

        job = Job.from_row(stored)
        self.jobs.append(job)
        log.info("Posted job %s (%s)", job.title, job.id)
        return job

    def load_my_jobs(self) -> list[Job]:
        rows = self.backend.select(
            "jobs", eq={"company_id": self.user.id}, order="created_at", ascending=False,
        )
        self.jobs = [Job.from_row(r) for r in rows]
        return self.jobs

    def set_job_active(self, job_id: str, active: bool) -> Job:
        job = next((j for j in self.jobs if j.id == job_id), None)
        if job is None or job.company_id != self.user.id:
            raise NotOwnerError("You can only change your own job postings.")

        rows = self.backend.update(
            "jobs", {"is_active": active}, eq={"id": job_id, "company_id": self.user.id},
        )
        if not rows:
            raise NotOwnerError("You can only change your own job postings.")

        job.is_active = active
        log.info("Job %s %s", job_id, "activated" if active else "deactivated")
        return job
