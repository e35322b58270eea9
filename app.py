"""Streamlit UI for JobSphere: job seekers apply, companies triage."""
from __future__ import annotations

import sys
from pathlib import Path
from typing import Callable

import streamlit as st

ROOT = Path(__file__).resolve().parent
sys.path.insert(0, str(ROOT))

from jobsphere import auth
from jobsphere.backends import Backend, MemoryBackend, get_backend, uses_supabase
from jobsphere.company import CompanyDashboard
from jobsphere.config import load_settings
from jobsphere.errors import ConfigError, JobSphereError
from jobsphere.filters import CompanyStats, SeekerStats, location_options
from jobsphere.formatting import (
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
from jobsphere.log import get_logger
from jobsphere.models import APPLICATION_STATUSES, Application, Job, Profile, UserType
from jobsphere.seeker import JobSeekerDashboard

log = get_logger(__name__)

SETTINGS = load_settings()
JOB_TYPES: list[str] = SETTINGS["jobs"]["types"]
RECOMMENDED_LIMIT: int = SETTINGS["jobs"]["recommended_limit"]
DESCRIPTION_PREVIEW: int = SETTINGS["jobs"]["description_preview"]
EXPERIENCE_PREVIEW: int = SETTINGS["applicants"]["experience_preview"]

# ── Session ──────────────────────────────────────────────────────────────


@st.cache_resource
def _demo_backend() -> MemoryBackend:
    """One demo store per server process, so both roles see the same data."""
    return MemoryBackend.from_seed_file()


def _backend() -> Backend:
    if "backend" not in st.session_state:
        st.session_state["backend"] = get_backend(SETTINGS) if uses_supabase() else _demo_backend()
    return st.session_state["backend"]


def _current_user() -> Profile | None:
    return st.session_state.get("current_user")


def _sign_in(profile: Profile) -> None:
    _clear_session()
    st.session_state["current_user"] = profile


def _clear_session() -> None:
    for key in ("current_user", "seeker", "company", "auto_filter"):
        st.session_state.pop(key, None)


def _seeker() -> JobSeekerDashboard:
    user = auth.require_role(_current_user(), UserType.JOBSEEKER)
    if "seeker" not in st.session_state:
        st.session_state["seeker"] = JobSeekerDashboard(_backend(), user)
    return st.session_state["seeker"]


def _company() -> CompanyDashboard:
    user = auth.require_role(_current_user(), UserType.COMPANY)
    if "company" not in st.session_state:
        st.session_state["company"] = CompanyDashboard(_backend(), user)
    return st.session_state["company"]


def _flash(message: str) -> None:
    st.session_state["flash"] = message


def _show_flash() -> None:
    message = st.session_state.pop("flash", None)
    if message:
        st.success(message)
    error = st.session_state.pop("flash_error", None)
    if error:
        st.error(error)


def _check(label: str, ok: bool) -> str:
    icon = "✅" if ok else "⬜"
    return f"{icon}  {label}"


def _skill_tags(skills: list[str]) -> str:
    return " ".join(f"`{s}`" for s in skills) if skills else "_none listed_"


# ── Page: Welcome ────────────────────────────────────────────────────────


def page_welcome() -> None:
    st.header(SETTINGS["app"]["title"])
    st.write("Find your next role, or the people to fill it.")

    tab_login, tab_register = st.tabs(["Log in", "Register"])

    with tab_login:
        with st.form("login_form"):
            email = st.text_input("Email")
            password = st.text_input("Password", type="password")
            submitted = st.form_submit_button("Log in", type="primary", use_container_width=True)

        if submitted:
            try:
                profile = auth.login(_backend(), email, password)
            except JobSphereError as exc:
                st.error(str(exc))
            else:
                _sign_in(profile)
                st.rerun()

    with tab_register:
        user_type = st.radio(
            "I am a",
            [UserType.JOBSEEKER.value, UserType.COMPANY.value],
            format_func=lambda v: "Job seeker" if v == UserType.JOBSEEKER.value else "Company",
            horizontal=True,
        )
        is_company = user_type == UserType.COMPANY.value

        with st.form("register_form"):
            full_name = st.text_input("Full name (Contact Person)" if is_company else "Full name")
            email = st.text_input("Email")
            password = st.text_input("Password", type="password")
            company_name = st.text_input("Company name *") if is_company else ""
            skills = "" if is_company else st.text_input(
                "Skills", placeholder="Python, React, SQL", help="Comma separated",
            )
            experience = "" if is_company else st.text_area("Experience", height=120)
            submitted = st.form_submit_button("Create account", type="primary", use_container_width=True)

        if submitted:
            try:
                profile = auth.register(
                    _backend(),
                    email=email,
                    password=password,
                    full_name=full_name,
                    user_type=user_type,
                    company_name=company_name,
                    skills=skills,
                    experience=experience,
                )
            except JobSphereError as exc:
                st.error(str(exc))
            else:
                _sign_in(profile)
                _flash("Account created successfully!")
                st.rerun()


# ── Pages: Job seeker ────────────────────────────────────────────────────


@st.dialog("Apply for this job")
def _apply_dialog(job_id: str) -> None:
    seeker = _seeker()
    job = seeker.find_job(job_id)
    if job is None:
        st.error("This job is no longer available.")
        return

    st.subheader(job.title)
    st.caption(company_label(job.company))
    st.write(job_subtitle(job))
    st.markdown(_skill_tags(job.required_skills))
    st.write(job.description)

    if st.button("Submit Application", type="primary", use_container_width=True):
        try:
            seeker.apply(job_id)
        except JobSphereError as exc:
            st.error(str(exc))
        else:
            _flash("Application submitted successfully!")
            st.rerun()


def _job_cards(seeker: JobSeekerDashboard, jobs: list[Job], key_prefix: str) -> None:
    if not jobs:
        st.info("No jobs found. Check back later for new opportunities.")
        return

    for job in jobs:
        with st.container(border=True):
            st.subheader(job.title)
            st.caption(company_label(job.company))
            st.write(job_subtitle(job))
            st.markdown(_skill_tags(job.required_skills))
            st.write(truncate(job.description, DESCRIPTION_PREVIEW))
            if seeker.has_applied(job.id):
                st.button("Already Applied", key=f"{key_prefix}-{job.id}", disabled=True)
            elif st.button("Apply Now", key=f"{key_prefix}-{job.id}", type="primary"):
                _apply_dialog(job.id)


def page_seeker_dashboard() -> None:
    seeker = _seeker()
    st.header(f"Welcome, {seeker.user.full_name}")

    try:
        stats = seeker.load_stats()
    except JobSphereError as exc:
        log.error("Error loading stats: %s", exc)
        st.error(f"Error loading stats: {exc}")
        stats = SeekerStats()

    c1, c2, c3 = st.columns(3)
    c1.metric("Applications", stats.applied)
    c2.metric("In Review", stats.in_review)
    c3.metric("Shortlisted", stats.shortlisted)

    st.divider()
    st.subheader("Recommended for you")
    if not seeker.user.skills:
        st.caption("Add skills to your **Profile** to get recommendations.")

    try:
        seeker.load_jobs()
    except JobSphereError as exc:
        log.error("Error loading jobs: %s", exc)
        st.error("Error loading jobs")
        return

    _job_cards(seeker, seeker.recommended_jobs(RECOMMENDED_LIMIT), "rec")


def page_browse_jobs() -> None:
    seeker = _seeker()
    st.header("Browse Jobs")

    try:
        seeker.load_stats()
        if not seeker.jobs:
            seeker.load_jobs()
    except JobSphereError as exc:
        log.error("Error loading jobs: %s", exc)
        st.error("Error loading jobs")
        return

    c1, c2, c3 = st.columns([2, 1, 1])
    with c1:
        search = st.text_input("Search", placeholder="Job title or company")
    with c2:
        job_type = st.selectbox("Job type", [""] + JOB_TYPES, format_func=lambda v: v or "All types")
    with c3:
        location = st.selectbox(
            "Location", [""] + location_options(seeker.jobs), format_func=lambda v: v or "All locations",
        )

    _job_cards(seeker, seeker.browse(search, job_type, location), "browse")


def page_my_applications() -> None:
    seeker = _seeker()
    st.header("My Applications")

    try:
        seeker.load_applications()
    except JobSphereError as exc:
        log.error("Error loading applications: %s", exc)
        st.error("Error loading applications")
        return

    if not seeker.applications:
        st.info("No applications yet. Start applying to jobs to see them here.")
        return

    status = st.selectbox("Status", [""] + APPLICATION_STATUSES, format_func=lambda v: v or "All statuses")
    apps = seeker.applications_by_status(status)
    if not apps:
        st.info("No applications with this status.")
        return

    for app in apps:
        job = app.job
        with st.container(border=True):
            left, right = st.columns([4, 1])
            with left:
                st.subheader(job.title if job else "Job removed")
                st.caption(company_label(job.company) if job else "Company")
            with right:
                st.markdown(status_badge(app.status))
            st.write(f"Applied on: {format_date(app.applied_at)}")
            if job:
                st.write(job_subtitle(job))

    with st.expander("Table view"):
        st.dataframe(seeker_applications_frame(apps), hide_index=True, use_container_width=True)


def page_profile() -> None:
    seeker = _seeker()
    user = seeker.user
    st.header("My Profile")

    with st.form("profile_form"):
        full_name = st.text_input("Full name", value=user.full_name)
        st.text_input("Email", value=user.email, disabled=True)
        skills = st.text_input("Skills", value=", ".join(user.skills), help="Comma separated")
        experience = st.text_area("Experience", value=user.experience, height=160)
        save = st.form_submit_button("Save Profile", type="primary", use_container_width=True)

    if save:
        try:
            updated = seeker.update_profile(full_name, skills, experience)
        except JobSphereError as exc:
            st.error(str(exc))
        else:
            st.session_state["current_user"] = updated
            st.success("Profile updated successfully!")


# ── Pages: Company ───────────────────────────────────────────────────────


def page_company_dashboard() -> None:
    company = _company()
    st.header(company.user.display_name)

    try:
        stats = company.load_stats()
    except JobSphereError as exc:
        log.error("Error loading stats: %s", exc)
        st.error(f"Error loading stats: {exc}")
        stats = CompanyStats()

    c1, c2, c3 = st.columns(3)
    c1.metric("Active Jobs", stats.active_jobs)
    c2.metric("Total Applicants", stats.total_applicants)
    c3.metric("Pending Review", stats.pending_review)

    st.divider()
    st.info("Use **Post Job** to publish a role and **Applicants** to review who applied.")


def page_post_job() -> None:
    company = _company()
    st.header("Post a Job")

    with st.form("post_job_form", clear_on_submit=True):
        title = st.text_input("Job title")
        c1, c2 = st.columns(2)
        with c1:
            location = st.text_input("Location", placeholder="e.g. Bangalore or Remote")
        with c2:
            job_type = st.selectbox("Job type", JOB_TYPES)
        skills = st.text_input("Required skills", placeholder="React, TypeScript, CSS", help="Comma separated")
        description = st.text_area("Description", height=200)
        submitted = st.form_submit_button("Post Job", type="primary", use_container_width=True)

    if submitted:
        try:
            company.post_job(title, description, skills, location, job_type)
        except JobSphereError as exc:
            st.error(str(exc))
        else:
            st.success("Job posted successfully!")


def page_my_jobs() -> None:
    company = _company()
    st.header("My Jobs")

    try:
        jobs = company.load_my_jobs()
    except JobSphereError as exc:
        log.error("Error loading jobs: %s", exc)
        st.error("Error loading jobs")
        return

    if not jobs:
        st.info("No jobs posted yet. Post your first job to start receiving applications.")
        return

    for job in jobs:
        with st.container(border=True):
            left, right = st.columns([4, 1])
            with left:
                st.subheader(job.title)
                st.write(job_subtitle(job))
            with right:
                st.markdown(active_badge(job.is_active))
            st.markdown(_skill_tags(job.required_skills))
            st.write(truncate(job.description, DESCRIPTION_PREVIEW))
            st.caption(f"Posted on: {format_date(job.created_at)}")

            label = "Deactivate" if job.is_active else "Reactivate"
            if st.button(label, key=f"toggle-{job.id}"):
                try:
                    company.set_job_active(job.id, not job.is_active)
                except JobSphereError as exc:
                    st.error(str(exc))
                else:
                    st.rerun()


@st.dialog("Applicant details", width="large")
def _applicant_dialog(application_id: str) -> None:
    app = _company().applicant_details(application_id)
    if app is None or app.applicant is None:
        st.error("Application not found.")
        return

    applicant = app.applicant
    st.subheader(applicant.full_name)
    st.write(f"Email: {applicant.email}")
    st.write(f"Applied for: {app.job.title if app.job else '—'}")
    st.markdown("**Skills:** " + _skill_tags(applicant.skills))
    if applicant.experience:
        st.markdown("**Experience:**")
        st.write(applicant.experience)
    st.markdown("**Application Status:** " + status_badge(app.status))


def _on_status_change(application_id: str) -> None:
    new_status = st.session_state[f"status-{application_id}"]
    try:
        _company().update_status(application_id, new_status)
    except JobSphereError as exc:
        st.session_state["flash_error"] = str(exc)


def _applicant_card(company: CompanyDashboard, app: Application) -> None:
    applicant = app.applicant
    if applicant is None:
        return
    matching, missing = company.skill_breakdown(app)

    with st.container(border=True):
        left, right = st.columns([4, 1])
        with left:
            st.subheader(applicant.full_name)
            st.write(f"Applied for: {app.job.title if app.job else '—'}")
            st.caption(f"Applied on: {format_date(app.applied_at)}")
        with right:
            st.markdown(status_badge(app.status))

        st.markdown("**Skills:** " + _skill_tags(applicant.skills))
        if matching:
            st.markdown("**:green[Matching Skills:]** " + _skill_tags(matching))
        if missing:
            st.markdown("**:red[Missing Skills:]** " + _skill_tags(missing))
        if applicant.experience:
            st.markdown("**Experience:**")
            st.write(truncate(applicant.experience, EXPERIENCE_PREVIEW))

        c1, c2 = st.columns([2, 1])
        with c1:
            st.selectbox(
                "Status",
                APPLICATION_STATUSES,
                index=APPLICATION_STATUSES.index(app.status) if app.status in APPLICATION_STATUSES else 0,
                key=f"status-{app.id}",
                on_change=_on_status_change,
                args=(app.id,),
                label_visibility="collapsed",
            )
        with c2:
            if st.button("View Details", key=f"details-{app.id}", use_container_width=True):
                _applicant_dialog(app.id)


def page_applicants() -> None:
    company = _company()
    st.header("Applicants")

    try:
        if not company.jobs:
            company.load_stats()
        company.load_applications()
    except JobSphereError as exc:
        log.error("Error loading applications: %s", exc)
        st.error("Error loading applications")
        return

    if not company.applications:
        st.info("No applications yet. Post a job to start receiving applications.")
        return

    options = dict(company.job_filter_options())
    c1, c2, c3 = st.columns([2, 1, 1])
    with c1:
        search = st.text_input("Search", placeholder="Applicant name or skill")
    with c2:
        job_id = st.selectbox(
            "Job", [""] + list(options), format_func=lambda v: options.get(v, "All Jobs"),
        )
    with c3:
        status = st.selectbox("Status", [""] + APPLICATION_STATUSES, format_func=lambda v: v or "All statuses")

    b1, b2, _ = st.columns([1, 1, 2])
    with b1:
        if st.button("Auto-filter by skills", type="primary", use_container_width=True):
            st.session_state["auto_filter"] = True
    with b2:
        if st.button("Show all", use_container_width=True):
            st.session_state["auto_filter"] = False

    if st.session_state.get("auto_filter"):
        st.info(company.auto_filter(search, job_id, status).summary)
        visible = company.visible
    else:
        visible = company.filter_applicants(search, job_id, status)

    if not visible:
        st.info("No applications found. Try adjusting your filters.")
        return

    for app in visible:
        _applicant_card(company, app)

    st.divider()
    with st.expander("Table view"):
        st.dataframe(applicants_frame(visible), hide_index=True, use_container_width=True)
    st.download_button(
        "Download CSV",
        data=applicants_csv(visible),
        file_name="applicants.csv",
        mime="text/csv",
    )


# ── Main ─────────────────────────────────────────────────────────────────


def _sidebar_status() -> None:
    with st.sidebar:
        backend = _backend()
        st.markdown("**Status**")
        st.markdown(_check("Connected to Supabase", backend.name == "supabase"))
        if backend.name == "memory":
            st.caption("Demo data. Every demo account uses the password `demo1234`.")

        user = _current_user()
        if user is None:
            return

        st.divider()
        st.markdown(f"**{user.display_name}**  \n{user.email}")
        if st.button("Log out", use_container_width=True):
            auth.logout(backend)
            _clear_session()
            st.rerun()


def _wrap(page: Callable[[], None]) -> Callable[[], None]:
    def run() -> None:
        _sidebar_status()
        _show_flash()
        try:
            page()
        except JobSphereError as exc:
            log.error("%s failed: %s", page.__name__, exc)
            st.error(str(exc))

    run.__name__ = page.__name__
    return run


def _pages() -> list:
    user = _current_user()
    if user is None:
        return [
            st.Page(_wrap(page_welcome), title="Welcome", icon="👋", url_path="welcome", default=True),
        ]
    if user.is_company:
        return [
            st.Page(_wrap(page_company_dashboard), title="Dashboard", icon="🏢", url_path="dashboard", default=True),
            st.Page(_wrap(page_post_job), title="Post Job", icon="📝", url_path="post-job"),
            st.Page(_wrap(page_my_jobs), title="My Jobs", icon="📋", url_path="my-jobs"),
            st.Page(_wrap(page_applicants), title="Applicants", icon="👥", url_path="applicants"),
        ]
    return [
        st.Page(_wrap(page_seeker_dashboard), title="Dashboard", icon="🏠", url_path="dashboard", default=True),
        st.Page(_wrap(page_browse_jobs), title="Browse Jobs", icon="🔎", url_path="browse"),
        st.Page(_wrap(page_my_applications), title="My Applications", icon="📨", url_path="applications"),
        st.Page(_wrap(page_profile), title="Profile", icon="👤", url_path="profile"),
    ]


st.set_page_config(page_title=SETTINGS["app"]["title"], page_icon="💼", layout="wide")

try:
    _backend()
except ConfigError as exc:
    log.error("Configuration error: %s", exc)
    st.error(str(exc))
    st.stop()

nav = st.navigation(_pages())
nav.run()
