"""Registration and sign-in, delegated to the backend's auth service.

The app never handles credentials beyond passing them through; what it keeps
afterwards is the signed-in :class:`~jobsphere.models.Profile`.
"""
from __future__ import annotations

from jobsphere.backends import Backend
from jobsphere.errors import ProfileNotFoundError, ValidationError, WrongRoleError
from jobsphere.log import get_logger
from jobsphere.models import Profile, UserType, parse_skills

log = get_logger(__name__)


def _normalize_email(email: str) -> str:
    return (email or "").strip().lower()


def register(
    backend: Backend,
    *,
    email: str,
    password: str,
    full_name: str,
    user_type: str,
    company_name: str = "",
    skills: str = "",
    experience: str = "",
) -> Profile:
    email = _normalize_email(email)
    full_name = (full_name or "").strip()
    company_name = (company_name or "").strip()

    try:
        role = UserType(user_type)
    except ValueError:
        raise ValidationError(f"Unknown account type: {user_type!r}") from None

    if not email or not password or not full_name:
        raise ValidationError("Name, email and password are required.")
    if role is UserType.COMPANY and not company_name:
        raise ValidationError("Company name is required for company accounts.")

    backend.sign_up(email, password)

    is_seeker = role is UserType.JOBSEEKER
    draft = Profile(
        id="",
        user_type=role.value,
        full_name=full_name,
        email=email,
        company_name="" if is_seeker else company_name,
        skills=parse_skills(skills) if is_seeker else [],
        experience=(experience or "") if is_seeker else "",
    )
    profile = Profile.from_row(backend.insert("profiles", draft.to_row(new=True)))
    log.info("Registered %s account %s", profile.user_type, profile.email)
    return profile


def login(backend: Backend, email: str, password: str) -> Profile:
    email = _normalize_email(email)
    backend.sign_in(email, password)

    row = backend.select_one("profiles", eq={"email": email})
    if row is None:
        log.warning("Signed in %s but no profile row exists", email)
        raise ProfileNotFoundError()

    profile = Profile.from_row(row)
    log.info("Logged in %s (%s)", profile.email, profile.user_type)
    return profile


def logout(backend: Backend) -> None:
    backend.sign_out()
    log.info("Logged out")


def require_role(profile: Profile | None, role: UserType | str) -> Profile:
    expected = UserType(role).value
    if profile is None:
        raise ProfileNotFoundError("Please log in first.")
    if profile.user_type != expected:
        raise WrongRoleError(expected, profile.user_type)
    return profile
