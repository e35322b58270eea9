"""Data models for profiles, jobs and applications."""
from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any, ClassVar


class UserType(str, Enum):
    JOBSEEKER = "jobseeker"
    COMPANY = "company"


class JobType(str, Enum):
    FULL_TIME = "Full-time"
    PART_TIME = "Part-time"
    CONTRACT = "Contract"
    INTERNSHIP = "Internship"
    REMOTE = "Remote"


class ApplicationStatus(str, Enum):
    """Triage states a company moves an application through."""

    APPLIED = "Applied"
    IN_REVIEW = "In Review"
    SHORTLISTED = "Shortlisted"
    REJECTED = "Rejected"
    ACCEPTED = "Accepted"


APPLICATION_STATUSES: list[str] = [s.value for s in ApplicationStatus]
PENDING_STATUSES: frozenset[str] = frozenset(
    {ApplicationStatus.APPLIED.value, ApplicationStatus.IN_REVIEW.value}
)


def parse_skills(text: str | None) -> list[str]:
    """Comma-separated form input → trimmed skills, blanks dropped."""
    if not text:
        return []
    return [s.strip() for s in text.split(",") if s.strip()]


def parse_timestamp(value: Any) -> datetime | None:
    if value is None or value == "":
        return None
    if isinstance(value, datetime):
        return value
    text = str(value)
    # PostgREST may emit a trailing Z
    if text.endswith("Z"):
        text = text[:-1] + "+00:00"
    try:
        return datetime.fromisoformat(text)
    except ValueError:
        return None


def _iso(value: datetime | None) -> str | None:
    return value.isoformat() if value else None


def _without(row: dict[str, Any], columns: tuple[str, ...]) -> dict[str, Any]:
    return {k: v for k, v in row.items() if k not in columns}


@dataclass
class Profile:
    id: str
    user_type: str
    full_name: str
    email: str
    company_name: str = ""
    skills: list[str] = field(default_factory=list)
    experience: str = ""
    created_at: datetime | None = None
    updated_at: datetime | None = None

    # Filled in by the backend on insert
    SERVER_COLUMNS: ClassVar[tuple[str, ...]] = ("id", "created_at", "updated_at")

    @property
    def is_company(self) -> bool:
        return self.user_type == UserType.COMPANY.value

    @property
    def display_name(self) -> str:
        return self.company_name or self.full_name

    @classmethod
    def from_row(cls, row: dict[str, Any]) -> Profile:
        return cls(
            id=str(row.get("id", "")),
            user_type=row.get("user_type") or UserType.JOBSEEKER.value,
            full_name=row.get("full_name") or "",
            email=row.get("email") or "",
            company_name=row.get("company_name") or "",
            skills=list(row.get("skills") or []),
            experience=row.get("experience") or "",
            created_at=parse_timestamp(row.get("created_at")),
            updated_at=parse_timestamp(row.get("updated_at")),
        )

    def to_row(self, new: bool = False) -> dict[str, Any]:
        """Column dict for the backend; ``new=True`` leaves out what the insert fills in."""
        row = {
            "id": self.id,
            "user_type": self.user_type,
            "full_name": self.full_name,
            "email": self.email,
            "company_name": self.company_name,
            "skills": list(self.skills),
            "experience": self.experience,
            "created_at": _iso(self.created_at),
            "updated_at": _iso(self.updated_at),
        }
        return _without(row, self.SERVER_COLUMNS) if new else row


@dataclass
class Job:
    id: str
    company_id: str
    title: str
    description: str
    location: str
    job_type: str
    required_skills: list[str] = field(default_factory=list)
    is_active: bool = True
    created_at: datetime | None = None
    company: Profile | None = None

    SERVER_COLUMNS: ClassVar[tuple[str, ...]] = ("id", "created_at")

    @property
    def company_name(self) -> str:
        return self.company.company_name if self.company else ""

    @classmethod
    def from_row(cls, row: dict[str, Any]) -> Job:
        return cls(
            id=str(row.get("id", "")),
            company_id=str(row.get("company_id", "")),
            title=row.get("title") or "",
            description=row.get("description") or "",
            location=row.get("location") or "",
            job_type=row.get("job_type") or "",
            required_skills=list(row.get("required_skills") or []),
            is_active=bool(row.get("is_active", True)),
            created_at=parse_timestamp(row.get("created_at")),
        )

    def to_row(self, new: bool = False) -> dict[str, Any]:
        row = {
            "id": self.id,
            "company_id": self.company_id,
            "title": self.title,
            "description": self.description,
            "location": self.location,
            "job_type": self.job_type,
            "required_skills": list(self.required_skills),
            "is_active": self.is_active,
            "created_at": _iso(self.created_at),
        }
        return _without(row, self.SERVER_COLUMNS) if new else row


@dataclass
class Application:
    id: str
    job_id: str
    applicant_id: str
    status: str = ApplicationStatus.APPLIED.value
    applied_at: datetime | None = None
    updated_at: datetime | None = None
    job: Job | None = None
    applicant: Profile | None = None

    SERVER_COLUMNS: ClassVar[tuple[str, ...]] = ("id", "applied_at", "updated_at")

    @classmethod
    def from_row(cls, row: dict[str, Any]) -> Application:
        return cls(
            id=str(row.get("id", "")),
            job_id=str(row.get("job_id", "")),
            applicant_id=str(row.get("applicant_id", "")),
            status=row.get("status") or ApplicationStatus.APPLIED.value,
            applied_at=parse_timestamp(row.get("applied_at")),
            updated_at=parse_timestamp(row.get("updated_at")),
        )

    def to_row(self, new: bool = False) -> dict[str, Any]:
        row = {
            "id": self.id,
            "job_id": self.job_id,
            "applicant_id": self.applicant_id,
            "status": self.status,
            "applied_at": _iso(self.applied_at),
            "updated_at": _iso(self.updated_at),
        }
        return _without(row, self.SERVER_COLUMNS) if new else row
