"""Exceptions surfaced to the UI.

Everything the UI shows to the user derives from :class:`JobSphereError`, so
page code can wrap a backend call in a single ``except JobSphereError``.
"""
from __future__ import annotations


class JobSphereError(Exception):
    """Base class; ``str(exc)`` is the user-facing message."""


class ConfigError(JobSphereError):
    """Required configuration (e.g. Supabase credentials) is missing."""


class ValidationError(JobSphereError):
    """A form value was rejected before reaching the backend."""


class BackendError(JobSphereError):
    """
    A call to the hosted backend failed.

    Attributes:
        message: Error text as reported by the backend (or the network layer)
        code: Backend error code when available (e.g. Postgres ``23505``)
        status: HTTP status code when available
    """

    def __init__(self, message: str, code: str | None = None, status: int | None = None):
        self.message = message
        self.code = code
        self.status = status
        super().__init__(message)

    @property
    def is_duplicate(self) -> bool:
        return "duplicate" in self.message.lower()


class AuthError(BackendError):
    """Sign-up or sign-in was refused by the auth service."""


class AlreadyAppliedError(BackendError):
    """The (job, applicant) pair already has an application."""

    def __init__(self, message: str = "You have already applied to this job", **kwargs):
        super().__init__(message, **kwargs)


class ProfileNotFoundError(JobSphereError):
    def __init__(self, message: str = "Profile not found. Please register first."):
        super().__init__(message)


class WrongRoleError(JobSphereError):
    """The signed-in profile's role does not match the requested view."""

    def __init__(self, expected: str, actual: str):
        self.expected = expected
        self.actual = actual
        super().__init__(f"This page is for {expected} accounts (signed in as {actual})")


class JobNotFoundError(JobSphereError):
    def __init__(self, job_id: str):
        self.job_id = job_id
        super().__init__(f"Job {job_id} is not available")


class NotOwnerError(JobSphereError):
    """A company tried to change a record it does not own."""
