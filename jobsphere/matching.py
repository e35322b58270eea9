"""Skill matching between a job's required skills and a candidate's skills.

Two skills match when either one, lower-cased, is a substring of the other:
``"Java"`` matches ``"JavaScript"`` and ``"react.js"`` matches ``"React"``.
The same predicate drives the matching/missing split shown to companies,
job recommendations for seekers, and the applicant auto-filter.
"""
from __future__ import annotations

from typing import Iterable


def _normalize(s: str) -> str:
    return (s or "").lower().strip()


def skill_matches(a: str, b: str) -> bool:
    """Case-insensitive containment in either direction; blanks never match."""
    x, y = _normalize(a), _normalize(b)
    if not x or not y:
        return False
    return x in y or y in x


def _matches_any(skill: str, candidates: Iterable[str]) -> bool:
    return any(skill_matches(skill, c) for c in candidates)


def has_overlap(required: list[str] | None, candidate: list[str] | None) -> bool:
    """True if at least one required skill matches at least one candidate skill."""
    candidate = candidate or []
    return any(_matches_any(req, candidate) for req in required or [])


def skills_match(required: list[str] | None, candidate: list[str] | None) -> bool:
    """Like :func:`has_overlap`, but a job with no required skills matches anyone."""
    if not required:
        return True
    return has_overlap(required, candidate)


def split_skills(
    required: list[str] | None, candidate: list[str] | None
) -> tuple[list[str], list[str]]:
    """Partition *required* into (matching, missing) against *candidate*."""
    candidate = candidate or []
    matching: list[str] = []
    missing: list[str] = []
    for req in required or []:
        (matching if _matches_any(req, candidate) else missing).append(req)
    return matching, missing
