"""In-process backend for demos and tests when no Supabase project is configured.

Mirrors the hosted service closely enough for the app: server-side defaults
(ids, timestamps, ``is_active``, ``status``), the unique constraints the UI
relies on, and Postgres-style error text for violations.
"""
from __future__ import annotations

import copy
import threading
import uuid
from datetime import datetime, timezone
from pathlib import Path
from typing import Any

from jobsphere.backends.base import Backend, Row
from jobsphere.config import load_seed
from jobsphere.errors import AuthError, BackendError
from jobsphere.log import get_logger

log = get_logger(__name__)

TABLES: tuple[str, ...] = ("profiles", "jobs", "applications")

_UNIQUE: dict[str, list[tuple[str, ...]]] = {
    "profiles": [("email",)],
    "jobs": [],
    "applications": [("job_id", "applicant_id")],
}


def _now() -> str:
    return datetime.now(timezone.utc).isoformat()


def _defaults(table: str) -> Row:
    now = _now()
    if table == "profiles":
        return {"skills": [], "experience": "", "company_name": "", "created_at": now, "updated_at": now}
    if table == "jobs":
        return {"required_skills": [], "is_active": True, "created_at": now}
    if table == "applications":
        return {"status": "Applied", "applied_at": now, "updated_at": now}
    return {}


def _project(row: Row, columns: str) -> Row:
    cols = [c.strip() for c in columns.split(",") if c.strip()]
    if not cols or "*" in cols:
        return copy.deepcopy(row)
    return {c: copy.deepcopy(row.get(c)) for c in cols}


def _sort_key(column: str):
    # Nulls sort last ascending, like Postgres
    def key(row: Row) -> tuple[bool, Any]:
        value = row.get(column)
        return (value is None, "" if value is None else value)

    return key


class MemoryBackend(Backend):
    name = "memory"

    def __init__(self) -> None:
        self.tables: dict[str, list[Row]] = {t: [] for t in TABLES}
        self.users: dict[str, str] = {}
        self.current_email: str | None = None
        # Shared across Streamlit sessions; check-then-write must not interleave
        self._lock = threading.Lock()

    @classmethod
    def from_seed(cls, seed: dict[str, Any]) -> MemoryBackend:
        backend = cls()
        for account in seed.get("accounts", []):
            backend.users[account["email"].lower()] = account["password"]
        for table in TABLES:
            for row in seed.get(table, []):
                backend.insert(table, row)
        log.info(
            "Demo backend seeded: %d profile(s), %d job(s), %d application(s)",
            len(backend.tables["profiles"]),
            len(backend.tables["jobs"]),
            len(backend.tables["applications"]),
        )
        return backend

    @classmethod
    def from_seed_file(cls, path: Path | None = None) -> MemoryBackend:
        return cls.from_seed(load_seed(path))

    def _table(self, table: str) -> list[Row]:
        if table not in self.tables:
            raise BackendError(
                f'relation "public.{table}" does not exist', code="42P01", status=404
            )
        return self.tables[table]

    def _check_unique(self, table: str, row: Row, ignore: Row | None = None) -> None:
        for cols in _UNIQUE.get(table, []):
            key = tuple(row.get(c) for c in cols)
            for existing in self.tables[table]:
                if existing is ignore:
                    continue
                if tuple(existing.get(c) for c in cols) == key:
                    constraint = f"{table}_{'_'.join(cols)}_key"
                    raise BackendError(
                        f'duplicate key value violates unique constraint "{constraint}"',
                        code="23505",
                        status=409,
                    )

    # ── Tables ───────────────────────────────────────────────────────────

    def select(
        self,
        table: str,
        columns: str = "*",
        *,
        eq: dict[str, Any] | None = None,
        in_: dict[str, list[Any]] | None = None,
        order: str | None = None,
        ascending: bool = True,
    ) -> list[Row]:
        rows = [r for r in self._table(table) if _matches(r, eq, in_)]
        if order:
            rows = sorted(rows, key=_sort_key(order), reverse=not ascending)
        return [_project(r, columns) for r in rows]

    def insert(self, table: str, row: Row) -> Row:
        rows = self._table(table)
        stored = {**_defaults(table), **copy.deepcopy(row)}
        stored.setdefault("id", str(uuid.uuid4()))
        with self._lock:
            self._check_unique(table, stored)
            rows.append(stored)
        log.debug("insert %s id=%s", table, stored["id"])
        return copy.deepcopy(stored)

    def update(self, table: str, values: Row, *, eq: dict[str, Any]) -> list[Row]:
        if not eq:
            raise BackendError(f"Refusing to update every row of {table}")
        updated: list[Row] = []
        rows = self._table(table)
        with self._lock:
            for row in rows:
                if not _matches(row, eq, None):
                    continue
                candidate = {**row, **copy.deepcopy(values)}
                self._check_unique(table, candidate, ignore=row)
                row.update(copy.deepcopy(values))
                updated.append(copy.deepcopy(row))
        log.debug("update %s %s → %d row(s)", table, eq, len(updated))
        return updated

    # ── Auth ─────────────────────────────────────────────────────────────

    def sign_up(self, email: str, password: str) -> Row:
        key = email.strip().lower()
        if not key or not password:
            raise AuthError("Email and password are required", status=400)
        if key in self.users:
            raise AuthError("User already registered", status=422)
        if len(password) < 6:
            raise AuthError("Password should be at least 6 characters.", status=422)
        self.users[key] = password
        self.current_email = key
        return {"user": {"email": key}}

    def sign_in(self, email: str, password: str) -> Row:
        key = email.strip().lower()
        if self.users.get(key) != password:
            raise AuthError("Invalid login credentials", status=400)
        self.current_email = key
        return {"user": {"email": key}, "access_token": f"demo-{uuid.uuid4().hex}"}

    def sign_out(self) -> None:
        self.current_email = None


def _matches(row: Row, eq: dict[str, Any] | None, in_: dict[str, list[Any]] | None) -> bool:
    for col, value in (eq or {}).items():
        if row.get(col) != value:
            return False
    for col, values in (in_ or {}).items():
        if row.get(col) not in values:
            return False
    return True
