"""Supabase backend: PostgREST tables and GoTrue auth over plain HTTP.

Docs: https://postgrest.org/en/stable/references/api.html
      https://supabase.com/docs/reference/self-hosting-auth
"""
from __future__ import annotations

from typing import Any

import requests

from jobsphere.backends.base import Backend, Row
from jobsphere.errors import AuthError, BackendError
from jobsphere.log import get_logger

log = get_logger(__name__)


def _literal(value: Any) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    if value is None:
        return "null"
    return str(value)


def _quoted(value: Any) -> str:
    """Double-quote a value inside an ``in.(...)`` list."""
    text = _literal(value).replace("\\", "\\\\").replace('"', '\\"')
    return f'"{text}"'


def build_params(
    columns: str = "*",
    eq: dict[str, Any] | None = None,
    in_: dict[str, list[Any]] | None = None,
    order: str | None = None,
    ascending: bool = True,
) -> dict[str, str]:
    params: dict[str, str] = {"select": columns}
    for col, value in (eq or {}).items():
        op = "is" if value is None else "eq"
        params[col] = f"{op}.{_literal(value)}"
    for col, values in (in_ or {}).items():
        params[col] = "in.(" + ",".join(_quoted(v) for v in values) + ")"
    if order:
        params["order"] = f"{order}.{'asc' if ascending else 'desc'}"
    return params


def _error_from_response(r: requests.Response, auth: bool = False) -> BackendError:
    try:
        body = r.json()
    except ValueError:
        body = {}
    if not isinstance(body, dict):
        body = {}
    message = (
        body.get("message")
        or body.get("msg")
        or body.get("error_description")
        or body.get("error")
        or r.text
        or f"HTTP {r.status_code}"
    )
    code = body.get("code") or body.get("error_code")
    cls = AuthError if auth else BackendError
    return cls(str(message), code=str(code) if code is not None else None, status=r.status_code)


class SupabaseRestBackend(Backend):
    name = "supabase"

    def __init__(self, url: str, anon_key: str, timeout: float = 15) -> None:
        self.url = url.rstrip("/")
        self.anon_key = anon_key
        self.timeout = timeout
        self.access_token: str | None = None

    def _headers(self, extra: dict[str, str] | None = None) -> dict[str, str]:
        headers = {
            "apikey": self.anon_key,
            "Authorization": f"Bearer {self.access_token or self.anon_key}",
            "Content-Type": "application/json",
        }
        if extra:
            headers.update(extra)
        return headers

    def _request(
        self,
        method: str,
        path: str,
        *,
        params: dict[str, str] | None = None,
        json: Any = None,
        headers: dict[str, str] | None = None,
        auth: bool = False,
    ) -> Any:
        try:
            r = requests.request(
                method,
                f"{self.url}{path}",
                params=params,
                json=json,
                headers=self._headers(headers),
                timeout=self.timeout,
            )
        except requests.RequestException as exc:
            log.error("%s %s failed: %s", method, path, exc)
            raise BackendError(f"Could not reach the server: {exc}") from exc

        if not r.ok:
            err = _error_from_response(r, auth=auth)
            log.warning("%s %s → %s %s", method, path, r.status_code, err.message)
            raise err

        if r.status_code == 204 or not r.content:
            return None
        return r.json()

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
        params = build_params(columns, eq, in_, order, ascending)
        rows = self._request("GET", f"/rest/v1/{table}", params=params) or []
        log.debug("select %s %s → %d row(s)", table, params, len(rows))
        return rows

    def insert(self, table: str, row: Row) -> Row:
        rows = self._request(
            "POST",
            f"/rest/v1/{table}",
            params={"select": "*"},
            json=[row],
            headers={"Prefer": "return=representation"},
        )
        if not rows:
            raise BackendError(f"Insert into {table} returned no row")
        return rows[0]

    def update(self, table: str, values: Row, *, eq: dict[str, Any]) -> list[Row]:
        if not eq:
            raise BackendError(f"Refusing to update every row of {table}")
        params = build_params("*", eq=eq)
        rows = self._request(
            "PATCH",
            f"/rest/v1/{table}",
            params=params,
            json=values,
            headers={"Prefer": "return=representation"},
        )
        return rows or []

    # ── Auth ─────────────────────────────────────────────────────────────

    def _remember_session(self, data: Row | None) -> None:
        token = (data or {}).get("access_token")
        if token:
            self.access_token = token

    def sign_up(self, email: str, password: str) -> Row:
        data = self._request(
            "POST", "/auth/v1/signup",
            json={"email": email, "password": password},
            auth=True,
        ) or {}
        # With email confirmation enabled there is no session yet
        self._remember_session(data)
        log.info("Signed up %s", email)
        return data

    def sign_in(self, email: str, password: str) -> Row:
        data = self._request(
            "POST", "/auth/v1/token",
            params={"grant_type": "password"},
            json={"email": email, "password": password},
            auth=True,
        ) or {}
        self._remember_session(data)
        log.info("Signed in %s", email)
        return data

    def sign_out(self) -> None:
        if not self.access_token:
            return
        try:
            self._request("POST", "/auth/v1/logout", auth=True)
        except BackendError as exc:
            log.warning("Sign-out failed: %s", exc)
        finally:
            self.access_token = None
