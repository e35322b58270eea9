"""Unit tests for the Supabase REST backend with HTTP mocked out."""

from unittest.mock import MagicMock, patch

import pytest
import requests

from jobsphere.backends.supabase_rest import SupabaseRestBackend, build_params
from jobsphere.errors import AuthError, BackendError

URL = "https://demo.supabase.co"
KEY = "anon-key"


def _response(status=200, body=None, text=""):
    r = MagicMock()
    r.status_code = status
    r.ok = 200 <= status < 300
    r.content = b"" if body is None and not text else b"x"
    r.text = text
    if body is None:
        r.json.side_effect = ValueError("no json")
    else:
        r.json.return_value = body
    return r


@pytest.fixture
def backend():
    return SupabaseRestBackend(URL + "/", KEY, timeout=5)


@pytest.mark.unit
def test_build_params_for_filters_and_order():
    params = build_params(
        "id,title",
        eq={"company_id": "c1", "is_active": True},
        in_={"job_id": ["j1", 'odd"id']},
        order="created_at",
        ascending=False,
    )
    assert params == {
        "select": "id,title",
        "company_id": "eq.c1",
        "is_active": "eq.true",
        "job_id": 'in.("j1","odd\\"id")',
        "order": "created_at.desc",
    }


@pytest.mark.unit
def test_build_params_null_uses_is():
    assert build_params(eq={"deleted_at": None})["deleted_at"] == "is.null"


@pytest.mark.unit
def test_select_calls_rest_endpoint(backend):
    with patch("jobsphere.backends.supabase_rest.requests.request") as request:
        request.return_value = _response(body=[{"id": "j1"}])
        rows = backend.select("jobs", eq={"is_active": True}, order="created_at", ascending=False)

    assert rows == [{"id": "j1"}]
    method, url = request.call_args.args
    kwargs = request.call_args.kwargs
    assert method == "GET"
    assert url == f"{URL}/rest/v1/jobs"
    assert kwargs["params"]["is_active"] == "eq.true"
    assert kwargs["params"]["order"] == "created_at.desc"
    assert kwargs["headers"]["apikey"] == KEY
    assert kwargs["headers"]["Authorization"] == f"Bearer {KEY}"
    assert kwargs["timeout"] == 5


@pytest.mark.unit
def test_insert_asks_for_representation(backend):
    with patch("jobsphere.backends.supabase_rest.requests.request") as request:
        request.return_value = _response(status=201, body=[{"id": "a1", "status": "Applied"}])
        row = backend.insert("applications", {"job_id": "j1", "applicant_id": "p1"})

    assert row == {"id": "a1", "status": "Applied"}
    kwargs = request.call_args.kwargs
    assert request.call_args.args[0] == "POST"
    assert kwargs["json"] == [{"job_id": "j1", "applicant_id": "p1"}]
    assert kwargs["headers"]["Prefer"] == "return=representation"


@pytest.mark.unit
def test_update_sends_patch_with_filters(backend):
    with patch("jobsphere.backends.supabase_rest.requests.request") as request:
        request.return_value = _response(body=[{"id": "a1", "status": "Accepted"}])
        rows = backend.update("applications", {"status": "Accepted"}, eq={"id": "a1"})

    assert rows == [{"id": "a1", "status": "Accepted"}]
    assert request.call_args.args[0] == "PATCH"
    assert request.call_args.kwargs["params"]["id"] == "eq.a1"


@pytest.mark.unit
def test_duplicate_key_error_is_reported(backend):
    body = {
        "code": "23505",
        "message": 'duplicate key value violates unique constraint "applications_job_id_applicant_id_key"',
    }
    with patch("jobsphere.backends.supabase_rest.requests.request") as request:
        request.return_value = _response(status=409, body=body)
        with pytest.raises(BackendError) as excinfo:
            backend.insert("applications", {"job_id": "j1", "applicant_id": "p1"})

    err = excinfo.value
    assert err.status == 409
    assert err.code == "23505"
    assert err.is_duplicate


@pytest.mark.unit
def test_error_without_json_body_uses_text(backend):
    with patch("jobsphere.backends.supabase_rest.requests.request") as request:
        request.return_value = _response(status=502, text="Bad Gateway")
        with pytest.raises(BackendError, match="Bad Gateway"):
            backend.select("jobs")


@pytest.mark.unit
def test_network_failure_becomes_backend_error(backend):
    with patch("jobsphere.backends.supabase_rest.requests.request") as request:
        request.side_effect = requests.ConnectionError("connection refused")
        with pytest.raises(BackendError, match="Could not reach the server"):
            backend.select("jobs")


@pytest.mark.unit
def test_sign_in_token_is_used_for_later_requests(backend):
    with patch("jobsphere.backends.supabase_rest.requests.request") as request:
        request.return_value = _response(body={"access_token": "user-jwt", "user": {"email": "a@b.c"}})
        backend.sign_in("a@b.c", "pw123456")

        assert request.call_args.args[1] == f"{URL}/auth/v1/token"
        assert request.call_args.kwargs["params"] == {"grant_type": "password"}

        request.return_value = _response(body=[])
        backend.select("profiles")
        assert request.call_args.kwargs["headers"]["Authorization"] == "Bearer user-jwt"


@pytest.mark.unit
def test_bad_credentials_raise_auth_error(backend):
    body = {"error": "invalid_grant", "error_description": "Invalid login credentials"}
    with patch("jobsphere.backends.supabase_rest.requests.request") as request:
        request.return_value = _response(status=400, body=body)
        with pytest.raises(AuthError, match="Invalid login credentials"):
            backend.sign_in("a@b.c", "nope")


@pytest.mark.unit
def test_sign_out_clears_token_even_when_the_call_fails(backend):
    backend.access_token = "user-jwt"
    with patch("jobsphere.backends.supabase_rest.requests.request") as request:
        request.return_value = _response(status=500, body={"msg": "boom"})
        backend.sign_out()

    assert backend.access_token is None


@pytest.mark.unit
def test_sign_out_without_session_makes_no_request(backend):
    with patch("jobsphere.backends.supabase_rest.requests.request") as request:
        backend.sign_out()
    request.assert_not_called()
