import pytest

from conftest import BASE_URL, FakeResponse, FakeSession, fail, ok
from inkaranya.api import GENERIC_ERROR, ApiClient, ApiError, FileTokenStore, TokenStore
from inkaranya.status import ApplicationStatus


def test_memory_token_store():
    store = TokenStore()
    assert store.get() is None
    store.set("abc")
    assert store.get() == "abc"
    store.remove()
    assert store.get() is None


def test_file_token_store_round_trip(tmp_path):
    store = FileTokenStore(tmp_path / "nested" / "session.json")
    assert store.get() is None
    store.set("abc")
    assert store.get() == "abc"
    assert (tmp_path / "nested" / "session.json").read_text() == '{"token": "abc"}'
    store.remove()
    assert store.get() is None
    store.remove()  # removing twice is fine


def test_file_token_store_ignores_corrupt_file(tmp_path):
    path = tmp_path / "session.json"
    path.write_text("not json")
    assert FileTokenStore(path).get() is None


def test_clients_keep_their_own_tokens(monkeypatch, tmp_path):
    # Two browser sessions on one server, default configuration.
    monkeypatch.delenv("INKARANYA_PERSIST_TOKEN", raising=False)
    monkeypatch.setenv("INKARANYA_DATA_DIR", str(tmp_path))
    first_session, second_session = FakeSession(), FakeSession()
    first = ApiClient(BASE_URL, session=first_session, timeout=1)
    second = ApiClient(BASE_URL, session=second_session, timeout=1)

    first_session.route("POST", "/auth/login", ok({"token": "tok-A", "user": {}}))
    second_session.route("POST", "/auth/login", ok({"token": "tok-B", "user": {}}))
    first.login("a@b.c", "pw")
    assert second.get_token() is None
    second.login("x@y.z", "pw")

    first_session.route("GET", "/auth/me", ok({"user": {}}))
    first.get_current_user()
    assert first_session.last()["headers"]["Authorization"] == "Bearer tok-A"
    assert second.get_token() == "tok-B"

    first_session.route("POST", "/auth/logout", ok())
    first.logout()
    assert second.get_token() == "tok-B"
    assert not (tmp_path / "session.json").exists()


def test_request_without_token_has_no_auth_header(api, fake_session):
    fake_session.route("GET", "/health", ok({"up": True}))
    assert api.health_check()["data"] == {"up": True}
    call = fake_session.last()
    assert "Authorization" not in call["headers"]
    assert call["headers"]["Content-Type"] == "application/json"
    assert call["timeout"] == 5


def test_request_attaches_bearer_token(api, fake_session):
    api.set_token("t0k")
    fake_session.route("GET", "/auth/me", ok({"user": {"email": "a@b.c"}}))
    api.get_current_user()
    assert fake_session.last()["headers"]["Authorization"] == "Bearer t0k"


def test_http_error_uses_server_message(api, fake_session):
    fake_session.route("POST", "/auth/login", fail(401, "Invalid credentials"))
    with pytest.raises(ApiError) as exc_info:
        api.login("a@b.c", "nope")
    assert exc_info.value.message == "Invalid credentials"
    assert exc_info.value.status_code == 401


def test_http_error_without_message_is_generic(api, fake_session):
    fake_session.route("GET", "/opportunities", FakeResponse(500, None))
    with pytest.raises(ApiError) as exc_info:
        api.get_opportunities()
    assert exc_info.value.message == GENERIC_ERROR


def test_error_envelope_with_2xx_still_raises(api, fake_session):
    fake_session.route("GET", "/opportunities", FakeResponse(200, {"status": "error", "message": "Nope"}))
    with pytest.raises(ApiError, match="Nope"):
        api.get_opportunities()


def test_network_failure_becomes_api_error(api, fake_session, connection_error):
    fake_session.route("GET", "/opportunities", connection_error)
    with pytest.raises(ApiError) as exc_info:
        api.get_opportunities()
    assert exc_info.value.message.startswith("Network error")
    assert exc_info.value.status_code is None


def test_login_and_register_store_token(api, fake_session):
    fake_session.route("POST", "/auth/login", ok({"token": "login-token", "user": {}}))
    api.login("a@b.c", "pw")
    assert api.get_token() == "login-token"

    fake_session.route("POST", "/auth/register", ok({"token": "reg-token", "user": {}}))
    api.register({"email": "x@y.z"})
    assert api.get_token() == "reg-token"


def test_logout_removes_token_even_when_server_fails(api, fake_session):
    api.set_token("t")
    fake_session.route("POST", "/auth/logout", fail(500))
    with pytest.raises(ApiError):
        api.logout()
    assert api.get_token() is None


def test_query_params_drop_none(api, fake_session):
    fake_session.route("GET", "/opportunities", ok({"opportunities": []}))
    api.get_opportunities({"type": "internship", "category": None})
    assert fake_session.last()["params"] == {"type": "internship"}

    api.get_opportunities()
    assert fake_session.last()["params"] is None


def test_status_update_omits_interview_data_when_absent(api, fake_session):
    fake_session.route("PUT", "/applications/a1/status", ok())
    api.update_application_status("a1", ApplicationStatus.SHORTLISTED)
    assert fake_session.last()["json"] == {"status": "shortlisted", "note": None}


def test_status_update_sends_interview_data(api, fake_session):
    fake_session.route("PUT", "/applications/a1/status", ok())
    api.update_application_status("a1", "interview", "see note", {"date": "2025-01-15"})
    body = fake_session.last()["json"]
    assert body["interviewData"] == {"date": "2025-01-15"}
    assert body["note"] == "see note"


def test_endpoint_paths(api, fake_session):
    for method, path in [
        ("PUT", "/applications/a9/withdraw"),
        ("DELETE", "/opportunities/o1"),
        ("POST", "/recommendations/update-skills"),
        ("GET", "/recommendations/match-score/e1/o1"),
        ("GET", "/matching/opportunities/o1/candidates"),
    ]:
        fake_session.route(method, path, ok())

    api.withdraw_application("a9")
    api.delete_opportunity("o1")
    api.update_employee_skills([{"name": "python"}], [])
    api.get_match_score("e1", "o1")
    api.get_matching_candidates("o1")

    assert fake_session.paths() == [
        "/applications/a9/withdraw",
        "/opportunities/o1",
        "/recommendations/update-skills",
        "/recommendations/match-score/e1/o1",
        "/matching/opportunities/o1/candidates",
    ]
    assert fake_session.calls[2]["json"] == {"skills": [{"name": "python"}], "interests": []}


def test_base_url_trailing_slash_is_trimmed(token_store, fake_session):
    client = ApiClient("http://api.test/api/", token_store=token_store, session=fake_session, timeout=1)
    fake_session.route("GET", "/health", ok())
    client.health_check()
    assert fake_session.paths() == ["/health"]
