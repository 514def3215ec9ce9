import pytest

from conftest import BASE_URL, FakeSession, fail, ok
from inkaranya.api import ApiClient
from inkaranya.session import EMPLOYEE, ORGANIZATION, AuthSession, registration_payload
from inkaranya.validation import ValidationError

EMPLOYEE_USER = {"id": "u1", "email": "ana@example.com", "role": "employee"}
ORG_USER = {"id": "u2", "email": "hr@acme.test", "role": "organization"}


def test_init_without_token_makes_no_call(api, fake_session):
    auth = AuthSession(api)
    assert auth.loading is True
    auth.init()
    assert auth.loading is False
    assert auth.user is None
    assert fake_session.calls == []


def test_new_visitor_does_not_inherit_another_sign_in(monkeypatch, tmp_path, api, fake_session):
    monkeypatch.delenv("INKARANYA_PERSIST_TOKEN", raising=False)
    monkeypatch.setenv("INKARANYA_DATA_DIR", str(tmp_path))
    fake_session.route("POST", "/auth/login", ok({"token": "t", "user": ORG_USER}))
    AuthSession(api).login("hr@acme.test", "pw")

    visitor_session = FakeSession()
    visitor = AuthSession(ApiClient(BASE_URL, session=visitor_session, timeout=1))
    visitor.init()
    assert not visitor.is_authenticated
    assert visitor_session.calls == []


def test_init_restores_session(api, fake_session):
    api.set_token("stored")
    fake_session.route("GET", "/auth/me", ok({"user": EMPLOYEE_USER, "profile": {"skills": []}}))
    auth = AuthSession(api)
    auth.init()
    assert auth.is_authenticated
    assert auth.is_employee and not auth.is_organization
    assert auth.profile == {"skills": []}


def test_init_discards_rejected_token(api, fake_session):
    api.set_token("expired")
    fake_session.route("GET", "/auth/me", fail(401, "Token expired"))
    auth = AuthSession(api)
    auth.init()
    assert auth.user is None
    assert api.get_token() is None
    assert auth.loading is False


def test_init_runs_once(api, fake_session):
    api.set_token("stored")
    fake_session.route("GET", "/auth/me", ok({"user": EMPLOYEE_USER}))
    auth = AuthSession(api)
    auth.init()
    auth.init()
    assert fake_session.paths() == ["/auth/me"]


def test_login_success(api, fake_session):
    fake_session.route("POST", "/auth/login", ok({"token": "t", "user": ORG_USER, "profile": {"name": "Acme"}}))
    auth = AuthSession(api)
    result = auth.login("hr@acme.test", "pw")
    assert result["success"] is True
    assert auth.is_organization
    assert auth.profile == {"name": "Acme"}
    assert api.get_token() == "t"
    assert auth.loading is False


def test_login_failure_sets_error_and_leaves_user_empty(api, fake_session):
    fake_session.route("POST", "/auth/login", fail(401, "Invalid credentials"))
    auth = AuthSession(api)
    result = auth.login("ana@example.com", "wrong")
    assert result == {"success": False, "error": "Invalid credentials"}
    assert auth.user is None
    assert auth.profile is None
    assert auth.error == "Invalid credentials"
    assert api.get_token() is None


def test_register_success(api, fake_session):
    fake_session.route("POST", "/auth/register", ok({"token": "new", "user": EMPLOYEE_USER}))
    auth = AuthSession(api)
    result = auth.register({"email": "ana@example.com", "role": "employee"})
    assert result["success"]
    assert auth.role == EMPLOYEE
    assert api.get_token() == "new"


def test_logout_clears_state_even_when_server_fails(api, fake_session):
    fake_session.route("POST", "/auth/login", ok({"token": "t", "user": EMPLOYEE_USER, "profile": {}}))
    fake_session.route("POST", "/auth/logout", fail(500, "boom"))
    auth = AuthSession(api)
    auth.login("ana@example.com", "pw")

    auth.logout()

    assert auth.user is None
    assert auth.profile is None
    assert api.get_token() is None


def test_update_profile_dispatches_on_role(api, fake_session):
    fake_session.route("POST", "/auth/login", ok({"token": "t", "user": ORG_USER, "profile": {}}))
    fake_session.route("PUT", "/organizations/profile", ok({"profile": {"name": "Acme 2"}}))
    auth = AuthSession(api)
    auth.login("hr@acme.test", "pw")

    result = auth.update_profile({"name": "Acme 2"})

    assert result["success"]
    assert auth.profile == {"name": "Acme 2"}
    assert fake_session.last()["path"] == "/organizations/profile"


def test_update_profile_requires_login(api, fake_session):
    auth = AuthSession(api)
    result = auth.update_profile({"x": 1})
    assert result["success"] is False
    assert fake_session.calls == []
    auth.clear_error()
    assert auth.error is None


def test_registration_payload_employee():
    payload = registration_payload({
        "role": EMPLOYEE,
        "email": " ana@example.com ",
        "password": "secret",
        "confirmPassword": "secret",
        "firstName": "Ana",
        "lastName": "Lopez",
        "phone": "555",
    })
    assert payload == {
        "email": "ana@example.com",
        "password": "secret",
        "role": "employee",
        "firstName": "Ana",
        "lastName": "Lopez",
        "phone": "555",
    }


def test_registration_payload_organization_fields():
    payload = registration_payload({
        "role": ORGANIZATION,
        "email": "hr@acme.test",
        "password": "pw",
        "confirmPassword": "pw",
        "name": "Acme",
        "industry": "technology",
    })
    assert payload["name"] == "Acme"
    assert payload["industry"] == "technology"
    assert payload["description"] == ""
    assert "firstName" not in payload


def test_registration_payload_rejects_mismatched_passwords():
    with pytest.raises(ValidationError) as exc_info:
        registration_payload({
            "role": EMPLOYEE,
            "email": "a@b.c",
            "password": "one",
            "confirmPassword": "two",
            "firstName": "A",
            "lastName": "B",
        })
    assert exc_info.value.errors == ["Passwords do not match."]


def test_registration_payload_lists_missing_fields():
    with pytest.raises(ValidationError) as exc_info:
        registration_payload({"role": ORGANIZATION, "password": "", "confirmPassword": ""})
    assert "Email is required." in exc_info.value.errors
    assert "Organization name is required." in exc_info.value.errors
