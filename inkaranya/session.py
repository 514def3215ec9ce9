"""Signed-in user state shared by every page.

One ``AuthSession`` is created per browser session and handed to the pages
that need it. Methods never raise ``ApiError`` to the caller: they return
``{"success": bool, "data" | "error": ...}`` and keep ``error`` current.
"""
from __future__ import annotations

from typing import Any

from inkaranya.api import ApiClient, ApiError
from inkaranya.log import get_logger
from inkaranya.validation import ValidationError, missing

log = get_logger(__name__)

ORGANIZATION = "organization"
EMPLOYEE = "employee"


class AuthSession:
    def __init__(self, api: ApiClient) -> None:
        self.api = api
        self.user: dict[str, Any] | None = None
        self.profile: dict[str, Any] | None = None
        self.loading = True
        self.error: str | None = None
        self._initialized = False

    # ── Derived state ────────────────────────────────────────────────────

    @property
    def is_authenticated(self) -> bool:
        return self.user is not None

    @property
    def role(self) -> str | None:
        return (self.user or {}).get("role")

    @property
    def is_organization(self) -> bool:
        return self.role == ORGANIZATION

    @property
    def is_employee(self) -> bool:
        return self.role == EMPLOYEE

    # ── Lifecycle ────────────────────────────────────────────────────────

    def init(self) -> None:
        """Restore the session from a stored token; runs once."""
        if self._initialized:
            return
        self._initialized = True
        try:
            if not self.api.get_token():
                return
            try:
                response = self.api.get_current_user()
            except ApiError as exc:
                log.warning("Session restore failed, discarding token: %s", exc.message)
                self.api.remove_token()
                return
            self._apply(response.get("data") or {})
            log.info("Restored session for %s", (self.user or {}).get("email", "?"))
        finally:
            self.loading = False

    def _apply(self, data: dict[str, Any]) -> None:
        self.user = data.get("user")
        self.profile = data.get("profile")

    def _fail(self, exc: ApiError, fallback: str) -> dict[str, Any]:
        self.error = exc.message or fallback
        return {"success": False, "error": self.error}

    # ── Actions ──────────────────────────────────────────────────────────

    def login(self, email: str, password: str) -> dict[str, Any]:
        self.error = None
        self.loading = True
        try:
            response = self.api.login(email, password)
            data = response.get("data") or {}
            self._apply(data)
            log.info("Logged in as %s (%s)", email, self.role)
            return {"success": True, "data": data}
        except ApiError as exc:
            return self._fail(exc, "Login failed")
        finally:
            self.loading = False

    def register(self, user_data: dict[str, Any]) -> dict[str, Any]:
        self.error = None
        self.loading = True
        try:
            response = self.api.register(user_data)
            data = response.get("data") or {}
            self._apply(data)
            log.info("Registered %s as %s", user_data.get("email"), self.role)
            return {"success": True, "data": data}
        except ApiError as exc:
            return self._fail(exc, "Registration failed")
        finally:
            self.loading = False

    def logout(self) -> None:
        try:
            self.api.logout()
        except ApiError as exc:
            log.warning("Logout call failed: %s", exc.message)
        finally:
            self.user = None
            self.profile = None
            self.api.remove_token()

    def update_profile(self, profile_data: dict[str, Any]) -> dict[str, Any]:
        self.error = None
        if self.is_organization:
            update = self.api.update_organization_profile
        elif self.is_employee:
            update = self.api.update_employee_profile
        else:
            self.error = "Not signed in"
            return {"success": False, "error": self.error}
        try:
            response = update(profile_data)
        except ApiError as exc:
            return self._fail(exc, "Profile update failed")
        data = response.get("data") or {}
        self.profile = data.get("profile", self.profile)
        return {"success": True, "data": data}

    def clear_error(self) -> None:
        self.error = None


def registration_payload(form: dict[str, Any]) -> dict[str, Any]:
    """Build the /auth/register body for either role.

    Raises:
        ValidationError: missing fields or mismatched passwords.
    """
    role = form.get("role") or EMPLOYEE
    if role not in (EMPLOYEE, ORGANIZATION):
        raise ValidationError([f"Unknown role {role!r}."])

    required = {"Email": form.get("email"), "Password": form.get("password")}
    if role == EMPLOYEE:
        required.update({"First name": form.get("firstName"), "Last name": form.get("lastName")})
    else:
        required["Organization name"] = form.get("name")
    errors = missing(required)
    if form.get("password") != form.get("confirmPassword"):
        errors.append("Passwords do not match.")
    if errors:
        raise ValidationError(errors)

    payload: dict[str, Any] = {
        "email": form["email"].strip(),
        "password": form["password"],
        "role": role,
    }
    if role == EMPLOYEE:
        keys = ("firstName", "lastName", "phone")
    else:
        keys = ("name", "description", "industry", "size")
    payload.update({k: form.get(k, "") for k in keys})
    return payload
