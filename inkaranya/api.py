"""REST client for the Inkaranya backend.

Every call goes through ``ApiClient.request``, which attaches the bearer token,
sends JSON and turns transport failures, non-2xx responses and
``{"status": "error"}`` envelopes into a single ``ApiError``.
"""
from __future__ import annotations

import json
from pathlib import Path
from typing import Any

import requests

from inkaranya.config import TOKEN_KEY, api_base_url, persist_token, request_timeout, token_path
from inkaranya.log import get_logger

log = get_logger(__name__)

GENERIC_ERROR = "Request failed"


class ApiError(Exception):
    """Raised for network failures and server-reported errors."""

    def __init__(self, message: str, status_code: int | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.status_code = status_code


class TokenStore:
    """The bearer token for one browser session, held in memory."""

    def __init__(self) -> None:
        self._token: str | None = None

    def get(self) -> str | None:
        return self._token

    def set(self, token: str) -> None:
        self._token = token

    def remove(self) -> None:
        self._token = None


class FileTokenStore(TokenStore):
    """Token persisted as ``{"token": ...}`` in one JSON file.

    Every client in the process shares the file, so this is only for
    single-user installs (``INKARANYA_PERSIST_TOKEN=1``).
    """

    def __init__(self, path: Path | None = None) -> None:
        super().__init__()
        self.path = path or token_path()

    def get(self) -> str | None:
        if not self.path.exists():
            return None
        try:
            data = json.loads(self.path.read_text(encoding="utf-8"))
        except (OSError, ValueError) as exc:
            log.warning("Unreadable token file %s: %s", self.path.name, exc)
            return None
        token = data.get(TOKEN_KEY) if isinstance(data, dict) else None
        return token or None

    def set(self, token: str) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self.path.write_text(json.dumps({TOKEN_KEY: token}), encoding="utf-8")

    def remove(self) -> None:
        self.path.unlink(missing_ok=True)


def default_token_store() -> TokenStore:
    return FileTokenStore() if persist_token() else TokenStore()


def _clean_params(params: dict[str, Any] | None) -> dict[str, Any]:
    return {k: v for k, v in (params or {}).items() if v is not None}


def _status_body(
    status: Any, note: str | None, interview_data: dict[str, Any] | None
) -> dict[str, Any]:
    body: dict[str, Any] = {"status": getattr(status, "value", status), "note": note}
    if interview_data:
        body["interviewData"] = interview_data
    return body


class ApiClient:
    def __init__(
        self,
        base_url: str | None = None,
        token_store: TokenStore | None = None,
        session: requests.Session | None = None,
        timeout: float | None = None,
    ) -> None:
        self.base_url = (base_url or api_base_url()).rstrip("/")
        self.tokens = token_store or default_token_store()
        self.session = session or requests.Session()
        self.timeout = timeout if timeout is not None else request_timeout()

    # ── Token ────────────────────────────────────────────────────────────

    def get_token(self) -> str | None:
        return self.tokens.get()

    def set_token(self, token: str) -> None:
        self.tokens.set(token)

    def remove_token(self) -> None:
        self.tokens.remove()

    # ── Transport ────────────────────────────────────────────────────────

    def request(
        self,
        endpoint: str,
        method: str = "GET",
        body: dict[str, Any] | None = None,
        params: dict[str, Any] | None = None,
    ) -> dict[str, Any]:
        url = f"{self.base_url}{endpoint}"
        headers = {"Content-Type": "application/json"}
        token = self.get_token()
        if token:
            headers["Authorization"] = f"Bearer {token}"

        try:
            r = self.session.request(
                method,
                url,
                headers=headers,
                json=body,
                params=_clean_params(params) or None,
                timeout=self.timeout,
            )
        except requests.RequestException as exc:
            log.warning("%s %s failed: %s", method, endpoint, exc)
            raise ApiError(f"Network error: {exc}") from exc

        try:
            data = r.json()
        except ValueError:
            data = {}
        if not isinstance(data, dict):
            data = {"data": data}

        if not r.ok:
            message = data.get("message") or GENERIC_ERROR
            log.warning("%s %s -> %s: %s", method, endpoint, r.status_code, message)
            raise ApiError(message, r.status_code)

        if data.get("status", "success") != "success":
            message = data.get("message") or GENERIC_ERROR
            log.warning("%s %s reported error: %s", method, endpoint, message)
            raise ApiError(message, r.status_code)

        log.debug("%s %s -> %s", method, endpoint, r.status_code)
        return data

    # ── Auth ─────────────────────────────────────────────────────────────

    def register(self, user_data: dict[str, Any]) -> dict[str, Any]:
        response = self.request("/auth/register", "POST", user_data)
        self._store_token(response)
        return response

    def login(self, email: str, password: str) -> dict[str, Any]:
        response = self.request(
            "/auth/login", "POST", {"email": email, "password": password}
        )
        self._store_token(response)
        return response

    def logout(self) -> None:
        try:
            self.request("/auth/logout", "POST")
        finally:
            self.remove_token()

    def get_current_user(self) -> dict[str, Any]:
        return self.request("/auth/me")

    def _store_token(self, response: dict[str, Any]) -> None:
        token = (response.get("data") or {}).get("token")
        if token:
            self.set_token(token)

    # ── Organizations ────────────────────────────────────────────────────

    def get_organization_dashboard(self) -> dict[str, Any]:
        return self.request("/organizations/dashboard")

    def get_organization_profile(self) -> dict[str, Any]:
        return self.request("/organizations/profile")

    def update_organization_profile(self, profile_data: dict[str, Any]) -> dict[str, Any]:
        return self.request("/organizations/profile", "PUT", profile_data)

    def get_organization_opportunities(self, params: dict | None = None) -> dict[str, Any]:
        return self.request("/organizations/opportunities", params=params)

    def get_organization(self, organization_id: str) -> dict[str, Any]:
        return self.request(f"/organizations/{organization_id}")

    def get_organization_applications(self, params: dict | None = None) -> dict[str, Any]:
        return self.request("/organizations/applications", params=params)

    def update_organization_application_status(
        self,
        application_id: str,
        status: Any,
        note: str | None = None,
        interview_data: dict[str, Any] | None = None,
    ) -> dict[str, Any]:
        return self.request(
            f"/organizations/applications/{application_id}/status",
            "PUT",
            _status_body(status, note, interview_data),
        )

    # ── Employees ────────────────────────────────────────────────────────

    def get_employee_dashboard(self) -> dict[str, Any]:
        return self.request("/employees/dashboard")

    def get_employee_profile(self) -> dict[str, Any]:
        return self.request("/employees/profile")

    def update_employee_profile(self, profile_data: dict[str, Any]) -> dict[str, Any]:
        return self.request("/employees/profile", "PUT", profile_data)

    def get_employee_opportunities(self, params: dict | None = None) -> dict[str, Any]:
        return self.request("/employees/opportunities", params=params)

    def get_employee_applications(self, params: dict | None = None) -> dict[str, Any]:
        return self.request("/employees/applications", params=params)

    def get_employee_recommendations(self) -> dict[str, Any]:
        return self.request("/employees/recommendations")

    # ── Opportunities ────────────────────────────────────────────────────

    def get_opportunities(self, params: dict | None = None) -> dict[str, Any]:
        return self.request("/opportunities", params=params)

    def get_opportunity(self, opportunity_id: str) -> dict[str, Any]:
        return self.request(f"/opportunities/{opportunity_id}")

    def create_opportunity(self, opportunity_data: dict[str, Any]) -> dict[str, Any]:
        return self.request("/opportunities", "POST", opportunity_data)

    def update_opportunity(
        self, opportunity_id: str, opportunity_data: dict[str, Any]
    ) -> dict[str, Any]:
        return self.request(f"/opportunities/{opportunity_id}", "PUT", opportunity_data)

    def delete_opportunity(self, opportunity_id: str) -> dict[str, Any]:
        return self.request(f"/opportunities/{opportunity_id}", "DELETE")

    # ── Applications ─────────────────────────────────────────────────────

    def submit_application(self, submission: dict[str, Any]) -> dict[str, Any]:
        return self.request("/applications", "POST", submission)

    def get_application(self, application_id: str) -> dict[str, Any]:
        return self.request(f"/applications/{application_id}")

    def get_applications(self, params: dict | None = None) -> dict[str, Any]:
        return self.request("/applications", params=params)

    def update_application_status(
        self,
        application_id: str,
        status: Any,
        note: str | None = None,
        interview_data: dict[str, Any] | None = None,
    ) -> dict[str, Any]:
        return self.request(
            f"/applications/{application_id}/status",
            "PUT",
            _status_body(status, note, interview_data),
        )

    def withdraw_application(self, application_id: str) -> dict[str, Any]:
        return self.request(f"/applications/{application_id}/withdraw", "PUT")

    # ── Matching & recommendations ───────────────────────────────────────

    def get_matching_candidates(
        self, opportunity_id: str, params: dict | None = None
    ) -> dict[str, Any]:
        return self.request(
            f"/matching/opportunities/{opportunity_id}/candidates", params=params
        )

    def get_matching_opportunities(
        self, employee_id: str, params: dict | None = None
    ) -> dict[str, Any]:
        return self.request(
            f"/matching/employees/{employee_id}/opportunities", params=params
        )

    def get_matching_analytics(self) -> dict[str, Any]:
        return self.request("/matching/analytics")

    def get_recommended_opportunities(self, params: dict | None = None) -> dict[str, Any]:
        return self.request("/recommendations/opportunities", params=params)

    def get_recommended_employees(self, params: dict | None = None) -> dict[str, Any]:
        return self.request("/recommendations/employees", params=params)

    def update_employee_skills(
        self, skills: list[dict[str, Any]], interests: list[dict[str, Any]]
    ) -> dict[str, Any]:
        return self.request(
            "/recommendations/update-skills",
            "POST",
            {"skills": skills, "interests": interests},
        )

    def update_organization_requirements(
        self, requirements: dict[str, Any], culture: dict[str, Any]
    ) -> dict[str, Any]:
        return self.request(
            "/recommendations/update-requirements",
            "POST",
            {"requirements": requirements, "culture": culture},
        )

    def get_match_score(self, employee_id: str, organization_id: str) -> dict[str, Any]:
        return self.request(f"/recommendations/match-score/{employee_id}/{organization_id}")

    def health_check(self) -> dict[str, Any]:
        return self.request("/health")
