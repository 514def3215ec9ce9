"""Page gating by sign-in state and role."""
from __future__ import annotations

from inkaranya.session import EMPLOYEE, ORGANIZATION, AuthSession

LOGIN = "login"
HOME = "home"
ORGANIZATION_DASHBOARD = "organization-dashboard"
EMPLOYEE_DASHBOARD = "employee-dashboard"

_DASHBOARDS = {
    ORGANIZATION: ORGANIZATION_DASHBOARD,
    EMPLOYEE: EMPLOYEE_DASHBOARD,
}


def require_auth(session: AuthSession) -> str | None:
    """None when the page may render, else the page to redirect to."""
    return None if session.is_authenticated else LOGIN


def require_role(session: AuthSession, role: str) -> str | None:
    if not session.is_authenticated:
        return LOGIN
    if session.role != role:
        return HOME
    return None


def public_only(session: AuthSession) -> str | None:
    """Login/register pages send signed-in users to their dashboard."""
    if not session.is_authenticated:
        return None
    return dashboard_for(session)


def dashboard_for(session: AuthSession) -> str:
    return _DASHBOARDS.get(session.role or "", HOME)
