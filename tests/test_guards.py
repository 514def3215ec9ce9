import pytest

from inkaranya.guards import (
    EMPLOYEE_DASHBOARD,
    HOME,
    LOGIN,
    ORGANIZATION_DASHBOARD,
    dashboard_for,
    public_only,
    require_auth,
    require_role,
)
from inkaranya.session import EMPLOYEE, ORGANIZATION, AuthSession


@pytest.fixture
def visitor(api):
    return AuthSession(api)


@pytest.fixture
def employee(api):
    session = AuthSession(api)
    session.user = {"email": "ana@example.com", "role": EMPLOYEE}
    return session


@pytest.fixture
def organization(api):
    session = AuthSession(api)
    session.user = {"email": "hr@acme.test", "role": ORGANIZATION}
    return session


def test_visitor_is_sent_to_login(visitor):
    assert require_auth(visitor) == LOGIN
    assert require_role(visitor, EMPLOYEE) == LOGIN
    assert public_only(visitor) is None


def test_wrong_role_goes_home(employee, organization):
    assert require_role(employee, ORGANIZATION) == HOME
    assert require_role(organization, EMPLOYEE) == HOME
    assert require_role(employee, EMPLOYEE) is None
    assert require_auth(organization) is None


def test_signed_in_users_skip_login(employee, organization):
    assert public_only(employee) == EMPLOYEE_DASHBOARD
    assert public_only(organization) == ORGANIZATION_DASHBOARD


def test_unknown_role_dashboard(api):
    session = AuthSession(api)
    session.user = {"email": "x@y.z", "role": "admin"}
    assert dashboard_for(session) == HOME
