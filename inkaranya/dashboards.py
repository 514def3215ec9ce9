"""Role-specific summary screens."""
from __future__ import annotations

from typing import Any

from inkaranya.api import ApiClient, ApiError
from inkaranya.feed import OpportunityFeed
from inkaranya.log import get_logger
from inkaranya.models import Application, Opportunity
from inkaranya.notify import Notifier

log = get_logger(__name__)

EMPLOYEE_TABS = ("overview", "applications", "opportunities", "interviews", "profile")
ORGANIZATION_TABS = ("overview", "opportunities", "applications", "profile")

_MISSING_ORG_PROFILE = "Organization profile not found"
_EMPTY_ORG_STATS = {
    "totalOpportunities": 0,
    "activeOpportunities": 0,
    "totalApplications": 0,
    "pendingApplications": 0,
}


class _Dashboard:
    tabs: tuple[str, ...] = ("overview",)

    def __init__(self, api: ApiClient, notifier: Notifier) -> None:
        self.api = api
        self.notifier = notifier
        self.data: dict[str, Any] | None = None
        self.active_tab = self.tabs[0]
        self.loading = True

    def select_tab(self, tab: str) -> None:
        if tab not in self.tabs:
            raise ValueError(f"Unknown tab {tab!r}")
        self.active_tab = tab

    @property
    def stats(self) -> dict[str, Any]:
        return (self.data or {}).get("stats") or {}

    @property
    def recent_applications(self) -> list[Application]:
        return [Application.from_api(a) for a in (self.data or {}).get("recentApplications") or []]

    def _fetch(self) -> dict[str, Any]:
        raise NotImplementedError

    def load(self) -> dict[str, Any] | None:
        self.loading = True
        try:
            response = self._fetch()
            self.data = response.get("data") or {}
        except ApiError as exc:
            self._on_error(exc)
        finally:
            self.loading = False
        return self.data

    def _on_error(self, exc: ApiError) -> None:
        self.notifier.error("Error", exc.message or "Failed to fetch dashboard data")


class EmployeeDashboard(_Dashboard):
    tabs = EMPLOYEE_TABS

    def __init__(self, api: ApiClient, notifier: Notifier) -> None:
        super().__init__(api, notifier)
        self.feed: OpportunityFeed | None = None

    def _fetch(self) -> dict[str, Any]:
        return self.api.get_employee_dashboard()

    @property
    def recommended(self) -> list[Opportunity]:
        raw = (self.data or {}).get("recommendedOpportunities") or []
        return [Opportunity.from_api(o.get("opportunity", o)) for o in raw]

    def select_tab(self, tab: str) -> None:
        super().select_tab(tab)
        # The opportunities tab fetches its list the first time it is opened.
        if tab == "opportunities" and self.feed is None:
            self.feed = OpportunityFeed(self.api, self.notifier)
            self.feed.refresh()


class OrganizationDashboard(_Dashboard):
    tabs = ORGANIZATION_TABS

    def _fetch(self) -> dict[str, Any]:
        return self.api.get_organization_dashboard()

    @property
    def organization(self) -> dict[str, Any] | None:
        return (self.data or {}).get("organization")

    @property
    def opportunities(self) -> list[dict[str, Any]]:
        return list((self.data or {}).get("opportunitiesWithStats") or [])

    @property
    def needs_profile(self) -> bool:
        return self.data is not None and self.organization is None

    def _on_error(self, exc: ApiError) -> None:
        if _MISSING_ORG_PROFILE in (exc.message or ""):
            log.info("Organization has no profile yet; showing empty dashboard")
            self.data = {
                "organization": None,
                "stats": dict(_EMPTY_ORG_STATS),
                "recentApplications": [],
                "opportunitiesWithStats": [],
            }
            return
        super()._on_error(exc)
