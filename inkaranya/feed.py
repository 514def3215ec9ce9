"""Opportunity listing with filters, sort and stale-response protection."""
from __future__ import annotations

import html
import threading
from dataclasses import dataclass, fields, replace
from typing import Any

from inkaranya.api import ApiClient, ApiError
from inkaranya.log import get_logger
from inkaranya.models import Opportunity
from inkaranya.notify import Notifier

log = get_logger(__name__)

ALL = "all"
DEFAULT_SORT = "recent"


class RequestGeneration:
    """Monotonic ticket per fetch; only the newest ticket may commit."""

    def __init__(self) -> None:
        self._value = 0
        self._lock = threading.Lock()

    def next(self) -> int:
        with self._lock:
            self._value += 1
            return self._value

    def is_current(self, ticket: int) -> bool:
        with self._lock:
            return ticket == self._value


@dataclass(frozen=True)
class OpportunityFilters:
    search: str = ""
    type: str = ALL
    category: str = ALL
    location: str = ALL
    industry: str = ALL
    sort_by: str = DEFAULT_SORT

    def to_params(self) -> dict[str, str]:
        params: dict[str, str] = {}
        if self.search.strip():
            params["search"] = self.search.strip()
        for name in ("type", "category", "location", "industry"):
            value = getattr(self, name)
            if value and value != ALL:
                params[name] = value
        if self.sort_by:
            params["sortBy"] = self.sort_by
        return params

    def cleared(self) -> OpportunityFilters:
        """All filters and the search term back to their defaults; sort is kept."""
        return OpportunityFilters(sort_by=self.sort_by)

    @property
    def is_filtered(self) -> bool:
        return bool(set(self.to_params()) - {"sortBy"})


_FILTER_FIELDS = {f.name for f in fields(OpportunityFilters)}


class OpportunityFeed:
    """Every filter or sort change triggers a fresh fetch; no caching."""

    def __init__(self, api: ApiClient, notifier: Notifier) -> None:
        self.api = api
        self.notifier = notifier
        self.filters = OpportunityFilters()
        self.opportunities: list[Opportunity] = []
        self.loading = False
        self._generation = RequestGeneration()

    def update_filters(self, **changes: Any) -> bool:
        """Apply changes and re-fetch; returns False if nothing changed."""
        unknown = set(changes) - _FILTER_FIELDS
        if unknown:
            raise ValueError(f"Unknown filter(s): {', '.join(sorted(unknown))}")
        updated = replace(self.filters, **changes)
        if updated == self.filters:
            return False
        self.filters = updated
        self.refresh()
        return True

    def clear_filters(self) -> None:
        self.filters = self.filters.cleared()
        self.refresh()

    def refresh(self) -> list[Opportunity]:
        ticket = self._generation.next()
        params = self.filters.to_params()
        self.loading = True
        try:
            response = self.api.get_opportunities(params)
        except ApiError as exc:
            if self._generation.is_current(ticket):
                self.loading = False
                self.notifier.error("Error", exc.message or "Failed to fetch opportunities")
            return self.opportunities

        raw = (response.get("data") or {}).get("opportunities") or []
        self.commit(ticket, [Opportunity.from_api(o) for o in raw])
        return self.opportunities

    def commit(self, ticket: int, opportunities: list[Opportunity]) -> bool:
        """Store a fetch result unless a newer fetch has started since."""
        if not self._generation.is_current(ticket):
            log.debug("Dropping stale opportunity response (ticket %d)", ticket)
            return False
        self.opportunities = opportunities
        self.loading = False
        log.info("Loaded %d opportunities %s", len(opportunities), self.filters.to_params())
        return True


def load_opportunity(api: ApiClient, opportunity_id: str, notifier: Notifier) -> Opportunity | None:
    try:
        response = api.get_opportunity(opportunity_id)
    except ApiError as exc:
        notifier.error("Error", exc.message or "Failed to load opportunity")
        return None
    data = response.get("data") or {}
    raw = data.get("opportunity") or data
    return Opportunity.from_api(raw) if raw else None


def location_display(opportunity: Opportunity) -> str:
    if opportunity.address:
        return opportunity.address
    org = opportunity.organization
    parts = [p for p in (org.city, org.state) if p]
    if parts:
        return ", ".join(parts)
    return opportunity.location_type.title() or "Not specified"


def format_currency(amount: float, currency: str = "USD") -> str:
    symbols = {"USD": "$", "EUR": "€", "GBP": "£", "INR": "₹"}
    symbol = symbols.get(currency.upper())
    if symbol:
        return f"{symbol}{amount:,.0f}"
    return f"{amount:,.0f} {currency.upper()}"


COMPENSATION_PERIODS = {"salary": "year", "hourly": "hour", "monthly": "month"}


def compensation_display(opportunity: Opportunity) -> str:
    if not opportunity.compensation_amount:
        return "Competitive"
    amount = format_currency(opportunity.compensation_amount, opportunity.compensation_currency)
    kind = opportunity.compensation_type
    period = COMPENSATION_PERIODS.get(kind, kind or "period")
    return f"{amount}/{period}"


def load_organization(
    api: ApiClient, organization_id: str, notifier: Notifier
) -> tuple[dict[str, Any], list[Opportunity]] | None:
    """Public profile of an organization plus its listed opportunities."""
    try:
        org_response = api.get_organization(organization_id)
        opp_response = api.get_opportunities({"organizationId": organization_id})
    except ApiError as exc:
        log.warning("Organization %s failed to load: %s", organization_id, exc.message)
        notifier.error("Error", "Failed to load organization profile")
        return None
    data = org_response.get("data") or {}
    organization = data.get("organization") or data
    raw_opps = (opp_response.get("data") or {}).get("opportunities") or []
    return organization, [Opportunity.from_api(o) for o in raw_opps]


def opportunity_card_html(opportunity: Opportunity) -> str:
    """Card markup with every server-supplied value HTML-escaped."""
    org = opportunity.organization.name or "Unknown organization"
    meta = " · ".join(
        html.escape(str(part))
        for part in (org, location_display(opportunity), opportunity.type or "n/a",
                     compensation_display(opportunity))
    )
    return (
        f'<div class="opp-card"><h4>{html.escape(opportunity.title)}</h4>'
        f'<div class="opp-meta">{meta}</div></div>'
    )
