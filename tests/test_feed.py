import pytest

from conftest import fail, ok
from inkaranya.feed import (
    ALL,
    OpportunityFeed,
    OpportunityFilters,
    RequestGeneration,
    compensation_display,
    format_currency,
    load_opportunity,
    load_organization,
    location_display,
    opportunity_card_html,
)
from inkaranya.models import Opportunity

OPPORTUNITY = {
    "_id": "o1",
    "title": "Data Intern",
    "type": "internship",
    "category": "technology",
    "location": {"type": "remote"},
    "compensation": {"amount": 2500, "currency": "USD", "type": "monthly"},
    "organization": {"_id": "org1", "name": "Acme", "location": {"city": "Austin", "state": "TX"}},
}


def test_filters_to_params_drop_sentinels():
    filters = OpportunityFilters(search="  data ", type="internship", category=ALL)
    assert filters.to_params() == {"search": "data", "type": "internship", "sortBy": "recent"}
    assert filters.is_filtered
    assert not OpportunityFilters(sort_by="deadline").is_filtered


def test_cleared_keeps_sort():
    filters = OpportunityFilters(search="x", industry="health", sort_by="deadline")
    assert filters.cleared() == OpportunityFilters(sort_by="deadline")


def test_every_filter_change_refetches(api, fake_session, notifier):
    fake_session.route("GET", "/opportunities", ok({"opportunities": [OPPORTUNITY]}))
    feed = OpportunityFeed(api, notifier)

    assert feed.update_filters(type="internship") is True
    assert feed.update_filters(type="internship") is False
    feed.update_filters(sort_by="deadline")

    assert len(fake_session.calls) == 2
    assert fake_session.last()["params"] == {"type": "internship", "sortBy": "deadline"}
    assert feed.opportunities[0].title == "Data Intern"


def test_clear_filters_refetches(api, fake_session, notifier):
    fake_session.route("GET", "/opportunities", ok({"opportunities": []}))
    feed = OpportunityFeed(api, notifier)
    feed.update_filters(search="data", location="remote")
    feed.clear_filters()
    assert fake_session.last()["params"] == {"sortBy": "recent"}
    assert feed.filters == OpportunityFilters()


def test_unknown_filter_raises(api, notifier):
    with pytest.raises(ValueError):
        OpportunityFeed(api, notifier).update_filters(salary="high")


def test_stale_response_is_dropped(api, notifier):
    feed = OpportunityFeed(api, notifier)
    first = feed._generation.next()
    second = feed._generation.next()
    newest = [Opportunity.from_api(OPPORTUNITY)]

    assert feed.commit(second, newest) is True
    assert feed.commit(first, []) is False
    assert feed.opportunities == newest


def test_request_generation():
    gen = RequestGeneration()
    a = gen.next()
    assert gen.is_current(a)
    b = gen.next()
    assert not gen.is_current(a)
    assert gen.is_current(b)


def test_fetch_error_notifies_and_keeps_list(api, fake_session, notifier):
    fake_session.route("GET", "/opportunities", [ok({"opportunities": [OPPORTUNITY]}), fail(500, "DB down")])
    feed = OpportunityFeed(api, notifier)
    feed.refresh()
    feed.refresh()
    assert len(feed.opportunities) == 1
    assert feed.loading is False
    assert notifier.drain()[-1].description == "DB down"


def test_load_opportunity(api, fake_session, notifier):
    fake_session.route("GET", "/opportunities/o1", ok({"opportunity": OPPORTUNITY}))
    opp = load_opportunity(api, "o1", notifier)
    assert opp.organization.name == "Acme"

    fake_session.route("GET", "/opportunities/missing", fail(404, "Opportunity not found"))
    assert load_opportunity(api, "missing", notifier) is None
    assert notifier.drain()[-1].description == "Opportunity not found"


def test_display_helpers():
    opp = Opportunity.from_api(OPPORTUNITY)
    assert location_display(opp) == "Austin, TX"
    assert compensation_display(opp) == "$2,500/month"

    bare = Opportunity.from_api({"_id": "o2", "location": {"type": "hybrid"}})
    assert location_display(bare) == "Hybrid"
    assert compensation_display(bare) == "Competitive"

    addressed = Opportunity.from_api({"location": {"type": "on-site", "address": "1 Loop"}})
    assert location_display(addressed) == "1 Loop"


@pytest.mark.parametrize(
    "compensation, expected",
    [
        ({"amount": 60000, "type": "salary"}, "$60,000/year"),
        ({"amount": 25, "type": "hourly"}, "$25/hour"),
        ({"amount": 2500, "type": "monthly"}, "$2,500/month"),
        ({"amount": 500, "type": "stipend"}, "$500/stipend"),
        ({"amount": 500}, "$500/period"),
        ({"amount": 60000, "currency": "INR", "type": "salary"}, "₹60,000/year"),
        ({"amount": 40000, "currency": "EUR", "type": "salary"}, "€40,000/year"),
        ({"type": "salary"}, "Competitive"),
        ({"amount": 0, "type": "hourly"}, "Competitive"),
    ],
)
def test_compensation_display_by_type(compensation, expected):
    opp = Opportunity.from_api({"_id": "o3", "compensation": compensation})
    assert compensation_display(opp) == expected


def test_format_currency():
    assert format_currency(1500) == "$1,500"
    assert format_currency(900, "eur") == "€900"
    assert format_currency(700, "CHF") == "700 CHF"


ORGANIZATION = {
    "_id": "org1",
    "name": "Acme",
    "industry": "Technology",
    "mission": "Ship it",
    "location": {"city": "Austin", "state": "TX"},
}


def test_load_organization(api, fake_session, notifier):
    fake_session.route("GET", "/organizations/org1", ok({"organization": ORGANIZATION}))
    fake_session.route("GET", "/opportunities", ok({"opportunities": [OPPORTUNITY]}))
    organization, opportunities = load_organization(api, "org1", notifier)
    assert organization["mission"] == "Ship it"
    assert [o.title for o in opportunities] == ["Data Intern"]
    assert fake_session.last()["params"] == {"organizationId": "org1"}
    assert notifier.drain() == []


def test_load_organization_failure(api, fake_session, notifier):
    fake_session.route("GET", "/organizations/gone", fail(404, "Organization not found"))
    assert load_organization(api, "gone", notifier) is None
    assert notifier.drain()[-1].description == "Failed to load organization profile"


def test_card_html_escapes_server_values():
    opp = Opportunity.from_api({
        "_id": "o4",
        "title": "<script>alert(1)</script>",
        "type": "intern<b>",
        "location": {"type": "remote", "address": "1 <i>Loop</i>"},
        "organization": {"_id": "org1", "name": "A&B <img src=x onerror=alert(1)>"},
    })
    markup = opportunity_card_html(opp)
    assert "<script>" not in markup
    assert "<img" not in markup and "<i>" not in markup and "<b>" not in markup
    assert "&lt;script&gt;alert(1)&lt;/script&gt;" in markup
    assert "A&amp;B" in markup
    assert markup.startswith('<div class="opp-card"><h4>')


def test_unpopulated_organization_reference():
    opp = Opportunity.from_api({"_id": "o5", "organization": "org9"})
    assert opp.organization.id == "org9"
    assert opp.organization.name == ""
