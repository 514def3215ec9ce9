import pytest

from conftest import fail, ok
from inkaranya.models import Recommendation
from inkaranya.recommendations import (
    RecommendationFeed,
    SkillsAndInterests,
    compensation_badge,
    score_color,
    score_label,
)


@pytest.mark.parametrize(
    "score, label, colour",
    [
        (85, "Excellent Match", "green"),
        (80, "Excellent Match", "green"),
        (65, "Good Match", "yellow"),
        (60, "Good Match", "yellow"),
        (45, "Fair Match", "orange"),
        (40, "Fair Match", "orange"),
        (10, "Low Match", "red"),
        (-5, "Low Match", "red"),
    ],
)
def test_score_tiers(score, label, colour):
    assert score_label(score) == label
    assert score_color(score) == colour


def test_recommendation_feed_filters(api, fake_session, notifier):
    fake_session.route("GET", "/recommendations/opportunities", ok({
        "recommendations": [{
            "opportunity": {"_id": "o1", "title": "ML Intern"},
            "scores": {"overall": 82.5, "skills": 90, "interests": 70, "location": 100},
            "matchReasons": ["Strong Python match"],
        }]
    }))
    feed = RecommendationFeed(api, notifier)
    feed.refresh()
    assert fake_session.last()["params"] is None
    rec = feed.recommendations[0]
    assert rec.scores.overall == 82.5
    assert rec.match_reasons == ["Strong Python match"]

    feed.set_filter("type", "internship")
    feed.set_filter("type", "internship")
    assert len(fake_session.calls) == 2
    assert fake_session.last()["params"] == {"type": "internship"}

    with pytest.raises(ValueError):
        feed.set_filter("salary", "high")


def test_recommendation_error_notifies(api, fake_session, notifier):
    fake_session.route("GET", "/recommendations/opportunities", fail(403, "Employees only"))
    feed = RecommendationFeed(api, notifier)
    assert feed.refresh() == []
    assert notifier.drain()[0].description == "Employees only"


def test_skills_form_requires_all_fields():
    form = SkillsAndInterests()
    assert form.add_skill("  ", "advanced", "technical") is False
    assert form.add_skill("Python", "", "technical") is False
    assert form.add_skill(" Python ", "advanced", "technical", 3) is True
    assert form.add_interest("Robotics", "technology", "high") is True
    assert form.add_interest("Art", "", "high") is False
    form.remove_skill(7)
    assert len(form.skills) == 1
    form.remove_interest(0)
    assert form.interests == []


def test_skills_form_from_profile_and_save(api, fake_session, notifier):
    profile = {
        "skills": [{"name": "SQL", "level": "intermediate", "category": "technical", "yearsOfExperience": 1}],
        "interests": [{"name": "Fintech", "category": "business", "level": "medium"}, {"category": "x"}],
    }
    form = SkillsAndInterests.from_profile(profile)
    assert len(form.interests) == 1
    fake_session.route("POST", "/recommendations/update-skills", ok())

    assert form.save(api, notifier) is True

    assert fake_session.last()["json"] == {
        "skills": [{"name": "SQL", "level": "intermediate", "category": "technical", "yearsOfExperience": 1}],
        "interests": [{"name": "Fintech", "category": "business", "level": "medium"}],
    }
    assert notifier.drain()[0].description == "Skills and interests updated successfully!"


def test_compensation_badge():
    paid = Recommendation.from_api({
        "opportunity": {"_id": "o1", "compensation": {"amount": 1500, "currency": "GBP"}},
        "scores": {"overall": 70},
    })
    assert compensation_badge(paid) == "£1,500"
    unpaid = Recommendation.from_api({"opportunity": {"_id": "o2"}, "scores": {}})
    assert compensation_badge(unpaid) is None
