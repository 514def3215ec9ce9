"""Scored recommendations and the skills/interests form that feeds them."""
from __future__ import annotations

from dataclasses import asdict, dataclass, field
from typing import Any

from inkaranya.api import ApiClient, ApiError
from inkaranya.feed import ALL, RequestGeneration, format_currency
from inkaranya.log import get_logger
from inkaranya.models import Recommendation
from inkaranya.notify import Notifier

log = get_logger(__name__)

# (inclusive lower bound, label, colour)
SCORE_TIERS: list[tuple[float, str, str]] = [
    (80, "Excellent Match", "green"),
    (60, "Good Match", "yellow"),
    (40, "Fair Match", "orange"),
    (0, "Low Match", "red"),
]


def _tier(score: float) -> tuple[float, str, str]:
    for tier in SCORE_TIERS:
        if score >= tier[0]:
            return tier
    return SCORE_TIERS[-1]


def score_label(score: float) -> str:
    return _tier(score)[1]


def score_color(score: float) -> str:
    return _tier(score)[2]


def compensation_badge(recommendation: Recommendation) -> str | None:
    """Amount and currency for the card badge; ``None`` when unpaid or unstated."""
    opp = recommendation.opportunity
    if not opp.compensation_amount:
        return None
    return format_currency(opp.compensation_amount, opp.compensation_currency)


class RecommendationFeed:
    def __init__(self, api: ApiClient, notifier: Notifier) -> None:
        self.api = api
        self.notifier = notifier
        self.filters: dict[str, str] = {"type": ALL, "category": ALL, "location": ALL}
        self.recommendations: list[Recommendation] = []
        self.loading = False
        self._generation = RequestGeneration()

    def set_filter(self, name: str, value: str) -> None:
        if name not in self.filters:
            raise ValueError(f"Unknown recommendation filter {name!r}")
        if self.filters[name] == value:
            return
        self.filters[name] = value
        self.refresh()

    def refresh(self) -> list[Recommendation]:
        ticket = self._generation.next()
        params = {k: v for k, v in self.filters.items() if v and v != ALL}
        self.loading = True
        try:
            response = self.api.get_recommended_opportunities(params)
        except ApiError as exc:
            if self._generation.is_current(ticket):
                self.loading = False
                self.notifier.error("Error", exc.message or "Failed to fetch recommendations")
            return self.recommendations

        if not self._generation.is_current(ticket):
            log.debug("Dropping stale recommendations (ticket %d)", ticket)
            return self.recommendations
        raw = (response.get("data") or {}).get("recommendations") or []
        self.recommendations = [Recommendation.from_api(r) for r in raw]
        self.loading = False
        return self.recommendations


# ── Skills & interests ───────────────────────────────────────────────────


@dataclass
class Skill:
    name: str
    level: str
    category: str
    years_of_experience: int = 0

    def to_api(self) -> dict[str, Any]:
        return {
            "name": self.name,
            "level": self.level,
            "category": self.category,
            "yearsOfExperience": self.years_of_experience,
        }


@dataclass
class Interest:
    name: str
    category: str
    level: str


@dataclass
class SkillsAndInterests:
    skills: list[Skill] = field(default_factory=list)
    interests: list[Interest] = field(default_factory=list)

    @classmethod
    def from_profile(cls, profile: dict[str, Any] | None) -> SkillsAndInterests:
        profile = profile or {}
        skills = [
            Skill(
                name=s.get("name", ""),
                level=s.get("level", ""),
                category=s.get("category", "other"),
                years_of_experience=int(s.get("yearsOfExperience") or 0),
            )
            for s in profile.get("skills") or []
            if isinstance(s, dict) and s.get("name")
        ]
        interests = [
            Interest(
                name=i.get("name", ""),
                category=i.get("category", "other"),
                level=i.get("level", ""),
            )
            for i in profile.get("interests") or []
            if isinstance(i, dict) and i.get("name")
        ]
        return cls(skills, interests)

    def add_skill(
        self, name: str, level: str, category: str, years_of_experience: int = 0
    ) -> bool:
        """Ignored unless name, level and category are all given."""
        if not (name.strip() and level and category):
            return False
        self.skills.append(Skill(name.strip(), level, category, years_of_experience or 0))
        return True

    def remove_skill(self, index: int) -> None:
        if 0 <= index < len(self.skills):
            del self.skills[index]

    def add_interest(self, name: str, category: str, level: str) -> bool:
        if not (name.strip() and category and level):
            return False
        self.interests.append(Interest(name.strip(), category, level))
        return True

    def remove_interest(self, index: int) -> None:
        if 0 <= index < len(self.interests):
            del self.interests[index]

    def save(self, api: ApiClient, notifier: Notifier) -> bool:
        try:
            api.update_employee_skills(
                [s.to_api() for s in self.skills],
                [asdict(i) for i in self.interests],
            )
        except ApiError as exc:
            notifier.error("Error", exc.message or "Failed to update skills and interests")
            return False
        notifier.success("Success", "Skills and interests updated successfully!")
        return True
