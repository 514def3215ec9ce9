"""Data models for opportunities, applications and recommendations."""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any


@dataclass
class Note:
    note: str
    added_by: str = ""
    added_at: str = ""

    @classmethod
    def from_api(cls, raw: dict[str, Any]) -> Note:
        return cls(
            note=raw.get("note") or "",
            added_by=str(raw.get("addedBy") or ""),
            added_at=raw.get("addedAt") or "",
        )


@dataclass
class OrganizationSummary:
    id: str
    name: str
    industry: str = ""
    size: str = ""
    city: str = ""
    state: str = ""
    logo_url: str | None = None

    @classmethod
    def from_api(cls, raw: dict[str, Any] | str | None) -> OrganizationSummary:
        if isinstance(raw, str):
            # unpopulated reference
            raw = {"_id": raw}
        raw = raw or {}
        location = raw.get("location") or {}
        return cls(
            id=raw.get("_id", ""),
            name=raw.get("name", ""),
            industry=raw.get("industry", ""),
            size=raw.get("size", ""),
            city=location.get("city", ""),
            state=location.get("state", ""),
            logo_url=(raw.get("logo") or {}).get("url"),
        )


@dataclass
class Opportunity:
    id: str
    title: str
    description: str
    type: str
    category: str
    location_type: str
    organization: OrganizationSummary
    address: str | None = None
    compensation_amount: float | None = None
    compensation_currency: str = "USD"
    compensation_type: str = ""
    deadline: str | None = None
    created_at: str | None = None
    raw: dict = field(default_factory=dict)

    @classmethod
    def from_api(cls, raw: dict[str, Any]) -> Opportunity:
        location = raw.get("location") or {}
        compensation = raw.get("compensation") or {}
        return cls(
            id=raw.get("_id", ""),
            title=raw.get("title", ""),
            description=raw.get("description", ""),
            type=raw.get("type", ""),
            category=raw.get("category", ""),
            location_type=location.get("type", ""),
            organization=OrganizationSummary.from_api(raw.get("organization")),
            address=location.get("address"),
            compensation_amount=compensation.get("amount"),
            compensation_currency=compensation.get("currency") or "USD",
            compensation_type=compensation.get("type") or "",
            deadline=(raw.get("application") or {}).get("deadline")
            or raw.get("applicationDeadline"),
            created_at=raw.get("createdAt"),
            raw=raw,
        )


@dataclass
class Scores:
    overall: float = 0.0
    skills: float = 0.0
    interests: float = 0.0
    location: float = 0.0


@dataclass
class Recommendation:
    opportunity: Opportunity
    scores: Scores
    match_reasons: list[str]

    @classmethod
    def from_api(cls, raw: dict[str, Any]) -> Recommendation:
        s = raw.get("scores") or {}
        return cls(
            opportunity=Opportunity.from_api(raw.get("opportunity") or {}),
            scores=Scores(
                overall=float(s.get("overall") or 0),
                skills=float(s.get("skills") or 0),
                interests=float(s.get("interests") or 0),
                location=float(s.get("location") or 0),
            ),
            match_reasons=list(raw.get("matchReasons") or []),
        )


@dataclass
class Application:
    id: str
    status: str
    opportunity_id: str = ""
    opportunity_title: str = ""
    applicant_name: str = ""
    applicant_email: str = ""
    cover_letter: str = ""
    submitted_at: str | None = None
    notes: list[Note] = field(default_factory=list)
    interview_data: dict[str, Any] | None = None
    raw: dict = field(default_factory=dict)

    @classmethod
    def from_api(cls, raw: dict[str, Any]) -> Application:
        personal = raw.get("personalInfo") or {}
        opportunity = raw.get("opportunity") or {}
        name = " ".join(
            p for p in (personal.get("firstName"), personal.get("lastName")) if p
        )
        return cls(
            id=raw.get("_id", ""),
            status=raw.get("status", ""),
            opportunity_id=opportunity.get("_id", "") if isinstance(opportunity, dict) else str(opportunity),
            opportunity_title=opportunity.get("title", "") if isinstance(opportunity, dict) else "",
            applicant_name=name,
            applicant_email=personal.get("email", ""),
            cover_letter=raw.get("coverLetter") or "",
            submitted_at=raw.get("submittedAt") or raw.get("createdAt"),
            notes=[Note.from_api(n) for n in raw.get("notes") or [] if isinstance(n, dict)],
            interview_data=raw.get("interviewData") or raw.get("interview") or None,
            raw=raw,
        )
