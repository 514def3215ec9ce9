"""Organization-side opportunity authoring."""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from inkaranya.api import ApiClient, ApiError
from inkaranya.log import get_logger
from inkaranya.notify import Notifier
from inkaranya.validation import ValidationError, missing

log = get_logger(__name__)

DEFAULT_PROCESS_STEP = {
    "step": "Application Review",
    "description": "Submit application through platform",
    "estimatedTime": "1-2 weeks",
}


def infer_location_type(location: str) -> str:
    text = location.lower()
    if "remote" in text:
        return "remote"
    if "hybrid" in text:
        return "hybrid"
    return "on-site"


@dataclass
class OpportunityForm:
    title: str = ""
    description: str = ""
    type: str = ""
    category: str = ""
    location: str = ""
    duration: str = ""
    start_date: str = ""
    end_date: str = ""
    requirements: str = ""
    benefits: str = ""
    skills: list[str] = field(default_factory=list)
    is_paid: bool = False
    application_deadline: str = ""

    def add_skill(self, skill: str) -> bool:
        name = skill.strip()
        if not name or name in self.skills:
            return False
        self.skills.append(name)
        return True

    def remove_skill(self, skill: str) -> None:
        self.skills = [s for s in self.skills if s != skill]

    def validate(self) -> list[str]:
        errors = missing({
            "Title": self.title,
            "Description": self.description,
            "Type": self.type,
            "Category": self.category,
            "Start date": self.start_date,
        })
        if self.end_date and self.start_date and self.end_date < self.start_date:
            errors.append("End date cannot be before the start date.")
        return errors

    def to_api(self) -> dict[str, Any]:
        """Backend shape for POST /opportunities."""
        return {
            "title": self.title,
            "description": self.description,
            "type": self.type,
            "category": self.category,
            "location": {
                "type": infer_location_type(self.location),
                "city": self.location,
                "country": "Not specified",
            },
            "schedule": {
                "startDate": self.start_date,
                "endDate": self.end_date or None,
                "duration": self.duration,
            },
            "requirements": {
                "skills": [
                    {"name": s, "level": "intermediate", "required": True}
                    for s in self.skills
                ],
                "experience": {
                    "minYears": 0,
                    "required": [self.requirements or "No specific requirements"],
                },
            },
            "compensation": {
                "type": "paid" if self.is_paid else "unpaid",
                "benefits": [self.benefits] if self.benefits else [],
            },
            "application": {
                "deadline": self.application_deadline,
                "process": [dict(DEFAULT_PROCESS_STEP)],
            },
            "status": "active",
            "visibility": "public",
        }


def check(form: OpportunityForm) -> None:
    errors = form.validate()
    if errors:
        raise ValidationError(errors)


def save_opportunity(
    api: ApiClient,
    notifier: Notifier,
    form: OpportunityForm,
    opportunity_id: str | None = None,
) -> dict | None:
    """Create (no id) or update an opportunity; None on any failure."""
    try:
        check(form)
    except ValidationError as exc:
        for message in exc.errors:
            notifier.error("Validation Error", message)
        return None

    try:
        if opportunity_id:
            response = api.update_opportunity(opportunity_id, form.to_api())
        else:
            response = api.create_opportunity(form.to_api())
    except ApiError as exc:
        notifier.error("Error", exc.message or "Failed to save opportunity")
        return None

    if opportunity_id:
        log.info("Updated opportunity %s", opportunity_id)
        notifier.success("Opportunity Updated", f"{form.title} has been updated.")
    else:
        log.info("Created opportunity %r", form.title)
        notifier.success("Opportunity Created", "Opportunity created successfully!")
    return response.get("data") or {}


def delete_opportunity(api: ApiClient, notifier: Notifier, opportunity_id: str) -> bool:
    try:
        api.delete_opportunity(opportunity_id)
    except ApiError as exc:
        notifier.error("Error", exc.message or "Failed to delete opportunity")
        return False
    notifier.success("Opportunity Deleted", "The opportunity has been removed.")
    return True
