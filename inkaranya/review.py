"""
Status changes on applications, from both sides of the pipeline.

Organizations review, shortlist, interview, accept or reject; employees
withdraw. ALL client-side status changes go through ``ReviewDesk.apply`` so
the transition table is checked before anything is sent.
"""
from __future__ import annotations

from typing import Any

from inkaranya.api import ApiClient, ApiError
from inkaranya.feed import ALL, RequestGeneration
from inkaranya.interview import InterviewDetails, format_interview_note, upcoming_interviews
from inkaranya.log import get_logger
from inkaranya.models import Application
from inkaranya.notify import Notifier
from inkaranya.status import (
    InvalidTransitionError,
    ReviewAction,
    next_status,
    parse_status,
)

log = get_logger(__name__)


class ReviewDesk:
    def __init__(self, api: ApiClient, notifier: Notifier) -> None:
        self.api = api
        self.notifier = notifier
        self.status_filter = ALL
        self.applications: list[Application] = []
        self.loading = False
        self._generation = RequestGeneration()

    def set_status_filter(self, status: str) -> None:
        if status != ALL:
            parse_status(status)
        if status == self.status_filter:
            return
        self.status_filter = status
        self.refresh()

    def refresh(self) -> list[Application]:
        ticket = self._generation.next()
        params: dict[str, Any] = {}
        if self.status_filter != ALL:
            params["status"] = self.status_filter
        self.loading = True
        try:
            response = self.api.get_applications(params)
        except ApiError as exc:
            if self._generation.is_current(ticket):
                self.loading = False
                self.notifier.error("Error", exc.message or "Failed to fetch applications")
            return self.applications

        if self._generation.is_current(ticket):
            raw = (response.get("data") or {}).get("applications") or []
            self.applications = [Application.from_api(a) for a in raw]
            self.loading = False
        return self.applications

    def apply(
        self,
        application: Application,
        action: ReviewAction,
        note: str | None = None,
        interview_data: dict[str, Any] | None = None,
    ) -> bool:
        """Validate ``action`` against the current status, send it, re-fetch."""
        try:
            target = next_status(application.status, action)
        except InvalidTransitionError as exc:
            self.notifier.error("Not Allowed", str(exc))
            return False

        try:
            self.api.update_application_status(application.id, target, note, interview_data)
        except ApiError as exc:
            self.notifier.error("Error", exc.message or "Failed to update application status")
            return False

        log.info(
            "Application %s: %s → %s", application.id, application.status, target.value
        )
        self.notifier.success("Status Updated", f"Application status updated to {target.value}")
        self.refresh()
        return True

    def schedule_interview(self, application: Application, details: InterviewDetails) -> bool:
        """Move to interview, sending details as a field and as the marker note."""
        errors = details.validate()
        if errors:
            for message in errors:
                self.notifier.error("Validation Error", message)
            return False
        ok = self.apply(
            application,
            ReviewAction.SCHEDULE_INTERVIEW,
            note=format_interview_note(details),
            interview_data=details.to_api(),
        )
        if ok:
            self.notifier.success(
                "Interview Scheduled!",
                f"Interview scheduled for {application.applicant_name or 'the applicant'} "
                f"on {details.date} at {details.time}",
            )
        return ok


def withdraw(api: ApiClient, notifier: Notifier, application: Application) -> bool:
    """Employee-side withdrawal, checked against the same transition table."""
    try:
        next_status(application.status, ReviewAction.WITHDRAW)
    except InvalidTransitionError as exc:
        notifier.error("Not Allowed", str(exc))
        return False
    try:
        api.withdraw_application(application.id)
    except ApiError as exc:
        notifier.error("Error", exc.message or "Failed to withdraw application")
        return False
    notifier.success("Application Withdrawn", "Your application has been withdrawn.")
    return True


def employee_applications(api: ApiClient, notifier: Notifier, status: str = ALL) -> list[Application]:
    params = {} if status == ALL else {"status": status}
    try:
        response = api.get_employee_applications(params)
    except ApiError as exc:
        notifier.error("Error", exc.message or "Failed to load applications")
        return []
    raw = (response.get("data") or {}).get("applications") or []
    return [Application.from_api(a) for a in raw]


def employee_interviews(
    api: ApiClient, notifier: Notifier
) -> list[tuple[Application, InterviewDetails]]:
    try:
        response = api.get_employee_applications()
    except ApiError as exc:
        notifier.error("Error", exc.message or "Failed to load interview data")
        return []
    raw = (response.get("data") or {}).get("applications") or []
    return upcoming_interviews(Application.from_api(a) for a in raw)
