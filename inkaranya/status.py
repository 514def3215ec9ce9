"""
Application status lifecycle.

submitted → reviewing → shortlisted → interview → accepted, with rejected
(organization) and withdrawn (employee) reachable from any non-terminal
status. Every client-side status change is checked against TRANSITIONS before
a request is sent; the server re-validates.
"""
from __future__ import annotations

from enum import Enum

from inkaranya.log import get_logger

log = get_logger(__name__)


class ApplicationStatus(str, Enum):
    SUBMITTED = "submitted"
    REVIEWING = "reviewing"
    SHORTLISTED = "shortlisted"
    INTERVIEW = "interview"
    ACCEPTED = "accepted"
    REJECTED = "rejected"
    WITHDRAWN = "withdrawn"


class ReviewAction(str, Enum):
    REVIEW = "review"
    SHORTLIST = "shortlist"
    SCHEDULE_INTERVIEW = "schedule_interview"
    ACCEPT = "accept"
    REJECT = "reject"
    WITHDRAW = "withdraw"


class InvalidTransitionError(Exception):
    """Raised when an action is not allowed from the current status"""
    pass


TERMINAL_STATUSES: frozenset[ApplicationStatus] = frozenset({
    ApplicationStatus.ACCEPTED,
    ApplicationStatus.REJECTED,
    ApplicationStatus.WITHDRAWN,
})

# Older backends report scheduled interviews with this status.
_LEGACY_ALIASES: dict[str, ApplicationStatus] = {
    "interview-scheduled": ApplicationStatus.INTERVIEW,
}

ACTION_TARGETS: dict[ReviewAction, ApplicationStatus] = {
    ReviewAction.REVIEW: ApplicationStatus.REVIEWING,
    ReviewAction.SHORTLIST: ApplicationStatus.SHORTLISTED,
    ReviewAction.SCHEDULE_INTERVIEW: ApplicationStatus.INTERVIEW,
    ReviewAction.ACCEPT: ApplicationStatus.ACCEPTED,
    ReviewAction.REJECT: ApplicationStatus.REJECTED,
    ReviewAction.WITHDRAW: ApplicationStatus.WITHDRAWN,
}

_ALLOWED_ACTIONS: dict[ApplicationStatus, list[ReviewAction]] = {
    ApplicationStatus.SUBMITTED: [
        ReviewAction.REVIEW,
        ReviewAction.SHORTLIST,
        ReviewAction.SCHEDULE_INTERVIEW,
        ReviewAction.ACCEPT,
        ReviewAction.REJECT,
        ReviewAction.WITHDRAW,
    ],
    ApplicationStatus.REVIEWING: [
        ReviewAction.SHORTLIST,
        ReviewAction.SCHEDULE_INTERVIEW,
        ReviewAction.ACCEPT,
        ReviewAction.REJECT,
        ReviewAction.WITHDRAW,
    ],
    ApplicationStatus.SHORTLISTED: [
        ReviewAction.SCHEDULE_INTERVIEW,
        ReviewAction.ACCEPT,
        ReviewAction.REJECT,
        ReviewAction.WITHDRAW,
    ],
    ApplicationStatus.INTERVIEW: [
        ReviewAction.SCHEDULE_INTERVIEW,  # reschedule
        ReviewAction.ACCEPT,
        ReviewAction.REJECT,
        ReviewAction.WITHDRAW,
    ],
    ApplicationStatus.ACCEPTED: [],
    ApplicationStatus.REJECTED: [],
    ApplicationStatus.WITHDRAWN: [],
}

TRANSITIONS: dict[tuple[ApplicationStatus, ReviewAction], ApplicationStatus] = {
    (status, action): ACTION_TARGETS[action]
    for status, actions in _ALLOWED_ACTIONS.items()
    for action in actions
}

ORGANIZATION_ACTIONS: tuple[ReviewAction, ...] = (
    ReviewAction.REVIEW,
    ReviewAction.SHORTLIST,
    ReviewAction.SCHEDULE_INTERVIEW,
    ReviewAction.ACCEPT,
    ReviewAction.REJECT,
)
EMPLOYEE_ACTIONS: tuple[ReviewAction, ...] = (ReviewAction.WITHDRAW,)

STATUS_LABELS: dict[ApplicationStatus, str] = {
    ApplicationStatus.SUBMITTED: "Submitted",
    ApplicationStatus.REVIEWING: "Reviewing",
    ApplicationStatus.SHORTLISTED: "Shortlisted",
    ApplicationStatus.INTERVIEW: "Interview",
    ApplicationStatus.ACCEPTED: "Accepted",
    ApplicationStatus.REJECTED: "Rejected",
    ApplicationStatus.WITHDRAWN: "Withdrawn",
}

STATUS_COLORS: dict[ApplicationStatus, str] = {
    ApplicationStatus.SUBMITTED: "blue",
    ApplicationStatus.REVIEWING: "orange",
    ApplicationStatus.SHORTLISTED: "green",
    ApplicationStatus.INTERVIEW: "violet",
    ApplicationStatus.ACCEPTED: "green",
    ApplicationStatus.REJECTED: "red",
    ApplicationStatus.WITHDRAWN: "gray",
}

ACTION_LABELS: dict[ReviewAction, str] = {
    ReviewAction.REVIEW: "Mark as Reviewing",
    ReviewAction.SHORTLIST: "Shortlist",
    ReviewAction.SCHEDULE_INTERVIEW: "Schedule Interview",
    ReviewAction.ACCEPT: "Accept",
    ReviewAction.REJECT: "Reject",
    ReviewAction.WITHDRAW: "Withdraw",
}


def parse_status(value: str | ApplicationStatus) -> ApplicationStatus:
    if isinstance(value, ApplicationStatus):
        return value
    key = (value or "").strip().lower()
    if key in _LEGACY_ALIASES:
        return _LEGACY_ALIASES[key]
    return ApplicationStatus(key)


def is_terminal(status: str | ApplicationStatus) -> bool:
    """Unknown statuses are not terminal; callers treat them as still open."""
    try:
        return parse_status(status) in TERMINAL_STATUSES
    except ValueError:
        return False


def can_transition(status: str | ApplicationStatus, action: ReviewAction) -> bool:
    """Check if an action is allowed without sending anything"""
    try:
        return (parse_status(status), action) in TRANSITIONS
    except ValueError:
        return False


def next_status(status: str | ApplicationStatus, action: ReviewAction) -> ApplicationStatus:
    """
    Resolve the status an action leads to.

    Raises:
        InvalidTransitionError: unknown current status, or the action is not
            allowed from it.
    """
    try:
        current = parse_status(status)
    except ValueError as exc:
        raise InvalidTransitionError(f"Unknown application status {status!r}") from exc

    target = TRANSITIONS.get((current, action))
    if target is None:
        raise InvalidTransitionError(
            f"Cannot {action.value.replace('_', ' ')} an application that is {current.value}"
        )
    return target


def available_actions(
    status: str | ApplicationStatus, role: str = "organization"
) -> list[ReviewAction]:
    """Actions the given role may offer for an application in ``status``."""
    allowed = ORGANIZATION_ACTIONS if role == "organization" else EMPLOYEE_ACTIONS
    try:
        current = parse_status(status)
    except ValueError:
        log.warning("Unknown application status %r; no actions offered", status)
        return []
    return [a for a in _ALLOWED_ACTIONS[current] if a in allowed]


def status_label(status: str | ApplicationStatus) -> str:
    try:
        return STATUS_LABELS[parse_status(status)]
    except ValueError:
        return str(status).replace("-", " ").title()


def status_color(status: str | ApplicationStatus) -> str:
    try:
        return STATUS_COLORS[parse_status(status)]
    except ValueError:
        return "gray"
