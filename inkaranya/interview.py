"""Interview details: first-class field, with the marker note as fallback.

Organizations schedule an interview by moving the application to
``interview``. The details travel as ``interviewData`` and, for backends that
drop unknown fields, as a note shaped like::

    INTERVIEW SCHEDULED:
    Date: 2024-05-01
    Time: 14:00
    Duration: 45 minutes
    Type: video
    Meeting Link: https://meet.example.com/abc
    Interviewer: Jane (jane@example.com)
    Notes: bring portfolio
"""
from __future__ import annotations

import re
from dataclasses import dataclass
from datetime import datetime
from typing import Any, Iterable

from inkaranya.log import get_logger
from inkaranya.models import Application
from inkaranya.status import ApplicationStatus, parse_status

log = get_logger(__name__)

INTERVIEW_MARKER = "INTERVIEW SCHEDULED:"
DEFAULT_DURATION = 60
IN_PERSON = "in-person"

# Longest labels first so "Meeting Link" is never read as another label.
_LABELS: list[tuple[str, str]] = [
    ("Meeting Link:", "meeting_link"),
    ("Interviewer:", "interviewer"),
    ("Duration:", "duration"),
    ("Location:", "location"),
    ("Notes:", "notes"),
    ("Date:", "date"),
    ("Time:", "time"),
    ("Type:", "type"),
]


def _to_duration(value: Any) -> int:
    """Leading digits of ``value`` ("45 minutes", "45min" → 45); DEFAULT_DURATION otherwise."""
    match = re.match(r"\s*(\d+)", str(value or ""))
    minutes = int(match.group(1)) if match else 0
    return minutes if minutes > 0 else DEFAULT_DURATION


@dataclass
class InterviewDetails:
    date: str = ""
    time: str = ""
    duration: int = DEFAULT_DURATION
    type: str = "video"
    location: str = ""
    meeting_link: str = ""
    interviewer: str = ""
    interviewer_email: str = ""
    notes: str = ""
    status: str = "scheduled"
    scheduled_at: str | None = None

    @property
    def starts_at(self) -> datetime | None:
        try:
            return datetime.fromisoformat(f"{self.date}T{self.time}")
        except ValueError:
            return None

    def validate(self) -> list[str]:
        errors: list[str] = []
        if not self.date:
            errors.append("Interview date is required.")
        if not self.time:
            errors.append("Interview time is required.")
        if self.date and self.time and self.starts_at is None:
            errors.append("Interview date/time is not valid.")
        if not self.interviewer:
            errors.append("Interviewer name is required.")
        return errors

    def to_api(self) -> dict[str, Any]:
        starts = self.starts_at
        return {
            "date": self.date,
            "time": self.time,
            "datetime": starts.isoformat() if starts else None,
            "duration": self.duration,
            "type": self.type,
            "location": self.location,
            "meetingLink": self.meeting_link,
            "notes": self.notes,
            "interviewer": self.interviewer,
            "interviewerEmail": self.interviewer_email,
            "status": self.status,
        }

    @classmethod
    def from_api(cls, raw: dict[str, Any]) -> InterviewDetails:
        return cls(
            date=raw.get("date") or "",
            time=raw.get("time") or "",
            duration=_to_duration(raw.get("duration")),
            type=raw.get("type") or "video",
            location=raw.get("location") or "",
            meeting_link=raw.get("meetingLink") or "",
            interviewer=raw.get("interviewer") or "",
            interviewer_email=raw.get("interviewerEmail") or "",
            notes=raw.get("notes") or "",
            status=raw.get("status") or "scheduled",
            scheduled_at=raw.get("scheduledAt"),
        )


def format_interview_note(details: InterviewDetails) -> str:
    """Render details in the marker-note format read by parse_interview_note."""
    if details.type == IN_PERSON:
        place = f"Location: {details.location}"
    else:
        place = f"Meeting Link: {details.meeting_link}"
    lines = [
        INTERVIEW_MARKER,
        f"Date: {details.date}",
        f"Time: {details.time}",
        f"Duration: {details.duration} minutes",
        f"Type: {details.type}",
        place,
        f"Interviewer: {details.interviewer} ({details.interviewer_email})",
        f"Notes: {details.notes}",
    ]
    return "\n".join(lines)


def parse_interview_note(text: str, added_at: str | None = None) -> InterviewDetails | None:
    """Recover interview details from a marker note; None if the marker is absent.

    Missing lines keep their defaults, so a partial note never raises.
    """
    if not text or INTERVIEW_MARKER not in text:
        return None

    details = InterviewDetails(scheduled_at=added_at)
    for raw_line in text.split("\n"):
        line = raw_line.strip()
        for label, attr in _LABELS:
            if not line.startswith(label):
                continue
            value = line[len(label):].strip()
            if attr == "duration":
                details.duration = _to_duration(value)
            elif attr == "interviewer":
                name, _, email = value.partition(" (")
                details.interviewer = name.strip()
                details.interviewer_email = email.rstrip(")").strip()
            else:
                setattr(details, attr, value)
            break
    return details


def interview_for(application: Application) -> InterviewDetails | None:
    """Details from ``interviewData`` if present, else the latest marker note."""
    if application.interview_data:
        return InterviewDetails.from_api(application.interview_data)

    for note in reversed(application.notes):
        if INTERVIEW_MARKER in note.note:
            return parse_interview_note(note.note, added_at=note.added_at)
    return None


def upcoming_interviews(
    applications: Iterable[Application],
) -> list[tuple[Application, InterviewDetails]]:
    """Applications in interview status whose details can be recovered."""
    found: list[tuple[Application, InterviewDetails]] = []
    for app in applications:
        try:
            in_interview = parse_status(app.status) == ApplicationStatus.INTERVIEW
        except ValueError:
            in_interview = False
        if not in_interview:
            continue
        details = interview_for(app)
        if details is None:
            log.debug("Application %s is in interview but has no details", app.id)
            continue
        found.append((app, details))
    found.sort(key=lambda pair: (pair[1].date, pair[1].time))
    return found
