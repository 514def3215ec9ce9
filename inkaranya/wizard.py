"""Six-step application form.

Form state is an immutable ``ApplicationData``; every edit goes through
``reduce(data, action)`` which returns a new value. A failed submit therefore
leaves the entered data exactly as it was.
"""
from __future__ import annotations

from dataclasses import dataclass, field, fields, replace
from enum import Enum, IntEnum
from typing import Any, Union

from inkaranya.api import ApiClient, ApiError
from inkaranya.log import get_logger
from inkaranya.notify import Notifier
from inkaranya.validation import ValidationError

log = get_logger(__name__)

# Resume upload is optional for now; flip to enforce it at submit time.
REQUIRE_RESUME = False


class WizardStep(IntEnum):
    PERSONAL_INFO = 1
    EDUCATION = 2
    EXPERIENCE = 3
    DOCUMENTS = 4
    COVER_LETTER = 5
    AVAILABILITY = 6


STEP_TITLES: dict[WizardStep, str] = {
    WizardStep.PERSONAL_INFO: "Personal Information",
    WizardStep.EDUCATION: "Education",
    WizardStep.EXPERIENCE: "Work Experience",
    WizardStep.DOCUMENTS: "Documents & Links",
    WizardStep.COVER_LETTER: "Cover Letter & Additional Info",
    WizardStep.AVAILABILITY: "Availability & Summary",
}


class Section(str, Enum):
    PERSONAL_INFO = "personalInfo"
    EDUCATION = "education"
    EXPERIENCE = "experience"
    DOCUMENTS = "documents"
    ADDITIONAL_INFO = "additionalInfo"
    AVAILABILITY = "availability"


def _camel(name: str) -> str:
    head, *rest = name.split("_")
    return head + "".join(part.title() for part in rest)


class _Record:
    """Shared camelCase serialisation for the per-section records."""

    def to_api(self) -> dict[str, Any]:
        return {_camel(f.name): getattr(self, f.name) for f in fields(self)}  # type: ignore[arg-type]

    @classmethod
    def field_names(cls) -> set[str]:
        return {f.name for f in fields(cls)}  # type: ignore[arg-type]


@dataclass(frozen=True)
class PersonalInfo(_Record):
    first_name: str = ""
    last_name: str = ""
    email: str = ""
    phone: str = ""
    address: str = ""
    city: str = ""
    state: str = ""
    country: str = ""
    date_of_birth: str = ""


@dataclass(frozen=True)
class EducationEntry(_Record):
    institution: str = ""
    degree: str = ""
    field_of_study: str = ""
    start_date: str = ""
    end_date: str = ""
    is_current: bool = False
    gpa: str = ""


@dataclass(frozen=True)
class ExperienceEntry(_Record):
    title: str = ""
    company: str = ""
    location: str = ""
    start_date: str = ""
    end_date: str = ""
    is_current: bool = False
    description: str = ""


@dataclass(frozen=True)
class SkillEntry(_Record):
    name: str = ""
    level: str = ""
    years_of_experience: int = 0


@dataclass(frozen=True)
class Availability(_Record):
    start_date: str = ""
    hours_per_week: int = 40
    work_mode: str = "hybrid"


@dataclass(frozen=True)
class Documents(_Record):
    resume: str | None = None
    cover_letter_file: str | None = None
    portfolio: str = ""
    linkedin: str = ""
    github: str = ""

    def to_api(self) -> dict[str, Any]:
        return {
            "resume": {"name": self.resume} if self.resume else None,
            "coverLetterFile": {"name": self.cover_letter_file} if self.cover_letter_file else None,
            "portfolio": self.portfolio,
            "linkedin": self.linkedin,
            "github": self.github,
        }


@dataclass(frozen=True)
class AdditionalInfo(_Record):
    why_interested: str = ""
    relevant_experience: str = ""
    questions: str = ""


_RECORD_TYPES: dict[Section, type[_Record]] = {
    Section.PERSONAL_INFO: PersonalInfo,
    Section.EDUCATION: EducationEntry,
    Section.EXPERIENCE: ExperienceEntry,
    Section.DOCUMENTS: Documents,
    Section.ADDITIONAL_INFO: AdditionalInfo,
    Section.AVAILABILITY: Availability,
}
LIST_SECTIONS = frozenset({Section.EDUCATION, Section.EXPERIENCE})

# Section → attribute on ApplicationData
_ATTRS: dict[Section, str] = {
    Section.PERSONAL_INFO: "personal_info",
    Section.EDUCATION: "education",
    Section.EXPERIENCE: "experience",
    Section.DOCUMENTS: "documents",
    Section.ADDITIONAL_INFO: "additional_info",
    Section.AVAILABILITY: "availability",
}


@dataclass(frozen=True)
class ApplicationData:
    personal_info: PersonalInfo = field(default_factory=PersonalInfo)
    education: tuple[EducationEntry, ...] = (EducationEntry(),)
    experience: tuple[ExperienceEntry, ...] = (ExperienceEntry(),)
    skills: tuple[SkillEntry, ...] = ()
    cover_letter: str = ""
    availability: Availability = field(default_factory=Availability)
    documents: Documents = field(default_factory=Documents)
    additional_info: AdditionalInfo = field(default_factory=AdditionalInfo)

    @classmethod
    def prefilled(
        cls, user: dict[str, Any] | None = None, profile: dict[str, Any] | None = None
    ) -> ApplicationData:
        """Start from the signed-in employee's profile where it has values."""
        user = user or {}
        profile = profile or {}
        personal = profile.get("personalInfo") or {}
        location = profile.get("location") or {}
        dob = str(personal.get("dateOfBirth") or "")[:10]
        skills = tuple(
            SkillEntry(
                name=s.get("name", ""),
                level=s.get("level", ""),
                years_of_experience=int(s.get("yearsOfExperience") or 0),
            )
            for s in profile.get("skills") or []
            if isinstance(s, dict) and s.get("name")
        )
        return cls(
            personal_info=PersonalInfo(
                first_name=personal.get("firstName") or "",
                last_name=personal.get("lastName") or "",
                email=user.get("email") or "",
                phone=personal.get("phone") or "",
                address=location.get("address") or "",
                city=location.get("city") or "",
                state=location.get("state") or "",
                country=location.get("country") or "",
                date_of_birth=dob,
            ),
            skills=skills,
        )

    def to_api(self) -> dict[str, Any]:
        return {
            "personalInfo": self.personal_info.to_api(),
            "education": [e.to_api() for e in self.education],
            "experience": [e.to_api() for e in self.experience],
            "skills": [s.to_api() for s in self.skills],
            "coverLetter": self.cover_letter,
            "availability": self.availability.to_api(),
            "documents": self.documents.to_api(),
            "additionalInfo": self.additional_info.to_api(),
        }


# ── Actions ──────────────────────────────────────────────────────────────


@dataclass(frozen=True)
class SetField:
    section: Section
    field: str
    value: Any
    index: int | None = None


@dataclass(frozen=True)
class SetCoverLetter:
    value: str


@dataclass(frozen=True)
class AddEntry:
    section: Section


@dataclass(frozen=True)
class RemoveEntry:
    section: Section
    index: int


@dataclass(frozen=True)
class AttachDocument:
    kind: str  # "resume" or "cover_letter_file"
    filename: str | None


Action = Union[SetField, SetCoverLetter, AddEntry, RemoveEntry, AttachDocument]

_ATTACHABLE = {"resume", "cover_letter_file"}


def _require_list_section(section: Section) -> None:
    if section not in LIST_SECTIONS:
        raise ValueError(f"{section.value} is not a repeatable section")


def _set_field(data: ApplicationData, action: SetField) -> ApplicationData:
    record_type = _RECORD_TYPES[action.section]
    if action.field not in record_type.field_names():
        raise ValueError(f"Unknown field {action.field!r} in {action.section.value}")
    attr = _ATTRS[action.section]

    if action.section in LIST_SECTIONS:
        if action.index is None:
            raise ValueError(f"{action.section.value} needs an entry index")
        entries = list(getattr(data, attr))
        if not 0 <= action.index < len(entries):
            raise IndexError(f"No {action.section.value} entry at {action.index}")
        entries[action.index] = replace(entries[action.index], **{action.field: action.value})
        return replace(data, **{attr: tuple(entries)})

    if action.index is not None:
        raise ValueError(f"{action.section.value} is not a repeatable section")
    record = replace(getattr(data, attr), **{action.field: action.value})
    return replace(data, **{attr: record})


def reduce(data: ApplicationData, action: Action) -> ApplicationData:
    """Return the form state after ``action``; ``data`` itself is never changed."""
    if isinstance(action, SetField):
        return _set_field(data, action)

    if isinstance(action, SetCoverLetter):
        return replace(data, cover_letter=action.value)

    if isinstance(action, AddEntry):
        _require_list_section(action.section)
        attr = _ATTRS[action.section]
        blank = _RECORD_TYPES[action.section]()
        return replace(data, **{attr: getattr(data, attr) + (blank,)})

    if isinstance(action, RemoveEntry):
        _require_list_section(action.section)
        attr = _ATTRS[action.section]
        entries = getattr(data, attr)
        if len(entries) <= 1:
            log.debug("Keeping the last %s entry", action.section.value)
            return data
        if not 0 <= action.index < len(entries):
            raise IndexError(f"No {action.section.value} entry at {action.index}")
        kept = tuple(e for i, e in enumerate(entries) if i != action.index)
        return replace(data, **{attr: kept})

    if isinstance(action, AttachDocument):
        if action.kind not in _ATTACHABLE:
            raise ValueError(f"Unknown document kind {action.kind!r}")
        return replace(data, documents=replace(data.documents, **{action.kind: action.filename}))

    raise TypeError(f"Unsupported action {type(action).__name__}")


def validate(data: ApplicationData) -> list[str]:
    errors: list[str] = []
    info = data.personal_info
    if not info.first_name.strip() or not info.last_name.strip():
        errors.append("Please fill in your first and last name.")
    if not data.cover_letter.strip():
        errors.append("Please write a cover letter.")
    if REQUIRE_RESUME and not data.documents.resume:
        errors.append("Please upload your resume.")
    return errors


# ── Wizard ───────────────────────────────────────────────────────────────


class ApplicationWizard:
    TOTAL_STEPS = len(WizardStep)

    def __init__(
        self,
        api: ApiClient,
        notifier: Notifier,
        opportunity_id: str,
        opportunity_title: str = "",
        user: dict[str, Any] | None = None,
        profile: dict[str, Any] | None = None,
    ) -> None:
        self.api = api
        self.notifier = notifier
        self.opportunity_id = opportunity_id
        self.opportunity_title = opportunity_title
        self.data = ApplicationData.prefilled(user, profile)
        self.step = WizardStep.PERSONAL_INFO
        self.is_open = True
        self.loading = False

    # navigation

    def next(self) -> WizardStep:
        if self.step < WizardStep.AVAILABILITY:
            self.step = WizardStep(self.step + 1)
        return self.step

    def prev(self) -> WizardStep:
        if self.step > WizardStep.PERSONAL_INFO:
            self.step = WizardStep(self.step - 1)
        return self.step

    @property
    def title(self) -> str:
        return STEP_TITLES[self.step]

    @property
    def progress(self) -> int:
        return round(self.step / self.TOTAL_STEPS * 100)

    @property
    def is_last_step(self) -> bool:
        return self.step == WizardStep.AVAILABILITY

    # editing

    def dispatch(self, action: Action) -> ApplicationData:
        self.data = reduce(self.data, action)
        return self.data

    def record(self, section: Section, index: int | None = None) -> _Record:
        value = getattr(self.data, _ATTRS[section])
        return value[index] if section in LIST_SECTIONS else value

    def entry_count(self, section: Section) -> int:
        _require_list_section(section)
        return len(getattr(self.data, _ATTRS[section]))

    def can_remove(self, section: Section) -> bool:
        _require_list_section(section)
        return len(getattr(self.data, _ATTRS[section])) > 1

    # submission

    def check(self) -> None:
        errors = validate(self.data)
        if errors:
            raise ValidationError(errors)

    def submission(self) -> dict[str, Any]:
        return {"opportunityId": self.opportunity_id, "applicationData": self.data.to_api()}

    def submit(self) -> bool:
        """Validate and post; on any failure the form stays open with its data."""
        try:
            self.check()
        except ValidationError as exc:
            for message in exc.errors:
                self.notifier.error("Validation Error", message)
            return False

        self.loading = True
        try:
            self.api.submit_application(self.submission())
        except ApiError as exc:
            self.notifier.error(
                "Application Failed",
                exc.message or "Failed to submit application. Please try again.",
            )
            return False
        finally:
            self.loading = False

        log.info("Application submitted for opportunity %s", self.opportunity_id)
        self.notifier.success(
            "Application Submitted!",
            f"Your application for {self.opportunity_title or 'this opportunity'} "
            "has been submitted successfully.",
        )
        self.is_open = False
        return True
