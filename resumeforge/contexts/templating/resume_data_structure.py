"""
Resume Document Structure

Defines the normalized résumé record shared by every renderer.

The persisted layout is the camelCase JSON written by the ResumeForge editor
(personalInfo.fullName, startDate, additionalSections, ...). snake_case keys
are accepted as well so hand-written YAML reads naturally.

All records are frozen dataclasses holding tuples, so a ResumeDocument can be
passed by value into the renderers, hashed into a fingerprint and memoized.
"""

import hashlib
import json
from dataclasses import dataclass, field, replace
from pathlib import Path
from typing import Any, Dict, List, Mapping, Optional, Tuple

from omegaconf import OmegaConf

from resumeforge.contexts.templating.exceptions import (
    InvalidResumeStructureError,
    UnknownTemplateError,
)
from resumeforge.contexts.templating.logger import _log_debug
from resumeforge.contexts.templating.template_ids import VisualTemplate

QR_CODE_TYPES = ("none", "linkedin", "website")

# Persistence-only keys of to_dict(); no renderer reads them
UNRENDERED_KEYS = ("id", "name", "template", "createdAt", "updatedAt")
ENTRY_LISTS = ("experience", "education", "skills", "projects", "additionalSections")


# Field access helpers


def _to_snake(key: str) -> str:
    """fullName -> full_name, linkedIn -> linked_in."""
    return "".join(f"_{c.lower()}" if c.isupper() else c for c in key)


def _lookup(data: Mapping, key: str, *aliases: str) -> Any:
    """Return the first present value among key, its snake_case form and aliases."""
    for candidate in (key, _to_snake(key), *aliases):
        if candidate in data and data[candidate] is not None:
            return data[candidate]
    return None


def _text(data: Mapping, key: str, *aliases: str) -> str:
    value = _lookup(data, key, *aliases)
    if value is None:
        return ""
    return value if isinstance(value, str) else str(value)


def _flag(data: Mapping, key: str) -> bool:
    value = _lookup(data, key)
    if isinstance(value, str):
        return value.strip().lower() in ("true", "yes", "1")
    return bool(value)


def _require_mapping(value: Any, where: str) -> Mapping:
    if not isinstance(value, Mapping):
        raise InvalidResumeStructureError(
            f"{where} must be a mapping, got {type(value).__name__}"
        )
    return value


def _list_field(data: Mapping, key: str, where: str, *aliases: str) -> List[Any]:
    """Fetch a list-valued field; absent means empty, anything else non-list is invalid."""
    value = _lookup(data, key, *aliases)
    if value is None:
        return []
    if not isinstance(value, (list, tuple)):
        raise InvalidResumeStructureError(
            f"{where}.{key} must be a list, got {type(value).__name__}"
        )
    return list(value)


def _string_items(values: List[Any]) -> Tuple[str, ...]:
    """Keep non-empty entries of a string list, stringifying scalars."""
    return tuple(str(v) for v in values if v is not None and str(v) != "")


def normalize_honors(value: Any) -> Tuple[str, ...]:
    """
    Normalize the honors field to a tuple of strings.

    The editor has stored honors both as a bare string and as a list of
    strings. A bare string becomes a one-element tuple; absent or empty
    values become an empty tuple.

    Args:
        value: Raw honors value (None, str, or list of str)

    Returns:
        Tuple of non-empty honor strings
    """
    if value is None:
        return ()
    if isinstance(value, str):
        return (value,) if value.strip() else ()
    if isinstance(value, (list, tuple)):
        return _string_items(list(value))
    return (str(value),)


def _freeze_strings(record: Any, *names: str) -> None:
    """Coerce string-list fields of a frozen record to tuples of strings."""
    for name in names:
        object.__setattr__(record, name, normalize_honors(getattr(record, name)))


def _freeze_records(record: Any, *names: str) -> None:
    for name in names:
        object.__setattr__(record, name, tuple(getattr(record, name) or ()))


# Records


@dataclass(frozen=True)
class QRCodeDirective:
    """Whether a QR code is shown and which link it encodes."""

    enabled: bool = False
    type: str = "none"

    @classmethod
    def from_dict(cls, data: Optional[Mapping]) -> "QRCodeDirective":
        if not isinstance(data, Mapping):
            return cls()
        qr_type = _text(data, "type").strip().lower() or "none"
        if qr_type not in QR_CODE_TYPES:
            _log_debug(f"Unknown QR code type '{qr_type}', treating as 'none'")
            qr_type = "none"
        return cls(enabled=_flag(data, "enabled"), type=qr_type)

    def to_dict(self) -> Dict[str, Any]:
        return {"enabled": self.enabled, "type": self.type}


@dataclass(frozen=True)
class PersonalInfo:
    full_name: str
    profession_title: str = ""
    email: str = ""
    phone: str = ""
    location: str = ""
    linkedin: str = ""
    website: str = ""
    profile_picture: str = ""
    qr_code: QRCodeDirective = field(default_factory=QRCodeDirective)

    @classmethod
    def from_dict(cls, data: Any) -> "PersonalInfo":
        data = _require_mapping(data, "personalInfo")
        full_name = _text(data, "fullName", "name")
        if not full_name.strip():
            raise InvalidResumeStructureError("personalInfo.fullName is required")
        return cls(
            full_name=full_name,
            profession_title=_text(data, "professionTitle", "title"),
            email=_text(data, "email"),
            phone=_text(data, "phone"),
            location=_text(data, "location"),
            linkedin=_text(data, "linkedIn", "linkedin"),
            website=_text(data, "website"),
            profile_picture=_text(data, "profilePicture"),
            qr_code=QRCodeDirective.from_dict(_lookup(data, "qrCode")),
        )

    def to_dict(self) -> Dict[str, Any]:
        result = {
            "fullName": self.full_name,
            "professionTitle": self.profession_title,
            "email": self.email,
            "phone": self.phone,
            "location": self.location,
            "linkedIn": self.linkedin,
            "website": self.website,
        }
        if self.profile_picture:
            result["profilePicture"] = self.profile_picture
        if self.qr_code.enabled or self.qr_code.type != "none":
            result["qrCode"] = self.qr_code.to_dict()
        return result


@dataclass(frozen=True)
class ExperienceEntry:
    """
    One position held at one employer.

    When current is true the end date always renders as "Present", whatever
    end_date holds.
    """

    company: str = ""
    position: str = ""
    location: str = ""
    start_date: str = ""
    end_date: str = ""
    current: bool = False
    description: str = ""
    achievements: Tuple[str, ...] = ()
    id: str = ""

    def __post_init__(self):
        _freeze_strings(self, "achievements")

    @property
    def display_end_date(self) -> str:
        return "Present" if self.current else self.end_date

    @classmethod
    def from_dict(cls, data: Any) -> "ExperienceEntry":
        data = _require_mapping(data, "experience[]")
        return cls(
            company=_text(data, "company"),
            position=_text(data, "position"),
            location=_text(data, "location"),
            start_date=_text(data, "startDate"),
            end_date=_text(data, "endDate"),
            current=_flag(data, "current"),
            description=_text(data, "description"),
            achievements=_string_items(_list_field(data, "achievements", "experience[]")),
            id=_text(data, "id"),
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "company": self.company,
            "position": self.position,
            "location": self.location,
            "startDate": self.start_date,
            "endDate": self.end_date,
            "current": self.current,
            "description": self.description,
            "achievements": list(self.achievements),
        }


@dataclass(frozen=True)
class EducationEntry:
    institution: str = ""
    degree: str = ""
    field: str = ""
    graduation_date: str = ""
    gpa: str = ""
    honors: Tuple[str, ...] = ()
    id: str = ""

    def __post_init__(self):
        _freeze_strings(self, "honors")

    @classmethod
    def from_dict(cls, data: Any) -> "EducationEntry":
        data = _require_mapping(data, "education[]")
        return cls(
            institution=_text(data, "institution"),
            degree=_text(data, "degree"),
            field=_text(data, "field"),
            graduation_date=_text(data, "graduationDate"),
            gpa=_text(data, "gpa"),
            honors=normalize_honors(_lookup(data, "honors")),
            id=_text(data, "id"),
        )

    def to_dict(self) -> Dict[str, Any]:
        result = {
            "id": self.id,
            "institution": self.institution,
            "degree": self.degree,
            "field": self.field,
            "graduationDate": self.graduation_date,
        }
        if self.gpa:
            result["gpa"] = self.gpa
        if self.honors:
            result["honors"] = list(self.honors)
        return result


@dataclass(frozen=True)
class Skill:
    name: str = ""
    category: str = ""
    id: str = ""

    @classmethod
    def from_dict(cls, data: Any) -> "Skill":
        data = _require_mapping(data, "skills[]")
        return cls(name=_text(data, "name"), category=_text(data, "category"), id=_text(data, "id"))

    def to_dict(self) -> Dict[str, Any]:
        return {"id": self.id, "name": self.name, "category": self.category}


@dataclass(frozen=True)
class Project:
    name: str = ""
    description: str = ""
    technologies: Tuple[str, ...] = ()
    url: str = ""
    github: str = ""
    id: str = ""

    def __post_init__(self):
        _freeze_strings(self, "technologies")

    @classmethod
    def from_dict(cls, data: Any) -> "Project":
        data = _require_mapping(data, "projects[]")
        return cls(
            name=_text(data, "name"),
            description=_text(data, "description"),
            technologies=_string_items(_list_field(data, "technologies", "projects[]")),
            url=_text(data, "url"),
            github=_text(data, "github"),
            id=_text(data, "id"),
        )

    def to_dict(self) -> Dict[str, Any]:
        result = {
            "id": self.id,
            "name": self.name,
            "description": self.description,
            "technologies": list(self.technologies),
        }
        if self.url:
            result["url"] = self.url
        if self.github:
            result["github"] = self.github
        return result


@dataclass(frozen=True)
class AdditionalSection:
    """User-defined grouping such as Languages or Certifications."""

    title: str = ""
    items: Tuple[str, ...] = ()
    id: str = ""

    def __post_init__(self):
        _freeze_strings(self, "items")

    @classmethod
    def from_dict(cls, data: Any) -> "AdditionalSection":
        data = _require_mapping(data, "additionalSections[]")
        return cls(
            title=_text(data, "title"),
            items=_string_items(_list_field(data, "items", "additionalSections[]")),
            id=_text(data, "id"),
        )

    def to_dict(self) -> Dict[str, Any]:
        return {"id": self.id, "title": self.title, "items": list(self.items)}


@dataclass(frozen=True)
class ResumeDocument:
    """
    Normalized résumé record passed by value into every renderer.

    Attributes:
        personal_info: Name, title, contact fields, picture and QR directive
        experience: Positions in the order the user entered them
        education: Degrees
        skills: Flat skill list, each with a free-form category label
        projects: Portfolio projects
        additional_sections: User-defined sections (Languages, ...)
        template: Selected visual template
        id: Persistence id (never rendered)
        name: Document label shown in listings (never rendered)
        created_at: ISO timestamp (never rendered)
        updated_at: ISO timestamp (never rendered)
    """

    personal_info: PersonalInfo
    experience: Tuple[ExperienceEntry, ...] = ()
    education: Tuple[EducationEntry, ...] = ()
    skills: Tuple[Skill, ...] = ()
    projects: Tuple[Project, ...] = ()
    additional_sections: Tuple[AdditionalSection, ...] = ()
    template: VisualTemplate = VisualTemplate.MODERN
    id: str = ""
    name: str = ""
    created_at: str = ""
    updated_at: str = ""

    def __post_init__(self):
        _freeze_records(
            self, "experience", "education", "skills", "projects", "additional_sections"
        )

    @classmethod
    def from_dict(cls, data: Any) -> "ResumeDocument":
        """
        Build a document from the persisted JSON layout.

        Args:
            data: Mapping in the camelCase persisted layout (snake_case accepted)

        Returns:
            ResumeDocument

        Raises:
            InvalidResumeStructureError: If a record is not a mapping, a list
                field is not a list, or personalInfo.fullName is missing
        """
        data = _require_mapping(data, "resume")
        personal = _lookup(data, "personalInfo")
        if personal is None:
            raise InvalidResumeStructureError("personalInfo is required")

        template_value = _lookup(data, "template")
        try:
            template = VisualTemplate.parse(template_value) if template_value else VisualTemplate.MODERN
        except UnknownTemplateError:
            _log_debug(f"Unknown visual template '{template_value}', using modern")
            template = VisualTemplate.MODERN

        return cls(
            personal_info=PersonalInfo.from_dict(personal),
            experience=tuple(
                ExperienceEntry.from_dict(e) for e in _list_field(data, "experience", "resume")
            ),
            education=tuple(
                EducationEntry.from_dict(e) for e in _list_field(data, "education", "resume")
            ),
            skills=tuple(Skill.from_dict(s) for s in _list_field(data, "skills", "resume")),
            projects=tuple(Project.from_dict(p) for p in _list_field(data, "projects", "resume")),
            additional_sections=tuple(
                AdditionalSection.from_dict(a)
                for a in _list_field(data, "additionalSections", "resume")
            ),
            template=template,
            id=_text(data, "id"),
            name=_text(data, "name"),
            created_at=_text(data, "createdAt"),
            updated_at=_text(data, "updatedAt"),
        )

    @classmethod
    def from_yaml(cls, yaml_path: Path) -> "ResumeDocument":
        """Load a document from a YAML file."""
        data = OmegaConf.to_container(OmegaConf.load(yaml_path), resolve=True)
        return cls.from_dict(data)

    @classmethod
    def from_json(cls, json_path: Path) -> "ResumeDocument":
        """Load a document from a JSON file."""
        with open(json_path, "r", encoding="utf-8") as f:
            return cls.from_dict(json.load(f))

    @classmethod
    def from_file(cls, path: Path) -> "ResumeDocument":
        """Load from .yaml/.yml or .json, chosen by suffix."""
        path = Path(path)
        if path.suffix.lower() in (".yaml", ".yml"):
            return cls.from_yaml(path)
        return cls.from_json(path)

    def to_dict(self) -> Dict[str, Any]:
        """Return the camelCase persisted layout."""
        return {
            "id": self.id,
            "name": self.name,
            "personalInfo": self.personal_info.to_dict(),
            "experience": [e.to_dict() for e in self.experience],
            "education": [e.to_dict() for e in self.education],
            "skills": [s.to_dict() for s in self.skills],
            "projects": [p.to_dict() for p in self.projects],
            "additionalSections": [a.to_dict() for a in self.additional_sections],
            "template": self.template.value,
            "createdAt": self.created_at,
            "updatedAt": self.updated_at,
        }

    def content_dict(self) -> Dict[str, Any]:
        """to_dict() minus the persistence-only fields and per-entry ids."""
        data = {k: v for k, v in self.to_dict().items() if k not in UNRENDERED_KEYS}
        for key in ENTRY_LISTS:
            data[key] = [{k: v for k, v in entry.items() if k != "id"} for entry in data[key]]
        return data

    def fingerprint(self) -> str:
        """
        SHA-256 of the canonical JSON of content_dict().

        Documents that render identically share a fingerprint, even when their
        ids, labels or timestamps differ.
        """
        canonical = json.dumps(self.content_dict(), sort_keys=True, ensure_ascii=False)
        return hashlib.sha256(canonical.encode("utf-8")).hexdigest()

    def evolve(self, **changes) -> "ResumeDocument":
        """Return a copy with the given fields replaced."""
        return replace(self, **changes)
