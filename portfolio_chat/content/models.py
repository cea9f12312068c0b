"""Typed records for portfolio content and the per-request chat context."""

from __future__ import annotations

import json
from dataclasses import dataclass
from datetime import date, datetime
from typing import Any, Literal

from pydantic import BaseModel, ConfigDict

# Diary titles starting with this marker hold general facts about the owner,
# not episodic activities.
INFORMATIONAL_MARKER = "&&"


class ChatTurn(BaseModel):
    """One prior message in the caller-supplied conversation history."""

    model_config = ConfigDict(frozen=True)

    role: Literal["user", "assistant"]
    content: str


def parse_date(value: Any) -> date | None:
    """Coerce a stored date (ISO text, date or datetime) to a ``date``."""
    if value is None or value == "":
        return None
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    text = str(value).strip()
    try:
        return datetime.fromisoformat(text.replace("Z", "+00:00")).date()
    except ValueError:
        return date.fromisoformat(text[:10])


def _string_list(value: Any) -> tuple[str, ...]:
    """Decode a JSON array column (or pass through a sequence) as a tuple."""
    if value is None or value == "":
        return ()
    if isinstance(value, str):
        value = json.loads(value)
    return tuple(str(item) for item in value)


def is_informational(title: str | None) -> bool:
    return bool(title and title.strip().startswith(INFORMATIONAL_MARKER))


# -- Diary -------------------------------------------------------------------


@dataclass(frozen=True)
class DiaryRow:
    """A diary row exactly as stored, before partitioning."""

    id: str
    title: str
    content: str
    date: date
    tags: frozenset[str] = frozenset()
    mood: str | None = None

    @classmethod
    def from_mapping(cls, row: dict[str, Any]) -> DiaryRow:
        return cls(
            id=str(row["id"]),
            title=row.get("title") or "",
            content=row.get("content") or "",
            date=parse_date(row["date"]),
            tags=frozenset(_string_list(row.get("tags"))),
            mood=row.get("mood") or None,
        )


@dataclass(frozen=True)
class ActivityEntry:
    """An episodic diary entry (something the owner did)."""

    id: str
    title: str
    content: str
    date: date
    tags: frozenset[str] = frozenset()
    mood: str | None = None


@dataclass(frozen=True)
class InformationalEntry:
    """A general fact about the owner, stored as a marker-titled diary row."""

    id: str
    title: str
    content: str
    date: date
    tags: frozenset[str] = frozenset()

    @property
    def display_title(self) -> str:
        title = self.title.strip()
        if title.startswith(INFORMATIONAL_MARKER):
            title = title[len(INFORMATIONAL_MARKER):].strip()
        return title or "General Information"


def to_activity(row: DiaryRow) -> ActivityEntry:
    return ActivityEntry(
        id=row.id,
        title=row.title,
        content=row.content,
        date=row.date,
        tags=row.tags,
        mood=row.mood,
    )


def to_informational(row: DiaryRow) -> InformationalEntry:
    return InformationalEntry(
        id=row.id, title=row.title, content=row.content, date=row.date, tags=row.tags
    )


def partition_diary(
    rows: list[DiaryRow],
) -> tuple[list[ActivityEntry], list[InformationalEntry]]:
    """Split diary rows into disjoint (activities, informational) views."""
    activities: list[ActivityEntry] = []
    informational: list[InformationalEntry] = []
    for row in rows:
        if is_informational(row.title):
            informational.append(to_informational(row))
        else:
            activities.append(to_activity(row))
    return activities, informational


# -- Background tables -------------------------------------------------------


@dataclass(frozen=True)
class JobRecord:
    title: str
    company: str
    location: str
    type: str
    start_date: date
    end_date: date | None = None
    description: str = ""
    technologies: tuple[str, ...] = ()
    responsibilities: tuple[str, ...] = ()

    @classmethod
    def from_mapping(cls, row: dict[str, Any]) -> JobRecord:
        return cls(
            title=row["title"],
            company=row["company"],
            location=row.get("location") or "",
            type=row.get("type") or "",
            start_date=parse_date(row["start_date"]),
            end_date=parse_date(row.get("end_date")),
            description=row.get("description") or "",
            technologies=_string_list(row.get("technologies")),
            responsibilities=_string_list(row.get("responsibilities")),
        )


@dataclass(frozen=True)
class EducationRecord:
    institution: str
    degree: str
    degree_type: str
    field: str
    location: str
    start_date: date
    end_date: date | None = None
    gpa: float | None = None
    courses: tuple[str, ...] = ()

    @classmethod
    def from_mapping(cls, row: dict[str, Any]) -> EducationRecord:
        gpa = row.get("gpa")
        return cls(
            institution=row["institution"],
            degree=row["degree"],
            degree_type=row.get("degree_type") or "",
            field=row.get("field") or "",
            location=row.get("location") or "",
            start_date=parse_date(row["start_date"]),
            end_date=parse_date(row.get("end_date")),
            gpa=float(gpa) if gpa not in (None, "") else None,
            courses=_string_list(row.get("courses")),
        )


@dataclass(frozen=True)
class ProjectRecord:
    name: str
    description: str
    github_url: str | None = None

    @classmethod
    def from_mapping(cls, row: dict[str, Any]) -> ProjectRecord:
        return cls(
            name=row.get("title") or row.get("name") or "",
            description=row.get("description") or "",
            github_url=row.get("github_url") or None,
        )


@dataclass(frozen=True)
class ToolRecord:
    name: str
    description: str

    @classmethod
    def from_mapping(cls, row: dict[str, Any]) -> ToolRecord:
        return cls(name=row["name"], description=row.get("description") or "")


# -- Per-request aggregate ---------------------------------------------------


@dataclass(frozen=True)
class ChatContext:
    """Everything retrieved for one chat request.

    ``activities`` and ``informational`` never share an entry.
    """

    activities: tuple[ActivityEntry, ...] = ()
    informational: tuple[InformationalEntry, ...] = ()
    projects: tuple[ProjectRecord, ...] = ()
    tools: tuple[ToolRecord, ...] = ()
    jobs: tuple[JobRecord, ...] = ()
    education: tuple[EducationRecord, ...] = ()

    def counts(self) -> dict[str, int]:
        """Sizes of each collection, keyed the way the chat API reports them."""
        return {
            "diaryCount": len(self.activities),
            "informationalCount": len(self.informational),
            "projectsCount": len(self.projects),
            "toolsCount": len(self.tools),
            "jobsCount": len(self.jobs),
            "educationCount": len(self.education),
        }
