"""System prompt assembly from a retrieved ``ChatContext``.

Everything here is pure: the same context and persona always render the same
string, so prompts can be compared in tests and cached by callers.
"""

from __future__ import annotations

import re
from datetime import date, datetime
from typing import TYPE_CHECKING

from portfolio_chat.content.models import parse_date
from portfolio_chat.llm.persona import Persona, render_persona

if TYPE_CHECKING:
    from portfolio_chat.content.models import (
        ActivityEntry,
        ChatContext,
        EducationRecord,
        InformationalEntry,
        JobRecord,
        ProjectRecord,
        ToolRecord,
    )

MAX_PROJECTS = 10
MAX_TOOLS = 20
EXCERPT_LENGTH = 150
ELLIPSIS = "..."
EMPTY = "None"
NO_ACTIVITIES = "  (No recent activities available)"

_FIRST_SENTENCE_RE = re.compile(r"^[^.!?]+[.!?]")
_LAST_WHITESPACE_RE = re.compile(r"\s(?=\S*$)")


def format_date(value: date | datetime | str | None) -> str:
    """Render a date as ``Jan 5, 2024``; unparsable values pass through."""
    if value is None:
        return ""
    try:
        parsed = parse_date(value)
    except ValueError:
        return str(value)
    if parsed is None:
        return str(value)
    return f"{parsed:%b} {parsed.day}, {parsed.year}"


def excerpt(content: str | None, max_length: int = EXCERPT_LENGTH) -> str:
    """Short reference to an activity without disclosing it verbatim.

    First sentence when it fits, else the whole text when it fits, else a
    word-boundary cut with an ellipsis.
    """
    if not content:
        return ""

    match = _FIRST_SENTENCE_RE.match(content)
    if match and len(match.group(0)) <= max_length:
        return match.group(0).strip()

    if len(content) <= max_length:
        return content.strip()

    truncated = content[:max_length]
    boundary = _LAST_WHITESPACE_RE.search(truncated)
    if boundary and boundary.start() > 0:
        truncated = truncated[: boundary.start()]
    return truncated + ELLIPSIS


def _period(start: date, end: date | None) -> str:
    return f"{format_date(start)} - {format_date(end) if end else 'Present'}"


def _format_job(job: JobRecord) -> str:
    return (
        f"- {job.title} at {job.company} ({job.location}) - {job.type}\n"
        f"  Period: {_period(job.start_date, job.end_date)}\n"
        f"  Description: {job.description}\n"
        f"  Technologies: {', '.join(job.technologies)}\n"
        f"  Responsibilities: {'; '.join(job.responsibilities)}"
    )


def _format_education(edu: EducationRecord) -> str:
    lines = [
        f"- {edu.degree} ({edu.degree_type}) in {edu.field}",
        f"  Institution: {edu.institution} ({edu.location})",
        f"  Period: {_period(edu.start_date, edu.end_date)}",
    ]
    if edu.gpa is not None:
        lines.append(f"  GPA: {edu.gpa:g}")
    if edu.courses:
        lines.append(f"  Courses: {', '.join(edu.courses)}")
    return "\n".join(lines)


def _format_project(project: ProjectRecord) -> str:
    link = f" ({project.github_url})" if project.github_url else ""
    return f"- {project.name}: {project.description}{link}"


def _format_tool(tool: ToolRecord) -> str:
    return f"- {tool.name}: {tool.description}"


def _format_informational(entry: InformationalEntry) -> str:
    return f"- {entry.display_title}:\n{entry.content}"


def _format_activity(entry: ActivityEntry) -> str:
    themes = ", ".join(sorted(entry.tags))
    mood = f", Mood: {entry.mood}" if entry.mood else ""
    summary = excerpt(entry.content) or "No content available"
    return (
        f"  - {entry.title} ({format_date(entry.date)}): Themes: {themes}{mood}\n"
        f"    Activity: {summary}"
    )


def build_system_prompt(context: ChatContext, persona: Persona | None = None) -> str:
    """Render *context* into the persona document as one system instruction."""
    persona = persona or Persona()

    jobs = "\n\n".join(_format_job(j) for j in context.jobs) or EMPTY
    education = "\n\n".join(_format_education(e) for e in context.education) or EMPTY
    projects = "\n".join(_format_project(p) for p in context.projects[:MAX_PROJECTS]) or EMPTY
    tools = "\n".join(_format_tool(t) for t in context.tools[:MAX_TOOLS]) or EMPTY
    informational = (
        "\n\n".join(_format_informational(i) for i in context.informational) or EMPTY
    )
    activities = "\n".join(_format_activity(a) for a in context.activities) or NO_ACTIVITIES

    return render_persona(
        persona,
        projects=projects,
        tools=tools,
        jobs=jobs,
        education=education,
        informational=informational,
        activities=activities,
    )
