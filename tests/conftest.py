"""Shared test fixtures."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date
from typing import Any

import pytest

from portfolio_chat.content.models import (
    DiaryRow,
    EducationRecord,
    JobRecord,
    ProjectRecord,
    ToolRecord,
)


@pytest.fixture(autouse=False)
def _no_turso(monkeypatch: pytest.MonkeyPatch) -> None:
    """Ensure tests use local file, not remote Turso."""
    monkeypatch.setattr("portfolio_chat.config.settings.turso_database_url", "")


def _diary(
    id: str,
    title: str,
    day: date,
    tags: tuple[str, ...] = (),
    content: str = "Went out.",
    mood: str | None = None,
) -> DiaryRow:
    return DiaryRow(
        id=id, title=title, content=content, date=day, tags=frozenset(tags), mood=mood
    )


@dataclass
class FakeContentSource:
    """In-memory ``ContentSource`` that mimics the store's filtering."""

    rows: list[DiaryRow] = field(default_factory=list)
    jobs: list[JobRecord] = field(default_factory=list)
    education: list[EducationRecord] = field(default_factory=list)
    projects: list[ProjectRecord] = field(default_factory=list)
    tools: list[ToolRecord] = field(default_factory=list)
    calls: list[tuple[str, Any]] = field(default_factory=list)

    def _by_date(self) -> list[DiaryRow]:
        return sorted(self.rows, key=lambda r: r.date, reverse=True)

    async def list_activities(self, tags):
        tags = set(tags)
        self.calls.append(("list_activities", frozenset(tags)))
        if not tags:
            return []
        return [r for r in self._by_date() if r.tags & tags]

    async def list_recent_activities(self, limit):
        self.calls.append(("list_recent_activities", limit))
        return self._by_date()[:limit]

    async def list_all_activities(self):
        self.calls.append(("list_all_activities", None))
        return self._by_date()

    async def list_jobs(self):
        return list(self.jobs)

    async def list_education(self):
        return list(self.education)

    async def list_projects(self):
        return list(self.projects)

    async def list_tools(self):
        return list(self.tools)


@pytest.fixture
def sample_job() -> JobRecord:
    return JobRecord(
        title="Software Engineer",
        company="Acme Robotics",
        location="Austin, TX",
        type="Full-time",
        start_date=date(2022, 3, 1),
        end_date=None,
        description="Builds data pipelines.",
        technologies=("Python", "PostgreSQL"),
        responsibilities=("Own ingestion", "Mentor interns"),
    )


@pytest.fixture
def sample_education() -> EducationRecord:
    return EducationRecord(
        institution="State University",
        degree="Computer Science",
        degree_type="BS",
        field="Computer Science",
        location="Denver, CO",
        start_date=date(2016, 8, 20),
        end_date=date(2020, 5, 15),
        gpa=3.8,
        courses=("Algorithms", "Databases"),
    )


@pytest.fixture
def snapshot() -> dict[str, list[dict[str, Any]]]:
    """A content export using the camelCase field names of the admin API."""
    return {
        "diary": [
            {
                "id": "d1",
                "title": "Kayaking trip",
                "content": "Paddled the lake at sunrise. It was calm.",
                "date": "2024-06-01T00:00:00.000Z",
                "tags": ["leisure", "exercise"],
                "mood": "happy",
            },
            {
                "id": "d2",
                "title": "Conference talk",
                "content": "Gave a talk on RAG.",
                "date": "2024-05-10T00:00:00.000Z",
                "tags": ["conference", "work"],
            },
            {
                "id": "d3",
                "title": "&& Favorite Foods",
                "content": "Tacos, ramen, and pho.",
                "date": "2024-01-01T00:00:00.000Z",
                "tags": ["food"],
            },
        ],
        "jobs": [
            {
                "title": "Intern",
                "company": "Old Co",
                "location": "Remote",
                "type": "Internship",
                "startDate": "2019-06-01",
                "endDate": "2019-08-31",
                "description": "Summer work.",
                "technologies": ["Java"],
                "responsibilities": ["Write tests"],
            },
            {
                "title": "Software Engineer",
                "company": "Acme Robotics",
                "location": "Austin, TX",
                "type": "Full-time",
                "startDate": "2022-03-01",
                "endDate": None,
                "description": "Builds data pipelines.",
                "technologies": ["Python"],
                "responsibilities": ["Own ingestion"],
            },
        ],
        "education": [
            {
                "institution": "State University",
                "degree": "Computer Science",
                "degreeType": "BS",
                "field": "Computer Science",
                "location": "Denver, CO",
                "startDate": "2016-08-20",
                "endDate": "2020-05-15",
                "gpa": 3.8,
                "courses": ["Algorithms"],
            }
        ],
        "projects": [
            {
                "title": "Portfolio",
                "description": "This site.",
                "githubUrl": "https://github.com/example/portfolio",
                "createdAt": "2024-02-01T00:00:00Z",
            }
        ],
        "tools": [
            {"name": "Docker", "description": "Containers", "acquired": "2021-01-01"},
            {"name": "Figma", "description": "Design", "acquired": "2023-01-01"},
        ],
    }


@pytest.fixture
def make_row():
    """Factory for ``DiaryRow`` values: ``make_row("id", "title", date(...), tags)``."""
    return _diary


@pytest.fixture
def fake_source() -> FakeContentSource:
    return FakeContentSource()
