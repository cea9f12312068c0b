"""ContentStore: portfolio content reads plus snapshot import and export via libsql."""

from __future__ import annotations

import json
import logging
import uuid
from datetime import UTC, datetime
from typing import TYPE_CHECKING, Any, Protocol

from portfolio_chat.content.models import (
    DiaryRow,
    EducationRecord,
    JobRecord,
    ProjectRecord,
    ToolRecord,
)
from portfolio_chat.db import connection

if TYPE_CHECKING:
    from collections.abc import Iterable
    from pathlib import Path

    from portfolio_chat.db import ContentConnection

logger = logging.getLogger(__name__)

_SCHEMA = (
    """
    CREATE TABLE IF NOT EXISTS diary (
        id         TEXT PRIMARY KEY,
        title      TEXT NOT NULL,
        content    TEXT NOT NULL DEFAULT '',
        date       TEXT NOT NULL,
        tags       TEXT NOT NULL DEFAULT '[]',
        mood       TEXT,
        created_at TEXT NOT NULL
    )
    """,
    """
    CREATE TABLE IF NOT EXISTS jobs (
        id               TEXT PRIMARY KEY,
        title            TEXT NOT NULL,
        company          TEXT NOT NULL,
        location         TEXT NOT NULL DEFAULT '',
        type             TEXT NOT NULL DEFAULT '',
        start_date       TEXT NOT NULL,
        end_date         TEXT,
        description      TEXT NOT NULL DEFAULT '',
        technologies     TEXT NOT NULL DEFAULT '[]',
        responsibilities TEXT NOT NULL DEFAULT '[]'
    )
    """,
    """
    CREATE TABLE IF NOT EXISTS education (
        id          TEXT PRIMARY KEY,
        institution TEXT NOT NULL,
        degree      TEXT NOT NULL,
        degree_type TEXT NOT NULL DEFAULT '',
        field       TEXT NOT NULL DEFAULT '',
        location    TEXT NOT NULL DEFAULT '',
        start_date  TEXT NOT NULL,
        end_date    TEXT,
        gpa         REAL,
        courses     TEXT NOT NULL DEFAULT '[]'
    )
    """,
    """
    CREATE TABLE IF NOT EXISTS projects (
        id          TEXT PRIMARY KEY,
        title       TEXT NOT NULL,
        description TEXT NOT NULL DEFAULT '',
        github_url  TEXT,
        created_at  TEXT NOT NULL
    )
    """,
    """
    CREATE TABLE IF NOT EXISTS tools (
        id          TEXT PRIMARY KEY,
        name        TEXT NOT NULL,
        description TEXT NOT NULL DEFAULT '',
        acquired    TEXT
    )
    """,
)

_DIARY_COLUMNS = ("id", "title", "content", "date", "tags", "mood")
_JOB_COLUMNS = (
    "title",
    "company",
    "location",
    "type",
    "start_date",
    "end_date",
    "description",
    "technologies",
    "responsibilities",
)
_EDUCATION_COLUMNS = (
    "institution",
    "degree",
    "degree_type",
    "field",
    "location",
    "start_date",
    "end_date",
    "gpa",
    "courses",
)
_PROJECT_COLUMNS = ("title", "description", "github_url")
_TOOL_COLUMNS = ("name", "description")

_DIARY_SELECT = f"SELECT {', '.join(_DIARY_COLUMNS)} FROM diary"

_EXPORT_COLUMNS: dict[str, tuple[str, ...]] = {
    "diary": (*_DIARY_COLUMNS, "created_at"),
    "jobs": ("id", *_JOB_COLUMNS),
    "education": ("id", *_EDUCATION_COLUMNS),
    "projects": ("id", *_PROJECT_COLUMNS, "created_at"),
    "tools": ("id", *_TOOL_COLUMNS, "acquired"),
}
_LIST_COLUMNS = frozenset({"tags", "technologies", "responsibilities", "courses"})


class ContentSource(Protocol):
    """Read interface the chat pipeline needs from the content store."""

    async def list_activities(self, tags: Iterable[str]) -> list[DiaryRow]: ...

    async def list_recent_activities(self, limit: int) -> list[DiaryRow]: ...

    async def list_all_activities(self) -> list[DiaryRow]: ...

    async def list_jobs(self) -> list[JobRecord]: ...

    async def list_education(self) -> list[EducationRecord]: ...

    async def list_projects(self) -> list[ProjectRecord]: ...

    async def list_tools(self) -> list[ToolRecord]: ...


def _pick(record: dict[str, Any], *keys: str, default: Any = None) -> Any:
    """First present key — exports may use camelCase or snake_case."""
    for key in keys:
        if key in record and record[key] is not None:
            return record[key]
    return default


def _json_list(value: Any) -> str:
    """Encode a list field as a JSON array of strings.

    Strings may already hold a JSON array; anything else is read as a
    comma-separated list.  Only arrays ever reach the database.
    """
    if value is None:
        return "[]"
    if isinstance(value, str):
        try:
            decoded = json.loads(value)
        except json.JSONDecodeError:
            decoded = None
        if isinstance(decoded, list):
            value = decoded
        else:
            value = [part for part in (p.strip() for p in value.split(",")) if part]
    elif not isinstance(value, (list, tuple, set, frozenset)):
        msg = f"expected a list, got {type(value).__name__}"
        raise ValueError(msg)
    return json.dumps([str(item) for item in value])


class ContentStore:
    """Portfolio content (diary, jobs, education, projects, tools) in SQLite / Turso.

    Shared instance via ``ContentStore.get()``.  Pass an explicit *db_path*
    for test isolation (e.g. ``tmp_path / "test.db"``).
    """

    _instance: ContentStore | None = None

    def __init__(self, db_path: Path | None = None) -> None:
        self._db_path = db_path
        self._initialised = False

    @classmethod
    def get(cls) -> ContentStore:
        """Return the shared ContentStore instance."""
        if cls._instance is None:
            cls._instance = cls()
        return cls._instance

    @classmethod
    def _reset(cls) -> None:
        """Reset the singleton (for testing)."""
        cls._instance = None

    # -- Internal helpers ------------------------------------------------------

    async def _ensure_schema(self, db: ContentConnection) -> None:
        if self._initialised:
            return
        for statement in _SCHEMA:
            await db.execute(statement)
        await db.commit()
        self._initialised = True

    async def _select(
        self, sql: str, columns: tuple[str, ...], params: tuple = ()
    ) -> list[dict[str, Any]]:
        async with connection(self._db_path) as db:
            await self._ensure_schema(db)
            cursor = await db.execute(sql, params)
            return await cursor.mappings(columns)

    # -- Diary -----------------------------------------------------------------

    async def list_activities(self, tags: Iterable[str]) -> list[DiaryRow]:
        """Diary rows sharing at least one tag with *tags*, newest first.

        An empty tag set matches nothing.
        """
        wanted = sorted({t for t in tags if t})
        if not wanted:
            return []
        placeholders = ", ".join("?" for _ in wanted)
        sql = (
            f"{_DIARY_SELECT} WHERE EXISTS ("
            f"SELECT 1 FROM json_each(diary.tags) WHERE json_each.value IN ({placeholders})"
            ") ORDER BY date DESC"
        )
        rows = await self._select(sql, _DIARY_COLUMNS, tuple(wanted))
        return [DiaryRow.from_mapping(r) for r in rows]

    async def list_recent_activities(self, limit: int) -> list[DiaryRow]:
        """The *limit* most recent diary rows."""
        if limit <= 0:
            return []
        rows = await self._select(
            f"{_DIARY_SELECT} ORDER BY date DESC LIMIT ?", _DIARY_COLUMNS, (limit,)
        )
        return [DiaryRow.from_mapping(r) for r in rows]

    async def list_all_activities(self) -> list[DiaryRow]:
        rows = await self._select(f"{_DIARY_SELECT} ORDER BY date DESC", _DIARY_COLUMNS)
        return [DiaryRow.from_mapping(r) for r in rows]

    # -- Background tables -----------------------------------------------------

    async def list_jobs(self) -> list[JobRecord]:
        rows = await self._select(
            f"SELECT {', '.join(_JOB_COLUMNS)} FROM jobs ORDER BY start_date DESC",
            _JOB_COLUMNS,
        )
        return [JobRecord.from_mapping(r) for r in rows]

    async def list_education(self) -> list[EducationRecord]:
        rows = await self._select(
            f"SELECT {', '.join(_EDUCATION_COLUMNS)} FROM education ORDER BY start_date DESC",
            _EDUCATION_COLUMNS,
        )
        return [EducationRecord.from_mapping(r) for r in rows]

    async def list_projects(self) -> list[ProjectRecord]:
        rows = await self._select(
            f"SELECT {', '.join(_PROJECT_COLUMNS)} FROM projects ORDER BY created_at DESC",
            _PROJECT_COLUMNS,
        )
        return [ProjectRecord.from_mapping(r) for r in rows]

    async def list_tools(self) -> list[ToolRecord]:
        rows = await self._select(
            f"SELECT {', '.join(_TOOL_COLUMNS)} FROM tools ORDER BY acquired DESC",
            _TOOL_COLUMNS,
        )
        return [ToolRecord.from_mapping(r) for r in rows]

    # -- Import ----------------------------------------------------------------

    async def load_snapshot(self, data: dict[str, list[dict[str, Any]]]) -> dict[str, int]:
        """Replace every table with the records in *data*.

        *data* is a JSON export keyed by ``diary``, ``jobs``, ``education``,
        ``projects`` and ``tools``; missing keys leave that table empty.
        Returns the number of rows written per table.
        """
        now = datetime.now(UTC).isoformat()
        diary = data.get("diary", [])
        jobs = data.get("jobs", [])
        education = data.get("education", [])
        projects = data.get("projects", [])
        tools = data.get("tools", [])

        async with connection(self._db_path) as db:
            await self._ensure_schema(db)
            for table in ("diary", "jobs", "education", "projects", "tools"):
                await db.execute(f"DELETE FROM {table}")  # noqa: S608

            await db.execute_many(
                "INSERT INTO diary (id, title, content, date, tags, mood, created_at) "
                "VALUES (?, ?, ?, ?, ?, ?, ?)",
                (
                    (
                        str(_pick(d, "id", default=uuid.uuid4().hex)),
                        d["title"],
                        d.get("content", ""),
                        str(d["date"]),
                        _json_list(d.get("tags")),
                        d.get("mood"),
                        str(_pick(d, "created_at", "createdAt", default=now)),
                    )
                    for d in diary
                ),
            )
            await db.execute_many(
                "INSERT INTO jobs (id, title, company, location, type, start_date, end_date, "
                "description, technologies, responsibilities) "
                "VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?)",
                (
                    (
                        str(_pick(j, "id", default=uuid.uuid4().hex)),
                        j["title"],
                        j["company"],
                        j.get("location", ""),
                        j.get("type", ""),
                        str(_pick(j, "start_date", "startDate")),
                        _pick(j, "end_date", "endDate"),
                        j.get("description", ""),
                        _json_list(j.get("technologies")),
                        _json_list(j.get("responsibilities")),
                    )
                    for j in jobs
                ),
            )
            await db.execute_many(
                "INSERT INTO education (id, institution, degree, degree_type, field, location, "
                "start_date, end_date, gpa, courses) "
                "VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?)",
                (
                    (
                        str(_pick(e, "id", default=uuid.uuid4().hex)),
                        e["institution"],
                        e["degree"],
                        _pick(e, "degree_type", "degreeType", default=""),
                        e.get("field", ""),
                        e.get("location", ""),
                        str(_pick(e, "start_date", "startDate")),
                        _pick(e, "end_date", "endDate"),
                        e.get("gpa"),
                        _json_list(e.get("courses")),
                    )
                    for e in education
                ),
            )
            await db.execute_many(
                "INSERT INTO projects (id, title, description, github_url, created_at) "
                "VALUES (?, ?, ?, ?, ?)",
                (
                    (
                        str(_pick(p, "id", default=uuid.uuid4().hex)),
                        _pick(p, "title", "name", default=""),
                        p.get("description", ""),
                        _pick(p, "github_url", "githubUrl"),
                        str(_pick(p, "created_at", "createdAt", default=now)),
                    )
                    for p in projects
                ),
            )
            await db.execute_many(
                "INSERT INTO tools (id, name, description, acquired) VALUES (?, ?, ?, ?)",
                (
                    (
                        str(_pick(t, "id", default=uuid.uuid4().hex)),
                        t["name"],
                        t.get("description", ""),
                        _pick(t, "acquired"),
                    )
                    for t in tools
                ),
            )
            await db.commit()

        counts = {
            "diary": len(diary),
            "jobs": len(jobs),
            "education": len(education),
            "projects": len(projects),
            "tools": len(tools),
        }
        logger.info("Content snapshot loaded: %s", counts)
        return counts

    # -- Export ----------------------------------------------------------------

    async def dump_snapshot(self) -> dict[str, list[dict[str, Any]]]:
        """Every table as plain records, in the shape ``load_snapshot`` reads."""
        snapshot: dict[str, list[dict[str, Any]]] = {}
        async with connection(self._db_path) as db:
            await self._ensure_schema(db)
            for table, columns in _EXPORT_COLUMNS.items():
                cursor = await db.execute(
                    f"SELECT {', '.join(columns)} FROM {table} ORDER BY id"  # noqa: S608
                )
                records = await cursor.mappings(columns)
                for record in records:
                    for key in _LIST_COLUMNS.intersection(record):
                        record[key] = json.loads(record[key] or "[]")
                snapshot[table] = records

        logger.info(
            "Content snapshot dumped: %s", {t: len(r) for t, r in snapshot.items()}
        )
        return snapshot
