"""Tests for content records and diary partitioning."""

from datetime import date, datetime

import pytest
from pydantic import ValidationError

from portfolio_chat.content.models import (
    ActivityEntry,
    ChatContext,
    ChatTurn,
    DiaryRow,
    EducationRecord,
    InformationalEntry,
    JobRecord,
    ProjectRecord,
    is_informational,
    parse_date,
    partition_diary,
)

# -- parse_date ----------------------------------------------------------------


class TestParseDate:
    def test_iso_timestamp_with_z(self):
        assert parse_date("2024-06-01T12:30:00.000Z") == date(2024, 6, 1)

    def test_plain_date(self):
        assert parse_date("2023-11-05") == date(2023, 11, 5)

    def test_datetime_and_date_pass_through(self):
        assert parse_date(datetime(2020, 1, 2, 3, 4)) == date(2020, 1, 2)
        assert parse_date(date(2020, 1, 2)) == date(2020, 1, 2)

    def test_empty_is_none(self):
        assert parse_date(None) is None
        assert parse_date("") is None

    def test_garbage_raises(self):
        with pytest.raises(ValueError):
            parse_date("not a date")


# -- Informational marker ------------------------------------------------------


class TestInformationalMarker:
    def test_marker_detected(self):
        assert is_informational("&& Favorite Foods")
        assert is_informational("  &&Hobbies")

    def test_regular_titles(self):
        assert not is_informational("Hiking & camping")
        assert is_informational("") is False
        assert is_informational(None) is False

    def test_display_title_strips_marker(self):
        entry = InformationalEntry(
            id="x", title="&& Favorite Foods", content="Tacos", date=date(2024, 1, 1)
        )
        assert entry.display_title == "Favorite Foods"

    def test_display_title_fallback(self):
        entry = InformationalEntry(id="x", title="&&  ", content="", date=date(2024, 1, 1))
        assert entry.display_title == "General Information"


def test_partition_diary_is_disjoint(make_row) -> None:
    rows = [
        make_row("1", "Hike", date(2024, 3, 1), ("leisure",)),
        make_row("2", "&& Favorite Foods", date(2024, 2, 1), ("food",)),
        make_row("3", "Standup", date(2024, 1, 1), ("work",)),
    ]
    activities, informational = partition_diary(rows)

    assert [a.id for a in activities] == ["1", "3"]
    assert [i.id for i in informational] == ["2"]
    assert all(isinstance(a, ActivityEntry) for a in activities)
    assert all(isinstance(i, InformationalEntry) for i in informational)


# -- from_mapping --------------------------------------------------------------


def test_diary_row_decodes_json_tags() -> None:
    row = DiaryRow.from_mapping(
        {
            "id": "abc",
            "title": "Ramen night",
            "content": "Tried a new shop.",
            "date": "2024-04-02T00:00:00Z",
            "tags": '["food", "social"]',
            "mood": "",
        }
    )
    assert row.tags == frozenset({"food", "social"})
    assert row.mood is None
    assert row.date == date(2024, 4, 2)


def test_job_record_current_role() -> None:
    job = JobRecord.from_mapping(
        {
            "title": "Engineer",
            "company": "Acme",
            "location": "Remote",
            "type": "Contract",
            "start_date": "2023-01-01",
            "end_date": None,
            "description": "",
            "technologies": '["Go", "Rust"]',
            "responsibilities": "[]",
        }
    )
    assert job.end_date is None
    assert job.technologies == ("Go", "Rust")
    assert job.responsibilities == ()


def test_education_record_optional_fields() -> None:
    edu = EducationRecord.from_mapping(
        {
            "institution": "Uni",
            "degree": "Math",
            "degree_type": "BA",
            "field": "Mathematics",
            "location": "Boston",
            "start_date": "2010-09-01",
            "end_date": "2014-06-01",
            "gpa": None,
            "courses": None,
        }
    )
    assert edu.gpa is None
    assert edu.courses == ()


def test_project_record_accepts_title_or_name() -> None:
    assert ProjectRecord.from_mapping({"title": "A", "description": "d"}).name == "A"
    assert ProjectRecord.from_mapping({"name": "B", "description": "d"}).name == "B"


# -- ChatContext / ChatTurn ----------------------------------------------------


def test_context_counts(sample_job, sample_education) -> None:
    ctx = ChatContext(jobs=(sample_job,), education=(sample_education,))
    assert ctx.counts() == {
        "diaryCount": 0,
        "informationalCount": 0,
        "projectsCount": 0,
        "toolsCount": 0,
        "jobsCount": 1,
        "educationCount": 1,
    }


def test_chat_turn_rejects_unknown_role() -> None:
    with pytest.raises(ValidationError):
        ChatTurn(role="system", content="hi")


def test_chat_turn_is_immutable() -> None:
    turn = ChatTurn(role="user", content="hi")
    with pytest.raises(ValidationError):
        turn.content = "changed"
