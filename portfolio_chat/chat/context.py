"""Retrieve and shape the content a single chat request is answered from."""

from __future__ import annotations

import asyncio
import logging
from typing import TYPE_CHECKING

from portfolio_chat.content.models import (
    ActivityEntry,
    ChatContext,
    DiaryRow,
    is_informational,
    partition_diary,
    to_activity,
)

if TYPE_CHECKING:
    from collections.abc import Iterable

    from portfolio_chat.content.store import ContentSource

logger = logging.getLogger(__name__)


def merge_activities(
    *batches: Iterable[DiaryRow], limit: int
) -> list[ActivityEntry]:
    """Concatenate *batches*, drop informational rows, dedupe by id, cap at *limit*.

    The first occurrence of an id wins and batch order is preserved.
    """
    seen: set[str] = set()
    merged: list[ActivityEntry] = []
    for batch in batches:
        for row in batch:
            if is_informational(row.title) or row.id in seen:
                continue
            seen.add(row.id)
            merged.append(to_activity(row))
    return merged[:limit]


class ContextAssembler:
    """Fans out to the content store and builds a ``ChatContext``.

    Activities are the one large collection, so they are filtered by tag
    overlap and blended with the most recent entries.  Jobs, education,
    projects and tools are small reference tables and always included whole.
    Store errors propagate.
    """

    def __init__(
        self,
        source: ContentSource,
        *,
        max_activities: int = 5,
        recent_limit: int = 5,
    ) -> None:
        self._source = source
        self.max_activities = max_activities
        self.recent_limit = recent_limit

    async def build_context(self, query: str, tags: Iterable[str]) -> ChatContext:
        tags = frozenset(tags)

        tagged, recent, everything = await asyncio.gather(
            self._source.list_activities(tags),
            self._source.list_recent_activities(self.recent_limit),
            self._source.list_all_activities(),
        )
        _, informational = partition_diary(everything)
        activities = merge_activities(tagged, recent, limit=self.max_activities)

        jobs, education = await asyncio.gather(
            self._source.list_jobs(),
            self._source.list_education(),
        )
        projects, tools = await asyncio.gather(
            self._source.list_projects(),
            self._source.list_tools(),
        )

        logger.info(
            "Context for %r (tags=%s): %d tagged, %d recent -> %d activities, %d informational",
            query[:80],
            sorted(tags),
            len(tagged),
            len(recent),
            len(activities),
            len(informational),
        )

        return ChatContext(
            activities=tuple(activities),
            informational=tuple(informational),
            projects=tuple(projects),
            tools=tuple(tools),
            jobs=tuple(jobs),
            education=tuple(education),
        )
