"""Map a visitor's question to a few topical diary tags."""

from __future__ import annotations

import json
import logging
import re
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Iterable

    from portfolio_chat.llm.client import LLMClient

logger = logging.getLogger(__name__)

DEFAULT_TAGS: tuple[str, ...] = (
    "leisure",
    "work",
    "learning",
    "travel",
    "technology",
    "hobby",
    "conference",
    "food",
    "exercise",
    "social",
    "reflection",
    "achievement",
    "challenge",
)
MAX_TAGS = 3

_FENCE_RE = re.compile(r"^```(?:json)?\s*|\s*```$", re.IGNORECASE)

_PROMPT = """You are analyzing a user query to find relevant activity tags for \
retrieving information about someone's experiences and activities.

User query: "{query}"

Available activity tags: {tags}

Which tags are most relevant to this query? Consider semantic relationships \
(e.g., "fun" relates to "leisure", "work" relates to "work").

Return ONLY a JSON object with this exact format:
{{
  "tags": ["tag1", "tag2", "tag3"]
}}

Return 1-3 most relevant tags. If none are relevant, return an empty array."""


class QueryClassifier:
    """One LLM call per query; any failure degrades to "no tag filter"."""

    def __init__(
        self,
        llm: LLMClient,
        *,
        vocabulary: Iterable[str] = DEFAULT_TAGS,
        temperature: float = 0.7,
        max_tokens: int = 100,
    ) -> None:
        self._llm = llm
        self.vocabulary = tuple(vocabulary)
        self._temperature = temperature
        self._max_tokens = max_tokens

    async def infer_tags(self, query: str) -> frozenset[str]:
        prompt = _PROMPT.format(query=query, tags=", ".join(self.vocabulary))
        try:
            text = await self._llm.complete_text(
                [{"role": "user", "content": prompt}],
                model=self._llm.classifier_model,
                max_tokens=self._max_tokens,
                temperature=self._temperature,
            )
        except Exception:
            logger.exception("Tag inference call failed")
            return frozenset()

        tags = self.parse_tags(text)
        logger.info("Inferred tags for query: %s", sorted(tags))
        return tags

    def parse_tags(self, text: str | None) -> frozenset[str]:
        """Decode ``{"tags": [...]}`` and keep at most three known tags."""
        if not text or not text.strip():
            return frozenset()
        try:
            payload = json.loads(_FENCE_RE.sub("", text.strip()))
        except json.JSONDecodeError:
            logger.warning("Tag inference returned invalid JSON: %.200s", text)
            return frozenset()

        raw = payload.get("tags") if isinstance(payload, dict) else None
        if not isinstance(raw, list):
            logger.warning("Tag inference response has no tags list: %.200s", text)
            return frozenset()

        known = {t.lower(): t for t in self.vocabulary}
        picked: list[str] = []
        for item in raw:
            if not isinstance(item, str):
                continue
            tag = known.get(item.strip().lower())
            if tag and tag not in picked:
                picked.append(tag)
            if len(picked) == MAX_TAGS:
                break
        return frozenset(picked)
