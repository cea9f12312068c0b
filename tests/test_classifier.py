"""Tests for QueryClassifier tag inference."""

from unittest.mock import AsyncMock, MagicMock

import anthropic
import httpx
import pytest

from portfolio_chat.llm.classifier import DEFAULT_TAGS, MAX_TAGS, QueryClassifier


def _llm(reply: str | None = None, error: Exception | None = None) -> MagicMock:
    llm = MagicMock()
    llm.classifier_model = "claude-test-haiku"
    llm.complete_text = AsyncMock(return_value=reply, side_effect=error)
    return llm


async def test_infers_tags_from_json() -> None:
    classifier = QueryClassifier(_llm('{"tags": ["leisure", "hobby"]}'))
    assert await classifier.infer_tags("What does Jason do for fun?") == {"leisure", "hobby"}


async def test_request_uses_classifier_model_and_limits() -> None:
    llm = _llm('{"tags": []}')
    classifier = QueryClassifier(llm, temperature=0.7, max_tokens=100)
    await classifier.infer_tags("Where has he traveled?")

    kwargs = llm.complete_text.call_args.kwargs
    assert kwargs["model"] == "claude-test-haiku"
    assert kwargs["max_tokens"] == 100
    assert kwargs["temperature"] == 0.7
    prompt = llm.complete_text.call_args.args[0][0]["content"]
    assert "Where has he traveled?" in prompt
    for tag in DEFAULT_TAGS:
        assert tag in prompt


async def test_code_fenced_json_is_accepted() -> None:
    classifier = QueryClassifier(_llm('```json\n{"tags": ["travel"]}\n```'))
    assert await classifier.infer_tags("trips?") == {"travel"}


async def test_unknown_tags_are_dropped() -> None:
    classifier = QueryClassifier(_llm('{"tags": ["leisure", "skydiving", 42]}'))
    assert await classifier.infer_tags("fun?") == {"leisure"}


async def test_tags_are_normalised_to_vocabulary() -> None:
    classifier = QueryClassifier(_llm('{"tags": [" Food ", "FOOD"]}'))
    assert await classifier.infer_tags("favorite meal?") == {"food"}


async def test_caps_at_three_tags() -> None:
    reply = '{"tags": ["work", "learning", "technology", "conference", "travel"]}'
    tags = await QueryClassifier(_llm(reply)).infer_tags("career?")
    assert len(tags) == MAX_TAGS
    assert tags == {"work", "learning", "technology"}


@pytest.mark.parametrize(
    "reply",
    [
        "",
        None,
        "   ",
        "not json at all",
        '{"tags": "leisure"}',
        '{"labels": ["leisure"]}',
        '["leisure"]',
        '{"tags": [',
    ],
)
async def test_malformed_replies_yield_empty_set(reply) -> None:
    assert await QueryClassifier(_llm(reply)).infer_tags("anything") == frozenset()


async def test_api_error_yields_empty_set() -> None:
    error = anthropic.APIConnectionError(
        request=httpx.Request("POST", "https://api.anthropic.com/v1/messages")
    )
    assert await QueryClassifier(_llm(error=error)).infer_tags("hi") == frozenset()


async def test_timeout_yields_empty_set() -> None:
    assert await QueryClassifier(_llm(error=TimeoutError())).infer_tags("hi") == frozenset()


async def test_result_is_subset_of_custom_vocabulary() -> None:
    classifier = QueryClassifier(_llm('{"tags": ["chess", "leisure"]}'), vocabulary=["chess"])
    assert await classifier.infer_tags("games?") == {"chess"}
