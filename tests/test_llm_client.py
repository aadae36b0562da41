"""Unit tests for the chat completion client."""

import openai

from autoreply.models.domain.comments import SentimentResult
from autoreply.models.domain.enums import Sentiment
from autoreply.services.llm_client import ChatCompletionClient, Err, Ok, strip_code_fence, unwrap_or
from conftest import FakeCompletions, FakeOpenAI, completion, openai_request

MESSAGES = [{"role": "system", "content": "You are a sentiment analyzer."}, {"role": "user", "content": "hi"}]


def make_client(completions, **kwargs):
    return ChatCompletionClient(model="gpt-test", client=FakeOpenAI(completions), **kwargs)


class TestResultHelpers:
    def test_unwrap_ok(self):
        assert unwrap_or(Ok("value"), "default") == "value"

    def test_unwrap_err(self):
        assert unwrap_or(Err("boom"), "default") == "default"

    def test_strip_json_fence(self):
        assert strip_code_fence('```json\n{"a": 1}\n```') == '{"a": 1}'

    def test_strip_plain_fence(self):
        assert strip_code_fence('```\n{"a": 1}\n```') == '{"a": 1}'

    def test_strip_leaves_plain_json(self):
        assert strip_code_fence('  {"a": 1} ') == '{"a": 1}'


class TestComplete:
    async def test_returns_stripped_content(self):
        completions = FakeCompletions(sentiment="  hello there \n")
        result = await make_client(completions).complete(MESSAGES, temperature=0.3)

        assert result == Ok("hello there")
        assert completions.calls[0]["model"] == "gpt-test"
        assert completions.calls[0]["temperature"] == 0.3

    async def test_connection_error_becomes_err(self):
        completions = FakeCompletions(sentiment=openai.APIConnectionError(request=openai_request()))
        result = await make_client(completions).complete(MESSAGES)

        assert isinstance(result, Err)
        assert "APIConnectionError" in result.reason

    async def test_timeout_becomes_err(self):
        completions = FakeCompletions(sentiment=openai.APITimeoutError(request=openai_request()))
        result = await make_client(completions).complete(MESSAGES)

        assert isinstance(result, Err)
        assert len(completions.calls) == 1

    async def test_empty_content_becomes_err(self):
        result = await make_client(FakeCompletions(sentiment="   ")).complete(MESSAGES)
        assert result == Err("completion returned empty content")

    async def test_none_content_becomes_err(self):
        result = await make_client(FakeCompletions(sentiment=completion(None))).complete(MESSAGES)
        assert isinstance(result, Err)

    async def test_content_filter_becomes_err(self):
        completions = FakeCompletions(sentiment=completion("partial", finish_reason="content_filter"))
        result = await make_client(completions).complete(MESSAGES)
        assert result == Err("completion rejected by content policy")

    async def test_refusal_becomes_err(self):
        completions = FakeCompletions(sentiment=completion(None, refusal="I can't help with that."))
        result = await make_client(completions).complete(MESSAGES)
        assert result == Err("completion rejected by content policy")

    async def test_retries_transient_errors_when_configured(self):
        completions = FakeCompletions()
        answers = [openai.APITimeoutError(request=openai_request()), completion("second try")]

        async def flaky_create(model, messages, **params):
            answer = answers.pop(0)
            if isinstance(answer, Exception):
                raise answer
            return answer

        completions.create = flaky_create
        result = await make_client(completions, max_tries=2).complete(MESSAGES)

        assert result == Ok("second try")
        assert answers == []


class TestCompleteJson:
    async def test_valid_payload(self):
        completions = FakeCompletions(sentiment='{"sentiment": "question", "score": 0.8}')
        result = await make_client(completions).complete_json(MESSAGES, SentimentResult)

        assert isinstance(result, Ok)
        assert result.value.sentiment == Sentiment.QUESTION
        assert result.value.score == 0.8

    async def test_fenced_payload(self):
        completions = FakeCompletions(sentiment='```json\n{"sentiment": "spam", "score": 0.95}\n```')
        result = await make_client(completions).complete_json(MESSAGES, SentimentResult)

        assert result.value.sentiment == Sentiment.SPAM

    async def test_not_json(self):
        completions = FakeCompletions(sentiment="The comment is positive.")
        result = await make_client(completions).complete_json(MESSAGES, SentimentResult)

        assert result == Err("malformed SentimentResult payload")

    async def test_unknown_category(self):
        completions = FakeCompletions(sentiment='{"sentiment": "sarcastic", "score": 0.7}')
        result = await make_client(completions).complete_json(MESSAGES, SentimentResult)

        assert isinstance(result, Err)

    async def test_score_out_of_range(self):
        completions = FakeCompletions(sentiment='{"sentiment": "positive", "score": 7}')
        result = await make_client(completions).complete_json(MESSAGES, SentimentResult)

        assert isinstance(result, Err)

    async def test_transport_error_passes_through(self):
        completions = FakeCompletions(sentiment=openai.APIConnectionError(request=openai_request()))
        result = await make_client(completions).complete_json(MESSAGES, SentimentResult)

        assert isinstance(result, Err)


async def test_aclose_closes_sdk_client():
    fake = FakeOpenAI(FakeCompletions())
    await ChatCompletionClient(client=fake).aclose()
    assert fake.closed
