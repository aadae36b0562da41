"""Unit tests for the sentiment analyzer and the lead detector."""

import openai
import pytest

from autoreply.models.domain.enums import LeadTemperature, Sentiment
from autoreply.services.lead_detector import LeadDetector
from autoreply.services.sentiment_analyzer import SentimentAnalyzer
from conftest import completion, openai_request


class TestSentimentAnalyzer:
    async def test_classifies(self, completions, llm):
        completions.answers["sentiment"] = '{"sentiment": "positive", "score": 0.9}'
        result = await SentimentAnalyzer(llm).classify("I love this!!")

        assert result.sentiment == Sentiment.POSITIVE
        assert result.score == 0.9

    async def test_prompt_shape(self, completions, llm):
        await SentimentAnalyzer(llm).classify("Where can I buy it?")

        call = completions.calls_of("sentiment")[0]
        assert call["temperature"] == 0.3
        assert call["max_tokens"] == 100
        assert call["messages"][1]["content"] == 'Analyze this comment: "Where can I buy it?"'

    async def test_missing_score_defaults(self, completions, llm):
        completions.answers["sentiment"] = '{"sentiment": "question"}'
        result = await SentimentAnalyzer(llm).classify("How much?")

        assert result.sentiment == Sentiment.QUESTION
        assert result.score == 0.5

    @pytest.mark.parametrize(
        "answer",
        [
            openai.APIConnectionError(request=openai_request()),
            openai.APITimeoutError(request=openai_request()),
            "not json at all",
            '{"sentiment": "angry", "score": 0.4}',
            '{"score": 0.4}',
            completion(""),
        ],
    )
    async def test_failures_default_to_neutral(self, completions, llm, answer):
        completions.answers["sentiment"] = answer
        result = await SentimentAnalyzer(llm).classify("whatever")

        assert result.sentiment == Sentiment.NEUTRAL
        assert result.score == 0.5


class TestLeadDetector:
    async def test_hot_lead(self, completions, llm):
        completions.answers["lead"] = '{"is_lead": true, "temperature": "hot"}'
        result = await LeadDetector(llm).detect("I want to buy 3 right now, DM me the price")

        assert result.is_lead is True
        assert result.temperature == LeadTemperature.HOT

    async def test_not_a_lead(self, llm):
        result = await LeadDetector(llm).detect("nice video")

        assert result.is_lead is False
        assert result.temperature == LeadTemperature.COLD

    async def test_prompt_shape(self, completions, llm):
        await LeadDetector(llm).detect("price?")

        call = completions.calls_of("lead")[0]
        assert call["temperature"] == 0.3
        assert call["max_tokens"] == 50
        assert call["messages"][1]["content"] == 'Is this a sales lead? "price?"'

    @pytest.mark.parametrize(
        "answer",
        [
            openai.APIConnectionError(request=openai_request()),
            "yes, definitely a lead",
            '{"is_lead": true, "temperature": "boiling"}',
        ],
    )
    async def test_failures_default_to_cold_non_lead(self, completions, llm, answer):
        completions.answers["lead"] = answer
        result = await LeadDetector(llm).detect("price?")

        assert result.is_lead is False
        assert result.temperature == LeadTemperature.COLD
