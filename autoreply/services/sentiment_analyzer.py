# autoreply/services/sentiment_analyzer.py
from autoreply.core.config import logger
from autoreply.models.domain.comments import SentimentResult
from autoreply.models.domain.enums import Sentiment
from autoreply.services.llm_client import ChatCompletionClient, Err, unwrap_or

SYSTEM_PROMPT = """You are a sentiment analyzer. Analyze the given text and respond with ONLY a JSON object (no markdown, no extra text).

Format: {"sentiment": "positive|negative|neutral|question|spam|hate", "score": 0.0-1.0}

Guidelines:
- "positive": Compliments, appreciation, love, excited
- "negative": Criticism, angry, disappointed, sad
- "question": Asking something, seeking info
- "spam": Repetitive, promotional, unrelated
- "hate": Abusive, insulting, threatening
- "neutral": Normal comment, just passing by"""

DEFAULT_SENTIMENT = SentimentResult(sentiment=Sentiment.NEUTRAL, score=0.5)


class SentimentAnalyzer:
    """Classifies comment text into one of six sentiment categories."""

    def __init__(self, llm: ChatCompletionClient):
        self.llm = llm

    async def classify(self, text: str) -> SentimentResult:
        """
        Returns the category and a 0-1 confidence score.

        Never raises: transport errors and malformed output both resolve to
        neutral with a score of 0.5.
        """
        logger.info(f"Classifying comment: '{text[:50]}...'")
        result = await self.llm.complete_json(
            [
                {"role": "system", "content": SYSTEM_PROMPT},
                {"role": "user", "content": f'Analyze this comment: "{text}"'},
            ],
            SentimentResult,
            temperature=0.3,
            max_tokens=100,
        )
        if isinstance(result, Err):
            logger.error(f"Sentiment analysis failed, using default: {result.reason}")
        return unwrap_or(result, DEFAULT_SENTIMENT)
