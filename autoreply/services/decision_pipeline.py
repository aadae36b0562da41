# autoreply/services/decision_pipeline.py
"""
Decision pipeline for a single inbound comment.

One call to ``DecisionPipeline.run`` takes a comment from ``pending`` to one of
``ignored``, ``escalated`` or ``replied``:

1. load the user's auto-reply settings (missing settings abort the run)
2. classify the comment and store sentiment/score on it
3. spam gate -> ignored
4. hate gate -> escalated
5. auto-like positive Instagram comments (recorded intent only)
6. generate a reply in the user's brand voice
7. store the reply as a pending AI reply
8. detect sales leads and mark the comment replied
9. return the decision

Every step runs strictly in order on the caller's session. The LLM-backed
services absorb their own failures. Missing settings or comments, a failed
write in steps 2-4, or a failed reply insert end a run early; the like write
(step 5) and the final status write (step 8) are logged and skipped instead.
"""
import asyncio
from typing import Callable, Optional

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from autoreply.core.config import logger
from autoreply.core.exceptions import (
    CommentNotFoundError,
    CommentPersistenceError,
    ReplyPersistenceError,
    SettingsNotFoundError,
)
from autoreply.db.crud import comments as crud_comments
from autoreply.db.crud import profiles as crud_profiles
from autoreply.models.domain.comments import GenerateReplyRequest, PipelineResponse, ReplyPayload
from autoreply.models.domain.enums import AutoReplyStatus, PipelineAction, Platform, Sentiment
from autoreply.models.domain.profiles import AutoReplySettingsRecord
from autoreply.services.lead_detector import LeadDetector
from autoreply.services.llm_client import ChatCompletionClient
from autoreply.services.reply_generator import ReplyGenerator
from autoreply.services.sentiment_analyzer import SentimentAnalyzer

SPAM_REASON = "Spam detected"
HATE_REASON = "Hate comment - escalated to user"

# (comment_id, user_id, platform) -> None
LikeDispatcher = Callable[[str, str, Platform], None]

def lead_tag(sentiment: Sentiment, temperature) -> str:
    """Composite sentiment stored for sales leads, e.g. ``question_lead_hot``."""
    return f"{sentiment.value}_lead_{temperature.value}"


class DecisionPipeline:
    def __init__(
        self,
        db: AsyncSession,
        sentiment_analyzer: SentimentAnalyzer,
        reply_generator: ReplyGenerator,
        lead_detector: LeadDetector,
        like_dispatcher: Optional[LikeDispatcher] = None,
    ):
        self.db = db
        self.sentiment_analyzer = sentiment_analyzer
        self.reply_generator = reply_generator
        self.lead_detector = lead_detector
        self.like_dispatcher = like_dispatcher

    @classmethod
    def build(
        cls,
        db: AsyncSession,
        llm: ChatCompletionClient,
        max_tokens: int = 500,
        like_dispatcher: Optional[LikeDispatcher] = None,
    ) -> "DecisionPipeline":
        """Wires the three LLM-backed services around one shared client."""
        return cls(
            db,
            SentimentAnalyzer(llm),
            ReplyGenerator(llm, db, max_tokens=max_tokens),
            LeadDetector(llm),
            like_dispatcher=like_dispatcher,
        )

    async def run(self, request: GenerateReplyRequest) -> PipelineResponse:
        comment_id = request.comment_id
        logger.info(f"Pipeline started for comment {comment_id} (user {request.user_id}, {request.platform.value})")

        # 1. Settings: nothing is written before this check
        db_settings = await crud_profiles.get_settings(self.db, request.user_id)
        if db_settings is None:
            logger.warning(f"No auto-reply settings for user {request.user_id}")
            raise SettingsNotFoundError(request.user_id)
        settings = AutoReplySettingsRecord.model_validate(db_settings)

        # 2. Classification, stored before any gate
        classification = await self.sentiment_analyzer.classify(request.comment_text)
        sentiment = classification.sentiment
        await self._write_comment(comment_id, sentiment=sentiment.value, sentiment_score=classification.score)
        logger.info(f"Comment {comment_id} classified as {sentiment.value} ({classification.score:.2f})")

        # 3. Spam gate
        if sentiment == Sentiment.SPAM and settings.ignore_spam:
            await self._write_comment(comment_id, auto_reply_status=AutoReplyStatus.IGNORED)
            logger.info(f"Comment {comment_id} ignored as spam")
            return PipelineResponse(action=PipelineAction.IGNORED, reason=SPAM_REASON)

        # 4. Hate gate
        if sentiment == Sentiment.HATE and settings.ignore_hate_comments:
            await self._write_comment(comment_id, auto_reply_status=AutoReplyStatus.ESCALATED)
            logger.info(f"Comment {comment_id} escalated as hate")
            return PipelineResponse(action=PipelineAction.ESCALATED, reason=HATE_REASON)

        # 5. Auto-like: recorded intent only, the run continues if the write fails
        if sentiment == Sentiment.POSITIVE and settings.auto_like_positive and request.platform == Platform.INSTAGRAM:
            try:
                await self._write_comment(comment_id, is_liked=True)
            except CommentPersistenceError:
                logger.warning(f"Like intent for comment {comment_id} not recorded, skipping dispatch")
            else:
                await self._dispatch_like(request)

        # 6. Reply generation
        reply_text = await self.reply_generator.generate(
            request.comment_text,
            request.user_id,
            settings.default_tone,
            settings.default_language,
            sentiment,
        )

        # 7. Persist the reply
        auto_reply_id = await self._store_reply(request, reply_text, settings)

        # 8. Lead detection and terminal status
        lead = await self.lead_detector.detect(request.comment_text)
        fields = {"auto_reply_status": AutoReplyStatus.REPLIED}
        if lead.is_lead:
            fields["sentiment"] = lead_tag(sentiment, lead.temperature)
            logger.info(f"Comment {comment_id} flagged as {lead.temperature.value} lead")
        # The reply is already stored, so a failed status write is logged, not raised
        try:
            await self._write_comment(comment_id, **fields)
        except (CommentPersistenceError, CommentNotFoundError) as e:
            logger.error(f"Reply {auto_reply_id} stored but comment {comment_id} was not marked replied: {e.details}")

        # 9. Decision
        return PipelineResponse(
            action=PipelineAction.REPLIED,
            reply=ReplyPayload(
                id=auto_reply_id,
                text=reply_text,
                tone=settings.default_tone.value,
                language=settings.default_language,
                sentiment=sentiment,
                is_sales_lead=lead.is_lead,
                lead_temperature=lead.temperature,
            ),
        )

    async def _write_comment(self, comment_id: str, **fields):
        try:
            matched = await crud_comments.update_comment(self.db, comment_id, **fields)
            if matched:
                await self.db.commit()
        except SQLAlchemyError as e:
            logger.error(f"Failed to update comment {comment_id}: {e}", exc_info=True)
            await self.db.rollback()
            raise CommentPersistenceError(comment_id, details=str(e)) from e
        if not matched:
            await self.db.rollback()
            raise CommentNotFoundError(comment_id)

    async def _store_reply(self, request: GenerateReplyRequest, reply_text: str, settings: AutoReplySettingsRecord) -> str:
        try:
            db_reply = await crud_comments.insert_auto_reply(
                self.db,
                user_id=request.user_id,
                comment_id=request.comment_id,
                reply_text=reply_text,
                tone_used=settings.default_tone.value,
                language_used=settings.default_language,
            )
            auto_reply_id = db_reply.id
            await self.db.commit()
        except SQLAlchemyError as e:
            logger.error(f"Failed to store reply for comment {request.comment_id}: {e}", exc_info=True)
            await self.db.rollback()
            raise ReplyPersistenceError(request.comment_id, details=str(e)) from e
        return auto_reply_id

    async def _dispatch_like(self, request: GenerateReplyRequest):
        """Hands the like intent to the platform side; delivery is not confirmed here."""
        if self.like_dispatcher is None:
            return
        try:
            # Publishing talks to the broker synchronously, keep it off the event loop
            await asyncio.to_thread(self.like_dispatcher, request.comment_id, request.user_id, request.platform)
        except Exception as e:
            logger.warning(f"Like dispatch failed for comment {request.comment_id}: {e}", exc_info=True)
