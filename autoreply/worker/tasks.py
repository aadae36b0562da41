# autoreply/worker/tasks.py
"""
Celery tasks for comment processing.

Main task: autoreply.process_comment - runs the decision pipeline in a
synchronous worker context using asyncio.run().
"""
import asyncio
from celery import shared_task
from pydantic import ValidationError
from sqlalchemy.ext.asyncio import create_async_engine, async_sessionmaker

from autoreply.core.config import settings, logger
from autoreply.core.exceptions import AppException
from autoreply.models.domain.comments import GenerateReplyRequest
from autoreply.models.domain.enums import Platform
from autoreply.services.decision_pipeline import DecisionPipeline
from autoreply.services.llm_client import ChatCompletionClient
from autoreply.worker.celery_app import celery_app

LIKE_TASK_NAME = "autoreply.like_comment"

def send_like_intent(comment_id: str, user_id: str, platform: Platform):
    """
    Publishes a like intent for the platform worker.

    The platform worker lives outside this service; it performs the like and
    sets ``like_confirmed_at`` on the comment.
    """
    celery_app.send_task(LIKE_TASK_NAME, args=[comment_id, user_id, platform.value])
    logger.info(f"Like intent published for comment {comment_id}")

async def _process_comment_async(request: GenerateReplyRequest) -> dict:
    """Runs the pipeline with a fresh engine bound to this event loop."""
    engine = create_async_engine(settings.DATABASE_URL, echo=False)
    session_factory = async_sessionmaker(engine, expire_on_commit=False)
    llm = ChatCompletionClient.from_settings(settings)
    try:
        async with session_factory() as db:
            pipeline = DecisionPipeline.build(
                db,
                llm,
                max_tokens=settings.MAX_TOKENS_PER_REQUEST,
                like_dispatcher=send_like_intent,
            )
            response = await pipeline.run(request)
            return response.to_dict()
    finally:
        await llm.aclose()
        await engine.dispose()

@shared_task(name="autoreply.process_comment")
def process_comment_task(comment_id: str, user_id: str, comment_text: str, platform: str):
    """
    Celery task to run the decision pipeline for one comment.

    The pipeline itself is never retried; hard failures are reported in the result.
    """
    logger.info(f"Task started for comment_id: {comment_id}")
    try:
        request = GenerateReplyRequest(
            comment_id=comment_id,
            user_id=user_id,
            comment_text=comment_text,
            platform=platform,
        )
    except ValidationError as e:
        logger.error(f"Rejected payload for comment {comment_id}: {e}")
        return {"status": "Failed", "comment_id": comment_id, "error": "Invalid comment payload"}

    try:
        return asyncio.run(_process_comment_async(request))
    except AppException as e:
        logger.error(f"Task failed for comment_id {comment_id}: {e.message} ({e.details})")
        return {"status": "Failed", "comment_id": comment_id, "error": e.message}
    except Exception as e:
        logger.critical(f"Async execution wrapper failed for task {comment_id}: {e}", exc_info=True)
        return {"status": "Failed", "comment_id": comment_id, "error": "Async execution wrapper error"}
