# autoreply/api/deps.py
from fastapi import Depends, Request
from sqlalchemy.ext.asyncio import AsyncSession

from autoreply.core.config import settings
from autoreply.db.database import get_db_session
from autoreply.services.decision_pipeline import DecisionPipeline, LikeDispatcher
from autoreply.services.llm_client import ChatCompletionClient
from autoreply.worker.tasks import send_like_intent

def get_llm_client(request: Request) -> ChatCompletionClient:
    # Built once in the application lifespan
    return request.app.state.llm_client

def get_like_dispatcher() -> LikeDispatcher:
    return send_like_intent

async def get_pipeline(
    db: AsyncSession = Depends(get_db_session),
    llm: ChatCompletionClient = Depends(get_llm_client),
    like_dispatcher: LikeDispatcher = Depends(get_like_dispatcher),
) -> DecisionPipeline:
    return DecisionPipeline.build(
        db,
        llm,
        max_tokens=settings.MAX_TOKENS_PER_REQUEST,
        like_dispatcher=like_dispatcher,
    )
