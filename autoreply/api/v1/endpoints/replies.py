# autoreply/api/v1/endpoints/replies.py
from fastapi import APIRouter, Depends

from autoreply.api.deps import get_pipeline
from autoreply.core.config import logger
from autoreply.core.exceptions import AppException
from autoreply.models.domain.comments import GenerateReplyRequest, PipelineResponse
from autoreply.services.decision_pipeline import DecisionPipeline

router = APIRouter()

# --- API Endpoint to Analyze a Comment and Generate a Reply ---
@router.post("/generate", response_model=PipelineResponse, response_model_exclude_none=True)
async def generate_reply(
    comment_in: GenerateReplyRequest,
    pipeline: DecisionPipeline = Depends(get_pipeline),
):
    """
    Classifies the comment, applies the user's spam/hate policy, and when it
    gets through, stores a brand-voiced reply and flags sales leads.
    """
    logger.info(f"Received comment {comment_in.comment_id}: text='{comment_in.comment_text[:50]}...'")
    try:
        return await pipeline.run(comment_in)
    except AppException:
        raise
    except Exception as e:
        logger.error(f"Reply generation error for comment {comment_in.comment_id}: {e}", exc_info=True)
        raise AppException("Failed to generate reply", status_code=500, details=str(e)) from e
