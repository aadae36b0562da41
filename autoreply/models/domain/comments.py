# autoreply/models/domain/comments.py
from pydantic import BaseModel, ConfigDict, Field
from typing import Optional
from autoreply.models.domain.enums import LeadTemperature, PipelineAction, Platform, Sentiment

# Structured output of the classification service
class SentimentResult(BaseModel):
    model_config = ConfigDict(extra='ignore')

    sentiment: Sentiment
    score: float = Field(0.5, ge=0.0, le=1.0)

# Structured output of the lead detector
class LeadResult(BaseModel):
    model_config = ConfigDict(extra='ignore')

    is_lead: bool = False
    temperature: LeadTemperature = LeadTemperature.COLD

# Model for an inbound comment handed over by the ingestion collaborator
class GenerateReplyRequest(BaseModel):
    comment_id: str = Field(..., min_length=1, description="Identifier of the stored comment")
    user_id: str = Field(..., min_length=1, description="Owner of the comment and its settings")
    comment_text: str = Field(..., min_length=1, description="The raw text of the social media comment")
    platform: Platform = Field(..., description="Platform the comment came from")

class ReplyPayload(BaseModel):
    id: str
    text: str
    tone: str
    language: str
    sentiment: Sentiment
    is_sales_lead: bool
    lead_temperature: LeadTemperature

class PipelineResponse(BaseModel):
    success: bool = True
    action: PipelineAction
    reason: Optional[str] = None
    reply: Optional[ReplyPayload] = None

    def to_dict(self) -> dict:
        return self.model_dump(mode="json", exclude_none=True)
