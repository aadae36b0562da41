# autoreply/models/domain/profiles.py
from pydantic import BaseModel, ConfigDict, Field, field_validator
from typing import List, Optional
import datetime
from autoreply.models.domain.enums import Tone

class AutoReplySettingsRecord(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    user_id: str
    default_tone: Tone = Tone.POLITE
    default_language: str = "english"
    ignore_spam: bool = True
    ignore_hate_comments: bool = True
    auto_like_positive: bool = True
    reply_to_comments: bool = True
    reply_to_dms: bool = True
    catchphrases: Optional[List[str]] = None
    signature_emojis: Optional[List[str]] = None
    blacklisted_words: Optional[List[str]] = None
    intro_line: Optional[str] = None
    outro_line: Optional[str] = None
    updated_at: Optional[datetime.datetime] = None

class BrandVoiceRecord(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    user_id: str
    brand_name: str = "Creator"
    brand_values: List[str] = Field(default_factory=list)
    personality_traits: List[str] = Field(default_factory=list)
    updated_at: Optional[datetime.datetime] = None

# Partial update accepted by the settings endpoint; unset fields stay as they are
class AutoReplySettingsUpdate(BaseModel):
    default_tone: Optional[Tone] = None
    default_language: Optional[str] = Field(None, min_length=1)
    auto_like_positive: Optional[bool] = None
    ignore_spam: Optional[bool] = None
    ignore_hate_comments: Optional[bool] = None

    # Fields may be omitted, but every settings column is NOT NULL
    @field_validator("*")
    @classmethod
    def reject_null(cls, value):
        if value is None:
            raise ValueError("may be omitted but not null")
        return value

class BrandVoiceUpdate(BaseModel):
    brand_name: Optional[str] = Field(None, min_length=1)
    brand_values: Optional[List[str]] = None
    personality_traits: Optional[List[str]] = None
    # Voice details stored on the settings record
    catchphrases: Optional[List[str]] = None
    signature_emojis: Optional[List[str]] = None
    intro_line: Optional[str] = None
    outro_line: Optional[str] = None

    # Only the settings-side lines can be cleared with null
    @field_validator("brand_name", "brand_values", "personality_traits")
    @classmethod
    def reject_null(cls, value):
        if value is None:
            raise ValueError("may be omitted but not null")
        return value

    def brand_voice_fields(self) -> dict:
        return self.model_dump(include={"brand_name", "brand_values", "personality_traits"}, exclude_unset=True)

    def settings_fields(self) -> dict:
        return self.model_dump(include={"catchphrases", "signature_emojis", "intro_line", "outro_line"}, exclude_unset=True)

class ProfileCreate(BaseModel):
    user_id: str = Field(..., min_length=1)
    brand_name: Optional[str] = Field(None, description="Defaults to 'Creator' when omitted")
