# autoreply/models/db/profiles.py
import datetime
from sqlalchemy import Column, Integer, String, DateTime, Boolean, JSON, Enum as SQLEnum
from autoreply.db.database import Base
from autoreply.models.domain.enums import Tone

def _enum_values(enum_cls):
    # Store enum values ("pending"), not member names ("PENDING")
    return [member.value for member in enum_cls]

def _utcnow():
    return datetime.datetime.now(datetime.timezone.utc)

class AutoReplySettingsDB(Base):
    __tablename__ = "auto_reply_settings"

    id = Column(Integer, primary_key=True, autoincrement=True)
    # Exactly one settings record per user
    user_id = Column(String(64), nullable=False, unique=True)

    default_tone = Column(SQLEnum(Tone, values_callable=_enum_values), default=Tone.POLITE, nullable=False)
    default_language = Column(String(32), default="english", nullable=False)

    ignore_spam = Column(Boolean, default=True, nullable=False)
    ignore_hate_comments = Column(Boolean, default=True, nullable=False)
    auto_like_positive = Column(Boolean, default=True, nullable=False)
    reply_to_comments = Column(Boolean, default=True, nullable=False)
    reply_to_dms = Column(Boolean, default=True, nullable=False)

    # Lists are stored as JSON for portability with SQLite
    catchphrases = Column(JSON, nullable=True)
    signature_emojis = Column(JSON, nullable=True)
    blacklisted_words = Column(JSON, nullable=True)
    intro_line = Column(String(255), nullable=True)
    outro_line = Column(String(255), nullable=True)

    created_at = Column(DateTime(timezone=True), default=_utcnow)
    updated_at = Column(DateTime(timezone=True), default=_utcnow, onupdate=_utcnow)

class BrandVoiceDB(Base):
    __tablename__ = "brand_voice"

    id = Column(Integer, primary_key=True, autoincrement=True)
    user_id = Column(String(64), nullable=False, unique=True)

    brand_name = Column(String(255), default="Creator", nullable=False)
    brand_values = Column(JSON, default=list, nullable=False)
    personality_traits = Column(JSON, default=list, nullable=False)

    created_at = Column(DateTime(timezone=True), default=_utcnow)
    updated_at = Column(DateTime(timezone=True), default=_utcnow, onupdate=_utcnow)
