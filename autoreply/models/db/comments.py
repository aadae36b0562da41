# autoreply/models/db/comments.py
import uuid
import datetime
from sqlalchemy import Column, String, Float, DateTime, Text, Boolean, ForeignKey, Enum as SQLEnum
from autoreply.db.database import Base
from autoreply.models.domain.enums import AutoReplyStatus, CreatedBy, Platform, ReplyStatus

def _enum_values(enum_cls):
    # Store enum values ("pending"), not member names ("PENDING")
    return [member.value for member in enum_cls]

def _utcnow():
    return datetime.datetime.now(datetime.timezone.utc)

def _new_id():
    return str(uuid.uuid4())

class CommentDB(Base):
    __tablename__ = "comments"

    # Opaque identifier assigned by the ingestion side
    id = Column(String(64), primary_key=True, default=_new_id)
    user_id = Column(String(64), nullable=False, index=True)
    platform = Column(SQLEnum(Platform, values_callable=_enum_values), nullable=False)
    comment_text = Column(Text, nullable=False)

    # Holds either a plain category or a "<category>_lead_<temperature>" tag
    sentiment = Column(String(32), nullable=True)
    sentiment_score = Column(Float, nullable=True)

    # Like intent recorded by the pipeline; confirmation belongs to the delivery worker
    is_liked = Column(Boolean, default=False, nullable=False)
    like_confirmed_at = Column(DateTime(timezone=True), nullable=True)

    auto_reply_status = Column(SQLEnum(AutoReplyStatus, values_callable=_enum_values), default=AutoReplyStatus.PENDING, nullable=False)

    created_at = Column(DateTime(timezone=True), default=_utcnow)
    updated_at = Column(DateTime(timezone=True), default=_utcnow, onupdate=_utcnow)

class AutoReplyDB(Base):
    __tablename__ = "auto_replies"

    id = Column(String(64), primary_key=True, default=_new_id)
    user_id = Column(String(64), nullable=False, index=True)
    # Unique: one AI reply per comment even when two runs race on the same comment
    comment_id = Column(String(64), ForeignKey("comments.id"), nullable=False, unique=True)
    reply_text = Column(Text, nullable=False)
    tone_used = Column(String(32), nullable=False)
    language_used = Column(String(32), nullable=False)
    reply_status = Column(SQLEnum(ReplyStatus, values_callable=_enum_values), default=ReplyStatus.PENDING, nullable=False)
    created_by = Column(SQLEnum(CreatedBy, values_callable=_enum_values), default=CreatedBy.AI, nullable=False)

    created_at = Column(DateTime(timezone=True), default=_utcnow)
