# autoreply/models/domain/enums.py
from enum import Enum

class Sentiment(str, Enum):
    POSITIVE = "positive"
    NEGATIVE = "negative"
    NEUTRAL = "neutral"
    QUESTION = "question"
    SPAM = "spam"
    HATE = "hate"

class LeadTemperature(str, Enum):
    HOT = "hot"
    WARM = "warm"
    COLD = "cold"

class Tone(str, Enum):
    HYPE = "hype"
    FUNNY = "funny"
    FORMAL = "formal"
    POLITE = "polite"
    ANGRY = "angry"
    SAVAGE = "savage"
    ROASTING = "roasting"

class Platform(str, Enum):
    INSTAGRAM = "instagram"
    YOUTUBE = "youtube"
    FACEBOOK = "facebook"
    TIKTOK = "tiktok"
    TWITTER = "twitter"

# Lifecycle of a comment within one pipeline pass
class AutoReplyStatus(str, Enum):
    PENDING = "pending"
    REPLIED = "replied"
    IGNORED = "ignored"
    ESCALATED = "escalated"

# Delivery state of a generated reply
class ReplyStatus(str, Enum):
    PENDING = "pending"
    SENT = "sent"
    FAILED = "failed"

class CreatedBy(str, Enum):
    AI = "ai"
    HUMAN = "human"

class PipelineAction(str, Enum):
    IGNORED = "ignored"
    ESCALATED = "escalated"
    REPLIED = "replied"
