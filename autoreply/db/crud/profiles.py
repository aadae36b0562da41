# autoreply/db/crud/profiles.py
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select, update
from autoreply.models.db.profiles import AutoReplySettingsDB, BrandVoiceDB
from autoreply.models.domain.enums import Tone
from autoreply.core.config import logger
import datetime

async def get_settings(db: AsyncSession, user_id: str) -> AutoReplySettingsDB | None:
    """Retrieves the auto-reply settings of a user."""
    result = await db.execute(select(AutoReplySettingsDB).filter(AutoReplySettingsDB.user_id == user_id))
    return result.scalars().first()

async def get_brand_voice(db: AsyncSession, user_id: str) -> BrandVoiceDB | None:
    """Retrieves the brand voice of a user."""
    result = await db.execute(select(BrandVoiceDB).filter(BrandVoiceDB.user_id == user_id))
    return result.scalars().first()

async def create_default_profile(db: AsyncSession, user_id: str, brand_name: str | None = None) -> tuple[AutoReplySettingsDB, BrandVoiceDB]:
    """
    Creates the signup-time defaults: polite english replies, spam ignored,
    positive comments liked, and an empty brand voice.

    Commit is handled by the caller.
    """
    db_settings = AutoReplySettingsDB(
        user_id=user_id,
        default_tone=Tone.POLITE,
        default_language="english",
        auto_like_positive=True,
        ignore_spam=True,
        ignore_hate_comments=True,
        reply_to_comments=True,
        reply_to_dms=True,
    )
    db_brand_voice = BrandVoiceDB(
        user_id=user_id,
        brand_name=brand_name or "Creator",
        brand_values=[],
        personality_traits=[],
    )
    db.add_all([db_settings, db_brand_voice])
    logger.info(f"Adding default profile for user {user_id}")
    return db_settings, db_brand_voice

async def update_settings(db: AsyncSession, user_id: str, **fields) -> int:
    """Partial update of a user's settings. Returns the number of rows matched."""
    if not fields:
        return 1 if await get_settings(db, user_id) is not None else 0
    logger.info(f"Updating settings for user {user_id}: {sorted(fields)}")
    stmt = (
        update(AutoReplySettingsDB)
        .where(AutoReplySettingsDB.user_id == user_id)
        .values(**fields, updated_at=datetime.datetime.now(datetime.timezone.utc))
    )
    result = await db.execute(stmt)
    return result.rowcount

async def update_brand_voice(db: AsyncSession, user_id: str, **fields) -> int:
    """Partial update of a user's brand voice. Returns the number of rows matched."""
    if not fields:
        return 1 if await get_brand_voice(db, user_id) is not None else 0
    logger.info(f"Updating brand voice for user {user_id}: {sorted(fields)}")
    stmt = (
        update(BrandVoiceDB)
        .where(BrandVoiceDB.user_id == user_id)
        .values(**fields, updated_at=datetime.datetime.now(datetime.timezone.utc))
    )
    result = await db.execute(stmt)
    return result.rowcount
