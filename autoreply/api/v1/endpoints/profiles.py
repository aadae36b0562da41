# autoreply/api/v1/endpoints/profiles.py
from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from autoreply.core.config import logger
from autoreply.core.exceptions import ProfileExistsError, ProfileNotFoundError
from autoreply.db.crud import profiles as crud_profiles
from autoreply.db.database import get_db_session
from autoreply.models.domain.profiles import (
    AutoReplySettingsRecord,
    AutoReplySettingsUpdate,
    BrandVoiceRecord,
    BrandVoiceUpdate,
    ProfileCreate,
)

router = APIRouter()

# --- Signup-time defaults ---
@router.post("/profiles", status_code=status.HTTP_201_CREATED)
async def create_profile(
    profile_in: ProfileCreate,
    db: AsyncSession = Depends(get_db_session),
):
    """Creates the default auto-reply settings and brand voice for a new user."""
    if await crud_profiles.get_settings(db, profile_in.user_id) is not None:
        raise ProfileExistsError(profile_in.user_id)
    db_settings, db_brand_voice = await crud_profiles.create_default_profile(
        db, profile_in.user_id, brand_name=profile_in.brand_name
    )
    await db.commit()
    logger.info(f"Default profile created for user {profile_in.user_id}")
    return {
        "success": True,
        "settings": AutoReplySettingsRecord.model_validate(db_settings),
        "brand_voice": BrandVoiceRecord.model_validate(db_brand_voice),
    }

@router.put("/settings/{user_id}")
async def update_auto_reply_settings(
    user_id: str,
    settings_in: AutoReplySettingsUpdate,
    db: AsyncSession = Depends(get_db_session),
):
    """Updates tone, language and the spam/hate/like policy flags."""
    matched = await crud_profiles.update_settings(db, user_id, **settings_in.model_dump(exclude_unset=True))
    if not matched:
        raise ProfileNotFoundError(user_id)
    await db.commit()
    db_settings = await crud_profiles.get_settings(db, user_id)
    await db.refresh(db_settings)
    return {"success": True, "settings": AutoReplySettingsRecord.model_validate(db_settings)}

@router.put("/brand-voice/{user_id}")
async def update_brand_voice(
    user_id: str,
    voice_in: BrandVoiceUpdate,
    db: AsyncSession = Depends(get_db_session),
):
    """
    Updates the brand identity. Catchphrases, emojis and intro/outro lines are
    part of the same form but live on the settings record.
    """
    matched = await crud_profiles.update_brand_voice(db, user_id, **voice_in.brand_voice_fields())
    if not matched:
        raise ProfileNotFoundError(user_id)
    settings_fields = voice_in.settings_fields()
    if settings_fields:
        await crud_profiles.update_settings(db, user_id, **settings_fields)
    await db.commit()
    db_brand_voice = await crud_profiles.get_brand_voice(db, user_id)
    await db.refresh(db_brand_voice)
    return {"success": True, "brand_voice": BrandVoiceRecord.model_validate(db_brand_voice)}
