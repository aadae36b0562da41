# autoreply/services/reply_generator.py
from typing import Optional
from pydantic import ValidationError
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from autoreply.core.config import logger
from autoreply.db.crud import profiles as crud_profiles
from autoreply.models.domain.enums import Tone
from autoreply.models.domain.profiles import AutoReplySettingsRecord, BrandVoiceRecord
from autoreply.services.llm_client import ChatCompletionClient, Err

FALLBACK_REPLY = "Thanks for your comment! 🙌"

# One illustrative line per tone, always listed so the model can contrast them
TONE_EXAMPLES = {
    Tone.HYPE: "YESS! This is exactly what I needed! 🔥",
    Tone.FUNNY: "Haha, you just made my day 😂",
    Tone.FORMAL: "Thank you for your feedback. We appreciate your input.",
    Tone.POLITE: "Thanks so much for the kind words! Really appreciate it 🙏",
    Tone.ANGRY: "Seriously? That's not cool at all.",
    Tone.SAVAGE: "Okay, that's fair. You win this round 😏",
    Tone.ROASTING: "Well, well, well... you tried 😅",
}

def _value(option, default: str) -> str:
    return getattr(option, "value", option) or default

def build_system_prompt(
    brand_voice: Optional[BrandVoiceRecord],
    settings: Optional[AutoReplySettingsRecord],
    tone: str,
    language: str,
) -> str:
    """Assembles the style instructions for one reply."""
    brand_voice = brand_voice or BrandVoiceRecord(user_id="")
    tone = _value(tone, Tone.POLITE.value)
    language = language or "english"

    tone_examples = "\n".join(f'- {t.value.capitalize()}: "{example}"' for t, example in TONE_EXAMPLES.items())

    special = []
    if settings is not None:
        if settings.catchphrases:
            special.append(f"- Must include: {', '.join(settings.catchphrases)}")
        if settings.signature_emojis:
            special.append(f"- Must use these emojis: {', '.join(settings.signature_emojis)}")
        if settings.intro_line:
            special.append(f"- Start with: {settings.intro_line}")
        if settings.outro_line:
            special.append(f"- End with: {settings.outro_line}")

    rules = [
        "- Keep reply SHORT (1-3 sentences max)",
        "- Sound HUMAN, not robotic",
        "- Match the TONE perfectly",
        f"- Match the LANGUAGE ({language})",
        "- Never repeat generic responses",
        "- Avoid all policy violations",
    ]
    if settings is not None and settings.blacklisted_words:
        rules.append(f"- NEVER use these words: {', '.join(settings.blacklisted_words)}")

    sections = [
        f"You are an AI assistant generating replies for {language}.",
        "BRAND VOICE:\n"
        f"{brand_voice.brand_name or 'Creator'}\n"
        f"Values: {', '.join(brand_voice.brand_values) or 'none specified'}\n"
        f"Personality: {', '.join(brand_voice.personality_traits) or 'none specified'}",
        f"TONE TO USE: {tone}\nTone Examples:\n{tone_examples}",
    ]
    if special:
        sections.append("SPECIAL INSTRUCTIONS:\n" + "\n".join(special))
    sections.append("RULES:\n" + "\n".join(rules))
    return "\n\n".join(sections)


class ReplyGenerator:
    """
    Writes a short reply in the user's brand voice.

    Always returns non-empty text; any failure yields ``FALLBACK_REPLY``.
    """

    def __init__(self, llm: ChatCompletionClient, db: AsyncSession, max_tokens: int = 500):
        self.llm = llm
        self.db = db
        self.max_tokens = max_tokens

    async def _load_profile(self, user_id: str):
        db_brand_voice = await crud_profiles.get_brand_voice(self.db, user_id)
        db_settings = await crud_profiles.get_settings(self.db, user_id)
        brand_voice = BrandVoiceRecord.model_validate(db_brand_voice) if db_brand_voice else None
        settings = AutoReplySettingsRecord.model_validate(db_settings) if db_settings else None
        return brand_voice, settings

    async def generate(self, text: str, user_id: str, tone: str, language: str, sentiment: str) -> str:
        try:
            brand_voice, settings = await self._load_profile(user_id)
        except SQLAlchemyError as e:
            logger.error(f"Could not load brand voice for user {user_id}: {e}", exc_info=True)
            await self.db.rollback()
            return FALLBACK_REPLY
        except ValidationError as e:
            logger.error(f"Stored profile for user {user_id} is malformed: {e}")
            return FALLBACK_REPLY

        tone = _value(tone, Tone.POLITE.value)
        language = language or "english"
        sentiment = _value(sentiment, "neutral")
        result = await self.llm.complete(
            [
                {"role": "system", "content": build_system_prompt(brand_voice, settings, tone, language)},
                {"role": "user", "content": f'Generate a {tone} reply in {language} to this {sentiment} comment: "{text}"'},
            ],
            temperature=0.7,
            max_tokens=self.max_tokens,
            frequency_penalty=0.5,  # Reduce repetition
        )
        if isinstance(result, Err):
            logger.error(f"Reply generation failed, using fallback: {result.reason}")
            return FALLBACK_REPLY
        return result.value
