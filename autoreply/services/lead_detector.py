# autoreply/services/lead_detector.py
from autoreply.core.config import logger
from autoreply.models.domain.comments import LeadResult
from autoreply.services.llm_client import ChatCompletionClient, Err, unwrap_or

SYSTEM_PROMPT = """Detect if this is a potential sales lead. Respond with ONLY valid JSON.
Format: {"is_lead": true/false, "temperature": "hot|warm|cold"}

hot = Asking to buy, ready to transact, urgent
warm = Interested, asking questions, considering
cold = Not interested, just chatting"""

DEFAULT_LEAD = LeadResult(is_lead=False)


class LeadDetector:
    def __init__(self, llm: ChatCompletionClient):
        self.llm = llm

    async def detect(self, text: str) -> LeadResult:
        """Flags purchase intent. Falls back to a cold non-lead on any failure."""
        result = await self.llm.complete_json(
            [
                {"role": "system", "content": SYSTEM_PROMPT},
                {"role": "user", "content": f'Is this a sales lead? "{text}"'},
            ],
            LeadResult,
            temperature=0.3,
            max_tokens=50,
        )
        if isinstance(result, Err):
            logger.error(f"Lead detection failed, using default: {result.reason}")
        return unwrap_or(result, DEFAULT_LEAD)
