import json
import random
import time
from typing import Callable, List, Optional

from dailydare.core.service.bonus.gemini_client import GeminiClient
from dailydare.core.service.dare.models.dare import BonusDare, Difficulty, DIFFICULTY_ORDER
from dailydare.core.exceptions.base import BonusDareGenerationError
from dailydare.core.logger.logger import get_logger
from dailydare.infra.config.settings import settings

logger = get_logger(__name__)

# Overtime dares pay half the catalog rate
BONUS_POINTS = {
    Difficulty.EASY: 25,
    Difficulty.MEDIUM: 50,
    Difficulty.HARD: 75,
}


def extract_json_object(text: str) -> dict:
    """Parse the outermost {...} in a model reply, ignoring markdown fences around it"""
    start = text.find("{")
    end = text.rfind("}")
    if start != -1 and end != -1 and end > start:
        text = text[start:end + 1]
    try:
        data = json.loads(text)
    except json.JSONDecodeError as e:
        raise BonusDareGenerationError(f"AI reply is not valid JSON: {e}")
    if not isinstance(data, dict):
        raise BonusDareGenerationError("AI reply is not a JSON object")
    return data


class BonusDareService:
    """Generates uncapped Overtime dares after the daily set is done"""

    def __init__(
        self,
        client: Optional[GeminiClient] = None,
        rng: Optional[random.Random] = None,
        time_source: Callable[[], float] = time.time
    ):
        self.client = client or GeminiClient()
        self.rng = rng or random.Random()
        self.time_source = time_source
        self.id_prefix = settings.BONUS_DARE_PREFIX

    def build_prompt(self, difficulty: Difficulty, history: List[str]) -> str:
        exclusion = f"Do NOT generate these: {', '.join(history)}. " if history else ""
        return (
            f"Generate a fun, social, or physical dare with {difficulty.value} difficulty. "
            f"It must never be illegal, sexually explicit, dangerous, harassing or physically harmful. "
            f"{exclusion}"
            f'Return ONLY a JSON object: {{ "title": "...", "description": "...", "difficulty": "{difficulty.value}" }}. '
            f"Do not use Markdown."
        )

    async def generate(self, history: Optional[List[str]] = None) -> BonusDare:
        """
        Ask the model for one dare of a random tier.

        Args:
            history: Titles already generated this session, excluded from the prompt

        Raises:
            BonusDareGenerationError: When the model reply is unusable
        """
        history = [title for title in (history or []) if title]
        difficulty = self.rng.choice(DIFFICULTY_ORDER)

        text = await self.client.generate_text(self.build_prompt(difficulty, history))
        data = extract_json_object(text)

        title = str(data.get("title") or "").strip()
        description = str(data.get("description") or "").strip()
        if not title or not description:
            raise BonusDareGenerationError("AI reply is missing a title or description")

        # The requested tier wins over whatever the model echoed back
        dare = BonusDare(
            dare_id=f"{self.id_prefix}{int(self.time_source() * 1000)}",
            title=title,
            description=description,
            difficulty=difficulty,
            points=BONUS_POINTS[difficulty],
            model_name=self.client.model,
        )

        logger.info(
            "Generated Overtime dare",
            extra={"dare_id": dare.dare_id, "difficulty": difficulty.value, "history_size": len(history)}
        )
        return dare
