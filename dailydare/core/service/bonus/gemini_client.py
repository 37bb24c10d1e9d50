"""
Gemini REST client used for Overtime dare generation
"""

import httpx
from datetime import datetime
from typing import Any, Dict, Optional

from dailydare.core.http_client import create_temp_client
from dailydare.core.exceptions.base import BonusDareGenerationError
from dailydare.core.logger.logger import get_logger
from dailydare.infra.config.settings import get_settings

logger = get_logger(__name__)
settings = get_settings()


class GeminiClient:
    """Thin wrapper around the generateContent endpoint"""

    def __init__(
        self,
        api_key: Optional[str] = None,
        model: Optional[str] = None,
        base_url: Optional[str] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None
    ):
        self.api_key = api_key if api_key is not None else settings.GEMINI_API_KEY
        self.model = model or settings.GEMINI_MODEL
        self.base_url = (base_url or settings.GEMINI_BASE_URL).rstrip("/")
        self.transport = transport

    def _build_url(self) -> str:
        return f"{self.base_url}/{self.model}:generateContent"

    def _build_request_body(self, prompt: str) -> Dict[str, Any]:
        return {"contents": [{"parts": [{"text": prompt}]}]}

    @staticmethod
    def _extract_text(payload: Dict[str, Any]) -> Optional[str]:
        try:
            return payload["candidates"][0]["content"]["parts"][0]["text"]
        except (KeyError, IndexError, TypeError):
            return None

    async def generate_text(self, prompt: str) -> str:
        """
        Send one prompt and return the first candidate's text

        Raises:
            BonusDareGenerationError: Missing key, transport failure, API error
                or an empty reply
        """
        if not self.api_key:
            raise BonusDareGenerationError("Gemini API key is not configured")

        client_kwargs = {"transport": self.transport} if self.transport else {}
        async with create_temp_client("gemini", **client_kwargs) as client:
            try:
                start_time = datetime.utcnow()
                response = await client.post(
                    self._build_url(),
                    params={"key": self.api_key},
                    json=self._build_request_body(prompt),
                    headers={"Content-Type": "application/json"}
                )
                duration = (datetime.utcnow() - start_time).total_seconds()

                logger.info(
                    "Gemini response received",
                    extra={"model": self.model, "status_code": response.status_code, "duration_seconds": duration}
                )

            except httpx.TimeoutException:
                logger.error("Gemini request timeout", extra={"model": self.model})
                raise BonusDareGenerationError("The AI took too long to respond")

            except httpx.RequestError as e:
                logger.error("Gemini connection error", extra={"model": self.model, "error": str(e)})
                raise BonusDareGenerationError(f"Failed to reach the AI service: {e}")

        if response.status_code != 200:
            logger.error(
                "Gemini returned error status",
                extra={"status_code": response.status_code, "response_text": response.text[:500]}
            )
            raise BonusDareGenerationError(f"AI service error: {response.status_code}")

        try:
            payload = response.json()
        except ValueError:
            raise BonusDareGenerationError("AI service returned a non-JSON body")

        error = payload.get("error") if isinstance(payload, dict) else None
        if error:
            message = error.get("message") if isinstance(error, dict) else str(error)
            raise BonusDareGenerationError(message or "Request failed")

        text = self._extract_text(payload)
        if not text:
            raise BonusDareGenerationError("Empty response from AI")
        return text
