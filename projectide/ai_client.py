"""
Gemini AI Client

Sends staging prompts to the Gemini generateContent endpoint.
The API key is an opaque string supplied by the user or the environment.
"""

import logging
from typing import Any, Dict, List, Optional

import httpx

from .config import GEMINI_BASE_URL, GEMINI_MODEL, GEMINI_TIMEOUT
from .models import AIProfile, ImageAttachment

logger = logging.getLogger(__name__)


class AIClient:
    """
    Client for the Gemini REST API.

    One request/response exchange per call, no retries.
    """

    def __init__(
        self,
        api_key: Optional[str] = None,
        base_url: str = GEMINI_BASE_URL,
        model: str = GEMINI_MODEL,
        timeout: float = GEMINI_TIMEOUT,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        """
        Initialize the Gemini client.

        Args:
            api_key: Gemini API key; can be set later with set_api_key()
            base_url: API root, e.g. 'https://generativelanguage.googleapis.com/v1beta'
            model: Model name used for generateContent
            timeout: Request timeout in seconds
            transport: Optional httpx transport (used by tests)
        """
        self.api_key = api_key or None
        self.base_url = base_url.rstrip("/")
        self.model = model
        self.timeout = timeout
        self.client = httpx.AsyncClient(timeout=timeout, transport=transport)

        logger.info(f"Gemini client initialized (model: {model})")
        if not self.api_key:
            logger.warning("No Gemini API key configured yet")

    def set_api_key(self, api_key: Optional[str]) -> None:
        self.api_key = api_key or None
        if self.api_key:
            logger.info("Gemini API key set")
        else:
            logger.info("Gemini API key cleared")

    def has_api_key(self) -> bool:
        return bool(self.api_key)

    async def generate(
        self,
        prompt: str,
        profile: AIProfile,
        image: Optional[ImageAttachment] = None,
    ) -> str:
        """
        Send a prompt to Gemini.

        Args:
            prompt: Full prompt text, staging context included
            profile: AI profile providing the system instruction and tools
            image: Optional image attachment

        Returns:
            Reply text

        Raises:
            ValueError: If no API key is set
            RuntimeError: If the request fails or the reply has no text
        """
        if not self.api_key:
            raise ValueError(
                'API Key not set. Please go to the "Gemini API" page to set your key.'
            )

        payload = self._build_payload(prompt, profile, image)
        url = f"{self.base_url}/models/{self.model}:generateContent"

        try:
            response = await self.client.post(
                url,
                json=payload,
                headers={"x-goog-api-key": self.api_key},
            )
            response.raise_for_status()
            data = response.json()
        except httpx.HTTPError as e:
            logger.error(f"Gemini request failed: {e}")
            raise RuntimeError(f"Failed to communicate with Gemini: {e}")
        except ValueError as e:
            raise RuntimeError(f"Gemini returned an invalid response: {e}")

        text = self._extract_text(data)
        if not text:
            raise RuntimeError("Gemini returned an empty response")
        return text

    def _build_payload(
        self,
        prompt: str,
        profile: AIProfile,
        image: Optional[ImageAttachment],
    ) -> Dict[str, Any]:
        parts: List[Dict[str, Any]] = [{"text": prompt}]

        if image:
            # Accept both raw base64 and data URLs
            data = image.data.split(",", 1)[1] if "," in image.data else image.data
            if data:
                parts.append({"inlineData": {"mimeType": image.mime_type, "data": data}})

        payload: Dict[str, Any] = {
            "contents": [{"role": "user", "parts": parts}],
            "systemInstruction": {"parts": [{"text": profile.system_instruction}]},
        }

        # Gemini accepts one built-in tool per request here; search wins
        if profile.google_search_enabled:
            payload["tools"] = [{"googleSearch": {}}]
        elif profile.code_interpreter_enabled:
            payload["tools"] = [{"codeExecution": {}}]

        return payload

    @staticmethod
    def _extract_text(data: Dict[str, Any]) -> str:
        candidates = data.get("candidates") or []
        if not candidates:
            return ""
        parts = (candidates[0].get("content") or {}).get("parts") or []
        return "".join(part.get("text", "") for part in parts)

    async def close(self):
        if self.client:
            await self.client.aclose()
