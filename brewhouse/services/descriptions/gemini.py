"""
Gemini Description Service Implementation

Production implementation calling the Gemini ``generateContent`` REST
endpoint over httpx. Used when ENV_MODE=production or ENV_MODE=staging.

Requirements:
    - GEMINI_API_KEY must be set in environment

Version: 1.0.0
"""

import logging
from typing import Any, Optional

import httpx

from brewhouse.core.config import get_settings
from brewhouse.services.descriptions.base import BaseDescriptionService

logger = logging.getLogger(__name__)


class GeminiDescriptionService(BaseDescriptionService):
    """
    Production description service backed by Google Gemini.

    Configuration:
        Requires GEMINI_API_KEY. GEMINI_MODEL and GEMINI_BASE_URL select
        the model and endpoint.

    Example:
        >>> service = GeminiDescriptionService()
        >>> await service.describe("Flat White", "Hot Coffee")
    """

    GENERATION_CONFIG = {
        "temperature": 0.7,
        "topP": 0.8,
        "maxOutputTokens": 50,
    }

    def __init__(
        self,
        api_key: Optional[str] = None,
        model: Optional[str] = None,
        base_url: Optional[str] = None,
        timeout: Optional[float] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        """
        Initialize from settings, with optional overrides.

        Raises:
            ValueError: If no API key is configured
        """
        settings = get_settings()

        self._api_key = api_key or settings.gemini_api_key
        if not self._api_key:
            raise ValueError(
                "GEMINI_API_KEY is required for production mode. "
                "Set it in your .env file or environment variables."
            )

        self._model = model or settings.gemini_model
        self._base_url = (base_url or settings.gemini_base_url).rstrip("/")
        self._timeout = timeout if timeout is not None else settings.description_timeout_seconds
        self._transport = transport

        logger.info(f"GeminiDescriptionService initialized (model={self._model})")

    @property
    def provider_name(self) -> str:
        """Return the provider name."""
        return "gemini"

    def _client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(
            base_url=self._base_url,
            timeout=self._timeout,
            headers={"x-goog-api-key": self._api_key},
            transport=self._transport,
        )

    @staticmethod
    def _extract_text(payload: dict[str, Any]) -> str:
        """Pull the first candidate's text out of a generateContent response."""
        candidates = payload.get("candidates") or []
        if not candidates:
            return ""
        parts = (candidates[0].get("content") or {}).get("parts") or []
        return "".join(part.get("text", "") for part in parts)

    async def _request_description(self, item_name: str, category: str) -> str:
        body = {
            "contents": [{"parts": [{"text": self.build_prompt(item_name, category)}]}],
            "generationConfig": self.GENERATION_CONFIG,
        }

        logger.debug(f"Gemini: requesting description for {item_name!r}")

        async with self._client() as client:
            response = await client.post(f"/models/{self._model}:generateContent", json=body)
            response.raise_for_status()
            return self._extract_text(response.json())

    async def health_check(self) -> bool:
        """Check that the configured model is reachable."""
        try:
            async with self._client() as client:
                response = await client.get(f"/models/{self._model}")
                return response.status_code == 200
        except httpx.HTTPError as e:
            logger.error(f"Gemini health check failed: {e}")
            return False
