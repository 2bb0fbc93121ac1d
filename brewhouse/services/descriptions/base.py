"""
Description Service Abstract Base Class

Defines the interface contract for the menu-description generator.
Both MockDescriptionService and GeminiDescriptionService implement
``_request_description``; the shared ``generate_description`` wrapper
turns every failure into a fixed fallback string, so callers never see
an exception from this service.

Design Pattern: Strategy Pattern + Template Method
    - Runtime switching between the mock and the Gemini API
    - Failure handling lives in one place

Version: 1.0.0
"""

import logging
import time
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Optional

logger = logging.getLogger(__name__)

FALLBACK_DESCRIPTION = "Crafted with the finest ingredients and passion for quality."
EMPTY_RESPONSE_DESCRIPTION = "A delicious addition to our premium menu selection."

PROMPT_TEMPLATE = (
    'Generate a short, enticing, and sophisticated menu description (max 20 words) '
    'for a "{item_name}" in the "{category}" category of a premium coffee shop. '
    'Make it sound delicious.'
)


@dataclass
class DescriptionResult:
    """
    Standardized result from description generation.

    Attributes:
        text: The description to show (always set)
        success: Whether the provider produced the text
        fallback_used: Whether ``text`` is one of the canned fallbacks
        error_message: Why the provider failed, if it did
        response_time_ms: Time taken by the provider
    """
    text: str
    success: bool = True
    fallback_used: bool = False
    error_message: Optional[str] = None
    response_time_ms: float = 0.0

    def to_dict(self) -> dict:
        """Convert to dictionary for JSON serialization."""
        return {
            "text": self.text,
            "success": self.success,
            "fallback_used": self.fallback_used,
            "error_message": self.error_message,
            "response_time_ms": self.response_time_ms,
        }


class BaseDescriptionService(ABC):
    """
    Abstract base class for description generators.

    Example:
        >>> service = get_description_service()
        >>> result = await service.generate_description("Flat White", "Hot Coffee")
        >>> print(result.text)
    """

    @property
    @abstractmethod
    def provider_name(self) -> str:
        """
        Return the name of the text-generation provider.

        Returns:
            str: Provider name (e.g., "mock", "gemini")
        """
        pass

    @abstractmethod
    async def _request_description(self, item_name: str, category: str) -> str:
        """
        Ask the provider for a description.

        May raise any exception; may return an empty string.
        """
        pass

    @abstractmethod
    async def health_check(self) -> bool:
        """
        Verify the provider is configured and reachable.

        Returns:
            bool: True if the service is operational
        """
        pass

    def build_prompt(self, item_name: str, category: str) -> str:
        return PROMPT_TEMPLATE.format(item_name=item_name, category=category)

    async def generate_description(self, item_name: str, category: str) -> DescriptionResult:
        """
        Generate a menu description, absorbing every provider failure.

        Args:
            item_name: Menu item title
            category: Menu category name

        Returns:
            DescriptionResult: Never raises; on failure ``text`` is the
            fallback description
        """
        start = time.perf_counter()
        try:
            text = (await self._request_description(item_name, category) or "").strip()
        except Exception as e:
            elapsed = (time.perf_counter() - start) * 1000
            logger.error(f"{self.provider_name}: description failed for {item_name!r}: {e}")
            return DescriptionResult(
                text=FALLBACK_DESCRIPTION,
                success=False,
                fallback_used=True,
                error_message=str(e),
                response_time_ms=elapsed,
            )

        elapsed = (time.perf_counter() - start) * 1000
        if not text:
            logger.warning(f"{self.provider_name}: empty description for {item_name!r}")
            return DescriptionResult(
                text=EMPTY_RESPONSE_DESCRIPTION,
                fallback_used=True,
                response_time_ms=elapsed,
            )

        return DescriptionResult(text=text, response_time_ms=elapsed)

    async def describe(self, item_name: str, category: str) -> str:
        """Shortcut returning only the description text."""
        result = await self.generate_description(item_name, category)
        return result.text
