"""
Description Service Factory

Returns the Mock or Gemini description generator based on ENV_MODE.

Usage:
    from brewhouse.services.descriptions import get_description_service

    service = get_description_service()
    text = await service.describe("Flat White", "Hot Coffee")

Environment Switching:
    - ENV_MODE=development → MockDescriptionService (no API calls)
    - ENV_MODE=staging/production → GeminiDescriptionService

Version: 1.0.0
"""

import logging
from functools import lru_cache

from brewhouse.core.config import get_settings
from brewhouse.services.descriptions.base import (
    BaseDescriptionService,
    DescriptionResult,
    EMPTY_RESPONSE_DESCRIPTION,
    FALLBACK_DESCRIPTION,
)
from brewhouse.services.descriptions.mock import MockDescriptionService
from brewhouse.services.descriptions.gemini import GeminiDescriptionService

logger = logging.getLogger(__name__)


@lru_cache()
def get_description_service() -> BaseDescriptionService:
    """
    Get the configured description service.

    Raises:
        ValueError: If real services are selected but GEMINI_API_KEY is missing
    """
    settings = get_settings()

    if settings.is_development:
        logger.info("Description Service: Using MockDescriptionService (development mode)")
        return MockDescriptionService(failure_rate=0.05)

    logger.info(
        f"Description Service: Using GeminiDescriptionService "
        f"({settings.env_mode.value} mode)"
    )
    return GeminiDescriptionService()


def reset_description_service() -> None:
    """Clear the cached service instance."""
    get_description_service.cache_clear()
    logger.debug("Description service cache cleared")


__all__ = [
    "get_description_service",
    "reset_description_service",
    "BaseDescriptionService",
    "DescriptionResult",
    "MockDescriptionService",
    "GeminiDescriptionService",
    "FALLBACK_DESCRIPTION",
    "EMPTY_RESPONSE_DESCRIPTION",
]
