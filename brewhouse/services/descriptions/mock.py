"""
Mock Description Service Implementation

Simulates the text-generation API without making real calls.
Used in development mode (ENV_MODE=development) to:
    - Exercise the admin "generate description" flow offline
    - Demonstrate the fallback path through simulated failures

Behavior:
    - Simulates response times (configurable)
    - Randomly fails a configurable share of requests
    - Picks a canned, category-flavoured description

Version: 1.0.0
"""

import asyncio
import random
import logging
from typing import Optional

from brewhouse.services.descriptions.base import BaseDescriptionService

logger = logging.getLogger(__name__)


class MockDescriptionService(BaseDescriptionService):
    """
    Mock implementation of the description service.

    Attributes:
        failure_rate: Probability of simulated failure (0.0-1.0)
        min_latency: Minimum simulated response time in seconds
        max_latency: Maximum simulated response time in seconds
    """

    TEMPLATES = {
        "Hot Coffee": "A velvety {name}, pulled slow and finished with silky steamed milk.",
        "Ice Coffee": "Our {name}, poured over crystal ice for a bold, refreshing finish.",
        "Tea": "{name}, gently steeped to bring out every fragrant, delicate note.",
        "Specialty": "The {name}: a signature blend of rare flavours, crafted in house.",
        "Bakery": "Golden, flaky {name}, baked fresh every morning in our ovens.",
    }
    GENERIC = "A house favourite: the {name}, made to order with care."

    def __init__(
        self,
        failure_rate: float = 0.05,
        min_latency: float = 0.1,
        max_latency: float = 0.4,
        rng: Optional[random.Random] = None,
    ):
        """
        Initialize the mock description service.

        Args:
            failure_rate: Probability of failure (default: 5%)
            min_latency: Minimum response time in seconds
            max_latency: Maximum response time in seconds
            rng: Random source (seed it for reproducible runs)
        """
        self.failure_rate = failure_rate
        self.min_latency = min_latency
        self.max_latency = max_latency
        self._rng = rng or random.Random()

        logger.info(
            f"MockDescriptionService initialized "
            f"(failure_rate={failure_rate:.0%}, "
            f"latency={min_latency}-{max_latency}s)"
        )

    @property
    def provider_name(self) -> str:
        """Return the provider name."""
        return "mock"

    async def _simulate_latency(self) -> None:
        """Simulate network latency."""
        if self.max_latency > 0:
            await asyncio.sleep(self._rng.uniform(self.min_latency, self.max_latency))

    def _should_fail(self) -> bool:
        """Determine if this request should simulate a failure."""
        return self._rng.random() < self.failure_rate

    async def _request_description(self, item_name: str, category: str) -> str:
        await self._simulate_latency()

        if self._should_fail():
            raise RuntimeError("Simulated text-generation outage")

        template = self.TEMPLATES.get(category, self.GENERIC)
        text = template.format(name=item_name)
        logger.debug(f"Mock: description for {item_name!r} -> {text!r}")
        return text

    async def health_check(self) -> bool:
        """Mock health check always returns True."""
        return True
