"""Time helpers and timestamp-derived identifiers."""

import time
from typing import Callable, Iterable, Optional

Clock = Callable[[], int]


def now_ms() -> int:
    """Current Unix time in milliseconds."""
    return int(time.time() * 1000)


class TimestampIds:
    """
    Issues ids of the form ``<prefix><epoch-ms>``.

    Two ids requested within the same millisecond (or after the clock steps
    backwards) would collide, so the numeric part is bumped past the last
    value issued.
    """

    def __init__(self, prefix: str = "", clock: Clock = now_ms) -> None:
        self.prefix = prefix
        self._clock = clock
        self._last = 0

    def seed(self, existing: Iterable[str]) -> None:
        """Never reissue any of ``existing`` (ids loaded from storage)."""
        for value in existing:
            number = self.parse(value)
            if number is not None and number > self._last:
                self._last = number

    def parse(self, value: str) -> Optional[int]:
        if not value.startswith(self.prefix):
            return None
        digits = value[len(self.prefix):]
        return int(digits) if digits.isdigit() else None

    def __call__(self, stamp: Optional[int] = None) -> str:
        number = self._clock() if stamp is None else stamp
        if number <= self._last:
            number = self._last + 1
        self._last = number
        return f"{self.prefix}{number}"
