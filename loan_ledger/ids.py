"""Record identifiers."""

import time
from typing import Callable


class IdGenerator:
    """Produce opaque IDs that sort in generation order.

    IDs are nanosecond timestamps rendered as strings, bumped by one whenever
    the clock has not advanced since the previous ID.
    """

    def __init__(self, clock: Callable[[], int] = time.time_ns) -> None:
        self._clock = clock
        self._last = 0

    def __call__(self) -> str:
        value = max(self._clock(), self._last + 1)
        self._last = value
        return str(value)
