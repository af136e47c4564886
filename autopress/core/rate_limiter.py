"""Fixed-gap pacing between batch items."""

from __future__ import annotations

import time
from dataclasses import dataclass, field
from typing import Callable


@dataclass(slots=True)
class Pacer:
    """Sleeps a fixed number of seconds between consecutive work items.

    The gap is uniform; it is not a backoff and does not react to failures.
    """

    delay: float = 10.0
    sleep: Callable[[float], None] = field(default=time.sleep, repr=False)
    waits: int = field(default=0, init=False)

    def __post_init__(self) -> None:
        if self.delay < 0:
            self.delay = 0.0

    def wait(self) -> float:
        self.waits += 1
        if self.delay > 0:
            self.sleep(self.delay)
        return self.delay
