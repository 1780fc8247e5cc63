"""Caller deadlines checked between storage calls."""

import time
from dataclasses import dataclass, field
from typing import Callable, Self


@dataclass(frozen=True)
class Deadline:
    """A point on the monotonic clock after which work must stop."""

    expires_at: float
    clock: Callable[[], float] = field(default=time.monotonic, compare=False)

    @classmethod
    def after(cls, seconds: float, clock: Callable[[], float] = time.monotonic) -> Self:
        return cls(expires_at=clock() + seconds, clock=clock)

    def expired(self) -> bool:
        return self.clock() >= self.expires_at
