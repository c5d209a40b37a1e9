"""
Host Collaborators

The engine authenticates nobody. The host hands it the caller identity on
every call and supplies a clock plus an administrator predicate.
"""

import time
from typing import Callable, Optional


AdminCheck = Callable[[str], bool]


class Clock:
    """Source of the current instant, in epoch seconds."""

    def now(self) -> float:
        raise NotImplementedError


class SystemClock(Clock):
    """Wall-clock time from the host."""

    def now(self) -> float:
        return time.time()

    def __repr__(self) -> str:
        return "<SystemClock>"


class ManualClock(Clock):
    """
    Clock that only moves when told to.

    Used by hosts replaying a recorded election and by tests exercising the
    reset cooldown.
    """

    def __init__(self, start: float = 0.0):
        self._now = float(start)

    def now(self) -> float:
        return self._now

    def advance(self, seconds: float) -> float:
        if seconds < 0:
            raise ValueError("Clock cannot move backwards")
        self._now += seconds
        return self._now

    def set(self, instant: float):
        if instant < self._now:
            raise ValueError("Clock cannot move backwards")
        self._now = float(instant)

    def __repr__(self) -> str:
        return f"<ManualClock now={self._now}>"


def single_administrator(administrator: Optional[str]) -> AdminCheck:
    """Administrator predicate matching exactly one identity."""
    def is_administrator(identity: str) -> bool:
        return bool(administrator) and identity == administrator
    return is_administrator
