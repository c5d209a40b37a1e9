"""
Tie-Break Randomness Sources

Each source yields one integer per tie-break. The winner is the tied index at
position `draw % len(tied)`.

`TimestampHashRandomness` reproduces the historical behaviour: the draw is a
hash of the current instant. Anyone who can observe or influence the time of
the tally can predict or steer the outcome, so hosts with anything at stake
should configure `SystemRandomness` instead.
"""

import hashlib
import secrets
from typing import Optional

from ..constants import (
    ELECTION_TIE_BREAK_DIGEST_SIZE,
    ELECTION_TIE_BREAK_DOMAIN,
    ELECTION_TIE_BREAK_SOURCES,
)
from ..exceptions import ConfigurationError
from .providers import Clock, SystemClock


class RandomnessSource:
    """Supplies one unpredictable integer per tie-break invocation."""

    def draw(self) -> int:
        raise NotImplementedError


class TimestampHashRandomness(RandomnessSource):
    """BLAKE2b-256 of the clock's current instant, read as a big-endian int."""

    def __init__(self, clock: Optional[Clock] = None):
        self._clock = clock or SystemClock()

    def draw(self) -> int:
        instant = repr(float(self._clock.now())).encode()
        digest = hashlib.blake2b(
            ELECTION_TIE_BREAK_DOMAIN + instant,
            digest_size=ELECTION_TIE_BREAK_DIGEST_SIZE,
        ).digest()
        return int.from_bytes(digest, "big")

    def __repr__(self) -> str:
        return f"<TimestampHashRandomness clock={self._clock!r}>"


class SystemRandomness(RandomnessSource):
    """Operating-system CSPRNG via `secrets`."""

    def draw(self) -> int:
        return secrets.randbits(ELECTION_TIE_BREAK_DIGEST_SIZE * 8)

    def __repr__(self) -> str:
        return "<SystemRandomness>"


class FixedRandomness(RandomnessSource):
    """Always returns the same draw. For replaying a recorded tie-break."""

    def __init__(self, value: int):
        if value < 0:
            raise ValueError("Draw must be non-negative")
        self.value = value
        self.calls = 0

    def draw(self) -> int:
        self.calls += 1
        return self.value

    def __repr__(self) -> str:
        return f"<FixedRandomness value={self.value}>"


def make_randomness(name: str, clock: Optional[Clock] = None) -> RandomnessSource:
    """Build the randomness source named by the `tie_break` setting."""
    if name == "timestamp":
        return TimestampHashRandomness(clock)
    if name == "system":
        return SystemRandomness()
    raise ConfigurationError(
        f"Unknown tie_break source {name!r}. "
        f"Allowed: {list(ELECTION_TIE_BREAK_SOURCES)}"
    )
