"""Effort-to-duration estimation."""

from __future__ import annotations

import math
import re
from fractions import Fraction

DEFAULT_EFFORT_SCALE = 0.5
MIN_DURATION = 1

_DIGITS = re.compile(r"[0-9]+")
# Below the interpreter's int() string-length limit
_CHUNK_DIGITS = 4000


class DurationEstimator:
    """Converts free-form effort text into a whole number of days.

    The first run of digits anywhere in the text is taken as the effort
    value ("13 story points" -> 13); the rest of the text is ignored. The value
    is scaled, rounded up, and floored at one day. Bad input never raises:
    missing or digit-free effort yields the minimum duration.
    """

    def __init__(self, scale: float = DEFAULT_EFFORT_SCALE):
        if not math.isfinite(scale) or scale <= 0:
            raise ValueError(f"Effort scale must be positive and finite, got {scale}")
        self.scale = scale
        # Exact ratio so arbitrarily long digit runs never go through float
        self._ratio = Fraction(str(scale))

    def parse_effort(self, effort: str | None) -> int:
        """Return the first digit run in the effort text, or 0 if there is none."""
        if effort is None:
            return 0
        match = _DIGITS.search(effort)
        if not match:
            return 0
        return _digits_to_int(match.group())

    def estimate(self, effort: str | None) -> int:
        """Estimate a duration in days from effort text."""
        if effort is None:
            return MIN_DURATION
        return max(MIN_DURATION, math.ceil(self.parse_effort(effort) * self._ratio))


def estimate(effort: str | None, scale: float = DEFAULT_EFFORT_SCALE) -> int:
    """Shortcut for DurationEstimator(scale).estimate(effort)."""
    return DurationEstimator(scale).estimate(effort)


def _digits_to_int(digits: str) -> int:
    value = 0
    for start in range(0, len(digits), _CHUNK_DIGITS):
        chunk = digits[start : start + _CHUNK_DIGITS]
        value = value * 10 ** len(chunk) + int(chunk)
    return value
