"""Ordered numeric pattern extraction shared by all metric parsers.

Tool output wording drifts between macOS releases. Each metric therefore
owns a tuple of NumericPattern entries tried in priority order; adding a new
wording is a data change, not a control-flow change.
"""

import math
import re
from collections.abc import Callable, Sequence
from dataclasses import dataclass

__all__ = ["NumericPattern", "extract_number", "identity", "pattern"]


def identity(value: float) -> float:
    return value


@dataclass(frozen=True, slots=True)
class NumericPattern:
    """A regex with one numeric capture group and a unit normalizer."""

    regex: re.Pattern[str]
    normalize: Callable[[float], float] = identity

    def match(self, text: str) -> float | None:
        """Return the normalized capture, or None on no match / bad number."""
        m = self.regex.search(text)
        if m is None:
            return None
        try:
            value = float(m.group(1))
        except (TypeError, ValueError):
            return None
        if not math.isfinite(value):
            return None
        return self.normalize(value)


def pattern(regex: str, normalize: Callable[[float], float] = identity) -> NumericPattern:
    """Compile *regex* case-insensitively into a NumericPattern."""
    return NumericPattern(re.compile(regex, re.IGNORECASE), normalize)


def extract_number(text: str, patterns: Sequence[NumericPattern]) -> float | None:
    """Return the value of the first pattern in *patterns* that matches *text*."""
    for candidate in patterns:
        value = candidate.match(text)
        if value is not None:
            return value
    return None
