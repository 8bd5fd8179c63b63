"""Small array helpers shared by the trainer and classifier.

Vectors are plain Python lists. Elementwise helpers refuse to operate on
arrays of different lengths instead of silently truncating.
"""

from __future__ import annotations

import math
from typing import Sequence

from .exceptions import InvalidInputError


def _check_same_length(a: Sequence, b: Sequence) -> None:
    if len(a) != len(b):
        raise InvalidInputError(f"array lengths differ: {len(a)} != {len(b)}")


def safe_log(value: float) -> float:
    """Natural log, with ``ln(0)`` mapped to negative infinity."""
    if value == 0:
        return -math.inf
    return math.log(value)


def array_sum(values: Sequence[int]) -> int:
    """Sum of an integer array."""
    total = 0
    for v in values:
        total += v
    return total


def array_sum_float(values: Sequence[float]) -> float:
    """Sum of a float array."""
    return math.fsum(values)


def ones(length: int) -> list[int]:
    """Integer array of ``length`` ones (Laplace pseudo-counts)."""
    return [1] * length


def add_arrays(a: Sequence[int], b: Sequence[int]) -> list[int]:
    """Elementwise ``a + b``."""
    _check_same_length(a, b)
    return [x + y for x, y in zip(a, b)]


def log_divide(values: Sequence[int], divisor: int) -> list[float]:
    """Elementwise ``ln(values[i] / divisor)``."""
    return [safe_log(v / divisor) for v in values]


def multiply_arrays(a: Sequence[int], b: Sequence[float]) -> list[float]:
    """Elementwise ``a * b``."""
    _check_same_length(a, b)
    # 0 * -inf is nan; an absent token contributes nothing
    return [x * y if x else 0.0 for x, y in zip(a, b)]


def round_decimal(value: float, places: int = 1) -> float:
    """Round via fixed-point formatting, e.g. ``round_decimal(0.66) == 0.7``."""
    return float(f"{value:.{places}f}")
