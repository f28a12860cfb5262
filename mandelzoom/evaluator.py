"""Escape-time classification of a single point of the complex plane."""

from __future__ import annotations

import cmath
import enum
import math
from dataclasses import dataclass
from typing import Optional

import numpy as np
from numba import njit

from .errors import ComputationError, ConfigurationError

ESCAPE_RADIUS = 200
ESCAPE_THRESHOLD = float(ESCAPE_RADIUS ** 2)

# status codes returned by the compiled kernel
DIVERGED = 0
BOUNDED = 1
CYCLIC = 2
NON_FINITE = 3


class IterationKind(enum.Enum):
    DIVERGED = "diverged"
    BOUNDED = "bounded"
    CYCLIC = "cyclic"


@dataclass(frozen=True)
class IterationResult:
    """Outcome of iterating ``z := z*z + c`` for one coordinate.

    ``iteration`` is the escape iteration for diverged points, the iteration
    at which a repeated state was found for cyclic points and the ceiling for
    bounded points.
    """

    kind: IterationKind
    iteration: int

    @classmethod
    def diverged(cls, iteration: int) -> "IterationResult":
        return cls(IterationKind.DIVERGED, iteration)

    @classmethod
    def bounded(cls, ceiling: int) -> "IterationResult":
        return cls(IterationKind.BOUNDED, ceiling)

    @classmethod
    def cyclic(cls, iteration: int) -> "IterationResult":
        return cls(IterationKind.CYCLIC, iteration)

    @property
    def escaped(self) -> bool:
        return self.kind is IterationKind.DIVERGED

    def color_index(self, ceiling: int) -> int:
        """Iteration count fed to the color ramp; interior points map to ``ceiling``."""

        return self.iteration if self.escaped else ceiling


_KINDS = {
    DIVERGED: IterationKind.DIVERGED,
    BOUNDED: IterationKind.BOUNDED,
    CYCLIC: IterationKind.CYCLIC,
}


@njit(cache=True)
def escape_time(re, im, ceiling, history_limit):
    """
    Iterate ``z := z*z + c`` for ``c = re + im*j``; returns ``(status, iteration)``.

    Visited states live in a ring buffer of ``history_limit`` entries (the
    whole orbit when negative, nothing when zero) and an exact repeat of
    any of them ends the orbit as cyclic.
    """
    if not (math.isfinite(re) and math.isfinite(im)):
        return NON_FINITE, 0

    capacity = ceiling
    if 0 <= history_limit < ceiling:
        capacity = history_limit
    history = np.empty(max(capacity, 1), dtype=np.complex128)
    count = 0
    head = 0

    c = complex(re, im)
    z = 0j
    for i in range(ceiling):
        z = z * z + c
        if math.isnan(z.real) or math.isnan(z.imag):
            return NON_FINITE, i
        for k in range(count):
            if history[k] == z:
                return CYCLIC, i
        if z.real * z.real + z.imag * z.imag > ESCAPE_THRESHOLD:
            return DIVERGED, i
        if capacity > 0:
            history[head] = z
            head = (head + 1) % capacity
            if count < capacity:
                count += 1
    return BOUNDED, ceiling


def _check_limits(ceiling: int, history_limit: Optional[int]) -> int:
    if ceiling <= 0:
        raise ConfigurationError(f"iteration ceiling must be positive, got {ceiling}")
    if history_limit is None:
        return -1
    if history_limit < 0:
        raise ConfigurationError(f"history limit must be non-negative, got {history_limit}")
    return int(history_limit)


def evaluate(c: complex, ceiling: int, *, history_limit: Optional[int] = None) -> IterationResult:
    """Classify ``c`` as diverged, bounded or cyclic within ``ceiling`` iterations.

    Divergence compares ``|z|**2`` against ``ESCAPE_THRESHOLD`` (``200**2``).
    Exact repeats of an earlier orbit state stop the loop early; with
    ``history_limit`` only that many recent states are remembered and ``0``
    turns cycle detection off.
    """

    limit = _check_limits(ceiling, history_limit)
    c = complex(c)
    if not cmath.isfinite(c):
        raise ComputationError(f"coordinate {c!r} is not finite")

    status, iteration = escape_time(c.real, c.imag, int(ceiling), limit)
    if status == NON_FINITE:
        raise ComputationError(f"orbit of {c!r} produced NaN at iteration {iteration}")
    return IterationResult(_KINDS[status], int(iteration))
