"""Three-band color ramp from escape iteration to RGB."""

from __future__ import annotations

import math
from typing import NamedTuple

from numba import njit

from .evaluator import IterationResult

BAND_WIDTH = 255.0
RAMP_SPAN = BAND_WIDTH * 3


class RgbColor(NamedTuple):
    red: int
    green: int
    blue: int


INTERIOR_COLOR = RgbColor(0, 0, 0)


@njit(cache=True)
def ramp(iteration, ceiling):
    if iteration == ceiling:
        return 0, 0, 0

    frac = (iteration / ceiling) * RAMP_SPAN
    if frac < BAND_WIDTH:
        return int(math.ceil(frac)), 0, 0
    if frac < BAND_WIDTH * 2:
        return 255, int(frac) % 255, 0
    if frac < RAMP_SPAN:
        return 255, 255, int(frac) % 255
    return 255, 255, 255


def map_color(iteration: int, ceiling: int) -> RgbColor:
    """Map an escape iteration onto the red -> yellow -> white ramp.

    Points that reached ``ceiling`` are interior and come out black.
    """

    red, green, blue = ramp(int(iteration), int(ceiling))
    return RgbColor(int(red), int(green), int(blue))


def color_for(result: IterationResult, ceiling: int) -> RgbColor:
    return map_color(result.color_index(ceiling), ceiling)
