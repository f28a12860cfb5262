"""Rectangular regions of the complex plane and their pixel sampling."""

from __future__ import annotations

import cmath
from dataclasses import dataclass

from .errors import ConfigurationError


@dataclass(frozen=True)
class RenderWindow:
    """Region of the plane mapped onto an image.

    The corners may be given in either order; spans are absolute differences
    and sampling always starts at ``upper_left``.
    """

    upper_left: complex
    lower_right: complex

    def __post_init__(self) -> None:
        for name in ("upper_left", "lower_right"):
            value = complex(getattr(self, name))
            if not cmath.isfinite(value):
                raise ConfigurationError(f"window corner {name}={value!r} is not finite")
            object.__setattr__(self, name, value)

    @classmethod
    def centered(cls, pivot: complex, size: float) -> "RenderWindow":
        """Square window of side ``size`` centred on ``pivot``."""

        half = size / 2.0
        pivot = complex(pivot)
        return cls(
            upper_left=complex(pivot.real - half, pivot.imag - half),
            lower_right=complex(pivot.real + half, pivot.imag + half),
        )

    @property
    def span_re(self) -> float:
        return abs(self.upper_left.real - self.lower_right.real)

    @property
    def span_im(self) -> float:
        return abs(self.upper_left.imag - self.lower_right.imag)

    @property
    def center(self) -> complex:
        return (self.upper_left + self.lower_right) / 2

    def coordinate(self, x: int, y: int, width: int) -> complex:
        """Plane coordinate sampled by pixel ``(x, y)`` of an image ``width`` wide.

        Both axes are divided by the image width; an image of a different
        height covers ``span_im * height / width`` vertically.
        """

        re = self.upper_left.real + (x / width) * self.span_re
        im = self.upper_left.imag + (y / width) * self.span_im
        return complex(re, im)
