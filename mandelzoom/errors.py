"""Exceptions raised while configuring and rendering zoom sequences."""

from __future__ import annotations

from typing import Optional


class MandelzoomError(Exception):
    """Base class for every error raised by :mod:`mandelzoom`."""


class ConfigurationError(MandelzoomError, ValueError):
    """Invalid parameters, rejected before any rendering begins."""


class ComputationError(MandelzoomError, ArithmeticError):
    """A coordinate or orbit state that is not a finite number."""


class RenderError(MandelzoomError):
    """Rasterizing a frame failed as a whole."""

    def __init__(self, message: str, frame: Optional[int] = None) -> None:
        super().__init__(message)
        self.frame = frame


class SinkError(MandelzoomError, OSError):
    """An image sink could not persist a frame."""

    def __init__(self, message: str, path: Optional[str] = None) -> None:
        super().__init__(message)
        self.path = path
