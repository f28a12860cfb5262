"""Rasterization of a render window into an RGB frame."""

from __future__ import annotations

import os
from abc import ABC, abstractmethod
from concurrent.futures import ProcessPoolExecutor, as_completed
from dataclasses import dataclass
from typing import Optional, Sequence

import numpy as np
import PIL.Image
from numba import njit

from .errors import ComputationError, ConfigurationError, MandelzoomError, RenderError
from .evaluator import DIVERGED, NON_FINITE, _check_limits, escape_time
from .geometry import RenderWindow
from .palette import RgbColor, ramp
from .progress import NullProgress


@dataclass(frozen=True, eq=False)
class Frame:
    """One rendered image, ``pixels`` shaped ``(height, width, 3)`` in RGB order.

    The frame keeps a read-only copy of the array it is given.
    """

    index: int
    pixels: np.ndarray

    def __post_init__(self) -> None:
        if self.pixels.ndim != 3 or self.pixels.shape[2] != 3 or self.pixels.dtype != np.uint8:
            raise ValueError(f"expected a (height, width, 3) uint8 array, got {self.pixels.shape} {self.pixels.dtype}")
        pixels = np.array(self.pixels, copy=True)
        pixels.flags.writeable = False
        object.__setattr__(self, "pixels", pixels)

    @property
    def width(self) -> int:
        return int(self.pixels.shape[1])

    @property
    def height(self) -> int:
        return int(self.pixels.shape[0])

    def pixel(self, x: int, y: int) -> RgbColor:
        red, green, blue = (int(channel) for channel in self.pixels[y, x])
        return RgbColor(red, green, blue)

    def to_image(self) -> PIL.Image.Image:
        return PIL.Image.fromarray(self.pixels)


@njit(cache=True)
def _shade_column(x, width, ceiling, origin_re, origin_im, span_re, span_im, history_limit, column):
    """Fill ``column`` in place; returns the first row whose orbit is not finite, or -1."""
    re = origin_re + (x / width) * span_re
    for y in range(column.shape[0]):
        im = origin_im + (y / width) * span_im
        status, iteration = escape_time(re, im, ceiling, history_limit)
        if status == NON_FINITE:
            return y
        if status != DIVERGED:
            iteration = ceiling
        red, green, blue = ramp(iteration, ceiling)
        column[y, 0] = red
        column[y, 1] = green
        column[y, 2] = blue
    return -1


def render_column(
    x: int,
    width: int,
    height: int,
    ceiling: int,
    window: RenderWindow,
    history_limit: Optional[int] = None,
) -> tuple[int, np.ndarray]:
    """Compute every pixel of column ``x``; returns ``(x, colors)`` with colors shaped ``(height, 3)``."""

    limit = _check_limits(ceiling, history_limit)
    column = np.zeros((height, 3), dtype=np.uint8)
    failed_row = _shade_column(
        int(x),
        int(width),
        int(ceiling),
        window.upper_left.real,
        window.upper_left.imag,
        window.span_re,
        window.span_im,
        limit,
        column,
    )
    if failed_row >= 0:
        raise ComputationError(f"sample {window.coordinate(x, failed_row, width)!r} at ({x}, {failed_row}) is not finite")
    return x, column


def _check_dimensions(width: int, height: int, ceiling: int) -> None:
    if width <= 0 or height <= 0:
        raise ConfigurationError(f"image dimensions must be positive, got {width}x{height}")
    if ceiling <= 0:
        raise ConfigurationError(f"iteration ceiling must be positive, got {ceiling}")


def _dispatch_order(width: int, column_order: Optional[Sequence[int]]) -> list[int]:
    if column_order is None:
        return list(range(width))
    order = [int(x) for x in column_order]
    if sorted(order) != list(range(width)):
        raise ConfigurationError("column_order must be a permutation of the image columns")
    return order


def rasterize(
    width: int,
    height: int,
    ceiling: int,
    window: RenderWindow,
    *,
    workers: Optional[int] = None,
    progress=None,
    column_order: Optional[Sequence[int]] = None,
    index: int = 0,
    history_limit: Optional[int] = None,
) -> Frame:
    """Render ``window`` into a ``width`` x ``height`` frame.

    Columns are independent units of work. With ``workers=1`` they run in the
    calling process, otherwise on a process pool of ``workers`` processes
    (all cores when ``None``). ``column_order`` only changes the order in
    which columns are dispatched; the assembled frame is identical to a
    sequential render.
    """

    _check_dimensions(width, height, ceiling)
    if workers is not None and workers < 1:
        raise ConfigurationError(f"workers must be at least 1, got {workers}")
    if history_limit is not None and history_limit < 0:
        raise ConfigurationError(f"history limit must be non-negative, got {history_limit}")
    order = _dispatch_order(width, column_order)
    progress = progress if progress is not None else NullProgress()

    columns: dict[int, np.ndarray] = {}
    try:
        if workers == 1:
            for x in order:
                _, column = render_column(x, width, height, ceiling, window, history_limit)
                columns[x] = column
                progress.tick()
        else:
            with ProcessPoolExecutor(max_workers=workers) as pool:
                futures = [
                    pool.submit(render_column, x, width, height, ceiling, window, history_limit)
                    for x in order
                ]
                try:
                    for future in as_completed(futures):
                        x, column = future.result()
                        columns[x] = column
                        progress.tick()
                except BaseException:
                    for future in futures:
                        future.cancel()
                    raise
    except MandelzoomError as exc:
        raise RenderError(f"frame {index} failed: {exc}", frame=index) from exc
    finally:
        progress.done()

    pixels = np.empty((height, width, 3), dtype=np.uint8)
    for x in range(width):
        pixels[:, x] = columns[x]
    return Frame(index=index, pixels=pixels)


class RenderBackend(ABC):
    """Something that turns a render window into a :class:`Frame`."""

    name: str

    @abstractmethod
    def rasterize(
        self,
        width: int,
        height: int,
        ceiling: int,
        window: RenderWindow,
        *,
        index: int = 0,
        progress=None,
    ) -> Frame: ...

    def close(self) -> None:
        pass

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()


class CpuBackend(RenderBackend):
    """Double-precision escape-time renderer parallelised over columns."""

    name = "cpu"

    def __init__(self, workers: Optional[int] = None, history_limit: Optional[int] = None) -> None:
        if workers is None:
            workers = os.cpu_count() or 1
        if workers < 1:
            raise ConfigurationError(f"workers must be at least 1, got {workers}")
        self.workers = workers
        self.history_limit = history_limit

    def rasterize(self, width, height, ceiling, window, *, index=0, progress=None) -> Frame:
        return rasterize(
            width,
            height,
            ceiling,
            window,
            workers=self.workers,
            progress=progress,
            index=index,
            history_limit=self.history_limit,
        )
