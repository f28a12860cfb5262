"""Planning and rendering of zoom sequences toward a fixed pivot."""

from __future__ import annotations

import cmath
import math
from dataclasses import dataclass, field
from typing import Callable, Iterator, Optional

from .console import log
from .errors import ConfigurationError, MandelzoomError
from .geometry import RenderWindow
from .renderer import CpuBackend, RenderBackend
from .sink import ImageSink, PngSink


@dataclass(frozen=True)
class SequenceParameters:
    """Immutable configuration for one run over ``[start_frame, end_frame)``."""

    start_frame: int
    end_frame: int
    image_size: int
    iteration_ceiling: int
    initial_window_size: float
    pivot: complex
    shrink_factor: float
    output_prefix: str

    def validate(self) -> "SequenceParameters":
        if self.image_size <= 0:
            raise ConfigurationError(f"image size must be positive, got {self.image_size}")
        if self.iteration_ceiling <= 0:
            raise ConfigurationError(f"iteration ceiling must be positive, got {self.iteration_ceiling}")
        if not math.isfinite(self.initial_window_size) or self.initial_window_size <= 0:
            raise ConfigurationError(f"initial window size must be positive and finite, got {self.initial_window_size}")
        if not 0.0 <= self.shrink_factor < 1.0:
            raise ConfigurationError(f"shrink factor must lie in [0, 1), got {self.shrink_factor}")
        if self.start_frame < 0:
            raise ConfigurationError(f"start frame must be non-negative, got {self.start_frame}")
        if self.end_frame <= self.start_frame:
            raise ConfigurationError(f"frame range [{self.start_frame}, {self.end_frame}) is empty")
        if not cmath.isfinite(complex(self.pivot)):
            raise ConfigurationError(f"pivot {self.pivot!r} is not finite")
        return self

    @property
    def frame_count(self) -> int:
        return max(self.end_frame - self.start_frame, 0)


@dataclass(frozen=True)
class FramePlan:
    index: int
    window_size: float
    window: RenderWindow
    path: str


@dataclass
class SequenceReport:
    written: list[str] = field(default_factory=list)
    failed: list[tuple[int, MandelzoomError]] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not self.failed


def window_size(initial_size: float, shrink_factor: float, frame: int) -> float:
    """Side length of the window for ``frame``.

    Evaluated in closed form so a run resumed at any frame samples exactly
    the windows a full run would.
    """

    return initial_size * (1.0 - shrink_factor) ** frame


def frame_path(prefix: str, frame: int) -> str:
    return f"{prefix}frame_{frame}.png"


def plan_frames(params: SequenceParameters) -> Iterator[FramePlan]:
    params.validate()
    for frame in range(params.start_frame, params.end_frame):
        size = window_size(params.initial_window_size, params.shrink_factor, frame)
        yield FramePlan(
            index=frame,
            window_size=size,
            window=RenderWindow.centered(params.pivot, size),
            path=frame_path(params.output_prefix, frame),
        )


def render_sequence(
    params: SequenceParameters,
    *,
    backend: Optional[RenderBackend] = None,
    sink: Optional[ImageSink] = None,
    progress_factory: Optional[Callable[[FramePlan], object]] = None,
    continue_on_error: bool = False,
) -> SequenceReport:
    """Render every frame of ``params`` in order and hand each to ``sink``.

    A frame is fully written before the next one is rasterized. By default
    the first render or sink failure propagates; with ``continue_on_error``
    failures are collected in the returned report instead.
    """

    params.validate()
    backend = backend if backend is not None else CpuBackend()
    sink = sink if sink is not None else PngSink()
    report = SequenceReport()

    for plan in plan_frames(params):
        log("window %.6g around %r" % (plan.window_size, params.pivot))
        progress = progress_factory(plan) if progress_factory is not None else None
        try:
            frame = backend.rasterize(
                params.image_size,
                params.image_size,
                params.iteration_ceiling,
                plan.window,
                index=plan.index,
                progress=progress,
            )
            sink.write(frame, plan.path)
        except MandelzoomError as exc:
            if not continue_on_error:
                raise
            log("frame %d failed: %s" % (plan.index, exc))
            report.failed.append((plan.index, exc))
            continue
        report.written.append(plan.path)
        print("Rendered frame {0}".format(plan.index))

    return report
