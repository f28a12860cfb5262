"""Public API for escape-time zoom rendering."""

from .errors import (
    ComputationError,
    ConfigurationError,
    MandelzoomError,
    RenderError,
    SinkError,
)
from .evaluator import ESCAPE_THRESHOLD, IterationKind, IterationResult, evaluate
from .geometry import RenderWindow
from .palette import INTERIOR_COLOR, RgbColor, color_for, map_color
from .progress import BarProgress, CountingProgress, NullProgress
from .renderer import CpuBackend, Frame, RenderBackend, rasterize, render_column
from .sequence import (
    FramePlan,
    SequenceParameters,
    SequenceReport,
    frame_path,
    plan_frames,
    render_sequence,
    window_size,
)
from .sink import GifSink, ImageSink, MultiSink, PngSink

__all__ = [
    "BarProgress",
    "ComputationError",
    "ConfigurationError",
    "CountingProgress",
    "CpuBackend",
    "ESCAPE_THRESHOLD",
    "Frame",
    "FramePlan",
    "GifSink",
    "INTERIOR_COLOR",
    "ImageSink",
    "IterationKind",
    "IterationResult",
    "MandelzoomError",
    "MultiSink",
    "NullProgress",
    "PngSink",
    "RenderBackend",
    "RenderError",
    "RenderWindow",
    "RgbColor",
    "SequenceParameters",
    "SequenceReport",
    "SinkError",
    "color_for",
    "evaluate",
    "frame_path",
    "map_color",
    "plan_frames",
    "rasterize",
    "render_column",
    "render_sequence",
    "window_size",
]
