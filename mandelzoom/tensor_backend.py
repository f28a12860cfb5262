"""Single-precision TensorFlow renderer with a coarse shader-style ramp.

This backend evaluates the whole frame at once on a GPU when one is visible.
It has no cycle detection, escapes at ``|z| > 4`` and colors with four flat
bands, so its frames only approximate those of :class:`CpuBackend`.
"""

from __future__ import annotations

from typing import Optional

import numpy as np
import tensorflow as tf

from .errors import RenderError
from .geometry import RenderWindow
from .renderer import Frame, RenderBackend, _check_dimensions
from .progress import NullProgress

HORIZON = 4.0


@tf.function
def _escape_step(zs: tf.Tensor, cs: tf.Tensor, ns: tf.Tensor, active: tf.Tensor) -> tuple[tf.Tensor, tf.Tensor, tf.Tensor]:
    """Advance every still-bounded orbit by one iteration."""

    zs_new = zs * zs + cs
    zs = tf.where(active, zs_new, zs)
    escaped = tf.logical_and(active, tf.abs(zs) > tf.cast(HORIZON, tf.float32))
    ns = ns + tf.cast(tf.logical_and(active, tf.logical_not(escaped)), tf.int32)
    return zs, ns, tf.logical_and(active, tf.logical_not(escaped))


@tf.function
def _escape_run(cs: tf.Tensor, ceiling: tf.Tensor) -> tuple[tf.Tensor, tf.Tensor]:
    i = tf.constant(0, dtype=tf.int32)
    zs = tf.zeros_like(cs)
    ns = tf.zeros(tf.shape(cs), dtype=tf.int32)
    active = tf.ones(tf.shape(cs), dtype=tf.bool)

    def cond(i, zs, ns, active):
        return tf.logical_and(tf.less(i, ceiling), tf.reduce_any(active))

    def body(i, zs, ns, active):
        zs, ns, active = _escape_step(zs, cs, ns, active)
        return i + 1, zs, ns, active

    _, _, ns, active = tf.while_loop(cond, body, (i, zs, ns, active))
    return ns, active


def shader_ramp(iterations: np.ndarray, bounded: np.ndarray, ceiling: int) -> np.ndarray:
    """Color escape counts the way the compute shader does, returning uint8 RGB."""

    t = iterations.astype(np.float32) / np.float32(ceiling)
    zero = np.zeros_like(t)
    one = np.ones_like(t)
    low = t <= 0.3
    mid = np.logical_and(~low, t <= 0.6)
    red = np.where(low | mid, zero, t)
    green = np.where(low, zero, np.where(mid, t, one))
    blue = np.where(low, t, one)
    rgb = np.stack((red, green, blue), axis=-1)
    rgb[bounded] = 0.0
    return np.uint8(np.clip(np.round(rgb * 255), 0, 255))


class TensorFlowBackend(RenderBackend):
    name = "tensorflow"

    def __init__(self, device: Optional[str] = None) -> None:
        if device is None:
            device = "/GPU:0" if tf.config.list_physical_devices("GPU") else "/CPU:0"
        self.device = device

    def rasterize(self, width, height, ceiling, window: RenderWindow, *, index=0, progress=None) -> Frame:
        _check_dimensions(width, height, ceiling)
        progress = progress if progress is not None else NullProgress()

        try:
            xs = window.upper_left.real + (np.arange(width, dtype=np.float64) / width) * window.span_re
            ys = window.upper_left.imag + (np.arange(height, dtype=np.float64) / width) * window.span_im
            if not np.all(np.isfinite(xs)) or not np.all(np.isfinite(ys)):
                raise RenderError(
                    f"frame {index} failed: sampling grid contains non-finite coordinates",
                    frame=index,
                )

            with tf.device(self.device):
                X, Y = tf.meshgrid(tf.constant(xs, dtype=tf.float32), tf.constant(ys, dtype=tf.float32))
                cs = tf.complex(X, Y)
                ns, bounded = _escape_run(cs, tf.constant(ceiling, dtype=tf.int32))

            for _ in range(width):
                progress.tick()
        finally:
            progress.done()
        return Frame(index=index, pixels=shader_ramp(ns.numpy(), bounded.numpy(), ceiling))
