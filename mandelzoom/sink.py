"""Destinations for rendered frames."""

from __future__ import annotations

from abc import ABC, abstractmethod
from pathlib import Path
from typing import Sequence

import imageio
import numpy as np

from .errors import SinkError
from .renderer import Frame


class ImageSink(ABC):
    @abstractmethod
    def write(self, frame: Frame, path: str) -> None: ...

    def close(self) -> None:
        pass

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()


class PngSink(ImageSink):
    """Write each frame to its own lossless RGB PNG file."""

    def write(self, frame: Frame, path: str) -> None:
        output_path = Path(path)
        try:
            output_path.parent.mkdir(parents=True, exist_ok=True)
            frame.to_image().save(str(output_path), format="PNG")
        except OSError as exc:
            raise SinkError(f"could not write frame {frame.index} to {output_path}: {exc}", path=str(output_path)) from exc


class GifSink(ImageSink):
    """Append frames to one animated GIF, ignoring the per-frame path."""

    def __init__(self, path: str, duration: float = 0.1) -> None:
        self.path = Path(path)
        self.duration = duration
        self._writer = None

    def write(self, frame: Frame, path: str) -> None:
        try:
            if self._writer is None:
                self.path.parent.mkdir(parents=True, exist_ok=True)
                self._writer = imageio.get_writer(str(self.path), mode="I", duration=self.duration, loop=0)
            self._writer.append_data(np.asarray(frame.pixels))
        except OSError as exc:
            raise SinkError(f"could not append frame {frame.index} to {self.path}: {exc}", path=str(self.path)) from exc

    def close(self) -> None:
        if self._writer is not None:
            self._writer.close()
            self._writer = None


class MultiSink(ImageSink):
    """Hand every frame to several sinks in order."""

    def __init__(self, sinks: Sequence[ImageSink]) -> None:
        self.sinks = list(sinks)

    def write(self, frame: Frame, path: str) -> None:
        for sink in self.sinks:
            sink.write(frame, path)

    def close(self) -> None:
        for sink in self.sinks:
            sink.close()
