import numpy as np
import pytest

tf = pytest.importorskip("tensorflow")

from mandelzoom import RenderWindow, rasterize  # noqa: E402
from mandelzoom.tensor_backend import TensorFlowBackend, shader_ramp  # noqa: E402

UNIT_WINDOW = RenderWindow(-1 - 1j, 1 + 1j)


def test_shader_ramp_bands():
    iterations = np.array([[0, 25, 50, 80, 100]])
    bounded = np.array([[False, False, False, False, True]])
    rgb = shader_ramp(iterations, bounded, 100)
    assert tuple(rgb[0, 0]) == (0, 0, 0)
    assert tuple(rgb[0, 1]) == (0, 0, 64)
    assert tuple(rgb[0, 2]) == (0, 128, 255)
    assert tuple(rgb[0, 3]) == (204, 255, 255)
    assert tuple(rgb[0, 4]) == (0, 0, 0)


def test_tensorflow_backend_frame_shape_and_interior():
    backend = TensorFlowBackend(device="/CPU:0")
    frame = backend.rasterize(8, 6, 50, UNIT_WINDOW, index=4)
    assert frame.index == 4
    assert frame.pixels.shape == (6, 8, 3)
    # c = 0 never escapes
    assert tuple(frame.pixel(4, 4)) == (0, 0, 0)
    assert tuple(frame.pixel(0, 0)) != (0, 0, 0)


def test_tensorflow_backend_agrees_on_interior_mask():
    backend = TensorFlowBackend(device="/CPU:0")
    approx = backend.rasterize(16, 16, 60, UNIT_WINDOW)
    exact = rasterize(16, 16, 60, UNIT_WINDOW, workers=1)
    approx_black = np.all(approx.pixels == 0, axis=-1)
    exact_black = np.all(exact.pixels == 0, axis=-1)
    assert np.mean(approx_black == exact_black) > 0.8
