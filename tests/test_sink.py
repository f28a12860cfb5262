import imageio
import numpy as np
import PIL.Image
import pytest

from mandelzoom import Frame, GifSink, MultiSink, PngSink, SinkError


def make_frame(index=0, width=5, height=4):
    pixels = np.zeros((height, width, 3), dtype=np.uint8)
    pixels[..., 0] = np.arange(width, dtype=np.uint8) * 40
    pixels[..., 1] = index * 60
    pixels[..., 2] = 200
    return Frame(index=index, pixels=pixels)


def test_png_sink_writes_lossless_rgb(tmp_path):
    frame = make_frame()
    path = tmp_path / "nested" / "frame_0.png"
    PngSink().write(frame, str(path))
    with PIL.Image.open(path) as image:
        assert image.mode == "RGB"
        np.testing.assert_array_equal(np.asarray(image), frame.pixels)


def test_png_sink_is_deterministic(tmp_path):
    frame = make_frame()
    first, second = tmp_path / "a.png", tmp_path / "b.png"
    PngSink().write(frame, str(first))
    PngSink().write(frame, str(second))
    assert first.read_bytes() == second.read_bytes()


def test_png_sink_reports_unwritable_path(tmp_path):
    blocker = tmp_path / "blocker"
    blocker.write_text("not a directory")
    with pytest.raises(SinkError) as excinfo:
        PngSink().write(make_frame(), str(blocker / "frame_0.png"))
    assert excinfo.value.path.endswith("frame_0.png")
    assert isinstance(excinfo.value, OSError)


def test_gif_sink_collects_frames(tmp_path):
    gif_path = tmp_path / "movie.gif"
    with GifSink(str(gif_path)) as sink:
        for index in range(3):
            sink.write(make_frame(index), f"ignored_{index}.png")
    frames = imageio.mimread(str(gif_path))
    assert len(frames) == 3


def test_multi_sink_fans_out(tmp_path):
    gif_path = tmp_path / "movie.gif"
    png_path = tmp_path / "frame_0.png"
    with MultiSink([PngSink(), GifSink(str(gif_path))]) as sink:
        sink.write(make_frame(), str(png_path))
    assert png_path.exists()
    assert gif_path.exists()
