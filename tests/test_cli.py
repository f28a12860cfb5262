import os

import PIL.Image
import pytest

import zoom


def run(tmp_path, *extra):
    prefix = f"{tmp_path}{os.sep}"
    args = [
        "--end-frame", "2",
        "--image-size", "6",
        "--max-iterations", "20",
        "--output-prefix", prefix,
        "--workers", "1",
        "--no-progress",
        *extra,
    ]
    return zoom.main(args)


def test_defaults_follow_reference_run():
    opt = zoom.build_parser().parse_args([])
    assert (opt.start_frame, opt.end_frame) == (0, 10)
    assert opt.image_size == 500
    assert opt.max_iterations == 200
    assert opt.window_size == 1.0
    assert (opt.pivot_re, opt.pivot_im) == (-0.5, -0.5)
    assert opt.shrink_factor == 0.1
    assert opt.output_prefix == "./out/"


def test_cli_writes_numbered_frames(tmp_path):
    assert run(tmp_path) == 0
    assert sorted(os.listdir(tmp_path)) == ["frame_0.png", "frame_1.png"]
    with PIL.Image.open(tmp_path / "frame_1.png") as image:
        assert image.size == (6, 6)


def test_cli_resumes_from_start_frame(tmp_path):
    assert run(tmp_path, "--start-frame", "1") == 0
    assert os.listdir(tmp_path) == ["frame_1.png"]


def test_cli_writes_gif(tmp_path):
    gif_path = tmp_path / "movie" / "zoom.gif"
    assert run(tmp_path, "--gif", str(gif_path)) == 0
    assert gif_path.exists()


@pytest.mark.parametrize(
    "extra",
    [
        ["--shrink-factor", "1.0"],
        ["--start-frame", "5"],
        ["--image-size", "0"],
        ["--max-iterations", "0"],
        ["--workers", "0"],
        ["--history-limit", "-1"],
    ],
)
def test_cli_rejects_bad_configuration(tmp_path, extra, capsys):
    with pytest.raises(SystemExit) as excinfo:
        run(tmp_path, *extra)
    assert excinfo.value.code == 2
    assert os.listdir(tmp_path) == []
    assert "error" in capsys.readouterr().err


def test_cli_reports_sink_failure(tmp_path, capsys):
    blocker = tmp_path / "blocker"
    blocker.write_text("")
    code = zoom.main([
        "--end-frame", "1", "--image-size", "4", "--max-iterations", "10",
        "--output-prefix", f"{blocker}{os.sep}", "--workers", "1", "--no-progress",
    ])
    assert code == 1
    assert "error" in capsys.readouterr().err


def test_cli_prints_frame_counter_without_progress_bar(tmp_path, capsys):
    assert run(tmp_path) == 0
    out = capsys.readouterr().out
    assert "frame 0 out of 2\r" in out
    assert "frame 1 out of 2\r" in out


@pytest.mark.parametrize("extra", [["--history-limit", "4"], []])
def test_cli_rejects_cpu_options_for_tensorflow_backend(tmp_path, extra, capsys):
    # run() always passes --workers
    with pytest.raises(SystemExit) as excinfo:
        run(tmp_path, "--backend", "tensorflow", *extra)
    assert excinfo.value.code == 2
    assert "cpu backend" in capsys.readouterr().err
