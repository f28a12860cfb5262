import pytest

from mandelzoom import INTERIOR_COLOR, IterationResult, RgbColor, color_for, map_color


@pytest.mark.parametrize("ceiling", [1, 2, 50, 200, 10_000])
def test_ceiling_is_black(ceiling):
    assert map_color(ceiling, ceiling) == RgbColor(0, 0, 0)


@pytest.mark.parametrize("ceiling", [2, 3, 50, 200])
def test_ramp_is_not_constant(ceiling):
    assert map_color(0, ceiling) != map_color(ceiling - 1, ceiling)


def test_red_band_rounds_up():
    assert map_color(10, 100) == RgbColor(77, 0, 0)


def test_green_band():
    assert map_color(40, 100) == RgbColor(255, 51, 0)


def test_blue_band():
    assert map_color(80, 100) == RgbColor(255, 255, 102)


def test_last_escape_before_ceiling():
    assert map_color(49, 50) == RgbColor(255, 255, 239)


def test_past_the_ramp_is_white():
    assert map_color(101, 100) == RgbColor(255, 255, 255)


def test_channels_stay_in_byte_range():
    for ceiling in (1, 7, 64, 333):
        for iteration in range(ceiling + 1):
            color = map_color(iteration, ceiling)
            assert all(0 <= channel <= 255 for channel in color)


def test_mapping_is_deterministic():
    assert [map_color(i, 90) for i in range(91)] == [map_color(i, 90) for i in range(91)]


def test_color_for_treats_cyclic_and_bounded_as_interior():
    assert color_for(IterationResult.cyclic(4), 50) == INTERIOR_COLOR
    assert color_for(IterationResult.bounded(50), 50) == INTERIOR_COLOR
    assert color_for(IterationResult.diverged(5), 50) == map_color(5, 50)
