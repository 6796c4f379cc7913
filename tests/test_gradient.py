# tests/test_gradient.py

import numpy as np
import pytest

from services.errors import RasterError, RasterErrorKind
from services.gradient import build_gradient_lookup, normalize_gradient, parse_color, round_half_up


def test_lookup_has_256_entries():
    lookup = build_gradient_lookup({"0": "#000066", "0.5": "yellow", "1": "red"})
    assert lookup.shape == (256, 3)


def test_black_to_white_is_identity():
    lookup = build_gradient_lookup({0: "#000000", 1: "#ffffff"})
    for i in range(256):
        assert tuple(lookup[i]) == (i, i, i)


def test_ends_match_lowest_and_highest_stops():
    lookup = build_gradient_lookup({"0.25": "#ff0000", "0.75": "#0000ff"})
    assert tuple(lookup[0]) == (255, 0, 0)
    assert tuple(lookup[255]) == (0, 0, 255)
    # Clamped below the first stop and above the last one
    assert tuple(lookup[60]) == (255, 0, 0)
    assert tuple(lookup[200]) == (0, 0, 255)


def test_stops_are_sorted():
    a = build_gradient_lookup({"1": "white", "0": "black"})
    b = build_gradient_lookup({"0": "black", "1": "white"})
    assert (a == b).all()
    assert tuple(a[0]) == (0, 0, 0)


def test_midpoint_interpolation():
    lookup = build_gradient_lookup({"0": "#000000", "0.5": "#ff0000", "1": "#ff0000"})
    # i=51 -> t=0.2, 40% of the way to red
    assert tuple(lookup[51]) == (102, 0, 0)
    assert tuple(lookup[200]) == (255, 0, 0)


def test_single_stop_is_constant():
    lookup = build_gradient_lookup({"0.3": "#123456"})
    assert (lookup == [0x12, 0x34, 0x56]).all()


def test_duplicate_stop_last_declared_wins():
    lookup = build_gradient_lookup({"0.5": "#ff0000", "0.50": "#0000ff"})
    assert (lookup == [0, 0, 255]).all()


def test_lookup_is_read_only():
    lookup = build_gradient_lookup({"0": "black", "1": "white"})
    with pytest.raises(ValueError):
        lookup[0] = [1, 2, 3]


def test_parse_color_formats():
    assert parse_color("#fff") == (255, 255, 255)
    assert parse_color("#00ff00") == (0, 255, 0)
    assert parse_color("red") == (255, 0, 0)
    assert parse_color("rgb(1, 2, 3)") == (1, 2, 3)
    assert parse_color([10, 20, 30]) == (10, 20, 30)


def test_normalize_gradient_parses_string_keys():
    stops = normalize_gradient({"1": "white", "0.25": "black"})
    assert stops == ((0.25, (0, 0, 0)), (1.0, (255, 255, 255)))


@pytest.mark.parametrize("gradient", [
    {},
    {"1.5": "red"},
    {"-0.1": "red"},
    {"low": "red"},
    {"0": "not-a-color"},
    {"0": [300, 0, 0]},
    {"0": [1, 2]},
])
def test_invalid_gradients(gradient):
    with pytest.raises(RasterError) as exc_info:
        build_gradient_lookup(gradient)
    assert exc_info.value.kind == RasterErrorKind.INVALID_GRADIENT


def test_round_half_up():
    assert round_half_up(127.5) == 128
    assert round_half_up(2.5) == 3
    assert round_half_up(2.4999) == 2
    assert list(round_half_up(np.array([0.5, 1.5, 254.5]))) == [1, 2, 255]
