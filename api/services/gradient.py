# services/gradient.py
# Turns {stop: color} gradients into 256-entry RGB lookup tables

from bisect import bisect_left
from functools import lru_cache
from typing import Dict, Tuple, Union

import numpy as np
from PIL import ImageColor

from config import GRADIENT_CACHE_SIZE
from services.errors import RasterError, RasterErrorKind

Color = Union[str, Tuple[int, int, int]]
RGB = Tuple[int, int, int]


def parse_color(color: Color) -> RGB:
    """
    Parse '#rgb', '#rrggbb', CSS names, 'rgb(...)' / 'hsl(...)' or an
    [r, g, b] sequence into an RGB tuple. Alpha, if given, is dropped.
    """
    if isinstance(color, str):
        try:
            return tuple(ImageColor.getrgb(color)[:3])
        except ValueError:
            raise RasterError(RasterErrorKind.INVALID_GRADIENT, f"Unknown color: {color!r}")

    try:
        rgb = tuple(int(c) for c in color)
    except (TypeError, ValueError):
        raise RasterError(RasterErrorKind.INVALID_GRADIENT, f"Unknown color: {color!r}")

    if len(rgb) not in (3, 4) or not all(0 <= c <= 255 for c in rgb):
        raise RasterError(RasterErrorKind.INVALID_GRADIENT, f"Color must be [r, g, b] in 0-255, got {color!r}")
    return rgb[:3]


def normalize_gradient(gradient: Dict) -> Tuple[Tuple[float, RGB], ...]:
    """
    Validate a gradient and return its stops sorted as ((stop, rgb), ...).

    Keys can be floats or numeric strings (JSON keys are always strings).
    If two keys land on the same position, the one declared last wins.
    """
    if not gradient:
        raise RasterError(RasterErrorKind.INVALID_GRADIENT, "Gradient needs at least one stop")

    stops: Dict[float, RGB] = {}
    for key, color in gradient.items():
        try:
            stop = float(key)
        except (TypeError, ValueError):
            raise RasterError(RasterErrorKind.INVALID_GRADIENT, f"Gradient stop must be a number, got {key!r}")

        if not 0.0 <= stop <= 1.0:
            raise RasterError(RasterErrorKind.INVALID_GRADIENT, f"Gradient stop {stop} is outside [0, 1]")

        stops[stop] = parse_color(color)

    return tuple(sorted(stops.items()))


def round_half_up(v):
    """Round .5 up (127.5 -> 128) like the browser side does. numpy rounds to even."""
    return np.floor(v + 0.5)


@lru_cache(maxsize=GRADIENT_CACHE_SIZE)
def _lookup_from_stops(stops: Tuple[Tuple[float, RGB], ...]) -> np.ndarray:
    positions = [s for s, _ in stops]
    colors = [c for _, c in stops]

    lookup = np.zeros((256, 3), dtype=np.uint8)
    for i in range(256):
        t = i / 255
        idx = bisect_left(positions, t)  # first stop with t <= stop

        if idx == len(positions):
            # Past the last stop
            lookup[i] = colors[-1]
        elif idx == 0:
            lookup[i] = colors[0]
        else:
            s0, s1 = positions[idx - 1], positions[idx]
            c0, c1 = colors[idx - 1], colors[idx]
            f = (t - s0) / (s1 - s0)
            lookup[i] = [round_half_up(a + (b - a) * f) for a, b in zip(c0, c1)]

    # Shared between requests via the cache - nobody gets to write to it
    lookup.flags.writeable = False
    return lookup


def build_gradient_lookup(gradient: Dict) -> np.ndarray:
    """
    Build a read-only (256, 3) uint8 table. Entry i is the color at i/255.

    Colors are interpolated linearly between neighbouring stops and clamped
    to the first/last stop colors outside the stop range.
    """
    return _lookup_from_stops(normalize_gradient(gradient))
