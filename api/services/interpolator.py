# services/interpolator.py
# Core IDW raster engine: sample points in, RGBA pixel buffer out

import math
from dataclasses import dataclass
from typing import Dict, Optional, Sequence, Tuple

import numpy as np

from config import DEFAULT_MODE, IDW_EPSILON, IDW_FADE_DISTANCE, IDW_POWER, MODE_DEFAULTS
from services.encoder import encode_png
from services.errors import RasterError, RasterErrorKind
from services.geo import Bounds, haversine, pixel_to_latlng
from services.gradient import build_gradient_lookup, round_half_up

Point = Tuple[float, float, float]  # (lat, lng, value)


@dataclass(frozen=True)
class RasterConfig:
    """Everything the engine needs besides the points and the bounds."""
    width: int
    height: int
    gradient: Dict
    cell_size: int = 10
    max_value: float = 1.0
    exp: float = IDW_POWER
    fade_distance: float = IDW_FADE_DISTANCE
    feather: bool = True
    prefill: bool = True

    @classmethod
    def for_mode(cls, mode: Optional[str] = None, **overrides) -> "RasterConfig":
        """
        Start from a mode preset and apply overrides.

        Overrides that are None are ignored, so optional request fields
        can be passed straight through.
        """
        mode = mode or DEFAULT_MODE
        if mode not in MODE_DEFAULTS:
            raise RasterError(
                RasterErrorKind.INVALID_MODE,
                f"Unknown mode {mode!r}. Choose from: {list(MODE_DEFAULTS)}"
            )

        params = dict(MODE_DEFAULTS[mode])
        params.update({k: v for k, v in overrides.items() if v is not None})
        return cls(**params)


def _validate(points: np.ndarray, config: RasterConfig, bounds: Bounds):
    """Raise RasterError for anything the engine can't render."""
    for name in ("width", "height", "cell_size"):
        v = getattr(config, name)
        if isinstance(v, bool) or not isinstance(v, (int, np.integer)) or v <= 0:
            raise RasterError(RasterErrorKind.INVALID_DIMENSIONS, f"{name} must be a positive integer, got {v!r}")

    coords = (bounds.min_lat, bounds.min_lng, bounds.max_lat, bounds.max_lng)
    if not all(math.isfinite(c) for c in coords):
        raise RasterError(RasterErrorKind.INVALID_BOUNDING_BOX, "Bounds must be finite numbers")
    if bounds.min_lat >= bounds.max_lat or bounds.min_lng >= bounds.max_lng:
        raise RasterError(
            RasterErrorKind.INVALID_BOUNDING_BOX,
            "Bounds need minLat < maxLat and minLng < maxLng"
        )
    # Mercator Y goes to infinity at the poles
    if not (-90 < bounds.min_lat and bounds.max_lat < 90):
        raise RasterError(
            RasterErrorKind.INVALID_BOUNDING_BOX,
            "Latitudes must be strictly between -90 and 90"
        )

    if len(points) == 0:
        raise RasterError(RasterErrorKind.EMPTY_POINT_SET, "Need at least one sample point")
    if points.ndim != 2 or points.shape[1] != 3:
        raise RasterError(RasterErrorKind.INVALID_CONFIGURATION, "Points must be [lat, lng, value] triples")
    if not np.isfinite(points).all():
        raise RasterError(RasterErrorKind.INVALID_CONFIGURATION, "Points must be finite numbers")

    if not math.isfinite(config.exp) or config.exp <= 0:
        raise RasterError(RasterErrorKind.INVALID_EXPONENT, f"exp must be > 0, got {config.exp}")
    if not math.isfinite(config.max_value) or config.max_value < 0:
        raise RasterError(RasterErrorKind.INVALID_CONFIGURATION, f"max must be >= 0, got {config.max_value}")
    if config.feather and (not math.isfinite(config.fade_distance) or config.fade_distance <= 0):
        raise RasterError(
            RasterErrorKind.INVALID_CONFIGURATION,
            f"fadeDistance must be > 0, got {config.fade_distance}"
        )


def idw_values(lat, lng, points: np.ndarray, exp: float = IDW_POWER) -> Tuple[np.ndarray, np.ndarray]:
    """
    IDW estimate at each query location.

    lat/lng are arrays (or scalars) of query locations, points is an (n, 3)
    array of [lat, lng, value]. Returns (values, min_dist) shaped like the
    broadcast of lat and lng; min_dist is the distance in meters to the
    closest sample.
    """
    lat = np.asarray(lat, dtype=np.float64)[..., np.newaxis]
    lng = np.asarray(lng, dtype=np.float64)[..., np.newaxis]

    dist = haversine(lat, lng, points[:, 0], points[:, 1])

    # weight = 1/max(d^p, eps), worked out in log space and scaled by the
    # largest weight so big exponents over long distances don't overflow
    with np.errstate(divide="ignore"):
        log_w = -np.maximum(exp * np.log(dist), np.log(IDW_EPSILON))
    weights = np.exp(log_w - log_w.max(axis=-1, keepdims=True))
    values = (weights * points[:, 2]).sum(axis=-1) / weights.sum(axis=-1)

    return values, dist.min(axis=-1)


def shade(values: np.ndarray, min_dist: np.ndarray, lookup: np.ndarray, config: RasterConfig) -> np.ndarray:
    """Map IDW values to RGBA rows using the gradient and the fade policy."""
    values = np.minimum(values, config.max_value)

    if config.max_value == 0:
        # All-zero data: just the bottom color, no division
        index = np.zeros(values.shape, dtype=np.intp)
    else:
        index = np.clip(round_half_up(values / config.max_value * 255), 0, 255).astype(np.intp)

    if config.feather:
        fade = config.fade_distance
        alpha = np.where(min_dist > fade, np.maximum(0.0, 1 - (min_dist - fade) / fade), 1.0)
    else:
        alpha = np.ones(values.shape)

    bg = lookup[0].astype(np.float64)
    color = lookup[index].astype(np.float64)
    a = alpha[..., np.newaxis]

    rgba = np.empty(values.shape + (4,), dtype=np.uint8)
    rgba[..., :3] = round_half_up(color * a + bg * (1 - a))
    rgba[..., 3] = round_half_up(255 * alpha)
    return rgba


def render(points: Sequence[Point], config: RasterConfig, bounds: Bounds) -> np.ndarray:
    """
    Rasterize the IDW surface into a (height, width, 4) uint8 RGBA buffer.

    The image is tiled with cell_size x cell_size blocks; each block gets the
    color computed at its center. Blocks on the right/bottom edges are clipped
    to the image. Rows of blocks are independent of each other.
    """
    try:
        pts = np.asarray(points, dtype=np.float64)
    except (TypeError, ValueError):
        raise RasterError(RasterErrorKind.INVALID_CONFIGURATION, "Points must be [lat, lng, value] triples")
    if pts.size == 0:
        pts = pts.reshape(0, 3)
    _validate(pts, config, bounds)

    lookup = build_gradient_lookup(config.gradient)
    width, height, r = config.width, config.height, config.cell_size

    raster = np.zeros((height, width, 4), dtype=np.uint8)
    if config.prefill:
        raster[..., :3] = lookup[0]
        raster[..., 3] = 255

    n_cells_x = math.ceil(width / r)
    n_cells_y = math.ceil(height / r)

    # Cell centers along x are the same for every row
    center_x = np.arange(n_cells_x) * r + r / 2

    for row in range(n_cells_y):
        y = row * r
        lat, lng = pixel_to_latlng(center_x, y + r / 2, width, height, bounds)
        lat = np.broadcast_to(lat, lng.shape)

        values, min_dist = idw_values(lat, lng, pts, config.exp)
        colors = shade(values, min_dist, lookup, config)

        # Pixel column -> its cell; the last cell is clipped to the image
        band = colors[np.arange(width) // r]
        raster[y:y + r] = band

    return raster


def interpolate_idw(points: Sequence[Point], config: RasterConfig, bounds: Bounds) -> bytes:
    """Render and encode as PNG. This is what the HTTP layer calls."""
    return encode_png(render(points, config, bounds))

