# services/geo.py
# Pixel <-> lat/lng projection and great-circle distance

from dataclasses import dataclass
from typing import Tuple

import numpy as np

from config import EARTH_RADIUS_M


@dataclass(frozen=True)
class Bounds:
    """Geographic extent of the image. Top row is max_lat (north-up)."""
    min_lat: float
    min_lng: float
    max_lat: float
    max_lng: float


def lat_to_merc(lat):
    """Latitude (deg) -> Web Mercator Y."""
    return np.log(np.tan(np.pi / 4 + np.radians(lat) / 2))


def merc_to_lat(merc_y):
    """Web Mercator Y -> latitude (deg)."""
    return np.degrees(2 * np.arctan(np.exp(merc_y)) - np.pi / 2)


def pixel_to_latlng(x, y, width: int, height: int, bounds: Bounds) -> Tuple:
    """
    Convert a pixel coordinate to (lat, lng).

    Longitude is linear across the image. Latitude is linear in Mercator Y,
    so the output lines up with web map tiles. x and y can be numpy arrays.
    """
    top = lat_to_merc(bounds.max_lat)
    bottom = lat_to_merc(bounds.min_lat)

    # y = 0 is the north edge
    merc_y = top + (y / height) * (bottom - top)
    lat = merc_to_lat(merc_y)

    lng = bounds.min_lng + (x / width) * (bounds.max_lng - bounds.min_lng)
    return lat, lng


def latlng_to_pixel(lat, lng, width: int, height: int, bounds: Bounds) -> Tuple:
    """Inverse of pixel_to_latlng. Returns fractional (x, y)."""
    top = lat_to_merc(bounds.max_lat)
    bottom = lat_to_merc(bounds.min_lat)

    y = (lat_to_merc(lat) - top) / (bottom - top) * height
    x = (lng - bounds.min_lng) / (bounds.max_lng - bounds.min_lng) * width
    return x, y


def haversine(lat1, lng1, lat2, lng2):
    """Great-circle distance in meters. Broadcasts over numpy arrays."""
    lat1_r, lat2_r = np.radians(lat1), np.radians(lat2)
    dlat = np.radians(lat2 - lat1)
    dlng = np.radians(lng2 - lng1)

    a = np.sin(dlat/2)**2 + np.cos(lat1_r) * np.cos(lat2_r) * np.sin(dlng/2)**2
    a = np.clip(a, 0.0, 1.0)
    return EARTH_RADIUS_M * 2 * np.arctan2(np.sqrt(a), np.sqrt(1-a))
