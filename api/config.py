# config.py
# App configuration and constants

import os

# IDW interpolation parameters
IDW_POWER = float(os.getenv("IDW_POWER", "2.0"))  # Standard inverse square weighting
IDW_EPSILON = 1e-6  # Floor for distance^power so a sample on a cell center doesn't divide by zero
IDW_FADE_DISTANCE = float(os.getenv("IDW_FADE_DISTANCE", "100000"))  # meters

# Mean Earth radius for haversine (meters)
EARTH_RADIUS_M = 6371000

# Render modes - the two original drawing variants, now just presets
# fine: one computation per pixel, no halo
# directdraw: 10px cells, fade to background far from the samples
MODE_DEFAULTS = {
    "fine": {
        "cell_size": 1,
        "max_value": 1.0,
        "feather": False,
        "prefill": True,
    },
    "directdraw": {
        "cell_size": 10,
        "max_value": 1.0,
        "feather": True,
        "prefill": True,
    },
}
DEFAULT_MODE = os.getenv("IDW_DEFAULT_MODE", "directdraw")

# Gradient lookup tables are immutable, so identical gradients can share one
GRADIENT_CACHE_SIZE = int(os.getenv("GRADIENT_CACHE_SIZE", "64"))

# Reject anything bigger than this before doing any work (width * height)
MAX_RASTER_PIXELS = int(os.getenv("MAX_RASTER_PIXELS", str(4096 * 4096)))

# Comma separated, "*" allows everyone
CORS_ORIGINS = [o.strip() for o in os.getenv("CORS_ORIGINS", "*").split(",") if o.strip()]

# API metadata
API_TITLE = "IDW Raster Service"
API_VERSION = "1.0.0"
