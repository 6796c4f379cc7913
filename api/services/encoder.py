# services/encoder.py
# RGBA buffer -> PNG bytes

import io

import numpy as np
from PIL import Image


def encode_png(raster: np.ndarray) -> bytes:
    """Encode a (height, width, 4) uint8 buffer as a PNG."""
    img = Image.fromarray(np.ascontiguousarray(raster, dtype=np.uint8))
    buf = io.BytesIO()
    img.save(buf, format="PNG")
    return buf.getvalue()
