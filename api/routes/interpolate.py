# routes/interpolate.py
# Endpoint that turns sample points into a PNG overlay

import time

from fastapi import APIRouter, HTTPException
from fastapi.responses import Response

from config import MAX_RASTER_PIXELS
from models import ErrorResponse, InterpolateRequest
from services.errors import RasterError
from services.geo import Bounds
from services.interpolator import RasterConfig, interpolate_idw

router = APIRouter(tags=["Interpolation"])


@router.post(
    "/interpolate",
    response_class=Response,
    responses={
        200: {"content": {"image/png": {}}},
        400: {"model": ErrorResponse},
    },
)
def interpolate(req: InterpolateRequest):
    """
    Render an IDW surface over the given bounds as a PNG.

    Every pixel gets a color from the gradient based on the inverse
    distance weighted average of the sample values. In 'directdraw' mode
    pixels far from any sample fade into the gradient's bottom color.
    """
    if req.width * req.height > MAX_RASTER_PIXELS:
        raise HTTPException(
            400,
            {"error": "InvalidDimensions", "message": f"Image too large, max {MAX_RASTER_PIXELS} pixels"}
        )

    b = req.bounds
    bounds = Bounds(min_lat=b.minLat, min_lng=b.minLng, max_lat=b.maxLat, max_lng=b.maxLng)

    start = time.time()
    try:
        config = RasterConfig.for_mode(
            req.mode,
            width=req.width,
            height=req.height,
            gradient=req.gradient,
            cell_size=req.cell_size,
            max_value=req.max_value,
            exp=req.exp,
            fade_distance=req.fade_distance,
        )
        png = interpolate_idw(req.points, config, bounds)
    except RasterError as e:
        raise HTTPException(400, e.to_dict())
    except Exception as e:
        raise HTTPException(500, {"error": str(e)})

    print(f"Rendered {req.width}x{req.height} raster from {len(req.points)} points "
          f"in {time.time() - start:.2f}s")

    return Response(content=png, media_type="image/png")
