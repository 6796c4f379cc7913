# models.py
# Pydantic models for request/response validation

from pydantic import BaseModel, ConfigDict, Field
from typing import Dict, List, Literal, Optional, Tuple, Union


# --- Interpolation Models ---

class BoundsModel(BaseModel):
    """Geographic extent of the output image."""
    minLat: float
    minLng: float
    maxLat: float
    maxLng: float


class InterpolateRequest(BaseModel):
    """Request body for /interpolate. Field names match the JS client."""
    model_config = ConfigDict(populate_by_name=True)

    points: List[Tuple[float, float, float]] = Field(
        ...,
        description="Sample points as [[lat, lng, value], ...]"
    )
    width: int = Field(..., description="Image width in pixels")
    height: int = Field(..., description="Image height in pixels")
    gradient: Dict[str, Union[str, List[int]]] = Field(
        ...,
        description="Color ramp as {stop: color}, stops in [0, 1]. "
                    "Colors can be '#rrggbb', CSS names or [r, g, b]."
    )
    bounds: BoundsModel
    cell_size: Optional[int] = Field(None, alias="cellSize", description="Pixels per computed cell")
    max_value: Optional[float] = Field(None, alias="max", description="Value that maps to the top of the gradient")
    exp: Optional[float] = Field(None, description="IDW power, defaults to 2")
    fade_distance: Optional[float] = Field(
        None,
        alias="fadeDistance",
        description="Meters from the nearest sample before fading to the background color"
    )
    mode: Optional[Literal["fine", "directdraw"]] = Field(
        None,
        description="'directdraw' (10px cells, faded edges) or 'fine' (per-pixel, no fade)"
    )


class ErrorResponse(BaseModel):
    """Structured client error."""
    error: str
    message: Optional[str] = None


# --- System Models ---

class ServiceStatus(BaseModel):
    """Service health/status response."""
    status: str
    default_mode: str
    modes: List[str]
