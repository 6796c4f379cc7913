# services/errors.py
# Structured failures raised by the raster engine

from enum import Enum


class RasterErrorKind(str, Enum):
    INVALID_DIMENSIONS = "InvalidDimensions"
    INVALID_BOUNDING_BOX = "InvalidBoundingBox"
    EMPTY_POINT_SET = "EmptyPointSet"
    INVALID_GRADIENT = "InvalidGradient"
    INVALID_EXPONENT = "InvalidExponent"
    INVALID_CONFIGURATION = "InvalidConfiguration"
    INVALID_MODE = "InvalidMode"


class RasterError(ValueError):
    """
    Bad input to the raster engine.

    Carries a kind so the HTTP layer can report it without parsing messages.
    None of these are retryable - the same input always fails the same way.
    """

    def __init__(self, kind: RasterErrorKind, message: str):
        super().__init__(message)
        self.kind = kind
        self.message = message

    def to_dict(self) -> dict:
        return {"error": self.kind.value, "message": self.message}
