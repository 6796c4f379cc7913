# main.py
# Application entry point

"""
IDW Raster Service
==================
REST API that turns a handful of geolocated measurements into a colored
raster overlay using Inverse Distance Weighting.

POST a set of [lat, lng, value] points, a bounding box, an image size and a
color gradient to /interpolate and get a PNG back that lines up with web map
tiles (Web Mercator).

Run with:
    uvicorn main:app --reload --port 5050
"""

from fastapi import FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from config import API_TITLE, API_VERSION, CORS_ORIGINS, DEFAULT_MODE, MODE_DEFAULTS, IDW_POWER, IDW_FADE_DISTANCE
from models import ServiceStatus
from routes import interpolate


# Create the app
app = FastAPI(
    title=API_TITLE,
    version=API_VERSION,
    description="Renders IDW-interpolated PNG overlays from sparse lat/lng samples.",
    docs_url="/docs"
)

# Allow the map frontend to call us
app.add_middleware(
    CORSMiddleware,
    allow_origins=CORS_ORIGINS,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.on_event("startup")
async def startup():
    """Print the engine defaults so it's obvious what a bare request gets."""
    print("=" * 50)
    print(f"Starting {API_TITLE} v{API_VERSION}")
    print(f"  Default mode: {DEFAULT_MODE}, power: {IDW_POWER}, fade: {IDW_FADE_DISTANCE:.0f}m")
    print("=" * 50)


@app.exception_handler(RequestValidationError)
async def bad_request(request: Request, exc: RequestValidationError):
    """Malformed or missing fields are a plain 400, not FastAPI's 422."""
    return JSONResponse(
        status_code=400,
        content={"error": "Missing or invalid parameters.", "detail": jsonable_encoder(exc.errors())},
    )


# Mount the routers
app.include_router(interpolate.router)


# Root endpoint
@app.get("/", tags=["System"])
async def root():
    """API overview."""
    return {
        "service": API_TITLE,
        "version": API_VERSION,
        "docs": "/docs",
        "endpoints": {
            "interpolation": [
                "POST /interpolate"
            ],
            "system": [
                "GET /status"
            ]
        }
    }


@app.get("/status", tags=["System"], response_model=ServiceStatus)
async def status():
    """Check if the service is up. There's no state to load, so it always is."""
    return ServiceStatus(
        status="ok",
        default_mode=DEFAULT_MODE,
        modes=list(MODE_DEFAULTS)
    )


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host="0.0.0.0", port=5050)
