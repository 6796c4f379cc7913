"""
IDW Raster Service - Streamlit Frontend
Click to drop sample points on a map, then render an IDW overlay for the visible area

Run: streamlit run streamlit_app.py
Open: http://localhost:8501
Note: Make sure the FastAPI backend is running on port 5050
"""

import base64

import streamlit as st
import folium
from streamlit_folium import st_folium
import requests
import os

# Configuration - Use environment variable for Docker, fallback to localhost for local dev
API_URL = os.getenv("API_URL", "http://localhost:5050")
CENTER = {"lat": 39.5, "lon": -98.35}
OVERLAY_SIZE = (800, 500)  # width, height in pixels

GRADIENTS = {
    "Heat": {"0": "#000066", "0.1": "blue", "0.2": "cyan", "0.3": "lime", "0.5": "yellow", "0.7": "orange", "1": "red"},
    "Grayscale": {"0": "#000000", "1": "#ffffff"},
    "Viridis": {"0": "#440154", "0.25": "#3b528b", "0.5": "#21918c", "0.75": "#5ec962", "1": "#fde725"},
}

# Page config
st.set_page_config(
    page_title="IDW Overlay",
    page_icon="🌡️",
    layout="wide",
    initial_sidebar_state="expanded"
)

# Custom CSS
st.markdown("""
<style>
    .stApp { background-color: #0f172a; }
    .main .block-container { padding: 0.5rem 1rem; max-width: 100%; }
    [data-testid="stSidebar"] { background-color: #1e293b; }
    h1, h2, h3, h4 { color: #f1f5f9 !important; }
    p, span, label { color: #e2e8f0; }
    .info-box { background-color: #1e3a5f; border-left: 4px solid #3b82f6; padding: 0.75rem; border-radius: 0 8px 8px 0; color: #e2e8f0; }
    .coord-display { font-family: monospace; background: #334155; padding: 0.5rem; border-radius: 6px; margin: 0.5rem 0; }
</style>
""", unsafe_allow_html=True)


def request_overlay(points: list, bounds: dict, gradient: dict, options: dict) -> dict:
    """POST to /interpolate. Returns {"png": bytes} or {"error": ...}."""
    width, height = OVERLAY_SIZE
    body = {
        "points": points,
        "width": width,
        "height": height,
        "gradient": gradient,
        "bounds": bounds,
        **options,
    }
    try:
        response = requests.post(f"{API_URL}/interpolate", json=body, timeout=60)
    except Exception as e:
        return {"error": str(e)}

    if response.status_code != 200:
        try:
            return response.json()
        except ValueError:
            return {"error": f"HTTP {response.status_code}"}
    return {"png": response.content}


def map_bounds_to_request(map_bounds: dict) -> dict:
    """st_folium bounds {_southWest, _northEast} -> request bounds."""
    sw, ne = map_bounds["_southWest"], map_bounds["_northEast"]
    return {"minLat": sw["lat"], "minLng": sw["lng"], "maxLat": ne["lat"], "maxLng": ne["lng"]}


def create_map(points: list, overlay: dict = None) -> folium.Map:
    """Map with sample markers and, if rendered, the IDW overlay."""
    m = folium.Map(location=[CENTER["lat"], CENTER["lon"]], zoom_start=4, tiles="CartoDB dark_matter")

    if overlay:
        b = overlay["bounds"]
        encoded = base64.b64encode(overlay["png"]).decode("ascii")
        folium.raster_layers.ImageOverlay(
            image=f"data:image/png;base64,{encoded}",
            bounds=[[b["minLat"], b["minLng"]], [b["maxLat"], b["maxLng"]]],
            opacity=0.7,
        ).add_to(m)

    for lat, lng, value in points:
        folium.CircleMarker(
            location=[lat, lng],
            radius=5,
            color="#f1f5f9",
            fill=True,
            fill_opacity=0.9,
            tooltip=f"{value:g} @ {lat:.3f}, {lng:.3f}"
        ).add_to(m)

    return m


def main():
    # Session state init
    if "points" not in st.session_state:
        st.session_state.points = []
    if "overlay" not in st.session_state:
        st.session_state.overlay = None
    if "error" not in st.session_state:
        st.session_state.error = None
    if "map_bounds" not in st.session_state:
        st.session_state.map_bounds = None

    # Sidebar
    with st.sidebar:
        st.title("🌡️ IDW Overlay")
        st.markdown("---")

        st.subheader("📍 Samples")
        st.info("👆 **Click the map** to add a sample with the value below.", icon="ℹ️")
        next_value = st.number_input("Value for next point", value=50.0, step=1.0)

        if st.session_state.points:
            rows = "<br>".join(f"{v:g} @ {lat:.3f}, {lng:.3f}" for lat, lng, v in st.session_state.points[-8:])
            st.markdown(f'<div class="coord-display">{rows}</div>', unsafe_allow_html=True)
            st.caption(f"{len(st.session_state.points)} points")

        if st.button("🗑️ Clear points", use_container_width=True):
            st.session_state.points = []
            st.session_state.overlay = None
            st.session_state.error = None
            st.rerun()

        st.markdown("---")
        st.subheader("🎨 Rendering")

        gradient_name = st.selectbox("Gradient", options=list(GRADIENTS))
        mode = st.radio(
            "Mode", options=["directdraw", "fine"],
            format_func=lambda x: "▦ Cells + fade" if x == "directdraw" else "▪ Per pixel",
            horizontal=True
        )
        cell_size = st.slider("Cell size (px)", 1, 40, 10 if mode == "directdraw" else 1)
        exp = st.slider("Power", 0.5, 6.0, 2.0, step=0.5)
        max_value = st.number_input("Max value", value=100.0, min_value=0.0, step=10.0)
        fade_km = st.number_input("Fade distance (km)", value=100.0, min_value=1.0, step=10.0)

        if st.button("🖼️ Render", use_container_width=True, type="primary", disabled=not st.session_state.points):
            if st.session_state.map_bounds is None:
                st.session_state.error = "Move the map once so its bounds are known."
            else:
                bounds = map_bounds_to_request(st.session_state.map_bounds)
                options = {
                    "mode": mode,
                    "cellSize": cell_size,
                    "exp": exp,
                    "max": max_value,
                    "fadeDistance": fade_km * 1000,
                }
                with st.spinner("Interpolating..."):
                    result = request_overlay(st.session_state.points, bounds, GRADIENTS[gradient_name], options)
                if "png" in result:
                    st.session_state.overlay = {"png": result["png"], "bounds": bounds}
                    st.session_state.error = None
                else:
                    st.session_state.error = result
            st.rerun()

        st.markdown("---")
        st.markdown(f"[📚 API Docs]({API_URL}/docs)")

    # Main content
    m = create_map(st.session_state.points, st.session_state.overlay)
    map_data = st_folium(m, width=None, height=700, key="map", returned_objects=["last_clicked", "bounds"])

    if map_data.get("bounds"):
        st.session_state.map_bounds = map_data["bounds"]

    click = map_data.get("last_clicked")
    if click:
        new_point = [round(click["lat"], 6), round(click["lng"], 6), float(next_value)]
        if not st.session_state.points or st.session_state.points[-1][:2] != new_point[:2]:
            st.session_state.points.append(new_point)
            st.rerun()

    if st.session_state.error:
        display_error(st.session_state.error)
    elif not st.session_state.overlay:
        st.markdown('<div class="info-box">Add a few points, then hit Render.</div>', unsafe_allow_html=True)


def display_error(error):
    """Show an API error. Engine errors come back as {"detail": {"error", "message"}}."""
    if isinstance(error, str):
        st.warning(f"⚠️ {error}")
        return

    detail = error.get("detail", error)
    if isinstance(detail, dict):
        st.error(f"❌ {detail.get('error', 'Error')}: {detail.get('message', '')}")
    else:
        st.error(f"❌ {error.get('error', 'Unknown error')}")


if __name__ == "__main__":
    main()
