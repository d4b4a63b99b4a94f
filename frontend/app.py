import asyncio

import requests
import streamlit as st
from streamlit_folium import st_folium

from pulpuluck.core.config import settings
from pulpuluck.core.exceptions import DataUnavailable, LocationUnavailable
from pulpuluck.models.fountain_model import Fountain
from pulpuluck.models.location_model import LocationReport
from pulpuluck.repos.snapshot_repo import get_snapshot_store
from pulpuluck.services.Fountain_service import FountainService
from pulpuluck.services.Locator_service import LocatorService, static_position, summary
from pulpuluck.services.Routing_service import RoutingService
from views import build_map, choose_location_report

# Page configuration
st.set_page_config(
    page_title="Pulpuluck",
    page_icon="🚰",
    layout="wide",
    initial_sidebar_state="expanded"
)

st.markdown("""
<style>
    .main-header {
        font-size: 2.5rem;
        color: #1E88E5;
        text-align: center;
        padding: 1rem 0;
        font-weight: bold;
    }
    .nearest-box {
        padding: 1rem;
        background-color: #207a27;
        border-radius: 0.5rem;
        border-left: 4px solid #43A047;
        margin: 1rem 0;
    }
</style>
""", unsafe_allow_html=True)

# Backend API configuration
BACKEND_URL = settings.BACKEND_URL

VOTE_LABELS = {
    "running": "✅ Running",
    "outOfService": "🔧 Out of service",
    "abandoned": "🚫 Abandoned",
}

# Initialize session state
if "locator" not in st.session_state:
    st.session_state.locator = LocatorService(RoutingService())

if "outcome" not in st.session_state:
    st.session_state.outcome = None

if "query_handled" not in st.session_state:
    st.session_state.query_handled = False

@st.cache_data(ttl=60 * 15, show_spinner=False)
def load_fountains() -> list[dict]:
    """Fetch fountains (snapshot on failure, retried twice); cached for 15 minutes."""
    service = FountainService(get_snapshot_store())
    return [f.model_dump(mode="json") for f in asyncio.run(service.fetch_fountains_with_retry())]

def get_feedback(fountain_id: str) -> dict | None:
    try:
        response = requests.get(f"{BACKEND_URL}/feedback/{fountain_id}", timeout=5)
        response.raise_for_status()
        return response.json()
    except requests.exceptions.RequestException:
        return None

def submit_vote(fountain_id: str, vote_type: str) -> bool:
    try:
        response = requests.post(
            f"{BACKEND_URL}/feedback/{fountain_id}/vote",
            json={"voteType": vote_type},
            timeout=5
        )
        response.raise_for_status()
        return True
    except requests.exceptions.RequestException:
        return False

def report_from_query_params() -> LocationReport | None:
    """Position handed over in the URL, e.g. ?lat=40.18&lng=44.51 or ?error=1."""
    params = st.query_params
    try:
        if "error" in params:
            return LocationReport(code=int(params["error"]))
        if "lat" in params and "lng" in params:
            return LocationReport(lat=float(params["lat"]), lng=float(params["lng"]))
    except ValueError:
        return LocationReport(code=2)
    return None

# Header
st.markdown('<div class="main-header">🚰 Pulpuluck</div>', unsafe_allow_html=True)
st.markdown(
    "<p style='text-align: center; color: #666;'>Find clean, accessible drinking water fountains throughout Yerevan</p>",
    unsafe_allow_html=True
)

with st.spinner("Loading fountains..."):
    try:
        fountains = [Fountain.model_validate(f) for f in load_fountains()]
    except DataUnavailable:
        st.error("Failed to load drinking fountain data. Please try refreshing the page.")
        fountains = []

# Sidebar
with st.sidebar:
    st.header("📍 Your location")
    lat = st.number_input("Latitude", value=40.1776, format="%.6f")
    lng = st.number_input("Longitude", value=44.5126, format="%.6f")
    find_clicked = st.button("🧭 Find nearby", use_container_width=True, disabled=not fountains)

    st.divider()
    st.write(f"**Fountains loaded:** {len(fountains)}")

report = choose_location_report(
    find_clicked,
    LocationReport(lat=lat, lng=lng),
    report_from_query_params(),
    st.session_state.query_handled
)
if report is not None:
    st.session_state.query_handled = True
    # A new request replaces whatever was shown, error or not
    st.session_state.outcome = None
    try:
        with st.spinner("Finding the nearest fountain..."):
            outcome = asyncio.run(st.session_state.locator.locate(static_position(report), fountains))
        if outcome is not None:
            st.session_state.outcome = outcome
    except LocationUnavailable as e:
        st.error(f"Location Error: {e.message}")

outcome = st.session_state.outcome
st_folium(build_map(fountains, outcome), height=520, use_container_width=True, returned_objects=[], key="fountain_map")

if outcome is not None and outcome.nearest is not None:
    fountain = outcome.nearest.fountain
    title = "Route found!" if outcome.route and not outcome.route.is_fallback else "Nearest fountain found!"
    st.markdown(
        f'<div class="nearest-box">🎯 <b>{title}</b> {fountain.display_name}<br>{summary(outcome)}</div>',
        unsafe_allow_html=True
    )
    if outcome.route is not None and outcome.route.is_fallback:
        st.caption("Walking directions are unavailable right now, showing a straight line.")

    if fountain.image_url:
        st.image(fountain.image_url, width=300)
    if fountain.access:
        st.write(f"**Access:** {fountain.access}")
    if fountain.fee == "no":
        st.write("**Free to use**")
    elif fountain.fee == "yes":
        st.write("**Fee required**")

    st.subheader("How is this fountain doing?")
    feedback = get_feedback(fountain.id)
    if feedback is None:
        st.warning("⚠️ Feedback service is not reachable.")
    else:
        columns = st.columns(len(VOTE_LABELS))
        for column, (vote_type, label) in zip(columns, VOTE_LABELS.items()):
            with column:
                st.metric(label, feedback[vote_type])
                if st.button(label, key=f"vote_{vote_type}", use_container_width=True):
                    if submit_vote(fountain.id, vote_type):
                        st.toast("Thank you! Your feedback has been submitted successfully.")
                        st.rerun()
                    else:
                        st.error("Failed to submit your feedback. Please try again.")
