from html import escape
from typing import List, Optional

import folium

from pulpuluck.models.fountain_model import Fountain, GeoPoint
from pulpuluck.models.location_model import LocateOutcome, LocationReport
from pulpuluck.services.geo import distance

YEREVAN_CENTER = (40.1792, 44.4991)
ROUTE_COLOR = "#4285f4"

def popup_html(
    fountain: Fountain,
    user_location: Optional[GeoPoint] = None,
    is_nearest: bool = False,
    has_route: bool = False
) -> str:
    """Popup body for one fountain marker."""
    parts = ['<div style="min-width: 200px; max-width: 280px;">']

    if fountain.image_url:
        parts.append(
            f'<img src="{escape(fountain.image_url)}" alt="Fountain image" '
            'style="width: 100%; height: 96px; object-fit: cover; border-radius: 6px; margin-bottom: 8px;">'
        )

    title = "🎯 Nearest Fountain" if is_nearest else "🚰 Drinking Fountain"
    parts.append(f"<h4 style='margin: 0 0 4px 0;'>{title}</h4>")
    parts.append(f"<b>{escape(fountain.display_name)}</b>")

    # Local-script name under the English one
    local_name = fountain.attributes.get("name")
    if local_name and local_name != fountain.display_name:
        parts.append(f"<br><i>{escape(local_name)}</i>")

    if user_location is not None:
        parts.append(f"<br>📍 Distance: {round(distance(user_location, fountain.location))}m")
    if is_nearest and has_route:
        parts.append(f"<br><span style='color: {ROUTE_COLOR};'>🗺️ Route shown in blue</span>")
    if fountain.access:
        parts.append(f"<br>🔓 Access: {escape(fountain.access)}")
    if fountain.fee == "no":
        parts.append("<br><span style='color: #16a34a;'>💚 Free to use</span>")
    elif fountain.fee == "yes":
        parts.append("<br><span style='color: #d97706;'>💰 Fee required</span>")

    parts.append("</div>")
    return "".join(parts)

def _bounds(points: List[GeoPoint]) -> list:
    lats = [p.lat for p in points]
    lngs = [p.lng for p in points]
    return [[min(lats), min(lngs)], [max(lats), max(lngs)]]

def build_map(fountains: List[Fountain], outcome: Optional[LocateOutcome] = None) -> folium.Map:
    """
    Fountain markers with popups, the user's marker and the walking route.
    The view fits the route when there is one, else the user and the
    nearest fountain.
    """
    fmap = folium.Map(location=YEREVAN_CENTER, zoom_start=13, tiles="OpenStreetMap")

    user_location = outcome.user_location if outcome else None
    nearest_id = outcome.nearest.fountain.id if outcome and outcome.nearest else None
    route = outcome.route if outcome else None

    for fountain in fountains:
        is_nearest = fountain.id == nearest_id
        folium.Marker(
            [fountain.location.lat, fountain.location.lng],
            popup=folium.Popup(popup_html(fountain, user_location, is_nearest, route is not None), max_width=280),
            tooltip=fountain.display_name,
            icon=folium.Icon(color="red" if is_nearest else "blue", icon="tint")
        ).add_to(fmap)

    if user_location is not None:
        folium.Marker(
            [user_location.lat, user_location.lng],
            popup="Your Location",
            tooltip="Your Location",
            icon=folium.Icon(color="green", icon="user")
        ).add_to(fmap)

    if route is not None:
        # Straight-line fallback is drawn dashed
        dashes = {"dash_array": "8 8"} if route.is_fallback else {}
        folium.PolyLine(
            [[p.lat, p.lng] for p in route.path],
            color=ROUTE_COLOR,
            weight=4,
            opacity=0.8,
            **dashes
        ).add_to(fmap)
        fmap.fit_bounds(_bounds(route.path), padding=(20, 20))
    elif user_location is not None and outcome.nearest is not None:
        fmap.fit_bounds(_bounds([user_location, outcome.nearest.fountain.location]), padding=(50, 50))

    return fmap

def choose_location_report(
    find_clicked: bool,
    sidebar_report: LocationReport,
    query_report: Optional[LocationReport],
    query_handled: bool
) -> Optional[LocationReport]:
    """
    Which position to locate from on this run, if any. A button click always
    uses the sidebar input; a position in the URL only answers the first load.
    """
    if find_clicked:
        return sidebar_report
    if query_report is not None and not query_handled:
        return query_report
    return None
