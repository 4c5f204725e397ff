"""Launch-site reference table and distance/bearing lookups.

The default table is an immutable tuple. Callers that need extra sites build
a new table with `with_custom_site` and pass it in explicitly.
"""

from __future__ import annotations

import math
from typing import List, Optional, Sequence, Tuple

from skyride.domain import (
    LaunchSite,
    LaunchSiteFeatures,
    LaunchSiteRestrictions,
    NearbySite,
    SiteDifficulty,
    WingClass,
)
from skyride.numeric import round_half_up, round_int

EARTH_RADIUS_KM = 6371.0

COMPASS_POINTS_16 = (
    "N", "NNE", "NE", "ENE", "E", "ESE", "SE", "SSE",
    "S", "SSW", "SW", "WSW", "W", "WNW", "NW", "NNW",
)

_FULL_FEATURES = LaunchSiteFeatures(
    top_landing=True,
    bottom_landing=True,
    ridge_soaring=True,
    thermal_soaring=True,
    cross_country=True,
)

LAUNCH_SITES: Tuple[LaunchSite, ...] = (
    LaunchSite(
        name="Ascheloh",
        latitude=51.8833,
        longitude=8.9167,
        elevation=280,
        orientation=270,
        suitable_wind_directions=(240, 270, 300),
        difficulty=SiteDifficulty.INTERMEDIATE,
        features=_FULL_FEATURES,
        restrictions=LaunchSiteRestrictions(min_pilot_level=WingClass.B, max_wind=30),
    ),
    LaunchSite(
        name="Willingen (Ettelsberg)",
        latitude=51.2944,
        longitude=8.6167,
        elevation=838,
        orientation=310,
        suitable_wind_directions=(270, 300, 330),
        difficulty=SiteDifficulty.INTERMEDIATE,
        features=_FULL_FEATURES,
        restrictions=LaunchSiteRestrictions(
            min_pilot_level=WingClass.B, max_wind=35, airspace="Airspace D nearby"
        ),
    ),
    LaunchSite(
        name="Wasserkuppe",
        latitude=50.4978,
        longitude=9.9450,
        elevation=950,
        orientation=270,
        suitable_wind_directions=(240, 270, 300, 330),
        difficulty=SiteDifficulty.BEGINNER,
        features=_FULL_FEATURES,
        restrictions=LaunchSiteRestrictions(
            min_pilot_level=WingClass.A, max_wind=30, time_restrictions="No night flying"
        ),
    ),
    LaunchSite(
        name="Tegelberg",
        latitude=47.5556,
        longitude=10.7556,
        elevation=1720,
        orientation=210,
        suitable_wind_directions=(180, 210, 240),
        difficulty=SiteDifficulty.ADVANCED,
        features=_FULL_FEATURES.model_copy(update={"top_landing": False}),
        restrictions=LaunchSiteRestrictions(
            min_pilot_level=WingClass.B, max_wind=25, airspace="Observe TMZ Füssen"
        ),
    ),
    LaunchSite(
        name="Kohlberg",
        latitude=51.3333,
        longitude=8.7167,
        elevation=615,
        orientation=270,
        suitable_wind_directions=(225, 270, 315),
        difficulty=SiteDifficulty.BEGINNER,
        features=LaunchSiteFeatures(ridge_soaring=True, thermal_soaring=True),
    ),
    LaunchSite(
        name="Edersee",
        latitude=51.1833,
        longitude=9.0167,
        elevation=400,
        orientation=0,
        suitable_wind_directions=(315, 0, 45),
        difficulty=SiteDifficulty.ADVANCED,
        features=LaunchSiteFeatures(ridge_soaring=True, thermal_soaring=True),
    ),
)


def haversine_km(lat1: float, lon1: float, lat2: float, lon2: float) -> float:
    """Great-circle distance in km."""
    phi1, phi2 = math.radians(lat1), math.radians(lat2)
    d_phi = math.radians(lat2 - lat1)
    d_lambda = math.radians(lon2 - lon1)
    a = math.sin(d_phi / 2) ** 2 + math.cos(phi1) * math.cos(phi2) * math.sin(d_lambda / 2) ** 2
    a = min(1.0, max(0.0, a))
    return EARTH_RADIUS_KM * 2 * math.atan2(math.sqrt(a), math.sqrt(1 - a))


def initial_bearing(lat1: float, lon1: float, lat2: float, lon2: float) -> float:
    """Initial great-circle bearing from point 1 to point 2, degrees in [0, 360)."""
    phi1, phi2 = math.radians(lat1), math.radians(lat2)
    d_lambda = math.radians(lon2 - lon1)
    y = math.sin(d_lambda) * math.cos(phi2)
    x = math.cos(phi1) * math.sin(phi2) - math.sin(phi1) * math.cos(phi2) * math.cos(d_lambda)
    return (math.degrees(math.atan2(y, x)) + 360) % 360


def compass_label_16(degrees: float) -> str:
    """16-point compass label at 22.5 degree resolution."""
    return COMPASS_POINTS_16[round_int((degrees % 360) / 22.5) % 16]


def find_nearby_launch_sites(
    latitude: float,
    longitude: float,
    max_distance_km: float = 100.0,
    sites: Sequence[LaunchSite] = LAUNCH_SITES,
) -> List[NearbySite]:
    """Sites within `max_distance_km`, nearest first; equal distances keep table order."""
    nearby: List[NearbySite] = []
    for site in sites:
        distance = haversine_km(latitude, longitude, site.latitude, site.longitude)
        if distance > max_distance_km:
            continue
        bearing = initial_bearing(latitude, longitude, site.latitude, site.longitude)
        nearby.append(
            NearbySite(
                site=site,
                distance_km=round_half_up(distance, 1),
                bearing=round_half_up(bearing, 1),
                direction=compass_label_16(bearing),
            )
        )
    # sort on the rounded value would reorder near-ties; use the exact distance
    nearby.sort(key=lambda n: haversine_km(latitude, longitude, n.site.latitude, n.site.longitude))
    return nearby


def find_site(name: str, sites: Sequence[LaunchSite] = LAUNCH_SITES) -> Optional[LaunchSite]:
    """Case-insensitive lookup by name."""
    wanted = name.strip().lower()
    for site in sites:
        if site.name.lower() == wanted:
            return site
    return None


def with_custom_site(sites: Sequence[LaunchSite], site: LaunchSite) -> Tuple[LaunchSite, ...]:
    """Return a new table with `site` appended; a site with the same name is replaced."""
    kept = tuple(s for s in sites if s.name.lower() != site.name.lower())
    return kept + (site,)


def _angular_distance(a: float, b: float) -> float:
    return abs(((a - b + 180) % 360) - 180)


def sites_for_wind(
    sites: Sequence[LaunchSite],
    wind_direction: float,
    tolerance: float = 30.0,
    wind_speed: Optional[float] = None,
) -> List[LaunchSite]:
    """
    Sites with an acceptable wind direction within `tolerance` degrees.

    When `wind_speed` is given, sites whose max_wind restriction is exceeded
    are dropped as well.
    """
    matches: List[LaunchSite] = []
    for site in sites:
        if not any(_angular_distance(wind_direction, d) <= tolerance for d in site.suitable_wind_directions):
            continue
        max_wind = site.restrictions.max_wind if site.restrictions else None
        if wind_speed is not None and max_wind is not None and wind_speed > max_wind:
            continue
        matches.append(site)
    return matches
