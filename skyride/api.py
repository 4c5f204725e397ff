"""HTTP API for commute and flight weather assessments."""

import datetime as dt
import hmac
from typing import Dict, List, Literal, Optional
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

import requests
from fastapi import APIRouter, Depends, Header, HTTPException, Query, status
from pydantic import BaseModel, Field

from .config import settings
from .data_sources import build_data_source
from .domain import CommutePeriod, CommuteReport, ForecastProfileResult, NearbySite, ShiftWindow
from .forecast_service import get_commute_report, get_paragliding_forecast, get_rain_outlook
from .samples import ForecastDataError
from .spots import LAUNCH_SITES, find_nearby_launch_sites, find_site, sites_for_wind
from utils.logging_utils import get_tagged_logger

logger = get_tagged_logger(__name__, tag="api")


def require_api_key(x_api_key: str | None = Header(default=None)):
    """
    Validate the X-API-Key header against the static api_key setting.
    """
    # If no key is configured, allow requests (dev/default mode).
    if not settings.api_key:
        logger.debug("No API key configured; allowing all requests")
        return

    if not x_api_key:
        logger.debug("No API key provided")
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Missing API key")

    if hmac.compare_digest(str(x_api_key), str(settings.api_key)):
        return

    logger.debug("Invalid API key provided")
    raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Invalid API key")


router = APIRouter(dependencies=[Depends(require_api_key)])
DATA_SOURCE = build_data_source(settings)


class CommuteRequest(BaseModel):
    """Incoming commute query; give either a stored shift name or a full shift."""
    start_latitude: float = Field(ge=-90, le=90)
    start_longitude: float = Field(ge=-180, le=180)
    destination_latitude: Optional[float] = Field(default=None, ge=-90, le=90)
    destination_longitude: Optional[float] = Field(default=None, ge=-180, le=180)
    shift_name: Optional[str] = None
    shift: Optional[ShiftWindow] = None
    period: CommutePeriod = CommutePeriod.TODAY
    reference_date: Optional[dt.date] = None
    timezone: Optional[str] = None


class ParaglidingRequest(BaseModel):
    """Incoming flight query; a known site name overrides coordinates and orientation."""
    latitude: Optional[float] = Field(default=None, ge=-90, le=90)
    longitude: Optional[float] = Field(default=None, ge=-180, le=180)
    name: str = "Current location"
    site_name: Optional[str] = None
    launch_orientation: Optional[float] = Field(default=None, ge=0, lt=360)
    profile: Optional[Literal["3h", "12h", "24h"]] = None
    timezone: Optional[str] = None


class ParaglidingResponse(BaseModel):
    profiles: Dict[str, ForecastProfileResult]


class RainOutlookResponse(BaseModel):
    outlook: str


def _resolve_timezone(tz_str: str | None) -> str:
    """Validate a timezone name, falling back to the configured default."""
    tz_str = tz_str or settings.timezone
    try:
        ZoneInfo(tz_str)
    except (ZoneInfoNotFoundError, ValueError):
        raise HTTPException(status_code=400, detail=f"Invalid timezone: {tz_str}")
    return tz_str


def _resolve_shift(req: CommuteRequest) -> ShiftWindow:
    if req.shift is not None:
        return req.shift
    if not req.shift_name:
        raise HTTPException(status_code=400, detail="Provide either shift or shift_name")
    shift = settings.shift_by_name(req.shift_name)
    if shift is None:
        raise HTTPException(status_code=404, detail=f"Unknown shift: {req.shift_name}")
    return shift


def _upstream_error(exc: Exception) -> HTTPException:
    logger.warning("Forecast upstream failure", extra={"error": str(exc)})
    return HTTPException(status_code=status.HTTP_502_BAD_GATEWAY, detail=f"Forecast unavailable: {exc}")


@router.post("/commute", response_model=CommuteReport)
def commute(req: CommuteRequest):
    """Score the outbound and return legs of a shift over a period."""
    shift = _resolve_shift(req)
    tz_str = _resolve_timezone(req.timezone)
    reference_date = req.reference_date or dt.datetime.now(ZoneInfo(tz_str)).date()
    dest_lat = req.start_latitude if req.destination_latitude is None else req.destination_latitude
    dest_lon = req.start_longitude if req.destination_longitude is None else req.destination_longitude

    try:
        return get_commute_report(
            req.start_latitude,
            req.start_longitude,
            dest_lat,
            dest_lon,
            shift,
            req.period,
            reference_date,
            timezone=tz_str,
            data_source=DATA_SOURCE,
        )
    except (ForecastDataError, requests.RequestException) as exc:
        raise _upstream_error(exc)


@router.post("/paragliding", response_model=ParaglidingResponse)
def paragliding(req: ParaglidingRequest):
    """Best flying hour per planning profile for a location or known launch site."""
    tz_str = _resolve_timezone(req.timezone)
    latitude, longitude, name, orientation = req.latitude, req.longitude, req.name, req.launch_orientation

    if req.site_name:
        site = find_site(req.site_name)
        if site is None:
            raise HTTPException(status_code=404, detail=f"Unknown launch site: {req.site_name}")
        latitude, longitude, name, orientation = site.latitude, site.longitude, site.name, site.orientation
    elif latitude is None or longitude is None:
        raise HTTPException(status_code=400, detail="Provide latitude and longitude or a site_name")

    try:
        profiles = get_paragliding_forecast(
            latitude,
            longitude,
            name=name,
            launch_orientation=orientation,
            profile=req.profile,
            timezone=tz_str,
            data_source=DATA_SOURCE,
        )
    except (ForecastDataError, requests.RequestException) as exc:
        raise _upstream_error(exc)
    return ParaglidingResponse(profiles=profiles)


@router.get("/spots", response_model=List[NearbySite])
def spots(
    lat: float = Query(ge=-90, le=90),
    lon: float = Query(ge=-180, le=180),
    max_distance_km: Optional[float] = Query(default=None, gt=0),
    wind_direction: Optional[float] = Query(default=None, ge=0, lt=360),
    wind_speed: Optional[float] = Query(default=None, ge=0),
):
    """Launch sites near a point, optionally limited to those that work in the given wind."""
    table = LAUNCH_SITES
    if wind_direction is not None:
        table = tuple(sites_for_wind(table, wind_direction, wind_speed=wind_speed))
    radius = max_distance_km if max_distance_km is not None else settings.spot_radius_km
    return find_nearby_launch_sites(lat, lon, radius, table)


@router.get("/shifts", response_model=List[ShiftWindow])
def shifts():
    """Configured default shifts."""
    return settings.shifts


@router.get("/rain-outlook", response_model=RainOutlookResponse)
def rain(
    lat: float = Query(ge=-90, le=90),
    lon: float = Query(ge=-180, le=180),
    timezone: Optional[str] = None,
):
    """When rain starts or stops over the next hours."""
    tz_str = _resolve_timezone(timezone)
    try:
        outlook = get_rain_outlook(lat, lon, timezone=tz_str, data_source=DATA_SOURCE)
    except (ForecastDataError, requests.RequestException) as exc:
        raise _upstream_error(exc)
    return RainOutlookResponse(outlook=outlook)
