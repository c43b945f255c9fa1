"""UTC offsets for prayer calculations: IANA zones first, longitude estimate last."""

import datetime
import logging
import math

import pytz

from .models import GeoCoordinate

logger = logging.getLogger(__name__)


def is_daylight_saving(day: datetime.date, latitude: float) -> bool:
    """
    Rough daylight-saving guess by hemisphere and month.

    North of the equator April through October counts as summer time,
    otherwise September through March. Real rules vary by country; this is
    only used when no timezone database entry is available.
    """
    if latitude > 0:
        return 4 <= day.month <= 10
    return day.month >= 9 or day.month <= 3


def estimate_timezone_offset(
    longitude: float,
    day: datetime.date,
    latitude: float,
    authoritative: float | None = None,
    dst: bool = True,
) -> float:
    """
    Estimate the UTC offset in hours from longitude alone.

    Each 15 degrees of longitude is one hour; one hour is added when
    ``is_daylight_saving`` says so and ``dst`` is set. This is an
    approximation and not a replacement for a timezone database: when the
    caller has an ``authoritative`` offset it is returned unchanged.
    """
    if authoritative is not None:
        return float(authoritative)
    coords = GeoCoordinate(latitude, longitude)
    offset = math.floor(coords.longitude / 15.0 + 0.5)
    if dst and is_daylight_saving(day, coords.latitude):
        offset += 1
    return float(offset)


def authoritative_offset(day: datetime.date, tz_name: str) -> float:
    """
    UTC offset in hours of IANA zone ``tz_name`` at local noon on ``day``.

    Raises pytz.UnknownTimeZoneError for names missing from the database.
    """
    tz = pytz.timezone(tz_name)
    noon = tz.localize(datetime.datetime(day.year, day.month, day.day, 12, 0, 0))
    return noon.utcoffset().total_seconds() / 3600.0


def resolve_offset(
    day: datetime.date,
    longitude: float,
    latitude: float,
    tz_name: str | None = None,
) -> float:
    """Offset from ``tz_name`` when it is a known zone, else the longitude estimate."""
    if tz_name:
        try:
            return authoritative_offset(day, tz_name)
        except pytz.UnknownTimeZoneError:
            logger.warning("Unknown timezone %r, estimating offset from longitude", tz_name)
    offset = estimate_timezone_offset(longitude, day, latitude)
    logger.debug("Estimated UTC offset %+g for longitude %s on %s", offset, longitude, day)
    return offset
