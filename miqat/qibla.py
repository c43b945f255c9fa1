"""Direction of the Kaaba from an observer, absolute and relative to a compass."""

import math
from dataclasses import dataclass

from .angles import dtr, fix_angle, rtd
from .models import GeoCoordinate

KAABA = GeoCoordinate(21.4225, 39.8262)


@dataclass(frozen=True)
class QiblaReading:
    bearing: float
    heading: float | None
    pointer: float | None


def compute_qibla_bearing(latitude: float, longitude: float) -> float:
    """
    Initial great-circle bearing toward the Kaaba, in degrees clockwise from
    true north, normalized to [0, 360).

    At the Kaaba itself every direction is equally valid and 0.0 is returned.
    """
    coords = GeoCoordinate(latitude, longitude)
    if math.isclose(coords.latitude, KAABA.latitude, abs_tol=1e-9) and math.isclose(
        coords.longitude, KAABA.longitude, abs_tol=1e-9
    ):
        return 0.0

    lat = dtr(coords.latitude)
    d_lon = dtr(KAABA.longitude - coords.longitude)
    y = math.sin(d_lon)
    x = math.cos(lat) * math.tan(dtr(KAABA.latitude)) - math.sin(lat) * math.cos(d_lon)
    return fix_angle(rtd(math.atan2(y, x)))


def device_pointer(bearing: float, heading: float | None) -> float | None:
    """
    Angle to rotate from where the device points to face the qibla.

    Returns None when no usable compass heading is available.
    """
    if heading is None:
        return None
    try:
        heading = float(heading)
    except (TypeError, ValueError):
        return None
    if not math.isfinite(heading):
        return None
    return fix_angle(bearing - heading + 360.0)


def qibla_reading(latitude: float, longitude: float, heading: float | None = None) -> QiblaReading:
    bearing = compute_qibla_bearing(latitude, longitude)
    pointer = device_pointer(bearing, heading)
    return QiblaReading(bearing=bearing, heading=float(heading) if pointer is not None else None, pointer=pointer)
