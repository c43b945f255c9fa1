"""Angle and clock-hour helpers shared by the solar, prayer and qibla code."""

import math


def dtr(d: float) -> float:
    return (d * math.pi) / 180.0


def rtd(r: float) -> float:
    return (r * 180.0) / math.pi


def fix_angle(a: float) -> float:
    """Reduce an angle in degrees to [0, 360)."""
    a = a - 360.0 * math.floor(a / 360.0)
    return 0.0 if a >= 360.0 else a


def fix_hour(h: float) -> float:
    """Reduce a clock value in hours to [0, 24)."""
    h = h - 24.0 * math.floor(h / 24.0)
    return 0.0 if h >= 24.0 else h


def wrap_longitude(lon: float) -> float:
    """Map any longitude onto the equivalent value in [-180, 180)."""
    return fix_angle(lon + 180.0) - 180.0
