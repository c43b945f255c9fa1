"""Daily prayer time calculation from the sun's position."""

import datetime
import logging
import math

from .angles import dtr, fix_hour, rtd
from .errors import UndefinedTimeError
from .methods import DEFAULT_METHOD, get_method, resolve_asr_factor
from .models import (
    PRAYER_NAMES,
    AdjustmentSet,
    GeoCoordinate,
    PrayerSchedule,
    PrayerTime,
)
from .solar import solar_position

logger = logging.getLogger(__name__)


def format_time(hours: float) -> str:
    """Render fractional clock hours as zero-padded HH:MM, truncating seconds."""
    hours = fix_hour(hours)
    h = int(math.floor(hours))
    m = int(math.floor((hours - h) * 60))
    return f"{h % 24:02d}:{m:02d}"


def hour_angle(altitude: float, lat: float, decl: float) -> float:
    """
    Hour angle in degrees at which the sun stands at ``altitude`` degrees
    (negative below the horizon), for latitude and declination in radians.

    Raises UndefinedTimeError when the sun never reaches that altitude,
    which happens near the poles around the solstices.
    """
    denominator = math.cos(lat) * math.cos(decl)
    if denominator == 0:
        raise UndefinedTimeError("observer at a pole")
    x = (math.sin(dtr(altitude)) - math.sin(lat) * math.sin(decl)) / denominator
    if not -1.0 <= x <= 1.0:
        raise UndefinedTimeError(f"cosine of hour angle {x:.4f} outside [-1, 1]")
    return rtd(math.acos(x))


def asr_altitude(factor: float, lat: float, decl: float) -> float:
    """Sun altitude in degrees when a shadow is ``factor`` times its object plus the noon shadow."""
    denominator = factor + math.tan(abs(lat - decl))
    if denominator <= 0:
        raise UndefinedTimeError("sun too low for the Asr shadow length")
    return rtd(math.atan(1.0 / denominator))


def compute_prayer_times(
    day: datetime.date,
    latitude: float,
    longitude: float,
    tz_offset: float,
    method=DEFAULT_METHOD,
    adjustments: AdjustmentSet | dict | None = None,
    asr_factor=1,
) -> PrayerSchedule:
    """
    Compute Fajr, Sunrise, Dhuhr, Asr, Maghrib and Isha for one date.

    ``tz_offset`` is the local UTC offset in hours. ``method`` is anything
    ``get_method`` accepts and ``asr_factor`` anything ``resolve_asr_factor``
    accepts. Invalid coordinates raise InvalidCoordinateError. A prayer whose
    defining sun altitude is never reached is returned with ``hours=None``;
    the other prayers of the day are unaffected.
    """
    coords = GeoCoordinate(latitude, longitude)
    method = get_method(method)
    factor = resolve_asr_factor(asr_factor)
    if not isinstance(adjustments, AdjustmentSet):
        adjustments = AdjustmentSet.from_mapping(adjustments)
    tz_offset = float(tz_offset)
    if not math.isfinite(tz_offset):
        raise ValueError(f"Timezone offset must be finite, got {tz_offset}")

    sun = solar_position(day)
    lat = dtr(coords.latitude)
    decl = sun.declination
    noon = 12 + tz_offset - coords.longitude / 15.0 - sun.equation_of_time / 60.0

    def offset(name, altitude_fn):
        try:
            return hour_angle(altitude_fn(), lat, decl) / 15.0
        except UndefinedTimeError as exc:
            logger.debug("%s undefined on %s at latitude %.4f: %s", name, day, coords.latitude, exc)
            return None

    fajr = offset("Fajr", lambda: -method.fajr_angle)
    sunset = offset("Maghrib", lambda: 0.0)
    asr = offset("Asr", lambda: asr_altitude(factor, lat, decl))

    raw = {
        "Fajr": None if fajr is None else noon - fajr,
        "Sunrise": None if sunset is None else noon - sunset,
        "Dhuhr": noon,
        "Asr": None if asr is None else noon + asr,
        "Maghrib": None if sunset is None else noon + sunset,
        "Isha": None,
    }
    if not method.fixed_isha:
        isha = offset("Isha", lambda: -method.isha_angle)
        raw["Isha"] = None if isha is None else noon + isha

    adjusted = {}
    for name in PRAYER_NAMES:
        value = raw[name]
        adjusted[name] = None if value is None else value + adjustments.get(name) / 60.0

    # Fixed-offset Isha follows the adjusted Maghrib
    if method.fixed_isha and adjusted["Maghrib"] is not None:
        adjusted["Isha"] = (
            adjusted["Maghrib"] + method.isha_minutes / 60.0 + adjustments.isha / 60.0
        )

    times = []
    for name in PRAYER_NAMES:
        value = adjusted[name]
        if value is None:
            times.append(PrayerTime(name=name, hours=None, time=None))
        else:
            value = fix_hour(value)
            times.append(PrayerTime(name=name, hours=value, time=format_time(value)))
    return PrayerSchedule(date=day, times=tuple(times))
