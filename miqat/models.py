"""Value types passed between the solar, prayer, schedule and qibla code.

Every type here is immutable and rebuilt from its inputs on each query.
"""

import datetime
import math
from dataclasses import dataclass, field
from typing import Dict, Iterator, Tuple

from .angles import wrap_longitude
from .errors import InvalidCoordinateError

PRAYER_NAMES = ["Fajr", "Sunrise", "Dhuhr", "Asr", "Maghrib", "Isha"]
PRAYER_DISPLAY = {
    "Fajr": "Subuh / Fajr",
    "Sunrise": "Sunrise / Syuruq",
    "Dhuhr": "Dzuhur / Dhuhr",
    "Asr": "Ashar / Asr",
    "Maghrib": "Maghrib",
    "Isha": "Isya / Isha",
}
PRAYER_ARABIC = {
    "Fajr": "الفجر",
    "Sunrise": "الشروق",
    "Dhuhr": "الظهر",
    "Asr": "العصر",
    "Maghrib": "المغرب",
    "Isha": "العشاء",
}


@dataclass(frozen=True)
class GeoCoordinate:
    """
    A point on the earth in decimal degrees.

    Latitude must lie in [-90, 90]. Longitude is cyclic, so any finite value
    is accepted and stored as its equivalent in [-180, 180).
    """

    latitude: float
    longitude: float

    def __post_init__(self):
        try:
            lat = float(self.latitude)
            lon = float(self.longitude)
        except (TypeError, ValueError) as exc:
            raise InvalidCoordinateError(
                f"Coordinates must be numbers, got ({self.latitude!r}, {self.longitude!r})"
            ) from exc
        if not (math.isfinite(lat) and math.isfinite(lon)):
            raise InvalidCoordinateError(f"Coordinates must be finite, got ({lat}, {lon})")
        if not -90.0 <= lat <= 90.0:
            raise InvalidCoordinateError(f"Latitude {lat} outside [-90, 90]")
        object.__setattr__(self, "latitude", lat)
        object.__setattr__(self, "longitude", wrap_longitude(lon))


@dataclass(frozen=True)
class CalculationMethod:
    """
    A named set of twilight rules.

    Fajr is always an angle below the horizon. Isha is either an angle
    (``isha_angle``) or a fixed number of minutes after Maghrib
    (``isha_minutes``), never both.
    """

    id: int
    key: str
    name: str
    fajr_angle: float
    isha_angle: float | None = None
    isha_minutes: float | None = None

    def __post_init__(self):
        if (self.isha_angle is None) == (self.isha_minutes is None):
            raise ValueError(f"{self.key}: exactly one of isha_angle / isha_minutes is required")

    @property
    def fixed_isha(self) -> bool:
        return self.isha_minutes is not None

    @property
    def description(self) -> str:
        if self.fixed_isha:
            return f"Fajr: {self.fajr_angle:g}°, Isha: {self.isha_minutes:g}min after Maghrib"
        return f"Fajr: {self.fajr_angle:g}°, Isha: {self.isha_angle:g}°"


@dataclass(frozen=True)
class AdjustmentSet:
    """Signed whole-minute offsets added to each computed time."""

    fajr: int = 0
    sunrise: int = 0
    dhuhr: int = 0
    asr: int = 0
    maghrib: int = 0
    isha: int = 0

    @classmethod
    def from_mapping(cls, mapping: dict | None) -> "AdjustmentSet":
        """Build from ``{"fajr": 2, ...}``; keys are prayer names in any case."""
        values = {}
        for key, minutes in (mapping or {}).items():
            name = str(key).lower()
            if name not in cls.__dataclass_fields__:
                raise ValueError(f"Unknown prayer for adjustment: {key}")
            values[name] = int(minutes)
        return cls(**values)

    def get(self, prayer: str) -> int:
        return getattr(self, prayer.lower())

    def as_dict(self) -> Dict[str, int]:
        return {name.lower(): self.get(name) for name in PRAYER_NAMES}


@dataclass(frozen=True)
class SolarPosition:
    equation_of_time: float  # minutes
    declination: float  # radians
    ecliptic_longitude: float  # degrees


@dataclass(frozen=True)
class PrayerTime:
    """
    One entry of a daily schedule.

    ``hours`` is the local clock time as fractional hours in [0, 24) and
    ``time`` its ``HH:MM`` rendering. Both are None when the sun never reaches
    the altitude that defines this prayer on that date.
    """

    name: str
    hours: float | None
    time: str | None

    @property
    def undefined(self) -> bool:
        return self.hours is None


@dataclass(frozen=True)
class PrayerSchedule:
    """The six times of one calendar date, always in PRAYER_NAMES order."""

    date: datetime.date
    times: Tuple[PrayerTime, ...]

    def __post_init__(self):
        names = [t.name for t in self.times]
        if names != PRAYER_NAMES:
            raise ValueError(f"Schedule entries must be {PRAYER_NAMES}, got {names}")

    def __iter__(self) -> Iterator[PrayerTime]:
        return iter(self.times)

    def __len__(self) -> int:
        return len(self.times)

    def __getitem__(self, name: str) -> PrayerTime:
        for entry in self.times:
            if entry.name.lower() == name.lower():
                return entry
        raise KeyError(name)

    @property
    def undefined(self) -> list:
        """Names of the prayers that have no valid time on this date."""
        return [t.name for t in self.times if t.undefined]

    @property
    def is_complete(self) -> bool:
        return not self.undefined

    def as_dict(self) -> Dict[str, str | None]:
        return {t.name: t.time for t in self.times}


@dataclass(frozen=True)
class MonthlySchedule:
    """Daily schedules keyed by day of month, one per day of the month."""

    year: int
    month: int
    days: Dict[int, PrayerSchedule] = field(default_factory=dict)

    def __len__(self) -> int:
        return len(self.days)

    def __getitem__(self, day: int) -> PrayerSchedule:
        return self.days[day]

    def __iter__(self) -> Iterator[PrayerSchedule]:
        return (self.days[d] for d in sorted(self.days))
