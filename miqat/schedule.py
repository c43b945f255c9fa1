"""Month tables and the "next prayer" countdown built on the daily calculator."""

import calendar
import datetime

from .calc import compute_prayer_times
from .methods import DEFAULT_METHOD
from .models import AdjustmentSet, GeoCoordinate, MonthlySchedule, PrayerSchedule, PrayerTime


def days_in_month(year: int, month: int) -> int:
    return calendar.monthrange(year, month)[1]


def compute_monthly_schedule(
    year: int,
    month: int,
    latitude: float,
    longitude: float,
    tz_offset: float,
    method=DEFAULT_METHOD,
    adjustments: AdjustmentSet | dict | None = None,
    asr_factor=1,
) -> MonthlySchedule:
    """
    Daily schedules for every day of ``month`` in ``year``, keyed 1..N.

    Coordinates are validated once up front so a bad location fails before
    any day is computed.
    """
    GeoCoordinate(latitude, longitude)
    days = {}
    for day in range(1, days_in_month(year, month) + 1):
        days[day] = compute_prayer_times(
            datetime.date(year, month, day),
            latitude,
            longitude,
            tz_offset,
            method=method,
            adjustments=adjustments,
            asr_factor=asr_factor,
        )
    return MonthlySchedule(year=year, month=month, days=days)


def prayer_datetime(entry: PrayerTime, day: datetime.date, tz=None) -> datetime.datetime | None:
    """
    Convert an entry's 'HH:MM' time to a datetime on ``day``.

    pytz zones are attached with ``localize``; other tzinfo objects directly.
    If tz is None, returns naive datetime.
    """
    if entry.time is None:
        return None
    hour, minute = map(int, entry.time.split(":"))
    naive = datetime.datetime(day.year, day.month, day.day, hour, minute)
    if tz is None:
        return naive
    if hasattr(tz, "localize"):
        return tz.localize(naive)
    return naive.replace(tzinfo=tz)


def next_prayer(
    schedule: PrayerSchedule,
    now: datetime.datetime,
    tomorrow: PrayerSchedule | None = None,
    include_sunrise: bool = False,
) -> tuple:
    """
    Return (prayer_name, prayer_datetime) of the first prayer after ``now``.

    Undefined entries are skipped, as is Sunrise unless ``include_sunrise``.
    Once the day is over the first prayer of ``tomorrow`` is returned, or
    (None, None) when no tomorrow schedule is given.
    """
    for day_schedule in (schedule, tomorrow):
        if day_schedule is None:
            continue
        for entry in day_schedule:
            if entry.undefined or (entry.name == "Sunrise" and not include_sunrise):
                continue
            prayer_dt = prayer_datetime(entry, day_schedule.date, now.tzinfo)
            if prayer_dt > now:
                return entry.name, prayer_dt
    return None, None


def seconds_until(target_dt: datetime.datetime, now: datetime.datetime = None) -> int:
    """Return seconds from now until target_dt (can be negative if past)."""
    if now is None:
        now = datetime.datetime.now(target_dt.tzinfo)
    delta = target_dt - now
    return int(delta.total_seconds())


def format_countdown(seconds: int) -> str:
    """Render a countdown as '3h 12m'; past times show as '0h 0m'."""
    minutes = max(int(seconds), 0) // 60
    return f"{minutes // 60}h {minutes % 60}m"
