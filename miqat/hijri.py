"""
Tabular Islamic calendar.

Arithmetical calendar with 30-year cycles (leap years 2, 5, 7, 10, 13, 16,
18, 21, 24, 26 and 29) counted from the civil epoch of 16 July 622 (Julian).
It follows the published algorithm of Reingold & Dershowitz, "Calendrical
Calculations", and can differ by a day or two from sighting-based or Umm
al-Qura calendars.
"""

import datetime
from dataclasses import dataclass

HIJRI_MONTHS = [
    "Muharram",
    "Safar",
    "Rabi' al-Awwal",
    "Rabi' al-Thani",
    "Jumada al-Awwal",
    "Jumada al-Thani",
    "Rajab",
    "Sha'ban",
    "Ramadan",
    "Shawwal",
    "Dhu al-Qi'dah",
    "Dhu al-Hijjah",
]

# Fixed day number (proleptic Gregorian ordinal) of 1 Muharram 1 AH
ISLAMIC_EPOCH = 227015


@dataclass(frozen=True)
class HijriDate:
    year: int
    month: int
    day: int

    @property
    def month_name(self) -> str:
        return HIJRI_MONTHS[self.month - 1]

    def __str__(self):
        return f"{self.day} {self.month_name} {self.year} H"


def is_leap_year(year: int) -> bool:
    return (14 + 11 * year) % 30 < 11


def _fixed_from_hijri(year: int, month: int, day: int) -> int:
    return (
        day
        + 29 * (month - 1)
        + (6 * month - 1) // 11
        + (year - 1) * 354
        + (3 + 11 * year) // 30
        + ISLAMIC_EPOCH
        - 1
    )


def to_hijri(day: datetime.date) -> HijriDate:
    """Convert a Gregorian date on or after the Hijri epoch."""
    fixed = day.toordinal()
    if fixed < ISLAMIC_EPOCH:
        raise ValueError(f"{day} is before the start of the Hijri calendar")
    year = (30 * (fixed - ISLAMIC_EPOCH) + 10646) // 10631
    prior_days = fixed - _fixed_from_hijri(year, 1, 1)
    month = (11 * prior_days + 330) // 325
    return HijriDate(year, month, fixed - _fixed_from_hijri(year, month, 1) + 1)


def to_gregorian(year: int, month: int, day: int) -> datetime.date:
    if year < 1:
        raise ValueError(f"Hijri year {year} before 1 AH")
    if not 1 <= month <= 12:
        raise ValueError(f"Hijri month {month} outside 1..12")
    length = 30 if month % 2 == 1 or (month == 12 and is_leap_year(year)) else 29
    if not 1 <= day <= length:
        raise ValueError(f"Hijri day {day} outside 1..{length}")
    return datetime.date.fromordinal(_fixed_from_hijri(year, month, day))


def format_hijri(day: datetime.date) -> str:
    return str(to_hijri(day))
