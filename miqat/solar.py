"""Low-order solar ephemeris driven only by the day of the year."""

import datetime
import math

from .angles import dtr, fix_angle
from .models import SolarPosition


def day_of_year(day: datetime.date) -> int:
    """1 for January 1st, 365 or 366 for December 31st."""
    return day.timetuple().tm_yday


def solar_position(day: datetime.date) -> SolarPosition:
    """
    Equation of time and declination for a calendar date.

    Accurate to a few minutes, which is enough for prayer times and nothing
    else. The declination uses a single harmonic of the year.
    """
    d = day_of_year(day)
    g = fix_angle(357.529 + 0.98560028 * d)
    q = fix_angle(280.459 + 0.98564736 * d)
    ecliptic = fix_angle(q + 1.915 * math.sin(dtr(g)) + 0.020 * math.sin(dtr(2 * g)))

    q_rad = dtr(q)
    eqt = 229.8 * (
        0.000075
        + 0.001868 * math.cos(q_rad)
        - 0.032077 * math.sin(q_rad)
        - 0.014615 * math.cos(2 * q_rad)
        - 0.040849 * math.sin(2 * q_rad)
    )
    decl = 0.4093 * math.sin(2 * math.pi * (284 + d) / 365)
    return SolarPosition(equation_of_time=eqt, declination=decl, ecliptic_longitude=ecliptic)
