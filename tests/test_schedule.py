"""Tests for month tables and the next-prayer countdown."""

import datetime
import unittest

import pytz

from miqat.calc import compute_prayer_times
from miqat.errors import InvalidCoordinateError
from miqat.schedule import (
    compute_monthly_schedule,
    days_in_month,
    format_countdown,
    next_prayer,
    prayer_datetime,
    seconds_until,
)

JAKARTA = (-6.2088, 106.8456)


class TestMonthlySchedule(unittest.TestCase):
    def test_leap_february(self):
        monthly = compute_monthly_schedule(2024, 2, *JAKARTA, 7)
        self.assertEqual(len(monthly), 29)
        self.assertEqual(sorted(monthly.days), list(range(1, 30)))

    def test_common_february(self):
        self.assertEqual(len(compute_monthly_schedule(2023, 2, *JAKARTA, 7)), 28)

    def test_month_lengths(self):
        self.assertEqual(len(compute_monthly_schedule(2024, 4, *JAKARTA, 7)), 30)
        self.assertEqual(len(compute_monthly_schedule(2024, 12, *JAKARTA, 7)), 31)
        self.assertEqual(days_in_month(1900, 2), 28)
        self.assertEqual(days_in_month(2000, 2), 29)

    def test_each_day_matches_daily_calculation(self):
        monthly = compute_monthly_schedule(2024, 3, *JAKARTA, 7, method=1)
        daily = compute_prayer_times(datetime.date(2024, 3, 15), *JAKARTA, 7, method=1)
        self.assertEqual(monthly[15], daily)
        self.assertEqual(monthly[15].date, datetime.date(2024, 3, 15))

    def test_iterates_in_day_order(self):
        monthly = compute_monthly_schedule(2024, 3, *JAKARTA, 7)
        self.assertEqual([s.date.day for s in monthly], list(range(1, 32)))

    def test_invalid_location_rejected(self):
        with self.assertRaises(InvalidCoordinateError):
            compute_monthly_schedule(2024, 3, -91.0, 106.8, 7)


class TestPrayerDatetime(unittest.TestCase):
    def setUp(self):
        self.day = datetime.date(2024, 3, 15)
        self.schedule = compute_prayer_times(self.day, *JAKARTA, 7)

    def test_naive(self):
        dt = prayer_datetime(self.schedule["Maghrib"], self.day)
        self.assertEqual(dt, datetime.datetime(2024, 3, 15, 17, 53))

    def test_pytz_zone(self):
        tz = pytz.timezone("Asia/Jakarta")
        dt = prayer_datetime(self.schedule["Maghrib"], self.day, tz)
        self.assertEqual(dt.utcoffset(), datetime.timedelta(hours=7))

    def test_undefined_entry(self):
        polar = compute_prayer_times(datetime.date(2024, 6, 20), 69.65, 18.96, 2)
        self.assertIsNone(prayer_datetime(polar["Maghrib"], polar.date))


class TestNextPrayer(unittest.TestCase):
    def setUp(self):
        self.tz = pytz.timezone("Asia/Jakarta")
        self.day = datetime.date(2024, 3, 15)
        self.today = compute_prayer_times(self.day, *JAKARTA, 7)
        self.tomorrow = compute_prayer_times(self.day + datetime.timedelta(days=1), *JAKARTA, 7)

    def _now(self, hour, minute):
        return self.tz.localize(datetime.datetime(2024, 3, 15, hour, minute))

    def test_next_after_dhuhr_is_asr(self):
        name, when = next_prayer(self.today, self._now(12, 30), self.tomorrow)
        self.assertEqual(name, "Asr")
        self.assertEqual((when.hour, when.minute), (15, 0))

    def test_sunrise_skipped_by_default(self):
        name, _ = next_prayer(self.today, self._now(5, 0), self.tomorrow)
        self.assertEqual(name, "Dhuhr")
        name, _ = next_prayer(self.today, self._now(5, 0), self.tomorrow, include_sunrise=True)
        self.assertEqual(name, "Sunrise")

    def test_rolls_over_to_tomorrow(self):
        name, when = next_prayer(self.today, self._now(21, 0), self.tomorrow)
        self.assertEqual(name, "Fajr")
        self.assertEqual(when.date(), datetime.date(2024, 3, 16))

    def test_none_when_day_over_without_tomorrow(self):
        self.assertEqual(next_prayer(self.today, self._now(21, 0)), (None, None))


class TestCountdown(unittest.TestCase):
    def test_seconds_until(self):
        now = datetime.datetime(2024, 3, 15, 12, 0)
        self.assertEqual(seconds_until(datetime.datetime(2024, 3, 15, 13, 30), now), 5400)
        self.assertEqual(seconds_until(datetime.datetime(2024, 3, 15, 11, 0), now), -3600)

    def test_format_countdown(self):
        self.assertEqual(format_countdown(3 * 3600 + 12 * 60 + 59), "3h 12m")
        self.assertEqual(format_countdown(59), "0h 0m")
        self.assertEqual(format_countdown(-30), "0h 0m")


if __name__ == "__main__":
    unittest.main()
