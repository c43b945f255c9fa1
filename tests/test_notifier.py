"""Tests for the notifier module."""

import datetime
import unittest
from unittest.mock import MagicMock, patch

import pytz

from miqat.calc import compute_prayer_times
from miqat.notifier import (
    _send_plyer,
    cancel_all,
    notify_prayer_time,
    notify_reminder,
    schedule_reminders,
    schedule_reminders_for,
)


@patch("miqat.notifier._send_plyer")
class TestMessages(unittest.TestCase):
    def test_reminder_names_prayer_and_lead_time(self, mock_plyer):
        notify_reminder("Subuh / Fajr", 10)
        title, message = mock_plyer.call_args[0][:2]
        self.assertEqual(title, "10 min to Subuh / Fajr")
        self.assertIn("begins in 10 minutes", message)
        self.assertEqual(mock_plyer.call_args[1]["timeout"], 15)

    def test_prayer_time_announcement(self, mock_plyer):
        notify_prayer_time("Maghrib")
        title, message = mock_plyer.call_args[0][:2]
        self.assertEqual(title, "Maghrib has begun")
        self.assertIn("Maghrib", message)

    def test_callback_receives_same_text(self, mock_plyer):
        seen = []
        notify_reminder("Isya / Isha", 5, callback=lambda t, m: seen.append((t, m)))
        notify_prayer_time("Isya / Isha", callback=lambda t, m: seen.append((t, m)))
        self.assertEqual(seen, [tuple(c[0][:2]) for c in mock_plyer.call_args_list])


class TestSendPlyer(unittest.TestCase):
    @patch("miqat.notifier._PLYER_AVAILABLE", True)
    @patch("miqat.notifier.plyer_notification", create=True)
    def test_backend_failure_is_logged(self, mock_notification):
        mock_notification.notify.side_effect = NotImplementedError("no backend")
        with self.assertLogs("miqat.notifier", level="ERROR"):
            _send_plyer("title", "message")

    @patch("miqat.notifier._PLYER_AVAILABLE", False)
    def test_skipped_without_plyer(self):
        with self.assertLogs("miqat.notifier", level="DEBUG") as logs:
            _send_plyer("title", "message")
        self.assertIn("plyer not installed", logs.output[0])


@patch("miqat.notifier.threading.Timer")
class TestScheduleReminders(unittest.TestCase):
    def _delays(self, mock_timer_cls):
        return sorted(c[0][0] for c in mock_timer_cls.call_args_list)

    def test_nothing_for_past_prayer(self, mock_timer_cls):
        self.assertEqual(schedule_reminders("Fajr", "Subuh / Fajr", -100), [])
        mock_timer_cls.assert_not_called()

    def test_lead_times_already_passed_are_skipped(self, mock_timer_cls):
        timers = schedule_reminders("Fajr", "Subuh / Fajr", 200)
        self.assertEqual(len(timers), 1)
        self.assertEqual(self._delays(mock_timer_cls), [200])

    def test_default_lead_times(self, mock_timer_cls):
        timers = schedule_reminders("Maghrib", "Maghrib", 700)
        self.assertEqual(len(timers), 3)
        self.assertEqual(self._delays(mock_timer_cls), [100, 400, 700])
        self.assertEqual(mock_timer_cls.return_value.start.call_count, 3)
        self.assertTrue(mock_timer_cls.return_value.daemon)

    def test_custom_lead_times(self, mock_timer_cls):
        timers = schedule_reminders("Isha", "Isya / Isha", 3600, reminder_minutes=(30,))
        self.assertEqual(len(timers), 2)
        self.assertEqual(self._delays(mock_timer_cls), [1800, 3600])


class TestScheduleRemindersFor(unittest.TestCase):
    def setUp(self):
        self.tz = pytz.timezone("Asia/Jakarta")
        self.schedule = compute_prayer_times(datetime.date(2024, 3, 15), -6.2088, 106.8456, 7)

    def test_only_remaining_prayers(self):
        # 16:00, so only Maghrib (17:53) and Isha (19:06) remain
        now = self.tz.localize(datetime.datetime(2024, 3, 15, 16, 0))
        with patch("miqat.notifier.schedule_reminders") as mock_schedule:
            mock_schedule.return_value = [MagicMock()]
            timers = schedule_reminders_for(self.schedule, now)
        self.assertEqual(len(timers), 2)
        names = [call[0][0] for call in mock_schedule.call_args_list]
        self.assertEqual(names, ["Maghrib", "Isha"])
        self.assertEqual(mock_schedule.call_args_list[0][0][1], "Maghrib")
        self.assertEqual(mock_schedule.call_args_list[0][0][2], (17 * 60 + 53 - 16 * 60) * 60)

    def test_sunrise_never_notified(self):
        now = self.tz.localize(datetime.datetime(2024, 3, 15, 5, 0))
        with patch("miqat.notifier.schedule_reminders") as mock_schedule:
            mock_schedule.return_value = []
            schedule_reminders_for(self.schedule, now)
        names = [call[0][0] for call in mock_schedule.call_args_list]
        self.assertNotIn("Sunrise", names)
        self.assertEqual(names, ["Dhuhr", "Asr", "Maghrib", "Isha"])


class TestCancelAll(unittest.TestCase):
    def test_cancels_and_clears(self):
        timers = [MagicMock(), MagicMock()]
        originals = list(timers)
        cancel_all(timers)
        self.assertEqual(timers, [])
        for t in originals:
            t.cancel.assert_called_once()


if __name__ == "__main__":
    unittest.main()
