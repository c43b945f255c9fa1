"""Desktop notifications for upcoming prayer times."""

import datetime
import logging
import threading

try:
    from plyer import notification as plyer_notification
    _PLYER_AVAILABLE = True
except ImportError:
    _PLYER_AVAILABLE = False

from .models import PRAYER_DISPLAY, PrayerSchedule
from .schedule import prayer_datetime, seconds_until

logger = logging.getLogger(__name__)

APP_NAME = "Miqat"
APP_ICON = ""  # Path to icon file; empty = default
DEFAULT_REMINDERS = (10, 5)


def _send_plyer(title: str, message: str, timeout: int = 10) -> None:
    """Send a desktop notification via plyer (cross-platform)."""
    if not _PLYER_AVAILABLE:
        logger.debug("plyer not installed; skipping notification %r", title)
        return
    kwargs = dict(
        app_name=APP_NAME,
        title=title,
        message=message,
        timeout=timeout,
    )
    if APP_ICON:
        kwargs["app_icon"] = APP_ICON
    try:
        plyer_notification.notify(**kwargs)
    except Exception:
        # Runs on a timer thread
        logger.exception("Desktop notification failed")


def notify_reminder(prayer_display_name: str, minutes: int, callback=None) -> None:
    """Warn that ``prayer_display_name`` starts in ``minutes`` minutes."""
    title = f"{minutes} min to {prayer_display_name}"
    message = f"{prayer_display_name} begins in {minutes} minutes."
    _send_plyer(title, message, timeout=15)
    if callback:
        callback(title, message)


def notify_prayer_time(prayer_display_name: str, callback=None) -> None:
    """Announce that the time of ``prayer_display_name`` has begun."""
    title = f"{prayer_display_name} has begun"
    message = f"The time for {prayer_display_name} has started."
    _send_plyer(title, message, timeout=30)
    if callback:
        callback(title, message)


def _start_timer(delay: float, func, args) -> threading.Timer:
    timer = threading.Timer(delay, func, args=args)
    timer.daemon = True
    timer.start()
    return timer


def schedule_reminders(
    prayer_name: str,
    prayer_display_name: str,
    seconds_until_prayer: int,
    gui_callback=None,
    reminder_minutes=DEFAULT_REMINDERS,
) -> list:
    """
    Start one daemon timer per lead time in ``reminder_minutes`` plus one at
    the prayer itself. Lead times that have already passed are skipped.

    Returns the started timers so the caller can cancel them.
    """
    if seconds_until_prayer <= 0:
        return []
    timers = [
        _start_timer(
            seconds_until_prayer - lead * 60,
            notify_reminder,
            (prayer_display_name, lead, gui_callback),
        )
        for lead in reminder_minutes
        if seconds_until_prayer - lead * 60 > 0
    ]
    timers.append(
        _start_timer(seconds_until_prayer, notify_prayer_time, (prayer_display_name, gui_callback))
    )
    logger.debug("Scheduled %d notification(s) for %s", len(timers), prayer_name)
    return timers


def schedule_reminders_for(
    schedule: PrayerSchedule,
    now: datetime.datetime,
    gui_callback=None,
    reminder_minutes=DEFAULT_REMINDERS,
) -> list:
    """
    Schedule notifications for every prayer of ``schedule`` still ahead of ``now``.

    Sunrise and prayers without a valid time are skipped. The schedule's
    clock times are read in ``now``'s timezone.
    """
    timers = []
    for entry in schedule:
        if entry.name == "Sunrise" or entry.undefined:
            continue
        prayer_dt = prayer_datetime(entry, schedule.date, now.tzinfo)
        secs = seconds_until(prayer_dt, now)
        if secs > 0:
            timers.extend(
                schedule_reminders(
                    entry.name,
                    PRAYER_DISPLAY[entry.name],
                    secs,
                    gui_callback=gui_callback,
                    reminder_minutes=reminder_minutes,
                )
            )
    return timers


def cancel_all(timers: list) -> None:
    for t in timers:
        t.cancel()
    timers.clear()
