"""Command line interface: daily and monthly tables, qibla, and preferences."""

import argparse
import datetime
import logging
import sys
import time

import pytz

from . import config, location
from .calc import compute_prayer_times
from .errors import ConfigError, MiqatError
from .hijri import format_hijri
from .methods import ASR_FACTORS, METHODS
from .models import PRAYER_ARABIC, PRAYER_NAMES
from .notifier import schedule_reminders_for
from .qibla import qibla_reading
from .schedule import compute_monthly_schedule, format_countdown, next_prayer, seconds_until
from .tz import estimate_timezone_offset, resolve_offset

logger = logging.getLogger(__name__)


def _parse_date(text: str) -> datetime.date:
    try:
        return datetime.datetime.strptime(text, "%Y-%m-%d").date()
    except ValueError:
        raise argparse.ArgumentTypeError(f"invalid date {text!r}, expected YYYY-MM-DD") from None


def _resolve_place(args) -> dict:
    if args.lat is not None and args.lon is not None:
        place = {
            "city": "Custom",
            "region": "",
            "country": "",
            "lat": args.lat,
            "lon": args.lon,
            "timezone": None,
        }
    elif args.lat is not None or args.lon is not None:
        raise MiqatError("--lat and --lon must be given together")
    else:
        place = location.current_location()
    location.coordinates(place)
    return place


def _timezone_name(args, settings, place):
    return args.tz or place.get("timezone") or settings.get("timezone")


def _offset_for(day, args, settings, place) -> float:
    if args.offset is not None:
        return args.offset
    return resolve_offset(day, place["lon"], place["lat"], _timezone_name(args, settings, place))


def _clock_zone(args, settings, place) -> datetime.tzinfo:
    """The zone the printed clock times are in, so "now" is read the same way."""
    if args.offset is not None:
        offset = args.offset
    else:
        name = _timezone_name(args, settings, place)
        if name:
            try:
                return pytz.timezone(name)
            except pytz.UnknownTimeZoneError:
                logger.warning("Unknown timezone %r, estimating offset from longitude", name)
        today = datetime.datetime.now(datetime.timezone.utc).date()
        offset = estimate_timezone_offset(place["lon"], today, place["lat"])
    return datetime.timezone(datetime.timedelta(hours=offset))


def _now(args, settings, place) -> datetime.datetime:
    return datetime.datetime.now(_clock_zone(args, settings, place))


def _calc_kwargs(args, settings) -> dict:
    return {
        "method": args.method if args.method is not None else config.method_from_settings(settings),
        "adjustments": config.adjustments_from_settings(settings),
        "asr_factor": args.asr if args.asr is not None else settings.get("asr_factor", 1),
    }


def _daily(day, args, settings, place):
    return compute_prayer_times(
        day,
        place["lat"],
        place["lon"],
        _offset_for(day, args, settings, place),
        **_calc_kwargs(args, settings),
    )


def _label(place) -> str:
    parts = [place.get(k) for k in ("city", "region", "country")]
    return ", ".join(p for p in parts if p) or f"{place['lat']}, {place['lon']}"


def cmd_today(args, settings) -> int:
    place = _resolve_place(args)
    day = args.date or _now(args, settings, place).date()
    schedule = _daily(day, args, settings, place)
    print(f"{_label(place)}  {day:%A, %d %B %Y}  ({format_hijri(day)})")
    for entry in schedule:
        print(f"  {entry.name:<8} {entry.time or '--:--'}  {PRAYER_ARABIC[entry.name]}")
    if schedule.undefined:
        print(f"  No valid time on this date for: {', '.join(schedule.undefined)}")
    return 0


def cmd_month(args, settings) -> int:
    place = _resolve_place(args)
    today = _now(args, settings, place).date()
    year = args.year or today.year
    month = args.month or today.month
    reference = datetime.date(year, month, 1)
    monthly = compute_monthly_schedule(
        year,
        month,
        place["lat"],
        place["lon"],
        _offset_for(reference, args, settings, place),
        **_calc_kwargs(args, settings),
    )
    print(f"{_label(place)}  {reference:%B %Y}")
    print("Date  " + " ".join(f"{name:>7}" for name in PRAYER_NAMES))
    for schedule in monthly:
        cells = " ".join(f"{entry.time or '--:--':>7}" for entry in schedule)
        print(f"{schedule.date.day:>4}  {cells}")
    return 0


def cmd_next(args, settings) -> int:
    place = _resolve_place(args)
    now = _now(args, settings, place)
    today = _daily(now.date(), args, settings, place)
    tomorrow = _daily(now.date() + datetime.timedelta(days=1), args, settings, place)
    name, when = next_prayer(today, now, tomorrow)
    if name is None:
        print("No upcoming prayer time could be computed.")
        return 0
    print(f"{name} {when:%H:%M} - {format_countdown(seconds_until(when, now))}")
    return 0


def cmd_qibla(args, settings) -> int:
    place = _resolve_place(args)
    reading = qibla_reading(place["lat"], place["lon"], args.heading)
    print(f"Qibla bearing: {reading.bearing:.1f}° from true north")
    if reading.pointer is not None:
        print(f"Turn {reading.pointer:.1f}° clockwise from where the device points")
    elif args.heading is not None:
        print("Compass heading unavailable; showing the absolute bearing only")
    return 0


def cmd_methods(args, settings) -> int:
    current = settings.get("method")
    for method_id, method in METHODS.items():
        marker = "*" if method_id == current else " "
        print(f"{marker} {method_id} {method.key:<9} {method.name} ({method.description})")
    return 0


def cmd_hijri(args, settings) -> int:
    print(format_hijri(args.date or datetime.date.today()))
    return 0


def cmd_notify(args, settings) -> int:
    """Schedule today's reminders and block until the last one has fired."""
    if not settings.get("notifications"):
        print(
            "Notifications are off; enable them with 'miqat config --notifications on'.",
            file=sys.stderr,
        )
        return 1
    place = _resolve_place(args)
    now = _now(args, settings, place)
    schedule = _daily(now.date(), args, settings, place)

    def _echo(title, message):
        print(f"{title}: {message}", flush=True)

    timers = schedule_reminders_for(
        schedule, now, gui_callback=_echo, reminder_minutes=settings.get("reminder_minutes", (10, 5))
    )
    if not timers:
        print("No prayers left today.")
        return 0
    print(f"{len(timers)} notification(s) scheduled for {_label(place)}.")
    try:
        while any(t.is_alive() for t in timers):
            time.sleep(1)
    except KeyboardInterrupt:
        for t in timers:
            t.cancel()
    return 0


def cmd_config(args, settings) -> int:
    changed = False
    if args.set_method is not None:
        settings["method"] = args.set_method
        changed = True
    if args.set_asr is not None:
        settings["asr_factor"] = args.set_asr
        changed = True
    if args.set_tz is not None:
        if args.set_tz:
            try:
                pytz.timezone(args.set_tz)
            except pytz.UnknownTimeZoneError:
                raise ConfigError(f"Unknown timezone: {args.set_tz}") from None
        settings["timezone"] = args.set_tz or None
        changed = True
    if args.set_offset:
        prayer, minutes = args.set_offset
        settings["adjustments"][prayer.lower()] = minutes
        changed = True
    if args.notifications is not None:
        settings["notifications"] = args.notifications == "on"
        changed = True
    if changed:
        config.save_settings(settings)
        settings = config.load_settings()
    for key, value in settings.items():
        print(f"{key}: {value}")
    return 0


def cmd_location(args, settings) -> int:
    if args.clear:
        location.clear_manual_location()
        print("Saved location cleared; IP detection will be used.")
        return 0
    if args.country:
        place = location.preset_location(args.country, args.region)
        place.pop("sub_districts")
        place["timezone"] = args.tz
    elif args.lat is not None and args.lon is not None:
        place = {
            "city": args.name or "Custom",
            "region": "",
            "country": "",
            "lat": args.lat,
            "lon": args.lon,
            "timezone": args.tz,
        }
    else:
        place = location.current_location()
        print(f"{_label(place)} ({place['lat']}, {place['lon']}) [{place.get('timezone') or 'no timezone'}]")
        return 0
    location.save_manual_location(place)
    print(f"Location set to {_label(place)} ({place['lat']}, {place['lon']})")
    return 0


def build_arg_parser():
    parser = argparse.ArgumentParser(prog="miqat", description="Prayer times and qibla direction")
    parser.add_argument("-v", "--verbose", action="store_true", help="Debug logging")
    parser.add_argument("--lat", type=float, help="Latitude (with --lon); default: saved or detected location")
    parser.add_argument("--lon", type=float, help="Longitude (with --lat)")
    parser.add_argument("--tz", help="IANA time zone, e.g. Asia/Jakarta")
    parser.add_argument("--offset", type=float, help="UTC offset in hours; overrides --tz")
    parser.add_argument("--method", help="Calculation method id or key (see 'methods')")
    parser.add_argument("--asr", choices=sorted(ASR_FACTORS), help="Asr juristic method")
    sub = parser.add_subparsers(dest="command")

    p = sub.add_parser("today", help="Prayer times for one day")
    p.add_argument("--date", type=_parse_date, help="YYYY-MM-DD (default: today)")
    p.set_defaults(func=cmd_today)

    p = sub.add_parser("month", help="Prayer times for every day of a month")
    p.add_argument("--year", type=int)
    p.add_argument("--month", type=int, choices=range(1, 13), metavar="1-12")
    p.set_defaults(func=cmd_month)

    p = sub.add_parser("next", help="Next prayer and countdown")
    p.set_defaults(func=cmd_next)

    p = sub.add_parser("qibla", help="Direction of the qibla")
    p.add_argument("--heading", type=float, help="Compass heading of the device in degrees")
    p.set_defaults(func=cmd_qibla)

    p = sub.add_parser("methods", help="List calculation methods")
    p.set_defaults(func=cmd_methods)

    p = sub.add_parser("hijri", help="Tabular Hijri date")
    p.add_argument("--date", type=_parse_date, help="YYYY-MM-DD (default: today)")
    p.set_defaults(func=cmd_hijri)

    p = sub.add_parser("notify", help="Desktop reminders for the rest of today")
    p.set_defaults(func=cmd_notify)

    p = sub.add_parser("config", help="Show or change saved preferences")
    p.add_argument("--set-method", help="Calculation method id or key")
    p.add_argument("--set-asr", choices=sorted(ASR_FACTORS))
    p.add_argument("--set-tz", help="IANA time zone ('' to clear)")
    p.add_argument("--set-offset", nargs=2, metavar=("PRAYER", "MIN"), help="Per-prayer adjustment in minutes")
    p.add_argument("--notifications", choices=["on", "off"])
    p.set_defaults(func=cmd_config)

    p = sub.add_parser("location", help="Show or save the location")
    p.add_argument("--country", choices=sorted(location.PRESETS))
    p.add_argument("--region")
    p.add_argument("--name", help="Label for --lat/--lon")
    p.add_argument("--clear", action="store_true", help="Forget the saved location")
    p.set_defaults(func=cmd_location)
    return parser


def main(argv=None):
    parser = build_arg_parser()
    args = parser.parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    func = getattr(args, "func", cmd_today)
    if not hasattr(args, "date"):
        args.date = None

    try:
        settings = config.load_settings()
        return func(args, settings)
    except (MiqatError, ValueError) as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main())
