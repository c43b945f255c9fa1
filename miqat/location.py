"""Location detection using IP geolocation, preset regions and manual config."""

import json
import logging
import os

import pytz
import requests
from tzlocal import get_localzone_name

from .config import CONFIG_DIR
from .errors import InvalidCoordinateError, LocationError
from .models import GeoCoordinate

logger = logging.getLogger(__name__)

DEFAULT_LOCATION = {
    "city": "Central Jakarta",
    "region": "Jakarta",
    "country": "Indonesia",
    "lat": -6.2088,
    "lon": 106.8456,
    "timezone": "Asia/Jakarta",
}

IPAPI_URL = "http://ip-api.com/json/"

CONFIG_FILE = os.path.join(CONFIG_DIR, "location.json")

# country -> region -> (latitude, longitude, sub-districts); first entry is the default
PRESETS = {
    "Indonesia": {
        "Jakarta": (-6.2088, 106.8456, ["Central Jakarta", "South Jakarta", "East Jakarta", "West Jakarta"]),
        "Bali": (-8.6705, 115.2126, ["Denpasar", "Ubud", "Kuta", "Seminyak"]),
        "Surabaya": (-7.2575, 112.7521, ["Central Surabaya", "North Surabaya", "East Surabaya", "South Surabaya"]),
        "Bandung": (-6.9175, 107.6191, ["Bandung City", "North Bandung", "South Bandung", "East Bandung"]),
    },
    "Malaysia": {
        "Kuala Lumpur": (3.139, 101.6869, ["KLCC", "Bukit Bintang", "Chow Kit", "Bangsar"]),
        "Penang": (5.4141, 100.3288, ["Georgetown", "Bayan Lepas", "Butterworth", "Balik Pulau"]),
    },
    "Saudi Arabia": {
        "Makkah": (21.4225, 39.8262, ["Al Haram", "Aziziyah", "Rusaifah", "Misfalah"]),
        "Madinah": (24.4672, 39.6111, ["Al Masjid an Nabawi", "Quba", "Al Arid", "Al Awali"]),
    },
    "United Arab Emirates": {
        "Dubai": (25.2048, 55.2708, ["Downtown", "Jumeirah", "Deira", "Al Barsha"]),
    },
    "Turkey": {
        "Istanbul": (41.0082, 28.9784, ["Fatih", "Beyoglu", "Kadikoy", "Uskudar"]),
    },
    "United States": {
        "New York": (40.7128, -74.006, ["Manhattan", "Brooklyn", "Queens", "Bronx"]),
    },
    "United Kingdom": {
        "London": (51.5074, -0.1278, ["Westminster", "Camden", "Kensington", "Hackney"]),
    },
}

TIMEZONE_LOCATIONS = {
    "Asia/Jakarta": ("Indonesia", "Jakarta"),
    "Asia/Makassar": ("Indonesia", "Makassar"),
    "Asia/Kuala_Lumpur": ("Malaysia", "Kuala Lumpur"),
    "Asia/Riyadh": ("Saudi Arabia", "Riyadh"),
    "Asia/Dubai": ("United Arab Emirates", "Dubai"),
    "Europe/Istanbul": ("Turkey", "Istanbul"),
    "Asia/Istanbul": ("Turkey", "Istanbul"),
    "America/New_York": ("United States", "New York"),
    "Europe/London": ("United Kingdom", "London"),
}

# Cities reachable from a timezone but without sub-district presets
_TIMEZONE_COORDS = {
    ("Indonesia", "Makassar"): (-5.1477, 119.4327),
    ("Saudi Arabia", "Riyadh"): (24.7136, 46.6753),
}


def preset_location(country: str, region: str | None = None) -> dict:
    """
    Look up a preset region. Without ``region`` the country's first region is used.

    Raises LocationError for unknown countries or regions.
    """
    regions = PRESETS.get(country)
    if not regions:
        raise LocationError(f"No presets for country: {country}")
    if region is None:
        region = next(iter(regions))
    if region not in regions:
        raise LocationError(f"No preset for region {region!r} in {country}")
    lat, lon, sub_districts = regions[region]
    return {
        "city": sub_districts[0],
        "region": region,
        "country": country,
        "lat": lat,
        "lon": lon,
        "timezone": None,
        "sub_districts": list(sub_districts),
    }


def location_for_timezone(tz_name: str) -> dict | None:
    """Approximate location for a known IANA timezone name, else None."""
    match = TIMEZONE_LOCATIONS.get(tz_name)
    if match is None:
        return None
    country, region = match
    if (country, region) in _TIMEZONE_COORDS:
        lat, lon = _TIMEZONE_COORDS[(country, region)]
        location = {"city": region, "region": region, "country": country, "lat": lat, "lon": lon}
    else:
        location = preset_location(country, region)
        location.pop("sub_districts")
    location["timezone"] = tz_name
    return location


def coordinates(location: dict) -> GeoCoordinate:
    """Validated coordinates of a location dict."""
    try:
        return GeoCoordinate(location["lat"], location["lon"])
    except KeyError as exc:
        raise LocationError(f"Location is missing {exc.args[0]!r}") from exc


def system_timezone() -> str | None:
    """IANA name of the host's timezone, or None when it cannot be determined."""
    try:
        tz_name = get_localzone_name()
        pytz.timezone(tz_name)
    except (LookupError, ValueError, OSError, TypeError) as exc:
        logger.debug("System timezone unavailable: %s", exc)
        return None
    return tz_name


def fallback_location() -> dict:
    """Location guessed from the host's timezone, else DEFAULT_LOCATION."""
    tz_name = system_timezone()
    location = location_for_timezone(tz_name) if tz_name else None
    if location is not None:
        logger.info("Using %s from system timezone %s", location["city"], tz_name)
        return location
    return dict(DEFAULT_LOCATION)


def get_location(timeout: int = 5) -> dict:
    """
    Detect current location via IP geolocation.

    Returns a dict with: city, region, country, lat, lon, timezone.
    On failure the host's timezone picks a known city, else DEFAULT_LOCATION.
    """
    try:
        resp = requests.get(
            IPAPI_URL,
            params={"fields": "city,regionName,country,lat,lon,timezone,status,message"},
            timeout=timeout,
        )
        resp.raise_for_status()
        data = resp.json()
        if data.get("status") == "success":
            return {
                "city": data.get("city", DEFAULT_LOCATION["city"]),
                "region": data.get("regionName", DEFAULT_LOCATION["region"]),
                "country": data.get("country", DEFAULT_LOCATION["country"]),
                "lat": float(data.get("lat", DEFAULT_LOCATION["lat"])),
                "lon": float(data.get("lon", DEFAULT_LOCATION["lon"])),
                "timezone": data.get("timezone", DEFAULT_LOCATION["timezone"]),
            }
        logger.warning("IP geolocation failed: %s", data.get("message", "unknown error"))
    except (requests.RequestException, TypeError, ValueError) as exc:
        logger.warning("IP geolocation unavailable: %s", exc)
    return fallback_location()


def save_manual_location(location: dict) -> None:
    """Save a manually-set location to the config file."""
    coordinates(location)
    os.makedirs(CONFIG_DIR, exist_ok=True)
    with open(CONFIG_FILE, "w", encoding="utf-8") as f:
        json.dump(location, f, indent=2)


def load_manual_location() -> dict | None:
    """Load a previously saved manual location, or return None."""
    if not os.path.isfile(CONFIG_FILE):
        return None
    try:
        with open(CONFIG_FILE, "r", encoding="utf-8") as f:
            data = json.load(f)
    except (OSError, ValueError) as exc:
        logger.warning("Ignoring unreadable location file %s: %s", CONFIG_FILE, exc)
        return None
    required = ("city", "region", "country", "lat", "lon", "timezone")
    if not isinstance(data, dict) or not all(k in data for k in required):
        logger.warning("Ignoring incomplete location file %s", CONFIG_FILE)
        return None
    try:
        coordinates(data)
    except InvalidCoordinateError as exc:
        logger.warning("Ignoring saved location: %s", exc)
        return None
    return data


def clear_manual_location() -> None:
    """Remove the saved manual location config."""
    if os.path.isfile(CONFIG_FILE):
        os.remove(CONFIG_FILE)


def current_location(timeout: int = 5) -> dict:
    """Saved manual location if there is one, otherwise IP detection."""
    return load_manual_location() or get_location(timeout=timeout)
