"""User preferences stored as JSON in the user's home directory."""

import copy
import json
import logging
import os

from .errors import ConfigError, UnknownMethodError
from .methods import DEFAULT_METHOD, get_method, resolve_asr_factor
from .models import PRAYER_NAMES, AdjustmentSet, CalculationMethod

logger = logging.getLogger(__name__)

CONFIG_DIR = os.path.join(os.path.expanduser("~"), ".miqat")
SETTINGS_FILE = os.path.join(CONFIG_DIR, "settings.json")

DEFAULT_SETTINGS = {
    "method": DEFAULT_METHOD,
    "asr_factor": 1,
    "adjustments": {name.lower(): 0 for name in PRAYER_NAMES},
    "timezone": None,
    "notifications": False,
    "reminder_minutes": [10, 5],
}


def load_settings() -> dict:
    """
    Load preferences, filling anything missing from DEFAULT_SETTINGS.

    A missing or unreadable file yields the defaults.
    """
    settings = copy.deepcopy(DEFAULT_SETTINGS)
    path = SETTINGS_FILE
    if not os.path.isfile(path):
        return settings
    try:
        with open(path, "r", encoding="utf-8") as f:
            data = json.load(f)
    except (OSError, ValueError) as exc:
        logger.warning("Ignoring unreadable settings file %s: %s", path, exc)
        return settings
    if not isinstance(data, dict):
        logger.warning("Ignoring settings file %s: expected a JSON object", path)
        return settings

    for key in DEFAULT_SETTINGS:
        if key not in data:
            continue
        if key == "adjustments":
            if isinstance(data[key], dict):
                settings[key].update(data[key])
            else:
                logger.warning("Ignoring adjustments in %s: expected a JSON object", path)
        else:
            settings[key] = data[key]
    return settings


def validate_settings(settings: dict) -> dict:
    """Return a cleaned copy of ``settings`` or raise ConfigError."""
    cleaned = copy.deepcopy(DEFAULT_SETTINGS)
    try:
        cleaned["method"] = get_method(settings.get("method", DEFAULT_METHOD)).id
    except UnknownMethodError as exc:
        raise ConfigError(str(exc)) from exc
    try:
        cleaned["asr_factor"] = resolve_asr_factor(settings.get("asr_factor", 1))
        cleaned["adjustments"] = AdjustmentSet.from_mapping(settings.get("adjustments")).as_dict()
        cleaned["reminder_minutes"] = sorted(
            {int(m) for m in settings.get("reminder_minutes", DEFAULT_SETTINGS["reminder_minutes"])},
            reverse=True,
        )
    except (TypeError, ValueError) as exc:
        raise ConfigError(str(exc)) from exc
    if any(m <= 0 for m in cleaned["reminder_minutes"]):
        raise ConfigError("Reminder minutes must be positive")
    cleaned["timezone"] = settings.get("timezone") or None
    cleaned["notifications"] = bool(settings.get("notifications", False))
    return cleaned


def save_settings(settings: dict) -> None:
    """Validate and write preferences to the settings file."""
    cleaned = validate_settings(settings)
    os.makedirs(CONFIG_DIR, exist_ok=True)
    path = SETTINGS_FILE
    with open(path, "w", encoding="utf-8") as f:
        json.dump(cleaned, f, indent=2)
    logger.debug("Settings saved to %s", path)


def method_from_settings(settings: dict) -> CalculationMethod:
    try:
        return get_method(settings.get("method", DEFAULT_METHOD))
    except UnknownMethodError as exc:
        raise ConfigError(str(exc)) from exc


def adjustments_from_settings(settings: dict) -> AdjustmentSet:
    try:
        return AdjustmentSet.from_mapping(settings.get("adjustments"))
    except (TypeError, ValueError) as exc:
        raise ConfigError(str(exc)) from exc
