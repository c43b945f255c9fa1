"""Catalogue of the supported calculation methods and Asr shadow factors."""

from .errors import UnknownMethodError
from .models import CalculationMethod

METHODS = {
    1: CalculationMethod(1, "MWL", "Muslim World League", fajr_angle=18, isha_angle=17),
    2: CalculationMethod(2, "Egyptian", "Egyptian General Authority", fajr_angle=19.5, isha_angle=17.5),
    3: CalculationMethod(3, "Kemenag", "Indonesian Ministry of Religious Affairs", fajr_angle=20, isha_angle=18),
    4: CalculationMethod(4, "Makkah", "Umm al-Qura University, Makkah", fajr_angle=18.5, isha_minutes=90),
    5: CalculationMethod(5, "Karachi", "University of Islamic Sciences, Karachi", fajr_angle=18, isha_angle=18),
    6: CalculationMethod(6, "ISNA", "Islamic Society of North America", fajr_angle=15, isha_angle=15),
    7: CalculationMethod(7, "UOIF", "Union des Organisations Islamiques de France", fajr_angle=12, isha_angle=12),
}

DEFAULT_METHOD = 3

# Shadow length multiplier at Asr
ASR_FACTORS = {"standard": 1, "shafi": 1, "maliki": 1, "hanbali": 1, "hanafi": 2}


def get_method(method) -> CalculationMethod:
    """
    Resolve a method given as a CalculationMethod, a catalogue id (int or
    numeric string) or a key such as "MWL" (case-insensitive).
    """
    if isinstance(method, CalculationMethod):
        return method
    if isinstance(method, bool):
        raise UnknownMethodError(f"Unknown method: {method!r}")
    if isinstance(method, int):
        if method in METHODS:
            return METHODS[method]
        raise UnknownMethodError(f"Unknown method: {method}")
    if isinstance(method, str):
        text = method.strip()
        if text.isdigit():
            return get_method(int(text))
        for candidate in METHODS.values():
            if candidate.key.lower() == text.lower():
                return candidate
    raise UnknownMethodError(f"Unknown method: {method!r}")


def resolve_asr_factor(asr) -> float:
    """Accept a school name from ASR_FACTORS or a positive number."""
    if isinstance(asr, str):
        key = asr.strip().lower()
        if key in ASR_FACTORS:
            return float(ASR_FACTORS[key])
        try:
            asr = float(key)
        except ValueError:
            raise ValueError(f"Unknown Asr method: {asr}") from None
    factor = float(asr)
    if not factor > 0:
        raise ValueError(f"Asr shadow factor must be positive, got {asr}")
    return factor
