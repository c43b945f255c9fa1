"""Exceptions raised by miqat."""


class MiqatError(Exception):
    """Base class for every error raised by this package."""


class InvalidCoordinateError(MiqatError, ValueError):
    """Latitude out of range, or a coordinate that is not a finite number."""


class UnknownMethodError(MiqatError, KeyError):
    """Calculation method id or key not in the catalogue."""

    def __str__(self):
        return str(self.args[0]) if self.args else "unknown calculation method"


class UndefinedTimeError(MiqatError, ArithmeticError):
    """The sun never reaches the requested altitude on that date at that latitude."""


class ConfigError(MiqatError, ValueError):
    """A stored or supplied preference has an invalid value."""


class LocationError(MiqatError):
    """A location could not be resolved."""
