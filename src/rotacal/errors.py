"""Fehlertypen des Rotationskalenders.

All validation failures of the core derive from RotationError, which is a
ValueError so callers that already catch ValueError keep working.
"""


class RotationError(ValueError):
    """Base class for invalid input to the rotation calendar."""


class RotationConfigError(RotationError):
    """Unknown pattern, missing or invalid day counts, invalid month count."""


class StartDateError(RotationError):
    """Start date that cannot be turned into a calendar date."""


class ScheduleFormatError(RotationError):
    """Saved schedule record that cannot be decoded."""
