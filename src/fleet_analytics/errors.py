"""Errors raised while normalizing dates and ranges."""


class DateNormalizationError(ValueError):
    """Base class for date normalization failures."""


class InvalidRange(DateNormalizationError):
    """A date range is malformed or its start falls after its end."""


class InvalidInstant(DateNormalizationError):
    """An instant could not be parsed."""
