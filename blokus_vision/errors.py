"""
Error Taxonomy
==============

Every failure raised by the classification core derives from
``BoardColorError``.  Both kinds abort the current run; nothing is
retried and no partial board is returned.

  • ``InvalidInputError`` – malformed or empty sample data, a grid width
    that does not divide the sample count, an empty ``average`` input.
  • ``ConfigError``       – missing or malformed reference swatch data.
"""


class BoardColorError(ValueError):
    """Base exception for board color classification errors."""


class InvalidInputError(BoardColorError):
    """Raised when caller-supplied samples or grid parameters are invalid."""


class ConfigError(BoardColorError):
    """Raised when the reference swatch table is missing or malformed."""
