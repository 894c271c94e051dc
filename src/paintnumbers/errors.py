"""
Error types for Paint Numbers.

The core pipeline is pure array math, so the taxonomy is narrow: bad input
dimensions and unusable configuration values.
"""


class PaintByNumbersError(Exception):
    """Base class for all Paint Numbers errors."""


class InvalidInputError(PaintByNumbersError, ValueError):
    """Raised when an image cannot be processed (zero area or malformed buffer)."""


class ConfigError(PaintByNumbersError, ValueError):
    """Raised when configuration values cannot produce a template."""
