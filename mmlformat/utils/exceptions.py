"""
Exception classes raised by the MML formatter.
"""


class MMLError(Exception):
    """Base class for all formatter errors."""
    pass


class ConfigError(MMLError):
    """A dialect document is malformed or cannot be loaded."""
    pass


class ConversionError(MMLError):
    """A source file could not be read or its output could not be written."""
    pass
