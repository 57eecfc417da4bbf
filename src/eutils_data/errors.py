"""Exceptions raised by eutils_data.

Only unrecoverable conditions are raised. Structural gaps in a document (no
document summaries, an erroneous link set group, ...) are logged as warnings
and parsing continues with whatever data is usable.
"""


class EUtilsError(Exception):
    """Base class for all package errors."""


class ConfigurationError(EUtilsError, ValueError):
    """A result or data object was configured incorrectly.

    Raised when no (or more than one) input source is configured for a result
    object, or when an unrecognized operation kind is assigned.
    """
