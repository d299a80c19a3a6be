"""Error taxonomy for the date engine.

Constructors and calendar helpers raise these. The text parsers and the
pattern codec catch them and return None; the ``require_*`` helpers in
workflows raise them for callers that want a message.
"""


class DatewiseError(ValueError):
    """Base class for recoverable engine errors."""


class ParseFailure(DatewiseError):
    """Text does not match any recognized date or time form."""


class InvalidPattern(DatewiseError):
    """Corrupt or unsupported recurrence pattern."""


class OutOfRange(DatewiseError):
    """Calendar construction would overflow (e.g. month 14)."""
