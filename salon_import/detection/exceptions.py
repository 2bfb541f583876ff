class FormatError(Exception):
    """Base exception for input format detection."""


class UnrecognizedFormatError(FormatError):
    """Raised when none of the supported formats can read the input."""
