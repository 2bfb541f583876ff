class ExtractionError(Exception):
    """Raised when one family's rows cannot be read or normalized."""


class MissingNameColumnError(ExtractionError):
    """Raised when no column of a matched table can serve as the record name."""
