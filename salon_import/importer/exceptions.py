class ImportBatchError(Exception):
    """Base exception for the import stage."""


class StoreWriteError(ImportBatchError):
    """The destination store rejected a batch write or key lookup."""
