"""Exceptions raised by the catalog and progress store."""


class DataError(Exception):
    """Base exception for the data layer."""


class DataLoadError(DataError):
    """Raised when a catalog or store file is missing or not valid JSON."""


class DataValidationError(DataError):
    """Raised when the quest catalog has the wrong top-level shape."""


class DataReferenceError(DataError):
    """Raised when a lookup references a user the store does not hold."""


class ProgressStoreError(DataError):
    """Raised when a progress snapshot cannot be written."""
