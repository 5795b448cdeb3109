"""Data layer utilities for loading JSON definitions and progress snapshots."""

from .errors import (
    DataError,
    DataLoadError,
    DataReferenceError,
    DataValidationError,
    ProgressStoreError,
)
from .paths import get_definitions_path, get_repo_root

__all__ = [
    "DataError",
    "DataLoadError",
    "DataReferenceError",
    "DataValidationError",
    "ProgressStoreError",
    "get_definitions_path",
    "get_repo_root",
]
