from __future__ import annotations

from enum import IntEnum


class ExitStatus(IntEnum):
    OK = 0
    USAGE = 2
    CATALOG_READ = 3
    INSUFFICIENT_REFERENCES = 4
    TABLE_WRITE = 5


class Cat2AxyError(Exception):
    """Base class for every failure that ends a cat2axy run."""

    exit_status: ExitStatus = ExitStatus.USAGE


class UsageError(Cat2AxyError):
    exit_status = ExitStatus.USAGE


class CatalogReadError(Cat2AxyError, OSError):
    exit_status = ExitStatus.CATALOG_READ


class InsufficientReferences(Cat2AxyError):
    exit_status = ExitStatus.INSUFFICIENT_REFERENCES

    def __init__(self, found: int, required: int) -> None:
        super().__init__(f"not enough reference stars ({found} found, {required} required)")
        self.found = found
        self.required = required


class TableWriteError(Cat2AxyError, OSError):
    exit_status = ExitStatus.TABLE_WRITE
