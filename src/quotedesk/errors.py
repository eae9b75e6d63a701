"""Error types raised by the quoting core."""
from __future__ import annotations


class QuoteDeskError(Exception):
    """Base class for errors surfaced to the presentation layer."""


class ValidationError(QuoteDeskError):
    """A required field is missing; nothing was written."""


class NotFoundError(QuoteDeskError, KeyError):
    """No record exists for the requested identifier."""

    def __init__(self, record_id: str) -> None:
        super().__init__(f"No record with id {record_id!r}")
        self.record_id = record_id

    def __str__(self) -> str:
        return self.args[0]


class StorageUnavailableError(QuoteDeskError):
    """The record store could not be read or written."""


__all__ = ["QuoteDeskError", "ValidationError", "NotFoundError", "StorageUnavailableError"]
