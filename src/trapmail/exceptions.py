"""Custom exceptions for trapmail."""

from __future__ import annotations

from pathlib import Path


class TrapmailError(Exception):
    """Base exception for all trapmail errors.

    Args:
        message: Human readable description.
        path: File or directory the failure relates to, if any.
    """

    def __init__(self, message: str, path: Path | None = None) -> None:
        super().__init__(message)
        self.path = path


class StoreError(TrapmailError):
    """Exception raised when a mail cannot be written to the store."""


class SerializationError(TrapmailError):
    """Exception raised when a mail cannot be encoded."""


class DirEnumerationError(TrapmailError):
    """Exception raised when the store directory cannot be listed."""


class LoadError(TrapmailError):
    """Exception raised when a stored mail file cannot be opened."""


class DeserializationError(TrapmailError):
    """Exception raised when stored mail contents cannot be decoded."""


class ClockError(RuntimeError):
    """The system clock reports a time before the UNIX epoch.

    This is an environment fault with no sensible recovery, so it is not part
    of the TrapmailError hierarchy that callers are expected to handle.
    """
