"""Custom exceptions.

`AppError` and its subclasses are rendered by the Flask error handlers.
`SyncError` and its subclasses describe failures of the draw synchronization
pipeline.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any


@dataclass
class AppError(Exception):
    """Base application error."""

    code: str
    message: str
    status_code: int
    details: Any | None = None


class NotFoundError(AppError):
    """Resource not found."""

    def __init__(self, message: str = "Not found", details: Any | None = None) -> None:
        super().__init__(code="not_found", message=message, status_code=404, details=details)


class ValidationError(AppError):
    """Input validation error."""

    def __init__(self, message: str = "Validation error", details: Any | None = None) -> None:
        super().__init__(code="validation_error", message=message, status_code=400, details=details)


class ServiceUnavailableError(AppError):
    """Backing storage could not be reached."""

    def __init__(self, message: str = "Storage unavailable", details: Any | None = None) -> None:
        super().__init__(code="storage_unavailable", message=message, status_code=503, details=details)


class SyncError(Exception):
    """Base class for draw synchronization failures."""


class PayloadValidationError(SyncError):
    """A fetched payload could not be turned into a draw record."""

    def __init__(self, draw_no: int | None, messages: Any) -> None:
        super().__init__(f"Invalid payload for draw {draw_no}: {messages}")
        self.draw_no = draw_no
        self.messages = messages


class TransportError(SyncError):
    """Network, timeout or HTTP status failure while fetching a draw."""

    def __init__(self, draw_no: int, message: str) -> None:
        super().__init__(f"Transport error for draw {draw_no}: {message}")
        self.draw_no = draw_no


class StorageError(SyncError):
    """Reading from or writing to the draw store failed."""


class InitializationError(SyncError):
    """The store could not be reached before the sync loop started."""
