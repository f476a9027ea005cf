"""Domain error types raised by stores and services."""


class PosError(Exception):
    """Base class for all backend errors."""


class StoreConnectionError(PosError):
    """Raised when neither the primary nor the fallback store can be opened."""


class SchemaError(PosError):
    """Raised when a table of the fallback schema cannot be created."""


class PersistError(PosError):
    """Raised when a write fails and its transaction was rolled back."""


class NotFoundError(PosError):
    """Raised when an operation references a missing record."""


class ValidationError(PosError):
    """Raised when input is rejected before any write."""


class InvalidTransitionError(PosError):
    """Raised when a status change is not allowed from the current status."""


class PrintError(PosError):
    """Raised when a ticket could not be handed to the output device.

    ``document_path`` points at the spooled document when it was written, so
    the caller can offer a manual print of the same file.
    """

    def __init__(self, message: str, document_path: str | None = None) -> None:
        super().__init__(message)
        self.document_path = document_path
