"""Shared API dependencies and error translation."""

from fastapi import HTTPException, Request

from restaurant_pos.core.errors import (
    InvalidTransitionError,
    NotFoundError,
    PersistError,
    PosError,
    PrintError,
    ValidationError,
)
from restaurant_pos.services.station import StationContext

STATUS_CODES: dict[type[PosError], int] = {
    NotFoundError: 404,
    ValidationError: 400,
    InvalidTransitionError: 409,
    PersistError: 500,
    PrintError: 502,
}


def get_station(request: Request) -> StationContext:
    """Return the station context created at startup."""
    return request.app.state.station


def http_error(exc: PosError) -> HTTPException:
    """Translate a domain error into the matching HTTP error."""
    status_code: int = next(
        (code for error_type, code in STATUS_CODES.items() if isinstance(exc, error_type)),
        500,
    )
    if isinstance(exc, PrintError):
        return HTTPException(status_code=status_code, detail={"message": str(exc), "document_path": exc.document_path})
    return HTTPException(status_code=status_code, detail=str(exc))
