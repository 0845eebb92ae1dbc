"""Map domain errors to HTTP responses.

Domain errors and request format errors share one body shape: the error
code, the user-safe message and the offending field. Everything else falls
through to DRF's default handler.
"""

from rest_framework import exceptions, status
from rest_framework.response import Response
from rest_framework.views import exception_handler

from drives.domain.errors import (
    CapacityExceededError,
    ConflictError,
    DomainError,
    ErrorCode,
    ForbiddenError,
    ImmutableEventError,
    InvalidIdError,
    NotFoundError,
    TransientStorageError,
    ValidationError,
)

STATUS_BY_ERROR = (
    (NotFoundError, status.HTTP_404_NOT_FOUND),
    (ForbiddenError, status.HTTP_403_FORBIDDEN),
    (ImmutableEventError, status.HTTP_409_CONFLICT),
    (ConflictError, status.HTTP_409_CONFLICT),
    (CapacityExceededError, status.HTTP_409_CONFLICT),
    (ValidationError, status.HTTP_400_BAD_REQUEST),
    (InvalidIdError, status.HTTP_400_BAD_REQUEST),
    (TransientStorageError, status.HTTP_503_SERVICE_UNAVAILABLE),
)


def status_for(exc: DomainError) -> int:
    for error_type, http_status in STATUS_BY_ERROR:
        if isinstance(exc, error_type):
            return http_status
    return status.HTTP_400_BAD_REQUEST


def _first_error(detail) -> tuple[str | None, str]:
    """Pick the first field and message out of a serializer error tree."""
    if isinstance(detail, dict) and detail:
        field, nested = next(iter(detail.items()))
        _, message = _first_error(nested)
        return (None if field == "non_field_errors" else field), message
    if isinstance(detail, list) and detail:
        return _first_error(detail[0])
    return None, str(detail)


def _error_response(code: str, message: str, field: str | None, http_status: int) -> Response:
    body = {"code": code, "message": message}
    if field:
        body["field"] = field
    return Response({"error": body}, status=http_status)


def domain_exception_handler(exc, context):
    if isinstance(exc, exceptions.ValidationError):
        field, message = _first_error(exc.detail)
        return _error_response(
            ErrorCode.VALIDATION_ERROR.value, message, field, status.HTTP_400_BAD_REQUEST
        )
    if not isinstance(exc, DomainError):
        return exception_handler(exc, context)
    return _error_response(
        exc.code.value, exc.message, getattr(exc, "field", None), status_for(exc)
    )
