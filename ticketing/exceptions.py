"""Structured service errors.

Every failure the core can report is an ``HTTPException`` carrying a stable
``kind`` so callers can tell causes apart without parsing messages.
"""
from typing import Any, Optional

from fastapi import HTTPException, status


class ServiceError(HTTPException):
    """Base class — ``detail`` is always ``{"kind", "message", ...}``."""

    status_code: int = status.HTTP_400_BAD_REQUEST
    kind: str = "error"

    def __init__(self, message: str, **extra: Any):
        self.message = message
        self.extra = extra
        detail = {"kind": self.kind, "message": message}
        detail.update({k: v for k, v in extra.items() if v is not None})
        super().__init__(status_code=self.status_code, detail=detail)


# --- input errors -----------------------------------------------------------

class MalformedIdentifier(ServiceError):
    kind = "malformed_identifier"

    def __init__(self, name: str, value: Any):
        super().__init__(f"Invalid {name}: {value!r}", field_id=name)


class MalformedCredential(ServiceError):
    kind = "malformed_credential"

    def __init__(self, message: str = "Invalid QR code data"):
        super().__init__(message)


class SubmissionError(ServiceError):
    """A submitted value does not satisfy its field definition."""

    status_code = status.HTTP_422_UNPROCESSABLE_ENTITY

    def __init__(self, field_id: str, message: str, value: Any = None):
        self.field_id = field_id
        self.value = value
        super().__init__(message, field_id=field_id, value=value)


class MissingRequiredField(SubmissionError):
    kind = "missing_required_field"

    def __init__(self, field_id: str):
        super().__init__(field_id, f"Field '{field_id}' is required")


class InvalidOption(SubmissionError):
    kind = "invalid_option"

    def __init__(self, field_id: str, value: Any):
        super().__init__(field_id, f"{value!r} is not an option of field '{field_id}'", value=value)


class InvalidFileType(SubmissionError):
    kind = "invalid_file_type"

    def __init__(self, field_id: str, value: Any):
        super().__init__(field_id, f"File type of {value!r} is not allowed for field '{field_id}'", value=value)


class FileTooLarge(SubmissionError):
    kind = "file_too_large"

    def __init__(self, field_id: str, size: int, max_mb: int):
        super().__init__(field_id, f"File for field '{field_id}' exceeds {max_mb} MB", value=size)


class InvalidFieldFormat(SubmissionError):
    kind = "invalid_field_format"

    def __init__(self, field_id: str, value: Any, expected: str):
        super().__init__(field_id, f"Field '{field_id}' expects {expected}", value=value)


class InvalidFieldDefinition(ServiceError):
    status_code = status.HTTP_422_UNPROCESSABLE_ENTITY
    kind = "invalid_field_definition"

    def __init__(self, field_id: Optional[str], message: str):
        self.field_id = field_id
        super().__init__(message, field_id=field_id)


# --- authn / authz ----------------------------------------------------------

class Unauthenticated(ServiceError):
    status_code = status.HTTP_401_UNAUTHORIZED
    kind = "unauthenticated"


class Forbidden(ServiceError):
    status_code = status.HTTP_403_FORBIDDEN
    kind = "forbidden"


# --- not found --------------------------------------------------------------

class NotFound(ServiceError):
    status_code = status.HTTP_404_NOT_FOUND
    kind = "not_found"


class EventNotFound(NotFound):
    kind = "event_not_found"

    def __init__(self, message: str = "Event not found"):
        super().__init__(message)


class FormNotFound(NotFound):
    kind = "form_not_found"

    def __init__(self, message: str = "Form not found"):
        super().__init__(message)


# --- infrastructure ---------------------------------------------------------

class IssueError(ServiceError):
    """Ticket could not be handed to the mail transport. Retriable."""

    status_code = status.HTTP_502_BAD_GATEWAY
    kind = "issue_failed"
