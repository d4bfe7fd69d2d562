"""Custom exception classes."""

import enum
from typing import Optional

from fastapi import HTTPException, status


class NotFound(HTTPException):
    """Exception for resource not found."""

    def __init__(self, resource: str = "Resource"):
        super().__init__(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"{resource} not found",
        )


class BadRequest(HTTPException):
    """Exception for bad request."""

    def __init__(self, detail: str):
        super().__init__(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=detail,
        )


class ServiceUnavailable(HTTPException):
    """Exception for an unreachable upstream (database or model endpoint)."""

    def __init__(self, detail: str):
        super().__init__(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail=detail,
        )


class GatewayErrorKind(enum.Enum):
    """Failure classes of a model endpoint call."""

    UNREACHABLE = "unreachable"
    NON_SUCCESS_STATUS = "non_success_status"
    EMPTY_BODY = "empty_body"


class GatewayError(Exception):
    """Exception describing a failed model endpoint call."""

    def __init__(
        self,
        kind: GatewayErrorKind,
        message: str,
        cause: Optional[BaseException] = None,
        status_code: Optional[int] = None,
    ):
        self.kind = kind
        self.message = message
        self.cause = cause
        self.status_code = status_code
        super().__init__(message)


class ValidationErrorKind(enum.Enum):
    """Reasons a model response was rejected."""

    MALFORMED_SYNTAX = "malformed_syntax"
    WRONG_SHAPE = "wrong_shape"
    NO_VALID_ELEMENTS = "no_valid_elements"


class ResponseValidationError(Exception):
    """Exception for model output that cannot be used."""

    def __init__(self, kind: ValidationErrorKind, message: str):
        self.kind = kind
        self.message = message
        super().__init__(message)


class SchemaError(Exception):
    """Exception for schema discovery or data source failures."""

    kind = "discovery_failed"

    def __init__(self, message: str, cause: Optional[BaseException] = None):
        self.message = message
        self.cause = cause
        super().__init__(message)
