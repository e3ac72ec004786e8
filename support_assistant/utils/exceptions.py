from typing import Any, Dict, Optional
from fastapi import status


class AppException(Exception):
    """
    Base class for errors the API renders as JSON.

    Carries the HTTP status the exception handler should use and a details
    mapping that is returned to the caller as-is.
    """

    def __init__(
        self,
        message: str,
        status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR,
        details: Optional[Dict[str, Any]] = None
    ):
        """
        Args:
            message: Human-readable error message
            status_code: HTTP status rendered by the exception handler
            details: Extra context for the response body
        """
        self.message = message
        self.status_code = status_code
        self.details = details or {}
        super().__init__(self.message)


class ValidationException(AppException):
    """Bad input: blank utterances, malformed catalog records, duplicate intent ids."""

    def __init__(
        self,
        message: str = "Validation error",
        details: Optional[Dict[str, Any]] = None
    ):
        super().__init__(message, status.HTTP_422_UNPROCESSABLE_ENTITY, details)


class NotFoundException(AppException):
    """A referenced catalog entity does not exist."""

    def __init__(
        self,
        resource_type: str,
        resource_id: str,
        message: Optional[str] = None
    ):
        super().__init__(
            message=message or f"{resource_type} '{resource_id}' not found",
            status_code=status.HTTP_404_NOT_FOUND,
            details={"resource_type": resource_type, "resource_id": resource_id}
        )


class ClassifierException(AppException):
    """Base class for intent classifier failures."""


class NotReadyError(ClassifierException):
    """The classifier was asked to classify before its first training pass."""

    def __init__(
        self,
        message: str = "Intent classifier has not been trained",
        details: Optional[Dict[str, Any]] = None
    ):
        super().__init__(message, status.HTTP_503_SERVICE_UNAVAILABLE, details)


class TrainingFailureError(ClassifierException):
    """
    Fitting the intent model failed.

    The previously trained model, if any, stays active.
    """

    def __init__(
        self,
        message: str = "Intent classifier training failed",
        details: Optional[Dict[str, Any]] = None
    ):
        super().__init__(message, status.HTTP_500_INTERNAL_SERVER_ERROR, details)


class ExternalServiceException(AppException):
    """
    A collaborator outside the process (the intent store) failed or was unreachable.
    """

    def __init__(
        self,
        service_name: str,
        message: str = "External service error",
        status_code: int = status.HTTP_502_BAD_GATEWAY,
        details: Optional[Dict[str, Any]] = None
    ):
        """
        Args:
            service_name: Collaborator that failed, added to ``details["service"]``
            message: Error message
            status_code: HTTP status rendered by the exception handler
            details: Extra context (url, path, upstream status)
        """
        super().__init__(message, status_code, {**(details or {}), "service": service_name})
