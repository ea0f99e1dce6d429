"""
Recurly Client Error Model

This module provides the error handling framework for the Recurly client.
Transport, encoding and decoding failures are raised as exceptions. Remote
validation failures (HTTP 422) are not errors here: they are reported as data
on the ``Response`` so callers can inspect every problem at once.
"""

from __future__ import annotations
from typing import Optional, Dict, Any, TYPE_CHECKING
from enum import IntEnum

if TYPE_CHECKING:
    from ..response import Response


class ErrorCode(IntEnum):
    """Client error codes."""

    UNKNOWN = 1

    # Encoding errors (100-199)
    ENCODING_ERROR = 100
    MARSHAL_ERROR = 101
    UNMARSHAL_ERROR = 102

    # Network errors (200-299)
    NETWORK_ERROR = 200
    CONNECTION_FAILED = 201
    TIMEOUT = 202

    # Pagination errors (300-399)
    PAGINATION_ERROR = 300
    NO_MORE_RESULTS = 301

    # Webhook errors (400-499)
    UNKNOWN_NOTIFICATION = 400


class RecurlyError(Exception):
    """
    Base class for all client errors.

    Carries a code, optional structured details and the underlying cause.
    """

    def __init__(self, message: str, code: ErrorCode = ErrorCode.UNKNOWN,
                 details: Optional[Dict[str, Any]] = None, cause: Optional[Exception] = None):
        """
        Initialize a client error.

        Args:
            message: Error message
            code: Error code
            details: Additional error details
            cause: Underlying exception that caused this error
        """
        super().__init__(message)
        self.message = message
        self.code = code
        self.details = details or {}
        self.cause = cause

    def __str__(self) -> str:
        parts = [f"[{self.code.name}] {self.message}"]
        if self.details:
            parts.append(f"Details: {self.details}")
        if self.cause:
            parts.append(f"Caused by: {self.cause}")
        return " | ".join(parts)

    def to_dict(self) -> Dict[str, Any]:
        """Convert error to dictionary representation."""
        result: Dict[str, Any] = {
            "code": self.code.value,
            "message": self.message,
        }
        if self.details:
            result["details"] = self.details
        if self.cause:
            result["cause"] = str(self.cause)
        return result


class NetworkError(RecurlyError):
    """Transport-level failures. No response was received."""

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None, cause: Optional[Exception] = None):
        super().__init__(message, ErrorCode.NETWORK_ERROR, details, cause)


class ConnectionError(NetworkError):
    """DNS failures, refused or dropped connections."""

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None, cause: Optional[Exception] = None):
        super().__init__(message, details, cause)
        self.code = ErrorCode.CONNECTION_FAILED


class TimeoutError(NetworkError):
    """Request timeouts."""

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None, cause: Optional[Exception] = None):
        super().__init__(message, details, cause)
        self.code = ErrorCode.TIMEOUT


class EncodingError(RecurlyError):
    """XML encoding/decoding errors."""

    def __init__(self, message: str, code: ErrorCode = ErrorCode.ENCODING_ERROR,
                 details: Optional[Dict[str, Any]] = None, cause: Optional[Exception] = None):
        super().__init__(message, code, details, cause)


class MarshalError(EncodingError):
    """A payload could not be encoded. Raised before any request is sent."""

    def __init__(self, message: str = "Marshal error",
                 details: Optional[Dict[str, Any]] = None, cause: Optional[Exception] = None):
        super().__init__(message, ErrorCode.MARSHAL_ERROR, details, cause)


class UnmarshalError(EncodingError):
    """
    A payload could not be decoded.

    When raised while executing a request, ``response`` holds the response
    received so far so its status and headers remain inspectable.
    """

    def __init__(self, message: str = "Unmarshal error",
                 details: Optional[Dict[str, Any]] = None, cause: Optional[Exception] = None,
                 response: Optional["Response"] = None):
        super().__init__(message, ErrorCode.UNMARSHAL_ERROR, details, cause)
        self.response = response


class PaginationError(RecurlyError):
    """A page could not be fetched."""

    def __init__(self, message: str, code: ErrorCode = ErrorCode.PAGINATION_ERROR,
                 details: Optional[Dict[str, Any]] = None, cause: Optional[Exception] = None,
                 response: Optional["Response"] = None):
        super().__init__(message, code, details, cause)
        self.response = response


class UnknownNotificationError(RecurlyError):
    """The webhook root element does not name a known notification."""

    def __init__(self, name: str):
        super().__init__(f"unknown notification: {name}", ErrorCode.UNKNOWN_NOTIFICATION,
                         {"name": name})
        self.name = name


__all__ = [
    "ErrorCode",
    "RecurlyError",
    "NetworkError",
    "ConnectionError",
    "TimeoutError",
    "EncodingError",
    "MarshalError",
    "UnmarshalError",
    "PaginationError",
    "UnknownNotificationError",
]
