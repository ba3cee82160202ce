"""
DexPaprika Client Exceptions - Custom exception hierarchy.

Every failed call surfaces as one of these exceptions. API failures carry
an explicit ErrorKind, decided once when the error is built, so callers
never have to re-inspect status codes to know whether a retry makes sense.
"""

from datetime import datetime
from enum import Enum
from typing import Any, Optional


class ErrorKind(Enum):
    """Classification of a failed call."""

    INVALID_REQUEST = "invalid_request"
    NETWORK_ERROR = "network_error"
    BAD_REQUEST = "bad_request"
    UNAUTHORIZED = "unauthorized"
    FORBIDDEN = "forbidden"
    NOT_FOUND = "not_found"
    RATE_LIMITED = "rate_limited"
    INTERNAL_SERVER_ERROR = "internal_server_error"
    SERVICE_UNAVAILABLE = "service_unavailable"
    RETRYABLE_SERVER = "retryable_server"
    UNEXPECTED = "unexpected"
    DECODE_ERROR = "decode_error"
    CANCELLED = "cancelled"

    @property
    def retryable(self) -> bool:
        """Whether the engine may retry a call that failed this way."""
        return self in RETRYABLE_KINDS

    @property
    def description(self) -> str:
        """Short human-readable description."""
        return _KIND_DESCRIPTIONS[self]


RETRYABLE_KINDS = frozenset({
    ErrorKind.NETWORK_ERROR,
    ErrorKind.RATE_LIMITED,
    ErrorKind.INTERNAL_SERVER_ERROR,
    ErrorKind.SERVICE_UNAVAILABLE,
    ErrorKind.RETRYABLE_SERVER,
})

_KIND_DESCRIPTIONS = {
    ErrorKind.INVALID_REQUEST: "invalid request",
    ErrorKind.NETWORK_ERROR: "network error",
    ErrorKind.BAD_REQUEST: "bad request",
    ErrorKind.UNAUTHORIZED: "unauthorized",
    ErrorKind.FORBIDDEN: "forbidden",
    ErrorKind.NOT_FOUND: "not found",
    ErrorKind.RATE_LIMITED: "rate limit exceeded",
    ErrorKind.INTERNAL_SERVER_ERROR: "internal server error",
    ErrorKind.SERVICE_UNAVAILABLE: "service unavailable",
    ErrorKind.RETRYABLE_SERVER: "retryable error",
    ErrorKind.UNEXPECTED: "unexpected status code",
    ErrorKind.DECODE_ERROR: "error decoding response body",
    ErrorKind.CANCELLED: "request cancelled",
}


class DexPaprikaError(Exception):
    """Base exception for all client errors."""

    def __init__(
        self,
        message: str,
        original_error: Optional[BaseException] = None,
        context: Optional[dict[str, Any]] = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.original_error = original_error
        self.context = context or {}
        self.timestamp = datetime.utcnow()
        if original_error is not None:
            self.__cause__ = original_error

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for logging/serialization."""
        return {
            "error_type": self.__class__.__name__,
            "message": self.message,
            "original_error": str(self.original_error) if self.original_error else None,
            "context": self.context,
            "timestamp": self.timestamp.isoformat(),
        }

    def __str__(self) -> str:
        parts = [f"{self.__class__.__name__}: {self.message}"]
        if self.original_error:
            parts.append(f"(caused by: {self.original_error})")
        return " ".join(parts)


class APIError(DexPaprikaError):
    """
    Typed error for a failed API call.

    Attributes:
        kind: Classification of the failure
        status_code: HTTP status, 0 when no response was obtained
        message: Message extracted from the response body, may be empty
        raw_response: Raw response bytes for diagnostics
        response: Response handle when the server answered
        retries: Retries performed before giving up
    """

    def __init__(
        self,
        kind: ErrorKind,
        status_code: int = 0,
        message: str = "",
        raw_response: bytes = b"",
        response: Optional[Any] = None,
        retries: int = 0,
        detail: Optional[str] = None,
        original_error: Optional[BaseException] = None,
        context: Optional[dict[str, Any]] = None,
    ) -> None:
        super().__init__(message, original_error, context)
        self.kind = kind
        self.status_code = status_code
        self.raw_response = raw_response
        self.response = response
        self.retries = retries
        self.detail = detail

    @property
    def retryable(self) -> bool:
        """Whether the failure kind is retryable."""
        return self.kind.retryable

    def is_retryable(self) -> bool:
        """Check if error is retryable."""
        return self.retryable

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary."""
        data = super().to_dict()
        data.update({
            "kind": self.kind.value,
            "status_code": self.status_code,
            "retryable": self.retryable,
            "retries": self.retries,
            "detail": self.detail,
            "raw_response": self.raw_response[:500].decode("utf-8", errors="replace"),
        })
        return data

    def __str__(self) -> str:
        head = self.detail or self.kind.description
        if self.message:
            return f"{head}: {self.message} (status code: {self.status_code})"
        return f"{head} (status code: {self.status_code})"


class ConfigurationError(DexPaprikaError):
    """Invalid client configuration."""

    def __init__(
        self,
        message: str,
        config_key: Optional[str] = None,
        problems: Optional[list[str]] = None,
        original_error: Optional[BaseException] = None,
    ) -> None:
        super().__init__(message, original_error)
        self.config_key = config_key
        self.problems = problems or []

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary."""
        data = super().to_dict()
        data["config_key"] = self.config_key
        data["problems"] = self.problems
        return data


class TransportError(DexPaprikaError):
    """The transport failed to obtain an HTTP response.

    partial_body holds whatever part of the body arrived before a read
    failed.
    """

    def __init__(
        self,
        message: str,
        request_url: Optional[str] = None,
        original_error: Optional[BaseException] = None,
        partial_body: bytes = b"",
    ) -> None:
        super().__init__(message, original_error)
        self.request_url = request_url
        self.partial_body = partial_body


class ClientClosedError(DexPaprikaError):
    """The client was used after close()."""


class NoMorePagesError(DexPaprikaError):
    """A paginator was asked for a page past the last one."""
