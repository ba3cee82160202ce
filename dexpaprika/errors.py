"""
DexPaprika Client - Error Classification.

============================================================
PURPOSE
============================================================
Turns call outcomes into typed APIError values:
- HTTP status to ErrorKind mapping
- Message extraction from the API's JSON error body
- Helpers for failures that never produced a status

============================================================
ERROR KINDS
============================================================
1. INVALID_REQUEST   - Bad input, no I/O performed
2. NETWORK_ERROR     - No HTTP response obtained
3. 4xx kinds         - Client-side, never retried
4. RATE_LIMITED      - 429, retried
5. 5xx kinds         - Server-side, retried
6. DECODE_ERROR      - 2xx with an undecodable body
7. CANCELLED         - Caller deadline fired

============================================================
"""

import json
import logging
from typing import Any, Optional

from dexpaprika.exceptions import APIError, ErrorKind


logger = logging.getLogger(__name__)


# ============================================================
# STATUS MAPPING
# ============================================================

STATUS_ERROR_MAP: dict[int, ErrorKind] = {
    400: ErrorKind.BAD_REQUEST,
    401: ErrorKind.UNAUTHORIZED,
    403: ErrorKind.FORBIDDEN,
    404: ErrorKind.NOT_FOUND,
    429: ErrorKind.RATE_LIMITED,
    500: ErrorKind.INTERNAL_SERVER_ERROR,
    503: ErrorKind.SERVICE_UNAVAILABLE,
}


def kind_for_status(status_code: int) -> ErrorKind:
    """Map an HTTP status code to an error kind."""
    if status_code in STATUS_ERROR_MAP:
        return STATUS_ERROR_MAP[status_code]
    if status_code >= 500:
        return ErrorKind.RETRYABLE_SERVER
    return ErrorKind.UNEXPECTED


def extract_error_message(body: Optional[bytes]) -> str:
    """
    Pull the "error" field out of a JSON error body.

    Returns an empty string when the body is missing, not JSON, or has
    no string "error" field.
    """
    if not body:
        return ""
    try:
        payload = json.loads(body)
    except (ValueError, UnicodeDecodeError):
        return ""
    if isinstance(payload, dict):
        message = payload.get("error")
        if isinstance(message, str):
            return message
    return ""


def classify_response(
    status_code: int,
    body: Optional[bytes] = None,
    response: Optional[Any] = None,
) -> APIError:
    """
    Build the typed error for a non-2xx response.

    Args:
        status_code: HTTP status code
        body: Raw response body
        response: Response handle to attach for inspection

    Returns:
        APIError with kind and retryability decided
    """
    kind = kind_for_status(status_code)
    detail = None
    if kind is ErrorKind.UNEXPECTED:
        detail = f"unexpected status code: {status_code}"

    return APIError(
        kind=kind,
        status_code=status_code,
        message=extract_error_message(body),
        raw_response=body or b"",
        response=response,
        detail=detail,
    )


# ============================================================
# NON-STATUS ERROR HELPERS
# ============================================================

def create_invalid_request_error(
    detail: str,
    original_error: Optional[BaseException] = None,
) -> APIError:
    """Create error for input rejected before any I/O."""
    return APIError(
        kind=ErrorKind.INVALID_REQUEST,
        detail=f"invalid request: {detail}",
        original_error=original_error,
    )


def create_network_error(
    retries: int,
    original_error: Optional[BaseException] = None,
) -> APIError:
    """Create error for a transport failure on the final attempt."""
    return APIError(
        kind=ErrorKind.NETWORK_ERROR,
        retries=retries,
        detail=f"network error after {retries} retries: {original_error}",
        original_error=original_error,
    )


def create_read_error(
    status_code: int,
    retries: int,
    raw_response: bytes = b"",
    original_error: Optional[BaseException] = None,
) -> APIError:
    """
    Create error for a response body that could not be read.

    raw_response is the part of the body received before the failure.
    """
    return APIError(
        kind=ErrorKind.NETWORK_ERROR,
        status_code=status_code,
        raw_response=raw_response,
        retries=retries,
        detail=f"error reading response body after {retries} retries: {original_error}",
        original_error=original_error,
    )


def create_decode_error(
    status_code: int,
    raw_response: bytes,
    response: Optional[Any] = None,
    original_error: Optional[BaseException] = None,
) -> APIError:
    """Create error for a success body that failed to decode."""
    return APIError(
        kind=ErrorKind.DECODE_ERROR,
        status_code=status_code,
        raw_response=raw_response,
        response=response,
        detail=f"error decoding response body: {original_error}",
        original_error=original_error,
    )


def create_cancelled_error(
    stage: str,
    attempts: int = 0,
    original_error: Optional[BaseException] = None,
) -> APIError:
    """Create error for a call whose deadline fired."""
    return APIError(
        kind=ErrorKind.CANCELLED,
        detail=f"request cancelled while {stage}",
        context={"stage": stage, "attempts": attempts},
        original_error=original_error,
    )


def is_retryable(error: Optional[BaseException]) -> bool:
    """Check whether an exception is a retryable APIError."""
    return isinstance(error, APIError) and error.is_retryable()
