"""
Error Classification Tests.

============================================================
PURPOSE
============================================================
Status mapping, message extraction and typed error rendering.

============================================================
"""

import pytest

from dexpaprika.errors import (
    classify_response,
    create_cancelled_error,
    create_decode_error,
    create_invalid_request_error,
    create_network_error,
    extract_error_message,
    is_retryable,
    kind_for_status,
)
from dexpaprika.exceptions import (
    APIError,
    ConfigurationError,
    DexPaprikaError,
    ErrorKind,
    RETRYABLE_KINDS,
)


# ============================================================
# STATUS MAPPING TESTS
# ============================================================

class TestKindForStatus:
    """Tests for status to kind mapping."""

    @pytest.mark.parametrize("status,kind", [
        (400, ErrorKind.BAD_REQUEST),
        (401, ErrorKind.UNAUTHORIZED),
        (403, ErrorKind.FORBIDDEN),
        (404, ErrorKind.NOT_FOUND),
        (429, ErrorKind.RATE_LIMITED),
        (500, ErrorKind.INTERNAL_SERVER_ERROR),
        (503, ErrorKind.SERVICE_UNAVAILABLE),
        (502, ErrorKind.RETRYABLE_SERVER),
        (504, ErrorKind.RETRYABLE_SERVER),
        (599, ErrorKind.RETRYABLE_SERVER),
        (302, ErrorKind.UNEXPECTED),
        (418, ErrorKind.UNEXPECTED),
    ])
    def test_mapping(self, status, kind):
        assert kind_for_status(status) is kind

    def test_retryable_kinds(self):
        """Only transient kinds are retryable."""
        assert RETRYABLE_KINDS == {
            ErrorKind.NETWORK_ERROR,
            ErrorKind.RATE_LIMITED,
            ErrorKind.INTERNAL_SERVER_ERROR,
            ErrorKind.SERVICE_UNAVAILABLE,
            ErrorKind.RETRYABLE_SERVER,
        }
        assert not ErrorKind.NOT_FOUND.retryable
        assert not ErrorKind.DECODE_ERROR.retryable
        assert not ErrorKind.CANCELLED.retryable


# ============================================================
# MESSAGE EXTRACTION TESTS
# ============================================================

class TestExtractErrorMessage:
    """Tests for pulling the API message out of a body."""

    def test_error_field(self):
        assert extract_error_message(b'{"error": "Resource not found"}') == "Resource not found"

    def test_not_json(self):
        assert extract_error_message(b"<html>Bad Gateway</html>") == ""

    def test_empty(self):
        assert extract_error_message(b"") == ""
        assert extract_error_message(None) == ""

    def test_non_string_error(self):
        assert extract_error_message(b'{"error": {"code": 1}}') == ""

    def test_json_array(self):
        assert extract_error_message(b'["error"]') == ""


# ============================================================
# CLASSIFICATION TESTS
# ============================================================

class TestClassifyResponse:
    """Tests for classify_response."""

    def test_not_found_rendering(self):
        """404 with an API message renders kind, message and status."""
        error = classify_response(404, b'{"error":"Resource not found"}')

        assert error.kind is ErrorKind.NOT_FOUND
        assert error.status_code == 404
        assert error.message == "Resource not found"
        assert error.raw_response == b'{"error":"Resource not found"}'
        assert not error.retryable
        assert not error.is_retryable()
        assert str(error) == "not found: Resource not found (status code: 404)"

    def test_rendering_without_message(self):
        error = classify_response(503, b"")

        assert error.kind is ErrorKind.SERVICE_UNAVAILABLE
        assert error.retryable
        assert error.is_retryable()
        assert str(error) == "service unavailable (status code: 503)"

    def test_unexpected_status(self):
        error = classify_response(418, b"{}")

        assert error.kind is ErrorKind.UNEXPECTED
        assert str(error) == "unexpected status code: 418 (status code: 418)"

    def test_response_attached(self):
        marker = object()
        error = classify_response(429, b"", response=marker)

        assert error.response is marker
        assert is_retryable(error)

    def test_to_dict(self):
        error = classify_response(500, b'{"error": "boom"}')
        data = error.to_dict()

        assert data["error_type"] == "APIError"
        assert data["kind"] == "internal_server_error"
        assert data["status_code"] == 500
        assert data["retryable"] is True
        assert data["message"] == "boom"


# ============================================================
# HELPER TESTS
# ============================================================

class TestErrorHelpers:
    """Tests for errors that have no status."""

    def test_invalid_request(self):
        cause = ValueError("bad")
        error = create_invalid_request_error("bad path", cause)

        assert error.kind is ErrorKind.INVALID_REQUEST
        assert error.status_code == 0
        assert error.__cause__ is cause
        assert str(error).startswith("invalid request: bad path")

    def test_network_error(self):
        cause = ConnectionResetError("reset")
        error = create_network_error(3, cause)

        assert error.kind is ErrorKind.NETWORK_ERROR
        assert error.retries == 3
        assert error.original_error is cause
        assert "network error after 3 retries" in str(error)

    def test_decode_error(self):
        error = create_decode_error(200, b"not json", original_error=ValueError("x"))

        assert error.kind is ErrorKind.DECODE_ERROR
        assert error.status_code == 200
        assert not error.retryable

    def test_cancelled_error(self):
        error = create_cancelled_error("backing off", 2)

        assert error.kind is ErrorKind.CANCELLED
        assert error.context == {"stage": "backing off", "attempts": 2}
        assert "backing off" in str(error)

    def test_is_retryable_other_exceptions(self):
        assert not is_retryable(ValueError("x"))
        assert not is_retryable(None)


class TestExceptionHierarchy:
    """Tests for the exception base classes."""

    def test_api_error_is_dexpaprika_error(self):
        assert issubclass(APIError, DexPaprikaError)
        assert issubclass(ConfigurationError, DexPaprikaError)

    def test_base_str_includes_cause(self):
        error = DexPaprikaError("failed", original_error=OSError("disk"))

        assert "failed" in str(error)
        assert "caused by: disk" in str(error)
        assert error.to_dict()["original_error"] == "disk"
