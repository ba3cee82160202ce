"""
Request Builder - Constructs outbound requests for the API.

Pure construction: resolves paths against the base address, merges
query parameters, serializes JSON bodies and sets the standard headers.
No I/O happens here.
"""

import json
import logging
import re
from dataclasses import dataclass, field
from typing import Any, Mapping, Optional
from urllib.parse import parse_qsl, urlencode, urljoin, urlsplit, urlunsplit

from dexpaprika.errors import create_invalid_request_error


logger = logging.getLogger(__name__)

JSON_CONTENT_TYPE = "application/json"

# "%" not followed by two hex digits
_BAD_ESCAPE = re.compile(r"%(?![0-9A-Fa-f]{2})")


@dataclass(frozen=True)
class OutboundRequest:
    """A fully-formed request, ready for the transport."""
    method: str
    url: str
    headers: dict[str, str] = field(default_factory=dict)
    body: Optional[bytes] = None

    def clone(self) -> "OutboundRequest":
        """Fresh copy for one attempt, headers included."""
        return OutboundRequest(
            method=self.method,
            url=self.url,
            headers=dict(self.headers),
            body=self.body,
        )

    @property
    def query(self) -> dict[str, str]:
        """Query parameters as a flat dict (last value wins)."""
        return dict(parse_qsl(urlsplit(self.url).query, keep_blank_values=True))

    @property
    def path(self) -> str:
        return urlsplit(self.url).path

    def json(self) -> Any:
        """Decode the serialized body."""
        if self.body is None:
            return None
        return json.loads(self.body)

    def __repr__(self) -> str:
        return f"<OutboundRequest {self.method} {self.url}>"


class RequestBuilder:
    """
    Builds OutboundRequest objects for one client.

    Usage:
        builder = RequestBuilder("https://api.dexpaprika.com", "my-app/1.0")
        request = builder.build("GET", "/networks/ethereum/pools", params={"limit": 10})
    """

    def __init__(self, base_url: str, user_agent: str) -> None:
        self._base_url = base_url
        self._user_agent = user_agent

    @property
    def base_url(self) -> str:
        return self._base_url

    @property
    def user_agent(self) -> str:
        return self._user_agent

    def build(
        self,
        method: str,
        path: str,
        body: Any = None,
        params: Optional[Mapping[str, Any]] = None,
    ) -> OutboundRequest:
        """
        Build a request.

        Args:
            method: HTTP method
            path: Path relative to the base address, or an absolute URL
            body: Optional value serialized as JSON
            params: Optional query parameters, None values are skipped

        Returns:
            OutboundRequest

        Raises:
            APIError: kind INVALID_REQUEST for a bad path or body
        """
        url = self._resolve(path)
        if params:
            url = _merge_query(url, params)

        payload = None
        if body is not None:
            try:
                payload = json.dumps(body, allow_nan=False).encode("utf-8")
            except (TypeError, ValueError) as e:
                raise create_invalid_request_error(
                    f"body is not JSON serializable: {e}", e
                ) from e

        headers = {
            "Accept": JSON_CONTENT_TYPE,
            "User-Agent": self._user_agent,
        }
        if payload is not None:
            headers["Content-Type"] = JSON_CONTENT_TYPE

        request = OutboundRequest(
            method=method.upper(),
            url=url,
            headers=headers,
            body=payload,
        )
        logger.debug(f"[request] Built {request.method} {request.url}")
        return request

    def _resolve(self, path: str) -> str:
        if not isinstance(path, str):
            raise create_invalid_request_error(f"path must be a string, got {type(path).__name__}")
        if any(ord(ch) < 32 or ord(ch) == 127 for ch in path):
            raise create_invalid_request_error(f"invalid control character in path {path!r}")
        if path.startswith(":"):
            raise create_invalid_request_error(f"missing protocol scheme in {path!r}")
        if _BAD_ESCAPE.search(path):
            raise create_invalid_request_error(f"invalid URL escape in {path!r}")

        try:
            parts = urlsplit(path)
        except ValueError as e:
            raise create_invalid_request_error(f"cannot parse path {path!r}: {e}", e) from e

        if not parts.scheme and "://" in path:
            raise create_invalid_request_error(f"missing protocol scheme in {path!r}")
        if parts.scheme and parts.scheme not in ("http", "https"):
            raise create_invalid_request_error(f"unsupported scheme {parts.scheme!r}")

        try:
            return urljoin(self._base_url, path)
        except ValueError as e:
            raise create_invalid_request_error(f"cannot resolve path {path!r}: {e}", e) from e


def _merge_query(url: str, params: Mapping[str, Any]) -> str:
    parts = urlsplit(url)
    query = parse_qsl(parts.query, keep_blank_values=True)
    for key, value in params.items():
        if value is None:
            continue
        if isinstance(value, bool):
            value = "true" if value else "false"
        query.append((key, str(value)))
    return urlunsplit(parts._replace(query=urlencode(query)))
