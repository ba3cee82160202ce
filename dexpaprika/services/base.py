"""
Base service - shared plumbing for endpoint services.
"""

from typing import TYPE_CHECKING, Any, Mapping, Optional
from urllib.parse import quote

from dexpaprika.engine import Decoder

if TYPE_CHECKING:
    from dexpaprika.client import DexPaprikaClient


class BaseService:
    """
    Base class for endpoint groups.

    Services hold no state besides the client; every call goes through
    build_request + execute so it gets gating, retries and typed errors.
    """

    def __init__(self, client: "DexPaprikaClient") -> None:
        self._client = client

    async def _get(
        self,
        path: str,
        decoder: Decoder,
        params: Optional[Mapping[str, Any]] = None,
        timeout: Optional[float] = None,
    ) -> Any:
        request = self._client.build_request("GET", path, params=params)
        response = await self._client.execute(request, decoder=decoder, timeout=timeout)
        return response.data


def segment(value: str) -> str:
    """Quote a value for use as a single path segment."""
    return quote(str(value), safe="")


def page_params(page: int = 0, limit: int = 0) -> dict[str, Any]:
    """Page/limit query parameters, only those > 0."""
    params: dict[str, Any] = {}
    if page > 0:
        params["page"] = page
    if limit > 0:
        params["limit"] = limit
    return params
