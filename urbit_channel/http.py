"""HTTP transport for the Urbit event channel."""

from __future__ import annotations

import json
from typing import Any, Protocol

import aiohttp

from .errors import (
    UrbitBadUrlError,
    UrbitConnectionError,
    UrbitDecodeError,
    UrbitResponseError,
    UrbitTimeout,
)

DEFAULT_REQUEST_TIMEOUT = 30.0
DEFAULT_POLL_TIMEOUT = 120.0


class ChannelTransport(Protocol):
    """HTTP capability used by the auth session and channel client.

    Implementations return decoded JSON and raise UrbitClientError
    subclasses on failure.
    """

    async def get_json(self, path: str, *, long_poll: bool = False) -> Any:
        ...

    async def post_json(self, path: str, body: dict[str, Any]) -> Any:
        ...


class UrbitHttpClient:
    """aiohttp-backed ChannelTransport for a single ship."""

    def __init__(
        self,
        session: aiohttp.ClientSession,
        url: str,
        *,
        request_timeout: float = DEFAULT_REQUEST_TIMEOUT,
        poll_timeout: float = DEFAULT_POLL_TIMEOUT,
    ) -> None:
        self._session = session
        self._base_url = url.rstrip("/")
        self._request_timeout = request_timeout
        self._poll_timeout = poll_timeout

    @property
    def base_url(self) -> str:
        return self._base_url

    def _url(self, path: str) -> str:
        return f"{self._base_url}{path}"

    @staticmethod
    async def _read_json(resp: aiohttp.ClientResponse) -> Any:
        body = await resp.text()
        if not 200 <= resp.status < 300:
            raise UrbitResponseError(
                resp.status, f"Request failed with status {resp.status}", body
            )
        if not body:
            return None
        try:
            return json.loads(body)
        except ValueError as err:
            raise UrbitDecodeError("Response body is not valid JSON", body) from err

    async def get_json(self, path: str, *, long_poll: bool = False) -> Any:
        """GET ``path`` and decode the JSON body.

        Long-poll requests use the poll timeout instead of the request timeout.
        """
        url = self._url(path)
        total = self._poll_timeout if long_poll else self._request_timeout
        try:
            async with self._session.get(
                url,
                headers={"Accept": "application/json"},
                timeout=aiohttp.ClientTimeout(total=total),
            ) as resp:
                return await self._read_json(resp)
        except TimeoutError as err:
            raise UrbitTimeout(f"GET {path} timed out") from err
        except aiohttp.InvalidURL as err:
            raise UrbitBadUrlError(f"Invalid URL {url}") from err
        except aiohttp.ClientError as err:
            raise UrbitConnectionError(f"GET {path} failed") from err

    async def post_json(self, path: str, body: dict[str, Any]) -> Any:
        """POST ``body`` as JSON to ``path`` and decode the JSON reply."""
        url = self._url(path)
        try:
            async with self._session.post(
                url,
                json=body,
                timeout=aiohttp.ClientTimeout(total=self._request_timeout),
            ) as resp:
                return await self._read_json(resp)
        except TimeoutError as err:
            raise UrbitTimeout(f"POST {path} timed out") from err
        except aiohttp.InvalidURL as err:
            raise UrbitBadUrlError(f"Invalid URL {url}") from err
        except aiohttp.ClientError as err:
            raise UrbitConnectionError(f"POST {path} failed") from err
