"""Pytest configuration and fixtures for urbit_channel tests."""

from __future__ import annotations

import asyncio
from typing import Any
from unittest.mock import AsyncMock, MagicMock

import pytest

from urbit_channel import ChannelClient, CodecRegistry
from urbit_channel.errors import UrbitConnectionError


@pytest.fixture
def mock_session() -> MagicMock:
    """Create a mock aiohttp ClientSession."""
    import aiohttp

    return MagicMock(spec=aiohttp.ClientSession)


def create_mock_response(
    status: int = 200,
    text_data: str = "",
) -> AsyncMock:
    """Create a configured mock response.

    Args:
        status: HTTP status code
        text_data: Data to return from text() call

    Returns:
        Configured AsyncMock response
    """
    response = AsyncMock()
    response.status = status
    response.text.return_value = text_data

    response.__aenter__.return_value = response
    response.__aexit__.return_value = None

    return response


class FakeTransport:
    """ChannelTransport that replays queued responses and records calls.

    Queued items that are exceptions are raised. A request with nothing
    queued fails with UrbitConnectionError.
    """

    def __init__(self) -> None:
        self.responses: dict[tuple[str, str], list[Any]] = {}
        self.calls: list[tuple[str, str, Any]] = []

    def queue(self, method: str, path: str, *responses: Any) -> None:
        self.responses.setdefault((method, path), []).extend(responses)

    def paths(self, method: str | None = None) -> list[str]:
        return [path for m, path, _ in self.calls if method is None or m == method]

    def count(self, path: str) -> int:
        return sum(1 for _, p, _ in self.calls if p == path)

    def _respond(self, method: str, path: str) -> Any:
        pending = self.responses.get((method, path))
        if not pending:
            raise UrbitConnectionError(f"No response queued for {method} {path}")
        result = pending.pop(0)
        if isinstance(result, BaseException):
            raise result
        return result

    async def get_json(self, path: str, *, long_poll: bool = False) -> Any:
        self.calls.append(("GET", path, {"long_poll": long_poll}))
        return self._respond("GET", path)

    async def post_json(self, path: str, body: dict[str, Any]) -> Any:
        self.calls.append(("POST", path, body))
        return self._respond("POST", path)


def auth_body(
    *,
    ship: str = "zod",
    user: str = "zod",
    auth: tuple[str, ...] = ("zod",),
    ixor: str = "ixor-1",
    oryx: str = "oryx-1",
) -> dict[str, Any]:
    """Build an auth.json response."""
    return {
        "oryx": oryx,
        "user": user,
        "sein": ship,
        "ixor": ixor,
        "ship": ship,
        "auth": list(auth),
    }


def data_event(
    event_id: int,
    *,
    path: str = "/chat/inbox",
    payload: Any = None,
) -> dict[str, Any]:
    """Build a data poll response."""
    return {
        "data": {"json": payload},
        "from": {"appl": "chat", "path": path, "ship": "zod"},
        "id": event_id,
        "type": "diff",
    }


HEARTBEAT: dict[str, Any] = {"beat": True}


async def wait_for_poll_stop(client: ChannelClient, limit: int = 200) -> None:
    """Yield to the loop until the client's poll chain halts."""
    for _ in range(limit):
        if not client.is_polling:
            return
        await asyncio.sleep(0)
    raise AssertionError("poll loop did not stop")


@pytest.fixture
def transport() -> FakeTransport:
    return FakeTransport()


@pytest.fixture
def codecs() -> CodecRegistry:
    return CodecRegistry().register("/chat/*", lambda payload: payload["text"])
