"""Channel client configuration.

Configuration is plain data. It can be built directly, from a mapping,
or from a YAML file:

    url: http://localhost:8080
    allow_anonymous_fallback: true
    request_timeout: 30
    poll_timeout: 120
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from pathlib import Path
from typing import Any
from urllib.parse import urlsplit

import yaml

from .http import DEFAULT_POLL_TIMEOUT, DEFAULT_REQUEST_TIMEOUT


class ConfigLoadError(Exception):
    """Error loading channel configuration."""

    pass


@dataclass(frozen=True)
class ChannelConfig:
    """Settings for one channel client.

    Attributes:
        url: Base URL of the ship's HTTP server.
        allow_anonymous_fallback: Retry as anonymous when self auth fails.
        request_timeout: Seconds allowed for auth, poke and subscribe calls.
        poll_timeout: Seconds allowed for a single long-poll request.
        name: Label used in log messages. Defaults to the URL's host.
    """

    url: str
    allow_anonymous_fallback: bool = False
    request_timeout: float = DEFAULT_REQUEST_TIMEOUT
    poll_timeout: float = DEFAULT_POLL_TIMEOUT
    name: str | None = None

    @property
    def label(self) -> str:
        return self.name or urlsplit(self.url).netloc or self.url

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> ChannelConfig:
        """Build a config from a mapping, validating value types.

        Raises:
            ConfigLoadError: If ``url`` is missing or a value has the wrong type.
        """
        url = data.get("url")
        if not isinstance(url, str) or not url:
            raise ConfigLoadError("'url' is required and must be a string")

        fallback = data.get("allow_anonymous_fallback", False)
        if not isinstance(fallback, bool):
            raise ConfigLoadError("'allow_anonymous_fallback' must be a boolean")

        timeouts: dict[str, float] = {}
        for key, default in (
            ("request_timeout", DEFAULT_REQUEST_TIMEOUT),
            ("poll_timeout", DEFAULT_POLL_TIMEOUT),
        ):
            value = data.get(key, default)
            if isinstance(value, bool) or not isinstance(value, (int, float)) or value <= 0:
                raise ConfigLoadError(f"'{key}' must be a positive number")
            timeouts[key] = float(value)

        name = data.get("name")
        if name is not None and not isinstance(name, str):
            raise ConfigLoadError("'name' must be a string")

        return cls(
            url=url,
            allow_anonymous_fallback=fallback,
            request_timeout=timeouts["request_timeout"],
            poll_timeout=timeouts["poll_timeout"],
            name=name,
        )


def load_config(path: Path) -> ChannelConfig:
    """Load a ChannelConfig from a YAML file.

    Raises:
        ConfigLoadError: If the file is missing, is not a mapping, or holds
            invalid values.
    """
    if not path.exists():
        raise ConfigLoadError(f"File not found: {path}")
    with path.open() as f:
        data = yaml.safe_load(f) or {}
    if not isinstance(data, dict):
        raise ConfigLoadError(f"Expected a mapping in {path}")
    return ChannelConfig.from_mapping(data)
