"""Translate client exceptions into a single error value.

Every failure surfaced by the auth session or channel client is a
UnifiedError: a description plus, when the ship sent one, the structured
``{fail, mess}`` payload.
"""

from __future__ import annotations

import json
from dataclasses import dataclass
from enum import Enum
from typing import Any

from .errors import (
    DecodeFailedError,
    NoDecoderFoundError,
    ShipValidationError,
    UrbitBadUrlError,
    UrbitClientError,
    UrbitConnectionError,
    UrbitDecodeError,
    UrbitProtocolError,
    UrbitResponseError,
    UrbitTimeout,
)
from .protocol import ErrorPayload, parse_error_payload


class ErrorKind(Enum):
    """Category of a UnifiedError."""

    TIMEOUT = "timeout"
    NETWORK = "network"
    BAD_URL = "bad_url"
    BAD_STATUS = "bad_status"
    AUTH_REDIRECT = "auth_redirect"
    AUTH_REJECTED = "auth_rejected"
    DECODE = "decode"
    PROTOCOL = "protocol"
    NO_DECODER = "no_decoder"
    DECODE_FAILED = "decode_failed"
    VALIDATION = "validation"
    UNKNOWN = "unknown"


@dataclass(frozen=True)
class UnifiedError:
    """A failure as seen by the application.

    Attributes:
        kind: Failure category.
        description: Human-readable summary.
        payload: Structured error body from the ship, if one was parsed.
    """

    kind: ErrorKind
    description: str
    payload: ErrorPayload | None = None


def _load_json(body: str | None) -> Any:
    if not body:
        return None
    try:
        return json.loads(body)
    except ValueError:
        return None


def _auth_redirect(data: Any) -> UnifiedError | None:
    """Recognize the ``{ok, red}`` body auth endpoints send instead of credentials."""
    if not isinstance(data, dict) or not isinstance(data.get("ok"), bool):
        return None
    if data["ok"]:
        return UnifiedError(
            ErrorKind.AUTH_REDIRECT, "Authentication redirect is not supported"
        )
    return UnifiedError(ErrorKind.AUTH_REJECTED, "Authentication was rejected")


def translate_error(err: Exception) -> UnifiedError:
    """Map a client exception to a UnifiedError.

    Args:
        err: Exception raised by the transport, protocol parser, codec
            registry or ship parser.

    Returns:
        The matching UnifiedError. Exceptions outside the client hierarchy
        map to ``ErrorKind.UNKNOWN``.
    """
    if isinstance(err, UrbitTimeout):
        return UnifiedError(ErrorKind.TIMEOUT, "Request timed out")

    if isinstance(err, UrbitConnectionError):
        return UnifiedError(ErrorKind.NETWORK, "Ship is unreachable")

    if isinstance(err, UrbitBadUrlError):
        return UnifiedError(ErrorKind.BAD_URL, f"Bad request URL: {err}")

    if isinstance(err, UrbitResponseError):
        return UnifiedError(
            ErrorKind.BAD_STATUS,
            f"Request failed with status {err.status}",
            parse_error_payload(_load_json(err.body)),
        )

    if isinstance(err, UrbitDecodeError):
        data = _load_json(err.body)
        redirect = _auth_redirect(data)
        if redirect is not None:
            return redirect
        return UnifiedError(
            ErrorKind.DECODE,
            f"Could not decode response: {err}",
            parse_error_payload(data),
        )

    if isinstance(err, UrbitProtocolError):
        return UnifiedError(ErrorKind.PROTOCOL, str(err))

    if isinstance(err, NoDecoderFoundError):
        return UnifiedError(ErrorKind.NO_DECODER, str(err))

    if isinstance(err, DecodeFailedError):
        return UnifiedError(ErrorKind.DECODE_FAILED, str(err))

    if isinstance(err, ShipValidationError):
        return UnifiedError(ErrorKind.VALIDATION, str(err))

    if isinstance(err, UrbitClientError):
        return UnifiedError(ErrorKind.UNKNOWN, str(err))

    return UnifiedError(ErrorKind.UNKNOWN, f"Unexpected error: {err!r}")
