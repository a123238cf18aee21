"""Wire contracts for the Urbit HTTP event channel.

This module is pure: it builds request paths and bodies and parses
response bodies. It performs no I/O.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, TypeAlias

from .errors import UrbitProtocolError

# --------------------------------------------------------------------------
# Paths
# --------------------------------------------------------------------------

AUTH_PATH = "/~/auth.json"
ANON_AUTH_PATH = "/~/as/anon/~/auth.json"


def self_auth_path(ship: str) -> str:
    """Auth path for acting as ``ship``."""
    return f"/~/as/~{ship.lstrip('~')}/~/auth.json"


def poke_path(app: str, mark: str) -> str:
    return f"/~/to/{app}/{mark}"


def subscription_path(app: str, wire: str, verb: str) -> str:
    return f"/~/is/{app}/{wire.lstrip('/')}.json?{verb}"


def poll_path(channel: str, cursor: int) -> str:
    return f"/~/of/{channel}?poll={cursor}"


# --------------------------------------------------------------------------
# Requests
# --------------------------------------------------------------------------


class SubscriptionAction(Enum):
    """Subscription verbs, carried in the query string."""

    SUBSCRIBE = "PUT"
    UNSUBSCRIBE = "DELETE"


@dataclass(frozen=True)
class SubscriptionRequest:
    """Target of a subscribe or unsubscribe call.

    Attributes:
        ship: Ship hosting the application (``~`` optional).
        app: Application name.
        mark: Data mark the subscription streams.
        wire: Wire naming the subscription.
    """

    ship: str
    app: str
    mark: str
    wire: str


@dataclass(frozen=True)
class PokeRequest:
    """A one-shot command for an application."""

    ship: str
    app: str
    mark: str
    wire: str
    payload: Any


def build_poke_body(request: PokeRequest, oryx: str) -> dict[str, Any]:
    return {"oryx": oryx, "wire": request.wire, "xyro": request.payload}


def build_subscription_body(request: SubscriptionRequest, oryx: str) -> dict[str, Any]:
    return {
        "appl": request.app,
        "mark": request.mark,
        "wire": request.wire,
        "ship": request.ship.lstrip("~"),
        "oryx": oryx,
    }


# --------------------------------------------------------------------------
# Auth responses
# --------------------------------------------------------------------------


@dataclass(frozen=True)
class AuthCredentials:
    """Credentials returned by an auth endpoint.

    Attributes:
        oryx: Session token sent with every poke and subscription.
        user: Identity the session acts as.
        sein: Signing (parent) ship.
        ixor: Channel id used for polling.
        ship: Ship serving the session.
        auth: Identities the session has been granted.
    """

    oryx: str
    user: str
    sein: str
    ixor: str
    ship: str
    auth: tuple[str, ...] = ()


def _require_str(data: dict[str, Any], key: str) -> str:
    value = data.get(key)
    if not isinstance(value, str):
        raise UrbitProtocolError(f"Auth response field {key!r} must be a string")
    return value


def parse_auth_response(data: Any) -> AuthCredentials:
    """Parse ``{oryx, user, sein, ixor, ship, auth}``.

    Raises:
        UrbitProtocolError: If any field is missing or has the wrong type.
    """
    if not isinstance(data, dict):
        raise UrbitProtocolError("Auth response must be a JSON object")

    granted = data.get("auth")
    if not isinstance(granted, list) or not all(isinstance(g, str) for g in granted):
        raise UrbitProtocolError("Auth response field 'auth' must be a list of strings")

    return AuthCredentials(
        oryx=_require_str(data, "oryx"),
        user=_require_str(data, "user"),
        sein=_require_str(data, "sein"),
        ixor=_require_str(data, "ixor"),
        ship=_require_str(data, "ship"),
        auth=tuple(granted),
    )


# --------------------------------------------------------------------------
# Poll responses
# --------------------------------------------------------------------------


@dataclass(frozen=True)
class Heartbeat:
    """Keepalive with no event."""


@dataclass(frozen=True)
class EventSource:
    """Where a data event came from."""

    app: str
    path: str
    ship: str


@dataclass(frozen=True)
class DataEvent:
    """A subscription event.

    Attributes:
        event_id: Sequence number of this event.
        source: Application, path and ship that produced it.
        payload: Undecoded ``data.json`` value.
        type: Event type tag.
    """

    event_id: int
    source: EventSource
    payload: Any
    type: str


@dataclass(frozen=True)
class ProtocolError:
    """Poll body matched neither the heartbeat nor the data shape."""

    message: str


PollOutcome: TypeAlias = Heartbeat | DataEvent | ProtocolError


def _is_heartbeat(body: dict[str, Any]) -> bool:
    return isinstance(body.get("beat"), bool)


def _parse_data_event(body: dict[str, Any]) -> DataEvent | None:
    data = body.get("data")
    source = body.get("from")
    event_id = body.get("id")
    event_type = body.get("type")

    # bool is an int subclass
    if isinstance(event_id, bool) or not isinstance(event_id, int):
        return None
    if not isinstance(event_type, str):
        return None
    if not isinstance(data, dict) or "json" not in data:
        return None
    if not isinstance(source, dict):
        return None

    app, path, ship = source.get("appl"), source.get("path"), source.get("ship")
    if not (isinstance(app, str) and isinstance(path, str) and isinstance(ship, str)):
        return None

    return DataEvent(
        event_id=event_id,
        source=EventSource(app=app, path=path, ship=ship),
        payload=data["json"],
        type=event_type,
    )


def classify_poll(body: Any) -> PollOutcome:
    """Classify a decoded poll response body.

    Heartbeat is checked before data; anything else is a ProtocolError.
    """
    if not isinstance(body, dict):
        return ProtocolError(f"Poll response must be a JSON object, got {type(body).__name__}")
    if _is_heartbeat(body):
        return Heartbeat()
    event = _parse_data_event(body)
    if event is not None:
        return event
    return ProtocolError(f"Unrecognized poll response with keys {sorted(body)}")


# --------------------------------------------------------------------------
# Error bodies
# --------------------------------------------------------------------------


@dataclass(frozen=True)
class ErrorPayload:
    """Structured error body ``{fail, mess}``."""

    failure_code: str
    message: str


def parse_error_payload(data: Any) -> ErrorPayload | None:
    """Return the ``{fail, mess}`` payload, or None when the shape differs."""
    if not isinstance(data, dict):
        return None
    fail, mess = data.get("fail"), data.get("mess")
    if not isinstance(fail, str) or not isinstance(mess, str):
        return None
    return ErrorPayload(failure_code=fail, message=mess)
