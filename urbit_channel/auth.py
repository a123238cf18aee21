"""Authentication handshake for the Urbit event channel.

The handshake runs up to three requests:

    initial  GET /~/auth.json               learn the serving ship
    self     GET /~/as/~{ship}/~/auth.json  act as that ship
    anon     GET /~/as/anon/~/auth.json     optional fallback

Connected is reached only through a successful self or anon auth. The
anon fallback runs at most once and never leads to a second self auth.
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from enum import Enum
from typing import TYPE_CHECKING, Any

from .errors import UrbitClientError, UrbitDecodeError, UrbitProtocolError
from .protocol import (
    ANON_AUTH_PATH,
    AUTH_PATH,
    AuthCredentials,
    parse_auth_response,
    self_auth_path,
)
from .ship import ShipAddress, parse_ship
from .translate import UnifiedError, translate_error

if TYPE_CHECKING:
    from .http import ChannelTransport

_LOGGER = logging.getLogger(__name__)


class AuthState(Enum):
    """Handshake progress."""

    UNAUTHENTICATED = "unauthenticated"
    AWAITING_INITIAL_AUTH = "awaiting_initial_auth"
    AWAITING_SELF_AUTH = "awaiting_self_auth"
    AWAITING_ANON_AUTH = "awaiting_anon_auth"
    CONNECTED = "connected"
    DISCONNECTED = "disconnected"


@dataclass(frozen=True)
class AuthResult:
    """Outcome of a handshake.

    Attributes:
        state: CONNECTED or DISCONNECTED.
        credentials: Latest credentials the ship issued, if any.
        ship: Identity the session acts as, when connected.
        error: Failure that ended the handshake, when disconnected.
    """

    state: AuthState
    credentials: AuthCredentials | None = None
    ship: ShipAddress | None = None
    error: UnifiedError | None = None

    @property
    def connected(self) -> bool:
        return self.state is AuthState.CONNECTED


class AuthSession:
    """Runs the initial -> self -> (anon) auth state machine."""

    def __init__(
        self,
        transport: ChannelTransport,
        *,
        allow_anonymous_fallback: bool = False,
        name: str = "urbit",
    ) -> None:
        self._transport = transport
        self._allow_anonymous_fallback = allow_anonymous_fallback
        self._name = name
        self._state = AuthState.UNAUTHENTICATED
        self._credentials: AuthCredentials | None = None

    @property
    def state(self) -> AuthState:
        return self._state

    @property
    def credentials(self) -> AuthCredentials | None:
        return self._credentials

    @property
    def allow_anonymous_fallback(self) -> bool:
        return self._allow_anonymous_fallback

    def _set_state(self, state: AuthState) -> None:
        if self._state != state:
            _LOGGER.debug("[%s] Auth: %s → %s", self._name, self._state.value, state.value)
            self._state = state

    async def _request(self, path: str) -> AuthCredentials:
        data: Any = await self._transport.get_json(path)
        try:
            return parse_auth_response(data)
        except UrbitProtocolError as err:
            raise UrbitDecodeError(str(err), json.dumps(data)) from err

    def _fail(self, error: UnifiedError) -> AuthResult:
        self._set_state(AuthState.DISCONNECTED)
        _LOGGER.error("[%s] Authentication failed: %s", self._name, error.description)
        return AuthResult(AuthState.DISCONNECTED, self._credentials, error=error)

    def _connect(self, credentials: AuthCredentials, identity: str) -> AuthResult:
        """Adopt credentials and derive the ship they act as."""
        ship = parse_ship(identity)
        self._credentials = credentials
        self._set_state(AuthState.CONNECTED)
        _LOGGER.info("[%s] Authenticated as %s", self._name, ship)
        return AuthResult(AuthState.CONNECTED, credentials, ship)

    async def _self_auth(self, ship: str) -> AuthResult:
        self._set_state(AuthState.AWAITING_SELF_AUTH)
        credentials = await self._request(self_auth_path(ship))
        if not credentials.auth:
            raise UrbitProtocolError("Self auth granted no identities")
        return self._connect(credentials, credentials.auth[0])

    async def _anon_auth(self) -> AuthResult:
        self._set_state(AuthState.AWAITING_ANON_AUTH)
        try:
            credentials = await self._request(ANON_AUTH_PATH)
            return self._connect(credentials, credentials.user)
        except UrbitClientError as err:
            return self._fail(translate_error(err))

    async def begin(self) -> AuthResult:
        """Run the handshake from the start.

        Returns:
            AuthResult with state CONNECTED or DISCONNECTED. Failures are
            returned as values, never raised.
        """
        self._set_state(AuthState.AWAITING_INITIAL_AUTH)
        try:
            initial = await self._request(AUTH_PATH)
        except UrbitClientError as err:
            return self._fail(translate_error(err))

        self._credentials = initial
        _LOGGER.debug("[%s] Initial auth ok, ship ~%s", self._name, initial.ship.lstrip("~"))

        try:
            return await self._self_auth(initial.ship)
        except UrbitClientError as err:
            error = translate_error(err)
            if not self._allow_anonymous_fallback:
                return self._fail(error)
            _LOGGER.warning(
                "[%s] Self auth failed (%s), falling back to anonymous",
                self._name,
                error.description,
            )
            return await self._anon_auth()
