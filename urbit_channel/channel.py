"""High-level channel client for an Urbit ship.

This module provides the API applications use to talk to a ship. It handles:
- Authentication (via AuthSession) and connection state
- Pokes and subscriptions
- The long-poll loop and its event cursor
- Routing event payloads through the codec registry

All failures are recorded as UnifiedError values and reported through the
error callback; none are raised to the caller.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Callable
from dataclasses import dataclass
from enum import Enum
from typing import TYPE_CHECKING, Any

from .auth import AuthResult, AuthSession
from .errors import UrbitClientError, UrbitCodecError
from .http import UrbitHttpClient
from .protocol import (
    AuthCredentials,
    DataEvent,
    EventSource,
    Heartbeat,
    PokeRequest,
    PollOutcome,
    ProtocolError,
    SubscriptionAction,
    SubscriptionRequest,
    build_poke_body,
    build_subscription_body,
    classify_poll,
    poke_path,
    poll_path,
    subscription_path,
)
from .translate import ErrorKind, UnifiedError, translate_error

if TYPE_CHECKING:
    import aiohttp

    from .codec import CodecRegistry
    from .config import ChannelConfig
    from .http import ChannelTransport
    from .ship import ShipAddress

_LOGGER = logging.getLogger(__name__)

INITIAL_CURSOR = 1


class ConnectionState(Enum):
    """Connection state derived from the last auth outcome."""

    DISCONNECTED = "disconnected"
    CONNECTED = "connected"


@dataclass(frozen=True)
class ChannelEvent:
    """A decoded subscription event.

    Attributes:
        event_id: Sequence number assigned by the ship.
        source: Application, path and ship that produced the event.
        value: Result of the matching decoder.
    """

    event_id: int
    source: EventSource
    value: Any


class ChannelClient:
    """Client for one ship's HTTP event channel.

    Usage:
        codecs = CodecRegistry().register("/chat/*", decode_chat)
        client = ChannelClient.from_config(session, config, codecs)
        client.on_event(handle_event)
        await client.bootstrap()
        await client.subscribe(SubscriptionRequest("zod", "chat", "json", "/chat/inbox"))
        await client.poke(PokeRequest("zod", "chat", "json", "/chat/inbox", {"text": "hi"}))
        await client.close()
    """

    def __init__(
        self,
        transport: ChannelTransport,
        codecs: CodecRegistry,
        *,
        allow_anonymous_fallback: bool = False,
        name: str = "urbit",
    ) -> None:
        """Initialize client.

        Args:
            transport: HTTP capability used for every request
            codecs: Decoders for event payloads, matched by event path
            allow_anonymous_fallback: Retry as anonymous when self auth fails
            name: Label for log messages
        """
        self.name = name
        self._transport = transport
        self._codecs = codecs
        self._auth = AuthSession(
            transport,
            allow_anonymous_fallback=allow_anonymous_fallback,
            name=name,
        )

        # Session state
        self._connection_state = ConnectionState.DISCONNECTED
        self._credentials: AuthCredentials | None = None
        self._ship: ShipAddress | None = None
        self._last_error: UnifiedError | None = None

        # Poll loop
        self._cursor = INITIAL_CURSOR
        self._poll_task: asyncio.Task[None] | None = None
        self._shutdown_requested = False

        # Callbacks
        self._event_callback: Callable[[ChannelEvent], None] | None = None
        self._error_callback: Callable[[UnifiedError], None] | None = None
        self._connection_state_callback: Callable[[ConnectionState], None] | None = None

    @classmethod
    def from_config(
        cls,
        session: aiohttp.ClientSession,
        config: ChannelConfig,
        codecs: CodecRegistry,
    ) -> ChannelClient:
        """Build a client with an aiohttp transport from a ChannelConfig."""
        transport = UrbitHttpClient(
            session,
            config.url,
            request_timeout=config.request_timeout,
            poll_timeout=config.poll_timeout,
        )
        return cls(
            transport,
            codecs,
            allow_anonymous_fallback=config.allow_anonymous_fallback,
            name=config.label,
        )

    # -------------------------------------------------------------------------
    # Public API: State
    # -------------------------------------------------------------------------

    @property
    def connection_state(self) -> ConnectionState:
        return self._connection_state

    @property
    def is_connected(self) -> bool:
        return self._connection_state is ConnectionState.CONNECTED

    @property
    def credentials(self) -> AuthCredentials | None:
        return self._credentials

    @property
    def ship(self) -> ShipAddress | None:
        """Identity the session acts as, once connected."""
        return self._ship

    @property
    def cursor(self) -> int:
        """Event id the next poll asks for."""
        return self._cursor

    @property
    def last_error(self) -> UnifiedError | None:
        return self._last_error

    @property
    def is_polling(self) -> bool:
        return self._poll_task is not None

    # -------------------------------------------------------------------------
    # Public API: Callbacks
    # -------------------------------------------------------------------------

    def on_event(self, callback: Callable[[ChannelEvent], None]) -> None:
        """Register callback for decoded subscription events."""
        self._event_callback = callback

    def on_error(self, callback: Callable[[UnifiedError], None]) -> None:
        """Register callback for every recorded error."""
        self._error_callback = callback

    def on_connection_state_changed(
        self, callback: Callable[[ConnectionState], None]
    ) -> None:
        """Register callback for connection state changes."""
        self._connection_state_callback = callback

    # -------------------------------------------------------------------------
    # Public API: Session
    # -------------------------------------------------------------------------

    async def bootstrap(self) -> bool:
        """Authenticate and start polling.

        May be called again to re-authenticate; credentials and connection
        state are replaced together.

        Returns:
            True if the client is connected afterwards
        """
        if self._shutdown_requested:
            _LOGGER.debug("[%s] Bootstrap aborted: client closed", self.name)
            return False

        result = await self._auth.begin()
        await self._apply_auth_result(result)

        if result.connected:
            self._start_polling()
        return result.connected

    async def close(self) -> None:
        """Stop the poll loop. In-flight pokes and subscriptions are not aborted."""
        _LOGGER.info("[%s] Closing channel", self.name)
        self._shutdown_requested = True
        await self._stop_polling()

    # -------------------------------------------------------------------------
    # Public API: Pokes and Subscriptions
    # -------------------------------------------------------------------------

    async def poke(self, request: PokeRequest) -> bool:
        """Send a poke. Runs even when disconnected.

        Returns:
            True if the ship accepted the poke
        """
        path = poke_path(request.app, request.mark)
        body = build_poke_body(request, self._oryx)
        try:
            await self._transport.post_json(path, body)
        except UrbitClientError as err:
            _LOGGER.warning("[%s] Poke %s failed: %s", self.name, path, err)
            self._set_error(translate_error(err))
            return False

        _LOGGER.debug("[%s] Poke %s sent", self.name, path)
        return True

    async def subscribe(
        self,
        request: SubscriptionRequest,
        action: SubscriptionAction = SubscriptionAction.SUBSCRIBE,
    ) -> bool:
        """Subscribe to (or unsubscribe from) a wire.

        The first success while the poll loop is idle starts it.

        Returns:
            True if the ship accepted the request
        """
        path = subscription_path(request.app, request.wire, action.value)
        body = build_subscription_body(request, self._oryx)
        try:
            await self._transport.post_json(path, body)
        except UrbitClientError as err:
            _LOGGER.warning(
                "[%s] %s %s failed: %s", self.name, action.value, request.wire, err
            )
            self._set_error(translate_error(err))
            return False

        _LOGGER.debug("[%s] %s %s ok", self.name, action.value, request.wire)
        if not self.is_polling:
            self._start_polling()
        return True

    async def unsubscribe(self, request: SubscriptionRequest) -> bool:
        """Shorthand for ``subscribe(request, SubscriptionAction.UNSUBSCRIBE)``."""
        return await self.subscribe(request, SubscriptionAction.UNSUBSCRIBE)

    # -------------------------------------------------------------------------
    # Public API: Polling
    # -------------------------------------------------------------------------

    async def poll_once(self) -> bool:
        """Issue one poll request and apply its outcome.

        Returns:
            True if the loop should re-arm. Transport failures return False.
        """
        if self._poll_task is not None and self._poll_task is not asyncio.current_task():
            _LOGGER.debug("[%s] Poll skipped: poll already in flight", self.name)
            return False
        if self._credentials is None:
            _LOGGER.debug("[%s] Poll skipped: no channel", self.name)
            return False

        path = poll_path(self._credentials.ixor, self._cursor)
        try:
            body = await self._transport.get_json(path, long_poll=True)
        except UrbitClientError as err:
            _LOGGER.warning("[%s] Poll failed, polling stopped: %s", self.name, err)
            self._set_error(translate_error(err))
            return False

        self._apply_poll_outcome(classify_poll(body))
        return True

    # -------------------------------------------------------------------------
    # Internal: State
    # -------------------------------------------------------------------------

    @property
    def _oryx(self) -> str:
        return self._credentials.oryx if self._credentials else ""

    def _set_state(self, state: ConnectionState) -> None:
        """Update connection state and notify callback."""
        if self._connection_state != state:
            _LOGGER.debug(
                "[%s] State: %s → %s",
                self.name,
                self._connection_state.value,
                state.value,
            )
            self._connection_state = state
            if self._connection_state_callback:
                try:
                    self._connection_state_callback(state)
                except Exception as err:
                    _LOGGER.exception(
                        "[%s] Connection state callback error: %s", self.name, err
                    )

    def _set_error(self, error: UnifiedError) -> None:
        self._last_error = error
        if self._error_callback:
            try:
                self._error_callback(error)
            except Exception as err:
                _LOGGER.exception("[%s] Error callback error: %s", self.name, err)

    async def _apply_auth_result(self, result: AuthResult) -> None:
        """Adopt credentials and connection state from a finished handshake."""
        previous = self._credentials
        if (
            result.credentials is not None
            and previous is not None
            and result.credentials.ixor != previous.ixor
        ):
            # New channel: events of the old one are no longer ours.
            await self._stop_polling()
            self._cursor = INITIAL_CURSOR
        elif not result.connected:
            # Auth failed: polling waits for the caller.
            await self._stop_polling()

        self._credentials = result.credentials
        self._ship = result.ship
        if result.error is not None:
            self._set_error(result.error)
        else:
            self._last_error = None
        self._set_state(
            ConnectionState.CONNECTED if result.connected else ConnectionState.DISCONNECTED
        )

    # -------------------------------------------------------------------------
    # Internal: Poll Loop
    # -------------------------------------------------------------------------

    def _start_polling(self) -> bool:
        if self._shutdown_requested or self.is_polling:
            return False
        if self._credentials is None:
            _LOGGER.debug("[%s] Polling not started: no channel", self.name)
            return False
        _LOGGER.info(
            "[%s] Polling channel %s from event %d",
            self.name,
            self._credentials.ixor,
            self._cursor,
        )
        self._arm_poll()
        return True

    def _arm_poll(self) -> None:
        self._poll_task = asyncio.create_task(self._run_poll())

    async def _run_poll(self) -> None:
        """Run one poll step, then arm the next one or stop."""
        rearm = False
        try:
            rearm = await self.poll_once()
        except asyncio.CancelledError:
            _LOGGER.debug("[%s] Poll cancelled at event %d", self.name, self._cursor)
            raise
        except Exception as err:
            _LOGGER.exception("[%s] Unexpected poll error: %s", self.name, err)
            self._set_error(translate_error(err))
        finally:
            self._poll_task = None
            if rearm and not self._shutdown_requested:
                self._arm_poll()

    async def _stop_polling(self) -> None:
        task = self._poll_task
        if task is None:
            return
        task.cancel()
        try:
            await task
        except asyncio.CancelledError:
            pass
        self._poll_task = None

    def _apply_poll_outcome(self, outcome: PollOutcome) -> None:
        """Apply a classified poll response to cursor, error and listeners."""
        if isinstance(outcome, Heartbeat):
            _LOGGER.debug("[%s] Heartbeat at event %d", self.name, self._cursor)
            return

        if isinstance(outcome, ProtocolError):
            _LOGGER.warning("[%s] Bad poll response: %s", self.name, outcome.message)
            self._set_error(UnifiedError(ErrorKind.PROTOCOL, outcome.message))
            return

        self._advance_cursor(outcome)
        try:
            value = self._codecs.dispatch(outcome.source.path, outcome.payload)
        except UrbitCodecError as err:
            _LOGGER.warning("[%s] Event %d not decoded: %s", self.name, outcome.event_id, err)
            self._set_error(translate_error(err))
            return

        self._last_error = None
        if self._event_callback:
            try:
                self._event_callback(
                    ChannelEvent(outcome.event_id, outcome.source, value)
                )
            except Exception as err:
                _LOGGER.exception("[%s] Event callback error: %s", self.name, err)

    def _advance_cursor(self, event: DataEvent) -> None:
        # Never moves backwards, even for a stale event id.
        self._cursor = max(self._cursor, event.event_id) + 1
        _LOGGER.debug(
            "[%s] Event %d from %s, next %d",
            self.name,
            event.event_id,
            event.source.path,
            self._cursor,
        )
