"""Client for the Urbit HTTP event channel and ship name parsing."""

__version__ = "0.1.0"

from .auth import AuthResult, AuthSession, AuthState
from .channel import ChannelClient, ChannelEvent, ConnectionState
from .codec import CodecEntry, CodecRegistry
from .config import ChannelConfig, ConfigLoadError, load_config
from .errors import (
    DecodeFailedError,
    InvalidGroupingError,
    InvalidPartCountError,
    InvalidPartLengthError,
    InvalidSyllableError,
    NoDecoderFoundError,
    ShipValidationError,
    UrbitBadUrlError,
    UrbitClientError,
    UrbitCodecError,
    UrbitConnectionError,
    UrbitDecodeError,
    UrbitProtocolError,
    UrbitResponseError,
    UrbitTimeout,
    ValidationReason,
)
from .http import ChannelTransport, UrbitHttpClient
from .protocol import (
    AuthCredentials,
    DataEvent,
    ErrorPayload,
    EventSource,
    Heartbeat,
    PokeRequest,
    PollOutcome,
    ProtocolError,
    SubscriptionAction,
    SubscriptionRequest,
    classify_poll,
)
from .ship import ShipAddress, ShipClass, is_valid_ship, parse_ship
from .translate import ErrorKind, UnifiedError, translate_error

__all__ = [
    "AuthCredentials",
    "AuthResult",
    "AuthSession",
    "AuthState",
    "ChannelClient",
    "ChannelConfig",
    "ChannelEvent",
    "ChannelTransport",
    "CodecEntry",
    "CodecRegistry",
    "ConfigLoadError",
    "ConnectionState",
    "DataEvent",
    "DecodeFailedError",
    "ErrorKind",
    "ErrorPayload",
    "EventSource",
    "Heartbeat",
    "InvalidGroupingError",
    "InvalidPartCountError",
    "InvalidPartLengthError",
    "InvalidSyllableError",
    "NoDecoderFoundError",
    "PokeRequest",
    "PollOutcome",
    "ProtocolError",
    "ShipAddress",
    "ShipClass",
    "ShipValidationError",
    "SubscriptionAction",
    "SubscriptionRequest",
    "UnifiedError",
    "UrbitBadUrlError",
    "UrbitClientError",
    "UrbitCodecError",
    "UrbitConnectionError",
    "UrbitDecodeError",
    "UrbitHttpClient",
    "UrbitProtocolError",
    "UrbitResponseError",
    "UrbitTimeout",
    "ValidationReason",
    "__version__",
    "classify_poll",
    "is_valid_ship",
    "load_config",
    "parse_ship",
    "translate_error",
]
