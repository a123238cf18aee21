"""Client error types for Urbit channel interactions."""

from __future__ import annotations

from enum import Enum


class UrbitClientError(Exception):
    """Base error for Urbit channel client failures."""


class UrbitTimeout(UrbitClientError):
    """Timeout while communicating with the ship."""


class UrbitConnectionError(UrbitClientError):
    """Network connection to the ship failed."""


class UrbitBadUrlError(UrbitClientError):
    """Request URL could not be built or was rejected by the HTTP layer."""


class UrbitResponseError(UrbitClientError):
    """Non-2xx HTTP response from the ship."""

    def __init__(self, status: int, message: str, body: str | None = None) -> None:
        super().__init__(message)
        self.status = status
        self.body = body


class UrbitDecodeError(UrbitClientError):
    """Response body could not be decoded as JSON."""

    def __init__(self, message: str, body: str | None = None) -> None:
        super().__init__(message)
        self.body = body


class UrbitProtocolError(UrbitClientError):
    """Decoded JSON did not have the shape the channel protocol requires."""


class UrbitCodecError(UrbitClientError):
    """Base error for payload codec dispatch."""

    def __init__(self, path: str, message: str) -> None:
        super().__init__(message)
        self.path = path


class NoDecoderFoundError(UrbitCodecError):
    """No registered pattern matched the event path."""

    def __init__(self, path: str) -> None:
        super().__init__(path, f"No decoder registered for path {path!r}")


class DecodeFailedError(UrbitCodecError):
    """The matching decoder rejected the payload."""

    def __init__(self, path: str, details: str) -> None:
        super().__init__(path, f"Decoder for {path!r} failed: {details}")
        self.details = details


class ValidationReason(Enum):
    """Why a ship address was rejected."""

    INVALID_GROUPING = "invalid_grouping"
    INVALID_PART_LENGTH = "invalid_part_length"
    INVALID_SYLLABLE = "invalid_syllable"
    INVALID_PART_COUNT = "invalid_part_count"


class ShipValidationError(UrbitClientError):
    """Ship address failed validation."""

    reason: ValidationReason

    def __init__(self, address: str, message: str) -> None:
        super().__init__(message)
        self.address = address


class InvalidGroupingError(ShipValidationError):
    """Separators are missing or misplaced."""

    reason = ValidationReason.INVALID_GROUPING


class InvalidPartLengthError(ShipValidationError):
    """A part is neither 3 nor 6 characters long."""

    reason = ValidationReason.INVALID_PART_LENGTH


class InvalidSyllableError(ShipValidationError):
    """A syllable is not in its prefix or suffix table."""

    reason = ValidationReason.INVALID_SYLLABLE


class InvalidPartCountError(ShipValidationError):
    """The number of parts does not map to any ship class."""

    reason = ValidationReason.INVALID_PART_COUNT
