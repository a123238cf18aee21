"""Tests for exception to UnifiedError translation."""

from __future__ import annotations

import json

from urbit_channel.errors import (
    DecodeFailedError,
    InvalidPartLengthError,
    NoDecoderFoundError,
    UrbitBadUrlError,
    UrbitClientError,
    UrbitConnectionError,
    UrbitDecodeError,
    UrbitProtocolError,
    UrbitResponseError,
    UrbitTimeout,
)
from urbit_channel.protocol import ErrorPayload
from urbit_channel.translate import ErrorKind, translate_error


class TestTransportErrors:
    """Transport failures."""

    def test_timeout(self) -> None:
        error = translate_error(UrbitTimeout("GET /~/auth.json timed out"))
        assert error.kind is ErrorKind.TIMEOUT
        assert error.payload is None

    def test_network(self) -> None:
        assert translate_error(UrbitConnectionError("down")).kind is ErrorKind.NETWORK

    def test_bad_url(self) -> None:
        assert translate_error(UrbitBadUrlError("bad")).kind is ErrorKind.BAD_URL

    def test_bad_status_with_structured_body(self) -> None:
        body = json.dumps({"fail": "no-app", "mess": "app not running"})
        error = translate_error(UrbitResponseError(500, "failed", body))
        assert error.kind is ErrorKind.BAD_STATUS
        assert "500" in error.description
        assert error.payload == ErrorPayload("no-app", "app not running")

    def test_bad_status_with_unparseable_body(self) -> None:
        error = translate_error(UrbitResponseError(502, "failed", "<html>gateway</html>"))
        assert error.kind is ErrorKind.BAD_STATUS
        assert error.payload is None

    def test_bad_status_without_body(self) -> None:
        assert translate_error(UrbitResponseError(404, "failed")).payload is None


class TestDecodeErrors:
    """Malformed bodies."""

    def test_auth_redirect_unsupported(self) -> None:
        body = json.dumps({"ok": True, "red": True})
        error = translate_error(UrbitDecodeError("bad shape", body))
        assert error.kind is ErrorKind.AUTH_REDIRECT
        assert "redirect" in error.description

    def test_auth_rejected(self) -> None:
        body = json.dumps({"ok": False, "red": False})
        error = translate_error(UrbitDecodeError("bad shape", body))
        assert error.kind is ErrorKind.AUTH_REJECTED
        assert "rejected" in error.description

    def test_decode_failure_with_payload(self) -> None:
        body = json.dumps({"fail": "crash", "mess": "stack trace"})
        error = translate_error(UrbitDecodeError("bad shape", body))
        assert error.kind is ErrorKind.DECODE
        assert error.payload == ErrorPayload("crash", "stack trace")

    def test_decode_failure_fallback(self) -> None:
        error = translate_error(UrbitDecodeError("not json", "{{{"))
        assert error.kind is ErrorKind.DECODE
        assert error.payload is None


class TestOtherErrors:
    """Protocol, codec and validation errors."""

    def test_protocol(self) -> None:
        error = translate_error(UrbitProtocolError("missing oryx"))
        assert error.kind is ErrorKind.PROTOCOL
        assert error.description == "missing oryx"

    def test_no_decoder(self) -> None:
        error = translate_error(NoDecoderFoundError("/x"))
        assert error.kind is ErrorKind.NO_DECODER
        assert "/x" in error.description

    def test_decode_failed(self) -> None:
        error = translate_error(DecodeFailedError("/x", "bad text"))
        assert error.kind is ErrorKind.DECODE_FAILED
        assert "bad text" in error.description

    def test_validation(self) -> None:
        error = translate_error(InvalidPartLengthError("abcdefg", "bad length"))
        assert error.kind is ErrorKind.VALIDATION

    def test_generic_client_error(self) -> None:
        assert translate_error(UrbitClientError("odd")).kind is ErrorKind.UNKNOWN

    def test_foreign_exception(self) -> None:
        error = translate_error(RuntimeError("boom"))
        assert error.kind is ErrorKind.UNKNOWN
        assert "boom" in error.description
