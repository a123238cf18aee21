"""Route incoming event payloads to application decoders by path."""

from __future__ import annotations

import re
from collections.abc import Callable
from dataclasses import dataclass
from fnmatch import fnmatchcase
from typing import Any, TypeAlias

from .errors import DecodeFailedError, NoDecoderFoundError

Decoder: TypeAlias = Callable[[Any], Any]
PathPattern: TypeAlias = str | re.Pattern[str]


@dataclass(frozen=True)
class CodecEntry:
    """A path pattern and the decoder for payloads on matching paths.

    String patterns are shell-style globs; compiled patterns must match
    the whole path.
    """

    pattern: PathPattern
    decoder: Decoder

    def matches(self, path: str) -> bool:
        if isinstance(self.pattern, re.Pattern):
            return self.pattern.fullmatch(path) is not None
        return fnmatchcase(path, self.pattern)


@dataclass(frozen=True)
class CodecRegistry:
    """Ordered, immutable list of codec entries; first match wins.

    Register specific patterns before general ones:

        codecs = (
            CodecRegistry()
            .register("/chat/*/config", decode_config)
            .register("/chat/*", decode_message)
        )
    """

    entries: tuple[CodecEntry, ...] = ()

    def register(self, pattern: PathPattern, decoder: Decoder) -> CodecRegistry:
        """Return a new registry with the entry appended."""
        return CodecRegistry(self.entries + (CodecEntry(pattern, decoder),))

    def find(self, path: str) -> CodecEntry | None:
        for entry in self.entries:
            if entry.matches(path):
                return entry
        return None

    def dispatch(self, path: str, payload: Any) -> Any:
        """Decode ``payload`` with the first decoder whose pattern matches.

        Raises:
            NoDecoderFoundError: No pattern matches ``path``.
            DecodeFailedError: The decoder raised.
        """
        entry = self.find(path)
        if entry is None:
            raise NoDecoderFoundError(path)
        try:
            return entry.decoder(payload)
        except Exception as err:
            raise DecodeFailedError(path, str(err) or type(err).__name__) from err

    def __len__(self) -> int:
        return len(self.entries)
