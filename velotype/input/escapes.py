"""
Escape decoding: descriptor text to an ordered stream of typing events.

Grammar (after a backslash):
  \\a \\b \\e \\f \\n \\r \\t   control characters
  \\p                    pause for config.pause ms
  \\P                    wait for confirmation (skipped when config.force)
  \\u{HEX}               Unicode code point, sent as UTF-8 bytes
  \\x{HHHH...}           raw bytes, two hex digits each
  \\xHH                  one raw byte
  \\^X                   caret-notation control character
  \\<other>              the character itself
A trailing lone backslash ends decoding. Malformed numeric escapes are
dropped silently.
"""

from __future__ import annotations

import logging
from collections.abc import Iterator
from dataclasses import dataclass

from velotype.config import Config
from velotype.input.utf8 import encode_code_point

log = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Events
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class Byte:
    """One byte to type."""

    value: int


@dataclass(frozen=True)
class Pause:
    """Sleep without typing anything."""

    duration_ms: int


@dataclass(frozen=True)
class ConfirmRequest:
    """Block until the operator acknowledges."""

    message: str | None = None


Event = Byte | Pause | ConfirmRequest


# ---------------------------------------------------------------------------
# Tables
# ---------------------------------------------------------------------------

_SIMPLE_ESCAPES: dict[int, int] = {
    ord('a'): 0x07,  # BEL
    ord('b'): 0x08,  # BS
    ord('e'): 0x1B,  # ESC
    ord('f'): 0x0C,  # FF
    ord('n'): 0x0A,  # LF
    ord('r'): 0x0D,  # CR
    ord('t'): 0x09,  # TAB
}

_CARET_SPECIALS: dict[int, int] = {
    ord('['): 0x1B,   # ESC
    ord('\\'): 0x1C,  # FS
    ord(']'): 0x1D,   # GS
    ord('^'): 0x1E,   # RS
    ord('_'): 0x1F,   # US
    ord('?'): 0x7F,   # DEL
    ord('@'): 0x00,   # NUL
}

_HEX_DIGITS = frozenset(b'0123456789abcdefABCDEF')
_BACKSLASH = ord('\\')
_OPEN_BRACE = ord('{')
_CLOSE_BRACE = ord('}')


def caret_control(char: int) -> int:
    """Map the X of '\\^X' to its control code (space if it has none)."""
    val = char - (ord('A') - 1)
    if 0 < val < 0x1B:
        return val
    val = char - (ord('a') - 1)
    if 0 < val < 0x1B:
        return val
    return _CARET_SPECIALS.get(char, ord(' '))


def _hex_run(data: bytes, pos: int) -> int:
    """Index of the first non-hex byte at or after pos."""
    end = pos
    while end < len(data) and data[end] in _HEX_DIGITS:
        end += 1
    return end


def _is_hex_pair(data: bytes, pos: int) -> bool:
    return pos + 1 < len(data) and data[pos] in _HEX_DIGITS and data[pos + 1] in _HEX_DIGITS


def _as_bytes(data: bytes | str) -> bytes:
    if isinstance(data, str):
        return data.encode('utf-8', 'surrogateescape')
    return bytes(data)


def decode(data: bytes | str, config: Config) -> Iterator[Event]:
    """Yield the events for one descriptor, in order.

    Pure with respect to config: the same input and config always yield
    the same events.
    """
    buf = _as_bytes(data)
    n = len(buf)
    i = 0

    while i < n:
        c = buf[i]
        i += 1
        if c != _BACKSLASH:
            yield Byte(c)
            continue

        if i >= n:
            return  # dangling backslash
        c = buf[i]
        i += 1

        if c in _SIMPLE_ESCAPES:
            yield Byte(_SIMPLE_ESCAPES[c])

        elif c == ord('p'):
            yield Pause(config.pause)

        elif c == ord('P'):
            if not config.force:
                yield ConfirmRequest()

        elif c == ord('u'):
            if i < n and buf[i] == _OPEN_BRACE:
                start = i + 1
                end = _hex_run(buf, start)
                terminated = end < n and buf[end] == _CLOSE_BRACE
                # The byte after the digits is consumed either way.
                i = min(end + 1, n)
                if end > start and terminated:
                    cp = int(buf[start:end], 16)
                    if config.debug:
                        log.debug('[wide %#06x]', cp)
                    for b in encode_code_point(cp):
                        yield Byte(b)

        elif c == ord('x'):
            if i < n and buf[i] == _OPEN_BRACE:
                i += 1
                while _is_hex_pair(buf, i):
                    yield Byte(int(buf[i:i + 2], 16))
                    i += 2
                i = min(i + 1, n)  # closing brace, or the first bad byte
            elif _is_hex_pair(buf, i):
                yield Byte(int(buf[i:i + 2], 16))
                i += 2

        elif c == ord('^'):
            if i < n:
                yield Byte(caret_control(buf[i]))
                i += 1
            else:
                yield Byte(ord(' '))

        else:
            yield Byte(c)
