"""
Script files: line classification and option-line tokenizing.

Syntax:
  # comment (only when '#' is the very first character)
  -w 100 --pause=2s        option line, re-parsed like the command line
  \\# not a comment         leading backslash is stripped, rest is data
  any other line           data; the newline becomes a RETURN ('\\r')
  joined with \\            trailing backslash: no RETURN for this line

Data lines go through the escape decoder, so '\\b', '\\p', '\\u{...}' etc.
all work. Blank lines are data too (a bare RETURN).
"""

from __future__ import annotations

import enum
import logging
from collections.abc import Iterator
from dataclasses import dataclass
from pathlib import Path

log = logging.getLogger(__name__)

# Leading token so the list reads like a full argv.
PLACEHOLDER = 'command'

# Slots in an option-line argv, the terminating slot included.
MAX_ARGS = 32

_WHITESPACE = frozenset(' \t\n\v\f\r')


# ---------------------------------------------------------------------------
# Tokenizer
# ---------------------------------------------------------------------------

def tokenize(line: str) -> list[str]:
    """
    Split an option line into an argv-style list.

    Double quotes group words and are removed. A backslash is removed but
    does not protect the next character: '\\"' still toggles quoting and
    '\\ ' still ends the token. The result starts with PLACEHOLDER and
    holds at most MAX_ARGS - 1 entries.
    """
    argv = [PLACEHOLDER]
    token: list[str] | None = None
    in_quote = False

    for ch in line:
        if len(argv) >= MAX_ARGS - 1:
            break

        if ch == '\\':
            if token is None:
                token = []
            continue

        if ch == '"':
            in_quote = not in_quote
            if token is None:
                token = []
            continue

        if not in_quote and ch in _WHITESPACE:
            if token is not None:
                argv.append(''.join(token))
                token = None
            continue

        if token is None:
            token = []
        token.append(ch)

    if token is not None and len(argv) < MAX_ARGS - 1:
        argv.append(''.join(token))

    return argv


# ---------------------------------------------------------------------------
# Classifier
# ---------------------------------------------------------------------------

class LineKind(enum.Enum):
    COMMENT = 'comment'
    OPTION = 'option'
    DATA = 'data'


@dataclass(frozen=True)
class ScriptLine:
    """One classified script line."""

    kind: LineKind
    text: bytes
    terminated: bool = False  # ended with an unescaped newline

    @property
    def payload(self) -> bytes:
        """What the decoder sees: data text, plus CR when terminated."""
        return self.text + b'\r' if self.terminated else self.text

    @property
    def argv(self) -> list[str]:
        """Token list for an option line."""
        return tokenize(self.text.decode('utf-8', 'surrogateescape'))


def classify(raw: bytes) -> ScriptLine:
    """Classify one raw line, including its newline if it has one."""
    if raw.startswith(b'#'):
        return ScriptLine(LineKind.COMMENT, raw)

    if raw.startswith(b'-'):
        return ScriptLine(LineKind.OPTION, raw[:-1] if raw.endswith(b'\n') else raw)

    text = raw
    terminated = False
    if text.endswith(b'\\\n'):
        text = text[:-2]
    elif text.endswith(b'\n'):
        text = text[:-1]
        terminated = True

    if text.startswith(b'\\'):
        text = text[1:]

    return ScriptLine(LineKind.DATA, text, terminated)


def iter_script(path: str | Path) -> Iterator[ScriptLine]:
    """Yield classified lines from a script file. OSError if it cannot be opened."""
    try:
        fp = open(path, 'rb')
    except OSError as exc:
        raise OSError(exc.errno, f"could not open file '{path}'") from exc

    with fp:
        for raw in fp:
            yield classify(raw)
