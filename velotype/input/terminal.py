"""
Terminal plumbing: the injection target and the confirmation prompt.

Bytes are stuffed into the target terminal's input queue with the TIOCSTI
ioctl, as if typed at its keyboard. Dry-run and terminal-capability output
bypass the input queue and are written straight to the target.
"""

from __future__ import annotations

import fcntl
import logging
import os
import sys
import termios
from typing import TextIO

log = logging.getLogger(__name__)

STDOUT_FD = 1

# vt100 sequences; no terminfo lookup.
TPUT_SEQUENCES: dict[str, bytes] = {
    'clear': b'\x1b[H\x1b[2J\x1b[3J',
    'home': b'\x1b[H',
}

DEFAULT_CONFIRM_MESSAGE = 'paused'


class TerminalSink:
    """Owns the file descriptor that bytes are injected into."""

    def __init__(self, fd: int = STDOUT_FD) -> None:
        self._fd = fd
        self._owned = False
        self.path: str | None = None

    @property
    def fd(self) -> int:
        return self._fd

    def open(self, path: str) -> None:
        """Point the sink at a different terminal. OSError if it cannot be opened."""
        try:
            fd = os.open(path, os.O_WRONLY)
        except OSError as exc:
            raise OSError(exc.errno, f"cannot open terminal: '{path}'") from exc
        self.close()
        self._fd = fd
        self._owned = True
        self.path = path
        log.info('Typing into %s', path)

    def inject(self, byte: int) -> None:
        """Push one byte into the terminal's pending input."""
        fcntl.ioctl(self._fd, termios.TIOCSTI, bytes([byte]))

    def write(self, data: bytes) -> None:
        """Write bytes to the terminal's output (not its input queue)."""
        os.write(self._fd, data)

    def close(self) -> None:
        if self._owned:
            os.close(self._fd)
        self._fd = STDOUT_FD
        self._owned = False
        self.path = None


class Confirmer:
    """
    Prompts on a terminal and blocks until a line is entered.

    Defaults to stdin/stdout; open() switches to a terminal device used
    for both prompt and reply.
    """

    def __init__(
        self,
        input_stream: TextIO | None = None,
        output_stream: TextIO | None = None,
    ) -> None:
        self._input = input_stream
        self._output = output_stream
        self._device: TextIO | None = None

    def open(self, path: str) -> None:
        """Use the terminal at path for confirmations. OSError if it cannot be opened."""
        try:
            device = open(path, 'r+')
        except OSError as exc:
            raise OSError(exc.errno, f"could not open confirmation: '{path}'") from exc
        self.close()
        self._device = device
        log.info('Confirmations on %s', path)

    def close(self) -> None:
        if self._device is not None:
            self._device.close()
            self._device = None

    def __call__(self, message: str | None = None) -> None:
        inp = self._device or self._input or sys.stdin
        out = self._device or self._output or sys.stdout

        out.write(f'[{message or DEFAULT_CONFIRM_MESSAGE}; press enter to continue]\n>>> ')
        out.flush()
        inp.readline()  # content is ignored
