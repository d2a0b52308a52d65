"""Tests for the terminal sink and confirmation prompt.

ioctl is patched; no real terminal is needed.
Run: python -m pytest velotype/tests/test_terminal.py -v
"""

from __future__ import annotations

import io
import os
import termios
from pathlib import Path
from unittest.mock import MagicMock

import pytest

from velotype.input.terminal import (
    STDOUT_FD,
    TPUT_SEQUENCES,
    Confirmer,
    TerminalSink,
)


class TestTerminalSink:

    def test_inject_uses_tiocsti(self, monkeypatch: pytest.MonkeyPatch) -> None:
        ioctl = MagicMock()
        monkeypatch.setattr('velotype.input.terminal.fcntl.ioctl', ioctl)
        sink = TerminalSink()
        sink.inject(0x41)
        ioctl.assert_called_once_with(STDOUT_FD, termios.TIOCSTI, b'A')

    def test_inject_error_propagates(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setattr(
            'velotype.input.terminal.fcntl.ioctl',
            MagicMock(side_effect=OSError(1, 'Operation not permitted')),
        )
        with pytest.raises(OSError):
            TerminalSink().inject(0x41)

    def test_open_and_write(self, tmp_path: Path) -> None:
        target = tmp_path / 'tty'
        target.write_bytes(b'')
        sink = TerminalSink()
        sink.open(str(target))
        assert sink.fd != STDOUT_FD
        assert sink.path == str(target)
        sink.write(TPUT_SEQUENCES['home'])
        sink.close()
        assert target.read_bytes() == b'\x1b[H'
        assert sink.fd == STDOUT_FD

    def test_reopen_closes_previous(self, tmp_path: Path) -> None:
        first, second = tmp_path / 'a', tmp_path / 'b'
        first.write_bytes(b'')
        second.write_bytes(b'')
        sink = TerminalSink()
        sink.open(str(first))
        old_fd = sink.fd
        sink.open(str(second))
        with pytest.raises(OSError):
            os.fstat(old_fd)
        sink.close()

    def test_open_failure(self, tmp_path: Path) -> None:
        with pytest.raises(OSError, match='cannot open terminal'):
            TerminalSink().open(str(tmp_path / 'nope' / 'tty'))

    def test_close_never_closes_stdout(self) -> None:
        sink = TerminalSink()
        sink.close()
        os.fstat(STDOUT_FD)


class TestConfirmer:

    def test_prompt_and_read(self) -> None:
        inp = io.StringIO('whatever\nnext\n')
        out = io.StringIO()
        Confirmer(inp, out)('ready')
        assert out.getvalue() == '[ready; press enter to continue]\n>>> '
        assert inp.readline() == 'next\n'

    def test_default_message(self) -> None:
        out = io.StringIO()
        Confirmer(io.StringIO('\n'), out)()
        assert out.getvalue().startswith('[paused;')

    def test_eof_does_not_block(self) -> None:
        Confirmer(io.StringIO(''), io.StringIO())('x')

    def test_device_used_for_both_directions(self, tmp_path: Path) -> None:
        device = tmp_path / 'tty'
        device.write_text('\n')
        confirmer = Confirmer(io.StringIO(), io.StringIO())
        confirmer.open(str(device))
        confirmer('go')
        confirmer.close()
        assert '[go; press enter to continue]' in device.read_text()

    def test_open_failure(self, tmp_path: Path) -> None:
        with pytest.raises(OSError, match='could not open confirmation'):
            Confirmer().open(str(tmp_path / 'missing'))
