"""Shared pytest configuration for velotype tests."""

from __future__ import annotations

import sys
from pathlib import Path
from unittest.mock import MagicMock

import pytest

# Tests import `velotype.xxx`; make the project root importable when the
# package has not been installed.
_PROJECT_ROOT = str(Path(__file__).resolve().parent.parent.parent)
if _PROJECT_ROOT not in sys.path:
    sys.path.insert(0, _PROJECT_ROOT)

from velotype.input.pacer import Pacer


# ---------------------------------------------------------------------------
# Shared fixtures
# ---------------------------------------------------------------------------

_VELOTYPE_ENV = (
    'VELOTYPE_WAIT', 'VELOTYPE_BUMP', 'VELOTYPE_LINE', 'VELOTYPE_END',
    'VELOTYPE_PAUSE', 'VELOTYPE_FORCE', 'VELOTYPE_DRY_RUN', 'VELOTYPE_SKIP',
    'VELOTYPE_DEBUG', 'LOG_LEVEL',
)


@pytest.fixture()
def clean_env(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> Path:
    """Clear velotype env vars and point HOME/cwd at an empty temp dir."""
    # setenv first so teardown also removes anything load_dotenv() added.
    for key in _VELOTYPE_ENV:
        monkeypatch.setenv(key, '')
        monkeypatch.delenv(key)
    monkeypatch.setenv('HOME', str(tmp_path))
    monkeypatch.chdir(tmp_path)
    return tmp_path


@pytest.fixture()
def sink() -> MagicMock:
    """Stand-in for TerminalSink recording inject/write calls."""
    return MagicMock()


@pytest.fixture()
def sleeps() -> list[int]:
    return []


@pytest.fixture()
def confirm() -> MagicMock:
    return MagicMock()


@pytest.fixture()
def pacer(sink: MagicMock, sleeps: list[int], confirm: MagicMock) -> Pacer:
    """Pacer wired to mocks; sleeps are recorded, not performed."""
    return Pacer(sink, sleep=sleeps.append, confirm=confirm)


def injected(sink: MagicMock) -> bytes:
    """All bytes passed to sink.inject, in order."""
    return bytes(c.args[0] for c in sink.inject.call_args_list)


def written(sink: MagicMock) -> bytes:
    """All bytes passed to sink.write, concatenated."""
    return b''.join(c.args[0] for c in sink.write.call_args_list)
