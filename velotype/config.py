"""
velotype configuration.

Frozen dataclass loaded from environment variables.
Loads ~/.velotype/velotype.env first, then .env in the current directory
(without overriding). Command-line and script option lines never mutate a
Config: they produce a new one via overlay().
"""

from __future__ import annotations

import os
from dataclasses import dataclass, fields, replace
from pathlib import Path

from dotenv import load_dotenv

# Time is carried internally as whole milliseconds.
MSECS_PER_SEC = 1000
USECS_PER_MSEC = 1000
NSECS_PER_MSEC = 1000 * 1000

TIMING_FIELDS = ('wait', 'bump', 'line', 'end', 'pause')
FLAG_FIELDS = ('force', 'dry_run', 'skip', 'debug')

# (unit name, multiplier, divisor). A suffix matches when it is a prefix of
# the unit name; the first match in this order wins.
_UNITS: tuple[tuple[str, int, int], ...] = (
    ('seconds', MSECS_PER_SEC, 1),
    ('milliseconds', 1, 1),
    ('ms', 1, 1),
    ('microseconds', 1, USECS_PER_MSEC),
    ('us', 1, USECS_PER_MSEC),
    ('nanoseconds', 1, NSECS_PER_MSEC),
    ('ns', 1, NSECS_PER_MSEC),
)


def parse_duration(value: str) -> int:
    """Parse a time value like '250', '2s', '1500us' into milliseconds.

    No suffix means milliseconds. Raises ValueError for a missing number
    or an unknown unit.
    """
    text = value.strip()
    digits = len(text) - len(text.lstrip('0123456789'))
    if digits == 0:
        raise ValueError(f"invalid time value: '{value}'")

    amount = int(text[:digits])
    suffix = text[digits:]
    if not suffix:
        return amount

    for name, mul, div in _UNITS:
        if name.startswith(suffix):
            return amount * mul // div

    raise ValueError(f"unknown time unit: '{suffix}'")


def _bool(key: str, default: str = '') -> bool:
    return os.environ.get(key, default).strip().lower() in ('1', 'true', 'yes')


def _duration(key: str) -> int:
    raw = os.environ.get(key, '').strip()
    return parse_duration(raw) if raw else 0


@dataclass(frozen=True)
class Config:
    """Immutable typing configuration. All timings are milliseconds."""

    # Delays
    wait: int = 0    # after every character
    bump: int = 0    # exclusive upper bound of random jitter added to wait
    line: int = 0    # after CR/LF
    end: int = 0     # before CR/LF
    pause: int = 0   # for '\p'

    # Flags
    force: bool = False    # ignore confirmation requests
    dry_run: bool = False  # write bytes to the target instead of injecting
    skip: bool = False     # drop bytes, no delays
    debug: bool = False

    # Logging
    log_level: str = 'INFO'

    def __post_init__(self) -> None:
        for name in TIMING_FIELDS:
            if getattr(self, name) < 0:
                raise ValueError(f'{name} must be non-negative, got {getattr(self, name)}')

    def overlay(self, **changes: object) -> Config:
        """Return a copy with the given fields replaced; others unchanged."""
        known = {f.name for f in fields(self)}
        unknown = set(changes) - known
        if unknown:
            raise ValueError(f"Unknown config fields: {', '.join(sorted(unknown))}")
        if not changes:
            return self
        return replace(self, **changes)

    @classmethod
    def load(cls) -> Config:
        """Load startup defaults from environment variables.

        Reads ~/.velotype/velotype.env first, then .env in the current
        directory (which does not override). Raises ValueError on a
        malformed VELOTYPE_* time value.
        """
        component_env = Path.home() / '.velotype' / 'velotype.env'
        local_env = Path.cwd() / '.env'
        if component_env.exists():
            load_dotenv(component_env)
        if local_env.exists():
            load_dotenv(local_env, override=False)

        return cls(
            wait=_duration('VELOTYPE_WAIT'),
            bump=_duration('VELOTYPE_BUMP'),
            line=_duration('VELOTYPE_LINE'),
            end=_duration('VELOTYPE_END'),
            pause=_duration('VELOTYPE_PAUSE'),
            force=_bool('VELOTYPE_FORCE'),
            dry_run=_bool('VELOTYPE_DRY_RUN'),
            skip=_bool('VELOTYPE_SKIP'),
            debug=_bool('VELOTYPE_DEBUG'),
            log_level=os.environ.get('LOG_LEVEL', 'INFO').strip().upper(),
        )
