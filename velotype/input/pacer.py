"""
Pacing: turn decoded events into timed terminal input.

Per byte:
  - CR/LF waits config.end before it is sent
  - sent via the sink (injected, or written directly in dry-run)
  - then waits config.wait plus a random 0..bump-1 ms jitter
  - CR/LF waits config.line after it is sent
Skip mode drops bytes with no delays at all; dry-run takes precedence.
"""

from __future__ import annotations

import logging
import random
import time
from collections.abc import Callable, Iterable
from typing import Protocol

from velotype.config import Config
from velotype.input.escapes import Byte, ConfirmRequest, Event, Pause
from velotype.input.terminal import DEFAULT_CONFIRM_MESSAGE

log = logging.getLogger(__name__)

_LINE_ENDS = frozenset((0x0A, 0x0D))


class Sink(Protocol):
    def inject(self, byte: int) -> None: ...

    def write(self, data: bytes) -> None: ...


def sleep_ms(ms: int) -> None:
    """Blocking millisecond sleep."""
    if ms > 0:
        time.sleep(ms / 1000.0)


class Pacer:
    """Feeds events to a sink with human-ish timing."""

    def __init__(
        self,
        sink: Sink,
        sleep: Callable[[int], None] = sleep_ms,
        confirm: Callable[[str | None], None] | None = None,
        rng: random.Random | None = None,
    ) -> None:
        self._sink = sink
        self._sleep = sleep
        self._confirm = confirm
        self._rng = rng or random.Random()

    def jitter(self, config: Config) -> int:
        """Random extra delay in [0, bump); 0 when bump is unset."""
        return self._rng.randrange(config.bump) if config.bump else 0

    def type_byte(self, value: int, config: Config) -> None:
        if config.debug:
            log.debug('[char %#04x]', value)

        if config.skip and not config.dry_run:
            return

        line_end = value in _LINE_ENDS
        if line_end and config.end:
            self._sleep(config.end)

        if config.dry_run:
            self._sink.write(bytes([value]))
        else:
            self._sink.inject(value)

        if config.wait:
            self._sleep(config.wait + self.jitter(config))

        if line_end and config.line:
            self._sleep(config.line)

    def feed(self, event: Event, config: Config) -> None:
        if isinstance(event, Byte):
            self.type_byte(event.value, config)
        elif isinstance(event, Pause):
            self._sleep(event.duration_ms)
        elif isinstance(event, ConfirmRequest):
            if self._confirm is None:
                raise RuntimeError('No confirmation source configured')
            self._confirm(event.message or DEFAULT_CONFIRM_MESSAGE)
        else:
            raise TypeError(f'Unknown event: {event!r}')

    def run(self, events: Iterable[Event], config: Config) -> None:
        for event in events:
            self.feed(event, config)
