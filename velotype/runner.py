"""
velotype session: options, argv strings and script files.

Order of work matches the command line: options are applied first (with
their side effects in the order given), then positional strings are typed
with a single space between them, then the script file, if any.
"""

from __future__ import annotations

import logging
import sys
from collections.abc import Callable, Sequence

from velotype.config import Config
from velotype.input.escapes import decode
from velotype.input.pacer import Pacer, sleep_ms
from velotype.input.terminal import TPUT_SEQUENCES, Confirmer, TerminalSink
from velotype.options import (
    ParsedOptions,
    is_config_step,
    overlay_step,
    parse_argv,
    parse_options,
)
from velotype.script import LineKind, iter_script

log = logging.getLogger(__name__)

_SPACE = 0x20


class Session:
    """Holds the current Config and the terminal resources for one run."""

    def __init__(
        self,
        config: Config,
        sink: TerminalSink | None = None,
        confirmer: Confirmer | None = None,
        sleep: Callable[[int], None] = sleep_ms,
        pacer: Pacer | None = None,
    ) -> None:
        self.config = config
        self.sink = sink or TerminalSink()
        self.confirmer = confirmer or Confirmer()
        self._sleep = sleep
        self.pacer = pacer or Pacer(self.sink, sleep=sleep, confirm=self.confirmer)
        self.script: str | None = None
        self._sync_debug()

    # ------------------------------------------------------------------
    # Options
    # ------------------------------------------------------------------

    def apply_options(self, parsed: ParsedOptions) -> None:
        """Apply option steps in order; --parse-confirm prompts last."""
        message: str | None = None

        for step in parsed.steps:
            if is_config_step(step):
                self.config = overlay_step(self.config, step)
                if step.name == 'debug':
                    self._sync_debug()
            elif step.name == 'confirm':
                self.confirmer.open(step.value)
            elif step.name == 'file':
                if self.script is not None:
                    raise ValueError(f"file name is already provided: '{self.script}'")
                self.script = step.value
            elif step.name == 'parse_confirm':
                message = step.value
            elif step.name == 'sleep':
                self._sleep(step.value)
            elif step.name == 'tput':
                self.tput(step.value)
            elif step.name == 'tty':
                self.sink.open(step.value)

        if message is not None:
            self.confirmer(message)

    def _sync_debug(self) -> None:
        level = logging.DEBUG if self.config.debug else logging.NOTSET
        logging.getLogger('velotype').setLevel(level)

    # ------------------------------------------------------------------
    # Output
    # ------------------------------------------------------------------

    def tput(self, capname: str) -> None:
        """Emit a terminal capability. Unknown names are ignored."""
        seq = TPUT_SEQUENCES.get(capname)
        if seq is None:
            log.debug('Ignoring unknown capability %r', capname)
            return

        if self.config.dry_run:
            for b in seq:
                self.pacer.type_byte(b, self.config)
        else:
            # Output, not input: the target displays it, nothing is typed.
            self.sink.write(seq)

    def type_text(self, data: bytes | str) -> None:
        self.pacer.run(decode(data, self.config), self.config)

    def type_strings(self, strings: Sequence[str]) -> None:
        for i, text in enumerate(strings):
            if i > 0:
                self.pacer.type_byte(_SPACE, self.config)
            self.type_text(text)

    def run_script(self, path: str) -> None:
        log.info('Typing script %s', path)
        lines = 0
        for line in iter_script(path):
            if line.kind is LineKind.COMMENT:
                continue
            if line.kind is LineKind.OPTION:
                parsed = parse_argv(line.argv)
                if parsed.strings:
                    log.debug('Ignoring strings on option line: %s', parsed.strings)
                self.apply_options(parsed)
                continue
            self.type_text(line.payload)
            lines += 1
        log.info('Finished script %s (%d data lines)', path, lines)

    # ------------------------------------------------------------------
    # Entry
    # ------------------------------------------------------------------

    def run(self, args: Sequence[str]) -> None:
        parsed = parse_options(args)
        self.apply_options(parsed)
        self.type_strings(parsed.strings)

        if self.script is not None:
            self.run_script(self.script)
            self.script = None

    def close(self) -> None:
        self.sink.close()
        self.confirmer.close()


def main(argv: Sequence[str] | None = None) -> None:
    """Load config, configure logging, type everything, exit 1 on fatal errors."""
    try:
        config = Config.load()
    except ValueError as exc:
        logging.basicConfig(format='%(asctime)s %(levelname)s %(name)s: %(message)s')
        log.error('%s', exc)
        sys.exit(1)

    logging.basicConfig(
        level=getattr(logging, config.log_level, logging.INFO),
        format='%(asctime)s %(levelname)s %(name)s: %(message)s',
    )

    session = Session(config)
    try:
        session.run(sys.argv[1:] if argv is None else argv)
    except (OSError, ValueError) as exc:
        log.error('%s', exc)
        sys.exit(1)
    except KeyboardInterrupt:
        sys.exit(130)
    finally:
        session.close()


if __name__ == '__main__':
    main()
