"""
Option table for the command line and for script option lines.

Every option is recorded as an OptionStep in the order given, so the
session can replay them with side effects (sleep, tput, opening
terminals) happening in command-line order. Value options are converted
here; time values go through parse_duration and fail fast.
"""

from __future__ import annotations

import argparse
from collections.abc import Sequence
from dataclasses import dataclass, field

from velotype import __version__
from velotype.config import Config, parse_duration

# Options that set a Config timing field
TIME_OPTIONS = {
    'bump': 'bump',
    'end': 'end',
    'line': 'line',
    'pause': 'pause',
    'wait': 'wait',
}

# Options that flip a Config flag on every occurrence
TOGGLE_OPTIONS = {
    'debug': 'debug',
    'force': 'force',
    'dry_run': 'dry_run',
    'skip': 'skip',
}


@dataclass(frozen=True)
class OptionStep:
    """One option occurrence, already converted."""

    name: str
    value: object = None


@dataclass
class ParsedOptions:
    steps: list[OptionStep] = field(default_factory=list)
    strings: list[str] = field(default_factory=list)


def is_config_step(step: OptionStep) -> bool:
    return step.name in TIME_OPTIONS or step.name in TOGGLE_OPTIONS


def overlay_step(config: Config, step: OptionStep) -> Config:
    """Return config with one timing/toggle option applied.

    Side-effect options (tty, confirm, sleep, ...) leave config unchanged.
    """
    if step.name in TIME_OPTIONS:
        return config.overlay(**{TIME_OPTIONS[step.name]: step.value})
    if step.name in TOGGLE_OPTIONS:
        flag = TOGGLE_OPTIONS[step.name]
        return config.overlay(**{flag: not getattr(config, flag)})
    return config


class _Ordered(argparse.Action):
    """Append (dest, value) to namespace.steps, preserving order."""

    def __call__(self, parser, namespace, values, option_string=None):
        steps = getattr(namespace, 'steps', None)
        if steps is None:
            steps = []
            setattr(namespace, 'steps', steps)
        steps.append(OptionStep(self.dest, values if self.nargs != 0 else None))


class _OrderedFlag(_Ordered):
    def __init__(self, option_strings, dest, **kwargs):
        super().__init__(option_strings, dest, nargs=0, **kwargs)


def _duration(value: str) -> int:
    try:
        return parse_duration(value)
    except ValueError as exc:
        raise argparse.ArgumentTypeError(str(exc)) from exc


def build_parser(prog: str = 'velotype') -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog=prog,
        description='Type strings into a terminal as if entered at its keyboard.',
        epilog=(
            "Time values take an optional unit: s[econds], ms, us, ns "
            "(default milliseconds). Strings understand \\n \\r \\t \\e \\p "
            "\\P \\u{HEX} \\x{HH..} \\^X escapes."
        ),
    )
    parser.set_defaults(steps=None)
    add = parser.add_argument

    add('-b', '--bump', type=_duration, action=_Ordered, metavar='DELAY',
        help="Bump the 'wait' timer by a random amount")
    add('-C', '--confirm', action=_Ordered, metavar='TTY',
        help='Provide a terminal name for prompting confirmations')
    add('-D', '--debug', action=_OrderedFlag, help='Enable debug output')
    add('-e', '--end', type=_duration, action=_Ordered, metavar='DELAY',
        help='Provide a delay before newlines')
    add('-F', '--force', action=_OrderedFlag, help='Ignore confirmation requests')
    add('-f', '--file', action=_Ordered, metavar='FILE',
        help='Provide a file for content data')
    add('-l', '--line', type=_duration, action=_Ordered, metavar='DELAY',
        help='Set delay between lines of data')
    add('-n', '--dry-run', action=_OrderedFlag, dest='dry_run',
        help='Do not place data in input buffer; just echo it')
    add('-P', '--parse-confirm', action=_Ordered, dest='parse_confirm', metavar='MSG',
        help='Emit a message and wait for confirmation')
    add('-p', '--pause', type=_duration, action=_Ordered, metavar='DELAY',
        help="Set the 'pause' delay")
    add('-S', '--sleep', type=_duration, action=_Ordered, metavar='TIME',
        help='Sleep immediately for the given period')
    add('-s', '--skip', action=_OrderedFlag, help='Do not make output or perform delays')
    add('-T', '--tput', action=_Ordered, metavar='CAPNAME',
        help="Emit terminal capability ('clear' or 'home')")
    add('-t', '--tty', action=_Ordered, metavar='TTY',
        help='Provide a terminal for pushing input data')
    add('-v', '--version', action='version', version=__version__,
        help='Emit version information (and exit)')
    add('-w', '--wait', type=_duration, action=_Ordered, metavar='DELAY',
        help="Set the 'wait' delay between characters")
    add('strings', nargs='*', help='Strings to type, joined with spaces')

    return parser


def parse_options(args: Sequence[str], prog: str = 'velotype') -> ParsedOptions:
    """Parse an argument list (without the program name).

    argparse handles usage errors, --help and --version by exiting.
    """
    ns = build_parser(prog).parse_intermixed_args(list(args))
    return ParsedOptions(steps=list(ns.steps or []), strings=list(ns.strings))


def parse_argv(argv: Sequence[str]) -> ParsedOptions:
    """Parse a full argv (the first entry is the program name or placeholder)."""
    return parse_options(argv[1:])
