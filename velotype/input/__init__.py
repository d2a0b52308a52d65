"""Keystroke input: escape decoding, UTF-8 encoding, pacing, terminal I/O.

Turns descriptor text into timed bytes pushed into a terminal's input
queue.
"""

from velotype.input.escapes import Byte, ConfirmRequest, Pause, decode
from velotype.input.pacer import Pacer
from velotype.input.terminal import Confirmer, TerminalSink
from velotype.input.utf8 import encode_code_point, utf8_length

__all__ = [
    'Byte',
    'Pause',
    'ConfirmRequest',
    'decode',
    'Pacer',
    'TerminalSink',
    'Confirmer',
    'encode_code_point',
    'utf8_length',
]
