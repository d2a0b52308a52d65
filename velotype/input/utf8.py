"""
Unicode code point to UTF-8 bytes.

Hand-rolled rather than str.encode() so that code points the codec refuses
(surrogates, values above 0x10FFFF but inside 21 bits) still produce the
canonical bit pattern, and out-of-range values degrade instead of raising.
"""

from __future__ import annotations

# (largest code point, lead byte marker) per encoded length
_RANGES: tuple[tuple[int, int], ...] = (
    (0x7F, 0x00),
    (0x7FF, 0xC0),
    (0xFFFF, 0xE0),
    (0x1FFFFF, 0xF0),
)


def utf8_length(cp: int) -> int:
    """Encoded length for cp (1-4), or -1 if it does not fit in 21 bits."""
    if cp < 0:
        return -1
    for length, (limit, _) in enumerate(_RANGES, start=1):
        if cp <= limit:
            return length
    return -1


def encode_code_point(cp: int) -> bytes:
    """
    Encode one code point.

    Lengths 2-4 get the lead marker OR'd with the top bits, followed by
    continuation bytes (0x80 | 6 bits), most significant first.
    Single-byte and invalid values become cp & 0x7F.
    """
    length = utf8_length(cp)
    if length <= 1:
        return bytes([cp & 0x7F])

    marker = _RANGES[length - 1][1]
    shift = 6 * (length - 1)
    out = [marker | (cp >> shift)]
    while shift:
        shift -= 6
        out.append(0x80 | ((cp >> shift) & 0x3F))
    return bytes(out)
