"""Byte-level helpers for the Open Interface wire format.

Multi-byte arguments travel as 16-bit two's-complement integers,
high byte first::

    +-----------+-----------+
    | high byte | low byte  |
    +-----------+-----------+

The drive command's "straight" radius is the unsigned value 32768
(``0x8000``), so the encoder accepts anything that fits in 16 bits either
signed or unsigned.
"""

from __future__ import annotations

from ..errors import EncodingError

INT16_MIN = -0x8000
UINT16_MAX = 0xFFFF


def clamp(value: int, lower: int, upper: int) -> int:
    """Restrict ``value`` to the closed range ``[lower, upper]``."""
    if value < lower:
        return lower
    if value > upper:
        return upper
    return value


def to_int16_bytes(value: int) -> bytes:
    """Encode ``value`` as two bytes, high byte first.

    Args:
        value: Integer in ``[-32768, 65535]``.

    Returns:
        A 2-byte ``bytes`` object.

    Raises:
        EncodingError: If ``value`` does not fit in 16 bits.
    """
    value = int(value)
    if not INT16_MIN <= value <= UINT16_MAX:
        raise EncodingError(f"{value} does not fit in 16 bits")
    return (value & UINT16_MAX).to_bytes(2, "big")


def from_int16_bytes(high: int, low: int) -> int:
    """Decode a signed 16-bit value from its high and low bytes."""
    return int.from_bytes(bytes([high & 0xFF, low & 0xFF]), "big", signed=True)


def to_signed_byte(value: int) -> int:
    """Interpret an unsigned byte as a signed 8-bit value."""
    value &= 0xFF
    return value - 0x100 if value & 0x80 else value
