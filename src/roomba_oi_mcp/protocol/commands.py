"""Opcode constants and command builders.

Every command is a single frame: one opcode byte followed by its fixed
number of data bytes. The robot does not acknowledge commands, so a
builder's output is exactly what goes on the wire.
"""

from __future__ import annotations

from enum import IntEnum

from .encoding import clamp, to_int16_bytes


class Opcode(IntEnum):
    """Open Interface opcodes used by the driver."""

    RESET = 7
    START = 128
    SAFE = 131
    FULL = 132
    DRIVE = 137
    LEDS = 139
    SENSORS = 142
    STOP = 173


class SensorPacket(IntEnum):
    """Single-byte sensor packets that can be queried."""

    BUMPS_AND_WHEEL_DROPS = 7
    WALL = 8
    CLIFF_LEFT = 9
    CLIFF_FRONT_LEFT = 10
    CLIFF_RIGHT = 11
    CLIFF_FRONT_RIGHT = 12
    VIRTUAL_WALL = 13
    WHEEL_OVERCURRENTS = 14
    DISTANCE = 19
    ANGLE = 20
    CHARGING_STATE = 21
    BATTERY_CHARGE = 25
    OI_MODE = 35
    SONG_NUMBER = 36
    SONG_PLAYING = 37


VELOCITY_MIN = -500
VELOCITY_MAX = 500
RADIUS_MIN = -2000
RADIUS_MAX = 2000

RADIUS_STRAIGHT = 0
RADIUS_SPIN_CLOCKWISE = 2001
RADIUS_SPIN_COUNTER_CLOCKWISE = 2002

# Values actually sent for the special radii
_RADIUS_OVERRIDES: dict[int, int] = {
    RADIUS_STRAIGHT: 0x8000,
    RADIUS_SPIN_CLOCKWISE: -1,
    RADIUS_SPIN_COUNTER_CLOCKWISE: 1,
}

LED_BITS = 4


def build_command(opcode: Opcode, payload: bytes = b"") -> bytes:
    """Build a frame from an opcode and its data bytes."""
    return bytes([opcode.value]) + payload


def build_start() -> bytes:
    """Build the Start command, also used as the connection probe."""
    return build_command(Opcode.START)


def build_reset() -> bytes:
    """Build a Reset command (as if the battery was reinserted)."""
    return build_command(Opcode.RESET)


def build_stop() -> bytes:
    """Build a Stop command that exits the Open Interface."""
    return build_command(Opcode.STOP)


def build_safe() -> bytes:
    return build_command(Opcode.SAFE)


def build_full() -> bytes:
    return build_command(Opcode.FULL)


def encode_radius(radius: int) -> int:
    """Map a requested radius to the value sent on the wire.

    0, 2001 and 2002 select straight, clockwise spin and counter-clockwise
    spin. Any other radius is clamped to [-2000, 2000].
    """
    if radius in _RADIUS_OVERRIDES:
        return _RADIUS_OVERRIDES[radius]
    return clamp(radius, RADIUS_MIN, RADIUS_MAX)


def build_drive(velocity: int, radius: int) -> bytes:
    """Build a Drive command.

    Args:
        velocity: Average wheel velocity in mm/s, clamped to [-500, 500].
            Positive drives forward.
        radius: Turn radius in mm, clamped to [-2000, 2000]. Positive turns
            left. See :func:`encode_radius` for the special values.

    Returns:
        ``[137, v_hi, v_lo, r_hi, r_lo]``.

    Raises:
        EncodingError: If either value cannot be packed into two bytes.
    """
    velocity_bytes = to_int16_bytes(clamp(velocity, VELOCITY_MIN, VELOCITY_MAX))
    radius_bytes = to_int16_bytes(encode_radius(radius))
    return build_command(Opcode.DRIVE, velocity_bytes + radius_bytes)


def build_set_led(color: int, intensity: int) -> bytes:
    """Build an LEDs command for the power LED.

    Args:
        color: 0 (green) to 255 (red), clamped.
        intensity: 0 (off) to 255 (full), clamped.
    """
    color = clamp(color, 0, 255)
    intensity = clamp(intensity, 0, 255)
    return build_command(Opcode.LEDS, bytes([LED_BITS, color, intensity]))


def build_sensor_query(packet: int) -> bytes:
    """Build a Sensors command requesting a single packet.

    Raises:
        ValueError: If ``packet`` is not a known single-byte packet.
    """
    try:
        packet = SensorPacket(packet)
    except ValueError:
        raise ValueError(
            f"Unknown sensor packet {packet}. Valid: {[p.value for p in SensorPacket]}"
        ) from None
    return build_command(Opcode.SENSORS, bytes([packet.value]))
