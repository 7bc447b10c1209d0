"""Decoded sensor packet values."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from ..protocol.commands import SensorPacket
from ..protocol.encoding import to_signed_byte
from ..protocol.modes import OperationMode

CHARGING_STATES = [
    "not_charging",
    "reconditioning",
    "full_charging",
    "trickle_charging",
    "waiting",
    "fault",
]

_BOOLEAN_PACKETS = {
    SensorPacket.WALL,
    SensorPacket.CLIFF_LEFT,
    SensorPacket.CLIFF_FRONT_LEFT,
    SensorPacket.CLIFF_RIGHT,
    SensorPacket.CLIFF_FRONT_RIGHT,
    SensorPacket.VIRTUAL_WALL,
    SensorPacket.SONG_PLAYING,
}

_SIGNED_PACKETS = {SensorPacket.DISTANCE, SensorPacket.ANGLE}


def _bit(value: int, bit: int) -> bool:
    return bool((value >> bit) & 0x01)


@dataclass
class BumpsAndWheelDrops:
    """Bit fields of packet 7."""

    bump_right: bool = False
    bump_left: bool = False
    wheel_drop_right: bool = False
    wheel_drop_left: bool = False

    @classmethod
    def from_byte(cls, value: int) -> BumpsAndWheelDrops:
        return cls(
            bump_right=_bit(value, 0),
            bump_left=_bit(value, 1),
            wheel_drop_right=_bit(value, 2),
            wheel_drop_left=_bit(value, 3),
        )

    def to_dict(self) -> dict[str, bool]:
        return {
            "bump_right": self.bump_right,
            "bump_left": self.bump_left,
            "wheel_drop_right": self.wheel_drop_right,
            "wheel_drop_left": self.wheel_drop_left,
        }


@dataclass
class SensorReading:
    """A single byte read back for a sensor packet."""

    packet: SensorPacket
    raw: int

    @property
    def value(self) -> Any:
        """The raw byte interpreted according to its packet."""
        packet = self.packet
        if packet == SensorPacket.BUMPS_AND_WHEEL_DROPS:
            return BumpsAndWheelDrops.from_byte(self.raw).to_dict()
        if packet == SensorPacket.CHARGING_STATE:
            if self.raw < len(CHARGING_STATES):
                return CHARGING_STATES[self.raw]
            return f"unknown({self.raw})"
        if packet == SensorPacket.OI_MODE:
            try:
                return OperationMode(self.raw).name
            except ValueError:
                return f"unknown({self.raw})"
        if packet in _BOOLEAN_PACKETS:
            return bool(self.raw & 0x01)
        if packet in _SIGNED_PACKETS:
            return to_signed_byte(self.raw)
        return self.raw

    def to_dict(self) -> dict[str, Any]:
        return {
            "packet": self.packet.name.lower(),
            "id": self.packet.value,
            "raw": self.raw,
            "value": self.value,
        }
