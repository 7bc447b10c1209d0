"""Protocol layer: opcodes, byte encoding, command builders and mode tracking."""

from .commands import Opcode, SensorPacket, build_command, build_drive, build_set_led
from .modes import ModeEvent, OperationMode, next_mode
