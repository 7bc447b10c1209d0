"""Host-side model of the robot's operating mode."""

from __future__ import annotations

from enum import Enum, IntEnum


class OperationMode(IntEnum):
    """Operating modes, numbered as the OI mode sensor packet reports them."""

    OFF = 0
    PASSIVE = 1
    SAFE = 2
    FULL = 3


class ModeEvent(Enum):
    """Controller actions that can change the tracked mode."""

    CONNECT = "connect"
    SAFE = "safe"
    FULL = "full"
    STOP = "stop"
    RESET = "reset"
    COMMAND = "command"


_TARGETS: dict[ModeEvent, OperationMode] = {
    ModeEvent.CONNECT: OperationMode.PASSIVE,
    ModeEvent.SAFE: OperationMode.SAFE,
    ModeEvent.FULL: OperationMode.FULL,
    ModeEvent.STOP: OperationMode.OFF,
    ModeEvent.RESET: OperationMode.OFF,
}


def next_mode(
    current: OperationMode, event: ModeEvent, success: bool
) -> OperationMode:
    """Return the mode after ``event`` completed with ``success``.

    A failed transmission always demotes to OFF: the host cannot tell
    whether the robot dropped to Passive or lost the link entirely.
    Stop and Reset end in OFF whether or not the byte was delivered.
    """
    if not success:
        return OperationMode.OFF
    if event is ModeEvent.COMMAND:
        return current
    return _TARGETS[event]
