"""High-level Roomba control: one method per Open Interface command.

The controller tracks the robot's operating mode as the host last knew it.
That value is a best guess: the robot may drop to Passive on its own after
a safety event, and the host cannot observe it over this link. Any failed
transmission demotes the tracked mode to OFF.

No method checks that the current mode permits the command; the robot
silently ignores commands it does not accept.
"""

from __future__ import annotations

import logging
import threading

from .errors import EncodingError, NoConnectionError, ReadFailedError
from .protocol.commands import (
    SensorPacket,
    build_drive,
    build_full,
    build_reset,
    build_safe,
    build_sensor_query,
    build_set_led,
    build_stop,
)
from .protocol.modes import ModeEvent, OperationMode, next_mode
from .transport.serial_connection import SerialConnection

logger = logging.getLogger(__name__)


class RoombaController:
    """Drives a Roomba through a :class:`SerialConnection`.

    Usage::

        roomba = RoombaController()
        if roomba.connect():
            roomba.switch_to_full_mode()
            roomba.drive(300, 2001)
            roomba.disconnect()
    """

    def __init__(self, connection: SerialConnection | None = None) -> None:
        self._connection = connection if connection is not None else SerialConnection()
        self._mode = OperationMode.OFF
        self._lock = threading.RLock()

    @property
    def connection(self) -> SerialConnection:
        return self._connection

    @property
    def current_mode(self) -> OperationMode:
        return self._mode

    def get_current_mode(self) -> OperationMode:
        """Return the mode the host last put the robot in."""
        return self._mode

    def _transition(self, event: ModeEvent, success: bool) -> None:
        mode = next_mode(self._mode, event, success)
        if mode != self._mode:
            logger.info("Mode %s -> %s (%s)", self._mode.name, mode.name, event.value)
        self._mode = mode

    def _send(self, data: bytes, event: ModeEvent = ModeEvent.COMMAND) -> bool:
        with self._lock:
            success = self._connection.send(data)
            self._transition(event, success)
            return success

    # ─── CONNECTION ──────────────────────────────────────────────────

    def connect(self, port: str | None = None) -> bool:
        """Find the robot and start the Open Interface.

        Scans all host serial ports unless ``port`` is given. The robot
        beeps and enters Passive mode on Start.
        """
        with self._lock:
            if port is None:
                success = self._connection.discover_and_connect()
            else:
                success = bool(self._connection.try_open(port))
            self._transition(ModeEvent.CONNECT, success)
            return success

    def disconnect(self) -> bool:
        """Stop the Open Interface and close the port.

        Mode is OFF afterwards even if the Stop byte could not be sent.
        Calling it again when already closed is harmless.
        """
        with self._lock:
            success = True
            if self._connection.is_open:
                success = self._send(build_stop(), ModeEvent.STOP)
                self._connection.close()
            self._transition(ModeEvent.STOP, True)
            return success

    def reset(self) -> bool:
        """Reset the robot as if the battery had been reinserted.

        A new :meth:`connect` is needed afterwards.
        """
        return self._send(build_reset(), ModeEvent.RESET)

    # ─── MODES ───────────────────────────────────────────────────────

    def switch_to_safe_mode(self) -> bool:
        """Enter Safe mode: full control with cliff and wheel-drop protection."""
        return self._send(build_safe(), ModeEvent.SAFE)

    def switch_to_full_mode(self) -> bool:
        """Enter Full mode: full control with all safety features off."""
        return self._send(build_full(), ModeEvent.FULL)

    # ─── ACTUATORS ───────────────────────────────────────────────────

    def drive(self, velocity: int, radius: int) -> bool:
        """Drive the wheels.

        Args:
            velocity: mm/s in [-500, 500]; positive is forward.
            radius: mm in [-2000, 2000]; positive turns left. 0 drives
                straight, 2001 spins clockwise, 2002 counter-clockwise.

        Returns:
            False without sending if the values cannot be encoded, or if
            the write failed.
        """
        try:
            frame = build_drive(velocity, radius)
        except EncodingError as e:
            logger.warning("Drive(%s, %s) not sent: %s", velocity, radius, e)
            return False
        return self._send(frame)

    def set_led(self, color: int, intensity: int) -> bool:
        """Set the power LED colour (0 green to 255 red) and intensity."""
        return self._send(build_set_led(color, intensity))

    # ─── SENSORS ─────────────────────────────────────────────────────

    def get_sensor(self, packet: SensorPacket | int) -> int:
        """Query one sensor packet and return its raw byte.

        The query and the read happen under one lock so no other command
        can be interleaved between them.

        Raises:
            ReadFailedError: If the query could not be sent or no byte came back.
            NoConnectionError: If the port is not open.
        """
        frame = build_sensor_query(packet)
        with self._lock:
            if not self._send(frame):
                if not self._connection.is_open:
                    raise NoConnectionError("Not connected to a Roomba")
                raise ReadFailedError(f"Sensor query {frame.hex(' ')} not sent")
            return self._connection.receive_byte()
