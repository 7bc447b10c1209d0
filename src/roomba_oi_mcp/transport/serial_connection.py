"""Serial connection to a Roomba's Open Interface port.

The robot listens at 57600 baud, 8N1, with no flow control. A port is
accepted as the robot's when the Start opcode (128) can be written to it;
the robot never answers that byte, so the probe only proves the port is
writable.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Callable, Iterable

import serial
from serial.tools import list_ports

from ..errors import NoConnectionError, ReadFailedError
from ..protocol.commands import build_start

logger = logging.getLogger(__name__)

BAUD_RATE = 57600
BYTE_SIZE = serial.EIGHTBITS
PARITY = serial.PARITY_NONE
STOP_BITS = serial.STOPBITS_ONE
WRITE_TIMEOUT_S = 1.0


class OpenFailure(Enum):
    """Why a candidate port was rejected."""

    PORT_UNAVAILABLE = "port_unavailable"
    PROBE_FAILED = "probe_failed"


@dataclass
class OpenResult:
    """Outcome of trying a single port. Truthy when the port was adopted."""

    port: str
    failure: OpenFailure | None = None
    detail: str = ""

    @property
    def ok(self) -> bool:
        return self.failure is None

    def __bool__(self) -> bool:
        return self.ok


def list_port_names() -> list[str]:
    """Device names of every serial port the host reports."""
    return [info.device for info in list_ports.comports()]


@dataclass
class ScanReport:
    """Per-port results of the most recent discovery scan."""

    results: list[OpenResult] = field(default_factory=list)


class SerialConnection:
    """Owns at most one open serial handle to the robot.

    Usage::

        conn = SerialConnection()
        if conn.discover_and_connect():
            conn.send(bytes([142, 25]))
            charge = conn.receive_byte()
        conn.close()
    """

    def __init__(
        self,
        baudrate: int = BAUD_RATE,
        port_order: Callable[[Iterable[str]], list[str]] = sorted,
        port_lister: Callable[[], list[str]] = list_port_names,
        serial_factory: Callable[..., serial.Serial] = serial.Serial,
        read_timeout: float | None = None,
    ) -> None:
        self._baudrate = baudrate
        self._port_order = port_order
        self._port_lister = port_lister
        self._serial_factory = serial_factory
        self._read_timeout = read_timeout
        self._serial: serial.Serial | None = None
        self._port = ""
        self.last_scan = ScanReport()

    @property
    def is_open(self) -> bool:
        return self._serial is not None and self._serial.is_open

    @property
    def port(self) -> str:
        """Name of the adopted port, or ``""`` when closed."""
        return self._port

    def discover_and_connect(self) -> bool:
        """Try every host serial port in order and adopt the first that
        accepts the probe.

        Returns:
            True if a port was adopted.
        """
        candidates = self._port_order(self._port_lister())
        logger.debug("Scanning serial ports: %s", candidates)

        self.last_scan = ScanReport()
        for port in candidates:
            result = self.try_open(port)
            self.last_scan.results.append(result)
            if result:
                return True

        logger.warning("No Roomba found on %d candidate port(s)", len(candidates))
        return False

    def try_open(self, port: str) -> OpenResult:
        """Open ``port`` and send the Start probe.

        Any currently held port is closed first. On failure the new port
        is closed again and the connection is left closed.

        Returns:
            An ``OpenResult`` tagged ``PORT_UNAVAILABLE`` when the port could
            not be opened, ``PROBE_FAILED`` when the probe write failed.
        """
        self.close()

        handle = self._serial_factory()
        try:
            handle.port = port
            handle.baudrate = self._baudrate
            handle.bytesize = BYTE_SIZE
            handle.parity = PARITY
            handle.stopbits = STOP_BITS
            handle.timeout = self._read_timeout
            handle.write_timeout = WRITE_TIMEOUT_S
            handle.xonxoff = False
            handle.rtscts = False
            handle.dsrdtr = False
            # Applied by open(), so the lines never go high
            handle.dtr = False
            handle.rts = False
            handle.open()
        except (serial.SerialException, OSError, ValueError) as e:
            logger.debug("Could not open %s: %s", port, e)
            handle.close()
            return OpenResult(port, OpenFailure.PORT_UNAVAILABLE, str(e))

        self._serial = handle
        self._port = port

        if not self.send(build_start()):
            self.close()
            return OpenResult(port, OpenFailure.PROBE_FAILED, "start probe not written")

        logger.info("Connected to Roomba on %s", port)
        return OpenResult(port)

    def send(self, data: bytes) -> bool:
        """Write ``data`` in one call.

        Returns:
            False if no port is open or the write failed or was short.
        """
        if not self.is_open:
            logger.warning("Send without an open port: %s", data.hex(" "))
            return False

        try:
            written = self._serial.write(data)
            self._serial.flush()
        except (serial.SerialException, OSError) as e:
            logger.warning("Write to %s failed: %s", self._port, e)
            return False

        if written is not None and written != len(data):
            logger.warning(
                "Short write to %s: %d of %d bytes", self._port, written, len(data)
            )
            return False

        logger.debug("Sent %s", data.hex(" "))
        return True

    def receive_byte(self) -> int:
        """Block until one byte arrives and return it.

        Raises:
            NoConnectionError: If no port is open.
            ReadFailedError: If the read failed or returned nothing.
        """
        if not self.is_open:
            raise NoConnectionError("Not connected to a Roomba")

        try:
            data = self._serial.read(1)
        except (serial.SerialException, OSError) as e:
            raise ReadFailedError(f"Read from {self._port} failed: {e}") from e

        if len(data) != 1:
            raise ReadFailedError(f"No data from {self._port}")

        logger.debug("Received %02x", data[0])
        return data[0]

    def close(self) -> None:
        """Close the port if one is open. Safe to call repeatedly."""
        if self._serial is None:
            return

        port = self._port
        try:
            self._serial.close()
        except (serial.SerialException, OSError) as e:
            logger.warning("Error closing %s: %s", port, e)
        finally:
            self._serial = None
            self._port = ""
            logger.info("Closed %s", port)
