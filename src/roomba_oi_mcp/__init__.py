"""Host-side driver and MCP server for the Roomba serial Open Interface."""

from .controller import RoombaController
from .protocol.modes import OperationMode
from .protocol.commands import SensorPacket

__version__ = "0.1.0"
