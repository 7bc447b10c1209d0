"""Serial transport to the robot."""

from .serial_connection import OpenFailure, OpenResult, SerialConnection
