"""Exception types raised by the driver."""

from __future__ import annotations


class RoombaError(Exception):
    """Base class for driver errors."""


class NoConnectionError(RoombaError, ConnectionError):
    """An operation needed the serial link but none is open."""


class ReadFailedError(RoombaError, IOError):
    """A blocking read returned no data or the device went away mid-read."""


class EncodingError(RoombaError, ValueError):
    """A value cannot be represented in the two-byte wire format."""
