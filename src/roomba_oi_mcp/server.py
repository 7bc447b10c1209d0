"""MCP server entry point for a Roomba on a serial Open Interface link.

Exposes the controller's commands as tools via the Model Context Protocol
using the official Python MCP SDK with stdio transport.
"""

from __future__ import annotations

import json
import logging
from typing import Any

from mcp.server.fastmcp import FastMCP

from .controller import RoombaController
from .errors import RoombaError
from .models.sensors import SensorReading
from .protocol.commands import (
    RADIUS_SPIN_CLOCKWISE,
    RADIUS_SPIN_COUNTER_CLOCKWISE,
    RADIUS_STRAIGHT,
    SensorPacket,
)

logger = logging.getLogger(__name__)

mcp = FastMCP(
    "roomba-oi",
    instructions="MCP server for driving a Roomba over its serial Open Interface",
)

# Global controller state
_controller: RoombaController | None = None


def _get_controller() -> RoombaController:
    """Return the shared controller, creating it on first use."""
    global _controller
    if _controller is None:
        _controller = RoombaController()
    return _controller


def _result(ok: bool, **extra: Any) -> dict[str, Any]:
    result: dict[str, Any] = {"ok": ok, "mode": _get_controller().current_mode.name}
    result.update(extra)
    return result


def _resolve_packet(packet: str | int) -> SensorPacket:
    """Accept a packet as its id or its (case-insensitive) name."""
    if isinstance(packet, int) or str(packet).isdigit():
        return SensorPacket(int(packet))
    try:
        return SensorPacket[str(packet).strip().upper()]
    except KeyError:
        raise ValueError(
            f"Unknown sensor packet '{packet}'. "
            f"Valid: {[p.name.lower() for p in SensorPacket]}"
        ) from None


# ─── CONNECTION TOOLS ─────────────────────────────────────────────────

@mcp.tool()
def connect(port: str | None = None) -> dict[str, Any]:
    """Find the Roomba's serial port and start the Open Interface.

    Scans every serial port the host reports, in sorted order, unless a
    specific port is given.

    Args:
        port: Optional device path such as /dev/ttyUSB0 or COM3.
    """
    controller = _get_controller()
    ok = controller.connect(port)
    conn = controller.connection
    if ok:
        return _result(True, port=conn.port)
    return _result(
        False,
        error="No Roomba responded",
        tried=[
            {"port": r.port, "failure": r.failure.value if r.failure else None}
            for r in conn.last_scan.results
        ],
    )


@mcp.tool()
def disconnect() -> dict[str, Any]:
    """Stop the Open Interface and release the serial port."""
    return _result(_get_controller().disconnect())


@mcp.tool()
def reset() -> dict[str, Any]:
    """Reset the robot. A new connect is needed afterwards."""
    return _result(_get_controller().reset())


@mcp.tool()
def get_mode() -> dict[str, Any]:
    """Report the operating mode the host last put the robot in."""
    conn = _get_controller().connection
    return _result(True, connected=conn.is_open, port=conn.port)


# ─── MODE TOOLS ──────────────────────────────────────────────────────

@mcp.tool()
def safe_mode() -> dict[str, Any]:
    """Switch to Safe mode (user control, cliff and wheel-drop safety on)."""
    return _result(_get_controller().switch_to_safe_mode())


@mcp.tool()
def full_mode() -> dict[str, Any]:
    """Switch to Full mode (user control, all safety features off)."""
    return _result(_get_controller().switch_to_full_mode())


# ─── ACTUATOR TOOLS ──────────────────────────────────────────────────

@mcp.tool()
def drive(velocity: int, radius: int = RADIUS_STRAIGHT) -> dict[str, Any]:
    """Drive the wheels.

    Args:
        velocity: Average wheel speed in mm/s (-500 to 500, forward positive).
        radius: Turn radius in mm (-2000 to 2000, left positive).
                0 drives straight, 2001 spins clockwise,
                2002 spins counter-clockwise.
    """
    return _result(_get_controller().drive(velocity, radius))


@mcp.tool()
def stop_moving() -> dict[str, Any]:
    """Stop the wheels (drive at zero velocity)."""
    return _result(_get_controller().drive(0, RADIUS_STRAIGHT))


@mcp.tool()
def set_led(color: int, intensity: int = 255) -> dict[str, Any]:
    """Set the power LED.

    Args:
        color: 0 (green) to 255 (red).
        intensity: 0 (off) to 255 (full brightness).
    """
    return _result(_get_controller().set_led(color, intensity))


# ─── SENSOR TOOLS ────────────────────────────────────────────────────

@mcp.tool()
def get_sensor(packet: str | int) -> dict[str, Any]:
    """Read one sensor packet.

    Args:
        packet: Packet name (e.g. "battery_charge", "bumps_and_wheel_drops")
                or numeric id.
    """
    try:
        resolved = _resolve_packet(packet)
    except ValueError as e:
        return _result(False, error=str(e))

    try:
        raw = _get_controller().get_sensor(resolved)
    except RoombaError as e:
        logger.warning("Sensor read %s failed: %s", resolved.name, e)
        return _result(False, error=str(e))

    return _result(True, **SensorReading(resolved, raw).to_dict())


# ─── MCP RESOURCES ───────────────────────────────────────────────────

@mcp.resource("roomba://sensors/catalog")
def resource_sensor_catalog() -> str:
    """Queryable sensor packets and their ids."""
    return json.dumps({p.name.lower(): p.value for p in SensorPacket})


@mcp.resource("roomba://drive/special-radii")
def resource_special_radii() -> str:
    """Radius values with special meaning for the drive tool."""
    return json.dumps({
        "straight": RADIUS_STRAIGHT,
        "spin_clockwise": RADIUS_SPIN_CLOCKWISE,
        "spin_counter_clockwise": RADIUS_SPIN_COUNTER_CLOCKWISE,
    })


# ─── MCP PROMPTS ─────────────────────────────────────────────────────

@mcp.prompt()
def drive_pattern(pattern: str) -> str:
    """Guide the AI to drive the robot in a described pattern.

    Args:
        pattern: Shape or route, e.g. "square", "figure eight".
    """
    return f"""Drive the Roomba in a {pattern} pattern.
Steps:
- Use connect, then full_mode or safe_mode (drive is ignored in Passive mode)
- Use drive with velocity in mm/s and radius in mm
- Radius 0 drives straight; 2001 and 2002 spin in place
- Read bumps_and_wheel_drops with get_sensor between segments
- Finish with stop_moving and disconnect

The robot does not acknowledge commands; check get_mode after failures."""


# ─── ENTRY POINT ─────────────────────────────────────────────────────

def main():
    """Run the MCP server with stdio transport."""
    logging.basicConfig(level=logging.INFO)
    mcp.run(transport="stdio")


if __name__ == "__main__":
    main()
