"""Tests for the MCP tool functions, with FastMCP mocked out."""

from __future__ import annotations

import asyncio
import json
import sys
from unittest.mock import MagicMock, patch

import pytest

from roomba_oi_mcp.errors import ReadFailedError
from roomba_oi_mcp.protocol.commands import SensorPacket
from roomba_oi_mcp.protocol.modes import OperationMode
from roomba_oi_mcp.transport.serial_connection import (
    OpenFailure,
    OpenResult,
    ScanReport,
)


def _get_server_module():
    """Import server module with FastMCP mocked to avoid init issues."""
    mock_fastmcp_cls = MagicMock()
    mock_fastmcp_instance = MagicMock()
    # Make the decorators no-ops that return the function unchanged
    mock_fastmcp_instance.tool.return_value = lambda fn: fn
    mock_fastmcp_instance.resource.return_value = lambda fn: fn
    mock_fastmcp_instance.prompt.return_value = lambda fn: fn
    mock_fastmcp_cls.return_value = mock_fastmcp_instance

    with patch("mcp.server.fastmcp.FastMCP", mock_fastmcp_cls):
        sys.modules.pop("roomba_oi_mcp.server", None)
        import roomba_oi_mcp.server as server_mod

    return server_mod


def _mock_controller(mode=OperationMode.PASSIVE):
    controller = MagicMock()
    controller.current_mode = mode
    controller.connection.port = "/dev/ttyUSB0"
    controller.connection.is_open = True
    return controller


@pytest.fixture
def server():
    return _get_server_module()


def test_connect_success(server):
    controller = _mock_controller()
    controller.connect.return_value = True

    with patch.object(server, "_get_controller", return_value=controller):
        result = server.connect()

    controller.connect.assert_called_once_with(None)
    assert result == {"ok": True, "mode": "PASSIVE", "port": "/dev/ttyUSB0"}


def test_connect_failure_lists_ports(server):
    controller = _mock_controller(OperationMode.OFF)
    controller.connect.return_value = False
    controller.connection.last_scan = ScanReport([
        OpenResult("COM1", OpenFailure.PORT_UNAVAILABLE),
        OpenResult("COM2", OpenFailure.PROBE_FAILED),
    ])

    with patch.object(server, "_get_controller", return_value=controller):
        result = server.connect()

    assert result["ok"] is False
    assert result["mode"] == "OFF"
    assert result["tried"] == [
        {"port": "COM1", "failure": "port_unavailable"},
        {"port": "COM2", "failure": "probe_failed"},
    ]


def test_drive_passes_arguments(server):
    controller = _mock_controller(OperationMode.FULL)
    controller.drive.return_value = True

    with patch.object(server, "_get_controller", return_value=controller):
        result = server.drive(300, 2001)

    controller.drive.assert_called_once_with(300, 2001)
    assert result == {"ok": True, "mode": "FULL"}


def test_stop_moving(server):
    controller = _mock_controller(OperationMode.SAFE)
    with patch.object(server, "_get_controller", return_value=controller):
        server.stop_moving()
    controller.drive.assert_called_once_with(0, 0)


def test_get_sensor_by_name(server):
    controller = _mock_controller()
    controller.get_sensor.return_value = 120

    with patch.object(server, "_get_controller", return_value=controller):
        result = server.get_sensor("Battery_Charge")

    assert result["ok"] is True
    assert result["id"] == 25
    assert result["value"] == 120


def test_get_sensor_by_id(server):
    controller = _mock_controller()
    controller.get_sensor.return_value = 1

    with patch.object(server, "_get_controller", return_value=controller):
        result = server.get_sensor("8")

    assert result["packet"] == "wall"
    assert result["value"] is True


def test_get_sensor_unknown_name(server):
    controller = _mock_controller()
    with patch.object(server, "_get_controller", return_value=controller):
        result = server.get_sensor("lidar")
    assert result["ok"] is False
    controller.get_sensor.assert_not_called()


def test_get_sensor_read_failure(server):
    controller = _mock_controller(OperationMode.OFF)
    controller.get_sensor.side_effect = ReadFailedError("No data")

    with patch.object(server, "_get_controller", return_value=controller):
        result = server.get_sensor("wall")

    assert result == {"ok": False, "mode": "OFF", "error": "No data"}


def test_sensor_catalog_resource(server):
    catalog = json.loads(server.resource_sensor_catalog())
    assert catalog["oi_mode"] == 35
    assert len(catalog) == 15


def test_disconnect_reports_off(server):
    controller = _mock_controller(OperationMode.OFF)
    controller.disconnect.return_value = True
    with patch.object(server, "_get_controller", return_value=controller):
        assert server.disconnect() == {"ok": True, "mode": "OFF"}


def test_get_sensor_by_int_id(server):
    controller = _mock_controller()
    controller.get_sensor.return_value = 200

    with patch.object(server, "_get_controller", return_value=controller):
        result = server.get_sensor(25)

    controller.get_sensor.assert_called_once_with(SensorPacket.BATTERY_CHARGE)
    assert result["packet"] == "battery_charge"
    assert result["value"] == 200


def test_registered_get_sensor_accepts_int_argument():
    """The real FastMCP tool schema lets a client send the numeric id."""
    sys.modules.pop("roomba_oi_mcp.server", None)
    import roomba_oi_mcp.server as server_mod

    controller = _mock_controller()
    controller.get_sensor.return_value = 3

    with patch.object(server_mod, "_get_controller", return_value=controller):
        asyncio.run(server_mod.mcp.call_tool("get_sensor", {"packet": 35}))

    controller.get_sensor.assert_called_once_with(SensorPacket.OI_MODE)


def test_get_mode_when_closed(server):
    """A closed port is reported, not treated as a failed call."""
    controller = _mock_controller(OperationMode.OFF)
    controller.connection.is_open = False
    controller.connection.port = ""

    with patch.object(server, "_get_controller", return_value=controller):
        result = server.get_mode()

    assert result == {"ok": True, "mode": "OFF", "connected": False, "port": ""}
