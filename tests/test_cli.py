"""Tests for the simaccess command line."""

import pytest

from simaccess import cli
from simaccess.bt_ref.constants import SIM_ACCESS_INTERFACE
from simaccess.core.errors import OperationFailed

from fakes import ADAPTER_PATH


def test_status_connected(transport, capsys):
    assert cli.main(["status"], transport=transport) == 0
    assert "Connected: yes" in capsys.readouterr().out
    assert transport.connections[0].disconnected


def test_status_not_connected(bus, transport, capsys):
    bus.objects[ADAPTER_PATH][SIM_ACCESS_INTERFACE]["Connected"] = False
    assert cli.main(["status"], transport=transport) == 0
    assert "Connected: no" in capsys.readouterr().out


def test_status_unknown_adapter(transport, capsys):
    assert cli.main(["--adapter", "hci7", "status"], transport=transport) == 1
    assert "[ERROR]" in capsys.readouterr().err


def test_disconnect(bus, transport):
    assert cli.main(["disconnect"], transport=transport) == 0
    assert bus.calls[-1][2] == "Disconnect"


def test_disconnect_failure(bus, transport):
    bus.methods[(ADAPTER_PATH, SIM_ACCESS_INTERFACE, "Disconnect")] = OperationFailed("Disconnect")
    assert cli.main(["disconnect"], transport=transport) == 1


def test_adapter_from_settings(tmp_path, bus, transport, capsys):
    bus.add_object("/org/bluez/hci1", SIM_ACCESS_INTERFACE, {"Connected": False})
    settings = tmp_path / "config.yaml"
    settings.write_text("adapter: hci1\n")

    assert cli.main(["--config", str(settings), "status"], transport=transport) == 0
    assert "Connected: no" in capsys.readouterr().out


def test_bad_settings_file(tmp_path, transport):
    settings = tmp_path / "config.yaml"
    settings.write_text("bus: usb\n")
    assert cli.main(["--config", str(settings), "status"], transport=transport) == 1


def test_no_mode_prints_help(transport, capsys):
    assert cli.main([], transport=transport) == 0
    assert "usage" in capsys.readouterr().out


def test_version():
    with pytest.raises(SystemExit) as excinfo:
        cli.parse_args(["--version"])
    assert excinfo.value.code == 0
