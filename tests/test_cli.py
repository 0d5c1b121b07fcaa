from __future__ import annotations

import errno
import json

from typer.testing import CliRunner

from zmkctl import cli
from zmkctl.core.errors import DeviceNotFound, EncodingError, MalformedReport, TransportIOError
from zmkctl.core.model import DeviceDescriptor, FunctionsReport, KeyDataReport


class FakeService:
    def __init__(self) -> None:
        self.load_warnings = ()
        self.key_calls: list[tuple[str, int, int]] = []

    def list_devices(self):
        return [
            DeviceDescriptor(manufacturer="ZMK Project", product="Corne", serial="ABC123"),
            DeviceDescriptor(manufacturer="ZMK Project", product="Sofle", serial="XYZ789"),
        ]

    def read_features(self, serial):
        return FunctionsReport(keycount=10, layer_count=4, protocol_revision=1, key_remap_support=True)

    def read_key(self, serial, layer, key_index):
        self.key_calls.append((serial, layer, key_index))
        return KeyDataReport(behavior_id=1, param1=7, param2=42)


runner = CliRunner()


def test_list_devices_command(monkeypatch):
    monkeypatch.setattr(cli, "ZmkService", FakeService)
    result = runner.invoke(cli.app, ["list_devices"])
    assert result.exit_code == 0
    assert json.loads(result.stdout) == [
        {"manufacturer": "ZMK Project", "product": "Corne", "serial": "ABC123"},
        {"manufacturer": "ZMK Project", "product": "Sofle", "serial": "XYZ789"},
    ]


def test_read_features_command(monkeypatch):
    monkeypatch.setattr(cli, "ZmkService", FakeService)
    result = runner.invoke(cli.app, ["read_features", "ABC123"])
    assert result.exit_code == 0
    assert result.stdout.strip() == (
        '{"protocol_revision":1,"keycount":10,"layer_count":4,"key_remap_support":true}'
    )


def test_read_key_command(monkeypatch):
    service = FakeService()
    monkeypatch.setattr(cli, "ZmkService", lambda: service)
    result = runner.invoke(cli.app, ["read_key", "ABC123", "2", "15"])
    assert result.exit_code == 0
    assert json.loads(result.stdout) == {"behavior_id": 1, "param1": 7, "param2": 42}
    assert service.key_calls == [("ABC123", 2, 15)]


def test_read_features_requires_serial(monkeypatch):
    monkeypatch.setattr(cli, "ZmkService", FakeService)
    result = runner.invoke(cli.app, ["read_features"])
    assert result.exit_code == errno.EINVAL
    assert "device serial required" in result.stderr
    assert result.stdout == ""


def test_read_key_requires_all_arguments(monkeypatch):
    monkeypatch.setattr(cli, "ZmkService", FakeService)
    result = runner.invoke(cli.app, ["read_key", "ABC123", "2"])
    assert result.exit_code == errno.EINVAL
    assert "device serial, layer, and key required" in result.stderr


def test_read_key_out_of_range_is_invalid_argument(monkeypatch, tmp_path):
    monkeypatch.setenv("XDG_CONFIG_HOME", str(tmp_path))

    class NoDeviceTransport:
        def open(self, vendor_id, product_id, serial):
            raise AssertionError("device must not be opened")

    from zmkctl.core.service import ZmkService

    monkeypatch.setattr(cli, "ZmkService", lambda: ZmkService(transport=NoDeviceTransport()))
    result = runner.invoke(cli.app, ["read_key", "ABC123", "300", "1"])
    assert result.exit_code == errno.EINVAL
    assert "layer_index must be between 0 and 255" in result.stderr


def test_open_failure_exits_with_io_error(monkeypatch):
    class MissingDevice(FakeService):
        def read_features(self, serial):
            raise DeviceNotFound(f"Unable to open device with serial '{serial}'")

    monkeypatch.setattr(cli, "ZmkService", MissingDevice)
    result = runner.invoke(cli.app, ["read_features", "NOPE"])
    assert result.exit_code == errno.EIO
    assert "Error: Unable to open device with serial 'NOPE'" in result.stderr
    assert "Could not get keyboard features" in result.stderr
    assert result.stdout == ""
    assert "Traceback" not in result.stderr


def test_transport_failure_during_key_read(monkeypatch):
    class FailingService(FakeService):
        def read_key(self, serial, layer, key_index):
            raise TransportIOError("HID error writing report 4")

    monkeypatch.setattr(cli, "ZmkService", FailingService)
    result = runner.invoke(cli.app, ["read_key", "ABC123", "0", "0"])
    assert result.exit_code == errno.EIO
    assert "Could not get key data" in result.stderr
    assert result.stdout == ""


def test_malformed_report_exits_with_io_error(monkeypatch):
    class ShortReport(FakeService):
        def read_features(self, serial):
            raise MalformedReport("Report FUNCTIONS must be 5 bytes, got 3")

    monkeypatch.setattr(cli, "ZmkService", ShortReport)
    result = runner.invoke(cli.app, ["read_features", "ABC123"])
    assert result.exit_code == errno.EIO


def test_list_devices_encoding_failure_prints_no_json(monkeypatch):
    class BadStrings(FakeService):
        def list_devices(self):
            raise EncodingError("Device string is unavailable")

    monkeypatch.setattr(cli, "ZmkService", BadStrings)
    result = runner.invoke(cli.app, ["list_devices"])
    assert result.exit_code == errno.EIO
    assert "Could not get device list" in result.stderr
    assert result.stdout == ""


def test_help_command():
    result = runner.invoke(cli.app, ["help"])
    assert result.exit_code == 0
    assert "read_key <serial> <layer> <key_idx>" in result.stdout


def test_no_command_prints_usage_and_fails():
    result = runner.invoke(cli.app, [])
    assert result.exit_code == errno.EINVAL
    assert "list_devices" in result.stdout


def test_config_warning_is_printed(monkeypatch):
    class WarnService(FakeService):
        def __init__(self) -> None:
            super().__init__()
            self.load_warnings = ("Using device ids 1234:abcd from /tmp/config.yaml",)

    monkeypatch.setattr(cli, "ZmkService", WarnService)
    result = runner.invoke(cli.app, ["list_devices"])
    assert result.exit_code == 0
    assert "Warning: Using device ids 1234:abcd" in result.stderr
    json.loads(result.stdout)


def test_read_key_negative_layer_is_invalid_argument(monkeypatch, tmp_path):
    monkeypatch.setenv("XDG_CONFIG_HOME", str(tmp_path))

    class NoDeviceTransport:
        def open(self, vendor_id, product_id, serial):
            raise AssertionError("device must not be opened")

    from zmkctl.core.service import ZmkService

    monkeypatch.setattr(cli, "ZmkService", lambda: ZmkService(transport=NoDeviceTransport()))
    result = runner.invoke(cli.app, ["read_key", "ABC123", "-1", "0"])
    assert result.exit_code == errno.EINVAL
    assert "layer_index must be between 0 and 255, got -1" in result.stderr

    result = runner.invoke(cli.app, ["read_key", "ABC123", "0", "-5"])
    assert result.exit_code == errno.EINVAL
    assert "key_index must be between 0 and 255, got -5" in result.stderr
