"""Programmatic access to ZMK keyboard settings.

`Client` runs the same transactions as the `zmkctl` commands but hands back
the decoded report values instead of JSON text, so scripts and GUIs can read
key bindings without shelling out. Errors and value types are re-exported
here; anything under `zmkctl.core` may change between releases.
"""

from __future__ import annotations

from zmkctl.core.config import LoadedConfig
from zmkctl.core.errors import (
    ConfigError,
    ConfigValidationError,
    DeviceNotFound,
    EncodingError,
    InvalidArgument,
    MalformedReport,
    ResultBuildError,
    TransportError,
    TransportIOError,
    ZmkctlError,
)
from zmkctl.core.model import (
    DeviceDescriptor,
    DeviceIdentity,
    FunctionsReport,
    KeyDataReport,
    ReportId,
)
from zmkctl.core.service import ZmkService
from zmkctl.transports.base import HidDeviceEntry, HidTransport

__all__ = [
    "ZmkctlError",
    "ConfigError",
    "ConfigValidationError",
    "TransportError",
    "DeviceNotFound",
    "TransportIOError",
    "MalformedReport",
    "EncodingError",
    "InvalidArgument",
    "ResultBuildError",
    "DeviceDescriptor",
    "DeviceIdentity",
    "FunctionsReport",
    "KeyDataReport",
    "ReportId",
    "HidDeviceEntry",
    "HidTransport",
    "Client",
]


class Client:
    """Public client for reading ZMK keyboard settings.

    Each call is a complete transaction: the device is opened by serial,
    queried, and closed again before the call returns.
    """

    def __init__(
        self,
        *,
        transport: HidTransport | None = None,
        identity: DeviceIdentity | None = None,
    ) -> None:
        config = LoadedConfig(identity=identity, source=None, warnings=()) if identity else None
        self._service = ZmkService(transport=transport, config=config)

    @property
    def identity(self) -> DeviceIdentity:
        return self._service.identity

    @property
    def load_warnings(self) -> tuple[str, ...]:
        return self._service.load_warnings

    def list_devices(self) -> list[DeviceDescriptor]:
        return self._service.list_devices()

    def read_features(self, serial: str) -> FunctionsReport:
        return self._service.read_features(serial)

    def read_key(self, serial: str, layer: int, key_index: int) -> KeyDataReport:
        return self._service.read_key(serial, layer, key_index)
