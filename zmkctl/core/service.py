"""Service layer used by CLI and the public API."""

from __future__ import annotations

from contextlib import AbstractContextManager

from zmkctl.core import codec
from zmkctl.core.config import LoadedConfig, load_config
from zmkctl.core.directory import DeviceDirectory
from zmkctl.core.model import DeviceDescriptor, FunctionsReport, KeyDataReport, KeySelectRequest
from zmkctl.core.session import SettingsSession
from zmkctl.transports.base import HidTransport
from zmkctl.transports.hid_feature import HidFeatureTransport


class ZmkService:
    def __init__(
        self,
        *,
        transport: HidTransport | None = None,
        config: LoadedConfig | None = None,
    ) -> None:
        loaded = config or load_config()
        self.identity = loaded.identity
        self.load_warnings = loaded.warnings
        self.transport = transport or HidFeatureTransport()
        self.directory = DeviceDirectory(self.transport, self.identity)

    def list_devices(self) -> list[DeviceDescriptor]:
        return self.directory.list_devices()

    def open_session(self, serial: str) -> AbstractContextManager[SettingsSession]:
        return SettingsSession.open(self.transport, self.identity, serial)

    def read_features(self, serial: str) -> FunctionsReport:
        with self.open_session(serial) as session:
            return session.query_functions()

    def read_key(self, serial: str, layer: int, key_index: int) -> KeyDataReport:
        # reject a bad key address before touching the device
        codec.encode(KeySelectRequest(layer_index=layer, key_index=key_index))
        with self.open_session(serial) as session:
            return session.query_key_data(layer, key_index)
