"""Feature report transactions against one opened keyboard."""

from __future__ import annotations

import logging
from collections.abc import Iterator
from contextlib import contextmanager
from typing import Any, cast

from zmkctl.core import codec
from zmkctl.core.errors import TransportIOError
from zmkctl.core.model import (
    DeviceIdentity,
    FunctionsReport,
    KeyDataReport,
    KeySelectRequest,
    ReportId,
)
from zmkctl.core.strings import to_native
from zmkctl.transports.base import HidTransport

LOGGER = logging.getLogger(__name__)


class SettingsSession:
    """An open settings connection to a single keyboard.

    Obtain one with `SettingsSession.open(...)` in a `with` block; the device
    is opened on entry and released when the block exits, whether or not a
    query failed. A session must not be shared: the keyboard latches the
    selected key per connection, and nothing guards the select/fetch pair
    against interleaving.
    """

    def __init__(self, transport: HidTransport, handle: Any, serial: str) -> None:
        self.transport = transport
        self.serial = serial
        self._handle: Any = handle

    @classmethod
    @contextmanager
    def open(
        cls, transport: HidTransport, identity: DeviceIdentity, serial: str
    ) -> Iterator[SettingsSession]:
        native_serial = to_native(serial)
        handle = transport.open(identity.vendor_id, identity.product_id, native_serial)
        LOGGER.debug("Session opened for serial %s", serial)
        session = cls(transport, handle, serial)
        try:
            yield session
        finally:
            session.close()

    @property
    def closed(self) -> bool:
        return self._handle is None

    def close(self) -> None:
        if self._handle is None:
            return
        handle, self._handle = self._handle, None
        self.transport.close(handle)
        LOGGER.debug("Session closed for serial %s", self.serial)

    def _require_handle(self) -> Any:
        if self._handle is None:
            raise TransportIOError(f"Session for serial '{self.serial}' is closed")
        return self._handle

    def _get(self, report_id: ReportId) -> bytes:
        size = codec.report_size(report_id)
        data = self.transport.get_feature_report(self._require_handle(), report_id, size)
        LOGGER.debug("get %s -> %s", report_id.name, data.hex())
        return data

    def _set(self, payload: bytes) -> None:
        LOGGER.debug("set %s", payload.hex())
        written = self.transport.set_feature_report(self._require_handle(), payload)
        if written < len(payload):
            raise TransportIOError(
                f"Short write for report {payload[0]}: {written} of {len(payload)} bytes"
            )

    def query_functions(self) -> FunctionsReport:
        data = self._get(ReportId.FUNCTIONS)
        return cast(FunctionsReport, codec.decode(ReportId.FUNCTIONS, data))

    def query_key_data(self, layer_index: int, key_index: int) -> KeyDataReport:
        """Select a key then fetch its binding, as one uninterrupted exchange.

        The fetch is never attempted if the select did not go through.
        """
        select = codec.encode(KeySelectRequest(layer_index=layer_index, key_index=key_index))
        self._set(select)
        data = self._get(ReportId.KEY_DATA)
        return cast(KeyDataReport, codec.decode(ReportId.KEY_DATA, data))
