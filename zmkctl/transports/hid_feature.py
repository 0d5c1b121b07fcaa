"""Feature report transport implementation using hidapi."""

from __future__ import annotations

import logging
from typing import Any

from zmkctl.core.errors import DeviceNotFound, TransportIOError
from zmkctl.transports.base import HidDeviceEntry

LOGGER = logging.getLogger(__name__)


def _hid() -> Any:
    try:
        import hid  # type: ignore
    except Exception as exc:
        raise TransportIOError(
            f"Failed to open HIDAPI: {exc}. Install the 'hidapi' package and libhidapi."
        ) from exc
    return hid


class HidFeatureTransport:
    def enumerate(self, vendor_id: int, product_id: int) -> list[HidDeviceEntry]:
        hid = _hid()
        try:
            infos = hid.enumerate(vendor_id, product_id)
        except (OSError, ValueError) as exc:
            raise TransportIOError(f"Could not enumerate devices: {exc}") from exc
        return [
            HidDeviceEntry(
                manufacturer=info.get("manufacturer_string"),
                product=info.get("product_string"),
                serial=info.get("serial_number"),
            )
            for info in infos
        ]

    def open(self, vendor_id: int, product_id: int, serial: str) -> Any:
        hid = _hid()
        device = hid.device()
        try:
            device.open(vendor_id, product_id, serial)
        except (OSError, ValueError) as exc:
            raise DeviceNotFound(
                f"Unable to open device {vendor_id:04x}:{product_id:04x} with serial '{serial}': {exc}"
            ) from exc
        LOGGER.debug("Opened %04x:%04x serial=%s", vendor_id, product_id, serial)
        return device

    def get_feature_report(self, handle: Any, report_id: int, size: int) -> bytes:
        try:
            data = handle.get_feature_report(report_id, size)
        except (OSError, ValueError) as exc:
            raise TransportIOError(f"HID error reading report {report_id}: {exc}") from exc
        return bytes(data)

    def set_feature_report(self, handle: Any, data: bytes) -> int:
        try:
            written = handle.send_feature_report(data)
        except (OSError, ValueError) as exc:
            raise TransportIOError(f"HID error writing report {data[0]}: {exc}") from exc
        if written < 0:
            raise TransportIOError(f"HID error writing report {data[0]}")
        return written

    def close(self, handle: Any) -> None:
        handle.close()
