"""Transport interfaces."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Protocol


@dataclass(frozen=True)
class HidDeviceEntry:
    """One enumerated HID interface, strings as the backend reports them."""

    manufacturer: str | None
    product: str | None
    serial: str | None


class HidTransport(Protocol):
    def enumerate(self, vendor_id: int, product_id: int) -> list[HidDeviceEntry]:
        """List interfaces matching the ids, in backend enumeration order."""

    def open(self, vendor_id: int, product_id: int, serial: str) -> Any:
        """Open the device with the given serial and return its handle."""

    def get_feature_report(self, handle: Any, report_id: int, size: int) -> bytes:
        """Read a feature report, report id byte included."""

    def set_feature_report(self, handle: Any, data: bytes) -> int:
        """Write a feature report and return the number of bytes written."""

    def close(self, handle: Any) -> None:
        """Release the handle."""
