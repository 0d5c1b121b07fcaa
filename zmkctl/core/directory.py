"""Enumeration of connected settings-capable keyboards."""

from __future__ import annotations

import logging

from zmkctl.core.model import DeviceDescriptor, DeviceIdentity
from zmkctl.core.strings import to_portable
from zmkctl.transports.base import HidTransport

LOGGER = logging.getLogger(__name__)


class DeviceDirectory:
    def __init__(self, transport: HidTransport, identity: DeviceIdentity) -> None:
        self.transport = transport
        self.identity = identity

    def list_devices(self) -> list[DeviceDescriptor]:
        """Return one descriptor per physical device.

        A keyboard exposing several HID interfaces is enumerated once per
        interface, always as a contiguous run sharing one serial, so only
        the first entry of each run is kept.
        """
        entries = self.transport.enumerate(self.identity.vendor_id, self.identity.product_id)
        devices: list[DeviceDescriptor] = []
        previous_serial: str | None = None
        for index, entry in enumerate(entries):
            if index > 0 and entry.serial == previous_serial:
                LOGGER.debug("Skipping duplicate interface for serial %s", entry.serial)
                continue
            previous_serial = entry.serial
            devices.append(
                DeviceDescriptor(
                    manufacturer=to_portable(entry.manufacturer),
                    product=to_portable(entry.product),
                    serial=to_portable(entry.serial),
                )
            )
        LOGGER.info("Found %d device(s) for %s", len(devices), self.identity)
        return devices
