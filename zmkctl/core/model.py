"""Core data models used across codec, session, and CLI."""

from __future__ import annotations

from dataclasses import dataclass
from enum import IntEnum

ZMK_VENDOR_ID = 0x1D50
ZMK_PRODUCT_ID = 0x615E


class ReportId(IntEnum):
    FUNCTIONS = 3
    KEY_SELECT = 4
    KEY_DATA = 5
    KEY_COMMIT = 6


@dataclass(frozen=True)
class FunctionsReport:
    keycount: int
    layer_count: int
    protocol_revision: int
    key_remap_support: bool


@dataclass(frozen=True)
class KeySelectRequest:
    layer_index: int
    key_index: int


@dataclass(frozen=True)
class KeyDataReport:
    behavior_id: int
    param1: int
    param2: int


@dataclass(frozen=True)
class KeyCommitReport:
    pass


@dataclass(frozen=True)
class DeviceDescriptor:
    manufacturer: str
    product: str
    serial: str


@dataclass(frozen=True)
class DeviceIdentity:
    vendor_id: int = ZMK_VENDOR_ID
    product_id: int = ZMK_PRODUCT_ID

    def __str__(self) -> str:
        return f"{self.vendor_id:04x}:{self.product_id:04x}"
