"""Wire layout of the settings feature reports.

Every report is a report id byte followed by a fixed, packed body. All
multi-byte fields are little-endian.
"""

from __future__ import annotations

import struct
from typing import Union

from zmkctl.core.errors import InvalidArgument, MalformedReport
from zmkctl.core.model import (
    FunctionsReport,
    KeyCommitReport,
    KeyDataReport,
    KeySelectRequest,
    ReportId,
)

Report = Union[FunctionsReport, KeySelectRequest, KeyDataReport, KeyCommitReport]

_KEY_REMAP_SUPPORT = 0x01

_LAYOUTS: dict[ReportId, struct.Struct] = {
    ReportId.FUNCTIONS: struct.Struct("<BBBBB"),
    ReportId.KEY_SELECT: struct.Struct("<BBB"),
    ReportId.KEY_DATA: struct.Struct("<BIII"),
    ReportId.KEY_COMMIT: struct.Struct("<B"),
}

_REPORT_IDS: dict[type, ReportId] = {
    FunctionsReport: ReportId.FUNCTIONS,
    KeySelectRequest: ReportId.KEY_SELECT,
    KeyDataReport: ReportId.KEY_DATA,
    KeyCommitReport: ReportId.KEY_COMMIT,
}


def _report_id(value: int) -> ReportId:
    try:
        return ReportId(value)
    except ValueError as exc:
        raise MalformedReport(f"Unknown report id {value}") from exc


def report_size(report_id: int) -> int:
    return _LAYOUTS[_report_id(report_id)].size


def _check_width(name: str, value: int, bits: int) -> int:
    if isinstance(value, bool) or not isinstance(value, int):
        raise InvalidArgument(f"{name} must be an integer, got {value!r}")
    if not 0 <= value < (1 << bits):
        raise InvalidArgument(f"{name} must be between 0 and {(1 << bits) - 1}, got {value}")
    return value


def encode(report: Report) -> bytes:
    report_id = _REPORT_IDS.get(type(report))
    if report_id is None:
        raise InvalidArgument(f"Cannot encode {type(report).__name__}")
    layout = _LAYOUTS[report_id]

    if isinstance(report, FunctionsReport):
        flags = _KEY_REMAP_SUPPORT if report.key_remap_support else 0
        return layout.pack(
            report_id,
            _check_width("keycount", report.keycount, 8),
            _check_width("layer_count", report.layer_count, 8),
            _check_width("protocol_revision", report.protocol_revision, 8),
            flags,
        )
    if isinstance(report, KeySelectRequest):
        return layout.pack(
            report_id,
            _check_width("layer_index", report.layer_index, 8),
            _check_width("key_index", report.key_index, 8),
        )
    if isinstance(report, KeyDataReport):
        return layout.pack(
            report_id,
            _check_width("behavior_id", report.behavior_id, 32),
            _check_width("param1", report.param1, 32),
            _check_width("param2", report.param2, 32),
        )
    return layout.pack(report_id)


def decode(report_id: int, data: bytes) -> Report:
    rid = _report_id(report_id)
    layout = _LAYOUTS[rid]
    if len(data) != layout.size:
        raise MalformedReport(
            f"Report {rid.name} must be {layout.size} bytes, got {len(data)}"
        )
    fields = layout.unpack(bytes(data))
    if fields[0] != rid:
        raise MalformedReport(f"Expected report id {int(rid)}, got {fields[0]}")

    if rid is ReportId.FUNCTIONS:
        _, keycount, layers, protocol_rev, flags = fields
        return FunctionsReport(
            keycount=keycount,
            layer_count=layers,
            protocol_revision=protocol_rev,
            key_remap_support=bool(flags & _KEY_REMAP_SUPPORT),
        )
    if rid is ReportId.KEY_SELECT:
        return KeySelectRequest(layer_index=fields[1], key_index=fields[2])
    if rid is ReportId.KEY_DATA:
        return KeyDataReport(behavior_id=fields[1], param1=fields[2], param2=fields[3])
    return KeyCommitReport()
