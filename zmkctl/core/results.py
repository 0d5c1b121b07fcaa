"""Serializable records for command and API output."""

from __future__ import annotations

import json
from collections.abc import Iterable, Mapping
from typing import Any

from zmkctl.core.errors import ResultBuildError
from zmkctl.core.model import DeviceDescriptor, FunctionsReport, KeyDataReport


def _field(source: object, name: str, kind: type) -> Any:
    value = getattr(source, name, None)
    if value is None:
        raise ResultBuildError(f"Missing field '{name}' in {type(source).__name__}")
    # bool is an int subclass; keep numbers and flags apart
    if kind is int and isinstance(value, bool):
        raise ResultBuildError(f"Field '{name}' must be {kind.__name__}, got bool")
    if not isinstance(value, kind):
        raise ResultBuildError(
            f"Field '{name}' must be {kind.__name__}, got {type(value).__name__}"
        )
    return value


def device_list_record(devices: Iterable[DeviceDescriptor]) -> list[dict[str, str]]:
    return [
        {
            "manufacturer": _field(device, "manufacturer", str),
            "product": _field(device, "product", str),
            "serial": _field(device, "serial", str),
        }
        for device in devices
    ]


def functions_record(report: FunctionsReport) -> dict[str, Any]:
    return {
        "protocol_revision": _field(report, "protocol_revision", int),
        "keycount": _field(report, "keycount", int),
        "layer_count": _field(report, "layer_count", int),
        "key_remap_support": _field(report, "key_remap_support", bool),
    }


def key_data_record(report: KeyDataReport) -> dict[str, int]:
    return {
        "behavior_id": _field(report, "behavior_id", int),
        "param1": _field(report, "param1", int),
        "param2": _field(report, "param2", int),
    }


def to_json(record: list[Any] | Mapping[str, Any]) -> str:
    try:
        return json.dumps(record, separators=(",", ":"), ensure_ascii=False)
    except (TypeError, ValueError) as exc:
        raise ResultBuildError(f"Could not serialize result: {exc}") from exc
