"""User configuration loading and validation."""

from __future__ import annotations

import json
import logging
import os
from dataclasses import dataclass
from importlib import resources
from pathlib import Path
from typing import Any

import yaml
from jsonschema import ValidationError, validators

from zmkctl.core.errors import ConfigError, ConfigValidationError
from zmkctl.core.model import DeviceIdentity

LOGGER = logging.getLogger(__name__)


class UniqueKeyLoader(yaml.SafeLoader):
    """YAML loader that rejects duplicate mapping keys."""


def _construct_mapping(loader: UniqueKeyLoader, node: yaml.Node, deep: bool = False) -> dict[str, Any]:
    mapping: dict[str, Any] = {}
    for key_node, value_node in node.value:
        key = loader.construct_object(key_node, deep=deep)
        if key in mapping:
            raise ConfigValidationError(f"Duplicate key '{key}' in YAML document")
        mapping[key] = loader.construct_object(value_node, deep=deep)
    return mapping


UniqueKeyLoader.add_constructor(
    yaml.resolver.BaseResolver.DEFAULT_MAPPING_TAG,
    _construct_mapping,
)


@dataclass(frozen=True)
class LoadedConfig:
    identity: DeviceIdentity
    source: Path | None
    warnings: tuple[str, ...]


def config_path() -> Path:
    xdg_config = Path(os.environ.get("XDG_CONFIG_HOME", Path.home() / ".config"))
    return xdg_config / "zmkctl/config.yaml"


def _load_schema_validator() -> Any:
    schema_text = resources.files("zmkctl.schemas").joinpath("config.schema.json").read_text(
        encoding="utf-8"
    )
    schema = json.loads(schema_text)
    validator_cls = validators.validator_for(schema)
    validator_cls.check_schema(schema)
    return validator_cls(schema)


def _read_yaml(path: Path) -> dict[str, Any]:
    try:
        content = path.read_text(encoding="utf-8")
    except OSError as exc:
        raise ConfigError(f"Could not read config file {path}: {exc}") from exc

    try:
        loaded = yaml.load(content, Loader=UniqueKeyLoader)
    except yaml.YAMLError as exc:
        raise ConfigValidationError(f"Invalid YAML in {path}: {exc}") from exc

    if loaded is None:
        return {}
    if not isinstance(loaded, dict):
        raise ConfigValidationError(f"Config file {path} must contain a mapping at root")
    return loaded


def _usb_id(value: int | str) -> int:
    if isinstance(value, int):
        return value
    return int(value, 16)


def _build_identity(doc: dict[str, Any], source: Path) -> DeviceIdentity:
    validator = _load_schema_validator()
    try:
        validator.validate(doc)
    except ValidationError as exc:
        path = ".".join(str(p) for p in exc.path)
        where = f" ({path})" if path else ""
        raise ConfigValidationError(f"Schema validation failed for {source}{where}: {exc.message}") from exc

    default = DeviceIdentity()
    return DeviceIdentity(
        vendor_id=_usb_id(doc.get("vendor_id", default.vendor_id)),
        product_id=_usb_id(doc.get("product_id", default.product_id)),
    )


def load_config(path: Path | None = None) -> LoadedConfig:
    path = path or config_path()
    if not path.is_file():
        return LoadedConfig(identity=DeviceIdentity(), source=None, warnings=())

    identity = _build_identity(_read_yaml(path), path)
    warnings: list[str] = []
    if identity != DeviceIdentity():
        warning = f"Using device ids {identity} from {path}"
        LOGGER.warning(warning)
        warnings.append(warning)
    return LoadedConfig(identity=identity, source=path, warnings=tuple(warnings))
