"""Config loading and validation for YAML-based bleutil settings."""

from __future__ import annotations

import json
import logging
import os
import re
from dataclasses import dataclass
from importlib import resources
from importlib.resources.abc import Traversable
from pathlib import Path
from typing import Any

import yaml
from bleak.uuids import normalize_uuid_str
from jsonschema import ValidationError, validators

from bleutil.core.errors import ConfigLoadError, ConfigValidationError
from bleutil.core.model import Settings, UartSpec

_UUID_RE = re.compile(r"^[0-9a-f]{4}$|^[0-9a-f]{8}$|^[0-9a-f]{8}-[0-9a-f]{4}-[0-9a-f]{4}-[0-9a-f]{4}-[0-9a-f]{12}$")
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
    settings: Settings
    warnings: tuple[str, ...]


def _load_schema_validator() -> Any:
    schema_text = resources.files("bleutil.schemas").joinpath("config.schema.json").read_text(
        encoding="utf-8"
    )
    schema = json.loads(schema_text)
    validator_cls = validators.validator_for(schema)
    validator_cls.check_schema(schema)
    return validator_cls(schema)


def user_config_path() -> Path:
    xdg_config = Path(os.environ.get("XDG_CONFIG_HOME", Path.home() / ".config"))
    return xdg_config / "bleutil/config.yaml"


def _read_yaml(path: Path | Traversable) -> dict[str, Any]:
    try:
        content = path.read_text(encoding="utf-8")
    except OSError as exc:
        raise ConfigLoadError(f"Could not read config file {path}: {exc}") from exc

    try:
        loaded = yaml.load(content, Loader=UniqueKeyLoader)
    except yaml.YAMLError as exc:
        raise ConfigValidationError(f"Invalid YAML in {path}: {exc}") from exc

    if loaded is None:
        return {}
    if not isinstance(loaded, dict):
        raise ConfigValidationError(f"Config file {path} must contain a mapping at root")
    return loaded


def _validate(doc: dict[str, Any], source: Path | Traversable) -> None:
    validator = _load_schema_validator()
    try:
        validator.validate(doc)
    except ValidationError as exc:
        path = ".".join(str(p) for p in exc.path)
        where = f" ({path})" if path else ""
        raise ConfigValidationError(f"Schema validation failed for {source}{where}: {exc.message}") from exc


def _normalize_uuid(value: str, *, context: str) -> str:
    normalized = value.strip().lower()
    if not _UUID_RE.match(normalized):
        raise ConfigValidationError(
            f"{context} must be a 16-bit, 32-bit, or 128-bit UUID string"
        )
    # Discovered characteristics report full 128-bit UUIDs; expand short forms to match.
    return normalize_uuid_str(normalized)


def _merge(base: dict[str, Any], override: dict[str, Any]) -> dict[str, Any]:
    merged = dict(base)
    for key, value in override.items():
        if isinstance(value, dict) and isinstance(merged.get(key), dict):
            merged[key] = _merge(merged[key], value)
        else:
            merged[key] = value
    return merged


def _build_settings(doc: dict[str, Any]) -> Settings:
    return Settings(
        scan_window_s=float(doc["scan"]["window_s"]),
        write_scan_window_s=float(doc["scan"]["write_window_s"]),
        match_policy=doc["locate"]["match"],
        uart=UartSpec(
            write_char_uuid=_normalize_uuid(
                doc["uart"]["write_char_uuid"],
                context="uart.write_char_uuid",
            ),
            read_char_uuid=_normalize_uuid(
                doc["uart"]["read_char_uuid"],
                context="uart.read_char_uuid",
            ),
        ),
    )


def _packaged_config_path() -> Traversable:
    return resources.files("bleutil.defaults").joinpath("config.yaml")


def load_config() -> LoadedConfig:
    warnings: list[str] = []

    packaged = _packaged_config_path()
    doc = _read_yaml(packaged)
    _validate(doc, packaged)

    user_path = user_config_path()
    if user_path.is_file():
        user_doc = _read_yaml(user_path)
        _validate(user_doc, user_path)
        LOGGER.debug("Applying user config %s", user_path)
        doc = _merge(doc, user_doc)

    settings = _build_settings(doc)
    windows = {
        "scan.window_s": settings.scan_window_s,
        "scan.write_window_s": settings.write_scan_window_s,
    }
    for key, window in windows.items():
        if window == 0:
            warning = f"{key} is 0; scans will return before any advertisement is collected"
            LOGGER.warning(warning)
            warnings.append(warning)

    return LoadedConfig(settings=settings, warnings=tuple(warnings))
