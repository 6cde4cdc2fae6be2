"""Configuration loader for notice generation.

Supports ``notices.toml`` (preferred), ``.json`` and ``.yaml``/``.yml``
configuration files. The format is selected by file suffix.
"""

from __future__ import annotations

import json
import tomllib
from dataclasses import dataclass, field, fields
from pathlib import Path
from typing import Any

import yaml

from noticegen.errors import ConfigError
from noticegen.spdx import single_requirement

DEFAULT_CONFIG_FILENAME = "notices.toml"
DEFAULT_REPORT_FILENAME = "3rd-party-notices"

_REQUIRED_KEYS = frozenset({"allowed_licenses"})
_BOOL_KEYS = ("export_json", "export_markdown", "export_html", "scan_notices")


@dataclass(frozen=True)
class NoticesConfig:
    """Validated notice generation configuration."""

    allowed_licenses: frozenset[str]
    ignore_packages: frozenset[str] = field(default_factory=frozenset)
    export_json: bool = True
    export_markdown: bool = True
    export_html: bool = True
    out_dir: str = "."
    filename: str = DEFAULT_REPORT_FILENAME
    scan_notices: bool = True

    @property
    def export_formats(self) -> list[str]:
        """Enabled output extensions, in write order."""
        formats = []
        if self.export_json:
            formats.append("json")
        if self.export_markdown:
            formats.append("md")
        if self.export_html:
            formats.append("html")
        return formats

    @classmethod
    def from_dict(cls, data: Any) -> NoticesConfig:
        """Parse and validate a config mapping into NoticesConfig."""
        if not isinstance(data, dict):
            raise ConfigError("Config root must be a table/mapping")

        known = {f.name for f in fields(cls)}
        unknown = sorted(set(data) - known)
        if unknown:
            raise ConfigError(f"Unknown config key(s): {', '.join(unknown)}")

        missing = sorted(_REQUIRED_KEYS - set(data))
        if missing:
            raise ConfigError(f"Missing required config key(s): {', '.join(missing)}")

        allowed = []
        for license_id in _string_list(data, "allowed_licenses"):
            requirement = single_requirement(license_id)
            if requirement is None:
                raise ConfigError(
                    f"allowed_licenses entry {license_id!r} must be a single license requirement"
                )
            allowed.append(requirement)

        kwargs: dict[str, Any] = {
            "allowed_licenses": frozenset(allowed),
            "ignore_packages": frozenset(_string_list(data, "ignore_packages")),
        }

        for key in _BOOL_KEYS:
            if key in data:
                if not isinstance(data[key], bool):
                    raise ConfigError(f"{key} must be a boolean")
                kwargs[key] = data[key]

        if "out_dir" in data:
            kwargs["out_dir"] = _non_empty_string(data, "out_dir")

        if "filename" in data:
            filename = _non_empty_string(data, "filename")
            if "/" in filename or "\\" in filename:
                raise ConfigError("filename must not contain a path separator")
            kwargs["filename"] = filename

        return cls(**kwargs)


def _string_list(data: dict[str, Any], key: str) -> list[str]:
    value = data.get(key, [])
    if not isinstance(value, list) or not all(isinstance(v, str) for v in value):
        raise ConfigError(f"{key} must be a list of strings")
    cleaned = [v.strip() for v in value]
    if any(not v for v in cleaned):
        raise ConfigError(f"{key} must not contain empty entries")
    return cleaned


def _non_empty_string(data: dict[str, Any], key: str) -> str:
    value = data[key]
    if not isinstance(value, str) or not value.strip():
        raise ConfigError(f"{key} must be a non-empty string")
    return value.strip()


def load_config(path: Path) -> NoticesConfig:
    """Load notice configuration from a TOML, JSON or YAML file.

    Args:
        path: Config file path

    Returns:
        Validated NoticesConfig

    Raises:
        ConfigError: If the file is missing, malformed, or invalid
    """
    if not path.is_file():
        raise ConfigError(f"Config file not found: {path}")

    suffix = path.suffix.lower()
    try:
        if suffix == ".json":
            with open(path, encoding="utf-8") as f:
                data = json.load(f)
        elif suffix in (".yaml", ".yml"):
            with open(path, encoding="utf-8") as f:
                data = yaml.safe_load(f)
        else:
            with open(path, "rb") as f:
                data = tomllib.load(f)
    except tomllib.TOMLDecodeError as e:
        raise ConfigError(f"Malformed TOML config at {path}: {e}") from e
    except json.JSONDecodeError as e:
        raise ConfigError(f"Malformed JSON config at {path}: {e}") from e
    except yaml.YAMLError as e:
        raise ConfigError(f"Malformed YAML config at {path}: {e}") from e
    except OSError as e:
        raise ConfigError(f"Could not read config {path}: {e}") from e

    try:
        return NoticesConfig.from_dict(data)
    except ConfigError as e:
        raise ConfigError(f"Invalid config in {path}: {e}") from e
