"""Cargo dependency collector built on ``cargo metadata``."""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any

from noticegen.collectors.exec import ExecError, run_command
from noticegen.errors import MetadataParseError
from noticegen.scan import scan_for_notices
from noticegen.spdx import ExpressionError, license_ids
from noticegen.types import DependencyRecord, DependencySource
from noticegen.validate import merge_records

logger = logging.getLogger(__name__)

CARGO_MANIFEST = "Cargo.toml"
CRATES_IO_SOURCES = (
    "registry+https://github.com/rust-lang/crates.io-index",
    "sparse+https://index.crates.io/",
)
METADATA_ARGV = ["cargo", "metadata", "--format-version", "1"]


def is_crates_io(source: str) -> bool:
    return source in CRATES_IO_SOURCES


def parse_cargo_metadata(
    text: str,
    *,
    origin: Path | str = "cargo metadata",
    scan_notices: bool = True,
) -> list[DependencyRecord]:
    """Build dependency records from ``cargo metadata`` JSON output.

    Packages without a ``source`` are local workspace crates and are skipped.

    Raises:
        MetadataParseError: If the document is not valid cargo metadata
    """
    try:
        metadata = json.loads(text)
    except json.JSONDecodeError as e:
        raise MetadataParseError(origin, f"invalid JSON from cargo metadata: {e}") from e

    if not isinstance(metadata, dict) or not isinstance(metadata.get("packages"), list):
        raise MetadataParseError(origin, "cargo metadata output has no 'packages' list")

    records = []
    for package in metadata["packages"]:
        record = _package_record(package, origin=origin, scan_notices=scan_notices)
        if record is not None:
            records.append(record)
    merged = merge_records(records)

    logger.debug("Parsed %d third-party crate(s) from %s", len(merged), origin)
    return merged


def _optional_string(package: dict[str, Any], key: str, *, origin: Path | str, label: str) -> str | None:
    value = package.get(key)
    if value is not None and not isinstance(value, str):
        raise MetadataParseError(origin, f"{label}: '{key}' must be a string, got {type(value).__name__}")
    return value


def _package_record(
    package: Any,
    *,
    origin: Path | str,
    scan_notices: bool,
) -> DependencyRecord | None:
    if not isinstance(package, dict):
        raise MetadataParseError(origin, "package entry is not an object")

    source = package.get("source")
    if source is None:
        return None

    try:
        name = str(package["name"])
        version = str(package["version"])
    except KeyError as e:
        raise MetadataParseError(origin, f"package entry missing {e.args[0]!r}") from e

    label = f"crate {name} {version}"
    if not isinstance(source, str):
        raise MetadataParseError(origin, f"{label}: 'source' must be a string")
    license_expression = _optional_string(package, "license", origin=origin, label=label)
    repository = _optional_string(package, "repository", origin=origin, label=label)
    authors = package.get("authors") or []
    if not isinstance(authors, list) or not all(isinstance(a, str) for a in authors):
        raise MetadataParseError(origin, f"{label}: 'authors' must be a list of strings")

    if license_expression is None:
        logger.warning("Crate %s %s does not declare a license", name, version)
    try:
        licenses = license_ids(license_expression)
    except ExpressionError as e:
        raise MetadataParseError(
            origin, f"{label}: invalid license expression {license_expression!r}: {e}"
        ) from e

    package_url = f"https://crates.io/crates/{name}/{version}" if is_crates_io(source) else source

    notices: set[str] = set()
    if scan_notices:
        if authors:
            notices.add(f"Authors: {', '.join(authors)}")
        manifest_path = package.get("manifest_path")
        if isinstance(manifest_path, str) and manifest_path:
            notices |= scan_for_notices(Path(manifest_path).parent)

    return DependencyRecord(
        name=name,
        version=version,
        licenses=licenses,
        source=DependencySource.CARGO,
        license_expression=license_expression,
        package_url=package_url,
        repository=repository,
        notices=frozenset(notices),
    )


class CargoCollector:
    """Collects third-party crates for a Cargo project."""

    name = DependencySource.CARGO.value

    def __init__(self, *, scan_notices: bool = True):
        self.scan_notices = scan_notices

    def collect(self, project_root: Path) -> list[DependencyRecord]:
        manifest = project_root / CARGO_MANIFEST
        if not manifest.is_file():
            logger.info("Skipping cargo packages because %s not found", CARGO_MANIFEST)
            return []

        logger.info("Collecting cargo packages")
        try:
            result = run_command(METADATA_ARGV, cwd=project_root)
        except ExecError as e:
            raise MetadataParseError(manifest, f"running `cargo metadata` failed: {e}") from e

        return parse_cargo_metadata(result.stdout, origin=manifest, scan_notices=self.scan_notices)
