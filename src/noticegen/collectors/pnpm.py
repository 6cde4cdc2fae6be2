"""pnpm dependency collector built on ``pnpm list --json``."""

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

PNPM_LOCKFILE = "pnpm-lock.yaml"
LIST_ARGV = ["pnpm", "list", "--json"]
DEPENDENCY_SECTIONS = ("dependencies", "devDependencies")


def _license_expression(package_json: dict[str, Any]) -> str | None:
    """Normalize the ``license`` field, including legacy object/list forms."""
    value = package_json.get("license")
    if isinstance(value, str):
        return value
    if isinstance(value, dict) and isinstance(value.get("type"), str):
        return value["type"]

    legacy = package_json.get("licenses")
    if isinstance(legacy, list):
        types = [item["type"] for item in legacy if isinstance(item, dict) and item.get("type")]
        if types:
            return " OR ".join(types)
    return None


def _repository_url(package_json: dict[str, Any], package_json_path: Path) -> str | None:
    value = package_json.get("repository")
    if value is None or isinstance(value, str):
        return value
    if isinstance(value, dict):
        url = value.get("url")
        if url is None or isinstance(url, str):
            return url
    raise MetadataParseError(
        package_json_path, "'repository' must be a string or an object with a string 'url'"
    )


def read_package_json(package_dir: Path, *, scan_notices: bool = True) -> DependencyRecord:
    """Build a dependency record from an installed package's ``package.json``.

    Raises:
        MetadataParseError: If package.json is missing or malformed
    """
    package_json_path = package_dir / "package.json"
    try:
        with open(package_json_path, encoding="utf-8") as f:
            data = json.load(f)
    except OSError as e:
        raise MetadataParseError(package_json_path, f"could not read: {e}") from e
    except json.JSONDecodeError as e:
        raise MetadataParseError(package_json_path, f"invalid JSON: {e}") from e

    if not isinstance(data, dict):
        raise MetadataParseError(package_json_path, "package.json root is not an object")

    name = data.get("name")
    version = data.get("version")
    if not isinstance(name, str) or not isinstance(version, str):
        raise MetadataParseError(package_json_path, "package.json lacks a string name/version")

    license_expression = _license_expression(data)
    if license_expression is None:
        logger.warning("Package %s %s does not declare a license", name, version)
    try:
        licenses = license_ids(license_expression)
    except ExpressionError as e:
        raise MetadataParseError(
            package_json_path, f"invalid license expression {license_expression!r}: {e}"
        ) from e

    return DependencyRecord(
        name=name,
        version=version,
        licenses=licenses,
        source=DependencySource.PNPM,
        license_expression=license_expression,
        package_url=f"https://www.npmjs.com/package/{name}/v/{version}",
        repository=_repository_url(data, package_json_path),
        notices=frozenset(scan_for_notices(package_dir)) if scan_notices else frozenset(),
    )


def parse_pnpm_list(
    text: str,
    *,
    origin: Path | str = "pnpm list",
    scan_notices: bool = True,
) -> list[DependencyRecord]:
    """Build dependency records from ``pnpm list --json`` output.

    Raises:
        MetadataParseError: If the output or any referenced package.json is malformed
    """
    try:
        projects = json.loads(text)
    except json.JSONDecodeError as e:
        raise MetadataParseError(origin, f"invalid JSON from pnpm list: {e}") from e

    if not isinstance(projects, list):
        raise MetadataParseError(origin, "pnpm list output is not a list of projects")

    records = []
    for project in projects:
        if not isinstance(project, dict):
            raise MetadataParseError(origin, "project entry is not an object")
        for section in DEPENDENCY_SECTIONS:
            deps = project.get(section) or {}
            if not isinstance(deps, dict):
                raise MetadataParseError(origin, f"'{section}' is not an object")
            for dep_name, item in sorted(deps.items()):
                if not isinstance(item, dict) or not isinstance(item.get("path"), str):
                    raise MetadataParseError(origin, f"dependency {dep_name!r} has no 'path'")
                records.append(read_package_json(Path(item["path"]), scan_notices=scan_notices))

    merged = merge_records(records)

    logger.debug("Parsed %d pnpm package(s) from %s", len(merged), origin)
    return merged


class PnpmCollector:
    """Collects direct pnpm dependencies for a JavaScript project."""

    name = DependencySource.PNPM.value

    def __init__(self, *, scan_notices: bool = True):
        self.scan_notices = scan_notices

    def collect(self, project_root: Path) -> list[DependencyRecord]:
        lockfile = project_root / PNPM_LOCKFILE
        if not lockfile.is_file():
            logger.info("Skipping pnpm packages because lockfile not found")
            return []

        logger.info("Collecting pnpm packages")
        try:
            result = run_command(LIST_ARGV, cwd=project_root)
        except ExecError as e:
            raise MetadataParseError(lockfile, f"running `pnpm list` failed: {e}") from e

        return parse_pnpm_list(result.stdout, origin=lockfile, scan_notices=self.scan_notices)
