"""Helpers for noticegen tests."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

from noticegen.types import DependencyRecord, DependencySource


def record(
    name: str,
    version: str = "1.0.0",
    licenses: set[str] | frozenset[str] | None = None,
    source: DependencySource = DependencySource.CARGO,
    **extra: Any,
) -> DependencyRecord:
    """Build a dependency record; licenses default to {"MIT"}."""
    return DependencyRecord(
        name=name,
        version=version,
        licenses=frozenset({"MIT"} if licenses is None else licenses),
        source=source,
        **extra,
    )


def cargo_package(
    name: str,
    version: str,
    *,
    license: str | None = "MIT",
    source: str | None = "registry+https://github.com/rust-lang/crates.io-index",
    manifest_dir: Path | None = None,
    authors: list[str] | None = None,
    repository: str | None = None,
) -> dict[str, Any]:
    """Return one ``packages`` entry of cargo metadata output."""
    manifest_dir = manifest_dir or Path("/nonexistent") / f"{name}-{version}"
    return {
        "name": name,
        "version": version,
        "id": f"{name} {version}",
        "license": license,
        "license_file": None,
        "source": source,
        "authors": authors or [],
        "repository": repository,
        "manifest_path": str(manifest_dir / "Cargo.toml"),
    }


def cargo_metadata(*packages: dict[str, Any]) -> str:
    return json.dumps({"packages": list(packages), "workspace_members": [], "version": 1})


def write_package_json(package_dir: Path, data: dict[str, Any]) -> Path:
    """Create an installed npm package directory with a package.json."""
    package_dir.mkdir(parents=True, exist_ok=True)
    (package_dir / "package.json").write_text(json.dumps(data), encoding="utf-8")
    return package_dir


def pnpm_list(dependencies: dict[str, Path], dev_dependencies: dict[str, Path] | None = None) -> str:
    """Return ``pnpm list --json`` output for one project."""
    project: dict[str, Any] = {
        "name": "app",
        "version": "0.0.0",
        "path": "/app",
        "private": True,
        "dependencies": {
            name: {"from": name, "version": "x", "path": str(path)} for name, path in dependencies.items()
        },
    }
    if dev_dependencies is not None:
        project["devDependencies"] = {
            name: {"from": name, "version": "x", "path": str(path)} for name, path in dev_dependencies.items()
        }
    return json.dumps([project])
