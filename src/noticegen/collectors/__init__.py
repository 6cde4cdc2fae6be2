"""Dependency collectors, one per package ecosystem.

Each collector satisfies the ``Collector`` protocol; they share no state
and no base class.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol

from noticegen.collectors.cargo import CargoCollector, parse_cargo_metadata
from noticegen.collectors.pnpm import PnpmCollector, parse_pnpm_list

if TYPE_CHECKING:
    from pathlib import Path

    from noticegen.types import DependencyRecord

__all__ = [
    "CargoCollector",
    "Collector",
    "PnpmCollector",
    "default_collectors",
    "parse_cargo_metadata",
    "parse_pnpm_list",
]


class Collector(Protocol):
    """Produces dependency records for one ecosystem."""

    name: str

    def collect(self, project_root: Path) -> list[DependencyRecord]: ...


def default_collectors(*, scan_notices: bool = True) -> tuple[CargoCollector, PnpmCollector]:
    """Return the Cargo and pnpm collectors, in that order."""
    return CargoCollector(scan_notices=scan_notices), PnpmCollector(scan_notices=scan_notices)
