"""Core data types shared by collectors, validation and renderers."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum


class DependencySource(str, Enum):
    """Package ecosystem a dependency record was collected from."""

    CARGO = "cargo"
    PNPM = "pnpm"


@dataclass(frozen=True)
class DependencyRecord:
    """Single third-party package as declared by its ecosystem."""

    name: str
    version: str
    licenses: frozenset[str]
    source: DependencySource
    license_expression: str | None = None
    package_url: str | None = None
    repository: str | None = None
    notices: frozenset[str] = field(default_factory=frozenset)

    @property
    def key(self) -> tuple[str, str, DependencySource]:
        return (self.name, self.version, self.source)


@dataclass(frozen=True)
class Violation:
    """Dependency whose licenses are not covered by the allow-list."""

    package: str
    version: str
    offending_licenses: frozenset[str]
    source: DependencySource


@dataclass(frozen=True)
class AggregateReport:
    """Validated, sorted set of dependencies for one run."""

    entries: tuple[DependencyRecord, ...]
    generated_at: str

    @property
    def licenses(self) -> list[str]:
        """Sorted union of every license identifier in the report."""
        used: set[str] = set()
        for entry in self.entries:
            used |= entry.licenses
        return sorted(used)
