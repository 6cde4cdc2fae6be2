"""Error types raised by the notice pipeline."""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Iterable
    from pathlib import Path

    from noticegen.types import Violation


class NoticesError(Exception):
    """Base class for all terminal noticegen failures."""


class ConfigError(NoticesError):
    """Configuration file is missing or malformed."""


class MetadataParseError(NoticesError):
    """A collector could not read its ecosystem's dependency data."""

    def __init__(self, path: Path | str, reason: str):
        super().__init__(f"{path}: {reason}")
        self.path = path
        self.reason = reason


class LicenseViolation(NoticesError):
    """One or more dependencies fail the allow-list check."""

    def __init__(self, violations: Iterable[Violation]):
        self.violations = tuple(violations)
        lines = [f"{len(self.violations)} dependency license violation(s):"]
        for v in self.violations:
            offending = ", ".join(sorted(v.offending_licenses)) or "(no license declared)"
            lines.append(f"  - {v.package} {v.version} [{v.source.value}]: {offending}")
        super().__init__("\n".join(lines))


class ReportWriteError(NoticesError):
    """A rendered notice document could not be written to disk."""

    def __init__(self, path: Path | str, reason: str):
        super().__init__(f"could not write {path}: {reason}")
        self.path = path
        self.reason = reason
