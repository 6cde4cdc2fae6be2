"""License allow-list validation and report aggregation.

Validation is a pure function of its inputs: the same dependency lists,
allow-list, ignore list and timestamp always give the same report or the
same violation list, regardless of input ordering.
"""

from __future__ import annotations

import re
from dataclasses import replace
from typing import TYPE_CHECKING

from noticegen.errors import LicenseViolation
from noticegen.types import AggregateReport, DependencyRecord, Violation

if TYPE_CHECKING:
    from collections.abc import Iterable, Sequence

DETERMINISTIC_TIMESTAMP = "1970-01-01T00:00:00Z"

_DIGITS_RE = re.compile(r"(\d+)")


def _natural_key(value: str) -> tuple:
    """Split digit runs so "1.10" sorts after "1.9"."""
    return tuple(
        (0, int(part), "") if part.isdigit() else (1, 0, part)
        for part in _DIGITS_RE.split(value)
        if part
    )


def _record_sort_key(record: DependencyRecord) -> tuple:
    return (record.name, _natural_key(record.version), record.version, record.source.value)


def _violation_sort_key(violation: Violation) -> tuple:
    return (
        violation.package,
        _natural_key(violation.version),
        violation.version,
        violation.source.value,
    )


def _smallest(values: Iterable[str | None]) -> str | None:
    present = sorted(v for v in values if v is not None)
    return present[0] if present else None


def combine_duplicates(records: Sequence[DependencyRecord]) -> DependencyRecord:
    """Fold records sharing one (name, version, source) key into a single record.

    License and notice sets are unioned so a duplicate can never hide a
    license. Display fields take the lexically smallest value, so the result
    does not depend on the order the duplicates arrived in.
    """
    if len(records) == 1:
        return records[0]
    expressions = sorted({r.license_expression for r in records if r.license_expression})
    if len(expressions) > 1:
        expression: str | None = " AND ".join(f"({e})" for e in expressions)
    else:
        expression = expressions[0] if expressions else None
    return replace(
        records[0],
        licenses=frozenset().union(*(r.licenses for r in records)),
        license_expression=expression,
        package_url=_smallest(r.package_url for r in records),
        repository=_smallest(r.repository for r in records),
        notices=frozenset().union(*(r.notices for r in records)),
    )


def merge_records(*lists: Iterable[DependencyRecord]) -> list[DependencyRecord]:
    """Concatenate record lists, folding duplicate (name, version, source) keys."""
    groups: dict[tuple, list[DependencyRecord]] = {}
    for records in lists:
        for record in records:
            groups.setdefault(record.key, []).append(record)
    return [combine_duplicates(group) for group in groups.values()]


def find_violation(record: DependencyRecord, allowed_licenses: frozenset[str]) -> Violation | None:
    """Return the violation for ``record``, or None if it is fully allowed."""
    offending = record.licenses - allowed_licenses
    if record.licenses and not offending:
        return None
    return Violation(
        package=record.name,
        version=record.version,
        offending_licenses=frozenset(offending),
        source=record.source,
    )


def check_dependencies(
    cargo: Iterable[DependencyRecord],
    pnpm: Iterable[DependencyRecord],
    allowed_licenses: Iterable[str],
    ignore_packages: Iterable[str],
    *,
    generated_at: str = DETERMINISTIC_TIMESTAMP,
) -> tuple[AggregateReport | None, list[Violation]]:
    """Validate dependencies without raising.

    Returns:
        (report, []) on success, (None, violations) otherwise
    """
    allowed = frozenset(allowed_licenses)
    ignored = frozenset(ignore_packages)

    merged = merge_records(cargo, pnpm)
    kept = [record for record in merged if record.name not in ignored]

    violations = []
    for record in kept:
        violation = find_violation(record, allowed)
        if violation is not None:
            violations.append(violation)

    if violations:
        return None, sorted(violations, key=_violation_sort_key)

    report = AggregateReport(
        entries=tuple(sorted(kept, key=_record_sort_key)),
        generated_at=generated_at,
    )
    return report, []


def validate_dependencies(
    cargo: Iterable[DependencyRecord],
    pnpm: Iterable[DependencyRecord],
    allowed_licenses: Iterable[str],
    ignore_packages: Iterable[str],
    *,
    generated_at: str = DETERMINISTIC_TIMESTAMP,
) -> AggregateReport:
    """Validate dependencies against the allow-list and build the report.

    Args:
        cargo: Records from the Cargo collector
        pnpm: Records from the pnpm collector
        allowed_licenses: Allowed license identifiers; empty allows nothing
        ignore_packages: Package names excluded from checking and output
        generated_at: Timestamp stamped onto the report

    Returns:
        AggregateReport sorted by name, then version

    Raises:
        LicenseViolation: With every violation found, not just the first
    """
    report, violations = check_dependencies(
        cargo,
        pnpm,
        allowed_licenses,
        ignore_packages,
        generated_at=generated_at,
    )
    if violations:
        raise LicenseViolation(violations)
    assert report is not None
    return report
