"""End-to-end notice run: collect, validate, render and write."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import UTC, datetime
from typing import TYPE_CHECKING

from noticegen.collectors import default_collectors
from noticegen.render.writer import write_reports
from noticegen.types import DependencySource
from noticegen.validate import DETERMINISTIC_TIMESTAMP, validate_dependencies

if TYPE_CHECKING:
    from collections.abc import Sequence
    from pathlib import Path

    from noticegen.collectors import Collector
    from noticegen.config import NoticesConfig
    from noticegen.types import AggregateReport, DependencyRecord

logger = logging.getLogger(__name__)

TIMESTAMP_MODES = ("deterministic", "wallclock")


@dataclass
class PipelineResult:
    """Outcome of a successful run."""

    report: AggregateReport
    written: list[Path] = field(default_factory=list)


def get_timestamp(timestamp_mode: str) -> str:
    """Return the report timestamp for ``timestamp_mode``.

    Raises:
        ValueError: If the mode is unknown
    """
    if timestamp_mode == "deterministic":
        return DETERMINISTIC_TIMESTAMP
    if timestamp_mode == "wallclock":
        return datetime.now(UTC).strftime("%Y-%m-%dT%H:%M:%SZ")
    raise ValueError(f"Unknown timestamp mode: {timestamp_mode} (expected one of {', '.join(TIMESTAMP_MODES)})")


def collect_all(
    collectors: Sequence[Collector],
    project_root: Path,
) -> dict[DependencySource, list[DependencyRecord]]:
    """Run every collector, failing fast on the first error."""
    collected: dict[DependencySource, list[DependencyRecord]] = {source: [] for source in DependencySource}
    for collector in collectors:
        records = collector.collect(project_root)
        logger.info("Collected %d %s package(s)", len(records), collector.name)
        collected[DependencySource(collector.name)].extend(records)
    return collected


def run_pipeline(
    config: NoticesConfig,
    project_root: Path,
    *,
    timestamp_mode: str = "deterministic",
    collectors: Sequence[Collector] | None = None,
    write: bool = True,
) -> PipelineResult:
    """Run the full notice pipeline.

    Raises:
        MetadataParseError: If a collector fails
        LicenseViolation: If any dependency fails the allow-list check
    """
    generated_at = get_timestamp(timestamp_mode)
    if collectors is None:
        collectors = default_collectors(scan_notices=config.scan_notices)

    collected = collect_all(collectors, project_root)
    report = validate_dependencies(
        collected[DependencySource.CARGO],
        collected[DependencySource.PNPM],
        config.allowed_licenses,
        config.ignore_packages,
        generated_at=generated_at,
    )
    logger.info("All %d dependencies passed the license check", len(report.entries))

    result = PipelineResult(report=report)
    if write:
        result.written = write_reports(report, config, project_root)
    return result
