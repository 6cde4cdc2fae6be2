"""JSON third-party notices document."""

from __future__ import annotations

import json
from typing import TYPE_CHECKING, Any

from noticegen import __version__
from noticegen.canonical_json import entries_hash
from noticegen.schemas.validator import validate_data

if TYPE_CHECKING:
    from noticegen.types import AggregateReport, DependencyRecord

SCHEMA_NAME = "third_party_notices"
SCHEMA_VERSION = "1.0"


def entry_payload(entry: DependencyRecord) -> dict[str, Any]:
    return {
        "name": entry.name,
        "version": entry.version,
        "source": entry.source.value,
        "licenses": sorted(entry.licenses),
        "license_expression": entry.license_expression,
        "package_url": entry.package_url,
        "repository": entry.repository,
        "notices": sorted(entry.notices),
    }


def report_payload(report: AggregateReport) -> dict[str, Any]:
    """Build the schema-validated JSON payload for ``report``."""
    dependencies = [entry_payload(entry) for entry in report.entries]
    payload = {
        "schema_version": SCHEMA_VERSION,
        "generator": {"name": "noticegen", "version": __version__},
        "generated_at": report.generated_at,
        "dependencies": dependencies,
        "licenses": report.licenses,
        "hashes": {"entries_hash": entries_hash(dependencies)},
    }
    validate_data(payload, SCHEMA_NAME, strict=True)
    return payload


def render_json(report: AggregateReport) -> str:
    return json.dumps(report_payload(report), indent=2, ensure_ascii=False) + "\n"
