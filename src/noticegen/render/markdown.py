"""Markdown third-party notices document."""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from noticegen.types import AggregateReport


def _cell(value: str | None) -> str:
    """Escape a value for use inside a Markdown table cell."""
    if not value:
        return ""
    return value.replace("\\", "\\\\").replace("|", "\\|").replace("\n", "<br>")


def render_markdown(report: AggregateReport) -> str:
    lines = [
        "# 3rd Party Notices",
        "",
        f"**Generated:** {report.generated_at}",
        f"**Dependencies:** {len(report.entries)}",
        "",
        "## Dependencies",
        "",
    ]

    if report.entries:
        lines.append("| Name | Version | Source | License | Package URL |")
        lines.append("|---|---|---|---|---|")
        for entry in report.entries:
            license_text = entry.license_expression or " AND ".join(sorted(entry.licenses))
            url = f"<{entry.package_url}>" if entry.package_url else ""
            lines.append(
                f"| {_cell(entry.name)} | {_cell(entry.version)} | {entry.source.value} "
                f"| {_cell(license_text)} | {url} |"
            )
    else:
        lines.append("*(none)*")

    lines.extend(["", "## Licenses", ""])
    if report.licenses:
        for license_id in report.licenses:
            users = [e.name for e in report.entries if license_id in e.licenses]
            lines.append(f"- `{license_id}` ({len(users)} package(s))")
    else:
        lines.append("*(none)*")

    with_notices = [e for e in report.entries if e.notices]
    if with_notices:
        lines.extend(["", "## Notices", ""])
        for entry in with_notices:
            lines.append(f"### {entry.name} {entry.version}")
            lines.append("")
            lines.append("```")
            lines.extend("\n".join(sorted(entry.notices)).replace("```", "'''").splitlines())
            lines.append("```")
            lines.append("")

    return "\n".join(lines).rstrip("\n") + "\n"
