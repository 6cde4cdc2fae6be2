"""HTML third-party notices document."""

from __future__ import annotations

from html import escape
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from noticegen.types import AggregateReport, DependencyRecord

STYLE = """
table { border-collapse: collapse; }
a { color: hsl(200, 40%, 50%); }
body { padding: 1em; color: hsl(0, 0%, 80%); background: hsl(0, 0%, 15%); font-family: sans-serif; }
th, td { border-bottom: 1px solid hsl(0, 0%, 20%); padding: 4px; text-align: left; vertical-align: top; }
pre { margin: 1em 0; background: hsl(0, 0%, 20%); padding: 1em; white-space: pre-wrap; }
""".strip()


def _row(entry: DependencyRecord) -> str:
    license_text = entry.license_expression or " AND ".join(sorted(entry.licenses))
    if entry.package_url:
        url = escape(entry.package_url)
        link = f'<a href="{url}">{url}</a>'
    else:
        link = ""
    notices = "<br />".join(escape(n).replace("\n", "<br />") for n in sorted(entry.notices))
    return (
        "<tr>"
        f"<td>{escape(entry.name)}</td>"
        f"<td>{escape(entry.version)}</td>"
        f"<td>{escape(entry.source.value)}</td>"
        f"<td>{escape(license_text)}</td>"
        f"<td>{link}</td>"
        f"<td>{notices}</td>"
        "</tr>"
    )


def render_html(report: AggregateReport) -> str:
    lines = [
        "<!DOCTYPE html>",
        "<html>",
        "<head>",
        '<meta charset="utf-8">',
        "<title>3rd Party Notices</title>",
        f"<style>\n{STYLE}\n</style>",
        "</head>",
        "<body>",
        "<h1>3rd Party Notices</h1>",
        f"<p>Generated: {escape(report.generated_at)}</p>",
        "<h2>Dependencies</h2>",
        "<table>",
        "<thead>",
        "<tr><th>Name</th><th>Version</th><th>Source</th><th>License</th>"
        "<th>Package URL</th><th>Notices</th></tr>",
        "</thead>",
        "<tbody>",
    ]
    lines.extend(_row(entry) for entry in report.entries)
    lines.extend(["</tbody>", "</table>", "<h2>Licenses</h2>", "<ul>"])
    lines.extend(f"<li><code>{escape(license_id)}</code></li>" for license_id in report.licenses)
    lines.extend(["</ul>", "</body>", "</html>"])
    return "\n".join(lines) + "\n"
