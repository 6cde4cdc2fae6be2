"""Report renderers: pure mappings from AggregateReport to document text."""

from __future__ import annotations

from noticegen.render.html_report import render_html
from noticegen.render.json_report import render_json
from noticegen.render.markdown import render_markdown

RENDERERS = {
    "json": render_json,
    "md": render_markdown,
    "html": render_html,
}

__all__ = ["RENDERERS", "render_html", "render_json", "render_markdown"]
