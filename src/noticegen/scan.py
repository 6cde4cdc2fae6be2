"""Copyright notice scanning for installed package directories."""

from __future__ import annotations

import logging
import re
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from pathlib import Path

logger = logging.getLogger(__name__)

COPYRIGHT_FILE_RE = re.compile(r"(?i)^(license|copying|readme|copyright|notice)")
COPYRIGHT_RE = re.compile(r"(?im)copyright.*(©|\(c\)).*$")
# Template placeholders ("Copyright (c) <year> <copyright holder>") are not real notices.
NOT_COPYRIGHT_RE = re.compile(r"(?i)(year|notice|holder|owner|interest|yyyy)")


def extract_copyright_lines(text: str) -> set[str]:
    """Return copyright statements found in ``text``."""
    found = set()
    for match in COPYRIGHT_RE.finditer(text):
        line = match.group(0).strip()
        if not NOT_COPYRIGHT_RE.search(line):
            found.add(line)
    return found


def scan_for_notices(package_dir: Path) -> set[str]:
    """Collect NOTICE contents and copyright statements from a package directory.

    Only files directly inside ``package_dir`` are considered. A ``NOTICE``
    file is included verbatim as Apache-2.0 requires.
    """
    notices: set[str] = set()
    if not package_dir.is_dir():
        logger.debug("Package directory missing, no notices scanned: %s", package_dir)
        return notices

    notice_path = package_dir / "NOTICE"
    if notice_path.is_file():
        notices.add(notice_path.read_text(encoding="utf-8", errors="replace"))

    for entry in sorted(package_dir.iterdir()):
        if not entry.is_file() or not COPYRIGHT_FILE_RE.match(entry.name):
            continue
        text = entry.read_text(encoding="utf-8", errors="replace")
        notices |= extract_copyright_lines(text)

    return notices
