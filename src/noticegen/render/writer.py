"""All-or-nothing writer for rendered notice documents."""

from __future__ import annotations

import logging
import os
import tempfile
from pathlib import Path
from typing import TYPE_CHECKING

from noticegen.errors import ReportWriteError
from noticegen.render import RENDERERS

if TYPE_CHECKING:
    from noticegen.config import NoticesConfig
    from noticegen.types import AggregateReport

logger = logging.getLogger(__name__)


def output_path(config: NoticesConfig, out_root: Path, ext: str) -> Path:
    """``<out_dir>/<filename>.<ext>``, with a relative out_dir taken from ``out_root``."""
    return out_root / config.out_dir / f"{config.filename}.{ext}"


def _stage(path: Path, content: str) -> Path:
    """Write ``content`` to a temp file beside ``path`` and return the temp path."""
    path.parent.mkdir(parents=True, exist_ok=True)
    tmp_path = None
    try:
        with tempfile.NamedTemporaryFile(
            mode="w",
            encoding="utf-8",
            dir=path.parent,
            delete=False,
            prefix=f".{path.name}.",
            suffix=".noticegen.tmp",
        ) as tmp_file:
            tmp_path = Path(tmp_file.name)
            tmp_file.write(content)
    except OSError:
        if tmp_path is not None and tmp_path.exists():
            tmp_path.unlink()
        raise
    return tmp_path


def write_reports(report: AggregateReport, config: NoticesConfig, out_root: Path) -> list[Path]:
    """Render every enabled format, then write them, overwriting existing files.

    Rendering finishes for all formats before anything touches the disk, and
    every document is staged in a temp file beside its target before the
    first one is moved into place. If a later move fails, documents this run
    created are removed again.

    Returns:
        Written paths, in json/md/html order

    Raises:
        ReportWriteError: If a document could not be written
    """
    rendered = [
        (output_path(config, out_root, ext), RENDERERS[ext](report))
        for ext in config.export_formats
    ]
    if not rendered:
        logger.info("No export format enabled; nothing written")
        return []

    staged: list[tuple[Path, Path]] = []
    created: list[Path] = []
    try:
        for path, text in rendered:
            try:
                staged.append((_stage(path, text), path))
            except OSError as e:
                raise ReportWriteError(path, str(e)) from e
        for tmp_path, path in staged:
            existed = path.exists()
            try:
                os.replace(tmp_path, path)
            except OSError as e:
                for done in created:
                    done.unlink(missing_ok=True)
                raise ReportWriteError(path, str(e)) from e
            if not existed:
                created.append(path)
            logger.info("Wrote %s", path)
    finally:
        for tmp_path, _ in staged:
            if tmp_path.exists():
                tmp_path.unlink()

    return [path for _, path in staged]
