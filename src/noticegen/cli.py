"""noticegen CLI - third-party notices with license allow-list checks."""

from enum import Enum
from pathlib import Path

import typer
from rich.console import Console
from rich.markup import escape

from noticegen import __version__
from noticegen.config import DEFAULT_CONFIG_FILENAME, load_config
from noticegen.errors import LicenseViolation, NoticesError
from noticegen.log import configure_logging
from noticegen.pipeline import run_pipeline

EXIT_VIOLATIONS = 1
EXIT_ERROR = 2

cli = typer.Typer(
    name="noticegen",
    help="Generate third-party notices and enforce a license allow-list.",
    no_args_is_help=True,
)
console = Console()
err_console = Console(stderr=True)

_VERBOSE_OPTION = typer.Option(False, "--verbose", "-v", help="Enable debug logging.")


class TimestampMode(str, Enum):
    """How generated_at is stamped onto reports."""

    DETERMINISTIC = "deterministic"
    WALLCLOCK = "wallclock"


def _version_option_callback(value: bool) -> None:
    if value:
        typer.echo(__version__)
        raise typer.Exit()


@cli.callback()
def _cli_callback(
    version: bool = typer.Option(
        False,
        "--version",
        help="Show noticegen version and exit.",
        is_eager=True,
        callback=_version_option_callback,
    ),
) -> None:
    """Generate third-party notices and enforce a license allow-list."""


def _print_violations(error: LicenseViolation) -> None:
    err_console.print(
        f"[red]✗ {len(error.violations)} dependency license violation(s) found[/red]"
    )
    for v in error.violations:
        offending = ", ".join(sorted(v.offending_licenses)) or "no license declared"
        err_console.print(
            f"  [red]✗[/red] {escape(v.package)} {escape(v.version)} "
            f"({v.source.value}): {escape(offending)}"
        )
    err_console.print("Add the licenses to allowed_licenses or the packages to ignore_packages.")


def _run(
    config_path: Path,
    project_root: Path | None,
    timestamp_mode: TimestampMode,
    *,
    write: bool,
    verbose: bool,
):
    configure_logging(verbose)
    root = (project_root or Path.cwd()).resolve()
    try:
        config = load_config(config_path)
        return run_pipeline(config, root, timestamp_mode=timestamp_mode.value, write=write)
    except LicenseViolation as e:
        _print_violations(e)
        raise typer.Exit(EXIT_VIOLATIONS) from e
    except NoticesError as e:
        err_console.print(f"[red]Error:[/red] {escape(str(e))}")
        raise typer.Exit(EXIT_ERROR) from e


@cli.command()
def generate(
    config: Path = typer.Argument(
        Path(DEFAULT_CONFIG_FILENAME),
        help="Path to the notices config file.",
    ),
    project_root: Path | None = typer.Option(
        None,
        "--project-root",
        help="Directory holding Cargo.toml / pnpm-lock.yaml (default: current directory).",
    ),
    timestamp_mode: TimestampMode = typer.Option(
        TimestampMode.DETERMINISTIC,
        "--timestamp-mode",
        help="Timestamp mode: deterministic or wallclock.",
    ),
    verbose: bool = _VERBOSE_OPTION,
) -> None:
    """Check dependency licenses and write the notice documents."""
    result = _run(config, project_root, timestamp_mode, write=True, verbose=verbose)

    console.print(f"[green]✓ {len(result.report.entries)} dependencies passed the license check[/green]")
    for path in result.written:
        console.print(f"[cyan]Wrote[/cyan] {escape(str(path))}")


@cli.command()
def check(
    config: Path = typer.Argument(
        Path(DEFAULT_CONFIG_FILENAME),
        help="Path to the notices config file.",
    ),
    project_root: Path | None = typer.Option(
        None,
        "--project-root",
        help="Directory holding Cargo.toml / pnpm-lock.yaml (default: current directory).",
    ),
    verbose: bool = _VERBOSE_OPTION,
) -> None:
    """Check dependency licenses without writing any files."""
    result = _run(config, project_root, TimestampMode.DETERMINISTIC, write=False, verbose=verbose)
    console.print(f"[green]✓ {len(result.report.entries)} dependencies passed the license check[/green]")


def main() -> None:
    cli()


if __name__ == "__main__":
    main()
