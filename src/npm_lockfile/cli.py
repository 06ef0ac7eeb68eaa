"""Command-line interface for npm-lockfile."""

import functools
import logging
import sys
from pathlib import Path
from typing import Callable, Optional

import click
from rich.console import Console
from rich.markup import escape

from npm_lockfile import __version__
from npm_lockfile.config import LOG_LEVELS, OUTPUT_FORMATS, LockfileConfig, load_config
from npm_lockfile.exceptions import ConfigError, ParseError
from npm_lockfile.models import PackageLockJson
from npm_lockfile.parser import PackageLockParser
from npm_lockfile.projector import project_dependencies, summarize
from npm_lockfile.reporter import create_reporter

console = Console()
err_console = Console(stderr=True)

# npm reads npm-shrinkwrap.json in preference to package-lock.json
LOCKFILE_SEARCH_ORDER = ("npm-shrinkwrap.json", "package-lock.json")


def _configure_logging(level: str) -> None:
    """Send library diagnostics to stderr at the requested level."""
    numeric = getattr(logging, level.upper(), logging.WARNING)
    logging.basicConfig(
        level=numeric,
        format="%(levelname)s %(name)s: %(message)s",
        stream=sys.stderr,
    )
    logging.getLogger("npm_lockfile").setLevel(numeric)


def _find_lockfile(path: Path) -> Path:
    """Return the lockfile for a file or project directory path."""
    if path.is_file():
        return path
    for filename in LOCKFILE_SEARCH_ORDER:
        candidate = path / filename
        if candidate.is_file():
            return candidate
    raise click.ClickException(
        f"No {' or '.join(PackageLockParser.supported_filenames())} found in {path}"
    )


def _load(path: str, config: LockfileConfig) -> PackageLockJson:
    """Parse the lockfile at ``path`` or exit with status 1."""
    lockfile = _find_lockfile(Path(path))
    parser = PackageLockParser(config)
    try:
        return parser.parse(lockfile.read_bytes())
    except ParseError as e:
        err_console.print(f"[red]Failed to parse {escape(str(lockfile))}:[/red] {escape(str(e))}")
        sys.exit(1)


def _output_result(report: str, output: Optional[str]) -> None:
    """Write a rendered report to a file or stdout."""
    if output:
        Path(output).write_text(report, encoding="utf-8")
        err_console.print(f"[green]Report written to {escape(output)}[/green]")
    else:
        click.echo(report)


def lockfile_command(func: Callable) -> Callable:
    """Add the options shared by every lockfile command.

    The wrapped function receives ``config`` and ``format`` resolved from
    the command line, the config file and the environment.
    """

    @click.argument("path", type=click.Path(exists=True), default=".")
    @click.option(
        "--format",
        "-f",
        type=click.Choice(OUTPUT_FORMATS),
        default=None,
        help="Output format (default: from config, else table)",
    )
    @click.option(
        "--config",
        "-c",
        "config_path",
        type=click.Path(exists=True, dir_okay=False),
        help="Path to a YAML config file",
    )
    @click.option(
        "--log-level",
        type=click.Choice(LOG_LEVELS, case_sensitive=False),
        default=None,
        help="Diagnostic log level (default: from config, else WARNING)",
    )
    @functools.wraps(func)
    def wrapper(
        path: str,
        format: Optional[str],
        config_path: Optional[str],
        log_level: Optional[str],
        **kwargs,
    ) -> None:
        try:
            config = load_config(Path(config_path) if config_path else None)
        except ConfigError as e:
            raise click.ClickException(str(e)) from e

        _configure_logging(log_level or config.log_level)
        func(path=path, config=config, format=format or config.output_format, **kwargs)

    return wrapper


@click.group()
@click.version_option(version=__version__, prog_name="npm-lockfile")
def main() -> None:
    """npm-lockfile - Inspect npm package-lock.json files (v1, v2, v3)."""
    pass


@main.command("deps")
@lockfile_command
@click.option("--prod-only", is_flag=True, help="Exclude dev dependencies")
@click.option("--output", "-o", type=click.Path(), help="Write output to file")
def deps(
    path: str, config: LockfileConfig, format: str, prod_only: bool, output: Optional[str]
) -> None:
    """List the top-level dependencies of a lockfile.

    PATH is a lockfile or a directory containing one (default: current directory).
    """
    lock = _load(path, config)
    dependencies = project_dependencies(lock)
    if prod_only:
        dependencies = [d for d in dependencies if not d.is_dev]

    _output_result(create_reporter(format).dependencies(dependencies), output)


@main.command("info")
@lockfile_command
def info(path: str, config: LockfileConfig, format: str) -> None:
    """Summarize a lockfile.

    PATH is a lockfile or a directory containing one (default: current directory).
    """
    lock = _load(path, config)
    summary = summarize(lock, config.local_reference_prefix)
    _output_result(create_reporter(format).summary(summary), None)


@main.command("packages")
@lockfile_command
@click.option("--output", "-o", type=click.Path(), help="Write output to file")
def packages(path: str, config: LockfileConfig, format: str, output: Optional[str]) -> None:
    """Show the normalized package map (lockfile v2 and v3).

    PATH is a lockfile or a directory containing one (default: current directory).
    """
    lock = _load(path, config)
    if lock.packages is None:
        err_console.print(
            f"[yellow]Lockfile version {lock.lockfile_version} has no packages map[/yellow]"
        )
        sys.exit(1)

    _output_result(create_reporter(format).packages(lock.packages), output)


@main.command()
def version() -> None:
    """Show version information."""
    console.print(f"npm-lockfile version {__version__}")


if __name__ == "__main__":
    main()
