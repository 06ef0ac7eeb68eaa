"""Report generators for parsed lockfiles."""

import io
import json
from abc import ABC, abstractmethod

from rich.console import Console
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from npm_lockfile.models import LockfileSummary, PackageRecord, SimpleDependency


class ReportGenerator(ABC):
    """Abstract base class for report generators."""

    @abstractmethod
    def dependencies(self, dependencies: list[SimpleDependency]) -> str:
        """Render the flattened dependency list.

        Args:
            dependencies: Records produced by ``project_dependencies``.

        Returns:
            Formatted report as a string.
        """
        pass

    @abstractmethod
    def summary(self, summary: LockfileSummary) -> str:
        """Render a lockfile summary."""
        pass

    @abstractmethod
    def packages(self, packages: dict[str, PackageRecord]) -> str:
        """Render the normalized ``packages`` map."""
        pass


class JSONReporter(ReportGenerator):
    """Generate JSON format reports."""

    def __init__(self, indent: int = 2) -> None:
        """Initialize JSON reporter.

        Args:
            indent: JSON indentation level.
        """
        self.indent = indent

    def dependencies(self, dependencies: list[SimpleDependency]) -> str:
        return json.dumps([d.to_dict() for d in sorted(dependencies)], indent=self.indent)

    def summary(self, summary: LockfileSummary) -> str:
        return json.dumps(summary.to_dict(), indent=self.indent)

    def packages(self, packages: dict[str, PackageRecord]) -> str:
        return json.dumps(
            {name: packages[name].to_dict() for name in sorted(packages)},
            indent=self.indent,
        )


class TableReporter(ReportGenerator):
    """Generate rich table format reports for CLI output."""

    def __init__(self, width: int = 120) -> None:
        """Initialize table reporter.

        Args:
            width: Console width used when rendering.
        """
        self.console = Console(record=True, file=io.StringIO(), width=width)

    def dependencies(self, dependencies: list[SimpleDependency]) -> str:
        table = Table(
            title=f"Dependencies ({len(dependencies)})",
            show_header=True,
            header_style="bold cyan",
        )
        table.add_column("Package", width=40)
        table.add_column("Version", width=20)
        table.add_column("Dev", width=5)
        table.add_column("Optional", width=8)

        for dep in sorted(dependencies):
            table.add_row(
                dep.name,
                dep.version,
                self._flag(dep.is_dev),
                self._flag(dep.is_optional),
            )

        self.console.print(table)
        return self.console.export_text()

    def summary(self, summary: LockfileSummary) -> str:
        text = Text()
        text.append(f"Name: {summary.name}\n")
        text.append(f"Version: {summary.version or 'N/A'}\n")
        text.append(f"Lockfile Version: {summary.lockfile_version}\n\n")
        text.append(f"Legacy Tree Entries: {summary.legacy_count}\n")
        text.append(f"Package Map Entries: {summary.package_count}\n")
        text.append(f"Dev Dependencies: {summary.dev_count}\n")
        text.append(f"Optional Dependencies: {summary.optional_count}\n")

        if summary.unresolved_references:
            text.append("\nUnresolved Local References:\n", style="bold yellow")
            for name in summary.unresolved_references:
                text.append(f"  • {name}\n", style="yellow")

        panel = Panel(text, title="Lockfile Summary", border_style="blue")
        self.console.print(panel)
        return self.console.export_text()

    def packages(self, packages: dict[str, PackageRecord]) -> str:
        table = Table(
            title=f"Packages ({len(packages)})",
            show_header=True,
            header_style="bold cyan",
        )
        table.add_column("Package", width=35)
        table.add_column("Version", width=15)
        table.add_column("License", width=12)
        table.add_column("Flags", width=30)

        for name in sorted(packages):
            package = packages[name]
            table.add_row(
                name,
                package.version,
                package.license or "N/A",
                ", ".join(self._package_flags(package)),
            )

        self.console.print(table)
        return self.console.export_text()

    @staticmethod
    def _flag(value: bool) -> Text:
        return Text("yes", style="yellow") if value else Text("-", style="dim")

    @staticmethod
    def _package_flags(package: PackageRecord) -> list[str]:
        flags = {
            "dev": package.is_dev,
            "optional": package.is_optional,
            "devOptional": package.is_dev_optional,
            "bundled": package.bundled or package.is_in_bundle,
            "install-script": package.has_install_script,
            "shrinkwrap": package.has_shrinkwrap,
        }
        return [name for name, enabled in flags.items() if enabled]


def create_reporter(format: str) -> ReportGenerator:
    """Create a reporter for the specified format.

    Args:
        format: Output format ('json', 'table').

    Returns:
        Appropriate ReportGenerator instance.

    Raises:
        ValueError: If format is not supported.
    """
    if format == "json":
        return JSONReporter()
    elif format == "table":
        return TableReporter()
    else:
        raise ValueError(f"Unsupported format: {format}. Use 'json' or 'table'.")
