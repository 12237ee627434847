"""Output formatters for dependency change reports."""

import json
import re
from pathlib import Path
from typing import Any, Dict, List, Optional

from rich.console import Console
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from ..core.analyzer import AnalysisResult
from ..core.types import ChangeType, DependencyChange, Ecosystem
from ..utils.logging import get_logger

COMMENT_MARKER = "<!-- dependency-version-uplift-check -->"

# Length caps applied before a value is embedded in a report
MAX_NAME_LENGTH = 256
MAX_VERSION_LENGTH = 128

CONTROL_CHARS_PATTERN = re.compile(r"[\x00-\x08\x0B\x0C\x0E-\x1F\x7F]")
HTML_TAG_PATTERN = re.compile(r"<[^>]*>")

CHANGE_TYPE_ORDER = {
    ChangeType.MAJOR: 0,
    ChangeType.MINOR: 1,
    ChangeType.PATCH: 2,
    ChangeType.PRERELEASE: 3,
    ChangeType.ADDED: 4,
    ChangeType.REMOVED: 5,
    ChangeType.OTHER: 6,
}

CHANGE_TYPE_EMOJI = {
    ChangeType.MAJOR: "🔴",
    ChangeType.MINOR: "🟡",
    ChangeType.PATCH: "🟢",
    ChangeType.PRERELEASE: "🟣",
    ChangeType.ADDED: "➕",
    ChangeType.REMOVED: "➖",
    ChangeType.OTHER: "⚪",
}

CHANGE_TYPE_LABELS = {
    ChangeType.MAJOR: "Major",
    ChangeType.MINOR: "Minor",
    ChangeType.PATCH: "Patch",
    ChangeType.PRERELEASE: "Prerelease",
    ChangeType.ADDED: "Added",
    ChangeType.REMOVED: "Removed",
    ChangeType.OTHER: "Changed",
}

CHANGE_TYPE_STYLES = {
    ChangeType.MAJOR: "red bold",
    ChangeType.MINOR: "yellow",
    ChangeType.PATCH: "green",
    ChangeType.PRERELEASE: "magenta",
    ChangeType.ADDED: "cyan",
    ChangeType.REMOVED: "dim",
    ChangeType.OTHER: "white",
}

ECOSYSTEM_DISPLAY_NAMES = {
    Ecosystem.NODE: "Node.js / npm",
    Ecosystem.PYTHON: "Python",
    Ecosystem.GO: "Go",
    Ecosystem.RUBY: "Ruby",
    Ecosystem.JAVA: "Java / Gradle / Maven",
    Ecosystem.RUST: "Rust / Cargo",
    Ecosystem.DOTNET: ".NET / NuGet",
}

ECOSYSTEM_EMOJI = {
    Ecosystem.NODE: "📦",
    Ecosystem.PYTHON: "🐍",
    Ecosystem.GO: "🐹",
    Ecosystem.RUBY: "💎",
    Ecosystem.JAVA: "☕",
    Ecosystem.RUST: "🦀",
    Ecosystem.DOTNET: "🔷",
}


def sanitize_for_markdown(value: Optional[str], max_length: int) -> str:
    """Make an untrusted string safe to embed in a Markdown table cell.

    Args:
        value: Package name or version taken from a dependency file
        max_length: Length the value is truncated to before escaping

    Returns:
        Truncated value with control characters and HTML tags removed and
        Markdown and HTML metacharacters escaped
    """
    if not value:
        return ""

    sanitized = CONTROL_CHARS_PATTERN.sub("", value[:max_length])
    sanitized = sanitized.replace("`", "\\`")
    sanitized = sanitized.replace("|", "\\|")
    sanitized = sanitized.replace("[", "\\[").replace("]", "\\]")
    sanitized = HTML_TAG_PATTERN.sub("", sanitized)
    sanitized = sanitized.replace("&", "&amp;")
    sanitized = sanitized.replace("<", "&lt;")
    sanitized = sanitized.replace(">", "&gt;")
    return sanitized


def group_by_ecosystem(changes: List[DependencyChange]) -> Dict[Ecosystem, List[DependencyChange]]:
    """Group changes by ecosystem, keeping first-appearance order."""
    grouped: Dict[Ecosystem, List[DependencyChange]] = {}
    for change in changes:
        grouped.setdefault(change.ecosystem, []).append(change)
    return grouped


def sort_by_change_type(changes: List[DependencyChange]) -> List[DependencyChange]:
    """Order changes from most to least significant; ties keep their order."""
    return sorted(changes, key=lambda change: CHANGE_TYPE_ORDER.get(change.change_type, 99))


def summarize_changes(changes: List[DependencyChange]) -> Dict[ChangeType, int]:
    """Count changes per change type, in report order."""
    summary = {change_type: 0 for change_type in CHANGE_TYPE_ORDER}
    for change in changes:
        summary[change.change_type] += 1
    return summary


class MarkdownFormatter:
    """Renders changes as a pull request comment body."""

    def format(self, changes: List[DependencyChange]) -> str:
        """Render changes as Markdown.

        The body starts with a marker comment so an existing comment can be
        found and updated instead of posting a new one.

        Args:
            changes: Reconciled changes

        Returns:
            Markdown document
        """
        lines = [COMMENT_MARKER]

        if not changes:
            lines.append("## ✅ No Dependency Version Changes")
            lines.append("")
            lines.append("No dependency version uplifts were detected in this pull request.")
            return "\n".join(lines) + "\n"

        plural = "" if len(changes) == 1 else "s"
        lines.append("## 📦 Dependency Version Changes")
        lines.append("")
        lines.append(f"This pull request contains **{len(changes)}** dependency version change{plural}.")
        lines.append("")

        for ecosystem, deps in group_by_ecosystem(changes).items():
            lines.append(f"### {ECOSYSTEM_EMOJI.get(ecosystem, '📦')} {ECOSYSTEM_DISPLAY_NAMES.get(ecosystem, ecosystem.value)}")
            lines.append("")
            lines.append("| Package | Previous | New | Change |")
            lines.append("|---------|----------|-----|--------|")

            for dep in sort_by_change_type(deps):
                name = sanitize_for_markdown(dep.name, MAX_NAME_LENGTH)
                old = sanitize_for_markdown(dep.old_version, MAX_VERSION_LENGTH) if dep.old_version else "_new_"
                new = sanitize_for_markdown(dep.new_version, MAX_VERSION_LENGTH) if dep.new_version else "_removed_"
                change = f"{CHANGE_TYPE_EMOJI[dep.change_type]} {CHANGE_TYPE_LABELS[dep.change_type]}"
                lines.append(f"| `{name}` | {old} | {new} | {change} |")
            lines.append("")

        lines.append("### Summary")
        lines.append("")
        parts = [
            f"{CHANGE_TYPE_EMOJI[change_type]} {count} {change_type.value}"
            for change_type, count in summarize_changes(changes).items()
            if count > 0
        ]
        lines.append(" | ".join(parts))

        return "\n".join(lines) + "\n"

    def save(self, changes: List[DependencyChange], output_file: Path) -> None:
        """Write the rendered Markdown to a file."""
        output_file.write_text(self.format(changes), encoding="utf-8")


class ConsoleFormatter:
    """Rich console formatter for dependency change reports."""

    def __init__(self, console: Optional[Console] = None) -> None:
        """Initialize the console formatter.

        Args:
            console: Rich console instance
        """
        self.console = console or Console()
        self.logger = get_logger("ConsoleFormatter")

    def format_results(self, result: AnalysisResult) -> None:
        """Display a summary panel followed by one table per ecosystem.

        Args:
            result: Analysis result to display
        """
        self.console.print(self._create_summary_panel(result))

        if not result.has_changes:
            return

        for ecosystem, deps in group_by_ecosystem(result.changes).items():
            self.console.print(self._create_changes_table(ecosystem, deps))

    def _create_summary_panel(self, result: AnalysisResult) -> Panel:
        if result.has_changes:
            style = "yellow"
            title = f"Found {result.count} dependency version changes"
        else:
            style = "green"
            title = "No dependency version changes"

        counts = ", ".join(
            f"{count} {change_type.value}"
            for change_type, count in summarize_changes(result.changes).items()
            if count > 0
        )
        content = (
            f"Dependency files analyzed: {len(result.files_analyzed)}\n"
            f"Changes: {result.count}\n"
            f"Has changes: {str(result.has_changes).lower()}"
        )
        if counts:
            content += f"\nBreakdown: {counts}"

        return Panel(content, title=title, style=style)

    def _create_changes_table(self, ecosystem: Ecosystem, changes: List[DependencyChange]) -> Table:
        """Create the change table for one ecosystem.

        Args:
            ecosystem: Ecosystem the changes belong to
            changes: Changes of that ecosystem

        Returns:
            Rich table with one row per change
        """
        table = Table(title=f"{ECOSYSTEM_EMOJI.get(ecosystem, '')} {ECOSYSTEM_DISPLAY_NAMES.get(ecosystem, ecosystem.value)}")

        table.add_column("Package", style="cyan", no_wrap=True)
        table.add_column("Previous", style="blue")
        table.add_column("New", style="blue")
        table.add_column("Change")
        table.add_column("Type", style="dim")
        table.add_column("File", style="dim")

        # Names and versions come from the repository, so they are never parsed as markup
        for change in sort_by_change_type(changes):
            table.add_row(
                Text(change.name),
                Text(change.old_version or "N/A"),
                Text(change.new_version or "N/A"),
                Text(CHANGE_TYPE_LABELS[change.change_type], style=CHANGE_TYPE_STYLES[change.change_type]),
                change.dependency_type.value,
                Text(change.file),
            )

        return table

    def format_classification(self, old_version: str, new_version: str, change_type: ChangeType) -> None:
        """Display the change type of a single version pair."""
        label = Text(CHANGE_TYPE_LABELS[change_type], style=CHANGE_TYPE_STYLES[change_type])
        self.console.print(Text.assemble(f"{old_version} → {new_version}: ", label, f" ({change_type.value})"))


class JSONFormatter:
    """JSON formatter for dependency change reports."""

    def __init__(self, output_file: Optional[Path] = None) -> None:
        """Initialize the JSON formatter.

        Args:
            output_file: Optional output file path
        """
        self.output_file = output_file
        self.logger = get_logger("JSONFormatter")

    def format_results(self, result: AnalysisResult) -> Dict[str, Any]:
        """Format an analysis result as a JSON-ready dictionary."""
        return result.to_dict()

    def to_string(self, result: AnalysisResult) -> str:
        return json.dumps(self.format_results(result), indent=2, ensure_ascii=False)

    def save_results(
        self,
        results: Dict[str, Any],
        output_file: Optional[Path] = None
    ) -> None:
        """Save results to JSON file.

        Args:
            results: Results dictionary
            output_file: Output file path (uses instance default if None)
        """
        file_path = output_file or self.output_file
        if not file_path:
            raise ValueError("No output file specified")

        try:
            with open(file_path, "w", encoding="utf-8") as f:
                json.dump(results, f, indent=2, ensure_ascii=False)

            self.logger.info(f"Results saved to {file_path}")
        except OSError as e:
            self.logger.error(f"Failed to save results to {file_path}: {e}")
            raise
