"""Error message formatting with Rich."""

from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING

from rich.console import Console
from rich.panel import Panel
from rich.syntax import Syntax
from rich.table import Table
from rich.text import Text
from rich.tree import Tree

if TYPE_CHECKING:
    from bru_to_oc.batch.converter import BatchResult
    from bru_to_oc.errors import ConversionError
    from bru_to_oc.validation.issues import ValidationIssue, ValidationResult


def lexer_for(path: Path | str | None) -> str:
    """Pick a Syntax lexer for a source path."""
    if path is not None and Path(path).suffix.lower() in (".yml", ".yaml"):
        return "yaml"
    return "text"


class ErrorFormatter:
    """Formats conversion errors and verification results for the terminal."""

    def __init__(
        self,
        console: Console | None = None,
        show_context: bool = True,
        max_context_lines: int = 3,
    ) -> None:
        """Initialize formatter.

        Args:
        ----
            console: Rich Console for output.
            show_context: Whether to show source context.
            max_context_lines: Max lines of context to show.

        """
        self.console = console or Console(stderr=True)
        self.show_context = show_context
        self.max_context_lines = max_context_lines

    def format_conversion_error(
        self,
        error: ConversionError,
        source_content: str | None = None,
    ) -> None:
        """Print a pipeline error with the surrounding source lines.

        Args:
        ----
            error: The error to print.
            source_content: Text of the failing file, for the context snippet.

        """
        diag = error.diagnostic
        title = f"{error.category.value.title()} Error"

        content = Text()
        content.append(f"{diag.location}\n", style="dim")
        content.append(diag.message, style="red bold")
        content.append(f"  ({error.kind.value})", style="dim")
        self.console.print(Panel(content, title=title, border_style="red"))

        if self.show_context and source_content and diag.line > 0:
            context = self._get_source_context(source_content, diag.line, lexer_for(diag.file_path))
            if context:
                self.console.print(context)
        elif diag.source_line is not None and diag.column > 0:
            self.console.print(f"  {diag.source_line}", markup=False, highlight=False)
            self.console.print("  " + " " * (diag.column - 1) + "^", style="red")

    def format_validation_result(
        self,
        result: ValidationResult,
        source_path: Path | None = None,
        source_content: str | None = None,
    ) -> None:
        """Format and print a verification result.

        Args:
        ----
            result: The result to format.
            source_path: Path of the checked output (for display).
            source_content: Checked text, for context snippets.

        """
        if result.is_valid and not result.warnings:
            self._print_success("Verification passed")
            return

        error_count = len(result.errors)
        warning_count = len(result.warnings)

        self.console.print(self._build_summary(error_count, warning_count, source_path))
        self.console.print()

        for issue in result.errors:
            self._print_issue(issue, source_content, "red")
        for issue in result.warnings:
            self._print_issue(issue, source_content, "yellow")

        if error_count > 0:
            self.console.print(f"[red bold]✗ {error_count} error(s)[/red bold]", end="")
        if warning_count > 0:
            if error_count > 0:
                self.console.print(", ", end="")
            self.console.print(f"[yellow]{warning_count} warning(s)[/yellow]", end="")
        self.console.print()

    def _build_summary(self, errors: int, warnings: int, source_path: Path | None) -> Panel:
        title = "Verification Failed" if errors > 0 else "Verification Warnings"
        style = "red" if errors > 0 else "yellow"

        content = Text()
        if source_path:
            content.append(f"File: {source_path}\n", style="dim")
        if errors > 0:
            content.append(f"Errors: {errors}", style="red bold")
        if warnings > 0:
            if errors > 0:
                content.append("  ")
            content.append(f"Warnings: {warnings}", style="yellow")

        return Panel(content, title=title, border_style=style)

    def _print_issue(self, issue: ValidationIssue, source_content: str | None, color: str) -> None:
        severity = issue.severity.value.upper()
        self.console.print(
            f"[{color} bold]{severity}[/{color} bold] "
            f"[{color}]\\[{issue.code}][/{color}] "
            f"{issue.message}"
        )
        if issue.location:
            self.console.print(f"  [dim]at {issue.location}[/dim]")
            if self.show_context and source_content:
                context = self._get_source_context(source_content, issue.location.line, "yaml")
                if context:
                    self.console.print(context)
        self.console.print()

    def _get_source_context(self, source: str, line: int, lexer: str) -> Syntax | None:
        """Get source context around a 1-based line."""
        lines = source.splitlines()
        line_no = line - 1
        if line_no < 0 or line_no >= len(lines):
            return None

        start = max(0, line_no - self.max_context_lines)
        end = min(len(lines), line_no + self.max_context_lines + 1)

        return Syntax(
            "\n".join(lines[start:end]),
            lexer,
            line_numbers=True,
            start_line=start + 1,
            highlight_lines={line},
            theme="monokai",
        )

    def _print_success(self, message: str) -> None:
        self.console.print(f"[green]✓ {message}[/green]")


class ErrorTree:
    """Display failed batch files as a tree grouped by directory."""

    def __init__(self, console: Console | None = None) -> None:
        """Initialize error tree formatter.

        Args:
        ----
            console: Rich Console for output.

        """
        self.console = console or Console(stderr=True)

    def print_batch(self, batch: BatchResult) -> None:
        """Print the failures of a batch run."""
        tree = Tree("[bold]Failed conversions[/bold]")

        by_dir: dict[str, list[tuple[str, str]]] = {}
        for result in batch.results:
            if result.success:
                continue
            first_line = (result.error or "").splitlines()[0] if result.error else "unknown error"
            by_dir.setdefault(str(result.input_path.parent), []).append(
                (result.input_path.name, first_line)
            )

        for directory, failures in sorted(by_dir.items()):
            node = tree.add(f"[cyan]{directory}[/cyan] ({len(failures)} failed)")
            for name, message in failures:
                leaf = node.add(Text(name, style="red"))
                leaf.add(Text(message, style="dim"))

        self.console.print(tree)


class ErrorTable:
    """Display verification issues as a table."""

    def __init__(self, console: Console | None = None) -> None:
        """Initialize error table formatter.

        Args:
        ----
            console: Rich Console for output.

        """
        self.console = console or Console(stderr=True)

    def print_result(self, result: ValidationResult) -> None:
        """Print a verification result as a table."""
        table = Table(title="Verification Issues")

        table.add_column("Code", style="cyan", width=6)
        table.add_column("Severity", width=8)
        table.add_column("Location", style="dim")
        table.add_column("Message")

        for issue in result.issues:
            severity_style = "red" if issue.severity.value == "error" else "yellow"
            table.add_row(
                issue.code,
                f"[{severity_style}]{issue.severity.value.upper()}[/{severity_style}]",
                str(issue.location) if issue.location else "-",
                issue.message,
            )

        self.console.print(table)
