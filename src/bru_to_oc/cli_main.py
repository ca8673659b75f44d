"""Command-line interface for the bru-to-oc converter."""

from __future__ import annotations

import logging
import sys
from pathlib import Path
from typing import TYPE_CHECKING, Annotated

import typer
from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table

from bru_to_oc import __version__

if TYPE_CHECKING:
    from bru_to_oc.batch.converter import BatchResult, ConversionResult
    from bru_to_oc.models import Request

app = typer.Typer(
    name="bru2oc",
    help="Convert Bruno .bru request files to OpenCollection YAML.",
    add_completion=True,
    no_args_is_help=True,
)

console = Console()
error_console = Console(stderr=True, style="bold red")

LOG_FORMAT = "[%(asctime)s] %(name)s - %(levelname)s - %(message)s"


def version_callback(value: bool) -> None:
    """Print version and exit."""
    if value:
        console.print(f"bru2oc version {__version__}")
        raise typer.Exit()


@app.callback()
def main(
    version: Annotated[
        bool | None,
        typer.Option(
            "--version",
            "-v",
            help="Show version and exit.",
            callback=version_callback,
            is_eager=True,
        ),
    ] = None,
) -> None:
    """Convert Bruno .bru request files to OpenCollection YAML and back.

    Files are parsed, normalized into a request model and written as a
    small, predictable YAML subset next to the source or into an output
    directory.
    """


def _configure_logging(verbose: bool) -> None:
    """Send package logs to stderr; debug level when verbose."""
    package_logger = logging.getLogger("bru_to_oc")
    package_logger.setLevel(logging.DEBUG if verbose else logging.WARNING)
    for handler in list(package_logger.handlers):
        package_logger.removeHandler(handler)
    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(logging.Formatter(LOG_FORMAT))
    package_logger.addHandler(handler)


def _display(path: Path | None, root: Path) -> str:
    if path is None:
        return "-"
    try:
        return str(path.relative_to(root))
    except ValueError:
        return str(path)


@app.command()
def convert(
    path: Annotated[
        Path,
        typer.Argument(
            help="A .bru file or a directory of .bru files.",
            exists=True,
            file_okay=True,
            dir_okay=True,
            readable=True,
            resolve_path=True,
        ),
    ],
    output: Annotated[
        Path | None,
        typer.Option(
            "--output",
            "-o",
            help="Output directory. Defaults to writing next to each input.",
            file_okay=False,
            resolve_path=True,
        ),
    ] = None,
    recursive: Annotated[
        bool,
        typer.Option("--recursive", "-r", help="Descend into subdirectories."),
    ] = False,
    delete: Annotated[
        bool,
        typer.Option("--delete", "-d", help="Delete each source file after it converts."),
    ] = False,
    dry_run: Annotated[
        bool,
        typer.Option("--dry-run", help="Convert without writing output files."),
    ] = False,
    keep_comments: Annotated[
        bool,
        typer.Option("--keep-comments", help="Carry top-level # comments into the YAML."),
    ] = False,
    strict: Annotated[
        bool,
        typer.Option("--strict", help="Reject files with competing body or auth blocks."),
    ] = False,
    reverse: Annotated[
        bool,
        typer.Option("--reverse", help="Convert .yml/.yaml files back to .bru."),
    ] = False,
    verify_yaml: Annotated[
        bool,
        typer.Option("--verify-yaml", help="Also load each output with a full YAML parser."),
    ] = False,
    verbose: Annotated[
        bool,
        typer.Option("--verbose", "-V", help="Show debug logging and failure details."),
    ] = False,
) -> None:
    """Convert .bru files to OpenCollection YAML.

    A failing file is reported and the rest of the batch still converts.
    The exit code is 1 when any file failed.

    Examples
    --------
        bru2oc convert api/get-users.bru
        bru2oc convert collection/ -r -o out/
        bru2oc convert collection/ -r --dry-run
        bru2oc convert out/ -r --reverse

    """
    from rich.progress import Progress, SpinnerColumn, TextColumn

    from bru_to_oc.batch.converter import ConvertOptions, convert_path
    from bru_to_oc.cli.error_formatter import ErrorTree
    from bru_to_oc.cli.exception_handler import handle_exceptions

    _configure_logging(verbose)

    options = ConvertOptions(
        recursive=recursive,
        delete_original=delete,
        output_dir=output,
        dry_run=dry_run,
        keep_comments=keep_comments,
        strict=strict,
        verify_yaml=verify_yaml,
    )

    @handle_exceptions(verbose)
    def run() -> BatchResult:
        with Progress(
            SpinnerColumn(),
            TextColumn("[progress.description]{task.description}"),
            console=console,
            transient=True,
        ) as progress:
            progress.add_task("Converting...", total=None)
            return convert_path(path, options, reverse=reverse)

    batch = run()
    root = path if path.is_dir() else path.parent

    if batch.total == 0:
        console.print(f"[yellow]No matching files under {escape(str(path))}[/yellow]")
        return

    for result in batch.results:
        _print_result(result, root)

    _print_batch_summary(batch)

    if not batch.ok:
        if verbose:
            ErrorTree(error_console).print_batch(batch)
        raise typer.Exit(code=1)


def _print_result(result: ConversionResult, root: Path) -> None:
    source = escape(_display(result.input_path, root))
    target = escape(_display(result.output_path, root))
    if not result.success:
        console.print(f"[red]\\[error][/red] {source}", soft_wrap=True)
        if result.error:
            console.print(result.error, markup=False, highlight=False, soft_wrap=True)
    elif result.status == "dry-run":
        console.print(f"[cyan]\\[dry-run][/cyan] {source} -> {target}", soft_wrap=True)
    elif result.skipped:
        console.print(f"[dim]\\[skip][/dim] {source} ({result.status})", soft_wrap=True)
    else:
        console.print(f"[green]\\[ok][/green] {source} -> {target}", soft_wrap=True)


def _print_batch_summary(batch: BatchResult) -> None:
    table = Table(title="Conversion Summary", show_header=False)
    table.add_column("Result", style="cyan")
    table.add_column("Files", justify="right")

    table.add_row("Converted", f"[green]{batch.succeeded}[/green]")
    table.add_row("Failed", f"[red]{batch.failed}[/red]" if batch.failed else "0")
    table.add_row("Skipped", str(batch.skipped))
    table.add_row("Total", str(batch.total))

    console.print()
    console.print(table)


@app.command()
def check(
    input_file: Annotated[
        Path,
        typer.Argument(
            help="A .bru or .yml/.yaml file to check.",
            exists=True,
            file_okay=True,
            dir_okay=False,
            readable=True,
            resolve_path=True,
        ),
    ],
    strict: Annotated[
        bool,
        typer.Option("--strict", help="Reject competing body or auth blocks."),
    ] = False,
    output_format: Annotated[
        str,
        typer.Option(
            "--format",
            "-f",
            help="Output format for verification issues: text, table.",
        ),
    ] = "text",
    quiet: Annotated[
        bool,
        typer.Option("--quiet", "-q", help="Only output errors, no success messages."),
    ] = False,
    verbose: Annotated[
        bool,
        typer.Option("--verbose", "-V", help="Show tracebacks for unexpected errors."),
    ] = False,
) -> None:
    """Check that a file converts cleanly, without writing anything.

    A .bru file is parsed, transformed and emitted; a YAML file is read
    back into a request. Either way the YAML text is then verified.

    Examples
    --------
        bru2oc check api/get-users.bru
        bru2oc check api/get-users.yml --format table

    """
    from bru_to_oc.cli.error_formatter import ErrorFormatter, ErrorTable
    from bru_to_oc.cli.exception_handler import handle_exceptions
    from bru_to_oc.validation.verifier import OutputVerifier

    _configure_logging(verbose)

    @handle_exceptions(verbose)
    def run() -> str:
        _, yaml_text = _load(input_file, strict=strict)
        return yaml_text

    yaml_text = run()
    result = OutputVerifier(strict=True).verify(yaml_text)

    if not result.is_valid or result.warnings:
        if output_format == "table":
            ErrorTable(error_console).print_result(result)
        else:
            ErrorFormatter(error_console).format_validation_result(result, input_file, yaml_text)
        if not result.is_valid:
            raise typer.Exit(code=1)

    if not quiet:
        console.print(f"[bold green]✓ {escape(input_file.name)} is valid[/bold green]")


@app.command()
def info(
    input_file: Annotated[
        Path,
        typer.Argument(
            help="A .bru or .yml/.yaml request file to inspect.",
            exists=True,
            file_okay=True,
            dir_okay=False,
            readable=True,
            resolve_path=True,
        ),
    ],
) -> None:
    """Display a summary of a request file.

    Examples
    --------
        bru2oc info api/get-users.bru
        bru2oc info api/get-users.yml

    """
    from bru_to_oc.cli.exception_handler import handle_exceptions

    @handle_exceptions(False)
    def run() -> Request:
        request, _ = _load(input_file)
        return request

    request = run()
    kind = "YAML request" if input_file.suffix.lower() in (".yml", ".yaml") else "Bruno request"
    console.print(Panel.fit(f"[bold]{kind}[/bold]\nFile: {escape(str(input_file))}", title="File Info"))
    _print_summary(request)


def _load(input_file: Path, strict: bool = False) -> tuple[Request, str]:
    """Load a request and its YAML rendering from a .bru or YAML file."""
    from bru_to_oc.batch.fs_utils import has_bru_extension, has_yaml_extension, read_bytes
    from bru_to_oc.converters import emit_yaml, parse_yaml
    from bru_to_oc.errors import FileIOError, IoErrorKind
    from bru_to_oc.parser import parse
    from bru_to_oc.transform import transform

    file_path = str(input_file)
    data = read_bytes(input_file)
    if has_yaml_extension(input_file):
        request = parse_yaml(data, file_path=file_path)
        return request, data.decode("utf-8-sig", errors="replace")
    if has_bru_extension(input_file):
        request = transform(parse(data, file_path=file_path), strict=strict, file_path=file_path)
        return request, emit_yaml(request)
    raise FileIOError.at(
        IoErrorKind.INVALID_PATH,
        f"unknown file type '{input_file.suffix}' (expected .bru, .yml or .yaml)",
        file_path=file_path,
    )


def _print_summary(request: Request) -> None:
    """Print a summary of a request."""
    table = Table(title="Request Summary", show_header=False, box=None)
    table.add_column("Property", style="cyan")
    table.add_column("Value", style="white")

    table.add_row("Name", escape(request.info.name))
    table.add_row("Type", request.info.type)
    if request.info.seq is not None:
        table.add_row("Seq", str(request.info.seq))
    if request.info.tags:
        table.add_row("Tags", escape(", ".join(request.info.tags)))

    table.add_row("", "")
    table.add_row("Method", request.http.method)
    table.add_row("URL", escape(request.http.url))
    table.add_row("Body", request.http.body.type if request.http.body else "-")
    table.add_row("Auth", request.http.auth.type if request.http.auth else "-")

    table.add_row("", "")
    table.add_row("Headers", str(len(request.http.headers or ())))
    table.add_row("Params", str(len(request.http.params or ())))
    if request.runtime:
        table.add_row("Scripts", str(len(request.runtime.scripts or ())))
        table.add_row("Assertions", str(len(request.runtime.assertions or ())))
        table.add_row("Vars", str(len(request.runtime.vars or ())))
    if request.docs:
        table.add_row("Docs", "yes")

    console.print(table)


if __name__ == "__main__":
    app()
