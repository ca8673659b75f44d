"""Per-file and batch conversion.

Each file goes through the pipeline on its own; a failing file is recorded
and the batch moves on. Nothing is shared between files.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path

from pydantic import BaseModel, ConfigDict

from bru_to_oc.batch.fs_utils import (
    BRU_SUFFIX,
    YAML_SUFFIXES,
    delete_file,
    is_collection_bru,
    is_folder_bru,
    read_bytes,
    resolve_output_path,
    resolve_reverse_path,
    walk_files,
    write_text,
)
from bru_to_oc.converters.bru_emitter import emit_source_format
from bru_to_oc.converters.yaml_emitter import EmitOptions, emit_yaml
from bru_to_oc.converters.yaml_reader import parse_yaml
from bru_to_oc.errors import ConversionError, FileIOError, IoErrorKind, format_error
from bru_to_oc.parser.parser import parse
from bru_to_oc.transform.transformer import transform
from bru_to_oc.validation.verifier import verify_output

logger = logging.getLogger(__name__)


class ConvertOptions(BaseModel):
    """Options for a conversion run, filled from CLI flags."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    recursive: bool = False
    delete_original: bool = False
    output_dir: Path | None = None
    dry_run: bool = False
    keep_comments: bool = False
    strict: bool = False
    verify_yaml: bool = False


@dataclass(frozen=True)
class ConversionResult:
    """Outcome of converting one file."""

    input_path: Path
    output_path: Path | None
    success: bool
    error: str | None = None
    skipped: bool = False
    reason: str | None = None

    @property
    def status(self) -> str:
        if not self.success:
            return "error"
        if self.skipped:
            return self.reason or "skipped"
        return "ok"


@dataclass
class BatchResult:
    """Tally of a batch run. Dry-run files count as skipped."""

    results: list[ConversionResult] = field(default_factory=list)

    def add(self, result: ConversionResult) -> None:
        self.results.append(result)

    @property
    def succeeded(self) -> int:
        return sum(1 for r in self.results if r.success and not r.skipped)

    @property
    def failed(self) -> int:
        return sum(1 for r in self.results if not r.success)

    @property
    def skipped(self) -> int:
        return sum(1 for r in self.results if r.success and r.skipped)

    @property
    def total(self) -> int:
        return len(self.results)

    @property
    def ok(self) -> bool:
        return self.failed == 0


def bru_to_yaml(source: bytes | str, options: ConvertOptions | None = None, file_path: str = "<input>") -> str:
    """Run the forward pipeline on in-memory source."""
    options = options or ConvertOptions()
    document = parse(source, file_path=file_path)
    request = transform(document, strict=options.strict, file_path=file_path)
    return emit_yaml(request, EmitOptions(include_comments=options.keep_comments))


def yaml_to_bru(text: bytes | str, file_path: str = "<input>") -> str:
    """Run the reverse pipeline on in-memory YAML."""
    return emit_source_format(parse_yaml(text, file_path=file_path))


def convert_file(
    path: Path, options: ConvertOptions | None = None, base_dir: Path | None = None
) -> ConversionResult:
    """Convert one `.bru` file to YAML.

    Args:
    ----
        path: The `.bru` file.
        options: Conversion options.
        base_dir: Root of the batch, used to mirror directories under
            ``options.output_dir``.

    Returns:
    -------
        The per-file result. Pipeline and I/O errors are captured, not raised.

    """
    options = options or ConvertOptions()
    if is_folder_bru(path) or is_collection_bru(path):
        logger.debug("Skipping settings file %s", path)
        return ConversionResult(path, None, True, skipped=True, reason="settings file")

    output = resolve_output_path(path, options.output_dir, base_dir)
    try:
        text = bru_to_yaml(read_bytes(path), options, file_path=str(path))
        if options.dry_run:
            verify_output(text, strict=options.verify_yaml, file_path=str(output))
            return ConversionResult(path, output, True, skipped=True, reason="dry-run")
        write_text(output, text)
        verify_output(text, strict=options.verify_yaml, file_path=str(output))
        logger.debug("Wrote %s", output)
        if options.delete_original:
            delete_file(path)
            logger.debug("Deleted %s", path)
    except ConversionError as e:
        logger.debug("Conversion of %s failed: %s", path, e)
        return ConversionResult(path, output, False, error=format_error(e))
    return ConversionResult(path, output, True)


def reverse_convert_file(
    path: Path, options: ConvertOptions | None = None, base_dir: Path | None = None
) -> ConversionResult:
    """Convert one `.yml`/`.yaml` file back to `.bru`."""
    options = options or ConvertOptions()
    output = resolve_reverse_path(path, options.output_dir, base_dir)
    try:
        text = yaml_to_bru(read_bytes(path), file_path=str(path))
        if options.dry_run:
            return ConversionResult(path, output, True, skipped=True, reason="dry-run")
        write_text(output, text)
        logger.debug("Wrote %s", output)
        if options.delete_original:
            delete_file(path)
    except ConversionError as e:
        logger.debug("Reverse conversion of %s failed: %s", path, e)
        return ConversionResult(path, output, False, error=format_error(e))
    return ConversionResult(path, output, True)


def collect_inputs(path: Path, reverse: bool = False, recursive: bool = False) -> tuple[list[Path], Path]:
    """Return the files to convert under ``path`` and the batch root."""
    if path.is_file():
        return [path], path.parent
    if path.is_dir():
        suffixes = YAML_SUFFIXES if reverse else (BRU_SUFFIX,)
        return walk_files(path, suffixes, recursive), path
    raise FileIOError.at(IoErrorKind.FILE_NOT_FOUND, "path does not exist", file_path=str(path))


def convert_path(
    path: Path, options: ConvertOptions | None = None, reverse: bool = False
) -> BatchResult:
    """Convert a file or every matching file in a directory.

    Args:
    ----
        path: A file or a directory.
        options: Conversion options.
        reverse: Convert YAML to `.bru` instead of `.bru` to YAML.

    Returns:
    -------
        Results for every file, in path order.

    Raises:
    ------
        FileIOError: If ``path`` does not exist.

    """
    options = options or ConvertOptions()
    files, base_dir = collect_inputs(path, reverse, options.recursive)
    convert = reverse_convert_file if reverse else convert_file

    batch = BatchResult()
    for file in files:
        result = convert(file, options, base_dir)
        if result.success:
            logger.info("[%s] %s -> %s", result.status, file, result.output_path)
        else:
            logger.info("[error] %s", file)
        batch.add(result)
    logger.debug(
        "Batch done: %d converted, %d failed, %d skipped",
        batch.succeeded,
        batch.failed,
        batch.skipped,
    )
    return batch
