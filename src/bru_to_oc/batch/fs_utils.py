"""Filesystem helpers: output path naming, directory walking and file I/O.

OS errors are mapped onto :class:`FileIOError` kinds so the batch layer
reports them the same way as pipeline errors.
"""

from __future__ import annotations

from collections.abc import Iterable
from pathlib import Path

from bru_to_oc.errors import FileIOError, IoErrorKind

BRU_SUFFIX = ".bru"
YAML_SUFFIX = ".yml"
YAML_SUFFIXES = (".yml", ".yaml")

FOLDER_BRU = "folder.bru"
COLLECTION_BRU = "collection.bru"


def has_bru_extension(path: Path) -> bool:
    return path.suffix.lower() == BRU_SUFFIX


def has_yaml_extension(path: Path) -> bool:
    return path.suffix.lower() in YAML_SUFFIXES


def is_folder_bru(path: Path) -> bool:
    """Folder-level settings file, not a request."""
    return path.name == FOLDER_BRU


def is_collection_bru(path: Path) -> bool:
    """Collection-level settings file, not a request."""
    return path.name == COLLECTION_BRU


def resolve_output_path(
    input_path: Path,
    output_dir: Path | None = None,
    base_dir: Path | None = None,
    suffix: str = YAML_SUFFIX,
) -> Path:
    """Map an input file to its output file.

    Args:
    ----
        input_path: File being converted.
        output_dir: Directory to write into. ``None`` writes next to the input.
        base_dir: Root the input was found under; its relative position is
            mirrored inside ``output_dir``.
        suffix: Output extension.

    Returns:
    -------
        The output path.

    Example:
    -------
        >>> resolve_output_path(Path("api/users/get.bru"), Path("out"), Path("api"))
        PosixPath('out/users/get.yml')

    """
    if output_dir is None:
        return input_path.with_suffix(suffix)

    relative = Path(input_path.name)
    if base_dir is not None:
        try:
            relative = input_path.relative_to(base_dir)
        except ValueError:
            pass
    return output_dir / relative.with_suffix(suffix)


def resolve_reverse_path(
    input_path: Path,
    output_dir: Path | None = None,
    base_dir: Path | None = None,
) -> Path:
    """Map a `.yml`/`.yaml` file to its `.bru` output."""
    return resolve_output_path(input_path, output_dir, base_dir, suffix=BRU_SUFFIX)


def walk_files(root: Path, suffixes: Iterable[str], recursive: bool = False) -> list[Path]:
    """List files under ``root`` with one of ``suffixes``, sorted.

    Hidden directories (``.git``, ``.venv``...) are not entered.
    """
    wanted = {s.lower() for s in suffixes}
    pattern = "**/*" if recursive else "*"
    return sorted(
        path
        for path in root.glob(pattern)
        if path.is_file()
        and path.suffix.lower() in wanted
        and not any(part.startswith(".") for part in path.relative_to(root).parts[:-1])
    )


def read_bytes(path: Path) -> bytes:
    """Read a file, mapping OS errors to :class:`FileIOError`."""
    try:
        return path.read_bytes()
    except FileNotFoundError as e:
        raise FileIOError.at(IoErrorKind.FILE_NOT_FOUND, "file not found", file_path=str(path)) from e
    except PermissionError as e:
        raise FileIOError.at(
            IoErrorKind.PERMISSION_DENIED, "permission denied", file_path=str(path)
        ) from e
    except IsADirectoryError as e:
        raise FileIOError.at(IoErrorKind.INVALID_PATH, "path is a directory", file_path=str(path)) from e
    except OSError as e:
        raise FileIOError.at(
            IoErrorKind.READ_FAILURE, f"read failed: {e.strerror or e}", file_path=str(path)
        ) from e


def write_text(path: Path, text: str) -> None:
    """Write UTF-8 text, creating parent directories first."""
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
    except OSError as e:
        raise FileIOError.at(
            IoErrorKind.DIRECTORY_CREATION_FAILED,
            f"cannot create directory {path.parent}: {e.strerror or e}",
            file_path=str(path),
        ) from e
    try:
        path.write_text(text, encoding="utf-8")
    except PermissionError as e:
        raise FileIOError.at(
            IoErrorKind.PERMISSION_DENIED, "permission denied", file_path=str(path)
        ) from e
    except OSError as e:
        raise FileIOError.at(
            IoErrorKind.WRITE_FAILURE, f"write failed: {e.strerror or e}", file_path=str(path)
        ) from e


def delete_file(path: Path) -> None:
    try:
        path.unlink()
    except OSError as e:
        raise FileIOError.at(
            IoErrorKind.WRITE_FAILURE, f"cannot delete source: {e.strerror or e}", file_path=str(path)
        ) from e
