"""File and batch conversion around the core pipeline."""

from bru_to_oc.batch.converter import (
    BatchResult,
    ConversionResult,
    ConvertOptions,
    bru_to_yaml,
    convert_file,
    convert_path,
    reverse_convert_file,
    yaml_to_bru,
)
from bru_to_oc.batch.fs_utils import (
    resolve_output_path,
    resolve_reverse_path,
    walk_files,
)

__all__ = [
    "BatchResult",
    "ConversionResult",
    "ConvertOptions",
    "bru_to_yaml",
    "convert_file",
    "convert_path",
    "resolve_output_path",
    "resolve_reverse_path",
    "reverse_convert_file",
    "walk_files",
    "yaml_to_bru",
]
