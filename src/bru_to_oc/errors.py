"""Error types shared by every stage of the conversion pipeline.

Errors fall into four closed categories: parsing the source format (or the
YAML subset on the reverse path), transforming the IR, verifying emitted
output, and file I/O. Each error carries a :class:`DiagnosticInfo` so callers
can print ``file:line:col`` style messages with a caret under the column.
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from enum import Enum


class ErrorCategory(Enum):
    """Top-level error category."""

    PARSE = "parse"
    TRANSFORM = "transform"
    VERIFY = "verify"
    IO = "io"


class ParseErrorKind(Enum):
    """Lexical and structural errors in `.bru` source."""

    UNCLOSED_BLOCK = "UnclosedBlock"
    INVALID_MULTISTRING = "InvalidMultistring"
    INVALID_ANNOTATION = "InvalidAnnotation"
    COMMENT_AFTER_VALUE = "CommentAfterValue"
    INVALID_NUMBER = "InvalidNumber"
    UNEXPECTED_TOKEN = "UnexpectedToken"
    MISSING_COLON = "MissingColon"
    DUPLICATE_BLOCK = "DuplicateBlock"
    INVALID_INDENTATION = "InvalidIndentation"
    UNTERMINATED_STRING = "UnterminatedString"


class TransformErrorKind(Enum):
    """Semantic errors raised while mapping a Document to a Request."""

    MISSING_REQUIRED_FIELD = "MissingRequiredField"
    INVALID_FIELD_VALUE = "InvalidFieldValue"
    CONFLICTING_BLOCKS = "ConflictingBlocks"
    UNSUPPORTED_FEATURE = "UnsupportedFeature"
    ANNOTATION_RESOLUTION_FAILED = "AnnotationResolutionFailed"


class YamlErrorKind(Enum):
    """Errors raised while reading emitted YAML back into a Request."""

    INVALID_YAML = "InvalidYaml"
    MISSING_REQUIRED_FIELD = "MissingRequiredField"


class VerifyErrorKind(Enum):
    """Emitted output failed a structural check."""

    INVALID_YAML_SYNTAX = "InvalidYamlSyntax"
    MALFORMED_OUTPUT = "MalformedOutput"


class IoErrorKind(Enum):
    """File layer failures."""

    FILE_NOT_FOUND = "FileNotFound"
    PERMISSION_DENIED = "PermissionDenied"
    INVALID_PATH = "InvalidPath"
    READ_FAILURE = "ReadFailure"
    WRITE_FAILURE = "WriteFailure"
    DIRECTORY_CREATION_FAILED = "DirectoryCreationFailed"


ErrorKind = ParseErrorKind | TransformErrorKind | YamlErrorKind | VerifyErrorKind | IoErrorKind

DEFAULT_FILE_PATH = "<input>"


@dataclass(frozen=True)
class DiagnosticInfo:
    """Where an error happened and what went wrong."""

    file_path: str
    """Path of the file being converted, or ``<input>`` for in-memory sources."""

    line: int
    """1-based line number (0 when the error has no position)."""

    column: int
    """1-based column number (0 when the error has no position)."""

    message: str
    """Human-readable description."""

    source_line: str | None = None
    """The offending source line, echoed under the message when present."""

    def with_path(self, file_path: str) -> DiagnosticInfo:
        """Return a copy bound to ``file_path``."""
        return replace(self, file_path=file_path)

    @property
    def location(self) -> str:
        """Format as ``file:line:col``."""
        if self.line <= 0:
            return self.file_path
        return f"{self.file_path}:{self.line}:{self.column}"


class ConversionError(Exception):
    """Base class for every pipeline error."""

    category: ErrorCategory = ErrorCategory.PARSE

    def __init__(self, kind: ErrorKind, diagnostic: DiagnosticInfo) -> None:
        """Initialize ConversionError.

        Args:
        ----
            kind: Error kind within this error's category.
            diagnostic: Position and message of the failure.

        """
        self.kind = kind
        self.diagnostic = diagnostic
        super().__init__(f"{diagnostic.location}: {diagnostic.message} ({kind.value})")

    @classmethod
    def at(
        cls,
        kind: ErrorKind,
        message: str,
        *,
        line: int = 0,
        column: int = 0,
        file_path: str = DEFAULT_FILE_PATH,
        source_line: str | None = None,
    ) -> ConversionError:
        """Build an error from positional details."""
        return cls(kind, DiagnosticInfo(file_path, line, column, message, source_line))

    def with_path(self, file_path: str) -> ConversionError:
        """Return the same error bound to ``file_path``."""
        return type(self)(self.kind, self.diagnostic.with_path(file_path))

    @property
    def message(self) -> str:
        """The bare diagnostic message."""
        return self.diagnostic.message


class BruSyntaxError(ConversionError):
    """Malformed `.bru` source."""

    category = ErrorCategory.PARSE


class TransformError(ConversionError):
    """The parsed document cannot be mapped to a Request."""

    category = ErrorCategory.TRANSFORM


class YamlReadError(ConversionError):
    """YAML input is outside the emitted subset or lacks required fields."""

    category = ErrorCategory.PARSE


class VerificationError(ConversionError):
    """Emitted output failed a post-write check."""

    category = ErrorCategory.VERIFY


class FileIOError(ConversionError):
    """Reading or writing a file failed."""

    category = ErrorCategory.IO


def format_error(error: ConversionError) -> str:
    """Render an error as a compiler-style diagnostic.

    Args:
    ----
        error: The error to render.

    Returns:
    -------
        ``error: path:line:col: message (Kind)``, followed by the echoed
        source line and a caret when the source line is known.

    Example:
    -------
        ```
        error: api/get-users.bru:3:1: expected ':' after key 'url' (MissingColon)
          url https://example.com
          ^
        ```

    """
    diag = error.diagnostic
    text = f"error: {diag.location}: {diag.message} ({error.kind.value})"
    if diag.source_line is not None and diag.column > 0:
        caret = " " * (diag.column - 1) + "^"
        text += f"\n  {diag.source_line}\n  {caret}"
    return text
