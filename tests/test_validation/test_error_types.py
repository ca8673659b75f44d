"""Tests for pipeline error types and diagnostics."""

from __future__ import annotations

from bru_to_oc.errors import (
    BruSyntaxError,
    DiagnosticInfo,
    ErrorCategory,
    FileIOError,
    IoErrorKind,
    ParseErrorKind,
    TransformError,
    TransformErrorKind,
    VerificationError,
    VerifyErrorKind,
    YamlErrorKind,
    YamlReadError,
    format_error,
)


class TestDiagnosticInfo:
    """Tests for DiagnosticInfo."""

    def test_location_with_position(self) -> None:
        """Positioned diagnostics render as file:line:col."""
        diag = DiagnosticInfo("a.bru", 3, 7, "bad")
        assert diag.location == "a.bru:3:7"

    def test_location_without_position(self) -> None:
        """Line 0 means no position."""
        assert DiagnosticInfo("a.bru", 0, 0, "bad").location == "a.bru"

    def test_with_path(self) -> None:
        """with_path replaces only the path."""
        diag = DiagnosticInfo("<input>", 1, 2, "bad", "x").with_path("b.bru")
        assert diag == DiagnosticInfo("b.bru", 1, 2, "bad", "x")


class TestCategories:
    """Tests for the error class hierarchy."""

    def test_categories(self) -> None:
        """Each error class belongs to one category."""
        assert BruSyntaxError.category is ErrorCategory.PARSE
        assert YamlReadError.category is ErrorCategory.PARSE
        assert TransformError.category is ErrorCategory.TRANSFORM
        assert VerificationError.category is ErrorCategory.VERIFY
        assert FileIOError.category is ErrorCategory.IO

    def test_kind_values(self) -> None:
        """Kinds use their diagnostic names."""
        assert ParseErrorKind.UNCLOSED_BLOCK.value == "UnclosedBlock"
        assert TransformErrorKind.CONFLICTING_BLOCKS.value == "ConflictingBlocks"
        assert YamlErrorKind.MISSING_REQUIRED_FIELD.value == "MissingRequiredField"
        assert VerifyErrorKind.MALFORMED_OUTPUT.value == "MalformedOutput"
        assert IoErrorKind.DIRECTORY_CREATION_FAILED.value == "DirectoryCreationFailed"

    def test_str(self) -> None:
        """str() includes location, message and kind."""
        error = TransformError.at(
            TransformErrorKind.MISSING_REQUIRED_FIELD, "no url", line=2, column=1, file_path="r.bru"
        )
        assert str(error) == "r.bru:2:1: no url (MissingRequiredField)"
        assert error.message == "no url"

    def test_with_path_keeps_type(self) -> None:
        """with_path returns the same error class."""
        error = BruSyntaxError.at(ParseErrorKind.MISSING_COLON, "x", line=1, column=1)
        rebound = error.with_path("api/r.bru")
        assert isinstance(rebound, BruSyntaxError)
        assert rebound.kind is ParseErrorKind.MISSING_COLON
        assert rebound.diagnostic.file_path == "api/r.bru"


class TestFormatError:
    """Tests for format_error."""

    def test_with_caret(self) -> None:
        """The source line is echoed with a caret under the column."""
        error = BruSyntaxError.at(
            ParseErrorKind.MISSING_COLON,
            "expected ':' after key 'url'",
            line=3,
            column=3,
            file_path="api/get-users.bru",
            source_line="  url https://example.com",
        )
        assert format_error(error) == (
            "error: api/get-users.bru:3:3: expected ':' after key 'url' (MissingColon)\n"
            "    url https://example.com\n"
            "    ^"
        )

    def test_without_source_line(self) -> None:
        """Without a source line only the header is printed."""
        error = FileIOError.at(IoErrorKind.FILE_NOT_FOUND, "no such file", file_path="x.bru")
        assert format_error(error) == "error: x.bru: no such file (FileNotFound)"
