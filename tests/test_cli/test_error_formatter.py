"""Tests for error formatter."""

from io import StringIO
from pathlib import Path

import pytest
from bru_to_oc.batch import BatchResult, ConversionResult
from bru_to_oc.cli.error_formatter import ErrorFormatter, ErrorTable, ErrorTree, lexer_for
from bru_to_oc.errors import BruSyntaxError, ParseErrorKind, TransformError, TransformErrorKind
from bru_to_oc.validation import ValidationResult
from rich.console import Console


@pytest.fixture
def string_console() -> Console:
    """Create a console that writes to a string."""
    return Console(file=StringIO(), force_terminal=True, width=80)


def output_of(console: Console) -> str:
    return console.file.getvalue()  # type: ignore[union-attr]


class TestErrorFormatter:
    """Tests for ErrorFormatter."""

    def test_format_empty_result(self, string_console: Console) -> None:
        """Should show success for empty result."""
        formatter = ErrorFormatter(string_console)
        formatter.format_validation_result(ValidationResult())

        assert "passed" in output_of(string_console).lower()

    def test_format_with_errors(self, string_console: Console) -> None:
        """Should show errors prominently."""
        formatter = ErrorFormatter(string_console)
        result = ValidationResult()
        result.add_error("V004", "Odd indentation", 2, 4)

        formatter.format_validation_result(result)

        output = output_of(string_console)
        assert "V004" in output
        assert "Odd indentation" in output
        assert "Verification Failed" in output

    def test_format_with_warnings(self, string_console: Console) -> None:
        """Should show warnings."""
        formatter = ErrorFormatter(string_console)
        result = ValidationResult()
        result.add_warning("V999", "Suspicious value", 1)

        formatter.format_validation_result(result)

        output = output_of(string_console)
        assert "V999" in output
        assert "warning" in output.lower()
        assert "Verification Warnings" in output

    def test_shows_source_context(self, string_console: Console) -> None:
        """Should show the offending line from the checked text."""
        formatter = ErrorFormatter(string_console)
        result = ValidationResult()
        result.add_error("V004", "Odd indentation", 2, 4)

        formatter.format_validation_result(result, Path("out.yml"), "info:\n   badly_indented: x\n")

        output = output_of(string_console)
        assert "badly_indented" in output
        assert "out.yml" in output

    def test_format_conversion_error_with_context(self, string_console: Console) -> None:
        """Should print a titled panel and the source snippet."""
        formatter = ErrorFormatter(string_console)
        error = BruSyntaxError.at(
            ParseErrorKind.MISSING_COLON,
            "expected ':' after key 'url'",
            line=2,
            column=7,
            file_path="req.bru",
        )

        formatter.format_conversion_error(error, "get {\n  url https://x\n}\n")

        output = output_of(string_console)
        assert "Parse Error" in output
        assert "MissingColon" in output
        assert "req.bru:2:7" in output
        assert "https" in output

    def test_format_conversion_error_caret(self, string_console: Console) -> None:
        """Without source text the echoed line gets a caret."""
        formatter = ErrorFormatter(string_console)
        error = TransformError.at(
            TransformErrorKind.INVALID_FIELD_VALUE,
            "bad form line",
            line=6,
            column=1,
            source_line="  broken",
        )

        formatter.format_conversion_error(error)

        output = output_of(string_console)
        assert "Transform Error" in output
        assert "broken" in output
        assert "^" in output

    def test_no_context(self, string_console: Console) -> None:
        """show_context=False should skip the snippet."""
        formatter = ErrorFormatter(string_console, show_context=False)
        result = ValidationResult()
        result.add_error("V002", "Tab character", 2, 1)

        formatter.format_validation_result(result, None, "info:\n\tsecret_line: x\n")

        assert "secret_line" not in output_of(string_console)


class TestLexerFor:
    """Tests for lexer selection."""

    def test_lexers(self) -> None:
        """YAML paths use the yaml lexer, everything else plain text."""
        assert lexer_for("a.yml") == "yaml"
        assert lexer_for(Path("a.YAML")) == "yaml"
        assert lexer_for("a.bru") == "text"
        assert lexer_for(None) == "text"


class TestErrorTree:
    """Tests for ErrorTree."""

    def test_groups_failures_by_directory(self, string_console: Console) -> None:
        """Should list failed files under their directory."""
        batch = BatchResult()
        batch.add(ConversionResult(Path("api/ok.bru"), Path("api/ok.yml"), True))
        batch.add(
            ConversionResult(
                Path("api/users/bad.bru"),
                Path("api/users/bad.yml"),
                False,
                error="error: bad.bru:1:1: boom (UnclosedBlock)\n  meta {\n  ^",
            )
        )

        ErrorTree(string_console).print_batch(batch)

        output = output_of(string_console)
        assert "Failed conversions" in output
        assert "bad.bru" in output
        assert "UnclosedBlock" in output
        assert "ok.bru" not in output


class TestErrorTable:
    """Tests for ErrorTable."""

    def test_prints_issues(self, string_console: Console) -> None:
        """Should print one row per issue."""
        result = ValidationResult()
        result.add_error("V003", "No pair", 1)
        result.add_warning("V999", "Odd", 3, 2)

        ErrorTable(string_console).print_result(result)

        output = output_of(string_console)
        assert "Verification Issues" in output
        assert "V003" in output
        assert "V999" in output
        assert "WARNING" in output
