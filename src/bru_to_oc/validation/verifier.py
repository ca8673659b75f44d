"""Structural checks on emitted YAML.

The checks look at the text line by line without re-reading it into a
Request: it must not be empty, must hold at least one ``key: value``
separator, must not use tabs outside block scalar content, and must indent
in steps of two spaces. Strict mode also loads the text with PyYAML.
"""

from __future__ import annotations

import re

import yaml

from bru_to_oc.errors import DEFAULT_FILE_PATH, VerificationError, VerifyErrorKind
from bru_to_oc.validation.issues import IssueCodes, ValidationResult

BLOCK_SCALAR_HEADER = re.compile(r":\s*\|[0-9+-]*$")


class OutputVerifier:
    """Verify that emitted YAML has the expected shape.

    Usage:
        result = OutputVerifier(strict=True).verify(text)
        if not result.is_valid:
            ...
    """

    def __init__(self, strict: bool = False) -> None:
        """Initialize the verifier.

        Args:
        ----
            strict: Also parse the text with ``yaml.safe_load``.

        """
        self.strict = strict

    def verify(self, text: str) -> ValidationResult:
        """Check ``text`` and return every issue found."""
        result = ValidationResult()
        if not text.strip():
            result.add_error(IssueCodes.V001_EMPTY_OUTPUT, "output is empty", 1)
            return result

        has_separator = False
        scalar_indent: int | None = None

        for number, line in enumerate(text.split("\n"), start=1):
            stripped = line.lstrip(" ")
            indent = len(line) - len(stripped)

            if scalar_indent is not None:
                if not line.strip() or indent > scalar_indent:
                    continue
                scalar_indent = None

            if not stripped:
                continue
            if "\t" in line:
                result.add_error(
                    IssueCodes.V002_TAB_CHARACTER,
                    "tab character outside block scalar content",
                    number,
                    line.index("\t") + 1,
                )
            if stripped.startswith("#"):
                continue
            if ":" in stripped:
                has_separator = True
            if indent % 2:
                result.add_error(
                    IssueCodes.V004_ODD_INDENTATION,
                    f"indentation of {indent} spaces is not a multiple of 2",
                    number,
                    indent + 1,
                )
            if BLOCK_SCALAR_HEADER.search(stripped.rstrip()):
                scalar_indent = indent

        if not has_separator:
            result.add_error(IssueCodes.V003_NO_KEY_SEPARATOR, "no 'key: value' pair found", 1)

        if self.strict:
            try:
                yaml.safe_load(text)
            except yaml.YAMLError as e:
                mark = getattr(e, "problem_mark", None)
                line = mark.line + 1 if mark is not None else 1
                column = mark.column + 1 if mark is not None else None
                result.add_error(IssueCodes.V005_YAML_SYNTAX, f"YAML syntax error: {e}", line, column)

        return result


def verify_output(
    text: str, *, strict: bool = False, file_path: str = DEFAULT_FILE_PATH
) -> ValidationResult:
    """Verify emitted YAML and raise on the first error.

    Args:
    ----
        text: YAML text to check.
        strict: Also parse the text with PyYAML.
        file_path: Path used in error diagnostics.

    Returns:
    -------
        The result, which may still carry warnings.

    Raises:
    ------
        VerificationError: ``InvalidYamlSyntax`` for PyYAML failures,
            ``MalformedOutput`` for the structural checks.

    """
    result = OutputVerifier(strict=strict).verify(text)
    if result.is_valid:
        return result

    issue = result.errors[0]
    kind = (
        VerifyErrorKind.INVALID_YAML_SYNTAX
        if issue.code == IssueCodes.V005_YAML_SYNTAX
        else VerifyErrorKind.MALFORMED_OUTPUT
    )
    line = issue.location.line if issue.location else 0
    column = (issue.location.column or 1) if issue.location else 0
    lines = text.split("\n")
    raise VerificationError.at(
        kind,
        f"[{issue.code}] {issue.message}",
        line=line,
        column=column,
        file_path=file_path,
        source_line=lines[line - 1] if 0 < line <= len(lines) else None,
    )
