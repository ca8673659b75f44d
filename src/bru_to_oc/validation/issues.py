"""Issue records collected while checking emitted output."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum


class IssueSeverity(Enum):
    """Severity level for verification issues."""

    ERROR = "error"
    WARNING = "warning"


@dataclass(frozen=True)
class IssueLocation:
    """Position of an issue in the checked text."""

    line: int
    """1-based line number."""

    column: int | None = None
    """1-based column number (if known)."""

    def __str__(self) -> str:
        if self.column is not None:
            return f"line {self.line}, col {self.column}"
        return f"line {self.line}"


@dataclass(frozen=True)
class ValidationIssue:
    """A single verification issue."""

    code: str
    """Issue code (e.g. 'V002')."""

    message: str
    """Human-readable message."""

    severity: IssueSeverity = IssueSeverity.ERROR

    location: IssueLocation | None = None
    """Where the issue was found."""

    def __str__(self) -> str:
        parts = [f"[{self.code}]", self.severity.value.upper(), self.message]
        if self.location:
            parts.append(f"at {self.location}")
        return " ".join(parts)


@dataclass
class ValidationResult:
    """All issues found in one piece of output."""

    issues: list[ValidationIssue] = field(default_factory=list)

    @property
    def errors(self) -> list[ValidationIssue]:
        return [i for i in self.issues if i.severity == IssueSeverity.ERROR]

    @property
    def warnings(self) -> list[ValidationIssue]:
        return [i for i in self.issues if i.severity == IssueSeverity.WARNING]

    @property
    def is_valid(self) -> bool:
        """True when there are no errors (warnings are OK)."""
        return not self.errors

    def add_error(self, code: str, message: str, line: int, column: int | None = None) -> None:
        self.issues.append(
            ValidationIssue(code, message, IssueSeverity.ERROR, IssueLocation(line, column))
        )

    def add_warning(self, code: str, message: str, line: int, column: int | None = None) -> None:
        self.issues.append(
            ValidationIssue(code, message, IssueSeverity.WARNING, IssueLocation(line, column))
        )


class IssueCodes:
    """Output verification codes."""

    V001_EMPTY_OUTPUT = "V001"
    V002_TAB_CHARACTER = "V002"
    V003_NO_KEY_SEPARATOR = "V003"
    V004_ODD_INDENTATION = "V004"
    V005_YAML_SYNTAX = "V005"
