"""Checks on emitted output and readable error messages."""

from bru_to_oc.validation.issues import (
    IssueCodes,
    IssueLocation,
    IssueSeverity,
    ValidationIssue,
    ValidationResult,
)
from bru_to_oc.validation.verifier import OutputVerifier, verify_output

__all__ = [
    "IssueCodes",
    "IssueLocation",
    "IssueSeverity",
    "OutputVerifier",
    "ValidationIssue",
    "ValidationResult",
    "verify_output",
]
