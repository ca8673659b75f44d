"""Split assertion text into an operator and an expected value."""

from __future__ import annotations

from bru_to_oc.models.runtime import AssertionOperator

# Longest keyword first so "gte" is tried before "gt".
OPERATORS_BY_LENGTH: tuple[AssertionOperator, ...] = tuple(
    sorted(AssertionOperator, key=lambda op: len(op.value), reverse=True)
)


def parse_assertion(text: str) -> tuple[AssertionOperator, str]:
    """Resolve the operator keyword at the start of an assertion value.

    Args:
    ----
        text: Assertion value as written, e.g. ``"eq 200"`` or ``"isJson"``.

    Returns:
    -------
        The operator and the remaining text after the keyword and one
        separating space. Text without a known keyword is an equality check
        against the whole text.

    Example:
    -------
        >>> parse_assertion("gte 10")
        (<AssertionOperator.GTE: 'gte'>, '10')
        >>> parse_assertion("200")
        (<AssertionOperator.EQ: 'eq'>, '200')

    """
    for operator in OPERATORS_BY_LENGTH:
        keyword = operator.value
        if text == keyword:
            return operator, ""
        if text.startswith(keyword + " "):
            return operator, text[len(keyword) + 1 :]
    return AssertionOperator.EQ, text


def format_assertion(operator: AssertionOperator, value: str) -> str:
    """Inverse of :func:`parse_assertion`."""
    if not value:
        return operator.value
    return f"{operator.value} {value}"
