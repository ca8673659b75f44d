"""Turn pydantic validation errors into short readable messages."""

from __future__ import annotations

from pydantic_core import ErrorDetails

ERROR_TRANSLATIONS: dict[str, str] = {
    "missing": "This field is required but was not provided",
    "extra_forbidden": "This field is not allowed here",
    "string_type": "Must be a string",
    "int_type": "Must be an integer",
    "int_parsing": "Must be an integer",
    "bool_type": "Must be true or false",
    "bool_parsing": "Must be true or false",
    "list_type": "Must be a list",
    "tuple_type": "Must be a list",
    "dict_type": "Must be a mapping",
    "model_type": "Must be a mapping",
    "model_attributes_type": "Must be a mapping",
    "enum": "Must be one of the allowed values",
    "literal_error": "Must be one of the allowed values",
    "union_tag_not_found": "A 'type' key is required",
    "union_tag_invalid": "Unknown type",
    "string_too_short": "Must not be empty",
    "greater_than_equal": "Value is too small",
}


def translate_pydantic_error(error: ErrorDetails) -> str:
    """Translate a pydantic error to a readable message.

    Args:
    ----
        error: The pydantic error details.

    Returns:
    -------
        Readable message, falling back to pydantic's own text.

    """
    error_type = error["type"]
    ctx = error.get("ctx") or {}
    base_msg = ERROR_TRANSLATIONS.get(error_type, error["msg"])

    if error_type in ("enum", "literal_error"):
        base_msg = f"Must be one of: {ctx.get('expected', 'unknown')}"
    elif error_type == "union_tag_invalid":
        base_msg = f"Unknown type {ctx.get('tag', '')!r}, expected one of: {ctx.get('expected_tags', '')}"
    elif error_type == "greater_than_equal":
        base_msg = f"Must be at least {ctx.get('ge', 0)}"

    return base_msg


def format_pydantic_location(loc: tuple[str | int, ...]) -> str:
    """Format a pydantic location tuple as a dotted path.

    Args:
    ----
        loc: Location tuple from a pydantic error.

    Returns:
    -------
        Path such as ``http.headers[0].name``.

    """
    parts: list[str] = []
    for part in loc:
        if isinstance(part, int):
            parts.append(f"[{part}]")
        else:
            if parts:
                parts.append(".")
            parts.append(str(part))
    return "".join(parts)


def get_suggestion_for_error(error: ErrorDetails) -> str | None:
    """Suggest a fix for common errors."""
    suggestions: dict[str, str] = {
        "missing": "Add the required field",
        "extra_forbidden": "Remove this field or check for typos",
        "union_tag_not_found": "Add a 'type:' key naming the variant",
    }
    return suggestions.get(error["type"])
