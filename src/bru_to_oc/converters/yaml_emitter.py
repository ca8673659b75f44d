"""Serialize a Request as OpenCollection YAML.

The printer is deterministic: two spaces per nesting level, sections in the
order info, http, settings, runtime, docs, and fields in model order. Lists
of records (headers, params, scripts...) are written as sequences of maps
with ``enabled`` printed only when it is false.
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict

from bru_to_oc.models.request import Request

INDENT = 2

YAML_RESERVED_WORDS = frozenset({"true", "false", "null", "yes", "no", "on", "off", "~"})
YAML_SPECIAL_CHARS = frozenset(":#[]{},&*!|>'\"%@`")
YAML_ESCAPES = {"\\": "\\\\", '"': '\\"', "\t": "\\t", "\r": "\\r"}


class EmitOptions(BaseModel):
    """Options for :func:`emit_yaml`."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    include_comments: bool = False
    """Write the source file's top-level comments as ``#`` lines first."""


def needs_quoting(value: str) -> bool:
    """Check whether a scalar must be quoted to read back as the same string.

    Quoted are: the empty string, values containing YAML indicator
    characters, boolean/null spellings (matched case-sensitively), and
    values with leading or trailing whitespace or a leading ``-`` or ``?``.
    """
    if not value:
        return True
    if any(char in YAML_SPECIAL_CHARS for char in value):
        return True
    if value in YAML_RESERVED_WORDS:
        return True
    return value[0] in " \t-?" or value[-1] in " \t"


def quote(value: str) -> str:
    """Wrap a value in YAML double quotes."""
    return '"' + "".join(YAML_ESCAPES.get(char, char) for char in value) + '"'


def format_scalar(value: str | int | bool) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, int):
        return str(value)
    return quote(value) if needs_quoting(value) else value


def _prune(data: Any) -> Any:
    """Drop ``enabled: true`` and move ``enabled`` to the end of each record."""
    if isinstance(data, dict):
        pruned = {k: _prune(v) for k, v in data.items() if k != "enabled"}
        if data.get("enabled") is False:
            pruned["enabled"] = False
        return pruned
    if isinstance(data, list):
        return [_prune(item) for item in data]
    return data


class YamlEmitter:
    """Print a Request as YAML text.

    Usage:
        text = YamlEmitter(EmitOptions(include_comments=True)).emit(request)
    """

    def __init__(self, options: EmitOptions | None = None) -> None:
        """Initialize the emitter.

        Args:
        ----
            options: Emission options. Defaults to ``EmitOptions()``.

        """
        self.options = options or EmitOptions()
        self._lines: list[str] = []

    def emit(self, request: Request) -> str:
        """Serialize ``request``.

        Args:
        ----
            request: The request to print.

        Returns:
        -------
            YAML text ending with a newline.

        """
        self._lines = []

        if self.options.include_comments:
            for comment in request.comments:
                self._lines.append(f"# {comment}".rstrip())

        data = request.model_dump(
            mode="json", by_alias=True, exclude_none=True, exclude={"comments"}
        )
        self._emit_mapping(_prune(data), 0)
        return "\n".join(self._lines) + "\n"

    def _emit_mapping(self, data: dict[str, Any], indent: int) -> None:
        pad = " " * indent
        for key, value in data.items():
            self._emit_pair(pad, key, value, indent)

    def _emit_sequence(self, items: list[Any], indent: int) -> None:
        pad = " " * indent
        for item in items:
            if not isinstance(item, dict):
                self._lines.append(f"{pad}- {format_scalar(item)}")
                continue
            lead = f"{pad}- "
            for key, value in item.items():
                self._emit_pair(lead, key, value, indent + INDENT)
                lead = " " * (indent + INDENT)

    def _emit_pair(self, lead: str, key: str, value: Any, indent: int) -> None:
        """Write ``key: value`` where ``lead`` precedes the key and ``indent`` is its column."""
        head = f"{lead}{key}:"
        if isinstance(value, dict):
            self._lines.append(head)
            self._emit_mapping(value, indent + INDENT)
        elif isinstance(value, list):
            if not value:
                self._lines.append(f"{head} []")
                return
            self._lines.append(head)
            self._emit_sequence(value, indent + INDENT)
        elif isinstance(value, str) and ("\n" in value or "\r" in value):
            self._emit_block_scalar(head, value, indent + INDENT)
        else:
            self._lines.append(f"{head} {format_scalar(value)}")

    def _emit_block_scalar(self, head: str, text: str, indent: int) -> None:
        text = text.replace("\r\n", "\n").replace("\r", "\n")
        # keep chomping (|+) carries trailing newlines
        chomping = "+" if text.endswith("\n") else ""
        lines = (text[:-1] if chomping else text).split("\n")
        first = next((line for line in lines if line.strip()), "")
        # an explicit indentation indicator keeps leading spaces of the first line
        indicator = f"|{INDENT}{chomping}" if first.startswith(" ") else f"|{chomping}"
        self._lines.append(f"{head} {indicator}")
        pad = " " * indent
        for line in lines:
            self._lines.append(f"{pad}{line}" if line else "")


def emit_yaml(request: Request, options: EmitOptions | None = None) -> str:
    """Serialize a Request as OpenCollection YAML.

    Args:
    ----
        request: The request to serialize.
        options: Emission options (``include_comments``).

    Returns:
    -------
        YAML text ending with a newline.

    Example:
    -------
        ```yaml
        info:
          name: get-users
          type: http
        http:
          method: get
          url: https://api.example.com/users
        ```

    """
    return YamlEmitter(options).emit(request)
