"""Read OpenCollection YAML produced by the emitter back into a Request.

This is a reader for the YAML subset that :mod:`yaml_emitter` writes, not a
general YAML parser. It works line by line: indentation is the count of
leading spaces, ``key: value`` and ``- key: value`` are the only shapes, and
nesting is decided purely by comparing indentation. Blank and ``#`` lines
between entries are skipped; inside a literal block scalar they are content.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any

from pydantic import ValidationError

from bru_to_oc.errors import DEFAULT_FILE_PATH, YamlErrorKind, YamlReadError
from bru_to_oc.models.request import Request
from bru_to_oc.validation.pydantic_errors import (
    format_pydantic_location,
    translate_pydantic_error,
)

logger = logging.getLogger(__name__)

SECTIONS = ("info", "http", "settings", "runtime", "docs")

YAML_UNESCAPES = {"\\": "\\", '"': '"', "t": "\t", "r": "\r", "n": "\n", "0": "\0", "/": "/"}


@dataclass(frozen=True)
class _Line:
    number: int
    indent: int
    content: str


def _is_item(content: str) -> bool:
    return content == "-" or content.startswith("- ")


def _looks_like_pair(text: str) -> bool:
    return not text.startswith(('"', "'")) and (": " in text or text.endswith(":"))


class YamlReader:
    """Indentation-driven reader for emitted YAML.

    Usage:
        request = YamlReader(text, "request.yml").read()
    """

    def __init__(self, text: str, file_path: str = DEFAULT_FILE_PATH) -> None:
        """Initialize the reader.

        Args:
        ----
            text: YAML text.
            file_path: Path used in error diagnostics.

        """
        self.raw = text.removeprefix("\ufeff").splitlines()
        self.file_path = file_path
        self.pos = 0
        self._virtual: dict[int, _Line] = {}
        self._section_lines: dict[str, int] = {}

    def read(self) -> Request:
        """Read the whole document.

        Returns
        -------
            The rebuilt Request.

        Raises
        ------
            YamlReadError: If the text is outside the supported subset or a
                required field is missing.

        """
        return self._build_request(self.read_data())

    def read_data(self) -> dict[str, Any]:
        """Read the document into plain dicts, lists and strings."""
        first = self._peek()
        if first is None:
            raise self._error(YamlErrorKind.INVALID_YAML, "document is empty")
        if first.indent != 0:
            raise self._error(YamlErrorKind.INVALID_YAML, "document must start at column 1", first)
        data = self._read_mapping(0)
        leftover = self._peek()
        if leftover is not None:
            raise self._error(YamlErrorKind.INVALID_YAML, "unexpected indentation", leftover)
        return data

    def _error(
        self, kind: YamlErrorKind, message: str, line: _Line | int | None = None
    ) -> YamlReadError:
        number = line.number if isinstance(line, _Line) else (line or 0)
        column = line.indent + 1 if isinstance(line, _Line) else (1 if number else 0)
        source = self.raw[number - 1] if 0 < number <= len(self.raw) else None
        return YamlReadError.at(
            kind, message, line=number, column=column, file_path=self.file_path, source_line=source
        )

    def _line_at(self, index: int) -> _Line:
        if index in self._virtual:
            return self._virtual[index]
        text = self.raw[index]
        indent = len(text) - len(text.lstrip(" "))
        return _Line(index + 1, indent, text[indent:].rstrip())

    def _peek(self) -> _Line | None:
        """Return the next structural line, skipping blank and comment lines."""
        while self.pos < len(self.raw):
            line = self._line_at(self.pos)
            if line.content and not line.content.startswith("#"):
                return line
            self.pos += 1
        return None

    def _split(self, line: _Line) -> tuple[str, str]:
        content = line.content
        index = content.find(": ")
        if index != -1:
            key, value = content[:index].rstrip(), content[index + 2 :].strip()
        elif content.endswith(":"):
            key, value = content[:-1].rstrip(), ""
        else:
            raise self._error(
                YamlErrorKind.INVALID_YAML, f"expected 'key: value', got {content!r}", line
            )
        if not key or key.startswith(("'", '"', "\t")):
            raise self._error(YamlErrorKind.INVALID_YAML, f"invalid key in {content!r}", line)
        return key, value

    def _read_mapping(self, indent: int) -> dict[str, Any]:
        result: dict[str, Any] = {}
        while (line := self._peek()) is not None:
            if line.indent < indent or (line.indent == indent and _is_item(line.content)):
                break
            if line.indent > indent:
                raise self._error(YamlErrorKind.INVALID_YAML, "unexpected indentation", line)
            self.pos += 1
            key, value = self._split(line)
            if indent == 0:
                self._section_lines[key] = line.number
            result[key] = self._read_value(line, value)
        return result

    def _read_value(self, line: _Line, value: str) -> Any:
        if value.startswith("|"):
            return self._read_block_scalar(line, value)
        if value == "[]":
            return []
        if value == "{}":
            return {}
        if value:
            return self._unquote(value, line)

        nested = self._peek()
        if nested is None:
            return ""
        if nested.indent > line.indent:
            return self._read_block(nested.indent)
        if nested.indent == line.indent and _is_item(nested.content):
            return self._read_sequence(nested.indent)
        return ""

    def _read_block(self, indent: int) -> Any:
        line = self._peek()
        if line is not None and _is_item(line.content):
            return self._read_sequence(indent)
        return self._read_mapping(indent)

    def _read_sequence(self, indent: int) -> list[Any]:
        items: list[Any] = []
        while (line := self._peek()) is not None:
            if line.indent != indent or not _is_item(line.content):
                break
            rest = line.content[1:].lstrip(" ")
            if not rest:
                self.pos += 1
                nested = self._peek()
                if nested is not None and nested.indent > indent:
                    items.append(self._read_block(nested.indent))
                else:
                    items.append("")
            elif _looks_like_pair(rest):
                # re-read "- key: value" as a mapping whose first key sits after the dash
                column = indent + len(line.content) - len(rest)
                self._virtual[self.pos] = _Line(line.number, column, rest)
                items.append(self._read_mapping(column))
            else:
                self.pos += 1
                items.append(self._unquote(rest, line))
        return items

    def _read_block_scalar(self, line: _Line, header: str) -> str:
        indicator = header[1:]
        if any(char not in "+-0123456789" for char in indicator):
            raise self._error(
                YamlErrorKind.INVALID_YAML, f"invalid block scalar header {header!r}", line
            )
        digits = "".join(char for char in indicator if char.isdigit())
        keep = "+" in indicator

        if digits:
            block_indent = line.indent + int(digits)
        else:
            block_indent = -1
            for text in self.raw[self.pos :]:
                if text.strip():
                    block_indent = len(text) - len(text.lstrip(" "))
                    break
            if block_indent <= line.indent:
                blank = 0
                while keep and self.pos < len(self.raw) and not self.raw[self.pos].strip():
                    blank += 1
                    self.pos += 1
                return "\n" * blank

        collected: list[str] = []
        while self.pos < len(self.raw):
            text = self.raw[self.pos]
            if text.strip():
                indent = len(text) - len(text.lstrip(" "))
                if indent < block_indent:
                    break
            collected.append(text[block_indent:])
            self.pos += 1

        if keep:
            return "\n".join(collected) + "\n"
        while collected and not collected[-1].strip():
            collected.pop()
        return "\n".join(collected)

    def _unquote(self, value: str, line: _Line) -> str:
        if value.startswith('"'):
            chars: list[str] = []
            i = 1
            while i < len(value):
                char = value[i]
                if char == "\\" and i + 1 < len(value):
                    chars.append(YAML_UNESCAPES.get(value[i + 1], value[i + 1]))
                    i += 2
                    continue
                if char == '"':
                    if value[i + 1 :].strip():
                        break
                    return "".join(chars)
                chars.append(char)
                i += 1
            raise self._error(
                YamlErrorKind.INVALID_YAML, f"malformed double-quoted value {value!r}", line
            )
        if value.startswith("'"):
            if len(value) < 2 or not value.endswith("'"):
                raise self._error(
                    YamlErrorKind.INVALID_YAML, f"malformed single-quoted value {value!r}", line
                )
            return value[1:-1].replace("''", "'")
        return value

    def _build_request(self, data: dict[str, Any]) -> Request:
        info = data.get("info")
        if not isinstance(info, dict):
            raise self._error(YamlErrorKind.MISSING_REQUIRED_FIELD, "missing 'info' section")
        if "name" not in info:
            raise self._error(
                YamlErrorKind.MISSING_REQUIRED_FIELD,
                "'info.name' is required",
                self._section_lines.get("info"),
            )

        http = data.get("http")
        if not isinstance(http, dict):
            raise self._error(YamlErrorKind.MISSING_REQUIRED_FIELD, "missing 'http' section")
        for key in ("method", "url"):
            if key not in http:
                raise self._error(
                    YamlErrorKind.MISSING_REQUIRED_FIELD,
                    f"'http.{key}' is required",
                    self._section_lines.get("http"),
                )

        skipped = [key for key in data if key not in SECTIONS]
        if skipped:
            logger.debug("Skipping unknown top-level keys: %s", ", ".join(skipped))

        payload = {key: data[key] for key in SECTIONS if key in data}
        try:
            return Request.model_validate(payload)
        except ValidationError as e:
            err = e.errors()[0]
            location = format_pydantic_location(err["loc"])
            section = str(err["loc"][0]) if err["loc"] else ""
            raise self._error(
                YamlErrorKind.INVALID_YAML,
                f"{location}: {translate_pydantic_error(err)}",
                self._section_lines.get(section),
            ) from e


def parse_yaml(text: str | bytes, *, file_path: str = DEFAULT_FILE_PATH) -> Request:
    """Rebuild a Request from emitted OpenCollection YAML.

    Args:
    ----
        text: YAML text (or UTF-8 bytes).
        file_path: Path used in error diagnostics.

    Returns:
    -------
        The rebuilt Request.

    Raises:
    ------
        YamlReadError: ``InvalidYaml`` for text outside the supported subset,
            ``MissingRequiredField`` when info, info.name, http, http.method
            or http.url is absent.

    """
    if isinstance(text, bytes):
        try:
            text = text.decode("utf-8")
        except UnicodeDecodeError as e:
            raise YamlReadError.at(
                YamlErrorKind.INVALID_YAML,
                f"input is not valid UTF-8 (byte offset {e.start})",
                file_path=file_path,
            ) from e
    return YamlReader(text, file_path).read()
