"""Generic document IR produced by the `.bru` parser.

The IR knows nothing about requests: a Document is an ordered list of named
blocks, each holding a Value. The transformer gives the blocks meaning.
"""

from __future__ import annotations

from collections.abc import Iterator
from dataclasses import dataclass, field
from enum import Enum
from typing import Union


class ValueKind(Enum):
    """Variant tag for :class:`Value`."""

    NULL = "null"
    BOOL = "bool"
    NUMBER = "number"
    STRING = "string"
    ARRAY = "array"
    MAP = "map"
    MULTISTRING = "multistring"


ValueData = Union[bool, str, tuple["Value", ...], tuple["Entry", ...], None]


@dataclass(frozen=True)
class Value:
    """A tagged value.

    Attributes
    ----------
        kind: Which variant this value is.
        data: Payload. ``bool`` for BOOL, raw text for NUMBER/STRING/MULTISTRING,
            a tuple of Values for ARRAY, a tuple of Entries for MAP, ``None``
            for NULL.

    """

    kind: ValueKind
    data: ValueData = None

    @classmethod
    def null(cls) -> Value:
        return cls(ValueKind.NULL)

    @classmethod
    def boolean(cls, flag: bool) -> Value:
        return cls(ValueKind.BOOL, flag)

    @classmethod
    def number(cls, text: str) -> Value:
        return cls(ValueKind.NUMBER, text)

    @classmethod
    def string(cls, text: str) -> Value:
        return cls(ValueKind.STRING, text)

    @classmethod
    def multistring(cls, text: str) -> Value:
        return cls(ValueKind.MULTISTRING, text)

    @classmethod
    def array(cls, items: tuple[Value, ...] | list[Value]) -> Value:
        return cls(ValueKind.ARRAY, tuple(items))

    @classmethod
    def map(cls, entries: tuple[Entry, ...] | list[Entry]) -> Value:
        return cls(ValueKind.MAP, tuple(entries))

    @property
    def is_null(self) -> bool:
        return self.kind is ValueKind.NULL

    def as_string(self) -> str | None:
        """Return the text of a string, number or multistring value."""
        if self.kind in (ValueKind.STRING, ValueKind.NUMBER, ValueKind.MULTISTRING):
            assert isinstance(self.data, str)
            return self.data
        return None

    def as_text(self) -> str | None:
        """Return any scalar rendered as text.

        Booleans become ``"true"``/``"false"`` and null becomes ``""``.
        Arrays and maps return ``None``.
        """
        if self.kind is ValueKind.NULL:
            return ""
        if self.kind is ValueKind.BOOL:
            return "true" if self.data else "false"
        return self.as_string()

    def as_bool(self) -> bool | None:
        """Return the boolean payload, also accepting ``"true"``/``"false"`` text."""
        if self.kind is ValueKind.BOOL:
            return bool(self.data)
        if self.kind is ValueKind.STRING and self.data in ("true", "false"):
            return self.data == "true"
        return None

    @property
    def entries(self) -> tuple[Entry, ...]:
        """Entries of a MAP value (empty for other kinds)."""
        if self.kind is ValueKind.MAP:
            assert isinstance(self.data, tuple)
            return self.data  # type: ignore[return-value]
        return ()

    @property
    def items(self) -> tuple[Value, ...]:
        """Items of an ARRAY value (empty for other kinds)."""
        if self.kind is ValueKind.ARRAY:
            assert isinstance(self.data, tuple)
            return self.data  # type: ignore[return-value]
        return ()

    def get_first(self, key: str) -> Entry | None:
        """Return the first entry named ``key`` in a MAP value."""
        return next((e for e in self.entries if e.key == key), None)


@dataclass(frozen=True)
class Annotation:
    """An ``@name(args)`` marker attached to an entry."""

    name: str
    args: tuple[Value, ...] = ()


@dataclass(frozen=True)
class Entry:
    """One key/value pair: a top-level block or a line inside a block.

    Attributes
    ----------
        key: Entry key or block name (``body:json``, ``headers``...).
        value: Parsed value.
        annotations: Annotations that preceded the entry.
        disabled: True when the entry was prefixed with ``~``.
        line: 1-based source line of the key.

    """

    key: str
    value: Value
    annotations: tuple[Annotation, ...] = ()
    disabled: bool = False
    line: int = 0

    def get_annotation(self, name: str) -> Annotation | None:
        return next((a for a in self.annotations if a.name == name), None)


@dataclass(frozen=True)
class Document:
    """Ordered top-level blocks of one `.bru` file.

    Duplicate block names are kept; lookups return the first match.
    """

    entries: tuple[Entry, ...] = ()
    comments: tuple[str, ...] = field(default=())

    def get_first(self, key: str) -> Entry | None:
        """Return the first block named ``key``."""
        return next((e for e in self.entries if e.key == key), None)

    def get_all(self, key: str) -> list[Entry]:
        """Return every block named ``key`` in source order."""
        return [e for e in self.entries if e.key == key]

    @property
    def block_names(self) -> list[str]:
        return [e.key for e in self.entries]

    def __iter__(self) -> Iterator[Entry]:
        return iter(self.entries)

    def __len__(self) -> int:
        return len(self.entries)
