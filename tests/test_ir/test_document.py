"""Tests for the generic document IR."""

from __future__ import annotations

import dataclasses

import pytest
from bru_to_oc.ir import Annotation, Document, Entry, Value, ValueKind


class TestValue:
    """Tests for Value constructors and accessors."""

    def test_constructors_set_kind(self) -> None:
        """Each constructor should tag its variant."""
        assert Value.null().kind is ValueKind.NULL
        assert Value.boolean(True).kind is ValueKind.BOOL
        assert Value.number("1").kind is ValueKind.NUMBER
        assert Value.string("a").kind is ValueKind.STRING
        assert Value.multistring("a\nb").kind is ValueKind.MULTISTRING
        assert Value.array([]).kind is ValueKind.ARRAY
        assert Value.map([]).kind is ValueKind.MAP

    def test_as_string(self) -> None:
        """Text-bearing variants return their text."""
        assert Value.number("1.50").as_string() == "1.50"
        assert Value.string("x").as_string() == "x"
        assert Value.multistring("a\nb").as_string() == "a\nb"
        assert Value.boolean(True).as_string() is None
        assert Value.array([]).as_string() is None

    def test_as_text(self) -> None:
        """Scalars render as text; collections do not."""
        assert Value.boolean(False).as_text() == "false"
        assert Value.null().as_text() == ""
        assert Value.number("3").as_text() == "3"
        assert Value.map([]).as_text() is None

    def test_as_bool(self) -> None:
        """Booleans and their spellings convert, other values do not."""
        assert Value.boolean(True).as_bool() is True
        assert Value.string("false").as_bool() is False
        assert Value.string("yes").as_bool() is None
        assert Value.number("1").as_bool() is None

    def test_null(self) -> None:
        """is_null should follow the kind."""
        assert Value.null().is_null
        assert not Value.string("").is_null

    def test_collections(self) -> None:
        """entries/items are empty for the wrong kind."""
        entry = Entry("a", Value.number("1"))
        mapping = Value.map([entry])
        assert mapping.entries == (entry,)
        assert mapping.items == ()
        assert Value.array([Value.null()]).items == (Value.null(),)
        assert Value.string("x").entries == ()

    def test_get_first(self) -> None:
        """Lookups return the first matching entry."""
        first = Entry("a", Value.number("1"))
        second = Entry("a", Value.number("2"))
        assert Value.map([first, second]).get_first("a") is first
        assert Value.map([first]).get_first("b") is None

    def test_frozen(self) -> None:
        """Values should be immutable."""
        value = Value.string("a")
        with pytest.raises(dataclasses.FrozenInstanceError):
            value.data = "b"  # type: ignore[misc]


class TestEntry:
    """Tests for Entry."""

    def test_defaults(self) -> None:
        """Entries default to enabled with no annotations."""
        entry = Entry("a", Value.null())
        assert not entry.disabled
        assert entry.annotations == ()
        assert entry.line == 0

    def test_get_annotation(self) -> None:
        """Should find an annotation by name."""
        marker = Annotation("disabled")
        entry = Entry("a", Value.null(), annotations=(Annotation("x"), marker))
        assert entry.get_annotation("disabled") is marker
        assert entry.get_annotation("missing") is None


class TestDocument:
    """Tests for Document lookups."""

    @pytest.fixture
    def document(self) -> Document:
        """Build a document with a duplicated block."""
        return Document(
            (
                Entry("meta", Value.map([]), line=1),
                Entry("headers", Value.map([Entry("a", Value.number("1"))]), line=4),
                Entry("headers", Value.map([Entry("b", Value.number("2"))]), line=8),
            ),
            comments=("note",),
        )

    def test_block_names(self, document: Document) -> None:
        """Should list names in source order, duplicates included."""
        assert document.block_names == ["meta", "headers", "headers"]

    def test_get_first_and_all(self, document: Document) -> None:
        """get_first takes the first match, get_all keeps every one."""
        assert document.get_first("headers").line == 4
        assert [e.line for e in document.get_all("headers")] == [4, 8]
        assert document.get_first("missing") is None
        assert document.get_all("missing") == []

    def test_iteration_and_len(self, document: Document) -> None:
        """Documents iterate over their entries."""
        assert len(document) == 3
        assert [e.key for e in document] == document.block_names

    def test_comments(self, document: Document) -> None:
        """Comments are stored separately from entries."""
        assert document.comments == ("note",)
