"""Tests for pydantic error translation."""

from __future__ import annotations

import pytest
from bru_to_oc.models import Http, Request
from bru_to_oc.validation.pydantic_errors import (
    format_pydantic_location,
    get_suggestion_for_error,
    translate_pydantic_error,
)
from pydantic import ValidationError
from pydantic_core import ErrorDetails


def first_error(data: dict[str, object], model: type = Request) -> ErrorDetails:
    with pytest.raises(ValidationError) as exc_info:
        model.model_validate(data)
    return exc_info.value.errors()[0]


class TestTranslate:
    """Tests for translate_pydantic_error."""

    def test_missing(self) -> None:
        """Missing fields get a plain message."""
        error = first_error({"info": {"name": "x"}})
        assert translate_pydantic_error(error) == "This field is required but was not provided"

    def test_extra(self) -> None:
        """Unknown fields are reported as not allowed."""
        error = first_error({"method": "get", "url": "u", "verb": "x"}, Http)
        assert translate_pydantic_error(error) == "This field is not allowed here"

    def test_union_tag_invalid(self) -> None:
        """An unknown body type names the bad tag."""
        error = first_error({"method": "get", "url": "u", "body": {"type": "yaml"}}, Http)
        assert translate_pydantic_error(error).startswith("Unknown type 'yaml'")

    def test_greater_than_equal(self) -> None:
        """Bounds name the minimum."""
        error = first_error({"http": {"method": "get", "url": "u"}, "settings": {"timeout": -1}})
        assert translate_pydantic_error(error) == "Must be at least 0"

    def test_unknown_type_falls_back(self) -> None:
        """Untranslated errors keep pydantic's message."""
        error: ErrorDetails = {"type": "weird", "loc": (), "msg": "raw message", "input": None}
        assert translate_pydantic_error(error) == "raw message"


class TestLocation:
    """Tests for format_pydantic_location."""

    def test_dotted(self) -> None:
        """Names join with dots, indexes use brackets."""
        assert format_pydantic_location(("http", "headers", 0, "name")) == "http.headers[0].name"

    def test_from_validation(self) -> None:
        """Real error locations format as paths."""
        error = first_error(
            {"http": {"method": "get", "url": "u", "headers": [{"value": "x"}]}}
        )
        assert format_pydantic_location(error["loc"]) == "http.headers[0].name"


class TestSuggestion:
    """Tests for get_suggestion_for_error."""

    def test_known(self) -> None:
        """Common errors have a suggestion."""
        error = first_error({"method": "get", "url": "u", "verb": "x"}, Http)
        assert get_suggestion_for_error(error) == "Remove this field or check for typos"

    def test_unknown(self) -> None:
        """Other errors have none."""
        error: ErrorDetails = {"type": "weird", "loc": (), "msg": "m", "input": None}
        assert get_suggestion_for_error(error) is None
