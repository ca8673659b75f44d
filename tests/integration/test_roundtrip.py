"""Round-trip integration tests.

Checks that a request survives both directions:
.bru -> Request -> YAML -> Request and .bru -> YAML -> .bru -> Request.
"""

from __future__ import annotations

import pytest
import yaml
from bru_to_oc import emit_source_format, emit_yaml, parse, parse_yaml, transform
from bru_to_oc.models import Request

from tests.fixtures.sample_bru import (
    BASIC_AUTH_BRU,
    CREATE_USER_BRU,
    FORM_BRU,
    GET_USERS_BRU,
    GRAPHQL_BRU,
    MULTIPART_BRU,
)

ALL_SAMPLES = [GET_USERS_BRU, CREATE_USER_BRU, BASIC_AUTH_BRU, FORM_BRU, MULTIPART_BRU, GRAPHQL_BRU]


def without_comments(request: Request) -> Request:
    return request.model_copy(update={"comments": ()})


class TestYamlRoundtrip:
    """Tests for .bru -> YAML -> Request."""

    @pytest.mark.parametrize("source", ALL_SAMPLES)
    def test_request_survives(self, source: str) -> None:
        """The request read back from YAML equals the original."""
        request = transform(parse(source))
        assert parse_yaml(emit_yaml(request)) == without_comments(request)

    @pytest.mark.parametrize("source", ALL_SAMPLES)
    def test_yaml_is_stable(self, source: str) -> None:
        """Emitting the read-back request gives the same text."""
        text = emit_yaml(transform(parse(source)))
        assert emit_yaml(parse_yaml(text)) == text

    @pytest.mark.parametrize("source", ALL_SAMPLES)
    def test_full_yaml_parser_accepts_output(self, source: str) -> None:
        """A general YAML parser loads every output."""
        data = yaml.safe_load(emit_yaml(transform(parse(source))))
        assert set(data) >= {"info", "http"}

    def test_preserves_runtime_details(self) -> None:
        """Scripts, assertions and vars survive with order and flags."""
        request = parse_yaml(emit_yaml(transform(parse(CREATE_USER_BRU))))
        runtime = request.runtime
        assert [s.code.splitlines()[0] for s in runtime.scripts] == [
            'bru.setVar("started", Date.now());',
            'bru.setVar("userId", res.body.id);',
            'test("status is 201", function() {',
        ]
        assert [a.enabled for a in runtime.assertions] == [True, True, False]
        assert [v.name for v in runtime.vars] == ["region", "userId"]

    def test_preserves_numeric_looking_strings(self) -> None:
        """Header values like 1.0 stay strings through the subset reader."""
        request = parse_yaml(emit_yaml(transform(parse(CREATE_USER_BRU))))
        assert request.http.headers[2].value == "1.0"


class TestSourceRoundtrip:
    """Tests for .bru -> YAML -> .bru -> Request."""

    @pytest.mark.parametrize("source", ALL_SAMPLES)
    def test_request_survives(self, source: str) -> None:
        """The request parsed from regenerated source equals the original."""
        request = transform(parse(source))
        regenerated = emit_source_format(parse_yaml(emit_yaml(request)))
        assert transform(parse(regenerated)) == without_comments(request)

    @pytest.mark.parametrize("source", ALL_SAMPLES)
    def test_source_is_stable(self, source: str) -> None:
        """Regenerating source from its own output is a fixed point."""
        once = emit_source_format(transform(parse(source)))
        twice = emit_source_format(transform(parse(once)))
        assert once == twice

    def test_preserves_disabled_entries(self) -> None:
        """Disabled headers and params keep their '~' prefix."""
        regenerated = emit_source_format(parse_yaml(emit_yaml(transform(parse(CREATE_USER_BRU)))))
        assert "  ~X-Debug: 1\n" in regenerated
        assert "  ~verbose: true\n" in regenerated
        assert "  ~res.body.name: contains Ada\n" in regenerated
