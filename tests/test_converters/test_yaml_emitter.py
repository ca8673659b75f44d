"""Tests for the OpenCollection YAML emitter."""

from __future__ import annotations

import pytest
import yaml
from bru_to_oc.converters import EmitOptions, YamlEmitter, emit_yaml, needs_quoting
from bru_to_oc.models import (
    BasicAuth,
    Docs,
    Header,
    Http,
    Info,
    JsonBody,
    Request,
    TextBody,
)
from bru_to_oc.parser import parse
from bru_to_oc.transform import transform

from tests.fixtures.sample_bru import BASIC_AUTH_BRU, MULTIPART_BRU


def request_with(**http: object) -> Request:
    return Request(info=Info(name="r"), http=Http(method="post", url="https://x", **http))


class TestNeedsQuoting:
    """Tests for the scalar quoting rule."""

    @pytest.mark.parametrize(
        "value",
        ["", "true", "false", "null", "yes", "no", "off", "~", "a: b", "#x", "{{token}}", "-1", " a", "a "],
    )
    def test_quoted(self, value: str) -> None:
        """Reserved words, indicators and edge whitespace need quotes."""
        assert needs_quoting(value)

    @pytest.mark.parametrize(
        "value", ["get-users", "application/json", "1", "1.0", "eu-west-1", "True", "NO"]
    )
    def test_bare(self, value: str) -> None:
        """Plain words stay bare."""
        assert not needs_quoting(value)


class TestEmitYaml:
    """Tests for emit_yaml."""

    def test_get_users(self, get_users_bru: str) -> None:
        """The basic GET request emits info and http sections."""
        text = emit_yaml(transform(parse(get_users_bru)))
        assert text == (
            "info:\n"
            "  name: get-users\n"
            "  type: http\n"
            "  seq: 1\n"
            "http:\n"
            "  method: get\n"
            '  url: "https://api.example.com/users"\n'
            "  auth:\n"
            "    type: none\n"
        )

    def test_basic_auth(self) -> None:
        """Basic auth is written as a nested mapping."""
        text = emit_yaml(transform(parse(BASIC_AUTH_BRU)))
        assert "  auth:\n    type: basic\n    username: admin\n    password: secret\n" in text

    def test_disabled_records(self) -> None:
        """Only disabled records carry 'enabled', as their last key."""
        text = emit_yaml(
            request_with(
                headers=(Header(name="A", value="1"), Header(name="B", value="2", enabled=False))
            )
        )
        assert (
            "  headers:\n"
            "    - name: A\n"
            "      value: 1\n"
            "    - name: B\n"
            "      value: 2\n"
            "      enabled: false\n"
        ) in text
        assert "enabled: true" not in text

    def test_multiline_block_scalar(self) -> None:
        """Text with newlines becomes a literal block."""
        text = emit_yaml(request_with(body=JsonBody(data='{\n  "a": 1\n}')))
        assert '    data: |\n      {\n        "a": 1\n      }\n' in text

    def test_indentation_indicator(self) -> None:
        """A first line starting with spaces gets an explicit indicator."""
        text = emit_yaml(request_with(body=TextBody(data="  indented\nnext")))
        assert "    data: |2\n        indented\n      next\n" in text
        assert yaml.safe_load(text)["http"]["body"]["data"] == "  indented\nnext\n"

    def test_empty_lines_in_block(self) -> None:
        """Blank lines inside a block carry no indentation."""
        text = emit_yaml(Request(http=Http(method="get", url="u"), docs=Docs(content="a\n\nb")))
        assert "docs:\n  content: |\n    a\n\n    b\n" in text

    def test_trailing_newline_keeps_chomping(self) -> None:
        """Text ending in newlines uses '|+' so a YAML loader keeps them."""
        text = emit_yaml(request_with(body=JsonBody(data="{}\n\n")))
        assert "    data: |+\n      {}\n\n" in text
        assert yaml.safe_load(text)["http"]["body"]["data"] == "{}\n\n"

    def test_keep_chomping_with_indicator(self) -> None:
        """Both header indicators combine."""
        text = emit_yaml(request_with(body=TextBody(data="  x\n")))
        assert "    data: |2+\n        x\n" in text
        assert yaml.safe_load(text)["http"]["body"]["data"] == "  x\n"

    def test_template_url_quoted(self, create_user_request: Request) -> None:
        """Template placeholders are quoted."""
        text = emit_yaml(create_user_request)
        assert '  url: "{{baseUrl}}/users?source=cli"\n' in text

    def test_section_order(self, create_user_request: Request) -> None:
        """Top-level sections appear in a fixed order."""
        text = emit_yaml(create_user_request)
        top = [line.rstrip(":") for line in text.splitlines() if line and not line[0].isspace()]
        assert top == ["info", "http", "settings", "runtime", "docs"]

    def test_safe_load(self, create_user_request: Request) -> None:
        """The output is valid YAML with the expected structure."""
        data = yaml.safe_load(emit_yaml(create_user_request))
        assert data["http"]["method"] == "post"
        assert data["http"]["auth"] == {"type": "bearer", "token": "{{token}}"}
        assert data["http"]["params"][2] == {"name": "org", "value": "acme", "type": "path"}
        assert data["settings"] == {"encodeUrl": True, "timeout": 5000}
        assert data["runtime"]["assertions"][0] == {
            "expression": "res.status",
            "operator": "eq",
            "value": 201,
        }
        assert data["runtime"]["vars"][1]["scope"] == "after-response"
        assert data["info"]["tags"] == ["users", "smoke"]

    def test_multipart_alias(self) -> None:
        """Multipart parts use the contentType alias."""
        text = emit_yaml(transform(parse(MULTIPART_BRU)))
        assert "contentType: application/pdf" in text
        assert "filename: reports/q1.pdf" in text

    def test_escaped_quotes(self) -> None:
        """Double quotes and backslashes are escaped."""
        text = emit_yaml(request_with(auth=BasicAuth(username='a"b', password="c\\d")))
        loaded = yaml.safe_load(text)["http"]["auth"]
        assert loaded["username"] == 'a"b'
        assert loaded["password"] == "c\\d"

    def test_deterministic(self, create_user_request: Request) -> None:
        """Emitting twice gives identical text."""
        assert emit_yaml(create_user_request) == emit_yaml(create_user_request)


class TestComments:
    """Tests for carried source comments."""

    def test_comments_off_by_default(self, create_user_request: Request) -> None:
        """Comments are dropped unless asked for."""
        assert not emit_yaml(create_user_request).startswith("#")

    def test_include_comments(self, create_user_request: Request) -> None:
        """Comments lead the document when enabled."""
        emitter = YamlEmitter(EmitOptions(include_comments=True))
        text = emitter.emit(create_user_request)
        assert text.startswith("# Creates a user and stores the new id\ninfo:\n")
