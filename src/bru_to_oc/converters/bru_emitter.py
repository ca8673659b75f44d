"""Serialize a Request back into `.bru` source."""

from __future__ import annotations

from collections.abc import Iterable

from bru_to_oc.models.auth import (
    ApiKeyAuth,
    Auth,
    AwsV4Auth,
    BasicAuth,
    BearerAuth,
    DigestAuth,
    OAuth2Auth,
)
from bru_to_oc.models.body import (
    TEXT_BODY_TYPES,
    Body,
    FormUrlEncodedBody,
    GraphQLBody,
    MultipartFormBody,
)
from bru_to_oc.models.common import NamedValue
from bru_to_oc.models.http import MultipartPart, ParamType
from bru_to_oc.models.request import Request, Settings
from bru_to_oc.models.runtime import ScriptType, VarScope
from bru_to_oc.parser.tokenizer import WORD_TERMINATORS, TokenKind, classify_word
from bru_to_oc.transform.assertions import format_assertion

INDENT = "  "

BODY_MODES = {
    "json": "json",
    "xml": "xml",
    "text": "text",
    "sparql": "sparql",
    "graphql": "graphql",
    "form-urlencoded": "formUrlEncoded",
    "multipart-form": "multipartForm",
}

SCRIPT_BLOCKS = {
    ScriptType.BEFORE_REQUEST: "script:pre-request",
    ScriptType.AFTER_RESPONSE: "script:post-response",
    ScriptType.TESTS: "tests",
}

VAR_BLOCKS = {
    VarScope.BEFORE_REQUEST: "vars:pre-request",
    VarScope.AFTER_RESPONSE: "vars:post-response",
}


def _quote(text: str) -> str:
    if "'" not in text:
        return f"'{text}'"
    if '"' not in text:
        return f'"{text}"'
    return text


def format_key(key: str) -> str:
    """Quote a key that would not read back as a single word."""
    if (
        not key
        or any(char in WORD_TERMINATORS for char in key)
        or key[0] in "\"'~@"
        or classify_word(key) in (TokenKind.BOOLEAN, TokenKind.NULL)
    ):
        return _quote(key)
    return key


def format_value(value: str) -> str:
    """Render a value so the parser reads back exactly ``value``."""
    if "\n" in value:
        return f'"""{value}"""'
    if not value:
        return ""
    first = value[0]
    if (
        value != value.strip(" \t")
        or value == "null"
        or first in "\"'[]}@,"
        or (first == "{" and not value.startswith("{{"))
    ):
        # triple-quoted text is read verbatim, so it can hold both quote characters
        if "'" in value and '"' in value:
            return f'"""{value}"""'
        return _quote(value)
    return value


def format_item(value: str) -> str:
    """Render an array item as a single token."""
    if value and not any(char in WORD_TERMINATORS for char in value) and value[0] not in "\"'~@":
        return value
    return _quote(value)


def indent_text(text: str) -> str:
    return "\n".join(f"{INDENT}{line}" if line else "" for line in text.split("\n"))


class BruEmitter:
    """Print a Request as `.bru` blocks.

    Block order: meta, method, headers, params, body, auth, settings,
    scripts, assert, vars, docs.

    Usage:
        text = BruEmitter().emit(request)
    """

    def __init__(self) -> None:
        self._blocks: list[str] = []

    def emit(self, request: Request) -> str:
        """Serialize ``request`` as `.bru` source ending with a newline."""
        self._blocks = []
        http = request.http

        meta = [("name", request.info.name), ("type", request.info.type)]
        if request.info.seq is not None:
            meta.append(("seq", str(request.info.seq)))
        lines = [self._entry(key, value) for key, value in meta]
        if request.info.tags:
            items = ", ".join(format_item(tag) for tag in request.info.tags)
            lines.append(f"{INDENT}tags: [{items}]")
        self._add_lines("meta", lines)

        method = [("url", http.url)]
        if http.body is not None:
            method.append(("body", BODY_MODES[http.body.type]))
        if http.auth is not None:
            method.append(("auth", http.auth.type))
        self._add_map(http.method, method)

        if http.headers:
            self._add_named("headers", http.headers)
        if http.params:
            for param_type, block in ((ParamType.QUERY, "params:query"), (ParamType.PATH, "params:path")):
                params = [p for p in http.params if p.type is param_type]
                if params:
                    self._add_named(block, params)

        if http.body is not None:
            self._emit_body(http.body)
        if http.auth is not None:
            self._emit_auth(http.auth)
        if request.settings is not None:
            self._emit_settings(request.settings)

        runtime = request.runtime
        if runtime is not None:
            for script in runtime.scripts or ():
                self._add_text(SCRIPT_BLOCKS[script.type], script.code)
            if runtime.assertions:
                self._add_lines(
                    "assert",
                    [
                        self._entry(a.expression, format_assertion(a.operator, a.value), a.enabled)
                        for a in runtime.assertions
                    ],
                )
            for scope, block in VAR_BLOCKS.items():
                variables = [v for v in runtime.vars or () if v.scope is scope]
                if variables:
                    self._add_named(block, variables)

        if request.docs is not None:
            text = request.docs.content or request.docs.description
            if text is not None:
                self._add_text("docs", text)

        return "\n\n".join(self._blocks) + "\n"

    @staticmethod
    def _entry(key: str, value: str, enabled: bool = True) -> str:
        prefix = "" if enabled else "~"
        return f"{INDENT}{prefix}{format_key(key)}: {format_value(value)}".rstrip()

    def _add_lines(self, name: str, lines: list[str]) -> None:
        self._blocks.append("\n".join([f"{name} {{", *lines, "}"]))

    def _add_map(self, name: str, pairs: Iterable[tuple[str, str]]) -> None:
        self._add_lines(name, [self._entry(key, value) for key, value in pairs])

    def _add_named(self, name: str, items: Iterable[NamedValue]) -> None:
        self._add_lines(name, [self._entry(i.name, i.value, i.enabled) for i in items])

    def _add_text(self, name: str, text: str) -> None:
        if text:
            self._blocks.append(f"{name} {{\n{indent_text(text)}\n}}")
        else:
            self._blocks.append(f"{name} {{\n}}")

    def _emit_body(self, body: Body) -> None:
        if isinstance(body, GraphQLBody):
            self._add_text("body:graphql", body.query)
            if body.variables is not None:
                self._add_text("body:graphql:vars", body.variables)
        elif isinstance(body, FormUrlEncodedBody):
            self._add_text(
                "body:form-urlencoded",
                "\n".join(self._form_line(f.name, f.value, f.enabled) for f in body.fields),
            )
        elif isinstance(body, MultipartFormBody):
            self._add_text(
                "body:multipart-form",
                "\n".join(self._multipart_line(part) for part in body.parts),
            )
        elif isinstance(body, TEXT_BODY_TYPES):
            self._add_text(f"body:{body.type}", body.data)

    @staticmethod
    def _form_line(name: str, value: str, enabled: bool) -> str:
        prefix = "" if enabled else "~"
        if value != value.strip() or value[:1] in ("'", '"'):
            value = _quote(value)
        return f"{prefix}{name}: {value}".rstrip()

    def _multipart_line(self, part: MultipartPart) -> str:
        value = f"@file({part.filename})" if part.filename is not None else part.value
        if part.content_type:
            value = f"{value} @contentType({part.content_type})"
        return self._form_line(part.name, value, part.enabled)

    def _emit_auth(self, auth: Auth) -> None:
        pairs: list[tuple[str, str | None]]
        if isinstance(auth, BearerAuth):
            pairs = [("token", auth.token), ("prefix", auth.prefix)]
        elif isinstance(auth, BasicAuth):
            pairs = [("username", auth.username), ("password", auth.password)]
        elif isinstance(auth, OAuth2Auth):
            pairs = [
                ("access_token", auth.access_token),
                ("token_type", auth.token_type),
                ("refresh_token", auth.refresh_token),
            ]
        elif isinstance(auth, AwsV4Auth):
            pairs = [
                ("accessKeyId", auth.access_key_id),
                ("secretAccessKey", auth.secret_access_key),
                ("region", auth.region),
                ("service", auth.service),
                ("sessionToken", auth.session_token),
            ]
        elif isinstance(auth, DigestAuth):
            pairs = [("username", auth.username), ("password", auth.password), ("realm", auth.realm)]
        elif isinstance(auth, ApiKeyAuth):
            pairs = [("key", auth.key), ("value", auth.value), ("placement", auth.placement)]
        else:
            # inherit/none live in the method block's auth mode
            return
        self._add_map(f"auth:{auth.type}", [(k, v) for k, v in pairs if v is not None])

    def _emit_settings(self, settings: Settings) -> None:
        pairs: list[tuple[str, str]] = []
        if settings.encode_url is not None:
            pairs.append(("encodeUrl", "true" if settings.encode_url else "false"))
        if settings.timeout is not None:
            pairs.append(("timeout", str(settings.timeout)))
        if settings.follow_redirects is not None:
            pairs.append(("followRedirects", "true" if settings.follow_redirects else "false"))
        if pairs:
            self._add_map("settings", pairs)


def emit_source_format(request: Request) -> str:
    """Serialize a Request as `.bru` source.

    Args:
    ----
        request: The request to serialize.

    Returns:
    -------
        `.bru` text ending with a newline.

    """
    return BruEmitter().emit(request)
