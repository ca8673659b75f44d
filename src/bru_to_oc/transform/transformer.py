"""Map a parsed `.bru` Document onto the canonical Request model."""

from __future__ import annotations

import logging
import re
from collections.abc import Callable

from bru_to_oc.errors import DEFAULT_FILE_PATH, TransformError, TransformErrorKind
from bru_to_oc.ir.document import Document, Entry, Value, ValueKind
from bru_to_oc.models.auth import (
    ApiKeyAuth,
    Auth,
    AwsV4Auth,
    BasicAuth,
    BearerAuth,
    DigestAuth,
    InheritAuth,
    NoAuth,
    OAuth2Auth,
)
from bru_to_oc.models.body import (
    Body,
    FormUrlEncodedBody,
    GraphQLBody,
    JsonBody,
    MultipartFormBody,
    SparqlBody,
    TextBody,
    XmlBody,
)
from bru_to_oc.models.http import FormField, Header, MultipartPart, Param, ParamType
from bru_to_oc.models.request import Docs, Http, Info, Request, Settings
from bru_to_oc.models.runtime import Assertion, Runtime, Script, ScriptType, Var, VarScope
from bru_to_oc.parser.parser import strip_quotes
from bru_to_oc.transform.assertions import parse_assertion

logger = logging.getLogger(__name__)

HTTP_METHODS = ("get", "post", "put", "delete", "patch", "head", "options", "trace", "connect")

# Priority order: the first block present wins.
BODY_BLOCKS = (
    "body:json",
    "body:xml",
    "body:text",
    "body:graphql",
    "body:sparql",
    "body:form-urlencoded",
    "body:multipart-form",
)
AUTH_BLOCKS = (
    "auth:bearer",
    "auth:basic",
    "auth:oauth2",
    "auth:awsv4",
    "auth:digest",
    "auth:apikey",
)

PARAM_BLOCKS = (("params:query", ParamType.QUERY), ("params:path", ParamType.PATH))
SCRIPT_BLOCKS = (
    ("script:pre-request", ScriptType.BEFORE_REQUEST),
    ("script:post-response", ScriptType.AFTER_RESPONSE),
    ("tests", ScriptType.TESTS),
)
VAR_BLOCKS = (
    ("vars:pre-request", VarScope.BEFORE_REQUEST),
    ("vars:post-response", VarScope.AFTER_RESPONSE),
)

FILE_VALUE = re.compile(r"^@file\((?P<path>[^)]*)\)")
CONTENT_TYPE_SUFFIX = re.compile(r"\s*@contentType\((?P<type>[^)]*)\)\s*$")

APIKEY_PLACEMENTS = {"header": "header", "query": "query", "queryparams": "query"}


def _lookup(value: Value, key: str) -> Entry | None:
    return value.get_first(key)


class BruToRequestTransformer:
    """Transform a parsed Document into a Request.

    Blocks are looked up by name, first match wins. Body and auth blocks
    are resolved in a fixed priority order and later matches are ignored,
    unless ``strict`` is set, in which case more than one candidate is an
    error.

    Usage:
        transformer = BruToRequestTransformer()
        request = transformer.transform(document)
    """

    def __init__(self, *, strict: bool = False, file_path: str = DEFAULT_FILE_PATH) -> None:
        """Initialize the transformer.

        Args:
        ----
            strict: Reject documents with competing body, auth or method blocks.
            file_path: Path used in error diagnostics.

        """
        self.strict = strict
        self.file_path = file_path

    def transform(self, doc: Document) -> Request:
        """Transform a Document to a Request.

        Args:
        ----
            doc: Parsed `.bru` document.

        Returns:
        -------
            The canonical Request.

        Raises:
        ------
            TransformError: When no method block with a url is present, or a
                block holds a value of the wrong shape.

        """
        if self.strict:
            self._check_conflicts(doc)

        logger.debug("Transforming blocks: %s", ", ".join(doc.block_names))
        method, method_block = self._find_method_block(doc)
        url_entry = self._find_url(doc)
        if url_entry is None:
            raise self._error(
                TransformErrorKind.MISSING_REQUIRED_FIELD,
                "no HTTP method block has a 'url' entry",
                method_block,
            )

        http = Http(
            method=method,
            url=self._text(url_entry),
            headers=self._process_headers(doc),
            params=self._process_params(doc),
            body=self._process_body(doc),
            auth=self._process_auth(doc, method_block),
        )

        runtime = Runtime(
            scripts=self._process_scripts(doc),
            assertions=self._process_assertions(doc),
            vars=self._process_vars(doc),
        )

        return Request(
            info=self._process_info(doc),
            http=http,
            runtime=None if runtime.is_empty else runtime,
            settings=self._process_settings(doc),
            docs=self._process_docs(doc),
            comments=doc.comments,
        )

    def _error(
        self, kind: TransformErrorKind, message: str, entry: Entry | None = None
    ) -> TransformError:
        line = entry.line if entry is not None else 0
        return TransformError.at(
            kind, message, line=line, column=1 if line else 0, file_path=self.file_path
        )

    def _check_conflicts(self, doc: Document) -> None:
        groups = (
            ("HTTP method", HTTP_METHODS),
            ("body", BODY_BLOCKS),
            ("auth", AUTH_BLOCKS),
        )
        for label, names in groups:
            present = [entry for name in names if (entry := doc.get_first(name)) is not None]
            if len(present) > 1:
                listed = ", ".join(entry.key for entry in present)
                raise self._error(
                    TransformErrorKind.CONFLICTING_BLOCKS,
                    f"more than one {label} block: {listed}",
                    present[1],
                )

    def _block(self, doc: Document, name: str) -> Entry | None:
        """Return a block that must hold key/value entries."""
        entry = doc.get_first(name)
        if entry is not None and entry.value.kind is not ValueKind.MAP:
            raise self._error(
                TransformErrorKind.UNSUPPORTED_FEATURE,
                f"block '{name}' must contain key/value entries",
                entry,
            )
        return entry

    def _text(self, entry: Entry) -> str:
        text = entry.value.as_text()
        if text is None:
            raise self._error(
                TransformErrorKind.INVALID_FIELD_VALUE,
                f"'{entry.key}' must be a single value, not a {entry.value.kind.value}",
                entry,
            )
        return text

    def _optional_text(self, block: Value, key: str) -> str | None:
        entry = _lookup(block, key)
        return None if entry is None else self._text(entry)

    def _required_text(self, block: Value, key: str) -> str:
        return self._optional_text(block, key) or ""

    def _is_enabled(self, entry: Entry) -> bool:
        annotation = entry.get_annotation("disabled")
        if annotation is not None and annotation.args:
            raise self._error(
                TransformErrorKind.ANNOTATION_RESOLUTION_FAILED,
                f"'@disabled' takes no arguments (on '{entry.key}')",
                entry,
            )
        return not (entry.disabled or annotation is not None)

    def _find_method_block(self, doc: Document) -> tuple[str, Entry]:
        for method in HTTP_METHODS:
            entry = self._block(doc, method)
            if entry is not None:
                return method, entry
        raise self._error(
            TransformErrorKind.MISSING_REQUIRED_FIELD,
            f"no HTTP method block found (expected one of: {', '.join(HTTP_METHODS)})",
        )

    def _find_url(self, doc: Document) -> Entry | None:
        """Return the first 'url' entry across method blocks, in priority order."""
        for method in HTTP_METHODS:
            block = self._block(doc, method)
            if block is not None and (url := _lookup(block.value, "url")) is not None:
                return url
        return None

    def _process_info(self, doc: Document) -> Info:
        meta = self._block(doc, "meta")
        if meta is None:
            return Info()

        seq: int | None = None
        seq_entry = _lookup(meta.value, "seq")
        if seq_entry is not None and not seq_entry.value.is_null:
            try:
                seq = int(self._text(seq_entry))
            except ValueError:
                raise self._error(
                    TransformErrorKind.INVALID_FIELD_VALUE,
                    f"'seq' must be an integer, got {seq_entry.value.as_text()!r}",
                    seq_entry,
                ) from None

        tags: tuple[str, ...] | None = None
        tags_entry = _lookup(meta.value, "tags")
        if tags_entry is not None:
            if tags_entry.value.kind is not ValueKind.ARRAY:
                raise self._error(
                    TransformErrorKind.INVALID_FIELD_VALUE,
                    "'tags' must be a list, e.g. tags: [smoke, users]",
                    tags_entry,
                )
            tags = tuple(t for item in tags_entry.value.items if (t := item.as_text()))

        return Info(
            name=self._optional_text(meta.value, "name") or "untitled",
            type=self._optional_text(meta.value, "type") or "http",
            seq=seq,
            tags=tags or None,
        )

    def _process_headers(self, doc: Document) -> tuple[Header, ...] | None:
        block = self._block(doc, "headers")
        if block is None:
            return None
        headers = tuple(
            Header(name=e.key, value=self._text(e), enabled=self._is_enabled(e))
            for e in block.value.entries
        )
        return headers or None

    def _process_params(self, doc: Document) -> tuple[Param, ...] | None:
        params: list[Param] = []
        for name, param_type in PARAM_BLOCKS:
            block = self._block(doc, name)
            if block is None:
                continue
            params.extend(
                Param(
                    name=e.key,
                    value=self._text(e),
                    type=param_type,
                    enabled=self._is_enabled(e),
                )
                for e in block.value.entries
            )
        return tuple(params) or None

    def _process_body(self, doc: Document) -> Body | None:
        for name in BODY_BLOCKS:
            entry = doc.get_first(name)
            if entry is None:
                continue
            text = entry.value.as_string()
            if text is None:
                continue
            logger.debug("Body resolved from block %r", name)
            return self._build_body(doc, entry, text)
        return None

    def _build_body(self, doc: Document, entry: Entry, text: str) -> Body:
        kind = entry.key.split(":", 1)[1]
        if kind == "json":
            return JsonBody(data=text)
        if kind == "xml":
            return XmlBody(data=text)
        if kind == "text":
            return TextBody(data=text)
        if kind == "sparql":
            return SparqlBody(data=text)
        if kind == "graphql":
            variables = doc.get_first("body:graphql:vars")
            return GraphQLBody(
                query=text,
                variables=variables.value.as_string() if variables is not None else None,
            )
        if kind == "form-urlencoded":
            return FormUrlEncodedBody(
                fields=tuple(
                    FormField(name=name, value=value, enabled=enabled)
                    for name, value, enabled in self._form_lines(entry, text)
                )
            )
        return MultipartFormBody(
            parts=tuple(
                self._multipart_part(name, value, enabled)
                for name, value, enabled in self._form_lines(entry, text)
            )
        )

    def _form_lines(self, entry: Entry, text: str) -> list[tuple[str, str, bool]]:
        """Split form body text into (name, value, enabled) rows."""
        rows: list[tuple[str, str, bool]] = []
        for offset, raw in enumerate(text.split("\n"), start=1):
            line = raw.strip()
            if not line:
                continue
            enabled = not line.startswith("~")
            if not enabled:
                line = line[1:].lstrip()
            name, sep, value = line.partition(":")
            if not sep or not name.strip():
                raise TransformError.at(
                    TransformErrorKind.INVALID_FIELD_VALUE,
                    f"expected 'name: value' in '{entry.key}', got {raw.strip()!r}",
                    line=entry.line + offset,
                    column=1,
                    file_path=self.file_path,
                    source_line=raw,
                )
            rows.append((strip_quotes(name.strip()), strip_quotes(value.strip()), enabled))
        return rows

    @staticmethod
    def _multipart_part(name: str, value: str, enabled: bool) -> MultipartPart:
        content_type = None
        match = CONTENT_TYPE_SUFFIX.search(value)
        if match:
            content_type = match["type"]
            value = value[: match.start()]

        filename = None
        match = FILE_VALUE.match(value)
        if match:
            filename = match["path"]
            value = filename

        return MultipartPart(
            name=name,
            value=value,
            filename=filename,
            content_type=content_type,
            enabled=enabled,
        )

    def _process_auth(self, doc: Document, method_block: Entry) -> Auth | None:
        builders: dict[str, Callable[[Value], Auth]] = {
            "auth:bearer": self._bearer,
            "auth:basic": self._basic,
            "auth:oauth2": self._oauth2,
            "auth:awsv4": self._awsv4,
            "auth:digest": self._digest,
            "auth:apikey": self._apikey,
        }
        for name in AUTH_BLOCKS:
            entry = doc.get_first(name)
            if entry is None or entry.value.kind is not ValueKind.MAP:
                continue
            logger.debug("Auth resolved from block %r", name)
            return builders[name](entry.value)

        mode = self._optional_text(method_block.value, "auth")
        if mode == "inherit":
            return InheritAuth()
        if mode == "none":
            return NoAuth()
        return None

    def _bearer(self, block: Value) -> Auth:
        return BearerAuth(
            token=self._required_text(block, "token"),
            prefix=self._optional_text(block, "prefix"),
        )

    def _basic(self, block: Value) -> Auth:
        return BasicAuth(
            username=self._required_text(block, "username"),
            password=self._required_text(block, "password"),
        )

    def _oauth2(self, block: Value) -> Auth:
        return OAuth2Auth(
            access_token=self._required_text(block, "access_token"),
            token_type=self._optional_text(block, "token_type"),
            refresh_token=self._optional_text(block, "refresh_token"),
        )

    def _awsv4(self, block: Value) -> Auth:
        return AwsV4Auth(
            access_key_id=self._required_text(block, "accessKeyId"),
            secret_access_key=self._required_text(block, "secretAccessKey"),
            region=self._required_text(block, "region"),
            service=self._required_text(block, "service"),
            session_token=self._optional_text(block, "sessionToken"),
        )

    def _digest(self, block: Value) -> Auth:
        return DigestAuth(
            username=self._required_text(block, "username"),
            password=self._required_text(block, "password"),
            realm=self._optional_text(block, "realm"),
        )

    def _apikey(self, block: Value) -> Auth:
        placement_entry = _lookup(block, "placement")
        placement = "header"
        if placement_entry is not None:
            raw = self._text(placement_entry)
            if raw not in APIKEY_PLACEMENTS:
                raise self._error(
                    TransformErrorKind.INVALID_FIELD_VALUE,
                    f"api key placement must be 'header' or 'query', got {raw!r}",
                    placement_entry,
                )
            placement = APIKEY_PLACEMENTS[raw]
        return ApiKeyAuth(
            key=self._required_text(block, "key"),
            value=self._required_text(block, "value"),
            placement=placement,
        )

    def _process_scripts(self, doc: Document) -> tuple[Script, ...] | None:
        scripts: list[Script] = []
        for name, script_type in SCRIPT_BLOCKS:
            entry = doc.get_first(name)
            if entry is None:
                continue
            code = entry.value.as_string()
            if code is not None:
                scripts.append(Script(type=script_type, code=code))
        return tuple(scripts) or None

    def _process_assertions(self, doc: Document) -> tuple[Assertion, ...] | None:
        block = self._block(doc, "assert")
        if block is None:
            return None
        assertions: list[Assertion] = []
        for entry in block.value.entries:
            operator, expected = parse_assertion(self._text(entry))
            assertions.append(
                Assertion(
                    expression=entry.key,
                    operator=operator,
                    value=expected,
                    enabled=self._is_enabled(entry),
                )
            )
        return tuple(assertions) or None

    def _process_vars(self, doc: Document) -> tuple[Var, ...] | None:
        variables: list[Var] = []
        for name, scope in VAR_BLOCKS:
            block = self._block(doc, name)
            if block is None:
                continue
            variables.extend(
                Var(name=e.key, value=self._text(e), scope=scope, enabled=self._is_enabled(e))
                for e in block.value.entries
            )
        return tuple(variables) or None

    def _process_settings(self, doc: Document) -> Settings | None:
        block = self._block(doc, "settings")
        if block is None:
            return None

        def flag(key: str) -> bool | None:
            entry = _lookup(block.value, key)
            if entry is None:
                return None
            value = entry.value.as_bool()
            if value is None:
                raise self._error(
                    TransformErrorKind.INVALID_FIELD_VALUE,
                    f"'{key}' must be true or false",
                    entry,
                )
            return value

        timeout: int | None = None
        timeout_entry = _lookup(block.value, "timeout")
        if timeout_entry is not None:
            text = self._text(timeout_entry)
            if not text.isdigit():
                raise self._error(
                    TransformErrorKind.INVALID_FIELD_VALUE,
                    f"'timeout' must be a non-negative integer, got {text!r}",
                    timeout_entry,
                )
            timeout = int(text)

        settings = Settings(
            encode_url=flag("encodeUrl"),
            timeout=timeout,
            follow_redirects=flag("followRedirects"),
        )
        return None if settings.is_empty else settings

    def _process_docs(self, doc: Document) -> Docs | None:
        entry = doc.get_first("docs")
        if entry is None:
            return None
        content = entry.value.as_string()
        return Docs(content=content) if content is not None else None


def transform(
    doc: Document, *, strict: bool = False, file_path: str = DEFAULT_FILE_PATH
) -> Request:
    """Transform a parsed Document into a Request.

    Args:
    ----
        doc: Parsed `.bru` document.
        strict: Reject competing body, auth or method blocks instead of
            taking the first by priority.
        file_path: Path used in error diagnostics.

    Returns:
    -------
        The canonical Request.

    """
    return BruToRequestTransformer(strict=strict, file_path=file_path).transform(doc)
