"""Recursive-descent parser turning `.bru` source into a Document."""

from __future__ import annotations

import logging

from bru_to_oc.errors import DEFAULT_FILE_PATH, BruSyntaxError, ParseErrorKind
from bru_to_oc.ir.document import Annotation, Document, Entry, Value
from bru_to_oc.parser.tokenizer import Token, Tokenizer, TokenKind, decode_source, tokenize

logger = logging.getLogger(__name__)

# Blocks whose body is captured as raw text instead of key/value entries.
MULTISTRING_BLOCKS = frozenset(
    {
        "body:json",
        "body:xml",
        "body:text",
        "body:graphql",
        "body:graphql:vars",
        "body:sparql",
        "body:form-urlencoded",
        "body:multipart-form",
        "script:pre-request",
        "script:post-response",
        "tests",
        "docs",
    }
)

KEY_KINDS = frozenset({TokenKind.STRING, TokenKind.NUMBER})
SCALAR_KINDS = frozenset({TokenKind.STRING, TokenKind.NUMBER, TokenKind.BOOLEAN, TokenKind.NULL})


def strip_quotes(text: str) -> str:
    """Remove one pair of matching surrounding quotes."""
    if len(text) >= 2 and text[0] == text[-1] and text[0] in ('"', "'"):
        return text[1:-1]
    return text


def _describe(token: Token) -> str:
    if token.kind is TokenKind.EOF:
        return "end of input"
    if token.kind is TokenKind.NEWLINE:
        return "end of line"
    return repr(token.lexeme)


class Parser:
    """Parse a `.bru` file into the generic Document IR.

    The parser pulls tokens one at a time and never buffers ahead, so it can
    hand the tokenizer over to raw reading right after a ``{`` that opens a
    multistring block.

    Usage:
        document = Parser(text, "request.bru").parse_document()
    """

    def __init__(self, source: str, file_path: str = DEFAULT_FILE_PATH) -> None:
        """Initialize the parser.

        Args:
        ----
            source: Decoded `.bru` text.
            file_path: Path used in error diagnostics.

        """
        self.tokenizer = Tokenizer(source, file_path)
        self.file_path = file_path

    def parse_document(self) -> Document:
        """Parse every top-level block.

        Returns
        -------
            The parsed Document.

        Raises
        ------
            BruSyntaxError: On the first syntax error. No partial document is
                returned.

        """
        entries: list[Entry] = []
        comments: list[str] = []
        pending: list[Annotation] = []

        while True:
            token = self._next()
            if token.kind is TokenKind.NEWLINE:
                continue
            if token.kind is TokenKind.COMMENT:
                comments.append(_comment_text(token.lexeme))
                continue
            if token.kind is TokenKind.ANNOTATION:
                pending.append(self._parse_annotation(token))
                continue
            if token.kind is TokenKind.EOF:
                break
            if token.kind is not TokenKind.STRING or token.is_quoted:
                raise self._error(
                    ParseErrorKind.UNEXPECTED_TOKEN,
                    f"expected a block name, found {_describe(token)}",
                    token,
                )
            entry = self._parse_block(token, tuple(pending))
            pending = []
            logger.debug("Parsed block %r at line %d", entry.key, entry.line)
            entries.append(entry)

        return Document(tuple(entries), tuple(comments))

    def _next(self) -> Token:
        return self.tokenizer.next_token()

    def _error(self, kind: ParseErrorKind, message: str, token: Token) -> BruSyntaxError:
        return self.tokenizer.error(kind, message, token.line, token.column)

    def _parse_block(self, name_token: Token, annotations: tuple[Annotation, ...]) -> Entry:
        name = name_token.lexeme
        token = self._next()
        while token.kind is TokenKind.COLON:
            qualifier = self._next()
            if qualifier.kind not in KEY_KINDS or qualifier.is_quoted:
                raise self._error(
                    ParseErrorKind.UNEXPECTED_TOKEN,
                    f"expected a qualifier after '{name}:', found {_describe(qualifier)}",
                    qualifier,
                )
            name = f"{name}:{qualifier.lexeme}"
            token = self._next()

        while token.kind is TokenKind.NEWLINE:
            token = self._next()

        if token.kind is TokenKind.L_BRACE:
            if name in MULTISTRING_BLOCKS:
                text = self.tokenizer.read_multistring_block(token.line, token.column)
                value = Value.multistring(text)
            else:
                value = self._parse_map(token)
        elif token.kind is TokenKind.L_BRACKET:
            value = self._parse_array(token)
        else:
            raise self._error(
                ParseErrorKind.UNEXPECTED_TOKEN,
                f"expected '{{' or '[' after block name '{name}', found {_describe(token)}",
                token,
            )
        return Entry(name, value, annotations, False, name_token.line)

    def _parse_map(self, open_token: Token) -> Value:
        entries: list[Entry] = []
        pending: list[Annotation] = []

        while True:
            token = self._next()
            kind = token.kind
            if kind in (TokenKind.NEWLINE, TokenKind.COMMENT):
                continue
            if kind is TokenKind.R_BRACE:
                break
            if kind is TokenKind.EOF:
                raise self._error(
                    ParseErrorKind.UNCLOSED_BLOCK,
                    "block is never closed, expected '}'",
                    open_token,
                )
            if kind is TokenKind.ANNOTATION:
                pending.append(self._parse_annotation(token))
                continue

            disabled = kind is TokenKind.TILDE
            if disabled:
                token = self._next()
            if token.kind not in KEY_KINDS:
                expected = "a key after '~'" if disabled else "a key or '}'"
                raise self._error(
                    ParseErrorKind.UNEXPECTED_TOKEN,
                    f"expected {expected}, found {_describe(token)}",
                    token,
                )

            key = strip_quotes(token.lexeme)
            colon = self._next()
            if colon.kind is not TokenKind.COLON:
                raise self._error(
                    ParseErrorKind.MISSING_COLON,
                    f"expected ':' after key '{key}'",
                    colon,
                )
            value = self._parse_value()
            entries.append(Entry(key, value, tuple(pending), disabled, token.line))
            pending = []

        return Value.map(entries)

    def _parse_value(self) -> Value:
        token = self._next()
        kind = token.kind

        if kind in (TokenKind.NEWLINE, TokenKind.EOF):
            return Value.null()

        if token.is_quoted:
            return Value.string(strip_quotes(token.lexeme))

        if kind in SCALAR_KINDS:
            rest = self.tokenizer.read_rest_of_line()
            if kind is TokenKind.STRING or rest.strip():
                return Value.string((token.lexeme + rest).rstrip(" \t"))
            if kind is TokenKind.NUMBER:
                return Value.number(token.lexeme)
            if kind is TokenKind.BOOLEAN:
                return Value.boolean(token.lexeme == "true")
            return Value.null()

        if kind is TokenKind.L_BRACKET:
            return self._parse_array(token)

        if kind is TokenKind.L_BRACE:
            # "{{var}}" is a template placeholder, not a nested map
            if self.tokenizer.peek_raw() == "{":
                return Value.string(("{" + self.tokenizer.read_rest_of_line()).rstrip(" \t"))
            return self._parse_map(token)

        if kind is TokenKind.TRIPLE_QUOTE:
            return Value.multistring(self.tokenizer.read_triple_quoted(token.line, token.column))

        if kind is TokenKind.R_BRACE:
            raise self._error(
                ParseErrorKind.UNEXPECTED_TOKEN,
                "expected a value before '}'",
                token,
            )

        return Value.string((token.lexeme + self.tokenizer.read_rest_of_line()).rstrip(" \t"))

    def _parse_array(self, open_token: Token) -> Value:
        items: list[Value] = []

        while True:
            token = self._next()
            kind = token.kind
            if kind in (TokenKind.NEWLINE, TokenKind.COMMENT, TokenKind.COMMA):
                continue
            if kind is TokenKind.R_BRACKET:
                break
            if kind is TokenKind.EOF:
                raise self._error(
                    ParseErrorKind.UNCLOSED_BLOCK,
                    "array is never closed, expected ']'",
                    open_token,
                )
            if kind in SCALAR_KINDS:
                items.append(_literal(token))
            elif kind is TokenKind.L_BRACKET:
                items.append(self._parse_array(token))
            elif kind is TokenKind.L_BRACE:
                items.append(self._parse_map(token))
            else:
                raise self._error(
                    ParseErrorKind.UNEXPECTED_TOKEN,
                    f"unexpected {_describe(token)} in array",
                    token,
                )

        return Value.array(items)

    def _parse_annotation(self, token: Token) -> Annotation:
        text = token.lexeme[1:]
        paren = text.find("(")
        if paren == -1:
            return Annotation(text)

        name = text[:paren].rstrip(" \t")
        inner = text[paren + 1 : -1]
        args: list[Value] = []
        try:
            for arg in tokenize(inner, file_path=self.file_path):
                if arg.kind is TokenKind.EOF:
                    break
                if arg.kind is TokenKind.COMMA:
                    continue
                if arg.kind not in SCALAR_KINDS:
                    raise self._error(
                        ParseErrorKind.INVALID_ANNOTATION,
                        f"invalid argument {arg.lexeme!r} in annotation '@{name}'",
                        token,
                    )
                args.append(_literal(arg))
        except BruSyntaxError as e:
            if e.kind is ParseErrorKind.INVALID_ANNOTATION:
                raise
            raise self._error(
                ParseErrorKind.INVALID_ANNOTATION,
                f"invalid arguments in annotation '@{name}': {e.message}",
                token,
            ) from e
        return Annotation(name, tuple(args))


def _literal(token: Token) -> Value:
    if token.kind is TokenKind.NUMBER:
        return Value.number(token.lexeme)
    if token.kind is TokenKind.BOOLEAN:
        return Value.boolean(token.lexeme == "true")
    if token.kind is TokenKind.NULL:
        return Value.null()
    return Value.string(strip_quotes(token.lexeme))


def _comment_text(lexeme: str) -> str:
    text = lexeme[1:]
    return text[1:] if text.startswith(" ") else text


def parse(source: bytes | str, *, file_path: str = DEFAULT_FILE_PATH) -> Document:
    """Parse `.bru` source into a Document.

    Args:
    ----
        source: Raw file bytes (UTF-8) or decoded text.
        file_path: Path used in error diagnostics.

    Returns:
    -------
        The parsed Document.

    Raises:
    ------
        BruSyntaxError: If the source is malformed.

    """
    return Parser(decode_source(source, file_path), file_path).parse_document()
