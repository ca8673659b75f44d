"""Tokenizer for the `.bru` block format.

Newlines are significant, so they come out as tokens. Everything else that is
not a delimiter is read as a word and classified as a boolean, null, number
or plain string. Number tokens keep their source text untouched.

The tokenizer is pull-based: the parser asks for one token at a time and can
switch to raw reading (rest of line, multistring block bodies, triple-quoted
text) at the current position.
"""

from __future__ import annotations

from collections.abc import Iterator
from dataclasses import dataclass
from enum import Enum

from bru_to_oc.errors import DEFAULT_FILE_PATH, BruSyntaxError, ParseErrorKind


class TokenKind(Enum):
    """Token types produced by the tokenizer."""

    L_BRACE = "{"
    R_BRACE = "}"
    L_BRACKET = "["
    R_BRACKET = "]"
    COLON = ":"
    COMMA = ","
    TILDE = "~"
    STRING = "string"
    NUMBER = "number"
    BOOLEAN = "boolean"
    NULL = "null"
    NEWLINE = "newline"
    COMMENT = "comment"
    ANNOTATION = "annotation"
    TRIPLE_QUOTE = '"""'
    EOF = "eof"


SINGLE_CHAR_TOKENS: dict[str, TokenKind] = {
    "{": TokenKind.L_BRACE,
    "}": TokenKind.R_BRACE,
    "[": TokenKind.L_BRACKET,
    "]": TokenKind.R_BRACKET,
    ":": TokenKind.COLON,
    ",": TokenKind.COMMA,
    "~": TokenKind.TILDE,
}

WORD_TERMINATORS = frozenset(" \t\r\n:{}[]#,")
ANNOTATION_NAME_CHARS = frozenset(
    "abcdefghijklmnopqrstuvwxyzABCDEFGHIJKLMNOPQRSTUVWXYZ0123456789_-"
)
DIGITS = frozenset("0123456789")


@dataclass(frozen=True)
class Token:
    """A single token with its 1-based source position."""

    kind: TokenKind
    line: int
    column: int
    lexeme: str

    @property
    def is_quoted(self) -> bool:
        return self.kind is TokenKind.STRING and self.lexeme[:1] in ("'", '"')

    def __repr__(self) -> str:
        return f"Token({self.kind.name}, {self.lexeme!r}, {self.line}:{self.column})"


def is_number(text: str) -> bool:
    """Check whether an unquoted word is a number literal.

    Accepts an optional sign, digits with at most one ``.``, and an optional
    single exponent that may carry its own sign. A lone sign or dot is not a
    number.
    """
    i = 0
    if text[:1] in ("+", "-"):
        i = 1
    if i >= len(text) or not (text[i] in DIGITS or text[i] == "."):
        return False

    seen_digit = seen_dot = seen_exp = False
    while i < len(text):
        c = text[i]
        if c in DIGITS:
            seen_digit = True
        elif c == ".":
            if seen_dot or seen_exp:
                return False
            seen_dot = True
        elif c in ("e", "E"):
            if seen_exp or not seen_digit:
                return False
            seen_exp = True
            if i + 1 < len(text) and text[i + 1] in ("+", "-"):
                i += 1
            if i + 1 >= len(text):
                return False
        else:
            return False
        i += 1
    return seen_digit


def classify_word(word: str) -> TokenKind:
    if word in ("true", "false"):
        return TokenKind.BOOLEAN
    if word == "null":
        return TokenKind.NULL
    if is_number(word):
        return TokenKind.NUMBER
    return TokenKind.STRING


def decode_source(source: bytes | str, file_path: str = DEFAULT_FILE_PATH) -> str:
    """Decode raw bytes as UTF-8, dropping a leading byte-order mark."""
    if isinstance(source, str):
        text = source
    else:
        try:
            text = source.decode("utf-8")
        except UnicodeDecodeError as e:
            line = source.count(b"\n", 0, e.start) + 1
            raise BruSyntaxError.at(
                ParseErrorKind.UNEXPECTED_TOKEN,
                f"source is not valid UTF-8 (byte offset {e.start})",
                line=line,
                column=1,
                file_path=file_path,
            ) from e
    return text.removeprefix("\ufeff")


class Tokenizer:
    """Single-pass scanner over `.bru` source text.

    Usage:
        tokenizer = Tokenizer(text)
        token = tokenizer.next_token()
    """

    def __init__(self, source: str, file_path: str = DEFAULT_FILE_PATH) -> None:
        """Initialize the tokenizer.

        Args:
        ----
            source: Decoded source text.
            file_path: Path used in error diagnostics.

        """
        self.source = source
        self.file_path = file_path
        self.pos = 0
        self.line = 1
        self.column = 1
        self._lines: list[str] | None = None

    @property
    def current_char(self) -> str | None:
        if self.pos >= len(self.source):
            return None
        return self.source[self.pos]

    def peek_raw(self) -> str | None:
        """Return the next raw character without consuming it."""
        return self.current_char

    def advance(self) -> str | None:
        """Consume one character, keeping line and column in step."""
        char = self.current_char
        if char is None:
            return None
        self.pos += 1
        if char == "\n":
            self.line += 1
            self.column = 1
        elif char != "\r":
            self.column += 1
        return char

    def source_line(self, line: int) -> str | None:
        """Return the text of a 1-based source line."""
        if self._lines is None:
            self._lines = self.source.splitlines()
        if 1 <= line <= len(self._lines):
            return self._lines[line - 1]
        return None

    def error(
        self,
        kind: ParseErrorKind,
        message: str,
        line: int | None = None,
        column: int | None = None,
    ) -> BruSyntaxError:
        """Build a syntax error at the given (or current) position."""
        line = self.line if line is None else line
        column = self.column if column is None else column
        return BruSyntaxError.at(
            kind,
            message,
            line=line,
            column=column,
            file_path=self.file_path,
            source_line=self.source_line(line),
        )

    def next_token(self) -> Token:
        """Scan and return the next token.

        Raises
        ------
            BruSyntaxError: On an unterminated string or a nameless annotation.

        """
        self._skip_whitespace()
        line, column = self.line, self.column
        char = self.current_char

        if char is None:
            return Token(TokenKind.EOF, line, column, "")

        if char == "\n":
            self.advance()
            return Token(TokenKind.NEWLINE, line, column, "\n")

        if char in SINGLE_CHAR_TOKENS:
            self.advance()
            return Token(SINGLE_CHAR_TOKENS[char], line, column, char)

        if char == "#":
            start = self.pos
            while self.current_char is not None and self.current_char != "\n":
                self.advance()
            return Token(TokenKind.COMMENT, line, column, self.source[start : self.pos].rstrip("\r"))

        if char == "@":
            return self._read_annotation(line, column)

        if char == '"' and self.source.startswith('"""', self.pos):
            for _ in range(3):
                self.advance()
            return Token(TokenKind.TRIPLE_QUOTE, line, column, '"""')

        if char in ('"', "'"):
            return self._read_quoted(line, column)

        return self._read_word(line, column)

    def _skip_whitespace(self) -> None:
        while self.current_char in (" ", "\t", "\r"):
            self.advance()

    def _read_quoted(self, line: int, column: int) -> Token:
        quote = self.current_char
        start = self.pos
        self.advance()
        while True:
            char = self.current_char
            if char is None or char == "\n":
                raise self.error(
                    ParseErrorKind.UNTERMINATED_STRING,
                    f"unterminated string, expected closing {quote}",
                    line,
                    column,
                )
            self.advance()
            if char == "\\":
                if self.current_char is None or self.current_char == "\n":
                    raise self.error(
                        ParseErrorKind.UNTERMINATED_STRING,
                        f"unterminated string, expected closing {quote}",
                        line,
                        column,
                    )
                self.advance()
            elif char == quote:
                break
        return Token(TokenKind.STRING, line, column, self.source[start : self.pos])

    def _read_word(self, line: int, column: int) -> Token:
        start = self.pos
        while self.current_char is not None and self.current_char not in WORD_TERMINATORS:
            self.advance()
        word = self.source[start : self.pos]
        if not word:
            raise self.error(
                ParseErrorKind.UNEXPECTED_TOKEN,
                f"unexpected character {self.current_char!r}",
                line,
                column,
            )
        return Token(classify_word(word), line, column, word)

    def _read_annotation(self, line: int, column: int) -> Token:
        start = self.pos
        self.advance()
        while self.current_char is not None and self.current_char in ANNOTATION_NAME_CHARS:
            self.advance()
        name_end = self.pos
        if name_end - start == 1:
            raise self.error(
                ParseErrorKind.INVALID_ANNOTATION,
                "expected annotation name after '@'",
                line,
                column,
            )

        while self.current_char in (" ", "\t"):
            self.advance()
        if self.current_char != "(":
            return Token(TokenKind.ANNOTATION, line, column, self.source[start:name_end])

        self.advance()
        while True:
            char = self.current_char
            if char is None or char == "\n":
                raise self.error(
                    ParseErrorKind.INVALID_ANNOTATION,
                    "unclosed annotation argument list",
                    line,
                    column,
                )
            if char in ('"', "'"):
                self._read_quoted(self.line, self.column)
                continue
            self.advance()
            if char == ")":
                break
        return Token(TokenKind.ANNOTATION, line, column, self.source[start : self.pos])

    # Raw reading, used by the parser for content that is not tokenized.

    def read_rest_of_line(self) -> str:
        """Consume text up to (not including) the next newline."""
        start = self.pos
        while self.current_char is not None and self.current_char != "\n":
            self.advance()
        return self.source[start : self.pos].replace("\r", "")

    def read_multistring_block(self, open_line: int, open_column: int) -> str:
        """Read a multistring block body after its opening ``{``.

        Each line loses up to two leading spaces. The block ends at a ``}``
        in column 1, which is consumed.
        """
        if self.source.startswith("\r\n", self.pos):
            self.advance()
            self.advance()
        elif self.current_char == "\n":
            self.advance()

        lines: list[str] = []
        while True:
            if self.current_char is None:
                raise self.error(
                    ParseErrorKind.UNCLOSED_BLOCK,
                    "block is never closed, expected '}' at the start of a line",
                    open_line,
                    open_column,
                )
            indent = 0
            while self.current_char == " ":
                self.advance()
                indent += 1
            if indent == 0 and self.current_char == "}":
                self.advance()
                break

            text = " " * (indent - min(indent, 2)) + self.read_rest_of_line()
            lines.append(text)
            if self.current_char == "\n":
                self.advance()

        return "\n".join(lines)

    def read_triple_quoted(self, open_line: int, open_column: int) -> str:
        """Read verbatim text up to the closing triple quote."""
        end = self.source.find('"""', self.pos)
        if end == -1:
            raise self.error(
                ParseErrorKind.INVALID_MULTISTRING,
                'unterminated """ text',
                open_line,
                open_column,
            )
        text = self.source[self.pos : end].replace("\r", "")
        while self.pos < end + 3:
            self.advance()
        return text


def tokenize(source: bytes | str, *, file_path: str = DEFAULT_FILE_PATH) -> Iterator[Token]:
    """Lazily tokenize `.bru` source.

    Args:
    ----
        source: Raw file bytes (UTF-8) or already decoded text.
        file_path: Path used in error diagnostics.

    Returns:
    -------
        Iterator of tokens ending with exactly one EOF token.

    Raises:
    ------
        BruSyntaxError: When the source contains an invalid token.

    """
    tokenizer = Tokenizer(decode_source(source, file_path), file_path)
    while True:
        token = tokenizer.next_token()
        yield token
        if token.kind is TokenKind.EOF:
            return
