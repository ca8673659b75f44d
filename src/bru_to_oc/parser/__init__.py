"""Tokenizer and parser for the `.bru` block format."""

from bru_to_oc.parser.parser import MULTISTRING_BLOCKS, Parser, parse, strip_quotes
from bru_to_oc.parser.tokenizer import Token, Tokenizer, TokenKind, is_number, tokenize

__all__ = [
    "MULTISTRING_BLOCKS",
    "Parser",
    "Token",
    "TokenKind",
    "Tokenizer",
    "is_number",
    "parse",
    "strip_quotes",
    "tokenize",
]
