"""Intermediate Representation (IR) for parsed `.bru` documents.

The IR sits between the parser and the transformer:

1. Keeps block and entry order exactly as written, duplicates included
2. Keeps number literals as raw text so nothing is reformatted
3. Uses frozen dataclasses, so a parsed document is immutable
"""

from bru_to_oc.ir.document import (
    Annotation,
    Document,
    Entry,
    Value,
    ValueKind,
)

__all__ = [
    "Annotation",
    "Document",
    "Entry",
    "Value",
    "ValueKind",
]
