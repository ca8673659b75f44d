"""bru-to-oc: Converter from Bruno `.bru` request files to OpenCollection YAML.

This package provides tools for:
- Tokenizing and parsing `.bru` files into a generic block document
- Transforming documents into a canonical Request model
- Emitting OpenCollection YAML, reading it back and regenerating `.bru`

Quick Start:
    >>> from bru_to_oc import parse, transform, emit_yaml
    >>>
    >>> doc = parse(open("get-users.bru", "rb").read())
    >>> request = transform(doc)
    >>> print(emit_yaml(request))

Modules:
    parser: Tokenizer and block parser for `.bru` source
    ir: Generic document produced by the parser
    models: Pydantic Request model shared by both formats
    transform: Document to Request mapping
    converters: YAML emitter, YAML reader and `.bru` emitter
    validation: Checks on emitted YAML
    batch: File and directory conversion
    cli: Command-line interface
"""

from bru_to_oc.converters import emit_source_format, emit_yaml, parse_yaml
from bru_to_oc.parser import parse, tokenize
from bru_to_oc.transform import transform

__version__ = "0.1.0"

__all__ = [
    "__version__",
    "emit_source_format",
    "emit_yaml",
    "parse",
    "parse_yaml",
    "tokenize",
    "transform",
]
