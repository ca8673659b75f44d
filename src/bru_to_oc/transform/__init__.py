"""Document to Request transformation."""

from bru_to_oc.transform.assertions import format_assertion, parse_assertion
from bru_to_oc.transform.transformer import (
    AUTH_BLOCKS,
    BODY_BLOCKS,
    HTTP_METHODS,
    BruToRequestTransformer,
    transform,
)

__all__ = [
    "AUTH_BLOCKS",
    "BODY_BLOCKS",
    "HTTP_METHODS",
    "BruToRequestTransformer",
    "format_assertion",
    "parse_assertion",
    "transform",
]
