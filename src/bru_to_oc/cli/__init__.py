"""CLI module for bru-to-oc."""

from bru_to_oc.cli.error_formatter import ErrorFormatter, ErrorTable, ErrorTree
from bru_to_oc.cli.exception_handler import handle_exceptions
from bru_to_oc.cli_main import app

__all__ = [
    "app",
    "ErrorFormatter",
    "ErrorTable",
    "ErrorTree",
    "handle_exceptions",
]
