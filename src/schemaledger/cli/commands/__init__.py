"""Command implementations for schemaledger CLI."""

from .apply import add_connection_arguments, handle_apply
from .status import handle_status

__all__ = [
    "add_connection_arguments",
    "handle_apply",
    "handle_status",
]
