"""Quote services."""

from .service import (
    QuotePage,
    create_and_assign_quote,
    delete_quote,
    find_assignment,
    get_quote,
    list_quotes,
)

__all__ = [
    "QuotePage",
    "find_assignment",
    "create_and_assign_quote",
    "list_quotes",
    "get_quote",
    "delete_quote",
]
