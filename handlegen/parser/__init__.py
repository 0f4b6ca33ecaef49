"""Parser turning tagged Python classes into handlegen IR."""

from .bodies import SourceText
from .declarations import (
    RESERVED_ATTRIBUTES,
    declaration_from_class,
    dotted_tail,
    parse_declaration,
    visibility_of,
)

__all__ = [
    "RESERVED_ATTRIBUTES",
    "SourceText",
    "declaration_from_class",
    "dotted_tail",
    "parse_declaration",
    "visibility_of",
]
