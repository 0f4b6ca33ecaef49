"""Implementation of the interface over a directly held connection."""

from __future__ import annotations

from typing import List

from ..config import GenerationOptions
from ..ir.spec import BackendMapping, ImplDeclaration
from .render import INDENT, adapter_name, relocate_body, render_class_header, render_def

__all__ = ["build_connection_impl"]


def build_connection_impl(
    declaration: ImplDeclaration,
    mapping: BackendMapping,
    options: GenerationOptions,
) -> str:
    """Render the direct-handle adapter.

    Every method of the tagged class lands here with its original parameters,
    decorators and body. Restricted and private methods are kept too, so the
    relocated bodies can keep calling them through ``self``. Attribute
    lookups the adapter cannot answer go to the wrapped connection, which is
    what lets the bodies use ``self`` as the connection.
    """
    name = adapter_name(declaration, options.connection_suffix)
    body_indent = INDENT * 2
    lines: List[str] = render_class_header(
        name,
        declaration.interface_ref,
        f"{declaration.resolved_interface_name} over a directly held {mapping.direct_handle_type}.",
    )
    lines.extend([
        "",
        f'{INDENT}def __init__(self, conn: "{mapping.direct_handle_type}") -> None:',
        f"{body_indent}self.conn = conn",
        "",
        f"{INDENT}def __getattr__(self, name: str) -> typing.Any:",
        f'{body_indent}if name == "conn":',
        f"{body_indent}{INDENT}raise AttributeError(name)",
        f"{body_indent}return getattr(self.conn, name)",
    ])
    for method in declaration.methods:
        lines.append("")
        lines.extend(render_def(method.signature, decorators=method.decorators))
        lines.extend(relocate_body(method, body_indent))
    return "\n".join(lines)
