"""Implementation of the interface over a connection pool."""

from __future__ import annotations

from typing import List

from ..config import GenerationOptions
from ..ir.spec import BackendMapping, ImplDeclaration
from ..normalizer import forwarding_names
from .render import INDENT, adapter_name, render_class_header, render_def, unused_name

__all__ = ["build_pool_impl"]


def build_pool_impl(
    declaration: ImplDeclaration,
    mapping: BackendMapping,
    options: GenerationOptions,
) -> str:
    """Render the pooled-handle adapter.

    Each eligible method acquires a connection, calls the same method on the
    direct-handle adapter and returns its result; the connection goes back
    to the pool when the call completes or raises. Acquisition is the only
    await point added here, and failures of either step reach the caller
    untouched.
    """
    name = adapter_name(declaration, options.pool_suffix)
    connection_adapter = adapter_name(declaration, options.connection_suffix)
    body_indent = INDENT * 2
    lines: List[str] = render_class_header(
        name,
        declaration.interface_ref,
        f"{declaration.resolved_interface_name} over an {mapping.pooled_handle_type}, "
        f"using one connection per call.",
    )
    lines.extend([
        "",
        f'{INDENT}def __init__(self, pool: "{mapping.pooled_handle_type}") -> None:',
        f"{body_indent}self.pool = pool",
    ])
    for method in declaration.eligible_methods():
        conn = unused_name("conn", (binding.name for binding in method.signature.parameters))
        arguments = ", ".join(forwarding_names(method.signature))
        lines.append("")
        lines.extend(render_def(method.signature, decorators=method.decorators))
        lines.append(f"{body_indent}async with self.pool.acquire() as {conn}:")
        lines.append(
            f"{body_indent}{INDENT}return await {connection_adapter}({conn}).{method.name}({arguments})"
        )
    return "\n".join(lines)
