"""The ready-to-use wrapper type emitted for the richer variant."""

from __future__ import annotations

from typing import List

from ..config import GenerationOptions
from ..ir.spec import BackendMapping, ImplDeclaration
from ..normalizer import forwarding_names
from .render import INDENT, adapter_name, render_class_header, render_def

__all__ = ["build_wrapper"]


def build_wrapper(
    declaration: ImplDeclaration,
    mapping: BackendMapping,
    options: GenerationOptions,
) -> str:
    """Render a frozen dataclass owning the pool.

    ``Type(pool)`` constructs it; each public method delegates to the pool
    adapter.
    """
    pool_adapter = adapter_name(declaration, options.pool_suffix)
    lines: List[str] = ["@dataclasses.dataclass(frozen=True)"]
    lines.extend(render_class_header(
        declaration.type_name,
        None,
        f"{declaration.resolved_interface_name} backed by an owned {mapping.pooled_handle_type}.",
    ))
    lines.extend(["", f'{INDENT}pool: "{mapping.pooled_handle_type}"'])
    for method in declaration.eligible_methods():
        arguments = ", ".join(forwarding_names(method.signature))
        lines.append("")
        lines.extend(render_def(method.signature, decorators=method.decorators))
        lines.append(f"{INDENT * 2}return await {pool_adapter}(self.pool).{method.name}({arguments})")
    return "\n".join(lines)
