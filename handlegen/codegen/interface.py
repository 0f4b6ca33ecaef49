"""Interface synthesis: the ``typing.Protocol`` callers program against."""

from __future__ import annotations

from typing import List

from ..ir.spec import ImplDeclaration
from ..normalizer import normalize_signature
from .render import INDENT, render_class_header, render_def

__all__ = ["build_interface"]


def build_interface(declaration: ImplDeclaration) -> str:
    """Render the capability interface for ``declaration``.

    Only eligible methods appear, with normalized signatures and no bodies.
    Decorators are dropped: a decorator written for the concrete method may
    not be valid on a protocol member.
    """
    bases = "typing.Protocol"
    if declaration.type_params:
        bases = f"typing.Protocol[{declaration.type_params}]"

    lines: List[str] = render_class_header(
        declaration.resolved_interface_name,
        bases,
        f"Database operations of {declaration.type_name}.",
    )
    methods = declaration.eligible_methods()
    if not methods:
        lines.append(f"{INDENT}pass")
    for method in methods:
        lines.append("")
        lines.extend(render_def(normalize_signature(method.signature), stub=True))
    return "\n".join(lines)
