"""Shared rendering helpers for the code builders."""

from __future__ import annotations

from typing import Iterable, List, Optional, Sequence

from ..ir.spec import ImplDeclaration, MethodDeclaration, ParameterBinding, ParameterKind, Signature

__all__ = [
    "INDENT",
    "adapter_name",
    "render_class_header",
    "render_def",
    "render_parameter",
    "render_parameters",
    "relocate_body",
    "unused_name",
]

INDENT = "    "


def adapter_name(declaration: ImplDeclaration, suffix: str) -> str:
    return f"{declaration.resolved_interface_name}{suffix}"


def render_parameter(binding: ParameterBinding) -> str:
    if binding.kind is ParameterKind.VAR_POSITIONAL:
        text = f"*{binding.name}"
    elif binding.kind is ParameterKind.VAR_KEYWORD:
        text = f"**{binding.name}"
    else:
        text = binding.name
    if binding.annotation is not None:
        text = f"{text}: {binding.annotation}"
    if binding.default is not None:
        separator = " = " if binding.annotation is not None else "="
        text = f"{text}{separator}{binding.default}"
    return text


def render_parameters(parameters: Sequence[ParameterBinding], receiver: str = "self") -> str:
    """Render a parameter list, inserting ``/`` and ``*`` markers as needed."""
    parts: List[str] = [receiver]
    has_positional_only = any(p.kind is ParameterKind.POSITIONAL_ONLY for p in parameters)
    has_var_positional = any(p.kind is ParameterKind.VAR_POSITIONAL for p in parameters)
    slash_done = not has_positional_only
    star_done = has_var_positional
    for binding in parameters:
        if not slash_done and binding.kind is not ParameterKind.POSITIONAL_ONLY:
            parts.append("/")
            slash_done = True
        if not star_done and binding.kind is ParameterKind.KEYWORD_ONLY:
            parts.append("*")
            star_done = True
        parts.append(render_parameter(binding))
    if not slash_done:
        parts.append("/")
    return ", ".join(parts)


def render_def(
    signature: Signature,
    *,
    decorators: Iterable[str] = (),
    indent: str = INDENT,
    stub: bool = False,
) -> List[str]:
    """Render decorator lines and the ``async def`` header of a method."""
    lines = [f"{indent}@{decorator}" for decorator in decorators]
    keyword = "async def" if signature.is_async else "def"
    header = f"{indent}{keyword} {signature.name}({render_parameters(signature.parameters)})"
    if signature.returns is not None:
        header = f"{header} -> {signature.returns}"
    lines.append(f"{header}: ..." if stub else f"{header}:")
    return lines


def render_class_header(name: str, bases: Optional[str], docstring: str) -> List[str]:
    header = f"class {name}({bases}):" if bases else f"class {name}:"
    return [header, f'{INDENT}"""{docstring}"""']


def relocate_body(method: MethodDeclaration, indent: str) -> List[str]:
    """Move a verbatim body to ``indent``.

    Lines written at the body's original indentation are shifted. Blank lines
    and lines that continue a string literal are kept as they are.
    """
    verbatim = set(method.verbatim_lines)
    lines: List[str] = []
    for index, line in enumerate(method.body.splitlines()):
        if index in verbatim:
            lines.append(line)
        elif line.strip() and line.startswith(method.body_indent):
            lines.append(indent + line[len(method.body_indent):])
        else:
            lines.append(line)
    return lines


def unused_name(preferred: str, taken: Iterable[str]) -> str:
    taken = set(taken)
    name = preferred
    while name in taken:
        name = f"{name}_"
    return name
