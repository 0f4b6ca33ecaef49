"""
Whole-module expansion.

Finds every top-level class tagged with the marker decorator, generates its
artifacts and splices the output unit over the class's source span. All
classes are generated before the first splice, so an error leaves nothing
half-written.
"""

from __future__ import annotations

import ast
import logging
from pathlib import Path
from typing import List, Optional, Tuple

from .codegen import generate_artifacts
from .codegen.assembler import assemble, render_imports
from .config import GenerationOptions
from .errors import InvalidInputShape
from .ir.spec import GeneratedArtifactSet, ImplDeclaration
from .parser import SourceText, declaration_from_class, dotted_tail

__all__ = ["expand_file", "expand_source", "find_tagged_classes", "tagged_declarations"]

logger = logging.getLogger(__name__)


def _marker_of(node: ast.AST, marker: str) -> Optional[ast.expr]:
    for decorator in getattr(node, "decorator_list", ()):
        target = decorator.func if isinstance(decorator, ast.Call) else decorator
        if dotted_tail(target) == marker:
            return decorator
    return None


def _backend_token(decorator: ast.expr, marker: str, path: Optional[str]) -> str:
    if not isinstance(decorator, ast.Call):
        raise InvalidInputShape(
            f"@{marker} requires a backend argument",
            path=path,
            line=decorator.lineno,
            hint=f'Write @{marker}("Postgres") or @{marker}("MySql")',
        )
    if len(decorator.args) != 1 or decorator.keywords:
        raise InvalidInputShape(
            f"@{marker} takes exactly one backend argument",
            path=path,
            line=decorator.lineno,
        )
    argument = decorator.args[0]
    if isinstance(argument, ast.Constant) and isinstance(argument.value, str):
        return argument.value
    token = dotted_tail(argument)
    if token is None:
        raise InvalidInputShape(
            f"@{marker} expects a backend name such as \"Postgres\"",
            path=path,
            line=decorator.lineno,
        )
    return token


def find_tagged_classes(
    module: ast.Module,
    marker: str,
    *,
    path: Optional[str] = None,
) -> List[Tuple[ast.ClassDef, str]]:
    """Return ``(class_node, backend_token)`` for every tagged class.

    A marker on anything other than a top-level class is an error.
    """
    tagged: List[Tuple[ast.ClassDef, str]] = []
    for node in module.body:
        decorator = _marker_of(node, marker)
        if decorator is None:
            continue
        if not isinstance(node, ast.ClassDef):
            raise InvalidInputShape(
                f"@{marker} must decorate a class, not '{getattr(node, 'name', type(node).__name__)}'",
                path=path,
                line=node.lineno,
            )
        tagged.append((node, _backend_token(decorator, marker, path)))
    return tagged


def _insertion_line(module: ast.Module) -> int:
    """0-based line index after the module docstring and ``__future__`` imports."""
    line = 0
    for index, node in enumerate(module.body):
        is_docstring = (
            index == 0
            and isinstance(node, ast.Expr)
            and isinstance(node.value, ast.Constant)
            and isinstance(node.value.value, str)
        )
        is_future = isinstance(node, ast.ImportFrom) and node.module == "__future__"
        if not (is_docstring or is_future):
            break
        line = node.end_lineno
    return line


def _parse_module(source: str, path: Optional[str]) -> ast.Module:
    try:
        return ast.parse(source, filename=path or "<module>")
    except SyntaxError as exc:
        raise InvalidInputShape(
            f"Input is not valid Python: {exc.msg}",
            path=path,
            line=exc.lineno,
            column=exc.offset,
        ) from exc


def tagged_declarations(
    source: str,
    *,
    path: Optional[str] = None,
    options: Optional[GenerationOptions] = None,
) -> List[ImplDeclaration]:
    """Parse every tagged class of a module without generating anything."""
    options = options or GenerationOptions()
    module = _parse_module(source, path)
    text = SourceText(source)
    return [
        declaration_from_class(node, text, backend, path=path)
        for node, backend in find_tagged_classes(module, options.marker, path=path)
    ]


def expand_source(
    source: str,
    *,
    path: Optional[str] = None,
    options: Optional[GenerationOptions] = None,
    header: Optional[str] = None,
) -> str:
    """Expand every tagged class of a module's source."""
    options = options or GenerationOptions()
    module = _parse_module(source, path)

    tagged = find_tagged_classes(module, options.marker, path=path)
    if not tagged:
        logger.info("No @%s classes found in %s", options.marker, path or "<module>")
        return source

    text = SourceText(source)
    expansions: List[Tuple[int, int, GeneratedArtifactSet]] = []
    for node, backend in tagged:
        declaration = declaration_from_class(node, text, backend, path=path)
        artifacts = generate_artifacts(declaration, options)
        start = min([node.lineno] + [decorator.lineno for decorator in node.decorator_list])
        expansions.append((start, node.end_lineno, artifacts))
        logger.info("Expanded %s (%s) from %s", node.name, backend, path or "<module>")

    lines = list(text.lines)
    for start, end, artifacts in reversed(expansions):
        unit = assemble(artifacts, include_imports=False)
        lines[start - 1:end] = [unit]

    insert_at = _insertion_line(module)
    import_block = "\n".join(render_imports(artifacts for _, _, artifacts in expansions)) + "\n"
    if insert_at:
        lines[insert_at:insert_at] = ["\n", import_block]
    else:
        lines[0:0] = [import_block, "\n"]

    expanded = "".join(lines)
    if header:
        expanded = f"# {header}\n{expanded}"
    return expanded


def expand_file(
    path: Path,
    *,
    options: Optional[GenerationOptions] = None,
    header: Optional[str] = None,
) -> str:
    source = Path(path).read_text(encoding="utf-8")
    return expand_source(source, path=str(path), options=options, header=header)
