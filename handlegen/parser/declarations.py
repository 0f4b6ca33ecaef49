"""Parse a tagged class into an :class:`ImplDeclaration`."""

from __future__ import annotations

import ast
import logging
import textwrap
from typing import List, Optional, Tuple

from ..errors import InvalidInputShape
from ..ir.spec import (
    ImplDeclaration,
    MethodDeclaration,
    ParameterBinding,
    ParameterKind,
    ReceiverKind,
    Signature,
    Visibility,
)
from .bodies import SourceText

__all__ = [
    "RESERVED_ATTRIBUTES",
    "declaration_from_class",
    "dotted_tail",
    "parse_declaration",
    "visibility_of",
]

logger = logging.getLogger(__name__)

# Attributes the generated adapters set on themselves.
RESERVED_ATTRIBUTES = frozenset({"conn", "pool"})

_RECEIVERLESS_DECORATORS = frozenset({"staticmethod", "classmethod", "property"})


def visibility_of(name: str) -> Visibility:
    """Classify a method name by Python's naming conventions."""
    if name.startswith("__") and name.endswith("__"):
        return Visibility.PUBLIC
    if name.startswith("__"):
        return Visibility.PRIVATE
    if name.startswith("_"):
        return Visibility.RESTRICTED
    return Visibility.PUBLIC


def dotted_tail(node: ast.AST) -> Optional[str]:
    """Return the last segment of a ``Name`` or dotted ``Attribute``."""
    if isinstance(node, ast.Name):
        return node.id
    if isinstance(node, ast.Attribute):
        return node.attr
    return None


def parse_declaration(block: str, backend: str, *, path: Optional[str] = None) -> ImplDeclaration:
    """Parse source holding exactly one class into a declaration.

    Class decorators (including the ``@handlegen(...)`` marker) are allowed
    and ignored; ``backend`` is taken as given and resolved later.
    """
    source = textwrap.dedent(block)
    try:
        module = ast.parse(source, filename=path or "<block>")
    except SyntaxError as exc:
        raise InvalidInputShape(
            f"Input is not valid Python: {exc.msg}",
            path=path,
            line=exc.lineno,
            column=exc.offset,
        ) from exc

    classes = [node for node in module.body if isinstance(node, ast.ClassDef)]
    if len(classes) != 1 or len(module.body) != 1:
        stray = next((node for node in module.body if not isinstance(node, ast.ClassDef)), None)
        raise InvalidInputShape(
            "Expected a single class declaration",
            path=path,
            line=stray.lineno if stray is not None else None,
            hint="Pass one class per block, or use expand_source() for whole modules",
        )
    return declaration_from_class(classes[0], SourceText(source), backend, path=path)


def declaration_from_class(
    node: ast.ClassDef,
    source: SourceText,
    backend: str,
    *,
    path: Optional[str] = None,
) -> ImplDeclaration:
    interface_name, type_params = _interface_of(node, source, path)

    methods: List[MethodDeclaration] = []
    seen = set()
    for item in node.body:
        if not isinstance(item, (ast.FunctionDef, ast.AsyncFunctionDef)):
            logger.debug("Ignoring non-method member of %s at line %s", node.name, item.lineno)
            continue
        if item.name in seen:
            raise InvalidInputShape(
                f"Method '{item.name}' is defined more than once in class '{node.name}'",
                path=path,
                line=item.lineno,
                symbol=f"{node.name}.{item.name}",
            )
        seen.add(item.name)
        methods.append(_method_from_function(item, source, path, node.name))

    declaration = ImplDeclaration(
        type_name=node.name,
        backend=backend,
        methods=tuple(methods),
        interface_name=interface_name,
        type_params=type_params,
        path=path,
    )
    logger.debug(
        "Parsed %s (interface %s, %d methods, %s variant)",
        declaration.type_name,
        declaration.resolved_interface_name,
        len(methods),
        "richer" if declaration.is_richer else "simpler",
    )
    return declaration


def _interface_of(
    node: ast.ClassDef,
    source: SourceText,
    path: Optional[str],
) -> Tuple[Optional[str], Optional[str]]:
    if node.keywords:
        raise InvalidInputShape(
            f"Class '{node.name}' may not pass keyword arguments to its base",
            path=path,
            line=node.lineno,
            symbol=node.name,
        )
    if not node.bases:
        return None, None
    if len(node.bases) > 1:
        raise InvalidInputShape(
            f"Class '{node.name}' must name at most one interface base",
            path=path,
            line=node.lineno,
            symbol=node.name,
            hint="Write 'class Repo(RepoInterface):' or 'class Repo:'",
        )

    base = node.bases[0]
    type_params = None
    if isinstance(base, ast.Subscript):
        type_params = source.segment(base.slice)
        base = base.value
    name = dotted_tail(base)
    if name is None:
        raise InvalidInputShape(
            f"Expected a named interface base for class '{node.name}'",
            path=path,
            line=node.lineno,
            symbol=node.name,
        )
    return name, type_params


def _method_from_function(
    func: ast.AST,
    source: SourceText,
    path: Optional[str],
    owner: str,
) -> MethodDeclaration:
    name = func.name
    symbol = f"{owner}.{name}"
    if not isinstance(func, ast.AsyncFunctionDef):
        raise InvalidInputShape(
            f"Method '{name}' must be declared with 'async def'",
            path=path,
            line=func.lineno,
            symbol=symbol,
            hint="Pooled calls await connection acquisition, so every method is a coroutine",
        )
    for decorator in func.decorator_list:
        target = decorator.func if isinstance(decorator, ast.Call) else decorator
        if dotted_tail(target) in _RECEIVERLESS_DECORATORS:
            raise InvalidInputShape(
                f"Method '{name}' must take the connection as 'self'; "
                f"'@{dotted_tail(target)}' is not supported",
                path=path,
                line=decorator.lineno,
                symbol=symbol,
            )

    positional = list(func.args.posonlyargs) + list(func.args.args)
    if not positional or positional[0].arg != "self":
        raise InvalidInputShape(
            f"Method '{name}' must take 'self' as its first parameter",
            path=path,
            line=func.lineno,
            symbol=symbol,
        )
    if name in RESERVED_ATTRIBUTES:
        raise InvalidInputShape(
            f"Method name '{name}' shadows an attribute of the generated adapters",
            path=path,
            line=func.lineno,
            symbol=symbol,
        )
    if _contains_yield(func):
        raise InvalidInputShape(
            f"Method '{name}' is an async generator and cannot be forwarded through a pool",
            path=path,
            line=func.lineno,
            symbol=symbol,
        )

    signature = Signature(
        name=name,
        parameters=tuple(_bindings(func, source)),
        returns=source.segment(func.returns),
        is_async=True,
    )
    body, indent = source.method_body(func)
    return MethodDeclaration(
        signature=signature,
        visibility=visibility_of(name),
        body=body,
        body_indent=indent,
        verbatim_lines=source.verbatim_lines(func),
        receiver=ReceiverKind.OWNED,
        decorators=tuple(source.segment(decorator) for decorator in func.decorator_list),
        lineno=func.lineno,
    )


def _bindings(func: ast.AST, source: SourceText) -> List[ParameterBinding]:
    args = func.args
    posonly = list(args.posonlyargs)
    positional = posonly + list(args.args)
    first_default = len(positional) - len(args.defaults)

    bindings: List[ParameterBinding] = []
    for index, arg in enumerate(positional):
        if index == 0:
            continue
        kind = ParameterKind.POSITIONAL_ONLY if index < len(posonly) else ParameterKind.POSITIONAL_OR_KEYWORD
        default = args.defaults[index - first_default] if index >= first_default else None
        bindings.append(_binding(arg, kind, default, source))
    if args.vararg is not None:
        logger.debug("Method %s forwards variadic parameter *%s by unpacking", func.name, args.vararg.arg)
        bindings.append(_binding(args.vararg, ParameterKind.VAR_POSITIONAL, None, source))
    for arg, default in zip(args.kwonlyargs, args.kw_defaults):
        bindings.append(_binding(arg, ParameterKind.KEYWORD_ONLY, default, source))
    if args.kwarg is not None:
        logger.debug("Method %s forwards variadic parameter **%s by unpacking", func.name, args.kwarg.arg)
        bindings.append(_binding(args.kwarg, ParameterKind.VAR_KEYWORD, None, source))
    return bindings


def _binding(arg: ast.arg, kind: ParameterKind, default: Optional[ast.AST], source: SourceText) -> ParameterBinding:
    return ParameterBinding(
        name=arg.arg,
        kind=kind,
        annotation=source.segment(arg.annotation),
        default=source.segment(default),
    )


def _contains_yield(func: ast.AST) -> bool:
    pending = list(func.body)
    while pending:
        node = pending.pop()
        if isinstance(node, (ast.Yield, ast.YieldFrom)):
            return True
        if isinstance(node, (ast.FunctionDef, ast.AsyncFunctionDef, ast.Lambda, ast.ClassDef)):
            continue
        pending.extend(ast.iter_child_nodes(node))
    return False
