"""Signature normalization for interface declarations and forwarding calls."""

from __future__ import annotations

from typing import List

from .ir.spec import ParameterBinding, ParameterKind, Signature

__all__ = [
    "DEFAULT_PLACEHOLDER",
    "normalize_binding",
    "normalize_signature",
    "forwarding_names",
]

# Stub-style default: "may be omitted" without the concrete value.
DEFAULT_PLACEHOLDER = "..."


def normalize_binding(binding: ParameterBinding) -> ParameterBinding:
    """Strip the binding-local default value from a simple-name binding.

    Structural bindings (``*args``/``**kwargs``) are returned unchanged.
    """
    if binding.is_structural or binding.default is None:
        return binding
    if binding.default == DEFAULT_PLACEHOLDER:
        return binding
    return ParameterBinding(
        name=binding.name,
        kind=binding.kind,
        annotation=binding.annotation,
        default=DEFAULT_PLACEHOLDER,
    )


def normalize_signature(signature: Signature) -> Signature:
    """Return ``signature`` with every binding normalized. Idempotent."""
    return signature.with_parameters(
        tuple(normalize_binding(binding) for binding in signature.parameters)
    )


def forwarding_names(signature: Signature) -> List[str]:
    """Argument expressions that pass every parameter on, in declared order."""
    arguments: List[str] = []
    for binding in normalize_signature(signature).parameters:
        if binding.kind is ParameterKind.VAR_POSITIONAL:
            arguments.append(f"*{binding.name}")
        elif binding.kind is ParameterKind.VAR_KEYWORD:
            arguments.append(f"**{binding.name}")
        elif binding.kind is ParameterKind.KEYWORD_ONLY:
            arguments.append(f"{binding.name}={binding.name}")
        else:
            arguments.append(binding.name)
    return arguments
