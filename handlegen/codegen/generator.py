"""Orchestrates the generation pipeline for one tagged class."""

from __future__ import annotations

import logging
from typing import Optional

from ..backends import resolve_backend
from ..config import GenerationOptions
from ..ir.spec import GeneratedArtifactSet, ImplDeclaration
from ..parser import parse_declaration
from .assembler import assemble
from .connection import build_connection_impl
from .interface import build_interface
from .pool import build_pool_impl
from .wrapper import build_wrapper

__all__ = ["expand", "generate", "generate_artifacts"]

logger = logging.getLogger(__name__)


def generate_artifacts(
    declaration: ImplDeclaration,
    options: Optional[GenerationOptions] = None,
) -> GeneratedArtifactSet:
    """Run every builder over an already parsed declaration.

    The backend is resolved first, so an unknown token raises
    :class:`~handlegen.errors.UnsupportedBackend` before anything is built.
    """
    options = options or GenerationOptions()
    mapping = resolve_backend(declaration.backend, path=declaration.path, symbol=declaration.type_name)

    wrapper = None
    if declaration.is_richer:
        wrapper = build_wrapper(declaration, mapping, options)

    artifacts = GeneratedArtifactSet(
        interface=build_interface(declaration),
        connection_impl=build_connection_impl(declaration, mapping, options),
        pool_impl=build_pool_impl(declaration, mapping, options),
        wrapper=wrapper,
        imports=("dataclasses", "typing") if wrapper is not None else ("typing",),
        type_checking_imports=(mapping.module,),
    )
    logger.debug(
        "Generated %s for %s: %d of %d methods in the interface",
        declaration.resolved_interface_name,
        mapping.backend,
        len(declaration.eligible_methods()),
        len(declaration.methods),
    )
    return artifacts


def generate(
    backend: str,
    block: str,
    *,
    path: Optional[str] = None,
    options: Optional[GenerationOptions] = None,
) -> GeneratedArtifactSet:
    """Parse one class block and generate its artifacts for ``backend``."""
    declaration = parse_declaration(block, backend, path=path)
    return generate_artifacts(declaration, options)


def expand(
    backend: str,
    block: str,
    *,
    path: Optional[str] = None,
    options: Optional[GenerationOptions] = None,
) -> str:
    """Like :func:`generate`, returning the assembled output unit."""
    return assemble(generate(backend, block, path=path, options=options))
