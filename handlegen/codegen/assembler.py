"""Concatenate generated artifacts into one output unit."""

from __future__ import annotations

from typing import Iterable, List

from ..ir.spec import GeneratedArtifactSet

__all__ = ["ARTIFACT_SEPARATOR", "assemble", "render_imports"]

ARTIFACT_SEPARATOR = "\n\n\n"


def render_imports(artifact_sets: Iterable[GeneratedArtifactSet]) -> List[str]:
    """Deduplicated import block for one or more generated units.

    Driver modules are imported only for type checkers, so generated modules
    import without the driver installed.
    """
    modules = set()
    drivers = set()
    for artifacts in artifact_sets:
        modules.update(artifacts.imports)
        drivers.update(artifacts.type_checking_imports)
    lines = [f"import {module}" for module in sorted(modules)]
    if drivers:
        lines.append("")
        lines.append("if typing.TYPE_CHECKING:")
        lines.extend(f"    import {module}" for module in sorted(drivers))
    return lines


def assemble(artifacts: GeneratedArtifactSet, *, include_imports: bool = True) -> str:
    """Interface, connection adapter, pool adapter, then wrapper."""
    body = ARTIFACT_SEPARATOR.join(artifacts.artifacts())
    if not include_imports:
        return body + "\n"
    header = "\n".join(render_imports([artifacts]))
    return f"{header}{ARTIFACT_SEPARATOR}{body}\n"
