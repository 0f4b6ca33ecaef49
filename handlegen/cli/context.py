"""
CLI context and workspace resolution.

This module provides the CLIContext dataclass shared by every command of a
single invocation.
"""

import argparse
from dataclasses import dataclass
from pathlib import Path
from typing import List, Optional, Sequence

from ..config import GenerationOptions, SourceConfig, WorkspaceConfig
from .errors import CLIConfigError


@dataclass
class CLIContext:
    """
    Shared context resolved from workspace configuration.

    Attributes:
        workspace_root: Root directory of the workspace
        config: Parsed workspace configuration
    """

    workspace_root: Path
    config: WorkspaceConfig

    @property
    def options(self) -> GenerationOptions:
        return self.config.options


def get_cli_context(args: argparse.Namespace) -> CLIContext:
    """
    Retrieve CLIContext from parsed arguments.

    The context is attached to ``args`` by ``main()`` before the command runs.

    Raises:
        CLIConfigError: If context was not initialized
    """
    ctx = getattr(args, "cli_context", None)
    if ctx is None:
        raise CLIConfigError(
            "CLI context was not initialized before command execution",
            hint="This is an internal error - please report it",
            code="CLI_CONTEXT_NOT_INITIALIZED"
        )
    return ctx


def select_sources(ctx: CLIContext, names: Optional[Sequence[str]]) -> List[SourceConfig]:
    """
    Resolve the configured sources a command should process.

    Raises:
        CLIConfigError: If no sources are configured or a name is unknown
    """
    if ctx.config.is_empty():
        raise CLIConfigError(
            "No sources configured for this workspace",
            hint="Add a [sources.<name>] table to handlegen.toml or [tool.handlegen] in pyproject.toml",
            context={"workspace": str(ctx.workspace_root)},
        )
    try:
        return ctx.config.select(names)
    except KeyError as exc:
        raise CLIConfigError(
            str(exc.args[0]),
            hint="Available sources: " + ", ".join(sorted(ctx.config.sources)),
        ) from exc
