"""
Build and check command implementations.

'build' expands every configured source to its output path; 'check' reports
outputs that are missing or differ from a fresh expansion.
"""

import argparse
import logging
from pathlib import Path
from typing import List

from ...expander import expand_file
from ..context import CLIContext, get_cli_context, select_sources
from ..errors import CLIFileNotFoundError, CLIStaleOutputError, handle_cli_exception
from ..output import print_error, print_success
from .expand import generated_header

logger = logging.getLogger(__name__)


def _relative(ctx: CLIContext, path: Path) -> str:
    try:
        return path.relative_to(ctx.workspace_root).as_posix()
    except ValueError:
        return str(path)


def _render(ctx: CLIContext, source: Path) -> str:
    if not source.is_file():
        raise CLIFileNotFoundError(
            f"Configured source not found: {_relative(ctx, source)}",
            hint="Fix the 'file' entry in the workspace configuration",
        )
    header = generated_header(source) if ctx.config.defaults.header else None
    return expand_file(source, options=ctx.options, header=header)


def cmd_build(args: argparse.Namespace) -> None:
    """
    Handle the 'build' subcommand.

    Args:
        args: Parsed command-line arguments containing:
            - sources: Names of configured sources (all when empty)

    Examples:
        >>> cmd_build(argparse.Namespace(sources=[]))  # doctest: +SKIP
        ✓ repo.py -> repo_gen.py
    """
    try:
        ctx = get_cli_context(args)
        for source in select_sources(ctx, getattr(args, "sources", None)):
            expanded = _render(ctx, source.file)
            source.out.parent.mkdir(parents=True, exist_ok=True)
            source.out.write_text(expanded, encoding="utf-8")
            logger.info("Wrote %s", source.out)
            print_success(f"{_relative(ctx, source.file)} -> {_relative(ctx, source.out)}")
    except Exception as exc:
        handle_cli_exception(exc, verbose=getattr(args, "verbose", False))


def cmd_check(args: argparse.Namespace) -> None:
    """
    Handle the 'check' subcommand.

    Exits with status 1 when any configured output is missing or stale.
    """
    try:
        ctx = get_cli_context(args)
        stale: List[str] = []
        for source in select_sources(ctx, getattr(args, "sources", None)):
            expected = _render(ctx, source.file)
            out_name = _relative(ctx, source.out)
            if not source.out.exists():
                print_error(f"{out_name} is missing")
                stale.append(out_name)
            elif source.out.read_text(encoding="utf-8") != expected:
                print_error(f"{out_name} is out of date")
                stale.append(out_name)
            else:
                print_success(f"{out_name} is up to date")
        if stale:
            raise CLIStaleOutputError(
                f"{len(stale)} generated module(s) out of date",
                context={"outputs": ", ".join(stale)},
            )
    except Exception as exc:
        handle_cli_exception(exc, verbose=getattr(args, "verbose", False))
