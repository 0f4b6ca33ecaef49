"""
Expand command implementation.

This module handles the 'expand' subcommand which expands a single module
and writes the result to a file or stdout.
"""

import argparse
import sys
from dataclasses import replace
from pathlib import Path

from ... import __version__
from ...expander import expand_file
from ..context import get_cli_context
from ..errors import CLIFileNotFoundError, CLIValidationError, handle_cli_exception
from ..output import print_success


def generated_header(source: Path) -> str:
    return f"Generated by handlegen {__version__} from {source.name}. Do not edit."


def cmd_expand(args: argparse.Namespace) -> None:
    """
    Handle the 'expand' subcommand.

    Args:
        args: Parsed command-line arguments containing:
            - file: Path to the module to expand
            - output: Output path (optional, stdout when omitted)
            - marker: Marker decorator name override (optional)

    Raises:
        SystemExit: On any error during expansion

    Examples:
        >>> args = argparse.Namespace(file='repo.py', output='repo_gen.py', marker=None)
        >>> cmd_expand(args)  # doctest: +SKIP
        ✓ Expanded repo.py -> repo_gen.py
    """
    try:
        ctx = get_cli_context(args)
        source_path = Path(args.file).resolve()
        if not source_path.is_file():
            raise CLIFileNotFoundError(
                f"Input file not found: {args.file}",
                hint="Check the path, relative paths resolve against the current directory",
            )

        options = ctx.options
        marker = getattr(args, "marker", None)
        if marker:
            try:
                options = replace(options, marker=marker)
            except ValueError as exc:
                raise CLIValidationError(str(exc), hint="Use a plain identifier such as 'handlegen'") from exc

        header = generated_header(source_path) if ctx.config.defaults.header else None
        expanded = expand_file(source_path, options=options, header=header)

        output = getattr(args, "output", None)
        if not output:
            sys.stdout.write(expanded)
            return

        out_path = Path(output).resolve()
        if out_path == source_path:
            raise CLIValidationError(
                "Refusing to overwrite the input module",
                hint="Pass a different path to -o/--output",
            )
        out_path.parent.mkdir(parents=True, exist_ok=True)
        out_path.write_text(expanded, encoding="utf-8")
        print_success(f"Expanded {args.file} -> {output}")
    except Exception as exc:
        handle_cli_exception(exc, verbose=getattr(args, "verbose", False))
