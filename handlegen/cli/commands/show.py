"""
Show command implementation.

Prints a table per tagged class describing which methods reach the
interface, the pool adapter and the wrapper.
"""

import argparse
from pathlib import Path

from ...expander import expand_source, tagged_declarations
from ..context import get_cli_context
from ..errors import CLIFileNotFoundError, handle_cli_exception
from ..output import print_code, print_declarations, print_warning


def cmd_show(args: argparse.Namespace) -> None:
    """
    Handle the 'show' subcommand.

    Args:
        args: Parsed command-line arguments containing:
            - file: Path to the module to inspect
            - code: Also print the expanded module (optional)
    """
    try:
        ctx = get_cli_context(args)
        source_path = Path(args.file)
        if not source_path.is_file():
            raise CLIFileNotFoundError(f"Input file not found: {args.file}")

        source = source_path.read_text(encoding="utf-8")
        declarations = tagged_declarations(source, path=str(source_path), options=ctx.options)
        if not declarations:
            print_warning(f"No @{ctx.options.marker} classes found in {args.file}")
            return

        print_declarations(declarations)
        if getattr(args, "code", False):
            print_code(expand_source(source, path=str(source_path), options=ctx.options))
    except Exception as exc:
        handle_cli_exception(exc, verbose=getattr(args, "verbose", False))
