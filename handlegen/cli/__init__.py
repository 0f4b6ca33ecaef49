"""
Command-line interface for handlegen.

Usage::

    handlegen expand repo.py -o repo_gen.py
    handlegen build
    handlegen check
    handlegen show repo.py --code
    handlegen backends
"""

import argparse
import logging
import os
import sys
from pathlib import Path
from typing import Optional

from .. import __version__
from ..config import load_workspace_config
from .commands import cmd_backends, cmd_build, cmd_check, cmd_expand, cmd_show
from .context import CLIContext
from .errors import CLIConfigError, handle_cli_exception

__all__ = ["main"]


def _configure_logging(args) -> None:
    """Configure the ``handlegen`` logger from the CLI or environment."""
    log_level = (
        getattr(args, 'log_level', None) or
        os.getenv('HANDLEGEN_LOG_LEVEL', 'warn')
    ).lower()

    level_map = {
        'debug': logging.DEBUG,
        'info': logging.INFO,
        'warn': logging.WARNING,
        'warning': logging.WARNING,
        'error': logging.ERROR,
    }

    numeric_level = level_map.get(log_level, logging.WARNING)

    package_logger = logging.getLogger('handlegen')
    package_logger.setLevel(numeric_level)

    if not package_logger.handlers:
        handler = logging.StreamHandler()
        formatter = logging.Formatter('%(asctime)s - %(name)s - %(levelname)s - %(message)s')
        handler.setFormatter(formatter)
        package_logger.addHandler(handler)
        # Keep records out of the root logger to avoid duplicates
        package_logger.propagate = False


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Generate database handle interfaces and pooled adapters from tagged classes",
        prog="handlegen"
    )

    parser.add_argument(
        "--version",
        action="version",
        version=f"%(prog)s {__version__}"
    )
    parser.add_argument(
        '--config',
        default=None,
        help='Path to a handlegen.toml, .handlegenrc or pyproject.toml file'
    )
    parser.add_argument(
        '--workspace',
        default=None,
        help='Workspace root directory (defaults to current working directory)'
    )
    parser.add_argument(
        '--log-level',
        choices=['debug', 'info', 'warn', 'error'],
        default=None,
        help='Set logging level (or set HANDLEGEN_LOG_LEVEL)'
    )
    parser.add_argument(
        '--verbose',
        action='store_true',
        help='Print full tracebacks and detailed CLI errors (or set HANDLEGEN_VERBOSE=1)'
    )

    subparsers = parser.add_subparsers(dest='command', help='Available commands')

    expand_parser = subparsers.add_parser(
        'expand',
        help='Expand the tagged classes of one module'
    )
    expand_parser.add_argument('file', help='Python module containing tagged classes')
    expand_parser.add_argument(
        '-o', '--output',
        help='Write the expanded module here instead of stdout'
    )
    expand_parser.add_argument(
        '--marker',
        help='Name of the marker decorator (default: from config, else handlegen)'
    )
    expand_parser.set_defaults(func=cmd_expand)

    build_parser = subparsers.add_parser(
        'build',
        help='Expand every configured source to its output path'
    )
    build_parser.add_argument('sources', nargs='*', help='Configured source names (default: all)')
    build_parser.set_defaults(func=cmd_build)

    check_parser = subparsers.add_parser(
        'check',
        help='Fail when a configured output is missing or out of date'
    )
    check_parser.add_argument('sources', nargs='*', help='Configured source names (default: all)')
    check_parser.set_defaults(func=cmd_check)

    show_parser = subparsers.add_parser(
        'show',
        help='Describe the tagged classes of a module'
    )
    show_parser.add_argument('file', help='Python module containing tagged classes')
    show_parser.add_argument(
        '--code',
        action='store_true',
        help='Also print the expanded module'
    )
    show_parser.set_defaults(func=cmd_show)

    backends_parser = subparsers.add_parser(
        'backends',
        help='List supported backend tokens'
    )
    backends_parser.set_defaults(func=cmd_backends)

    return parser


def main(argv: Optional[list] = None) -> None:
    """
    Main CLI entrypoint with subcommand support.

    Args:
        argv: Command-line arguments (None uses sys.argv[1:])

    Examples:
        >>> main(['expand', 'repo.py', '-o', 'repo_gen.py'])  # doctest: +SKIP
        >>> main(['check'])  # doctest: +SKIP
    """
    if argv is None:
        argv = sys.argv[1:]

    parser = _build_parser()
    args = parser.parse_args(argv)

    if not hasattr(args, 'func'):
        parser.print_help()
        sys.exit(1)

    args.verbose = getattr(args, "verbose", False)
    _configure_logging(args)

    workspace_root = (
        Path(args.workspace).resolve()
        if args.workspace
        else Path.cwd()
    )
    config_path = Path(args.config).resolve() if args.config else None
    try:
        if config_path is not None and not config_path.exists():
            raise CLIConfigError(
                f"Configuration file not found: {args.config}",
                hint="Drop --config to use handlegen.toml, .handlegenrc or pyproject.toml discovery",
            )
        try:
            config = load_workspace_config(workspace_root, config_path)
        except ValueError as exc:
            raise CLIConfigError(
                f"Invalid workspace configuration: {exc}",
                context={"workspace": str(workspace_root)},
            ) from exc
    except CLIConfigError as exc:
        handle_cli_exception(exc, verbose=args.verbose)

    args.cli_context = CLIContext(
        workspace_root=workspace_root,
        config=config,
    )

    args.func(args)


if __name__ == '__main__':  # pragma: no cover
    main()
