"""
CLI command modules.

Each command module handles one subcommand of the handlegen CLI.
"""

from .backends import cmd_backends
from .build import cmd_build, cmd_check
from .expand import cmd_expand
from .show import cmd_show

__all__ = [
    "cmd_backends",
    "cmd_build",
    "cmd_check",
    "cmd_expand",
    "cmd_show",
]
