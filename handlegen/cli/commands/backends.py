"""Backends command implementation."""

import argparse

from ...backends import BACKENDS
from ..output import print_backends


def cmd_backends(args: argparse.Namespace) -> None:
    """List the backend tokens and the driver types they map to."""
    rows = [
        (token, mapping.direct_handle_type, mapping.pooled_handle_type, mapping.requirement)
        for token, mapping in BACKENDS.items()
    ]
    print_backends(rows)
