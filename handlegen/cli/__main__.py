"""
Main entry point for the handlegen CLI when run as a module.

This allows the CLI to be executed using:
    python -m handlegen.cli

or the equivalent console script entry point.
"""

from . import main

if __name__ == '__main__':
    main()
