"""Code builders and the generation pipeline."""

from .assembler import assemble, render_imports
from .connection import build_connection_impl
from .generator import expand, generate, generate_artifacts
from .interface import build_interface
from .pool import build_pool_impl
from .wrapper import build_wrapper

__all__ = [
    "assemble",
    "render_imports",
    "build_connection_impl",
    "build_interface",
    "build_pool_impl",
    "build_wrapper",
    "expand",
    "generate",
    "generate_artifacts",
]
