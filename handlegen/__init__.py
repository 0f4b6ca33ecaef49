"""
handlegen: database-handle interface generator.

``handlegen`` is a build-step tool.  It reads a Python class tagged with a
database backend::

    @handlegen("Postgres")
    class NumbersRepo(Numbers):
        async def select(self, a: int) -> None:
            await self.execute("SELECT num FROM numbers WHERE num = $1", a)

and rewrites it into four pieces of ordinary Python:

* ``Numbers`` – a :class:`typing.Protocol` with the public method
  signatures.
* ``NumbersConnection`` – the protocol implemented over a directly held
  driver connection.  The original method bodies live here unchanged and use
  ``self`` as the connection.
* ``NumbersPool`` – the protocol implemented over a driver pool.  Every call
  acquires a connection, forwards to ``NumbersConnection`` and releases it.
* ``NumbersRepo`` – a frozen dataclass owning the pool with one delegating
  method per public method.

The code is organised into several modules:

* ``ir`` – dataclasses describing the parsed declaration and the generated
  artifacts.
* ``parser`` – turns Python source into the IR using :mod:`ast` and
  :mod:`tokenize`.
* ``normalizer`` / ``backends`` – signature normalization and the backend
  registry.
* ``codegen`` – the builders, the assembler and the pipeline entry points.
* ``expander`` – whole-module expansion used by the command line.
* ``cli`` – the ``handlegen`` command.
"""

import re
from pathlib import Path
from importlib import metadata as _metadata

from .backends import resolve_backend
from .codegen import expand, generate, generate_artifacts
from .errors import HandlegenError, InvalidInputShape, UnsupportedBackend
from .expander import expand_file, expand_source


def _local_version() -> str | None:
  root = Path(__file__).resolve().parents[1]
  pyproject = root / "pyproject.toml"
  if not pyproject.exists():
    return None
  try:
    text = pyproject.read_text(encoding="utf-8")
  except OSError:  # pragma: no cover - IO errors should not break imports
    return None
  match = re.search(r"^version\s*=\s*\"([^\"]+)\"", text, flags=re.MULTILINE)
  if match:
    return match.group(1)
  return None

try:  # pragma: no cover - metadata fallback for editable installs
    __version__ = _metadata.version("handlegen")
except _metadata.PackageNotFoundError:  # pragma: no cover - source tree
  __version__ = _local_version() or "0.1.0"


def handlegen(backend):
    """Mark a class for expansion by the ``handlegen`` build step.

    The backend token is validated immediately so a typo fails at import
    time.  The class itself is returned unchanged; run ``handlegen expand``
    (or ``handlegen build``) to produce the generated module.
    """
    token = backend if isinstance(backend, str) else getattr(backend, "__name__", str(backend))
    resolve_backend(token)

    def mark(cls):
        cls.__handlegen_backend__ = token
        return cls

    return mark


__all__ = [
    "__version__",
    "handlegen",
    "generate",
    "generate_artifacts",
    "expand",
    "expand_source",
    "expand_file",
    "resolve_backend",
    "HandlegenError",
    "InvalidInputShape",
    "UnsupportedBackend",
]
