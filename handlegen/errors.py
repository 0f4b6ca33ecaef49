"""Diagnostics raised while expanding tagged classes.

Every error carries a stable ``HGnnn`` code, the place in the input it was
found and, when the problem is with one class or method, that symbol. The
``format()`` output follows the ``file:line:col: message`` convention of
compilers and linters so editors can jump to the offending line::

    numbers.py:12:4: HG001 [NumbersRepo.count] Method 'count' must be declared with 'async def'
      hint: Pooled calls await connection acquisition, so every method is a coroutine
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Sequence


@dataclass(frozen=True)
class SourceLocation:
    path: Optional[str] = None
    line: Optional[int] = None
    column: Optional[int] = None

    def __str__(self) -> str:
        parts = [self.path or "<input>"]
        if self.line is not None:
            parts.append(str(self.line))
            if self.column is not None:
                parts.append(str(self.column))
        return ":".join(parts)


class HandlegenError(Exception):
    """Base class for all generation-time errors surfaced to users."""

    code = "HG000"
    hint: Optional[str] = None

    def __init__(
        self,
        message: str,
        *,
        path: Optional[str] = None,
        line: Optional[int] = None,
        column: Optional[int] = None,
        symbol: Optional[str] = None,
        hint: Optional[str] = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.location = SourceLocation(path=path, line=line, column=column)
        self.symbol = symbol
        if hint is not None:
            self.hint = hint

    @property
    def path(self) -> Optional[str]:
        return self.location.path

    @property
    def line(self) -> Optional[int]:
        return self.location.line

    def format(self) -> str:
        head = f"{self.location}: {self.code}"
        if self.symbol:
            head += f" [{self.symbol}]"
        text = f"{head} {self.message}"
        if self.hint:
            text += f"\n  hint: {self.hint}"
        return text


class InvalidInputShape(HandlegenError):
    """Raised when the tagged input is not a class the generator can expand."""

    code = "HG001"


class UnsupportedBackend(HandlegenError):
    """Raised when a backend token is not in the registry."""

    code = "HG002"

    def __init__(self, backend: str, supported: Sequence[str], **kwargs) -> None:
        kwargs.setdefault(
            "hint",
            "Use one of: " + ", ".join(repr(name) for name in supported),
        )
        super().__init__(f"Unsupported backend {backend!r}", **kwargs)
        self.backend = backend
        self.supported = tuple(supported)


__all__ = [
    "HandlegenError",
    "InvalidInputShape",
    "SourceLocation",
    "UnsupportedBackend",
]
