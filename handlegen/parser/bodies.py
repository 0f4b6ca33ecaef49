"""Source text access for the declaration parser."""

from __future__ import annotations

import ast
import io
import tokenize
from typing import FrozenSet, List, Optional, Tuple

__all__ = ["SourceText"]

_OPENERS = {"(", "[", "{"}
_CLOSERS = {")", "]", "}"}
_FSTRING_STARTS = tuple(
    getattr(tokenize, name) for name in ("FSTRING_START", "TSTRING_START") if hasattr(tokenize, name)
)
_FSTRING_ENDS = tuple(
    getattr(tokenize, name) for name in ("FSTRING_END", "TSTRING_END") if hasattr(tokenize, name)
)


def _char_col(line: str, byte_col: int) -> int:
    """Convert an AST (UTF-8 byte) column into a str index."""
    return len(line.encode("utf-8")[:byte_col].decode("utf-8", errors="replace"))


class SourceText:
    """A module's source together with lazily computed tokens.

    One instance is shared by every class parsed out of the same module so the
    source is tokenized at most once.
    """

    def __init__(self, source: str) -> None:
        self.source = source
        self.lines: List[str] = source.splitlines(keepends=True)
        self._tokens: Optional[List[tokenize.TokenInfo]] = None
        self._string_rows: Optional[FrozenSet[int]] = None

    @property
    def tokens(self) -> List[tokenize.TokenInfo]:
        if self._tokens is None:
            self._tokens = list(tokenize.generate_tokens(io.StringIO(self.source).readline))
        return self._tokens

    def segment(self, node: Optional[ast.AST]) -> Optional[str]:
        if node is None:
            return None
        return ast.get_source_segment(self.source, node)

    def header_colon(self, func: ast.AST) -> Tuple[int, int]:
        """Position (row, col) of the colon that closes a ``def`` header."""
        start_line = self.lines[func.lineno - 1]
        start = (func.lineno, _char_col(start_line, func.col_offset))
        depth = 0
        for token in self.tokens:
            if token.start < start or token.type != tokenize.OP:
                continue
            if token.string in _OPENERS:
                depth += 1
            elif token.string in _CLOSERS:
                depth -= 1
            elif token.string == ":" and depth == 0:
                return token.start
        raise ValueError(f"no header colon found for definition at line {func.lineno}")

    def method_body(self, func: ast.AST) -> Tuple[str, str]:
        """Return ``(body_text, indent)`` for a function definition.

        ``body_text`` is the verbatim source after the header colon through
        the end of the last statement; ``indent`` is the indentation its
        statements were written at ("" for a body on the header line).
        """
        text, indent, _ = self._body_span(func)
        return text, indent

    def verbatim_lines(self, func: ast.AST) -> Tuple[int, ...]:
        """Indices of body lines that start inside a string literal.

        Re-indenting such a line would change the value of the string.
        """
        text, _, first_row = self._body_span(func)
        rows = self.string_rows
        return tuple(
            index
            for index in range(len(text.splitlines()))
            if first_row + index in rows
        )

    @property
    def string_rows(self) -> FrozenSet[int]:
        """Rows (1-based) that begin inside a string literal."""
        if self._string_rows is None:
            rows = set()
            opened: List[int] = []
            for token in self.tokens:
                if token.type == tokenize.STRING:
                    rows.update(range(token.start[0] + 1, token.end[0] + 1))
                elif token.type in _FSTRING_STARTS:
                    opened.append(token.start[0])
                elif token.type in _FSTRING_ENDS and opened:
                    rows.update(range(opened.pop() + 1, token.end[0] + 1))
            self._string_rows = frozenset(rows)
        return self._string_rows

    def _body_span(self, func: ast.AST) -> Tuple[str, str, int]:
        row, col = self.header_colon(func)
        last = func.body[-1]
        header_line = self.lines[row - 1]
        rest = header_line[col + 1:]
        if rest.strip() and not rest.lstrip().startswith("#"):
            end_line = self.lines[last.end_lineno - 1]
            end_col = _char_col(end_line, last.end_col_offset)
            if last.end_lineno == row:
                text = header_line[col + 1:end_col]
            else:
                text = rest + "".join(self.lines[row:last.end_lineno - 1]) + end_line[:end_col]
            return text.strip(), "", row

        first_row = row + 1
        body_lines = self.lines[row:last.end_lineno]
        while body_lines and not body_lines[0].strip():
            body_lines = body_lines[1:]
            first_row += 1
        first_line = self.lines[func.body[0].lineno - 1]
        indent = first_line[: len(first_line) - len(first_line.lstrip())]
        return "".join(body_lines).rstrip("\r\n"), indent, first_row
