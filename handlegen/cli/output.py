"""
Output formatting for CLI operations.

Plain status lines for build results and rich tables for ``handlegen show``.
"""

from typing import Iterable, Sequence

from rich.console import Console
from rich.syntax import Syntax
from rich.table import Table

from ..ir.spec import ImplDeclaration

console = Console()


def print_success(message: str) -> None:
    """
    Print success message with checkmark prefix.

    Examples:
        >>> print_success("Expanded repo.py")
        ✓ Expanded repo.py
    """
    print(f"✓ {message}")


def print_error(message: str) -> None:
    """
    Print error message with cross prefix.

    Examples:
        >>> print_error("repo_gen.py is out of date")
        ✗ repo_gen.py is out of date
    """
    print(f"✗ {message}")


def print_warning(message: str) -> None:
    """
    Print warning message with warning prefix.

    Examples:
        >>> print_warning("No tagged classes found")
        ⚠ No tagged classes found
    """
    print(f"⚠ {message}")


def declaration_table(declaration: ImplDeclaration) -> Table:
    """Build a table of one declaration's methods and where each one lands."""
    variant = "richer" if declaration.is_richer else "simpler"
    title = (
        f"{declaration.type_name} -> {declaration.interface_ref} "
        f"({declaration.backend}, {variant})"
    )
    table = Table(title=title)
    table.add_column("Method")
    table.add_column("Visibility")
    table.add_column("Interface")
    table.add_column("Pool")
    table.add_column("Wrapper")

    for method in declaration.methods:
        eligible = declaration.is_eligible(method)
        mark = "yes" if eligible else "-"
        table.add_row(
            method.name,
            method.visibility.value,
            mark,
            mark,
            mark if declaration.is_richer else "-",
        )
    return table


def print_declarations(declarations: Iterable[ImplDeclaration]) -> None:
    for declaration in declarations:
        console.print(declaration_table(declaration))


def print_backends(rows: Sequence[Sequence[str]]) -> None:
    table = Table(title="Backends")
    for header in ("Token", "Connection", "Pool", "Requirement"):
        table.add_column(header)
    for row in rows:
        table.add_row(*row)
    console.print(table)


def print_code(code: str) -> None:
    console.print(Syntax(code, "python", line_numbers=True))
