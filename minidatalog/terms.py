"""Column values of facts: bound constants and unbound variables.

Variable convention: uppercase first letter (e.g., X, Y, Person)
Constants: anything else (e.g., tom, plant_burger, 42)
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Union

__all__ = [
    "Bound",
    "Unbound",
    "Term",
    "is_variable",
    "make_term",
]


@dataclass(frozen=True)
class Bound:
    """A constant column value."""

    value: str

    def __str__(self) -> str:
        return self.value


@dataclass(frozen=True)
class Unbound:
    """A variable to be bound during matching."""

    name: str

    def __str__(self) -> str:
        return self.name


Term = Union[Bound, Unbound]


def is_variable(arg: str) -> bool:
    """Check if a surface argument denotes a variable.

    Variables are identified by uppercase first letter.

    Args:
        arg: The argument string

    Returns:
        True if this is a variable
    """
    return bool(arg) and arg[0].isupper()


def make_term(arg: "str | Term") -> Term:
    """Build a term from a surface argument, passing terms through."""
    if isinstance(arg, (Bound, Unbound)):
        return arg
    if is_variable(arg):
        return Unbound(arg)
    return Bound(arg)
