"""Error kinds raised by the Datalog engine.

All of these are local, recoverable failures: the engine raises them and
leaves its stores in the state they had before the failing call (assertions)
or with only valid derived facts added (queries).
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from .fact_store import Fact
    from .rule import EqualityConstraint, Rule

__all__ = [
    "DatalogError",
    "ArityMismatch",
    "UnrestrictedHead",
    "NameClash",
    "UnboundInConstraint",
    "NonGroundFact",
    "FixpointNotReached",
]


class DatalogError(Exception):
    """Base class for every engine error."""


class ArityMismatch(DatalogError):
    """A relation name was used with a different number of columns."""

    def __init__(self, relation: str, expected: int, found: int) -> None:
        self.relation = relation
        self.expected = expected
        self.found = found
        super().__init__(
            f"arity mismatch for relation '{relation}': "
            f"defined with arity {expected}, got arity {found}"
        )


class UnrestrictedHead(DatalogError):
    """A rule head contains variables that no body fact pattern binds."""

    def __init__(self, rule: "Rule", variables: list[str]) -> None:
        self.rule = rule
        self.variables = variables
        names = ", ".join(variables)
        super().__init__(f"head variable(s) {names} not bound by the body of '{rule}'")


class NameClash(DatalogError):
    """A relation is asserted as facts and as rules with different arities."""

    def __init__(self, relation: str, fact_arity: int, rule_arity: int) -> None:
        self.relation = relation
        self.fact_arity = fact_arity
        self.rule_arity = rule_arity
        super().__init__(
            f"relation '{relation}' used with fact arity {fact_arity} "
            f"and rule arity {rule_arity}"
        )


class UnboundInConstraint(DatalogError):
    """A constraint was evaluated before its variable was bound."""

    def __init__(self, variable: str, constraint: "EqualityConstraint") -> None:
        self.variable = variable
        self.constraint = constraint
        super().__init__(
            f"variable '{variable}' is unbound when evaluating '{constraint}'; "
            "a fact pattern must bind it earlier in the body"
        )


class NonGroundFact(DatalogError):
    """An asserted fact contains a variable."""

    def __init__(self, fact: "Fact") -> None:
        self.fact = fact
        super().__init__(f"cannot assert non-ground fact '{fact}'")


class FixpointNotReached(DatalogError):
    """The configured pass limit ran out before derivation settled."""

    def __init__(self, passes: int) -> None:
        self.passes = passes
        super().__init__(f"fixpoint not reached after {passes} passes")
