"""Rule representation and the rule store.

A rule is a Horn clause: a head fact pattern derived from a conjunctive
body. Body elements are either fact patterns, which bind variables by
matching stored facts, or equality constraints, which filter bindings:

    grandparent(X, Z) :- parent(X, Y), parent(Y, Z).
    sibling(X, Y) :- parent(P, X), parent(P, Y), X != Y.
"""

from __future__ import annotations

import logging
from collections import defaultdict
from dataclasses import dataclass, field
from typing import Union

from .errors import ArityMismatch, NameClash, UnrestrictedHead
from .fact_store import Fact, RelationStore, Signature
from .terms import Term, make_term

__all__ = [
    "EqualityConstraint",
    "BodyExpression",
    "Rule",
    "RuleStore",
    "rule",
    "eq",
    "neq",
    "unrestricted_variables",
]

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class EqualityConstraint:
    """An `=` or `!=` test between two terms.

    Attributes:
        positive: True for `=`, False for `!=`
        left: Left-hand term
        right: Right-hand term
    """

    positive: bool
    left: Term
    right: Term

    def __str__(self) -> str:
        op = "=" if self.positive else "!="
        return f"{self.left} {op} {self.right}"


BodyExpression = Union[Fact, EqualityConstraint]


@dataclass(frozen=True)
class Rule:
    """Internal representation of a Datalog rule.

    Represents: head :- body_expr1, body_expr2, ...

    Attributes:
        head: The rule head (conclusion)
        body: Body expressions, evaluated left to right
        name: Optional rule name for debugging
    """

    head: Fact
    body: tuple[BodyExpression, ...] = ()
    name: str | None = field(default=None, compare=False)

    def __str__(self) -> str:
        head_str = str(self.head)
        if self.body:
            body_str = ", ".join(str(expr) for expr in self.body)
            return f"{head_str} :- {body_str}."
        return f"{head_str}."

    @property
    def signature(self) -> Signature:
        return self.head.signature

    def body_facts(self) -> list[Fact]:
        """Fact patterns of the body, in order."""
        return [expr for expr in self.body if isinstance(expr, Fact)]


def rule(head: Fact, *body: BodyExpression, name: str | None = None) -> Rule:
    return Rule(head=head, body=tuple(body), name=name)


def eq(left: "str | Term", right: "str | Term") -> EqualityConstraint:
    return EqualityConstraint(True, make_term(left), make_term(right))


def neq(left: "str | Term", right: "str | Term") -> EqualityConstraint:
    return EqualityConstraint(False, make_term(left), make_term(right))


def unrestricted_variables(r: Rule) -> list[str]:
    """Find head variables that no body fact pattern mentions.

    Constraints do not count: they filter bindings, they never create them.

    Args:
        r: The rule to check

    Returns:
        Offending variable names in head order (empty if range-restricted)
    """
    bound: set[str] = set()
    for pattern in r.body_facts():
        bound.update(pattern.variables())
    return [name for name in r.head.variables() if name not in bound]


class RuleStore:
    """Rules indexed by head signature.

    Several rules may define the same relation; the relation is the union
    of everything they derive plus any facts asserted directly under the
    same signature.
    """

    def __init__(self) -> None:
        self._rules: dict[Signature, list[Rule]] = defaultdict(list)
        self._arities: dict[str, int] = {}

    def insert(self, new_rule: Rule, relations: RelationStore) -> None:
        """Validate and add a rule.

        All checks run before the store is touched, so a rejected rule
        leaves it unchanged. Rules are compared first; the fact store is
        only reached for names no rule defines, where every fact was asserted.

        Args:
            new_rule: The rule to add
            relations: Fact store, consulted for name clashes

        Raises:
            UnrestrictedHead: If a head variable is absent from the body
            ArityMismatch: If rules exist under the head name with another arity
            NameClash: If facts exist under the head name with another arity
        """
        missing = unrestricted_variables(new_rule)
        if missing:
            raise UnrestrictedHead(new_rule, missing)

        relation, arity = new_rule.signature
        self.check_arity(relation, arity)
        fact_arity = relations.arity_of(relation)
        if fact_arity is not None and fact_arity != arity:
            raise NameClash(relation, fact_arity, arity)

        self._rules[new_rule.signature].append(new_rule)
        self._arities[relation] = arity
        logger.debug(f"Added rule {new_rule}")

    def check_arity(self, relation: str, arity: int) -> None:
        """Raise ArityMismatch if rules define `relation` with another arity."""
        known = self._arities.get(relation)
        if known is not None and known != arity:
            raise ArityMismatch(relation, known, arity)

    def rules_for(self, relation: str, arity: int) -> list[Rule]:
        """Get the rules defining a relation, in insertion order."""
        return list(self._rules.get((relation, arity), ()))

    def defines(self, relation: str, arity: int) -> bool:
        return bool(self._rules.get((relation, arity)))

    def arity_of(self, relation: str) -> int | None:
        return self._arities.get(relation)

    def all_rules(self) -> list[Rule]:
        return [r for rules in self._rules.values() for r in rules]

    def __len__(self) -> int:
        return sum(len(rules) for rules in self._rules.values())
