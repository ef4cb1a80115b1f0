"""Variable binding and matching for Datalog inference.

This module handles variable substitution and matching for rule evaluation
and queries. Datalog has restricted unification (no function symbols), so
simple dictionary-based bindings are sufficient: matching a pattern against
a ground fact either fails or extends the bindings with the pattern's
fresh variables.
"""

from __future__ import annotations

from typing import Iterable, Iterator, TYPE_CHECKING

from .errors import UnboundInConstraint
from .fact_store import Fact
from .terms import Bound, Term, Unbound

if TYPE_CHECKING:
    from .rule import EqualityConstraint

__all__ = [
    "Binding",
    "match_fact",
    "resolve_term",
    "evaluate_constraint",
    "substitute",
    "find_all_bindings",
]

# Type alias for variable bindings: variable name -> constant value
Binding = dict[str, str]


def match_fact(
    pattern: Fact,
    candidate: Fact,
    binding: Binding,
) -> Binding | None:
    """Try to match a fact pattern against a ground fact.

    Extends the given binding if matching succeeds. Returns None if
    matching fails (relation mismatch, arity mismatch, constant mismatch
    or binding conflict). The input binding is never modified.

    Args:
        pattern: Fact pattern (may have variables)
        candidate: Ground fact from the relation store
        binding: Existing variable bindings

    Returns:
        Extended binding if matching succeeds, None otherwise
    """
    if pattern.relation != candidate.relation:
        return None

    if len(pattern.terms) != len(candidate.terms):
        return None

    new_binding = dict(binding)

    for pattern_term, fact_term in zip(pattern.terms, candidate.terms):
        value = str(fact_term)
        if isinstance(pattern_term, Unbound):
            if pattern_term.name in new_binding:
                # Already bound - must match
                if new_binding[pattern_term.name] != value:
                    return None
            else:
                new_binding[pattern_term.name] = value
        elif pattern_term.value != value:
            return None

    return new_binding


def resolve_term(term: Term, binding: Binding) -> str | None:
    """Resolve a term through a binding.

    Returns:
        The constant value, or None for a variable the binding lacks
    """
    if isinstance(term, Bound):
        return term.value
    return binding.get(term.name)


def evaluate_constraint(constraint: "EqualityConstraint", binding: Binding) -> bool:
    """Evaluate an equality constraint under a binding.

    Args:
        constraint: The `=` / `!=` constraint
        binding: Current variable bindings

    Returns:
        Whether the constraint holds

    Raises:
        UnboundInConstraint: If either side is a variable with no binding
    """
    values = []
    for side in (constraint.left, constraint.right):
        value = resolve_term(side, binding)
        if value is None:
            raise UnboundInConstraint(side.name, constraint)
        values.append(value)

    equal = values[0] == values[1]
    return equal if constraint.positive else not equal


def substitute(pattern: Fact, binding: Binding) -> Fact:
    """Apply bindings to a fact pattern.

    Variables without a binding are left in place.

    Args:
        pattern: Fact pattern to instantiate
        binding: Variable bindings to apply

    Returns:
        Fact with bound variables replaced by constants
    """
    terms = tuple(
        Bound(binding[t.name]) if isinstance(t, Unbound) and t.name in binding else t
        for t in pattern.terms
    )
    return Fact(relation=pattern.relation, terms=terms)


def find_all_bindings(
    pattern: Fact,
    candidates: Iterable[Fact],
    binding: Binding,
) -> Iterator[Binding]:
    """Find all ways to match a pattern against candidate facts.

    Args:
        pattern: Fact pattern from a rule body or query
        candidates: Ground facts to try
        binding: Existing bindings to extend

    Yields:
        Extended bindings, one per matching candidate
    """
    for candidate in candidates:
        extended = match_fact(pattern, candidate, binding)
        if extended is not None:
            yield extended
