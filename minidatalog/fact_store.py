"""Fact representation and indexed storage of ground facts.

This module provides the `Fact` tuple type shared by stored facts, rule
heads, body patterns and queries, and the `RelationStore` holding every
asserted or derived ground fact. Facts are grouped by relation schema
(relation name plus arity) and kept with set semantics, so asserting or
deriving the same fact twice leaves the store unchanged.
"""

from __future__ import annotations

from collections import defaultdict
from dataclasses import dataclass
from typing import Iterator

from .errors import ArityMismatch
from .terms import Bound, Term, Unbound, make_term

__all__ = [
    "Fact",
    "Signature",
    "RelationStore",
    "fact",
]

# Relation schema: (relation name, arity)
Signature = tuple[str, int]


@dataclass(frozen=True)
class Fact:
    """A relation applied to an ordered tuple of terms.

    Ground facts (no Unbound terms) live in the store. Facts with
    variables act as patterns in rule heads, rule bodies and queries.

    Attributes:
        relation: The relation name
        terms: Tuple of terms (tuple for hashability)
    """

    relation: str
    terms: tuple[Term, ...] = ()

    def __str__(self) -> str:
        args = ", ".join(str(t) for t in self.terms)
        return f"{self.relation}({args})"

    def __repr__(self) -> str:
        return self.__str__()

    @property
    def arity(self) -> int:
        return len(self.terms)

    @property
    def signature(self) -> Signature:
        return (self.relation, len(self.terms))

    def is_ground(self) -> bool:
        """Check that no term is a variable."""
        return all(isinstance(t, Bound) for t in self.terms)

    def variables(self) -> list[str]:
        """Get variable names in order of first appearance.

        Returns:
            List of distinct variable names
        """
        seen: dict[str, None] = {}
        for t in self.terms:
            if isinstance(t, Unbound):
                seen.setdefault(t.name, None)
        return list(seen)


def fact(relation: str, *args: "str | Term") -> Fact:
    """Build a fact from surface arguments (uppercase initial = variable)."""
    return Fact(relation=relation, terms=tuple(make_term(a) for a in args))


class RelationStore:
    """Indexed storage for ground facts.

    Supports efficient lookup by:
    - Relation schema (relation + arity), for body and query matching
    - Relation schema + first column, for joins with a bound first column

    Every relation name is held under exactly one arity. Insertion order is
    preserved within each relation so that results are deterministic.
    """

    def __init__(self) -> None:
        """Initialize empty relation store."""
        # Primary storage: signature -> ordered set of facts
        self._facts: dict[Signature, dict[Fact, None]] = defaultdict(dict)

        # Arity each relation name is defined with
        self._arities: dict[str, int] = {}

        # Index by (relation, arity, first value) for join optimization
        self._by_first: dict[tuple[str, int, str], list[Fact]] = defaultdict(list)

    def insert(self, new_fact: Fact) -> bool:
        """Add a ground fact to its relation.

        Args:
            new_fact: The ground fact to add

        Returns:
            True if this is a new fact, False if it was already stored

        Raises:
            ArityMismatch: If the relation is held under another arity
        """
        self.check_arity(new_fact.relation, new_fact.arity)

        relation = self._facts[new_fact.signature]
        if new_fact in relation:
            return False

        relation[new_fact] = None
        self._arities[new_fact.relation] = new_fact.arity
        if new_fact.terms:
            key = (new_fact.relation, new_fact.arity, str(new_fact.terms[0]))
            self._by_first[key].append(new_fact)
        return True

    def check_arity(self, relation: str, arity: int) -> None:
        """Raise ArityMismatch if `relation` is stored with another arity."""
        known = self._arities.get(relation)
        if known is not None and known != arity:
            raise ArityMismatch(relation, known, arity)

    def get(self, relation: str, arity: int) -> list[Fact]:
        """Get all facts of a relation.

        An unknown relation is an empty relation, not an error.

        Args:
            relation: The relation name
            arity: The number of columns

        Returns:
            List of ground facts in insertion order
        """
        stored = self._facts.get((relation, arity))
        if not stored:
            return []
        return list(stored)

    def get_by_first(self, relation: str, arity: int, value: str) -> list[Fact]:
        """Get facts of a relation whose first column equals `value`.

        Args:
            relation: The relation name
            arity: The number of columns
            value: The first column constant

        Returns:
            List of ground facts in insertion order
        """
        return list(self._by_first.get((relation, arity, value), ()))

    def contains(self, candidate: Fact) -> bool:
        """Check if a ground fact is stored."""
        return candidate in self._facts.get(candidate.signature, {})

    def arity_of(self, relation: str) -> int | None:
        """Arity a relation name is stored with, or None if it has no facts."""
        return self._arities.get(relation)

    def relations(self) -> list[Signature]:
        """Signatures of every non-empty relation."""
        return [sig for sig, facts in self._facts.items() if facts]

    def size(self) -> int:
        """Get number of facts stored.

        Returns:
            Number of unique facts across all relations
        """
        return sum(len(facts) for facts in self._facts.values())

    def __len__(self) -> int:
        return self.size()

    def __iter__(self) -> Iterator[Fact]:
        for facts in self._facts.values():
            yield from facts
