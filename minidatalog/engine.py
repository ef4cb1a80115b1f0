"""Datalog inference engine with naive fixpoint evaluation.

This module implements the engine that owns the relation and rule stores,
accepts assertions, and answers queries. Key features:

- On-demand derivation: a query only evaluates the rules reachable from
  its relation through rule bodies
- Naive bottom-up evaluation: every pass re-evaluates all reachable rules
  against the full store until a pass derives nothing new
- Joins over body fact patterns, with equality constraints as filters
- Set semantics: repeated assertion and re-derivation are idempotent
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Union

from .errors import FixpointNotReached, NameClash, NonGroundFact
from .fact_store import Fact, RelationStore, Signature
from .rule import EqualityConstraint, Rule, RuleStore
from .unification import (
    Binding,
    evaluate_constraint,
    find_all_bindings,
    match_fact,
    resolve_term,
    substitute,
)

__all__ = [
    "DatalogEngine",
    "Query",
    "QueryResult",
    "Statement",
]

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Query:
    """A query statement: `pattern?`.

    Queries are only ever answered, never asserted.
    """

    pattern: Fact

    def __str__(self) -> str:
        return f"{self.pattern}?"


Statement = Union[Fact, Rule, Query]


@dataclass
class QueryResult:
    """Result of resolving a query pattern.

    Attributes:
        pattern: The pattern that was queried
        facts: Matching ground facts, in store order
        bindings: Values of the pattern's variables, one per matching fact
        passes: Number of fixpoint passes run for this query
        facts_derived: Total facts in the store after derivation
        explanation: Human-readable summary
    """

    pattern: Fact
    facts: list[Fact] = field(default_factory=list)
    bindings: list[Binding] = field(default_factory=list)
    passes: int = 0
    facts_derived: int = 0
    explanation: str = ""

    @property
    def found(self) -> bool:
        return bool(self.facts)


class DatalogEngine:
    """Datalog engine over definite rules with equality constraints.

    The engine exclusively owns its relation store and rule store. It is
    not thread-safe: callers sharing one engine between threads must
    serialise assertions and queries themselves.
    """

    def __init__(self, max_passes: int | None = None) -> None:
        """Initialize the engine.

        Args:
            max_passes: Optional limit on fixpoint passes per query. None
                (the default) runs until no new fact is derived.
        """
        self.max_passes = max_passes

        self._relations = RelationStore()
        self._rules = RuleStore()

    @property
    def relations(self) -> RelationStore:
        """Access the relation store."""
        return self._relations

    @property
    def rules(self) -> RuleStore:
        """Access the rule store."""
        return self._rules

    def assert_fact(self, new_fact: Fact) -> None:
        """Add a ground fact.

        Args:
            new_fact: The fact to assert

        Raises:
            NonGroundFact: If the fact contains a variable
            NameClash: If rules define the relation with another arity
            ArityMismatch: If facts are stored under the relation with another arity
        """
        if not new_fact.is_ground():
            raise NonGroundFact(new_fact)
        rule_arity = self._rules.arity_of(new_fact.relation)
        if rule_arity is not None and rule_arity != new_fact.arity:
            raise NameClash(new_fact.relation, new_fact.arity, rule_arity)

        if self._relations.insert(new_fact):
            logger.debug(f"Asserted {new_fact}")

    def assert_rule(self, new_rule: Rule) -> None:
        """Add a rule.

        Raises:
            UnrestrictedHead: If a head variable is absent from the body
            ArityMismatch: If rules exist under the head name with another arity
            NameClash: If facts exist under the head name with another arity
        """
        self._rules.insert(new_rule, self._relations)

    def assert_statement(self, statement: Statement) -> None:
        """Route a parsed statement to the matching assertion.

        Raises:
            TypeError: For query statements and anything that is not a statement
        """
        match statement:
            case Query():
                raise TypeError(f"queries cannot be asserted: {statement}")
            case Rule():
                self.assert_rule(statement)
            case Fact():
                self.assert_fact(statement)
            case _:
                raise TypeError(f"not a statement: {statement!r}")

    def query(self, pattern: Fact) -> list[Fact]:
        """Get all facts matching a pattern, deriving as needed.

        Args:
            pattern: Fact pattern; Unbound terms match anything

        Returns:
            Matching ground facts (empty for an unknown relation)
        """
        return self.solve(pattern).facts

    def solve(self, pattern: Fact) -> QueryResult:
        """Resolve a query pattern, with bindings and derivation statistics.

        Args:
            pattern: Fact pattern to resolve

        Returns:
            QueryResult describing the matches
        """
        relation, arity = pattern.signature
        has_facts = bool(self._relations.get(relation, arity))
        has_rules = self._rules.defines(relation, arity)

        if not has_facts and not has_rules:
            return QueryResult(
                pattern=pattern,
                facts_derived=self._relations.size(),
                explanation=f"Unknown relation {relation}/{arity}: no facts or rules",
            )

        passes = self.derive(relation, arity) if has_rules else 0

        result = QueryResult(pattern=pattern, passes=passes)
        for candidate in self._candidates(pattern, {}):
            binding = match_fact(pattern, candidate, {})
            if binding is not None:
                result.facts.append(candidate)
                result.bindings.append(binding)

        result.facts_derived = self._relations.size()
        result.explanation = (
            f"{len(result.facts)} match(es) for {pattern} "
            f"after {passes} pass(es) over {relation}/{arity}"
        )
        return result

    def derive(self, relation: str, arity: int) -> int:
        """Bring every relation reachable from a signature to fixpoint.

        Args:
            relation: Target relation name
            arity: Target arity

        Returns:
            Number of passes run, including the final pass that added nothing

        Raises:
            UnboundInConstraint: If a rule body tests an unbound variable
            FixpointNotReached: If `max_passes` ran out
        """
        closure = self._closure((relation, arity))
        rules = [r for sig in closure for r in self._rules.rules_for(*sig)]
        logger.debug(
            f"Deriving {relation}/{arity}: {len(closure)} reachable relations, "
            f"{len(rules)} rules"
        )

        passes = 0
        while True:
            if self.max_passes is not None and passes >= self.max_passes:
                logger.warning(f"Max passes ({self.max_passes}) reached")
                raise FixpointNotReached(passes)
            passes += 1
            added = self._run_pass(rules)
            if not added:
                break
            logger.debug(f"Pass {passes}: {added} new facts")

        logger.debug(
            f"Fixpoint reached in {passes} passes, {self._relations.size()} facts"
        )
        return passes

    def _closure(self, target: Signature) -> list[Signature]:
        """Signatures reachable from `target` through rule bodies.

        Worklist traversal, so recursive rules do not recurse in Python.
        """
        closure: dict[Signature, None] = {target: None}
        pending = [target]
        while pending:
            sig = pending.pop()
            for r in self._rules.rules_for(*sig):
                for pattern in r.body_facts():
                    if pattern.signature not in closure:
                        closure[pattern.signature] = None
                        pending.append(pattern.signature)
        return list(closure)

    def _run_pass(self, rules: list[Rule]) -> int:
        """Evaluate each rule once against the current store.

        Returns:
            Number of facts that were new to the store
        """
        added = 0
        for r in rules:
            for binding in self._solve_body(r):
                if self._relations.insert(substitute(r.head, binding)):
                    added += 1
        return added

    def _solve_body(self, r: Rule) -> list[Binding]:
        """Enumerate every binding satisfying a rule body.

        Body expressions are processed left to right. Fact patterns join the
        current bindings with their relation; constraints filter them. The
        result is fully materialized before the caller inserts anything.
        """
        bindings: list[Binding] = [{}]
        for expr in r.body:
            match expr:
                case Fact():
                    bindings = [
                        extended
                        for binding in bindings
                        for extended in find_all_bindings(
                            expr, self._candidates(expr, binding), binding
                        )
                    ]
                case EqualityConstraint():
                    bindings = [b for b in bindings if evaluate_constraint(expr, b)]
            if not bindings:
                break
        return bindings

    def _candidates(self, pattern: Fact, binding: Binding) -> list[Fact]:
        # Narrow by first column when it is already known
        if pattern.terms:
            first = resolve_term(pattern.terms[0], binding)
            if first is not None:
                return self._relations.get_by_first(pattern.relation, pattern.arity, first)
        return self._relations.get(pattern.relation, pattern.arity)
