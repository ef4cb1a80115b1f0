"""minidatalog: a minimal Datalog evaluator.

This package provides a store of ground facts and derivation rules over
named relations, and a query resolver answering patterns that mix bound
constants and free variables. Queries over rule-defined relations trigger
naive bottom-up derivation of everything they depend on, so recursive and
mutually recursive rules are fully resolved.

Key features:
- Set-semantics relation store indexed by relation name and arity
- Joins across rule body predicates, with `=` / `!=` constraints
- On-demand fixpoint evaluation restricted to reachable relations
- JSON program documents validated with Pydantic

Example usage:
    from minidatalog import DatalogEngine, fact, rule

    engine = DatalogEngine()
    engine.assert_fact(fact("edge", "a", "b"))
    engine.assert_fact(fact("edge", "b", "c"))
    engine.assert_rule(rule(fact("path", "X", "Y"), fact("edge", "X", "Y")))
    engine.assert_rule(
        rule(fact("path", "X", "Z"), fact("path", "X", "Y"), fact("edge", "Y", "Z"))
    )

    for answer in engine.query(fact("path", "a", "Q")):
        print(f"{answer}.")
"""

from .terms import (
    Bound,
    Unbound,
    Term,
    is_variable,
    make_term,
)
from .errors import (
    DatalogError,
    ArityMismatch,
    UnrestrictedHead,
    NameClash,
    UnboundInConstraint,
    NonGroundFact,
    FixpointNotReached,
)
from .fact_store import (
    Fact,
    Signature,
    RelationStore,
    fact,
)
from .rule import (
    EqualityConstraint,
    BodyExpression,
    Rule,
    RuleStore,
    rule,
    eq,
    neq,
    unrestricted_variables,
)
from .unification import (
    Binding,
    match_fact,
    resolve_term,
    evaluate_constraint,
    substitute,
    find_all_bindings,
)
from .engine import (
    DatalogEngine,
    Query,
    QueryResult,
    Statement,
)
from .schema import (
    AtomSpec,
    ConstraintSpec,
    RuleSpec,
    ProgramDocument,
)
from .loader import (
    ProgramLoader,
    PROGRAMS_DIR,
)
from .backend import (
    DatalogBackend,
    ExecutionResult,
)

__all__ = [
    # Terms
    "Bound",
    "Unbound",
    "Term",
    "is_variable",
    "make_term",
    # Errors
    "DatalogError",
    "ArityMismatch",
    "UnrestrictedHead",
    "NameClash",
    "UnboundInConstraint",
    "NonGroundFact",
    "FixpointNotReached",
    # Fact storage
    "Fact",
    "Signature",
    "RelationStore",
    "fact",
    # Rules
    "EqualityConstraint",
    "BodyExpression",
    "Rule",
    "RuleStore",
    "rule",
    "eq",
    "neq",
    "unrestricted_variables",
    # Unification
    "Binding",
    "match_fact",
    "resolve_term",
    "evaluate_constraint",
    "substitute",
    "find_all_bindings",
    # Engine
    "DatalogEngine",
    "Query",
    "QueryResult",
    "Statement",
    # Program documents
    "AtomSpec",
    "ConstraintSpec",
    "RuleSpec",
    "ProgramDocument",
    "ProgramLoader",
    "PROGRAMS_DIR",
    "DatalogBackend",
    "ExecutionResult",
]
