"""Pydantic models for Datalog program documents.

A program document is the structured form of a Datalog source file. It
holds facts, rules and queries; string arguments follow the usual surface
convention (uppercase first letter = variable, anything else = constant).

Example program (JSON):
    {
        "name": "ancestry",
        "facts": [
            {"predicate": "parent", "arguments": ["a", "b"]},
            {"predicate": "parent", "arguments": ["b", "c"]}
        ],
        "rules": [
            {
                "name": "grandparent",
                "head": {"predicate": "grandparent", "arguments": ["X", "Z"]},
                "body": [
                    {"predicate": "parent", "arguments": ["X", "Y"]},
                    {"predicate": "parent", "arguments": ["Y", "Z"]}
                ]
            }
        ],
        "queries": [{"predicate": "grandparent", "arguments": ["Q", "R"]}]
    }

Equality constraints in a rule body are written
`{"left": "X", "right": "Y", "equals": false}`.
"""

from __future__ import annotations

from pydantic import BaseModel, Field, field_validator

from .engine import Query
from .fact_store import Fact, fact
from .rule import EqualityConstraint, Rule, rule
from .terms import make_term

__all__ = [
    "AtomSpec",
    "ConstraintSpec",
    "RuleSpec",
    "ProgramDocument",
]


class AtomSpec(BaseModel):
    """A fact, fact pattern or query: `predicate(arguments...)`."""

    predicate: str = Field(..., description="Relation name")
    arguments: list[str] = Field(
        default_factory=list,
        description="Arguments (uppercase first letter = variable)",
    )

    @field_validator("predicate")
    @classmethod
    def validate_predicate(cls, v: str) -> str:
        """Ensure relation name is a lowercase identifier."""
        if not v.isidentifier() or not v[0].islower():
            raise ValueError(
                f"Relation name must be an identifier starting lowercase, got: {v}"
            )
        return v

    @field_validator("arguments")
    @classmethod
    def validate_arguments(cls, v: list[str]) -> list[str]:
        if any(arg == "" for arg in v):
            raise ValueError("Arguments must be non-empty strings")
        return v

    def to_fact(self) -> Fact:
        return fact(self.predicate, *self.arguments)


class ConstraintSpec(BaseModel):
    """An equality (`=`) or inequality (`!=`) constraint in a rule body."""

    left: str = Field(..., min_length=1, description="Left-hand term")
    right: str = Field(..., min_length=1, description="Right-hand term")
    equals: bool = Field(default=True, description="False for inequality")

    def to_constraint(self) -> EqualityConstraint:
        return EqualityConstraint(self.equals, make_term(self.left), make_term(self.right))


class RuleSpec(BaseModel):
    """A rule: `head :- body...`."""

    name: str | None = Field(default=None, description="Optional rule name")
    head: AtomSpec = Field(..., description="Derived fact pattern")
    body: list[AtomSpec | ConstraintSpec] = Field(
        default_factory=list,
        description="Fact patterns and constraints, evaluated in order",
    )

    def to_rule(self) -> Rule:
        body = [
            item.to_fact() if isinstance(item, AtomSpec) else item.to_constraint()
            for item in self.body
        ]
        return rule(self.head.to_fact(), *body, name=self.name)


class ProgramDocument(BaseModel):
    """Complete Datalog program: facts, rules and the queries to answer."""

    name: str | None = Field(default=None, description="Program name")
    description: str = Field(default="", description="What the program models")
    facts: list[AtomSpec] = Field(default_factory=list, description="Ground facts")
    rules: list[RuleSpec] = Field(default_factory=list, description="Derivation rules")
    queries: list[AtomSpec] = Field(default_factory=list, description="Queries to answer")

    def statements(self) -> list[Fact | Rule]:
        """Facts then rules, as engine statements."""
        return [f.to_fact() for f in self.facts] + [r.to_rule() for r in self.rules]

    def query_statements(self) -> list[Query]:
        return [Query(q.to_fact()) for q in self.queries]
