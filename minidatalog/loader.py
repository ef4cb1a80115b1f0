"""Program loader for the Datalog engine.

This module loads program documents (JSON files validated against
`ProgramDocument`) and asserts their facts and rules into an engine.
A few example programs ship with the package under `programs/`.

Example usage:
    from minidatalog import DatalogEngine
    from minidatalog.loader import ProgramLoader

    engine = DatalogEngine()
    ProgramLoader.load_programs(engine, ["graph", "family"])
    # Now engine has the programs' facts and rules loaded
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import TYPE_CHECKING

from .schema import ProgramDocument

if TYPE_CHECKING:
    from .engine import DatalogEngine

__all__ = ["ProgramLoader", "PROGRAMS_DIR"]

logger = logging.getLogger(__name__)

# Bundled program directory
PROGRAMS_DIR = Path(__file__).parent / "programs"


class ProgramLoader:
    """Loader for Datalog program documents.

    Program documents are JSON files containing:
    - facts: Ground facts
    - rules: Derivation rules, bodies may include equality constraints
    - queries: Query patterns (not asserted, answered by the backend)
    """

    # Cache for parsed bundled programs
    _cache: dict[str, ProgramDocument] = {}

    @classmethod
    def available_programs(cls) -> list[str]:
        """List bundled program names.

        Returns:
            List of program names (without .json extension)
        """
        if not PROGRAMS_DIR.exists():
            return []
        return sorted(f.stem for f in PROGRAMS_DIR.glob("*.json"))

    @classmethod
    def load_document(cls, path: str | Path) -> ProgramDocument:
        """Read and validate a program document.

        Args:
            path: Path to a JSON program file

        Returns:
            The validated document

        Raises:
            OSError: If the file cannot be read
            UnicodeDecodeError: If the file is not UTF-8 text
            json.JSONDecodeError: If the file is not valid JSON
            pydantic.ValidationError: If the JSON does not match the schema
        """
        with open(path, encoding="utf-8") as f:
            data = json.load(f)
        return ProgramDocument.model_validate(data)

    @classmethod
    def load_into_engine(cls, engine: "DatalogEngine", document: ProgramDocument) -> int:
        """Assert a document's facts and rules into an engine.

        Facts are asserted before rules. An assertion error stops loading
        and propagates; statements asserted before it stay in the engine.

        Returns:
            Number of facts and rules asserted
        """
        count = 0
        for statement in document.statements():
            engine.assert_statement(statement)
            count += 1
        return count

    @classmethod
    def load_programs(
        cls,
        engine: "DatalogEngine",
        names: list[str],
    ) -> dict[str, int]:
        """Load bundled programs into an engine.

        Args:
            engine: The engine to load into
            names: Bundled program names

        Returns:
            Dict mapping program name to number of facts/rules loaded
        """
        stats = {}

        for name in names:
            try:
                document = cls.get_program(name)
            except FileNotFoundError as e:
                logger.warning(f"Program not found: {e}")
                stats[name] = 0
                continue
            count = cls.load_into_engine(engine, document)
            stats[name] = count
            logger.debug(f"Loaded program '{name}': {count} facts/rules")

        return stats

    @classmethod
    def get_program(cls, name: str) -> ProgramDocument:
        """Get a bundled program document, parsing it on first use."""
        if name in cls._cache:
            return cls._cache[name]

        path = PROGRAMS_DIR / f"{name}.json"
        if not path.exists():
            available = cls.available_programs()
            raise FileNotFoundError(
                f"Program '{name}' not found. Available: {available}"
            )

        document = cls.load_document(path)
        cls._cache[name] = document
        return document

    @classmethod
    def clear_cache(cls) -> None:
        """Clear the program cache."""
        cls._cache.clear()

    @classmethod
    def get_program_info(cls, name: str) -> dict:
        """Get metadata about a bundled program."""
        document = cls.get_program(name)
        return {
            "name": document.name or name,
            "description": document.description,
            "facts_count": len(document.facts),
            "rules_count": len(document.rules),
            "queries_count": len(document.queries),
        }
