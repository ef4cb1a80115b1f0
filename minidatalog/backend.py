"""Backend executing Datalog program files.

The backend runs a program document end to end:

1. Parses the JSON input
2. Validates the schema with Pydantic
3. Asserts facts and rules into a fresh engine
4. Answers every query in the document

Failures at any step are reported in the result instead of raised, so a
caller can run many programs and inspect each outcome.
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass, field

from pydantic import ValidationError

from .engine import DatalogEngine
from .errors import DatalogError
from .loader import ProgramLoader

logger = logging.getLogger(__name__)

__all__ = ["DatalogBackend", "ExecutionResult"]


@dataclass
class ExecutionResult:
    """Result from executing a program file.

    Attributes:
        success: Whether execution completed without errors
        answers: Mapping of query text to matching facts, rendered as text
        output: Human-readable transcript
        error: Error message if execution failed
    """

    success: bool
    answers: dict[str, list[str]] = field(default_factory=dict)
    output: str = ""
    error: str | None = None


class DatalogBackend:
    """Backend for executing program documents with the Datalog engine."""

    def __init__(self, max_passes: int | None = None) -> None:
        """Initialize the backend.

        Args:
            max_passes: Optional fixpoint pass limit handed to each engine
        """
        self.max_passes = max_passes

    def execute(self, program_path: str) -> ExecutionResult:
        """Execute a program file.

        Args:
            program_path: Path to a JSON program document

        Returns:
            ExecutionResult with one answer list per query
        """
        try:
            document = ProgramLoader.load_document(program_path)

            engine = DatalogEngine(max_passes=self.max_passes)
            loaded = ProgramLoader.load_into_engine(engine, document)

            answers: dict[str, list[str]] = {}
            output_lines = [
                "[Datalog evaluation completed]",
                f"Statements: {loaded}",
            ]
            for query in document.query_statements():
                result = engine.solve(query.pattern)
                answers[str(query)] = [f"{f}." for f in result.facts]
                output_lines.append(f"{query}")
                output_lines.extend(f"  {f}." for f in result.facts)
                output_lines.append(f"  ({result.explanation})")

            logger.info(
                f"Executed {program_path}: {len(answers)} queries, "
                f"{engine.relations.size()} facts"
            )
            return ExecutionResult(
                success=True,
                answers=answers,
                output="\n".join(output_lines),
            )

        except json.JSONDecodeError as e:
            error_msg = f"Invalid JSON in program file: {e}"
            logger.error(error_msg)
            return ExecutionResult(success=False, error=error_msg)
        except UnicodeDecodeError as e:
            error_msg = f"Program file is not valid UTF-8: {e}"
            logger.error(error_msg)
            return ExecutionResult(success=False, error=error_msg)
        except ValidationError as e:
            error_msg = f"Program schema validation failed:\n{e}"
            logger.error(error_msg)
            return ExecutionResult(success=False, error=error_msg)
        except OSError as e:
            error_msg = f"Cannot read program file: {e}"
            logger.error(error_msg)
            return ExecutionResult(success=False, error=error_msg)
        except DatalogError as e:
            error_msg = f"{type(e).__name__}: {e}"
            logger.error(error_msg)
            return ExecutionResult(success=False, error=error_msg)

    def get_file_extension(self) -> str:
        """Get the file extension for program documents.

        Returns:
            ".json" since programs use JSON format
        """
        return ".json"
