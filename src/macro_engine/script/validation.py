"""Sanity checks run on macro source before anything executes."""

from __future__ import annotations

import ast
from dataclasses import dataclass, field
from typing import List, Optional

MARKER = "macro"


class MacroValidationError(ValueError):
    """Raised when a macro fails a pre-execution check."""

    def __init__(self, message: str, *, reason: str, line: Optional[int] = None) -> None:
        super().__init__(message)
        self.reason = reason
        self.line = line


@dataclass(slots=True)
class ValidationReport:
    """Non-fatal findings; ``loop_lines`` lists every ``while`` loop found."""

    tree: ast.Module
    loop_lines: List[int] = field(default_factory=list)

    @property
    def warnings(self) -> List[str]:
        return [
            f"line {line}: while loop; a macro that never finishes cannot be interrupted"
            for line in self.loop_lines
        ]


def first_line(source: str) -> str:
    return source.split("\n", 1)[0]


def has_marker(source: str) -> bool:
    return MARKER in first_line(source).lower()


def parse_source(source: str, *, filename: str = "<macro>") -> ast.Module:
    """Parse the macro body; ``await`` and ``return`` are legal at top level."""

    try:
        return ast.parse(source, filename=filename, mode="exec")
    except SyntaxError as exc:
        raise MacroValidationError(
            f"Macro is not valid Python: {exc.msg} (line {exc.lineno})",
            reason="syntax",
            line=exc.lineno,
        ) from exc


def find_while_loops(tree: ast.AST) -> List[int]:
    """Line numbers of ``while`` loops, a heuristic for runaway macros."""

    return sorted(node.lineno for node in ast.walk(tree) if isinstance(node, ast.While))


def validate_source(
    source: str, *, filename: str = "<macro>", strict_loops: bool = False
) -> ValidationReport:
    if not has_marker(source):
        raise MacroValidationError(
            "The first line of the macro must contain the word 'macro' "
            "somewhere in it, possibly in a comment.",
            reason="marker",
            line=1,
        )

    tree = parse_source(source, filename=filename)
    report = ValidationReport(tree=tree, loop_lines=find_while_loops(tree))
    if strict_loops and report.loop_lines:
        raise MacroValidationError(
            f"while loops are not allowed (line {report.loop_lines[0]})",
            reason="loop",
            line=report.loop_lines[0],
        )
    return report


__all__ = [
    "MARKER",
    "MacroValidationError",
    "ValidationReport",
    "find_while_loops",
    "first_line",
    "has_marker",
    "parse_source",
    "validate_source",
]
