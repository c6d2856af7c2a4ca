"""Diagnostic records shared by every compiler phase.

WHY: The pipeline never raises on bad source text. Each phase collects
errors and warnings as data so the caller sees every problem of a phase
at once, tagged with where it came from.

RULES:
- phase is one of lexer, parser, linter, backend
- col is None when the phase only knows the line (parser warnings
  and linter findings carry no column)
- line is None only for backend diagnostics (no source position)
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from enum import Enum
from typing import Any, Optional


class Phase(str, Enum):
    """Pipeline phase that produced a diagnostic."""

    LEXER = "lexer"
    PARSER = "parser"
    LINTER = "linter"
    BACKEND = "backend"


@dataclass(frozen=True)
class Diagnostic:
    """One error or warning with its source position."""

    msg: str
    line: Optional[int] = None
    col: Optional[int] = None
    phase: Optional[Phase] = None

    def with_phase(self, phase: Phase) -> Diagnostic:
        return replace(self, phase=phase)

    def to_dict(self) -> dict[str, Any]:
        return {
            "line": self.line,
            "col": self.col,
            "msg": self.msg,
            "phase": self.phase.value if self.phase else None,
        }

    def __str__(self) -> str:
        where = ""
        if self.line is not None:
            where = "{}".format(self.line)
            if self.col is not None:
                where += ":{}".format(self.col)
        prefix = self.phase.value if self.phase else "?"
        if where:
            return "{}:{}: {}".format(prefix, where, self.msg)
        return "{}: {}".format(prefix, self.msg)
