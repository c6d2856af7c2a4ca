"""Semantic checks over a parsed Program.

WHY: The parser only knows shapes. Whether a scene names a pattern that
exists, whether a voice is one the hardware has, or whether a poke fits
in a byte are questions about meaning, answered here before any code is
generated.

HOW: One read-only walk over Program.body. Each statement kind has its
own checks; findings go into an error list (fatal) or a warning list
(reported, compilation continues).

RULES:
- undefined pattern in a scene or voice assignment -> error
- voice not in kick/snare/lead/bass/noise on VoiceAssign/Param -> warning
- pattern source length != 16 -> warning (also for the empty string)
- tempo outside 20-255 -> error; the parser clamps, so this only fires
  for ASTs built without the parser
- poke address outside [0x1000, 0x1600) -> warning
- poke value outside 0-255 -> error
"""

from __future__ import annotations

from typing import List, Tuple

from tenten_compiler.config import (
    AUDIO_REGION_END,
    AUDIO_REGION_START,
    BYTE_MAX,
    BYTE_MIN,
    TEMPO_MAX,
    TEMPO_MIN,
    VOICE_NAMES,
    in_audio_region,
)
from tenten_compiler.core import ast
from tenten_compiler.core.diagnostics import Diagnostic
from tenten_compiler.core.patterns import STEP_COUNT


class Linter:
    """Collects semantic errors and warnings for one Program."""

    def __init__(self, program: ast.Program) -> None:
        self.program = program
        self.errors: List[Diagnostic] = []
        self.warnings: List[Diagnostic] = []

    def lint(self) -> Tuple[List[Diagnostic], List[Diagnostic]]:
        defined = set(self.program.patterns)

        for node in self.program.body:
            if isinstance(node, ast.Scene):
                for _voice, pattern in node.assignments:
                    if pattern and pattern not in defined:
                        self._error(node.line, "Undefined pattern: {}".format(pattern))

            elif isinstance(node, ast.VoiceAssign):
                if node.pattern and node.pattern not in defined:
                    self._error(node.line, "Undefined pattern: {}".format(node.pattern))
                self._check_voice(node.voice, node.line)

            elif isinstance(node, ast.Param):
                self._check_voice(node.voice, node.line)

            elif isinstance(node, ast.Pattern):
                if len(node.data) != STEP_COUNT:
                    self._warn(node.line, 'Pattern "{}" has {} chars (expected {})'.format(
                        node.name, len(node.data), STEP_COUNT,
                    ))

            elif isinstance(node, ast.Tempo):
                if node.value < TEMPO_MIN or node.value > TEMPO_MAX:
                    self._error(node.line, "Tempo {} out of range ({}-{})".format(
                        node.value, TEMPO_MIN, TEMPO_MAX,
                    ))

            elif isinstance(node, ast.Poke):
                if not in_audio_region(node.addr):
                    self._warn(node.line, "Address ${:x} outside audio region (${:X}-${:X})".format(
                        node.addr, AUDIO_REGION_START, AUDIO_REGION_END - 1,
                    ))
                if node.value < BYTE_MIN or node.value > BYTE_MAX:
                    self._error(node.line, "Value {} out of byte range ({}-{})".format(
                        node.value, BYTE_MIN, BYTE_MAX,
                    ))

        return self.errors, self.warnings

    def _check_voice(self, voice, line: int) -> None:
        if voice and voice not in VOICE_NAMES:
            self._warn(line, "Unknown voice: {}".format(voice))

    def _error(self, line: int, msg: str) -> None:
        self.errors.append(Diagnostic(msg=msg, line=line))

    def _warn(self, line: int, msg: str) -> None:
        self.warnings.append(Diagnostic(msg=msg, line=line))


def lint(program: ast.Program) -> Tuple[List[Diagnostic], List[Diagnostic]]:
    """Lint a Program. Returns (errors, warnings)."""
    return Linter(program).lint()
