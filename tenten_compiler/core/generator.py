"""IR generation: one ordered walk over the AST.

WHY: The AST says what the musician wrote; the IR says what memory must
look like. This module is the bridge between the two and the only place
that turns voices, patterns and play/stop into register writes.

HOW: Program.body is visited once, in order. Each statement kind maps to
zero or more instructions. Patterns emit nothing on their own; they are
data that voice assignments (directly, through a scene, or through
@play of a scene) expand into WRITEs at the voice's base address.

RULES:
- Comment -> COMMENT(text); Title -> COMMENT("TITLE: <title>")
- Tempo -> TEMPO(bpm), WRITE($1501, bpm)
- Swing -> SWING(pct), WRITE($1503, pct)
- Scene -> COMMENT("SCENE: <name>") then every assignment expanded
- Play -> expand the named scene if it exists, WRITE($1500, 3 if loop
  else 1), PLAY
- Stop -> WRITE($1500, 0), STOP
- Poke -> WRITE(addr, value); Loop -> LOOP(count); Wait -> WAIT(steps)
- Pattern and Param -> nothing
- Expansion drops unknown patterns and unknown voices silently
- Expansion writes only non-zero steps, unless clear_rests is set, in
  which case rests are written as 0 too
"""

from __future__ import annotations

from typing import List, Optional

from tenten_compiler.config import (
    CTRL_PLAY,
    CTRL_PLAY_LOOP,
    CTRL_STOP,
    SEQ_CTRL,
    SEQ_SWING,
    SEQ_TEMPO,
    STEPS_PER_PATTERN,
    voice_base_address,
)
from tenten_compiler.core import ast
from tenten_compiler.core.ir import Instruction, Opcode


class IRGenerator:
    """Builds the instruction list for one Program."""

    def __init__(self, program: ast.Program, clear_rests: bool = False) -> None:
        self.program = program
        self.clear_rests = clear_rests
        self.ir: List[Instruction] = []

    def generate(self) -> List[Instruction]:
        for node in self.program.body:
            self._emit_node(node)
        return self.ir

    def _emit(self, op: Opcode, *args) -> None:
        self.ir.append(Instruction(op=op, args=tuple(args)))

    def _emit_node(self, node: ast.Node) -> None:
        if isinstance(node, ast.Comment):
            self._emit(Opcode.COMMENT, node.value)
        elif isinstance(node, ast.Title):
            self._emit(Opcode.COMMENT, "TITLE: {}".format(node.value))
        elif isinstance(node, ast.Tempo):
            self._emit(Opcode.TEMPO, node.value)
            self._emit(Opcode.WRITE, SEQ_TEMPO, node.value)
        elif isinstance(node, ast.Swing):
            self._emit(Opcode.SWING, node.value)
            self._emit(Opcode.WRITE, SEQ_SWING, node.value)
        elif isinstance(node, ast.Scene):
            self._emit_scene(node)
        elif isinstance(node, ast.VoiceAssign):
            self._emit_voice_assign(node.voice, node.pattern)
        elif isinstance(node, ast.Play):
            scene = self.program.scenes.get(node.scene) if node.scene else None
            if scene is not None:
                self._emit_scene(scene)
            self._emit(Opcode.WRITE, SEQ_CTRL, CTRL_PLAY_LOOP if node.loop else CTRL_PLAY)
            self._emit(Opcode.PLAY)
        elif isinstance(node, ast.Stop):
            self._emit(Opcode.WRITE, SEQ_CTRL, CTRL_STOP)
            self._emit(Opcode.STOP)
        elif isinstance(node, ast.Poke):
            self._emit(Opcode.WRITE, node.addr, node.value)
        elif isinstance(node, ast.Wait):
            self._emit(Opcode.WAIT, node.steps)
        elif isinstance(node, ast.Loop):
            self._emit(Opcode.LOOP, node.count)
        elif isinstance(node, (ast.Pattern, ast.Param)):
            pass
        else:
            raise TypeError("Unhandled AST node: {!r}".format(node))

    def _emit_scene(self, scene: ast.Scene) -> None:
        self._emit(Opcode.COMMENT, "SCENE: {}".format(scene.name))
        for voice, pattern in scene.assignments:
            self._emit_voice_assign(voice, pattern)

    def _emit_voice_assign(self, voice: str, pattern_name: Optional[str]) -> None:
        pattern = self.program.patterns.get(pattern_name) if pattern_name else None
        if pattern is None:
            return

        base = voice_base_address(voice)
        if base is None:
            return

        for index in range(STEPS_PER_PATTERN):
            value = pattern.steps[index] if index < len(pattern.steps) else 0
            if value != 0 or self.clear_rests:
                self._emit(Opcode.WRITE, base + index, value)


def generate(program: ast.Program, clear_rests: bool = False) -> List[Instruction]:
    """Generate the IR for a Program."""
    return IRGenerator(program, clear_rests=clear_rests).generate()
