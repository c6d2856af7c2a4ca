"""MTMC-16 assembly backend.

WHY: The MTMC-16 teaching machine runs byte-addressed assembly with a
memory-mapped audio unit. Emitting its assembly dialect lets a program
be stepped through, read and modified by hand on that machine.

HOW: A fixed program skeleton (main, main_loop, audio_init,
load_patterns, seq_start, seq_stop) is emitted around two IR scans. The
first scan turns TEMPO/SWING instructions into register stores inside
audio_init; the second turns every WRITE inside the audio region into an
immediate load plus byte store inside load_patterns, annotated with the
register it hits.

RULES:
- seq_start/seq_stop are always emitted; PLAY/STOP markers are not read
- WRITEs outside [0x1000, 0x1600) are not emitted
- Store addresses print as "$" + upper-case hex, no padding
- Only SEQ_CTRL, SEQ_TEMPO and SEQ_SWING get register names; $1502 is bare
- Output suffix: ".asm"
"""

from __future__ import annotations

from typing import List

from tenten_compiler.config import SEQ_CTRL, SEQ_SWING, SEQ_TEMPO, in_audio_region
from tenten_compiler.core.ir import Instruction, Opcode, writes
from tenten_compiler.backends.base import BackendOptions, BaseBackend

# (start, end-exclusive, label) for the per-voice slot annotations
_VOICE_RANGES = (
    (0x1000, 0x1020, "KICK"),
    (0x1020, 0x1050, "SNARE"),
    (0x1100, 0x1120, "LEAD"),
    (0x1200, 0x1230, "BASS"),
    (0x1300, 0x1330, "NOISE"),
)

_NAMED_REGISTERS = {
    SEQ_CTRL: "SEQ_CTRL",
    SEQ_TEMPO: "SEQ_TEMPO",
    SEQ_SWING: "SEQ_SWING",
}

_PROLOGUE = """\
; {title}
; Generated by $1010 Compiler
; Target: MTMC-16
; Tempo: {tempo}

.data
  ; Pattern data will be embedded inline

.text
main:
  jal audio_init
  jal load_patterns
  jal seq_start

main_loop:
  sys joystick
  mov t0 rv
  andi t0 1
  jz main_loop
  jal seq_stop
  sys exit

audio_init:
"""

_EPILOGUE = """\
seq_start:
  li t0 3              ; loop=1, play=1
  sb t0 $1500          ; SEQ_CTRL
  ret

seq_stop:
  li t0 0
  sb t0 $1500
  ret
"""


def register_name(address: int) -> str:
    """Readable name for an audio-region address, e.g. "SNARE[3]"."""
    for start, end, label in _VOICE_RANGES:
        if start <= address < end:
            return "{}[{}]".format(label, address - start)
    return _NAMED_REGISTERS.get(address, "")


class MTMC16Backend(BaseBackend):
    """Emits MTMC-16 assembly."""

    @property
    def name(self) -> str:
        return "MTMC-16 Assembly"

    @property
    def suffix(self) -> str:
        return ".asm"

    def emit(self, ir: List[Instruction], options: BackendOptions) -> str:
        lines: List[str] = [_PROLOGUE.format(title=options.title, tempo=options.tempo)]

        for instr in ir:
            if instr.op is Opcode.TEMPO:
                lines.append("  li t0 {}\n".format(instr.args[0]))
                lines.append("  sb t0 $1501          ; SEQ_TEMPO\n")
            elif instr.op is Opcode.SWING:
                lines.append("  li t0 {}\n".format(instr.args[0]))
                lines.append("  sb t0 $1503          ; SEQ_SWING\n")
        lines.append("  ret\n\n")

        lines.append("load_patterns:\n")
        for instr in writes(ir):
            if not in_audio_region(instr.address):
                continue
            lines.append("  li t0 {}\n".format(instr.value))
            lines.append("  sb t0 ${:X}          ; {}\n".format(
                instr.address, register_name(instr.address),
            ))
        lines.append("  ret\n\n")

        lines.append(_EPILOGUE)
        return "".join(lines)
