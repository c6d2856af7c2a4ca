"""Intermediate representation: a flat, target-independent instruction list.

WHY: Five backends need the same facts: which bytes get written where,
which tempo and swing were set, where playback starts and stops. The IR
states those facts once so each backend is a pure function of it and
the front end knows nothing about any target.

HOW: An Instruction is an opcode plus an ordered argument tuple. The
generator appends instructions in program order; nothing ever edits the
list afterwards.

RULES:
- WRITE(address, value) is the only instruction with a memory effect
- TEMPO/SWING/LOOP/WAIT carry one int
- COMMENT carries text and is metadata only
- PLAY/STOP/LOOP/ENDLOOP/WAIT/COPY are markers; no shipped backend
  derives control flow from them
- Opcode byte values are fixed (NOP=0 ... COPY=9, COMMENT=0xFF)
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import IntEnum
from typing import Any, Dict, Iterable, Iterator, List, Tuple


class Opcode(IntEnum):
    NOP = 0x00
    WRITE = 0x01
    TEMPO = 0x02
    SWING = 0x03
    PLAY = 0x04
    STOP = 0x05
    LOOP = 0x06
    ENDLOOP = 0x07
    WAIT = 0x08
    COPY = 0x09
    COMMENT = 0xFF


@dataclass(frozen=True)
class Instruction:
    op: Opcode
    args: Tuple[Any, ...] = ()

    @property
    def address(self) -> int:
        """Target address of a WRITE."""
        return int(self.args[0])

    @property
    def value(self) -> int:
        """Byte value of a WRITE."""
        return int(self.args[1])

    def to_dict(self) -> Dict[str, Any]:
        return {"op": self.op.name, "args": list(self.args)}

    def __str__(self) -> str:
        if self.op is Opcode.WRITE:
            return "WRITE ${:04X}, {}".format(self.address, self.value)
        if self.op is Opcode.COMMENT:
            return "; {}".format(self.args[0] if self.args else "")
        if self.args:
            return "{} {}".format(self.op.name, ", ".join(str(a) for a in self.args))
        return self.op.name


def writes(ir: Iterable[Instruction]) -> Iterator[Instruction]:
    """Yield the WRITE instructions of an IR list in order."""
    for instr in ir:
        if instr.op is Opcode.WRITE:
            yield instr


def dump(ir: List[Instruction]) -> str:
    """Human-readable listing, one instruction per line."""
    return "\n".join(str(instr) for instr in ir)
