"""Embedded C backend.

WHY: Microcontroller builds drive the audio unit through memory-mapped
registers. This backend produces a self-contained C file with the
register map as #defines and the program's memory writes as volatile
stores in ``audio_init``.

HOW: A fixed header (title comment, register #defines), then one
volatile byte store per WRITE in IR order, then fixed seq_start,
seq_stop and seq_tick functions.

RULES:
- Every WRITE is emitted, in IR order
- Store addresses print as "0x" + lower-case hex, no padding
- seq_tick advances SEQ_STEP modulo 16 ((step + 1) & 0x0F)
- Output suffix: ".c"
"""

from __future__ import annotations

from typing import List

from tenten_compiler.core.ir import Instruction, writes
from tenten_compiler.backends.base import BackendOptions, BaseBackend

_BANNER = """\
/**
 * {title}
 * Generated by $1010 Compiler
 * Target: C (embedded)
 */
"""

_REGISTERS = """
#include <stdint.h>

// Audio MMIO base address (adjust for your platform)
#define AUDIO_BASE 0x1000

// Memory-mapped registers
#define KICK_GATE    ((volatile uint8_t*)(AUDIO_BASE + 0x000))
#define KICK_PITCH   ((volatile uint8_t*)(AUDIO_BASE + 0x010))
#define SNARE_GATE   ((volatile uint8_t*)(AUDIO_BASE + 0x020))
#define SNARE_TONE   ((volatile uint8_t*)(AUDIO_BASE + 0x030))
#define SNARE_SNAP   ((volatile uint8_t*)(AUDIO_BASE + 0x040))
#define LEAD_GATE    ((volatile uint8_t*)(AUDIO_BASE + 0x100))
#define LEAD_ARP     ((volatile uint8_t*)(AUDIO_BASE + 0x110))
#define BASS_GATE    ((volatile uint8_t*)(AUDIO_BASE + 0x200))
#define BASS_FM      ((volatile uint8_t*)(AUDIO_BASE + 0x210))
#define BASS_FILT    ((volatile uint8_t*)(AUDIO_BASE + 0x220))
#define NOISE_GATE   ((volatile uint8_t*)(AUDIO_BASE + 0x300))
#define NOISE_DECAY  ((volatile uint8_t*)(AUDIO_BASE + 0x310))
#define NOISE_TYPE   ((volatile uint8_t*)(AUDIO_BASE + 0x320))
#define SEQ_CTRL     ((volatile uint8_t*)(AUDIO_BASE + 0x500))
#define SEQ_TEMPO    ((volatile uint8_t*)(AUDIO_BASE + 0x501))
#define SEQ_STEP     ((volatile uint8_t*)(AUDIO_BASE + 0x502))
#define SEQ_SWING    ((volatile uint8_t*)(AUDIO_BASE + 0x503))

void audio_init(void) {
"""

_SEQUENCER = """\
}

void seq_start(void) {
    *SEQ_CTRL = 0x03;  // loop + play
}

void seq_stop(void) {
    *SEQ_CTRL = 0x00;
}

// Call this from your main loop or timer ISR
void seq_tick(void) {
    uint8_t step = *SEQ_STEP;

    // Trigger voices based on gate values
    // (Implement your synthesis here)

    // Advance step
    *SEQ_STEP = (step + 1) & 0x0F;
}
"""


class CBackend(BaseBackend):
    """Emits embedded C source."""

    media_type = "text/x-c"

    @property
    def name(self) -> str:
        return "C (embedded)"

    @property
    def suffix(self) -> str:
        return ".c"

    def emit(self, ir: List[Instruction], options: BackendOptions) -> str:
        parts = [_BANNER.format(title=options.title), _REGISTERS]
        for instr in writes(ir):
            parts.append("    *((volatile uint8_t*)0x{:x}) = {};\n".format(
                instr.address, instr.value,
            ))
        parts.append(_SEQUENCER)
        return "".join(parts)
