"""Embedded Rust (no_std) backend.

Same shape as the C backend: register constants, one volatile write
per WRITE instruction inside ``audio_init``, then fixed seq_start,
seq_stop and seq_tick. Writes go through ``core::ptr::write_volatile``
wrapped in ``mmio_write``.
"""

from __future__ import annotations

from typing import List

from tenten_compiler.core.ir import Instruction, writes
from tenten_compiler.backends.base import BackendOptions, BaseBackend

_BANNER = """\
//! {title}
//! Generated by $1010 Compiler
//! Target: Rust (embedded, no_std)
"""

_PRELUDE = """
#![no_std]

/// Audio MMIO base address
const AUDIO_BASE: usize = 0x1000;

/// Voice gate addresses
const KICK_GATE: usize = AUDIO_BASE + 0x000;
const SNARE_GATE: usize = AUDIO_BASE + 0x020;
const LEAD_GATE: usize = AUDIO_BASE + 0x100;
const BASS_GATE: usize = AUDIO_BASE + 0x200;
const NOISE_GATE: usize = AUDIO_BASE + 0x300;

/// Sequencer control registers
const SEQ_CTRL: usize = AUDIO_BASE + 0x500;
const SEQ_TEMPO: usize = AUDIO_BASE + 0x501;
const SEQ_STEP: usize = AUDIO_BASE + 0x502;

/// Write to MMIO
#[inline(always)]
unsafe fn mmio_write(addr: usize, val: u8) {
    core::ptr::write_volatile(addr as *mut u8, val);
}

/// Read from MMIO
#[inline(always)]
unsafe fn mmio_read(addr: usize) -> u8 {
    core::ptr::read_volatile(addr as *const u8)
}

/// Initialize audio patterns
pub fn audio_init() {
    unsafe {
"""

_SEQUENCER = """\
    }
}

/// Start sequencer (loop mode)
pub fn seq_start() {
    unsafe { mmio_write(SEQ_CTRL, 0x03); }
}

/// Stop sequencer
pub fn seq_stop() {
    unsafe { mmio_write(SEQ_CTRL, 0x00); }
}

/// Advance sequencer (call from timer ISR)
pub fn seq_tick() {
    unsafe {
        let step = mmio_read(SEQ_STEP);
        // Trigger voices based on gate values here
        mmio_write(SEQ_STEP, (step + 1) & 0x0F);
    }
}
"""


class RustBackend(BaseBackend):
    """Emits no_std Rust source."""

    media_type = "text/x-rust"

    @property
    def name(self) -> str:
        return "Rust (embedded, no_std)"

    @property
    def suffix(self) -> str:
        return ".rs"

    def emit(self, ir: List[Instruction], options: BackendOptions) -> str:
        parts = [_BANNER.format(title=options.title), _PRELUDE]
        for instr in writes(ir):
            parts.append("        mmio_write(0x{:x}, {});\n".format(instr.address, instr.value))
        parts.append(_SEQUENCER)
        return "".join(parts)
