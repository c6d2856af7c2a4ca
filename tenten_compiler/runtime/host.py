"""Pure-Python sequencer host: memory, transport and step clock.

WHY: Compiled programs are only byte writes into the audio region. To
check what a program really does (which voices fire on which step, when
playback stops) something has to own that memory and walk the pattern
the way the sound engine would. SequencerHost is that something, minus
the audio.

HOW: A 64 KiB bytearray holds the whole address space. The transport
state lives in memory itself (SEQ_CTRL, SEQ_TEMPO, SEQ_STEP) so a
compiled image can start, stop and retime playback with plain writes.
tick() advances one sixteenth note: it fires a VoiceCallbacks method for
every voice whose gate byte at the current step is non-zero, moves the
step on, and stops at the end of the bar unless the loop bit is set.
Images arrive as raw bytes, as IR, or as Intel HEX text.

RULES:
- Every write is masked to a byte; addresses outside 0x0000-0xFFFF raise
  ValueError
- is_playing() is bit 0 of SEQ_CTRL; bit 1 is loop
- tick() on a stopped host fires nothing and returns False
- Step wraps 15 -> 0; on the wrap, playback stops if loop is clear
- set_tempo() clamps to 20-255; a fresh host starts at the default tempo
- Voice parameters are read at trigger time, not cached
"""

from __future__ import annotations

import logging
from typing import Iterable, List, Optional, Sequence

from tenten_compiler.backends.intel_hex import parse_intel_hex
from tenten_compiler.config import (
    AUDIO_REGION_START,
    BASS_FM,
    CTRL_LOOP,
    CTRL_PLAY,
    DEFAULT_TEMPO,
    KICK_PITCH,
    NOISE_DECAY,
    SEQ_CTRL,
    SEQ_STEP,
    SEQ_TEMPO,
    SNARE_SNAP,
    SNARE_TONE,
    STEPS_PER_PATTERN,
    TEMPO_MAX,
    TEMPO_MIN,
    VOICE_BASE_ADDRESSES,
    VOICE_NAMES,
)
from tenten_compiler.core.ir import Instruction, writes

logger = logging.getLogger(__name__)

MEMORY_SIZE = 0x10000


class VoiceCallbacks:
    """Receives voice triggers from SequencerHost.tick().

    The base class ignores every trigger; subclass it and override the
    voices you care about.
    """

    def trigger_kick(self, pitch: int) -> None:
        pass

    def trigger_snare(self, tone: int, snap: int) -> None:
        pass

    def trigger_lead(self, note: int) -> None:
        pass

    def trigger_bass(self, note: int, fm: int) -> None:
        pass

    def trigger_noise(self, decay: int) -> None:
        pass


class SequencerHost:
    """Owns sequencer memory and steps through it."""

    def __init__(self, callbacks: Optional[VoiceCallbacks] = None) -> None:
        self.memory = bytearray(MEMORY_SIZE)
        self.callbacks = callbacks or VoiceCallbacks()
        self.memory[SEQ_TEMPO] = DEFAULT_TEMPO & 0xFF

    # ------------------------------------------------------------------
    # Memory access
    # ------------------------------------------------------------------

    def _check(self, address: int) -> None:
        if not 0 <= address < MEMORY_SIZE:
            raise ValueError("Address out of range: ${:X}".format(address))

    def read(self, address: int) -> int:
        self._check(address)
        return self.memory[address]

    def write(self, address: int, value: int) -> None:
        self._check(address)
        self.memory[address] = value & 0xFF

    def poke(self, address: int, value: int) -> None:
        """Alias of write() with the callback signature packs expect."""
        self.write(address, value)

    def get_memory_slice(self, start: int, length: int) -> bytes:
        self._check(start)
        if length < 0 or start + length > MEMORY_SIZE:
            raise ValueError("Slice out of range: ${:X}+{}".format(start, length))
        return bytes(self.memory[start:start + length])

    # ------------------------------------------------------------------
    # Loaders
    # ------------------------------------------------------------------

    def load_image(self, data: bytes, base: int = AUDIO_REGION_START) -> None:
        """Copy a raw image into memory starting at ``base``."""
        self._check(base)
        if base + len(data) > MEMORY_SIZE:
            raise ValueError("Image of {} bytes does not fit at ${:X}".format(len(data), base))
        self.memory[base:base + len(data)] = data
        logger.debug("Loaded %d-byte image at $%04X", len(data), base)

    def load_ir(self, ir: Iterable[Instruction]) -> int:
        """Apply every WRITE in an IR list. Returns the number applied."""
        count = 0
        for instr in writes(ir):
            self.write(instr.address, instr.value)
            count += 1
        logger.debug("Applied %d IR writes", count)
        return count

    def load_intel_hex(self, text: str) -> int:
        """Apply the data records of an Intel HEX file.

        Raises:
            ValueError: If any record is malformed or fails its checksum.
        """
        total = 0
        for address, data in parse_intel_hex(text):
            self.load_image(data, base=address)
            total += len(data)
        logger.debug("Loaded %d bytes from Intel HEX", total)
        return total

    def load_pattern(self, voice_index: int, data: Sequence[int]) -> None:
        """Write up to 16 step bytes at a voice's base address."""
        if not 0 <= voice_index < len(VOICE_NAMES):
            raise ValueError("Unknown voice index: {}".format(voice_index))
        base = VOICE_BASE_ADDRESSES[VOICE_NAMES[voice_index]]
        for index, value in enumerate(list(data)[:STEPS_PER_PATTERN]):
            self.write(base + index, value)

    # ------------------------------------------------------------------
    # Transport
    # ------------------------------------------------------------------

    def start(self) -> None:
        self.write(SEQ_CTRL, self.read(SEQ_CTRL) | CTRL_PLAY)

    def stop(self) -> None:
        self.write(SEQ_CTRL, self.read(SEQ_CTRL) & ~CTRL_PLAY)

    def reset(self) -> None:
        """Stop playback and rewind to step 0. Pattern memory is kept."""
        self.write(SEQ_CTRL, 0)
        self.write(SEQ_STEP, 0)

    def is_playing(self) -> bool:
        return bool(self.read(SEQ_CTRL) & CTRL_PLAY)

    def get_step(self) -> int:
        return self.read(SEQ_STEP) % STEPS_PER_PATTERN

    def get_tempo(self) -> int:
        return self.read(SEQ_TEMPO)

    def set_tempo(self, bpm: int) -> None:
        self.write(SEQ_TEMPO, max(TEMPO_MIN, min(TEMPO_MAX, bpm)))

    def step_seconds(self) -> float:
        """Length of one step (a sixteenth note) at the current tempo."""
        bpm = max(self.get_tempo(), TEMPO_MIN)
        return 60.0 / bpm / 4

    def _fire(self, step: int) -> List[str]:
        fired = []
        for voice in VOICE_NAMES:
            gate = self.read(VOICE_BASE_ADDRESSES[voice] + step)
            if not gate:
                continue
            fired.append(voice)
            if voice == "kick":
                self.callbacks.trigger_kick(self.read(KICK_PITCH))
            elif voice == "snare":
                self.callbacks.trigger_snare(self.read(SNARE_TONE), self.read(SNARE_SNAP))
            elif voice == "lead":
                self.callbacks.trigger_lead(gate)
            elif voice == "bass":
                self.callbacks.trigger_bass(gate, self.read(BASS_FM))
            elif voice == "noise":
                self.callbacks.trigger_noise(self.read(NOISE_DECAY))
        return fired

    def tick(self) -> bool:
        """Play one step. Returns whether the sequencer is still playing."""
        if not self.is_playing():
            return False

        step = self.get_step()
        fired = self._fire(step)
        if fired:
            logger.debug("Step %d: %s", step, ", ".join(fired))

        step = (step + 1) % STEPS_PER_PATTERN
        self.write(SEQ_STEP, step)
        if step == 0 and not self.read(SEQ_CTRL) & CTRL_LOOP:
            self.stop()
        return self.is_playing()
