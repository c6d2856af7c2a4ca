"""Configuration constants, the audio memory map, and .env loading.

WHY: Centralizes all configurable values so they are easy to find,
update, and override. The memory map (voice base addresses, sequencer
registers, parameter slots) is plain data, kept out of the IR
generator and the backends, so every phase and every target agrees on
where a byte lives.

HOW: python-dotenv loads the .env file on import. Constants are defined
as module-level dicts, tuples, and ints. Compile defaults and server
settings can be overridden via environment variables.

RULES:
- The audio region is [0x1000, 0x1600), 0x600 bytes
- Each voice owns a fixed base address; a pattern occupies 16 bytes from it
- Sequencer registers live at 0x1500-0x1503 (ctrl, tempo, step, swing)
- Tempo is 20-255 BPM, swing is 0-100 percent
- All defaults can be overridden via environment variables
"""

from __future__ import annotations

import os
from typing import Optional

from dotenv import load_dotenv

# Load .env from the project root (where the compiler is run from)
load_dotenv()

# ---------------------------------------------------------------------------
# Audio memory map
# ---------------------------------------------------------------------------

AUDIO_REGION_START = 0x1000
AUDIO_REGION_END = 0x1600
"""Exclusive upper bound of the audio MMIO region."""

AUDIO_REGION_SIZE = AUDIO_REGION_END - AUDIO_REGION_START

SEQ_CTRL = 0x1500
SEQ_TEMPO = 0x1501
SEQ_STEP = 0x1502
SEQ_SWING = 0x1503

CTRL_STOP = 0x00
CTRL_PLAY = 0x01
CTRL_LOOP = 0x02
CTRL_PLAY_LOOP = CTRL_PLAY | CTRL_LOOP

STEPS_PER_PATTERN = 16

VOICE_BASE_ADDRESSES: dict[str, int] = {
    "kick": 0x1000,
    "snare": 0x1020,
    "lead": 0x1100,
    "bass": 0x1200,
    "noise": 0x1300,
}

VOICE_NAMES: tuple[str, ...] = tuple(VOICE_BASE_ADDRESSES)
"""Voice names in hardware index order (kick=0 ... noise=4)."""

# Voice parameter registers read by the host runtime when a gate fires
KICK_PITCH = 0x1010
SNARE_TONE = 0x1030
SNARE_SNAP = 0x1040
LEAD_ARP = 0x1110
BASS_FM = 0x1210
BASS_FILT = 0x1220
NOISE_DECAY = 0x1310
NOISE_TYPE = 0x1320

# ---------------------------------------------------------------------------
# Value ranges
# ---------------------------------------------------------------------------

TEMPO_MIN = 20
TEMPO_MAX = 255
SWING_MIN = 0
SWING_MAX = 100
BYTE_MIN = 0
BYTE_MAX = 255


def voice_base_address(voice: Optional[str]) -> Optional[int]:
    """Return the base address for a voice name, or None if unknown."""
    if voice is None:
        return None
    return VOICE_BASE_ADDRESSES.get(voice)


def in_audio_region(address: int) -> bool:
    """True if the address falls inside [0x1000, 0x1600)."""
    return AUDIO_REGION_START <= address < AUDIO_REGION_END


def _env_bool(name: str, default: str) -> bool:
    return os.getenv(name, default).strip().lower() in ("1", "true", "yes", "on")


# ---------------------------------------------------------------------------
# Compile defaults
# ---------------------------------------------------------------------------

DEFAULT_TARGET = os.getenv("TENTEN_DEFAULT_TARGET", "mtmc16")
DEFAULT_TITLE = os.getenv("TENTEN_DEFAULT_TITLE", "Untitled")
DEFAULT_TEMPO = int(os.getenv("TENTEN_DEFAULT_TEMPO", "120"))
DEFAULT_CLEAR_RESTS = _env_bool("TENTEN_CLEAR_RESTS", "false")

# ---------------------------------------------------------------------------
# HTTP server defaults
# ---------------------------------------------------------------------------

API_HOST = os.getenv("TENTEN_API_HOST", "127.0.0.1")
API_PORT = int(os.getenv("TENTEN_API_PORT", "8010"))
