"""Preset instrument packs: classic drum machine and synth settings.

WHY: A blank audio region is a poor starting point. Packs capture the
register settings and demo patterns of well-known machines so a user can
seed the sequencer state with one call, or turn a pack into source text
and keep editing it in the sequencer language.

HOW: PACKS maps a pack key ("TR-808") to a Pack dataclass holding its
metadata, the init pokes as (address, value) pairs, and named demo
patterns. load_pack() and load_pattern() push bytes through any
``poke(address, value)`` callable, usually SequencerHost.poke. to_source()
renders the same state as compilable source.

RULES:
- Pack pattern strings use their own grammar (parse_pack_pattern), not
  the sequencer-language pattern grammar: "x"=1, "X"=127, "."=0, and
  two-character hex pairs ("24" -> 0x24 = 36)
- load_pattern() applies the pack init, then the bpm (if any) to $1501,
  then 16 bytes per voice the pattern defines
- Unknown pack or pattern names raise ValueError
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Callable, Dict, List, Optional, Tuple

from tenten_compiler.config import SEQ_TEMPO, VOICE_BASE_ADDRESSES
from tenten_compiler.core.patterns import STEP_COUNT, decode_pattern, encode_triggers

logger = logging.getLogger(__name__)

Poke = Callable[[int, int], None]

_HEX = frozenset("0123456789abcdefABCDEF")


@dataclass
class PackPattern:
    """A demo pattern: optional bpm plus per-voice pattern strings."""

    bpm: Optional[int] = None
    voices: Dict[str, str] = field(default_factory=dict)


@dataclass
class Pack:
    name: str
    category: str
    year: int
    manufacturer: str
    description: str
    teaches: List[str]
    init: List[Tuple[int, int]]
    patterns: Dict[str, PackPattern] = field(default_factory=dict)


PACKS: Dict[str, Pack] = {
    "TR-808": Pack(
        name="Roland TR-808",
        category="drums",
        year=1980,
        manufacturer="Roland",
        description="The 808. Hip-hop, electro, trap. That deep kick, crispy snare, iconic cowbell.",
        teaches=["Analog synthesis", "Envelope shaping", "Why 808 kick = sine + pitch envelope"],
        init=[
            (0x1010, 32),   # KICK_PITCH, very low
            (0x1080, 127),  # KICK_VEL
            (0x1030, 180),  # SNARE_TONE
            (0x1040, 120),  # SNARE_SNAP
            (0x1090, 110),  # SNARE_VEL
            (0x1310, 4),    # NOISE_DECAY, closed hat
            (0x1320, 0),    # NOISE_TYPE, white
            (0x1330, 100),  # NOISE_VEL
            (0x1050, 127),  # mixer: kick
            (0x1051, 90),   # snare
            (0x1052, 70),   # lead
            (0x1053, 100),  # bass
            (0x1054, 80),   # hats
        ],
        patterns={
            "Boom Bap": PackPattern(bpm=90, voices={
                "kick": "x.....x...x.....",
                "snare": "....x.......x...",
                "noise": "x.x.x.x.x.x.x.x.",
            }),
            "Trap": PackPattern(bpm=140, voices={
                "kick": "x.....x.x.......",
                "snare": "....x.......x...",
                "noise": "x.xxx.x.x.xxx.x.",
            }),
            "Electro": PackPattern(bpm=120, voices={
                "kick": "x..x..x..x..x...",
                "snare": "....x.......x...",
                "noise": "x.x.x.x.x.x.x.x.",
            }),
        },
    ),
    "TR-909": Pack(
        name="Roland TR-909",
        category="drums",
        year=1983,
        manufacturer="Roland",
        description="House and techno foundation. Punchier than 808, real hi-hat samples.",
        teaches=["Hybrid analog/digital", "Sample + synthesis", "Why house music exists"],
        init=[
            (0x1010, 41),
            (0x1080, 120),
            (0x1030, 200),
            (0x1040, 150),
            (0x1090, 115),
            (0x1310, 6),
            (0x1320, 0),
            (0x1330, 85),
            (0x1050, 120),
            (0x1051, 95),
            (0x1054, 75),
        ],
        patterns={
            "Four on the Floor": PackPattern(bpm=124, voices={
                "kick": "x...x...x...x...",
                "snare": "....x.......x...",
                "noise": "x.x.x.x.x.x.x.x.",
            }),
            "Breakbeat": PackPattern(bpm=130, voices={
                "kick": "x.....x...x.....",
                "snare": "....x..x....x...",
                "noise": "x.x.x.x.x.x.x.x.",
            }),
            "Techno": PackPattern(bpm=138, voices={
                "kick": "x...x...x...x...",
                "snare": "........x.......",
                "noise": "..x...x...x...x.",
            }),
        },
    ),
    "TR-707": Pack(
        name="Roland TR-707",
        category="drums",
        year=1984,
        manufacturer="Roland",
        description="Digital drums. New Order, Depeche Mode. Clean, precise, 80s.",
        teaches=["PCM samples", "Digital audio", "8-bit sampling"],
        init=[
            (0x1010, 38),
            (0x1030, 220),
            (0x1040, 100),
            (0x1310, 3),
            (0x1050, 100),
            (0x1051, 100),
            (0x1054, 90),
        ],
        patterns={
            "New Wave": PackPattern(bpm=120, voices={
                "kick": "x...x...x...x...",
                "snare": "....x.......x...",
                "noise": "x.x.x.x.x.x.x.x.",
            }),
        },
    ),
    "CR-78": Pack(
        name="Roland CR-78",
        category="drums",
        year=1978,
        manufacturer="Roland",
        description='First programmable drum machine. Phil Collins "In The Air Tonight".',
        teaches=["Early digital", "Step programming origins", "Why 16 steps?"],
        init=[
            (0x1010, 45),
            (0x1030, 160),
            (0x1040, 60),
            (0x1310, 2),
            (0x1050, 90),
            (0x1051, 80),
            (0x1054, 70),
        ],
        patterns={
            "In The Air": PackPattern(bpm=94, voices={
                "kick": "x.......x.......",
                "snare": "....x.......x...",
                "noise": "x...x...x...x...",
            }),
        },
    ),
    "TB-303": Pack(
        name="Roland TB-303",
        category="synth",
        year=1981,
        manufacturer="Roland",
        description="Acid house. That squelchy, resonant bassline. Accents and slides.",
        teaches=["Resonant filters", "Accent = velocity", 'Why acid sounds "alive"'],
        init=[
            (0x1220, 40),   # BASS_FILT, low cutoff
            (0x1210, 80),   # BASS_FM
            (0x1230, 127),  # BASS_VEL
            (0x1120, 100),  # LEAD_VEL
        ],
        patterns={
            "Acid Line": PackPattern(bpm=130, voices={
                "bass": "24..24..27..24..",
                "lead": "................",
            }),
            "Squelch": PackPattern(bpm=138, voices={
                "bass": "24242424272424..",
            }),
        },
    ),
    "JUNO-106": Pack(
        name="Roland Juno-106",
        category="synth",
        year=1984,
        manufacturer="Roland",
        description="The poly synth. Lush pads, that chorus. Every 80s record.",
        teaches=["Chorus effect", "PWM synthesis", "Why unison = fat"],
        init=[
            (0x1110, 1),    # LEAD_ARP
            (0x1120, 90),   # LEAD_VEL
            (0x105C, 8),    # KICK_DETUNE
            (0x105E, 12),   # LEAD_DETUNE
            (0x1220, 70),   # BASS_FILT
            (0x1210, 30),   # BASS_FM
        ],
        patterns={
            "Synthwave Pad": PackPattern(bpm=100, voices={
                "lead": "3C..3C..40..40..",
                "bass": "30......30......",
            }),
        },
    ),
    "Jungle": Pack(
        name="Jungle / D&B",
        category="genre",
        year=1992,
        manufacturer="UK",
        description="Breakbeats at 160+. Amen break chopped. Bass pressure.",
        teaches=["Breakbeat programming", "Time-stretching", "Why 160+ BPM?"],
        init=[
            (0x1010, 42),
            (0x1030, 210),
            (0x1040, 150),
            (0x1310, 3),
            (0x1503, 0),    # no swing at this speed
        ],
        patterns={
            "Amen": PackPattern(bpm=170, voices={
                "kick": "x.....x.x.......",
                "snare": "....x..x....x..x",
                "noise": "x.x.x.x.x.x.x.x.",
            }),
        },
    ),
}


def _leading_hex(text: str) -> int:
    digits = ""
    for ch in text:
        if ch not in _HEX:
            break
        digits += ch
    return int(digits, 16) if digits else 0


def parse_pack_pattern(text: str) -> List[int]:
    """Decode a pack pattern string into exactly 16 byte values.

    A hex digit with at least one character after it starts a two-character
    pair; only its leading hex digits count ("2." -> 2). A trailing lone
    hex digit and any other unknown character are skipped.
    """
    result: List[int] = []
    i = 0
    while i < len(text) and len(result) < STEP_COUNT:
        ch = text[i]
        if ch in ("x", "X"):
            result.append(127 if ch == "X" else 1)
            i += 1
        elif ch == ".":
            result.append(0)
            i += 1
        elif ch in _HEX and i + 1 < len(text):
            result.append(_leading_hex(text[i:i + 2]))
            i += 2
        else:
            i += 1

    result.extend([0] * (STEP_COUNT - len(result)))
    return result


def get_pack(name: str) -> Pack:
    """Look up a pack by key.

    Raises:
        ValueError: If no pack has that key.
    """
    pack = PACKS.get(name)
    if pack is None:
        logger.warning("Pack not found: %s", name)
        raise ValueError("Pack not found: {}".format(name))
    return pack


def get_pattern(pack_name: str, pattern_name: str) -> PackPattern:
    pack = get_pack(pack_name)
    pattern = pack.patterns.get(pattern_name)
    if pattern is None:
        logger.warning("Pattern not found: %s/%s", pack_name, pattern_name)
        raise ValueError("Pattern not found: {}/{}".format(pack_name, pattern_name))
    return pattern


def list_packs() -> Dict[str, List[Dict[str, object]]]:
    """Packs grouped by category: {category: [{name, year, description}]}."""
    categories: Dict[str, List[Dict[str, object]]] = {}
    for key, pack in PACKS.items():
        categories.setdefault(pack.category or "other", []).append({
            "name": key,
            "year": pack.year,
            "description": pack.description,
        })
    return categories


def load_pack(name: str, poke: Poke) -> Pack:
    """Apply a pack's init pokes through ``poke``."""
    pack = get_pack(name)
    for address, value in pack.init:
        poke(address, value)
    logger.info("Loaded: %s (%d) - %s", pack.name, pack.year, pack.description)
    return pack


def load_pattern(pack_name: str, pattern_name: str, poke: Poke) -> PackPattern:
    """Apply a pack's init, then one of its demo patterns, through ``poke``."""
    pattern = get_pattern(pack_name, pattern_name)
    load_pack(pack_name, poke)

    if pattern.bpm:
        poke(SEQ_TEMPO, pattern.bpm)

    for voice, base in VOICE_BASE_ADDRESSES.items():
        text = pattern.voices.get(voice)
        if text:
            for index, value in enumerate(parse_pack_pattern(text)):
                poke(base + index, value)

    return pattern


def to_source(pack_name: str, pattern_name: str) -> str:
    """Render a pack pattern as sequencer-language source.

    Trigger-only voices become @pattern definitions bound in a scene;
    voices carrying note bytes become @poke lines. Compiling the result
    reproduces the memory that load_pattern() writes, plus the
    SEQ_CTRL play/loop byte from @play.
    """
    pack = get_pack(pack_name)
    pattern = get_pattern(pack_name, pattern_name)

    lines = [
        "# {} ({}) - {}".format(pack.name, pack.year, pack.description),
        '@title "{} / {}"'.format(pack_name, pattern_name),
    ]
    if pattern.bpm:
        lines.append("@tempo {}".format(pattern.bpm))

    lines.append("")
    lines.append("# {} init".format(pack_name))
    for address, value in pack.init:
        lines.append("@poke ${:04X} {}".format(address, value))

    assignments: List[Tuple[str, str]] = []
    for voice, base in VOICE_BASE_ADDRESSES.items():
        text = pattern.voices.get(voice)
        if not text:
            continue
        steps = parse_pack_pattern(text)
        spelled = encode_triggers(steps)
        lines.append("")
        if spelled is not None and decode_pattern(spelled) == steps:
            name = "{}_line".format(voice)
            lines.append('@pattern {} "{}"'.format(name, spelled))
            assignments.append((voice, name))
        else:
            lines.append("# {} notes".format(voice))
            for index, value in enumerate(steps):
                if value:
                    lines.append("@poke ${:04X} {}".format(base + index, value))

    lines.append("")
    lines.append("@scene main")
    for voice, name in assignments:
        lines.append("{}: {}".format(voice, name))
    lines.append("@play main loop")
    return "\n".join(lines) + "\n"
