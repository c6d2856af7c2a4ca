"""Pattern-string grammar: 16 characters to 16 step values.

WHY: A pattern is written as a compact string ("x...x...X...x..." or
"C4..E4..G4......") but every later phase works on step values. Keeping
the grammar here lets the parser, the pack loader and the tests share
one decoder.

HOW: The scan visits character positions 0-15 of the string (missing
positions read as "."). Triggers and rests map directly. A note letter
greedily collects the following [#b0-9] characters and must match
^[A-Ga-g][#b]?[0-9]$ to become a MIDI note number; on a match the
collected characters are skipped by the scan. Because a note uses more
than one character position, the scan can yield fewer than 16 values;
the result is padded with rests and truncated to exactly 16.

RULES:
- "." or "-" -> 0 (rest)
- "x" -> 1 (trigger), "X" -> 127 (accent)
- note + optional accidental + octave digit -> (octave + 1) * 12 + semitone
- a note letter whose collected run does not match -> 0
- a bare digit -> its value (0-9)
- anything else -> 0
- output length is always 16
"""

from __future__ import annotations

import re
from typing import List, Optional

STEP_COUNT = 16

REST = 0
TRIGGER = 1
ACCENT = 127

_NOTE_RE = re.compile(r"^([A-Ga-g][#b]?)([0-9])$")
_NOTE_LETTERS = frozenset("ABCDEFGabcdefg")
_NOTE_TAIL = frozenset("#b0123456789")

SEMITONES = {
    "C": 0, "C#": 1, "DB": 1,
    "D": 2, "D#": 3, "EB": 3,
    "E": 4,
    "F": 5, "F#": 6, "GB": 6,
    "G": 7, "G#": 8, "AB": 8,
    "A": 9, "A#": 10, "BB": 10,
    "B": 11,
}


def note_to_midi(name: str, octave: int) -> int:
    """MIDI-style note number for a note name ("C#", "eb") and octave."""
    return (octave + 1) * 12 + SEMITONES.get(name.upper(), 0)


def decode_pattern(text: str) -> List[int]:
    """Decode a pattern string into exactly 16 step values."""
    steps: List[int] = []
    i = 0
    while i < STEP_COUNT:
        ch = text[i] if i < len(text) else "."

        if ch in (".", "-"):
            steps.append(REST)
        elif ch == "x":
            steps.append(TRIGGER)
        elif ch == "X":
            steps.append(ACCENT)
        elif ch in _NOTE_LETTERS:
            j = i + 1
            while j < len(text) and text[j] in _NOTE_TAIL:
                j += 1
            match = _NOTE_RE.match(text[i:j])
            if match:
                steps.append(note_to_midi(match.group(1), int(match.group(2))))
                i = j - 1
            else:
                steps.append(REST)
        elif ch.isdigit() and ch.isascii():
            steps.append(int(ch))
        else:
            steps.append(REST)
        i += 1

    steps.extend([REST] * (STEP_COUNT - len(steps)))
    return steps[:STEP_COUNT]


def encode_triggers(steps: List[int]) -> Optional[str]:
    """Render trigger/rest-only steps back to "x", "X" and "." characters.

    Returns None when any step is a note or digit value that has no
    single-character trigger spelling.
    """
    chars: List[str] = []
    for value in steps:
        if value == REST:
            chars.append(".")
        elif value == TRIGGER:
            chars.append("x")
        elif value == ACCENT:
            chars.append("X")
        else:
            return None
    return "".join(chars)
