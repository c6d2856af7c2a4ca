"""Shared test fixtures for the tenten_compiler test suite.

WHY: Most test modules compile the same handful of programs: a
four-on-the-floor kick scene, a full multi-voice song, and the small
failure cases. Keeping the source text here means every suite exercises
the same programs.

RULES:
- Sources are plain strings, exactly as a user would type them.
- BASIC_SOURCE is the canonical hex scenario: tempo 120, kick on steps
  0/4/8/12, one scene played once.
"""

from typing import Dict, List

import pytest

from tenten_compiler.runtime.host import VoiceCallbacks

BASIC_SOURCE = (
    "@tempo 120\n"
    '@pattern kickp "x...x...x...x..."\n'
    "@scene a\n"
    "kick: kickp\n"
    "@play a\n"
)

SONG_SOURCE = """\
# Demo song
@title "Night Drive"
@tempo 128
@swing 10

@pattern k "x...x...x...x..."
@pattern s "....X.......X..."
@pattern h "x.x.x.x.x.x.x.x."
@pattern bl "C3..C3..G2..C3.."

@scene verse
kick: k
snare: s
noise: h
bass: bl

@poke $1010 32
@play verse loop
"""


@pytest.fixture
def basic_source() -> str:
    return BASIC_SOURCE


@pytest.fixture
def song_source() -> str:
    return SONG_SOURCE


class RecordingCallbacks(VoiceCallbacks):
    """VoiceCallbacks that remembers every trigger as (voice, args)."""

    def __init__(self) -> None:
        self.calls: List[tuple] = []

    def trigger_kick(self, pitch):
        self.calls.append(("kick", pitch))

    def trigger_snare(self, tone, snap):
        self.calls.append(("snare", tone, snap))

    def trigger_lead(self, note):
        self.calls.append(("lead", note))

    def trigger_bass(self, note, fm):
        self.calls.append(("bass", note, fm))

    def trigger_noise(self, decay):
        self.calls.append(("noise", decay))

    def voices(self) -> List[str]:
        return [call[0] for call in self.calls]


@pytest.fixture
def recorder() -> RecordingCallbacks:
    return RecordingCallbacks()


@pytest.fixture
def poke_sink() -> Dict[int, int]:
    """A dict that packs can poke into via ``sink.__setitem__``."""
    return {}
