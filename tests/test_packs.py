"""Tests for the preset instrument packs.

WHY: Pack data is consumed two ways: poked straight into memory, or
rendered as source and compiled. Both routes must land on the same
bytes, otherwise a user who "opens a pack as source" hears something
different from the preset.
"""

import pytest

from tenten_compiler import compile
from tenten_compiler.backends.intel_hex import parse_intel_hex
from tenten_compiler.config import AUDIO_REGION_SIZE, AUDIO_REGION_START, SEQ_CTRL
from tenten_compiler.packs import (
    PACKS,
    get_pack,
    list_packs,
    load_pack,
    load_pattern,
    parse_pack_pattern,
    to_source,
)
from tenten_compiler.runtime.host import SequencerHost

ALL_PATTERNS = [
    (pack_name, pattern_name)
    for pack_name, pack in PACKS.items()
    for pattern_name in pack.patterns
]


class TestParsePackPattern:
    """Pack pattern grammar."""

    def test_triggers(self):
        assert parse_pack_pattern("x...X...") == [1, 0, 0, 0, 127] + [0] * 11

    def test_hex_pairs(self):
        assert parse_pack_pattern("24..27..") == [0x24, 0, 0, 0x27, 0, 0] + [0] * 10

    def test_hex_pair_with_trailing_rest_reads_leading_digit(self):
        # "2." is one pair: only the leading hex digit counts
        assert parse_pack_pattern("2.x")[:2] == [2, 1]

    def test_unknown_characters_skipped(self):
        assert parse_pack_pattern("x-x")[:2] == [1, 1]

    def test_trailing_lone_hex_digit_skipped(self):
        assert parse_pack_pattern("x3") == [1] + [0] * 15

    def test_truncated_to_sixteen(self):
        assert parse_pack_pattern("x" * 20) == [1] * 16


class TestCatalog:
    """list_packs() and get_pack()."""

    def test_grouped_by_category(self):
        catalog = list_packs()
        assert set(catalog) == {"drums", "synth", "genre"}
        drum_names = [entry["name"] for entry in catalog["drums"]]
        assert drum_names == ["TR-808", "TR-909", "TR-707", "CR-78"]
        assert catalog["genre"][0] == {
            "name": "Jungle",
            "year": 1992,
            "description": "Breakbeats at 160+. Amen break chopped. Bass pressure.",
        }

    def test_get_pack(self):
        pack = get_pack("TR-808")
        assert pack.year == 1980
        assert "Boom Bap" in pack.patterns

    def test_unknown_pack(self):
        with pytest.raises(ValueError, match="Pack not found: TR-1000"):
            get_pack("TR-1000")

    def test_init_pokes_are_bytes_in_audio_region(self):
        for pack in PACKS.values():
            for address, value in pack.init:
                assert AUDIO_REGION_START <= address < AUDIO_REGION_START + AUDIO_REGION_SIZE
                assert 0 <= value <= 255


class TestLoading:
    """load_pack() and load_pattern() through a poke callback."""

    def test_load_pack_applies_init(self, poke_sink):
        load_pack("TB-303", poke_sink.__setitem__)
        assert poke_sink == {0x1220: 40, 0x1210: 80, 0x1230: 127, 0x1120: 100}

    def test_load_pattern_order(self):
        calls = []
        load_pattern("CR-78", "In The Air", lambda a, v: calls.append((a, v)))
        init = get_pack("CR-78").init
        assert calls[:len(init)] == init
        assert calls[len(init)] == (0x1501, 94)
        voice_calls = calls[len(init) + 1:]
        # kick, snare, noise: 16 bytes each, rests included
        assert len(voice_calls) == 48
        assert voice_calls[0] == (0x1000, 1)
        assert voice_calls[16] == (0x1020, 0)
        assert voice_calls[32] == (0x1300, 1)

    def test_load_pattern_note_bytes(self, poke_sink):
        load_pattern("TB-303", "Acid Line", poke_sink.__setitem__)
        assert poke_sink[0x1200] == 0x24
        assert poke_sink[0x1206] == 0x27
        assert poke_sink[0x1501] == 130

    def test_unknown_pattern(self, poke_sink):
        with pytest.raises(ValueError, match="Pattern not found: TR-808/Polka"):
            load_pattern("TR-808", "Polka", poke_sink.__setitem__)
        assert poke_sink == {}

    def test_load_into_host(self):
        host = SequencerHost()
        load_pattern("TR-909", "Four on the Floor", host.poke)
        assert host.get_tempo() == 124
        assert host.read(0x1010) == 41
        assert host.read(0x1004) == 1


class TestToSource:
    """Pack patterns rendered as compilable source."""

    def test_source_shape(self):
        source = to_source("TR-808", "Boom Bap")
        assert '@title "TR-808 / Boom Bap"' in source
        assert "@tempo 90" in source
        assert "@poke $1010 32" in source
        assert '@pattern kick_line "x.....x...x....."' in source
        assert "@play main loop" in source

    def test_note_voices_become_pokes(self):
        source = to_source("TB-303", "Squelch")
        assert "@pattern bass_line" not in source
        assert "@poke $1200 36" in source

    @pytest.mark.parametrize("pack_name,pattern_name", ALL_PATTERNS)
    def test_compiles_cleanly(self, pack_name, pattern_name):
        result = compile(to_source(pack_name, pattern_name), {"target": "hex"})
        assert result.success is True
        assert result.errors == []
        assert result.warnings == []

    @pytest.mark.parametrize("pack_name,pattern_name", ALL_PATTERNS)
    def test_compiled_image_matches_direct_load(self, pack_name, pattern_name):
        host = SequencerHost()
        host.memory[0x1501] = 0
        load_pattern(pack_name, pattern_name, host.poke)
        host.write(SEQ_CTRL, 3)
        expected = host.get_memory_slice(AUDIO_REGION_START, AUDIO_REGION_SIZE)

        result = compile(to_source(pack_name, pattern_name), {"target": "hex"})
        image = bytearray(AUDIO_REGION_SIZE)
        for address, data in parse_intel_hex(result.output):
            offset = address - AUDIO_REGION_START
            image[offset:offset + len(data)] = data
        assert bytes(image) == expected
