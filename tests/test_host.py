"""Tests for the pure-Python sequencer host.

WHY: The host is how compiled images get checked for behaviour rather
than bytes: which voices fire on which step, and when playback stops.
"""

import pytest

from tenten_compiler import compile
from tenten_compiler.config import SEQ_CTRL, SEQ_STEP, SEQ_TEMPO
from tenten_compiler.runtime.host import MEMORY_SIZE, SequencerHost


def _loaded(source, callbacks=None):
    host = SequencerHost(callbacks)
    host.load_ir(compile(source).ir)
    return host


# =========================================================================
# Memory
# =========================================================================


class TestMemory:
    """Reads, writes and bounds."""

    def test_fresh_host(self):
        host = SequencerHost()
        assert len(host.memory) == MEMORY_SIZE
        assert host.get_tempo() == 120
        assert host.is_playing() is False
        assert host.get_step() == 0

    def test_write_masks_to_byte(self):
        host = SequencerHost()
        host.write(0x1000, 300)
        assert host.read(0x1000) == 44

    @pytest.mark.parametrize("address", [-1, MEMORY_SIZE])
    def test_out_of_range(self, address):
        host = SequencerHost()
        with pytest.raises(ValueError, match="Address out of range"):
            host.read(address)
        with pytest.raises(ValueError):
            host.write(address, 1)

    def test_memory_slice(self):
        host = SequencerHost()
        host.write(0x1001, 7)
        assert host.get_memory_slice(0x1000, 3) == bytes([0, 7, 0])

    def test_slice_past_end(self):
        with pytest.raises(ValueError, match="Slice out of range"):
            SequencerHost().get_memory_slice(0xFFFF, 2)


# =========================================================================
# Loaders
# =========================================================================


class TestLoaders:
    """Raw images, IR, Intel HEX and single voice patterns."""

    def test_load_image(self):
        host = SequencerHost()
        host.load_image(bytes([1, 2, 3]))
        assert host.get_memory_slice(0x1000, 3) == bytes([1, 2, 3])

    def test_load_image_must_fit(self):
        with pytest.raises(ValueError, match="does not fit"):
            SequencerHost().load_image(bytes(4), base=0xFFFE)

    def test_load_ir_counts_writes(self, basic_source):
        host = SequencerHost()
        ir = compile(basic_source).ir
        # tempo, four kick steps in the scene, four again on @play, ctrl
        assert host.load_ir(ir) == 10
        assert host.read(SEQ_TEMPO) == 120
        assert host.read(SEQ_CTRL) == 1

    def test_load_intel_hex_matches_ir(self, song_source):
        from_ir = _loaded(song_source)
        from_hex = SequencerHost()
        loaded = from_hex.load_intel_hex(compile(song_source, {"target": "hex"}).output)
        assert loaded > 0
        assert from_hex.get_memory_slice(0x1000, 0x600) == from_ir.get_memory_slice(0x1000, 0x600)

    def test_load_intel_hex_rejects_bad_checksum(self):
        with pytest.raises(ValueError, match="checksum mismatch"):
            SequencerHost().load_intel_hex(":00000001FE")

    def test_load_pattern(self):
        host = SequencerHost()
        host.load_pattern(1, [127] * 20)
        assert host.get_memory_slice(0x1020, 16) == bytes([127] * 16)
        assert host.read(0x1030) == 0

    def test_load_pattern_unknown_voice(self):
        with pytest.raises(ValueError, match="Unknown voice index: 5"):
            SequencerHost().load_pattern(5, [1])


# =========================================================================
# Transport
# =========================================================================


class TestTransport:
    """start/stop/reset and tempo."""

    def test_start_stop_keep_loop_bit(self):
        host = SequencerHost()
        host.write(SEQ_CTRL, 2)
        host.start()
        assert host.read(SEQ_CTRL) == 3
        host.stop()
        assert host.read(SEQ_CTRL) == 2
        assert host.is_playing() is False

    def test_reset_keeps_patterns(self, basic_source):
        host = _loaded(basic_source)
        host.tick()
        host.reset()
        assert host.is_playing() is False
        assert host.get_step() == 0
        assert host.read(0x1000) == 1

    @pytest.mark.parametrize("bpm,expected", [(300, 255), (5, 20), (90, 90)])
    def test_set_tempo_clamps(self, bpm, expected):
        host = SequencerHost()
        host.set_tempo(bpm)
        assert host.get_tempo() == expected

    def test_step_seconds(self):
        host = SequencerHost()
        assert host.step_seconds() == pytest.approx(0.125)
        host.set_tempo(60)
        assert host.step_seconds() == pytest.approx(0.25)

    def test_step_seconds_with_zero_tempo_byte(self):
        host = SequencerHost()
        host.write(SEQ_TEMPO, 0)
        assert host.step_seconds() == pytest.approx(60.0 / 20 / 4)


# =========================================================================
# Step clock
# =========================================================================


class TestTick:
    """Voice triggers and end-of-bar behaviour."""

    def test_stopped_host_fires_nothing(self, basic_source, recorder):
        host = SequencerHost(recorder)
        host.load_ir(compile(basic_source).ir)
        host.stop()
        assert host.tick() is False
        assert recorder.calls == []
        assert host.get_step() == 0

    def test_play_once_stops_after_bar(self, basic_source, recorder):
        host = _loaded(basic_source, recorder)
        results = [host.tick() for _ in range(16)]
        assert results == [True] * 15 + [False]
        assert recorder.voices() == ["kick"] * 4
        assert host.get_step() == 0
        assert host.tick() is False

    def test_loop_keeps_playing(self, song_source, recorder):
        host = _loaded(song_source, recorder)
        for _ in range(32):
            assert host.tick() is True
        assert recorder.voices().count("kick") == 8

    def test_trigger_arguments(self, song_source, recorder):
        host = _loaded(song_source, recorder)
        host.tick()
        assert recorder.calls == [("kick", 32), ("bass", 48, 0), ("noise", 0)]

    def test_snare_and_note_values(self, song_source, recorder):
        host = _loaded(song_source, recorder)
        for _ in range(9):
            host.tick()
        snare_calls = [c for c in recorder.calls if c[0] == "snare"]
        assert snare_calls == [("snare", 0, 0)]
        bass_notes = [c[1] for c in recorder.calls if c[0] == "bass"]
        assert bass_notes == [48, 48, 43]

    def test_parameters_read_at_trigger_time(self, basic_source, recorder):
        host = _loaded(basic_source, recorder)
        host.tick()
        host.write(0x1010, 50)
        for _ in range(4):
            host.tick()
        assert recorder.calls == [("kick", 0), ("kick", 50)]

    def test_step_register_tracks_position(self, basic_source):
        host = _loaded(basic_source)
        for _ in range(5):
            host.tick()
        assert host.read(SEQ_STEP) == 5
