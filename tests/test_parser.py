"""Unit tests for the parser and the pattern-string grammar.

WHY: The parser decides what each directive means, including the
lenient cases (clamped tempo, missing operands, stray identifiers).
Those defaults are easy to break while refactoring and hard to notice.

HOW: Parse source through the real lexer and inspect the resulting
Program, errors and warnings. Pattern decoding is tested directly.
"""

import pytest

from tenten_compiler.core import ast
from tenten_compiler.core.lexer import tokenize
from tenten_compiler.core.parser import parse
from tenten_compiler.core.patterns import decode_pattern, encode_triggers, note_to_midi


def _parse(source):
    tokens, lex_errors = tokenize(source)
    assert lex_errors == []
    return parse(tokens)


def _only(source):
    program, errors, warnings = _parse(source)
    assert len(program.body) == 1
    return program.body[0], errors, warnings


# =========================================================================
# Directives
# =========================================================================


class TestSimpleDirectives:
    """@title, @tempo, @swing, @stop, @loop, @wait, @poke."""

    def test_title(self):
        node, errors, _ = _only('@title "Night Drive"')
        assert isinstance(node, ast.Title)
        assert node.value == "Night Drive"
        assert errors == []

    def test_title_missing_string_defaults(self):
        node, errors, _ = _only("@title 5")
        assert node.value == "Untitled"
        assert [e.msg for e in errors] == ["Expected string after @title"]

    def test_tempo_in_range(self):
        node, errors, warnings = _only("@tempo 128")
        assert node.value == 128
        assert errors == [] and warnings == []

    @pytest.mark.parametrize("given,stored", [(9, 20), (300, 255), (-4, 20)])
    def test_tempo_clamped_with_warning(self, given, stored):
        node, errors, warnings = _only("@tempo {}".format(given))
        assert node.value == stored
        assert errors == []
        assert [w.msg for w in warnings] == ["Tempo {} out of range (20-255)".format(given)]
        assert warnings[0].line == 1

    def test_swing_clamped_with_warning(self):
        node, _, warnings = _only("@swing 150")
        assert node.value == 100
        assert [w.msg for w in warnings] == ["Swing 150 out of range (0-100)"]

    def test_stop(self):
        node, errors, _ = _only("@stop")
        assert isinstance(node, ast.Stop)
        assert errors == []

    def test_loop_and_wait(self):
        program, errors, _ = _parse("@loop 4\n@wait 8")
        assert errors == []
        assert program.body[0] == ast.Loop(count=4, line=1)
        assert program.body[1] == ast.Wait(steps=8, line=2)

    def test_loop_and_wait_defaults_on_missing_operand(self):
        program, errors, _ = _parse("@loop\n@wait")
        assert program.body[0].count == 1
        assert program.body[1].steps == 16
        assert [e.msg for e in errors] == ["Expected loop count", "Expected step count"]

    def test_poke(self):
        node, errors, _ = _only("@poke $1010 32")
        assert node == ast.Poke(addr=0x1010, value=32, line=1)
        assert errors == []

    def test_poke_missing_value(self):
        node, errors, _ = _only("@poke $1010")
        assert node.value == 0
        assert [e.msg for e in errors] == ["Expected value"]

    def test_unknown_directive_is_error_without_node(self):
        program, errors, _ = _parse("@bogus 1\n@stop")
        assert [e.msg for e in errors] == ["Unknown directive: @bogus"]
        assert (errors[0].line, errors[0].col) == (1, 1)
        assert [type(n) for n in program.body] == [ast.Stop]

    def test_errors_accumulate_across_input(self):
        _program, errors, _ = _parse("@title\n@tempo\n@nope")
        assert [e.msg for e in errors] == [
            "Expected string after @title",
            "Expected number after @tempo",
            "Unknown directive: @nope",
        ]


class TestPatternsAndScenes:
    """@pattern, @scene and voice assignment shorthand."""

    def test_pattern_indexed_and_decoded(self):
        program, errors, warnings = _parse('@pattern k "x...x...x...x..."')
        assert errors == [] and warnings == []
        pattern = program.patterns["k"]
        assert pattern.data == "x...x...x...x..."
        assert pattern.steps == [1, 0, 0, 0] * 4

    def test_short_pattern_warns_and_pads(self):
        program, _, warnings = _parse('@pattern k "x.x"')
        assert [w.msg for w in warnings] == ['Pattern "k" has 3 chars (expected 16)']
        assert program.patterns["k"].steps == [1, 0, 1] + [0] * 13

    def test_empty_pattern_no_parser_warning(self):
        program, _, warnings = _parse('@pattern k ""')
        assert warnings == []
        assert program.patterns["k"].steps == [0] * 16

    def test_pattern_missing_name(self):
        program, errors, _ = _parse('@pattern "x..."')
        assert errors[0].msg == "Expected pattern name"
        assert "unnamed" in program.patterns

    def test_last_pattern_definition_wins(self):
        program, _, _ = _parse('@pattern k "x..............."\n@pattern k "X..............."')
        assert program.patterns["k"].steps[0] == 127
        assert len(program.body) == 2

    def test_scene_assignments(self):
        node, errors, _ = _only("@scene verse\nkick: k\nsnare: s")
        assert isinstance(node, ast.Scene)
        assert node.name == "verse"
        assert node.assignments == [("kick", "k"), ("snare", "s")]
        assert errors == []

    def test_scene_indexed(self):
        program, _, _ = _parse("@scene a\nkick: k")
        assert program.scenes["a"].assignments == [("kick", "k")]

    def test_scene_stops_at_next_directive(self):
        program, _, _ = _parse("@scene a\nkick: k\n@stop")
        assert [type(n) for n in program.body] == [ast.Scene, ast.Stop]

    def test_voice_assign_shorthand(self):
        node, errors, _ = _only("kick: k")
        assert node == ast.VoiceAssign(voice="kick", pattern="k", line=1)
        assert errors == []

    def test_identifier_without_colon_is_dropped(self):
        program, errors, _ = _parse("hello\n@stop")
        assert errors == []
        assert [type(n) for n in program.body] == [ast.Stop]

    def test_stray_tokens_are_dropped(self):
        program, errors, _ = _parse('42 "text" :\n@stop')
        assert errors == []
        assert [type(n) for n in program.body] == [ast.Stop]


class TestPlayAndParam:
    """@play scene/loop forms and @param target splitting."""

    def test_play_bare(self):
        node, _, _ = _only("@play")
        assert node.scene is None
        assert node.loop is False

    def test_play_scene(self):
        node, _, _ = _only("@play verse")
        assert node.scene == "verse"
        assert node.loop is False

    def test_play_scene_loop(self):
        node, _, _ = _only("@play verse loop")
        assert node.scene == "verse"
        assert node.loop is True

    def test_play_loop_alone_names_a_scene(self):
        node, _, _ = _only("@play loop")
        assert node.scene == "loop"
        assert node.loop is False

    def test_play_loop_loop(self):
        node, _, _ = _only("@play loop loop")
        assert (node.scene, node.loop) == ("loop", True)

    def test_bare_play_takes_next_identifier_as_scene(self):
        program, errors, _ = _parse('@pattern k "x..............."\n@play\nkick: k')
        assert errors == []
        assert [type(node).__name__ for node in program.body] == ["Pattern", "Play"]
        assert program.body[1].scene == "kick"
        assert program.body[1].loop is False

    def test_param_dotted(self):
        node, errors, _ = _only("@param kick.decay 5")
        assert errors == []
        assert (node.voice, node.param, node.value) == ("kick", "decay", 5)

    def test_param_default_gate(self):
        node, _, _ = _only("@param bass 7")
        assert (node.voice, node.param, node.value) == ("bass", "gate", 7)

    def test_param_missing_target(self):
        node, errors, _ = _only("@param 7")
        assert node.voice is None
        assert [e.msg for e in errors] == ["Expected param target"]


# =========================================================================
# Pattern grammar
# =========================================================================


class TestPatternGrammar:
    """decode_pattern() and encode_triggers()."""

    def test_triggers_rests_accents(self):
        assert decode_pattern("x-X.x-X.x-X.x-X.") == [1, 0, 127, 0] * 4

    def test_notes_consume_characters(self):
        steps = decode_pattern("C4..E4..G4......")
        assert steps[:6] == [60, 0, 0, 64, 0, 0]
        assert steps[6] == 67
        assert len(steps) == 16

    def test_sharps_flats_and_case(self):
        assert decode_pattern("c#4")[0] == 61
        assert decode_pattern("Eb3")[0] == 51

    def test_unmatched_note_run_is_rest(self):
        assert decode_pattern("C44.")[:2] == [0, 4]

    def test_bare_digit(self):
        assert decode_pattern("7")[0] == 7

    def test_other_characters_are_rests(self):
        assert decode_pattern("zzzz") == [0] * 16

    @pytest.mark.parametrize("text", ["", "x", "x" * 40])
    def test_always_sixteen_steps(self, text):
        assert len(decode_pattern(text)) == 16

    def test_trigger_round_trip(self):
        text = "x..X.x..X..xx.X."
        assert encode_triggers(decode_pattern(text)) == text

    def test_encode_refuses_notes(self):
        assert encode_triggers(decode_pattern("C4..............")) is None

    def test_note_to_midi(self):
        assert note_to_midi("A", 4) == 69
        assert note_to_midi("bb", 2) == 46
