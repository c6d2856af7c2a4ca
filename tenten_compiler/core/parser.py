"""Recursive-descent parser: token list to Program AST.

WHY: Directives have small, fixed shapes ("@tempo N", "@pattern name
"str"", "@scene name voice: pattern ..."). A hand-written descent with
one method per directive keeps every shape readable in one place and
lets diagnostics accumulate instead of stopping at the first mistake.

HOW: Newline tokens are dropped up front; the grammar is token-driven,
not line-driven. The main loop parses one statement per iteration until
EOF. A failed expectation records an error at the offending token and
yields None for that operand, so the directive still produces a node
with a default value and parsing carries on.

RULES:
- COMMENT -> Comment node
- DIRECTIVE -> dispatch by name; unknown names are errors, no node
- IDENTIFIER ":" IDENTIFIER at statement level -> VoiceAssign; an
  identifier without a colon is dropped silently
- any other token at statement level is dropped silently
- @tempo clamps to 20-255 and @swing to 0-100; out-of-range input is a
  warning, never an error
- @pattern strings whose length is neither 0 nor 16 produce a warning
- @scene greedily consumes "voice: pattern" pairs while the next token is
  an identifier
"""

from __future__ import annotations

from typing import Callable, Dict, List, Optional, Tuple

from tenten_compiler.config import SWING_MAX, SWING_MIN, TEMPO_MAX, TEMPO_MIN
from tenten_compiler.core import ast
from tenten_compiler.core.diagnostics import Diagnostic
from tenten_compiler.core.lexer import Token, TokenType
from tenten_compiler.core.patterns import STEP_COUNT, decode_pattern


class Parser:
    """Parser over one token list. Create a fresh instance per parse."""

    def __init__(self, tokens: List[Token]) -> None:
        self.tokens = [t for t in tokens if t.type is not TokenType.NEWLINE]
        if not self.tokens or self.tokens[-1].type is not TokenType.EOF:
            last = self.tokens[-1] if self.tokens else None
            self.tokens.append(Token(
                type=TokenType.EOF,
                line=last.line if last else 1,
                col=last.col if last else 1,
            ))
        self.pos = 0
        self.errors: List[Diagnostic] = []
        self.warnings: List[Diagnostic] = []
        self.program = ast.Program()
        self._directives: Dict[str, Callable[[Token], Optional[ast.Node]]] = {
            "title": self._parse_title,
            "tempo": self._parse_tempo,
            "swing": self._parse_swing,
            "pattern": self._parse_pattern,
            "scene": self._parse_scene,
            "play": self._parse_play,
            "stop": self._parse_stop,
            "param": self._parse_param,
            "poke": self._parse_poke,
            "loop": self._parse_loop,
            "wait": self._parse_wait,
        }

    # ------------------------------------------------------------------
    # Cursor helpers
    # ------------------------------------------------------------------

    def _peek(self, offset: int = 0) -> Token:
        index = min(self.pos + offset, len(self.tokens) - 1)
        return self.tokens[index]

    def _advance(self) -> Token:
        token = self._peek()
        if token.type is not TokenType.EOF:
            self.pos += 1
        return token

    def _expect(self, token_type: TokenType, msg: str) -> Optional[Token]:
        """Consume a token of the given type, or record an error and return None."""
        token = self._peek()
        if token.type is not token_type:
            self.errors.append(Diagnostic(msg=msg, line=token.line, col=token.col))
            return None
        return self._advance()

    def _warn(self, line: int, msg: str) -> None:
        self.warnings.append(Diagnostic(msg=msg, line=line))

    # ------------------------------------------------------------------
    # Statements
    # ------------------------------------------------------------------

    def parse(self) -> Tuple[ast.Program, List[Diagnostic], List[Diagnostic]]:
        while self._peek().type is not TokenType.EOF:
            node = self._parse_statement()
            if node is not None:
                self.program.append(node)
        return self.program, self.errors, self.warnings

    def _parse_statement(self) -> Optional[ast.Node]:
        token = self._peek()

        if token.type is TokenType.COMMENT:
            self._advance()
            return ast.Comment(value=str(token.value), line=token.line)

        if token.type is TokenType.DIRECTIVE:
            return self._parse_directive()

        if token.type is TokenType.IDENTIFIER:
            return self._parse_voice_assign()

        self._advance()
        return None

    def _parse_directive(self) -> Optional[ast.Node]:
        directive = self._advance()
        handler = self._directives.get(str(directive.value))
        if handler is None:
            self.errors.append(Diagnostic(
                msg="Unknown directive: @{}".format(directive.value),
                line=directive.line,
                col=directive.col,
            ))
            return None
        return handler(directive)

    def _parse_title(self, directive: Token) -> ast.Title:
        string = self._expect(TokenType.STRING, "Expected string after @title")
        return ast.Title(
            value=str(string.value) if string else "Untitled",
            line=directive.line,
        )

    def _parse_tempo(self, directive: Token) -> ast.Tempo:
        number = self._expect(TokenType.NUMBER, "Expected number after @tempo")
        value = int(number.value) if number else 120
        if value < TEMPO_MIN or value > TEMPO_MAX:
            self._warn(directive.line, "Tempo {} out of range ({}-{})".format(
                value, TEMPO_MIN, TEMPO_MAX,
            ))
        return ast.Tempo(value=max(TEMPO_MIN, min(TEMPO_MAX, value)), line=directive.line)

    def _parse_swing(self, directive: Token) -> ast.Swing:
        number = self._expect(TokenType.NUMBER, "Expected number after @swing")
        value = int(number.value) if number else 0
        if value < SWING_MIN or value > SWING_MAX:
            self._warn(directive.line, "Swing {} out of range ({}-{})".format(
                value, SWING_MIN, SWING_MAX,
            ))
        return ast.Swing(value=max(SWING_MIN, min(SWING_MAX, value)), line=directive.line)

    def _parse_pattern(self, directive: Token) -> ast.Pattern:
        name_token = self._expect(TokenType.IDENTIFIER, "Expected pattern name")
        data_token = self._expect(TokenType.STRING, "Expected pattern string")

        name = str(name_token.value) if name_token else "unnamed"
        data = str(data_token.value) if data_token else ""

        if len(data) not in (0, STEP_COUNT):
            self._warn(directive.line, 'Pattern "{}" has {} chars (expected {})'.format(
                name, len(data), STEP_COUNT,
            ))

        return ast.Pattern(name=name, data=data, steps=decode_pattern(data), line=directive.line)

    def _parse_scene(self, directive: Token) -> ast.Scene:
        name_token = self._expect(TokenType.IDENTIFIER, "Expected scene name")
        scene = ast.Scene(
            name=str(name_token.value) if name_token else "a",
            line=directive.line,
        )

        while self._peek().type is TokenType.IDENTIFIER:
            voice = self._advance()
            if self._peek().type is TokenType.COLON:
                self._advance()
                pattern = self._expect(TokenType.IDENTIFIER, "Expected pattern name")
                scene.assignments.append(
                    (str(voice.value), str(pattern.value) if pattern else None)
                )

        return scene

    def _parse_play(self, directive: Token) -> ast.Play:
        play = ast.Play(line=directive.line)

        # The first identifier is always the scene, even one spelled "loop"
        if self._peek().type is TokenType.IDENTIFIER:
            play.scene = str(self._advance().value)

        if self._peek().type is TokenType.IDENTIFIER and self._peek().value == "loop":
            self._advance()
            play.loop = True

        return play

    def _parse_stop(self, directive: Token) -> ast.Stop:
        return ast.Stop(line=directive.line)

    def _parse_param(self, directive: Token) -> ast.Param:
        target = self._expect(TokenType.IDENTIFIER, "Expected param target")

        voice: Optional[str] = None
        param: Optional[str] = None
        if target is not None:
            parts = str(target.value).split(".")
            voice = parts[0]
            param = parts[1] if len(parts) > 1 and parts[1] else "gate"
            # "kick.decay" lexes as two identifiers; the dot is dropped
            if self._peek().type is TokenType.IDENTIFIER and self._peek(1).type is not TokenType.COLON:
                param = str(self._advance().value)

        value = self._expect(TokenType.NUMBER, "Expected param value")
        return ast.Param(
            voice=voice,
            param=param,
            value=int(value.value) if value else 0,
            line=directive.line,
        )

    def _parse_poke(self, directive: Token) -> ast.Poke:
        addr = self._expect(TokenType.NUMBER, "Expected address")
        value = self._expect(TokenType.NUMBER, "Expected value")
        return ast.Poke(
            addr=int(addr.value) if addr else 0,
            value=int(value.value) if value else 0,
            line=directive.line,
        )

    def _parse_loop(self, directive: Token) -> ast.Loop:
        count = self._expect(TokenType.NUMBER, "Expected loop count")
        return ast.Loop(count=int(count.value) if count else 1, line=directive.line)

    def _parse_wait(self, directive: Token) -> ast.Wait:
        steps = self._expect(TokenType.NUMBER, "Expected step count")
        return ast.Wait(steps=int(steps.value) if steps else 16, line=directive.line)

    def _parse_voice_assign(self) -> Optional[ast.VoiceAssign]:
        voice = self._advance()
        if self._peek().type is not TokenType.COLON:
            return None
        self._advance()
        pattern = self._expect(TokenType.IDENTIFIER, "Expected pattern name")
        return ast.VoiceAssign(
            voice=str(voice.value),
            pattern=str(pattern.value) if pattern else None,
            line=voice.line,
        )


def parse(tokens: List[Token]) -> Tuple[ast.Program, List[Diagnostic], List[Diagnostic]]:
    """Parse a token list. Returns (program, errors, warnings)."""
    return Parser(tokens).parse()
