"""AST dataclasses for parsed sequencer programs.

WHY: Every consumer (linter, IR generator, report) needs to know exactly
which kinds of statement exist and what each one carries. One dataclass
per statement kind makes the set closed and explicit; consumers dispatch
on the class, and a new directive means a new class here plus one branch
in each consumer.

HOW: Program owns the ordered statement list plus two name indices
(patterns and scenes) that the parser fills in source order as nodes are
produced. Nodes never point at each other; a Scene refers to patterns by
name only.

RULES:
- Pattern.steps is always exactly 16 ints in 0-127
- Pattern.data keeps the raw source string (any length)
- Program.patterns / Program.scenes: last definition with a name wins
- Tempo/Swing values stored by the parser are already clamped
- line is the 1-based source line of the statement's first token
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, List, Optional, Tuple, Union


@dataclass
class Comment:
    value: str
    line: int = 0


@dataclass
class Title:
    value: str
    line: int = 0


@dataclass
class Tempo:
    value: int
    line: int = 0


@dataclass
class Swing:
    value: int
    line: int = 0


@dataclass
class Pattern:
    """A named 16-step sequence.

    data is the string as written; steps is the decoded value list.
    """

    name: str
    data: str
    steps: List[int]
    line: int = 0


@dataclass
class VoiceAssign:
    voice: str
    pattern: Optional[str]
    line: int = 0


@dataclass
class Scene:
    """A named bundle of (voice, pattern-name) assignments."""

    name: str
    assignments: List[Tuple[str, Optional[str]]] = field(default_factory=list)
    line: int = 0


@dataclass
class Play:
    scene: Optional[str] = None
    loop: bool = False
    line: int = 0


@dataclass
class Stop:
    line: int = 0


@dataclass
class Param:
    voice: Optional[str]
    param: Optional[str]
    value: int = 0
    line: int = 0


@dataclass
class Poke:
    addr: int
    value: int
    line: int = 0


@dataclass
class Loop:
    count: int = 1
    line: int = 0


@dataclass
class Wait:
    steps: int = 16
    line: int = 0


Node = Union[
    Comment, Title, Tempo, Swing, Pattern, Scene, VoiceAssign,
    Play, Stop, Param, Poke, Loop, Wait,
]


@dataclass
class Program:
    """Root of the AST: ordered statements plus name indices."""

    body: List[Node] = field(default_factory=list)
    patterns: Dict[str, Pattern] = field(default_factory=dict)
    scenes: Dict[str, Scene] = field(default_factory=dict)

    def append(self, node: Node) -> None:
        """Add a statement, indexing patterns and scenes by name."""
        self.body.append(node)
        if isinstance(node, Pattern):
            self.patterns[node.name] = node
        elif isinstance(node, Scene):
            self.scenes[node.name] = node


def node_kind(node: Node) -> str:
    """Upper-case kind name of a node, e.g. "VOICE_ASSIGN"."""
    return _KIND_NAMES[type(node)]


_KIND_NAMES = {
    Comment: "COMMENT",
    Title: "TITLE",
    Tempo: "TEMPO",
    Swing: "SWING",
    Pattern: "PATTERN",
    Scene: "SCENE",
    VoiceAssign: "VOICE_ASSIGN",
    Play: "PLAY",
    Stop: "STOP",
    Param: "PARAM",
    Poke: "POKE",
    Loop: "LOOP",
    Wait: "WAIT",
}
