"""Abstract base backend, its options, and output container.

WHY: Every target consumes the same IR but produces different text.
This base class enforces a consistent interface so the compiler entry
point, the CLI and the HTTP server can work with any backend generically.

HOW: BaseBackend is an ABC with three requirements: ``name``,
``suffix`` and ``emit()``. BackendOptions carries the two labels the
compiler passes to every backend. BackendOutput bundles the emitted
text with the metadata a caller needs to save or serve it.

RULES:
- Subclasses MUST implement ``name``, ``suffix`` and ``emit()``
- ``emit()`` is a pure function of the IR and options; it never mutates
  the IR list or its instructions
- ``suffix`` starts with a dot, e.g. ``".asm"``
- Addresses outside [0x1000, 0x1600) are filtered by the backends that
  only model the audio region (assembly, Intel HEX), not by the IR
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import List

from tenten_compiler.config import DEFAULT_TEMPO, DEFAULT_TITLE
from tenten_compiler.core.ir import Instruction


@dataclass(frozen=True)
class BackendOptions:
    """Labels passed to every backend.

    Attributes:
        title: Program title printed in the output header.
        tempo: Default tempo label; not re-validated.
    """

    title: str = DEFAULT_TITLE
    tempo: int = DEFAULT_TEMPO


@dataclass
class BackendOutput:
    """One emitted artifact.

    Attributes:
        content: The artifact text.
        suffix: File suffix for the target, e.g. ``".wat"``.
        media_type: MIME type for serving the content.
    """

    content: str
    suffix: str
    media_type: str


class BaseBackend(ABC):
    """Abstract base for all code emitters.

    To add a new target:
    1. Create a new module in backends/
    2. Subclass BaseBackend
    3. Implement name, suffix and emit()
    4. Register it in BACKENDS in backends/__init__.py
    """

    media_type = "text/plain"

    @property
    @abstractmethod
    def name(self) -> str:
        """Human-readable target name, e.g. 'Intel HEX'."""

    @property
    @abstractmethod
    def suffix(self) -> str:
        """File suffix for this target, including the dot."""

    @abstractmethod
    def emit(self, ir: List[Instruction], options: BackendOptions) -> str:
        """Translate the IR into the target artifact.

        Args:
            ir: The generated instruction list, in program order.
            options: Title and tempo labels.

        Returns:
            The complete artifact text.
        """

    def render(self, ir: List[Instruction], options: BackendOptions) -> BackendOutput:
        """Emit and wrap the result with this backend's metadata."""
        return BackendOutput(
            content=self.emit(ir, options),
            suffix=self.suffix,
            media_type=self.media_type,
        )
