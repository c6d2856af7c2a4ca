"""WebAssembly text-format backend.

WHY: A browser host runs the sequencer as a WebAssembly module that owns
the audio memory and exports accessors for it. This backend produces the
.wat source of that module with the program's initial memory baked into
its ``init`` export.

HOW: A fixed module template with one page of exported linear memory.
The ``init`` function body is one ``i32.store8`` per WRITE instruction
in IR order; the remaining exports (read, write, get_ctrl, get_tempo,
get_step, set_step, get_gate) are fixed.

RULES:
- Every WRITE is emitted, including addresses outside the audio region
- Addresses and values print in decimal
- get_gate computes 0x1000 + voice * 0x100 + step
- Output suffix: ".wat"
"""

from __future__ import annotations

from typing import List

from tenten_compiler.core.ir import Instruction, writes
from tenten_compiler.backends.base import BackendOptions, BaseBackend

_HEADER = """\
;; {title}
;; Generated by $1010 Compiler
;; Target: WebAssembly

(module
  ;; Memory: 64KB (1 page)
  (memory (export "memory") 1)

  ;; Audio MMIO region: 0x1000-0x15FF

  ;; Initialize audio memory
  (func (export "init")
"""

_ACCESSORS = """\
  )

  ;; Read byte from audio memory
  (func (export "read") (param $addr i32) (result i32)
    (i32.load8_u (local.get $addr))
  )

  ;; Write byte to audio memory
  (func (export "write") (param $addr i32) (param $val i32)
    (i32.store8 (local.get $addr) (local.get $val))
  )

  ;; Get sequencer control
  (func (export "get_ctrl") (result i32)
    (i32.load8_u (i32.const 0x1500))
  )

  ;; Get tempo
  (func (export "get_tempo") (result i32)
    (i32.load8_u (i32.const 0x1501))
  )

  ;; Get current step
  (func (export "get_step") (result i32)
    (i32.load8_u (i32.const 0x1502))
  )

  ;; Set current step
  (func (export "set_step") (param $step i32)
    (i32.store8 (i32.const 0x1502) (local.get $step))
  )

  ;; Get gate value for voice at step
  (func (export "get_gate") (param $voice i32) (param $step i32) (result i32)
    (i32.load8_u
      (i32.add
        (i32.add
          (i32.const 0x1000)
          (i32.mul (local.get $voice) (i32.const 0x100))
        )
        (local.get $step)
      )
    )
  )
)
"""


class WATBackend(BaseBackend):
    """Emits a WebAssembly text module."""

    @property
    def name(self) -> str:
        return "WebAssembly Text"

    @property
    def suffix(self) -> str:
        return ".wat"

    def emit(self, ir: List[Instruction], options: BackendOptions) -> str:
        parts = [_HEADER.format(title=options.title)]
        for instr in writes(ir):
            parts.append("    (i32.store8 (i32.const {}) (i32.const {}))\n".format(
                instr.address, instr.value,
            ))
        parts.append(_ACCESSORS)
        return "".join(parts)
