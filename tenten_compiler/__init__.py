"""Compiler for the $1010 step-sequencer language.

WHY: Sequencer programs describe sixteen-step patterns, scenes and
transport control in a few lines of directives. Hardware, browsers and
native hosts all want the same result as a different artifact: a list
of byte writes into the audio memory region.

HOW: Five-stage pipeline. The lexer and parser build an AST, the linter
checks references and ranges, the IR generator flattens everything to
WRITE instructions, and a pluggable backend renders the IR as MTMC-16
assembly, WebAssembly text, C, Rust or Intel HEX.

RULES:
- compile() never raises on bad source; problems come back as diagnostics
- All backends consume the same IR
- Adding a target = one new backend module, no core changes
"""

from tenten_compiler.compiler import CompileOptions, CompileResult, compile

__version__ = "0.1.0"

__all__ = ["CompileOptions", "CompileResult", "compile", "__version__"]
