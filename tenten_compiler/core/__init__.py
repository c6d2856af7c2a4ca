"""Compiler front end and intermediate representation.

WHY: The core package holds the target-independent heart of the
compiler: lexing, parsing, linting and IR generation. Every backend
consumes what this package produces and nothing here knows about any
output format.

HOW: lexer.py tokenizes, parser.py builds the AST defined in ast.py
(decoding pattern strings via patterns.py), linter.py checks meaning,
generator.py lowers the AST to the instruction list defined in ir.py.
diagnostics.py holds the error/warning record every phase returns.

RULES:
- Each phase is a pure function of its input; no phase does I/O
- Phases report problems as Diagnostic data, never by raising
- The IR is the stable contract between front end and backends
"""
