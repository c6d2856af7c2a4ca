"""Compiler entry point: source text to target artifact.

WHY: Callers (CLI, HTTP server, tests, the pack bridge) want one call
that runs the whole pipeline and hands back everything it learned:
the artifact when it worked, every diagnostic either way, and the AST
and IR for inspection.

HOW: Five phases run strictly in order: tokenize, parse, lint, generate,
emit. Each phase's diagnostics are tagged with the phase name and
appended to the result. The pipeline stops after the first phase that
reports a fatal error and returns what it has so far.

RULES:
- Lexer errors stop before parsing (ast stays None)
- Parser errors stop before linting (ast is set)
- Linter errors stop before IR generation (ir stays None)
- An unknown target stops before emission (ir is set, output None)
- Warnings never stop the pipeline
- Every call builds fresh phase objects; no state is shared between calls
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, List, Mapping, Optional, Union

from tenten_compiler.config import (
    DEFAULT_CLEAR_RESTS,
    DEFAULT_TARGET,
    DEFAULT_TEMPO,
    DEFAULT_TITLE,
)
from tenten_compiler.backends import BACKENDS, TARGET_ALIASES
from tenten_compiler.backends.base import BackendOptions
from tenten_compiler.core.ast import Program
from tenten_compiler.core.diagnostics import Diagnostic, Phase
from tenten_compiler.core.generator import generate
from tenten_compiler.core.ir import Instruction
from tenten_compiler.core.lexer import tokenize
from tenten_compiler.core.linter import lint
from tenten_compiler.core.parser import parse

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CompileOptions:
    """Options for one compilation.

    Attributes:
        target: Target name or alias (mtmc16/asm, wasm/wat, c, rust/rs, hex).
        title: Title label for the output header.
        tempo: Default tempo label passed to the backend; not validated.
        clear_rests: Also write 0 for rest steps when expanding patterns.
    """

    target: str = DEFAULT_TARGET
    title: str = DEFAULT_TITLE
    tempo: int = DEFAULT_TEMPO
    clear_rests: bool = DEFAULT_CLEAR_RESTS

    @classmethod
    def from_mapping(cls, values: Mapping[str, Any]) -> CompileOptions:
        """Build options from a dict, treating missing or empty values as defaults."""
        return cls(
            target=values.get("target") or DEFAULT_TARGET,
            title=values.get("title") or DEFAULT_TITLE,
            tempo=values.get("tempo") or DEFAULT_TEMPO,
            clear_rests=bool(values.get("clear_rests", DEFAULT_CLEAR_RESTS)),
        )


@dataclass
class CompileResult:
    """Everything one compilation produced."""

    success: bool = False
    output: Optional[str] = None
    errors: List[Diagnostic] = field(default_factory=list)
    warnings: List[Diagnostic] = field(default_factory=list)
    ast: Optional[Program] = None
    ir: Optional[List[Instruction]] = None
    target: Optional[str] = None


def _tag(diagnostics: List[Diagnostic], phase: Phase) -> List[Diagnostic]:
    return [d.with_phase(phase) for d in diagnostics]


def compile(
    source: str,
    options: Union[CompileOptions, Mapping[str, Any], None] = None,
) -> CompileResult:
    """Compile sequencer source text to one target artifact.

    Args:
        source: The program text.
        options: CompileOptions, a dict of the same fields, or None for
                 the configured defaults.

    Returns:
        A CompileResult. ``success`` is True only when every phase ran
        and the backend produced output.
    """
    if options is None:
        options = CompileOptions()
    elif not isinstance(options, CompileOptions):
        options = CompileOptions.from_mapping(options)

    result = CompileResult()

    tokens, lex_errors = tokenize(source)
    result.errors.extend(_tag(lex_errors, Phase.LEXER))
    logger.debug("Lexed %d tokens, %d errors", len(tokens), len(lex_errors))
    if lex_errors:
        return result

    program, parse_errors, parse_warnings = parse(tokens)
    result.ast = program
    result.errors.extend(_tag(parse_errors, Phase.PARSER))
    result.warnings.extend(_tag(parse_warnings, Phase.PARSER))
    logger.debug(
        "Parsed %d statements, %d patterns, %d scenes",
        len(program.body), len(program.patterns), len(program.scenes),
    )
    if parse_errors:
        return result

    lint_errors, lint_warnings = lint(program)
    result.errors.extend(_tag(lint_errors, Phase.LINTER))
    result.warnings.extend(_tag(lint_warnings, Phase.LINTER))
    if lint_errors:
        return result

    ir = generate(program, clear_rests=options.clear_rests)
    result.ir = ir
    logger.debug("Generated %d IR instructions", len(ir))

    key = TARGET_ALIASES.get(options.target, options.target)
    backend_cls = BACKENDS.get(key)
    if backend_cls is None:
        result.errors.append(Diagnostic(
            msg="Unknown target: {}".format(options.target),
            phase=Phase.BACKEND,
        ))
        return result

    backend = backend_cls()
    result.target = key
    result.output = backend.emit(ir, BackendOptions(title=options.title, tempo=options.tempo))
    result.success = True
    logger.info(
        "Compiled to %s: %d instructions, %d warnings",
        backend.name, len(ir), len(result.warnings),
    )
    return result
