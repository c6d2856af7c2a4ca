"""Command-line interface for the sequencer compiler.

WHY: Most programs are written in an editor and compiled from a shell or
a Makefile. The CLI wraps compile() so that works with files, pipes and
redirects, and so build scripts can tell success from failure by exit
status alone.

HOW: argparse collects the source path (or "-" for stdin) and the
compile options. The compiled artifact goes to stdout or --output;
diagnostics and status go to stderr as "phase:line:col: message" lines.
--report writes the JSON compile report next to the artifact. --pack
compiles the source generated from a preset pack instead of a file.

RULES:
- Positional: source path, "-" reads stdin; omitted only with --pack or
  --list-targets
- --target accepts canonical names and aliases (asm, wat, rs)
- Exit 0 on success, 1 on any fatal diagnostic or I/O error
- Artifact on stdout, everything else on stderr
- Logging is configured only with --verbose
"""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path
from typing import List, Optional

from tenten_compiler import packs
from tenten_compiler.backends import BACKENDS, aliases_for
from tenten_compiler.compiler import CompileOptions, CompileResult, compile
from tenten_compiler.config import DEFAULT_CLEAR_RESTS, DEFAULT_TARGET, DEFAULT_TEMPO, DEFAULT_TITLE
from tenten_compiler.report import dumps_report


def _status(msg: str) -> None:
    """Print a status message to stderr so stdout stays pipeable."""
    print(msg, file=sys.stderr, flush=True)


def _read_source(path: str) -> str:
    if path == "-":
        return sys.stdin.read()
    return Path(path).read_text(encoding="utf-8")


def _pack_source(pack_name: str, pattern_name: Optional[str]) -> str:
    """Generated source for a pack pattern; defaults to the pack's first pattern."""
    pack = packs.get_pack(pack_name)
    if pattern_name is None:
        if not pack.patterns:
            raise ValueError("Pack has no patterns: {}".format(pack_name))
        pattern_name = next(iter(pack.patterns))
    return packs.to_source(pack_name, pattern_name)


def _print_targets() -> None:
    for key, backend_cls in BACKENDS.items():
        backend = backend_cls()
        aliases = aliases_for(key)
        print("{:<8} {:<20} {:<5} {}".format(
            key,
            backend.name,
            backend.suffix,
            "(alias: {})".format(", ".join(aliases)) if aliases else "",
        ).rstrip())


def _print_diagnostics(result: CompileResult) -> None:
    for warning in result.warnings:
        _status("warning: {}".format(warning))
    for error in result.errors:
        _status("error: {}".format(error))


def build_parser() -> argparse.ArgumentParser:
    """Build the argparse parser for the CLI.

    Kept separate from main() so tests can inspect the parser without
    compiling anything.
    """
    parser = argparse.ArgumentParser(
        prog="tenten-compile",
        description="Compile sequencer programs to MTMC-16 assembly, WebAssembly "
                    "text, C, Rust or Intel HEX.",
    )

    parser.add_argument(
        "source",
        nargs="?",
        default=None,
        help="Source file to compile, or '-' to read from stdin.",
    )

    parser.add_argument(
        "--target", "-t",
        default=DEFAULT_TARGET,
        help="Output target (default: %(default)s). "
             "Available: {}.".format(", ".join(BACKENDS.keys())),
    )

    parser.add_argument(
        "--title",
        default=DEFAULT_TITLE,
        help="Title label for the output header (default: %(default)s).",
    )

    parser.add_argument(
        "--tempo",
        type=int,
        default=DEFAULT_TEMPO,
        help="Tempo label for the output header (default: %(default)s).",
    )

    parser.add_argument(
        "--output", "-o",
        default=None,
        help="Write the artifact to this file instead of stdout.",
    )

    parser.add_argument(
        "--clear-rests",
        action="store_true",
        default=DEFAULT_CLEAR_RESTS,
        help="Also write 0 for rest steps when expanding scenes.",
    )

    parser.add_argument(
        "--report",
        default=None,
        help="Write a JSON compile report to this file.",
    )

    parser.add_argument(
        "--pack",
        default=None,
        help="Compile the source generated from a preset pack (e.g. TR-808).",
    )

    parser.add_argument(
        "--pattern",
        default=None,
        help="Pattern of --pack to use (default: the pack's first pattern).",
    )

    parser.add_argument(
        "--list-targets",
        action="store_true",
        help="List available targets and exit.",
    )

    parser.add_argument(
        "--verbose", "-v",
        action="store_true",
        help="Log each compiler phase to stderr.",
    )

    return parser


def main(argv: Optional[List[str]] = None) -> int:
    """Entry point for ``tenten-compile`` and ``python -m tenten_compiler``.

    Returns the process exit status.
    """
    parser = build_parser()
    args = parser.parse_args(argv)

    if args.list_targets:
        _print_targets()
        return 0

    if args.verbose:
        logging.basicConfig(
            level=logging.DEBUG,
            format="%(levelname)s %(name)s: %(message)s",
            stream=sys.stderr,
        )

    try:
        if args.pack:
            source = _pack_source(args.pack, args.pattern)
        elif args.source is None:
            parser.error("a source file (or --pack) is required")
        else:
            source = _read_source(args.source)
    except (OSError, ValueError) as e:
        print("Error: {}".format(e), file=sys.stderr)
        return 1

    options = CompileOptions(
        target=args.target,
        title=args.title,
        tempo=args.tempo,
        clear_rests=args.clear_rests,
    )
    result = compile(source, options)
    _print_diagnostics(result)

    try:
        if args.report:
            Path(args.report).write_text(dumps_report(result) + "\n", encoding="utf-8")
            _status("Report: {}".format(args.report))

        if not result.success:
            _status("Compilation failed ({} error(s))".format(len(result.errors)))
            return 1

        if args.output:
            Path(args.output).write_text(result.output, encoding="utf-8")
            _status("Saved: {}".format(args.output))
        else:
            sys.stdout.write(result.output)
    except OSError as e:
        print("Error: {}".format(e), file=sys.stderr)
        return 1

    return 0


if __name__ == "__main__":
    sys.exit(main())
