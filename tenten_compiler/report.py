"""JSON compile report, validated against a bundled schema.

WHY: Editors, CI jobs and the HTTP API want the outcome of a compilation
as data: did it work, what was emitted, what went wrong and where. A
fixed, schema-checked shape means every consumer can rely on the same
fields without re-reading the compiler.

HOW: build_report() flattens a CompileResult into plain JSON types
(diagnostics as dicts, IR as {op, args} pairs, AST reduced to its
pattern and scene names). validate_report() checks a document against
compile_report.schema.json with jsonschema.

RULES:
- build_report() always validates before returning; raise on failure
- ir is null when IR generation never ran
- patterns/scenes are empty when parsing never ran
- The schema file lives next to this module and is loaded once
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Dict, Optional

import jsonschema

from tenten_compiler.compiler import CompileResult

_SCHEMA_PATH = Path(__file__).resolve().parent / "compile_report.schema.json"

_CACHED_SCHEMA: Optional[Dict[str, Any]] = None


def _get_schema() -> Dict[str, Any]:
    global _CACHED_SCHEMA
    if _CACHED_SCHEMA is None:
        with open(_SCHEMA_PATH, encoding="utf-8") as f:
            _CACHED_SCHEMA = json.load(f)
    return _CACHED_SCHEMA


def validate_report(document: Dict[str, Any]) -> None:
    """Validate a report document.

    Raises:
        jsonschema.ValidationError: If the document does not match the schema.
    """
    jsonschema.validate(instance=document, schema=_get_schema())


def build_report(result: CompileResult) -> Dict[str, Any]:
    """Convert a CompileResult into a schema-valid JSON-ready dict."""
    program = result.ast
    document: Dict[str, Any] = {
        "success": result.success,
        "target": result.target,
        "output": result.output,
        "errors": [d.to_dict() for d in result.errors],
        "warnings": [d.to_dict() for d in result.warnings],
        "ir": [instr.to_dict() for instr in result.ir] if result.ir is not None else None,
        "patterns": list(program.patterns) if program else [],
        "scenes": list(program.scenes) if program else [],
    }
    validate_report(document)
    return document


def dumps_report(result: CompileResult) -> str:
    """Report as pretty-printed JSON text."""
    return json.dumps(build_report(result), indent=2, ensure_ascii=False)
