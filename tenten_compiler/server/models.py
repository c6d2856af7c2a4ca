"""Pydantic request/response models for the HTTP API.

WHY: The FastAPI endpoints need typed schemas for request validation,
response serialization, and automatic OpenAPI documentation. The compile
response mirrors the JSON compile report so the HTTP surface and the
CLI's --report file have the same shape.

HOW: One request model for POST /compile, one response model per other
endpoint, and small nested models for diagnostics and IR instructions.
All fields carry Field(description=...) for the /docs UI.

RULES:
- All models use Field(description=...) for OpenAPI documentation
- CompileReport fields match compile_report.schema.json exactly
- Optional request fields fall back to the configured compile defaults
"""

from __future__ import annotations

from typing import List, Optional, Union

from pydantic import BaseModel, Field

# ---------------------------------------------------------------------------
# Request models
# ---------------------------------------------------------------------------


class CompileRequest(BaseModel):
    """Source text plus compile options."""

    source: str = Field(description="Sequencer program text.")
    target: Optional[str] = Field(
        default=None,
        description="Target name or alias: mtmc16/asm, wasm/wat, c, rust/rs, hex. "
                    "Defaults to the server's configured target.",
    )
    title: Optional[str] = Field(
        default=None,
        description="Title label for the output header.",
    )
    tempo: Optional[int] = Field(
        default=None,
        description="Tempo label for the output header.",
    )
    clear_rests: Optional[bool] = Field(
        default=None,
        description="Also write 0 for rest steps when expanding scenes.",
    )

    model_config = {"json_schema_extra": {
        "examples": [
            {
                "source": '@tempo 128\n@pattern k "x...x...x...x..."\n'
                          "@scene a\nkick: k\n@play a loop\n",
                "target": "c",
            }
        ]
    }}


# ---------------------------------------------------------------------------
# Response models
# ---------------------------------------------------------------------------


class DiagnosticModel(BaseModel):
    """One compiler error or warning."""

    line: Optional[int] = Field(default=None, description="1-based source line, if known.")
    col: Optional[int] = Field(default=None, description="1-based source column, if known.")
    msg: str = Field(description="Human-readable message.")
    phase: str = Field(description="Phase that reported it: lexer, parser, linter or backend.")


class InstructionModel(BaseModel):
    """One IR instruction."""

    op: str = Field(description="Opcode name, e.g. 'WRITE'.")
    args: List[Union[int, str]] = Field(description="Opcode arguments.")


class CompileReport(BaseModel):
    """Outcome of one compilation.

    RULES:
    - output is only set when success is true
    - ir is null when compilation stopped before IR generation
    """

    success: bool = Field(description="True when every phase ran and output was produced.")
    target: Optional[str] = Field(default=None, description="Canonical target key used.")
    output: Optional[str] = Field(default=None, description="The emitted artifact text.")
    errors: List[DiagnosticModel] = Field(description="Fatal diagnostics.")
    warnings: List[DiagnosticModel] = Field(description="Non-fatal diagnostics.")
    ir: Optional[List[InstructionModel]] = Field(default=None, description="Generated IR.")
    patterns: List[str] = Field(description="Pattern names defined by the program.")
    scenes: List[str] = Field(description="Scene names defined by the program.")


class TargetInfo(BaseModel):
    """Description of an available output target."""

    key: str = Field(description="Canonical target key used in requests.")
    aliases: List[str] = Field(description="Alternative names accepted for this target.")
    name: str = Field(description="Human-readable target name.")
    media_type: str = Field(description="MIME type of the emitted artifact.")
    suffix: str = Field(description="File suffix for the artifact (e.g. '.wat').")


class PackInfo(BaseModel):
    """Catalog entry for one preset pack."""

    name: str = Field(description="Pack key, e.g. 'TR-808'.")
    year: int = Field(description="Release year of the original machine or genre.")
    description: str = Field(description="One-line description.")


class PackSourceResponse(BaseModel):
    """Sequencer source generated from a pack pattern."""

    pack: str = Field(description="Pack key.")
    pattern: str = Field(description="Pattern name within the pack.")
    source: str = Field(description="Compilable sequencer program text.")


class ErrorResponse(BaseModel):
    """Standard error response body."""

    detail: str = Field(description="Human-readable error description.")


class HealthResponse(BaseModel):
    """Health check response."""

    status: str = Field(description="Service health status.", json_schema_extra={"example": "ok"})
    version: str = Field(description="API version string.", json_schema_extra={"example": "0.1.0"})
