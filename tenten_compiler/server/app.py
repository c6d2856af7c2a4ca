"""FastAPI application exposing the compiler over HTTP.

WHY: Browser editors and build services want to compile without
installing Python tooling locally. FastAPI provides request validation,
automatic OpenAPI documentation and a test client for free.

HOW: POST /compile runs the full pipeline synchronously (compilation is
fast and CPU-bound) and returns the compile report. Read-only endpoints
list targets and preset packs and render a pack pattern as source.

RULES:
- Compile failures are data: POST /compile answers 200 with success=false
- Unknown pack or pattern names answer 404
- The compile response is schema-validated by build_report() before it
  is returned
"""

from __future__ import annotations

import logging
from typing import Dict, List

from fastapi import FastAPI, HTTPException

from tenten_compiler import __version__, packs
from tenten_compiler.backends import BACKENDS, aliases_for
from tenten_compiler.compiler import CompileOptions, compile
from tenten_compiler.config import API_HOST, API_PORT
from tenten_compiler.report import build_report
from tenten_compiler.server.models import (
    CompileReport,
    CompileRequest,
    ErrorResponse,
    HealthResponse,
    PackInfo,
    PackSourceResponse,
    TargetInfo,
)

logger = logging.getLogger(__name__)

app = FastAPI(
    title="$1010 Sequencer Compiler API",
    description=(
        "Compile sequencer programs to MTMC-16 assembly, WebAssembly text, "
        "C, Rust or Intel HEX, and browse the preset instrument packs."
    ),
    version=__version__,
    docs_url="/docs",
    redoc_url="/redoc",
)


# ---------------------------------------------------------------------------
# Endpoints: Compile
# ---------------------------------------------------------------------------


@app.post(
    "/compile",
    response_model=CompileReport,
    tags=["compile"],
    summary="Compile a sequencer program",
    description=(
        "Runs lexer, parser, linter, IR generator and the selected backend. "
        "Always answers 200; check 'success' and 'errors' for the outcome."
    ),
)
async def compile_source(request: CompileRequest) -> CompileReport:
    options = CompileOptions.from_mapping(request.model_dump(exclude_none=True))
    result = compile(request.source, options)
    if not result.success:
        logger.info(
            "Compile request failed: %s",
            "; ".join(str(e) for e in result.errors),
        )
    return CompileReport(**build_report(result))


# ---------------------------------------------------------------------------
# Endpoints: Targets
# ---------------------------------------------------------------------------


@app.get(
    "/targets",
    response_model=List[TargetInfo],
    tags=["targets"],
    summary="List available output targets",
    description="Returns every backend with its aliases, MIME type and file suffix.",
)
async def list_targets() -> List[TargetInfo]:
    result = []
    for key, backend_cls in BACKENDS.items():
        backend = backend_cls()
        result.append(TargetInfo(
            key=key,
            aliases=aliases_for(key),
            name=backend.name,
            media_type=backend.media_type,
            suffix=backend.suffix,
        ))
    return result


# ---------------------------------------------------------------------------
# Endpoints: Packs
# ---------------------------------------------------------------------------


@app.get(
    "/packs",
    response_model=Dict[str, List[PackInfo]],
    tags=["packs"],
    summary="List preset packs by category",
)
async def list_packs() -> Dict[str, List[PackInfo]]:
    return {
        category: [PackInfo(**entry) for entry in entries]
        for category, entries in packs.list_packs().items()
    }


@app.get(
    "/packs/{pack_name}/{pattern_name}/source",
    response_model=PackSourceResponse,
    tags=["packs"],
    summary="Render a pack pattern as sequencer source",
    responses={
        404: {"model": ErrorResponse, "description": "Pack or pattern not found"},
    },
)
async def pack_source(pack_name: str, pattern_name: str) -> PackSourceResponse:
    try:
        source = packs.to_source(pack_name, pattern_name)
    except ValueError as exc:
        raise HTTPException(status_code=404, detail=str(exc))
    return PackSourceResponse(pack=pack_name, pattern=pattern_name, source=source)


# ---------------------------------------------------------------------------
# Endpoints: Health
# ---------------------------------------------------------------------------


@app.get(
    "/health",
    response_model=HealthResponse,
    tags=["health"],
    summary="Health check",
    description="Liveness check for load balancers and orchestrators.",
)
async def health_check() -> HealthResponse:
    return HealthResponse(status="ok", version=__version__)


def run_api():
    """Entry point for the tenten-api console script."""
    import uvicorn
    uvicorn.run(app, host=API_HOST, port=API_PORT)
