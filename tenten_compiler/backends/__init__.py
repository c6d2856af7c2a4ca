"""Backend registry: one entry per output target.

WHY: The compiler, the CLI and the HTTP server all need a single lookup
to find the right backend by target name. A central dict makes adding a
target trivial: create the backend class, import it here, add one line.

HOW: BACKENDS maps canonical target keys to backend *classes* (not
instances). TARGET_ALIASES maps the short spellings (file suffixes,
mostly) onto those keys. resolve_target() applies both.

RULES:
- Canonical keys: mtmc16, wasm, c, rust, hex
- Aliases: asm -> mtmc16, wat -> wasm, rs -> rust
- Lookup is case-sensitive
- Every backend listed here must be importable without side effects
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Dict, List

from tenten_compiler.backends.c_source import CBackend
from tenten_compiler.backends.intel_hex import IntelHexBackend
from tenten_compiler.backends.mtmc16 import MTMC16Backend
from tenten_compiler.backends.rust_source import RustBackend
from tenten_compiler.backends.wat import WATBackend

if TYPE_CHECKING:
    from tenten_compiler.backends.base import BaseBackend

BACKENDS: Dict[str, type[BaseBackend]] = {
    "mtmc16": MTMC16Backend,
    "wasm": WATBackend,
    "c": CBackend,
    "rust": RustBackend,
    "hex": IntelHexBackend,
}

TARGET_ALIASES: Dict[str, str] = {
    "asm": "mtmc16",
    "wat": "wasm",
    "rs": "rust",
}


def resolve_target(target: str) -> str:
    """Map a target name or alias to its canonical BACKENDS key.

    Raises:
        ValueError: If the name is neither a key nor an alias.
    """
    key = TARGET_ALIASES.get(target, target)
    if key not in BACKENDS:
        raise ValueError("Unknown target: {}".format(target))
    return key


def aliases_for(key: str) -> List[str]:
    """Alternative names accepted for a canonical target key."""
    return sorted(alias for alias, canonical in TARGET_ALIASES.items() if canonical == key)
