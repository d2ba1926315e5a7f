"""Backend interfaces consumed by the project executor."""

from __future__ import annotations

from kompile_core.backends.base import (
    CompletionEngine,
    JsIrBackend,
    JvmBackend,
    WasmBackend,
    WasmTarget,
)

__all__: list[str] = [
    "CompletionEngine",
    "JsIrBackend",
    "JvmBackend",
    "WasmBackend",
    "WasmTarget",
]
